from collections.abc import Sequence
import re

from temposaurus.schemas import TimesheetApproval, Totals


COLUMN_WIDTH = 12
HEADERS = ("From", "To", "Required", "Approved", "Overtime")
INCOMPLETE_MARKER = "incomplete"
DURATION_PATTERN = re.compile(r"(-)?(?:(\d+)h)?(?:(\d+)m)?(\d+)s", re.ASCII)


def format_duration(seconds: int) -> str:
    """Render whole seconds the way Go prints a time.Duration, e.g. 1h1m1s, -2h0m0s, 0s."""
    sign = "-" if seconds < 0 else ""
    remaining = abs(seconds)
    hours, remaining = divmod(remaining, 3600)
    minutes, secs = divmod(remaining, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


def parse_duration(text: str) -> int:
    """Inverse of format_duration: "1h1m1s" -> 3661, "-2h0m0s" -> -7200."""
    match = DURATION_PATTERN.fullmatch(text.strip())
    if match is None:
        raise ValueError(f"not a duration: {text!r}")
    sign, hours, minutes, secs = match.groups()
    seconds = int(hours or 0) * 3600 + int(minutes or 0) * 60 + int(secs)
    return -seconds if sign else seconds


def aggregate(approvals: Sequence[TimesheetApproval]) -> Totals:
    return Totals(
        total_required_seconds=sum(approval.required_seconds for approval in approvals),
        total_time_spent_seconds=sum(approval.time_spent_seconds for approval in approvals),
    )


def _line(cells: Sequence[str]) -> str:
    return " ".join(cell.ljust(COLUMN_WIDTH) for cell in cells).rstrip()


def render(approvals: Sequence[TimesheetApproval], totals: Totals) -> str:
    lines = [_line(HEADERS)]
    for approval in approvals:
        cells = [
            approval.period.date_from,
            approval.period.date_to,
            format_duration(approval.required_seconds),
            format_duration(approval.time_spent_seconds),
            format_duration(approval.overtime_seconds),
        ]
        if not approval.complete:
            cells.append(INCOMPLETE_MARKER)
        lines.append(_line(cells))
    lines.append("")
    lines.append(f"Total: {format_duration(totals.overtime_seconds)}")
    return "\n".join(lines) + "\n"
