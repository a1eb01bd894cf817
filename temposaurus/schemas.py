from dataclasses import dataclass, field
from datetime import date
from enum import Enum
import re


DAY_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def parse_day(value: str) -> date:
    """Parse a strict YYYY-MM-DD date; week dates and compact forms are rejected."""
    if not DAY_PATTERN.fullmatch(value):
        raise ValueError(f"expected a YYYY-MM-DD date, got: {value}")
    return date.fromisoformat(value)


@dataclass(frozen=True)
class Identity:
    account_id: str
    email_address: str = ""
    display_name: str = ""


@dataclass(frozen=True)
class Period:
    date_from: str
    date_to: str

    def __str__(self) -> str:
        return f"{self.date_from} to {self.date_to}"


@dataclass(frozen=True)
class TimesheetApproval:
    period: Period
    required_seconds: int
    time_spent_seconds: int
    complete: bool = True

    @property
    def overtime_seconds(self) -> int:
        return self.time_spent_seconds - self.required_seconds

    @classmethod
    def placeholder(cls, period: Period) -> "TimesheetApproval":
        # Keeps the row in place when the approval could not be fetched.
        return cls(period=period, required_seconds=0, time_spent_seconds=0, complete=False)


@dataclass(frozen=True)
class Totals:
    total_required_seconds: int
    total_time_spent_seconds: int

    @property
    def overtime_seconds(self) -> int:
        return self.total_time_spent_seconds - self.total_required_seconds


class PipelineState(str, Enum):
    START = "start"
    IDENTITY_RESOLVED = "identity_resolved"
    PERIODS_ENUMERATED = "periods_enumerated"
    APPROVALS_COLLECTED = "approvals_collected"
    REPORTED = "reported"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(frozen=True)
class PipelineResult:
    state: PipelineState
    date_from: str
    date_to: str
    identity: Identity | None = None
    approvals: tuple[TimesheetApproval, ...] = field(default_factory=tuple)
    totals: Totals | None = None
    report: str | None = None
    error: str | None = None

    @property
    def degraded_periods(self) -> int:
        return sum(1 for approval in self.approvals if not approval.complete)
