from concurrent.futures import ThreadPoolExecutor
import logging

from temposaurus.config import Settings
from temposaurus.errors import ApprovalFetchError, EndpointError, FatalStageError
from temposaurus.http_client import SessionFactory, bearer, get_json
from temposaurus.schemas import Identity, Period, TimesheetApproval, parse_day


logger = logging.getLogger(__name__)

IDENTITY_ENDPOINT = "Jira Cloud `myself`"
PERIODS_ENDPOINT = "Tempo `periods`"
APPROVALS_ENDPOINT = "Tempo `timesheet-approvals/user`"


def resolve_identity(settings: Settings, session_factory: SessionFactory) -> Identity:
    """Acquire the Atlassian account id, which identifies the user across Jira and Tempo."""
    try:
        payload = get_json(
            session_factory,
            settings.identity_url,
            endpoint=IDENTITY_ENDPOINT,
            timeout=settings.timeout_seconds,
            auth=(settings.jira_email, settings.atlassian_token),
        )
    except EndpointError as exc:
        raise FatalStageError.from_error(exc) from exc

    account_id = payload.get("accountId")
    if not isinstance(account_id, str) or not account_id:
        raise FatalStageError(IDENTITY_ENDPOINT, "document has no accountId")

    return Identity(
        account_id=account_id,
        email_address=str(payload.get("emailAddress") or ""),
        display_name=str(payload.get("displayName") or ""),
    )


def parse_period(raw: object) -> Period:
    if not isinstance(raw, dict):
        raise ValueError("period must be an object")
    date_from = raw.get("from")
    date_to = raw.get("to")
    if not isinstance(date_from, str) or not isinstance(date_to, str):
        raise ValueError("period needs string from/to values")
    if parse_day(date_from) > parse_day(date_to):
        raise ValueError(f"period starts after it ends: {date_from} > {date_to}")
    return Period(date_from=date_from, date_to=date_to)


def enumerate_periods(settings: Settings, session_factory: SessionFactory) -> list[Period]:
    """Fetch the time-sheet periods covering the configured date range, in service order."""
    try:
        payload = get_json(
            session_factory,
            settings.periods_url,
            endpoint=PERIODS_ENDPOINT,
            timeout=settings.timeout_seconds,
            params={"from": settings.date_from, "to": settings.date_to},
            headers=bearer(settings.tempo_token),
        )
    except EndpointError as exc:
        raise FatalStageError.from_error(exc) from exc

    raw_periods = payload.get("periods")
    if not isinstance(raw_periods, list):
        raise FatalStageError(PERIODS_ENDPOINT, "document has no periods list")

    periods: list[Period] = []
    for index, raw in enumerate(raw_periods):
        try:
            periods.append(parse_period(raw))
        except ValueError as exc:
            raise FatalStageError(PERIODS_ENDPOINT, f"malformed period at index {index}: {exc}") from exc
    return periods


def _seconds(payload: dict[str, object], key: str) -> int:
    value = payload.get(key)
    # bool is an int subclass and never a valid duration.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{key} must be a non-negative integer, got {value!r}")
    return value


def fetch_approval(
    settings: Settings,
    identity: Identity,
    period: Period,
    session_factory: SessionFactory,
) -> TimesheetApproval:
    try:
        payload = get_json(
            session_factory,
            settings.approvals_url(identity.account_id),
            endpoint=APPROVALS_ENDPOINT,
            timeout=settings.timeout_seconds,
            params={"from": period.date_from, "to": period.date_to},
            headers=bearer(settings.tempo_token),
        )
    except EndpointError as exc:
        raise ApprovalFetchError.from_error(period, exc) from exc

    try:
        required = _seconds(payload, "requiredSeconds")
        spent = _seconds(payload, "timeSpentSeconds")
    except ValueError as exc:
        raise ApprovalFetchError(period, APPROVALS_ENDPOINT, f"failed to parse the document: {exc}") from exc

    # The period echoed by the service is ignored so rows always match the request.
    return TimesheetApproval(period=period, required_seconds=required, time_spent_seconds=spent)


def _fetch_or_placeholder(
    settings: Settings,
    identity: Identity,
    period: Period,
    session_factory: SessionFactory,
) -> TimesheetApproval:
    try:
        return fetch_approval(settings, identity, period, session_factory)
    except ApprovalFetchError as exc:
        logger.warning(
            "error, skipping period %s to %s: %s",
            period.date_from,
            period.date_to,
            exc,
            extra={"period_from": period.date_from, "period_to": period.date_to, "status": exc.status},
        )
        return TimesheetApproval.placeholder(period)


def fetch_approvals(
    settings: Settings,
    identity: Identity,
    periods: list[Period],
    session_factory: SessionFactory,
) -> list[TimesheetApproval]:
    if settings.max_workers <= 1 or len(periods) <= 1:
        return [_fetch_or_placeholder(settings, identity, period, session_factory) for period in periods]

    results: list[TimesheetApproval | None] = [None] * len(periods)
    with ThreadPoolExecutor(max_workers=settings.max_workers) as pool:
        futures = {
            pool.submit(_fetch_or_placeholder, settings, identity, period, session_factory): index
            for index, period in enumerate(periods)
        }
        for future, index in futures.items():
            results[index] = future.result()
    return [approval for approval in results if approval is not None]
