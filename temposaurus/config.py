from dataclasses import dataclass
from datetime import date
import os
from urllib.parse import quote

from dotenv import load_dotenv

from temposaurus.errors import ConfigError
from temposaurus.schemas import parse_day


load_dotenv()

DEFAULT_ATLASSIAN_BASE_URL = "https://verifa.atlassian.net"
DEFAULT_TEMPO_BASE_URL = "https://api.tempo.io/core/3"
DEFAULT_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class Settings:
    jira_email: str
    atlassian_token: str
    tempo_token: str
    date_from: str
    date_to: str
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"
    max_workers: int = 1
    atlassian_base_url: str = DEFAULT_ATLASSIAN_BASE_URL
    tempo_base_url: str = DEFAULT_TEMPO_BASE_URL

    @property
    def identity_url(self) -> str:
        return f"{self.atlassian_base_url.rstrip('/')}/rest/api/3/myself"

    @property
    def periods_url(self) -> str:
        return f"{self.tempo_base_url.rstrip('/')}/periods"

    def approvals_url(self, account_id: str) -> str:
        return f"{self.tempo_base_url.rstrip('/')}/timesheet-approvals/user/{quote(account_id, safe=':')}"


def _required(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigError(f"{name} not set")
    return value


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"expected a positive integer for {name} value but read: {raw}") from None
    if value < 1:
        raise ConfigError(f"expected a positive integer for {name} value but read: {raw}")
    return value


def validate_date_range(date_from: str, date_to: str) -> None:
    parsed: dict[str, date] = {}
    for name, value in (("DATE_FROM", date_from), ("DATE_TO", date_to)):
        try:
            parsed[name] = parse_day(value)
        except ValueError:
            raise ConfigError(f"{name} must be a YYYY-MM-DD date, got: {value}") from None
    if parsed["DATE_FROM"] > parsed["DATE_TO"]:
        raise ConfigError(f"DATE_FROM ({date_from}) is after DATE_TO ({date_to})")


def get_settings(
    today: date | None = None,
    *,
    date_from: str | None = None,
    date_to: str | None = None,
) -> Settings:
    today = today or date.today()
    date_from = date_from or _required("DATE_FROM")
    date_to = date_to or os.getenv("DATE_TO", "").strip() or today.isoformat()
    settings = Settings(
        jira_email=_required("JIRA_EMAIL"),
        atlassian_token=_required("ATLASSIAN_TOKEN"),
        tempo_token=_required("TEMPO_TOKEN"),
        date_from=date_from,
        date_to=date_to,
        timeout_seconds=_positive_int("HTTP_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        max_workers=_positive_int("MAX_WORKERS", 1),
        atlassian_base_url=os.getenv("ATLASSIAN_BASE_URL", DEFAULT_ATLASSIAN_BASE_URL),
        tempo_base_url=os.getenv("TEMPO_BASE_URL", DEFAULT_TEMPO_BASE_URL),
    )
    validate_date_range(settings.date_from, settings.date_to)
    return settings
