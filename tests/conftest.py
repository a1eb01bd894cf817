from collections.abc import Callable
import json

import pytest

from temposaurus.config import Settings


IDENTITY_URL = "https://jira.example.test/rest/api/3/myself"
PERIODS_URL = "https://tempo.example.test/core/3/periods"
APPROVALS_URL = "https://tempo.example.test/core/3/timesheet-approvals/user/acc-123"


class FakeResponse:
    def __init__(self, status_code: int = 200, body: object = None, reason: str = "OK") -> None:
        self.status_code = status_code
        self.body = body
        self.reason = reason

    def json(self) -> object:
        if isinstance(self.body, str):
            return json.loads(self.body)
        return self.body


Route = FakeResponse | Exception | Callable[[dict[str, str] | None], "FakeResponse | Exception"]


class FakeSession:
    def __init__(self, routes: dict[str, Route], calls: list[dict[str, object]]) -> None:
        self.routes = routes
        self.calls = calls
        self.closed = False

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True

    def get(self, url: str, **kwargs: object) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(404, {"errors": ["not found"]}, reason="Not Found")
        if callable(route):
            route = route(kwargs.get("params"))
        if isinstance(route, Exception):
            raise route
        return route


class FakeSessionFactory:
    def __init__(self, routes: dict[str, Route] | None = None) -> None:
        self.routes: dict[str, Route] = routes or {}
        self.calls: list[dict[str, object]] = []
        self.sessions: list[FakeSession] = []

    def __call__(self) -> FakeSession:
        session = FakeSession(self.routes, self.calls)
        self.sessions.append(session)
        return session


def approvals_by_period(table: dict[str, Route]) -> Callable[[dict[str, str] | None], FakeResponse | Exception]:
    """Serve approval documents keyed by the requested period start date."""

    def handler(params: dict[str, str] | None) -> FakeResponse | Exception:
        route = table[(params or {})["from"]]
        if callable(route):
            return route(params)
        return route

    return handler


def approval_doc(date_from: str, date_to: str, required: int, spent: int) -> dict[str, object]:
    return {
        "self": f"{APPROVALS_URL}?from={date_from}&to={date_to}",
        "period": {"from": date_from, "to": date_to},
        "requiredSeconds": required,
        "timeSpentSeconds": spent,
    }


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        jira_email="ada@example.com",
        atlassian_token="atlassian-secret",
        tempo_token="tempo-secret",
        date_from="2024-01-01",
        date_to="2024-01-31",
        timeout_seconds=5,
        log_level="INFO",
        max_workers=1,
        atlassian_base_url="https://jira.example.test",
        tempo_base_url="https://tempo.example.test/core/3",
    )


@pytest.fixture()
def identity_response() -> FakeResponse:
    return FakeResponse(
        200,
        {"accountId": "acc-123", "emailAddress": "ada@example.com", "displayName": "Ada Lovelace"},
    )


@pytest.fixture()
def two_periods_response() -> FakeResponse:
    return FakeResponse(
        200,
        {
            "periods": [
                {"from": "2024-01-01", "to": "2024-01-15"},
                {"from": "2024-01-16", "to": "2024-01-31"},
            ]
        },
    )
