from collections.abc import Callable
import logging

import requests

from temposaurus.errors import EndpointError


logger = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def get_json(
    session_factory: SessionFactory,
    url: str,
    *,
    endpoint: str,
    timeout: float,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
    auth: tuple[str, str] | None = None,
) -> dict[str, object]:
    request_headers = {"Accept": "application/json"}
    if headers:
        request_headers.update(headers)

    # A fresh session per call keeps calls independent of each other.
    with session_factory() as session:
        try:
            response = session.get(url, params=params, headers=request_headers, auth=auth, timeout=timeout)
        except requests.RequestException as exc:
            raise EndpointError(endpoint, str(exc)) from exc

        if response.status_code != 200:
            raise EndpointError(
                endpoint,
                "unexpected response status",
                status=f"{response.status_code} {response.reason or ''}".strip(),
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise EndpointError(endpoint, f"failed to parse the document: {exc}") from exc

    if not isinstance(payload, dict):
        raise EndpointError(endpoint, "failed to parse the document: expected a JSON object")

    logger.debug("fetched document", extra={"endpoint": endpoint, "url": url})
    return payload
