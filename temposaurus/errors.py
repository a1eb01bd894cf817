from temposaurus.schemas import Period


class ConfigError(ValueError):
    pass


class EndpointError(RuntimeError):
    """A single API call that did not produce a usable document."""

    def __init__(self, endpoint: str, cause: str, status: str | None = None) -> None:
        self.endpoint = endpoint
        self.cause = cause
        self.status = status
        message = f"request to {endpoint} failed: {cause}"
        if status:
            message = f"{message} (HTTP {status})"
        super().__init__(message)


class FatalStageError(EndpointError):
    """Identity or period lookup failed; no report can be produced."""

    @classmethod
    def from_error(cls, error: EndpointError) -> "FatalStageError":
        return cls(error.endpoint, error.cause, error.status)


class ApprovalFetchError(EndpointError):
    """Approval lookup for one period failed; the period is reported as zero."""

    def __init__(self, period: Period, endpoint: str, cause: str, status: str | None = None) -> None:
        self.period = period
        super().__init__(endpoint, cause, status)

    @classmethod
    def from_error(cls, period: Period, error: EndpointError) -> "ApprovalFetchError":
        return cls(period, error.endpoint, error.cause, error.status)
