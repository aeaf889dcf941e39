"""Domain error types."""


class WaylineError(Exception):
    """Base class for errors raised by Wayline."""


class InvalidQueryError(WaylineError):
    """The client request is missing or has invalid parameters."""


class NotFoundError(WaylineError):
    """The requested feed, provider or stop does not exist."""


class UpstreamUnavailableError(WaylineError):
    """An upstream departure source could not deliver data."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderDataError(WaylineError):
    """Stored data of a single provider could not be read."""

    def __init__(self, provider_id: str, message: str) -> None:
        super().__init__(f"{provider_id}: {message}")
        self.provider_id = provider_id
