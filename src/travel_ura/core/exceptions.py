"""Custom exceptions for URA prediction queries."""


class UraError(Exception):
    """Base exception for URA query errors."""

    stop_point_name: str | None = None


class ValidationError(UraError):
    """Raised when query input validation fails."""

    pass


class FeedFormatError(UraError):
    """Raised when a prediction feed has malformed or unexpected content."""

    pass


class FetchError(UraError):
    """Raised when predictions for a stop could not be fetched."""

    def __init__(self, message: str, stop_point_name: str | None = None):
        super().__init__(message)
        self.stop_point_name = stop_point_name


class UnknownStopError(FetchError):
    """Raised when the source rejects a stop point name."""

    def __init__(self, stop_point_name: str):
        super().__init__(f"Unknown stop point name: {stop_point_name}", stop_point_name)


class UnexpectedStatusError(FetchError):
    """Raised when the source answers with an unexpected HTTP status."""

    def __init__(self, status_code: int, stop_point_name: str | None = None):
        super().__init__(f"Unexpected HTTP status {status_code}", stop_point_name)
        self.status_code = status_code


class TransportError(FetchError):
    """Raised when there's a network-related error."""

    pass


class FetchCancelledError(FetchError):
    """Raised when a fetch is abandoned because a sibling fetch failed."""

    pass
