"""Error kinds raised by the report services.

Handlers in ``crimewatch.main`` translate each kind into an HTTP status, so
services never build HTTP responses themselves.
"""


class CrimeWatchError(Exception):
    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(CrimeWatchError):
    """Malformed input. Not retried."""

    status_code = 400


class NotFoundError(CrimeWatchError):
    status_code = 404


class InvalidTransitionError(CrimeWatchError):
    """Requested status change is not an edge of the workflow graph."""

    status_code = 409


class ServiceUnavailableError(CrimeWatchError):
    """Persistence failure. Callers may retry with backoff."""

    status_code = 503
    public_detail = 'Service temporarily unavailable, please try again'
