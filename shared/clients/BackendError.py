"""Errors raised when a search backend cannot answer a request."""


class BackendError(Exception):
    """A search backend call failed: network error, timeout, non-2xx status or an unparseable body.

    Attributes:
        engine (str): Name of the backend engine that failed (e.g. "bombastic").
        status_code (int | None): HTTP status returned by the backend, None if no response was received.
        timeout (bool): True if the request timed out.
    """

    def __init__(self, message: str, engine: str, status_code: int | None = None, timeout: bool = False):
        super().__init__(message)
        self.message = message
        self.engine = engine
        self.status_code = status_code
        self.timeout = timeout

    @classmethod
    def from_error(cls, error: "BackendError") -> "BackendError":
        """Re-classify a generic backend error, keeping all of its details."""
        return cls(
            message=error.message,
            engine=error.engine,
            status_code=error.status_code,
            timeout=error.timeout,
        )


class PrimaryBackendError(BackendError):
    """The SBOM search failed. Fatal for the request and surfaced to the caller."""


class SecondaryBackendError(BackendError):
    """An advisory lookup failed. Recovered per item, never surfaced to the caller."""
