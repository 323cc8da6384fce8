"""Error taxonomy shared by the gateway, the stores and the HTTP layer."""

from typing import Optional


class ReeltrackError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(ReeltrackError):
    """Caller error, e.g. a missing required parameter."""

    status_code = 400


class NotConfigured(ReeltrackError):
    """The server is missing required configuration (the TMDB credential)."""

    status_code = 500


class UpstreamError(ReeltrackError):
    """The upstream catalog API did not answer with a usable response."""

    status_code = 502

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class PersistenceError(ReeltrackError):
    status_code = 500


class ClientError(Exception):
    """A call to the internal HTTP surface returned a non-success status."""

    def __init__(self, status: int, message: str):
        super().__init__(f"{status} {message}")
        self.status = status
        self.message = message
