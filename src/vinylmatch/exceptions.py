"""Custom exceptions for vinylmatch.

All exceptions include an HTTP status_code attribute for easy
integration with web frameworks like FastAPI.

Most of the library fails soft and never raises these to callers:
the resolution pipeline, cache lookups and every remote read return
``None`` or an empty result instead. Exceptions are reserved for
operator-facing entry points (curation, CLI commands) and for the
client's internal transport layer.
"""


class VinylMatchError(Exception):
    """Base exception for vinylmatch.

    Attributes:
        status_code: HTTP status code for API error responses.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidCatalogUrlError(VinylMatchError):
    """URL is not a valid Discogs web URL.

    Raised when a curated link is saved with a URL that is not http(s)
    or whose host is not discogs.com or one of its subdomains.
    """

    status_code: int = 400  # Bad Request


class NotConfiguredError(VinylMatchError):
    """A Discogs token is required for this operation.

    Only raised by CLI commands that cannot degrade gracefully.
    Resolution itself falls back to a web search link instead.
    """

    status_code: int = 401  # Unauthorized


class APIError(VinylMatchError):
    """Discogs API transport error.

    Raised inside the client when a request fails, times out or returns
    a body that is not JSON. Public client methods catch it and fail soft.
    """

    status_code: int = 502  # Bad Gateway (upstream failure)
