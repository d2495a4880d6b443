"""
Classified errors raised by the PokeAPI client.

Every failure that reaches a caller is one of two kinds:
- ``PokemonAPIError``: the server answered (or the caller's input was
  rejected before any request was made).
- ``NetworkError``: the request never reached the server or never came back.

Both carry ``message``, ``status`` and ``endpoint`` so a caller can tell a
missing resource (404) apart from a malformed or unreachable one.
"""

from typing import Optional

from utils.constants import (
    ERROR_HTTP,
    ERROR_RESOURCE_NOT_FOUND,
    ERROR_SERVER,
    ERROR_TOO_MANY_REQUESTS,
    HTTP_NOT_FOUND,
    HTTP_SERVER_ERROR_MIN,
    HTTP_TOO_MANY_REQUESTS,
)


class PokeAPIError(Exception):
    """Base class for all classified client errors."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.endpoint = endpoint

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status={self.status!r}, endpoint={self.endpoint!r})"
        )


class PokemonAPIError(PokeAPIError):
    """Raised when the API responds with a failure or an unusable payload."""

    pass


class NetworkError(PokeAPIError):
    """Raised when the transport fails before a response is received."""

    def __init__(self, message: str, endpoint: Optional[str] = None):
        super().__init__(message, status=None, endpoint=endpoint)


def classify_http_status(status: int, reason: Optional[str], url: str) -> PokemonAPIError:
    """
    Map a non-2xx HTTP status to a classified error.

    Args:
        status: HTTP status code.
        reason: HTTP reason phrase (may be None).
        url: Requested URL, recorded as the error endpoint.

    Returns:
        PokemonAPIError describing the failure (not raised).
    """
    reason = reason or ""

    if status == HTTP_NOT_FOUND:
        return PokemonAPIError(ERROR_RESOURCE_NOT_FOUND, status, url)
    elif status >= HTTP_SERVER_ERROR_MIN:
        return PokemonAPIError(ERROR_SERVER.format(reason=reason), status, url)
    elif status == HTTP_TOO_MANY_REQUESTS:
        return PokemonAPIError(ERROR_TOO_MANY_REQUESTS, status, url)
    else:
        return PokemonAPIError(
            ERROR_HTTP.format(status=status, reason=reason), status, url
        )
