"""Shared error messages and error types."""


class QontoError(Exception):
    """Base class for qontoclient errors.

    Transport failures (httpx.TransportError and subclasses) are not wrapped
    and reach the caller unchanged.
    """


class ConverterError(QontoError, ValueError):
    """A response could not be converted to the domain model.

    Raised for enum strings the client does not know. Unknown values are
    never mapped to a default.
    """


class ApiResponseError(QontoError):
    """The server answered with a non-2xx status code."""

    def __init__(self, status_code: int, content: bytes, url: str):
        self.status_code = status_code
        self.content = content
        self.url = url
        super().__init__(api_response_failed(status_code, url))


class MissingOAuthTokensError(QontoError, RuntimeError):
    """OAuth authentication is configured but no tokens have been set."""


class ClientClosedError(QontoError, RuntimeError):
    """The client was used after close()."""


def unknown_enum_value(kind: str, value: object) -> str:
    """Return message for an unrecognized enum string from the wire."""
    return f"Unknown {kind} '{value}'"


def missing_field(field_name: str, payload_kind: str) -> str:
    """Return message for a required field absent from a payload."""
    return f"Missing field '{field_name}' in {payload_kind}"


def api_response_failed(status_code: int, url: str) -> str:
    """Return message for a non-2xx response."""
    return f"Request to {url} failed with HTTP {status_code}"


MISSING_OAUTH_TOKENS = (
    "OAuthAuthentication is set, but oauth_tokens is None. "
    "It must be set to a non None value before making calls."
)

CLIENT_CLOSED = "This client has been closed and can no longer be used"
