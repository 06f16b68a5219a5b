"""HTTP transport built on httpx.AsyncClient."""

import logging
from typing import Any, NamedTuple, Optional, Sequence

import httpx

from qontoclient.config import (
    Authentication,
    ClientConfiguration,
    HttpLoggingLevel,
    LoginSecretKeyAuthentication,
    OAuthAuthentication,
)
from qontoclient.domain.errors import (
    CLIENT_CLOSED,
    MISSING_OAUTH_TOKENS,
    ClientClosedError,
    MissingOAuthTokensError,
)

logger = logging.getLogger(__name__)
http_logger = logging.getLogger("qontoclient.http")

AUTHORIZATION = "Authorization"
REQUEST_TIMEOUT_SECONDS = 30.0


class TransportResponse(NamedTuple):
    status_code: int
    content: bytes
    url: str


def get_authorization_header(authentication: Authentication) -> str:
    """Return the Authorization header value for the configured authentication.

    Raises:
        MissingOAuthTokensError: If OAuth is configured without tokens
    """
    if isinstance(authentication, LoginSecretKeyAuthentication):
        return f"{authentication.login}:{authentication.secret_key}"
    if isinstance(authentication, OAuthAuthentication):
        if authentication.oauth_tokens is None:
            raise MissingOAuthTokensError(MISSING_OAUTH_TOKENS)
        return f"Bearer {authentication.oauth_tokens.access_token}"
    raise TypeError(f"Unsupported authentication: {type(authentication).__name__}")


class QontoAuth(httpx.Auth):
    """Sign each request unless it already carries an Authorization header.

    The header is computed when the request is about to be sent, so OAuth
    tokens set after the client was created are picked up.
    """

    def __init__(self, authentication: Authentication):
        self.authentication = authentication

    def auth_flow(self, request: httpx.Request):
        if AUTHORIZATION not in request.headers:
            request.headers[AUTHORIZATION] = get_authorization_header(self.authentication)
        yield request


def _redact(name: str, value: str) -> str:
    return "██" if name.lower() == AUTHORIZATION.lower() else value


def _event_hooks(level: HttpLoggingLevel) -> dict[str, list]:
    if level is HttpLoggingLevel.NONE:
        return {}

    with_headers = level in (HttpLoggingLevel.HEADERS, HttpLoggingLevel.BODY)
    with_body = level is HttpLoggingLevel.BODY

    async def log_request(request: httpx.Request) -> None:
        http_logger.info("--> %s %s", request.method, request.url)
        if with_headers:
            for name, value in request.headers.items():
                http_logger.info("%s: %s", name, _redact(name, value))
        if with_body:
            body = await request.aread()
            if body:
                http_logger.info("%s", body.decode("utf-8", errors="replace"))
        http_logger.info("--> END %s", request.method)

    async def log_response(response: httpx.Response) -> None:
        http_logger.info("<-- %s %s", response.status_code, response.url)
        if with_headers:
            for name, value in response.headers.items():
                http_logger.info("%s: %s", name, value)
        if with_body:
            body = await response.aread()
            if body:
                http_logger.info("%s", body.decode("utf-8", errors="replace"))
        http_logger.info("<-- END HTTP")

    return {"request": [log_request], "response": [log_response]}


class HttpTransport:
    """Sends requests for one client.

    Configuration is fixed at construction. The underlying connection pool
    is shared by all concurrent calls and released by close(), after which
    the transport refuses to send.
    """

    def __init__(
        self,
        configuration: ClientConfiguration,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the transport.

        Args:
            configuration: Client configuration
            transport: Optional httpx transport to use instead of the network
                (e.g. httpx.MockTransport in tests)
        """
        http_configuration = configuration.http_configuration
        proxy = None
        if http_configuration.http_proxy is not None:
            proxy = f"http://{http_configuration.http_proxy.host}:{http_configuration.http_proxy.port}"

        self._client = httpx.AsyncClient(
            auth=QontoAuth(configuration.authentication),
            headers={"User-Agent": configuration.user_agent},
            proxy=proxy,
            verify=not http_configuration.bypass_ssl_checks,
            timeout=REQUEST_TIMEOUT_SECONDS,
            event_hooks=_event_hooks(http_configuration.logging_level),
            transport=transport,
        )
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    def ensure_open(self) -> None:
        """Raise ClientClosedError if close() was called."""
        if self._closed:
            raise ClientClosedError(CLIENT_CLOSED)

    async def send(
        self,
        method: str,
        url: str,
        params: Optional[Sequence[tuple[str, Any]]] = None,
        headers: Optional[dict[str, str]] = None,
        data: Optional[dict[str, str]] = None,
        files: Optional[dict[str, tuple[str, bytes, str]]] = None,
    ) -> TransportResponse:
        """Send one request and read the whole response body.

        Query parameters with a None value are left out. Repeated keys
        (status[], includes[]) are given as separate pairs.
        """
        self.ensure_open()
        query = [(key, value) for key, value in params or () if value is not None]
        logger.debug("Sending %s %s", method, url)
        response = await self._client.request(
            method,
            url,
            params=query,
            headers=headers,
            data=data,
            files=files,
        )
        return TransportResponse(response.status_code, response.content, str(response.url))

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._client.aclose()
