"""Client configuration."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Union

from qontoclient.domain.entities import OAuthTokens

DEFAULT_USER_AGENT = "qontoclient/0.1.0"


class HttpLoggingLevel(Enum):
    """How much of the HTTP traffic is written to the qontoclient.http logger."""

    NONE = auto()
    # Request and response lines
    BASIC = auto()
    # BASIC plus headers
    HEADERS = auto()
    # HEADERS plus bodies
    BODY = auto()


@dataclass(frozen=True)
class HttpProxy:
    host: str
    port: int


@dataclass(frozen=True)
class BaseUri:
    """Scheme and host (and optional port) of a server."""

    scheme: str
    host: str
    port: Optional[int] = None

    def __str__(self) -> str:
        if self.port is None:
            return f"{self.scheme}://{self.host}"
        return f"{self.scheme}://{self.host}:{self.port}"


@dataclass(frozen=True)
class HttpConfiguration:
    """Transport settings.

    api_server_base_uri and oauth_server_base_uri replace the production
    servers; leave them as None outside of tests.
    """

    logging_level: HttpLoggingLevel = HttpLoggingLevel.NONE
    http_proxy: Optional[HttpProxy] = None
    bypass_ssl_checks: bool = False
    api_server_base_uri: Optional[BaseUri] = None
    oauth_server_base_uri: Optional[BaseUri] = None


@dataclass(frozen=True)
class LoginSecretKeyAuthentication:
    """Static credentials found in the Qonto web application (Settings, API tab)."""

    login: str
    secret_key: str


@dataclass
class OAuthAuthentication:
    """OAuth authentication.

    oauth_tokens is read every time a request is signed, so it can be set
    (or replaced after a refresh) once the client exists. It belongs to a
    single client instance.
    """

    oauth_tokens: Optional[OAuthTokens] = None


Authentication = Union[LoginSecretKeyAuthentication, OAuthAuthentication]


@dataclass(frozen=True)
class ClientConfiguration:
    authentication: Authentication
    http_configuration: HttpConfiguration = field(default_factory=HttpConfiguration)
    user_agent: str = DEFAULT_USER_AGENT
