"""Client factory functions."""

import os
from typing import Optional

import httpx

from qontoclient.api.client import QontoClient
from qontoclient.api.service import QontoService
from qontoclient.api.transport import HttpTransport
from qontoclient.config import ClientConfiguration, LoginSecretKeyAuthentication

LOGIN_ENV_VAR = "QONTO_LOGIN"
SECRET_KEY_ENV_VAR = "QONTO_SECRET_KEY"


def configuration_from_environment() -> ClientConfiguration:
    """Build a login/secret key configuration from QONTO_LOGIN and QONTO_SECRET_KEY.

    Raises:
        ValueError: If either variable is unset or empty
    """
    login = os.environ.get(LOGIN_ENV_VAR)
    secret_key = os.environ.get(SECRET_KEY_ENV_VAR)
    if not login or not secret_key:
        raise ValueError(
            f"{LOGIN_ENV_VAR} and {SECRET_KEY_ENV_VAR} must be set when no configuration is given"
        )
    return ClientConfiguration(LoginSecretKeyAuthentication(login=login, secret_key=secret_key))


def create_client(
    configuration: Optional[ClientConfiguration] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> QontoClient:
    """Create an asynchronous Qonto client.

    Args:
        configuration: Client configuration. If None, login and secret key
            are read from the QONTO_LOGIN and QONTO_SECRET_KEY environment
            variables
        transport: Optional httpx transport replacing the network

    Returns:
        QontoClient owning a new HTTP transport
    """
    if configuration is None:
        configuration = configuration_from_environment()
    service = QontoService(configuration, HttpTransport(configuration, transport=transport))
    return QontoClient(configuration, service)
