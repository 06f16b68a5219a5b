from qontoclient.api import QontoClient, collect_all_pages, collect_all_pages_blocking, create_client
from qontoclient.config import (
    BaseUri,
    ClientConfiguration,
    HttpConfiguration,
    HttpLoggingLevel,
    HttpProxy,
    LoginSecretKeyAuthentication,
    OAuthAuthentication,
)
from qontoclient.facades import (
    BlockingQontoClient,
    CallbackQontoClient,
    FutureQontoClient,
    Result,
    StreamQontoClient,
)


# Import main lazily to avoid circular dependencies
def __getattr__(name):
    if name == "main":
        from qontoclient.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
