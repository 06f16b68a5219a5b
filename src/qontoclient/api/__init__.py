"""API layer for qontoclient."""

from qontoclient.api.client import QontoClient
from qontoclient.api.factories import create_client
from qontoclient.api.walker import collect_all_pages, collect_all_pages_blocking

__all__ = ["QontoClient", "create_client", "collect_all_pages", "collect_all_pages_blocking"]
