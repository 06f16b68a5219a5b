"""Shared pytest fixtures for qontoclient tests."""

from typing import Any, Callable

import httpx
import pytest
from click.testing import CliRunner

from qontoclient.api.factories import LOGIN_ENV_VAR, SECRET_KEY_ENV_VAR, create_client
from qontoclient.config import ClientConfiguration, LoginSecretKeyAuthentication

API_PREFIX = "/v2/"


class FakeQontoServer:
    """In-memory stand-in for the API and OAuth servers.

    Routes are keyed by method and path (without the /v2/ prefix for API
    calls). Every request received is recorded, in order.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        handler = self.routes.get((request.method, path))
        if handler is None:
            return httpx.Response(404, json={"errors": [{"code": "not_found"}]})
        return handler(request)

    def add_json(self, method: str, path: str, payload: Any, status_code: int = 200) -> None:
        self.routes[(method, path)] = lambda request: httpx.Response(status_code, json=payload)

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method, path)] = handler

    def add_pages(self, path: str, key: str, pages: list[list[Any]]) -> None:
        """Serve one list envelope per current_page, chained with next_page."""

        def handler(request: httpx.Request) -> httpx.Response:
            current = int(request.url.params.get("current_page", "1"))
            per_page = int(request.url.params.get("per_page", "100"))
            items = pages[current - 1] if current <= len(pages) else []
            return httpx.Response(
                200,
                json={
                    key: items,
                    "meta": meta(
                        current_page=current,
                        per_page=per_page,
                        total_pages=len(pages),
                        total_count=sum(len(p) for p in pages),
                    ),
                },
            )

        self.routes[("GET", path)] = handler

    def last_request(self) -> httpx.Request:
        return self.requests[-1]


def meta(current_page: int = 1, per_page: int = 100, total_pages: int = 1, total_count: int = 0) -> dict:
    """Build a list envelope meta block, with next/prev derived from the totals."""
    return {
        "current_page": current_page,
        "next_page": current_page + 1 if current_page < total_pages else None,
        "prev_page": current_page - 1 if current_page > 1 else None,
        "total_pages": total_pages,
        "total_count": total_count,
        "per_page": per_page,
    }


def make_transaction_payload(**overrides) -> dict:
    payload = {
        "transaction_id": "acme-corp-1111-1-transaction-123",
        "id": "7b7a5ed6-3903-4782-889d-b4f64bd7bef9",
        "amount": 12.5,
        "amount_cents": 1250,
        "local_amount": 12.5,
        "local_amount_cents": 1250,
        "side": "debit",
        "operation_type": "card",
        "currency": "EUR",
        "local_currency": "EUR",
        "label": "Coffee Shop",
        "settled_at": "2019-08-19T14:03:27.000Z",
        "emitted_at": "2019-08-18T10:00:00.000Z",
        "updated_at": "2019-08-19T14:03:27.000+02:00",
        "status": "completed",
        "note": None,
        "reference": None,
        "vat_amount": None,
        "vat_amount_cents": None,
        "vat_rate": None,
        "initiator_id": "b2b3b4b5-0000-1111-2222-333344445555",
        "label_ids": [],
        "labels": [],
        "attachment_ids": [],
        "attachments": [],
        "attachment_lost": False,
        "attachment_required": True,
        "card_last_digits": "4242",
        "category": "restaurant_and_bar",
    }
    payload.update(overrides)
    return payload


def make_attachment_payload(**overrides) -> dict:
    payload = {
        "id": "3e4b7b4c-0d6f-4c2b-9a53-4d6b2f3b1c7a",
        "created_at": "2019-08-20T09:00:00.000Z",
        "file_name": "receipt.pdf",
        "file_size": "2048",
        "file_content_type": "application/pdf",
        "url": "https://files.example.com/receipt.pdf?signature=abc",
        "probative_attachment": {"status": "pending"},
    }
    payload.update(overrides)
    return payload


def make_organization_payload() -> dict:
    return {
        "organization": {
            "slug": "acme-corp",
            "bank_accounts": [
                {
                    "slug": "acme-corp-1111",
                    "iban": "FR7616798000010000005663951",
                    "bic": "TRZOFR21XXX",
                    "currency": "EUR",
                    "balance": 1234.56,
                    "balance_cents": 123456,
                    "authorized_balance": 1234.56,
                    "authorized_balance_cents": 123456,
                }
            ],
        }
    }


@pytest.fixture
def server():
    """Create a fake Qonto server."""
    return FakeQontoServer()


@pytest.fixture
def configuration():
    """Login/secret key configuration used by most tests."""
    return ClientConfiguration(LoginSecretKeyAuthentication(login="acme-corp", secret_key="s3cr3t"))


@pytest.fixture
def client(server, configuration):
    """Create an async client talking to the fake server."""
    return create_client(configuration, transport=server.transport)


@pytest.fixture
def transaction_payload():
    return make_transaction_payload()


@pytest.fixture
def attachment_payload():
    return make_attachment_payload()


@pytest.fixture
def organization_payload():
    return make_organization_payload()


@pytest.fixture
def cli_runner():
    """Create a CLI runner for testing, without credentials from the environment."""
    return CliRunner(env={LOGIN_ENV_VAR: None, SECRET_KEY_ENV_VAR: None})
