"""Tests for the async client against a fake server."""

import asyncio
import io
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from conftest import make_attachment_payload, make_transaction_payload, meta
from qontoclient.api.factories import create_client
from qontoclient.config import (
    BaseUri,
    ClientConfiguration,
    HttpConfiguration,
    HttpLoggingLevel,
    OAuthAuthentication,
)
from qontoclient.domain.attachments import AttachmentType
from qontoclient.domain.entities import (
    DateRange,
    OAuthCredentials,
    OAuthTokens,
    Pagination,
    SortField,
    SortOrder,
    TransactionStatus,
)
from qontoclient.domain.errors import (
    ApiResponseError,
    ClientClosedError,
    ConverterError,
    MissingOAuthTokensError,
)

INTERNAL_ID = "7b7a5ed6-3903-4782-889d-b4f64bd7bef9"
ATTACHMENT_ID = "3e4b7b4c-0d6f-4c2b-9a53-4d6b2f3b1c7a"


def transaction_list_envelope(transactions, **meta_kwargs):
    return {"transactions": transactions, "meta": meta(total_count=len(transactions), **meta_kwargs)}


class TestOrganizations:
    """Tests for organizations.get_organization."""

    def test_get_organization(self, client, server, organization_payload):
        server.add_json("GET", "organizations/0", organization_payload)

        organization = asyncio.run(client.organizations.get_organization())

        assert organization.slug == "acme-corp"
        assert organization.bank_accounts[0].slug == "acme-corp-1111"
        assert organization.bank_accounts[0].balance_cents == 123456

    def test_login_secret_key_authorization_header(self, client, server, organization_payload):
        server.add_json("GET", "organizations/0", organization_payload)

        asyncio.run(client.organizations.get_organization())

        request = server.last_request()
        assert request.headers["Authorization"] == "acme-corp:s3cr3t"
        assert request.headers["User-Agent"].startswith("qontoclient/")
        assert request.url.host == "thirdparty.qonto.com"

    def test_custom_api_server(self, server, organization_payload):
        configuration = ClientConfiguration(
            OAuthAuthentication(
                OAuthTokens("access", "refresh", datetime.now(timezone.utc) + timedelta(hours=1))
            ),
            http_configuration=HttpConfiguration(
                logging_level=HttpLoggingLevel.BODY,
                api_server_base_uri=BaseUri("http", "localhost", 8080),
            ),
        )
        client = create_client(configuration, transport=server.transport)
        server.add_json("GET", "organizations/0", organization_payload)

        asyncio.run(client.organizations.get_organization())

        assert str(server.last_request().url) == "http://localhost:8080/v2/organizations/0"


class TestTransactions:
    """Tests for the transaction list and detail calls."""

    def test_default_query(self, client, server, transaction_payload):
        server.add_json("GET", "transactions", transaction_list_envelope([transaction_payload]))

        page = asyncio.run(client.transactions.get_transaction_list("acme-corp-1111"))

        params = server.last_request().url.params
        assert params["slug"] == "acme-corp-1111"
        assert params["sort_by"] == "settled_at:desc"
        assert params["current_page"] == "1"
        assert params["per_page"] == "100"
        assert params.get_list("includes[]") == ["labels", "attachments"]
        assert "status[]" not in params
        assert "updated_at_from" not in params
        assert "settled_at_to" not in params
        assert len(page.items) == 1
        assert page.next_pagination is None

    def test_filters_and_sorting(self, client, server, transaction_payload):
        server.add_json("GET", "transactions", transaction_list_envelope([transaction_payload]))

        asyncio.run(
            client.transactions.get_transaction_list(
                "acme-corp-1111",
                status=frozenset({TransactionStatus.COMPLETED, TransactionStatus.PENDING}),
                updated_date_range=DateRange(
                    from_date=datetime(2019, 1, 1, tzinfo=timezone.utc),
                    to_date=datetime(2019, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
                ),
                settled_date_range=DateRange(from_date=datetime(2019, 6, 1, tzinfo=timezone.utc)),
                sort_field=SortField.UPDATED_DATE,
                sort_order=SortOrder.ASCENDING,
                pagination=Pagination(page_index=2, items_per_page=25),
            )
        )

        params = server.last_request().url.params
        assert params.get_list("status[]") == ["pending", "completed"]
        assert params["updated_at_from"] == "2019-01-01T00:00:00.000Z"
        assert params["updated_at_to"] == "2019-12-31T23:59:59.000Z"
        assert params["settled_at_from"] == "2019-06-01T00:00:00.000Z"
        assert "settled_at_to" not in params
        assert params["sort_by"] == "updated_at:asc"
        assert params["current_page"] == "2"
        assert params["per_page"] == "25"

    @pytest.mark.parametrize("page_index", [0, -5])
    def test_page_index_is_coerced_to_first_page(self, client, server, page_index):
        server.add_json("GET", "transactions", transaction_list_envelope([]))
        server.add_pages("memberships", "memberships", [[]])
        server.add_pages("labels", "labels", [[]])

        asyncio.run(
            client.transactions.get_transaction_list(
                "acme-corp-1111", pagination=Pagination(page_index=page_index)
            )
        )
        asyncio.run(client.memberships.get_membership_list(Pagination(page_index=page_index)))
        asyncio.run(client.labels.get_label_list(Pagination(page_index=page_index)))

        assert [r.url.params["current_page"] for r in server.requests] == ["1", "1", "1"]

    def test_get_transaction_uses_internal_id(self, client, server, transaction_payload):
        server.add_json("GET", f"transactions/{INTERNAL_ID}", {"transaction": transaction_payload})

        transaction = asyncio.run(client.transactions.get_transaction(INTERNAL_ID))

        request = server.last_request()
        assert request.url.path == f"/v2/transactions/{INTERNAL_ID}"
        assert request.url.params.get_list("includes[]") == ["labels", "attachments"]
        assert transaction.internal_id == INTERNAL_ID
        assert transaction.id == "acme-corp-1111-1-transaction-123"

    def test_display_id_is_not_an_internal_id(self, client, server, transaction_payload):
        """Test a display id passed as internal id reaches the server unchanged and fails there."""
        server.add_json("GET", f"transactions/{INTERNAL_ID}", {"transaction": transaction_payload})

        with pytest.raises(ApiResponseError) as excinfo:
            asyncio.run(client.transactions.get_transaction(transaction_payload["transaction_id"]))

        assert excinfo.value.status_code == 404

    def test_get_all_transaction_list(self, client, server):
        pages = [
            [make_transaction_payload(id="t1"), make_transaction_payload(id="t2")],
            [make_transaction_payload(id="t3")],
        ]
        server.add_pages("transactions", "transactions", pages)

        transactions = asyncio.run(
            client.transactions.get_all_transaction_list(
                "acme-corp-1111", status=frozenset({TransactionStatus.COMPLETED})
            )
        )

        assert [t.internal_id for t in transactions] == ["t1", "t2", "t3"]
        assert all(r.url.params.get_list("status[]") == ["completed"] for r in server.requests)


class TestMembershipsAndLabels:
    def test_get_membership_list(self, client, server):
        server.add_json(
            "GET",
            "memberships",
            {
                "memberships": [{"id": "m1", "first_name": "Ada", "last_name": "Lovelace"}],
                "meta": meta(per_page=1, total_pages=2, total_count=2),
            },
        )

        page = asyncio.run(client.memberships.get_membership_list(Pagination(items_per_page=1)))

        assert page.items[0].first_name == "Ada"
        assert page.next_pagination == Pagination(2, 1)
        assert server.last_request().url.params["per_page"] == "1"

    def test_get_all_membership_list(self, client, server):
        members = [{"id": f"m{i}", "first_name": "First", "last_name": f"Last{i}"} for i in range(5)]
        server.add_pages("memberships", "memberships", [members[0:2], members[2:4], members[4:5]])

        memberships = asyncio.run(client.memberships.get_all_membership_list(Pagination(items_per_page=2)))

        assert [m.id for m in memberships] == ["m0", "m1", "m2", "m3", "m4"]
        assert len(server.requests) == 3

    def test_get_all_label_list(self, client, server):
        labels = [
            {"id": "l1", "name": "Travel", "parent_id": None},
            {"id": "l2", "name": "Trains", "parent_id": "l1"},
        ]
        server.add_pages("labels", "labels", [labels[:1], labels[1:]])

        result = asyncio.run(client.labels.get_all_label_list())

        assert [label.name for label in result] == ["Travel", "Trains"]
        assert result[1].parent_id == "l1"

    def test_empty_label_list(self, client, server):
        server.add_json(
            "GET", "labels", {"labels": [], "meta": meta(total_pages=0, total_count=0)}
        )

        page = asyncio.run(client.labels.get_label_list())

        assert page.items == []
        assert page.next_pagination is None


class TestAttachments:
    """Tests for the attachment calls."""

    def test_get_attachment(self, client, server, attachment_payload):
        server.add_json("GET", f"attachments/{ATTACHMENT_ID}", {"attachment": attachment_payload})

        attachment = asyncio.run(client.attachments.get_attachment(ATTACHMENT_ID))

        assert attachment.id == ATTACHMENT_ID
        assert attachment.url.startswith("https://files.example.com/")

    def test_get_attachment_list(self, client, server):
        server.add_json(
            "GET",
            f"transactions/{INTERNAL_ID}/attachments",
            {"attachments": [make_attachment_payload(), make_attachment_payload(id="other")]},
        )

        attachments = asyncio.run(client.attachments.get_attachment_list(INTERNAL_ID))

        assert [a.id for a in attachments] == [ATTACHMENT_ID, "other"]

    def test_add_attachment_uploads_whole_input_and_leaves_it_open(self, client, server):
        server.add_json("POST", f"transactions/{INTERNAL_ID}/attachments", {})
        content = b"%PDF-1.4 " + b"x" * 5000
        byte_input = io.BytesIO(content)

        asyncio.run(client.attachments.add_attachment(INTERNAL_ID, AttachmentType.PDF, byte_input))

        request = server.last_request()
        assert request.method == "POST"
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="file"; filename="file.pdf"' in request.content
        assert b"Content-Type: application/pdf" in request.content
        assert content in request.content
        assert not byte_input.closed

    def test_add_attachment_jpeg(self, client, server):
        server.add_json("POST", f"transactions/{INTERNAL_ID}/attachments", {})

        asyncio.run(
            client.attachments.add_attachment(INTERNAL_ID, AttachmentType.JPEG, io.BytesIO(b"\xff\xd8"))
        )

        assert b'filename="file.jpg"' in server.last_request().content
        assert b"Content-Type: image/jpeg" in server.last_request().content

    def test_remove_attachment(self, client, server):
        server.add_handler(
            "DELETE",
            f"transactions/{INTERNAL_ID}/attachments/{ATTACHMENT_ID}",
            lambda request: httpx.Response(204),
        )

        assert asyncio.run(client.attachments.remove_attachment(INTERNAL_ID, ATTACHMENT_ID)) is None
        assert server.last_request().method == "DELETE"

    def test_remove_all_attachments(self, client, server):
        server.add_handler(
            "DELETE", f"transactions/{INTERNAL_ID}/attachments", lambda request: httpx.Response(204)
        )

        asyncio.run(client.attachments.remove_all_attachments(INTERNAL_ID))

        assert server.last_request().url.path == f"/v2/transactions/{INTERNAL_ID}/attachments"


class TestErrors:
    """Tests for how failures reach the caller."""

    def test_non_2xx_raises_api_response_error(self, client, server):
        server.add_json("GET", "organizations/0", {"message": "Unauthorized"}, status_code=401)

        with pytest.raises(ApiResponseError) as excinfo:
            asyncio.run(client.organizations.get_organization())

        assert excinfo.value.status_code == 401
        assert b"Unauthorized" in excinfo.value.content

    def test_invalid_json_raises_converter_error(self, client, server):
        server.add_handler(
            "GET", "organizations/0", lambda request: httpx.Response(200, content=b"<html>")
        )

        with pytest.raises(ConverterError):
            asyncio.run(client.organizations.get_organization())

    def test_unknown_enum_in_response_fails_the_call(self, client, server):
        server.add_json(
            "GET",
            f"transactions/{INTERNAL_ID}",
            {"transaction": make_transaction_payload(status="archived")},
        )

        with pytest.raises(ConverterError) as excinfo:
            asyncio.run(client.transactions.get_transaction(INTERNAL_ID))
        assert "archived" in str(excinfo.value)

    def test_transport_error_is_not_wrapped(self, client, server):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        server.add_handler("GET", "organizations/0", fail)

        with pytest.raises(httpx.ConnectError):
            asyncio.run(client.organizations.get_organization())


class TestOAuthAuthentication:
    def test_missing_tokens_fail_before_sending(self, server):
        client = create_client(ClientConfiguration(OAuthAuthentication()), transport=server.transport)

        with pytest.raises(MissingOAuthTokensError):
            asyncio.run(client.organizations.get_organization())

        assert server.requests == []

    def test_tokens_set_after_creation_are_used(self, server, organization_payload):
        authentication = OAuthAuthentication()
        client = create_client(ClientConfiguration(authentication), transport=server.transport)
        server.add_json("GET", "organizations/0", organization_payload)

        authentication.oauth_tokens = OAuthTokens(
            "access-1", "refresh-1", datetime.now(timezone.utc) + timedelta(hours=1)
        )
        asyncio.run(client.organizations.get_organization())

        assert server.last_request().headers["Authorization"] == "Bearer access-1"


class TestClose:
    """Tests for close-then-use."""

    def test_every_operation_fails_after_close(self, client, server, organization_payload):
        server.add_json("GET", "organizations/0", organization_payload)
        asyncio.run(client.organizations.get_organization())

        asyncio.run(client.close())

        assert client.is_closed
        calls = [
            lambda: client.organizations.get_organization(),
            lambda: client.transactions.get_transaction_list("acme-corp-1111"),
            lambda: client.transactions.get_transaction(INTERNAL_ID),
            lambda: client.memberships.get_membership_list(),
            lambda: client.labels.get_label_list(),
            lambda: client.attachments.get_attachment(ATTACHMENT_ID),
            lambda: client.attachments.get_attachment_list(INTERNAL_ID),
            lambda: client.attachments.add_attachment(INTERNAL_ID, AttachmentType.PNG, io.BytesIO(b"png")),
            lambda: client.attachments.remove_attachment(INTERNAL_ID, ATTACHMENT_ID),
            lambda: client.attachments.remove_all_attachments(INTERNAL_ID),
        ]
        for call in calls:
            with pytest.raises(ClientClosedError):
                asyncio.run(call())
        assert len(server.requests) == 1

    def test_pure_oauth_operations_fail_after_close(self, client):
        credentials = OAuthCredentials("client-id", "client-secret", "https://example.com/cb")
        asyncio.run(client.close())

        with pytest.raises(ClientClosedError):
            client.oauth.get_login_uri(credentials, "state")
        with pytest.raises(ClientClosedError):
            client.oauth.extract_code_and_unique_state_from_redirect_uri(
                "https://example.com/cb?code=c&state=s"
            )

    def test_add_attachment_after_close_does_not_read_input(self, client):
        byte_input = io.BytesIO(b"png")
        asyncio.run(client.close())

        with pytest.raises(ClientClosedError):
            asyncio.run(client.attachments.add_attachment(INTERNAL_ID, AttachmentType.PNG, byte_input))

        assert byte_input.tell() == 0

    def test_close_is_idempotent(self, client):
        asyncio.run(client.close())
        asyncio.run(client.close())

        assert client.is_closed

    def test_async_context_manager_closes(self, client):
        async def use():
            async with client as c:
                assert not c.is_closed

        asyncio.run(use())

        assert client.is_closed
