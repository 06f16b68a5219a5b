"""Wire-level calls to the Qonto API.

Each method sends one request and returns the decoded JSON payload (or
nothing for calls without a response body). Conversion to domain entities
happens in the client, not here.
"""

import asyncio
import base64
import json
from typing import Any, BinaryIO, Optional, Sequence

from qontoclient.api.transport import AUTHORIZATION, HttpTransport, TransportResponse
from qontoclient.config import BaseUri, ClientConfiguration
from qontoclient.domain.attachments import AttachmentType, read_byte_input
from qontoclient.domain.errors import ApiResponseError, ConverterError

API_SERVER_BASE_URI = BaseUri(scheme="https", host="thirdparty.qonto.com")
OAUTH_SERVER_BASE_URI = BaseUri(scheme="https", host="oauth.qonto.com")
API_VERSION_PATH = "v2"
OAUTH_BASE_PATH = "oauth2"

TRANSACTION_INCLUDES = (("includes[]", "labels"), ("includes[]", "attachments"))


def basic_authorization(client_id: str, client_secret: str) -> str:
    """Return the HTTP Basic header value for OAuth token calls."""
    encoded = base64.b64encode(f"{client_id}:{client_secret}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


class QontoService:
    """Endpoints of the API and OAuth servers."""

    def __init__(self, configuration: ClientConfiguration, transport: HttpTransport):
        http_configuration = configuration.http_configuration
        api_server = http_configuration.api_server_base_uri or API_SERVER_BASE_URI
        self.oauth_server = http_configuration.oauth_server_base_uri or OAUTH_SERVER_BASE_URI
        self.api_base_uri = f"{api_server}/{API_VERSION_PATH}/"
        self.oauth_base_uri = f"{self.oauth_server}/{OAUTH_BASE_PATH}/"
        self.transport = transport

    def ensure_open(self) -> None:
        self.transport.ensure_open()

    async def _call(
        self,
        method: str,
        url: str,
        params: Optional[Sequence[tuple[str, Any]]] = None,
        headers: Optional[dict[str, str]] = None,
        data: Optional[dict[str, str]] = None,
        files: Optional[dict[str, tuple[str, bytes, str]]] = None,
    ) -> TransportResponse:
        response = await self.transport.send(
            method, url, params=params, headers=headers, data=data, files=files
        )
        if not 200 <= response.status_code < 300:
            raise ApiResponseError(response.status_code, response.content, response.url)
        return response

    async def _get_json(self, url: str, params: Optional[Sequence[tuple[str, Any]]] = None) -> Any:
        return _decode(await self._call("GET", url, params=params))

    # OAuth

    async def get_oauth_tokens(
        self, client_id: str, client_secret: str, redirect_uri: str, code: str
    ) -> Any:
        response = await self._call(
            "POST",
            self.oauth_base_uri + "token",
            headers={AUTHORIZATION: basic_authorization(client_id, client_secret)},
            data={
                "code": code,
                "redirect_uri": redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        return _decode(response)

    async def refresh_oauth_tokens(
        self, client_id: str, client_secret: str, redirect_uri: str, refresh_token: str
    ) -> Any:
        response = await self._call(
            "POST",
            self.oauth_base_uri + "token",
            headers={AUTHORIZATION: basic_authorization(client_id, client_secret)},
            data={
                "refresh_token": refresh_token,
                "redirect_uri": redirect_uri,
                "grant_type": "refresh_token",
            },
        )
        return _decode(response)

    # API

    async def get_organization(self) -> Any:
        return await self._get_json(self.api_base_uri + "organizations/0")

    async def get_transaction_list(
        self,
        bank_account_slug: str,
        status: Sequence[str],
        updated_at_from: Optional[str],
        updated_at_to: Optional[str],
        settled_at_from: Optional[str],
        settled_at_to: Optional[str],
        sort_by: str,
        page_index: int,
        items_per_page: int,
    ) -> Any:
        params: list[tuple[str, Any]] = [("slug", bank_account_slug)]
        params.extend(("status[]", s) for s in status)
        params.extend(
            [
                ("updated_at_from", updated_at_from),
                ("updated_at_to", updated_at_to),
                ("settled_at_from", settled_at_from),
                ("settled_at_to", settled_at_to),
                ("sort_by", sort_by),
                ("current_page", page_index),
                ("per_page", items_per_page),
            ]
        )
        params.extend(TRANSACTION_INCLUDES)
        return await self._get_json(self.api_base_uri + "transactions", params)

    async def get_transaction(self, internal_id: str) -> Any:
        return await self._get_json(
            self.api_base_uri + f"transactions/{internal_id}", TRANSACTION_INCLUDES
        )

    async def get_membership_list(self, page_index: int, items_per_page: int) -> Any:
        return await self._get_json(
            self.api_base_uri + "memberships",
            [("current_page", page_index), ("per_page", items_per_page)],
        )

    async def get_label_list(self, page_index: int, items_per_page: int) -> Any:
        return await self._get_json(
            self.api_base_uri + "labels",
            [("current_page", page_index), ("per_page", items_per_page)],
        )

    async def get_attachment(self, attachment_id: str) -> Any:
        return await self._get_json(self.api_base_uri + f"attachments/{attachment_id}")

    async def get_attachment_list(self, transaction_internal_id: str) -> Any:
        return await self._get_json(
            self.api_base_uri + f"transactions/{transaction_internal_id}/attachments"
        )

    async def add_attachment(
        self, transaction_internal_id: str, attachment_type: AttachmentType, byte_input: BinaryIO
    ) -> None:
        # The input belongs to the caller and stays open
        content = await asyncio.to_thread(read_byte_input, byte_input)
        await self._call(
            "POST",
            self.api_base_uri + f"transactions/{transaction_internal_id}/attachments",
            files={
                "file": (
                    f"file.{attachment_type.extension}",
                    content,
                    attachment_type.content_type,
                )
            },
        )

    async def remove_attachment(self, transaction_internal_id: str, attachment_id: str) -> None:
        await self._call(
            "DELETE",
            self.api_base_uri + f"transactions/{transaction_internal_id}/attachments/{attachment_id}",
        )

    async def remove_all_attachments(self, transaction_internal_id: str) -> None:
        await self._call(
            "DELETE", self.api_base_uri + f"transactions/{transaction_internal_id}/attachments"
        )

    async def close(self) -> None:
        await self.transport.close()


def _decode(response: TransportResponse) -> Any:
    try:
        return json.loads(response.content)
    except ValueError as e:
        raise ConverterError(f"Invalid JSON in response from {response.url}: {e}") from e
