"""Qonto API client: the async implementation of the capability groups."""

import logging
from typing import BinaryIO, Optional, Sequence
from urllib.parse import parse_qs, quote, urlencode, urlsplit

from qontoclient.api import mappers
from qontoclient.api.base import (
    ALL_SCOPES,
    Attachments,
    Labels,
    Memberships,
    OAuth,
    Organizations,
    Transactions,
)
from qontoclient.api.dates import date_to_api
from qontoclient.api.pagination import page_from_envelope
from qontoclient.api.service import OAUTH_BASE_PATH, QontoService
from qontoclient.config import ClientConfiguration
from qontoclient.domain.attachments import AttachmentType
from qontoclient.domain.entities import (
    Attachment,
    DateRange,
    Label,
    Membership,
    OAuthCodeAndUniqueState,
    OAuthCredentials,
    OAuthScope,
    OAuthTokens,
    Organization,
    Page,
    Pagination,
    SortField,
    SortOrder,
    Transaction,
    TransactionStatus,
)

logger = logging.getLogger(__name__)


class OAuthApi(OAuth):
    def __init__(self, service: QontoService):
        self._service = service

    def get_login_uri(
        self,
        oauth_credentials: OAuthCredentials,
        unique_state: str,
        scopes: Sequence[OAuthScope] = ALL_SCOPES,
    ) -> str:
        self._service.ensure_open()
        query = urlencode(
            [
                ("client_id", oauth_credentials.client_id),
                ("redirect_uri", oauth_credentials.redirect_uri),
                ("response_type", "code"),
                ("scope", " ".join(mappers.oauth_scope_converter.model_to_api(s) for s in scopes)),
                ("state", unique_state),
            ],
            quote_via=quote,
        )
        return f"{self._service.oauth_server}/{OAUTH_BASE_PATH}/auth?{query}"

    def extract_code_and_unique_state_from_redirect_uri(
        self, redirect_uri: str
    ) -> Optional[OAuthCodeAndUniqueState]:
        self._service.ensure_open()
        try:
            parameters = parse_qs(urlsplit(redirect_uri).query)
        except (ValueError, TypeError, AttributeError):
            return None
        code = parameters.get("code")
        state = parameters.get("state")
        if not code or not state:
            return None
        return OAuthCodeAndUniqueState(code=code[0], unique_state=state[0])

    async def get_tokens(self, oauth_credentials: OAuthCredentials, code: str) -> OAuthTokens:
        payload = await self._service.get_oauth_tokens(
            client_id=oauth_credentials.client_id,
            client_secret=oauth_credentials.client_secret,
            redirect_uri=oauth_credentials.redirect_uri,
            code=code,
        )
        return mappers.oauth_tokens_to_domain(payload)

    async def refresh_tokens(
        self, oauth_credentials: OAuthCredentials, oauth_tokens: OAuthTokens
    ) -> OAuthTokens:
        payload = await self._service.refresh_oauth_tokens(
            client_id=oauth_credentials.client_id,
            client_secret=oauth_credentials.client_secret,
            redirect_uri=oauth_credentials.redirect_uri,
            refresh_token=oauth_tokens.refresh_token,
        )
        return mappers.oauth_tokens_to_domain(payload)


class OrganizationsApi(Organizations):
    def __init__(self, service: QontoService):
        self._service = service

    async def get_organization(self) -> Organization:
        payload = await self._service.get_organization()
        return mappers.organization_envelope_to_domain(payload)


class TransactionsApi(Transactions):
    def __init__(self, service: QontoService):
        self._service = service

    async def get_transaction_list(
        self,
        bank_account_slug: str,
        status: frozenset[TransactionStatus] = frozenset(),
        updated_date_range: Optional[DateRange] = None,
        settled_date_range: Optional[DateRange] = None,
        sort_field: SortField = SortField.SETTLED_DATE,
        sort_order: SortOrder = SortOrder.DESCENDING,
        pagination: Pagination = Pagination(),
    ) -> Page[Transaction]:
        # Enum order keeps the query string stable whatever the set order
        status_api = [
            mappers.transaction_status_converter.model_to_api(s)
            for s in TransactionStatus
            if s in status
        ]
        updated = updated_date_range or DateRange()
        settled = settled_date_range or DateRange()
        payload = await self._service.get_transaction_list(
            bank_account_slug=bank_account_slug,
            status=status_api,
            updated_at_from=date_to_api(updated.from_date),
            updated_at_to=date_to_api(updated.to_date),
            settled_at_from=date_to_api(settled.from_date),
            settled_at_to=date_to_api(settled.to_date),
            sort_by=mappers.sort_by_to_api(sort_field, sort_order),
            page_index=pagination.coerced_page_index(),
            items_per_page=pagination.items_per_page,
        )
        return page_from_envelope(payload, mappers.transaction_list_to_domain(payload))

    async def get_transaction(self, internal_id: str) -> Transaction:
        payload = await self._service.get_transaction(internal_id)
        return mappers.transaction_envelope_to_domain(payload)


class MembershipsApi(Memberships):
    def __init__(self, service: QontoService):
        self._service = service

    async def get_membership_list(self, pagination: Pagination = Pagination()) -> Page[Membership]:
        payload = await self._service.get_membership_list(
            pagination.coerced_page_index(), pagination.items_per_page
        )
        return page_from_envelope(payload, mappers.membership_list_to_domain(payload))


class LabelsApi(Labels):
    def __init__(self, service: QontoService):
        self._service = service

    async def get_label_list(self, pagination: Pagination = Pagination()) -> Page[Label]:
        payload = await self._service.get_label_list(
            pagination.coerced_page_index(), pagination.items_per_page
        )
        return page_from_envelope(payload, mappers.label_list_to_domain(payload))


class AttachmentsApi(Attachments):
    def __init__(self, service: QontoService):
        self._service = service

    async def get_attachment(self, attachment_id: str) -> Attachment:
        payload = await self._service.get_attachment(attachment_id)
        return mappers.attachment_envelope_to_domain(payload)

    async def get_attachment_list(self, transaction_internal_id: str) -> list[Attachment]:
        payload = await self._service.get_attachment_list(transaction_internal_id)
        return mappers.attachment_list_envelope_to_domain(payload)

    async def add_attachment(
        self,
        transaction_internal_id: str,
        attachment_type: AttachmentType,
        byte_input: BinaryIO,
    ) -> None:
        self._service.ensure_open()
        await self._service.add_attachment(transaction_internal_id, attachment_type, byte_input)
        logger.info(
            "Added %s attachment to transaction %s", attachment_type.name, transaction_internal_id
        )

    async def remove_attachment(self, transaction_internal_id: str, attachment_id: str) -> None:
        await self._service.remove_attachment(transaction_internal_id, attachment_id)
        logger.info(
            "Removed attachment %s from transaction %s", attachment_id, transaction_internal_id
        )

    async def remove_all_attachments(self, transaction_internal_id: str) -> None:
        await self._service.remove_all_attachments(transaction_internal_id)
        logger.info("Removed all attachments from transaction %s", transaction_internal_id)


class QontoClient:
    """Asynchronous Qonto client.

    Operations are reached through one attribute per capability group:
    oauth, organizations, transactions, memberships, labels and attachments.
    All groups share the same transport. Its connection pool is bound to the
    event loop that first used it, so drive a client from one loop only. The
    facades all run their calls on the managed loop of facades.loop.

    After close() the client is permanently unusable: every operation,
    including the ones that make no network call, raises ClientClosedError.
    """

    def __init__(self, configuration: ClientConfiguration, service: QontoService):
        """Initialize the client.

        Args:
            configuration: Client configuration
            service: Service bound to the transport this client owns
        """
        self.configuration = configuration
        self._service = service
        self.oauth: OAuth = OAuthApi(service)
        self.organizations: Organizations = OrganizationsApi(service)
        self.transactions: Transactions = TransactionsApi(service)
        self.memberships: Memberships = MembershipsApi(service)
        self.labels: Labels = LabelsApi(service)
        self.attachments: Attachments = AttachmentsApi(service)

    @property
    def is_closed(self) -> bool:
        return self._service.transport.is_closed

    async def close(self) -> None:
        """Release the transport. The client can no longer be used afterwards."""
        await self._service.close()
        logger.debug("Client closed")

    async def __aenter__(self) -> "QontoClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
