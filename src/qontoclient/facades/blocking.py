"""Blocking facade.

Every method runs the matching coroutine of the wrapped QontoClient on the
managed event loop and blocks the calling thread until it completes. The
value is returned, or the exception raised by the call is re-raised as is.
"""

from typing import BinaryIO, Optional, Sequence

from qontoclient.api.base import ALL_SCOPES
from qontoclient.api.client import QontoClient
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
from qontoclient.facades.loop import EventLoopThread, get_default_loop_thread


class BlockingOAuth:
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        self._oauth = client.oauth
        self._runner = runner

    def get_login_uri(
        self,
        oauth_credentials: OAuthCredentials,
        unique_state: str,
        scopes: Sequence[OAuthScope] = ALL_SCOPES,
    ) -> str:
        return self._oauth.get_login_uri(oauth_credentials, unique_state, scopes)

    def extract_code_and_unique_state_from_redirect_uri(
        self, redirect_uri: str
    ) -> Optional[OAuthCodeAndUniqueState]:
        return self._oauth.extract_code_and_unique_state_from_redirect_uri(redirect_uri)

    def get_tokens(self, oauth_credentials: OAuthCredentials, code: str) -> OAuthTokens:
        return self._runner.run(self._oauth.get_tokens(oauth_credentials, code))

    def refresh_tokens(
        self, oauth_credentials: OAuthCredentials, oauth_tokens: OAuthTokens
    ) -> OAuthTokens:
        return self._runner.run(self._oauth.refresh_tokens(oauth_credentials, oauth_tokens))


class BlockingOrganizations:
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        self._organizations = client.organizations
        self._runner = runner

    def get_organization(self) -> Organization:
        return self._runner.run(self._organizations.get_organization())


class BlockingTransactions:
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        self._transactions = client.transactions
        self._runner = runner

    def get_transaction_list(
        self,
        bank_account_slug: str,
        status: frozenset[TransactionStatus] = frozenset(),
        updated_date_range: Optional[DateRange] = None,
        settled_date_range: Optional[DateRange] = None,
        sort_field: SortField = SortField.SETTLED_DATE,
        sort_order: SortOrder = SortOrder.DESCENDING,
        pagination: Pagination = Pagination(),
    ) -> Page[Transaction]:
        return self._runner.run(
            self._transactions.get_transaction_list(
                bank_account_slug,
                status=status,
                updated_date_range=updated_date_range,
                settled_date_range=settled_date_range,
                sort_field=sort_field,
                sort_order=sort_order,
                pagination=pagination,
            )
        )

    def get_all_transaction_list(
        self,
        bank_account_slug: str,
        status: frozenset[TransactionStatus] = frozenset(),
        updated_date_range: Optional[DateRange] = None,
        settled_date_range: Optional[DateRange] = None,
        sort_field: SortField = SortField.SETTLED_DATE,
        sort_order: SortOrder = SortOrder.DESCENDING,
        pagination: Pagination = Pagination(),
    ) -> list[Transaction]:
        return self._runner.run(
            self._transactions.get_all_transaction_list(
                bank_account_slug,
                status=status,
                updated_date_range=updated_date_range,
                settled_date_range=settled_date_range,
                sort_field=sort_field,
                sort_order=sort_order,
                pagination=pagination,
            )
        )

    def get_transaction(self, internal_id: str) -> Transaction:
        return self._runner.run(self._transactions.get_transaction(internal_id))


class BlockingMemberships:
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        self._memberships = client.memberships
        self._runner = runner

    def get_membership_list(self, pagination: Pagination = Pagination()) -> Page[Membership]:
        return self._runner.run(self._memberships.get_membership_list(pagination))

    def get_all_membership_list(self, pagination: Pagination = Pagination()) -> list[Membership]:
        return self._runner.run(self._memberships.get_all_membership_list(pagination))


class BlockingLabels:
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        self._labels = client.labels
        self._runner = runner

    def get_label_list(self, pagination: Pagination = Pagination()) -> Page[Label]:
        return self._runner.run(self._labels.get_label_list(pagination))

    def get_all_label_list(self, pagination: Pagination = Pagination()) -> list[Label]:
        return self._runner.run(self._labels.get_all_label_list(pagination))


class BlockingAttachments:
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        self._attachments = client.attachments
        self._runner = runner

    def get_attachment(self, attachment_id: str) -> Attachment:
        return self._runner.run(self._attachments.get_attachment(attachment_id))

    def get_attachment_list(self, transaction_internal_id: str) -> list[Attachment]:
        return self._runner.run(self._attachments.get_attachment_list(transaction_internal_id))

    def add_attachment(
        self,
        transaction_internal_id: str,
        attachment_type: AttachmentType,
        byte_input: BinaryIO,
    ) -> None:
        self._runner.run(
            self._attachments.add_attachment(transaction_internal_id, attachment_type, byte_input)
        )

    def remove_attachment(self, transaction_internal_id: str, attachment_id: str) -> None:
        self._runner.run(
            self._attachments.remove_attachment(transaction_internal_id, attachment_id)
        )

    def remove_all_attachments(self, transaction_internal_id: str) -> None:
        self._runner.run(self._attachments.remove_all_attachments(transaction_internal_id))


class BlockingQontoClient:
    """Blocking version of a Qonto client, for code that is not async."""

    def __init__(self, client: QontoClient, runner: Optional[EventLoopThread] = None):
        """Wrap an async client.

        Args:
            client: The client every call is delegated to
            runner: Event loop thread to run calls on (default: the shared one)
        """
        self.client = client
        self._runner = runner or get_default_loop_thread()
        self.oauth = BlockingOAuth(client, self._runner)
        self.organizations = BlockingOrganizations(client, self._runner)
        self.transactions = BlockingTransactions(client, self._runner)
        self.memberships = BlockingMemberships(client, self._runner)
        self.labels = BlockingLabels(client, self._runner)
        self.attachments = BlockingAttachments(client, self._runner)

    def close(self) -> None:
        """Close the wrapped client. It can no longer be used afterwards."""
        self._runner.run(self.client.close())

    def __enter__(self) -> "BlockingQontoClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
