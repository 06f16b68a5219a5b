"""Future facade.

Every method starts the matching coroutine on the managed event loop and
returns a concurrent.futures.Future straight away. Cancelling it is not
supported: cancel() returns False and the request runs to completion.
"""

from concurrent.futures import CancelledError, Future
from typing import Any, BinaryIO, Coroutine, Optional, Sequence, TypeVar

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

T = TypeVar("T")


class QontoFuture(Future):
    """Future that refuses cancellation."""

    def cancel(self) -> bool:
        return False


def _mirror(source: "Future[T]", target: QontoFuture) -> None:
    if source.cancelled():
        # Only happens when the loop is stopped under a pending request
        target.set_exception(CancelledError())
        return
    exception = source.exception()
    if exception is not None:
        target.set_exception(exception)
    else:
        target.set_result(source.result())


class _FutureGroup:
    def __init__(self, runner: EventLoopThread):
        self._runner = runner

    def _launch(self, coroutine: Coroutine[Any, Any, T]) -> "Future[T]":
        future = QontoFuture()
        future.set_running_or_notify_cancel()
        self._runner.submit(coroutine).add_done_callback(lambda f: _mirror(f, future))
        return future


class FutureOAuth(_FutureGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._oauth = client.oauth

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

    def get_tokens(self, oauth_credentials: OAuthCredentials, code: str) -> "Future[OAuthTokens]":
        return self._launch(self._oauth.get_tokens(oauth_credentials, code))

    def refresh_tokens(
        self, oauth_credentials: OAuthCredentials, oauth_tokens: OAuthTokens
    ) -> "Future[OAuthTokens]":
        return self._launch(self._oauth.refresh_tokens(oauth_credentials, oauth_tokens))


class FutureOrganizations(_FutureGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._organizations = client.organizations

    def get_organization(self) -> "Future[Organization]":
        return self._launch(self._organizations.get_organization())


class FutureTransactions(_FutureGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._transactions = client.transactions

    def get_transaction_list(
        self,
        bank_account_slug: str,
        status: frozenset[TransactionStatus] = frozenset(),
        updated_date_range: Optional[DateRange] = None,
        settled_date_range: Optional[DateRange] = None,
        sort_field: SortField = SortField.SETTLED_DATE,
        sort_order: SortOrder = SortOrder.DESCENDING,
        pagination: Pagination = Pagination(),
    ) -> "Future[Page[Transaction]]":
        return self._launch(
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
    ) -> "Future[list[Transaction]]":
        return self._launch(
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

    def get_transaction(self, internal_id: str) -> "Future[Transaction]":
        return self._launch(self._transactions.get_transaction(internal_id))


class FutureMemberships(_FutureGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._memberships = client.memberships

    def get_membership_list(self, pagination: Pagination = Pagination()) -> "Future[Page[Membership]]":
        return self._launch(self._memberships.get_membership_list(pagination))

    def get_all_membership_list(self, pagination: Pagination = Pagination()) -> "Future[list[Membership]]":
        return self._launch(self._memberships.get_all_membership_list(pagination))


class FutureLabels(_FutureGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._labels = client.labels

    def get_label_list(self, pagination: Pagination = Pagination()) -> "Future[Page[Label]]":
        return self._launch(self._labels.get_label_list(pagination))

    def get_all_label_list(self, pagination: Pagination = Pagination()) -> "Future[list[Label]]":
        return self._launch(self._labels.get_all_label_list(pagination))


class FutureAttachments(_FutureGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._attachments = client.attachments

    def get_attachment(self, attachment_id: str) -> "Future[Attachment]":
        return self._launch(self._attachments.get_attachment(attachment_id))

    def get_attachment_list(self, transaction_internal_id: str) -> "Future[list[Attachment]]":
        return self._launch(self._attachments.get_attachment_list(transaction_internal_id))

    def add_attachment(
        self,
        transaction_internal_id: str,
        attachment_type: AttachmentType,
        byte_input: BinaryIO,
    ) -> "Future[None]":
        return self._launch(
            self._attachments.add_attachment(transaction_internal_id, attachment_type, byte_input)
        )

    def remove_attachment(self, transaction_internal_id: str, attachment_id: str) -> "Future[None]":
        return self._launch(
            self._attachments.remove_attachment(transaction_internal_id, attachment_id)
        )

    def remove_all_attachments(self, transaction_internal_id: str) -> "Future[None]":
        return self._launch(self._attachments.remove_all_attachments(transaction_internal_id))


class FutureQontoClient:
    """Future based version of a Qonto client."""

    def __init__(self, client: QontoClient, runner: Optional[EventLoopThread] = None):
        self.client = client
        self._runner = runner or get_default_loop_thread()
        self.oauth = FutureOAuth(client, self._runner)
        self.organizations = FutureOrganizations(client, self._runner)
        self.transactions = FutureTransactions(client, self._runner)
        self.memberships = FutureMemberships(client, self._runner)
        self.labels = FutureLabels(client, self._runner)
        self.attachments = FutureAttachments(client, self._runner)

    def close(self) -> "Future[None]":
        """Close the wrapped client. It can no longer be used afterwards."""
        return _FutureGroup(self._runner)._launch(self.client.close())
