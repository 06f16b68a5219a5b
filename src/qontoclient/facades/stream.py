"""Stream facade.

Every method returns a lazy async iterator. Nothing is requested until the
first iteration, which performs exactly one call and yields exactly one
item, or raises. The call itself runs on the managed event loop, like the
other facades, and its outcome is handed back to the consuming loop.

The iter_*_pages helpers go further and yield every page in order, fetching
the next one only once the previous one has been consumed.
"""

import asyncio
from typing import AsyncIterator, Awaitable, BinaryIO, Callable, Optional, Sequence, TypeVar

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


async def _single(runner: EventLoopThread, fetch: Callable[[], Awaitable[T]]) -> AsyncIterator[T]:
    yield await asyncio.wrap_future(runner.submit(fetch()))


async def _pages(
    runner: EventLoopThread,
    fetch_page: Callable[[Pagination], Awaitable[Page[T]]],
    pagination: Pagination,
) -> AsyncIterator[Page[T]]:
    next_pagination: Optional[Pagination] = pagination
    while next_pagination is not None:
        page = await asyncio.wrap_future(runner.submit(fetch_page(next_pagination)))
        yield page
        next_pagination = page.next_pagination


class _StreamGroup:
    def __init__(self, runner: EventLoopThread):
        self._runner = runner


class StreamOAuth(_StreamGroup):
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

    def get_tokens(self, oauth_credentials: OAuthCredentials, code: str) -> AsyncIterator[OAuthTokens]:
        return _single(self._runner, lambda: self._oauth.get_tokens(oauth_credentials, code))

    def refresh_tokens(
        self, oauth_credentials: OAuthCredentials, oauth_tokens: OAuthTokens
    ) -> AsyncIterator[OAuthTokens]:
        return _single(
            self._runner, lambda: self._oauth.refresh_tokens(oauth_credentials, oauth_tokens)
        )


class StreamOrganizations(_StreamGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._organizations = client.organizations

    def get_organization(self) -> AsyncIterator[Organization]:
        return _single(self._runner, self._organizations.get_organization)


class StreamTransactions(_StreamGroup):
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
    ) -> AsyncIterator[Page[Transaction]]:
        return _single(
            self._runner,
            lambda: self._fetch_page(
                bank_account_slug,
                status,
                updated_date_range,
                settled_date_range,
                sort_field,
                sort_order,
                pagination,
            )
        )

    def iter_transaction_pages(
        self,
        bank_account_slug: str,
        status: frozenset[TransactionStatus] = frozenset(),
        updated_date_range: Optional[DateRange] = None,
        settled_date_range: Optional[DateRange] = None,
        sort_field: SortField = SortField.SETTLED_DATE,
        sort_order: SortOrder = SortOrder.DESCENDING,
        pagination: Pagination = Pagination(),
    ) -> AsyncIterator[Page[Transaction]]:
        """Yield every page of transactions, starting at pagination."""
        return _pages(
            self._runner,
            lambda p: self._fetch_page(
                bank_account_slug,
                status,
                updated_date_range,
                settled_date_range,
                sort_field,
                sort_order,
                p,
            ),
            pagination,
        )

    def get_transaction(self, internal_id: str) -> AsyncIterator[Transaction]:
        return _single(self._runner, lambda: self._transactions.get_transaction(internal_id))

    def _fetch_page(
        self,
        bank_account_slug: str,
        status: frozenset[TransactionStatus],
        updated_date_range: Optional[DateRange],
        settled_date_range: Optional[DateRange],
        sort_field: SortField,
        sort_order: SortOrder,
        pagination: Pagination,
    ) -> Awaitable[Page[Transaction]]:
        return self._transactions.get_transaction_list(
            bank_account_slug,
            status=status,
            updated_date_range=updated_date_range,
            settled_date_range=settled_date_range,
            sort_field=sort_field,
            sort_order=sort_order,
            pagination=pagination,
        )


class StreamMemberships(_StreamGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._memberships = client.memberships

    def get_membership_list(self, pagination: Pagination = Pagination()) -> AsyncIterator[Page[Membership]]:
        return _single(self._runner, lambda: self._memberships.get_membership_list(pagination))

    def iter_membership_pages(self, pagination: Pagination = Pagination()) -> AsyncIterator[Page[Membership]]:
        """Yield every page of memberships, starting at pagination."""
        return _pages(self._runner, self._memberships.get_membership_list, pagination)


class StreamLabels(_StreamGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._labels = client.labels

    def get_label_list(self, pagination: Pagination = Pagination()) -> AsyncIterator[Page[Label]]:
        return _single(self._runner, lambda: self._labels.get_label_list(pagination))

    def iter_label_pages(self, pagination: Pagination = Pagination()) -> AsyncIterator[Page[Label]]:
        """Yield every page of labels, starting at pagination."""
        return _pages(self._runner, self._labels.get_label_list, pagination)


class StreamAttachments(_StreamGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._attachments = client.attachments

    def get_attachment(self, attachment_id: str) -> AsyncIterator[Attachment]:
        return _single(self._runner, lambda: self._attachments.get_attachment(attachment_id))

    def get_attachment_list(self, transaction_internal_id: str) -> AsyncIterator[list[Attachment]]:
        return _single(self._runner, lambda: self._attachments.get_attachment_list(transaction_internal_id))

    def add_attachment(
        self,
        transaction_internal_id: str,
        attachment_type: AttachmentType,
        byte_input: BinaryIO,
    ) -> AsyncIterator[None]:
        return _single(
            self._runner,
            lambda: self._attachments.add_attachment(
                transaction_internal_id, attachment_type, byte_input
            )
        )

    def remove_attachment(self, transaction_internal_id: str, attachment_id: str) -> AsyncIterator[None]:
        return _single(
            self._runner,
            lambda: self._attachments.remove_attachment(transaction_internal_id, attachment_id)
        )

    def remove_all_attachments(self, transaction_internal_id: str) -> AsyncIterator[None]:
        return _single(
            self._runner, lambda: self._attachments.remove_all_attachments(transaction_internal_id)
        )


class StreamQontoClient:
    """Stream based version of a Qonto client, for async consumers.

    Stopping the iteration early (or calling aclose() on the iterator) is the
    way to abandon a request that has not completed yet.
    """

    def __init__(self, client: QontoClient, runner: Optional[EventLoopThread] = None):
        """Wrap an async client.

        Args:
            client: The client every call is delegated to
            runner: Event loop thread to run calls on (default: the shared one)
        """
        self.client = client
        self._runner = runner or get_default_loop_thread()
        self.oauth = StreamOAuth(client, self._runner)
        self.organizations = StreamOrganizations(client, self._runner)
        self.transactions = StreamTransactions(client, self._runner)
        self.memberships = StreamMemberships(client, self._runner)
        self.labels = StreamLabels(client, self._runner)
        self.attachments = StreamAttachments(client, self._runner)

    async def close(self) -> None:
        """Close the wrapped client. It can no longer be used afterwards."""
        await asyncio.wrap_future(self._runner.submit(self.client.close()))
