"""Callback facade.

Every method starts the matching coroutine on the managed event loop and
returns None straight away. The handler is then called exactly once, on
the loop thread, with a Result holding either the value or the exception.
It is never called on the caller's stack before the method returns.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, BinaryIO, Callable, Generic, Optional, Sequence, TypeVar

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

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a call: a value on success or an exception on failure."""

    value: Optional[T] = None
    exception: Optional[BaseException] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, exception: BaseException) -> "Result[T]":
        return cls(exception=exception)

    @property
    def is_success(self) -> bool:
        return self.exception is None

    @property
    def is_failure(self) -> bool:
        return self.exception is not None

    def get_or_none(self) -> Optional[T]:
        return self.value if self.is_success else None

    def exception_or_none(self) -> Optional[BaseException]:
        return self.exception

    def get_or_raise(self) -> T:
        """Return the value, or raise the exception of a failed call."""
        if self.exception is not None:
            raise self.exception
        return self.value

    def fold(self, on_success: Callable[[T], R], on_failure: Callable[[BaseException], R]) -> R:
        if self.exception is not None:
            return on_failure(self.exception)
        return on_success(self.value)


OnResult = Callable[[Result[T]], None]


async def run_catching(awaitable: Awaitable[T]) -> Result[T]:
    """Await and wrap the outcome in a Result.

    A cancelled call is a failure holding asyncio.CancelledError.
    """
    try:
        return Result.success(await awaitable)
    except (Exception, asyncio.CancelledError) as e:
        return Result.failure(e)


class _CallbackGroup:
    def __init__(self, runner: EventLoopThread):
        self._runner = runner

    def _launch(self, awaitable: Awaitable[Any], on_result: OnResult) -> None:
        async def run_and_callback() -> None:
            result = await run_catching(awaitable)
            try:
                on_result(result)
            except Exception:
                logger.exception("Result handler raised")

        self._runner.submit(run_and_callback())


class CallbackOAuth(_CallbackGroup):
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

    def get_tokens(
        self, oauth_credentials: OAuthCredentials, code: str, on_result: OnResult[OAuthTokens]
    ) -> None:
        self._launch(self._oauth.get_tokens(oauth_credentials, code), on_result)

    def refresh_tokens(
        self,
        oauth_credentials: OAuthCredentials,
        oauth_tokens: OAuthTokens,
        on_result: OnResult[OAuthTokens],
    ) -> None:
        self._launch(self._oauth.refresh_tokens(oauth_credentials, oauth_tokens), on_result)


class CallbackOrganizations(_CallbackGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._organizations = client.organizations

    def get_organization(self, on_result: OnResult[Organization]) -> None:
        self._launch(self._organizations.get_organization(), on_result)


class CallbackTransactions(_CallbackGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._transactions = client.transactions

    def get_transaction_list(
        self,
        bank_account_slug: str,
        on_result: OnResult[Page[Transaction]],
        status: frozenset[TransactionStatus] = frozenset(),
        updated_date_range: Optional[DateRange] = None,
        settled_date_range: Optional[DateRange] = None,
        sort_field: SortField = SortField.SETTLED_DATE,
        sort_order: SortOrder = SortOrder.DESCENDING,
        pagination: Pagination = Pagination(),
    ) -> None:
        self._launch(
            self._transactions.get_transaction_list(
                bank_account_slug,
                status=status,
                updated_date_range=updated_date_range,
                settled_date_range=settled_date_range,
                sort_field=sort_field,
                sort_order=sort_order,
                pagination=pagination,
            ),
            on_result,
        )

    def get_all_transaction_list(
        self,
        bank_account_slug: str,
        on_result: OnResult[list[Transaction]],
        status: frozenset[TransactionStatus] = frozenset(),
        updated_date_range: Optional[DateRange] = None,
        settled_date_range: Optional[DateRange] = None,
        sort_field: SortField = SortField.SETTLED_DATE,
        sort_order: SortOrder = SortOrder.DESCENDING,
        pagination: Pagination = Pagination(),
    ) -> None:
        self._launch(
            self._transactions.get_all_transaction_list(
                bank_account_slug,
                status=status,
                updated_date_range=updated_date_range,
                settled_date_range=settled_date_range,
                sort_field=sort_field,
                sort_order=sort_order,
                pagination=pagination,
            ),
            on_result,
        )

    def get_transaction(self, internal_id: str, on_result: OnResult[Transaction]) -> None:
        self._launch(self._transactions.get_transaction(internal_id), on_result)


class CallbackMemberships(_CallbackGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._memberships = client.memberships

    def get_membership_list(
        self, on_result: OnResult[Page[Membership]], pagination: Pagination = Pagination()
    ) -> None:
        self._launch(self._memberships.get_membership_list(pagination), on_result)

    def get_all_membership_list(
        self, on_result: OnResult[list[Membership]], pagination: Pagination = Pagination()
    ) -> None:
        self._launch(self._memberships.get_all_membership_list(pagination), on_result)


class CallbackLabels(_CallbackGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._labels = client.labels

    def get_label_list(
        self, on_result: OnResult[Page[Label]], pagination: Pagination = Pagination()
    ) -> None:
        self._launch(self._labels.get_label_list(pagination), on_result)

    def get_all_label_list(
        self, on_result: OnResult[list[Label]], pagination: Pagination = Pagination()
    ) -> None:
        self._launch(self._labels.get_all_label_list(pagination), on_result)


class CallbackAttachments(_CallbackGroup):
    def __init__(self, client: QontoClient, runner: EventLoopThread):
        super().__init__(runner)
        self._attachments = client.attachments

    def get_attachment(self, attachment_id: str, on_result: OnResult[Attachment]) -> None:
        self._launch(self._attachments.get_attachment(attachment_id), on_result)

    def get_attachment_list(
        self, transaction_internal_id: str, on_result: OnResult[list[Attachment]]
    ) -> None:
        self._launch(self._attachments.get_attachment_list(transaction_internal_id), on_result)

    def add_attachment(
        self,
        transaction_internal_id: str,
        attachment_type: AttachmentType,
        byte_input: BinaryIO,
        on_result: OnResult[None],
    ) -> None:
        self._launch(
            self._attachments.add_attachment(transaction_internal_id, attachment_type, byte_input),
            on_result,
        )

    def remove_attachment(
        self, transaction_internal_id: str, attachment_id: str, on_result: OnResult[None]
    ) -> None:
        self._launch(
            self._attachments.remove_attachment(transaction_internal_id, attachment_id), on_result
        )

    def remove_all_attachments(self, transaction_internal_id: str, on_result: OnResult[None]) -> None:
        self._launch(self._attachments.remove_all_attachments(transaction_internal_id), on_result)


class CallbackQontoClient:
    """Callback based version of a Qonto client.

    Useful from code that neither awaits nor wants to block, e.g. GUI event
    handlers. Handlers run on the event loop thread: hand the result over to
    your own thread if needed, and do not make blocking facade calls from
    inside a handler.
    """

    def __init__(self, client: QontoClient, runner: Optional[EventLoopThread] = None):
        self.client = client
        self._runner = runner or get_default_loop_thread()
        self.oauth = CallbackOAuth(client, self._runner)
        self.organizations = CallbackOrganizations(client, self._runner)
        self.transactions = CallbackTransactions(client, self._runner)
        self.memberships = CallbackMemberships(client, self._runner)
        self.labels = CallbackLabels(client, self._runner)
        self.attachments = CallbackAttachments(client, self._runner)

    def close(self) -> None:
        """Close the wrapped client and wait for it. It can no longer be used afterwards."""
        self._runner.run(self.client.close())
