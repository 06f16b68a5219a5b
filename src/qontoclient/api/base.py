"""Abstract API interface.

The operations are grouped by capability. A client exposes one object per
group (client.organizations, client.transactions, ...). Every network
operation is a coroutine with exactly one outcome: the converted value or
an exception.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Optional, Sequence

from qontoclient.api.walker import collect_all_pages
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

ALL_SCOPES: tuple[OAuthScope, ...] = tuple(OAuthScope)


class OAuth(ABC):
    """OAuth related APIs."""

    @abstractmethod
    def get_login_uri(
        self,
        oauth_credentials: OAuthCredentials,
        unique_state: str,
        scopes: Sequence[OAuthScope] = ALL_SCOPES,
    ) -> str:
        """Build the URI where the user logs in to authorize the application.

        No network call is made.

        Args:
            oauth_credentials: Application credentials
            unique_state: Opaque value echoed back on the redirect URI
            scopes: Requested scopes (default: all of them)

        Raises:
            ClientClosedError: If the client was closed
        """
        pass

    @abstractmethod
    def extract_code_and_unique_state_from_redirect_uri(
        self, redirect_uri: str
    ) -> Optional[OAuthCodeAndUniqueState]:
        """Extract the code and state from the URI the user was redirected to.

        Returns None if the URI cannot be parsed or lacks either parameter,
        meaning the authentication did not complete. A malformed URI never
        raises.

        Raises:
            ClientClosedError: If the client was closed
        """
        pass

    @abstractmethod
    async def get_tokens(self, oauth_credentials: OAuthCredentials, code: str) -> OAuthTokens:
        """Exchange an authorization code for tokens."""
        pass

    @abstractmethod
    async def refresh_tokens(
        self, oauth_credentials: OAuthCredentials, oauth_tokens: OAuthTokens
    ) -> OAuthTokens:
        """Get new tokens from a refresh token. Nothing calls this automatically."""
        pass


class Organizations(ABC):
    """Organization related APIs."""

    @abstractmethod
    async def get_organization(self) -> Organization:
        """Get the authenticated organization and its bank accounts.

        The bank accounts' slugs are needed to list transactions.
        """
        pass


class Transactions(ABC):
    """Transaction related APIs."""

    @abstractmethod
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
        """List the transactions of a bank account.

        Args:
            bank_account_slug: Slug of the bank account (see get_organization)
            status: Only return transactions with these statuses (empty: no filter)
            updated_date_range: Optional filter on the update date
            settled_date_range: Optional filter on the settled date
            sort_field: Sort key (default: settled date)
            sort_order: Sort order (default: descending)
            pagination: Page to fetch; indices below 1 are treated as 1
        """
        pass

    @abstractmethod
    async def get_transaction(self, internal_id: str) -> Transaction:
        """Get one transaction by its internal_id (not its display id)."""
        pass

    async def get_all_transaction_list(
        self,
        bank_account_slug: str,
        status: frozenset[TransactionStatus] = frozenset(),
        updated_date_range: Optional[DateRange] = None,
        settled_date_range: Optional[DateRange] = None,
        sort_field: SortField = SortField.SETTLED_DATE,
        sort_order: SortOrder = SortOrder.DESCENDING,
        pagination: Pagination = Pagination(),
    ) -> list[Transaction]:
        """Walk every page of get_transaction_list, starting at pagination."""

        async def fetch_page(page_pagination: Pagination) -> Page[Transaction]:
            return await self.get_transaction_list(
                bank_account_slug,
                status=status,
                updated_date_range=updated_date_range,
                settled_date_range=settled_date_range,
                sort_field=sort_field,
                sort_order=sort_order,
                pagination=page_pagination,
            )

        return await collect_all_pages(fetch_page, pagination)


class Memberships(ABC):
    """Membership related APIs."""

    @abstractmethod
    async def get_membership_list(self, pagination: Pagination = Pagination()) -> Page[Membership]:
        """List the memberships of the organization."""
        pass

    async def get_all_membership_list(self, pagination: Pagination = Pagination()) -> list[Membership]:
        """Walk every page of get_membership_list."""
        return await collect_all_pages(self.get_membership_list, pagination)


class Labels(ABC):
    """Label related APIs."""

    @abstractmethod
    async def get_label_list(self, pagination: Pagination = Pagination()) -> Page[Label]:
        """List the labels of the organization."""
        pass

    async def get_all_label_list(self, pagination: Pagination = Pagination()) -> list[Label]:
        """Walk every page of get_label_list."""
        return await collect_all_pages(self.get_label_list, pagination)


class Attachments(ABC):
    """Attachment related APIs."""

    @abstractmethod
    async def get_attachment(self, attachment_id: str) -> Attachment:
        """Get one attachment. Its url is only valid for 30 minutes."""
        pass

    @abstractmethod
    async def get_attachment_list(self, transaction_internal_id: str) -> list[Attachment]:
        """List the attachments of a transaction."""
        pass

    @abstractmethod
    async def add_attachment(
        self,
        transaction_internal_id: str,
        attachment_type: AttachmentType,
        byte_input: BinaryIO,
    ) -> None:
        """Upload an attachment onto a transaction.

        byte_input is read to the end but not closed.
        """
        pass

    @abstractmethod
    async def remove_attachment(self, transaction_internal_id: str, attachment_id: str) -> None:
        """Remove one attachment from a transaction."""
        pass

    @abstractmethod
    async def remove_all_attachments(self, transaction_internal_id: str) -> None:
        """Remove every attachment from a transaction."""
        pass
