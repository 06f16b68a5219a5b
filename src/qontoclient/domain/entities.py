"""Domain model entities for qontoclient.

These are immutable value snapshots created when an API response is
converted. They carry no reference back to the client and know nothing
about the wire format (snake_case keys, envelopes, date strings).
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum, auto
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class BankAccount:
    """Bank account of an organization.

    The slug is what scopes transaction queries, so it has to be taken from
    the organization before transactions can be listed.
    """

    slug: str
    iban: str
    bic: str
    currency: str
    balance_cents: int
    authorized_balance_cents: int


@dataclass(frozen=True)
class Organization:
    """Organization with its bank accounts, in server order."""

    slug: str
    bank_accounts: list[BankAccount]


@dataclass(frozen=True)
class Membership:
    """User granted access to the organization's account."""

    id: str
    first_name: str
    last_name: str


@dataclass(frozen=True)
class Label:
    """Label that can be attached to transactions.

    parent_id links labels into lists; it is informational only.
    """

    id: str
    name: str
    parent_id: Optional[str]


class ProbativeStatus(Enum):
    PENDING = auto()
    AVAILABLE = auto()
    UNAVAILABLE = auto()
    CORRUPTED = auto()


@dataclass(frozen=True)
class ProbativeAttachment:
    """Legally authoritative copy of an attachment.

    file_name, size, content_type and url are only set when status is
    AVAILABLE.
    """

    status: ProbativeStatus
    file_name: Optional[str] = None
    size: Optional[int] = None
    content_type: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class Attachment:
    """File uploaded onto a transaction.

    url is presigned and expires 30 minutes after it was issued. Fetch the
    attachment again to get a fresh one.
    """

    id: str
    file_name: str
    created_date: datetime
    size: int
    content_type: str
    url: str
    probative_attachment: Optional[ProbativeAttachment] = None


class TransactionSide(Enum):
    CREDIT = auto()
    DEBIT = auto()


class TransactionOperationType(Enum):
    TRANSFER = auto()
    CARD = auto()
    DIRECT_DEBIT = auto()
    INCOME = auto()
    QONTO_FEE = auto()
    CHECK = auto()


class TransactionStatus(Enum):
    PENDING = auto()
    REVERSED = auto()
    DECLINED = auto()
    COMPLETED = auto()


class TransactionCategory(Enum):
    ATM = auto()
    FEES = auto()
    FINANCE = auto()
    FOOD_AND_GROCERY = auto()
    GAS_STATION = auto()
    HARDWARE_AND_EQUIPMENT = auto()
    HOTEL_AND_LODGING = auto()
    INSURANCE = auto()
    IT_AND_ELECTRONICS = auto()
    LEGAL_AND_ACCOUNTING = auto()
    LOGISTICS = auto()
    MANUFACTURING = auto()
    MARKETING = auto()
    OFFICE_RENTAL = auto()
    OFFICE_SUPPLY = auto()
    ONLINE_SERVICE = auto()
    OTHER_EXPENSE = auto()
    OTHER_INCOME = auto()
    OTHER_SERVICE = auto()
    REFUND = auto()
    RESTAURANT_AND_BAR = auto()
    SALARY = auto()
    SALES = auto()
    SUBSCRIPTION = auto()
    TAX = auto()
    TRANSPORT = auto()
    TREASURY_AND_INTERCO = auto()
    UTILITY = auto()
    VOUCHER = auto()


class SortField(Enum):
    UPDATED_DATE = auto()
    SETTLED_DATE = auto()


class SortOrder(Enum):
    DESCENDING = auto()
    ASCENDING = auto()


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    id is the display id (e.g. acme-corp-1111-1-transaction-123).
    internal_id is the opaque id (a UUID) expected by get_transaction and by
    every attachment operation. The two are never interchangeable.
    Amounts are integer cents.
    """

    id: str
    internal_id: str
    amount_cents: int
    local_amount_cents: int
    side: TransactionSide
    operation_type: TransactionOperationType
    category: TransactionCategory
    currency: str
    local_currency: str
    counterparty: str
    settled_date: Optional[datetime]
    emitted_date: datetime
    updated_date: datetime
    status: TransactionStatus
    note: Optional[str] = None
    reference: Optional[str] = None
    vat_amount_cents: Optional[int] = None
    vat_rate: Optional[float] = None
    initiator_id: Optional[str] = None
    label_ids: list[str] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)
    attachment_ids: list[str] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)
    attachment_lost: bool = False
    attachment_required: bool = True
    card_last_digits: Optional[str] = None


@dataclass(frozen=True)
class DateRange:
    """Date filter; either bound may be None for an open-ended range."""

    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None


FIRST_PAGE_INDEX = 1
DEFAULT_ITEMS_PER_PAGE = 100


@dataclass(frozen=True)
class Pagination:
    """Request-side pagination. Page indices are 1 based."""

    page_index: int = FIRST_PAGE_INDEX
    items_per_page: int = DEFAULT_ITEMS_PER_PAGE

    def coerced_page_index(self) -> int:
        """Page index clamped to the first page."""
        return max(self.page_index, FIRST_PAGE_INDEX)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a list response.

    next_pagination being None is the only end-of-list signal; an empty
    items list does not mean there are no more pages.
    """

    items: list[T]
    page_index: int
    next_pagination: Optional[Pagination]
    previous_pagination: Optional[Pagination]
    total_pages: int
    total_items: int


class OAuthScope(Enum):
    OFFLINE_ACCESS = auto()
    ORGANIZATION_READ = auto()
    OPENID = auto()


@dataclass(frozen=True)
class OAuthCredentials:
    """Credentials of the OAuth application registered with Qonto."""

    client_id: str
    client_secret: str
    redirect_uri: str


@dataclass(frozen=True)
class OAuthCodeAndUniqueState:
    code: str
    unique_state: str


TOKENS_EXPIRY_MARGIN = timedelta(minutes=5)


@dataclass(frozen=True)
class OAuthTokens:
    """Access/refresh token pair.

    Nothing refreshes these automatically; check are_about_to_expire and
    call refresh_tokens yourself.
    """

    access_token: str
    refresh_token: str
    expires_at: datetime
    id_token: Optional[str] = None

    @property
    def are_about_to_expire(self) -> bool:
        return self.expires_at - datetime.now(timezone.utc) <= TOKENS_EXPIRY_MARGIN
