"""Domain layer for qontoclient."""

from qontoclient.domain.attachments import AttachmentType
from qontoclient.domain.entities import (
    Attachment,
    BankAccount,
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
    ProbativeAttachment,
    ProbativeStatus,
    SortField,
    SortOrder,
    Transaction,
    TransactionCategory,
    TransactionOperationType,
    TransactionSide,
    TransactionStatus,
)

__all__ = [
    "Attachment",
    "AttachmentType",
    "BankAccount",
    "DateRange",
    "Label",
    "Membership",
    "OAuthCodeAndUniqueState",
    "OAuthCredentials",
    "OAuthScope",
    "OAuthTokens",
    "Organization",
    "Page",
    "Pagination",
    "ProbativeAttachment",
    "ProbativeStatus",
    "SortField",
    "SortOrder",
    "Transaction",
    "TransactionCategory",
    "TransactionOperationType",
    "TransactionSide",
    "TransactionStatus",
]
