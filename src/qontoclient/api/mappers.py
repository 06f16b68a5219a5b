"""Mapper functions to convert between API payloads and domain entities.

Payloads are the dicts produced by decoding the JSON responses. All the
snake_case wire names live here so that the domain model stays
wire-format-agnostic. A conversion either returns a complete entity or
raises ConverterError; it never returns a partially filled one.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from qontoclient.api.dates import date_to_model
from qontoclient.domain import entities as domain
from qontoclient.domain.errors import ConverterError, missing_field, unknown_enum_value

E = TypeVar("E", bound=Enum)


class EnumConverter(Generic[E]):
    """Two-way mapping between wire strings and an enum.

    The table must cover every member of the enum; strings outside the
    table are rejected with ConverterError.
    """

    def __init__(self, kind: str, table: dict[str, E]):
        self.kind = kind
        self._to_model = dict(table)
        self._to_api = {model: api for api, model in table.items()}

    def api_to_model(self, api_value: str) -> E:
        try:
            return self._to_model[api_value]
        except (KeyError, TypeError):
            raise ConverterError(unknown_enum_value(self.kind, api_value)) from None

    def model_to_api(self, model: E) -> str:
        return self._to_api[model]


transaction_status_converter = EnumConverter(
    "transaction status",
    {
        "pending": domain.TransactionStatus.PENDING,
        "reversed": domain.TransactionStatus.REVERSED,
        "declined": domain.TransactionStatus.DECLINED,
        "completed": domain.TransactionStatus.COMPLETED,
    },
)

transaction_side_converter = EnumConverter(
    "transaction side",
    {
        "credit": domain.TransactionSide.CREDIT,
        "debit": domain.TransactionSide.DEBIT,
    },
)

transaction_operation_type_converter = EnumConverter(
    "transaction operation_type",
    {
        "transfer": domain.TransactionOperationType.TRANSFER,
        "card": domain.TransactionOperationType.CARD,
        "direct_debit": domain.TransactionOperationType.DIRECT_DEBIT,
        "income": domain.TransactionOperationType.INCOME,
        "qonto_fee": domain.TransactionOperationType.QONTO_FEE,
        "cheque": domain.TransactionOperationType.CHECK,
    },
)

transaction_category_converter = EnumConverter(
    "transaction category",
    {category.name.lower(): category for category in domain.TransactionCategory},
)

probative_status_converter = EnumConverter(
    "probative attachment status",
    {
        "pending": domain.ProbativeStatus.PENDING,
        "available": domain.ProbativeStatus.AVAILABLE,
        "unavailable": domain.ProbativeStatus.UNAVAILABLE,
        "corrupted": domain.ProbativeStatus.CORRUPTED,
    },
)

sort_field_converter = EnumConverter(
    "sort field",
    {
        "updated_at": domain.SortField.UPDATED_DATE,
        "settled_at": domain.SortField.SETTLED_DATE,
    },
)

sort_order_converter = EnumConverter(
    "sort order",
    {
        "desc": domain.SortOrder.DESCENDING,
        "asc": domain.SortOrder.ASCENDING,
    },
)

oauth_scope_converter = EnumConverter(
    "oauth scope",
    {
        "offline_access": domain.OAuthScope.OFFLINE_ACCESS,
        "organization.read": domain.OAuthScope.ORGANIZATION_READ,
        "openid": domain.OAuthScope.OPENID,
    },
)


def sort_by_to_api(sort_field: domain.SortField, sort_order: domain.SortOrder) -> str:
    """Build the sort_by query value, e.g. settled_at:desc."""
    return sort_field_converter.model_to_api(sort_field) + ":" + sort_order_converter.model_to_api(sort_order)


def _require(payload: dict[str, Any], key: str, kind: str) -> Any:
    try:
        return payload[key]
    except (KeyError, TypeError):
        raise ConverterError(missing_field(key, kind)) from None


def _require_date(payload: dict[str, Any], key: str, kind: str) -> datetime:
    value = date_to_model(_require(payload, key, kind))
    if value is None:
        raise ConverterError(missing_field(key, kind))
    return value


def bank_account_to_domain(payload: dict[str, Any]) -> domain.BankAccount:
    """Convert an API bank account to a domain BankAccount."""
    kind = "bank account"
    return domain.BankAccount(
        slug=_require(payload, "slug", kind),
        iban=_require(payload, "iban", kind),
        bic=_require(payload, "bic", kind),
        currency=_require(payload, "currency", kind),
        balance_cents=_require(payload, "balance_cents", kind),
        authorized_balance_cents=_require(payload, "authorized_balance_cents", kind),
    )


def organization_to_domain(payload: dict[str, Any]) -> domain.Organization:
    """Convert an API organization to a domain Organization."""
    kind = "organization"
    return domain.Organization(
        slug=_require(payload, "slug", kind),
        bank_accounts=[bank_account_to_domain(a) for a in _require(payload, "bank_accounts", kind)],
    )


def membership_to_domain(payload: dict[str, Any]) -> domain.Membership:
    """Convert an API membership to a domain Membership."""
    kind = "membership"
    return domain.Membership(
        id=_require(payload, "id", kind),
        first_name=_require(payload, "first_name", kind),
        last_name=_require(payload, "last_name", kind),
    )


def label_to_domain(payload: dict[str, Any]) -> domain.Label:
    """Convert an API label to a domain Label."""
    kind = "label"
    return domain.Label(
        id=_require(payload, "id", kind),
        name=_require(payload, "name", kind),
        parent_id=payload.get("parent_id"),
    )


def probative_attachment_to_domain(payload: dict[str, Any]) -> domain.ProbativeAttachment:
    """Convert an API probative attachment.

    The file fields are only kept when the status is available.
    """
    status = probative_status_converter.api_to_model(_require(payload, "status", "probative attachment"))
    if status is not domain.ProbativeStatus.AVAILABLE:
        return domain.ProbativeAttachment(status=status)
    return domain.ProbativeAttachment(
        status=status,
        file_name=payload.get("file_name"),
        size=payload.get("file_size"),
        content_type=payload.get("file_content_type"),
        url=payload.get("url"),
    )


def attachment_to_domain(payload: dict[str, Any]) -> domain.Attachment:
    """Convert an API attachment to a domain Attachment."""
    kind = "attachment"
    probative = payload.get("probative_attachment")
    return domain.Attachment(
        id=_require(payload, "id", kind),
        file_name=_require(payload, "file_name", kind),
        created_date=_require_date(payload, "created_at", kind),
        size=int(_require(payload, "file_size", kind)),
        content_type=_require(payload, "file_content_type", kind),
        url=_require(payload, "url", kind),
        probative_attachment=probative_attachment_to_domain(probative) if probative else None,
    )


def transaction_to_domain(payload: dict[str, Any]) -> domain.Transaction:
    """Convert an API transaction to a domain Transaction.

    The wire calls the display id transaction_id and the internal id id.
    """
    kind = "transaction"
    operation_type = transaction_operation_type_converter.api_to_model(
        _require(payload, "operation_type", kind)
    )
    return domain.Transaction(
        id=_require(payload, "transaction_id", kind),
        internal_id=_require(payload, "id", kind),
        amount_cents=_require(payload, "amount_cents", kind),
        local_amount_cents=_require(payload, "local_amount_cents", kind),
        side=transaction_side_converter.api_to_model(_require(payload, "side", kind)),
        operation_type=operation_type,
        category=transaction_category_converter.api_to_model(_require(payload, "category", kind)),
        currency=_require(payload, "currency", kind),
        local_currency=_require(payload, "local_currency", kind),
        counterparty=_require(payload, "label", kind),
        settled_date=date_to_model(payload.get("settled_at")),
        emitted_date=_require_date(payload, "emitted_at", kind),
        updated_date=_require_date(payload, "updated_at", kind),
        status=transaction_status_converter.api_to_model(_require(payload, "status", kind)),
        note=payload.get("note"),
        reference=payload.get("reference"),
        vat_amount_cents=payload.get("vat_amount_cents"),
        vat_rate=payload.get("vat_rate"),
        initiator_id=payload.get("initiator_id"),
        label_ids=list(payload.get("label_ids") or []),
        labels=[label_to_domain(label) for label in payload.get("labels") or []],
        attachment_ids=list(payload.get("attachment_ids") or []),
        attachments=[attachment_to_domain(a) for a in payload.get("attachments") or []],
        attachment_lost=bool(payload.get("attachment_lost", False)),
        attachment_required=bool(payload.get("attachment_required", True)),
        card_last_digits=(
            payload.get("card_last_digits")
            if operation_type is domain.TransactionOperationType.CARD
            else None
        ),
    )


def oauth_tokens_to_domain(
    payload: dict[str, Any], now: Optional[datetime] = None
) -> domain.OAuthTokens:
    """Convert a token endpoint response to domain OAuthTokens.

    expires_in is relative, so it is anchored on now (defaults to the
    current UTC time).
    """
    kind = "oauth tokens"
    if now is None:
        now = datetime.now(timezone.utc)
    return domain.OAuthTokens(
        access_token=_require(payload, "access_token", kind),
        refresh_token=_require(payload, "refresh_token", kind),
        expires_at=now + timedelta(seconds=int(_require(payload, "expires_in", kind))),
        id_token=payload.get("id_token"),
    )


# Envelope unwrapping


def organization_envelope_to_domain(envelope: dict[str, Any]) -> domain.Organization:
    return organization_to_domain(_require(envelope, "organization", "organization envelope"))


def transaction_envelope_to_domain(envelope: dict[str, Any]) -> domain.Transaction:
    return transaction_to_domain(_require(envelope, "transaction", "transaction envelope"))


def attachment_envelope_to_domain(envelope: dict[str, Any]) -> domain.Attachment:
    return attachment_to_domain(_require(envelope, "attachment", "attachment envelope"))


def attachment_list_envelope_to_domain(envelope: dict[str, Any]) -> list[domain.Attachment]:
    return [
        attachment_to_domain(a)
        for a in _require(envelope, "attachments", "attachment list envelope")
    ]


def transaction_list_to_domain(envelope: dict[str, Any]) -> list[domain.Transaction]:
    return [
        transaction_to_domain(t)
        for t in _require(envelope, "transactions", "transaction list envelope")
    ]


def membership_list_to_domain(envelope: dict[str, Any]) -> list[domain.Membership]:
    return [
        membership_to_domain(m)
        for m in _require(envelope, "memberships", "membership list envelope")
    ]


def label_list_to_domain(envelope: dict[str, Any]) -> list[domain.Label]:
    return [label_to_domain(label) for label in _require(envelope, "labels", "label list envelope")]
