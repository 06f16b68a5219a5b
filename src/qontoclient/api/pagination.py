"""Mapping of the list envelope meta block to Page."""

from typing import Any, TypeVar

from qontoclient.domain.entities import Page, Pagination
from qontoclient.domain.errors import ConverterError, missing_field

T = TypeVar("T")


def page_from_meta(meta: dict[str, Any], items: list[T]) -> Page[T]:
    """Build a Page from a meta block and already converted items.

    Pure structural mapping: nothing is fetched or validated again. A
    missing next_page or prev_page means there is no page in that
    direction, which is not an error.

    Args:
        meta: The envelope's meta dict
        items: Converted items, in server order

    Raises:
        ConverterError: If a required meta key is absent
    """
    for key in ("current_page", "per_page", "total_pages", "total_count"):
        if key not in meta:
            raise ConverterError(missing_field(key, "meta"))

    per_page = meta["per_page"]
    next_page = meta.get("next_page")
    prev_page = meta.get("prev_page")
    return Page(
        items=items,
        page_index=meta["current_page"],
        next_pagination=Pagination(next_page, per_page) if next_page is not None else None,
        previous_pagination=Pagination(prev_page, per_page) if prev_page is not None else None,
        total_pages=meta["total_pages"],
        total_items=meta["total_count"],
    )


def page_from_envelope(envelope: dict[str, Any], items: list[T]) -> Page[T]:
    """Build a Page from a whole list envelope ({<items>, meta})."""
    meta = envelope.get("meta") if isinstance(envelope, dict) else None
    if meta is None:
        raise ConverterError(missing_field("meta", "list envelope"))
    return page_from_meta(meta, items)
