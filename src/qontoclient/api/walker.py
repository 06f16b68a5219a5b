"""Pagination walkers.

Both walkers fetch pages one after the other, following next_pagination
until it is None. There is no page cap and no retry: the first failure is
raised and whatever was accumulated so far is dropped.
"""

from typing import Awaitable, Callable, Optional, TypeVar

from qontoclient.domain.entities import Page, Pagination

T = TypeVar("T")


async def collect_all_pages(
    fetch_page: Callable[[Pagination], Awaitable[Page[T]]],
    pagination: Optional[Pagination] = None,
) -> list[T]:
    """Fetch every page starting at pagination and concatenate the items.

    Args:
        fetch_page: Coroutine function returning the page for a Pagination
        pagination: First page to fetch (defaults to Pagination())

    Returns:
        All items, in page order then server order
    """
    items: list[T] = []
    next_pagination: Optional[Pagination] = pagination or Pagination()
    while next_pagination is not None:
        page = await fetch_page(next_pagination)
        items.extend(page.items)
        next_pagination = page.next_pagination
    return items


def collect_all_pages_blocking(
    fetch_page: Callable[[Pagination], Page[T]],
    pagination: Optional[Pagination] = None,
) -> list[T]:
    """Blocking version of collect_all_pages, for blocking fetch functions."""
    items: list[T] = []
    next_pagination: Optional[Pagination] = pagination or Pagination()
    while next_pagination is not None:
        page = fetch_page(next_pagination)
        items.extend(page.items)
        next_pagination = page.next_pagination
    return items
