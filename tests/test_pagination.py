"""Tests for the list envelope meta mapping."""

import pytest

from conftest import meta
from qontoclient.api.pagination import page_from_envelope, page_from_meta
from qontoclient.domain.entities import Pagination
from qontoclient.domain.errors import ConverterError


def test_middle_page_links_both_ways():
    page = page_from_meta(meta(current_page=2, per_page=10, total_pages=3, total_count=25), ["a"])

    assert page.items == ["a"]
    assert page.page_index == 2
    assert page.next_pagination == Pagination(3, 10)
    assert page.previous_pagination == Pagination(1, 10)
    assert page.total_pages == 3
    assert page.total_items == 25


def test_last_page_has_no_next():
    page = page_from_meta(meta(current_page=3, per_page=10, total_pages=3, total_count=25), [])

    assert page.next_pagination is None
    assert page.previous_pagination == Pagination(2, 10)


def test_empty_result_is_a_valid_page():
    """Test a total_count of 0 is a successful, empty, terminal page."""
    page = page_from_envelope(
        {"memberships": [], "meta": meta(current_page=1, total_pages=0, total_count=0)}, []
    )

    assert page.items == []
    assert page.total_items == 0
    assert page.next_pagination is None
    assert page.previous_pagination is None


def test_missing_next_and_prev_keys():
    """Test absent next_page/prev_page keys mean no page in that direction."""
    page = page_from_meta(
        {"current_page": 1, "per_page": 100, "total_pages": 1, "total_count": 1}, ["a"]
    )

    assert page.next_pagination is None
    assert page.previous_pagination is None


def test_missing_meta_is_rejected():
    with pytest.raises(ConverterError):
        page_from_envelope({"labels": []}, [])


def test_missing_meta_key_is_rejected():
    with pytest.raises(ConverterError) as excinfo:
        page_from_meta({"current_page": 1, "per_page": 100, "total_pages": 1}, [])
    assert "total_count" in str(excinfo.value)
