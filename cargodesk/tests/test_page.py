"""
Tests for list result normalization and search parameters
"""

import pytest

from cargodesk.models.api import Page, SearchParams


def test_bare_list():
    page = Page.FromPayload([{"id": 1}, {"id": 2}], page_size=25)
    assert page.total == 2
    assert page.total_pages == 1
    assert len(page.items) == 2


def test_limit_spelling():
    page = Page.FromPayload({"data": [{"id": 1}], "total": 51, "page": 2, "limit": 25, "totalPages": 3})
    assert (page.total, page.page, page.page_size, page.total_pages) == (51, 2, 25, 3)


def test_page_size_spelling_without_page_count():
    page = Page.FromPayload({"data": [], "total": 51, "page": 1, "page_size": 10})
    assert page.page_size == 10
    assert page.total_pages == 6


def test_envelope_is_unwrapped():
    page = Page.FromPayload({"success": True, "message": "", "data": [{"id": 1}]})
    assert page.items == [{"id": 1}]


def test_none_is_empty():
    page = Page.FromPayload(None, page=3)
    assert page.items == []
    assert page.total == 0
    assert page.page == 3


def test_unsupported_payload():
    with pytest.raises(TypeError):
        Page.FromPayload("not a page")


def test_search_params_query():
    """Empty filters are dropped; sort is sent only with a sort field"""
    params = SearchParams(filters={"carrier_name": "Fed", "carrier_code": ""}, page=2, page_size=10)
    assert params.ToQuery() == {"carrier_name": "Fed", "page": 2, "page_size": 10}

    params = SearchParams(sort_by="carrier_name", sort_dir="DESC")
    assert params.ToQuery() == {"page": 1, "page_size": 25, "sort_by": "carrier_name", "sort_dir": "DESC"}
