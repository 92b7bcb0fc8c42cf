"""
CargoDesk - Page Model

Canonical shape for list results. The backend returns either a bare array or
a pagination object spelled {data, total, page, limit, totalPages} or
{data, total, page, page_size, total_pages}; both are folded into Page at the
query-layer boundary so tables and pages only ever see one shape.
"""

import math
from typing import Any, List, Optional

from pydantic import BaseModel

from cargodesk.models.api.envelope import ApiEnvelope


def _First(payload: dict, *keys: str) -> Optional[Any]:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _PageCount(total: int, page_size: int) -> int:
    if page_size <= 0:
        return 1
    return max(1, math.ceil(total / page_size))


class Page(BaseModel):
    """One page of records plus its pagination metadata"""
    items: List[Any] = []
    total: int = 0
    page: int = 1
    page_size: int = 25
    total_pages: int = 1

    @classmethod
    def FromPayload(
        cls,
        payload: Any,
        page: int = 1,
        page_size: int = 25,
        total: Optional[int] = None,
        total_pages: Optional[int] = None
    ) -> "Page":
        """
        Normalize a list response into a Page

        Args:
            payload: Bare list, pagination dict, response envelope, Page or None
            page: Fallback current page when the payload carries none
            page_size: Fallback page size when the payload carries none
            total: Fallback total for bare lists
            total_pages: Fallback page count for bare lists

        Returns:
            Page with items and metadata
        """
        if isinstance(payload, Page):
            return payload

        if ApiEnvelope.IsEnvelope(payload):
            return cls.FromPayload(payload["data"], page, page_size, total, total_pages)

        if payload is None:
            return cls(items=[], total=0, page=page, page_size=page_size, total_pages=1)

        if isinstance(payload, list):
            item_total = total if total is not None else len(payload)
            return cls(
                items=list(payload),
                total=item_total,
                page=page,
                page_size=page_size,
                total_pages=total_pages if total_pages is not None else _PageCount(item_total, page_size)
            )

        if isinstance(payload, dict):
            items = payload.get("data")
            if items is None:
                items = payload.get("items", [])
            if not isinstance(items, list):
                items = [items]

            item_total = _First(payload, "total")
            if item_total is None:
                item_total = total if total is not None else len(items)
            size = _First(payload, "page_size", "limit", "pageSize") or page_size
            current = _First(payload, "page") or page
            pages = _First(payload, "total_pages", "totalPages")
            if pages is None:
                pages = _PageCount(int(item_total), int(size))

            return cls(
                items=items,
                total=int(item_total),
                page=int(current),
                page_size=int(size),
                total_pages=int(pages)
            )

        raise TypeError(f"Cannot build a page from {type(payload).__name__}")
