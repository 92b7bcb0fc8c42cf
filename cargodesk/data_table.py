"""
CargoDesk - Data Table

View model for the paginated, sortable table used by every list page.

The table owns no authoritative page or sort state. The caller passes the
current PaginationState in and receives sort and page events through the
on_sort and on_page_change callbacks. Page routes supply callbacks that
return the URL carrying the event, so a header click or page button is a
link to the re-fetched list.

When no callback is supplied the table falls back to sorting and paging the
given rows in memory.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Union

from markupsafe import Markup

from cargodesk.models.api import Page, SORT_ASC, SORT_DESC

logger = logging.getLogger(__name__)

PAGE_WINDOW = 5


@dataclass
class Column:
    """One table column"""
    key: str
    header: str
    cell: Optional[Callable[[dict], Union[str, Markup]]] = None
    width: Optional[str] = None
    sortable: bool = False

    def Render(self, row: dict) -> Union[str, Markup]:
        if self.cell is not None:
            return self.cell(row)
        value = row.get(self.key) if isinstance(row, dict) else None
        return "" if value is None else str(value)


@dataclass
class PaginationState:
    """Caller-owned page and sort state"""
    page: int = 1
    page_size: int = 25
    total: Optional[int] = None
    total_pages: Optional[int] = None
    sort_by: Optional[str] = None
    sort_dir: str = SORT_ASC

    def __post_init__(self):
        self.page = max(1, int(self.page))
        self.page_size = max(1, int(self.page_size))
        if self.sort_dir not in (SORT_ASC, SORT_DESC):
            self.sort_dir = SORT_ASC

    def Range(self, total: int) -> tuple:
        """First and last 1-based item numbers shown on this page"""
        if total <= 0:
            return 0, 0
        start = (self.page - 1) * self.page_size + 1
        return start, min(self.page * self.page_size, total)

    def ToggleSort(self, key: str) -> "PaginationState":
        """State after clicking a header; sorting always restarts at page 1"""
        if self.sort_by == key:
            direction = SORT_DESC if self.sort_dir == SORT_ASC else SORT_ASC
        else:
            direction = SORT_ASC
        return replace(self, sort_by=key, sort_dir=direction, page=1)


@dataclass
class HeaderCell:
    key: str
    header: str
    width: Optional[str]
    sortable: bool
    active: bool
    direction: Optional[str]
    next_direction: str
    href: Optional[str] = None


def _SortKey(value: Any) -> tuple:
    if value is None:
        return (2, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, str(value).lower())


class DataTable:
    """
    Generic paginated and sortable table

    Args:
        rows: Bare list, Page, or pagination dict ({data, total, page,
            limit|page_size, totalPages|total_pages})
        columns: Column descriptors
        pagination: Caller-owned page and sort state
        is_loading: Replace the body with a loading row
        error: Replace the body with a failed-to-load row
        on_sort: Called with (key, direction) on a sortable header click
        on_page_change: Called with the requested page number
        search_term: Current search text
        placeholder: Search input placeholder
        retry_url: Link offered on the failed-to-load row
    """

    def __init__(
        self,
        rows: Any,
        columns: List[Column],
        pagination: Optional[PaginationState] = None,
        is_loading: bool = False,
        error: Optional[str] = None,
        on_sort: Optional[Callable[[str, str], Any]] = None,
        on_page_change: Optional[Callable[[int], Any]] = None,
        search_term: str = "",
        placeholder: str = "Search...",
        empty_message: str = "No records found",
        retry_url: Optional[str] = None
    ):
        self.columns = columns
        self.pagination = pagination or PaginationState()
        self.is_loading = is_loading
        self.error = error
        self.on_sort = on_sort
        self.on_page_change = on_page_change
        self.search_term = search_term
        self.placeholder = placeholder
        self.empty_message = empty_message
        self.retry_url = retry_url

        self.page = Page.FromPayload(
            rows,
            page=self.pagination.page,
            page_size=self.pagination.page_size,
            total=self.pagination.total,
            total_pages=self.pagination.total_pages
        )

        # Client-side fallback bookkeeping
        self._local_sort_by: Optional[str] = None
        self._local_sort_dir: str = SORT_ASC
        self._local_page: int = self.page.page if self._PagesLocally() else 1

    # ==================== Sorting ====================

    @property
    def sort_by(self) -> Optional[str]:
        return self.pagination.sort_by if self.on_sort else self._local_sort_by

    @property
    def sort_dir(self) -> str:
        return self.pagination.sort_dir if self.on_sort else self._local_sort_dir

    def NextSortDirection(self, key: str) -> str:
        """Flip when key is the active column, otherwise start ascending"""
        if self.sort_by == key:
            return SORT_DESC if self.sort_dir == SORT_ASC else SORT_ASC
        return SORT_ASC

    def HeaderCells(self) -> List[HeaderCell]:
        cells = []
        for column in self.columns:
            active = column.sortable and self.sort_by == column.key
            next_direction = self.NextSortDirection(column.key)
            href = None
            if column.sortable and self.on_sort is not None:
                result = self.on_sort(column.key, next_direction)
                href = result if isinstance(result, str) else None
            cells.append(HeaderCell(
                key=column.key,
                header=column.header,
                width=column.width,
                sortable=column.sortable,
                active=active,
                direction=self.sort_dir if active else None,
                next_direction=next_direction,
                href=href
            ))
        return cells

    def ClickHeader(self, key: str) -> Any:
        """
        Handle a header click

        Returns:
            Whatever on_sort returns, or None for unsortable columns and
            client-side sorting
        """
        column = next((c for c in self.columns if c.key == key), None)
        if column is None or not column.sortable:
            return None

        direction = self.NextSortDirection(key)
        if self.on_sort is not None:
            return self.on_sort(key, direction)

        self._local_sort_by = key
        self._local_sort_dir = direction
        return None

    # ==================== Paging ====================

    def _PagesLocally(self) -> bool:
        return self.on_page_change is None and len(self.page.items) > self.page.page_size

    @property
    def current_page(self) -> int:
        return self._local_page if self._PagesLocally() else self.page.page

    @property
    def total(self) -> int:
        return self.page.total

    @property
    def total_pages(self) -> int:
        return self.page.total_pages

    def GoToPage(self, number: int) -> Any:
        """Request a page; out-of-range numbers are ignored"""
        if number < 1 or number > self.total_pages:
            return None
        if self.on_page_change is not None:
            return self.on_page_change(number)
        self._local_page = number
        return None

    def PageHref(self, number: int) -> Optional[str]:
        if self.on_page_change is None:
            return None
        result = self.on_page_change(number)
        return result if isinstance(result, str) else None

    def ShowFooter(self) -> bool:
        return self.total_pages > 1

    def PageNumbers(self) -> List[int]:
        """At most five page numbers, sliding to keep the current page inside"""
        pages = self.total_pages
        if pages <= PAGE_WINDOW:
            return list(range(1, pages + 1))
        start = max(1, min(self.current_page - PAGE_WINDOW // 2, pages - PAGE_WINDOW + 1))
        return list(range(start, start + PAGE_WINDOW))

    def HasPrevious(self) -> bool:
        return self.current_page > 1

    def HasNext(self) -> bool:
        return self.current_page < self.total_pages

    def Summary(self) -> str:
        state = PaginationState(page=self.current_page, page_size=self.page.page_size)
        start, end = state.Range(self.total)
        return f"Showing {start} to {end} of {self.total} results"

    # ==================== Body ====================

    def BodyState(self) -> str:
        """One of "loading", "error", "empty" or "rows" """
        if self.is_loading:
            return "loading"
        if self.error:
            return "error"
        if not self.page.items:
            return "empty"
        return "rows"

    def VisibleRows(self) -> List[dict]:
        rows = list(self.page.items)
        if self.on_sort is None and self._local_sort_by:
            rows.sort(
                key=lambda row: _SortKey(row.get(self._local_sort_by) if isinstance(row, dict) else None),
                reverse=self._local_sort_dir == SORT_DESC
            )
        if self._PagesLocally():
            size = self.page.page_size
            offset = (self._local_page - 1) * size
            rows = rows[offset:offset + size]
        return rows

    def BodyRows(self) -> List[List[Union[str, Markup]]]:
        """Rendered cells per row; empty while loading or failed"""
        if self.BodyState() in ("loading", "error"):
            return []
        return [[column.Render(row) for column in self.columns] for row in self.VisibleRows()]
