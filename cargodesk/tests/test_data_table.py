"""
Tests for the data table view model
"""

from markupsafe import Markup

from cargodesk.data_table import Column, DataTable, PaginationState
from cargodesk.routes.admin.auth import templates


def Rows(count):
    return [{"id": str(i), "name": f"Carrier {i:02d}"} for i in range(1, count + 1)]


COLUMNS = [
    Column("name", "Name", sortable=True),
    Column("id", "Id"),
]


def test_twelve_rows_show_no_footer():
    """A bare list shorter than one page renders without pagination"""
    table = DataTable(Rows(12), COLUMNS, pagination=PaginationState(page_size=25))
    assert table.BodyState() == "rows"
    assert len(table.BodyRows()) == 12
    assert not table.ShowFooter()
    assert table.total_pages == 1


def test_pagination_dict_drives_footer():
    payload = {"data": Rows(25), "total": 60, "page": 1, "limit": 25, "totalPages": 3}
    table = DataTable(payload, COLUMNS, on_page_change=lambda n: f"?page={n}")
    assert table.ShowFooter()
    assert table.Summary() == "Showing 1 to 25 of 60 results"
    assert table.PageNumbers() == [1, 2, 3]
    assert not table.HasPrevious()
    assert table.HasNext()
    assert table.PageHref(2) == "?page=2"


def test_last_page_summary():
    payload = {"data": Rows(10), "total": 60, "page": 3, "page_size": 25, "total_pages": 3}
    table = DataTable(payload, COLUMNS, on_page_change=lambda n: None)
    assert table.Summary() == "Showing 51 to 60 of 60 results"
    assert table.HasPrevious()
    assert not table.HasNext()


def test_page_window_slides():
    """At most five page buttons, keeping the current page inside"""
    def Window(page):
        payload = {"data": Rows(10), "total": 100, "page": page, "limit": 10, "totalPages": 10}
        return DataTable(payload, COLUMNS, on_page_change=lambda n: None).PageNumbers()

    assert Window(1) == [1, 2, 3, 4, 5]
    assert Window(5) == [3, 4, 5, 6, 7]
    assert Window(10) == [6, 7, 8, 9, 10]


def test_header_click_requests_sort():
    """Sortable headers report (key, direction); others do nothing"""
    requests = []

    def OnSort(key, direction):
        requests.append((key, direction))
        return f"?sort_by={key}&sort_dir={direction}"

    table = DataTable(Rows(3), COLUMNS, on_sort=OnSort)
    assert table.ClickHeader("name") == "?sort_by=name&sort_dir=ASC"
    assert table.ClickHeader("id") is None
    assert requests == [("name", "ASC")]

    sorted_table = DataTable(Rows(3), COLUMNS, pagination=PaginationState(sort_by="name", sort_dir="ASC"), on_sort=OnSort)
    assert sorted_table.ClickHeader("name") == "?sort_by=name&sort_dir=DESC"


def test_header_cells_carry_links():
    table = DataTable(
        Rows(3),
        COLUMNS,
        pagination=PaginationState(sort_by="name", sort_dir="DESC"),
        on_sort=lambda key, direction: f"/admin/carriers?sort_by={key}&sort_dir={direction}"
    )
    name_cell, id_cell = table.HeaderCells()
    assert name_cell.active
    assert name_cell.direction == "DESC"
    assert name_cell.href == "/admin/carriers?sort_by=name&sort_dir=ASC"
    assert id_cell.href is None
    assert not id_cell.sortable


def test_out_of_range_page_is_ignored():
    pages = []
    payload = {"data": Rows(25), "total": 50, "page": 1, "limit": 25, "totalPages": 2}
    table = DataTable(payload, COLUMNS, on_page_change=pages.append)
    table.GoToPage(0)
    table.GoToPage(3)
    table.GoToPage(2)
    assert pages == [2]


def test_body_states():
    assert DataTable([], COLUMNS, is_loading=True).BodyState() == "loading"
    failed = DataTable(Rows(3), COLUMNS, error="Server error 500")
    assert failed.BodyState() == "error"
    assert failed.BodyRows() == []
    empty = DataTable([], COLUMNS, empty_message="No carriers found")
    assert empty.BodyState() == "empty"
    assert empty.empty_message == "No carriers found"


def test_client_side_paging_and_sorting():
    """Without callbacks the table pages and sorts the rows it was given"""
    table = DataTable(Rows(30), COLUMNS, pagination=PaginationState(page_size=10))
    assert [row["id"] for row in table.VisibleRows()] == [str(i) for i in range(1, 11)]

    table.GoToPage(3)
    assert table.current_page == 3
    assert [row["id"] for row in table.VisibleRows()] == [str(i) for i in range(21, 31)]
    assert table.Summary() == "Showing 21 to 30 of 30 results"

    table.GoToPage(1)
    table.ClickHeader("name")
    table.ClickHeader("name")
    assert table.sort_dir == "DESC"
    assert table.VisibleRows()[0]["name"] == "Carrier 30"


def test_pagination_state():
    assert PaginationState(page=0, page_size=0).page == 1
    assert PaginationState(sort_dir="sideways").sort_dir == "ASC"
    assert PaginationState(page=2, page_size=25).Range(40) == (26, 40)
    assert PaginationState().Range(0) == (0, 0)

    state = PaginationState(page=4, sort_by="name", sort_dir="ASC").ToggleSort("name")
    assert (state.page, state.sort_by, state.sort_dir) == (1, "name", "DESC")
    assert PaginationState(page=4, sort_by="name").ToggleSort("code").sort_dir == "ASC"


def test_column_render():
    badge = Column("code", "Code", cell=lambda row: Markup("<b>{0}</b>").format(row["code"]))
    assert badge.Render({"code": "<FX>"}) == "<b>&lt;FX&gt;</b>"
    assert Column("missing", "Missing").Render({}) == ""


def test_footer_renders_on_empty_page_past_the_end():
    """Page controls stay available when the requested page has no rows"""
    payload = {"data": [], "total": 60, "page": 4, "limit": 25, "totalPages": 3}
    table = DataTable(payload, COLUMNS, on_page_change=lambda n: f"?page={n}")
    html = templates.get_template("partials/table.html").render(table=table)

    assert table.BodyState() == "empty"
    assert 'class="pagination"' in html
    assert 'href="?page=3"' in html
