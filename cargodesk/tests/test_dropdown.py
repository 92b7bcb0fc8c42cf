"""
Tests for the searchable dropdown view state
"""

from cargodesk import dropdown as dropdown_module
from cargodesk.dropdown import (
    DropdownOption, OptionsFromRecords, SearchableDropdown,
    MESSAGE_LOADING, MESSAGE_NO_OPTIONS, MESSAGE_NO_RESULTS
)

CARRIERS = [
    DropdownOption("c1", "Air India"),
    DropdownOption("c2", "Emirates SkyCargo"),
    DropdownOption("c3", "Maersk Line"),
]


def MakeDropdown(scheduler, **kwargs):
    changes = []
    searches = []
    dropdown = SearchableDropdown(
        name="carrier_id",
        options=CARRIERS,
        on_change=changes.append,
        on_search=searches.append,
        scheduler=scheduler,
        **kwargs
    )
    return dropdown, changes, searches


def test_typing_searches_once_after_quiet_period(scheduler):
    """Typing "FedEx" quickly issues a single search for the full text"""
    dropdown, _, searches = MakeDropdown(scheduler)
    dropdown.Open()
    for text in ("F", "Fe", "Fed", "FedE", "FedEx"):
        dropdown.Type(text)
        scheduler.Advance(50)
    assert searches == []
    assert dropdown.query == "FedEx"
    assert dropdown.SearchPending

    scheduler.Advance(300)
    assert searches == ["FedEx"]


def test_no_results_message(scheduler):
    dropdown, _, _ = MakeDropdown(scheduler)
    dropdown.Open()
    dropdown.Type("FedEx")
    dropdown.SetOptions([])
    assert dropdown.ListMessage() == MESSAGE_NO_RESULTS
    assert dropdown.Render()["options"] == []


def test_list_messages(scheduler):
    dropdown, _, _ = MakeDropdown(scheduler, loading=True)
    assert dropdown.ListMessage() == MESSAGE_LOADING

    dropdown.SetOptions([])
    assert dropdown.ListMessage() == MESSAGE_NO_OPTIONS

    dropdown.SetOptions(CARRIERS)
    assert dropdown.ListMessage() is None


def test_select_closes_and_reports(scheduler):
    """Selecting reports the id, closes the list and drops the pending search"""
    dropdown, changes, searches = MakeDropdown(scheduler)
    dropdown.Open()
    dropdown.Type("mae")
    dropdown.Select("c3")

    assert changes == ["c3"]
    assert dropdown.value == "c3"
    assert not dropdown.is_open
    assert dropdown.query == ""
    assert dropdown.DisplayText() == "Maersk Line"

    scheduler.Advance(1000)
    assert searches == []


def test_select_unknown_option_is_ignored(scheduler):
    dropdown, changes, _ = MakeDropdown(scheduler, value="c1")
    dropdown.Select("nope")
    assert changes == []
    assert dropdown.value == "c1"


def test_clear_reports_none(scheduler):
    dropdown, changes, _ = MakeDropdown(scheduler, value="c2")
    dropdown.Clear()
    assert changes == [None]
    assert dropdown.value is None
    assert dropdown.DisplayText() == "Select..."
    assert not dropdown.is_open


def test_click_outside_resets_without_searching(scheduler):
    dropdown, _, searches = MakeDropdown(scheduler)
    dropdown.Open()
    dropdown.Type("emi")
    dropdown.ClickOutside()
    scheduler.Advance(1000)

    assert not dropdown.is_open
    assert dropdown.query == ""
    assert searches == []


def test_unmount_cancels_pending_search(scheduler):
    dropdown, _, searches = MakeDropdown(scheduler)
    dropdown.Type("air")
    dropdown.Unmount()
    scheduler.Advance(1000)
    assert searches == []
    assert not dropdown.SearchPending


def test_disabled_dropdown_does_not_open(scheduler):
    dropdown, _, _ = MakeDropdown(scheduler, disabled=True)
    dropdown.Toggle()
    dropdown.Open()
    assert not dropdown.is_open
    assert not dropdown.Render()["clearable"]


def test_local_filter_is_case_insensitive(scheduler):
    dropdown, _, _ = MakeDropdown(scheduler)
    dropdown.Type("AIR")
    assert [option.id for option in dropdown.FilteredOptions()] == ["c1"]


def test_render_marks_selection(scheduler):
    dropdown, _, _ = MakeDropdown(scheduler, value="c2")
    view = dropdown.Render()
    assert view["display"] == "Emirates SkyCargo"
    assert view["has_selection"]
    assert view["clearable"]
    assert [option["selected"] for option in view["options"]] == [False, True, False]


def test_options_from_records_skips_records_without_id():
    options = OptionsFromRecords(
        [{"carrier_id": 7, "carrier_name": "FedEx"}, {"carrier_name": "Orphan"}, {"carrier_id": "9"}],
        "carrier_id",
        "carrier_name"
    )
    assert [(option.id, option.name) for option in options] == [("7", "FedEx"), ("9", "9")]


def test_render_only_dropdown_creates_no_timers(monkeypatch):
    """Without a search callback, typing and closing never touch a scheduler"""
    class NoTimers:
        def __init__(self):
            raise AssertionError("scheduler created without a search callback")

    monkeypatch.setattr(dropdown_module, "ThreadingScheduler", NoTimers)
    dropdown = SearchableDropdown(name="carrier_id", options=CARRIERS)
    dropdown.Open()
    dropdown.Type("air")
    dropdown.ClickOutside()
    dropdown.Unmount()

    assert not dropdown.SearchPending
    assert dropdown.query == ""
