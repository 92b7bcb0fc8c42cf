"""
CargoDesk - Searchable Dropdown

View-state machine for a single-select dropdown with remote search.

Typing updates the local query at once, but the external search callback is
debounced: it fires once after the quiet period following the last
keystroke. Selecting calls on_change with the option id; clearing calls
on_change with None. Clicking outside closes the list and resets the query
without searching again.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from cargodesk.debounce import Debouncer, Scheduler, ThreadingScheduler

logger = logging.getLogger(__name__)

MESSAGE_LOADING = "Loading..."
MESSAGE_NO_RESULTS = "No results found"
MESSAGE_NO_OPTIONS = "No options available"


@dataclass
class DropdownOption:
    """One selectable entry, projected from a fetched record"""
    id: str
    name: str
    extra: Dict[str, Any] = field(default_factory=dict)


def OptionsFromRecords(records: Iterable[dict], id_key: str, name_key: str) -> List[DropdownOption]:
    """
    Project fetched records into dropdown options

    Args:
        records: Records from the latest fetch
        id_key: Field holding the record id
        name_key: Field holding the display name

    Returns:
        List of options; records without an id are skipped
    """
    options = []
    for record in records or []:
        if not isinstance(record, dict) or record.get(id_key) is None:
            continue
        options.append(DropdownOption(
            id=str(record[id_key]),
            name=str(record.get(name_key) or record[id_key]),
            extra=record
        ))
    return options


class SearchableDropdown:
    """
    Single-select dropdown with debounced remote search

    State: the option list (owned by the caller, replaced with SetOptions),
    the selected value, whether the list is open, the local query string and
    the caller-supplied loading flag.
    """

    def __init__(
        self,
        name: str,
        options: Optional[List[DropdownOption]] = None,
        value: Optional[str] = None,
        on_change: Optional[Callable[[Optional[str]], None]] = None,
        on_search: Optional[Callable[[str], None]] = None,
        placeholder: str = "Select...",
        search_placeholder: str = "Search...",
        loading: bool = False,
        disabled: bool = False,
        error: Optional[str] = None,
        scheduler: Optional[Scheduler] = None,
        debounce_ms: int = 300,
        lookup_url: Optional[str] = None
    ):
        self.name = name
        self.options = list(options or [])
        self.value = value
        self.on_change = on_change
        self.on_search = on_search
        self.placeholder = placeholder
        self.search_placeholder = search_placeholder
        self.loading = loading
        self.disabled = disabled
        self.error = error
        self.debounce_ms = debounce_ms
        self.lookup_url = lookup_url
        self.is_open = False
        self.query = ""
        self._debouncer: Optional[Debouncer] = None
        if on_search is not None:
            self._debouncer = Debouncer(scheduler or ThreadingScheduler(), debounce_ms, self._Search)

    # ==================== Events ====================

    def Toggle(self) -> None:
        """Open or close the list (ignored when disabled)"""
        if self.disabled:
            return
        self.is_open = not self.is_open

    def Open(self) -> None:
        if not self.disabled:
            self.is_open = True

    def Type(self, text: str) -> None:
        """Update the query and restart the search quiet period"""
        self.query = text
        if self._debouncer is not None:
            self._debouncer.Trigger(text)

    def Select(self, option_id: str) -> None:
        """Choose an option, notify the caller and close the list"""
        option = self._Find(option_id)
        if option is None:
            logger.debug(f"Dropdown '{self.name}' ignored unknown option {option_id}")
            return
        self.value = option.id
        self.is_open = False
        self.query = ""
        self._CancelSearch()
        if self.on_change is not None:
            self.on_change(option.id)

    def Clear(self) -> None:
        """Drop the selection without opening the list"""
        self.value = None
        self.query = ""
        self._CancelSearch()
        if self.on_change is not None:
            self.on_change(None)

    def ClickOutside(self) -> None:
        """Close the list and reset the query; no new search is issued"""
        self.is_open = False
        self.query = ""
        self._CancelSearch()

    def Unmount(self) -> None:
        """Cancel the pending search so nothing fires into a disposed view"""
        self._CancelSearch()

    def SetOptions(self, options: List[DropdownOption], loading: bool = False) -> None:
        """Replace the options with the latest fetch result"""
        self.options = list(options)
        self.loading = loading

    # ==================== Derived state ====================

    @property
    def SearchPending(self) -> bool:
        return self._debouncer is not None and self._debouncer.Pending

    def SelectedOption(self) -> Optional[DropdownOption]:
        return self._Find(self.value) if self.value is not None else None

    def DisplayText(self) -> str:
        selected = self.SelectedOption()
        return selected.name if selected else self.placeholder

    def FilteredOptions(self) -> List[DropdownOption]:
        """Options whose name contains the query, case-insensitive"""
        needle = self.query.strip().lower()
        if not needle:
            return list(self.options)
        return [option for option in self.options if needle in option.name.lower()]

    def ListMessage(self) -> Optional[str]:
        """Message shown in place of the option list, if any"""
        if self.loading:
            return MESSAGE_LOADING
        if not self.FilteredOptions():
            return MESSAGE_NO_RESULTS if self.query else MESSAGE_NO_OPTIONS
        return None

    def Render(self) -> dict:
        """View model for templates/partials/dropdown.html"""
        selected = self.SelectedOption()
        message = self.ListMessage()
        return {
            "name": self.name,
            "value": self.value or "",
            "display": self.DisplayText(),
            "has_selection": selected is not None,
            "clearable": selected is not None and not self.disabled,
            "is_open": self.is_open,
            "query": self.query,
            "placeholder": self.placeholder,
            "search_placeholder": self.search_placeholder,
            "disabled": self.disabled,
            "error": self.error,
            "lookup_url": self.lookup_url,
            "debounce_ms": self.debounce_ms,
            "message": message,
            "options": [] if message else [
                {"id": option.id, "name": option.name, "selected": option.id == self.value}
                for option in self.FilteredOptions()
            ],
        }

    # ==================== Internals ====================

    def _Find(self, option_id: Optional[str]) -> Optional[DropdownOption]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def _CancelSearch(self) -> None:
        if self._debouncer is not None:
            self._debouncer.Cancel()

    def _Search(self, text: str) -> None:
        self.on_search(text)
