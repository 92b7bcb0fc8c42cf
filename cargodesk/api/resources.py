"""
CargoDesk - Resource Definitions

Declarative request definitions for every backend resource, and the
ResourceClient that runs them through the session's query cache.

Every resource exposes list, search, get-by-id, create, update and delete.
Queries provide the resource's cache tag (get-by-id also provides a tag for
the record id); successful mutations invalidate the resource tag so every
cached list is fetched again on next read.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from cargodesk.api.query_cache import CacheTag, QueryCache
from cargodesk.dropdown import DropdownOption, OptionsFromRecords
from cargodesk.models.api import Page, SearchParams, SORT_ASC

# Configure logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationNotice:
    """Messages shown after a mutation; {label} and {name} are substituted"""
    success: str
    failure: str


def DefaultNotices(label: str) -> Dict[str, MutationNotice]:
    """Standard create/update/delete messages for a resource label"""
    lower = label.lower()
    return {
        "create": MutationNotice(f"{label} created successfully!", f"Failed to create {lower}"),
        "update": MutationNotice(f"{label} updated successfully!", f"Failed to update {lower}"),
        "delete": MutationNotice(f'{label} "{{name}}" deleted successfully!', f'Failed to delete {lower} "{{name}}"'),
    }


@dataclass(frozen=True)
class ResourceDefinition:
    """Declaration of one backend resource"""
    module: str          # permission module and URL slug
    label: str           # singular display name
    label_plural: str    # plural display name
    path: str            # backend collection path
    tag: str             # cache tag type
    id_field: str
    name_field: str
    search_field: str    # filter used by table search and dropdown lookups
    update_method: str = "PATCH"
    has_search: bool = True  # backend exposes {path}/search with sort support
    notices: Dict[str, MutationNotice] = field(default_factory=dict)

    def Notice(self, operation: str) -> MutationNotice:
        """Notification texts declared for an operation"""
        notices = self.notices or DefaultNotices(self.label)
        return notices.get(operation) or DefaultNotices(self.label)[operation]

    def SuccessMessage(self, operation: str, name: str = "") -> str:
        return self.Notice(operation).success.format(label=self.label, name=name)

    def FailureMessage(self, operation: str, name: str = "") -> str:
        return self.Notice(operation).failure.format(label=self.label, name=name)


def _Define(module, label, label_plural, path, tag, id_field, name_field,
            search_field=None, update_method="PATCH", has_search=True,
            extra_notices=None) -> ResourceDefinition:
    notices = DefaultNotices(label)
    notices.update(extra_notices or {})
    return ResourceDefinition(
        module=module,
        label=label,
        label_plural=label_plural,
        path=path,
        tag=tag,
        id_field=id_field,
        name_field=name_field,
        search_field=search_field or name_field,
        update_method=update_method,
        has_search=has_search,
        notices=notices
    )


RESOURCES: Dict[str, ResourceDefinition] = {
    definition.module: definition for definition in (
        _Define("carriers", "Carrier", "Carriers", "/master/carriers", "Carrier",
                "carrier_id", "carrier_name"),
        _Define("cities", "City", "Cities", "/master/cities", "City",
                "city_id", "city_name"),
        _Define("countries", "Country", "Countries", "/master/countries", "Country",
                "country_id", "country_name"),
        _Define("ports-airports", "Port/Airport", "Ports & Airports", "/master/ports-airports", "PortAirport",
                "port_id", "port_name"),
        _Define("commodities", "Commodity", "Commodities", "/master/commodities", "Commodity",
                "commodity_id", "commodity_name"),
        _Define("parties", "Party", "Parties", "/master/parties", "Party",
                "party_id", "name"),
        _Define("jobs", "Job", "Jobs", "/master/jobs", "Job",
                "job_id", "job_number", search_field="search", has_search=False,
                extra_notices={"status": MutationNotice("Job status updated successfully!", "Failed to update job status")}),
        _Define("master-awbs", "Master AWB", "Master AWBs", "/master/master-awbs", "MasterAwb",
                "master_id", "master_number", update_method="PUT"),
        _Define("house-awbs", "House AWB", "House AWBs", "/master/house-awbs", "HouseAwb",
                "house_id", "house_number", update_method="PUT"),
        _Define("users", "User", "Users", "/users", "User",
                "id", "email", search_field="search", has_search=False),
    )
}


class ResourceClient:
    """
    Runs one resource's queries and mutations.

    Queries go through the session's QueryCache; results of list and search
    are normalized into Page immediately after the fetch.
    """

    def __init__(self, api, cache: QueryCache, definition: ResourceDefinition):
        """
        Initialize resource client.

        Args:
            api: BackendAPI bound to the current session
            cache: The session's query cache
            definition: Resource declaration
        """
        self.api = api
        self.cache = cache
        self.definition = definition

    # ==================== Helpers ====================

    @property
    def type_tag(self) -> CacheTag:
        return CacheTag(self.definition.tag)

    def id_tag(self, record_id: Any) -> CacheTag:
        return CacheTag(self.definition.tag, str(record_id))

    def record_id(self, record: dict) -> str:
        return str(record.get(self.definition.id_field, ""))

    def record_name(self, record: dict) -> str:
        return str(record.get(self.definition.name_field) or self.record_id(record))

    def _endpoint(self, operation: str) -> str:
        return f"{self.definition.module}.{operation}"

    # ==================== Queries ====================

    def list(self, page: int = 1, limit: int = 25, search: Optional[str] = None) -> Page:
        """
        List records with simple pagination.

        Args:
            page: Page number, starting at 1
            limit: Page size
            search: Free-text search

        Returns:
            Page of records
        """
        params = {"page": page, "limit": limit}
        if search:
            params["search"] = search

        def fetch():
            data = self.api.request("GET", self.definition.path, params=params)
            return Page.FromPayload(data, page=page, page_size=limit)

        return self.cache.query(self._endpoint("list"), params, fetch, [self.type_tag])

    def search(self, filters: Optional[Dict[str, str]] = None, page: int = 1, page_size: int = 25,
               sort_by: Optional[str] = None, sort_dir: str = SORT_ASC) -> Page:
        """
        Search records by structured filters, sorted and paginated.

        Args:
            filters: Filter fields (e.g., {"carrier_name": "FedEx"})
            page: Page number, starting at 1
            page_size: Page size
            sort_by: Sort field
            sort_dir: "ASC" or "DESC"

        Returns:
            Page of records
        """
        search_params = SearchParams(
            filters=filters or {},
            page=page,
            page_size=page_size,
            sort_by=sort_by,
            sort_dir=sort_dir
        )
        params = search_params.ToQuery()

        def fetch():
            data = self.api.request("GET", f"{self.definition.path}/search", params=params)
            return Page.FromPayload(data, page=page, page_size=page_size)

        return self.cache.query(self._endpoint("search"), params, fetch, [self.type_tag])

    def get(self, record_id: Any) -> dict:
        """
        Fetch one record.

        Args:
            record_id: Record id

        Returns:
            Record dictionary

        Raises:
            CargoDeskNotFoundError: If the record does not exist
        """
        def fetch():
            return self.api.request("GET", f"{self.definition.path}/{record_id}")

        return self.cache.query(
            self._endpoint("get"),
            str(record_id),
            fetch,
            [self.type_tag, self.id_tag(record_id)]
        )

    def options(self, query: str = "", limit: int = 50) -> List[DropdownOption]:
        """
        Dropdown options matching a search string.

        Args:
            query: Text typed into the dropdown
            limit: Maximum number of options

        Returns:
            Options projected from the search result
        """
        page = self.find(query, page=1, page_size=limit, sort_by=self.definition.name_field)
        return OptionsFromRecords(page.items, self.definition.id_field, self.definition.name_field)

    def find(self, term: str = "", page: int = 1, page_size: int = 25,
             sort_by: Optional[str] = None, sort_dir: str = SORT_ASC) -> Page:
        """
        Free-text lookup used by list pages and dropdowns.

        Resources with a search endpoint filter on their search field and
        sort server-side; the others fall back to list with ?search=.
        """
        if self.definition.has_search:
            filters = {self.definition.search_field: term} if term else {}
            return self.search(filters, page=page, page_size=page_size, sort_by=sort_by, sort_dir=sort_dir)
        return self.list(page=page, limit=page_size, search=term or None)

    # ==================== Mutations ====================

    def create(self, data: dict) -> Any:
        """
        Create a record.

        Args:
            data: Validated payload

        Returns:
            Created record
        """
        result = self.api.request("POST", self.definition.path, json=data)
        self.cache.invalidate([self.type_tag])
        logger.info(f"Created {self.definition.label.lower()}")
        return result

    def update(self, record_id: Any, data: dict) -> Any:
        """
        Update a record.

        Args:
            record_id: Record id
            data: Validated payload

        Returns:
            Updated record
        """
        result = self.api.request(self.definition.update_method, f"{self.definition.path}/{record_id}", json=data)
        self.cache.invalidate([self.type_tag, self.id_tag(record_id)])
        logger.info(f"Updated {self.definition.label.lower()} {record_id}")
        return result

    def delete(self, record_id: Any) -> Any:
        """
        Delete a record.

        Args:
            record_id: Record id

        Returns:
            Response data (usually None)
        """
        result = self.api.request("DELETE", f"{self.definition.path}/{record_id}")
        self.cache.invalidate([self.type_tag, self.id_tag(record_id)])
        logger.info(f"Deleted {self.definition.label.lower()} {record_id}")
        return result

    def update_status(self, record_id: Any, status: str) -> Any:
        """
        Change a record's workflow status (jobs).

        Args:
            record_id: Record id
            status: New status

        Returns:
            Updated record
        """
        result = self.api.request("PATCH", f"{self.definition.path}/{record_id}/status", json={"status": status})
        self.cache.invalidate([self.type_tag, self.id_tag(record_id)])
        logger.info(f"Updated {self.definition.label.lower()} {record_id} status to {status}")
        return result
