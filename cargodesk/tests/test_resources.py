"""
Tests for resource definitions and the cached resource client
"""

import pytest

from cargodesk.api.query_cache import QueryCache
from cargodesk.api.resources import RESOURCES, ResourceClient
from cargodesk.exceptions import CargoDeskRequestError


class FakeAPI:
    """Records requests and answers from a handler"""

    def __init__(self, handler=None):
        self.calls = []
        self.handler = handler or (lambda method, endpoint, params, json: {"data": [], "total": 0})

    def request(self, method, endpoint, params=None, json=None):
        self.calls.append((method, endpoint, params, json))
        return self.handler(method, endpoint, params, json)


def Client(module, api=None, cache=None):
    api = api if api is not None else FakeAPI()
    cache = cache if cache is not None else QueryCache()
    return ResourceClient(api, cache, RESOURCES[module])


def test_search_sends_filters_page_and_sort():
    api = FakeAPI()
    client = Client("carriers", api)
    client.search({"carrier_name": "Fed"}, page=2, page_size=10, sort_by="carrier_name", sort_dir="DESC")

    method, endpoint, params, _ = api.calls[0]
    assert (method, endpoint) == ("GET", "/master/carriers/search")
    assert params == {"carrier_name": "Fed", "page": 2, "page_size": 10, "sort_by": "carrier_name", "sort_dir": "DESC"}


def test_results_are_normalized_and_cached():
    api = FakeAPI(lambda *args: {"data": [{"carrier_id": "c1"}], "total": 1, "page": 1, "limit": 25, "totalPages": 1})
    client = Client("carriers", api)

    first = client.search()
    second = client.search()
    assert first.items == [{"carrier_id": "c1"}]
    assert second is first
    assert len(api.calls) == 1


def test_mutation_invalidates_lists():
    """A successful create makes the next list read go back to the backend"""
    api = FakeAPI()
    client = Client("carriers", api)
    client.search()
    client.create({"carrier_name": "FedEx"})
    client.search()

    assert [call[:2] for call in api.calls] == [
        ("GET", "/master/carriers/search"),
        ("POST", "/master/carriers"),
        ("GET", "/master/carriers/search"),
    ]


def test_failed_mutation_keeps_cache():
    def Handler(method, endpoint, params, json):
        if method == "DELETE":
            raise CargoDeskRequestError("Carrier is in use", status_code=409)
        return {"data": [], "total": 0}

    api = FakeAPI(Handler)
    cache = QueryCache()
    client = Client("carriers", api, cache)
    client.search()
    with pytest.raises(CargoDeskRequestError):
        client.delete("c1")
    assert len(cache) == 1


def test_update_method_per_resource():
    api = FakeAPI()
    Client("carriers", api).update("c1", {"carrier_name": "X"})
    Client("master-awbs", api).update("m1", {"master_number": "X"})
    assert [call[:2] for call in api.calls] == [("PATCH", "/master/carriers/c1"), ("PUT", "/master/master-awbs/m1")]


def test_find_uses_list_for_resources_without_search():
    api = FakeAPI()
    Client("jobs", api).find("JOB-1", page=2, page_size=10)
    Client("carriers", api).find("Fed")

    assert api.calls[0][:3] == ("GET", "/master/jobs", {"page": 2, "limit": 10, "search": "JOB-1"})
    method, endpoint, params, _ = api.calls[1]
    assert (method, endpoint) == ("GET", "/master/carriers/search")
    assert params["carrier_name"] == "Fed"


def test_get_is_invalidated_by_update():
    api = FakeAPI(lambda method, endpoint, params, json: {"carrier_id": "c1"})
    client = Client("carriers", api)
    client.get("c1")
    client.get("c1")
    client.update("c1", {})
    client.get("c1")
    assert [call[0] for call in api.calls] == ["GET", "PATCH", "GET"]


def test_job_status_update():
    api = FakeAPI()
    Client("jobs", api).update_status("j1", "closed")
    assert api.calls[0][:2] == ("PATCH", "/master/jobs/j1/status")
    assert api.calls[0][3] == {"status": "closed"}


def test_options_are_projected():
    api = FakeAPI(lambda *args: {"data": [{"country_id": "in", "country_name": "India"}], "total": 1})
    options = Client("countries", api).options("Ind")
    assert [(option.id, option.name) for option in options] == [("in", "India")]
    assert api.calls[0][2]["sort_by"] == "country_name"


def test_notification_messages():
    carriers = RESOURCES["carriers"]
    assert carriers.SuccessMessage("create") == "Carrier created successfully!"
    assert carriers.FailureMessage("update") == "Failed to update carrier"
    assert carriers.SuccessMessage("delete", "FedEx") == 'Carrier "FedEx" deleted successfully!'
    assert carriers.FailureMessage("delete", "FedEx") == 'Failed to delete carrier "FedEx"'
    assert RESOURCES["jobs"].SuccessMessage("status") == "Job status updated successfully!"
    assert RESOURCES["house-awbs"].SuccessMessage("update") == "House AWB updated successfully!"
