from pathlib import Path

import yaml

from swagger_viewer.parser.swagger import iter_endpoints
from swagger_viewer.search import list_endpoints, search_endpoints

FIXTURES = Path(__file__).parent / "fixtures"


def _load(name: str) -> dict:
    return yaml.safe_load((FIXTURES / name).read_text(encoding="utf-8"))


class TestSearchEndpoints:
    def test_scenario_user_lookup(self):
        results = search_endpoints(_load("users.json"), "user")
        assert len(results) == 1
        assert results[0].method == "GET"
        assert results[0].path == "/users/{id}"
        assert results[0].summary == "Get user"

    def test_case_insensitive(self):
        doc = _load("petstore.yaml")
        assert len(search_endpoints(doc, "PETS")) == 3
        assert len(search_endpoints(doc, "ShowPetById")) == 1

    def test_matches_description_and_method(self):
        doc = _load("store.json")
        by_description = search_endpoints(doc, "filtered by status")
        assert [(r.method, r.path) for r in by_description] == [("GET", "/store/orders")]
        by_method = search_endpoints(doc, "delete")
        assert [(r.method, r.path) for r in by_method] == [("DELETE", "/store/orders/{order-id}")]

    def test_results_follow_document_order(self):
        results = search_endpoints(_load("store.json"), "order")
        assert [(r.method, r.path) for r in results] == [
            ("GET", "/store/orders"),
            ("POST", "/store/orders"),
            ("DELETE", "/store/orders/{order-id}"),
            ("GET", "/store/orders/{order-id}"),
        ]

    def test_results_are_exactly_the_matching_endpoints(self):
        doc = _load("store.json")
        for query in ("order", "inventor", "get", "xyz", "/", "place"):
            expected = [(e.path, e.method) for e in iter_endpoints(doc) if query in e.search_text()]
            assert [(r.path, r.method) for r in search_endpoints(doc, query)] == expected

    def test_results_carry_document_parameter_objects(self):
        [result] = search_endpoints(_load("petstore.yaml"), "showPetById")
        assert result.parameters == [
            {
                "name": "petId",
                "in": "path",
                "required": True,
                "description": "The id of the pet to retrieve",
                "schema": {"type": "string"},
            }
        ]

    def test_no_match(self):
        assert search_endpoints(_load("petstore.yaml"), "invoice") == []

    def test_absent_document_or_paths(self):
        assert search_endpoints(None, "user") == []
        assert search_endpoints({"swagger": "2.0", "info": {}}, "user") == []


class TestListEndpoints:
    def test_scenario_user_listing(self):
        summaries = list_endpoints(_load("users.json"))
        assert [s.model_dump() for s in summaries] == [{"path": "/users/{id}", "methods": ["get"]}]

    def test_one_entry_per_path_with_all_methods(self):
        doc = _load("store.json")
        summaries = list_endpoints(doc)
        assert len(summaries) == len(doc["paths"])
        for summary in summaries:
            assert summary.methods == list(doc["paths"][summary.path])

