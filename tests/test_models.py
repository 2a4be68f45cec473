from swagger_viewer.parser.base import Endpoint, EndpointSummary, Param, SearchResult


class TestParam:
    def test_create_required_param(self):
        p = Param(name="id", location="path", required=True, param_type="integer")
        assert p.name == "id"
        assert p.required is True
        assert p.description == ""
        assert p.constraints == {}
        assert p.schema_ is None

    def test_schema_alias_round_trips(self):
        p = Param(name="limit", location="query", schema={"type": "integer"})
        assert p.schema_ == {"type": "integer"}
        assert p.model_dump(by_alias=True)["schema"] == {"type": "integer"}

    def test_defaults(self):
        p = Param(name="q", location="query")
        assert p.required is False
        assert p.param_type == "string"


class TestEndpoint:
    def test_create_minimal_endpoint(self):
        ep = Endpoint(path="/api/users", method="GET")
        assert ep.summary == ""
        assert ep.parameters == []
        assert ep.request_body is None

    def test_params_in_filters_by_location(self):
        ep = Endpoint(
            path="/users/{id}",
            method="GET",
            parameters=[
                Param(name="id", location="path", required=True),
                Param(name="fields", location="query"),
            ],
        )
        assert [p.name for p in ep.params_in("path")] == ["id"]
        assert [p.name for p in ep.params_in("query")] == ["fields"]
        assert ep.params_in("body") == []

    def test_search_text_skips_empty_fields(self):
        ep = Endpoint(path="/Users", method="GET", summary="Get User", operation_id="getUser")
        assert ep.search_text() == "/users get get user getuser"


class TestSearchResult:
    def test_from_endpoint_projects_fields(self):
        ep = Endpoint(
            path="/pets",
            method="POST",
            summary="Create a pet",
            operation_id="createPets",
            responses={"201": {"description": "Created"}},
            tags=["pets"],
        )
        result = SearchResult.from_endpoint(ep)
        assert result.path == "/pets"
        assert result.method == "POST"
        assert result.responses == {"201": {"description": "Created"}}
        assert "operation_id" not in result.model_dump()
        assert "tags" not in result.model_dump()


class TestEndpointSummary:
    def test_dump(self):
        summary = EndpointSummary(path="/pets", methods=["get", "post"])
        assert summary.model_dump() == {"path": "/pets", "methods": ["get", "post"]}
