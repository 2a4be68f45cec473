import asyncio
from pathlib import Path

import httpx

from swagger_viewer.fetcher import fetch_document

FIXTURES = Path(__file__).parent / "fixtures"


def _client(status: int = 200, text: str = "", error: Exception | None = None) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if error is not None:
            raise error
        return httpx.Response(status, text=text)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _fetch(client: httpx.AsyncClient, url: str = "http://x/doc.json"):
    async def go():
        async with client:
            return await fetch_document(url, client=client)

    return asyncio.run(go())


class TestFetchDocument:
    def test_fetch_json_document(self):
        doc = _fetch(_client(text=(FIXTURES / "users.json").read_text(encoding="utf-8")))
        assert list(doc["paths"]) == ["/users/{id}"]
        # internal $ref resolved by the bundler
        assert "$ref" not in doc["paths"]["/users/{id}"]["get"]["responses"]["200"]["schema"]

    def test_fetch_yaml_document(self):
        doc = _fetch(_client(text=(FIXTURES / "petstore.yaml").read_text(encoding="utf-8")), "http://x/doc.yaml")
        assert list(doc["paths"]) == ["/pets", "/pets/{petId}"]

    def test_http_error_status_returns_none(self):
        assert _fetch(_client(status=404, text="not found")) is None

    def test_network_error_returns_none(self):
        assert _fetch(_client(error=httpx.ConnectError("refused"))) is None

    def test_invalid_body_returns_none(self):
        assert _fetch(_client(text="<html>oops</html>")) is None

    def test_non_openapi_json_returns_none(self):
        assert _fetch(_client(text='{"hello": "world"}')) is None

    def test_schema_validation_failure_returns_none(self):
        assert _fetch(_client(text='{"swagger": "2.0", "paths": {}}')) is None

    def test_recursive_schema_is_kept(self):
        doc = _fetch(_client(text=(FIXTURES / "tree.yaml").read_text(encoding="utf-8")), "http://x/tree.yaml")
        assert doc is not None
        schema = doc["paths"]["/nodes/{nodeId}"]["get"]["responses"]["200"]["content"]["application/json"]["schema"]
        assert schema["properties"]["name"]["type"] == "string"
        # the cycle ends in a reference instead of being expanded forever
        node = schema
        for _ in range(5):
            node = node["properties"]["children"]["items"]
            if "$ref" in node:
                break
        assert node == {"$ref": "#/components/schemas/Node"}

    def test_openapi31_type_lists(self):
        doc = _fetch(_client(text=(FIXTURES / "users31.json").read_text(encoding="utf-8")))
        assert list(doc["paths"]) == ["/users"]
