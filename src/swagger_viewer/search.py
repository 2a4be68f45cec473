"""Keyword search and listing over a cached document's endpoints."""

from swagger_viewer.parser.base import EndpointSummary, SearchResult
from swagger_viewer.parser.swagger import iter_endpoints, summarize_paths


def search_endpoints(doc: dict | None, query: str) -> list[SearchResult]:
    """Return every endpoint whose path, method, summary, description or
    operationId contains the query, case-insensitively, in document order.
    """
    needle = query.lower()
    return [
        SearchResult.from_endpoint(endpoint)
        for endpoint in iter_endpoints(doc)
        if needle in endpoint.search_text()
    ]


def list_endpoints(doc: dict | None) -> list[EndpointSummary]:
    return summarize_paths(doc)
