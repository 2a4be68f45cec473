"""Data models for a parsed OpenAPI / Swagger document.

The document itself stays a plain dict (it is what the validator hands back);
these models are the read-only projections the tools work with.
"""

from pydantic import BaseModel, ConfigDict, Field


class Param(BaseModel):
    """A single operation parameter."""

    name: str
    location: str  # query / path / body / header / cookie / formData
    required: bool = False
    param_type: str = "string"  # string / integer / boolean / array / object
    description: str = ""
    constraints: dict = {}  # minimum, maximum, pattern, enum, etc.
    schema_: dict | None = Field(default=None, alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class Endpoint(BaseModel):
    """One (path, method) operation of the document."""

    path: str  # /users/{id}
    method: str  # GET / POST / PUT / DELETE / PATCH ...
    summary: str = ""
    description: str = ""
    operation_id: str = ""
    parameters: list[Param] = []
    raw_parameters: list[dict] = []  # as written in the document, path-level ones merged in
    request_body: dict | None = None
    responses: dict = {}
    tags: list[str] = []

    def params_in(self, location: str) -> list[Param]:
        return [p for p in self.parameters if p.location == location]

    def search_text(self) -> str:
        """Lower-cased text the keyword search matches against."""
        fields = [self.path, self.method.lower(), self.summary, self.description, self.operation_id]
        return " ".join(f for f in fields if f).lower()


class SearchResult(BaseModel):
    """Endpoint projection returned by the search tool."""

    path: str
    method: str
    summary: str = ""
    description: str = ""
    parameters: list[dict] = []  # document parameter objects ("in", "schema", ...)
    responses: dict = {}

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint) -> "SearchResult":
        return cls(
            path=endpoint.path,
            method=endpoint.method,
            summary=endpoint.summary,
            description=endpoint.description,
            parameters=endpoint.raw_parameters,
            responses=endpoint.responses,
        )


class EndpointSummary(BaseModel):
    """A path and the HTTP methods it defines, in document order."""

    path: str
    methods: list[str]
