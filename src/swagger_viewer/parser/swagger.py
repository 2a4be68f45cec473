"""OpenAPI / Swagger document parser.

Decodes, validates and bundles OpenAPI 3.x and Swagger 2.0 documents, and
turns their path table into Endpoint models.
"""

import json
from collections.abc import Iterator
from urllib.parse import urlparse

import prance
import yaml
from prance.util.formats import ParseError
from prance.util.url import ResolutionError

from .base import Endpoint, EndpointSummary, Param

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Everything that means "this text is not a usable API document".
DOCUMENT_ERRORS = (
    ValueError,
    yaml.YAMLError,
    prance.ValidationError,
    ResolutionError,
    ParseError,
)


def decode_document(text: str) -> dict:
    """Decode a document body as JSON, falling back to YAML.

    Raises ValueError when the text is neither, or is not a mapping.
    """
    try:
        doc = json.loads(text)
    except json.JSONDecodeError:
        doc = yaml.safe_load(text)

    if not isinstance(doc, dict):
        raise ValueError("API document must be a JSON object")
    if "openapi" not in doc and "swagger" not in doc:
        raise ValueError("API document has no 'openapi' or 'swagger' version field")
    return doc


def validate_document(text: str) -> dict:
    """Validate a document and resolve its $ref links into one bundle.

    Self-referencing schemas (trees, threads) are valid; the cyclic $ref is
    left in place instead of being expanded.
    """
    parser = prance.ResolvingParser(
        spec_string=text,
        backend="openapi-spec-validator",
        strict=False,
        lazy=True,
        recursion_limit_handler=_keep_cyclic_ref,
    )
    parser.parse()
    return parser.specification


def _keep_cyclic_ref(limit: int, ref_url, recursions) -> dict:
    if isinstance(ref_url, str):
        ref_url = urlparse(ref_url)
    if ref_url.fragment:
        return {"$ref": f"#{ref_url.fragment}"}
    return {"$ref": ref_url.geturl()}


def iter_endpoints(doc: dict | None) -> Iterator[Endpoint]:
    """Yield every operation of the document in path, then method order."""
    if not doc or not doc.get("paths"):
        return

    for path, path_item in doc["paths"].items():
        if not isinstance(path_item, dict):
            continue
        shared = path_item.get("parameters", [])
        for method, operation in path_item.items():
            if method.lower() not in HTTP_METHODS:
                continue
            yield _build_endpoint(path, method, operation or {}, shared)


def find_endpoint(doc: dict | None, path: str, method: str) -> Endpoint | None:
    """Look up a single operation; the method is matched case-insensitively."""
    if not doc or not doc.get("paths"):
        return None

    path_item = doc["paths"].get(path)
    if not isinstance(path_item, dict):
        return None

    wanted = method.lower()
    if wanted not in HTTP_METHODS:
        return None
    for key, operation in path_item.items():
        if key.lower() == wanted:
            return _build_endpoint(path, key, operation or {}, path_item.get("parameters", []))
    return None


def summarize_paths(doc: dict | None) -> list[EndpointSummary]:
    if not doc or not doc.get("paths"):
        return []

    summaries = []
    for path, path_item in doc["paths"].items():
        if not isinstance(path_item, dict):
            continue
        methods = [m for m in path_item if m.lower() in HTTP_METHODS]
        summaries.append(EndpointSummary(path=path, methods=methods))
    return summaries


def _build_endpoint(path: str, method: str, operation: dict, shared: list[dict]) -> Endpoint:
    raw_parameters = _merge_parameters(shared, operation.get("parameters", []))
    return Endpoint(
        path=path,
        method=method.upper(),
        summary=operation.get("summary") or "",
        description=operation.get("description") or "",
        operation_id=operation.get("operationId") or "",
        parameters=_parse_parameters(raw_parameters),
        raw_parameters=raw_parameters,
        request_body=_parse_request_body(operation.get("requestBody")),
        responses=operation.get("responses", {}),
        tags=operation.get("tags", []),
    )


def _merge_parameters(shared: list[dict], own: list[dict]) -> list[dict]:
    """Path-level parameters first; an operation parameter with the same name and location replaces one."""
    own_keys = {(p.get("name"), p.get("in")) for p in own}
    merged = [p for p in shared if (p.get("name"), p.get("in")) not in own_keys]
    return merged + list(own)


def _parse_parameters(params: list[dict]) -> list[Param]:
    result = []
    for p in params:
        if "name" not in p:
            continue
        # Swagger 2 keeps type info on the parameter itself, OpenAPI 3 under "schema"
        schema = p.get("schema") or {}
        source = schema if schema else p
        constraints = {}
        for key in ("minimum", "maximum", "minLength", "maxLength", "pattern", "enum"):
            if key in source:
                constraints[key] = source[key]

        result.append(
            Param(
                name=p["name"],
                location=p.get("in", "query"),
                required=p.get("required", False),
                param_type=_param_type(source.get("type"), p.get("in")),
                description=p.get("description", ""),
                constraints=constraints,
                schema=schema or None,
            )
        )
    return result


def _param_type(declared, location: str | None) -> str:
    """Collapse an OpenAPI 3.1 type list such as ["string", "null"] to one name."""
    if isinstance(declared, list):
        declared = next((t for t in declared if t != "null"), declared[0] if declared else None)
    if isinstance(declared, str):
        return declared
    return "object" if location == "body" else "string"


def _parse_request_body(body: dict | None) -> dict | None:
    if not body:
        return None
    content = body.get("content", {})
    for content_type in ("application/json", "multipart/form-data"):
        if content_type in content:
            return content[content_type].get("schema") or {}
    # Fallback: return first available schema
    for ct_data in content.values():
        return ct_data.get("schema") or {}
    return {}
