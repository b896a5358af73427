"""OpenAPI document loader and endpoint normalizer.

Fetches the Passport OpenAPI document (or reads a local JSON/YAML copy)
and flattens its path table into ApiEndpoint models.
"""

import logging
import re
from pathlib import Path

import requests
import yaml

from passport_playground.registry import (
    INDIVIDUAL_VERIFICATION_ENDPOINTS,
    get_endpoint_order,
    get_tag_order,
)

from .base import ApiEndpoint, Param

logger = logging.getLogger("passport_playground.openapi")

HTTP_METHODS = ("get", "post", "put", "delete", "patch")
DEFAULT_BASE_URL = "https://api.passport.xyz"
DEFAULT_TAG = "General"

_TAG_RE = re.compile(r"<[^>]*>")
_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
    ("&#38;", "&"),
)


class SpecError(RuntimeError):
    """Raised when an OpenAPI document cannot be turned into endpoints."""


class SpecFetchError(SpecError):
    """Raised when the remote OpenAPI document cannot be fetched."""

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Failed to fetch OpenAPI spec from {url}: {detail}")


def fetch_openapi_spec(url: str, timeout: float | None = None) -> dict:
    """Fetch and deserialize the remote OpenAPI document."""
    try:
        response = requests.get(url, timeout=timeout, headers={"Accept": "application/json"})
    except requests.RequestException as exc:
        raise SpecFetchError(url, str(exc)) from exc

    if not response.ok:
        raise SpecFetchError(url, f"{response.status_code} {response.reason}")

    try:
        doc = response.json()
    except ValueError as exc:
        raise SpecFetchError(url, f"invalid JSON: {exc}") from exc

    logger.info("openapi_fetched url=%s paths=%d", url, len(doc.get("paths", {})))
    return doc


def load_openapi_file(file_path: Path) -> dict:
    """Read a local OpenAPI document (JSON or YAML)."""
    doc = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    if not isinstance(doc, dict):
        raise SpecError(f"{file_path} is not an OpenAPI document")
    return doc


def parse_endpoints(doc: dict) -> list[ApiEndpoint]:
    """Flatten the document's path table, in document order."""
    endpoints = []
    paths = doc.get("paths", {})

    for path, path_item in paths.items():
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not operation:
                continue

            endpoints.append(
                ApiEndpoint(
                    id=operation.get("operationId") or f"{method}-{path}",
                    method=method.upper(),
                    path=path,
                    summary=operation.get("summary") or "",
                    description=strip_html_tags(operation.get("description") or ""),
                    tag=(operation.get("tags") or [DEFAULT_TAG])[0],
                    parameters=_parse_parameters(operation.get("parameters", [])),
                    request_body=operation.get("requestBody"),
                    responses=operation.get("responses", {}),
                    requires_auth=check_requires_auth(operation),
                )
            )

    return endpoints


def load_endpoints(doc: dict) -> list[ApiEndpoint]:
    """Parse the document and append the static Individual Verification endpoints."""
    endpoints = [*parse_endpoints(doc), *INDIVIDUAL_VERIFICATION_ENDPOINTS]
    seen: set[str] = set()
    for ep in endpoints:
        if ep.id in seen:
            raise SpecError(f"Duplicate endpoint id: {ep.id}")
        seen.add(ep.id)
    return endpoints


def check_requires_auth(operation: dict) -> bool:
    # An empty requirement object ({}) means the operation is public.
    security = operation.get("security")
    if not security:
        return False
    return any(len(requirement) > 0 for requirement in security)


def strip_html_tags(html: str) -> str:
    text = _TAG_RE.sub("", html)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text.strip()


def group_endpoints_by_tag(endpoints: list[ApiEndpoint]) -> dict[str, list[ApiEndpoint]]:
    """Group endpoints by tag, keeping first-seen tag order."""
    groups: dict[str, list[ApiEndpoint]] = {}
    for ep in endpoints:
        groups.setdefault(ep.tag, []).append(ep)
    return groups


def sort_grouped_endpoints(groups: dict[str, list[ApiEndpoint]]) -> dict[str, list[ApiEndpoint]]:
    """Order tags and the endpoints inside them by registry order.

    Both sorts are stable, so ties keep source order.
    """
    ordered_tags = sorted(groups, key=get_tag_order)
    return {
        tag: sorted(groups[tag], key=lambda ep: get_endpoint_order(ep.id))
        for tag in ordered_tags
    }


def get_base_url(doc: dict) -> str:
    servers = doc.get("servers") or []
    if servers and servers[0].get("url"):
        return servers[0]["url"]
    return DEFAULT_BASE_URL


def resolve_schema(doc: dict, schema: dict | None) -> dict | None:
    if not schema:
        return None
    ref = schema.get("$ref")
    if ref:
        name = ref.replace("#/components/schemas/", "")
        return doc.get("components", {}).get("schemas", {}).get(name)
    return schema


def get_path_parameters(endpoint: ApiEndpoint) -> list[Param]:
    return endpoint.params_in("path")


def get_query_parameters(endpoint: ApiEndpoint) -> list[Param]:
    return endpoint.params_in("query")


def _parse_parameters(params: list[dict]) -> list[Param]:
    result = []
    for p in params:
        schema = p.get("schema", {})
        constraints = {}
        for key in ("minimum", "maximum", "minLength", "maxLength", "pattern", "enum"):
            if key in schema:
                constraints[key] = schema[key]

        result.append(
            Param(
                name=p["name"],
                location=p.get("in", "query"),
                required=p.get("required", False),
                param_type=_schema_type(schema),
                description=p.get("description") or "",
                default=schema.get("default"),
                constraints=constraints,
            )
        )
    return result


def _schema_type(schema: dict) -> str:
    # OpenAPI 3.1 allows a list of types, e.g. ["string", "null"].
    schema_type = schema.get("type", "string")
    if isinstance(schema_type, list):
        return next((t for t in schema_type if t != "null"), "string")
    return schema_type
