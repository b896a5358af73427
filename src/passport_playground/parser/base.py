"""Unified data models for parsed API documentation.

The OpenAPI parser and the static Individual Verification table both
produce these models, so everything downstream (URL building, drafts,
code samples) sees a single endpoint shape.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]


class Param(BaseModel):
    """A single API parameter (query, path, header, or cookie)."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str  # query / path / header / cookie
    required: bool
    param_type: str = "string"  # string / integer / boolean / array / object
    description: str = ""
    default: Any = None
    constraints: dict = {}  # min, max, pattern, enum, etc.


class ApiEndpoint(BaseModel):
    """A single API endpoint with all its metadata."""

    model_config = ConfigDict(frozen=True)

    id: str
    method: HttpMethod
    path: str  # /v2/stamps/{scorer_id}/score/{address}
    summary: str
    description: str = ""
    tag: str = "General"
    parameters: list[Param] = []
    request_body: dict | None = None
    responses: dict = {}
    requires_auth: bool = False

    def params_in(self, location: str) -> list[Param]:
        return [p for p in self.parameters if p.location == location]
