"""Assembles the navigable playground from an OpenAPI snapshot."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from pydantic import BaseModel

from passport_playground.parser.base import ApiEndpoint
from passport_playground.parser.openapi import (
    fetch_openapi_spec,
    get_base_url,
    group_endpoints_by_tag,
    load_endpoints,
    sort_grouped_endpoints,
)
from passport_playground.registry import (
    get_base_url_for_endpoint,
    get_endpoint_description,
    get_endpoint_display_name,
    get_endpoint_docs_url,
    get_endpoint_slug,
    get_tag_display_name,
)

logger = logging.getLogger("passport_playground.playground")


class SpecCache:
    """Holds one OpenAPI snapshot and refetches it once it is older than ``ttl``.

    Readers between revalidations all get the same dict.
    """

    def __init__(
        self,
        url: str,
        ttl: float = 3600.0,
        loader: Callable[[str], dict] = fetch_openapi_spec,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.url = url
        self.ttl = ttl
        self._loader = loader
        self._clock = clock
        self._lock = threading.Lock()
        self._doc: dict | None = None
        self._fetched_at = 0.0

    def get(self) -> dict:
        with self._lock:
            now = self._clock()
            if self._doc is None or now - self._fetched_at >= self.ttl:
                logger.info("spec_revalidate url=%s", self.url)
                self._doc = self._loader(self.url)
                self._fetched_at = now
            return self._doc

    def invalidate(self) -> None:
        with self._lock:
            self._doc = None


class EndpointView(BaseModel):
    id: str
    slug: str
    display_name: str
    method: str
    path: str
    summary: str
    description: str
    docs_url: str | None
    base_url: str
    requires_auth: bool
    endpoint: ApiEndpoint


class NavigationItem(BaseModel):
    tag: str
    display_name: str
    endpoints: list[EndpointView]


class Playground(BaseModel):
    base_url: str
    default_scorer_id: str
    navigation: list[NavigationItem]

    def iter_endpoints(self):
        for item in self.navigation:
            yield from item.endpoints

    def find(self, slug: str) -> EndpointView | None:
        return next((view for view in self.iter_endpoints() if view.slug == slug), None)


def endpoint_view(endpoint: ApiEndpoint, default_base_url: str) -> EndpointView:
    return EndpointView(
        id=endpoint.id,
        slug=get_endpoint_slug(endpoint.id),
        display_name=get_endpoint_display_name(endpoint.id),
        method=endpoint.method,
        path=endpoint.path,
        summary=endpoint.summary,
        description=get_endpoint_description(endpoint.id) or endpoint.description,
        docs_url=get_endpoint_docs_url(endpoint.id),
        base_url=get_base_url_for_endpoint(endpoint.id, default_base_url),
        requires_auth=endpoint.requires_auth,
        endpoint=endpoint,
    )


def build_playground(doc: dict, default_scorer_id: str = "") -> Playground:
    base_url = get_base_url(doc)
    grouped = sort_grouped_endpoints(group_endpoints_by_tag(load_endpoints(doc)))

    navigation = [
        NavigationItem(
            tag=tag,
            display_name=get_tag_display_name(tag),
            endpoints=[endpoint_view(ep, base_url) for ep in endpoints],
        )
        for tag, endpoints in grouped.items()
    ]
    return Playground(base_url=base_url, default_scorer_id=default_scorer_id, navigation=navigation)
