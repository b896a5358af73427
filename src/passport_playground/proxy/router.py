"""Rewrites an upstream request into a call to the matching local proxy.

The browser-side (or CLI) never talks to an upstream directly: the real
path and query travel inside the proxy URL and the server adds whatever
credential the upstream needs.
"""

import json
import logging
from urllib.parse import parse_qsl, urlencode, urlsplit

from passport_playground.executor import ApiRequest
from passport_playground.registry import (
    UPSTREAMS,
    Upstream,
    get_endpoint_meta,
    get_upstream_for_host,
)

logger = logging.getLogger("passport_playground.proxy")

JSON_HEADERS = {"Content-Type": "application/json"}


def select_upstream(target_url: str, endpoint_id: str | None = None) -> Upstream:
    """Pick the upstream from endpoint metadata, falling back to the URL host."""
    if endpoint_id is not None:
        meta = get_endpoint_meta(endpoint_id)
        if meta is not None and meta.upstream is not None:
            return meta.upstream
    return get_upstream_for_host(urlsplit(target_url).hostname)


def build_proxied_request(
    method: str,
    target_url: str,
    body: dict | None = None,
    *,
    origin: str,
    endpoint_id: str | None = None,
) -> ApiRequest:
    upstream = select_upstream(target_url, endpoint_id)
    parts = urlsplit(target_url)

    # Later keys overwrite earlier ones, including a target query key named "path".
    query: dict[str, str] = {"path": parts.path}
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        query[key] = value

    proxy_url = f"{origin.rstrip('/')}{UPSTREAMS[upstream].proxy_route}?{urlencode(query)}"
    logger.debug("proxy_route_selected upstream=%s target=%s", upstream.value, target_url)

    return ApiRequest(
        method=method,
        url=proxy_url,
        headers=dict(JSON_HEADERS),
        body=json.dumps(body) if body is not None else None,
    )


def build_direct_api_request(
    method: str,
    url: str,
    api_key: str,
    body: dict | None = None,
) -> ApiRequest:
    """The request as it would go straight to the upstream; used for display."""
    headers = dict(JSON_HEADERS)
    if api_key:
        headers["X-API-Key"] = api_key
    return ApiRequest(
        method=method,
        url=url,
        headers=headers,
        body=json.dumps(body) if body is not None else None,
    )
