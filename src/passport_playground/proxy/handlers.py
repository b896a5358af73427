"""Server-side proxy routes.

One ``ProxyCore`` implements the forwarding contract; it is instantiated
once per upstream with that upstream's base URL, allowed methods and
credential policy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from urllib.parse import urlencode

import requests
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.requests import ClientDisconnect

from passport_playground.config import Settings, get_settings
from passport_playground.registry import UPSTREAMS, Upstream

logger = logging.getLogger("passport_playground.proxy")

API_KEY_HEADER = "X-API-Key"
_BODYLESS_METHODS = {"GET", "HEAD"}


class ProxyCore:
    """Forwards ``?path=...`` requests to one upstream."""

    def __init__(
        self,
        name: str,
        upstream_base: str,
        methods: tuple[str, ...],
        *,
        credential_header: str | None = None,
        credential: Callable[[], str] | None = None,
        report_duration: bool = False,
        timeout: Callable[[], float | None] | None = None,
    ) -> None:
        self.name = name
        self.upstream_base = upstream_base.rstrip("/")
        self.methods = methods
        self.credential_header = credential_header
        self._credential = credential
        self.report_duration = report_duration
        self._timeout = timeout

    @property
    def credentialed(self) -> bool:
        return self.credential_header is not None

    def target_url(self, path: str, query_items: list[tuple[str, str]]) -> str:
        remaining = urlencode([(k, v) for k, v in query_items if k != "path"])
        return f"{self.upstream_base}{path}{'?' + remaining if remaining else ''}"

    async def handle(self, request: Request) -> JSONResponse:
        target_path = request.query_params.get("path")
        if not target_path:
            return JSONResponse({"error": "Missing path parameter"}, status_code=400)

        api_key = ""
        if self.credentialed:
            api_key = self._credential() if self._credential else ""
            if not api_key:
                logger.error("proxy_unconfigured proxy=%s", self.name)
                return JSONResponse({"error": "API key not configured on server"}, status_code=500)

        method = request.method.upper()
        target = self.target_url(target_path, request.query_params.multi_items())

        try:
            body = await self._read_body(request) if method not in _BODYLESS_METHODS else None

            headers = {"Content-Type": "application/json"}
            if self.credentialed:
                headers[self.credential_header] = api_key

            response = await run_in_threadpool(
                requests.request,
                method,
                target,
                headers=headers,
                data=body or None,
                timeout=self._timeout() if self._timeout else None,
            )
            data = response.json()
        except Exception as exc:
            logger.exception("proxy_failed proxy=%s method=%s target=%s", self.name, method, target)
            return JSONResponse({"error": str(exc) or "Proxy request failed"}, status_code=500)

        logger.info(
            "proxy_completed proxy=%s method=%s target=%s status=%s",
            self.name,
            method,
            target,
            response.status_code,
        )
        out_headers = {"X-Proxy-Status": str(response.status_code)}
        if self.report_duration:
            out_headers["X-Proxy-Duration"] = response.headers.get("x-response-time") or "0"
        return JSONResponse(data, status_code=response.status_code, headers=out_headers)

    @staticmethod
    async def _read_body(request: Request) -> str | None:
        try:
            return (await request.body()).decode("utf-8")
        except (ClientDisconnect, UnicodeDecodeError):
            return None


def build_proxies(settings_factory: Callable[[], Settings] = get_settings) -> dict[Upstream, ProxyCore]:
    """The three proxy cores, reading credentials lazily from settings."""

    def _timeout() -> float | None:
        return settings_factory().request_timeout_sec

    proxies: dict[Upstream, ProxyCore] = {}
    for upstream, info in UPSTREAMS.items():
        if info.credentialed:
            proxies[upstream] = ProxyCore(
                upstream.value,
                info.base_url,
                info.methods,
                credential_header=API_KEY_HEADER,
                credential=lambda: settings_factory().passport_api_key.strip(),
                report_duration=True,
                timeout=_timeout,
            )
        else:
            proxies[upstream] = ProxyCore(upstream.value, info.base_url, info.methods, timeout=_timeout)
    return proxies


def create_proxy_router(settings_factory: Callable[[], Settings] = get_settings) -> APIRouter:
    router = APIRouter()
    for upstream, core in build_proxies(settings_factory).items():
        router.add_api_route(
            UPSTREAMS[upstream].proxy_route,
            core.handle,
            methods=list(core.methods),
            name=f"proxy_{upstream.value}",
            include_in_schema=False,
        )
    return router
