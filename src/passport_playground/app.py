from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from passport_playground.config import Settings, get_settings
from passport_playground.generator.code import CodeTemplateParams, available_languages, generate_code
from passport_playground.parser.openapi import SpecError, fetch_openapi_spec
from passport_playground.playground import Playground, SpecCache, build_playground
from passport_playground.proxy.handlers import create_proxy_router
from passport_playground.registry import get_endpoint_sample_response
from passport_playground.urls import build_url

logger = logging.getLogger("passport_playground.api")

CODE_SAMPLE_API_KEY = "YOUR_API_KEY"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(
    settings_factory: Callable[[], Settings] = get_settings,
    spec_cache: SpecCache | None = None,
) -> FastAPI:
    settings = settings_factory()
    cache = spec_cache or SpecCache(
        settings.openapi_url,
        ttl=settings.spec_cache_ttl_sec,
        loader=lambda url: fetch_openapi_spec(url, timeout=settings.request_timeout_sec),
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings)
        if not settings.has_api_key():
            logger.warning("passport_api_key_missing proxy=/api/proxy will answer 500")
        logger.info("Playground startup complete")
        yield

    app = FastAPI(
        title="Passport API Playground",
        version="0.1.0",
        description="Endpoint reference, credential-injecting proxies and code samples for the Passport APIs.",
        lifespan=lifespan,
    )
    app.state.spec_cache = cache

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000.0
            logger.exception(
                "request_failed method=%s path=%s duration_ms=%.2f",
                request.method,
                request.url.path,
                duration_ms,
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000.0
        logger.info(
            "request_completed method=%s path=%s status=%s duration_ms=%.2f",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    @app.exception_handler(SpecError)
    async def spec_error_handler(_: Request, exc: SpecError) -> JSONResponse:
        logger.error("spec_unavailable error=%s", exc)
        return JSONResponse({"error": str(exc)}, status_code=502)

    def _playground() -> Playground:
        return build_playground(cache.get(), default_scorer_id=settings_factory().passport_scorer_id)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/endpoints")
    def list_endpoints() -> dict:
        return _playground().model_dump(mode="json")

    @app.get("/api/endpoints/{slug}")
    def endpoint_detail(slug: str) -> dict:
        view = _playground().find(slug)
        if view is None:
            raise HTTPException(status_code=404, detail=f"Unknown endpoint: {slug}")

        url = build_url(view.base_url, view.path, {}, {})
        params = CodeTemplateParams(method=view.method, url=url, api_key=CODE_SAMPLE_API_KEY)
        return {
            **view.model_dump(mode="json"),
            "sample_response": get_endpoint_sample_response(view.id),
            "code_samples": {
                language.value: generate_code(language, params, view.id)
                for language in available_languages(view.id)
            },
        }

    app.include_router(create_proxy_router(settings_factory))
    return app


app = create_app()
