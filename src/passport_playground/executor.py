"""Outbound request execution with a uniform response shape."""

import logging
import time
from typing import Any

import requests
from pydantic import BaseModel

logger = logging.getLogger("passport_playground.executor")


class ApiRequest(BaseModel):
    method: str
    url: str
    headers: dict[str, str] = {}
    body: str | None = None


class NormalizedResponse(BaseModel):
    status: int
    status_text: str
    headers: dict[str, str]
    data: Any
    duration: int  # milliseconds


def execute(
    request: ApiRequest,
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> NormalizedResponse:
    """Send the request and normalize the outcome.

    Transport failures come back as a ``status=0`` response instead of an
    exception, so callers never need a try block.
    """
    sender = session or requests
    start = time.perf_counter()

    try:
        response = sender.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body,
            timeout=timeout,
        )
    except requests.RequestException as exc:
        duration = _elapsed_ms(start)
        logger.warning("request_failed method=%s url=%s error=%s", request.method, request.url, exc)
        return NormalizedResponse(
            status=0,
            status_text="Network Error",
            headers={},
            data={"error": str(exc) or "An unknown error occurred"},
            duration=duration,
        )

    duration = _elapsed_ms(start)
    headers = {key.lower(): value for key, value in response.headers.items()}

    logger.debug(
        "request_completed method=%s url=%s status=%s duration_ms=%d",
        request.method,
        request.url,
        response.status_code,
        duration,
    )
    return NormalizedResponse(
        status=response.status_code,
        status_text=response.reason or "",
        headers=headers,
        data=_decode_body(response, headers.get("content-type", "")),
        duration=duration,
    )


def _decode_body(response: requests.Response, content_type: str) -> Any:
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            # Some upstreams label plain text as JSON.
            return response.text
    return response.text


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)
