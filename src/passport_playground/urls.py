"""Request URL construction from a path template and draft values."""

import re
from collections.abc import Mapping
from urllib.parse import quote

from passport_playground.parser.base import ApiEndpoint

_PLACEHOLDER_RE = re.compile(r"\{([^{}]+)\}")

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_.~".
_COMPONENT_SAFE = "!*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_COMPONENT_SAFE)


def build_url(
    base_url: str,
    path: str,
    path_params: Mapping[str, str],
    query_params: Mapping[str, str],
) -> str:
    """Resolve a path template and append the non-empty query parameters.

    Unfilled placeholders stay in the output as ``{name}`` so the caller can
    see what is still missing.
    """
    seen: set[str] = set()

    def _substitute(match: re.Match) -> str:
        name = match.group(1)
        value = path_params.get(name)
        if not value or name in seen:
            return match.group(0)
        seen.add(name)
        return encode_component(value)

    resolved = _PLACEHOLDER_RE.sub(_substitute, path)

    query = "&".join(
        f"{encode_component(key)}={encode_component(value)}"
        for key, value in query_params.items()
        if value
    )

    url = f"{base_url}{resolved}"
    return f"{url}?{query}" if query else url


def can_send_request(
    endpoint: ApiEndpoint,
    path_params: Mapping[str, str],
    query_params: Mapping[str, str],
) -> bool:
    """True when every required path and query parameter has a value."""
    for param in endpoint.params_in("path"):
        if param.required and not path_params.get(param.name):
            return False
    for param in endpoint.params_in("query"):
        if param.required and not query_params.get(param.name):
            return False
    return True
