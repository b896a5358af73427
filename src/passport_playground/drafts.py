"""Per-endpoint request drafts and the session-wide shared values.

``scorer_id`` and ``address`` are usually the same across every endpoint a
user tries, so a change made in one draft is pushed to every other mounted
draft through ``GlobalDraftStore``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from passport_playground.executor import ApiRequest, NormalizedResponse, execute
from passport_playground.parser.base import ApiEndpoint
from passport_playground.proxy.router import build_proxied_request
from passport_playground.urls import build_url, can_send_request

logger = logging.getLogger("passport_playground.drafts")

GLOBAL_PARAM_NAMES = ("scorer_id", "address")

Listener = Callable[[str, str], None]


class GlobalDraftStore:
    """Shared ``scorer_id``/``address`` values with subscriber notification."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {name: "" for name in GLOBAL_PARAM_NAMES}
        self._listeners: list[Listener] = []

    def get(self, name: str) -> str:
        return self._values.get(name, "")

    def set(self, name: str, value: str) -> None:
        if name not in self._values:
            raise KeyError(f"{name} is not a shared draft parameter")
        self._values[name] = value
        for listener in list(self._listeners):
            listener(name, value)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)


class RequestDraft:
    """The values a user is editing for one endpoint before sending it."""

    def __init__(
        self,
        endpoint: ApiEndpoint,
        base_url: str,
        store: GlobalDraftStore,
        default_scorer_id: str = "",
        use_test_credentials: bool = True,
    ) -> None:
        self.endpoint = endpoint
        self.base_url = base_url
        self.store = store
        self.default_scorer_id = default_scorer_id
        self.use_test_credentials = use_test_credentials
        self.path_params: dict[str, str] = {}
        self.query_params: dict[str, str] = {}
        self._unsubscribe: Callable[[], None] | None = None

    # -- lifecycle ------------------------------------------------------------

    def mount(self) -> RequestDraft:
        self._seed()
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_global_change)
        return self

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.path_params = {}
        self.query_params = {}

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    def _seed(self) -> None:
        self.path_params = {p.name: self._initial_value(p.name, p.default) for p in self.endpoint.params_in("path")}
        self.query_params = {p.name: self._initial_value(p.name, p.default) for p in self.endpoint.params_in("query")}

    def _initial_value(self, name: str, default: object) -> str:
        if name == "scorer_id":
            return self.store.get(name) or (self.default_scorer_id if self.use_test_credentials else "")
        if name == "address":
            return self.store.get(name)
        if default is None:
            return ""
        if isinstance(default, bool):
            return "true" if default else "false"
        return str(default)

    def _on_global_change(self, name: str, value: str) -> None:
        if not value:
            return
        if name in self.path_params:
            self.path_params[name] = value
        if name in self.query_params:
            self.query_params[name] = value

    # -- editing --------------------------------------------------------------

    def set_path_param(self, name: str, value: str) -> None:
        self.path_params[name] = value
        if name in GLOBAL_PARAM_NAMES:
            self.store.set(name, value)

    def set_query_param(self, name: str, value: str) -> None:
        self.query_params[name] = value
        if name in GLOBAL_PARAM_NAMES:
            self.store.set(name, value)

    # -- derived --------------------------------------------------------------

    @property
    def url(self) -> str:
        return build_url(self.base_url, self.endpoint.path, self.path_params, self.query_params)

    def can_send(self) -> bool:
        return can_send_request(self.endpoint, self.path_params, self.query_params)

    def proxied_request(self, origin: str, body: dict | None = None) -> ApiRequest:
        return build_proxied_request(
            self.endpoint.method,
            self.url,
            body,
            origin=origin,
            endpoint_id=self.endpoint.id,
        )

    def send(
        self,
        origin: str,
        body: dict | None = None,
        executor: Callable[[ApiRequest], NormalizedResponse] = execute,
    ) -> NormalizedResponse | None:
        """Send through the local proxy; ``None`` when required values are missing."""
        if not self.can_send():
            logger.info("draft_incomplete endpoint=%s", self.endpoint.id)
            return None
        return executor(self.proxied_request(origin, body))
