import json
from pathlib import Path
from unittest.mock import patch, MagicMock

import pytest
from fastapi.testclient import TestClient
from requests.structures import CaseInsensitiveDict

from passport_playground.app import create_app
from passport_playground.config import Settings
from passport_playground.parser.openapi import SpecFetchError
from passport_playground.playground import SpecCache

FIXTURES = Path(__file__).parent / "fixtures"


def _settings():
    return Settings(passport_api_key="server-key", passport_scorer_id="11")


@pytest.fixture
def doc():
    return json.loads((FIXTURES / "passport_openapi.json").read_text(encoding="utf-8"))


@pytest.fixture
def client(doc):
    cache = SpecCache("https://x/openapi.json", loader=lambda url: doc)
    with TestClient(create_app(_settings, spec_cache=cache)) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestEndpointsApi:
    def test_list(self, client):
        body = client.get("/api/endpoints").json()

        assert body["base_url"] == "https://api.passport.xyz"
        assert body["default_scorer_id"] == "11"
        assert [item["tag"] for item in body["navigation"]] == [
            "Stamp API", "Model Analysis", "Individual Verifications", "General",
        ]

    def test_detail_for_passport_endpoint(self, client):
        body = client.get("/api/endpoints/stamps-score").json()

        assert body["id"] == "v2_api_api_stamps_a_submit_passport"
        assert json.loads(body["sample_response"])["passing_score"] is True
        assert set(body["code_samples"]) == {"curl", "javascript", "python"}
        assert "YOUR_API_KEY" in body["code_samples"]["curl"]
        assert "{scorer_id}" in body["code_samples"]["curl"]

    def test_detail_for_iv_endpoint_has_sdk_sample(self, client):
        body = client.get("/api/endpoints/phone-verification").json()
        assert "requestSBT('phone')" in body["code_samples"]["sdk"]

    def test_unknown_slug(self, client):
        assert client.get("/api/endpoints/nope").status_code == 404

    def test_spec_failure_is_502(self):
        def _fail(url):
            raise SpecFetchError(url, "503 Service Unavailable")

        cache = SpecCache("https://x/openapi.json", loader=_fail)
        with TestClient(create_app(_settings, spec_cache=cache)) as test_client:
            resp = test_client.get("/api/endpoints")

        assert resp.status_code == 502
        assert "503 Service Unavailable" in resp.json()["error"]


class TestProxyMounted:
    @patch("passport_playground.proxy.handlers.requests.request")
    def test_proxy_routes_are_mounted(self, mock_request, client):
        upstream = MagicMock()
        upstream.status_code = 200
        upstream.headers = CaseInsensitiveDict()
        upstream.json.return_value = {"ok": True}
        mock_request.return_value = upstream

        resp = client.get("/api/proxy", params={"path": "/v2/stamps/metadata"})

        assert resp.status_code == 200
        assert mock_request.call_args[1]["headers"]["X-API-Key"] == "server-key"
