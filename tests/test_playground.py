import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from passport_playground.playground import SpecCache, build_playground

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def doc():
    return json.loads((FIXTURES / "passport_openapi.json").read_text(encoding="utf-8"))


class TestSpecCache:
    def test_snapshot_reused_within_ttl(self, doc):
        loader = MagicMock(return_value=doc)
        now = [0.0]
        cache = SpecCache("https://x/openapi.json", ttl=3600, loader=loader, clock=lambda: now[0])

        first = cache.get()
        now[0] = 3599.0
        second = cache.get()

        assert first is second
        loader.assert_called_once_with("https://x/openapi.json")

    def test_revalidates_after_ttl(self, doc):
        loader = MagicMock(side_effect=[doc, {"paths": {}}])
        now = [0.0]
        cache = SpecCache("https://x/openapi.json", ttl=3600, loader=loader, clock=lambda: now[0])

        cache.get()
        now[0] = 3600.0

        assert cache.get() == {"paths": {}}
        assert loader.call_count == 2

    def test_failed_fetch_propagates_and_retries_next_time(self, doc):
        loader = MagicMock(side_effect=[RuntimeError("down"), doc])
        cache = SpecCache("https://x/openapi.json", loader=loader)

        with pytest.raises(RuntimeError):
            cache.get()
        assert cache.get() == doc

    def test_invalidate(self, doc):
        loader = MagicMock(return_value=doc)
        cache = SpecCache("https://x/openapi.json", loader=loader)
        cache.get()
        cache.invalidate()
        cache.get()
        assert loader.call_count == 2


class TestBuildPlayground:
    def test_navigation_order(self, doc):
        playground = build_playground(doc, default_scorer_id="11")

        assert playground.base_url == "https://api.passport.xyz"
        assert playground.default_scorer_id == "11"
        assert [item.display_name for item in playground.navigation] == [
            "Stamps API",
            "Models API",
            "Individual Verifications",
            "General",
        ]
        assert [v.slug for v in playground.navigation[0].endpoints] == [
            "stamps-score",
            "score-history",
            "verified-stamps",
            "all-stamps",
        ]
        assert [v.slug for v in playground.navigation[2].endpoints] == [
            "gov-id-verification",
            "phone-verification",
            "biometrics-verification",
            "clean-hands",
        ]

    def test_views_carry_metadata_and_base_url(self, doc):
        playground = build_playground(doc)

        score = playground.find("stamps-score")
        assert score.display_name == "GET Stamps Score"
        assert score.base_url == "https://api.passport.xyz"
        assert score.requires_auth is True
        assert score.description.startswith("This is the primary endpoint")

        assert playground.find("gov-id-verification").base_url == "https://api.holonym.io"
        assert playground.find("clean-hands").base_url == "https://mainnet-rpc.sign.global"

    def test_unknown_endpoint_uses_parsed_description(self, doc):
        health = build_playground(doc).find("get-/health")
        assert health.display_name == "get-/health"
        assert health.description == ""

    def test_find_unknown_slug(self, doc):
        assert build_playground(doc).find("nope") is None
