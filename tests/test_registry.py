import json

from passport_playground.registry import (
    DEFAULT_ORDER,
    INDIVIDUAL_VERIFICATION_ENDPOINTS,
    UPSTREAMS,
    IndividualVerification,
    Upstream,
    as_individual_verification,
    get_base_url_for_endpoint,
    get_endpoint_description,
    get_endpoint_display_name,
    get_endpoint_docs_url,
    get_endpoint_order,
    get_endpoint_sample_response,
    get_endpoint_slug,
    get_tag_display_name,
    get_tag_order,
    get_upstream_for_endpoint,
    get_upstream_for_host,
    is_individual_verification_endpoint,
)


class TestEndpointLookups:
    def test_known_endpoint(self):
        assert get_endpoint_display_name("v2_api_api_stamps_a_submit_passport") == "GET Stamps Score"
        assert get_endpoint_slug("v2_api_api_stamps_a_submit_passport") == "stamps-score"
        assert get_endpoint_order("v2_api_api_stamps_stamp_display") == 4
        assert get_endpoint_docs_url("v2_api_api_models_get_analysis").endswith("/models/api-reference")
        assert "Sybil" in get_endpoint_description("v2_api_api_models_get_analysis")

    def test_unknown_endpoint_falls_back(self):
        assert get_endpoint_display_name("Some_New_Op") == "Some_New_Op"
        assert get_endpoint_slug("Some_New_Op") == "some-new-op"
        assert get_endpoint_order("Some_New_Op") == DEFAULT_ORDER
        assert get_endpoint_description("Some_New_Op") is None
        assert get_endpoint_docs_url("Some_New_Op") is None

    def test_tag_lookups(self):
        assert get_tag_display_name("Stamp API") == "Stamps API"
        assert get_tag_order("Model Analysis") == 2
        assert get_tag_display_name("General") == "General"
        assert get_tag_order("General") == DEFAULT_ORDER

    def test_slugs_are_unique(self):
        slugs = [get_endpoint_slug(ep.id) for ep in INDIVIDUAL_VERIFICATION_ENDPOINTS]
        assert len(slugs) == len(set(slugs))


class TestIndividualVerification:
    def test_enumeration_matches_static_endpoints(self):
        assert [ep.id for ep in INDIVIDUAL_VERIFICATION_ENDPOINTS] == [iv.value for iv in IndividualVerification]

    def test_detection(self):
        assert as_individual_verification("iv_phone_verification") is IndividualVerification.PHONE
        assert as_individual_verification("iv_unknown") is None
        assert is_individual_verification_endpoint("iv_clean_hands") is True
        assert is_individual_verification_endpoint("v2_api_api_models_get_analysis") is False

    def test_sybil_endpoints_share_parameter_shape(self):
        gov_id = INDIVIDUAL_VERIFICATION_ENDPOINTS[0]
        assert gov_id.path == "/sybil-resistance/gov-id/{network}"
        assert [(p.name, p.location, p.default) for p in gov_id.parameters] == [
            ("network", "path", "optimism"),
            ("user", "query", None),
            ("action-id", "query", "123456789"),
        ]
        assert all(p.required for p in gov_id.parameters)


class TestUpstreams:
    def test_endpoint_upstreams(self):
        assert get_upstream_for_endpoint("iv_gov_id_verification") is Upstream.HOLONYM
        assert get_upstream_for_endpoint("iv_clean_hands") is Upstream.SIGN
        assert get_upstream_for_endpoint("v2_api_api_stamps_a_submit_passport") is Upstream.PASSPORT
        assert get_upstream_for_endpoint("anything_else") is Upstream.PASSPORT

    def test_host_lookup_is_exact(self):
        assert get_upstream_for_host("api.holonym.io") is Upstream.HOLONYM
        assert get_upstream_for_host("API.HOLONYM.IO") is Upstream.HOLONYM
        assert get_upstream_for_host("mainnet-rpc.sign.global") is Upstream.SIGN
        assert get_upstream_for_host("api.holonym.io.evil.test") is Upstream.PASSPORT
        assert get_upstream_for_host(None) is Upstream.PASSPORT

    def test_base_url_for_endpoint(self):
        assert get_base_url_for_endpoint("iv_phone_verification") == "https://api.holonym.io"
        assert get_base_url_for_endpoint("iv_clean_hands") == "https://mainnet-rpc.sign.global"
        assert get_base_url_for_endpoint("v2_x") == "https://api.passport.xyz"
        assert get_base_url_for_endpoint("v2_x", "https://staging.passport.xyz") == "https://staging.passport.xyz"
        assert get_base_url_for_endpoint("iv_clean_hands", "https://staging.passport.xyz") == (
            "https://mainnet-rpc.sign.global"
        )

    def test_only_passport_is_credentialed(self):
        assert [u for u, info in UPSTREAMS.items() if info.credentialed] == [Upstream.PASSPORT]
        assert UPSTREAMS[Upstream.SIGN].methods == ("GET",)
        assert UPSTREAMS[Upstream.HOLONYM].methods == ("GET", "POST")


class TestSampleResponses:
    def test_known_sample(self):
        sample = json.loads(get_endpoint_sample_response("iv_gov_id_verification"))
        assert sample == {"result": True, "expirationDate": 1770922106}

    def test_unknown_sample_uses_placeholder(self):
        sample = json.loads(get_endpoint_sample_response("nope"))
        assert sample == {"message": "Sample response not available"}
