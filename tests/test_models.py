import pytest
from pydantic import ValidationError

from passport_playground.parser.base import Param, ApiEndpoint


class TestParam:
    def test_create_required_param(self):
        p = Param(name="address", location="path", required=True)
        assert p.name == "address"
        assert p.required is True
        assert p.param_type == "string"
        assert p.description == ""
        assert p.default is None
        assert p.constraints == {}

    def test_create_param_with_default_and_constraints(self):
        p = Param(
            name="limit",
            location="query",
            required=False,
            param_type="integer",
            default=1000,
            constraints={"maximum": 1000},
        )
        assert p.default == 1000
        assert p.constraints["maximum"] == 1000


class TestApiEndpoint:
    def test_create_minimal_endpoint(self):
        ep = ApiEndpoint(id="get-/health", method="GET", path="/health", summary="Health")
        assert ep.tag == "General"
        assert ep.parameters == []
        assert ep.requires_auth is False

    def test_params_in_filters_by_location(self):
        ep = ApiEndpoint(
            id="score",
            method="GET",
            path="/v2/stamps/{scorer_id}/score/{address}",
            summary="Score",
            parameters=[
                Param(name="scorer_id", location="path", required=True),
                Param(name="address", location="path", required=True),
                Param(name="limit", location="query", required=False),
            ],
        )
        assert [p.name for p in ep.params_in("path")] == ["scorer_id", "address"]
        assert [p.name for p in ep.params_in("query")] == ["limit"]
        assert ep.params_in("header") == []

    def test_endpoint_is_frozen(self):
        ep = ApiEndpoint(id="x", method="GET", path="/x", summary="")
        with pytest.raises(ValidationError):
            ep.path = "/y"

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError):
            ApiEndpoint(id="x", method="TRACE", path="/x", summary="")

    def test_endpoint_serialization_roundtrip(self):
        ep = ApiEndpoint(
            id="v2_api_api_models_get_analysis",
            method="GET",
            path="/v2/models/score/{address}",
            summary="Model score",
            parameters=[Param(name="address", location="path", required=True)],
            requires_auth=True,
            tag="Model Analysis",
        )
        ep2 = ApiEndpoint(**ep.model_dump())
        assert ep2 == ep
