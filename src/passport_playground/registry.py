"""Static endpoint metadata: display names, ordering, upstreams and samples.

Every lookup here is keyed by endpoint id (or tag) and has an explicit
fallback, so endpoints that appear in the remote document but not in these
tables still render with derived defaults.
"""

import json
from enum import Enum
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict

from passport_playground.parser.base import ApiEndpoint, Param

DEFAULT_ORDER = 999


class Upstream(str, Enum):
    PASSPORT = "passport"
    HOLONYM = "holonym"
    SIGN = "sign"


class UpstreamInfo(BaseModel):
    """Where an upstream lives and which local proxy route carries it."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    proxy_route: str
    methods: tuple[str, ...]
    credentialed: bool = False

    @property
    def hostname(self) -> str:
        return urlsplit(self.base_url).hostname or ""


UPSTREAMS: dict[Upstream, UpstreamInfo] = {
    Upstream.PASSPORT: UpstreamInfo(
        base_url="https://api.passport.xyz",
        proxy_route="/api/proxy",
        methods=("GET", "POST", "PUT", "DELETE"),
        credentialed=True,
    ),
    Upstream.HOLONYM: UpstreamInfo(
        base_url="https://api.holonym.io",
        proxy_route="/api/proxy/holonym",
        methods=("GET", "POST"),
    ),
    Upstream.SIGN: UpstreamInfo(
        base_url="https://mainnet-rpc.sign.global",
        proxy_route="/api/proxy/sign",
        methods=("GET",),
    ),
}


class IndividualVerification(str, Enum):
    GOV_ID = "iv_gov_id_verification"
    PHONE = "iv_phone_verification"
    BIOMETRICS = "iv_biometrics_verification"
    CLEAN_HANDS = "iv_clean_hands"


def as_individual_verification(endpoint_id: str) -> IndividualVerification | None:
    try:
        return IndividualVerification(endpoint_id)
    except ValueError:
        return None


class EndpointMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_name: str
    slug: str
    order: int = DEFAULT_ORDER
    description: str | None = None
    docs_url: str | None = None
    upstream: Upstream | None = None


class TagMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_name: str
    order: int = DEFAULT_ORDER


INDIVIDUAL_VERIFICATIONS_TAG = "Individual Verifications"

TAG_CONFIG: dict[str, TagMeta] = {
    "Stamp API": TagMeta(display_name="Stamps API", order=1),
    "Model Analysis": TagMeta(display_name="Models API", order=2),
    INDIVIDUAL_VERIFICATIONS_TAG: TagMeta(display_name="Individual Verifications", order=3),
}

_DOCS = "https://docs.passport.xyz/building-with-passport"

ENDPOINT_CONFIG: dict[str, EndpointMeta] = {
    # Stamps API
    "v2_api_api_stamps_a_submit_passport": EndpointMeta(
        display_name="GET Stamps Score",
        slug="stamps-score",
        order=1,
        description=(
            "This is the primary endpoint that partners using the Stamps product will use."
            "<br /><br />This endpoint returns the latest score and Stamp data for a single address."
        ),
        docs_url=f"{_DOCS}/stamps/passport-api/api-reference#retrieve-latest-score-for-a-single-address",
    ),
    "v2_api_api_stamps_get_score_history": EndpointMeta(
        display_name="GET Score History",
        slug="score-history",
        order=2,
        description=(
            "This endpoint will return the historical score and Stamp data for a single address "
            "at a specified time.<br /><br />**Note:** To access this endpoint, you must submit your "
            "use case and be approved by the Passport team. To do so, please fill out the following "
            "form, making sure to provide a detailed description of your use case. The Passport team "
            "typically reviews and responds to form responses within 48 hours. "
            "[Request access](https://forms.gle/4GyicBfhtHW29eEu8)"
        ),
        docs_url=f"{_DOCS}/stamps/passport-api/api-reference#retrieve-historical-score-for-a-single-address",
    ),
    "v2_api_api_stamps_get_passport_stamps": EndpointMeta(
        display_name="GET Verified Stamps",
        slug="verified-stamps",
        order=3,
        description=(
            "Use this endpoint to request all Stamps that have been verified by the specified "
            "Ethereum address.<br /><br />If you would like to retrieve the metadata for all "
            "available Stamps, please use the [GET All Stamps](#all-stamps) endpoint."
        ),
        docs_url=f"{_DOCS}/stamps/passport-api/api-reference#retrieve-stamps-verified-by-a-single-address",
    ),
    "v2_api_api_stamps_stamp_display": EndpointMeta(
        display_name="GET All Stamps",
        slug="all-stamps",
        order=4,
        description=(
            "Use this endpoint to request all Stamps available on Passport.<br /><br />If you would "
            "like to retrieve just the Stamps that are connected to a specified Ethereum address, "
            "please use the [GET Verified Stamps](#verified-stamps) endpoint."
        ),
        docs_url=f"{_DOCS}/stamps/passport-api/api-reference#retrieve-all-stamps-available-in-passport",
    ),
    # Models API
    "v2_api_api_models_get_analysis": EndpointMeta(
        display_name="GET Model Score",
        slug="model-score",
        order=1,
        description=(
            "Retrieve Sybil classification score for an Ethereum address. A score of -1 means that "
            "the given address doesn't have enough transaction history. A score of 0 means the user "
            "is likely a Sybil, and a score of 100 means the user is likely a human."
        ),
        docs_url=f"{_DOCS}/models/api-reference",
    ),
    # Individual Verifications
    IndividualVerification.GOV_ID.value: EndpointMeta(
        display_name="GET Gov ID Verification",
        slug="gov-id-verification",
        order=1,
        description=(
            "Check if a user has completed government ID (KYC) verification with a unique proof for "
            "your action ID. Users can verify at [id.human.tech/gov-id](https://id.human.tech/gov-id)."
        ),
        docs_url=f"{_DOCS}/individual-verifications/api-reference#check-government-id-verification",
        upstream=Upstream.HOLONYM,
    ),
    IndividualVerification.PHONE.value: EndpointMeta(
        display_name="GET Phone Verification",
        slug="phone-verification",
        order=2,
        description=(
            "Check if a user has completed phone verification with a unique proof for your action "
            "ID. Users can verify at [id.human.tech/phone](https://id.human.tech/phone)."
        ),
        docs_url=f"{_DOCS}/individual-verifications/api-reference#check-phone-verification",
        upstream=Upstream.HOLONYM,
    ),
    IndividualVerification.BIOMETRICS.value: EndpointMeta(
        display_name="GET Biometrics Verification",
        slug="biometrics-verification",
        order=3,
        description=(
            "Check if a user has completed biometric verification (face uniqueness and liveness "
            "check). Users can verify at [id.human.tech/biometrics](https://id.human.tech/biometrics)."
        ),
        docs_url=f"{_DOCS}/individual-verifications/api-reference#check-biometrics-verification",
        upstream=Upstream.HOLONYM,
    ),
    IndividualVerification.CLEAN_HANDS.value: EndpointMeta(
        display_name="GET Proof of Clean Hands",
        slug="clean-hands",
        order=5,
        description=(
            "Query Proof of Clean Hands attestations to verify a user is not on sanctions or PEP "
            "(Politically Exposed Persons) lists. Uses [Sign Protocol](https://sign.global) on "
            "Optimism. Users can verify at [id.human.tech/clean-hands](https://id.human.tech/clean-hands)."
        ),
        docs_url=(
            f"{_DOCS}/individual-verifications/api-reference"
            "#query-proof-of-clean-hands-attestations-via-sign-protocol"
        ),
        upstream=Upstream.SIGN,
    ),
}


# -- static Individual Verification endpoints ---------------------------------


def _network_param() -> Param:
    return Param(
        name="network",
        location="path",
        required=True,
        description="Network (optimism or base-sepolia)",
        default="optimism",
    )


def _sybil_query_params() -> list[Param]:
    return [
        Param(name="user", location="query", required=True, description="User's blockchain address"),
        Param(
            name="action-id",
            location="query",
            required=True,
            description="Action ID for sybil resistance (default: 123456789)",
            default="123456789",
        ),
    ]


def _sybil_endpoint(iv: IndividualVerification, kind: str, summary: str, description: str) -> ApiEndpoint:
    return ApiEndpoint(
        id=iv.value,
        method="GET",
        path=f"/sybil-resistance/{kind}/{{network}}",
        summary=summary,
        description=description,
        tag=INDIVIDUAL_VERIFICATIONS_TAG,
        parameters=[_network_param(), *_sybil_query_params()],
        requires_auth=False,
    )


INDIVIDUAL_VERIFICATION_ENDPOINTS: tuple[ApiEndpoint, ...] = (
    _sybil_endpoint(
        IndividualVerification.GOV_ID,
        "gov-id",
        "Check government ID verification status",
        "Returns whether a user has completed government ID (KYC) verification and has a "
        "unique proof for the specified action.",
    ),
    _sybil_endpoint(
        IndividualVerification.PHONE,
        "phone",
        "Check phone verification status",
        "Returns whether a user has completed phone verification and has a unique proof "
        "for the specified action.",
    ),
    _sybil_endpoint(
        IndividualVerification.BIOMETRICS,
        "biometrics",
        "Check biometrics verification status",
        "Returns whether a user has completed biometric verification (face uniqueness and "
        "liveness check).",
    ),
    ApiEndpoint(
        id=IndividualVerification.CLEAN_HANDS.value,
        method="GET",
        path="/api/scan/addresses/{address}/attestations",
        summary="Query Proof of Clean Hands attestations",
        description="Query Sign Protocol for Proof of Clean Hands attestations (sanctions/PEP screening).",
        tag=INDIVIDUAL_VERIFICATIONS_TAG,
        parameters=[
            Param(name="address", location="path", required=True, description="User's blockchain address"),
        ],
        requires_auth=False,
    ),
)


# -- lookups ------------------------------------------------------------------


def get_endpoint_meta(endpoint_id: str) -> EndpointMeta | None:
    return ENDPOINT_CONFIG.get(endpoint_id)


def get_endpoint_display_name(endpoint_id: str) -> str:
    meta = ENDPOINT_CONFIG.get(endpoint_id)
    return meta.display_name if meta else endpoint_id


def get_endpoint_slug(endpoint_id: str) -> str:
    meta = ENDPOINT_CONFIG.get(endpoint_id)
    return meta.slug if meta else endpoint_id.replace("_", "-").lower()


def get_endpoint_order(endpoint_id: str) -> int:
    meta = ENDPOINT_CONFIG.get(endpoint_id)
    return meta.order if meta else DEFAULT_ORDER


def get_endpoint_description(endpoint_id: str) -> str | None:
    meta = ENDPOINT_CONFIG.get(endpoint_id)
    return meta.description if meta else None


def get_endpoint_docs_url(endpoint_id: str) -> str | None:
    meta = ENDPOINT_CONFIG.get(endpoint_id)
    return meta.docs_url if meta else None


def get_tag_display_name(tag: str) -> str:
    meta = TAG_CONFIG.get(tag)
    return meta.display_name if meta else tag


def get_tag_order(tag: str) -> int:
    meta = TAG_CONFIG.get(tag)
    return meta.order if meta else DEFAULT_ORDER


def is_individual_verification_endpoint(endpoint_id: str) -> bool:
    return as_individual_verification(endpoint_id) is not None


def get_upstream_for_endpoint(endpoint_id: str) -> Upstream:
    """Upstream declared for an endpoint; everything undeclared is Passport."""
    meta = ENDPOINT_CONFIG.get(endpoint_id)
    if meta is not None and meta.upstream is not None:
        return meta.upstream
    return Upstream.PASSPORT


def get_upstream_for_host(hostname: str | None) -> Upstream:
    for upstream, info in UPSTREAMS.items():
        if hostname and hostname.lower() == info.hostname:
            return upstream
    return Upstream.PASSPORT


def get_base_url_for_endpoint(endpoint_id: str, default: str | None = None) -> str:
    upstream = get_upstream_for_endpoint(endpoint_id)
    if upstream is Upstream.PASSPORT and default:
        return default
    return UPSTREAMS[upstream].base_url


# -- sample responses ---------------------------------------------------------

SAMPLE_RESPONSE_PLACEHOLDER = {"message": "Sample response not available"}

_SAMPLE_RESPONSES: dict[str, dict] = {
    "v2_api_api_stamps_a_submit_passport": {
        "address": "0x...",
        "score": "25.123",
        "passing_score": True,
        "threshold": "20",
        "last_score_timestamp": "2024-01-15T10:30:00Z",
        "expiration_timestamp": "2025-01-15T10:30:00Z",
        "stamps": [
            {"name": "Google", "credential": "..."},
            {"name": "Discord", "credential": "..."},
        ],
    },
    "v2_api_api_stamps_get_score_history": {
        "address": "0x...",
        "score": "22.456",
        "timestamp": "2024-01-10T08:00:00Z",
        "stamps": [{"name": "Google", "credential": "..."}],
    },
    "v2_api_api_stamps_get_passport_stamps": {
        "items": [
            {
                "version": "1.0.0",
                "credential": {
                    "type": ["VerifiableCredential"],
                    "credentialSubject": {"id": "did:pkh:eip155:1:0x...", "provider": "Google"},
                },
            }
        ]
    },
    "v2_api_api_stamps_stamp_display": {
        "items": [
            {
                "id": "Google",
                "name": "Google",
                "description": "Connect your Google account",
                "icon": "https://...",
                "groups": [{"name": "Social"}],
            }
        ]
    },
    "v2_api_api_models_get_analysis": {"address": "0x...", "score": 75, "model": "ethereum_activity_v1"},
    IndividualVerification.GOV_ID.value: {"result": True, "expirationDate": 1770922106},
    IndividualVerification.PHONE.value: {"result": True, "expirationDate": 1770922106},
    IndividualVerification.BIOMETRICS.value: {"result": True, "expirationDate": 1780661994},
    IndividualVerification.CLEAN_HANDS.value: {
        "data": {
            "rows": [
                {
                    "fullSchemaId": "onchain_evm_10_0x8",
                    "attester": "0xB1f50c6C34C72346b1229e5C80587D0D659556Fd",
                    "isReceiver": True,
                    "revoked": False,
                    "validUntil": 1735689600,
                }
            ]
        }
    },
}


def get_endpoint_sample_response(endpoint_id: str) -> str:
    sample = _SAMPLE_RESPONSES.get(endpoint_id, SAMPLE_RESPONSE_PLACEHOLDER)
    return json.dumps(sample, indent=2)
