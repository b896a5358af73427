"""Code sample generator: equivalent request snippets for display.

Pure string templating, nothing here touches the network.
"""

import json
from enum import Enum

from pydantic import BaseModel

from passport_playground.registry import IndividualVerification, as_individual_verification

SDK_PACKAGE = "@holonym-foundation/human-id-sdk"
DEFAULT_SDK_CREDENTIAL_TYPE = "kyc"

SDK_CREDENTIAL_TYPES: dict[IndividualVerification, str] = {
    IndividualVerification.GOV_ID: "kyc",
    IndividualVerification.PHONE: "phone",
    IndividualVerification.BIOMETRICS: "biometrics",
    IndividualVerification.CLEAN_HANDS: "clean-hands",
}


class CodeLanguage(str, Enum):
    CURL = "curl"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    SDK = "sdk"


class CodeTemplateParams(BaseModel):
    method: str
    url: str
    api_key: str = ""
    body: dict | None = None


def sdk_credential_type(endpoint_id: str | None) -> str:
    iv = as_individual_verification(endpoint_id or "")
    if iv is None:
        return DEFAULT_SDK_CREDENTIAL_TYPE
    return SDK_CREDENTIAL_TYPES[iv]


def _headers(api_key: str) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["X-API-Key"] = api_key
    return headers


def generate_curl_code(params: CodeTemplateParams) -> str:
    lines = [f'curl -X {params.method} "{params.url}"']
    if params.api_key:
        lines.append(f'  -H "X-API-Key: {params.api_key}"')
    lines.append('  -H "Content-Type: application/json"')
    if params.body:
        lines.append(f"  -d '{json.dumps(params.body, indent=2)}'")
    return " \\\n".join(lines)


def generate_javascript_code(params: CodeTemplateParams) -> str:
    headers_json = json.dumps(_headers(params.api_key), indent=4).replace("\n", "\n  ")

    code = ""
    if params.body:
        code += f"const body = {json.dumps(params.body, indent=2)};\n\n"

    code += (
        f'const response = await fetch("{params.url}", {{\n'
        f'  method: "{params.method}",\n'
        f"  headers: {headers_json},"
    )
    if params.body:
        code += "\n  body: JSON.stringify(body),"
    code += "\n});\n\nconst data = await response.json();\nconsole.log(data);"
    return code


def generate_python_code(params: CodeTemplateParams) -> str:
    headers_repr = json.dumps(_headers(params.api_key), indent=4).replace('"', "'")
    method = params.method.lower()

    code = f'import requests\n\nurl = "{params.url}"\nheaders = {headers_repr}\n'
    if params.body:
        code += f"\nbody = {json.dumps(params.body, indent=4)}\n"
        code += f"\nresponse = requests.{method}(url, headers=headers, json=body)"
    else:
        code += f"\nresponse = requests.{method}(url, headers=headers)"
    code += "\n\nprint(response.json())"
    return code


def generate_sdk_code(endpoint_id: str | None, url: str) -> str:
    credential_type = sdk_credential_type(endpoint_id)
    choices = " | ".join(f"'{t}'" for t in SDK_CREDENTIAL_TYPES.values())
    return (
        f"// Install: npm install {SDK_PACKAGE}\n"
        "\n"
        f"import {{ humanID }} from '{SDK_PACKAGE}';\n"
        "\n"
        "// Step 1: Prompt user to complete verification\n"
        "// This opens the Human ID verification flow\n"
        f"await humanID.requestSBT('{credential_type}'); // {choices}\n"
        "\n"
        "// Step 2: Check verification status via API\n"
        "const resp = await fetch(\n"
        f"  '{url}'\n"
        ");\n"
        "const { result: isVerified } = await resp.json();"
    )


def generate_code(
    language: CodeLanguage | str,
    params: CodeTemplateParams,
    endpoint_id: str | None = None,
) -> str:
    try:
        language = CodeLanguage(language)
    except ValueError:
        return ""

    if language is CodeLanguage.CURL:
        return generate_curl_code(params)
    if language is CodeLanguage.JAVASCRIPT:
        return generate_javascript_code(params)
    if language is CodeLanguage.PYTHON:
        return generate_python_code(params)
    return generate_sdk_code(endpoint_id, params.url)


def available_languages(endpoint_id: str) -> list[CodeLanguage]:
    """Languages offered for an endpoint; the SDK snippet is IV-only."""
    languages = [CodeLanguage.CURL, CodeLanguage.JAVASCRIPT, CodeLanguage.PYTHON]
    if as_individual_verification(endpoint_id) is not None:
        languages.append(CodeLanguage.SDK)
    return languages
