from enum import StrEnum
from typing import Any


API_VERSION_HEADER = "X-API-Version"
API_VERSION_V1 = "v1"
DEFAULT_API_VERSION = API_VERSION_V1
SUPPORTED_API_VERSIONS = frozenset({API_VERSION_V1})


class ErrorCode(StrEnum):
    INPUT_DECODING_ERROR = "INPUT_DECODING_ERROR"
    KEY_PARSE_ERROR = "KEY_PARSE_ERROR"
    SIGNATURE_PARSE_ERROR = "SIGNATURE_PARSE_ERROR"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


FROZEN_CONTRACTS: dict[str, dict[str, Any]] = {
    API_VERSION_V1: {
        "version": API_VERSION_V1,
        "envelopes": {
            "success": {
                "type": "object",
                "required": ["data"],
                "properties": {"data": {"type": "any"}},
                "additionalProperties": False,
            },
            "error": {
                "type": "object",
                "required": ["error"],
                "properties": {
                    "error": {
                        "type": "object",
                        "required": ["code", "message", "request_id"],
                        "properties": {
                            "code": {"type": "string"},
                            "message": {"type": "string"},
                            "request_id": {"type": "string"},
                        },
                        "additionalProperties": False,
                    }
                },
                "additionalProperties": False,
            },
        },
        "headers": {
            "version": [f"{API_VERSION_HEADER}: {API_VERSION_V1}"],
            "request_id": ["X-Request-Id: <opaque-string>"],
        },
        "verification": {
            "client_data_type": "webauthn.get",
            "client_data_challenge": "BASE64URL_NO_PAD(SHA256(challenge))",
            "signed_payload": "authenticatorData || SHA256(clientDataJSON)",
            "signature_algorithm": "ECDSA P-256 SHA-256, DER signature",
        },
    }
}


def resolve_api_version(version_header: str | None) -> str:
    if version_header is None:
        return DEFAULT_API_VERSION
    normalized = version_header.strip().lower()
    if not normalized:
        raise ValueError("API version header is empty")
    if normalized not in SUPPORTED_API_VERSIONS:
        raise ValueError(f"Unsupported API version: {normalized}")
    return normalized


def frozen_contract(version: str) -> dict[str, Any]:
    if version not in FROZEN_CONTRACTS:
        raise ValueError(f"Unsupported API contract version: {version}")
    return FROZEN_CONTRACTS[version]


def success(data: Any) -> dict[str, Any]:
    return {"data": data}


def error_body(code: ErrorCode, message: str, request_id: str) -> dict[str, Any]:
    return {
        "error": {
            "code": str(code),
            "message": message,
            "request_id": request_id,
        }
    }
