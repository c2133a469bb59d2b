from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from core.assertion_types import Assertion, RelyingPartyConfig, VerificationInput
from core.errors import InputDecodingError
from schemas.assertion import AssertionVerifyIn

_BYTES_LIKE = (bytes, bytearray, memoryview)


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors(include_input=False, include_url=False):
        location = ".".join(str(part) for part in error.get("loc", ())) or "body"
        problems.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(problems)


def _as_bytes(field: str, value: Any) -> bytes:
    if not isinstance(value, _BYTES_LIKE):
        raise InputDecodingError(f"{field} must be bytes, got {type(value).__name__}")
    return bytes(value)


def validate_verification_input(challenge: Any, rp_config: Any, assertion: Any) -> VerificationInput:
    """Check typed arguments and normalise bytes-like fields to ``bytes``.

    Raises ``InputDecodingError`` for any field of the wrong type, so that key
    and signature parsing only ever sees byte strings.
    """
    if not isinstance(rp_config, RelyingPartyConfig):
        raise InputDecodingError(f"rp_config must be a RelyingPartyConfig, got {type(rp_config).__name__}")
    if not isinstance(assertion, Assertion):
        raise InputDecodingError(f"assertion must be an Assertion, got {type(assertion).__name__}")
    if not isinstance(rp_config.origin, str):
        raise InputDecodingError(f"rp_config.origin must be a string, got {type(rp_config.origin).__name__}")
    if rp_config.cross_origin is not None and not isinstance(rp_config.cross_origin, bool):
        raise InputDecodingError("rp_config.cross_origin must be a boolean or None")

    return VerificationInput(
        challenge=_as_bytes("challenge", challenge),
        rp_config=rp_config,
        assertion=Assertion(
            public_key=_as_bytes("assertion.public_key", assertion.public_key),
            authenticator_data=_as_bytes("assertion.authenticator_data", assertion.authenticator_data),
            signature=_as_bytes("assertion.signature", assertion.signature),
        ),
    )


def decode_verification_input(payload: Any) -> VerificationInput:
    """Decode an untyped host payload once, at the boundary.

    Raises ``InputDecodingError`` when any field is missing, unknown or of the
    wrong shape. Typed ``VerificationInput`` values go through the same field
    checks.
    """
    if isinstance(payload, VerificationInput):
        return validate_verification_input(payload.challenge, payload.rp_config, payload.assertion)
    if not isinstance(payload, Mapping):
        raise InputDecodingError("verification payload must be an object")
    try:
        parsed = AssertionVerifyIn.model_validate(dict(payload))
    except ValidationError as exc:
        raise InputDecodingError(f"verification payload could not be decoded: {_describe(exc)}") from exc

    return VerificationInput(
        challenge=parsed.challenge,
        rp_config=RelyingPartyConfig(
            origin=parsed.rp_config.origin,
            cross_origin=parsed.rp_config.cross_origin,
        ),
        assertion=Assertion(
            public_key=parsed.assertion.public_key,
            authenticator_data=parsed.assertion.authenticator_data,
            signature=parsed.assertion.signature,
        ),
    )
