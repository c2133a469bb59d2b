from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from core.assertion_crypto import verify_signature
from core.assertion_types import Assertion, RelyingPartyConfig
from core.decoding import decode_verification_input, validate_verification_input
from core.errors import VerificationError
from core.logging_utils import log_structured
from core.observability import (
    METRIC_ASSERTION_REJECTED,
    METRIC_ASSERTION_VERIFIED,
    increment_metric,
    malformed_input_metric,
)
from core.signed_payload import build_signed_payload


def _record_malformed(exc: VerificationError, request_id: str | None) -> None:
    malformed_input_metric(exc.__class__.__name__, request_id=request_id)
    log_structured(
        "assertion.malformed",
        request_id=request_id,
        error_class=exc.__class__.__name__,
        reason=str(exc.code),
    )


def check_assertion_signature(challenge: bytes, rp_config: RelyingPartyConfig, assertion: Assertion) -> bool:
    signed_payload = build_signed_payload(challenge, rp_config, assertion.authenticator_data)
    return verify_signature(assertion.public_key, assertion.signature, signed_payload)


def verify_assertion(
    challenge: bytes,
    rp_config: RelyingPartyConfig,
    assertion: Assertion,
    *,
    request_id: str | None = None,
) -> bool:
    """Check one ``webauthn.get`` assertion.

    Returns ``True`` when ``assertion.signature`` is a valid ECDSA P-256
    signature over ``authenticatorData || SHA256(clientDataJSON)`` and
    ``False`` on any cryptographic mismatch. Arguments of the wrong type raise
    ``InputDecodingError``; malformed keys, signatures or client data raise
    the matching ``VerificationError`` subclass.
    """
    try:
        checked = validate_verification_input(challenge, rp_config, assertion)
        verified = check_assertion_signature(checked.challenge, checked.rp_config, checked.assertion)
    except VerificationError as exc:
        _record_malformed(exc, request_id)
        raise

    if verified:
        increment_metric(METRIC_ASSERTION_VERIFIED, request_id=request_id)
        log_structured(
            "assertion.verified",
            request_id=request_id,
            origin=rp_config.origin,
            cross_origin=rp_config.cross_origin,
            result="true",
        )
    else:
        increment_metric(METRIC_ASSERTION_REJECTED, request_id=request_id, reason="signature_mismatch")
        log_structured(
            "assertion.rejected",
            request_id=request_id,
            origin=rp_config.origin,
            cross_origin=rp_config.cross_origin,
            result="false",
        )
    return verified


def verify_assertion_request(payload: Mapping[str, Any], *, request_id: str | None = None) -> bool:
    try:
        decoded = decode_verification_input(payload)
    except VerificationError as exc:
        _record_malformed(exc, request_id)
        raise
    return verify_assertion(
        decoded.challenge,
        decoded.rp_config,
        decoded.assertion,
        request_id=request_id,
    )
