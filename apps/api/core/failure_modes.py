from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from core.contracts import ErrorCode
from core.errors import (
    InputDecodingError,
    KeyParseError,
    SerializationError,
    SignatureParseError,
    VerificationError,
)
from core.logging_utils import log_structured
from core.observability import unexpected_exception_metric


class FailureClass(StrEnum):
    INPUT_DECODING_FAILED = "input.decoding_failed"
    KEY_PARSE_FAILED = "key.parse_failed"
    SIGNATURE_PARSE_FAILED = "signature.parse_failed"
    SERIALIZATION_FAILED = "serialization.failed"
    UNEXPECTED_EXCEPTION = "unexpected.exception"


@dataclass(frozen=True)
class FailurePolicy:
    failure_class: FailureClass
    error_code: ErrorCode
    http_status: int
    fail_closed: bool


def classify_failure(exc: Exception) -> FailureClass:
    if isinstance(exc, KeyParseError):
        return FailureClass.KEY_PARSE_FAILED
    if isinstance(exc, SignatureParseError):
        return FailureClass.SIGNATURE_PARSE_FAILED
    if isinstance(exc, SerializationError):
        return FailureClass.SERIALIZATION_FAILED
    if isinstance(exc, (InputDecodingError, VerificationError)):
        return FailureClass.INPUT_DECODING_FAILED
    return FailureClass.UNEXPECTED_EXCEPTION


def failure_policy(exc: Exception) -> FailurePolicy:
    failure_class = classify_failure(exc)
    if failure_class == FailureClass.UNEXPECTED_EXCEPTION:
        return FailurePolicy(
            failure_class=failure_class,
            error_code=ErrorCode.INTERNAL_ERROR,
            http_status=500,
            fail_closed=True,
        )
    return FailurePolicy(
        failure_class=failure_class,
        error_code=exc.code,
        http_status=422,
        fail_closed=True,
    )


def failure_event_type(operation: str) -> str:
    return f"{operation}.failed"


def record_operation_failure(
    *,
    operation: str,
    exc: Exception,
    extra_payload: dict[str, Any] | None = None,
) -> None:
    """Best-effort failure telemetry for errors that escaped verification."""
    payload = {
        "failure_class": classify_failure(exc).value,
        "error_class": exc.__class__.__name__,
    }
    if extra_payload:
        payload.update(extra_payload)
    if payload["failure_class"] == FailureClass.UNEXPECTED_EXCEPTION.value:
        unexpected_exception_metric(payload["error_class"], request_id=payload.get("request_id"))
    log_structured(failure_event_type(operation), **payload)
