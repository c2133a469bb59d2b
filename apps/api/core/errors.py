from __future__ import annotations

from core.contracts import ErrorCode


class VerificationError(ValueError):
    """Input could not be turned into a verifiable assertion.

    A rejected signature is never raised; it is reported as ``False``.
    """

    code: ErrorCode = ErrorCode.INPUT_DECODING_ERROR


class InputDecodingError(VerificationError):
    code = ErrorCode.INPUT_DECODING_ERROR


class KeyParseError(VerificationError):
    code = ErrorCode.KEY_PARSE_ERROR


class SignatureParseError(VerificationError):
    code = ErrorCode.SIGNATURE_PARSE_ERROR


class SerializationError(VerificationError):
    code = ErrorCode.SERIALIZATION_ERROR
