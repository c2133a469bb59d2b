from __future__ import annotations

import base64
import binascii
import hashlib

SHA256_DIGEST_SIZE = 32


def sha256_digest(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def b64url_no_pad(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def b64url_decode(text: str) -> bytes:
    """Decode base64url with or without trailing padding.

    Raises ``ValueError`` for characters outside the URL-safe alphabet.
    """
    stripped = text.rstrip("=")
    if "+" in stripped or "/" in stripped:
        raise ValueError("standard base64 alphabet is not accepted, use base64url")
    if len(stripped) % 4 == 1:
        raise ValueError("invalid base64url length")
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as exc:
        raise ValueError("invalid base64url encoding") from exc
