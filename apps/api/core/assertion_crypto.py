from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature, encode_dss_signature

from core.errors import KeyParseError, SignatureParseError

P256_COORDINATE_SIZE = 32
P256_UNCOMPRESSED_POINT_SIZE = 1 + 2 * P256_COORDINATE_SIZE
P256_COMPRESSED_POINT_SIZE = 1 + P256_COORDINATE_SIZE
_POINT_SIZES = {
    0x02: P256_COMPRESSED_POINT_SIZE,
    0x03: P256_COMPRESSED_POINT_SIZE,
    0x04: P256_UNCOMPRESSED_POINT_SIZE,
}


def load_p256_public_key(data: bytes) -> ec.EllipticCurvePublicKey:
    """Parse a SEC1 encoded P-256 point, compressed or uncompressed."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise KeyParseError("public key must be bytes")
    raw = bytes(data)
    if not raw:
        raise KeyParseError("public key is empty")
    expected_size = _POINT_SIZES.get(raw[0])
    if expected_size is None:
        raise KeyParseError(f"unsupported SEC1 point prefix 0x{raw[0]:02x}")
    if len(raw) != expected_size:
        raise KeyParseError(f"public key must be {expected_size} bytes for prefix 0x{raw[0]:02x}, got {len(raw)}")
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), raw)
    except ValueError as exc:
        raise KeyParseError("public key is not a valid P-256 point") from exc


def parse_der_signature(data: bytes) -> tuple[int, int]:
    """Decode ``SEQUENCE { INTEGER r, INTEGER s }`` in strict DER."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise SignatureParseError("signature must be bytes")
    try:
        r, s = decode_dss_signature(bytes(data))
    except ValueError as exc:
        raise SignatureParseError("signature is not a valid DER encoded ECDSA signature") from exc
    # Range checks (zero, >= curve order) are left to verification and yield False.
    if r < 0 or s < 0:
        raise SignatureParseError("signature integers must be non-negative")
    if r.bit_length() > 8 * P256_COORDINATE_SIZE or s.bit_length() > 8 * P256_COORDINATE_SIZE:
        raise SignatureParseError("signature integers exceed the P-256 scalar size")
    return r, s


def verify_signature(public_key_bytes: bytes, signature_bytes: bytes, signed_payload: bytes) -> bool:
    public_key = load_p256_public_key(public_key_bytes)
    r, s = parse_der_signature(signature_bytes)
    try:
        # The payload goes in unhashed; ECDSA(SHA256) digests it.
        public_key.verify(encode_dss_signature(r, s), bytes(signed_payload), ec.ECDSA(hashes.SHA256()))
    except InvalidSignature:
        return False
    return True


def generate_p256_private_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


def encode_public_key(public_key: ec.EllipticCurvePublicKey, *, compressed: bool = False) -> bytes:
    point_format = (
        serialization.PublicFormat.CompressedPoint
        if compressed
        else serialization.PublicFormat.UncompressedPoint
    )
    return public_key.public_bytes(encoding=serialization.Encoding.X962, format=point_format)


def sign_payload(private_key: ec.EllipticCurvePrivateKey, signed_payload: bytes) -> bytes:
    return private_key.sign(signed_payload, ec.ECDSA(hashes.SHA256()))
