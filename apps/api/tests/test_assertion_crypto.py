import unittest

from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature

from core.assertion_crypto import (
    encode_public_key,
    generate_p256_private_key,
    load_p256_public_key,
    parse_der_signature,
    sign_payload,
    verify_signature,
)
from core.errors import KeyParseError, SignatureParseError
from tests._helpers import OPENSSL_COMPRESSED_PUBLIC_KEY, OPENSSL_PUBLIC_KEY, OPENSSL_SIGNATURE

P256_ORDER = 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551
P256_PRIME = 0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFF


class PublicKeyParsingTests(unittest.TestCase):
    def test_uncompressed_and_compressed_points_load(self) -> None:
        uncompressed = load_p256_public_key(OPENSSL_PUBLIC_KEY)
        compressed = load_p256_public_key(OPENSSL_COMPRESSED_PUBLIC_KEY)
        self.assertEqual(uncompressed.public_numbers(), compressed.public_numbers())
        self.assertEqual(uncompressed.curve.name, "secp256r1")

    def test_encode_public_key_round_trips_through_loader(self) -> None:
        public_key = generate_p256_private_key().public_key()
        for compressed in (False, True):
            encoded = encode_public_key(public_key, compressed=compressed)
            self.assertEqual(len(encoded), 33 if compressed else 65)
            self.assertEqual(load_p256_public_key(encoded).public_numbers(), public_key.public_numbers())

    def test_too_short_and_too_long_keys_rejected(self) -> None:
        for bad in (b"", b"\x04", OPENSSL_PUBLIC_KEY[:-1], OPENSSL_PUBLIC_KEY + b"\x00", OPENSSL_COMPRESSED_PUBLIC_KEY[:-1]):
            with self.assertRaises(KeyParseError):
                load_p256_public_key(bad)

    def test_point_off_curve_rejected(self) -> None:
        off_curve = OPENSSL_PUBLIC_KEY[:-1] + bytes([OPENSSL_PUBLIC_KEY[-1] ^ 0x01])
        with self.assertRaises(KeyParseError):
            load_p256_public_key(off_curve)

    def test_out_of_range_coordinate_rejected(self) -> None:
        out_of_range = b"\x04" + (P256_PRIME + 1).to_bytes(32, "big")[-32:] + OPENSSL_PUBLIC_KEY[33:]
        with self.assertRaises(KeyParseError):
            load_p256_public_key(out_of_range)
        all_ones = b"\x04" + b"\xff" * 64
        with self.assertRaises(KeyParseError):
            load_p256_public_key(all_ones)

    def test_unknown_prefix_and_non_bytes_rejected(self) -> None:
        with self.assertRaises(KeyParseError):
            load_p256_public_key(b"\x05" + OPENSSL_PUBLIC_KEY[1:])
        with self.assertRaises(KeyParseError):
            load_p256_public_key(OPENSSL_PUBLIC_KEY.hex())  # type: ignore[arg-type]

    def test_memoryview_key_loads(self) -> None:
        key = load_p256_public_key(memoryview(OPENSSL_PUBLIC_KEY))
        self.assertEqual(key.curve.name, "secp256r1")


class SignatureParsingTests(unittest.TestCase):
    def test_memoryview_signature_decodes(self) -> None:
        self.assertEqual(parse_der_signature(memoryview(OPENSSL_SIGNATURE)), parse_der_signature(OPENSSL_SIGNATURE))

    def test_der_signature_decodes_to_integers(self) -> None:
        r, s = parse_der_signature(OPENSSL_SIGNATURE)
        self.assertEqual(encode_dss_signature(r, s), OPENSSL_SIGNATURE)

    def test_truncated_and_garbage_signatures_rejected(self) -> None:
        for bad in (b"", OPENSSL_SIGNATURE[:-1], OPENSSL_SIGNATURE[:10], b"\x30\x00", b"not a signature", b"\x00" * 64):
            with self.assertRaises(SignatureParseError):
                parse_der_signature(bad)

    def test_trailing_bytes_rejected(self) -> None:
        with self.assertRaises(SignatureParseError):
            parse_der_signature(OPENSSL_SIGNATURE + b"\x00")

    def test_oversized_integers_rejected(self) -> None:
        oversized = encode_dss_signature(1 << 300, 1)
        with self.assertRaises(SignatureParseError):
            parse_der_signature(oversized)


class VerifySignatureTests(unittest.TestCase):
    def setUp(self) -> None:
        self.private_key = generate_p256_private_key()
        self.public_key = encode_public_key(self.private_key.public_key())
        self.payload = b"authenticator-data" + b"\x11" * 32
        self.signature = sign_payload(self.private_key, self.payload)

    def test_valid_signature_verifies(self) -> None:
        self.assertTrue(verify_signature(self.public_key, self.signature, self.payload))

    def test_compressed_key_verifies(self) -> None:
        compressed = encode_public_key(self.private_key.public_key(), compressed=True)
        self.assertTrue(verify_signature(compressed, self.signature, self.payload))

    def test_wrong_payload_and_wrong_key_return_false(self) -> None:
        self.assertFalse(verify_signature(self.public_key, self.signature, self.payload + b"\x00"))
        other = encode_public_key(generate_p256_private_key().public_key())
        self.assertFalse(verify_signature(other, self.signature, self.payload))

    def test_out_of_range_scalars_return_false(self) -> None:
        for r, s in ((0, 1), (1, 0), (P256_ORDER, 1), (1, P256_ORDER)):
            self.assertFalse(verify_signature(self.public_key, encode_dss_signature(r, s), self.payload))

    def test_parse_errors_are_raised_not_returned(self) -> None:
        with self.assertRaises(KeyParseError):
            verify_signature(b"\x04" + b"\x00" * 64, self.signature, self.payload)
        with self.assertRaises(SignatureParseError):
            verify_signature(self.public_key, self.signature[:-3], self.payload)


if __name__ == "__main__":
    unittest.main()
