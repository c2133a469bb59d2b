import json
import unittest

from core.assertion_types import RelyingPartyConfig
from core.client_data import (
    ClientDataType,
    CollectedClientData,
    build_client_data,
    encode_challenge,
    serialize_client_data,
)
from core.errors import SerializationError

ZERO_CHALLENGE_FIELD = "Zmh6rfhivXdsj8GLjp-OIAiXFIVu4jOzkCpZHQ1fKSU"


class ClientDataTests(unittest.TestCase):
    def test_challenge_is_prehashed_and_unpadded(self) -> None:
        self.assertEqual(encode_challenge(b"\x00" * 32), ZERO_CHALLENGE_FIELD)
        self.assertEqual(encode_challenge(b""), "47DEQpj8HBSa-_TImW-5JCeuQeRkm5NMpJWZG3hSuFU")
        self.assertNotIn("=", encode_challenge(b"abc"))

    def test_challenge_encoding_is_deterministic(self) -> None:
        challenge = bytes(range(200))
        first = build_client_data(challenge, RelyingPartyConfig(origin="https://a.test", cross_origin=True))
        second = build_client_data(challenge, RelyingPartyConfig(origin="https://a.test", cross_origin=True))
        self.assertEqual(first.challenge, second.challenge)
        self.assertEqual(serialize_client_data(first), serialize_client_data(second))

    def test_type_is_always_get(self) -> None:
        client_data = build_client_data(b"x", RelyingPartyConfig(origin="https://a.test"))
        self.assertIs(client_data.type, ClientDataType.GET)
        self.assertEqual(str(client_data.type), "webauthn.get")

    def test_serialization_is_compact_and_ordered(self) -> None:
        client_data = build_client_data(
            b"\x00" * 32,
            RelyingPartyConfig(origin="https://example.test", cross_origin=False),
        )
        expected = (
            '{"type":"webauthn.get","challenge":"' + ZERO_CHALLENGE_FIELD + '",'
            '"origin":"https://example.test","crossOrigin":false}'
        ).encode("utf-8")
        self.assertEqual(serialize_client_data(client_data), expected)

    def test_cross_origin_true_and_absent(self) -> None:
        with_true = serialize_client_data(
            build_client_data(b"c", RelyingPartyConfig(origin="https://a.test", cross_origin=True))
        )
        self.assertTrue(with_true.endswith(b',"crossOrigin":true}'))

        absent = serialize_client_data(build_client_data(b"c", RelyingPartyConfig(origin="https://a.test")))
        self.assertNotIn(b"crossOrigin", absent)
        self.assertEqual(list(json.loads(absent)), ["type", "challenge", "origin"])

    def test_non_ascii_origin_is_emitted_as_utf8(self) -> None:
        serialized = serialize_client_data(
            build_client_data(b"c", RelyingPartyConfig(origin="https://bücher.test", cross_origin=False))
        )
        self.assertIn("https://bücher.test".encode("utf-8"), serialized)

    def test_quotes_in_origin_are_escaped(self) -> None:
        serialized = serialize_client_data(
            build_client_data(b"c", RelyingPartyConfig(origin='https://a.test/"x', cross_origin=False))
        )
        self.assertEqual(json.loads(serialized)["origin"], 'https://a.test/"x')

    def test_unencodable_origin_raises_serialization_error(self) -> None:
        client_data = CollectedClientData(
            type=ClientDataType.GET,
            challenge=ZERO_CHALLENGE_FIELD,
            origin="https://a.test/\ud800",
            cross_origin=False,
        )
        with self.assertRaises(SerializationError):
            serialize_client_data(client_data)


if __name__ == "__main__":
    unittest.main()
