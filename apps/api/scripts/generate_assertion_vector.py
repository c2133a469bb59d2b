import argparse
import json
import os
from typing import Any

from core.assertion_crypto import encode_public_key, generate_p256_private_key, sign_payload
from core.assertion_types import RelyingPartyConfig
from core.digest import b64url_no_pad
from core.signed_payload import build_signed_payload

DEFAULT_AUTHENTICATOR_DATA_SIZE = 37


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sign a throwaway webauthn.get assertion and print a /assertions/verify request body."
    )
    parser.add_argument(
        "--origin",
        default="https://example.test",
        help="Relying party origin to sign for (default: https://example.test).",
    )
    parser.add_argument(
        "--cross-origin",
        choices=("true", "false", "omit"),
        default="false",
        help="crossOrigin value in the client data (default: false).",
    )
    parser.add_argument(
        "--challenge-hex",
        default=None,
        help="Challenge bytes as hex (default: 32 random bytes).",
    )
    parser.add_argument(
        "--authenticator-data-hex",
        default=None,
        help="Authenticator data bytes as hex (default: 37 random bytes).",
    )
    parser.add_argument(
        "--compressed",
        action="store_true",
        help="Emit the public key as a compressed SEC1 point.",
    )
    return parser.parse_args(argv)


def _cross_origin(value: str) -> bool | None:
    if value == "omit":
        return None
    return value == "true"


def build_vector(
    *,
    origin: str,
    cross_origin: bool | None,
    challenge: bytes,
    authenticator_data: bytes,
    compressed: bool = False,
) -> dict[str, Any]:
    private_key = generate_p256_private_key()
    rp_config = RelyingPartyConfig(origin=origin, cross_origin=cross_origin)
    signed_payload = build_signed_payload(challenge, rp_config, authenticator_data)
    rp_config_body: dict[str, Any] = {"origin": origin}
    if cross_origin is not None:
        rp_config_body["crossOrigin"] = cross_origin
    return {
        "challenge": b64url_no_pad(challenge),
        "rpConfig": rp_config_body,
        "assertion": {
            "publicKey": b64url_no_pad(encode_public_key(private_key.public_key(), compressed=compressed)),
            "authenticatorData": b64url_no_pad(authenticator_data),
            "signature": b64url_no_pad(sign_payload(private_key, signed_payload)),
        },
    }


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    challenge = bytes.fromhex(args.challenge_hex) if args.challenge_hex else os.urandom(32)
    authenticator_data = (
        bytes.fromhex(args.authenticator_data_hex)
        if args.authenticator_data_hex
        else os.urandom(DEFAULT_AUTHENTICATOR_DATA_SIZE)
    )
    vector = build_vector(
        origin=args.origin,
        cross_origin=_cross_origin(args.cross_origin),
        challenge=challenge,
        authenticator_data=authenticator_data,
        compressed=args.compressed,
    )
    print(json.dumps(vector, indent=2))


if __name__ == "__main__":
    main()
