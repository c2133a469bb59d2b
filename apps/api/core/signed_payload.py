from __future__ import annotations

from core.assertion_types import RelyingPartyConfig
from core.client_data import build_client_data, serialize_client_data
from core.digest import sha256_digest


def assemble_signed_payload(authenticator_data: bytes, client_data_hash: bytes) -> bytes:
    # Both halves are self-delimiting, so no separator or length prefix.
    return bytes(authenticator_data) + bytes(client_data_hash)


def client_data_hash(challenge: bytes, rp_config: RelyingPartyConfig) -> bytes:
    client_data = build_client_data(challenge, rp_config)
    return sha256_digest(serialize_client_data(client_data))


def build_signed_payload(challenge: bytes, rp_config: RelyingPartyConfig, authenticator_data: bytes) -> bytes:
    return assemble_signed_payload(authenticator_data, client_data_hash(challenge, rp_config))
