from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from core.assertion_types import RelyingPartyConfig
from core.canonical import canonical_json_bytes
from core.digest import b64url_no_pad, sha256_digest


class ClientDataType(StrEnum):
    CREATE = "webauthn.create"
    GET = "webauthn.get"


@dataclass(frozen=True)
class CollectedClientData:
    type: ClientDataType
    challenge: str
    origin: str
    cross_origin: bool | None = None

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {
            "type": str(self.type),
            "challenge": self.challenge,
            "origin": self.origin,
        }
        if self.cross_origin is not None:
            wire["crossOrigin"] = self.cross_origin
        return wire


def encode_challenge(challenge: bytes) -> str:
    """Client data challenge field: the raw challenge is always pre-hashed."""
    return b64url_no_pad(sha256_digest(challenge))


def build_client_data(challenge: bytes, rp_config: RelyingPartyConfig) -> CollectedClientData:
    return CollectedClientData(
        type=ClientDataType.GET,
        challenge=encode_challenge(challenge),
        origin=rp_config.origin,
        cross_origin=rp_config.cross_origin,
    )


def serialize_client_data(client_data: CollectedClientData) -> bytes:
    return canonical_json_bytes(client_data.to_wire())
