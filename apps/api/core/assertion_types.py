from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RelyingPartyConfig:
    origin: str
    cross_origin: bool | None = None


def _size(value: object) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<{len(value)} bytes>"
    return f"<{type(value).__name__}>"


@dataclass(frozen=True)
class Assertion:
    public_key: bytes
    authenticator_data: bytes
    signature: bytes

    def __repr__(self) -> str:
        # Keeps byte material out of tracebacks and log lines.
        return (
            f"Assertion(public_key={_size(self.public_key)}, "
            f"authenticator_data={_size(self.authenticator_data)}, "
            f"signature={_size(self.signature)})"
        )


@dataclass(frozen=True)
class VerificationInput:
    challenge: bytes
    rp_config: RelyingPartyConfig
    assertion: Assertion
