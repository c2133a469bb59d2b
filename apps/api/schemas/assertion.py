from typing import Annotated, Any, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, StrictBool, StrictStr

from core.digest import b64url_decode


def _coerce_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return b64url_decode(value)
    if isinstance(value, (list, tuple)):
        if not all(isinstance(item, int) and not isinstance(item, bool) and 0 <= item <= 255 for item in value):
            raise ValueError("byte arrays must contain integers between 0 and 255")
        return bytes(value)
    raise ValueError("expected bytes, a base64url string or an array of byte values")


HostBytes = Annotated[bytes, BeforeValidator(_coerce_bytes)]


class RelyingPartyConfigIn(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    origin: StrictStr
    cross_origin: Optional[StrictBool] = Field(
        default=None,
        validation_alias=AliasChoices("crossOrigin", "cross_origin"),
    )


class AssertionIn(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    public_key: HostBytes = Field(validation_alias=AliasChoices("publicKey", "public_key", "pub_key"))
    authenticator_data: HostBytes = Field(
        validation_alias=AliasChoices("authenticatorData", "authenticator_data"),
    )
    signature: HostBytes


class AssertionVerifyIn(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    challenge: HostBytes
    rp_config: RelyingPartyConfigIn = Field(validation_alias=AliasChoices("rpConfig", "rp_config"))
    assertion: AssertionIn


class AssertionVerifyOut(BaseModel):
    verified: bool
