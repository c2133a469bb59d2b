import json

from fastapi import APIRouter, HTTPException, Request
from fastapi.exceptions import RequestValidationError

from core.assertion_verify import verify_assertion_request
from core.config import get_settings
from schemas.assertion import AssertionVerifyOut

router = APIRouter(tags=["assertions"])

_JSON_BODY = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": {"type": "object"}}},
    }
}


def _declared_length(request: Request) -> int | None:
    value = request.headers.get("content-length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@router.post("/assertions/verify", response_model=AssertionVerifyOut, openapi_extra=_JSON_BODY)
async def verify_assertion_endpoint(request: Request):
    # The body is read raw so the size cap applies before any JSON parsing.
    limit = get_settings().max_verify_body_bytes
    declared = _declared_length(request)
    if declared is not None and declared > limit:
        raise HTTPException(status_code=413, detail="Payload too large")
    raw = await request.body()
    if len(raw) > limit:
        raise HTTPException(status_code=413, detail="Payload too large")
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise RequestValidationError(
            [{"loc": ("body",), "msg": "Invalid JSON payload", "type": "value_error.jsondecode"}]
        )
    request_id = getattr(request.state, "request_id", None)
    verified = verify_assertion_request(payload, request_id=request_id)
    return AssertionVerifyOut(verified=verified)
