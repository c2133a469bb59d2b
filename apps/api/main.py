import json
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.contracts import API_VERSION_HEADER, ErrorCode, error_body, resolve_api_version
from core.errors import VerificationError
from core.failure_modes import failure_policy, record_operation_failure
from core.logging_utils import configure_logging, log_request, monotonic_ms, request_id_from_request
from routers.assertions import router as assertions_router
from routers.health import router as health_router

settings = get_settings()
configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Assertion Verifier API",
    description=(
        "Verifies WebAuthn `webauthn.get` assertions signed with ECDSA P-256. "
        "Byte fields are accepted as base64url strings or arrays of byte values."
    ),
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=[
        {"name": "assertions", "description": "Stateless assertion signature verification."},
        {"name": "health", "description": "Operational liveness and diagnostics."},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-Id", API_VERSION_HEADER],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    try:
        api_version = resolve_api_version(request.headers.get(API_VERSION_HEADER))
    except ValueError as exc:
        return JSONResponse(
            status_code=400,
            content=error_body(
                ErrorCode.VALIDATION_ERROR,
                str(exc),
                request_id_from_request(request),
            ),
        )

    request_id = request_id_from_request(request)
    request.state.request_id = request_id
    request.state.api_version = api_version
    started = monotonic_ms()
    response = await call_next(request)
    if (
        response.status_code < 400
        and response.headers.get("content-type", "").startswith("application/json")
        and request.url.path not in {"/openapi.json"}
    ):
        body = b""
        async for chunk in response.body_iterator:
            body += chunk
        try:
            decoded = json.loads(body.decode("utf-8")) if body else None
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, dict) and ("data" in decoded or "error" in decoded):
            wrapped = decoded
        else:
            wrapped = {"data": decoded}
        response = JSONResponse(content=wrapped, status_code=response.status_code)
    response.headers["X-Request-Id"] = request_id
    response.headers[API_VERSION_HEADER] = api_version
    elapsed = monotonic_ms() - started
    log_request(request_id, request.method, request.url.path, response.status_code, elapsed)
    return response


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _map_http_error_code(status_code: int) -> ErrorCode:
    if status_code == 413:
        return ErrorCode.PAYLOAD_TOO_LARGE
    if status_code == 404:
        return ErrorCode.NOT_FOUND
    if status_code in {400, 405, 422}:
        return ErrorCode.VALIDATION_ERROR
    return ErrorCode.INTERNAL_ERROR


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    message = "Request could not be processed"
    if exc.status_code in {400, 404, 405, 413, 422}:
        message = str(exc.detail) if isinstance(exc.detail, str) else message
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(_map_http_error_code(exc.status_code), message, _request_id(request)),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=error_body(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            _request_id(request),
        ),
    )


@app.exception_handler(VerificationError)
async def verification_exception_handler(request: Request, exc: VerificationError):
    policy = failure_policy(exc)
    record_operation_failure(
        operation="assertion.verify",
        exc=exc,
        extra_payload={
            "path": request.url.path,
            "method": request.method,
            "request_id": _request_id(request),
        },
    )
    return JSONResponse(
        status_code=policy.http_status,
        content=error_body(policy.error_code, str(exc), _request_id(request)),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    policy = failure_policy(exc)
    record_operation_failure(
        operation="http.request",
        exc=exc,
        extra_payload={
            "path": request.url.path,
            "method": request.method,
            "request_id": _request_id(request),
        },
    )
    return JSONResponse(
        status_code=policy.http_status,
        content=error_body(
            policy.error_code,
            "Internal server error",
            _request_id(request),
        ),
    )


app.include_router(health_router)


@app.get("/")
def root():
    return {"status": "Assertion Verifier API running"}


app.include_router(assertions_router)


@app.on_event("startup")
async def on_startup() -> None:
    logger.info(
        "startup env=%s version_hash=%s max_verify_body_bytes=%s",
        settings.env,
        settings.version_hash,
        settings.max_verify_body_bytes,
    )
