from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.errors import VerificationError
from core.self_test import run_verifier_self_test

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    # Backward-compatible liveness alias.
    return {"status": "ok"}


@router.get("/live")
def live():
    return {"status": "ok"}


@router.get("/ready")
def ready():
    settings = get_settings()
    checks: dict[str, str] = {}

    if settings.ready_self_test:
        try:
            checks["verifier_self_test"] = "ok" if run_verifier_self_test() else "failed"
        except VerificationError:
            checks["verifier_self_test"] = "failed"
    else:
        checks["verifier_self_test"] = "skipped"

    failed_checks = [name for name, result in checks.items() if result == "failed"]
    if failed_checks:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks}


@router.get("/version")
def version():
    settings = get_settings()
    return {"name": settings.app_name, "version": settings.app_version}
