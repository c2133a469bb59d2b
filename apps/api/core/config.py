from functools import lru_cache
import logging
import os


logger = logging.getLogger(__name__)


class Settings:
    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", "assertion-verifier-api")
        self.app_version = os.getenv("APP_VERSION", "0.1.0")
        self.version_hash = os.getenv("VERSION_HASH", os.getenv("GIT_SHA", "unknown"))
        self.env = os.getenv("ENV", "dev").lower()
        if self.env not in {"dev", "test", "staging", "prod"}:
            raise RuntimeError("ENV must be one of: dev, test, staging, prod")
        self.log_level = os.getenv("LOG_LEVEL", "DEBUG" if self.env in {"dev", "test"} else "INFO").upper().strip()
        self.max_verify_body_bytes = self._parse_int("MAX_VERIFY_BODY_BYTES", default=65_536)
        self.ready_self_test = os.getenv("READY_SELF_TEST", "true").lower() == "true"
        if not self.ready_self_test:
            logger.warning("READY_SELF_TEST disabled, readiness will not exercise the verifier")
        self.cors_allowed_origins = self._parse_cors_origins()
        self.validate()

    def _parse_int(self, env_name: str, default: int) -> int:
        raw = os.getenv(env_name, str(default)).strip()
        try:
            return int(raw)
        except ValueError as exc:
            raise RuntimeError(f"{env_name} must be an integer") from exc

    def _parse_cors_origins(self) -> list[str]:
        raw = os.getenv("CORS_ALLOWED_ORIGINS", "")
        if raw.strip():
            return [origin.strip() for origin in raw.split(",") if origin.strip()]
        if self.env == "dev":
            return ["http://localhost:3000", "http://127.0.0.1:3000"]
        return []

    def validate(self) -> None:
        if self.max_verify_body_bytes <= 0:
            raise RuntimeError("MAX_VERIFY_BODY_BYTES must be > 0")
        if self.env == "prod":
            if not self.cors_allowed_origins:
                raise RuntimeError("CORS_ALLOWED_ORIGINS must be explicitly set in prod")
            if self.log_level == "DEBUG":
                raise RuntimeError("LOG_LEVEL=DEBUG is not allowed in prod")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def reset_settings_cache() -> None:
    get_settings.cache_clear()
