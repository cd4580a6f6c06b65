"""Survey server settings, read once from the environment at startup."""

import os
from dataclasses import dataclass, field

# Read at import time: FastAPI Query() defaults are fixed at decoration.
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    # None loads the bundled survey_core/data/questions.yaml
    catalog_path: str | None = None
    log_level: str = "INFO"
    # None disables the admin endpoints
    admin_api_key: str | None = None
    # When set, X-User-ID is only honoured alongside a matching X-Proxy-Secret
    trusted_proxy_secret: str | None = None
    # Adds exception details to 500 bodies
    debug_errors: bool = False


def _split_origins(raw: str) -> list[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


def load_settings() -> ServerSettings:
    """Build settings from ``SERVER_*``, ``ADMIN_API_KEY`` and ``TRUSTED_PROXY_SECRET``."""
    env = os.getenv
    return ServerSettings(
        host=env("SERVER_HOST", "0.0.0.0"),
        port=int(env("SERVER_PORT", "8080")),
        cors_origins=_split_origins(env("SERVER_CORS_ORIGINS", "*")),
        catalog_path=env("SERVER_CATALOG_PATH") or None,
        log_level=env("SERVER_LOG_LEVEL", "INFO").upper(),
        admin_api_key=env("ADMIN_API_KEY") or None,
        trusted_proxy_secret=env("TRUSTED_PROXY_SECRET") or None,
        debug_errors=env("SERVER_DEBUG_ERRORS", "").lower() in _TRUTHY,
    )
