from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from datetime import datetime, timezone

from fastapi import FastAPI

from statement_fetcher.schemas.jobs import HealthResponse

REQUIRED_ENV_VARS = (
    "API_KEY",
    "ADMIN_API_BASE_URL",
    "ADMIN_API_KEY",
    "BROWSERBASE_API_KEY",
    "BROWSERBASE_PROJECT_ID",
    "GEMINI_API_KEY",
    "CLOUDINARY_CLOUD_NAME",
    "CLOUDINARY_API_KEY",
    "CLOUDINARY_API_SECRET",
)


def _validate_env() -> None:
    """
    Validate all required environment variables at startup.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - No empty-string values are accepted.
    - ADMIN_API_BASE_URL must be an http(s) URL.
    """

    from statement_fetcher.config import load_env_files

    load_env_files()

    errors: list[str] = []
    for name in REQUIRED_ENV_VARS:
        if not os.getenv(name, "").strip():
            errors.append(f"{name} is not set. Empty strings are not permitted.")

    base_url = os.getenv("ADMIN_API_BASE_URL", "").strip()
    if base_url and not base_url.lower().startswith(("http://", "https://")):
        errors.append(f"ADMIN_API_BASE_URL='{base_url}' is not valid. It must start with http:// or https://.")

    if errors:
        raise RuntimeError(
            "Startup validation failed: missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Enable error reporting on boot and log shutdown."""
    from statement_fetcher.observability import init_error_reporting

    init_error_reporting()
    logging.getLogger(__name__).info("Statement fetcher started")
    try:
        yield
    finally:
        logging.getLogger(__name__).info("Statement fetcher shut down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Supplier Statement Fetcher API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from statement_fetcher.api.routers import jobs_router

    application.include_router(jobs_router)

    @application.get("/health")
    def healthcheck() -> HealthResponse:
        return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc))

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from statement_fetcher.config import get_service_settings

    uvicorn.run(app, host="0.0.0.0", port=get_service_settings().port)
