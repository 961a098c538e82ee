"""
Error-observability sink backed by Sentry.
"""

from __future__ import annotations

import logging
from typing import Any

import sentry_sdk

from statement_fetcher.config import get_observability_settings, get_service_settings

logger = logging.getLogger(__name__)

_SCRUBBED_HEADERS = {"x-api-key", "authorization"}


def _scrub_event(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any]:
    headers = (event.get("request") or {}).get("headers")
    if isinstance(headers, dict):
        for name in list(headers):
            if name.lower() in _SCRUBBED_HEADERS:
                del headers[name]
    return event


def init_error_reporting() -> bool:
    """
    Initialise Sentry when a DSN is configured for a production environment.
    """

    observability = get_observability_settings()
    service = get_service_settings()
    if not observability.sentry_dsn or not service.is_production:
        logger.info("Sentry error reporting disabled environment=%s", service.environment)
        return False

    sentry_sdk.init(
        dsn=observability.sentry_dsn,
        environment=service.environment,
        traces_sample_rate=observability.traces_sample_rate,
        send_default_pii=False,
        before_send=_scrub_event,
    )
    logger.info("Sentry error reporting enabled environment=%s", service.environment)
    return True


def capture_exception(exc: BaseException, **context: Any) -> None:
    """
    Log an exception with traceback and forward it to Sentry.

    `sentry_sdk.capture_exception` is a no-op when Sentry was not initialised.
    """

    logger.error(
        "Captured exception type=%s error=%s context=%s",
        type(exc).__name__,
        exc,
        context,
        exc_info=exc,
    )
    with sentry_sdk.new_scope() as scope:
        for key, value in context.items():
            scope.set_extra(key, value)
        sentry_sdk.capture_exception(exc)
