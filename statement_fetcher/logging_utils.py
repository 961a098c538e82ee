"""
Structured logging helpers for job, workflow and pipeline events.
"""

from __future__ import annotations

import json
import logging
from typing import Any

REDACTED = "[redacted]"
SENSITIVE_FIELDS = frozenset({"password", "api_key", "x_api_key", "authorization", "secret"})


def redact_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {
        key: REDACTED if key.lower() in SENSITIVE_FIELDS and value is not None else value
        for key, value in fields.items()
    }


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON with credential fields masked.

    Values that are not JSON-native (dates, enums) are rendered with `str`.
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event, **redact_fields(fields)}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
