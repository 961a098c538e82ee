"""
statement_fetcher/api/dependencies.py

Shared FastAPI dependencies for request authentication.
"""

from __future__ import annotations

import hmac

from fastapi import Header, HTTPException, status

from statement_fetcher.config import get_service_settings


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    """
    Reject requests whose `X-API-Key` header does not match the service key.
    """

    expected = get_service_settings().api_key
    if not x_api_key or not expected or not hmac.compare_digest(x_api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key.",
        )
