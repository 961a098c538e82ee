"""
Shared failure reasons reported to the Admin API for failed jobs.
"""

from __future__ import annotations

from enum import Enum


class FailureReason(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    REQUIRES_MFA = "requires_mfa"
    CARRIER_UNAVAILABLE = "carrier_unavailable"
    MISSING_INSTRUCTION = "missing_instruction"
    PASSWORD_CHANGE = "password_change"


# Checked in order; the first matching group wins.
FAILURE_KEYWORDS: tuple[tuple[FailureReason, tuple[str, ...]], ...] = (
    (FailureReason.INVALID_CREDENTIALS, ("invalid credentials", "login failed")),
    (FailureReason.REQUIRES_MFA, ("mfa", "two-factor")),
    (FailureReason.CARRIER_UNAVAILABLE, ("unavailable", "timeout", "network")),
    (
        FailureReason.MISSING_INSTRUCTION,
        ("unknown carrier", "script not found", "no workflow implemented"),
    ),
    (FailureReason.PASSWORD_CHANGE, ("password expired", "must change password")),
)


def classify_failure(message: str | None) -> FailureReason:
    """
    Map a workflow error message onto the closed failure taxonomy.

    Best-effort keyword matching; anything unrecognised is reported as
    `carrier_unavailable`.
    """

    lowered = (message or "").lower()
    for reason, keywords in FAILURE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return reason
    return FailureReason.CARRIER_UNAVAILABLE
