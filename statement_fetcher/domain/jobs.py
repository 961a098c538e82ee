"""
statement_fetcher/domain/jobs.py

Domain models for statement fetching jobs and their terminal status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from statement_fetcher.failure_codes import FailureReason


@dataclass(frozen=True)
class Credential:
    """
    Carrier portal login, supplied per job and never persisted.
    """

    username: str
    password: str = field(repr=False)
    login_url: str


@dataclass(frozen=True)
class StatementJob:
    """
    One supplier statement fetching job.
    """

    job_id: str
    credential: Credential
    accounting_period_start_date: date


class JobStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class JobStatusUpdate:
    """
    Terminal status event sent once per job to the Admin API.
    """

    status: JobStatus
    failure_reason: FailureReason | None = None
    notes: str | None = None

    @classmethod
    def succeeded(cls, notes: str | None = None) -> "JobStatusUpdate":
        return cls(status=JobStatus.SUCCESS, notes=notes)

    @classmethod
    def failed(cls, failure_reason: FailureReason, notes: str | None = None) -> "JobStatusUpdate":
        return cls(status=JobStatus.FAILED, failure_reason=failure_reason, notes=notes)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"status": self.status.value}
        if self.failure_reason is not None:
            payload["failure_reason"] = self.failure_reason.value
        if self.notes:
            payload["notes"] = self.notes
        return payload
