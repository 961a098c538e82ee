"""
Schemas for the job submission and health endpoints.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from statement_fetcher.domain.jobs import Credential, StatementJob


class CredentialPayload(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1, repr=False)
    login_url: str = Field(min_length=1)

    @field_validator("username", "login_url")
    @classmethod
    def _strip_non_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped

    @field_validator("password")
    @classmethod
    def _password_non_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class FetchStatementsRequest(BaseModel):
    job_id: str = Field(min_length=1)
    credential: CredentialPayload
    accounting_period_start_date: date

    @field_validator("job_id")
    @classmethod
    def _job_id_non_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped

    def to_job(self) -> StatementJob:
        return StatementJob(
            job_id=self.job_id,
            credential=Credential(
                username=self.credential.username,
                password=self.credential.password,
                login_url=self.credential.login_url,
            ),
            accounting_period_start_date=self.accounting_period_start_date,
        )


class JobAcceptedResponse(BaseModel):
    message: str = "Job accepted for processing"
    job_id: str


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: datetime
