"""
Carrier workflow contract and the browser capability routines run against.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Protocol, TypeVar

from pydantic import BaseModel

from statement_fetcher.domain.jobs import StatementJob
from statement_fetcher.domain.statements import Statement, WorkflowResult
from statement_fetcher.logging_utils import log_event
from statement_fetcher.statements.filters import parse_statement_date

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
T = TypeVar("T")


@dataclass(frozen=True)
class ObservedElement:
    """
    Candidate page element returned by an observe instruction.
    """

    selector: str
    description: str = ""


class BrowserSession(Protocol):
    """
    Remote browser capability consumed by carrier routines.

    `page` and `context` expose the raw Playwright objects for routines that
    need byte-exact capture (route interception, downloads, print to PDF).
    """

    @property
    def page(self) -> Any:
        ...

    @property
    def context(self) -> Any:
        ...

    async def goto(self, url: str, **options: Any) -> None:
        ...

    async def act(self, instruction: str, variables: dict[str, str] | None = None) -> None:
        ...

    async def extract(self, instruction: str, schema: type[ModelT]) -> ModelT:
        ...

    async def observe(self, instruction: str) -> list[ObservedElement]:
        ...

    async def wait(self, milliseconds: int) -> None:
        ...


class CaptureTimeoutError(TimeoutError):
    """
    Raised when an intercepted network artifact does not arrive in time.
    """


class ResponseCapture(Generic[T]):
    """
    Single-assignment result channel fed by a network callback.

    Scoped to one routine run, so concurrent jobs never share captured state.
    """

    def __init__(self, description: str = "network response") -> None:
        self._description = description
        self._future: asyncio.Future[T] = asyncio.get_running_loop().create_future()

    @property
    def done(self) -> bool:
        return self._future.done()

    def set(self, value: T) -> None:
        if not self._future.done():
            self._future.set_result(value)

    async def wait(self, timeout_seconds: float) -> T:
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout=timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise CaptureTimeoutError(
                f"Timeout after {timeout_seconds:.0f}s waiting for {self._description}"
            ) from exc


class CarrierWorkflow(ABC):
    """
    Base class for carrier routines.

    Subclasses implement `fetch_statements`; `run` converts any error raised
    there into a failed WorkflowResult carrying the error message.
    """

    slug: ClassVar[str]

    def __init__(self, *, capture_timeout_seconds: float = 10.0) -> None:
        self.capture_timeout_seconds = capture_timeout_seconds

    async def run(self, session: BrowserSession, job: StatementJob) -> WorkflowResult:
        try:
            statements = await self.fetch_statements(session, job)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            log_event(
                logger,
                logging.WARNING,
                "workflow_failed",
                carrier=self.slug,
                job_id=job.job_id,
                error=message,
            )
            return WorkflowResult.failed(message)

        log_event(
            logger,
            logging.INFO,
            "workflow_completed",
            carrier=self.slug,
            job_id=job.job_id,
            statements=len(statements),
        )
        return WorkflowResult.ok(statements)

    @abstractmethod
    async def fetch_statements(self, session: BrowserSession, job: StatementJob) -> list[Statement]:
        """
        Log in, locate and retrieve statements for `job`.
        """

    async def login(
        self,
        session: BrowserSession,
        job: StatementJob,
        *,
        username_field: str,
        password_field: str,
        submit_control: str,
        settle_ms: int = 2000,
    ) -> None:
        """
        Standard username/password form login.

        Credentials are passed as act variables so they are substituted in the
        browser and never sent to the model as part of the instruction.
        """

        credential = job.credential
        await session.goto(credential.login_url)
        await session.act(
            f"type %username% into the {username_field}",
            variables={"username": credential.username},
        )
        await session.act(
            f"type %password% into the {password_field}",
            variables={"password": credential.password},
        )
        await session.act(f"click the {submit_control}")
        if settle_ms:
            await session.wait(settle_ms)

    @staticmethod
    def is_new(statement_date: str, job: StatementJob) -> bool:
        parsed = parse_statement_date(statement_date)
        return parsed is not None and parsed > job.accounting_period_start_date

    @staticmethod
    def iso_date(statement_date: str) -> str:
        parsed = parse_statement_date(statement_date)
        return parsed.isoformat() if parsed else statement_date.strip()
