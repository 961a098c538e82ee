"""
Orchestrator service for supplier statement fetching jobs.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Protocol

from fastapi import BackgroundTasks

from statement_fetcher.config import (
    get_admin_api_settings,
    get_browser_settings,
    get_cloudinary_settings,
    get_job_settings,
    get_statement_settings,
)
from statement_fetcher.connectors.admin_api import AdminAPIClient
from statement_fetcher.domain.jobs import JobStatusUpdate, StatementJob
from statement_fetcher.domain.statements import Attachment, WorkflowResult
from statement_fetcher.failure_codes import FailureReason, classify_failure
from statement_fetcher.logging_utils import log_event
from statement_fetcher.observability import capture_exception
from statement_fetcher.statements.downloader import StatementDownloader
from statement_fetcher.statements.processor import StatementProcessor
from statement_fetcher.statements.storage import CloudinaryStatementStorage
from statement_fetcher.workflows.dispatcher import WorkflowDispatcher
from statement_fetcher.workflows.identifier import identify_carrier
from statement_fetcher.workflows.registry import WorkflowRegistry
from statement_fetcher.workflows.session import StagehandSessionProvider

logger = logging.getLogger(__name__)

NO_NEW_STATEMENTS_NOTE = "No new statements found after date filtering"


class JobTaskExecutor(Protocol):
    def submit(self, task: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        ...


class FastAPIBackgroundTaskExecutor:
    def __init__(self, background_tasks: BackgroundTasks) -> None:
        self._background_tasks = background_tasks

    def submit(self, task: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self._background_tasks.add_task(task, *args, **kwargs)


class AdminAPI(Protocol):
    def create_inbox_entries(self, job_id: str, attachments: list[Attachment]) -> list[str]:
        ...

    def update_job_status(self, job_id: str, update: JobStatusUpdate) -> None:
        ...


class JobOrchestrator:
    """
    Runs one job end to end and reports its terminal status exactly once.
    """

    def __init__(
        self,
        *,
        dispatcher: WorkflowDispatcher,
        processor: StatementProcessor,
        admin_api: AdminAPI,
        job_timeout_seconds: float = 900.0,
    ) -> None:
        self._dispatcher = dispatcher
        self._processor = processor
        self._admin_api = admin_api
        self._job_timeout_seconds = job_timeout_seconds

    def schedule(self, executor: JobTaskExecutor, job: StatementJob) -> None:
        executor.submit(self.run, job)
        log_event(logger, logging.INFO, "job_accepted", job_id=job.job_id)

    async def run(self, job: StatementJob) -> JobStatusUpdate:
        started_at = time.monotonic()
        try:
            update = await self._execute(job)
        except Exception as exc:
            capture_exception(exc, job_id=job.job_id, stage="orchestrate_job")
            update = JobStatusUpdate.failed(
                FailureReason.CARRIER_UNAVAILABLE,
                notes=str(exc) or type(exc).__name__,
            )

        log_event(
            logger,
            logging.INFO,
            "job_finished",
            job_id=job.job_id,
            status=update.status.value,
            failure_reason=update.failure_reason.value if update.failure_reason else None,
            duration_seconds=round(time.monotonic() - started_at, 3),
        )
        await self._report_status(job, update)
        return update

    async def _execute(self, job: StatementJob) -> JobStatusUpdate:
        """
        Collect under the job timeout, then register inbox entries.

        Inbox creation runs outside the timeout, so a job reported as timed out
        never has inbox entries.
        """

        carrier_slug = identify_carrier(job.credential.login_url)
        log_event(logger, logging.INFO, "job_started", job_id=job.job_id, carrier=carrier_slug)

        try:
            result, attachments = await asyncio.wait_for(
                self._collect(job, carrier_slug),
                timeout=self._job_timeout_seconds,
            )
        except asyncio.TimeoutError:
            return JobStatusUpdate.failed(
                FailureReason.CARRIER_UNAVAILABLE,
                notes=f"Job timed out after {self._job_timeout_seconds:.0f} seconds",
            )

        if not result.success:
            return JobStatusUpdate.failed(classify_failure(result.error), notes=result.error)
        if not attachments:
            return JobStatusUpdate.succeeded(notes=NO_NEW_STATEMENTS_NOTE)

        inbox_item_ids = await asyncio.to_thread(
            self._admin_api.create_inbox_entries,
            job.job_id,
            attachments,
        )
        log_event(
            logger,
            logging.INFO,
            "inbox_entries_created",
            job_id=job.job_id,
            carrier=carrier_slug,
            count=len(inbox_item_ids),
        )
        return JobStatusUpdate.succeeded()

    async def _collect(self, job: StatementJob, carrier_slug: str) -> tuple[WorkflowResult, list[Attachment]]:
        result = await self._dispatcher.dispatch(carrier_slug, job)
        if not result.success:
            return result, []

        attachments = await self._processor.process(
            result.statements,
            carrier_slug,
            job.accounting_period_start_date,
        )
        return result, attachments

    async def _report_status(self, job: StatementJob, update: JobStatusUpdate) -> None:
        try:
            await asyncio.to_thread(self._admin_api.update_job_status, job.job_id, update)
        except Exception as exc:
            logger.error(
                "Failed to report job status job_id=%s status=%s error=%s",
                job.job_id,
                update.status.value,
                exc,
            )


@lru_cache(maxsize=1)
def get_job_orchestrator() -> JobOrchestrator:
    statement_settings = get_statement_settings()
    dispatcher = WorkflowDispatcher(
        registry=WorkflowRegistry(capture_timeout_seconds=statement_settings.capture_timeout_seconds),
        session_provider=StagehandSessionProvider(settings=get_browser_settings()),
    )
    processor = StatementProcessor(
        downloader=StatementDownloader(settings=statement_settings),
        storage=CloudinaryStatementStorage(settings=get_cloudinary_settings()),
        max_concurrency=statement_settings.max_concurrency,
    )
    return JobOrchestrator(
        dispatcher=dispatcher,
        processor=processor,
        admin_api=AdminAPIClient(settings=get_admin_api_settings()),
        job_timeout_seconds=get_job_settings().timeout_seconds,
    )
