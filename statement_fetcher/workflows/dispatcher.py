"""
Dispatches a job to its carrier workflow inside one browser session.
"""

from __future__ import annotations

import logging

from statement_fetcher.domain.jobs import StatementJob
from statement_fetcher.domain.statements import WorkflowResult
from statement_fetcher.logging_utils import log_event
from statement_fetcher.observability import capture_exception
from statement_fetcher.workflows.base import BrowserSession
from statement_fetcher.workflows.identifier import UNKNOWN_CARRIER
from statement_fetcher.workflows.registry import WorkflowRegistry
from statement_fetcher.workflows.session import BrowserSessionProvider

logger = logging.getLogger(__name__)


class WorkflowDispatcher:
    """
    Resolves and runs carrier routines, owning the browser session.

    `dispatch` never raises for routine or session failures: they come back as
    a failed WorkflowResult. The session is released on every path once it
    has been acquired.
    """

    def __init__(
        self,
        *,
        registry: WorkflowRegistry,
        session_provider: BrowserSessionProvider,
    ) -> None:
        self._registry = registry
        self._session_provider = session_provider

    async def dispatch(self, carrier_slug: str, job: StatementJob) -> WorkflowResult:
        if carrier_slug == UNKNOWN_CARRIER:
            return WorkflowResult.failed(f"Unknown carrier for URL: {job.credential.login_url}")

        try:
            session = await self._session_provider.acquire()
        except Exception as exc:
            capture_exception(exc, carrier=carrier_slug, job_id=job.job_id, stage="acquire_session")
            return WorkflowResult.failed(f"Failed to execute workflow: {exc}")

        try:
            return await self._run(carrier_slug, job, session)
        finally:
            await self._release(carrier_slug, job, session)

    async def _run(self, carrier_slug: str, job: StatementJob, session: BrowserSession) -> WorkflowResult:
        try:
            workflow = self._registry.resolve(carrier_slug)
            if workflow is None:
                return WorkflowResult.failed(f"No workflow implemented for carrier: {carrier_slug}")

            log_event(logger, logging.INFO, "workflow_started", carrier=carrier_slug, job_id=job.job_id)
            result = await workflow.run(session, job)
        except Exception as exc:
            capture_exception(exc, carrier=carrier_slug, job_id=job.job_id, stage="run_workflow")
            return WorkflowResult.failed(f"Failed to execute workflow: {exc}")

        if not isinstance(result, WorkflowResult):
            return WorkflowResult.failed(
                f"Failed to execute workflow: routine returned {type(result).__name__}"
            )
        return result

    async def _release(self, carrier_slug: str, job: StatementJob, session: BrowserSession) -> None:
        try:
            await self._session_provider.release(session)
        except Exception as exc:
            logger.error(
                "Failed to release browser session carrier=%s job_id=%s error=%s",
                carrier_slug,
                job.job_id,
                exc,
            )
