"""
UFG Insurance: statement PDFs are captured by intercepting the
agency-statement request the Monthly Statement button triggers.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

from statement_fetcher.domain.jobs import StatementJob
from statement_fetcher.domain.statements import Statement, StatementFile
from statement_fetcher.logging_utils import log_event
from statement_fetcher.workflows.base import BrowserSession, CarrierWorkflow, ResponseCapture

logger = logging.getLogger(__name__)

STATEMENT_ROUTE = "**/*agency-statement*"
LOADING_INDICATOR = ".uikit__loading-indicator"


class _StatementDates(BaseModel):
    dates: list[str] = Field(default_factory=list)


class UFGInsuranceWorkflow(CarrierWorkflow):
    slug = "com_ufginsurance"

    async def fetch_statements(self, session: BrowserSession, job: StatementJob) -> list[Statement]:
        await self.login(
            session,
            job,
            username_field="User ID input",
            password_field="Password input",
            submit_control="Submit button",
        )
        await session.act("click the REPORTS menu item")
        await session.act("click the Agency Statements button")
        await session.page.wait_for_selector(LOADING_INDICATOR, state="detached", timeout=45000)
        await session.wait(2000)

        extracted = await session.extract(
            'Extract all the dates from the table in the "Direct Bill Monthly Commissions" section. '
            "Each row has a date in the first column.",
            _StatementDates,
        )
        wanted = [raw for raw in extracted.dates if self.is_new(raw, job)]
        if not wanted:
            return []

        statements: list[Statement] = []
        for raw_date in wanted:
            try:
                content = await self._capture_statement(session, raw_date)
            except Exception as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "statement_capture_failed",
                    carrier=self.slug,
                    statement_date=raw_date,
                    error=str(exc),
                )
                continue
            statement_date = self.iso_date(raw_date)
            statements.append(
                StatementFile(
                    statement_date=statement_date,
                    content=content,
                    filename=f"UFG_Statement_{statement_date}.pdf",
                )
            )

        if not statements:
            raise RuntimeError("Failed to capture PDF via network interception")
        return statements

    async def _capture_statement(self, session: BrowserSession, raw_date: str) -> bytes:
        page = session.page
        capture: ResponseCapture[bytes] = ResponseCapture(f"statement PDF for {raw_date}")

        async def _intercept(route: Any) -> None:
            try:
                response = await route.fetch()
                body = await response.body()
                if body:
                    capture.set(body)
                await route.fulfill(response=response)
            except Exception as exc:
                logger.warning("Statement interception failed url=%s error=%s", route.request.url, exc)
                await route.continue_()

        await page.route(STATEMENT_ROUTE, _intercept)
        try:
            buttons = await session.observe(f"Find the Monthly Statement button in the row with date {raw_date}")
            if not buttons:
                raise RuntimeError(f"Could not find Monthly Statement button for {raw_date}")
            await page.locator(buttons[0].selector).click()
            return await capture.wait(self.capture_timeout_seconds)
        finally:
            await page.unroute(STATEMENT_ROUTE, _intercept)
            await self._close_blob_tabs(session)

    @staticmethod
    async def _close_blob_tabs(session: BrowserSession) -> None:
        for other in list(session.context.pages):
            if other is not session.page and other.url.startswith("blob:"):
                await other.close()
