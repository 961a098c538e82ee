"""
Abacus: statements are signed PDF links captured from the network.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

from statement_fetcher.domain.jobs import StatementJob
from statement_fetcher.domain.statements import Statement, StatementReference
from statement_fetcher.workflows.base import BrowserSession, CarrierWorkflow, ResponseCapture

logger = logging.getLogger(__name__)


class _BillingPeriods(BaseModel):
    billing_periods: list[str] = Field(default_factory=list)


def _looks_like_pdf(response: Any) -> bool:
    content_type = (response.headers or {}).get("content-type", "")
    return "pdf" in content_type.lower() or ".pdf" in response.url.lower()


class AbacusWorkflow(CarrierWorkflow):
    slug = "net_abacus"

    async def fetch_statements(self, session: BrowserSession, job: StatementJob) -> list[Statement]:
        await self.login(
            session,
            job,
            username_field="Username input",
            password_field="Password input",
            submit_control="Log In button",
            settle_ms=0,
        )
        await session.act("click the My Firm menu item")
        await session.act("click the Statements option in the dropdown")

        extracted = await session.extract(
            "Extract the billing period date of every statement in the Statements table "
            "in YYYY-MM-DD format",
            _BillingPeriods,
        )
        periods = [period for period in extracted.billing_periods if self.is_new(period, job)]

        statements: list[Statement] = []
        for period in periods:
            pdf_url = await self._capture_pdf_url(session, period)
            statement_date = self.iso_date(period)
            statements.append(
                StatementReference(
                    statement_date=statement_date,
                    url=pdf_url,
                    filename=f"Abacus_Statement_{statement_date}.pdf",
                )
            )
        return statements

    async def _capture_pdf_url(self, session: BrowserSession, period: str) -> str:
        buttons = await session.observe(
            f"Find the Download button for the Statement with billing period of {period}"
        )
        if not buttons:
            raise RuntimeError(f"Could not find PDF download link for billing period {period}")

        link_url = await session.page.locator(buttons[0].selector).evaluate("el => el.href")
        if not link_url:
            raise RuntimeError("Could not find PDF download link")

        capture: ResponseCapture[str] = ResponseCapture("statement PDF URL")

        def _on_response(response: Any) -> None:
            if _looks_like_pdf(response):
                capture.set(response.url)

        session.page.on("response", _on_response)
        try:
            try:
                await session.goto(link_url, wait_until="domcontentloaded", timeout=5000)
            except Exception as exc:
                # A PDF response aborts the navigation; the URL is captured regardless.
                logger.debug("Statement navigation aborted url=%s error=%s", link_url, exc)
            return await capture.wait(self.capture_timeout_seconds)
        finally:
            session.page.remove_listener("response", _on_response)
