"""
Acuity: statements are HTML pages printed to PDF in the browser.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from statement_fetcher.domain.jobs import StatementJob
from statement_fetcher.domain.statements import Statement, StatementFile
from statement_fetcher.workflows.base import BrowserSession, CarrierWorkflow

PDF_MARGIN = {"top": "0.5in", "right": "0.5in", "bottom": "0.5in", "left": "0.5in"}


class _StatementPeriods(BaseModel):
    periods: list[str] = Field(default_factory=list)


def parse_month_label(label: str) -> date | None:
    """
    Parse Acuity's "Sep 2025" period labels into the first day of the month.
    """

    for fmt in ("%b %Y", "%B %Y"):
        try:
            return datetime.strptime(label.strip(), fmt).date()
        except ValueError:
            continue
    return None


class AcuityWorkflow(CarrierWorkflow):
    slug = "com_acuity"

    async def fetch_statements(self, session: BrowserSession, job: StatementJob) -> list[Statement]:
        await self.login(
            session,
            job,
            username_field="Login ID field",
            password_field="Password field",
            submit_control="Log In button",
        )
        await session.act("click the Agency Statement link")
        await session.wait(2000)

        extracted = await session.extract(
            'Extract the period of every "Agency Statement - Acuity" link, formatted like "Sep 2025"',
            _StatementPeriods,
        )

        statements: list[Statement] = []
        for label in extracted.periods:
            period_start = parse_month_label(label)
            if period_start is None or period_start <= job.accounting_period_start_date:
                continue
            statements.append(await self._print_statement(session, label.strip(), period_start))
        return statements

    async def _print_statement(self, session: BrowserSession, label: str, period_start: date) -> Statement:
        links = await session.observe(f"Find the Agency Statement - Acuity link for the statement with date {label}")
        if not links:
            raise RuntimeError(f"No agency statement found for date {label}")

        # Navigating directly avoids the new tab the link would open.
        statement_url = await session.page.locator(links[0].selector).evaluate("el => el.href")
        if not statement_url:
            raise RuntimeError("Could not extract statement URL from link")

        await session.goto(statement_url, wait_until="networkidle", timeout=30000)
        await session.wait(2000)
        content = await session.page.pdf(format="Letter", print_background=True, margin=PDF_MARGIN)
        if not content:
            raise RuntimeError("Failed to generate PDF from statement page")

        statement_date = period_start.isoformat()
        return StatementFile(
            statement_date=statement_date,
            content=content,
            filename=f"Acuity_Statement_{statement_date}.pdf",
            source_url=statement_url,
        )
