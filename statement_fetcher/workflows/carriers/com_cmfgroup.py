"""
CMF Group: monthly reports are chosen from a selector and captured as
browser downloads.
"""

from __future__ import annotations

import asyncio
import re
from datetime import date
from pathlib import Path

from statement_fetcher.domain.jobs import StatementJob
from statement_fetcher.domain.statements import Statement, StatementFile
from statement_fetcher.workflows.base import BrowserSession, CarrierWorkflow

REPORT_SELECTOR = 'select[name="reportSelector"]'
VIEW_REPORT_BUTTON = 'button:has-text("View Report")'
_PERIOD_PATTERN = re.compile(r"(\d{4})-(\d{2})")
_REPORT_EXTENSIONS = (".pdf", ".xlsx", ".xls")


def report_period(label: str) -> date | None:
    """
    First day of the `YYYY-MM` period named in a report option label.
    """

    match = _PERIOD_PATTERN.search(label or "")
    if match is None:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), 1)
    except ValueError:
        return None


def report_filename(period: date, suggested_filename: str | None) -> str:
    """
    One name per report period; the portal suggests the same name for every month.
    """

    extension = Path(suggested_filename or "").suffix.lower()
    if extension not in _REPORT_EXTENSIONS:
        extension = ".pdf"
    return f"CMF_Statement_{period.isoformat()}{extension}"


class CMFGroupWorkflow(CarrierWorkflow):
    slug = "com_cmfgroup"

    async def fetch_statements(self, session: BrowserSession, job: StatementJob) -> list[Statement]:
        await self.login(
            session,
            job,
            username_field="Email input",
            password_field="Password input",
            submit_control="Log In button",
        )
        await session.act("click the Reports menu item")

        dropdown = session.page.locator(REPORT_SELECTOR)
        labels = await dropdown.locator("option").all_text_contents()

        statements: list[Statement] = []
        for label in labels:
            period = report_period(label)
            if period is None or period <= job.accounting_period_start_date:
                continue
            await dropdown.select_option(label=label)
            content, suggested_filename = await self._download_report(session)
            statements.append(
                StatementFile(
                    statement_date=period.isoformat(),
                    content=content,
                    filename=report_filename(period, suggested_filename),
                )
            )
        return statements

    async def _download_report(self, session: BrowserSession) -> tuple[bytes, str]:
        async with session.page.expect_download(timeout=self.capture_timeout_seconds * 1000) as download_info:
            await session.page.click(VIEW_REPORT_BUTTON)
        download = await download_info.value

        failure = await download.failure()
        if failure:
            raise RuntimeError(f"Report download failed: {failure}")

        path = await download.path()
        content = await asyncio.to_thread(Path(path).read_bytes)
        return content, download.suggested_filename
