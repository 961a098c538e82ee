"""
Bitco: statement links are collected across the paginated Direct Bill table.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from statement_fetcher.domain.jobs import StatementJob
from statement_fetcher.domain.statements import Statement, StatementReference
from statement_fetcher.workflows.base import BrowserSession, CarrierWorkflow

MAX_PAGES = 20


class _StatementLink(BaseModel):
    statement_date: str
    url: str


class _StatementLinks(BaseModel):
    statements: list[_StatementLink] = Field(default_factory=list)


class BitcoWorkflow(CarrierWorkflow):
    slug = "com_bitco"

    async def fetch_statements(self, session: BrowserSession, job: StatementJob) -> list[Statement]:
        await self.login(
            session,
            job,
            username_field="User Name input",
            password_field="Password input",
            submit_control="Login button",
            settle_ms=0,
        )
        await session.act("click the AGENCY INFO menu item")
        await session.act("click the Show dropdown in the Direct Bill Statements section")
        await session.act("click the All option in the dropdown")
        await session.wait(2000)

        links = await self._extract_page(session)
        for page_number in range(2, MAX_PAGES + 1):
            pager = await session.observe(
                f"Find the page {page_number} link in the Direct Bill Statements pagination"
            )
            if not pager:
                break
            await session.act(f"click the page {page_number} link in the Direct Bill Statements section")
            await session.wait(2000)
            links.extend(await self._extract_page(session))

        unique: dict[str, _StatementLink] = {}
        for link in links:
            if link.url:
                unique[link.url] = link
        if not unique:
            raise RuntimeError("No commission statements found")

        statements: list[Statement] = []
        for link in unique.values():
            statement_date = self.iso_date(link.statement_date)
            statements.append(
                StatementReference(
                    statement_date=statement_date,
                    url=link.url,
                    filename=f"Bitco_Statement_{statement_date}.pdf",
                )
            )
        return statements

    @staticmethod
    async def _extract_page(session: BrowserSession) -> list[_StatementLink]:
        extracted = await session.extract(
            "Extract the URLs of all Direct Bill Commission Statement links in the table, "
            "along with their statement dates in YYYY-MM-DD format",
            _StatementLinks,
        )
        return list(extracted.statements)
