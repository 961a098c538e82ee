"""
Advantage Partners and AP Agents: statements are spreadsheets served by
submitting the row's download form.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from statement_fetcher.domain.jobs import StatementJob
from statement_fetcher.domain.statements import Statement, StatementFile
from statement_fetcher.statements.filters import parse_statement_date
from statement_fetcher.workflows.base import BrowserSession, CarrierWorkflow

FORM_FIELDS_SCRIPT = """
el => {
  const form = el.closest('form');
  if (!form) {
    return null;
  }
  const fields = {};
  form.querySelectorAll('input, button, select, textarea').forEach(input => {
    if (input.name) {
      fields[input.name] = input.value;
    }
  });
  return {action: form.action, fields, name: el.name, value: el.value};
}
"""


class _StatementDetails(BaseModel):
    date: str | None = None
    filename: str | None = None
    month: str | None = None
    year: str | None = None
    parent_name: str | None = None


class AdvantagePartnersWorkflow(CarrierWorkflow):
    slug = "com_advantagepartners"
    filename_prefix = "AP"

    async def fetch_statements(self, session: BrowserSession, job: StatementJob) -> list[Statement]:
        await self.login(
            session,
            job,
            username_field="Email/Username input",
            password_field="Password input",
            submit_control="Login button",
        )

        buttons = await session.observe("Find the first download button in row 1")
        if not buttons:
            raise RuntimeError("Could not find download button")

        form = await session.page.locator(buttons[0].selector).evaluate(FORM_FIELDS_SCRIPT)
        content = await self._submit_download_form(session, form)

        details = await session.extract(
            "Extract the details of the first statement in the table (row 1) including the date, "
            "filename, month, year, and parent name",
            _StatementDetails,
        )
        parsed_date = parse_statement_date(details.date)
        if parsed_date is None:
            raise RuntimeError(
                f"Could not determine statement date for downloaded spreadsheet (extracted {details.date!r})"
            )
        statement_date = parsed_date.isoformat()
        return [
            StatementFile(
                statement_date=statement_date,
                content=content,
                filename=f"{self.filename_prefix}_Statement_{statement_date}.xlsx",
            )
        ]

    @staticmethod
    async def _submit_download_form(session: BrowserSession, form: dict[str, Any] | None) -> bytes:
        if not form:
            raise RuntimeError("Download button is not inside a form")
        if not form.get("action") or not form.get("name"):
            raise RuntimeError("Download button does not have expected form structure")

        fields = {**(form.get("fields") or {}), form["name"]: form.get("value") or ""}
        response = await session.page.request.post(form["action"], form=fields)
        if not response.ok:
            raise RuntimeError(f"Failed to fetch Excel file: {response.status} {response.status_text}")

        content = await response.body()
        if not content:
            raise RuntimeError("Downloaded file is empty")
        return content


class APAgentsWorkflow(AdvantagePartnersWorkflow):
    slug = "com_apagents"
