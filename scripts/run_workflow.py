"""
Run one carrier workflow from CLI without uploading or reporting.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from datetime import date, timedelta
from typing import Any

from statement_fetcher.config import get_browser_settings, get_statement_settings
from statement_fetcher.domain.jobs import Credential, StatementJob
from statement_fetcher.domain.statements import StatementFile, WorkflowResult
from statement_fetcher.workflows.dispatcher import WorkflowDispatcher
from statement_fetcher.workflows.identifier import identify_carrier
from statement_fetcher.workflows.registry import WorkflowRegistry
from statement_fetcher.workflows.session import StagehandSessionProvider


def _summarize(result: WorkflowResult) -> dict[str, Any]:
    statements: list[dict[str, Any]] = []
    for statement in result.statements:
        if isinstance(statement, StatementFile):
            statements.append(
                {
                    "statement_date": statement.statement_date,
                    "filename": statement.filename,
                    "size_bytes": len(statement.content),
                }
            )
        else:
            statements.append(
                {
                    "statement_date": statement.statement_date,
                    "filename": statement.filename,
                    "url": statement.url,
                }
            )
    return {"success": result.success, "error": result.error, "statements": statements}


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a carrier statement workflow.")
    parser.add_argument("login_url", help="Carrier portal login URL.")
    parser.add_argument("username", help="Portal username.")
    parser.add_argument("password", help="Portal password.")
    parser.add_argument(
        "--period-start",
        dest="period_start",
        type=date.fromisoformat,
        default=date.today() - timedelta(days=90),
        help="Accounting period start date (YYYY-MM-DD); only later statements are kept.",
    )
    parser.add_argument(
        "--carrier",
        dest="carrier",
        default=None,
        help="Optional carrier slug overriding identification from the login URL.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    job = StatementJob(
        job_id="cli",
        credential=Credential(username=args.username, password=args.password, login_url=args.login_url),
        accounting_period_start_date=args.period_start,
    )
    dispatcher = WorkflowDispatcher(
        registry=WorkflowRegistry(capture_timeout_seconds=get_statement_settings().capture_timeout_seconds),
        session_provider=StagehandSessionProvider(settings=get_browser_settings()),
    )
    carrier_slug = args.carrier or identify_carrier(args.login_url)
    result = asyncio.run(dispatcher.dispatch(carrier_slug, job))

    print(json.dumps({"carrier": carrier_slug, **_summarize(result)}, indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
