"""
Accounting period filtering for retrieved statements.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime

from statement_fetcher.domain.statements import Statement
from statement_fetcher.logging_utils import log_event

logger = logging.getLogger(__name__)


def parse_statement_date(value: str | date | None) -> date | None:
    """
    Parse a statement date as a calendar date.

    Accepts `YYYY-MM-DD`, ISO datetimes and `MM/DD/YYYY`. Returns None when
    the value cannot be parsed.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None

    raw = value.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass

    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return datetime.fromisoformat(normalized).date()
    except ValueError:
        pass

    try:
        return datetime.strptime(raw, "%m/%d/%Y").date()
    except ValueError:
        return None


def filter_statements_by_date(
    statements: Sequence[Statement],
    cutoff: date | str,
) -> list[Statement]:
    """
    Keep statements dated strictly after `cutoff`, preserving input order.

    The cutoff is the last period already processed, so a statement dated on
    the cutoff is excluded. Statements with unparseable dates are excluded.
    """

    cutoff_date = parse_statement_date(cutoff)
    if cutoff_date is None:
        raise ValueError(f"Invalid cutoff date: {cutoff!r}")

    selected: list[Statement] = []
    for statement in statements:
        statement_date = parse_statement_date(statement.statement_date)
        if statement_date is None:
            log_event(
                logger,
                logging.WARNING,
                "statement_date_unparseable",
                statement_date=statement.statement_date,
            )
            continue
        if statement_date > cutoff_date:
            selected.append(statement)
    return selected
