"""
statement_fetcher/domain/statements.py

Statement, attachment and workflow result models shared by carrier
routines and the processing pipeline.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class StatementReference:
    """
    A statement the pipeline still has to fetch from `url`.
    """

    statement_date: str
    url: str
    filename: str | None = None


@dataclass(frozen=True)
class StatementFile:
    """
    A statement whose bytes were already captured by the carrier routine.

    `source_url` records where the bytes came from and is never fetched.
    """

    statement_date: str
    content: bytes
    filename: str | None = None
    source_url: str | None = None

    def __repr__(self) -> str:
        return (
            f"StatementFile(statement_date={self.statement_date!r}, "
            f"size={len(self.content or b'')}, filename={self.filename!r})"
        )


Statement = Union[StatementReference, StatementFile]


def build_statement(
    statement_date: str,
    *,
    url: str | None = None,
    content: bytes | None = None,
    filename: str | None = None,
) -> Statement:
    """
    Build the statement variant matching the available content source.

    Captured bytes take precedence over a URL.
    """

    if content:
        return StatementFile(
            statement_date=statement_date,
            content=content,
            filename=filename,
            source_url=url or None,
        )
    if url:
        return StatementReference(statement_date=statement_date, url=url, filename=filename)
    raise ValueError("Statement has neither a URL nor file content")


@dataclass(frozen=True)
class Attachment:
    """
    Durable storage reference for one uploaded statement.
    """

    public_id: str
    format: str
    url: str
    title: str
    etag: str

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WorkflowResult:
    """
    Outcome every carrier routine returns.
    """

    success: bool
    statements: list[Statement] = field(default_factory=list)
    error: str | None = None

    def __post_init__(self) -> None:
        if not self.success and self.statements:
            object.__setattr__(self, "statements", [])

    @classmethod
    def ok(cls, statements: list[Statement] | None = None) -> "WorkflowResult":
        return cls(success=True, statements=list(statements or []))

    @classmethod
    def failed(cls, error: str) -> "WorkflowResult":
        return cls(success=False, statements=[], error=error)
