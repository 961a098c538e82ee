"""
statement_fetcher/domain package marker.
"""

from statement_fetcher.domain.jobs import Credential, JobStatus, JobStatusUpdate, StatementJob
from statement_fetcher.domain.statements import (
    Attachment,
    Statement,
    StatementFile,
    StatementReference,
    WorkflowResult,
    build_statement,
)

__all__ = [
    "Attachment",
    "Credential",
    "JobStatus",
    "JobStatusUpdate",
    "Statement",
    "StatementFile",
    "StatementJob",
    "StatementReference",
    "WorkflowResult",
    "build_statement",
]
