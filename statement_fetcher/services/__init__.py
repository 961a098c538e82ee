"""
statement_fetcher/services package marker.
"""

from statement_fetcher.services.job_orchestrator import (
    NO_NEW_STATEMENTS_NOTE,
    FastAPIBackgroundTaskExecutor,
    JobOrchestrator,
    JobTaskExecutor,
    get_job_orchestrator,
)

__all__ = [
    "NO_NEW_STATEMENTS_NOTE",
    "FastAPIBackgroundTaskExecutor",
    "JobOrchestrator",
    "JobTaskExecutor",
    "get_job_orchestrator",
]
