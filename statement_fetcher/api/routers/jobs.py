"""
Statement fetching job submission endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, status

from statement_fetcher.api.dependencies import require_api_key
from statement_fetcher.schemas.jobs import FetchStatementsRequest, JobAcceptedResponse
from statement_fetcher.services.job_orchestrator import (
    FastAPIBackgroundTaskExecutor,
    JobOrchestrator,
    get_job_orchestrator,
)

router = APIRouter(prefix="/api/v1", tags=["jobs"])


@router.post(
    "/jobs",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=JobAcceptedResponse,
    dependencies=[Depends(require_api_key)],
)
def submit_job(
    payload: FetchStatementsRequest,
    background_tasks: BackgroundTasks,
    orchestrator: JobOrchestrator = Depends(get_job_orchestrator),
) -> JobAcceptedResponse:
    orchestrator.schedule(FastAPIBackgroundTaskExecutor(background_tasks), payload.to_job())
    return JobAcceptedResponse(job_id=payload.job_id)
