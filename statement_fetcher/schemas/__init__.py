"""
statement_fetcher/schemas package marker.
"""

from statement_fetcher.schemas.jobs import (
    CredentialPayload,
    FetchStatementsRequest,
    HealthResponse,
    JobAcceptedResponse,
)

__all__ = [
    "CredentialPayload",
    "FetchStatementsRequest",
    "HealthResponse",
    "JobAcceptedResponse",
]
