"""
statement_fetcher/api/routers package marker.
"""

from statement_fetcher.api.routers.jobs import router as jobs_router

__all__ = ["jobs_router"]
