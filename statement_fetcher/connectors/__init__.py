"""
statement_fetcher/connectors package marker.
"""

from statement_fetcher.connectors.admin_api import AdminAPIClient, AdminAPIError

__all__ = ["AdminAPIClient", "AdminAPIError"]
