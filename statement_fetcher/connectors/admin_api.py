"""
statement_fetcher/connectors/admin_api.py

Admin API client for inbox entries and job status reporting.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Any

import requests

from statement_fetcher.config import AdminAPISettings
from statement_fetcher.domain.jobs import JobStatusUpdate
from statement_fetcher.domain.statements import Attachment

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
JOBS_ADMIN_PATH = "/admin/supplier_statement_fetching_jobs_admin"


class AdminAPIError(RuntimeError):
    """
    Raised when the Admin API rejects a call or stays unreachable after retries.
    """


class AdminAPIClient:
    """
    Thin HTTP client for the supplier statement fetching jobs admin resource.
    """

    def __init__(
        self,
        *,
        settings: AdminAPISettings,
        session: requests.Session | None = None,
    ) -> None:
        if not settings.base_url:
            raise AdminAPIError("ADMIN_API_BASE_URL is not configured.")
        if not settings.api_key:
            raise AdminAPIError("ADMIN_API_KEY is not configured.")

        self._base_url = settings.base_url.rstrip("/")
        self._api_key = settings.api_key
        self._session = session or requests.Session()
        self._timeout_seconds = settings.timeout_seconds
        self._max_retries = settings.max_retries
        self._backoff_initial_seconds = settings.backoff_initial_seconds
        self._backoff_multiplier = settings.backoff_multiplier

    def create_inbox_entries(self, job_id: str, attachments: Sequence[Attachment]) -> list[str]:
        """
        Register uploaded statements as inbox items for the job.
        """

        response = self._request(
            method="POST",
            url=f"{self._job_url(job_id)}/create_inbox_statements",
            payload={"attachments": [attachment.to_payload() for attachment in attachments]},
        )
        try:
            body = response.json()
        except ValueError as exc:
            raise AdminAPIError("Admin API inbox response was not valid JSON.") from exc

        inbox_item_ids = body.get("inbox_item_ids") if isinstance(body, dict) else None
        if not isinstance(inbox_item_ids, list):
            raise AdminAPIError("Admin API inbox response did not include inbox_item_ids.")

        logger.info("Created inbox entries job_id=%s count=%s", job_id, len(inbox_item_ids))
        return [str(item_id) for item_id in inbox_item_ids]

    def update_job_status(self, job_id: str, update: JobStatusUpdate) -> None:
        self._request(method="PATCH", url=self._job_url(job_id), payload=update.to_payload())
        logger.info(
            "Reported job status job_id=%s status=%s failure_reason=%s",
            job_id,
            update.status.value,
            update.failure_reason.value if update.failure_reason else None,
        )

    def _job_url(self, job_id: str) -> str:
        return f"{self._base_url}{JOBS_ADMIN_PATH}/{job_id}"

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-API-Key": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
        }

    def _request(self, *, method: str, url: str, payload: dict[str, Any]) -> requests.Response:
        """
        Execute an Admin API call with exponential backoff on transient failures.
        """

        last_error: Exception | None = None
        for attempt in range(self._max_retries + 1):
            try:
                response = self._session.request(
                    method=method,
                    url=url,
                    json=payload,
                    headers=self._headers(),
                    timeout=self._timeout_seconds,
                )
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable HTTP status code: {response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except requests.HTTPError as exc:
                last_error = exc
                status_code = exc.response.status_code if exc.response is not None else None
                if status_code not in RETRYABLE_STATUS_CODES:
                    logger.error(
                        "Admin API request failed method=%s status=%s url=%s error=%s",
                        method,
                        status_code,
                        url,
                        exc,
                    )
                    raise AdminAPIError(f"Admin API {method} {url} failed with status {status_code}.") from exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
            logger.warning(
                "Admin API request retry method=%s attempt=%s/%s wait_seconds=%.2f url=%s",
                method,
                attempt + 1,
                self._max_retries,
                backoff_seconds,
                url,
            )
            time.sleep(backoff_seconds)

        logger.error("Admin API request exhausted retries method=%s url=%s error=%s", method, url, last_error)
        raise AdminAPIError(f"Admin API {method} {url} failed after retries.") from last_error
