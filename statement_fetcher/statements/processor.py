"""
Statement processing pipeline: filter, resolve bytes, validate, upload.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import date
from typing import Protocol

from statement_fetcher.domain.statements import (
    Attachment,
    Statement,
    StatementFile,
    StatementReference,
)
from statement_fetcher.logging_utils import log_event
from statement_fetcher.statements.downloader import extract_filename
from statement_fetcher.statements.filters import filter_statements_by_date, parse_statement_date
from statement_fetcher.statements.storage import build_public_id
from statement_fetcher.statements.validation import DocumentKind, validate_document

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_STEM = "statement"


def statement_filename(statement: Statement) -> str:
    """
    Filename a statement is stored under.

    Unnamed captured files are stamped with their statement date so two of
    them in one batch never share a storage path.
    """

    if statement.filename:
        return statement.filename
    if isinstance(statement, StatementReference) and statement.url:
        return extract_filename(statement.url)
    parsed = parse_statement_date(statement.statement_date)
    suffix = parsed.isoformat() if parsed else statement.statement_date.replace("/", "-").strip()
    return f"{DEFAULT_FILENAME_STEM}_{suffix}.pdf"


class StatementFetcher(Protocol):
    def download(self, url: str) -> bytes:
        ...


class StatementStorage(Protocol):
    def upload(
        self,
        content: bytes,
        *,
        carrier_slug: str,
        filename: str,
        metadata: dict[str, str] | None = None,
    ) -> Attachment:
        ...


class StatementProcessor:
    """
    Turns raw workflow statements into uploaded attachments.

    Every statement is handled independently: a failure is logged and the
    statement is skipped, the rest of the batch still goes through.
    """

    def __init__(
        self,
        *,
        downloader: StatementFetcher,
        storage: StatementStorage,
        max_concurrency: int = 1,
    ) -> None:
        self._downloader = downloader
        self._storage = storage
        self._max_concurrency = max(1, max_concurrency)

    async def process(
        self,
        statements: Sequence[Statement],
        carrier_slug: str,
        cutoff: date | str,
    ) -> list[Attachment]:
        filtered = filter_statements_by_date(statements, cutoff)
        log_event(
            logger,
            logging.INFO,
            "statements_filtered",
            carrier=carrier_slug,
            cutoff=cutoff,
            received=len(statements),
            selected=len(filtered),
        )
        if not filtered:
            return []

        unique = self._drop_storage_collisions(filtered, carrier_slug)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(statement: Statement) -> Attachment | None:
            async with semaphore:
                return await self._process_one(statement, carrier_slug)

        results = await asyncio.gather(*(_bounded(statement) for statement in unique))
        return [attachment for attachment in results if attachment is not None]

    @staticmethod
    def _drop_storage_collisions(statements: Sequence[Statement], carrier_slug: str) -> list[Statement]:
        """
        Keep the first statement per storage path; later ones would overwrite it.

        Paths are claimed before any upload starts, so concurrent uploads
        never race on the same path.
        """

        claimed: dict[str, str] = {}
        unique: list[Statement] = []
        for statement in statements:
            public_id = build_public_id(carrier_slug, statement_filename(statement))
            if public_id in claimed:
                log_event(
                    logger,
                    logging.ERROR,
                    "statement_processing_failed",
                    carrier=carrier_slug,
                    statement_date=statement.statement_date,
                    filename=statement_filename(statement),
                    error=f"Storage path {public_id} already used by statement dated {claimed[public_id]}",
                    error_type="DuplicateStoragePath",
                )
                continue
            claimed[public_id] = statement.statement_date
            unique.append(statement)
        return unique

    async def _process_one(self, statement: Statement, carrier_slug: str) -> Attachment | None:
        try:
            return await self.process_statement(statement, carrier_slug)
        except Exception as exc:
            log_event(
                logger,
                logging.ERROR,
                "statement_processing_failed",
                carrier=carrier_slug,
                statement_date=statement.statement_date,
                filename=statement.filename,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

    async def process_statement(self, statement: Statement, carrier_slug: str) -> Attachment:
        """
        Resolve, validate and upload one statement. Raises on any failure.
        """

        content, filename = await self._resolve_content(statement)
        validate_document(content, DocumentKind.from_filename(filename))

        attachment = await asyncio.to_thread(
            self._storage.upload,
            content,
            carrier_slug=carrier_slug,
            filename=filename,
            metadata={
                "statement_date": statement.statement_date,
                "carrier": carrier_slug,
            },
        )
        log_event(
            logger,
            logging.INFO,
            "statement_uploaded",
            carrier=carrier_slug,
            statement_date=statement.statement_date,
            public_id=attachment.public_id,
        )
        return attachment

    async def _resolve_content(self, statement: Statement) -> tuple[bytes, str]:
        if isinstance(statement, StatementFile):
            return statement.content, statement_filename(statement)

        if isinstance(statement, StatementReference) and statement.url:
            content = await asyncio.to_thread(self._downloader.download, statement.url)
            return content, statement_filename(statement)

        raise ValueError("Statement has neither a URL nor file content")
