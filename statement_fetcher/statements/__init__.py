"""
statement_fetcher/statements package marker.
"""

from statement_fetcher.statements.downloader import (
    StatementDownloadError,
    StatementDownloader,
    extract_filename,
)
from statement_fetcher.statements.filters import filter_statements_by_date, parse_statement_date
from statement_fetcher.statements.processor import StatementProcessor
from statement_fetcher.statements.storage import (
    CloudinaryStatementStorage,
    StatementUploadError,
    build_public_id,
)
from statement_fetcher.statements.validation import (
    DocumentKind,
    InvalidDocumentError,
    validate_document,
)

__all__ = [
    "CloudinaryStatementStorage",
    "DocumentKind",
    "InvalidDocumentError",
    "StatementDownloadError",
    "StatementDownloader",
    "StatementProcessor",
    "StatementUploadError",
    "build_public_id",
    "extract_filename",
    "filter_statements_by_date",
    "parse_statement_date",
    "validate_document",
]
