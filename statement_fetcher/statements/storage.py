"""
Cloudinary persistence for validated statements.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Mapping

import cloudinary.exceptions
import cloudinary.uploader

from statement_fetcher.config import CloudinarySettings
from statement_fetcher.domain.statements import Attachment
from statement_fetcher.statements.validation import DocumentKind

logger = logging.getLogger(__name__)


class StatementUploadError(RuntimeError):
    """
    Raised when Cloudinary rejects or fails a statement upload.
    """


def build_public_id(carrier_slug: str, filename: str, folder: str = "supplier_statements") -> str:
    """
    Deterministic storage path: `{folder}/{carrier}/{filename-without-extension}`.

    Re-uploading the same logical statement overwrites the previous copy.
    """

    base_name = posixpath.basename(filename.replace("\\", "/"))
    stem, extension = posixpath.splitext(base_name)
    if extension.lower() in {kind.extension for kind in DocumentKind}:
        base_name = stem
    return f"{folder}/{carrier_slug}/{base_name}"


class CloudinaryStatementStorage:
    """
    Uploads statement bytes as raw Cloudinary resources.
    """

    def __init__(self, *, settings: CloudinarySettings) -> None:
        self._folder = settings.folder
        self._config = {
            "cloud_name": settings.cloud_name,
            "api_key": settings.api_key,
            "api_secret": settings.api_secret,
            "secure": True,
        }

    def upload(
        self,
        content: bytes,
        *,
        carrier_slug: str,
        filename: str,
        metadata: Mapping[str, str] | None = None,
    ) -> Attachment:
        public_id = build_public_id(carrier_slug, filename, folder=self._folder)
        try:
            result = cloudinary.uploader.upload(
                content,
                resource_type="raw",
                public_id=public_id,
                overwrite=True,
                unique_filename=False,
                invalidate=True,
                context=dict(metadata or {}),
                tags=["supplier_statement", carrier_slug],
                **self._config,
            )
        except cloudinary.exceptions.Error as exc:
            raise StatementUploadError(f"Cloudinary upload failed: {exc}") from exc

        if not result:
            raise StatementUploadError("Cloudinary upload returned no result")

        logger.info(
            "Uploaded statement public_id=%s bytes=%s carrier=%s",
            result.get("public_id"),
            len(content),
            carrier_slug,
        )
        return Attachment(
            public_id=result.get("public_id") or public_id,
            format=result.get("format") or DocumentKind.from_filename(filename).extension.lstrip("."),
            url=result.get("secure_url") or result.get("url") or "",
            title=filename,
            etag=result.get("etag") or "",
        )
