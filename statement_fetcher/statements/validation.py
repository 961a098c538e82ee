"""
Content sniffing for captured statement documents.
"""

from __future__ import annotations

from enum import Enum


class InvalidDocumentError(ValueError):
    """
    Raised when statement bytes are not a well-formed document of the expected kind.
    """


class DocumentKind(Enum):
    PDF = ("PDF", b"%PDF", ".pdf")
    XLSX = ("XLSX", b"PK\x03\x04", ".xlsx")
    XLS = ("XLS", b"\xd0\xcf\x11\xe0", ".xls")

    def __init__(self, label: str, magic: bytes, extension: str) -> None:
        self.label = label
        self.magic = magic
        self.extension = extension

    @classmethod
    def from_filename(cls, filename: str | None) -> "DocumentKind":
        lowered = (filename or "").strip().lower()
        for kind in cls:
            if lowered.endswith(kind.extension):
                return kind
        return cls.PDF


def _printable(header: bytes) -> str:
    return header.decode("latin-1").encode("unicode_escape").decode("ascii").replace('"', '\\"')


def validate_document(content: bytes | None, kind: DocumentKind = DocumentKind.PDF) -> None:
    """
    Check that `content` starts with the magic header of `kind`.

    Guards against uploading an HTML login page or an empty response as if
    it were a statement.
    """

    if not content:
        raise InvalidDocumentError(f"{kind.label} buffer is empty or null")

    header = bytes(content[: len(kind.magic)])
    if header != kind.magic:
        raise InvalidDocumentError(
            f'Invalid {kind.label}: expected header "{_printable(kind.magic)}" '
            f'but got "{_printable(header)}"'
        )
