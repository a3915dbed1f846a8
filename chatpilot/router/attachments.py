"""Uploaded files — type detection and text extraction (PDF, DOCX, XLSX, plain text)."""

from __future__ import annotations

import asyncio
import io
import logging
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MAX_EXTRACTED_CHARS = 50_000
_GENERIC_TYPES = {"", "application/octet-stream"}


@dataclass(frozen=True)
class Attachment:
    """A file the user attached to a message."""

    filename: str
    content_type: str
    data: bytes

    @classmethod
    def from_upload(cls, filename: str, content_type: str | None, data: bytes) -> Attachment:
        """Build an attachment, guessing the type from the name when none was sent."""
        media_type = (content_type or "").split(";")[0].strip().lower()
        if media_type in _GENERIC_TYPES:
            media_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        return cls(filename=filename, content_type=media_type, data=data)

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")


def partition(attachments: list[Attachment]) -> tuple[list[Attachment], list[Attachment]]:
    """Split attachments into ``(images, documents)``."""
    images = [a for a in attachments if a.is_image]
    documents = [a for a in attachments if not a.is_image]
    return images, documents


def _extract_pdf(data: bytes) -> str | None:
    """Extract text from a PDF using PyMuPDF."""
    import pymupdf

    doc = pymupdf.open(stream=data, filetype="pdf")
    try:
        pages = []
        for page in doc:
            text = page.get_text()
            if text.strip():
                pages.append(text.strip())
        return "\n\n".join(pages) if pages else None
    finally:
        doc.close()


def _extract_docx(data: bytes) -> str | None:
    """Extract text from a DOCX using python-docx."""
    import docx

    doc = docx.Document(io.BytesIO(data))
    paragraphs = [p.text for p in doc.paragraphs if p.text.strip()]
    return "\n\n".join(paragraphs) if paragraphs else None


def _extract_xlsx(data: bytes) -> str | None:
    """Extract text from an XLSX using openpyxl, rendered as CSV."""
    import openpyxl

    wb = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        sheets = wb.sheetnames
        multi_sheet = len(sheets) > 1
        parts: list[str] = []

        for name in sheets:
            ws = wb[name]
            lines: list[str] = []
            for row in ws.iter_rows(values_only=True):
                cells = [str(c) if c is not None else "" for c in row]
                if any(cells):
                    lines.append(",".join(cells))
            if lines:
                if multi_sheet:
                    parts.append(f"## Sheet: {name}\n" + "\n".join(lines))
                else:
                    parts.append("\n".join(lines))

        return "\n\n".join(parts) if parts else None
    finally:
        wb.close()


def _decode_text(data: bytes) -> str | None:
    text = data.decode("utf-8", errors="replace")
    return text if text.strip() else None


_EXTRACTORS: dict[str, Callable[[bytes], str | None]] = {
    "application/pdf": _extract_pdf,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": _extract_docx,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": _extract_xlsx,
}


async def extract_text(attachment: Attachment) -> str | None:
    """Extract readable text from a non-image attachment.

    PDF, DOCX and XLSX go through their parsers; anything else is decoded as
    UTF-8. Returns None when nothing readable comes out.

    Raises:
        Exception: whatever the underlying parser raises for a corrupt file.
    """
    extractor = _EXTRACTORS.get(attachment.content_type, _decode_text)
    text = await asyncio.to_thread(extractor, attachment.data)
    if not text:
        logger.info("No text extracted from %s", attachment.filename)
        return None

    if len(text) > MAX_EXTRACTED_CHARS:
        text = text[:MAX_EXTRACTED_CHARS] + "\n\n[truncated — extracted text too large]"
    return text
