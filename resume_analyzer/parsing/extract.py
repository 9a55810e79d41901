from __future__ import annotations

import logging
from io import BytesIO
from pathlib import PurePath

from docx import Document
from pypdf import PdfReader

from resume_analyzer.core.errors import ExtractionError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".txt", ".pdf", ".docx")


def _extension(file_name: str) -> str:
    return PurePath(file_name or "").suffix.lower()


def is_supported_file_format(file_name: str) -> bool:
    return _extension(file_name) in SUPPORTED_EXTENSIONS


def _extract_txt(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


def _extract_pdf(content: bytes) -> str:
    reader = PdfReader(BytesIO(content))
    pages: list[str] = []
    for page in reader.pages:
        page_text = (page.extract_text() or "").strip()
        if page_text:
            pages.append(page_text)
    return "\n\n".join(pages)


def _extract_docx(content: bytes) -> str:
    document = Document(BytesIO(content))
    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    return "\n".join(paragraphs)


_EXTRACTORS = {
    ".txt": _extract_txt,
    ".pdf": _extract_pdf,
    ".docx": _extract_docx,
}


def extract_text(file_bytes: bytes, file_name: str) -> str:
    """Turn an uploaded document into plain text.

    Raises ``ExtractionError`` for unsupported or unreadable documents. A readable
    document with no text (for example an image-only PDF) yields ``""``.
    """
    extension = _extension(file_name)
    extractor = _EXTRACTORS.get(extension)
    if extractor is None:
        raise ExtractionError(
            f"Unsupported file type '{extension or file_name}'. Supported types: .txt, .pdf, .docx",
            code="unsupported_format",
        )
    if not file_bytes:
        raise ExtractionError(f"'{file_name}' is empty.", code="empty_document")

    try:
        text = extractor(file_bytes)
    except Exception as exc:  # noqa: BLE001 - any parser failure aborts the analysis
        logger.error("extraction_failed file=%s type=%s: %s", file_name, extension, exc)
        raise ExtractionError(f"Failed to read '{file_name}': {exc}") from exc

    text = text.strip()
    if not text:
        logger.warning("extraction_empty file=%s type=%s", file_name, extension)
    logger.info("extraction_complete file=%s chars=%s", file_name, len(text))
    return text
