"""
Résumé upload to plain text.

The extractor is chosen from the file extension, then the declared content
type, then the leading bytes. PDF pages are read with pypdf and DOCX
paragraphs and tables with python-docx. Anything else must be a text file.
An upload with no extractable text yields "", which the profile service
replaces with its placeholder.
"""

from __future__ import annotations

import codecs
import json
import logging
from io import BytesIO
from pathlib import PurePath
from typing import Literal

from docx import Document
from pypdf import PdfReader

from careercompass.services.errors import UnreadableResume, UnsupportedResumeType

logger = logging.getLogger(__name__)

ResumeKind = Literal["pdf", "docx", "text"]

ALLOWED_EXTENSIONS = frozenset({".pdf", ".docx", ".txt", ".md"})
_EXTENSION_KINDS: dict[str, ResumeKind] = {".pdf": "pdf", ".docx": "docx", ".txt": "text", ".md": "text"}
_MIME_KINDS: dict[str, ResumeKind] = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "text/plain": "text",
    "text/markdown": "text",
}


def detect_resume_kind(filename: str | None, content: bytes, content_type: str | None = None) -> ResumeKind:
    extension = PurePath(filename or "").suffix.lower()
    if extension == ".doc":
        raise UnsupportedResumeType("Legacy .doc is not supported. Convert to .docx.")
    if extension:
        if extension not in ALLOWED_EXTENSIONS:
            raise UnsupportedResumeType(
                f"Unsupported file type '{extension}'. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}."
            )
        return _EXTENSION_KINDS[extension]

    mime = (content_type or "").split(";", 1)[0].strip().lower()
    if mime in _MIME_KINDS:
        return _MIME_KINDS[mime]
    if content.startswith(b"%PDF-"):
        return "pdf"
    if content.startswith(b"PK\x03\x04"):
        return "docx"
    return "text"


def _text_from_bytes(content: bytes) -> str:
    if content.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return content.decode("utf-16")
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def _text_from_pdf(content: bytes) -> str:
    try:
        reader = PdfReader(BytesIO(content))
        pages = [(page.extract_text() or "").strip() for page in reader.pages]
    except Exception as exc:
        raise UnreadableResume("Unable to extract text from this PDF file.") from exc
    return "\n".join(page for page in pages if page)


def _text_from_docx(content: bytes) -> str:
    try:
        document = Document(BytesIO(content))
    except Exception as exc:
        raise UnreadableResume("Unable to extract text from this Word document.") from exc

    lines = [paragraph.text.strip() for paragraph in document.paragraphs if paragraph.text.strip()]
    # Two-column résumé layouts are usually built from tables.
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(dict.fromkeys(cells)))
    return "\n".join(lines)


_EXTRACTORS = {"pdf": _text_from_pdf, "docx": _text_from_docx, "text": _text_from_bytes}


def extract_resume_text(filename: str | None, content: bytes, content_type: str | None = None) -> str:
    kind = detect_resume_kind(filename, content, content_type)
    text = _EXTRACTORS[kind](content)
    logger.info(
        json.dumps(
            {
                "event": "resume_text_extracted",
                "kind": kind,
                "bytes": len(content),
                "chars": len(text),
            }
        )
    )
    return text
