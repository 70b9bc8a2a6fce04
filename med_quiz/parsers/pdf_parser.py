"""Extract plain text from uploaded PDF bytes."""
from __future__ import annotations

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from med_quiz.errors import InsufficientContent

_log = logging.getLogger("med_quiz.pdf")


def extract_pdf_text(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except PdfReadError as e:
        _log.warning("Unreadable PDF: %s", e)
        raise InsufficientContent("The uploaded PDF could not be read.") from e
    _log.info("Extracted %d pages from PDF", len(pages))
    return "\n".join(pages)
