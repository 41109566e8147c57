# infrastructure/text_extractors.py
"""Plain-text extraction for uploaded files (PDF, DOCX and text-like formats)."""
import asyncio
import io
import logging
from typing import Callable, Dict, Iterable, Optional

import docx  # python-docx
import fitz  # PyMuPDF

from core.domain import ExtractionError, ExtractionResult
from core.interfaces import ITextExtractor
from config import settings
from utils.common import get_file_extension

logger = logging.getLogger(settings.LOGGER_NAME)

DEFAULT_PLAIN_TEXT_EXTENSIONS = ("txt", "md", "json", "html", "js", "css")


def _extract_pdf(data: bytes) -> str:
    """Concatenate the text layer of every page."""
    with fitz.open(stream=data, filetype="pdf") as doc:
        return "".join(page.get_text() for page in doc)


def _extract_docx(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _extract_plain_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class FileTextExtractor(ITextExtractor):
    """
    Extractor keyed by file extension.

    PDF goes through PyMuPDF, DOCX through python-docx, and the configured
    text-like extensions are decoded as UTF-8. Anything else yields an empty
    result. Parsing runs in a worker thread so the event loop is not blocked.
    """

    def __init__(self, plain_text_extensions: Optional[Iterable[str]] = None):
        extensions = plain_text_extensions or DEFAULT_PLAIN_TEXT_EXTENSIONS
        self._handlers: Dict[str, Callable[[bytes], str]] = {
            "pdf": _extract_pdf,
            "docx": _extract_docx,
        }
        for ext in extensions:
            self._handlers[ext.lower().lstrip(".")] = _extract_plain_text

    async def extract_result(self, data: bytes, filename: str) -> ExtractionResult:
        ext = get_file_extension(filename)
        handler = self._handlers.get(ext)
        if handler is None:
            logger.info(f"No extractor for '{filename}' (extension '{ext}')")
            return ExtractionResult(error=ExtractionError(f"Unsupported file type: '{ext}'"))

        try:
            text = await asyncio.to_thread(handler, data)
        except Exception as e:
            logger.error(f"Failed to extract text from {filename}: {e}")
            return ExtractionResult(error=ExtractionError(f"Could not read {filename}: {e}"))

        if not text or not text.strip():
            logger.warning(f"Extraction of {filename} produced no text")
            return ExtractionResult(error=ExtractionError(f"No text found in {filename}"))

        return ExtractionResult(text=text)
