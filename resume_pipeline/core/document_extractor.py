"""
Document-to-text extraction for uploaded résumés (DOCX, PDF, TXT).

Text only: no layout analysis and no OCR. The output feeds the parsing
pipeline and can be edited by a reviewer before parsing.
"""

import logging
from io import BytesIO
from typing import List, Optional
from zipfile import BadZipFile

import pdfplumber
from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from pdfminer.pdfparser import PDFSyntaxError
from pdfplumber.utils.exceptions import PdfminerException

logger = logging.getLogger(__name__)

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_MIME = "application/pdf"
TEXT_MIMES = {"text/plain", "text/markdown"}


class DocumentExtractionError(Exception):
    """The document could not be turned into text."""

    def __init__(self, message: str, unsupported: bool = False):
        super().__init__(message)
        self.unsupported = unsupported


def extract_docx_text(docx_bytes: bytes) -> str:
    """Non-empty paragraph text of a DOCX, one paragraph per line."""
    try:
        doc = Document(BytesIO(docx_bytes))
    except (PackageNotFoundError, BadZipFile, KeyError, ValueError) as e:
        raise DocumentExtractionError(f"Could not read DOCX file: {e}") from e
    lines = [p.text.strip() for p in doc.paragraphs if p.text and p.text.strip()]
    return "\n".join(lines)


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """Page text of a PDF's text layer, pages separated by a blank line."""
    pages: List[str] = []
    try:
        with pdfplumber.open(BytesIO(pdf_bytes)) as pdf:
            for page in pdf.pages:
                text = page.extract_text() or ""
                if text.strip():
                    pages.append(text.strip())
    except (PDFSyntaxError, PdfminerException) as e:
        raise DocumentExtractionError(f"Could not read PDF file: {e}") from e
    return "\n\n".join(pages)


def _kind(mime_type: str, filename: str) -> Optional[str]:
    if filename.endswith(".docx"):
        return "docx"
    if filename.endswith(".pdf"):
        return "pdf"
    if filename.endswith((".txt", ".md")):
        return "text"
    if mime_type == DOCX_MIME:
        return "docx"
    if mime_type == PDF_MIME:
        return "pdf"
    if mime_type in TEXT_MIMES:
        return "text"
    return None


def extract_text(data: bytes, mime_type: Optional[str] = None, filename: Optional[str] = None) -> str:
    """
    Extract plain text from an uploaded document.

    Args:
        data: Raw file bytes
        mime_type: Content type reported by the client
        filename: Original filename; its extension wins over the content type

    Returns:
        Extracted text (never empty)

    Raises:
        DocumentExtractionError: unsupported type (unsupported=True), corrupt
            file, or no extractable text
    """
    mime_type = (mime_type or "").lower()
    filename = (filename or "").lower()

    kind = _kind(mime_type, filename)
    if kind is None:
        raise DocumentExtractionError(f"Unsupported content type: {mime_type or filename}", unsupported=True)

    if kind == "docx":
        text = extract_docx_text(data)
    elif kind == "pdf":
        text = extract_pdf_text(data)
    else:
        text = data.decode("utf-8", errors="replace")

    if not text.strip():
        raise DocumentExtractionError(
            "Document has no extractable text. Scanned PDFs are not supported (no OCR)."
        )
    logger.info("Extracted %d characters from %s document", len(text), kind)
    return text
