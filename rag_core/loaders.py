"""
Document loading for file ingestion: PDF text extraction and plain text.
"""

import logging
from pathlib import Path
from typing import Union

from pypdf import PdfReader

logger = logging.getLogger(__name__)

PDF_SUFFIX = ".pdf"


def extract_pdf_text(path: Union[str, Path]) -> str:
    """
    Extract the text of every page of a PDF.

    Pages without extractable text (e.g. scanned images) are skipped.

    Args:
        path: Path to the PDF file

    Returns:
        Page texts joined by blank lines
    """
    reader = PdfReader(str(path))
    parts = []
    for page_number, page in enumerate(reader.pages, start=1):
        txt = page.extract_text() or ""
        if txt.strip():
            parts.append(txt)
        else:
            logger.debug("No extractable text on page %d of %s", page_number, path)
    return "\n\n".join(parts).strip()


def read_document(path: Union[str, Path], encoding: str = "utf-8") -> str:
    """
    Read a document from disk, extracting text from PDFs.

    Args:
        path: Path to a .pdf or plain-text file
        encoding: Encoding for plain-text files

    Returns:
        Document text

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Document not found: {path}")

    if path.suffix.lower() == PDF_SUFFIX:
        return extract_pdf_text(path)
    return path.read_text(encoding=encoding)
