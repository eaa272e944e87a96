"""Text extraction from uploaded documents.

Supports PDF (.pdf), Word (.docx), and plain text (.txt, .md). Files with an
unknown extension are read as UTF-8 when their content type is ``text/*``.
Pages and Word paragraphs are joined with blank lines so the paragraph
structure survives into the bilingual export.
"""

from __future__ import annotations

import logging

from document_translator.errors import CorruptFile, EmptyDocument, UnsupportedFormat, WorkflowError

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = ("txt", "md")


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def extract_text(file_bytes: bytes, filename: str, content_type: str = "") -> str:
    """Extract the text of an uploaded file.

    Raises UnsupportedFormat for unknown or legacy formats, CorruptFile when
    the parser fails and EmptyDocument when no text could be found.
    """
    ext = file_extension(filename)
    if not ext:
        raise UnsupportedFormat("Could not determine file type.")

    try:
        if ext == "pdf":
            text = _extract_pdf(file_bytes)
        elif ext == "docx":
            text = _extract_docx(file_bytes)
        elif ext in TEXT_EXTENSIONS:
            text = _decode_text(file_bytes)
        elif ext == "doc":
            raise UnsupportedFormat(".doc files are not supported. Please save as .docx or .pdf.")
        elif content_type.startswith("text/"):
            text = _decode_text(file_bytes)
        else:
            raise UnsupportedFormat(
                f"Unsupported file type: .{ext}. Please upload a PDF, DOCX, or text file."
            )
    except WorkflowError:
        raise
    except Exception as exc:
        logger.warning("File parsing error for %s: %s", filename, exc)
        raise CorruptFile(f"Failed to parse file: {exc}") from exc

    if not text.strip():
        raise EmptyDocument(f"No text could be extracted from {filename}.")
    return text


def _extract_pdf(file_bytes: bytes) -> str:
    """Extract text from a PDF using PyMuPDF, one block per page."""
    import pymupdf

    doc = pymupdf.open(stream=file_bytes, filetype="pdf")
    try:
        pages = [doc[i].get_text().strip() for i in range(len(doc))]
    finally:
        doc.close()
    return "\n\n".join(p for p in pages if p)


def _extract_docx(file_bytes: bytes) -> str:
    """Extract text from a Word document, one block per non-empty paragraph."""
    import io

    from docx import Document

    doc = Document(io.BytesIO(file_bytes))
    return "\n\n".join(p.text.strip() for p in doc.paragraphs if p.text.strip())


def _decode_text(file_bytes: bytes) -> str:
    return file_bytes.decode("utf-8-sig")
