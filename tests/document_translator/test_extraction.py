"""Tests for document_translator/extraction.py — text extraction from uploads."""

from __future__ import annotations

import io

import pytest

from document_translator.errors import (
    CorruptFile,
    EmptyDocument,
    ErrorKind,
    InputError,
    UnsupportedFormat,
)
from document_translator.extraction import extract_text, file_extension


class TestFileExtension:
    def test_lowercases_last_extension(self):
        assert file_extension("Report.Final.PDF") == "pdf"

    def test_no_extension(self):
        assert file_extension("README") == ""


class TestPlainText:
    def test_txt_is_decoded_as_utf8(self):
        text = "ສະບາຍດີ\n\n你好"
        assert extract_text(text.encode("utf-8"), "notes.txt") == text

    def test_markdown_is_plain_text(self):
        assert extract_text(b"# Title\n\nBody", "README.md") == "# Title\n\nBody"

    def test_byte_order_mark_is_stripped(self):
        assert extract_text("\ufeffHello".encode("utf-8"), "bom.txt") == "Hello"

    def test_unknown_extension_with_text_content_type(self):
        assert extract_text(b"a,b\n1,2", "data.csv", "text/csv") == "a,b\n1,2"

    def test_invalid_utf8_is_corrupt(self):
        with pytest.raises(CorruptFile, match="Failed to parse file"):
            extract_text(b"\xff\xfe\xfa", "broken.txt")


class TestRejectedInput:
    def test_missing_extension(self):
        with pytest.raises(UnsupportedFormat, match="Could not determine file type"):
            extract_text(b"data", "noextension")

    def test_legacy_doc(self):
        with pytest.raises(UnsupportedFormat, match=r"\.doc files are not supported"):
            extract_text(b"data", "letter.doc")

    def test_unknown_binary_type(self):
        with pytest.raises(UnsupportedFormat, match=r"Unsupported file type: \.xlsx"):
            extract_text(b"data", "sheet.xlsx", "application/vnd.ms-excel")

    @pytest.mark.parametrize("content", [b"", b"   \n\n  "])
    def test_empty_document(self, content):
        with pytest.raises(EmptyDocument):
            extract_text(content, "empty.txt")

    def test_error_kinds(self):
        assert UnsupportedFormat("x").kind is ErrorKind.INPUT
        assert EmptyDocument("x").kind is ErrorKind.INPUT
        assert CorruptFile("x").kind is ErrorKind.EXTRACTION
        assert isinstance(UnsupportedFormat("x"), InputError)


class TestDocx:
    def test_paragraphs_are_separated_by_blank_lines(self):
        from docx import Document

        doc = Document()
        doc.add_paragraph("First paragraph")
        doc.add_paragraph("")
        doc.add_paragraph("Second paragraph")
        buf = io.BytesIO()
        doc.save(buf)

        assert extract_text(buf.getvalue(), "letter.docx") == "First paragraph\n\nSecond paragraph"

    def test_garbage_docx_is_corrupt(self):
        with pytest.raises(CorruptFile):
            extract_text(b"not a zip file", "letter.docx")


class TestPdf:
    def test_pages_are_separated_by_blank_lines(self):
        import pymupdf

        doc = pymupdf.open()
        for text in ("Page one text", "Page two text"):
            page = doc.new_page()
            page.insert_text((72, 72), text)
        data = doc.tobytes()
        doc.close()

        result = extract_text(data, "scan.pdf")
        assert result.split("\n\n") == ["Page one text", "Page two text"]

    def test_garbage_pdf_is_corrupt(self):
        with pytest.raises(CorruptFile):
            extract_text(b"this is not a pdf", "broken.pdf")
