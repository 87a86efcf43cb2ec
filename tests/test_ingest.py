"""Tests for the ingestion stage."""

import pytest

from notewise.errors import ExtractionError, UnsupportedInputError
from notewise.models import DocumentKind
from notewise.pipeline.stage_ingest import (
    DOCX_MEDIA_TYPE,
    classify_document,
    encode_document,
    extract_docx_text,
    load_document,
    read_document,
)


class TestClassifyDocument:
    """Tests for file classification."""

    @pytest.mark.parametrize(
        "filename,media_type,expected",
        [
            ("paper.pdf", "application/pdf", DocumentKind.PDF),
            ("notes.txt", "text/plain", DocumentKind.TXT),
            ("notes.txt", "text/plain; charset=utf-8", DocumentKind.TXT),
            ("essay.docx", DOCX_MEDIA_TYPE, DocumentKind.DOCX),
            ("essay.DOCX", "application/octet-stream", DocumentKind.DOCX),
        ],
    )
    def test_declared_types(self, filename, media_type, expected):
        assert classify_document(filename, media_type) == expected

    def test_extension_used_when_type_missing(self):
        assert classify_document("paper.pdf") == DocumentKind.PDF
        assert classify_document("notes.txt", "") == DocumentKind.TXT

    @pytest.mark.parametrize("filename,media_type", [("photo.png", "image/png"), ("slides.pptx", None)])
    def test_unsupported(self, filename, media_type):
        with pytest.raises(UnsupportedInputError) as exc_info:
            classify_document(filename, media_type)
        assert filename in exc_info.value.message
        assert "PDF, TXT, or DOCX" in exc_info.value.message


class TestExtractDocxText:
    """Tests for local DOCX extraction."""

    def test_extracts_paragraphs(self, docx_bytes):
        text = extract_docx_text(docx_bytes)
        assert text == (
            "Photosynthesis converts light into chemical energy.\n\n"
            "Chlorophyll absorbs light."
        )

    def test_corrupt_bytes_raise_extraction_error(self):
        with pytest.raises(ExtractionError) as exc_info:
            extract_docx_text(b"not a zip archive")
        assert exc_info.value.message.startswith("Failed to extract text from DOCX:")


class TestDocuments:
    """Tests for document loading and encoding."""

    def test_load_document_hashes_content(self):
        doc = load_document("notes.txt", b"hello", "text/plain")
        assert doc.kind == DocumentKind.TXT
        assert len(doc.content_hash) == 64
        assert doc.size_bytes == 5

    def test_read_document(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("Paris is the capital of France.")
        doc = read_document(path)
        assert doc.filename == "notes.txt"
        assert doc.effective_media_type == "text/plain"

    def test_read_document_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_document(tmp_path / "missing.pdf")

    def test_encode_pdf(self):
        doc = load_document("paper.pdf", b"%PDF-1.4 test", None)
        blob = encode_document(doc)
        assert blob.media_type == "application/pdf"
        assert blob.decode() == b"%PDF-1.4 test"

    def test_docx_is_never_encoded(self, docx_bytes):
        doc = load_document("essay.docx", docx_bytes)
        with pytest.raises(ValueError):
            encode_document(doc)
