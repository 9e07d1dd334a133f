import pytest

from docwise.extract.text_extractor import (
    BACKEND_PROCESSING_MARKER,
    DOCX_TYPE,
    PDF_TYPE,
    PPT_TYPE,
    PPTX_TYPE,
    detect_content_type,
    ensure_supported,
    extract_text_from_file,
    is_backend_marker,
    is_textual,
)
from docwise.utils.logging_helper import InvalidRequestError


def test_detect_content_type_prefers_declared_type():
    assert detect_content_type("notes.bin", "Text/Plain; charset=utf-8") == "text/plain"


def test_detect_content_type_from_extension():
    assert detect_content_type("report.PDF") == PDF_TYPE
    assert detect_content_type("deck.pptx") == PPTX_TYPE
    assert detect_content_type("readme.md") == "text/markdown"
    assert detect_content_type("mystery") == "application/octet-stream"


def test_is_textual():
    assert is_textual("text/csv")
    assert is_textual("application/json")
    assert is_textual("application/xhtml+xml")
    assert not is_textual(PDF_TYPE)


def test_plain_text_is_decoded():
    result = extract_text_from_file("notes.txt", "héllo world".encode("utf-8"))
    assert result.text == "héllo world"
    assert result.content_type == "text/plain"
    assert not result.requires_backend


def test_pdf_requires_backend():
    result = extract_text_from_file("scan.pdf", b"%PDF-1.7 binary")
    assert result.text == f"{BACKEND_PROCESSING_MARKER} scan.pdf"
    assert result.requires_backend


def test_legacy_word_requires_backend():
    result = extract_text_from_file("old.doc", b"\xd0\xcf\x11\xe0")
    assert is_backend_marker(result.text)


def test_docx_is_converted_locally_not_decoded(docx_bytes):
    result = extract_text_from_file("report.docx", docx_bytes)
    assert result.content_type == DOCX_TYPE
    assert not result.requires_backend
    assert "<h1>Quarterly Report</h1>" in result.text
    # Raw zip bytes would contain the local file header
    assert "PK" not in result.text[:4]


def test_pptx_is_converted_locally(pptx_bytes):
    result = extract_text_from_file("deck.pptx", pptx_bytes)
    assert not result.requires_backend
    assert '<section aria-label="Slide 1">' in result.text


def test_broken_docx_falls_back_to_backend():
    result = extract_text_from_file("broken.docx", b"not a zip file")
    assert result.requires_backend
    assert result.text.endswith("broken.docx")


@pytest.mark.parametrize(
    "file_name,content_type",
    [("deck.ppt", None), ("deck.PPT", "application/octet-stream"), ("upload", PPT_TYPE)],
)
def test_legacy_powerpoint_is_unsupported(file_name, content_type):
    with pytest.raises(InvalidRequestError, match=r"Save the presentation as \.pptx"):
        ensure_supported(file_name, content_type)


@pytest.mark.parametrize(
    "file_name,content_type",
    [("deck.pptx", None), ("old.doc", None), ("scan.pdf", PDF_TYPE), ("notes.txt", None)],
)
def test_other_formats_are_supported(file_name, content_type):
    ensure_supported(file_name, content_type)
