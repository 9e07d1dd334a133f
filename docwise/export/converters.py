# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Download format conversion for accessible HTML.

Processed content is an HTML fragment. These helpers turn it into a complete
HTML page, Markdown, plain text or a paginated A4 PDF.
"""

import io
from typing import Optional, Tuple

import fitz  # PyMuPDF
from markdownify import markdownify, ATX

from docwise.utils.html_utils import (
    DOCUMENT_STYLE,
    document_title,
    html_to_text,
    wrap_html_document,
)
from docwise.utils.logging_helper import setup_logger, ExportError
from docwise.utils.path_utils import file_stem

# Set up module-level logger
logger = setup_logger(__name__)

# format -> (file extension, MIME type)
EXPORT_FORMATS = {
    "html": ("html", "text/html;charset=utf-8"),
    "markdown": ("md", "text/markdown;charset=utf-8"),
    "pdf": ("pdf", "application/pdf"),
    "txt": ("txt", "text/plain;charset=utf-8"),
}

DEFAULT_FORMAT = "pdf"

# 10 mm page margins expressed in points
PDF_MARGIN_PT = 10 * 72 / 25.4


def download_filename(original_name: Optional[str], fmt: str) -> str:
    """
    Name of the downloaded file, e.g. ``report_accessible.md``.

    Args:
        original_name: Name of the first uploaded file, if any
        fmt: Export format

    Returns:
        Download file name
    """
    extension = EXPORT_FORMATS.get(fmt, EXPORT_FORMATS["txt"])[0]
    return f"{file_stem(original_name)}_accessible.{extension}"


def to_html(content: str) -> str:
    return wrap_html_document(content, title=document_title(content))


def to_markdown(content: str) -> str:
    """Convert the fragment to Markdown with '#'-style headings."""
    markdown = markdownify(content, heading_style=ATX)
    # markdownify leaves runs of blank lines between block elements
    lines = markdown.splitlines()
    collapsed = []
    for line in lines:
        if not line.strip() and collapsed and not collapsed[-1].strip():
            continue
        collapsed.append(line.rstrip())
    return "\n".join(collapsed).strip() + "\n"


def to_text(content: str) -> str:
    return html_to_text(content)


def to_pdf(content: str) -> bytes:
    """
    Lay the fragment out on A4 portrait pages with 10 mm margins.

    Uses the PyMuPDF Story engine, which flows HTML across as many pages as
    needed.

    Returns:
        PDF bytes
    """
    story = fitz.Story(html=content, user_css=DOCUMENT_STYLE)
    buffer = io.BytesIO()
    writer = fitz.DocumentWriter(buffer)

    mediabox = fitz.paper_rect("a4")
    where = mediabox + (PDF_MARGIN_PT, PDF_MARGIN_PT, -PDF_MARGIN_PT, -PDF_MARGIN_PT)

    more = True
    pages = 0
    while more:
        device = writer.begin_page(mediabox)
        more, _ = story.place(where)
        story.draw(device)
        writer.end_page()
        pages += 1
    writer.close()

    logger.debug(f"Rendered PDF with {pages} page(s)")
    return buffer.getvalue()


def export_document(content: str, fmt: str = DEFAULT_FORMAT) -> Tuple[bytes, str]:
    """
    Convert accessible HTML into a downloadable format.

    Args:
        content: Accessible HTML fragment
        fmt: One of 'html', 'markdown', 'pdf', 'txt'; anything else is plain text

    Returns:
        Tuple of (file bytes, MIME type)

    Raises:
        ExportError: If there is no content or the conversion fails
    """
    if not content or not content.strip():
        raise ExportError("No processed content")

    if fmt not in EXPORT_FORMATS:
        logger.warning(f"Unknown export format '{fmt}', using plain text")
        fmt = "txt"

    try:
        if fmt == "html":
            data = to_html(content).encode("utf-8")
        elif fmt == "markdown":
            data = to_markdown(content).encode("utf-8")
        elif fmt == "pdf":
            data = to_pdf(content)
        else:
            data = to_text(content).encode("utf-8")
    except Exception as e:
        raise ExportError(f"Failed to export document as {fmt}: {e}") from e

    return data, EXPORT_FORMATS[fmt][1]
