# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Word and PowerPoint extraction.

Two flavours are provided for each format: a structure-preserving HTML
conversion used before upload, and a plain-text fallback used by the backend
when a stored file needs to be read.
"""

import html
import io
import re
import zipfile
from typing import List

from docx import Document
from docx.table import Table
from docx.text.paragraph import Paragraph
from pptx import Presentation
from pptx.shapes.group import GroupShape

from docwise.utils.logging_helper import setup_logger, ExtractionError

# Set up module-level logger
logger = setup_logger(__name__)

_XML_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
_HEADING_STYLE = re.compile(r"^heading\s*(\d)$", re.IGNORECASE)


def _heading_level(style_name: str) -> int:
    """Return 1-6 for heading-like paragraph styles, 0 otherwise."""
    if not style_name:
        return 0
    if style_name.lower() == "title":
        return 1
    match = _HEADING_STYLE.match(style_name.strip())
    if match:
        return min(max(int(match.group(1)), 1), 6)
    return 0


def _list_kind(style_name: str) -> str:
    """Return 'ul' or 'ol' for list paragraph styles, '' otherwise."""
    name = (style_name or "").lower()
    if not name.startswith("list"):
        return ""
    return "ol" if "number" in name else "ul"


def _table_html(table: Table) -> str:
    rows = []
    for row_index, row in enumerate(table.rows):
        cell_tag = "th" if row_index == 0 else "td"
        scope = ' scope="col"' if row_index == 0 else ""
        cells = "".join(
            f"<{cell_tag}{scope}>{html.escape(cell.text.strip())}</{cell_tag}>"
            for cell in row.cells
        )
        rows.append(f"<tr>{cells}</tr>")
    if not rows:
        return ""
    head, body = rows[0], rows[1:]
    return f"<table><thead>{head}</thead><tbody>{''.join(body)}</tbody></table>"


def docx_to_html(data: bytes) -> str:
    """
    Convert a DOCX document to semantic HTML.

    Heading styles become h1-h6, list styles become ul/ol, tables keep a
    header row. Body order is preserved.

    Args:
        data: Raw .docx bytes

    Returns:
        HTML fragment

    Raises:
        ExtractionError: If the document cannot be opened
    """
    try:
        document = Document(io.BytesIO(data))
    except Exception as e:
        raise ExtractionError(f"Could not open DOCX document: {e}") from e

    parts: List[str] = []
    open_list = ""

    for block in document.iter_inner_content():
        if isinstance(block, Table):
            if open_list:
                parts.append(f"</{open_list}>")
                open_list = ""
            table_html = _table_html(block)
            if table_html:
                parts.append(table_html)
            continue

        if not isinstance(block, Paragraph):
            continue

        text = block.text.strip()
        style_name = block.style.name if block.style is not None else ""
        kind = _list_kind(style_name)

        if open_list and kind != open_list:
            parts.append(f"</{open_list}>")
            open_list = ""

        if not text:
            continue

        escaped = html.escape(text)
        level = _heading_level(style_name)
        if level:
            parts.append(f"<h{level}>{escaped}</h{level}>")
        elif kind:
            if not open_list:
                parts.append(f"<{kind}>")
                open_list = kind
            parts.append(f"<li>{escaped}</li>")
        else:
            parts.append(f"<p>{escaped}</p>")

    if open_list:
        parts.append(f"</{open_list}>")

    return "\n".join(parts)


def extract_docx_text(data: bytes) -> str:
    """
    Strip word/document.xml down to plain text.

    Every tag becomes a space, the five XML entities are unescaped and
    whitespace is collapsed. Any failure yields an empty string.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            document_xml = archive.read("word/document.xml").decode("utf-8", errors="replace")
    except (zipfile.BadZipFile, KeyError, OSError) as e:
        logger.warning(f"DOCX extraction failed: {e}")
        return ""

    text = _XML_TAG.sub(" ", document_xml)
    text = (
        text.replace("&lt;", "<")
        .replace("&gt;", ">")
        .replace("&amp;", "&")
        .replace("&quot;", '"')
        .replace("&apos;", "'")
    )
    return _WHITESPACE.sub(" ", text).strip()


def _shape_paragraphs(shape) -> List[str]:
    lines = []
    if isinstance(shape, GroupShape):
        for child in shape.shapes:
            lines.extend(_shape_paragraphs(child))
        return lines
    if getattr(shape, "has_text_frame", False) and shape.has_text_frame:
        for paragraph in shape.text_frame.paragraphs:
            line = "".join(run.text for run in paragraph.runs).strip()
            if line:
                lines.append(line)
    if getattr(shape, "has_table", False) and shape.has_table:
        for row in shape.table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            line = " | ".join(cell for cell in cells if cell)
            if line:
                lines.append(line)
    return lines


def pptx_to_html(data: bytes) -> str:
    """
    Convert a PPTX presentation to HTML, one <section> per slide.

    Raises:
        ExtractionError: If the presentation cannot be opened
    """
    try:
        presentation = Presentation(io.BytesIO(data))
    except Exception as e:
        raise ExtractionError(f"Could not open PPTX presentation: {e}") from e

    sections = []
    for number, slide in enumerate(presentation.slides, start=1):
        title_shape = slide.shapes.title
        title = title_shape.text_frame.text.strip() if title_shape is not None else ""
        heading = html.escape(title) if title else f"Slide {number}"

        body = []
        for shape in slide.shapes:
            if title_shape is not None and shape.shape_id == title_shape.shape_id:
                continue
            body.extend(f"<p>{html.escape(line)}</p>" for line in _shape_paragraphs(shape))

        if not title and not body:
            continue
        sections.append(
            f'<section aria-label="Slide {number}"><h2>{heading}</h2>{"".join(body)}</section>'
        )

    return "\n".join(sections)


def extract_pptx_text(data: bytes) -> str:
    """Plain text of every slide, or an empty string on failure."""
    try:
        presentation = Presentation(io.BytesIO(data))
    except Exception as e:
        logger.warning(f"PPTX extraction failed: {e}")
        return ""

    slides = []
    for slide in presentation.slides:
        lines = []
        for shape in slide.shapes:
            lines.extend(_shape_paragraphs(shape))
        if lines:
            slides.append("\n".join(lines))
    return "\n\n".join(slides).strip()
