# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
HTML utility functions for accessible document output.
"""

import html
from bs4 import BeautifulSoup
import logging

logger = logging.getLogger(__name__)

DOCUMENT_STYLE = """
    body {
        font-family: 'Times New Roman', serif;
        line-height: 1.6;
        color: #333;
        max-width: 800px;
        margin: 0 auto;
        padding: 20px;
    }
    h1, h2, h3, h4, h5, h6 {
        font-weight: bold;
        margin-top: 20px;
        margin-bottom: 10px;
        color: #2c3e50;
    }
    p { margin-bottom: 12px; }
    ul, ol { margin-bottom: 15px; padding-left: 30px; }
    li { margin-bottom: 5px; }
    table { border-collapse: collapse; }
    th, td { border: 1px solid #999; padding: 4px 8px; }
"""


def parsing_error_article(raw_text: str) -> str:
    """
    Build the article returned when a model response cannot be parsed.

    The raw response is embedded as-is so nothing the model produced is lost.
    """
    body = raw_text or "Could not process document"
    return f"<article><h1>Document Content</h1><div>{body}</div></article>"


def looks_like_html(text: str) -> bool:
    """True when the text already contains HTML elements."""
    if not text or "<" not in text:
        return False
    return BeautifulSoup(text, "html.parser").find() is not None


def plain_text_article(text: str) -> str:
    """
    Wrap extracted content in a minimal article.

    HTML produced by Office extraction is kept; plain text is escaped.
    """
    body = text if looks_like_html(text) else html.escape(text)
    return f"<article><div>{body}</div></article>"


def html_to_text(content: str) -> str:
    """
    Return the visible text of an HTML fragment.

    Block elements are separated by newlines so paragraphs stay readable
    when the text is narrated or saved as .txt.
    """
    if not content:
        return ""
    soup = BeautifulSoup(content, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    text = soup.get_text(separator="\n")
    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line)


def wrap_html_document(content: str, title: str = "Accessible Document", lang: str = "en") -> str:
    """
    Wrap an HTML fragment in a complete, styled HTML5 document.

    Args:
        content: The accessible HTML fragment (usually an <article>)
        title: Document title
        lang: Document language attribute

    Returns:
        Full HTML document as a string
    """
    soup = BeautifulSoup(content or "", "html.parser")
    if soup.find("html"):
        # Already a full document; make sure lang and title are present
        if not soup.html.get("lang"):
            soup.html["lang"] = lang
        if soup.head and not soup.title:
            title_tag = soup.new_tag("title")
            title_tag.string = title
            soup.head.append(title_tag)
        return str(soup)

    return (
        "<!DOCTYPE html>\n"
        f'<html lang="{html.escape(lang)}">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
        f"<title>{html.escape(title)}</title>\n"
        f"<style>{DOCUMENT_STYLE}</style>\n"
        "</head>\n"
        "<body>\n"
        f"{content}\n"
        "</body>\n"
        "</html>\n"
    )


def document_title(content: str, default: str = "Accessible Document") -> str:
    """Use the first heading of the content as the document title."""
    if not content:
        return default
    soup = BeautifulSoup(content, "html.parser")
    heading = soup.find(["h1", "h2", "h3"])
    if heading:
        text = heading.get_text(" ", strip=True)
        if text:
            return text
    return default
