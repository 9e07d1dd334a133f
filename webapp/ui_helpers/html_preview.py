# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
HTML preview utilities for the DocWise Streamlit application.
"""

import streamlit as st
from bs4 import BeautifulSoup

from docwise.utils.html_utils import DOCUMENT_STYLE

PREVIEW_PLACEHOLDER = "Your accessible document will appear here once processing finishes."


def prepare_preview_html(content: str) -> str:
    """
    Wrap processed HTML for inline preview.

    Scripts are removed and the fragment is scoped inside a ``docwise-preview``
    container styled like the exported document.

    Args:
        content: Accessible HTML fragment

    Returns:
        HTML safe to pass to st.html
    """
    soup = BeautifulSoup(content or "", "html.parser")
    for element in soup.find_all(["script", "iframe"]):
        element.decompose()

    scoped_style = DOCUMENT_STYLE.replace("body {", ".docwise-preview {")
    return (
        f"<style>{scoped_style}</style>"
        f'<div class="docwise-preview" role="document">{soup}</div>'
    )


def display_html_content(content: str) -> None:
    """
    Display processed HTML in the Streamlit app.

    Args:
        content: Accessible HTML fragment
    """
    if not content or not content.strip():
        st.info(PREVIEW_PLACEHOLDER)
        return

    try:
        st.html(prepare_preview_html(content))

        # Also provide the raw HTML in an expandable section
        with st.expander("View HTML Code"):
            st.code(content, language="html")

    except Exception as e:
        st.error(f"Error displaying HTML content: {str(e)}")
