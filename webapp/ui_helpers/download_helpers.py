# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Download utilities for the DocWise Streamlit application.
"""

import logging
from typing import Optional

import streamlit as st

from docwise.export.converters import DEFAULT_FORMAT, EXPORT_FORMATS, download_filename, export_document
from docwise.utils.logging_helper import ExportError

logger = logging.getLogger(__name__)

FORMAT_LABELS = {
    "pdf": "PDF document",
    "html": "HTML page",
    "markdown": "Markdown",
    "txt": "Plain text",
}


def create_download_section(content: str, source_name: Optional[str], default_format: str = DEFAULT_FORMAT) -> None:
    """
    Create the format selector and download button for processed content.

    Args:
        content: Accessible HTML fragment
        source_name: Name of the uploaded file, used for the download name
        default_format: Format preselected in the dropdown
    """
    formats = list(FORMAT_LABELS)
    index = formats.index(default_format) if default_format in EXPORT_FORMATS else 0

    st.subheader("Download")
    fmt = st.selectbox(
        "Format",
        formats,
        index=index,
        format_func=lambda name: FORMAT_LABELS[name],
    )

    try:
        data, mime_type = export_document(content, fmt)
    except ExportError as e:
        logger.error(f"Export failed: {e}")
        st.error(f"Could not prepare the download: {e}")
        return

    st.download_button(
        label=f"Download {FORMAT_LABELS[fmt]}",
        data=data,
        file_name=download_filename(source_name, fmt),
        mime=mime_type,
        type="primary",
    )
