# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Results view for the DocWise Streamlit application.

This module shows the summary, the accessible preview, the accessibility
toolbar, narration and downloads for a processed document.
"""

from typing import Any, Dict, Optional

import streamlit as st

from components.accessibility_toolbar import display_accessibility_toolbar, is_focus_mode
from ui_helpers.download_helpers import create_download_section
from ui_helpers.html_preview import display_html_content
from ui_helpers.narration import display_narration_controls
from utils.session_utils import SessionState


def display_analyze_view(
    results: Dict[str, Any], source_name: Optional[str], default_format: str = "pdf"
) -> None:
    """
    Display the processed document.

    In focus mode the summary, the download controls and the reset button
    are hidden so only the document and narration remain.

    Args:
        results: Result dictionary with accessible_content, summary and processed_document_url
        source_name: Name of the uploaded file
        default_format: Preselected download format
    """
    content = results.get("accessible_content") or ""
    summary = results.get("summary") or ""
    focus_mode = is_focus_mode(SessionState.get_accessibility_options())

    st.title("Your accessible document")
    if source_name:
        st.caption(f"Source: {source_name}")

    display_accessibility_toolbar()
    st.divider()

    if summary and not focus_mode:
        st.subheader("Summary")
        st.info(summary)

    st.subheader("Preview")
    display_html_content(content)

    st.divider()
    display_narration_controls(content, summary)

    if not focus_mode:
        st.divider()
        create_download_section(content, source_name, default_format)
        if results.get("processed_document_url"):
            st.markdown(f"[Open stored copy]({results['processed_document_url']})")

        st.divider()
        if st.button("Process another document"):
            SessionState.clear_results()
            st.rerun()
