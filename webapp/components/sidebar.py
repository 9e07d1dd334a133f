# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Sidebar components for the DocWise Streamlit application.
"""

import streamlit as st
from typing import List, Tuple

from docwise import __version__ as current_version
from utils.file_utils import UPLOAD_EXTENSIONS, format_file_size
from utils.session_utils import SessionState


def create_sidebar(model_id: str) -> Tuple[List, bool]:
    """
    Create the sidebar with the document uploader and process button.

    Args:
        model_id: Bedrock model shown in the footer

    Returns:
        Tuple containing:
        - List of uploaded file objects (may be empty)
        - Boolean indicating whether the process button was clicked
    """
    with st.sidebar:
        st.title("DocWise")
        st.markdown("Upload documents to make them accessible.")

        # Changing the key clears the widget after "Process another document"
        uploaded_files = st.file_uploader(
            "Drag and drop your documents",
            type=UPLOAD_EXTENSIONS,
            accept_multiple_files=True,
            key=f"uploader_{SessionState.get(SessionState.UPLOADER_KEY, 0)}",
            help="PDF, Word (.doc, .docx) and PowerPoint (.pptx) files are supported. Save .ppt decks as .pptx first.",
        )

        for uploaded_file in uploaded_files or []:
            st.caption(f"📄 {uploaded_file.name} ({format_file_size(uploaded_file.size)})")

        process_button = st.button(
            "Make Accessible",
            type="primary",
            disabled=not uploaded_files,
            use_container_width=True,
        )

        st.markdown(f"Using DocWise v{current_version}")
        st.markdown(f"Bedrock Model: `{model_id}`")

        return list(uploaded_files or []), process_button
