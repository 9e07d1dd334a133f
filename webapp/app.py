# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
DocWise Streamlit Application

This application provides a web interface for turning PDF, Word and
PowerPoint documents into accessible HTML.
"""

import os
import sys
import logging
import streamlit as st

# Make Python able to find local modules
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from config.app_config_local import Config  # noqa: E402
from utils.session_utils import SessionState  # noqa: E402
from utils.file_utils import read_uploaded_files  # noqa: E402
from components.sidebar import create_sidebar  # noqa: E402
from components.landing import display_landing_page  # noqa: E402
from components.accessibility_toolbar import apply_accessibility_css  # noqa: E402
from processors.document_processor import process_uploaded_documents  # noqa: E402
from views.analyze_view import display_analyze_view  # noqa: E402
from docwise.utils.config import DEFAULT_MODEL_ID  # noqa: E402

# Create config instance
app_config = Config()

# Set up logger
logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


def main():
    """Main application function"""

    # Set page configuration
    st.set_page_config(
        page_title="DocWise - Accessible Documents",
        page_icon="♿",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    # Initialize session state
    SessionState.initialize_session_state()
    apply_accessibility_css()

    uploaded_files, process_button = create_sidebar(app_config.model_id or DEFAULT_MODEL_ID)

    if uploaded_files and process_button:
        documents = read_uploaded_files(uploaded_files)
        if not documents:
            st.error("Unsupported file type. Please upload PDF, Word or PowerPoint files.")
        else:
            success, results = process_uploaded_documents(documents, app_config)
            if success and results:
                SessionState.save_results(results, documents[0].name)

    if SessionState.is_processing_complete() and SessionState.get_results() is not None:
        display_analyze_view(
            SessionState.get_results(),
            SessionState.get_source_name(),
            app_config.default_format,
        )
    else:
        display_landing_page()


if __name__ == "__main__":
    main()
