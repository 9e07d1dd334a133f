# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Session state management utilities for the DocWise Streamlit application.
"""

import streamlit as st
from typing import Dict, Any, Optional

class SessionState:
    """
    Helper class to manage Streamlit session state variables.

    Holds the latest processing result, the accessibility toolbar options and
    the narration language across reruns.
    """

    # Define session state keys
    RESULTS_KEY = "results"
    SOURCE_NAME_KEY = "source_name"
    PROCESSING_COMPLETE_KEY = "processing_complete"
    ACCESSIBILITY_KEY = "accessibility_options"
    NARRATION_LANG_KEY = "narration_lang"
    UPLOADER_KEY = "uploader_key"

    @classmethod
    def initialize_session_state(cls) -> None:
        """Initialize the session state if needed."""
        if cls.PROCESSING_COMPLETE_KEY not in st.session_state:
            st.session_state[cls.PROCESSING_COMPLETE_KEY] = False
            st.session_state[cls.RESULTS_KEY] = None
            st.session_state[cls.SOURCE_NAME_KEY] = None
            st.session_state[cls.NARRATION_LANG_KEY] = "en-US"
            st.session_state[cls.UPLOADER_KEY] = 0
        if cls.ACCESSIBILITY_KEY not in st.session_state:
            cls.reset_accessibility_options()

    @classmethod
    def save_results(cls, results: Dict[str, Any], source_name: Optional[str] = None) -> None:
        """
        Store processing results in the session state.

        Args:
            results: Dictionary returned by the processing pipeline
            source_name: Name of the uploaded file the results belong to
        """
        st.session_state[cls.RESULTS_KEY] = results
        st.session_state[cls.SOURCE_NAME_KEY] = source_name
        st.session_state[cls.PROCESSING_COMPLETE_KEY] = True

    @classmethod
    def clear_results(cls) -> None:
        """Forget the current result and reset the uploader for a new document."""
        st.session_state[cls.RESULTS_KEY] = None
        st.session_state[cls.SOURCE_NAME_KEY] = None
        st.session_state[cls.PROCESSING_COMPLETE_KEY] = False
        st.session_state[cls.UPLOADER_KEY] = st.session_state.get(cls.UPLOADER_KEY, 0) + 1

    @classmethod
    def get_results(cls) -> Optional[Dict[str, Any]]:
        """Get the processing results."""
        return st.session_state.get(cls.RESULTS_KEY)

    @classmethod
    def get_source_name(cls) -> Optional[str]:
        """Get the name of the processed upload."""
        return st.session_state.get(cls.SOURCE_NAME_KEY)

    @classmethod
    def is_processing_complete(cls) -> bool:
        """Check if processing is complete."""
        return st.session_state.get(cls.PROCESSING_COMPLETE_KEY, False)

    @classmethod
    def get_accessibility_options(cls) -> Dict[str, bool]:
        """Get the active accessibility toolbar options."""
        return st.session_state.get(cls.ACCESSIBILITY_KEY, {})

    @classmethod
    def reset_accessibility_options(cls) -> None:
        """Turn every accessibility toolbar option off."""
        st.session_state[cls.ACCESSIBILITY_KEY] = {
            "high_contrast": False,
            "large_text": False,
            "xl_text": False,
            "enhanced_focus": False,
        }

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """
        Get a value from the session state with a default if it doesn't exist.

        Args:
            key: The key to retrieve
            default: Default value if key doesn't exist

        Returns:
            The value associated with the key or the default
        """
        return st.session_state.get(key, default)

    @classmethod
    def set(cls, key: str, value: Any) -> None:
        """
        Set a value in the session state.

        Args:
            key: The key to set
            value: The value to store
        """
        st.session_state[key] = value
