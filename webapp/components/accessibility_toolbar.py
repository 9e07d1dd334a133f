# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Accessibility toolbar for the DocWise Streamlit application.

The toolbar options are applied by injecting CSS for whichever options are
active, so they restyle the whole page including the document preview.
"""

from typing import Dict

import streamlit as st

from utils.session_utils import SessionState

TOOLBAR_OPTIONS = {
    "high_contrast": "High contrast",
    "large_text": "Large text",
    "xl_text": "Extra large text",
    "enhanced_focus": "Enhanced focus",
}

# Large and XL text cannot be on together
EXCLUSIVE_OPTIONS = {"large_text": "xl_text", "xl_text": "large_text"}

HIGH_CONTRAST_CSS = """
.stApp, .stApp * { background-color: #000000 !important; color: #ffffff !important; }
.stApp a { color: #ffff00 !important; text-decoration: underline !important; }
.stApp button { border: 2px solid #ffffff !important; }
"""

LARGE_TEXT_CSS = """
.stApp p, .stApp li, .stApp label, .stApp span, .stApp td, .stApp th { font-size: 1.25rem !important; }
.stApp h1 { font-size: 2.6rem !important; }
.stApp h2 { font-size: 2.1rem !important; }
"""

XL_TEXT_CSS = """
.stApp p, .stApp li, .stApp label, .stApp span, .stApp td, .stApp th { font-size: 1.5rem !important; }
.stApp h1 { font-size: 3rem !important; }
.stApp h2 { font-size: 2.5rem !important; }
"""

ENHANCED_FOCUS_CSS = """
.stApp *:focus, .stApp *:focus-visible { outline: 4px solid #ff9900 !important; outline-offset: 3px !important; }
.docwise-preview { max-width: 70ch; margin: 0 auto; line-height: 1.8 !important; }
"""


def toggle_option(options: Dict[str, bool], name: str) -> Dict[str, bool]:
    """
    Flip one toolbar option.

    Args:
        options: Current option states
        name: Option to flip

    Returns:
        New option states
    """
    updated = dict(options)
    updated[name] = not options.get(name, False)
    if updated[name] and name in EXCLUSIVE_OPTIONS:
        updated[EXCLUSIVE_OPTIONS[name]] = False
    return updated


def is_focus_mode(options: Dict[str, bool]) -> bool:
    return bool(options.get("enhanced_focus"))


def build_accessibility_css(options: Dict[str, bool]) -> str:
    """
    Build the CSS for the active toolbar options.

    Args:
        options: Option states keyed by TOOLBAR_OPTIONS names

    Returns:
        A <style> block, or an empty string when nothing is active
    """
    rules = []
    if options.get("high_contrast"):
        rules.append(HIGH_CONTRAST_CSS)
    if options.get("xl_text"):
        rules.append(XL_TEXT_CSS)
    elif options.get("large_text"):
        rules.append(LARGE_TEXT_CSS)
    if options.get("enhanced_focus"):
        rules.append(ENHANCED_FOCUS_CSS)

    if not rules:
        return ""
    return "<style>" + "".join(rules) + "</style>"


def apply_accessibility_css() -> None:
    """Inject the CSS for the options stored in the session."""
    css = build_accessibility_css(SessionState.get_accessibility_options())
    if css:
        st.markdown(css, unsafe_allow_html=True)


def display_accessibility_toolbar() -> None:
    """Render the toolbar buttons and update the session on click."""
    options = SessionState.get_accessibility_options()
    st.markdown("#### ♿ Accessibility options")
    columns = st.columns(len(TOOLBAR_OPTIONS) + 1)

    for column, (name, label) in zip(columns, TOOLBAR_OPTIONS.items()):
        with column:
            active = options.get(name, False)
            if st.button(
                f"{'✓ ' if active else ''}{label}",
                key=f"toolbar_{name}",
                type="primary" if active else "secondary",
                use_container_width=True,
            ):
                SessionState.set(SessionState.ACCESSIBILITY_KEY, toggle_option(options, name))
                st.rerun()

    with columns[-1]:
        if st.button("Reset", key="toolbar_reset", use_container_width=True):
            SessionState.reset_accessibility_options()
            st.rerun()
