# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Landing page for the DocWise Streamlit application.
"""

import streamlit as st

FEATURES = [
    ("📤", "Drag & Drop Upload", "Drop PDF, Word or PowerPoint files straight into the page."),
    ("🤖", "AI-Powered Analysis", "A hosted model reads the document and rebuilds its structure."),
    ("🛠️", "One-Click Fixes", "Headings, lists, tables and alt text are repaired in a single pass."),
    ("📄", "Multiple Formats", "Download the result as PDF, HTML, Markdown or plain text."),
    ("☁️", "Cloud-Based", "Nothing to install. Processing runs on managed AWS services."),
    ("🔒", "Secure & Private", "Uploaded files are deleted once your document has been processed."),
]

IMPACT = [
    ("🏷️", "Smart Tagging", "Semantic headings and landmarks for screen readers."),
    ("↕️", "Reading Order Fix", "Content follows the order a person would read it."),
    ("📝", "Form Labels", "Every field gets a label assistive technology can announce."),
    ("🔊", "Voice Summary", "Listen to the document in 25 languages."),
]


def _card_grid(items, columns_per_row: int) -> None:
    for start in range(0, len(items), columns_per_row):
        columns = st.columns(columns_per_row)
        for column, (icon, title, text) in zip(columns, items[start:start + columns_per_row]):
            with column:
                st.markdown(f"### {icon} {title}")
                st.write(text)


def display_landing_page() -> None:
    """Render the hero, problem/solution, features, impact and footer sections."""
    st.title("DocWise")
    st.subheader("Make every document accessible in minutes")
    st.write(
        "Upload a PDF, Word or PowerPoint file and get back clean, structured "
        "HTML that works with screen readers, keyboard navigation and text-to-speech."
    )
    st.info("⬅️ Drag your documents into the uploader in the sidebar to get started.")

    st.divider()
    problem, solution = st.columns(2)
    with problem:
        st.markdown("### The problem")
        st.write(
            "Most documents are published without tags, reading order or alt text. "
            "People who rely on assistive technology are locked out of them, and "
            "fixing them by hand takes hours per file."
        )
    with solution:
        st.markdown("### The solution")
        st.write(
            "DocWise sends your document to a generative AI model that rewrites it "
            "as semantic, WCAG-minded HTML with a short summary you can read or hear."
        )

    st.divider()
    st.markdown("## Features")
    _card_grid(FEATURES, 3)

    st.divider()
    st.markdown("## Impact")
    _card_grid(IMPACT, 4)

    st.divider()
    st.caption("DocWise · Accessible documents for everyone · Powered by Amazon Bedrock")
