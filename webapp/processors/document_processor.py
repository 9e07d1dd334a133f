# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Document processing for the DocWise Streamlit application.

Runs local extraction first, uploads files only when the backend has to read
them, then hands everything to the process-document pipeline.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import streamlit as st

from docwise.api import (
    create_model_client,
    create_storage_client,
    is_service_busy,
    process_document,
    store_usage_data,
)
from docwise.extract.text_extractor import ensure_supported, extract_text_from_file
from docwise.utils.logging_helper import DocumentAccessibilityError
from docwise.utils.usage_tracker import SessionUsageTracker

from config.app_config_local import Config
from utils.aws_utils import display_aws_warning
from utils.file_utils import UploadedDocument

# Set up logger
logger = logging.getLogger(__name__)

# (label, progress percentage) for each pipeline stage
PROCESSING_STEPS = [
    ("Uploading to secure storage", 10),
    ("Running AI accessibility analysis", 40),
    ("Applying fixes and tagging", 70),
    ("Finalizing accessible document", 100),
]

SERVER_OVERLOAD_TITLE = "🚧 Server Overload"
SERVER_OVERLOAD_MESSAGE = (
    "Our AI service is experiencing high demand due to heavy usage. "
    "Please wait a few minutes and try again."
)

ProgressCallback = Callable[[int, str, int], None]


def describe_error(error: Exception) -> Tuple[str, str]:
    """
    Turn a processing error into a (title, message) pair for display.

    Args:
        error: The exception raised during processing

    Returns:
        Tuple of title and description
    """
    message = str(error)
    if is_service_busy(message) or "experiencing high demand" in message.lower():
        return SERVER_OVERLOAD_TITLE, SERVER_OVERLOAD_MESSAGE
    return "Processing Failed", message or "An unexpected error occurred. Please try again."


def run_document_pipeline(
    documents: List[UploadedDocument],
    storage,
    model,
    on_progress: Optional[ProgressCallback] = None,
    config=None,
) -> Dict[str, Any]:
    """
    Process uploaded documents end to end.

    Args:
        documents: Uploaded documents; the first one is extracted locally
        storage: StorageClient used for uploads and results
        model: BedrockClient used for generation
        on_progress: Called with (step index, step label, percent)
        config: docwise ConfigManager

    Returns:
        Result dictionary from process_document

    Raises:
        DocumentAccessibilityError: If any stage fails
    """
    def report(step: int) -> None:
        label, percent = PROCESSING_STEPS[step]
        if on_progress:
            on_progress(step, label, percent)

    if not documents:
        raise DocumentAccessibilityError("Please upload a document first.")
    for document in documents:
        ensure_supported(document.name, document.content_type)

    # Step 1: local extraction, falling back to upload
    report(0)
    first = documents[0]
    raw_text = ""
    upload_needed = False
    try:
        extracted = extract_text_from_file(first.name, first.data, first.content_type)
        raw_text = (extracted.text or "").strip()
        if extracted.requires_backend:
            upload_needed = True
            raw_text = ""
    except Exception as e:
        logger.warning(f"Client-side extraction failed: {e}")
        upload_needed = True
        raw_text = ""

    public_urls = []
    if upload_needed or not raw_text:
        for document in documents:
            url = storage.upload_file(document.data, document.name, document.content_type)
            if url:
                public_urls.append(url)

    # Step 2: model processing
    report(1)
    if not raw_text and not public_urls:
        raw_text = (
            f"Process file '{first.name or 'document'}' with content-type "
            f"{first.content_type or 'unknown'}. Create accessible content from this document."
        )

    try:
        result = process_document(
            file_urls=public_urls,
            raw_text=raw_text,
            storage=storage,
            model=model,
            config=config,
        )

        # Step 3: collect results
        report(2)
        if not result.get("accessible_content") and not result.get("processed_document_url"):
            raise DocumentAccessibilityError(
                "Processing did not return processed content or URL."
            )
        store_usage_data(storage, config)
    finally:
        # One Streamlit process serves every session
        SessionUsageTracker.reset()

    report(3)
    return result


def process_uploaded_documents(
    documents: List[UploadedDocument], app_config: Config
) -> Tuple[bool, Optional[Dict[str, Any]]]:
    """
    Process uploaded documents with live progress in the Streamlit page.

    Args:
        documents: Uploaded documents
        app_config: Application configuration

    Returns:
        Tuple containing:
        - Boolean indicating processing success/failure
        - Dictionary of results if successful, None otherwise
    """
    if not app_config.aws_configured:
        display_aws_warning()
        return False, None

    manager = app_config.build_config_manager()
    status = st.empty()
    progress_bar = st.progress(0)

    def on_progress(step: int, label: str, percent: int) -> None:
        status.markdown(f"⚙️ **{label}**")
        progress_bar.progress(percent, text=f"{percent}% complete")

    with st.spinner("Working… This usually takes under a minute."):
        try:
            storage = create_storage_client(manager)
            model = create_model_client(manager)
            results = run_document_pipeline(
                documents, storage, model, on_progress=on_progress, config=manager
            )
        except Exception as e:
            logger.exception("Processing failed for %s", [d.name for d in documents])
            title, description = describe_error(e)
            st.error(f"**{title}**\n\n{description}")
            return False, None

    st.success("Accessibility fixes applied")
    return True, results
