# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
DocWise API.

This module provides the primary entry points of the package: the
process-document pipeline used by the serverless function and the web app,
and a local-file variant used by the command line.
"""

import os
from typing import Any, Dict, List, Optional

from docwise.extract.office_extractor import extract_docx_text, extract_pptx_text
from docwise.extract.text_extractor import (
    DOCX_TYPE,
    PPTX_TYPE,
    detect_content_type,
    ensure_supported,
    extract_text_from_file,
    is_backend_marker,
    is_textual,
)
from docwise.services.bedrock_client import AccessibleDocument, BedrockClient
from docwise.services.storage_client import StorageClient
from docwise.utils.config import ConfigManager, config_manager
from docwise.utils.logging_helper import (
    setup_logger,
    handle_exception,
    DocumentAccessibilityError,
    InvalidRequestError,
)
from docwise.utils.path_utils import file_stem, name_from_url
from docwise.utils.usage_tracker import SessionUsageTracker

# Set up module-level logger
logger = setup_logger(__name__)

BUSY_KEYWORDS = ("server is currently busy", "quota", "rate limit", "overload")

SERVICE_BUSY_RESPONSE = (
    "Server is currently experiencing high demand due to heavy usage. "
    "Please try again in a few minutes."
)


def is_service_busy(message: str) -> bool:
    """
    Check whether an error message describes model overload.

    Args:
        message: Error message

    Returns:
        True if the message mentions busy servers, quotas, rate limits or overload
    """
    lowered = (message or "").lower()
    return any(keyword in lowered for keyword in BUSY_KEYWORDS)


def create_model_client(config: Optional[ConfigManager] = None) -> BedrockClient:
    """Build a BedrockClient from the resolved configuration."""
    manager = config or config_manager
    model = manager.get_config(section="model")
    aws = manager.get_config(section="aws")
    return BedrockClient(
        model_id=model["model_id"],
        profile=aws.get("profile"),
        region=aws.get("region"),
        max_attempts=model["max_attempts"],
        backoff_seconds=model["backoff_seconds"],
        max_tokens=model["max_tokens"],
        temperature=model["temperature"],
        top_p=model["top_p"],
    )


def create_storage_client(config: Optional[ConfigManager] = None) -> StorageClient:
    """Build a StorageClient from the resolved configuration."""
    manager = config or config_manager
    storage = manager.get_config(section="storage")
    aws = manager.get_config(section="aws")
    return StorageClient(
        bucket=storage.get("bucket"),
        profile=aws.get("profile"),
        region=aws.get("region"),
        public_base_url=storage.get("public_base_url"),
        upload_prefix=storage["upload_prefix"],
        processed_prefix=storage["processed_prefix"],
    )


def _process_file_bytes(
    model: BedrockClient, data: bytes, content_type: str, file_name: str
) -> AccessibleDocument:
    """
    Route a stored file to the text path or the whole-document path.

    Args:
        model: Model client
        data: File bytes
        content_type: MIME type reported by storage (may be empty)
        file_name: Name used for type detection and logging

    Returns:
        AccessibleDocument
    """
    ensure_supported(file_name, content_type or None)
    content_type = detect_content_type(file_name, content_type or None)
    logger.info(f"File size: {len(data)} bytes, Content-Type: {content_type}")

    if content_type in (DOCX_TYPE, PPTX_TYPE):
        extractor = extract_docx_text if content_type == DOCX_TYPE else extract_pptx_text
        text = extractor(data)
        if text:
            logger.info(f"Extracted {len(text)} characters from {file_name}")
            return model.process_text(text, file_name)
        # PPTX has no document block; anything else goes to the model whole
        if content_type == PPTX_TYPE:
            raise InvalidRequestError(f"No text could be extracted from {file_name}")

    elif is_textual(content_type):
        text = data.decode("utf-8", errors="replace")
        logger.info(f"Extracted {len(text)} characters from text file")
        return model.process_text(text, file_name)

    logger.info("Using whole-document model processing")
    return model.process_document_bytes(data, content_type, file_name)


def process_document(
    file_urls: Optional[List[str]] = None,
    raw_text: str = "",
    storage: Optional[StorageClient] = None,
    model: Optional[BedrockClient] = None,
    config: Optional[ConfigManager] = None,
) -> Dict[str, Any]:
    """
    Turn uploaded files or extracted text into stored, accessible HTML.

    Provided text wins unless it is the backend-processing marker; otherwise
    the first uploaded file is processed. Every uploaded file is removed
    afterwards.

    Args:
        file_urls: URLs of uploaded files
        raw_text: Text extracted on the client
        storage: Storage client (built from config if omitted)
        model: Model client (built from config if omitted)
        config: Configuration manager

    Returns:
        Dictionary with 'accessible_content', 'summary' and
        'processed_document_url'

    Raises:
        InvalidRequestError: If there is nothing to process
        ModelInvocationError: If the model fails
        StorageError: If files cannot be read or results stored
    """
    urls = [url for url in (file_urls or []) if url]
    text = raw_text or ""

    logger.info(
        f"Processing request: url_count={len(urls)}, has_provided_text={bool(text)}"
    )

    if not urls and not text:
        raise InvalidRequestError("file_urls or raw_text is required")

    manager = config or config_manager
    storage = storage or create_storage_client(manager)
    model = model or create_model_client(manager)

    for url in urls:
        key = storage.key_from_url(url)
        if key and not storage.is_upload_key(key):
            raise InvalidRequestError(f"File URL is not an uploaded document: {url}")

    try:
        if text and not is_backend_marker(text):
            result = model.process_text(text, "user-provided-text")
        elif urls:
            file_url = urls[0]
            file_name = name_from_url(file_url)
            logger.info(f"Processing document: {file_name} from URL: {file_url}")
            data, content_type = storage.fetch(file_url)
            result = _process_file_bytes(model, data, content_type, file_name)
        else:
            raise InvalidRequestError("No valid content to process")

        processed_document_url = storage.upload_processed_html(result.accessible_html)
    except Exception as e:
        handle_exception(e, logger, "Error processing document")

    if urls and manager.get_config(section="storage").get("cleanup_uploads", True):
        storage.remove(urls)

    SessionUsageTracker.get_instance().track_document()
    logger.info(
        f"Processing completed successfully, HTML length: {len(result.accessible_html)}"
    )

    return {
        "accessible_content": result.accessible_html,
        "summary": result.summary,
        "processed_document_url": processed_document_url,
    }


def process_local_file(
    file_path: str,
    output_dir: Optional[str] = None,
    model: Optional[BedrockClient] = None,
    config: Optional[ConfigManager] = None,
) -> Dict[str, Any]:
    """
    Run the pipeline on a file on disk without touching object storage.

    Args:
        file_path: Path to the input document
        output_dir: Directory for the HTML and usage data; nothing is written if None
        model: Model client (built from config if omitted)
        config: Configuration manager

    Returns:
        Dictionary with 'accessible_content', 'summary', and, when output_dir
        is given, 'html_path' and 'usage_data_path'

    Raises:
        FileNotFoundError: If the input file doesn't exist
    """
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"Input file not found: {file_path}")

    manager = config or config_manager
    model = model or create_model_client(manager)
    file_name = os.path.basename(file_path)

    with open(file_path, "rb") as f:
        data = f.read()

    extraction = extract_text_from_file(file_name, data)
    text = extraction.text.strip()

    if text and not extraction.requires_backend:
        result = model.process_text(text, file_name)
    else:
        result = _process_file_bytes(model, data, extraction.content_type, file_name)

    tracker = SessionUsageTracker.get_instance()
    tracker.track_document()

    output = {
        "accessible_content": result.accessible_html,
        "summary": result.summary,
    }

    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
        html_path = os.path.join(output_dir, f"{file_stem(file_name)}_accessible.html")
        with open(html_path, "w", encoding="utf-8") as f:
            f.write(result.accessible_html)
        output["html_path"] = html_path

        if manager.get_config(section="processing").get("save_usage_data", True):
            output["usage_data_path"] = save_usage_data(
                output_path=os.path.join(output_dir, "usage_data.json")
            )

    return output


def save_usage_data(
    output_path: Optional[str] = None,
    usage_data_bucket: Optional[str] = None,
    usage_data_bucket_prefix: Optional[str] = None,
    profile: Optional[str] = None,
    s3_client=None,
) -> Optional[str]:
    """
    Save the usage data collected during this session.

    Args:
        output_path: Local path for the JSON file
        usage_data_bucket: S3 bucket to save usage data to
        usage_data_bucket_prefix: Optional prefix for the S3 key path
        profile: AWS profile name to use for credentials
        s3_client: Pre-built S3 client, e.g. the storage client's

    Returns:
        Path to the saved file (local or S3 URI) or None if no output location is provided

    Raises:
        DocumentAccessibilityError: If there's an error saving usage data
    """
    if not output_path and not usage_data_bucket:
        return None

    try:
        usage_tracker = SessionUsageTracker.get_instance()
        usage_tracker.finalize_session()

        result_path = None

        if output_path:
            try:
                result_path = usage_tracker.save_to_file(output_path)
            except Exception as e:
                logger.warning(f"Failed to save usage data to local file: {e}")

        if usage_data_bucket:
            try:
                result_path = usage_tracker.save_to_s3(
                    bucket_name=usage_data_bucket,
                    prefix=usage_data_bucket_prefix,
                    profile=profile,
                    s3_client=s3_client,
                )
            except Exception as e:
                logger.warning(f"Failed to save usage data to S3: {e}")
                # A local copy is good enough
                if output_path is None:
                    raise

        return result_path

    except Exception as e:
        handle_exception(
            e,
            logger,
            custom_message="Error saving usage data",
            custom_exception=DocumentAccessibilityError,
        )


def store_usage_data(storage: StorageClient, config: Optional[ConfigManager] = None) -> Optional[str]:
    """
    Save usage data next to the processed documents when a usage prefix is configured.

    Failures are logged and never raised, since the document itself was
    already processed.

    Returns:
        S3 URI of the usage file, or None if nothing was saved
    """
    processing = (config or config_manager).get_config(section="processing")
    if not processing.get("save_usage_data") or not processing.get("usage_data_prefix"):
        return None
    try:
        return save_usage_data(
            usage_data_bucket=storage.bucket,
            usage_data_bucket_prefix=processing["usage_data_prefix"],
            s3_client=storage.client,
        )
    except Exception as e:
        logger.warning(f"Usage data not saved: {e}")
        return None
