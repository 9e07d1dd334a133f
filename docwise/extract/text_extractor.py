# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Client-side text extraction.

Textual files are decoded directly and Office documents are converted to
HTML locally. Anything else (PDFs, legacy binary formats, broken files) is
flagged for backend processing with a marker string instead of raising.
"""

import mimetypes
import os
from dataclasses import dataclass
from typing import Optional

from docwise.extract.office_extractor import docx_to_html, pptx_to_html
from docwise.utils.logging_helper import setup_logger, InvalidRequestError

# Set up module-level logger
logger = setup_logger(__name__)

BACKEND_PROCESSING_MARKER = "BACKEND_PROCESSING_REQUIRED:"

PDF_TYPE = "application/pdf"
DOC_TYPE = "application/msword"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPT_TYPE = "application/vnd.ms-powerpoint"
PPTX_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
DEFAULT_TYPE = "application/octet-stream"

# Extensions the upload widget accepts, mapped to their MIME types
SUPPORTED_UPLOAD_TYPES = {
    ".pdf": PDF_TYPE,
    ".doc": DOC_TYPE,
    ".docx": DOCX_TYPE,
    ".ppt": PPT_TYPE,
    ".pptx": PPTX_TYPE,
}

_EXTRA_TYPES = {
    ".md": "text/markdown",
    ".txt": "text/plain",
    ".csv": "text/csv",
    ".json": "application/json",
    ".xml": "application/xml",
    ".html": "text/html",
    ".htm": "text/html",
}


@dataclass
class ExtractionResult:
    """Text pulled from a file, or the backend marker when none could be."""

    text: str
    content_type: str

    @property
    def requires_backend(self) -> bool:
        return is_backend_marker(self.text)


def detect_content_type(file_name: str, declared: Optional[str] = None) -> str:
    """
    Work out the MIME type of a file.

    Args:
        file_name: File name used for extension-based detection
        declared: MIME type reported by the browser or storage, if any

    Returns:
        MIME type string
    """
    if declared:
        return declared.split(";", 1)[0].strip().lower()

    extension = os.path.splitext(file_name or "")[1].lower()
    if extension in SUPPORTED_UPLOAD_TYPES:
        return SUPPORTED_UPLOAD_TYPES[extension]
    if extension in _EXTRA_TYPES:
        return _EXTRA_TYPES[extension]

    guessed, _ = mimetypes.guess_type(file_name or "")
    return guessed or DEFAULT_TYPE


UNSUPPORTED_MESSAGE = (
    "Legacy PowerPoint (.ppt) files cannot be processed. "
    "Save the presentation as .pptx and upload it again."
)


def is_unsupported(file_name: Optional[str], content_type: Optional[str] = None) -> bool:
    """True for formats that can neither be extracted here nor read by the model."""
    extension = os.path.splitext(file_name or "")[1].lower()
    return extension == ".ppt" or detect_content_type(file_name, content_type) == PPT_TYPE


def ensure_supported(file_name: Optional[str], content_type: Optional[str] = None) -> None:
    """
    Reject files no processing path can handle.

    Raises:
        InvalidRequestError: For legacy PowerPoint files
    """
    if is_unsupported(file_name, content_type):
        raise InvalidRequestError(f"{file_name or 'document'}: {UNSUPPORTED_MESSAGE}")


def is_textual(content_type: str) -> bool:
    """True for content that can be decoded and sent as text."""
    content_type = (content_type or "").lower()
    return (
        content_type.startswith("text/")
        or "json" in content_type
        or "xml" in content_type
        or "html" in content_type
    )


def is_backend_marker(text: str) -> bool:
    return bool(text) and text.startswith(BACKEND_PROCESSING_MARKER)


def backend_marker(file_name: Optional[str]) -> str:
    return f"{BACKEND_PROCESSING_MARKER} {file_name or 'document'}"


def extract_text_from_file(
    file_name: str, data: bytes, content_type: Optional[str] = None
) -> ExtractionResult:
    """
    Extract text from an uploaded file before it leaves the client.

    Args:
        file_name: Original file name
        data: Raw file bytes
        content_type: Declared MIME type, if known

    Returns:
        ExtractionResult with decoded text, Office HTML, or the backend marker
    """
    content_type = detect_content_type(file_name, content_type)

    # Office XML types contain "xml" in their MIME names, so check them first
    if content_type == DOCX_TYPE:
        try:
            return ExtractionResult(docx_to_html(data), content_type)
        except Exception as e:
            logger.warning(f"Failed to extract DOCX content from {file_name}: {e}")

    elif content_type == PPTX_TYPE:
        try:
            return ExtractionResult(pptx_to_html(data), content_type)
        except Exception as e:
            logger.warning(f"Failed to extract PPTX content from {file_name}: {e}")

    elif is_textual(content_type):
        return ExtractionResult(data.decode("utf-8", errors="replace"), content_type)

    logger.debug(f"Deferring {file_name} ({content_type}) to backend processing")
    return ExtractionResult(backend_marker(file_name), content_type)
