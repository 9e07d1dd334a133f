# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Text extraction for uploaded documents.
"""

from docwise.extract.text_extractor import (
    BACKEND_PROCESSING_MARKER,
    ExtractionResult,
    detect_content_type,
    extract_text_from_file,
    is_backend_marker,
    is_textual,
)
from docwise.extract.office_extractor import extract_docx_text, extract_pptx_text

__all__ = [
    "BACKEND_PROCESSING_MARKER",
    "ExtractionResult",
    "detect_content_type",
    "extract_text_from_file",
    "is_backend_marker",
    "is_textual",
    "extract_docx_text",
    "extract_pptx_text",
]
