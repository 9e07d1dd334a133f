# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
File handling utilities for the DocWise Streamlit application.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from docwise.extract.text_extractor import SUPPORTED_UPLOAD_TYPES, detect_content_type

# Extensions offered by the upload widget
UPLOAD_EXTENSIONS = [ext.lstrip(".") for ext in SUPPORTED_UPLOAD_TYPES]


@dataclass
class UploadedDocument:
    """An uploaded file detached from the Streamlit widget."""

    name: str
    data: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.data)


def detect_file_type(file_name: str) -> Optional[str]:
    """
    Detect the type of file based on its extension.

    Args:
        file_name: Name of the file

    Returns:
        File type ('pdf', 'word', 'powerpoint', or None)
    """
    extension = os.path.splitext(file_name.lower())[1]

    if extension == ".pdf":
        return "pdf"
    elif extension in (".doc", ".docx"):
        return "word"
    elif extension in (".ppt", ".pptx"):
        return "powerpoint"
    else:
        return None


def read_uploaded_files(uploaded_files) -> List[UploadedDocument]:
    """
    Read Streamlit uploaded files into UploadedDocument objects.

    Files with unsupported extensions are skipped.

    Args:
        uploaded_files: Iterable of Streamlit UploadedFile objects

    Returns:
        List of UploadedDocument
    """
    documents = []
    for uploaded_file in uploaded_files or []:
        if detect_file_type(uploaded_file.name) is None:
            continue
        documents.append(
            UploadedDocument(
                name=uploaded_file.name,
                data=bytes(uploaded_file.getbuffer()),
                content_type=detect_content_type(
                    uploaded_file.name, getattr(uploaded_file, "type", None)
                ),
            )
        )
    return documents


def format_file_size(size: int) -> str:
    """Human-readable file size, e.g. '1.2 MB'."""
    value = float(size)
    for unit in ("B", "KB", "MB"):
        if value < 1024 or unit == "MB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} MB"
