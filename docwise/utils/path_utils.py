# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
File name and object key helpers.
"""

import os
import random
import string
import time
from typing import Optional

# Characters that cause trouble in object keys and download names
_PROBLEM_CHARS = [
    "#", "%", "&", "{", "}", "\\", "<", ">", "*", "?", "/", "$", "!",
    "'", '"', ":", "@", "+", "`", "|", "=",
]


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename by replacing spaces and problematic characters with underscores.

    Args:
        filename: Original filename

    Returns:
        Sanitized filename, never empty
    """
    sanitized = filename.replace(" ", "_")

    for char in _PROBLEM_CHARS:
        sanitized = sanitized.replace(char, "_")

    while "__" in sanitized:
        sanitized = sanitized.replace("__", "_")

    sanitized = sanitized.strip("_")

    if not sanitized:
        sanitized = "document"

    return sanitized


def random_suffix(length: int = 11) -> str:
    """Return a short lowercase alphanumeric token."""
    alphabet = string.ascii_lowercase + string.digits
    return "".join(random.choices(alphabet, k=length))


def unique_token(now_ms: Optional[int] = None) -> str:
    """Return ``<millis>-<random>``, unique enough for object keys."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}-{random_suffix()}"


def file_stem(file_name: Optional[str], default: str = "document") -> str:
    """
    Strip directory and final extension from a file name.

    Args:
        file_name: File name or URL path segment
        default: Value returned when nothing usable remains

    Returns:
        The stem of the file name
    """
    if not file_name:
        return default
    stem = os.path.splitext(os.path.basename(file_name))[0]
    return stem or default


def name_from_url(url: str, default: str = "document") -> str:
    """Return the last path segment of a URL, ignoring any query string."""
    path = url.split("?", 1)[0].rstrip("/")
    return path.split("/")[-1] or default
