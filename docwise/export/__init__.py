# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Download format conversion.
"""

from docwise.export.converters import (
    DEFAULT_FORMAT,
    EXPORT_FORMATS,
    download_filename,
    export_document,
)

__all__ = ["DEFAULT_FORMAT", "EXPORT_FORMATS", "download_filename", "export_document"]
