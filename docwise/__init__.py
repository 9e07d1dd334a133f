# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
DocWise Document Accessibility Package.

This package turns PDF, Word and PowerPoint documents into accessible HTML
using a hosted generative model.

Main Components:
- Client-side and backend text extraction
- Accessible HTML generation through AWS Bedrock
- Result storage in S3
- Download format conversion (HTML, Markdown, text, PDF)
"""

__version__ = "0.3.0"
