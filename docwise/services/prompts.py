# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Prompt templates for accessible HTML generation.
"""

DOCUMENT_EXTRACTION_PROMPT = """You are an expert document accessibility specialist. Your task is to extract ALL text content from this document and convert it into accessible HTML.

CRITICAL INSTRUCTIONS:
1. Extract EVERY piece of text from the document - do not skip anything
2. Preserve the original structure, headings, paragraphs, lists, tables
3. Return ONLY valid JSON with two keys: "accessible_html" and "summary"
4. The accessible_html must be wrapped in <article> tags with proper semantic HTML
5. Use proper heading hierarchy (h1, h2, h3, etc.)
6. Ensure WCAG 2.2 AA compliance
7. The summary should reflect the actual document content

ABSOLUTELY FORBIDDEN:
- Do not create placeholder content
- Do not make up content that isn't in the document
- Do not use generic examples
- Extract and use ONLY the actual text from this specific document

Return format:
{
  "accessible_html": "<article>...actual document content...</article>",
  "summary": "Brief summary of the actual document content"
}"""

TEXT_CONVERSION_PROMPT = """Convert this text content into accessible HTML format.

Instructions:
1. Use the provided text content exactly as given
2. Structure it with proper semantic HTML elements
3. Return ONLY valid JSON with "accessible_html" and "summary" keys
4. Wrap content in <article> tags
5. Use proper heading hierarchy and WCAG 2.2 AA compliance

Text content to process:
{text}"""


def build_text_prompt(text: str) -> str:
    """Append the document text to the conversion instructions."""
    # str.replace rather than format(): document text may contain braces
    return TEXT_CONVERSION_PROMPT.replace("{text}", text)
