# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Bedrock client for accessible HTML generation.

This module sends documents and extracted text to a Bedrock model through the
converse API and turns the JSON reply into an AccessibleDocument.
"""

import json
import os
import re
import time
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from docwise.services.prompts import DOCUMENT_EXTRACTION_PROMPT, build_text_prompt
from docwise.utils.html_utils import parsing_error_article, plain_text_article
from docwise.utils.logging_helper import (
    setup_logger,
    ModelInvocationError,
    ServiceBusyError,
)
from docwise.utils.usage_tracker import SessionUsageTracker

# Set up module-level logger
logger = setup_logger(__name__)

SERVICE_BUSY_MESSAGE = (
    "Server is currently busy due to high demand. Please try again in a few minutes."
)

# Error codes Bedrock uses when quota or throughput is exhausted
THROTTLING_ERROR_CODES = {
    "ThrottlingException",
    "ServiceQuotaExceededException",
    "TooManyRequestsException",
    "RESOURCE_EXHAUSTED",
}

# converse() document block formats, keyed by MIME type
DOCUMENT_FORMATS = {
    "application/pdf": "pdf",
    "text/csv": "csv",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/vnd.ms-excel": "xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "text/html": "html",
    "text/plain": "txt",
    "text/markdown": "md",
}

IMAGE_FORMATS = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/jpg": "jpeg",
    "image/gif": "gif",
    "image/webp": "webp",
}

_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL | re.IGNORECASE)
_DOCUMENT_NAME_CHARS = re.compile(r"[^A-Za-z0-9\-\(\)\[\] ]+")


@dataclass
class AccessibleDocument:
    """Accessible HTML and a short summary produced by the model."""

    accessible_html: str
    summary: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def is_throttling_error(error: Exception) -> bool:
    """
    Check whether an error means the model service is out of capacity.

    Args:
        error: Exception raised by the Bedrock runtime client

    Returns:
        True for throttling and quota errors
    """
    if isinstance(error, ClientError):
        details = error.response.get("Error", {})
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        return details.get("Code") in THROTTLING_ERROR_CODES or status == 429
    return False


def parse_model_json(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse a JSON object out of a model reply.

    Replies wrapped in a Markdown code fence are unwrapped first. Returns None
    when no JSON object can be recovered.
    """
    if not text:
        return None

    candidate = text.strip()
    fenced = _FENCE.match(candidate)
    if fenced:
        candidate = fenced.group(1)

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        start, end = candidate.find("{"), candidate.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            parsed = json.loads(candidate[start : end + 1])
        except json.JSONDecodeError:
            return None

    return parsed if isinstance(parsed, dict) else None


def document_name(file_name: str) -> str:
    """Reduce a file name to the character set converse() accepts for documents."""
    stem = os.path.splitext(os.path.basename(file_name or ""))[0]
    cleaned = _DOCUMENT_NAME_CHARS.sub(" ", stem)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    return cleaned or "document"


class BedrockClient:
    """Client for turning documents into accessible HTML with AWS Bedrock.

    Attributes:
        model_id: The Bedrock model ID to use
        profile: AWS credentials profile name
        client: Boto3 Bedrock runtime client
        max_attempts: Attempts made for document processing
        backoff_seconds: Base delay; attempt n waits backoff_seconds * n
    """

    def __init__(
        self,
        model_id: str = "us.amazon.nova-lite-v1:0",
        profile: Optional[str] = None,
        region: Optional[str] = None,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
        max_tokens: int = 4096,
        temperature: float = 0.1,
        top_p: float = 0.8,
        client=None,
    ):
        """
        Initialize the Bedrock client.

        Args:
            model_id: The ID of the Bedrock model to use
            profile: AWS profile name to use for authentication
            region: AWS region override
            max_attempts: Attempts made for document processing
            backoff_seconds: Base delay between attempts
            max_tokens: Maximum number of tokens to generate
            temperature: Sampling temperature
            top_p: Nucleus sampling parameter for document processing
            client: Pre-built bedrock-runtime client (used in tests)
        """
        self.model_id = model_id
        self.profile = profile
        self.max_attempts = max(1, int(max_attempts))
        self.backoff_seconds = float(backoff_seconds)
        self.max_tokens = int(max_tokens)
        self.temperature = float(temperature)
        self.top_p = float(top_p)

        if client is not None:
            self.client = client
            return

        if profile:
            try:
                session = boto3.Session(profile_name=profile)
                logger.debug(f"Using AWS profile: {profile}")
            except Exception as profile_error:
                logger.warning(
                    f"Couldn't use AWS profile '{profile}', falling back to default credentials: {profile_error}"
                )
                session = boto3.Session()
        else:
            session = boto3.Session()

        self.client = session.client("bedrock-runtime", region_name=region)
        logger.debug(f"Initialized Bedrock client with model: {model_id}, profile: {profile}")

    def _converse(
        self, content: List[Dict[str, Any]], include_top_p: bool
    ) -> str:
        inference_config = {
            "maxTokens": self.max_tokens,
            "temperature": self.temperature,
        }
        if include_top_p:
            inference_config["topP"] = self.top_p

        response = self.client.converse(
            modelId=self.model_id,
            messages=[{"role": "user", "content": content}],
            inferenceConfig=inference_config,
        )

        message_content = response.get("output", {}).get("message", {}).get("content", [])
        for block in message_content:
            if "text" in block:
                return block["text"]
        return ""

    def _track(self, purpose: str, prompt: str, reply: str, started: datetime, attempt: int = 1) -> None:
        try:
            elapsed_ms = int((datetime.now() - started).total_seconds() * 1000)
            SessionUsageTracker.get_instance().track_model_call(
                model_id=self.model_id,
                purpose=purpose,
                input_tokens=SessionUsageTracker.estimate_tokens(prompt),
                output_tokens=SessionUsageTracker.estimate_tokens(reply),
                processing_time_ms=elapsed_ms,
                attempt=attempt,
            )
        except Exception as track_error:
            logger.warning(f"Failed to track model usage: {track_error}")

    def _attachment(self, data: bytes, content_type: str, file_name: str) -> Dict[str, Any]:
        content_type = (content_type or "").split(";", 1)[0].strip().lower()
        extension = os.path.splitext(file_name or "")[1].lower().lstrip(".")

        if content_type in IMAGE_FORMATS:
            return {"image": {"format": IMAGE_FORMATS[content_type], "source": {"bytes": data}}}

        doc_format = DOCUMENT_FORMATS.get(content_type)
        if doc_format is None and extension in DOCUMENT_FORMATS.values():
            doc_format = extension
        if doc_format is None:
            raise ModelInvocationError(
                f"Unsupported document type for model processing: {content_type or extension or 'unknown'}"
            )

        return {
            "document": {
                "format": doc_format,
                "name": document_name(file_name),
                "source": {"bytes": data},
            }
        }

    def process_document_bytes(
        self, data: bytes, content_type: str, file_name: str
    ) -> AccessibleDocument:
        """
        Send a whole document to the model and get accessible HTML back.

        Args:
            data: Raw document bytes
            content_type: MIME type of the document
            file_name: Original file name

        Returns:
            AccessibleDocument parsed from the reply, or the parsing-error
            document when the reply is not the expected JSON

        Raises:
            ServiceBusyError: On throttling or quota errors (not retried)
            ModelInvocationError: If every attempt fails
        """
        logger.info(
            f"Processing document {file_name}: {len(data)} bytes, Content-Type: {content_type}"
        )
        content = [
            {"text": DOCUMENT_EXTRACTION_PROMPT},
            self._attachment(data, content_type, file_name),
        ]

        for attempt in range(1, self.max_attempts + 1):
            started = datetime.now()
            try:
                logger.info(f"Model attempt {attempt}")
                reply = self._converse(content, include_top_p=True)
            except (ClientError, BotoCoreError) as e:
                SessionUsageTracker.get_instance().track_failed_call()
                if is_throttling_error(e):
                    logger.error(f"Model quota exhausted (attempt {attempt}): {e}")
                    raise ServiceBusyError(SERVICE_BUSY_MESSAGE) from e
                logger.error(f"Model error (attempt {attempt}): {e}")
                if attempt < self.max_attempts:
                    time.sleep(self.backoff_seconds * attempt)
                continue

            self._track("document_extraction", DOCUMENT_EXTRACTION_PROMPT, reply, started, attempt)
            logger.info(f"Model response length: {len(reply)} characters")
            logger.debug(f"Model response preview: {reply[:300]}...")

            parsed = parse_model_json(reply)
            if parsed and parsed.get("accessible_html") and parsed.get("summary"):
                logger.info(
                    f"Parsed model response, HTML length: {len(parsed['accessible_html'])}"
                )
                return AccessibleDocument(
                    accessible_html=str(parsed["accessible_html"]),
                    summary=str(parsed["summary"]),
                )

            logger.error("Failed to parse model response as the expected JSON")
            logger.debug(f"Raw response: {reply}")
            return AccessibleDocument(
                accessible_html=parsing_error_article(reply),
                summary="Document processing encountered a parsing error.",
            )

        raise ModelInvocationError(
            f"Model invocation failed after {self.max_attempts} attempts"
        )

    def process_text(self, text: str, file_name: str = "user-provided-text") -> AccessibleDocument:
        """
        Restructure already-extracted text into accessible HTML.

        Makes a single call without retry.

        Args:
            text: Extracted document text (plain text or HTML)
            file_name: Name used in log messages

        Returns:
            AccessibleDocument, or a plain article when the reply is unusable

        Raises:
            ServiceBusyError: On throttling or quota errors
            ModelInvocationError: On any other invocation error
        """
        logger.info(f"Processing {len(text)} characters of text from {file_name}")
        prompt = build_text_prompt(text)
        started = datetime.now()

        try:
            reply = self._converse([{"text": prompt}], include_top_p=False)
        except (ClientError, BotoCoreError) as e:
            SessionUsageTracker.get_instance().track_failed_call()
            if is_throttling_error(e):
                raise ServiceBusyError(SERVICE_BUSY_MESSAGE) from e
            logger.error(f"Text processing failed: {e}")
            raise ModelInvocationError("Failed to process text with the model") from e

        self._track("text_conversion", prompt, reply, started)

        parsed = parse_model_json(reply)
        if parsed and parsed.get("accessible_html"):
            return AccessibleDocument(
                accessible_html=str(parsed["accessible_html"]),
                summary=str(parsed.get("summary") or ""),
            )

        logger.error("Failed to parse text processing response")
        return AccessibleDocument(
            accessible_html=plain_text_article(text),
            summary="Text content processed with basic formatting",
        )
