# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Usage Tracker module for DocWise.

This module records hosted-model usage for the current processing session and
supports exporting the figures to a local file or to S3.
"""

import os
import uuid
import json
import boto3
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from docwise.utils.logging_helper import setup_logger

# Set up module-level logger
logger = setup_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SessionUsageTracker:
    """
    Tracks usage metrics for the current document processing session.

    This class maintains in-memory tracking of model calls for the duration of
    a single processing session.
    """

    _instance = None

    @classmethod
    def get_instance(cls):
        """
        Get or create the singleton instance of SessionUsageTracker.

        Returns:
            SessionUsageTracker: The singleton instance
        """
        if cls._instance is None:
            cls._instance = SessionUsageTracker()
        return cls._instance

    @classmethod
    def reset(cls) -> "SessionUsageTracker":
        """Start a fresh session and return its tracker."""
        cls._instance = SessionUsageTracker()
        return cls._instance

    def __init__(self):
        """Initialize a new SessionUsageTracker."""
        self.session_id = str(uuid.uuid4())
        self.start_time = _utcnow()
        self.end_time = None
        self.model_usage = {
            "total_calls": 0,
            "failed_calls": 0,
            "total_input_tokens": 0,
            "total_output_tokens": 0,
            "calls_by_model": {},
            "calls_by_purpose": {},
            "call_details": [],
        }
        self.documents_processed = 0

    def track_model_call(
        self,
        model_id: str,
        purpose: str,
        input_tokens: int,
        output_tokens: int,
        processing_time_ms: Optional[int] = None,
        attempt: int = 1,
    ) -> None:
        """
        Track a single successful model call.

        Args:
            model_id: The Bedrock model ID used
            purpose: The purpose of the call (e.g., 'document_extraction')
            input_tokens: Number of input tokens
            output_tokens: Number of output tokens
            processing_time_ms: Optional processing time in milliseconds
            attempt: Which attempt of the retry loop succeeded
        """
        timestamp = _utcnow().isoformat() + "Z"

        self.model_usage["total_calls"] += 1
        self.model_usage["total_input_tokens"] += input_tokens
        self.model_usage["total_output_tokens"] += output_tokens

        for bucket_name, key in (("calls_by_model", model_id), ("calls_by_purpose", purpose)):
            stats = self.model_usage[bucket_name].setdefault(
                key, {"total_calls": 0, "input_tokens": 0, "output_tokens": 0}
            )
            stats["total_calls"] += 1
            stats["input_tokens"] += input_tokens
            stats["output_tokens"] += output_tokens

        call_detail = {
            "timestamp": timestamp,
            "model_id": model_id,
            "purpose": purpose,
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "attempt": attempt,
        }

        if processing_time_ms is not None:
            call_detail["processing_time_ms"] = processing_time_ms

        self.model_usage["call_details"].append(call_detail)

        logger.debug(
            f"Tracked model call: model={model_id}, purpose={purpose}, "
            f"input_tokens={input_tokens}, output_tokens={output_tokens}"
        )

    def track_failed_call(self) -> None:
        """Count a model call that raised."""
        self.model_usage["failed_calls"] += 1

    def track_document(self) -> None:
        """Count a document that completed the pipeline."""
        self.documents_processed += 1

    def finalize_session(self) -> None:
        """Mark the session as complete and record the end time."""
        self.end_time = _utcnow()

    def get_usage_data(self) -> Dict[str, Any]:
        """
        Get the complete usage data for the session.

        Returns:
            Dict containing all usage data
        """
        if not self.end_time:
            self.end_time = _utcnow()

        return {
            "session_id": self.session_id,
            "start_time": self.start_time.isoformat() + "Z",
            "end_time": self.end_time.isoformat() + "Z",
            "documents_processed": self.documents_processed,
            "model_usage": self.model_usage,
        }

    def save_to_file(self, output_path: str) -> str:
        """
        Save usage data to a local file.

        Args:
            output_path: Path to save the JSON file

        Returns:
            Path to the saved file
        """
        try:
            json_data = json.dumps(self.get_usage_data(), indent=2)

            directory = os.path.dirname(output_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(output_path, "w", encoding="utf-8") as f:
                f.write(json_data)

            logger.info(f"Usage data saved to file: {output_path}")
            return output_path

        except Exception as e:
            logger.warning(f"Failed to save usage data to file: {e}")
            raise

    def save_to_s3(
        self,
        bucket_name: str,
        prefix: Optional[str] = None,
        profile: Optional[str] = None,
        s3_client=None,
    ) -> str:
        """
        Save usage data to S3.

        Args:
            bucket_name: S3 bucket name
            prefix: Optional prefix for the S3 key
            profile: Optional AWS profile name
            s3_client: Optional pre-built S3 client

        Returns:
            S3 URI of the saved file
        """
        try:
            if s3_client is None:
                session = boto3.Session(profile_name=profile) if profile else boto3.Session()
                s3_client = session.client("s3")

            if not self.end_time:
                self.end_time = _utcnow()

            date_str = self.start_time.strftime("%Y-%m-%d")
            timestamp_str = self.start_time.strftime("%Y%m%d-%H%M%S")

            key_parts = []
            if prefix:
                key_parts.append(prefix.rstrip("/"))

            key_parts.extend(
                [
                    "docwise-usage",
                    date_str,
                    f"docwise-usage-{timestamp_str}-{self.session_id[:8]}.json",
                ]
            )
            key = "/".join(key_parts)

            s3_client.put_object(
                Bucket=bucket_name,
                Key=key,
                Body=json.dumps(self.get_usage_data(), indent=2),
                ContentType="application/json",
            )

            s3_uri = f"s3://{bucket_name}/{key}"
            logger.info(f"Usage data saved to S3: {s3_uri}")
            return s3_uri

        except Exception as e:
            logger.warning(f"Failed to save usage data to S3: {e}")
            raise

    @staticmethod
    def estimate_tokens(text: str) -> int:
        """
        Estimate the number of tokens in a text string.

        Simple approximation: ~4 characters per token.

        Args:
            text: The input text

        Returns:
            Estimated number of tokens
        """
        if not text:
            return 0

        return max(1, len(text) // 4)
