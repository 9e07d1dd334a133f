# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Configuration management for the DocWise Streamlit application.

This module handles environment variables, AWS configuration, and default settings.
"""

import os
from typing import Optional

from docwise.utils.config import build_config_manager, ConfigManager


class Config:
    """Configuration class for the DocWise Streamlit application."""
    # AWS configuration keys
    S3_BUCKET_KEY = "DOCWISE_S3_BUCKET"
    S3_BUCKET_ALT_KEY = "DOCUMENT_ACCESSIBILITY_S3_BUCKET"
    MODEL_ID_KEY = "DOCWISE_MODEL_ID"
    PUBLIC_BASE_URL_KEY = "DOCWISE_PUBLIC_BASE_URL"
    AWS_PROFILE_KEY = "AWS_PROFILE"
    AWS_REGION_KEY = "AWS_REGION"
    DEFAULT_FORMAT_KEY = "DOCWISE_EXPORT_DEFAULT_FORMAT"

    def __init__(self):
        """Initialize configuration with values from environment variables."""
        self._s3_bucket = os.environ.get(self.S3_BUCKET_KEY) or os.environ.get(self.S3_BUCKET_ALT_KEY)
        self._model_id = os.environ.get(self.MODEL_ID_KEY)
        self._public_base_url = os.environ.get(self.PUBLIC_BASE_URL_KEY)
        self._aws_profile = os.environ.get(self.AWS_PROFILE_KEY)
        self._aws_region = os.environ.get(self.AWS_REGION_KEY)
        self._default_format = os.environ.get(self.DEFAULT_FORMAT_KEY, "pdf")

    @property
    def s3_bucket(self) -> Optional[str]:
        """Get the S3 bucket name."""
        return self._s3_bucket

    @property
    def model_id(self) -> Optional[str]:
        """Get the Bedrock model ID override."""
        return self._model_id

    @property
    def aws_profile(self) -> Optional[str]:
        """Get the AWS profile name."""
        return self._aws_profile

    @property
    def default_format(self) -> str:
        """Get the preselected download format."""
        return self._default_format

    @property
    def aws_configured(self) -> bool:
        """Check if the S3 bucket used for uploads and results is configured."""
        return bool(self._s3_bucket)

    def build_config_manager(self) -> ConfigManager:
        """
        Create a docwise configuration manager seeded with the app settings.

        Returns:
            ConfigManager for the processing pipeline
        """
        manager = build_config_manager()
        if self._s3_bucket:
            manager.set_user_config({"bucket": self._s3_bucket}, "storage")
        if self._public_base_url:
            manager.set_user_config({"public_base_url": self._public_base_url}, "storage")
        if self._model_id:
            manager.set_user_config({"model_id": self._model_id}, "model")
        aws = {"profile": self._aws_profile, "region": self._aws_region}
        manager.set_user_config({k: v for k, v in aws.items() if v}, "aws")
        return manager


# Create a singleton instance
config = Config()
