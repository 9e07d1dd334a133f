# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
AWS utilities for the DocWise Streamlit application.
"""

import streamlit as st

def display_aws_warning() -> None:
    """Display a warning about missing AWS configuration."""
    st.warning(
        """
        ⚠️ AWS S3 bucket is not configured. Document processing stores uploads and results in S3.

        Please set the following environment variables:
        - DOCWISE_S3_BUCKET: Your S3 bucket name
        - DOCWISE_MODEL_ID: Bedrock model ID (optional)
        - AWS_PROFILE / AWS_REGION: Credentials and region for Bedrock and S3 (optional)
        """
    )

    st.error(
        """
        ## AWS Resources Required

        Making a document accessible requires:

        1. **S3 Bucket**: Storage for uploads and processed documents
        2. **Amazon Bedrock access**: The model that rewrites the document

        Configure these with environment variables and restart the app:
        ```bash
        export DOCWISE_S3_BUCKET=your-bucket-name
        export AWS_REGION=us-east-1
        ```
        """
    )
