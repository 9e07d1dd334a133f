# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Document processors for the DocWise Streamlit Application.

These modules run uploaded documents through the accessibility pipeline.
"""
