# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
View modules for the DocWise Streamlit Application.

These modules handle displaying the results of document processing.
"""
