# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
UI helper modules for the DocWise Streamlit Application.

These modules provide helper functions for HTML previews, download buttons
and narration.
"""
