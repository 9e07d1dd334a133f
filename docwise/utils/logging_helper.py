# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Error handling utilities for the docwise package.

This module provides the exception hierarchy used across extraction, model
invocation, storage and export, together with logger setup and exception
logging helpers.
"""

import logging
import sys
from typing import Optional, Type, Dict, Any


class DocumentAccessibilityError(Exception):
    """Base exception class for all docwise errors."""



class ConfigurationError(DocumentAccessibilityError):
    """Raised when there's an error in configuration."""



class ExtractionError(DocumentAccessibilityError):
    """Raised when text cannot be extracted from a document."""



class ModelInvocationError(DocumentAccessibilityError):
    """Raised when the generative model cannot produce a usable response."""



class ServiceBusyError(ModelInvocationError):
    """Raised when the model service rejects calls because of quota or throttling."""



class StorageError(DocumentAccessibilityError):
    """Raised when there's an error reading or writing object storage."""



class InvalidRequestError(DocumentAccessibilityError):
    """Raised when a processing request carries no usable input."""



class ExportError(DocumentAccessibilityError):
    """Raised when processed content cannot be converted to a download format."""



# Configure module-level logger
logger = logging.getLogger(__name__)


def setup_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Set up a logger with standardized formatting.

    Args:
        name: The logger name, typically __name__ of the calling module
        level: The logging level (default: INFO if not in debug mode)

    Returns:
        A configured logger instance
    """
    logger_obj = logging.getLogger(name)

    if level is None:
        # Check if root logger is in debug mode (set by --debug flag)
        if logging.getLogger().level <= logging.DEBUG:
            level = logging.DEBUG
        else:
            level = logging.INFO

        logger.debug(f"Setting logger {name} level to {logging.getLevelName(level)}")

    # Always set the level explicitly to override inheritance
    logger_obj.setLevel(level)
    logger_obj.propagate = True

    if not logger_obj.handlers:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger_obj.addHandler(handler)

    return logger_obj


def log_exception(
    logger: logging.Logger,
    exception: Exception,
    message: str = "An error occurred",
    level: int = logging.ERROR,
    include_traceback: bool = True,
) -> None:
    """
    Log an exception with consistent formatting.

    Args:
        logger: The logger instance to use
        exception: The exception to log
        message: Optional custom message
        level: The logging level to use
        include_traceback: Whether to include the full traceback
    """
    error_type = type(exception).__name__
    error_message = str(exception)

    log_msg = f"{message}: {error_type} - {error_message}"

    if include_traceback:
        logger.log(level, log_msg, exc_info=True)
    else:
        logger.log(level, log_msg)


def handle_exception(
    exc: Exception,
    logger: logging.Logger,
    custom_message: str = None,
    reraise: bool = True,
    custom_exception: Type[Exception] = None,
    additional_data: Dict[str, Any] = None,
) -> Optional[Dict[str, Any]]:
    """
    Standardized exception handling.

    Args:
        exc: The caught exception
        logger: Logger to use for recording the error
        custom_message: Optional message to include
        reraise: Whether to reraise the exception (possibly wrapped)
        custom_exception: Exception type to raise instead of original
        additional_data: Additional context data to include

    Returns:
        If reraise is False, returns error information as a dict

    Raises:
        The original exception or a wrapped custom exception if reraise is True
    """
    message = custom_message if custom_message else str(exc)

    log_exception(logger, exc, message)

    error_info = {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
        "original_exception": exc,
    }

    if additional_data:
        error_info.update(additional_data)

    if reraise:
        if custom_exception:
            raise custom_exception(message) from exc
        raise exc

    return error_info
