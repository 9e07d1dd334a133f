# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Command-line interface for the docwise package.

This module provides commands to make a local document accessible, to run
only the client-side extraction step, and to convert accessible HTML into a
download format.
"""

import os
import sys
import argparse
import logging
import json
from typing import Any, Dict, List, Optional

from docwise import __version__
from docwise.api import process_local_file
from docwise.export.converters import EXPORT_FORMATS, download_filename, export_document
from docwise.extract.text_extractor import extract_text_from_file
from docwise.utils.logging_helper import (
    setup_logger,
    ConfigurationError,
    DocumentAccessibilityError,
)
from docwise.utils.config import config_manager, load_config_file, save_config

# Set up module-level logger
logger = setup_logger(__name__)

CONFIG_SECTIONS = ["model", "storage", "processing", "export", "aws"]


def configure_logging(debug: bool = False, quiet: bool = False) -> None:
    """Configure logging based on debug and quiet flags."""
    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(level=level)
    logging.getLogger().setLevel(level)
    for name in list(logging.Logger.manager.loggerDict):
        if name.startswith("docwise"):
            logging.getLogger(name).setLevel(level)


def _add_standardized_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments that are common across all commands."""
    parser.add_argument("--input", "-i", required=True, help="Input file path")
    parser.add_argument(
        "--output",
        "-o",
        help="Output directory. Defaults to the current directory",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only print the JSON result, suppress other output",
    )
    parser.add_argument("--config", "-c", help="Path to configuration file")
    parser.add_argument(
        "--save-config",
        metavar="CONFIG_PATH",
        help="Save current configuration to the specified file path",
    )


def _add_format_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        "-f",
        choices=sorted(EXPORT_FORMATS),
        default=None,
        help="Download format for the accessible document (default: pdf)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="docwise",
        description="Make PDF, Word and PowerPoint documents accessible with a hosted AI model.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")

    process_parser = subparsers.add_parser(
        "process", help="Convert a document into accessible HTML and export it"
    )
    _add_standardized_arguments(process_parser)
    _add_format_argument(process_parser)
    process_parser.add_argument("--model-id", help="Bedrock model ID to use")
    process_parser.add_argument("--profile", help="AWS profile name to use for credentials")
    process_parser.add_argument("--region", help="AWS region of the Bedrock endpoint")

    extract_parser = subparsers.add_parser(
        "extract", help="Run local text extraction only and print the result"
    )
    _add_standardized_arguments(extract_parser)

    export_parser = subparsers.add_parser(
        "export", help="Convert an accessible HTML file into another format"
    )
    _add_standardized_arguments(export_parser)
    _add_format_argument(export_parser)

    return parser


def apply_config_file(config_path: str) -> None:
    """
    Load a configuration file into the shared configuration manager.

    Raises:
        ConfigurationError: If the file cannot be loaded
    """
    logger.info(f"Loading configuration from {config_path}")
    config_data = load_config_file(config_path)

    for section in CONFIG_SECTIONS:
        if isinstance(config_data.get(section), dict):
            config_manager.set_user_config(config_data[section], section)
            logger.debug(f"Applied configuration for section: {section}")


def apply_argument_overrides(args: Dict[str, Any]) -> None:
    """Push command-line overrides into the configuration manager."""
    if args.get("model_id"):
        config_manager.set_user_config({"model_id": args["model_id"]}, "model")
    aws_overrides = {
        key: args[key] for key in ("profile", "region") if args.get(key)
    }
    if aws_overrides:
        config_manager.set_user_config(aws_overrides, "aws")


def save_configuration_from_args(args: Dict[str, Any]) -> None:
    """
    Save the resolved configuration when --save-config is given.

    Args:
        args: Dictionary of command-line arguments
    """
    config_path = args.get("save_config")
    if not config_path:
        return

    file_format = "json" if config_path.lower().endswith(".json") else "yaml"
    config = {
        section: config_manager.get_config(section=section) for section in CONFIG_SECTIONS
    }
    save_config(config, config_path, file_format)
    if not args.get("quiet"):
        print(f"Configuration saved to {config_path}")


def _resolve_format(args: Dict[str, Any]) -> str:
    return args.get("format") or config_manager.get_config(section="export")["default_format"]


def _write_export(content: str, source_name: str, fmt: str, output_dir: str) -> str:
    data, _ = export_document(content, fmt)
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, download_filename(source_name, fmt))
    with open(path, "wb") as f:
        f.write(data)
    return path


def run_process_command(args: Dict[str, Any]) -> int:
    """Run the full pipeline on a local file."""
    output_dir = args.get("output") or "."
    fmt = _resolve_format(args)

    result = process_local_file(args["input"], output_dir=output_dir)
    export_path = _write_export(
        result["accessible_content"], os.path.basename(args["input"]), fmt, output_dir
    )

    summary = {
        "input": args["input"],
        "summary": result["summary"],
        "html_path": result.get("html_path"),
        "export_path": export_path,
        "format": fmt,
        "usage_data_path": result.get("usage_data_path"),
    }
    print(json.dumps(summary, indent=2))
    return 0


def run_extract_command(args: Dict[str, Any]) -> int:
    """Print what client-side extraction makes of a file."""
    with open(args["input"], "rb") as f:
        data = f.read()

    result = extract_text_from_file(os.path.basename(args["input"]), data)
    print(
        json.dumps(
            {
                "content_type": result.content_type,
                "requires_backend": result.requires_backend,
                "text": result.text,
            },
            indent=2,
        )
    )
    return 0


def run_export_command(args: Dict[str, Any]) -> int:
    """Convert an accessible HTML file into the requested format."""
    with open(args["input"], "r", encoding="utf-8") as f:
        content = f.read()

    fmt = _resolve_format(args)
    base_name = os.path.basename(args["input"])
    # Avoid "report_accessible_accessible.pdf" when re-exporting our own output
    if base_name.endswith("_accessible.html"):
        base_name = base_name[: -len("_accessible.html")] + ".html"

    path = _write_export(content, base_name, fmt, args.get("output") or ".")
    print(json.dumps({"input": args["input"], "export_path": path, "format": fmt}, indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed = parser.parse_args(argv)

    if parsed.version:
        print(f"DocWise v{__version__}")
        return 0

    if parsed.command is None:
        parser.print_help()
        return 0

    configure_logging(debug=parsed.debug, quiet=parsed.quiet)
    args = vars(parsed)

    try:
        if args.get("config"):
            apply_config_file(args["config"])
        apply_argument_overrides(args)
        save_configuration_from_args(args)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        if args["command"] == "process":
            return run_process_command(args)
        if args["command"] == "extract":
            return run_extract_command(args)
        if args["command"] == "export":
            return run_export_command(args)
    except (DocumentAccessibilityError, OSError) as e:
        logger.error(f"Error in processing pipeline: {e}")
        if not args.get("quiet"):
            print(f"Error: {e}", file=sys.stderr)
        return 1

    print("No command specified", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
