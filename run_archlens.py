#!/usr/bin/env python3
"""
Command-line entry point for C# structural model extraction.

Walks a C# source tree, extracts classes and interfaces with their members,
documentation summaries, dependencies and inheritance, and writes the model
as JSON for the class-diagram viewer.

Usage:
    archlens ./src
    archlens ./App.sln --output out/model.json
    archlens ./src --include App.* --exclude *.Tests *.Migrations
    archlens ./src --config archlens.yaml --workers 4 --report-dir out/reports
"""

import argparse
import dataclasses
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from core.run_artifacts import build_run_report, write_run_report
from core.run_config import (
    ENV_LOG_LEVEL,
    LOG_LEVELS,
    ConfigValidationError,
    RunConfig,
    load_run_config,
    resolve_strict_config_validation,
)
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id
from extraction.errors import FileParseError, InputNotFoundError, UnsupportedInputKindError
from extraction.extractor import extract_input
from extraction.serialization import to_json, write_json

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        prog="archlens",
        description="C# class/interface model extraction for dependency diagrams",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  archlens ./src\n"
            "  archlens ./App.sln --output out/model.json\n"
            "  archlens ./src --include App.* --exclude *.Tests\n"
        )
    )

    parser.add_argument(
        "input",
        help="Directory to scan, or a .csproj/.sln file whose directory is scanned."
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write JSON to this file instead of standard output."
    )
    parser.add_argument(
        "--include",
        nargs="*",
        action="extend",
        default=None,
        metavar="NS",
        help="Namespace patterns to include ('*' is a wildcard). Default: all."
    )
    parser.add_argument(
        "--exclude",
        nargs="*",
        action="extend",
        default=None,
        metavar="NS",
        help="Namespace patterns to exclude. Exclusion wins over inclusion."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML or JSON config file (default: $ARCHLENS_CONFIG)."
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of files extracted in parallel. Default: 1."
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        default=False,
        help="Abort on the first file that cannot be parsed."
    )
    parser.add_argument(
        "--reject-syntax-errors",
        action="store_true",
        default=False,
        help="Treat files with syntax errors as parse failures."
    )
    parser.add_argument(
        "--positional-inheritance",
        action="store_true",
        default=False,
        help=(
            "Always treat the first base-list entry as the base class, even when "
            "it names an interface declared in the scanned sources."
        )
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="Write a JSON run report into this directory."
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO)."
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=False,
        help="Fail on invalid configuration instead of falling back to defaults."
    )

    return parser.parse_args(argv)


def apply_cli_overrides(config: RunConfig, args: argparse.Namespace) -> RunConfig:
    """Layer command-line arguments over file/environment settings."""
    updates = {}
    if args.include:
        updates["include"] = tuple(args.include)
    if args.exclude:
        updates["exclude"] = tuple(args.exclude)
    if args.output:
        updates["output"] = args.output
    if args.workers is not None:
        if args.workers < 1:
            raise ConfigValidationError(f"--workers must be at least 1, got {args.workers}")
        updates["max_workers"] = args.workers
    if args.fail_fast:
        updates["continue_on_error"] = False
    if args.reject_syntax_errors:
        updates["reject_syntax_errors"] = True
    if args.positional_inheritance:
        updates["resolve_interface_bases"] = False
    if args.report_dir:
        updates["report_dir"] = args.report_dir
    if args.log_level:
        updates["log_level"] = args.log_level
    return dataclasses.replace(config, **updates)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    load_dotenv()
    args = parse_args(argv)

    configure_structured_logging(args.log_level or os.getenv(ENV_LOG_LEVEL) or logging.INFO)
    run_id = set_run_id()

    strict = args.strict_config or resolve_strict_config_validation()
    try:
        with phase_scope("config"):
            config = load_run_config(args.config, strict=strict)
            config = apply_cli_overrides(config, args)
    except ConfigValidationError as e:
        logger.error("Configuration error: %s", e)
        return 1

    configure_structured_logging(config.log_level)
    logger.debug("Effective config: %s", config)

    try:
        with phase_scope("extract"):
            result, stats = extract_input(
                args.input,
                config.include,
                config.exclude,
                continue_on_error=config.continue_on_error,
                max_workers=config.max_workers,
                reject_syntax_errors=config.reject_syntax_errors,
                resolve_interface_bases=config.resolve_interface_bases,
            )
    except (InputNotFoundError, UnsupportedInputKindError) as e:
        logger.error("%s", e)
        return 1
    except FileParseError as e:
        logger.error("Aborting run: %s", e)
        return 1

    with phase_scope("serialize"):
        if config.output:
            try:
                write_json(result, config.output)
            except OSError as e:
                logger.error("Cannot write output file %s: %s", config.output, e)
                return 1
        else:
            sys.stdout.write(to_json(result))
            sys.stdout.write("\n")
            sys.stdout.flush()

    if config.report_dir:
        status = "success" if stats.files_failed == 0 else "partial"
        report = build_run_report(stats, args.input, config.output, status)
        path = write_run_report(report, run_id, config.report_dir)
        logger.info("Run report written to %s", path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
