"""
Command-line argument parsing for i18nscan.

This module builds the argparse parser with the ``scan``, ``validate``,
``init`` and ``stats`` sub-commands and converts the result into a typed
container.
"""

import argparse
import sys
from pathlib import Path
from typing import NamedTuple

from ...output.writers import SUPPORTED_FORMATS
from ..core.version import get_version


class PathValidationError(Exception):
    """Raised when a path validation fails."""

    pass


class ParsedArgs(NamedTuple):
    """Container for parsed command-line arguments."""

    command: str
    config_file: Path | None
    output: Path | None
    output_format: str | None
    include_translated: bool
    no_output: bool
    fail_on_untranslated: bool
    workers: int | None
    report_misses: bool
    force: bool
    example: bool
    verbose: bool
    ci_mode: bool
    log_file: Path | None


def validate_config_file_path(config_file_str: str) -> Path:
    """
    Validate configuration file path.

    Args:
        config_file_str: String path to configuration file

    Returns:
        Resolved Path object for the configuration file

    Raises:
        PathValidationError: If the configuration file path is invalid
    """
    try:
        # Expand tilde if present, then resolve
        config_file = Path(config_file_str).expanduser().resolve()
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid config file path: {e}") from e

    if config_file.exists() and config_file.is_dir():
        raise PathValidationError(
            f"Config file path exists but is not a file: {config_file}"
        )

    if not config_file.parent.exists():
        raise PathValidationError(
            f"Parent directory for config file does not exist: {config_file.parent}"
        )

    return config_file


def positive_int(value: str) -> int:
    """argparse type for worker counts."""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from e
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _add_global_options(parser: argparse.ArgumentParser, suppress: bool) -> None:
    # Sub-parsers use SUPPRESS so they don't overwrite values given before the command
    default_false: object = argparse.SUPPRESS if suppress else False
    default_none: object = argparse.SUPPRESS if suppress else None

    _ = parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default_false,
        help="Enable verbose logging",
    )
    _ = parser.add_argument(
        "--ci-mode",
        action="store_true",
        default=default_false,
        help="Enable CI/CD mode with compact, annotation-style log output",
    )
    _ = parser.add_argument(
        "--log-file",
        type=str,
        default=default_none,
        metavar="PATH",
        help="Also write detailed logs to a rotating log file",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    _ = parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="Path to the configuration file (default: search ci.yaml, ci.yml, ...)",
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for i18nscan.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="i18nscan",
        description="Extract translatable strings from translation-function calls in Go sources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  i18nscan init --example
    Create ci.yaml, a sample main.go and locales/zh-CN.json

  i18nscan scan
    Scan using the ci.yaml found in the current directory

  i18nscan scan -c config/ci.yaml --format pot -o locale/messages.pot
    Write a gettext template instead of JSON

  i18nscan --ci-mode scan --fail-on-untranslated
    Fail the build when untranslated strings are found
""",
    )
    _add_global_options(parser, suppress=False)
    _ = parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    scan = subparsers.add_parser("scan", help="Scan source files and write the catalog")
    _add_config_option(scan)
    _add_global_options(scan, suppress=True)
    _ = scan.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        metavar="PATH",
        help="Output file (overrides output_config.output_file)",
    )
    _ = scan.add_argument(
        "--format",
        dest="output_format",
        choices=SUPPORTED_FORMATS,
        default=None,
        help="Output format (overrides output_config.format)",
    )
    _ = scan.add_argument(
        "--include-translated",
        action="store_true",
        help="Keep strings that already have a translation",
    )
    _ = scan.add_argument(
        "--no-output",
        action="store_true",
        help="Do not write the output file",
    )
    _ = scan.add_argument(
        "--fail-on-untranslated",
        action="store_true",
        help="Exit with status 1 if untranslated strings are found",
    )
    _ = scan.add_argument(
        "--workers",
        type=positive_int,
        default=None,
        metavar="N",
        help="Number of files scanned concurrently (default: CPU count)",
    )
    _ = scan.add_argument(
        "--report-misses",
        action="store_true",
        help="Report translation calls without a string literal argument",
    )

    validate = subparsers.add_parser("validate", help="Validate the configuration file")
    _add_config_option(validate)
    _add_global_options(validate, suppress=True)

    init = subparsers.add_parser("init", help="Create a default configuration file")
    _add_config_option(init)
    _add_global_options(init, suppress=True)
    _ = init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing configuration file",
    )
    _ = init.add_argument(
        "--example",
        action="store_true",
        help="Also create an example Go file and translation file",
    )

    stats = subparsers.add_parser("stats", help="Scan and print statistics without writing output")
    _add_config_option(stats)
    _add_global_options(stats, suppress=True)

    return parser


def parse_arguments(args: list[str] | None = None) -> ParsedArgs:
    """
    Parse command-line arguments.

    Args:
        args: List of arguments to parse (defaults to sys.argv[1:])

    Returns:
        ParsedArgs containing validated and resolved paths

    Raises:
        SystemExit: If argument parsing fails, path validation fails or
            --help is requested
    """
    parser = create_argument_parser()
    parsed = parser.parse_args(args)

    # Use getattr so every sub-command can be handled by one container
    command: str = getattr(parsed, "command")
    config_str: str | None = getattr(parsed, "config", None)
    output_str: str | None = getattr(parsed, "output", None)
    log_file_str: str | None = getattr(parsed, "log_file", None)

    try:
        config_file = validate_config_file_path(config_str) if config_str else None
    except PathValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    return ParsedArgs(
        command=command,
        config_file=config_file,
        output=Path(output_str).expanduser() if output_str else None,
        output_format=getattr(parsed, "output_format", None),
        include_translated=getattr(parsed, "include_translated", False),
        no_output=getattr(parsed, "no_output", False),
        fail_on_untranslated=getattr(parsed, "fail_on_untranslated", False),
        workers=getattr(parsed, "workers", None),
        report_misses=getattr(parsed, "report_misses", False),
        force=getattr(parsed, "force", False),
        example=getattr(parsed, "example", False),
        verbose=getattr(parsed, "verbose", False),
        ci_mode=getattr(parsed, "ci_mode", False),
        log_file=Path(log_file_str).expanduser() if log_file_str else None,
    )
