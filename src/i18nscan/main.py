"""
Main entry point for i18nscan.

This module sets up logging, loads the configuration and dispatches the
``scan``, ``validate``, ``init`` and ``stats`` commands. Ctrl-C during a scan
cancels it gracefully: files that finished are kept and still written out.
"""

import asyncio
import json
import logging
import logging.handlers
import signal
import sys
import threading
from pathlib import Path

import yaml
from pydantic import ValidationError

from .config.manager import ConfigManager
from .config.schema import ScannerConfig
from .diagnostics import Diagnostic, DiagnosticSeverity
from .discovery import discover_source_files
from .output.translations import filter_untranslated, load_translations
from .output.writers import write_catalog
from .scanner import Scanner, ScanResult, ScanSummary
from .utils.cli.args import ParsedArgs, parse_arguments
from .utils.core.exceptions import ConfigurationError, I18nScanError

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

EXAMPLE_GO_SOURCE = """\
package main

import (
	"fmt"

	"github.com/example/i18n"
)

func main() {
	fmt.Println(t("你好，世界！"))
	fmt.Println(i18n.T("欢迎使用i18n扫描器"))
	Translate("这是一个测试消息")
}

func showMessage() {
	msg := t("用户" + "登录成功")
	fmt.Println(msg)
}
"""

EXAMPLE_TRANSLATIONS = {
    "你好，世界！": "Hello, World!",
    "欢迎使用i18n扫描器": "Welcome to i18n Scanner",
}


def setup_logging(
    verbose: bool = False, ci_mode: bool = False, log_file: Path | None = None
) -> None:
    """
    Configure console logging and an optional rotating log file.

    Args:
        verbose: Enable debug output
        ci_mode: Use the compact ``::level::message`` format understood by CI runners
        log_file: Additionally log everything to this file with size-based rotation
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    root_logger.handlers.clear()

    if ci_mode:
        console_formatter = logging.Formatter("::%(levelname)s::%(message)s")
    else:
        console_formatter = logging.Formatter(
            "%(asctime)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        _ = log_file.parent.mkdir(parents=True, exist_ok=True)
        # File handler with rotation (5MB max, keep 3 backups)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
            )
        )
        root_logger.addHandler(file_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


def load_configuration(config_file: Path | None) -> tuple[ScannerConfig, Path]:
    """
    Find and load the configuration file.

    Raises:
        ConfigurationError: If no file is found or it fails to load
    """
    config_path = config_file or ConfigManager.find_config_file()
    try:
        config = ConfigManager.load_config(config_path)
    except FileNotFoundError as e:
        raise ConfigurationError(str(e), user_message=f"Configuration file not found: {config_path}") from e
    except (yaml.YAMLError, ValueError) as e:
        # ValidationError is a ValueError as well
        raise ConfigurationError(
            f"Invalid configuration in {config_path}: {e}",
            context=config_path,
        ) from e

    logger.debug(f"Loaded configuration from {config_path}")
    return config, config_path


def apply_overrides(config: ScannerConfig, args: ParsedArgs) -> ScannerConfig:
    """Apply command-line overrides on top of the file configuration."""
    scan_updates: dict[str, object] = {}
    if args.workers is not None:
        scan_updates["max_workers"] = args.workers
    if args.report_misses:
        scan_updates["report_no_literal"] = True

    output_updates: dict[str, object] = {}
    if args.output is not None:
        output_updates["output_file"] = str(args.output.resolve())
    if args.output_format is not None:
        output_updates["format"] = args.output_format

    return config.model_copy(
        update={
            "scan_config": config.scan_config.model_copy(update=scan_updates),
            "output_config": config.output_config.model_copy(update=output_updates),
        }
    )


def log_diagnostic(diagnostic: Diagnostic) -> None:
    match diagnostic.severity:
        case DiagnosticSeverity.ERROR:
            logger.error(str(diagnostic))
        case DiagnosticSeverity.WARNING:
            logger.warning(str(diagnostic))
        case DiagnosticSeverity.INFO:
            logger.info(str(diagnostic))


def format_summary(summary: ScanSummary, final_terms: int) -> list[str]:
    return [
        "Scan summary:",
        f"  Files found:       {summary.total_files}",
        f"  Files processed:   {summary.processed_files}",
        f"  Files failed:      {summary.failed_files}",
        f"  Files skipped:     {summary.skipped_files}",
        f"  Terms extracted:   {summary.total_terms}",
        f"  Unique keys:       {summary.unique_keys}",
        f"  Untranslated keys: {final_terms}",
        f"  Lexical errors:    {summary.lex_errors}",
        f"  Calls w/o literal: {summary.no_literal_calls}",
    ]


async def scan_with_interrupt(
    scanner: Scanner, files: list[Path], cancel_event: threading.Event
) -> ScanResult:
    """
    Run a scan, turning SIGINT into a graceful cancellation.

    The first Ctrl-C sets ``cancel_event``: no new files are started and the
    result of the files that completed is returned.
    """
    loop = asyncio.get_running_loop()
    installed = False

    def on_interrupt() -> None:
        logger.warning("Interrupt received, finishing up and writing partial results...")
        cancel_event.set()

    try:
        loop.add_signal_handler(signal.SIGINT, on_interrupt)
        installed = True
    except (NotImplementedError, RuntimeError):
        # Not supported on this platform or outside the main thread
        logger.debug("SIGINT handler not installed, Ctrl-C will abort the scan")

    try:
        return await scanner.scan(files, cancel_event)
    finally:
        if installed:
            _ = loop.remove_signal_handler(signal.SIGINT)


def run_scan(args: ParsedArgs, write_output: bool = True) -> int:
    """
    Execute the ``scan`` (and ``stats``) command.

    Returns:
        Exit code
    """
    config, config_path = load_configuration(args.config_file)
    config = apply_overrides(config, args)

    files = discover_source_files(config.scan_config)
    if not files:
        logger.warning(f"No source files found for the directories listed in {config_path}")

    scanner = Scanner.from_config(config)
    cancel_event = threading.Event()
    result = asyncio.run(scan_with_interrupt(scanner, files, cancel_event))

    for diagnostic in result.diagnostics:
        log_diagnostic(diagnostic)

    catalog = result.catalog
    if not args.include_translated:
        translated_file = config.get_translated_file()
        if translated_file:
            translations = load_translations(Path(translated_file))
            catalog = filter_untranslated(catalog, translations)

    if write_output and not args.no_output:
        output_config = config.output_config
        _ = write_catalog(
            catalog,
            Path(output_config.output_file),
            output_config.format,
            include_location=output_config.include_location,
            summary=result.summary,
        )

    summary_lines = format_summary(result.summary, len(catalog))
    if write_output:
        for line in summary_lines:
            logger.info(line)
    else:
        print("\n".join(summary_lines))

    if result.cancelled:
        logger.warning("Scan was cancelled, results are incomplete")
        return EXIT_INTERRUPTED

    if args.fail_on_untranslated and len(catalog) > 0:
        logger.error(f"Found {len(catalog)} untranslated string(s)")
        return EXIT_ERROR

    return EXIT_OK


def run_validate(args: ParsedArgs) -> int:
    config_path = args.config_file or ConfigManager.find_config_file()
    if ConfigManager.validate_config_file(config_path):
        logger.info(f"Configuration file {config_path} is valid")
        return EXIT_OK
    return EXIT_ERROR


def example_paths(base_dir: Path) -> tuple[Path, Path]:
    """Return the example Go source file and translation file locations."""
    return base_dir / "src" / "main.go", base_dir / "locales" / "zh-CN.json"


def ensure_writable(paths: tuple[Path, ...], force: bool) -> None:
    """
    Refuse to overwrite existing files unless forced.

    Raises:
        ConfigurationError: If a file exists and ``force`` is not set
    """
    for path in paths:
        if path.exists() and not force:
            raise ConfigurationError(
                f"File already exists: {path}",
                user_message=f"{path} already exists, use --force to overwrite it",
            )


def create_example_project(base_dir: Path, force: bool = False) -> list[Path]:
    """
    Write an example Go source file and translation file.

    Args:
        base_dir: Directory holding the configuration file
        force: Overwrite existing files

    Returns:
        The files that were written

    Raises:
        ConfigurationError: If a file exists and ``force`` is not set
    """
    source_file, translations_file = example_paths(base_dir)
    ensure_writable((source_file, translations_file), force)

    _ = source_file.parent.mkdir(parents=True, exist_ok=True)
    _ = source_file.write_text(EXAMPLE_GO_SOURCE, encoding="utf-8")

    _ = translations_file.parent.mkdir(parents=True, exist_ok=True)
    _ = translations_file.write_text(
        json.dumps(EXAMPLE_TRANSLATIONS, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return [source_file, translations_file]


def run_init(args: ParsedArgs) -> int:
    config_path = args.config_file or (Path.cwd() / "ci.yaml")
    if args.example:
        # Check the example files before the configuration is written
        ensure_writable(example_paths(config_path.parent), args.force)

    _ = ConfigManager.create_default_config(config_path, force=args.force)
    _ = (config_path.parent / "locales").mkdir(parents=True, exist_ok=True)

    if args.example:
        for path in create_example_project(config_path.parent, force=True):
            logger.info(f"Created {path}")
        logger.info(f"Example project ready, run: i18nscan scan -c {config_path}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the i18nscan command.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error, 130 when interrupted)
    """
    args = parse_arguments(argv)
    setup_logging(args.verbose, args.ci_mode, args.log_file)

    try:
        match args.command:
            case "scan":
                return run_scan(args)
            case "stats":
                return run_scan(args, write_output=False)
            case "validate":
                return run_validate(args)
            case "init":
                return run_init(args)
            case _:
                logger.error(f"Unknown command: {args.command}")
                return EXIT_ERROR
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return EXIT_INTERRUPTED
    except I18nScanError as e:
        logger.error(e.user_message)
        if args.verbose:
            logger.exception("Full traceback:")
        return EXIT_ERROR
    except (ValidationError, OSError) as e:
        logger.error(f"i18nscan failed: {e}")
        if args.verbose:
            logger.exception("Full traceback:")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
