"""
Scan driver for i18nscan.

This module is the public entry point of the extraction engine. It runs the
per-file pipeline (lexer, call matcher, argument resolver) over a list of
files and merges the results into a single catalog.

Architecture:
- Files are extracted in parallel worker tasks bounded by ``max_workers``
- The CPU-bound per-file work runs in threads via asyncio.to_thread()
- Results are collected by file index and merged sequentially in file-list
  order, so the catalog never depends on completion order
- A failure in one file becomes a diagnostic and never stops the others
- A cancellation event stops dispatching new files; files already running
  abort at the next call boundary and the partial result is returned with a
  cancellation diagnostic

Usage Examples:
    >>> from i18nscan.scanner import SourceFile, scan_files
    >>> result = scan_files([SourceFile("a.go", 't("hi")')], ["t", "i18n.T"])
    >>> result.catalog.keys()
    ['hi']
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticSeverity
from .extraction.catalog import Catalog, CatalogBuilder
from .extraction.lexer import Lexer
from .extraction.matcher import CallMatcher, CallSignature, parse_signature
from .extraction.resolver import ExtractionOutcome, ExtractionResult, resolve_call
from .extraction.script_filter import ScriptFilter
from .extraction.tokens import TokenKind
from .utils.core.exceptions import ScanCancelledError

if TYPE_CHECKING:
    from .config.schema import ScannerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A file to scan, optionally with its contents already in memory."""

    path: str
    content: bytes | str | None = None

    @classmethod
    def coerce(cls, item: SourceFile | str | Path) -> SourceFile:
        if isinstance(item, SourceFile):
            return item
        return cls(str(item))

    def read(self) -> bytes | str:
        """Return the in-memory content, or the file's bytes from disk."""
        if self.content is not None:
            return self.content
        return Path(self.path).read_bytes()


@dataclass(slots=True)
class FileExtraction:
    """Everything one file contributed to a scan."""

    path: str
    results: list[ExtractionResult] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    token_count: int = 0
    call_count: int = 0
    no_literal_count: int = 0
    failed: bool = False


@dataclass(frozen=True, slots=True)
class ScanSummary:
    """Counters describing a completed scan."""

    total_files: int
    processed_files: int
    failed_files: int
    skipped_files: int
    total_terms: int
    unique_keys: int
    lex_errors: int
    no_literal_calls: int


@dataclass(frozen=True, slots=True)
class ScanResult:
    """The finalized catalog plus every diagnostic produced by the scan."""

    catalog: Catalog
    diagnostics: tuple[Diagnostic, ...]
    summary: ScanSummary
    cancelled: bool = False

    @property
    def has_errors(self) -> bool:
        return any(d.severity is DiagnosticSeverity.ERROR for d in self.diagnostics)


def extract_source(
    source: SourceFile,
    matcher: CallMatcher,
    *,
    report_no_literal: bool = False,
    script_filter: ScriptFilter | None = None,
    cancel_event: threading.Event | None = None,
) -> FileExtraction:
    """
    Run the lexer, matcher and resolver over a single file.

    Args:
        source: File to scan
        matcher: Matcher configured with the translation signatures
        report_no_literal: Report calls without literal content as diagnostics
        script_filter: Optional filter a key must pass to be kept
        cancel_event: Checked between calls to abort a cancelled scan early

    Returns:
        The file's extraction results and diagnostics

    Raises:
        ScanCancelledError: If ``cancel_event`` was set while the file was scanned
    """
    extraction = FileExtraction(path=source.path)

    try:
        content = source.read()
    except OSError as e:
        logger.warning(f"Could not read {source.path}: {e}")
        extraction.failed = True
        extraction.diagnostics.append(
            Diagnostic(
                source.path,
                None,
                DiagnosticSeverity.ERROR,
                DiagnosticKind.READ_ERROR,
                f"Could not read file: {e}",
            )
        )
        return extraction

    tokens = Lexer(content, source.path).tokenize()
    extraction.token_count = len(tokens)
    for token in tokens:
        if token.kind is TokenKind.ERROR:
            extraction.diagnostics.append(
                Diagnostic(
                    source.path,
                    token.position,
                    DiagnosticSeverity.ERROR,
                    DiagnosticKind.LEX_ERROR,
                    token.error or "lexical error",
                )
            )

    calls = matcher.match(tokens)
    extraction.call_count = len(calls)

    for call in calls:
        if cancel_event is not None and cancel_event.is_set():
            raise ScanCancelledError(source.path)

        result = resolve_call(call)
        if result.outcome is ExtractionOutcome.NO_LITERAL:
            extraction.no_literal_count += 1
            if report_no_literal:
                extraction.diagnostics.append(
                    Diagnostic(
                        source.path,
                        call.position,
                        DiagnosticSeverity.WARNING,
                        DiagnosticKind.NO_LITERAL_ARGUMENT,
                        f"{call.callee}() called without a string literal argument",
                    )
                )
            continue

        if not result.text:
            if report_no_literal:
                extraction.diagnostics.append(
                    Diagnostic(
                        source.path,
                        call.position,
                        DiagnosticSeverity.INFO,
                        DiagnosticKind.EMPTY_KEY,
                        f"{call.callee}() called with an empty string",
                    )
                )
            continue

        if script_filter is not None and not script_filter.accepts(result.text):
            continue

        extraction.results.append(result)

    extraction.diagnostics.sort(key=lambda d: d.position.offset if d.position else -1)
    logger.debug(
        f"{source.path}: {extraction.token_count} tokens, {extraction.call_count} calls, "
        + f"{len(extraction.results)} terms"
    )
    return extraction


class Scanner:
    """
    Orchestrates extraction over many files.

    The scanner holds the read-only call signatures and options; it keeps no
    state between scans and can be reused.
    """

    def __init__(
        self,
        signatures: Iterable[CallSignature | str],
        *,
        report_no_literal: bool = False,
        max_workers: int | None = None,
        script_filter: ScriptFilter | None = None,
    ) -> None:
        """
        Initialize the scanner.

        Args:
            signatures: Translation function signatures, or configuration
                strings such as ``"t"`` and ``"i18n.T"``
            report_no_literal: Report calls without literal content
            max_workers: Maximum number of files extracted concurrently,
                defaults to the number of available CPUs
            script_filter: Optional filter a key must pass to be kept

        Raises:
            ValueError: If a signature string is invalid or ``max_workers`` < 1
        """
        parsed = [
            parse_signature(signature) if isinstance(signature, str) else signature
            for signature in signatures
        ]
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        self.matcher: CallMatcher = CallMatcher(parsed)
        self.report_no_literal: bool = report_no_literal
        self.max_workers: int = max_workers or os.cpu_count() or 1
        self.script_filter: ScriptFilter | None = script_filter

    @classmethod
    def from_config(cls, config: ScannerConfig) -> Scanner:
        """Build a scanner from a validated configuration."""
        detection = config.chinese_detection
        script_filter = (
            ScriptFilter(detection.unicode_ranges, detection.min_chinese_chars)
            if detection.enabled
            else None
        )
        return cls(
            [function.name for function in config.i18n_functions],
            report_no_literal=config.scan_config.report_no_literal,
            max_workers=config.scan_config.max_workers,
            script_filter=script_filter,
        )

    def extract(
        self, source: SourceFile, cancel_event: threading.Event | None = None
    ) -> FileExtraction:
        """Extract one file, turning unexpected failures into a diagnostic."""
        try:
            return extract_source(
                source,
                self.matcher,
                report_no_literal=self.report_no_literal,
                script_filter=self.script_filter,
                cancel_event=cancel_event,
            )
        except ScanCancelledError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error while scanning {source.path}: {e}")
            return FileExtraction(
                path=source.path,
                failed=True,
                diagnostics=[
                    Diagnostic(
                        source.path,
                        None,
                        DiagnosticSeverity.ERROR,
                        DiagnosticKind.INTERNAL_ERROR,
                        f"Internal error while scanning file: {e}",
                    )
                ],
            )

    async def scan(
        self,
        files: Iterable[SourceFile | str | Path],
        cancel_event: threading.Event | None = None,
    ) -> ScanResult:
        """
        Scan files and return the merged catalog.

        Args:
            files: Files in the order their results should be merged
            cancel_event: Set it to stop the scan; completed files are kept

        Returns:
            The catalog, diagnostics and summary of the scan
        """
        sources = [SourceFile.coerce(item) for item in files]
        slots: list[FileExtraction | None] = [None] * len(sources)
        semaphore = asyncio.Semaphore(self.max_workers)

        logger.info(
            f"Scanning {len(sources)} file(s) with up to {self.max_workers} worker(s)"
        )

        async def worker(index: int, source: SourceFile) -> None:
            async with semaphore:
                if cancel_event is not None and cancel_event.is_set():
                    return
                try:
                    slots[index] = await asyncio.to_thread(
                        self.extract, source, cancel_event
                    )
                except ScanCancelledError as e:
                    logger.debug(str(e))

        _ = await asyncio.gather(
            *(worker(index, source) for index, source in enumerate(sources))
        )
        return self._merge(sources, slots)

    def scan_sync(
        self,
        files: Iterable[SourceFile | str | Path],
        cancel_event: threading.Event | None = None,
    ) -> ScanResult:
        """Synchronous wrapper around :meth:`scan`."""
        return asyncio.run(self.scan(files, cancel_event))

    def _merge(
        self, sources: Sequence[SourceFile], slots: Sequence[FileExtraction | None]
    ) -> ScanResult:
        """Merge per-file results into the catalog in file-list order."""
        builder = CatalogBuilder()
        diagnostics: list[Diagnostic] = []
        processed = failed = skipped = terms = lex_errors = no_literal = 0

        for extraction in slots:
            if extraction is None:
                skipped += 1
                continue
            diagnostics.extend(extraction.diagnostics)
            lex_errors += sum(
                1 for d in extraction.diagnostics if d.kind is DiagnosticKind.LEX_ERROR
            )
            if extraction.failed:
                failed += 1
                continue
            processed += 1
            no_literal += extraction.no_literal_count
            terms += len(extraction.results)
            builder.extend(extraction.results)

        if skipped:
            logger.warning(f"Scan cancelled, {skipped} file(s) were not processed")
            diagnostics.append(
                Diagnostic(
                    None,
                    None,
                    DiagnosticSeverity.WARNING,
                    DiagnosticKind.CANCELLED,
                    f"Scan cancelled: {skipped} of {len(sources)} file(s) were not processed",
                )
            )

        catalog = builder.finalize()
        summary = ScanSummary(
            total_files=len(sources),
            processed_files=processed,
            failed_files=failed,
            skipped_files=skipped,
            total_terms=terms,
            unique_keys=len(catalog),
            lex_errors=lex_errors,
            no_literal_calls=no_literal,
        )
        logger.info(
            f"Scan finished: {processed}/{len(sources)} files, {terms} terms, "
            + f"{len(catalog)} unique keys, {len(diagnostics)} diagnostics"
        )
        return ScanResult(
            catalog=catalog,
            diagnostics=tuple(diagnostics),
            summary=summary,
            cancelled=skipped > 0,
        )


def scan_files(
    files: Iterable[SourceFile | str | Path],
    signatures: Iterable[CallSignature | str],
    *,
    report_no_literal: bool = False,
    max_workers: int | None = None,
    script_filter: ScriptFilter | None = None,
    cancel_event: threading.Event | None = None,
) -> ScanResult:
    """
    Scan files for translation calls in one call.

    Args:
        files: Files to scan, in merge order
        signatures: Translation function signatures or configuration strings
        report_no_literal: Report calls without literal content
        max_workers: Concurrency limit, defaults to the CPU count
        script_filter: Optional filter a key must pass to be kept
        cancel_event: Optional cancellation signal

    Returns:
        The scan result
    """
    scanner = Scanner(
        signatures,
        report_no_literal=report_no_literal,
        max_workers=max_workers,
        script_filter=script_filter,
    )
    return scanner.scan_sync(files, cancel_event)
