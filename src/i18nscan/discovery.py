"""
Source file discovery.

Walks the configured source directories and returns the files to scan in a
stable, sorted order so repeated scans of an unchanged tree produce the same
catalog.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config.schema import ScanSettings

logger = logging.getLogger(__name__)


def _split_excludes(exclude_dirs: list[str]) -> tuple[set[str], list[Path]]:
    """Separate bare directory names from directory paths."""
    names: set[str] = set()
    paths: list[Path] = []
    for entry in exclude_dirs:
        if "/" in entry or "\\" in entry or entry in {".", ".."}:
            paths.append(Path(entry).resolve())
        else:
            names.add(entry)
    return names, paths


def is_excluded(filepath: Path, root: Path, names: set[str], paths: list[Path]) -> bool:
    """
    Check whether a file lies in an excluded directory.

    Args:
        filepath: Candidate file
        root: Source directory the file was found in
        names: Directory names excluded at any depth
        paths: Resolved directories excluded with everything below them

    Returns:
        bool: True if the file must be skipped
    """
    relative_parts = filepath.relative_to(root).parts[:-1]
    if any(part in names for part in relative_parts):
        return True
    resolved = filepath.resolve()
    return any(resolved.is_relative_to(path) for path in paths)


def discover_source_files(scan_config: ScanSettings) -> list[Path]:
    """
    Find every file to scan.

    Args:
        scan_config: Scan settings with absolute or cwd-relative directories

    Returns:
        Sorted, de-duplicated list of resolved file paths
    """
    names, paths = _split_excludes(scan_config.exclude_dirs)
    extensions = set(scan_config.file_extensions)
    found: set[Path] = set()

    for source_dir in scan_config.source_dirs:
        directory = Path(source_dir)
        if not directory.is_dir():
            logger.warning(f"Source directory does not exist, skipping: {directory}")
            continue
        if any(directory.resolve().is_relative_to(path) for path in paths):
            logger.debug(f"Source directory {directory} is excluded")
            continue

        candidates = directory.rglob("*") if scan_config.recursive else directory.glob("*")
        for filepath in candidates:
            if filepath.suffix not in extensions or not filepath.is_file():
                continue
            if is_excluded(filepath, directory, names, paths):
                continue
            found.add(filepath.resolve())

    files = sorted(found)
    logger.info(f"Discovered {len(files)} source file(s)")
    return files
