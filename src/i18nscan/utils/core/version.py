"""
Version utilities for i18nscan.

Reads the version from the installed distribution metadata, falling back to
pyproject.toml for source checkouts.
"""

import logging
import tomllib
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "i18nscan"
UNKNOWN_VERSION = "0.0.0+unknown"


def _find_pyproject() -> Path | None:
    for parent in Path(__file__).resolve().parents:
        candidate = parent / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


@lru_cache(maxsize=1)
def get_version() -> str:
    """
    Get the project version.

    Returns:
        Version string (e.g., "1.0.0"), or a placeholder if it cannot be found
    """
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        logger.debug("Distribution metadata not found, falling back to pyproject.toml")

    pyproject = _find_pyproject()
    if pyproject is None:
        return UNKNOWN_VERSION

    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug(f"Could not read {pyproject}: {e}")
        return UNKNOWN_VERSION

    project = data.get("project", {})
    project_version = project.get("version") if isinstance(project, dict) else None  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
    return project_version if isinstance(project_version, str) else UNKNOWN_VERSION
