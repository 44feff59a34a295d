"""Optional filter that keeps only keys written in a given script."""

from __future__ import annotations

import re
from collections.abc import Sequence

# Basic CJK ideographs, extension A and compatibility ideographs
DEFAULT_CJK_RANGES: tuple[str, ...] = (
    "\\u4e00-\\u9fff",
    "\\u3400-\\u4dbf",
    "\\uf900-\\ufaff",
)


class ScriptFilter:
    """
    Accepts keys containing enough characters from the configured ranges.

    Ranges use regex character-class syntax, e.g. ``\\u4e00-\\u9fff``.
    """

    def __init__(
        self, unicode_ranges: Sequence[str] = DEFAULT_CJK_RANGES, min_chars: int = 1
    ) -> None:
        if min_chars < 1:
            raise ValueError("min_chars must be at least 1")
        if not unicode_ranges:
            raise ValueError("At least one unicode range is required")
        self.min_chars: int = min_chars
        self.unicode_ranges: tuple[str, ...] = tuple(unicode_ranges)
        try:
            self._pattern: re.Pattern[str] = re.compile(f"[{''.join(unicode_ranges)}]")
        except re.error as e:
            raise ValueError(f"Invalid unicode range in {list(unicode_ranges)}: {e}") from e

    def count(self, text: str) -> int:
        return len(self._pattern.findall(text))

    def accepts(self, text: str) -> bool:
        if not text:
            return False
        return self.count(text) >= self.min_chars
