"""Diagnostic records reported alongside the catalog."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing_extensions import override

from .extraction.tokens import Position


class DiagnosticSeverity(Enum):
    """How serious a diagnostic is."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class DiagnosticKind(Enum):
    """What a diagnostic is about."""

    LEX_ERROR = "lex_error"
    NO_LITERAL_ARGUMENT = "no_literal_argument"
    EMPTY_KEY = "empty_key"
    READ_ERROR = "read_error"
    INTERNAL_ERROR = "internal_error"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A problem or notice tied to a file and, where known, a position."""

    path: str | None
    position: Position | None
    severity: DiagnosticSeverity
    kind: DiagnosticKind
    message: str

    @override
    def __str__(self) -> str:
        location = str(self.position) if self.position else (self.path or "<scan>")
        return f"{location}: {self.severity.value}: {self.message}"

    def as_record(self) -> tuple[str | None, Position | None, str, str]:
        """Return ``(file, position, severity, message)``."""
        return (self.path, self.position, self.severity.value, self.message)
