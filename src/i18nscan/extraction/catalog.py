"""
Catalog of unique translation keys.

The builder receives extraction results in scan order and groups them by the
exact key text. Entries keep the order in which their key was first seen, and
the occurrences of an entry keep the order in which they were added, so the
same input always produces the same catalog.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TypeAlias

from .resolver import ExtractionOutcome, ExtractionResult
from .tokens import Position

logger = logging.getLogger(__name__)

OccurrenceRecord: TypeAlias = tuple[str, int, int]
CatalogRecord: TypeAlias = tuple[str, list[OccurrenceRecord], bool]


@dataclass(frozen=True, slots=True)
class Occurrence:
    """One call site that produced a key."""

    position: Position
    callee: str
    partial_dynamic: bool = False


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """A unique key and every place it was found."""

    key: str
    occurrences: tuple[Occurrence, ...]

    @property
    def partial_dynamic(self) -> bool:
        """True when any occurrence only partially resolved."""
        return any(occurrence.partial_dynamic for occurrence in self.occurrences)

    @property
    def first_position(self) -> Position:
        return self.occurrences[0].position

    def locations(self) -> list[OccurrenceRecord]:
        return [occurrence.position.as_tuple() for occurrence in self.occurrences]


class Catalog:
    """Read-only, insertion-ordered collection of catalog entries."""

    def __init__(self, entries: Mapping[str, CatalogEntry]) -> None:
        self._entries: Mapping[str, CatalogEntry] = MappingProxyType(dict(entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __getitem__(self, key: str) -> CatalogEntry:
        return self._entries[key]

    def get(self, key: str) -> CatalogEntry | None:
        return self._entries.get(key)

    def keys(self) -> list[str]:
        return list(self._entries)

    @property
    def occurrence_count(self) -> int:
        return sum(len(entry.occurrences) for entry in self)

    def records(self) -> list[CatalogRecord]:
        """
        Export the catalog as plain records.

        Returns:
            ``(key, [(file, line, column), ...], partial_dynamic)`` per entry,
            in catalog order
        """
        return [(entry.key, entry.locations(), entry.partial_dynamic) for entry in self]


class CatalogBuilder:
    """
    Incrementally builds a :class:`Catalog` from extraction results.

    Results must be added in scan order. Once :meth:`finalize` has been
    called the builder rejects further additions.
    """

    def __init__(self) -> None:
        self._occurrences: dict[str, list[Occurrence]] = {}
        self._finalized: bool = False

    def __len__(self) -> int:
        return len(self._occurrences)

    def add(self, result: ExtractionResult) -> str:
        """
        Record one resolved or partially dynamic extraction.

        Args:
            result: The extraction to record

        Returns:
            The key the result was filed under

        Raises:
            ValueError: If the result has no literal content
            RuntimeError: If the catalog was already finalized
        """
        if self._finalized:
            raise RuntimeError("Catalog has been finalized, no further results accepted")
        if result.outcome is ExtractionOutcome.NO_LITERAL:
            raise ValueError(
                f"Call at {result.position} has no literal content and cannot be cataloged"
            )

        key = result.text
        occurrence = Occurrence(
            position=result.position,
            callee=result.call.callee,
            partial_dynamic=result.partial_dynamic,
        )
        bucket = self._occurrences.get(key)
        if bucket is None:
            self._occurrences[key] = [occurrence]
        else:
            bucket.append(occurrence)
            logger.debug(f"Key seen again at {result.position} ({len(bucket)} occurrences)")
        return key

    def extend(self, results: list[ExtractionResult]) -> None:
        for result in results:
            _ = self.add(result)

    def finalize(self) -> Catalog:
        """Freeze the collected entries into a :class:`Catalog`."""
        self._finalized = True
        entries = {
            key: CatalogEntry(key=key, occurrences=tuple(occurrences))
            for key, occurrences in self._occurrences.items()
        }
        logger.debug(f"Catalog finalized with {len(entries)} unique keys")
        return Catalog(entries)
