"""
Catalog writers.

Serializes a finalized catalog to JSON, YAML, CSV or a gettext ``.pot``
template. Every writer emits entries in catalog order.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from ..utils.core.exceptions import OutputError

if TYPE_CHECKING:
    from ..extraction.catalog import Catalog, CatalogEntry
    from ..scanner import ScanSummary

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS: tuple[str, ...] = ("json", "yaml", "csv", "pot")

CSV_HEADER = ["text", "file", "line", "column", "callee", "partial_dynamic"]


def _entry_document(entry: CatalogEntry, include_location: bool) -> dict[str, object]:
    document: dict[str, object] = {
        "text": entry.key,
        "partial_dynamic": entry.partial_dynamic,
    }
    if include_location:
        document["occurrences"] = [
            {
                "file": occurrence.position.path,
                "line": occurrence.position.line,
                "column": occurrence.position.column,
                "callee": occurrence.callee,
            }
            for occurrence in entry.occurrences
        ]
    return document


def build_document(
    catalog: Catalog,
    include_location: bool = True,
    summary: ScanSummary | None = None,
) -> dict[str, object]:
    """
    Build the JSON/YAML document for a catalog.

    Args:
        catalog: Finalized catalog
        include_location: Include the occurrences of every key
        summary: Optional scan summary stored in the metadata

    Returns:
        A ``{"metadata": ..., "terms": [...]}`` mapping
    """
    metadata: dict[str, object] = {
        "extracted_at": datetime.now(timezone.utc).isoformat(),
        "total_terms": len(catalog),
        "total_occurrences": catalog.occurrence_count,
    }
    if summary is not None:
        metadata["summary"] = asdict(summary)

    return {
        "metadata": metadata,
        "terms": [_entry_document(entry, include_location) for entry in catalog],
    }


def render_json(
    catalog: Catalog, include_location: bool = True, summary: ScanSummary | None = None
) -> str:
    document = build_document(catalog, include_location, summary)
    return json.dumps(document, ensure_ascii=False, indent=2) + "\n"


def render_yaml(
    catalog: Catalog, include_location: bool = True, summary: ScanSummary | None = None
) -> str:
    document = build_document(catalog, include_location, summary)
    return yaml.dump(
        document,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
    )


def render_csv(catalog: Catalog, include_location: bool = True) -> str:
    """Render one row per occurrence, or one row per key without locations."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    if not include_location:
        _ = writer.writerow(["text", "partial_dynamic"])
        for entry in catalog:
            _ = writer.writerow([entry.key, str(entry.partial_dynamic).lower()])
        return buffer.getvalue()

    _ = writer.writerow(CSV_HEADER)
    for entry in catalog:
        for occurrence in entry.occurrences:
            _ = writer.writerow(
                [
                    entry.key,
                    occurrence.position.path,
                    occurrence.position.line,
                    occurrence.position.column,
                    occurrence.callee,
                    str(occurrence.partial_dynamic).lower(),
                ]
            )
    return buffer.getvalue()


def escape_po_string(text: str) -> str:
    """Escape text for use inside a double-quoted gettext string."""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )


def format_po_string(keyword: str, text: str) -> str:
    """
    Format a ``msgid``/``msgstr`` statement.

    Multi-line text is split after each newline into continuation strings,
    the layout produced by xgettext.
    """
    lines = text.splitlines(keepends=True)
    if len(lines) <= 1:
        return f'{keyword} "{escape_po_string(text)}"\n'

    content = f'{keyword} ""\n'
    for line in lines:
        content += f'"{escape_po_string(line)}"\n'
    return content


def generate_pot_header(project: str = "PROJECT VERSION") -> str:
    """
    Generate the header for a .pot file.

    Returns:
        POT file header string
    """
    now = datetime.now(timezone.utc)
    timestamp = now.strftime("%Y-%m-%d %H:%M%z")

    return f'''# Translation template extracted by i18nscan.
#
#, fuzzy
msgid ""
msgstr ""
"Project-Id-Version: {project}\\n"
"POT-Creation-Date: {timestamp}\\n"
"PO-Revision-Date: YEAR-MO-DA HO:MI+ZONE\\n"
"Last-Translator: FULL NAME <EMAIL@ADDRESS>\\n"
"Language-Team: LANGUAGE <LL@li.org>\\n"
"Language: \\n"
"MIME-Version: 1.0\\n"
"Content-Type: text/plain; charset=UTF-8\\n"
"Content-Transfer-Encoding: 8bit\\n"

'''


def render_pot(catalog: Catalog, include_location: bool = True) -> str:
    content = generate_pot_header()

    for entry in catalog:
        if include_location:
            for occurrence in entry.occurrences:
                content += f"#: {occurrence.position.path}:{occurrence.position.line}\n"
        if entry.partial_dynamic:
            content += "#, partial\n"

        content += format_po_string("msgid", entry.key)
        content += 'msgstr ""\n\n'

    return content


def render_catalog(
    catalog: Catalog,
    output_format: str,
    include_location: bool = True,
    summary: ScanSummary | None = None,
) -> str:
    """
    Render a catalog in the requested format.

    Raises:
        OutputError: If the format is not supported
    """
    match output_format.lower():
        case "json":
            return render_json(catalog, include_location, summary)
        case "yaml":
            return render_yaml(catalog, include_location, summary)
        case "csv":
            return render_csv(catalog, include_location)
        case "pot":
            return render_pot(catalog, include_location)
        case _:
            raise OutputError(
                f"Unsupported output format: {output_format}",
                user_message=f"Unsupported output format '{output_format}', "
                + f"choose one of: {', '.join(SUPPORTED_FORMATS)}",
            )


def write_catalog(
    catalog: Catalog,
    output_file: Path,
    output_format: str = "json",
    include_location: bool = True,
    summary: ScanSummary | None = None,
) -> Path:
    """
    Write a catalog to disk.

    Args:
        catalog: Finalized catalog
        output_file: Destination, parent directories are created
        output_format: One of ``json``, ``yaml``, ``csv`` or ``pot``
        include_location: Include the source location of every occurrence
        summary: Optional scan summary for the JSON/YAML metadata

    Returns:
        Path: The written file

    Raises:
        OutputError: If the format is unsupported or the file cannot be written
    """
    content = render_catalog(catalog, output_format, include_location, summary)

    try:
        _ = output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, "w", encoding="utf-8", newline="") as file:
            _ = file.write(content)
    except OSError as e:
        raise OutputError(f"Failed to write {output_file}: {e}") from e

    logger.info(f"Wrote {len(catalog)} unique term(s) as {output_format} to {output_file}")
    return output_file
