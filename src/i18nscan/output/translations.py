"""
Existing translations.

Reads translation files that are already maintained next to the source tree
and drops catalog keys that already have a translation.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from ..extraction.catalog import Catalog
from ..utils.core.exceptions import OutputError

logger = logging.getLogger(__name__)

_PO_STATEMENT = re.compile(r'^(msgctxt|msgid|msgid_plural|msgstr(?:\[\d+\])?)\s+"(.*)"\s*$')
_PO_CONTINUATION = re.compile(r'^"(.*)"\s*$')
_PO_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}


def unescape_po_string(text: str) -> str:
    """Undo gettext string escaping."""
    return re.sub(
        r'\\(.)', lambda match: _PO_ESCAPES.get(match.group(1), match.group(0)), text
    )


def parse_po_content(content: str) -> dict[str, str]:
    """
    Parse gettext ``.po`` content.

    Continuation lines are joined, the header entry (empty msgid) and
    untranslated entries are skipped. For plural entries the first form is
    used.

    Args:
        content: Text of a .po file

    Returns:
        Dictionary mapping msgid strings to msgstr translations
    """
    translations: dict[str, str] = {}
    fields: dict[str, str] = {}
    current: str | None = None

    def flush() -> None:
        msgid = fields.get("msgid")
        msgstr = fields.get("msgstr", fields.get("msgstr[0]", ""))
        if msgid and msgstr:
            translations[msgid] = msgstr
        fields.clear()

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            if not line and fields:
                flush()
                current = None
            continue

        if statement := _PO_STATEMENT.match(line):
            keyword = statement.group(1)
            if keyword in ("msgctxt", "msgid") and any(k.startswith("msgstr") for k in fields):
                flush()
            current = keyword
            fields[current] = unescape_po_string(statement.group(2))
        elif (continuation := _PO_CONTINUATION.match(line)) and current is not None:
            fields[current] += unescape_po_string(continuation.group(1))
        else:
            logger.debug(f"Ignoring unrecognized .po line: {raw_line!r}")

    if fields:
        flush()
    return translations


def load_translations(path: Path) -> dict[str, str]:
    """
    Load existing translations.

    Args:
        path: A ``.json`` object of key -> translation, or a gettext ``.po`` file

    Returns:
        Dictionary mapping keys to translations, empty if the file is missing

    Raises:
        OutputError: If the file cannot be read or has an unsupported format
    """
    if not path.exists():
        logger.warning(f"Translation file does not exist: {path}")
        return {}

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise OutputError(f"Could not read translation file {path}: {e}") from e

    match path.suffix.lower():
        case ".json":
            try:
                data: object = json.loads(content) if content.strip() else {}
            except json.JSONDecodeError as e:
                raise OutputError(f"Invalid JSON in translation file {path}: {e}") from e
            if not isinstance(data, dict):
                raise OutputError(
                    f"Translation file {path} must contain a JSON object, got {type(data).__name__}"
                )
            translations = {
                str(key): value
                for key, value in data.items()  # pyright: ignore[reportUnknownVariableType]
                if isinstance(value, str)
            }
        case ".po" | ".pot":
            translations = parse_po_content(content)
        case _:
            raise OutputError(
                f"Unsupported translation file format: {path}",
                user_message=f"Translation files must be .json or .po: {path}",
            )

    logger.info(f"Loaded {len(translations)} translation(s) from {path}")
    return translations


def is_translated(key: str, translations: dict[str, str]) -> bool:
    translation = translations.get(key)
    return translation is not None and translation.strip() != ""


def filter_untranslated(catalog: Catalog, translations: dict[str, str]) -> Catalog:
    """
    Drop entries that already have a non-empty translation.

    Args:
        catalog: Finalized catalog
        translations: Existing translations by key

    Returns:
        Catalog: The untranslated entries in their original order
    """
    remaining = {
        entry.key: entry for entry in catalog if not is_translated(entry.key, translations)
    }
    logger.info(
        f"{len(catalog) - len(remaining)} of {len(catalog)} term(s) are already translated"
    )
    return Catalog(remaining)
