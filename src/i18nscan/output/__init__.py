"""Catalog output and existing-translation handling."""

from .translations import filter_untranslated, load_translations, parse_po_content
from .writers import SUPPORTED_FORMATS, render_catalog, write_catalog

__all__ = [
    "SUPPORTED_FORMATS",
    "filter_untranslated",
    "load_translations",
    "parse_po_content",
    "render_catalog",
    "write_catalog",
]
