"""
i18nscan: extract translatable strings from translation-function calls.

The engine tokenizes Go sources, finds calls to the configured translation
functions (``t(...)``, ``i18n.T(...)``, ``obj.T(...)``), resolves the string
literals passed to them and merges the results into a catalog of unique keys.
"""

from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticSeverity
from .extraction import (
    BareCall,
    Catalog,
    CatalogEntry,
    MethodCall,
    Occurrence,
    Position,
    QualifiedCall,
    parse_signature,
)
from .scanner import Scanner, ScanResult, ScanSummary, SourceFile, scan_files
from .utils.core.version import get_version

__version__ = get_version()

__all__ = [
    "BareCall",
    "Catalog",
    "CatalogEntry",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticSeverity",
    "MethodCall",
    "Occurrence",
    "Position",
    "QualifiedCall",
    "ScanResult",
    "ScanSummary",
    "Scanner",
    "SourceFile",
    "__version__",
    "parse_signature",
    "scan_files",
]
