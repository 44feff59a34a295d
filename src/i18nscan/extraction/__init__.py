"""
Extraction pipeline: lexer, call matcher, argument resolver and catalog.

Data flows left to right for each file::

    Lexer -> CallMatcher -> resolve_call -> CatalogBuilder
"""

from .catalog import Catalog, CatalogBuilder, CatalogEntry, Occurrence
from .lexer import Lexer, decode_escapes
from .matcher import (
    BareCall,
    CallMatcher,
    CallSignature,
    MatchedCall,
    MethodCall,
    QualifiedCall,
    parse_signature,
)
from .resolver import ExtractionOutcome, ExtractionResult, Fragment, resolve_call
from .script_filter import DEFAULT_CJK_RANGES, ScriptFilter
from .tokens import Position, Token, TokenKind

__all__ = [
    "BareCall",
    "CallMatcher",
    "CallSignature",
    "Catalog",
    "CatalogBuilder",
    "CatalogEntry",
    "DEFAULT_CJK_RANGES",
    "ExtractionOutcome",
    "ExtractionResult",
    "Fragment",
    "Lexer",
    "MatchedCall",
    "MethodCall",
    "Occurrence",
    "Position",
    "QualifiedCall",
    "ScriptFilter",
    "Token",
    "TokenKind",
    "decode_escapes",
    "parse_signature",
    "resolve_call",
]
