"""
String-argument resolution for matched translation calls.

The first argument of a call is evaluated as a restricted concatenation
expression. Operands joined by a top-level ``+`` are either a single string
literal (a fragment whose text is known at scan time) or anything else (a
runtime value). The known fragments are concatenated in source order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .matcher import MatchedCall
from .tokens import Position, Token, TokenKind

logger = logging.getLogger(__name__)

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = frozenset(_OPENERS.values())
_SEPARATOR_KINDS = frozenset({TokenKind.PUNCTUATION, TokenKind.OPERATOR})


class ExtractionOutcome(Enum):
    """How much of a call's argument is known at scan time."""

    RESOLVED = "resolved"
    PARTIAL_DYNAMIC = "partial_dynamic"
    NO_LITERAL = "no_literal"


@dataclass(frozen=True, slots=True)
class Fragment:
    """A literal piece of a translation key and where it was written."""

    text: str
    position: Position


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Outcome of resolving one matched call."""

    call: MatchedCall
    outcome: ExtractionOutcome
    fragments: tuple[Fragment, ...] = ()

    @property
    def text(self) -> str:
        """The key text: all literal fragments joined in source order."""
        return "".join(fragment.text for fragment in self.fragments)

    @property
    def position(self) -> Position:
        return self.call.position

    @property
    def partial_dynamic(self) -> bool:
        return self.outcome is ExtractionOutcome.PARTIAL_DYNAMIC


def _depth_delta(token: Token) -> int:
    if token.kind is not TokenKind.PUNCTUATION:
        return 0
    if token.text in _OPENERS:
        return 1
    if token.text in _CLOSERS:
        return -1
    return 0


def split_top_level(tokens: Sequence[Token], separator: str) -> list[list[Token]]:
    """
    Split a token run on a separator that appears outside any brackets.

    The separator is compared against punctuation (``,``) and operator
    (``+``) text alike.

    Args:
        tokens: Tokens to split
        separator: Token text to split on

    Returns:
        The runs between separators; a trailing separator yields an empty run
    """
    parts: list[list[Token]] = [[]]
    depth = 0
    for token in tokens:
        if depth == 0 and token.kind in _SEPARATOR_KINDS and token.text == separator:
            parts.append([])
            continue
        depth += _depth_delta(token)
        parts[-1].append(token)
    return parts


def first_argument(arguments: Sequence[Token]) -> list[Token]:
    """Return the tokens of the first top-level argument."""
    return split_top_level(arguments, ",")[0]


def _strip_parens(tokens: list[Token]) -> list[Token]:
    """Remove balanced parentheses that enclose the whole operand."""
    while len(tokens) >= 2 and tokens[0].is_punct("(") and tokens[-1].is_punct(")"):
        depth = 0
        encloses = True
        for index, token in enumerate(tokens):
            depth += _depth_delta(token)
            if depth == 0 and index < len(tokens) - 1:
                encloses = False
                break
        if not encloses:
            break
        tokens = tokens[1:-1]
    return tokens


def resolve_call(call: MatchedCall) -> ExtractionResult:
    """
    Reconstruct the string value of a matched call's first argument.

    ``t("a" + "b")`` resolves to ``ab``; ``t("a" + name)`` gives ``a`` marked
    partial-dynamic; ``t(name)`` and ``t()`` have no literal content.

    Args:
        call: The matched translation call

    Returns:
        The extraction result with every literal fragment and its position
    """
    fragments: list[Fragment] = []
    dynamic = 0

    pending: list[list[Token]] = [first_argument(call.arguments)]
    while pending:
        operand = _strip_parens(pending.pop(0))
        if not operand:
            continue

        parts = split_top_level(operand, "+")
        if len(parts) > 1:
            pending[0:0] = parts
            continue

        if len(operand) == 1 and operand[0].is_string:
            token = operand[0]
            fragments.append(Fragment(token.value or "", token.position))
        else:
            dynamic += 1

    if not fragments:
        outcome = ExtractionOutcome.NO_LITERAL
    elif dynamic:
        outcome = ExtractionOutcome.PARTIAL_DYNAMIC
    else:
        outcome = ExtractionOutcome.RESOLVED

    logger.debug(
        f"{call.callee}() at {call.position}: {outcome.value}, "
        + f"{len(fragments)} literal and {dynamic} dynamic operand(s)"
    )
    return ExtractionResult(call=call, outcome=outcome, fragments=tuple(fragments))
