"""
Call-site matching for translation functions.

A translation function is described by one of three signature shapes:

- ``BareCall("t")`` matches ``t(...)`` but not ``obj.t(...)``
- ``QualifiedCall("i18n", "T")`` matches ``i18n.T(...)`` but not ``a.i18n.T(...)``
- ``MethodCall("T")`` matches ``T`` called on any receiver, e.g. ``s.loc.T(...)``

Configuration strings are mapped to these shapes by :func:`parse_signature`.
The matcher works on an in-memory token array with explicit index state, so
deeply nested argument lists never grow the call stack.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TypeAlias

from .tokens import NON_CODE_KINDS, Position, Token, TokenKind

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"[^\W\d]\w*")


@dataclass(frozen=True, slots=True)
class BareCall:
    """A call to a plain function name."""

    name: str

    @property
    def display(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class QualifiedCall:
    """A call to a package-qualified function."""

    qualifier: str
    name: str

    @property
    def display(self) -> str:
        return f"{self.qualifier}.{self.name}"


@dataclass(frozen=True, slots=True)
class MethodCall:
    """A method call on any receiver expression."""

    name: str

    @property
    def display(self) -> str:
        return f"*.{self.name}"


CallSignature: TypeAlias = BareCall | QualifiedCall | MethodCall


def parse_signature(text: str) -> CallSignature:
    """
    Parse a configured translation function name into a signature.

    Args:
        text: ``"t"``, ``"i18n.T"``, ``"*.T"`` or ``".T"``

    Returns:
        The matching signature variant

    Raises:
        ValueError: If the text is not one of the supported shapes
    """
    value = text.strip()
    parts = value.split(".")

    match parts:
        case [name] if _NAME_RE.fullmatch(name):
            return BareCall(name)
        case ["" | "*", name] if _NAME_RE.fullmatch(name):
            return MethodCall(name)
        case [qualifier, name] if _NAME_RE.fullmatch(qualifier) and _NAME_RE.fullmatch(name):
            return QualifiedCall(qualifier, name)
        case _:
            raise ValueError(
                f"Unsupported translation function signature: {text!r} "
                + "(expected 'name', 'package.Name' or '*.Method')"
            )


@dataclass(frozen=True, slots=True)
class MatchedCall:
    """
    A recognized translation call.

    Attributes:
        signature: The signature that matched
        callee: Callee text as written in the source, e.g. ``i18n.T``
        position: Position of the first callee token
        arguments: Tokens strictly between the call parentheses
        closed: False when the opening parenthesis was never closed
    """

    signature: CallSignature
    callee: str
    position: Position
    arguments: tuple[Token, ...]
    closed: bool = True


def matching_parens(tokens: Sequence[Token]) -> list[int]:
    """
    Pair every ``(`` with the index of its ``)``.

    Args:
        tokens: Code tokens (comments already removed)

    Returns:
        A list with the closing index for each opening parenthesis, ``-1`` for
        every other token, and ``len(tokens)`` for parentheses never closed
    """
    closers = [-1] * len(tokens)
    stack: list[int] = []
    for index, token in enumerate(tokens):
        if token.is_punct("("):
            stack.append(index)
        elif token.is_punct(")") and stack:
            closers[stack.pop()] = index
    for index in stack:
        closers[index] = len(tokens)
    return closers


def interface_body_mask(tokens: Sequence[Token]) -> list[bool]:
    """
    Mark the tokens inside ``interface { ... }`` type bodies.

    Interface bodies hold method specs such as ``T(key string) string``,
    which look like calls but are declarations.

    Args:
        tokens: Code tokens (comments already removed)

    Returns:
        A list with True for every token between an interface's braces
    """
    mask = [False] * len(tokens)
    stack: list[bool] = []
    for index, token in enumerate(tokens):
        if token.is_punct("{"):
            opens_interface = (
                index > 0
                and tokens[index - 1].kind is TokenKind.IDENTIFIER
                and tokens[index - 1].text == "interface"
            )
            stack.append(opens_interface or (bool(stack) and stack[-1]))
        elif token.is_punct("}") and stack:
            _ = stack.pop()
        elif stack and stack[-1]:
            mask[index] = True
    return mask


class CallMatcher:
    """Finds translation calls in a token stream."""

    def __init__(self, signatures: Iterable[CallSignature]) -> None:
        self.signatures: tuple[CallSignature, ...] = tuple(signatures)
        self._bare: dict[str, BareCall] = {}
        self._qualified: dict[tuple[str, str], QualifiedCall] = {}
        self._method: dict[str, MethodCall] = {}

        for signature in self.signatures:
            match signature:
                case BareCall(name=name):
                    self._bare[name] = signature
                case QualifiedCall(qualifier=qualifier, name=name):
                    self._qualified[(qualifier, name)] = signature
                case MethodCall(name=name):
                    self._method[name] = signature

    @classmethod
    def from_names(cls, names: Iterable[str]) -> CallMatcher:
        """Build a matcher from configuration strings."""
        return cls(parse_signature(name) for name in names)

    def match(self, tokens: Iterable[Token]) -> list[MatchedCall]:
        """
        Return every translation call in the token stream, in source order.

        Comment and error tokens are not live code and are dropped before
        matching. Calls nested inside the arguments of other calls are
        reported as well.

        Args:
            tokens: Tokens of one file as produced by the lexer

        Returns:
            Matched calls ordered by callee position
        """
        code = [token for token in tokens if token.kind not in NON_CODE_KINDS]
        closers = matching_parens(code)
        in_interface = interface_body_mask(code)
        calls: list[MatchedCall] = []

        for index, token in enumerate(code):
            if index == 0 or not token.is_punct("(") or in_interface[index]:
                continue
            name_token = code[index - 1]
            if name_token.kind is not TokenKind.IDENTIFIER:
                continue

            found = self._match_callee(code, index - 1, closers)
            if found is None:
                continue

            signature, first = found
            closer = closers[index]
            callee = "".join(t.text for t in code[first:index])
            calls.append(
                MatchedCall(
                    signature=signature,
                    callee=callee,
                    position=code[first].position,
                    arguments=tuple(code[index + 1 : closer]),
                    closed=closer < len(code),
                )
            )
            logger.debug(f"Matched {callee}() at {code[first].position}")

        return calls

    def _match_callee(
        self, code: Sequence[Token], name_index: int, closers: Sequence[int]
    ) -> tuple[CallSignature, int] | None:
        """Test the identifier path ending at ``name_index`` against the signatures."""
        name = code[name_index].text
        selector = name_index >= 1 and code[name_index - 1].is_punct(".")

        if not selector:
            if name in self._bare and not _is_declaration(code, name_index, closers):
                return self._bare[name], name_index
            return None

        qualifier_index = name_index - 2
        has_qualifier = (
            qualifier_index >= 0 and code[qualifier_index].kind is TokenKind.IDENTIFIER
        )
        if has_qualifier:
            rooted = qualifier_index == 0 or not code[qualifier_index - 1].is_punct(".")
            key = (code[qualifier_index].text, name)
            if rooted and key in self._qualified:
                return self._qualified[key], qualifier_index

        if name in self._method:
            return self._method[name], qualifier_index if has_qualifier else name_index
        return None


def _is_declaration(code: Sequence[Token], name_index: int, closers: Sequence[int]) -> bool:
    """True for ``func name(`` and ``func (recv) name(`` declarations."""
    if name_index == 0:
        return False
    previous = code[name_index - 1]
    if previous.kind is TokenKind.IDENTIFIER:
        return previous.text == "func"
    if previous.is_punct(")"):
        for opener in range(name_index - 2, -1, -1):
            if closers[opener] == name_index - 1:
                return opener > 0 and code[opener - 1].text == "func"
    return False
