"""Tests for translation call matching."""

from __future__ import annotations

import pytest

from i18nscan.extraction.lexer import Lexer
from i18nscan.extraction.matcher import (
    BareCall,
    CallMatcher,
    MethodCall,
    QualifiedCall,
    matching_parens,
    parse_signature,
)
from i18nscan.extraction.tokens import TokenKind
from tests.utils.test_helpers import code_tokens, match_calls


class TestParseSignature:
    """Test cases for parse_signature()."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("t", BareCall("t")),
            ("  Translate ", BareCall("Translate")),
            ("i18n.T", QualifiedCall("i18n", "T")),
            ("*.T", MethodCall("T")),
            (".T", MethodCall("T")),
        ],
    )
    def test_supported_shapes(self, text: str, expected: object) -> None:
        """Test that each supported shape parses to its variant."""
        assert parse_signature(text) == expected

    @pytest.mark.parametrize("text", ["", "a.b.c", "1t", "t()", "i18n.", "*.*"])
    def test_invalid_shapes(self, text: str) -> None:
        """Test that unsupported names are rejected."""
        with pytest.raises(ValueError, match="Unsupported translation function"):
            _ = parse_signature(text)

    def test_display(self) -> None:
        """Test the display form of each variant."""
        assert BareCall("t").display == "t"
        assert QualifiedCall("i18n", "T").display == "i18n.T"
        assert MethodCall("T").display == "*.T"


class TestMatchingParens:
    """Test cases for matching_parens()."""

    def test_nested_and_unclosed(self) -> None:
        """Test pairing of nested and unclosed parentheses."""
        tokens = code_tokens("a(b(c)) d(")
        closers = matching_parens(tokens)

        texts = [t.text for t in tokens]
        assert texts == ["a", "(", "b", "(", "c", ")", ")", "d", "("]
        assert closers[1] == 6
        assert closers[3] == 5
        assert closers[8] == len(tokens)
        assert closers[0] == -1


class TestBareCalls:
    """Test cases for plain function signatures."""

    def test_matches_plain_call(self) -> None:
        """Test that t(...) is matched with its argument tokens."""
        calls = match_calls('t("hello")', ["t"])

        assert len(calls) == 1
        call = calls[0]
        assert call.signature == BareCall("t")
        assert call.callee == "t"
        assert call.closed
        assert [a.kind for a in call.arguments] == [TokenKind.STRING]

    def test_ignores_selector_call(self) -> None:
        """Test that obj.t(...) does not match a bare signature."""
        assert match_calls('obj.t("hello")', ["t"]) == []

    def test_names_are_case_sensitive(self) -> None:
        """Test that T(...) does not match t."""
        assert match_calls('T("hello")', ["t"]) == []

    def test_ignores_non_call_uses(self) -> None:
        """Test that identifiers not followed by a parenthesis are ignored."""
        assert match_calls("x := t\nt = nil", ["t"]) == []

    def test_ignores_function_declarations(self) -> None:
        """Test that declarations of the translation function are not calls."""
        source = (
            "func t(key string) string { return key }\n"
            "func (r *Res) t(key string) string { return key }\n"
        )

        assert match_calls(source, ["t"]) == []

    def test_ignores_interface_method_specs(self) -> None:
        """Test that methods declared in an interface type are not calls."""
        source = (
            "type Translator interface {\n"
            "\tt(key string) string\n"
            "\tT(key string, args ...any) string\n"
            "}\n"
            'var x = t("live")\n'
        )

        calls = match_calls(source, ["t", "*.T"])

        assert [call.position.line for call in calls] == [5]

    def test_empty_interface_in_composite_literal(self) -> None:
        """Test that calls after an empty interface type are still matched."""
        source = 'v := []interface{}{t("a"), map[string]interface{}{"k": t("b")}}'

        assert [call.arguments[0].value for call in match_calls(source, ["t"])] == ["a", "b"]

    def test_ignores_calls_in_comments(self) -> None:
        """Test that commented-out calls are not matched."""
        source = '// t("line")\n/* t("block") */\nt("live")'

        calls = match_calls(source, ["t"])

        assert len(calls) == 1
        assert calls[0].position.line == 3

    def test_call_spanning_lines(self) -> None:
        """Test a call whose arguments span several lines."""
        calls = match_calls('t(\n\t"a",\n\tcount,\n)', ["t"])

        assert len(calls) == 1
        assert [a.text for a in calls[0].arguments] == ['"a"', ",", "count", ","]

    def test_whitespace_before_parenthesis(self) -> None:
        """Test that whitespace between name and parenthesis is allowed."""
        assert len(match_calls('t ("a")', ["t"])) == 1

    def test_unclosed_call(self) -> None:
        """Test that an unclosed call captures the rest of the file."""
        calls = match_calls('t("a", b', ["t"])

        assert len(calls) == 1
        assert not calls[0].closed
        assert [a.text for a in calls[0].arguments] == ['"a"', ",", "b"]


class TestQualifiedCalls:
    """Test cases for package-qualified signatures."""

    def test_matches_qualified_call(self) -> None:
        """Test that i18n.T(...) matches and starts at the qualifier."""
        calls = match_calls('  i18n.T("x")', ["i18n.T"])

        assert len(calls) == 1
        assert calls[0].callee == "i18n.T"
        assert calls[0].position.column == 3

    def test_requires_rooted_qualifier(self) -> None:
        """Test that a.i18n.T(...) does not match i18n.T."""
        assert match_calls('a.i18n.T("x")', ["i18n.T"]) == []

    def test_bare_name_does_not_match(self) -> None:
        """Test that T(...) alone does not match i18n.T."""
        assert match_calls('T("x")', ["i18n.T"]) == []

    def test_other_package_does_not_match(self) -> None:
        """Test that fmt.T(...) does not match i18n.T."""
        assert match_calls('fmt.T("x")', ["i18n.T"]) == []


class TestMethodCalls:
    """Test cases for method signatures on any receiver."""

    @pytest.mark.parametrize(
        "source",
        ['s.T("x")', 's.loc.T("x")', 'get().T("x")', 'items[0].T("x")'],
    )
    def test_matches_any_receiver(self, source: str) -> None:
        """Test method calls on different receiver expressions."""
        calls = match_calls(source, ["*.T"])

        assert len(calls) == 1
        assert calls[0].signature == MethodCall("T")

    def test_method_signature_ignores_plain_call(self) -> None:
        """Test that T(...) without a receiver is not a method call."""
        assert match_calls('T("x")', ["*.T"]) == []


class TestCallMatcher:
    """Test cases for combined signatures and ordering."""

    def test_nested_calls_are_both_reported(self) -> None:
        """Test that calls nested in arguments are matched too."""
        calls = match_calls('fmt.Errorf(t("outer %s", t("inner")))')

        assert [c.callee for c in calls] == ["t", "t"]
        assert calls[0].position.offset < calls[1].position.offset

    def test_mixed_signatures_in_source_order(self) -> None:
        """Test that results follow source order across signatures."""
        source = 'Translate("c")\ni18n.T("b")\nt("a")'

        calls = match_calls(source)

        assert [c.callee for c in calls] == ["Translate", "i18n.T", "t"]

    def test_accepts_token_iterator(self) -> None:
        """Test that the matcher consumes a lazy token stream."""
        matcher = CallMatcher([BareCall("t")])

        calls = matcher.match(Lexer('t("a")').tokens())

        assert len(calls) == 1

    def test_from_names(self) -> None:
        """Test building a matcher from configuration strings."""
        matcher = CallMatcher.from_names(["t", "i18n.T", "*.Tr"])

        assert matcher.signatures == (
            BareCall("t"),
            QualifiedCall("i18n", "T"),
            MethodCall("Tr"),
        )
