"""Tests for the script filter."""

from __future__ import annotations

import pytest

from i18nscan.extraction.script_filter import DEFAULT_CJK_RANGES, ScriptFilter


class TestScriptFilter:
    """Test cases for ScriptFilter."""

    @pytest.mark.parametrize(
        ("text", "accepted"),
        [
            ("你好世界", True),
            ("Hello 世界", True),
            ("Hello World", False),
            ("", False),
            ("123", False),
        ],
    )
    def test_default_ranges(self, text: str, accepted: bool) -> None:
        """Test acceptance with the default CJK ranges."""
        assert ScriptFilter().accepts(text) is accepted

    def test_minimum_characters(self) -> None:
        """Test the minimum number of matching characters."""
        script_filter = ScriptFilter(DEFAULT_CJK_RANGES, min_chars=3)

        assert script_filter.count("价格：￥100") == 2
        assert not script_filter.accepts("价格：￥100")
        assert script_filter.accepts("用户名不能为空")

    def test_custom_ranges(self) -> None:
        """Test non-CJK ranges such as Cyrillic."""
        script_filter = ScriptFilter(["\\u0400-\\u04ff"])

        assert script_filter.accepts("Привет")
        assert not script_filter.accepts("你好")

    def test_invalid_arguments(self) -> None:
        """Test validation of the constructor arguments."""
        with pytest.raises(ValueError):
            _ = ScriptFilter(min_chars=0)
        with pytest.raises(ValueError):
            _ = ScriptFilter([])
        with pytest.raises(ValueError, match="Invalid unicode range"):
            _ = ScriptFilter(["\\u9fff-\\u4e00"])
