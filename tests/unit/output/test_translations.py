"""Tests for existing-translation handling."""

from __future__ import annotations

from pathlib import Path

import pytest

from i18nscan.extraction.catalog import CatalogBuilder
from i18nscan.output.translations import (
    filter_untranslated,
    load_translations,
    parse_po_content,
    unescape_po_string,
)
from i18nscan.utils.core.exceptions import OutputError
from tests.utils.test_helpers import extract

PO_CONTENT = r'''# Chinese translations
msgid ""
msgstr ""
"Project-Id-Version: shop\n"
"Language: zh_CN\n"

#: main.go:3
msgid "Save"
msgstr "保存"

msgid "Line one\n"
"line two"
msgstr "第一行\n"
"第二行"

#, fuzzy
msgid "Say \"hi\""
msgstr "说\"你好\""

msgid "Untranslated"
msgstr ""

msgctxt "menu"
msgid "Open"
msgstr "打开"
msgid "One file"
msgid_plural "%d files"
msgstr[0] "%d 个文件"
'''


class TestParsePo:
    """Test cases for .po parsing."""

    def test_parse(self) -> None:
        """Test entries, continuation lines, escapes and plurals."""
        translations = parse_po_content(PO_CONTENT)

        assert translations == {
            "Save": "保存",
            "Line one\nline two": "第一行\n第二行",
            'Say "hi"': '说"你好"',
            "Open": "打开",
            "One file": "%d 个文件",
        }

    def test_unescape(self) -> None:
        """Test gettext unescaping."""
        assert unescape_po_string(r"a\tb\\c\"d\q") == 'a\tb\\c"d\\q'


class TestLoadTranslations:
    """Test cases for load_translations()."""

    def test_json(self, tmp_path: Path) -> None:
        """Test reading a JSON object, ignoring non-string values."""
        path = tmp_path / "zh-CN.json"
        _ = path.write_text(
            '{"保存": "Save", "count": 3, "nested": {"a": "b"}}', encoding="utf-8"
        )

        assert load_translations(path) == {"保存": "Save"}

    def test_po(self, tmp_path: Path) -> None:
        """Test reading a .po file."""
        path = tmp_path / "zh_CN.po"
        _ = path.write_text(PO_CONTENT, encoding="utf-8")

        assert load_translations(path)["Save"] == "保存"

    def test_missing_file(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a missing file means no translations."""
        assert load_translations(tmp_path / "missing.json") == {}
        assert "does not exist" in caplog.text

    def test_empty_json_file(self, tmp_path: Path) -> None:
        """Test that an empty JSON file has no translations."""
        path = tmp_path / "zh-CN.json"
        _ = path.write_text("", encoding="utf-8")

        assert load_translations(path) == {}

    @pytest.mark.parametrize(
        ("name", "content"),
        [
            ("broken.json", "{not json"),
            ("list.json", '["a", "b"]'),
            ("strings.txt", "a=b"),
        ],
    )
    def test_invalid_files(self, tmp_path: Path, name: str, content: str) -> None:
        """Test that unusable files raise OutputError."""
        path = tmp_path / name
        _ = path.write_text(content, encoding="utf-8")

        with pytest.raises(OutputError):
            _ = load_translations(path)


class TestFilterUntranslated:
    """Test cases for filter_untranslated()."""

    def test_filter(self) -> None:
        """Test that only keys with a non-empty translation are dropped."""
        builder = CatalogBuilder()
        builder.extend(extract('t("a")\nt("b")\nt("c")\nt("d")'))
        catalog = builder.finalize()

        remaining = filter_untranslated(catalog, {"a": "A", "c": "  ", "x": "X"})

        assert remaining.keys() == ["b", "c", "d"]
        assert remaining["b"] is catalog["b"]

    def test_no_translations(self) -> None:
        """Test that an empty mapping keeps everything."""
        builder = CatalogBuilder()
        builder.extend(extract('t("a")'))
        catalog = builder.finalize()

        assert filter_untranslated(catalog, {}).keys() == ["a"]
