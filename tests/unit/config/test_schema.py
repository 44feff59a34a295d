"""Tests for the configuration schema."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from i18nscan.config.schema import (
    ChineseDetectionSettings,
    I18nFunctionConfig,
    OutputSettings,
    ScannerConfig,
    ScanSettings,
)


class TestScannerConfig:
    """Test cases for the root configuration model."""

    def test_defaults(self, default_config: ScannerConfig) -> None:
        """Test the default values."""
        assert [f.name for f in default_config.i18n_functions] == ["t", "i18n.T", "Translate"]
        assert default_config.scan_config.source_dirs == ["./src"]
        assert default_config.scan_config.file_extensions == [".go"]
        assert default_config.scan_config.recursive
        assert default_config.scan_config.max_workers is None
        assert default_config.output_config.format == "json"
        assert default_config.output_config.output_file == "./extracted_terms.json"
        assert default_config.translated_files == {}
        assert not default_config.chinese_detection.enabled

    def test_unknown_keys_are_rejected(self) -> None:
        """Test that typos in the configuration are reported."""
        with pytest.raises(ValidationError):
            _ = ScannerConfig.model_validate({"scan_cofig": {}})

    def test_at_least_one_function(self) -> None:
        """Test that an empty function list is invalid."""
        with pytest.raises(ValidationError):
            _ = ScannerConfig.model_validate({"i18n_functions": []})

    def test_get_translated_file(self) -> None:
        """Test looking up the translation file by language."""
        config = ScannerConfig.model_validate(
            {"translated_files": {"zh_cn": "locales/zh-CN.json"}}
        )

        assert config.get_translated_file() == "locales/zh-CN.json"
        assert config.get_translated_file("en_us") is None


class TestI18nFunctionConfig:
    """Test cases for translation function entries."""

    @pytest.mark.parametrize("name", ["t", "i18n.T", "*.T", " Translate "])
    def test_valid_names(self, name: str) -> None:
        """Test names accepted by the signature parser."""
        assert I18nFunctionConfig(name=name).name == name.strip()

    @pytest.mark.parametrize("name", ["", "a.b.c", "t()"])
    def test_invalid_names(self, name: str) -> None:
        """Test names rejected by the signature parser."""
        with pytest.raises(ValidationError):
            _ = I18nFunctionConfig(name=name)


class TestSectionModels:
    """Test cases for the nested settings models."""

    def test_extensions_are_normalized(self) -> None:
        """Test that extensions get a leading dot."""
        settings = ScanSettings(file_extensions=["go", ".tmpl"])

        assert settings.file_extensions == [".go", ".tmpl"]

    def test_empty_extension_rejected(self) -> None:
        """Test that blank extensions are invalid."""
        with pytest.raises(ValidationError):
            _ = ScanSettings(file_extensions=[" "])

    @pytest.mark.parametrize("workers", [0, 257])
    def test_worker_bounds(self, workers: int) -> None:
        """Test the max_workers range."""
        with pytest.raises(ValidationError):
            _ = ScanSettings(max_workers=workers)

    def test_format_is_case_insensitive(self) -> None:
        """Test that the output format is lower-cased."""
        assert OutputSettings.model_validate({"format": "POT"}).format == "pot"

    def test_unknown_format_rejected(self) -> None:
        """Test that unsupported formats are invalid."""
        with pytest.raises(ValidationError):
            _ = OutputSettings.model_validate({"format": "xml"})

    def test_invalid_unicode_range_rejected(self) -> None:
        """Test that ranges must form a valid character class."""
        with pytest.raises(ValidationError):
            _ = ChineseDetectionSettings(unicode_ranges=["\\u9fff-\\u4e00"])

    def test_min_chars_must_be_positive(self) -> None:
        """Test the minimum character count."""
        with pytest.raises(ValidationError):
            _ = ChineseDetectionSettings(min_chinese_chars=0)
