"""Configuration schema for i18nscan using nested Pydantic models."""

import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..extraction.matcher import parse_signature
from ..extraction.script_filter import DEFAULT_CJK_RANGES


class I18nFunctionConfig(BaseModel):
    """A translation function whose string arguments are extracted."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(
        ...,
        description="Function name: 't', 'package.Func' or '*.Method' for any receiver",
        min_length=1,
    )
    description: str | None = Field(
        default=None,
        description="Free-form note about the function",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that the name is a supported call signature."""
        _ = parse_signature(v)
        return v.strip()


def _default_functions() -> list[I18nFunctionConfig]:
    return [
        I18nFunctionConfig(name="t", description="Basic translation function"),
        I18nFunctionConfig(name="i18n.T", description="Translation function of the i18n package"),
        I18nFunctionConfig(name="Translate", description="Custom translation function"),
    ]


class ScanSettings(BaseModel):
    """Which files to scan and how."""

    model_config = ConfigDict(extra="forbid")

    source_dirs: list[str] = Field(
        default_factory=lambda: ["./src"],
        description="Directories to scan, relative to the configuration file",
    )
    exclude_dirs: list[str] = Field(
        default_factory=lambda: ["./vendor", "./node_modules"],
        description="Directories to skip, either names or paths relative to the configuration file",
    )
    file_extensions: list[str] = Field(
        default_factory=lambda: [".go"],
        description="File extensions to scan",
    )
    recursive: bool = Field(
        default=True,
        description="Descend into subdirectories",
    )
    max_workers: Annotated[int, Field(ge=1, le=256)] | None = Field(
        default=None,
        description="Maximum number of files scanned concurrently (default: CPU count)",
    )
    report_no_literal: bool = Field(
        default=False,
        description="Report translation calls whose argument has no string literal",
    )

    @field_validator("file_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Ensure every extension starts with a dot."""
        normalized: list[str] = []
        for extension in v:
            extension = extension.strip()
            if not extension:
                raise ValueError("File extensions must not be empty")
            normalized.append(extension if extension.startswith(".") else f".{extension}")
        return normalized


class OutputSettings(BaseModel):
    """Where and how the catalog is written."""

    model_config = ConfigDict(extra="forbid")

    output_file: str = Field(
        default="./extracted_terms.json",
        description="Output file path, relative to the configuration file",
    )
    format: Literal["json", "csv", "yaml", "pot"] = Field(
        default="json",
        description="Output format",
    )
    include_location: bool = Field(
        default=True,
        description="Include source locations in the output",
    )

    @field_validator("format", mode="before")
    @classmethod
    def lowercase_format(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ChineseDetectionSettings(BaseModel):
    """Keep only keys that contain characters from the given ranges."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(
        default=False,
        description="Drop keys without enough characters from unicode_ranges",
    )
    unicode_ranges: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CJK_RANGES),
        description="Regex character ranges, e.g. '\\u4e00-\\u9fff'",
        min_length=1,
    )
    min_chinese_chars: Annotated[int, Field(ge=1)] = Field(
        default=1,
        description="Minimum number of matching characters",
    )

    @field_validator("unicode_ranges")
    @classmethod
    def validate_ranges(cls, v: list[str]) -> list[str]:
        """Validate that the ranges form a valid character class."""
        try:
            _ = re.compile(f"[{''.join(v)}]")
        except re.error as e:
            raise ValueError(f"Invalid unicode range: {e}") from e
        return v


class ScannerConfig(BaseModel):
    """Root configuration object."""

    model_config = ConfigDict(extra="forbid")

    i18n_functions: list[I18nFunctionConfig] = Field(
        default_factory=_default_functions,
        description="Translation functions to look for",
        min_length=1,
    )
    scan_config: ScanSettings = Field(default_factory=ScanSettings)
    output_config: OutputSettings = Field(default_factory=OutputSettings)
    translated_files: dict[str, str] = Field(
        default_factory=dict,
        description="Existing translation files by language code (.json or .po)",
    )
    chinese_detection: ChineseDetectionSettings = Field(
        default_factory=ChineseDetectionSettings
    )

    def get_translated_file(self, language: str = "zh_cn") -> str | None:
        return self.translated_files.get(language)
