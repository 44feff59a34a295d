"""Configuration loading and validation for i18nscan."""

from .manager import CONFIG_FILE_CANDIDATES, ConfigManager
from .schema import (
    ChineseDetectionSettings,
    I18nFunctionConfig,
    OutputSettings,
    ScannerConfig,
    ScanSettings,
)

__all__ = [
    "CONFIG_FILE_CANDIDATES",
    "ChineseDetectionSettings",
    "ConfigManager",
    "I18nFunctionConfig",
    "OutputSettings",
    "ScanSettings",
    "ScannerConfig",
]
