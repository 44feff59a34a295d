"""
Global test configuration fixtures for i18nscan tests.

This module provides reusable pytest fixtures for the sample Go source used
by the integration tests and for small on-disk projects with a ``ci.yaml``.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from i18nscan.config.schema import ScannerConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SAMPLE_KEYS: list[str] = [
    "你好，世界！",
    "你好，",
    "欢迎光临\n本店",
    "购物车为空",
    "订单确认",
    "您的订单已确认，订单号：",
    "已支付",
    "已发货",
    "未知状态：",
    "Order shipped",
]


@pytest.fixture
def sample_go_file() -> Path:
    """Path to the sample Go source shipped with the tests."""
    return FIXTURES_DIR / "sample.go"


@pytest.fixture
def sample_keys() -> list[str]:
    """Keys extracted from the sample with the default functions, in order."""
    return list(SAMPLE_KEYS)


@pytest.fixture
def default_config() -> ScannerConfig:
    """Configuration with every default value."""
    return ScannerConfig()


@pytest.fixture
def go_project(tmp_path: Path, sample_go_file: Path) -> Path:
    """
    Create a small project on disk.

    Layout::

        ci.yaml
        src/shop/sample.go
        src/vendor/lib.go          (excluded by name)
        locales/zh-CN.json         (translates two sample keys)

    Returns:
        Path: The project root
    """
    source_dir = tmp_path / "src" / "shop"
    _ = source_dir.mkdir(parents=True)
    _ = (source_dir / "sample.go").write_text(
        sample_go_file.read_text(encoding="utf-8"), encoding="utf-8"
    )

    vendor_dir = tmp_path / "src" / "vendor"
    _ = vendor_dir.mkdir(parents=True)
    _ = (vendor_dir / "lib.go").write_text(
        'package lib\n\nvar _ = t("第三方库")\n', encoding="utf-8"
    )

    locales_dir = tmp_path / "locales"
    _ = locales_dir.mkdir()
    _ = (locales_dir / "zh-CN.json").write_text(
        '{"你好，世界！": "Hello, world!", "订单确认": "Order confirmation", "已支付": ""}\n',
        encoding="utf-8",
    )

    config_data: dict[str, object] = {
        "i18n_functions": [
            {"name": "t"},
            {"name": "i18n.T"},
            {"name": "Translate"},
        ],
        "scan_config": {
            "source_dirs": ["./src"],
            "exclude_dirs": ["vendor"],
            "file_extensions": [".go"],
            "recursive": True,
            "max_workers": 2,
        },
        "output_config": {
            "output_file": "./out/terms.json",
            "format": "json",
            "include_location": True,
        },
        "translated_files": {"zh_cn": "./locales/zh-CN.json"},
    }
    with (tmp_path / "ci.yaml").open("w", encoding="utf-8") as f:
        yaml.dump(config_data, f, allow_unicode=True, sort_keys=False)

    return tmp_path
