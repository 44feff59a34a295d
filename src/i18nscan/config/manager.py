"""Configuration manager for i18nscan.

This module provides functionality for locating, loading, validating and
creating the YAML configuration file (``ci.yaml`` by default) with Pydantic
model validation.
"""

import logging
import tempfile
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..utils.core.exceptions import ConfigurationError
from .schema import ScannerConfig


logger = logging.getLogger(__name__)

CONFIG_FILE_CANDIDATES: tuple[str, ...] = (
    "ci.yaml",
    "ci.yml",
    ".ci.yaml",
    ".ci.yml",
    "config/ci.yaml",
    "config/ci.yml",
)

CONFIG_HEADER = """\
# i18nscan configuration
#
# i18n_functions: translation functions whose string arguments are extracted.
#   'name' is a plain function ('t'), a package function ('i18n.T') or a
#   method on any receiver ('*.T').
# Relative paths are resolved against the directory of this file.

"""


def _looks_like_path(entry: str) -> bool:
    return "/" in entry or "\\" in entry or entry in {".", ".."}


class ConfigManager:
    """
    Configuration manager for handling YAML config files with Pydantic validation.

    All methods are static; the manager keeps no state of its own.
    """

    @staticmethod
    def find_config_file(start_dir: Path | None = None) -> Path:
        """
        Locate a configuration file in the well-known places.

        Args:
            start_dir: Directory to search from (default: current directory)

        Returns:
            Path: The first existing candidate

        Raises:
            ConfigurationError: If no configuration file exists
        """
        base = (start_dir or Path.cwd()).resolve()
        for candidate in CONFIG_FILE_CANDIDATES:
            path = base / candidate
            if path.is_file():
                logger.debug(f"Using configuration file {path}")
                return path

        raise ConfigurationError(
            f"No configuration file found in {base} (looked for {', '.join(CONFIG_FILE_CANDIDATES)})",
            user_message="No ci.yaml found. Run 'i18nscan init' to create one.",
        )

    @staticmethod
    def load_config(config_path: Path) -> ScannerConfig:
        """
        Load and validate configuration from a YAML file.

        Relative paths in the file are resolved against the file's directory.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            ScannerConfig: Validated configuration object

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML syntax is invalid
            ValueError: If the file does not contain a mapping
            ValidationError: If the configuration fails Pydantic validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ValueError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}"
            )

        for section in ("i18n_functions", "scan_config"):
            if section not in config_data:
                logger.warning(f"Configuration section '{section}' is missing, using defaults")

        config = ScannerConfig.model_validate(config_data)
        return ConfigManager.resolve_paths(config, config_path.resolve().parent)

    @staticmethod
    def resolve_paths(config: ScannerConfig, base_dir: Path) -> ScannerConfig:
        """
        Return a copy of the configuration with relative paths made absolute.

        Exclusions that are bare directory names (``vendor``, ``.git``) are
        kept as names and match at any depth.

        Args:
            config: Validated configuration
            base_dir: Directory relative paths are resolved against

        Returns:
            ScannerConfig: Configuration with absolute paths
        """

        def resolve(entry: str) -> str:
            path = Path(entry).expanduser()
            return str(path if path.is_absolute() else (base_dir / path).resolve())

        scan = config.scan_config.model_copy(
            update={
                "source_dirs": [resolve(d) for d in config.scan_config.source_dirs],
                "exclude_dirs": [
                    resolve(d) if _looks_like_path(d) else d
                    for d in config.scan_config.exclude_dirs
                ],
            }
        )
        output = config.output_config.model_copy(
            update={"output_file": resolve(config.output_config.output_file)}
        )
        translated = {
            language: resolve(path) for language, path in config.translated_files.items()
        }
        return config.model_copy(
            update={
                "scan_config": scan,
                "output_config": output,
                "translated_files": translated,
            }
        )

    @staticmethod
    def default_config_data() -> dict[str, object]:
        """Return the content written by ``i18nscan init``."""
        config = ScannerConfig.model_validate(
            {
                "scan_config": {"source_dirs": ["./src", "./internal"]},
                "translated_files": {
                    "zh_cn": "./locales/zh-CN.json",
                    "en_us": "./locales/en-US.json",
                },
                "chinese_detection": {"enabled": True},
            }
        )
        return config.model_dump(exclude_none=True)

    @staticmethod
    def save_config(config_data: dict[str, object], config_path: Path) -> None:
        """
        Save configuration to a YAML file with atomic operation.

        Args:
            config_data: Configuration mapping to save
            config_path: Path where to save the configuration

        Raises:
            OSError: If file operations fail
        """
        content_to_write = CONFIG_HEADER + yaml.dump(
            config_data,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=2,
        )

        # Atomic save operation using temporary file
        temp_file = None
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=config_path.parent,
                prefix=f".{config_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                _ = temp_file.write(content_to_write)
                temp_file.flush()
                temp_path = Path(temp_file.name)

            _ = temp_path.replace(config_path)

        except Exception as e:
            if temp_file and Path(temp_file.name).exists():
                Path(temp_file.name).unlink(missing_ok=True)
            raise OSError(f"Failed to save configuration to {config_path}: {e}") from e

    @staticmethod
    def create_default_config(output_path: Path, force: bool = False) -> Path:
        """
        Write the default configuration file.

        Args:
            output_path: Where to write the file
            force: Overwrite an existing file

        Returns:
            Path: The written file

        Raises:
            ConfigurationError: If the file exists and ``force`` is not set
        """
        if output_path.exists() and not force:
            raise ConfigurationError(
                f"Configuration file already exists: {output_path}",
                user_message=f"{output_path} already exists, use --force to overwrite it",
            )

        ConfigManager.save_config(ConfigManager.default_config_data(), output_path)
        logger.info(f"Default configuration written to {output_path}")
        return output_path

    @staticmethod
    def validate_config_file(config_path: Path) -> bool:
        """
        Check whether a configuration file loads and validates.

        Args:
            config_path: File to check

        Returns:
            bool: True if the file is valid
        """
        try:
            _ = ConfigManager.load_config(config_path)
        except (FileNotFoundError, yaml.YAMLError, ValueError, ValidationError) as e:
            logger.error(f"Configuration file {config_path} is invalid: {e}")
            return False
        return True
