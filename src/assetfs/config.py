# ============================================================================
# FILE: config.py
# RELPATH: assetfs/src/assetfs/config.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: JSON configuration manager with defaults and validation
# ============================================================================

"""
Configuration Manager for assetfs.

Holds the defaults for the ``generate`` and ``serve`` commands so that a
project can keep its identifier, output file and source directory in one
place instead of repeating flags. Command-line flags override the file;
the file overrides the built-in defaults. Unknown keys are preserved.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from assetfs.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError
)


class ConfigManager:
    """
    Manages assetfs configuration stored as JSON.

    Values are addressed with dot paths, e.g. ``generate.identifier``.
    """

    DEFAULT_CONFIG = {
        "generate": {
            "identifier": "assets",
            "output": "assets_generated.py",
            "directory": "assets",
            "package": "main"
        },
        "logging": {
            "enabled": False,
            "log_dir": "logs"
        },
        "serve": {
            "host": "127.0.0.1",
            "port": 12345
        }
    }

    def __init__(self, config_file: Union[str, Path] = "assetfs_config.json", create: bool = False):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file
            create: Write the defaults to ``config_file`` if it does not exist
        """
        self.config_file = Path(config_file)
        self.config: Dict = {}
        self._load_or_create(create)

    def _load_or_create(self, create: bool) -> None:
        if self.config_file.exists():
            self.load()
        else:
            self.config = self._deep_copy(self.DEFAULT_CONFIG)
            if create:
                self.save()

    def load(self) -> Dict:
        """
        Load configuration from file, filling in missing keys from defaults.

        Returns:
            Loaded configuration dictionary

        Raises:
            ConfigLoadError: If file cannot be loaded or parsed
        """
        try:
            text = self.config_file.read_text(encoding='utf-8')
            data = json.loads(text)
        except FileNotFoundError:
            raise ConfigLoadError(str(self.config_file), "File not found")
        except json.JSONDecodeError as e:
            raise ConfigLoadError(str(self.config_file), f"Invalid JSON: {str(e)}")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigLoadError(str(self.config_file), str(e))

        if not isinstance(data, dict):
            raise ConfigLoadError(str(self.config_file), "Top-level value must be an object")

        self.config = self._merge(self._deep_copy(self.DEFAULT_CONFIG), data)
        return self.config

    def save(self) -> None:
        """
        Save configuration to file.

        Raises:
            ConfigError: If file cannot be written
        """
        try:
            text = json.dumps(self.config, indent=2, ensure_ascii=False)
            self.config_file.write_text(text + "\n", encoding='utf-8')
        except OSError as e:
            raise ConfigError(f"Failed to save config: {str(e)}")

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Recursively overlay ``override`` on ``base``; unknown keys are kept."""
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                base[key] = self._merge(base[key], value)
            else:
                base[key] = value
        return base

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot-notation path.

        Args:
            key_path: Dot-separated path (e.g., 'generate.identifier')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config
        for key in key_path.split('.'):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot-notation path."""
        keys = key_path.split('.')
        target = self.config
        for key in keys[:-1]:
            if not isinstance(target.get(key), dict):
                target[key] = {}
            target = target[key]
        target[keys[-1]] = value

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if valid

        Raises:
            ConfigValidationError: If validation fails
        """
        for section in ("generate", "serve"):
            if not isinstance(self.config.get(section), dict):
                raise ConfigValidationError(section, None, f"Required section '{section}' missing")

        self._validate_identifier()
        self._validate_non_empty('generate.output')
        self._validate_non_empty('generate.directory')
        self._validate_package()
        self._validate_port()
        return True

    def _validate_identifier(self) -> None:
        value = self.get('generate.identifier')
        if not isinstance(value, str) or not value.isidentifier():
            raise ConfigValidationError('generate.identifier', value, "Must be a valid Python identifier")

    def _validate_non_empty(self, key_path: str) -> None:
        value = self.get(key_path)
        if not isinstance(value, str) or not value.strip():
            raise ConfigValidationError(key_path, value, "Must be a non-empty string")

    def _validate_package(self) -> None:
        value = self.get('generate.package')
        if value in (None, ""):
            return
        if not isinstance(value, str) or not all(part.isidentifier() for part in value.split('.')):
            raise ConfigValidationError('generate.package', value, "Must be a dotted module name")

    def _validate_port(self) -> None:
        value = self.get('serve.port')
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 65535:
            raise ConfigValidationError('serve.port', value, "Must be an integer between 1 and 65535")

    def _deep_copy(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: self._deep_copy(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._deep_copy(item) for item in obj]
        else:
            return obj

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values and save."""
        self.config = self._deep_copy(self.DEFAULT_CONFIG)
        self.save()

    def export_dict(self) -> Dict:
        """Deep copy of the current configuration."""
        return self._deep_copy(self.config)
