# ============================================================================
# FILE: test_config.py
# RELPATH: assetfs/tests/unit/test_config.py
# PROJECT: assetfs
# VERSION: 1.0.0
# DESCRIPTION: Unit tests for ConfigManager
# ============================================================================

"""
Unit tests for configuration management.

Tests loading, saving, merging with defaults and validation.
"""

import json

import pytest

from assetfs.config import ConfigManager
from assetfs.exceptions import ConfigLoadError, ConfigValidationError


@pytest.fixture
def temp_config_file(temp_dir):
    """Path to a not-yet-existing config file."""
    return temp_dir / "assetfs_config.json"


class TestConfigManagerBasics:
    """Tests for basic ConfigManager operations."""

    def test_defaults_without_file(self, temp_config_file):
        """Missing file gives defaults and is not created."""
        config = ConfigManager(temp_config_file)

        assert config.get('generate.identifier') == 'assets'
        assert config.get('generate.output') == 'assets_generated.py'
        assert config.get('generate.directory') == 'assets'
        assert config.get('generate.package') == 'main'
        assert config.get('serve.port') == 12345
        assert not temp_config_file.exists()

    def test_create_writes_defaults(self, temp_config_file):
        ConfigManager(temp_config_file, create=True)

        data = json.loads(temp_config_file.read_text(encoding='utf-8'))
        assert data == ConfigManager.DEFAULT_CONFIG

    def test_save_and_load_roundtrip(self, temp_config_file):
        config1 = ConfigManager(temp_config_file)
        config1.set('generate.identifier', 'static')
        config1.set('serve.port', 8080)
        config1.save()

        config2 = ConfigManager(temp_config_file)

        assert config2.get('generate.identifier') == 'static'
        assert config2.get('serve.port') == 8080

    def test_partial_file_merged_with_defaults(self, temp_config_file):
        temp_config_file.write_text(json.dumps({"generate": {"directory": "public"}}))

        config = ConfigManager(temp_config_file)

        assert config.get('generate.directory') == 'public'
        assert config.get('generate.identifier') == 'assets'
        assert config.get('serve.host') == '127.0.0.1'

    def test_unknown_keys_preserved(self, temp_config_file):
        temp_config_file.write_text(json.dumps({"custom": {"x": 1}, "generate": {"extra": True}}))

        config = ConfigManager(temp_config_file)
        config.save()

        data = json.loads(temp_config_file.read_text())
        assert data["custom"] == {"x": 1}
        assert data["generate"]["extra"] is True

    def test_get_with_default(self, temp_config_file):
        config = ConfigManager(temp_config_file)

        assert config.get('nonexistent.key', 'default_value') == 'default_value'
        assert config.get('generate.identifier.deeper', 'd') == 'd'

    def test_set_creates_missing_keys(self, temp_config_file):
        config = ConfigManager(temp_config_file)

        config.set('new_section.new_subsection.key', 'value')

        assert config.get('new_section.new_subsection.key') == 'value'

    def test_defaults_not_shared_between_instances(self, temp_config_file, temp_dir):
        config1 = ConfigManager(temp_config_file)
        config1.set('generate.identifier', 'changed')

        config2 = ConfigManager(temp_dir / "other.json")

        assert config2.get('generate.identifier') == 'assets'
        assert ConfigManager.DEFAULT_CONFIG['generate']['identifier'] == 'assets'

    def test_reset_to_defaults(self, temp_config_file):
        config = ConfigManager(temp_config_file)
        config.set('serve.port', 1)

        config.reset_to_defaults()

        assert config.get('serve.port') == 12345
        assert temp_config_file.exists()

    def test_export_dict_is_a_copy(self, temp_config_file):
        config = ConfigManager(temp_config_file)

        exported = config.export_dict()
        exported['generate']['identifier'] = 'mutated'

        assert config.get('generate.identifier') == 'assets'


class TestConfigLoadErrors:
    """Unreadable configuration files."""

    def test_invalid_json(self, temp_config_file):
        temp_config_file.write_text("{not json")

        with pytest.raises(ConfigLoadError, match="Invalid JSON"):
            ConfigManager(temp_config_file)

    def test_top_level_not_object(self, temp_config_file):
        temp_config_file.write_text("[1, 2]")

        with pytest.raises(ConfigLoadError, match="must be an object"):
            ConfigManager(temp_config_file)


class TestConfigValidation:
    """Tests for validate()."""

    def test_defaults_are_valid(self, temp_config_file):
        assert ConfigManager(temp_config_file).validate() is True

    @pytest.mark.parametrize("key,value", [
        ('generate.identifier', '1abc'),
        ('generate.identifier', ''),
        ('generate.output', ''),
        ('generate.directory', '   '),
        ('generate.package', 'not-a-package'),
        ('serve.port', 0),
        ('serve.port', 70000),
        ('serve.port', '8080'),
        ('serve.port', True),
    ])
    def test_invalid_values(self, temp_config_file, key, value):
        config = ConfigManager(temp_config_file)
        config.set(key, value)

        with pytest.raises(ConfigValidationError) as exc_info:
            config.validate()

        assert exc_info.value.key == key

    def test_empty_package_allowed(self, temp_config_file):
        config = ConfigManager(temp_config_file)
        config.set('generate.package', '')

        assert config.validate() is True

    def test_missing_section(self, temp_config_file):
        config = ConfigManager(temp_config_file)
        del config.config['serve']

        with pytest.raises(ConfigValidationError, match="serve"):
            config.validate()
