"""
Unit tests for configuration loading, validation and the config singleton.
"""

from pathlib import Path

import pytest

from buildwatch.config import (
    get_config,
    get_config_info,
    is_config_loaded,
    set_config_path,
    validate_app_config,
)
from buildwatch.models.config import AppConfig
from buildwatch.validation import ValidationError


@pytest.mark.unit
class TestValidateAppConfig:
    """Test cases for validate_app_config."""

    def test_empty_document_uses_defaults(self):
        config = validate_app_config({})

        assert config == AppConfig()
        assert config.watch.extensions == [".go"]
        assert config.build.name == "Build"
        assert config.build.args == ["go", "build", "./..."]
        assert config.test.name == "Test"
        assert config.test.args == ["go", "test", "-v", "./..."]
        assert config.output.merge_stderr is False
        assert config.output.clear_screen is True
        assert config.logging.level == "WARNING"
        assert config.logging.file is None

    def test_full_document(self, sample_config_data, temp_dir):
        config = validate_app_config(sample_config_data, base_dir=temp_dir)

        assert config.watch.root == temp_dir / "."
        assert config.watch.extensions == [".go", ".mod"]
        assert config.watch.recursive is False
        assert config.watch.health_check_interval == 0.5
        assert config.build.name == "Compile"
        assert config.build.args == ["make", "all"]
        assert config.test.args == ["make", "test"]
        assert config.output.merge_stderr is True
        assert config.output.clear_screen is False
        assert config.logging.level == "DEBUG"
        assert config.logging.file == temp_dir / "logs" / "buildwatch.log"

    def test_absolute_root_is_kept(self, temp_dir):
        config = validate_app_config({"watch": {"root": str(temp_dir)}}, base_dir=Path("/elsewhere"))
        assert config.watch.root == temp_dir

    @pytest.mark.parametrize(
        "data, field",
        [
            ({"watch": {"recursive": "yes"}}, "watch.recursive"),
            ({"watch": {"extensions": []}}, "watch.extensions"),
            ({"watch": {"health_check_interval": 0}}, "watch.health_check_interval"),
            ({"commands": {"build": {"args": []}}}, "commands.build.args"),
            ({"commands": {"test": {"name": ""}}}, "commands.test.name"),
            ({"output": {"clear_screen": 1}}, "output.clear_screen"),
            ({"logging": {"level": "LOUD"}}, "logging.level"),
            ({"watch": "here"}, "watch"),
        ],
    )
    def test_invalid_values(self, data, field):
        with pytest.raises(ValidationError) as exc_info:
            validate_app_config(data)
        assert exc_info.value.field_name == field


@pytest.mark.unit
class TestConfigManager:
    """Test cases for the configuration singleton."""

    def test_explicit_path_is_loaded_once(self, config_file):
        set_config_path(config_file)
        assert not is_config_loaded()

        first = get_config()
        assert first.build.name == "Compile"
        assert get_config() is first
        assert is_config_loaded()

        info = get_config_info()
        assert info["config_path"] == str(config_file)
        assert info["explicit_path"] is True

    def test_missing_explicit_path_is_an_error(self, temp_dir):
        set_config_path(temp_dir / "nope.toml")
        with pytest.raises(FileNotFoundError):
            get_config()

    def test_missing_default_file_uses_defaults(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        config = get_config()
        assert config.build.args == ["go", "build", "./..."]
        assert config.watch.root.resolve() == temp_dir.resolve()

    def test_default_file_in_working_directory(self, config_file, monkeypatch):
        monkeypatch.chdir(config_file.parent)
        assert get_config().test.name == "Check"

    def test_malformed_toml(self, temp_dir):
        path = temp_dir / "broken.toml"
        path.write_text("[watch\nroot = ")
        set_config_path(path)
        with pytest.raises(ValueError):
            get_config()
