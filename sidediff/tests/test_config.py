# sidediff/tests/test_config.py
"""Tests for the sidediff config loader."""

import json
from pathlib import Path

import pytest

from ..config import SideDiffConfig, load_config, validate_config
from ..errors import ConfigValidationError
from ..renderer import FoldMode, MarkPosition


class TestSideDiffConfig:
    """Tests for SideDiffConfig dataclass."""

    def test_default_values(self):
        """Test default configuration values."""
        config = SideDiffConfig()

        assert config.version == "1.0"
        assert config.width is None
        assert config.fold == "fold"
        assert config.mark == "center"
        assert config.color_mode == "auto"
        assert config.diff_program == "diff"

    def test_to_render_options_uses_terminal_width(self):
        options = SideDiffConfig(fold="word", mark="side").to_render_options(width=99)

        assert options.width == 99
        assert options.fold_mode == FoldMode.WORD
        assert options.mark_position == MarkPosition.SIDE

    def test_configured_width_wins(self):
        options = SideDiffConfig(width=120).to_render_options(width=99, view=True)
        assert options.width == 120
        assert options.view is True

    def test_to_color_map_overlays_defaults(self):
        colors = SideDiffConfig(color_map={"OTEXT": "red"}).to_color_map()
        assert colors.get("OTEXT") == "red"
        assert colors.get("NTEXT") is not None


class TestValidateConfig:
    """Tests for config validation."""

    def test_valid_config(self):
        """Test validation of a valid config."""
        config = {
            "version": "1.0",
            "width": 200,
            "fold": "word",
            "color": {"mode": "always", "system": "256", "map": {"OTEXT": "red"}},
            "diff": {"program": "diff", "options": ["-b"]},
        }

        is_valid, errors = validate_config(config)
        assert is_valid is True
        assert errors == []

    def test_invalid_version(self):
        is_valid, errors = validate_config({"version": "2.0"})
        assert is_valid is False
        assert any("version" in e for e in errors)

    @pytest.mark.parametrize("key,value", [
        ("width", 0),
        ("width", "wide"),
        ("digits", True),
        ("tabstop", -1),
    ])
    def test_invalid_integers(self, key, value):
        is_valid, errors = validate_config({key: value})
        assert is_valid is False
        assert any(key in e for e in errors)

    def test_invalid_choices(self):
        is_valid, errors = validate_config({"fold": "wrap", "mark": "top"})
        assert is_valid is False
        assert len(errors) == 2

    def test_unknown_color_field(self):
        is_valid, errors = validate_config({"color": {"map": {"QTEXT": "red"}}})
        assert is_valid is False
        assert any("QTEXT" in e for e in errors)

    def test_diff_options_must_be_strings(self):
        is_valid, errors = validate_config({"diff": {"options": ["-b", 3]}})
        assert is_valid is False

    def test_not_an_object(self):
        is_valid, errors = validate_config([])
        assert is_valid is False


class TestLoadConfig:
    """Tests for config loading."""

    def test_load_default_config(self):
        """Test loading default config when no file exists."""
        config = load_config()
        assert config == SideDiffConfig()

    def test_load_from_file(self, tmp_path):
        config_path = tmp_path / "sidediff.json"
        config_path.write_text(json.dumps({
            "width": 150,
            "number": True,
            "color": {"map": {"NTEXT": "green"}},
            "diff": {"options": ["-w"]},
        }))

        config = load_config(path=str(config_path))

        assert config.width == 150
        assert config.number is True
        assert config.color_map == {"NTEXT": "green"}
        assert config.diff_options == ["-w"]

    def test_load_from_env_var(self, tmp_path, monkeypatch):
        config_path = tmp_path / "env.json"
        config_path.write_text(json.dumps({"digits": 6}))
        monkeypatch.setenv("SIDEDIFF_CONFIG", str(config_path))

        assert load_config().digits == 6

    def test_load_from_working_directory(self):
        Path(".sidediff.json").write_text(json.dumps({"mark": "left"}))
        assert load_config().mark == "left"

    def test_load_from_home(self, tmp_path):
        home_config = tmp_path / ".config" / "sidediff" / "config.json"
        home_config.parent.mkdir(parents=True)
        home_config.write_text(json.dumps({"tabstop": 4}))

        assert load_config().tabstop == 4

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config(path="/nonexistent/sidediff.json")

    def test_invalid_json_raises(self, tmp_path):
        config_path = tmp_path / "bad.json"
        config_path.write_text("{not json")

        with pytest.raises(ConfigValidationError):
            load_config(path=str(config_path))

    def test_invalid_values_raise(self, tmp_path):
        config_path = tmp_path / "bad.json"
        config_path.write_text(json.dumps({"fold": "sideways"}))

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(path=str(config_path))
        assert exc_info.value.errors
