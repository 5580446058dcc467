"""Tests for the configuration loader.

Validates that the shipped compiler.yaml loads, that partial files fall back
to defaults, and that invalid files raise ConfigError with the path.
"""

from __future__ import annotations

from pathlib import Path

import pydantic
import pytest

from silkworm.configs.loader import DEFAULT_CONFIG_PATH, CompilerConfig, load_config
from silkworm.errors import ConfigError
from silkworm.movement.model import RenderSettings


def write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "compiler.yaml"
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> CompilerConfig:
    """Load the default compiler.yaml shipped with the package."""
    return load_config()


# ---------------------------------------------------------------------------
# Shipped defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_shipped_file_exists(self) -> None:
        assert DEFAULT_CONFIG_PATH.exists()

    def test_compile_defaults(self, config: CompilerConfig) -> None:
        assert config.compile.extrusion_absolute is True
        assert config.compile.layer_height == 0.8
        assert config.compile.start_gcode is None
        assert config.compile.end_gcode is None

    def test_flow_defaults(self, config: CompilerConfig) -> None:
        assert config.flow.layer_height == 0.8
        assert config.flow.line_width == 1.5
        assert config.flow.multiplier == 1.0

    def test_render_settings(self, config: CompilerConfig) -> None:
        settings = config.render.to_settings()
        assert isinstance(settings, RenderSettings)
        assert settings == RenderSettings()

    def test_logging_defaults(self, config: CompilerConfig) -> None:
        assert config.logging.level == "INFO"
        assert config.logging.json_format is False
        assert config.logging.file is None

    def test_frozen(self, config: CompilerConfig) -> None:
        with pytest.raises(pydantic.ValidationError):
            config.compile.layer_height = 0.2  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Custom files
# ---------------------------------------------------------------------------


class TestCustomFiles:
    def test_partial_file_keeps_defaults(self, tmp_path: Path) -> None:
        path = write(tmp_path, "render:\n  filament_diameter: 1.75\n")
        cfg = load_config(path)
        assert cfg.render.filament_diameter == 1.75
        assert cfg.render.coordinate_decimals == 3
        assert cfg.compile.layer_height == 0.8

    def test_level_case_insensitive(self, tmp_path: Path) -> None:
        cfg = load_config(write(tmp_path, "logging:\n  level: debug\n"))
        assert cfg.logging.level == "DEBUG"

    def test_log_rotation(self, tmp_path: Path) -> None:
        text = "logging:\n  file: run.log\n  timezone: local\n  rotate:\n    mode: time\n    when: H\n"
        cfg = load_config(write(tmp_path, text))
        options = cfg.logging.handler_options()
        assert options["log_file"] == "run.log"
        assert options["tz"] == "local"
        assert options["rotate"]["mode"] == "time"
        assert options["rotate"]["when"] == "H"
        assert cfg.logging.handler_options("cli.log")["log_file"] == "cli.log"

    def test_no_rotation_by_default(self, config: CompilerConfig) -> None:
        assert config.logging.handler_options()["rotate"] is None
        assert config.logging.handler_options()["tz"] == "UTC"

    def test_custom_gcode_blocks(self, tmp_path: Path) -> None:
        text = "compile:\n  start_gcode: |\n    G28\n    G92 E0\n  extrusion_absolute: false\n"
        cfg = load_config(write(tmp_path, text))
        assert cfg.compile.start_gcode == "G28\nG92 E0\n"
        assert cfg.compile.extrusion_absolute is False


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Empty configuration file"):
            load_config(write(tmp_path, ""))

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            load_config(write(tmp_path, "- 1\n- 2\n"))

    def test_unknown_key(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(write(tmp_path, "compile:\n  layer_hieght: 0.2\n"))

    def test_non_positive_travel_speed(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(write(tmp_path, "render:\n  travel_speed_mm_s: 0\n"))

    def test_non_positive_layer_height(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(write(tmp_path, "compile:\n  layer_height: -0.2\n"))

    def test_bad_log_level(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(write(tmp_path, "logging:\n  level: LOUD\n"))

    def test_bad_rotation_mode(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(write(tmp_path, "logging:\n  rotate:\n    mode: weekly\n"))
