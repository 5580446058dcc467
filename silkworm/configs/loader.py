"""Configuration loader for the compiler.

Loads and validates ``compiler.yaml`` into frozen pydantic models.  Default
compile options, rendering precision, flow calculator inputs and logging
settings all come from the config; CLI flags override individual values.

Usage::

    from silkworm.configs.loader import load_config
    cfg = load_config()                         # shipped defaults
    cfg = load_config("/custom/compiler.yaml")  # explicit path
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from silkworm.errors import ConfigError
from silkworm.movement.model import RenderSettings
from silkworm.utils.fs import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "compiler.yaml"


# ---------------------------------------------------------------------------
# Models -- mirror the YAML structure
# ---------------------------------------------------------------------------


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class CompileConfig(_Frozen):
    """Default options for a compile call."""

    extrusion_absolute: bool = True
    layer_height: float = Field(0.8, gt=0.0, description="Sets layer rounding precision")
    start_gcode: Optional[str] = None
    end_gcode: Optional[str] = None


class RenderConfig(_Frozen):
    """Number formatting and extrusion conversion."""

    coordinate_decimals: int = Field(3, ge=0, le=6)
    extrusion_decimals: int = Field(5, ge=0, le=8)
    travel_speed_mm_s: float = Field(50.0, gt=0.0)
    filament_diameter: Optional[float] = Field(None, gt=0.0)

    def to_settings(self) -> RenderSettings:
        return RenderSettings(
            coordinate_decimals=self.coordinate_decimals,
            extrusion_decimals=self.extrusion_decimals,
            travel_speed_mm_s=self.travel_speed_mm_s,
            filament_diameter=self.filament_diameter,
        )


class FlowConfig(_Frozen):
    """Default flow calculator inputs (mm)."""

    layer_height: float = 0.8
    line_width: float = 1.5
    multiplier: float = 1.0


class LogRotationConfig(_Frozen):
    """Log file rotation: by size (bytes) or by time (``when`` units)."""

    mode: Literal["size", "time"] = "size"
    max_bytes: int = Field(5_000_000, gt=0)
    backup_count: int = Field(3, ge=0)
    when: str = "D"
    interval: int = Field(1, gt=0)


class LoggingConfig(_Frozen):
    """Logging setup for the CLIs."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_format: bool = False
    file: Optional[str] = None
    rotate: Optional[LogRotationConfig] = None
    timezone: Literal["UTC", "local"] = "UTC"

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    def handler_options(self, log_file: Optional[str] = None) -> dict[str, Any]:
        """Keyword arguments for ``setup_logging``; ``log_file`` overrides ``file``."""
        return {
            "log_file": log_file or self.file,
            "json": self.json_format,
            "rotate": self.rotate.model_dump() if self.rotate else None,
            "tz": self.timezone,
        }


class CompilerConfig(_Frozen):
    """Top-level configuration."""

    compile: CompileConfig = CompileConfig()
    render: RenderConfig = RenderConfig()
    flow: FlowConfig = FlowConfig()
    logging: LoggingConfig = LoggingConfig()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> CompilerConfig:
    """Load and validate compiler configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``compiler.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    CompilerConfig
        Validated, frozen configuration.

    Raises
    ------
    ConfigError
        If the file is empty or any field fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    data = load_yaml(path)
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration root must be a mapping, got {type(data).__name__}: {path}"
        )

    try:
        config = CompilerConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration at {path}: {exc}") from exc

    logger.debug("Configuration loaded successfully")
    return config
