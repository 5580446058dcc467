"""
Configuration module.

Loads ``compiler.yaml`` and validates it into frozen pydantic models.
"""

from silkworm.configs.loader import CompilerConfig, load_config

__all__ = ["CompilerConfig", "load_config"]
