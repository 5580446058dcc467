"""Filesystem helpers for the compiler CLIs.

Provides:
    - Atomic program writes, so a printer spooler or slicer host watching
      the output folder never picks up a half-written ``.gcode`` file
    - YAML loading for configs and movement files (JSON parses too)
    - Optional text reading for start/end G-code snippets

The compilation core performs no I/O; everything that touches disk lives here
or in ``silkworm.scripts``.

Usage:
    from silkworm.utils import fs
    data = fs.load_yaml("movements.yaml")
    fs.atomic_write_text("out/part.gcode", result.to_text())
"""

import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml


def atomic_write_text(
    path: Union[str, Path],
    text: str,
    encoding: str = "utf-8",
) -> None:
    """Write a program next to its target, then rename it into place.

    Parent folders are created. The partial file is a hidden sibling
    (``.part.gcode.partial``) and is removed whether or not the write
    succeeds. Lines are always written with ``\\n`` endings.

    Raises
    ------
    RuntimeError
        If writing or renaming fails
    """
    path = Path(path)
    partial = path.with_name(f".{path.name}.partial")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(partial, "w", encoding=encoding, newline="\n") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        partial.replace(path)
    except OSError as e:
        raise RuntimeError(f"Failed to write {path}: {e}") from e
    finally:
        if partial.exists():
            partial.unlink()


def load_yaml(path: Union[str, Path]) -> Any:
    """Parse a YAML (or JSON) document with ``yaml.safe_load``.

    An empty document yields ``None``; callers decide whether that is an
    error.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist
    yaml.YAMLError
        If the document is malformed (message names the file)
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"YAML file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e


def read_text(path: Optional[Union[str, Path]], encoding: str = "utf-8") -> Optional[str]:
    """Read a start/end G-code snippet, passing ``None`` through."""
    if path is None:
        return None
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Text file not found: {path}")
    return path.read_text(encoding=encoding)
