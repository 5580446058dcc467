"""
Movement model.

Defines the three movement variants as immutable dataclasses together with
their G-code rendering.  This vocabulary is the contract between path
construction (owned by the caller) and program compilation.

All coordinates are in millimeters, speeds in mm/s.
"""

from silkworm.movement.model import (
    DEFAULT_RENDER_SETTINGS,
    ExtrusionState,
    Movement,
    PathSegment,
    Point,
    RawInstruction,
    RenderSettings,
    ZExtent,
    is_complete,
)

__all__ = [
    "DEFAULT_RENDER_SETTINGS",
    "ExtrusionState",
    "Movement",
    "PathSegment",
    "Point",
    "RawInstruction",
    "RenderSettings",
    "ZExtent",
    "is_complete",
]
