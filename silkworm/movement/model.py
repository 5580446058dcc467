"""Movement model -- the vocabulary between print paths and G-code.

A *movement* is one unit of a print program.  It is one of three immutable,
slotted dataclasses sharing the :class:`Movement` base:

``PathSegment``
    An extruding polyline through 3-D vertices with a flow (extrusion
    cross-section, mm²) and a speed (mm/s).
``Point``
    A stationary position where material is deposited in place (priming)
    and the nozzle optionally dwells.
``RawInstruction``
    Literal G-code passed through unchanged.

Each variant carries only the fields relevant to it, so combinations such as
"a raw instruction that is also complete" cannot be expressed.

Rendering
---------
``render(extrusion_absolute, state, settings)`` returns the G-code lines for
one movement together with the updated :class:`ExtrusionState`.  Movements
hold no accumulated state themselves; the compiler threads the extrusion
state from one movement to the next, in program order.

Units
-----
Coordinates in mm, speeds in **mm/s**.  Conversion to the G-code ``F``
parameter (mm/min) happens only at the rendering boundary::

    F_value = speed_mm_s * 60.0

Extrusion
---------
``ΔE = segment length × flow`` is a volume (mm³).  With
``RenderSettings.filament_diameter`` set, the volume is divided by the
filament cross-section to give filament length instead.
"""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

import numpy as np

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Vec3 = tuple[float, float, float]
"""Cartesian position (x, y, z) in mm."""

RenderOutput = tuple[list[str], "ExtrusionState"]
"""G-code lines for one movement plus the extrusion state after it."""

_G92_E = re.compile(r"^G92\b.*?\bE(-?\d+(?:\.\d*)?)", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ZExtent:
    """Z range covered by a movement (mm).

    ``min`` is the key used for layer assignment.
    """

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError(
                f"ZExtent min must be <= max, got {self.min} > {self.max}"
            )


@dataclass(frozen=True, slots=True)
class ExtrusionState:
    """Running extrusion total threaded through a compile.

    Parameters
    ----------
    e : float
        Extrusion emitted since the last ``G92 E`` reset.  This is the
        axis value written in absolute-extrusion mode.
    """

    e: float = 0.0

    def advance(self, delta: float) -> ExtrusionState:
        return ExtrusionState(e=self.e + delta)


@dataclass(frozen=True, slots=True)
class RenderSettings:
    """Number formatting and extrusion conversion for rendering.

    Parameters
    ----------
    coordinate_decimals : int
        Decimal places for X/Y/Z words.
    extrusion_decimals : int
        Decimal places for the E word.
    travel_speed_mm_s : float
        Feed for non-extruding ``G0`` moves.
    filament_diameter : float | None
        Filament diameter in mm.  ``None`` emits volumetric E values (mm³),
        as used with ``M200`` volumetric mode or paste/ceramic extruders.
    """

    coordinate_decimals: int = 3
    extrusion_decimals: int = 5
    travel_speed_mm_s: float = 50.0
    filament_diameter: float | None = None

    def __post_init__(self) -> None:
        if self.coordinate_decimals < 0 or self.extrusion_decimals < 0:
            raise ValueError("decimal places must be >= 0")
        if self.travel_speed_mm_s <= 0:
            raise ValueError(
                f"travel_speed_mm_s must be > 0, got {self.travel_speed_mm_s}"
            )
        if self.filament_diameter is not None and self.filament_diameter <= 0:
            raise ValueError(
                f"filament_diameter must be > 0, got {self.filament_diameter}"
            )

    def extrusion_for_volume(self, volume_mm3: float) -> float:
        """Convert a deposited volume to an E-axis distance."""
        if self.filament_diameter is None:
            return volume_mm3
        area = math.pi * (self.filament_diameter / 2.0) ** 2
        return volume_mm3 / area


DEFAULT_RENDER_SETTINGS = RenderSettings()

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_complete(flow: float, speed: float) -> bool:
    """A movement is printable once both flow and speed are set (> 0)."""
    return flow > 0 and speed > 0


def _f(speed_mm_s: float) -> str:
    """Convert mm/s feed rate to G-code ``F`` parameter (mm/min)."""
    return f"F{speed_mm_s * 60.0:.1f}"


def _xyz(p: Vec3, decimals: int) -> str:
    x, y, z = p
    return f"X{x:.{decimals}f} Y{y:.{decimals}f} Z{z:.{decimals}f}"


def _check_vec3(p: Vec3, what: str) -> None:
    if len(p) != 3:
        raise ValueError(f"{what} must have 3 coordinates (x, y, z), got {p!r}")


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Movement(ABC):
    """Base class for all movements."""

    is_raw_instruction: ClassVar[bool] = False
    is_single_point: ClassVar[bool] = False

    @property
    def complete(self) -> bool:
        return False

    @property
    def z_extent(self) -> ZExtent | None:
        return None

    @abstractmethod
    def render(
        self,
        extrusion_absolute: bool,
        state: ExtrusionState = ExtrusionState(),
        settings: RenderSettings = DEFAULT_RENDER_SETTINGS,
    ) -> RenderOutput:
        """Render this movement to G-code lines.

        Parameters
        ----------
        extrusion_absolute : bool
            ``True`` writes the running total as E (``M82``), ``False``
            writes per-move increments (``M83``).
        state : ExtrusionState
            Extrusion state after the previous movement.
        settings : RenderSettings
            Number formatting and extrusion conversion.

        Returns
        -------
        tuple[list[str], ExtrusionState]
            Lines for this movement and the state after it.
        """


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PathSegment(Movement):
    """Extruding polyline.

    Parameters
    ----------
    points : tuple[Vec3, ...]
        Ordered vertices in mm.  Must contain >= 2 points.
    flow : float
        Extrusion cross-section in mm² (line width × layer height).
        ``0`` means not yet assigned.
    speed : float
        Print speed in mm/s.  ``0`` means not yet assigned.
    """

    points: tuple[Vec3, ...]
    flow: float = 0.0
    speed: float = 0.0

    def __post_init__(self) -> None:
        if len(self.points) < 2:
            raise ValueError(
                f"PathSegment requires >= 2 points, got {len(self.points)}"
            )
        for p in self.points:
            _check_vec3(p, "PathSegment point")

    @property
    def complete(self) -> bool:
        return is_complete(self.flow, self.speed)

    @property
    def z_extent(self) -> ZExtent:
        zs = [p[2] for p in self.points]
        return ZExtent(min=min(zs), max=max(zs))

    def segment_lengths(self) -> np.ndarray:
        """Euclidean length of each edge between consecutive vertices."""
        pts = np.asarray(self.points, dtype=np.float64)
        return np.linalg.norm(np.diff(pts, axis=0), axis=1)

    @property
    def length(self) -> float:
        return float(self.segment_lengths().sum())

    def render(
        self,
        extrusion_absolute: bool,
        state: ExtrusionState = ExtrusionState(),
        settings: RenderSettings = DEFAULT_RENDER_SETTINGS,
    ) -> RenderOutput:
        cd = settings.coordinate_decimals
        ed = settings.extrusion_decimals
        lines = [
            f"G0 {_xyz(self.points[0], cd)} {_f(settings.travel_speed_mm_s)}"
        ]
        for p, seg_len in zip(self.points[1:], self.segment_lengths()):
            delta = settings.extrusion_for_volume(float(seg_len) * self.flow)
            state = state.advance(delta)
            e = state.e if extrusion_absolute else delta
            lines.append(f"G1 {_xyz(p, cd)} E{e:.{ed}f} {_f(self.speed)}")
        return lines, state


@dataclass(frozen=True, slots=True)
class Point(Movement):
    """Stationary deposit (priming blob, dwell).

    Parameters
    ----------
    position : Vec3
        Nozzle position in mm.
    flow : float
        Volume deposited in place (mm³).  ``0`` means not yet assigned.
    speed : float
        Extruder feed for the in-place extrusion (mm/s).
    dwell_s : float
        Pause after extruding, seconds.  ``0`` emits no ``G4``.
    """

    is_single_point: ClassVar[bool] = True

    position: Vec3
    flow: float = 0.0
    speed: float = 0.0
    dwell_s: float = 0.0

    def __post_init__(self) -> None:
        _check_vec3(self.position, "Point position")
        if self.dwell_s < 0:
            raise ValueError(f"dwell_s must be >= 0, got {self.dwell_s}")

    @property
    def complete(self) -> bool:
        return is_complete(self.flow, self.speed)

    @property
    def z_extent(self) -> ZExtent:
        z = self.position[2]
        return ZExtent(min=z, max=z)

    def render(
        self,
        extrusion_absolute: bool,
        state: ExtrusionState = ExtrusionState(),
        settings: RenderSettings = DEFAULT_RENDER_SETTINGS,
    ) -> RenderOutput:
        cd = settings.coordinate_decimals
        ed = settings.extrusion_decimals
        delta = settings.extrusion_for_volume(self.flow)
        state = state.advance(delta)
        e = state.e if extrusion_absolute else delta
        lines = [
            f"G0 {_xyz(self.position, cd)} {_f(settings.travel_speed_mm_s)}",
            f"G1 E{e:.{ed}f} {_f(self.speed)}",
        ]
        if self.dwell_s > 0:
            lines.append(f"G4 P{int(round(self.dwell_s * 1000))}")
        return lines, state


@dataclass(frozen=True, slots=True)
class RawInstruction(Movement):
    """Literal G-code passed through unchanged.

    Parameters
    ----------
    text : str
        One or more G-code lines.  Lines are stripped and blank lines
        dropped; at least one non-blank line is required.

    Notes
    -----
    A ``G92 E<value>`` line resets the threaded extrusion state to
    ``<value>`` so that absolute E values stay consistent afterwards.
    """

    is_raw_instruction: ClassVar[bool] = True

    text: str

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("RawInstruction requires at least one non-blank line")

    @property
    def lines(self) -> list[str]:
        return [line.strip() for line in self.text.splitlines() if line.strip()]

    def render(
        self,
        extrusion_absolute: bool,
        state: ExtrusionState = ExtrusionState(),
        settings: RenderSettings = DEFAULT_RENDER_SETTINGS,
    ) -> RenderOutput:
        lines = self.lines
        for line in lines:
            m = _G92_E.match(line.split(";", 1)[0])
            if m:
                state = ExtrusionState(e=float(m.group(1)))
        return lines, state
