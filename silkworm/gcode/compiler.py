"""Program compiler -- movements to a complete G-code program.

Pipeline for one call:

1. Keep only :class:`Movement` items (others are reported and dropped) and
   reject an empty result.
2. Derive the layer rounding precision from how ``layer_height`` is written.
3. Detect the layer table.
4. Header: caller text, or the default unit/positioning/extrusion-mode setup.
5. Movements in input order.  Incomplete movements become a skip comment;
   a change of ``z_extent.min`` starts a layer comment block; everything
   else is rendered with the extrusion state threaded through.
6. Blank line, then footer: caller text or the default shutdown sequence.
7. Summary report.

Layer boundaries
----------------
The boundary test compares the **unrounded** ``z_extent.min`` of a movement
with that of the movement immediately before it in the input, while the
layer table holds **rounded** elevations.  Two movements a hair apart in Z
therefore get two ``; Layer`` comments carrying the same layer number.

Everything is built fresh per call: compiling the same input twice gives
byte-identical output unless ``generated_at`` differs.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable

from silkworm.errors import InputError
from silkworm.gcode.layers import (
    decimal_places,
    detect_layers,
    layer_index,
    round_z,
)
from silkworm.movement.model import (
    DEFAULT_RENDER_SETTINGS,
    ExtrusionState,
    Movement,
    RenderSettings,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompilationSummary:
    """Counters reported after a compile."""

    compiled: int
    skipped: int
    layer_count: int
    line_count: int
    extrusion_mode: str

    def to_text(self) -> str:
        return (
            f"Compiled {self.compiled} movements\n"
            f"Skipped {self.skipped} incomplete movements\n"
            f"Detected {self.layer_count} layers\n"
            f"Total GCode lines: {self.line_count}\n"
            f"Extrusion mode: {self.extrusion_mode}"
        )


@dataclass(frozen=True)
class CompilationResult:
    """Output of :func:`compile_movements`.

    Parameters
    ----------
    lines : list[str]
        Program lines, no terminators.  Blank lines are intentional
        separators.
    layer_z_values : list[float]
        Ascending rounded layer elevations.
    summary : CompilationSummary
        Counters.
    warnings : list[str]
        Advisories raised while compiling.
    """

    lines: list[str]
    layer_z_values: list[float]
    summary: CompilationSummary
    warnings: list[str] = field(default_factory=list)

    @property
    def layer_count(self) -> int:
        return len(self.layer_z_values)

    @property
    def info(self) -> str:
        return self.summary.to_text()

    def to_text(self) -> str:
        """Program as a single newline-terminated string."""
        return "\n".join(self.lines) + "\n"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _split_block(text: str) -> list[str]:
    """Split user G-code on line breaks and trim each line.

    Empty lines are dropped; a line holding only whitespace is kept as a
    blank line.
    """
    return [line.strip() for line in text.splitlines() if line]


def _format_z(z: float) -> str:
    """Shortest fixed-point text for an already rounded Z (0, 0.5, 20)."""
    return format(Decimal(repr(z)).normalize(), "f")


def _mode_label(extrusion_absolute: bool) -> str:
    return "Absolute" if extrusion_absolute else "Relative"


def _z_key(movement: Movement) -> float | None:
    extent = movement.z_extent
    return None if extent is None else extent.min


# ---------------------------------------------------------------------------
# Compiler
# ---------------------------------------------------------------------------


class ProgramCompiler:
    """Compile movements into a G-code program.

    Parameters
    ----------
    extrusion_absolute : bool
        ``True`` for ``M82`` (running E total), ``False`` for ``M83``.
    layer_height : float
        Only its written decimal places matter: they set the rounding
        precision for layer detection.
    start_gcode, end_gcode : str | None
        Replace the default header/footer when non-empty.
    render_settings : RenderSettings | None
        Number formatting and extrusion conversion for movements.
    generated_at : datetime | None
        Adds a ``; Generated:`` line to the default header.
    """

    def __init__(
        self,
        extrusion_absolute: bool = True,
        layer_height: float = 0.8,
        start_gcode: str | None = None,
        end_gcode: str | None = None,
        render_settings: RenderSettings | None = None,
        generated_at: datetime | None = None,
    ) -> None:
        if not math.isfinite(layer_height):
            raise InputError(f"Layer height must be finite, got {layer_height}")
        self._absolute = extrusion_absolute
        self._layer_height = layer_height
        self._start = start_gcode
        self._end = end_gcode
        self._settings = render_settings or DEFAULT_RENDER_SETTINGS
        self._generated_at = generated_at

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compile(self, items: Iterable[Any]) -> CompilationResult:
        """Compile ``items`` into a program.

        Raises
        ------
        InputError
            If no item is a :class:`Movement`.
        """
        warnings: list[str] = []
        movements = self._collect(items, warnings)

        incomplete = sum(
            1 for m in movements if not m.complete and not m.is_raw_instruction
        )
        if incomplete:
            msg = (
                f"{incomplete} incomplete movements (missing flow or speed). "
                "These will be skipped."
            )
            logger.warning(msg)
            warnings.append(msg)

        precision = decimal_places(self._layer_height)
        layers = detect_layers(movements, precision)

        lines: list[str] = []
        self._write_header(lines, len(movements), len(layers))

        compiled = 0
        skipped = 0
        state = ExtrusionState()
        prev_key: float | None = None

        for i, movement in enumerate(movements):
            key = _z_key(movement)
            is_boundary = i == 0 or key != prev_key
            prev_key = key

            if not movement.complete and not movement.is_raw_instruction:
                lines.append(f"; Skipping incomplete movement {i + 1}")
                skipped += 1
                continue

            if is_boundary and key is not None:
                z = round_z(key, precision)
                lines.append("")
                lines.append(
                    f"; Layer {layer_index(layers, key, precision)} - "
                    f"Z = {_format_z(z)}"
                )

            rendered, state = movement.render(self._absolute, state, self._settings)
            lines.extend(rendered)
            compiled += 1

        lines.append("")
        self._write_footer(lines)

        summary = CompilationSummary(
            compiled=compiled,
            skipped=skipped,
            layer_count=len(layers),
            line_count=len(lines),
            extrusion_mode=_mode_label(self._absolute),
        )
        logger.info(
            "Compiled %d movements (%d skipped), %d layers, %d lines",
            compiled, skipped, len(layers), len(lines),
        )
        return CompilationResult(
            lines=lines,
            layer_z_values=layers,
            summary=summary,
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _collect(items: Iterable[Any], warnings: list[str]) -> list[Movement]:
        movements: list[Movement] = []
        for item in items:
            if isinstance(item, Movement):
                movements.append(item)
            else:
                msg = f"Input item is not a Movement: {type(item).__name__}"
                logger.warning(msg)
                warnings.append(msg)
        if not movements:
            raise InputError("No valid Movement objects found")
        return movements

    def _write_header(
        self, lines: list[str], movement_count: int, layer_count: int,
    ) -> None:
        if self._start:
            lines.extend(_split_block(self._start))
            return
        lines.append("; Silkworm Compiler Output")
        if self._generated_at is not None:
            lines.append(f"; Generated: {self._generated_at.isoformat(sep=' ')}")
        lines.append(f"; Total Movements: {movement_count}")
        lines.append(f"; Detected Layers: {layer_count}")
        lines.append("")
        lines.append("G21 ; set units to millimeters")
        lines.append("G90 ; use absolute coordinates")
        if self._absolute:
            lines.append("M82 ; use absolute extrusion")
        else:
            lines.append("M83 ; use relative extrusion")
        lines.append("G92 E0 ; reset extrusion distance")
        lines.append("")

    def _write_footer(self, lines: list[str]) -> None:
        if self._end:
            lines.extend(_split_block(self._end))
            return
        lines.append("; End of print")
        lines.append("G92 E0 ; reset extrusion")
        lines.append("G91 ; relative positioning")
        lines.append("G1 Z5 F300 ; lift nozzle")
        lines.append("G90 ; absolute positioning")
        lines.append("M104 S0 ; turn off hotend")
        lines.append("M140 S0 ; turn off bed")
        lines.append("M84 ; disable motors")


def compile_movements(
    movements: Iterable[Any],
    extrusion_absolute: bool = True,
    layer_height: float = 0.8,
    start_gcode: str | None = None,
    end_gcode: str | None = None,
    *,
    render_settings: RenderSettings | None = None,
    generated_at: datetime | None = None,
) -> CompilationResult:
    """Compile movements into a G-code program.

    Convenience wrapper around :class:`ProgramCompiler`.

    Parameters
    ----------
    movements : Iterable
        Movements in program order.  Non-movement items are reported in
        ``result.warnings`` and dropped.
    extrusion_absolute : bool
        Absolute (``M82``) or relative (``M83``) extrusion.
    layer_height : float
        Sets the layer-detection rounding precision (default 0.8 → 1 place).
    start_gcode, end_gcode : str | None
        Custom header/footer text.
    render_settings : RenderSettings | None
        Formatting and extrusion conversion.
    generated_at : datetime | None
        Timestamp line for the default header.

    Returns
    -------
    CompilationResult

    Raises
    ------
    InputError
        If there are no movements or ``layer_height`` is not finite.
    """
    compiler = ProgramCompiler(
        extrusion_absolute=extrusion_absolute,
        layer_height=layer_height,
        start_gcode=start_gcode,
        end_gcode=end_gcode,
        render_settings=render_settings,
        generated_at=generated_at,
    )
    return compiler.compile(movements)


compile_program = compile_movements
