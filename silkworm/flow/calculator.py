"""Extrusion flow calculator.

Flow is the extrusion cross-section in mm²::

    flow = line_width × layer_height × multiplier

It is the value assigned to ``PathSegment.flow``; multiplied by travelled
length it gives the deposited volume.

Recommended layer height band:
    25 % to 75 % of the line width.  Thinner layers risk poor adhesion
    between beads, thicker ones produce weak, rounded layers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from silkworm.errors import InputError

logger = logging.getLogger(__name__)

MIN_LAYER_RATIO = 0.25
MAX_LAYER_RATIO = 0.75


@dataclass(frozen=True)
class FlowResult:
    """Outcome of :func:`calc_flow`.

    Parameters
    ----------
    flow : float
        Cross-section in mm², full precision.
    info : str
        Human-readable calculation report.
    warnings : list[str]
        Advisory messages (coerced multiplier, extreme layer ratio).
    multiplier : float
        Multiplier actually applied.
    recommended_min, recommended_max : float
        Recommended layer-height band for this line width (mm).
    """

    flow: float
    info: str
    multiplier: float
    recommended_min: float
    recommended_max: float
    warnings: list[str] = field(default_factory=list)


def calc_flow(
    layer_height: float,
    line_width: float,
    multiplier: float = 1.0,
) -> FlowResult:
    """Compute extrusion flow from layer geometry.

    Parameters
    ----------
    layer_height : float
        Printed layer height (mm).  Must be > 0.
    line_width : float
        Extruded line width (mm), typically the nozzle diameter.  Must be > 0.
    multiplier : float
        Flow multiplier.  Non-positive values are replaced by 1.0 with a
        warning.

    Returns
    -------
    FlowResult
        Flow, report and advisories.

    Raises
    ------
    InputError
        If ``layer_height`` or ``line_width`` is not positive.
    """
    if not layer_height > 0:
        raise InputError("Layer height must be greater than 0")
    if not line_width > 0:
        raise InputError("Line width must be greater than 0")

    warnings: list[str] = []
    if not multiplier > 0:
        warnings.append("Flow multiplier should be greater than 0, using 1.0")
        multiplier = 1.0

    flow = line_width * layer_height * multiplier
    rec_min = line_width * MIN_LAYER_RATIO
    rec_max = line_width * MAX_LAYER_RATIO

    if layer_height > rec_max:
        warnings.append(
            f"Layer height ({layer_height}mm) is >75% of line width "
            f"({line_width}mm). May cause weak layers."
        )
    elif layer_height < rec_min:
        warnings.append(
            f"Layer height ({layer_height}mm) is <25% of line width "
            f"({line_width}mm). May cause poor adhesion."
        )

    for msg in warnings:
        logger.warning(msg)

    info = (
        "Flow Calculation:\n"
        f"  Layer Height: {layer_height} mm\n"
        f"  Line Width: {line_width} mm\n"
        f"  Multiplier: {multiplier}\n"
        f"  Flow = {line_width} × {layer_height} × {multiplier}\n"
        f"  Flow = {flow:.4f} mm²\n"
        "\n"
        "Recommended layer height range:\n"
        f"  Min: {rec_min:.2f} mm (25% of line width)\n"
        f"  Max: {rec_max:.2f} mm (75% of line width)"
    )

    return FlowResult(
        flow=flow,
        info=info,
        multiplier=multiplier,
        recommended_min=rec_min,
        recommended_max=rec_max,
        warnings=warnings,
    )
