"""Layer detection from movement Z data.

A *layer* is a distinct Z elevation at which movements start.  Elevations
are compared after rounding ``z_extent.min`` to a fixed number of decimal
places, taken from how the user wrote the layer height (``0.8`` → 1 place,
``0.25`` → 2 places, ``2.0`` → 0 places).

Detection and lookup must use the same precision and the same rounding
function (:func:`round_z`), otherwise a movement's elevation may not be
found in the table it was detected from.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

import numpy as np

from silkworm.movement.model import Movement

logger = logging.getLogger(__name__)


def decimal_places(value: float) -> int:
    """Count decimal places in the shortest textual form of ``value``.

    Examples
    --------
    >>> decimal_places(0.8)
    1
    >>> decimal_places(2.0)
    0
    >>> decimal_places(1e-05)
    5
    """
    exponent = Decimal(repr(float(value))).normalize().as_tuple().exponent
    if not isinstance(exponent, int):
        raise ValueError(f"Cannot derive decimal places from {value!r}")
    return max(0, -exponent)


def round_z(z: float, precision: int) -> float:
    """Round a Z elevation for layer comparison (``-0.0`` becomes ``0.0``)."""
    return float(np.round(z, precision)) + 0.0


def detect_layers(movements: Iterable[Movement], precision: int) -> list[float]:
    """Return the ascending, duplicate-free layer elevations.

    Raw instructions and single points are ignored.

    Parameters
    ----------
    movements : Iterable[Movement]
        Movements in any order.
    precision : int
        Decimal places used to round ``z_extent.min``.

    Returns
    -------
    list[float]
        Sorted unique rounded elevations.  Empty when no path segments.
    """
    z_mins = [
        m.z_extent.min
        for m in movements
        if not m.is_raw_instruction and not m.is_single_point
    ]
    if not z_mins:
        return []
    rounded = np.round(np.asarray(z_mins, dtype=np.float64), precision) + 0.0
    layers = [float(z) for z in np.unique(rounded)]
    logger.debug("Detected %d layers at precision %d", len(layers), precision)
    return layers


def layer_index(layers: list[float], z: float, precision: int) -> int:
    """1-based position of ``round_z(z, precision)`` in ``layers``.

    Returns ``0`` when the elevation is not a detected layer (e.g. a single
    point hovering between layers).
    """
    key = round_z(z, precision)
    try:
        return layers.index(key) + 1
    except ValueError:
        return 0


def is_odd(value: int) -> bool:
    """Odd/even test for per-layer alternation, e.g. reversing direction on odd layers."""
    return value % 2 != 0
