"""Tests for layer detection helpers.

Covers decimal-place derivation, rounding, the sorted/unique layer table,
1-based layer lookup and the odd/even helper.
"""

from __future__ import annotations

import math

import pytest

from silkworm.gcode.layers import (
    decimal_places,
    detect_layers,
    is_odd,
    layer_index,
    round_z,
)
from silkworm.movement.model import Point, RawInstruction


# ---------------------------------------------------------------------------
# Precision
# ---------------------------------------------------------------------------


class TestDecimalPlaces:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (0.8, 1),
            (0.25, 2),
            (0.125, 3),
            (2.0, 0),
            (1, 0),
            (10.0, 0),
            (1e-05, 5),
        ],
    )
    def test_counts_written_places(self, value: float, expected: int) -> None:
        assert decimal_places(value) == expected

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValueError):
            decimal_places(float("nan"))


class TestRoundZ:
    def test_rounds_to_precision(self) -> None:
        assert round_z(0.84, 1) == 0.8
        assert round_z(1.6, 0) == 2.0

    def test_negative_zero_normalised(self) -> None:
        z = round_z(-0.01, 1)
        assert z == 0.0
        assert math.copysign(1.0, z) == 1.0


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


class TestDetectLayers:
    def test_example_table(self, seg) -> None:
        movements = [seg(z) for z in (0.0, 0.0, 0.8, 0.8, 1.6)]
        assert detect_layers(movements, 1) == [0.0, 0.8, 1.6]

    def test_sorted_regardless_of_input_order(self, seg) -> None:
        movements = [seg(z) for z in (1.6, 0.0, 0.8, 0.0, 2.4)]
        assert detect_layers(movements, 1) == [0.0, 0.8, 1.6, 2.4]

    def test_rounding_merges_close_values(self, seg) -> None:
        movements = [seg(0.81), seg(0.84), seg(0.79)]
        assert detect_layers(movements, 1) == [0.8]

    def test_uses_z_min(self, seg) -> None:
        from silkworm.movement.model import PathSegment

        ramp = PathSegment(points=((0, 0, 0.4), (10, 0, 1.2)), flow=1.0, speed=1.0)
        assert detect_layers([ramp], 1) == [0.4]

    def test_ignores_raw_and_points(self, seg) -> None:
        movements = [
            RawInstruction(text="M106 S255"),
            Point(position=(0.0, 0.0, 5.0), flow=1.0, speed=1.0),
            seg(0.4),
        ]
        assert detect_layers(movements, 1) == [0.4]

    def test_empty_after_filtering(self) -> None:
        movements = [RawInstruction(text="G28")]
        assert detect_layers(movements, 1) == []
        assert detect_layers([], 1) == []

    def test_strictly_ascending(self, seg) -> None:
        zs = [0.3 * ((i * 7) % 11) for i in range(50)]
        layers = detect_layers([seg(z) for z in zs], 2)
        assert all(a < b for a, b in zip(layers, layers[1:]))
        assert len(layers) == len(set(layers))

    def test_incomplete_movements_still_count(self, seg) -> None:
        movements = [seg(0.0), seg(0.8, flow=0.0)]
        assert detect_layers(movements, 1) == [0.0, 0.8]


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class TestLayerIndex:
    def test_one_based(self) -> None:
        table = [0.0, 0.8, 1.6]
        assert layer_index(table, 0.0, 1) == 1
        assert layer_index(table, 0.82, 1) == 2
        assert layer_index(table, 1.6, 1) == 3

    def test_missing_is_zero(self) -> None:
        assert layer_index([0.0, 0.8], 5.0, 1) == 0


def test_is_odd() -> None:
    assert [is_odd(n) for n in range(5)] == [False, True, False, True, False]
    assert is_odd(-3) is True
