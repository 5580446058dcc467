"""Shared fixtures for the silkworm test suite."""

from __future__ import annotations

import logging

import pytest

from silkworm.movement.model import PathSegment
from silkworm.utils import logging_config


def make_segment(
    z: float,
    flow: float = 1.0,
    speed: float = 10.0,
    length: float = 10.0,
) -> PathSegment:
    """Straight path segment along +X at height ``z``."""
    return PathSegment(points=((0.0, 0.0, z), (length, 0.0, z)), flow=flow, speed=speed)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo handlers and context installed by setup_logging()."""
    root = logging.getLogger()
    level = root.level
    yield
    while logging_config._installed:
        handler = logging_config._installed.pop()
        root.removeHandler(handler)
        handler.close()
    logging_config.pop_context()
    root.setLevel(level)


@pytest.fixture()
def seg():
    """Factory for straight path segments, see :func:`make_segment`."""
    return make_segment
