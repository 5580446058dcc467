"""
Flow calculation module.

Computes extrusion flow (mm²) from layer height and line width.
"""

from silkworm.flow.calculator import FlowResult, calc_flow

__all__ = ["FlowResult", "calc_flow"]
