"""
Silkworm Compiler Package.

Compiles print-path movements (path segments, stationary points and raw
G-code pass-through) into an executable G-code program for FFF and paste
extrusion printers, and computes extrusion flow from layer geometry.

Subpackages:
    movement: Movement variants and per-movement G-code rendering
    gcode: Layer detection and program compilation
    flow: Extrusion flow calculator
    configs: Compiler configuration loading and validation
    utils: Filesystem helpers, movement file schema, logging setup
    scripts: Command-line entry points
"""

__all__ = ["movement", "gcode", "flow", "configs", "utils", "scripts"]
