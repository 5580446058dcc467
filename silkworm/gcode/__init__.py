"""
G-code compilation module.

Detects print layers from movement Z data and compiles movements into a
complete program with header, layer comments and footer.
"""

from silkworm.gcode.compiler import (
    CompilationResult,
    CompilationSummary,
    ProgramCompiler,
    compile_movements,
    compile_program,
)
from silkworm.gcode.layers import decimal_places, detect_layers, layer_index

__all__ = [
    "CompilationResult",
    "CompilationSummary",
    "ProgramCompiler",
    "compile_movements",
    "compile_program",
    "decimal_places",
    "detect_layers",
    "layer_index",
]
