"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Atomic I/O and YAML loading (fs)
    - Movement file schema validation (validators)
    - Unified logging (logging_config)

No module in utils/ may import from gcode/ or scripts/.

Convenience imports:
    from silkworm.utils import fs, validators
    from silkworm.utils.logging_config import setup_logging, push_context
"""

from . import fs
from . import logging_config
from . import validators

from .logging_config import push_context, setup_logging

__all__ = [
    'fs',
    'logging_config',
    'validators',
    'setup_logging',
    'push_context',
]
