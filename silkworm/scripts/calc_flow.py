#!/usr/bin/env python3
"""
Flow Calculator Script.

Print the extrusion flow (mm²) for a layer height and line width.

Usage:
    silkworm-flow --layer-height 0.8 --line-width 1.5
    silkworm-flow --layer-height 0.2 --line-width 0.4 --multiplier 1.05
"""

from __future__ import annotations

import argparse
import logging
import sys

import yaml

from silkworm.configs.loader import load_config
from silkworm.errors import ConfigError, InputError
from silkworm.flow.calculator import calc_flow
from silkworm.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calculate extrusion flow")
    parser.add_argument("--layer-height", type=float, help="Layer height (mm)")
    parser.add_argument("--line-width", type=float, help="Line width (mm)")
    parser.add_argument("--multiplier", type=float, help="Flow multiplier")
    parser.add_argument("--config", "-c", type=str, help="Configuration file path")
    parser.add_argument("--log-level", type=str, help="Logging level")
    parser.add_argument("--log-file", type=str, help="Also write logs to this file")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config)
    except (ConfigError, FileNotFoundError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    setup_logging(
        args.log_level or cfg.logging.level,
        **cfg.logging.handler_options(args.log_file),
        context={"app": "flow"},
    )

    defaults = cfg.flow
    try:
        result = calc_flow(
            args.layer_height if args.layer_height is not None else defaults.layer_height,
            args.line_width if args.line_width is not None else defaults.line_width,
            args.multiplier if args.multiplier is not None else defaults.multiplier,
        )
    except InputError as exc:
        logger.error("%s", exc)
        return 1

    print(result.info)
    print(f"\nFlow: {result.flow}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
