#!/usr/bin/env python3
"""
Compile G-code Script.

Compile a movement file into a G-code program.

Usage:
    silkworm-compile --movements part.movements.yaml --output part.gcode
    silkworm-compile -m part.yaml -o part.gcode --relative --layer-height 0.25
    silkworm-compile -m part.yaml -o part.gcode --start-gcode start.gcode \\
                     --end-gcode end.gcode --config my_compiler.yaml

Options not given on the command line come from the config file
(``silkworm/configs/compiler.yaml`` by default).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml

from silkworm.configs.loader import load_config
from silkworm.errors import ConfigError, InputError
from silkworm.gcode.compiler import compile_movements
from silkworm.utils import fs, validators
from silkworm.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compile movements into G-code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--movements",
        "-m",
        type=str,
        required=True,
        help="Movement file (silkworm.movements.v1 YAML/JSON)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        required=True,
        help="Output G-code file",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Configuration file path",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--absolute",
        dest="extrusion_absolute",
        action="store_const",
        const=True,
        help="Absolute extrusion (M82)",
    )
    mode.add_argument(
        "--relative",
        dest="extrusion_absolute",
        action="store_const",
        const=False,
        help="Relative extrusion (M83)",
    )

    parser.add_argument(
        "--layer-height",
        type=float,
        help="Layer height; its decimal places set layer rounding",
    )
    parser.add_argument(
        "--start-gcode",
        type=str,
        help="File with custom start G-code",
    )
    parser.add_argument(
        "--end-gcode",
        type=str,
        help="File with custom end G-code",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this file",
    )
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
        context={"app": "compile"},
    )

    opts = cfg.compile
    extrusion_absolute = (
        opts.extrusion_absolute
        if args.extrusion_absolute is None
        else args.extrusion_absolute
    )
    layer_height = args.layer_height if args.layer_height is not None else opts.layer_height

    try:
        start_gcode = fs.read_text(args.start_gcode) if args.start_gcode else opts.start_gcode
        end_gcode = fs.read_text(args.end_gcode) if args.end_gcode else opts.end_gcode
        movements = validators.load_movements(args.movements)
        logger.info("Loaded %d movements from %s", len(movements), args.movements)

        result = compile_movements(
            movements,
            extrusion_absolute=extrusion_absolute,
            layer_height=layer_height,
            start_gcode=start_gcode,
            end_gcode=end_gcode,
            render_settings=cfg.render.to_settings(),
        )
    except (InputError, ValueError, FileNotFoundError, yaml.YAMLError) as exc:
        logger.error("%s", exc)
        return 1

    output = Path(args.output)
    try:
        fs.atomic_write_text(output, result.to_text())
    except RuntimeError as exc:
        logger.error("%s", exc)
        return 1
    logger.info("G-code written to %s", output)

    print(result.info)
    for msg in result.warnings:
        print(f"Warning: {msg}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
