"""Command-line interface for modmap."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from modmap.config import load_config
from modmap.errors import ModmapError
from modmap.pipeline import run

logger = logging.getLogger("modmap")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="modmap",
        description="Module dependency map of a Go package, sized by lines of code.",
    )
    parser.add_argument(
        "project_dir",
        type=Path,
        help="Path to the Go package to map",
    )
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=None,
        help="Vector image path; other outputs share its stem "
        "(default: <package dir name>.svg in the current directory)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Config file (default: .modmap.toml in the package directory)",
    )
    parser.add_argument(
        "-f",
        "--format",
        action="append",
        dest="formats",
        default=None,
        help="Output format to render, repeatable (default: svg and png)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logger.setLevel(logging.DEBUG)

    try:
        config = load_config(args.project_dir, args.config)
        if args.formats:
            config = replace(config, formats=tuple(args.formats))
        result = run(args.project_dir, output=args.output, config=config)
    except ModmapError as e:
        logger.error("modmap: %s", e)
        sys.exit(1)

    print("LOC total:", result.metrics.total)
    print("LOC not counting stdlib:", result.metrics.total_sans_stdlib)
