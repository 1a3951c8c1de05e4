"""Command-line entry point: ``python -m meshgallery``."""

from __future__ import annotations

import argparse
import logging

from meshgallery.config import GalleryConfig
from meshgallery.gallery import run_all
from meshgallery.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="meshgallery",
        description="Build seven example meshes and write them as EPS files.",
    )
    parser.add_argument(
        "--output-dir",
        default=".",
        help="directory for grid-1.eps ... grid-7.eps (default: current directory)",
    )
    parser.add_argument(
        "--input",
        default=None,
        help="gmsh file read by the first example (default: packaged untitled.msh)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="seed for the random distortion example",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log debug messages",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    config = GalleryConfig(
        output_dir=args.output_dir,
        input_mesh=args.input,
        seed=args.seed,
    )
    run_all(config)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
