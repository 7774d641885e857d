"""Command-line entry point: ``python -m deepfield``."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

from .logging_config import setup_logging
from .models.config import GenerationConfig, QualityPreset, load_settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deepfield",
        description="Procedural multi-scale astronomical sandbox.",
    )
    parser.add_argument("--seed", type=int, help="Universe seed (default: last used, or 1337)")
    parser.add_argument(
        "--quality",
        choices=[p.name for p in QualityPreset],
        type=str.upper,
        help="Quality preset controlling star and cluster counts",
    )
    parser.add_argument("--stars", type=int, help="Override the star count")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--no-autopilot", action="store_true", help="Start with the autopilot off")
    return parser


def resolve_config(args: argparse.Namespace, base: GenerationConfig | None = None) -> GenerationConfig:
    """Layer command-line overrides on the saved settings."""
    config = base if base is not None else load_settings()
    if args.quality:
        config = config.with_preset(QualityPreset[args.quality])
    if args.stars is not None:
        config = replace(config, star_count=args.stars)
    if args.seed is not None:
        config = replace(config, seed=args.seed)
    return config.clamped()


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO, args.log_file)
    config = resolve_config(args)
    logger.info(
        "Starting deepfield: seed=0x%X stars=%d clusters=%d",
        config.seed, config.star_count, config.cluster_count,
    )

    # pygame is only needed once a window is opened
    from .game import Game

    Game(config, autopilot=not args.no_autopilot).run()


if __name__ == "__main__":
    main()
