"""Command line entry point: ``python -m kanji_wallpaper``."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from kanji_wallpaper.config import DEFAULT_CONFIG_PATH, ConfigError, load_config
from kanji_wallpaper.scheduler import run

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kanji_wallpaper",
        description="Render kanji study progress into a wallpaper image.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"JSON configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--once", action="store_true", help="Run a single cycle and exit."
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Render the first cycle even if nothing changed.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT
    )
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        logging.getLogger("kanji_wallpaper").error("Invalid configuration: %s", exc)
        return 2

    try:
        run(config, iterations=1 if args.once else None, force_first=args.force)
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
