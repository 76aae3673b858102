"""Command-line entry point."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from iconkit.config import Settings
from iconkit.controllers.icon_controller import IconController
from iconkit.errors import IconError
from iconkit.logs import configure_logging
from iconkit.models.image_model import OutputFormat

logger = logging.getLogger("iconkit")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="iconkit", description="Convert PNG, ICO and ICNS icon sources")
    commands = parser.add_subparsers(dest="command", required=True)

    convert = commands.add_parser("convert", help="Convert an icon source into PNG or ICO")
    convert.add_argument("source", help="Path to a PNG, ICO or ICNS file")
    convert.add_argument("destination", help="Output file, parent directories are created")
    convert.add_argument(
        "--format",
        choices=[fmt.name.lower() for fmt in OutputFormat],
        help="Output format, defaults to the destination suffix",
    )

    info = commands.add_parser("info", help="Print size, mode and format of an image")
    info.add_argument("source", help="Path to an image file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Runs the command line and returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except IconError as exc:
        print(exc, file=sys.stderr)
        return 2
    configure_logging(settings.log_level)

    controller = IconController(settings=settings)
    try:
        if args.command == "convert":
            fmt = OutputFormat.from_name(args.format) if args.format else None
            controller.convert(args.source, args.destination, fmt)
        else:
            header = controller.inspect(args.source)
            print(f"{header.width}x{header.height} {header.mode} {header.format}")
    except (IconError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
