from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from . import rotate_tiles
from .config import ToolSettings
from .errors import UsageError

LOG = logging.getLogger("content_tools")

ROTATE_TILES_USAGE = "usage: rotate-tiles <map-or-dir> [more paths]"


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="content-tools", description="Batch tools for map YAML files")
    ap.add_argument("--verbose", action="store_true", help="Debug logging to stderr")
    ap.add_argument("--log-level", default=None, help="Log level (default: $CONTENT_TOOLS_LOG_LEVEL or INFO)")
    sub = ap.add_subparsers(dest="command")

    rt = sub.add_parser(
        "rotate-tiles",
        help="Collapse directional tile variants into base tiles with a rotation",
    )
    rt.add_argument("paths", nargs="*", help="Map files and/or directories to scan for maps")
    return ap.parse_args(argv)


def _configure_logging(args: argparse.Namespace, settings: ToolSettings) -> None:
    level = "DEBUG" if args.verbose else (args.log_level or settings.log_level)
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


def _rotate_tiles(args: argparse.Namespace, settings: ToolSettings) -> int:
    if not args.paths:
        print(ROTATE_TILES_USAGE)
        return 1
    try:
        updated = rotate_tiles.run(args.paths, settings=settings)
    except UsageError as e:
        print(e)
        return 1
    print(f"updated {updated} map file(s)")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    settings = ToolSettings.from_env()
    _configure_logging(args, settings)
    LOG.debug("command=%s settings=%s", args.command, settings)
    if args.command == "rotate-tiles":
        return _rotate_tiles(args, settings)
    print(ROTATE_TILES_USAGE)
    return 1
