"""
Command line entry point to inspect and unpack .txti archives
"""

import argparse
import logging
import sys
from pathlib import Path

from textimg.config import settings
from textimg.errors import FormatError
from textimg.logger import configure_logging
from textimg.models.dao.archive_dao import ArchiveDAO
from textimg.models.elements import ImageRef, TextRun


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="textimg", description="Inspect and unpack TextImg archives"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="List the content of an archive")
    info.add_argument("archive", type=Path)

    extract = subparsers.add_parser("extract", help="Extract the images of an archive")
    extract.add_argument("archive", type=Path)
    extract.add_argument("dest", type=Path)

    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    logger = logging.getLogger("Main")
    try:
        decoded = ArchiveDAO.decode(args.archive)
    except (FormatError, OSError) as e:
        logger.error("Cannot open %s: %s", args.archive, e)
        return 1

    if args.command == "info":
        for item in decoded.items:
            if isinstance(item, TextRun):
                print(f"text  {item.value!r}")
            elif isinstance(item, ImageRef):
                print(f"img   {item.filename}")
        print(f"{len(decoded.asset_list)} assets")
        return 0

    try:
        image_map = ArchiveDAO.extract_assets(args.archive, args.dest)
    except (FormatError, OSError) as e:
        logger.error("Cannot extract %s to %s: %s", args.archive, args.dest, e)
        return 1
    for filename, path in image_map.items():
        print(f"{filename} -> {path}")
    return 0


def main() -> int:
    settings.DATA_DIR_PATH.mkdir(parents=True, exist_ok=True)
    configure_logging()
    return run(parse_args())


if __name__ == "__main__":
    sys.exit(main())
