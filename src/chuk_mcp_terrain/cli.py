#!/usr/bin/env python3
"""
Command-line tools for the terrain atlas.

    chuk-terrain index <outdir> [archive]
    chuk-terrain lookup <coordinate> [--resolution 10]
    chuk-terrain tags <file>

``index`` and ``lookup`` need a map directory, taken from --map-dir or the
TERRAIN_MAP_DIR environment variable. Every archive mounted along the way is
unmounted before the command exits.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from .constants import DEFAULT_RESOLUTION, EnvVar, ErrorMessages
from .core.atlas import Atlas
from .core.atlas_manager import fragment_name
from .core.coord import Coord
from .core.map_folder import MapFolder
from .core.raster_io import read_tiff_tags
from .errors import AtlasError

logger = logging.getLogger(__name__)


def _progress(message: str) -> None:
    print(message, file=sys.stderr)


def _map_folder(args: argparse.Namespace) -> MapFolder:
    map_dir = args.map_dir or os.environ.get(EnvVar.MAP_DIR)
    if not map_dir:
        raise AtlasError(ErrorMessages.NO_MAP_DIR.format(EnvVar.MAP_DIR))
    return MapFolder(map_dir)


def cmd_index(args: argparse.Namespace) -> int:
    """Index the map root, or one archive in it, into a fragment in outdir."""
    with _map_folder(args) as folder:
        if args.archive:
            atlas = Atlas.from_archive(folder, args.archive, _progress)
        else:
            atlas = Atlas.from_directory(folder, "", "", _progress)

        path = Path(args.outdir) / fragment_name(args.archive)
        atlas.write(path)
        print(f"Wrote {len(atlas.tiles())} tiles to {path}")
    return 0


def cmd_lookup(args: argparse.Namespace) -> int:
    """Print the candidate tiles and the height at a coordinate."""
    coord = Coord.parse(args.coordinate)
    print(f"Coordinate is {coord}")

    with _map_folder(args) as folder:
        atlas = Atlas.from_serialized_store(folder, args.resolution, _progress)
        for tile in atlas.lookup_tiles(coord):
            print(f"Map: {tile.fname}")
        print(f"Height: {atlas.lookup(coord)}")
    return 0


def cmd_tags(args: argparse.Namespace) -> int:
    """Dump every TIFF tag of a file."""
    for tag, value in sorted(read_tiff_tags(args.file).items()):
        print(f"{tag} {value}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chuk-terrain", description="Terrain atlas tools")
    parser.add_argument(
        "--map-dir",
        default=None,
        help=f"Map root directory (default: ${EnvVar.MAP_DIR})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    index = sub.add_parser("index", help="Index tiles into an atlas fragment")
    index.add_argument("outdir", help="Directory to write the fragment to")
    index.add_argument("archive", nargs="?", default="", help="Zip archive below the map root")
    index.set_defaults(func=cmd_index)

    lookup = sub.add_parser("lookup", help="Look up the height at a coordinate")
    lookup.add_argument("coordinate", help="N<northing>E<easting> or a landmark name")
    lookup.add_argument(
        "--resolution",
        type=float,
        default=DEFAULT_RESOLUTION,
        help=f"Atlas resolution in metres (default: {DEFAULT_RESOLUTION})",
    )
    lookup.set_defaults(func=cmd_lookup)

    tags = sub.add_parser("tags", help="Dump the TIFF tags of a file")
    tags.add_argument("file", help="TIFF/GeoTIFF file")
    tags.set_defaults(func=cmd_tags)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the command-line tools."""
    load_dotenv()

    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        return args.func(args)
    except (AtlasError, ValueError, OSError) as e:
        logger.debug("command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
