"""
Exception types raised by the terrain atlas.

TileNotLoadedError and TileLookupError drive the atlas lookup loop:
the first triggers a lazy load and retry, the second moves on to the
next candidate tile. Everything else propagates to the caller.
"""

from typing import Any

from .constants import ErrorMessages


class AtlasError(Exception):
    """Generic atlas failure (metadata, decode, mount, I/O)."""


class TileLookupError(AtlasError):
    """Coordinate falls outside a tile's interior sampling region."""

    def __init__(self, coord: Any, tile: str) -> None:
        self.coord = coord
        self.tile = tile
        super().__init__(ErrorMessages.LOOKUP_FAILED.format(coord, tile))


class TileNotFoundError(AtlasError):
    """No tile in the atlas can answer a lookup for the coordinate."""

    def __init__(self, coord: Any) -> None:
        self.coord = coord
        super().__init__(ErrorMessages.TILE_NOT_FOUND.format(coord))


class TileNotLoadedError(AtlasError):
    """Tile pixel data has not been read yet."""

    def __init__(self, tile: str) -> None:
        self.tile = tile
        super().__init__(ErrorMessages.TILE_NOT_LOADED.format(tile))


class MetadataError(AtlasError):
    """GeoTIFF header could not be read or lacks georeferencing tags."""


class MountError(AtlasError):
    """Archive mount or unmount failed."""


class CoordinateParseError(AtlasError, ValueError):
    """String is neither a named location nor an N<n>E<e> coordinate."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(ErrorMessages.INVALID_COORDINATE.format(text))
