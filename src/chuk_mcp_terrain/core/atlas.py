"""
Atlas — spatial index over elevation tiles.

For fast repeated lookups, tiles are hashed on a coarse 500 m grid. Each
bucket id maps to handles of candidate tiles, some of which may not actually
cover a given coordinate in the bucket. Tiles live once in an arena and are
shared between every bucket they overlap.

An atlas is built once, either by scanning a directory (or a mounted zip
archive) or by merging previously written fragment files, and is then
queried. Tiles found for a lookup but not yet read are loaded on demand and
the lookup is retried.
"""

import logging
import math
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from pydantic import ValidationError

from ..constants import (
    FRAGMENT_SUFFIX,
    MOCKUP_AMPLITUDE_M,
    MOCKUP_BASE_M,
    MOCKUP_PERIOD_EAST_M,
    MOCKUP_PERIOD_NORTH_M,
    RASTER_EXTENSIONS,
    ErrorMessages,
    SuccessMessages,
)
from ..errors import AtlasError, TileLookupError, TileNotFoundError, TileNotLoadedError
from ..models.fragment import TileRecord, dump_fragment, parse_fragment
from .coord import Coord
from .map_folder import MapFolder
from .progress import ProgressCallback, report
from .tile import Tile

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Atlas:
    """Bucketed index of elevation tiles with lazy pixel loading."""

    def __init__(
        self,
        folder: MapFolder | None = None,
        mockup: bool = False,
        progress: ProgressCallback | None = None,
    ) -> None:
        self.folder = folder
        self.mockup = mockup
        self.progress = progress
        self._tiles: list[Tile] = []
        self._buckets: dict[int, list[int]] = {}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_directory(
        cls,
        folder: MapFolder,
        directory: str = "",
        archive: str = "",
        progress: ProgressCallback | None = None,
    ) -> "Atlas":
        """
        Index every GeoTIFF directly inside a directory below the map root.

        Args:
            folder: Map folder holding the tiles
            directory: Directory relative to the map root ("" for the root)
            archive: Zip archive the directory is mounted from, if any
            progress: Optional progress callback

        Raises:
            AtlasError: If the directory cannot be listed
            MetadataError: If any tile header is unreadable
        """
        atlas = cls(folder, progress=progress)
        absdir = folder.resolve(directory)

        try:
            entries = sorted(absdir.iterdir())
        except OSError as e:
            raise AtlasError(ErrorMessages.UNREADABLE_DIRECTORY.format(absdir, e)) from e

        for path in entries:
            if path.is_dir():
                continue
            if path.suffix.lower() not in RASTER_EXTENSIONS:
                continue

            fname = f"{directory.rstrip('/')}/{path.name}" if directory else path.name
            atlas._insert(Tile.open(folder, fname, archive, progress))

        logger.info(f"Indexed {len(atlas._tiles)} tiles from {absdir}")
        return atlas

    @classmethod
    def from_archive(
        cls,
        folder: MapFolder,
        archive: str,
        progress: ProgressCallback | None = None,
    ) -> "Atlas":
        """Mount a zip archive below the map root and index its contents."""
        directory = folder.mount(archive)
        return cls.from_directory(folder, directory, archive, progress)

    @classmethod
    def from_serialized_store(
        cls,
        folder: MapFolder,
        resolution: float,
        progress: ProgressCallback | None = None,
    ) -> "Atlas":
        """
        Merge every fragment in the map root with the given resolution.

        Fragments are assumed to hold tiles of a single resolution; the
        first tile decides. Empty and non-matching fragments are skipped.
        """
        atlas = cls(folder, progress=progress)
        merged = 0

        try:
            entries = sorted(folder.root.iterdir())
        except OSError as e:
            raise AtlasError(ErrorMessages.UNREADABLE_DIRECTORY.format(folder.root, e)) from e

        for path in entries:
            if path.is_dir() or not path.name.endswith(FRAGMENT_SUFFIX):
                continue

            fragment = cls.read(path, folder)
            if fragment.resolution() != resolution:
                logger.debug(f"Skipping fragment {path.name} ({fragment.resolution()}m)")
                continue

            atlas.merge(fragment)
            merged += 1

        report(progress, SuccessMessages.FRAGMENTS_READ.format(merged, resolution))
        return atlas

    @classmethod
    def create_mockup(cls) -> "Atlas":
        """Tile-less atlas answering from an analytic test surface."""
        return cls(mockup=True)

    def _insert(self, tile: Tile) -> None:
        handle = len(self._tiles)
        self._tiles.append(tile)
        for h in tile.hashes():
            self._buckets.setdefault(h, []).append(handle)

    def merge(self, other: "Atlas") -> None:
        """Add every tile of another atlas, keeping its bucket membership."""
        offset = len(self._tiles)
        self._tiles.extend(other._tiles)
        for h, handles in other._buckets.items():
            self._buckets.setdefault(h, []).extend(handle + offset for handle in handles)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_records(self) -> list[TileRecord]:
        """One record per distinct tile file name."""
        seen: set[str] = set()
        records = []
        for tile in self._tiles:
            if tile.fname in seen:
                continue
            seen.add(tile.fname)
            records.append(tile.to_record())
        return records

    @classmethod
    def from_records(
        cls,
        records: list[TileRecord],
        folder: MapFolder | None = None,
        progress: ProgressCallback | None = None,
    ) -> "Atlas":
        """Rebuild an atlas, recomputing bucket membership of every tile."""
        atlas = cls(folder, progress=progress)
        for record in records:
            atlas._insert(Tile.from_record(folder, record))
        return atlas

    def to_json(self) -> str:
        return dump_fragment(self.to_records()).decode()

    @classmethod
    def from_json(cls, data: str | bytes, folder: MapFolder | None = None) -> "Atlas":
        return cls.from_records(parse_fragment(data), folder)

    def write(self, path: str | Path) -> None:
        """Write this atlas as a fragment file."""
        Path(path).write_text(self.to_json(), encoding="utf-8")
        logger.info(f"Wrote atlas fragment {path} ({len(self.tiles())} tiles)")

    @classmethod
    def read(cls, path: str | Path, folder: MapFolder | None = None) -> "Atlas":
        try:
            return cls.from_json(Path(path).read_bytes(), folder)
        except (OSError, ValidationError) as e:
            raise AtlasError(ErrorMessages.UNREADABLE_FRAGMENT.format(path, e)) from e

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        return not self._buckets

    def tiles(self) -> list[Tile]:
        """Distinct tiles, in insertion order."""
        return list(self._tiles)

    def bucket_count(self) -> int:
        return len(self._buckets)

    def resolution(self) -> float | None:
        """North pixel size of an arbitrary tile, None if the atlas is empty."""
        if not self._tiles:
            return None
        return self._tiles[0].resolution

    def _candidates(self, coord: Coord) -> list[Tile] | None:
        if not coord.is_finite():
            return None
        handles = self._buckets.get(Tile.bucket(coord))
        if handles is None:
            return None
        return [self._tiles[handle] for handle in handles]

    def lookup_tiles(self, coord: Coord) -> list[Tile]:
        """Candidate tiles for a coordinate."""
        candidates = self._candidates(coord)
        if candidates is None:
            raise TileNotFoundError(coord)
        return candidates

    def has_tiles_covering(self, coord: Coord) -> bool:
        return self._candidates(coord) is not None

    def has_loaded_data(self, coord: Coord) -> bool:
        """True if the bucket exists and every candidate tile is loaded."""
        candidates = self._candidates(coord)
        if candidates is None:
            return False
        return all(tile.is_loaded() for tile in candidates)

    def load_tiles(self, coord: Coord) -> None:
        """Load every candidate tile for a coordinate that is not yet loaded."""
        for tile in self._candidates(coord) or []:
            if not tile.is_loaded():
                tile.load(self.progress)

    def lookup(self, coord: Coord) -> float:
        """Height at a coordinate."""
        if self.mockup:
            return mockup_height(coord)
        return self._lookup(coord, lambda tile: tile.lookup(coord))

    def lookup_with_gradient(self, coord: Coord) -> tuple[float, float, float]:
        """Height and (dh/d_east, dh/d_north) at a coordinate."""
        if self.mockup:
            return mockup_height_with_gradient(coord)
        return self._lookup(coord, lambda tile: tile.lookup_with_gradient(coord))

    def _lookup(self, coord: Coord, sample: Callable[[Tile], T]) -> T:
        candidates = self._candidates(coord)
        if candidates is None:
            raise TileNotFoundError(coord)

        for tile in candidates:
            try:
                return sample(tile)
            except TileLookupError:
                continue
            except TileNotLoadedError:
                tile.load(self.progress)

            try:
                return sample(tile)
            except (TileLookupError, TileNotLoadedError):
                continue

        raise TileNotFoundError(coord)


# ---------------------------------------------------------------------------
# Synthetic terrain
# ---------------------------------------------------------------------------


def mockup_height(coord: Coord) -> float:
    """Analytic test surface: two sine ridges around 1000 m."""
    return (
        math.sin(coord.n * math.pi / MOCKUP_PERIOD_NORTH_M)
        + math.sin(coord.e * math.pi / MOCKUP_PERIOD_EAST_M)
    ) * MOCKUP_AMPLITUDE_M + MOCKUP_BASE_M


def mockup_height_with_gradient(coord: Coord) -> tuple[float, float, float]:
    """Test surface height with central differences one metre off each axis."""
    dx = (
        mockup_height(Coord(coord.e + 1.0, coord.n)) - mockup_height(Coord(coord.e - 1.0, coord.n))
    ) * 0.5
    dy = (
        mockup_height(Coord(coord.e, coord.n + 1.0)) - mockup_height(Coord(coord.e, coord.n - 1.0))
    ) * 0.5
    return mockup_height(coord), dx, dy
