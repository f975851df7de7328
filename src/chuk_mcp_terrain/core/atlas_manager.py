"""
Atlas Manager — central orchestrator for terrain lookups.

Owns the map folder (and its archive mounts), builds one atlas per
resolution from the fragment store on first use, and writes new fragments.
All public async methods wrap synchronous atlas I/O via asyncio.to_thread()
under a single lock: an atlas is not safe to query from two threads at once.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path

from ..constants import (
    DEFAULT_RESOLUTION,
    DIRECTORY_FRAGMENT_NAME,
    FLAT_ASPECT,
    FRAGMENT_SUFFIX,
    LOCATIONS,
    EnvVar,
    ErrorMessages,
)
from ..errors import AtlasError, TileNotFoundError
from .atlas import Atlas
from .coord import Coord
from .map_folder import MapFolder
from .progress import ProgressCallback
from .tile import Tile

logger = logging.getLogger(__name__)


@dataclass
class HeightResult:
    """Result of a single-point height lookup."""

    coordinate: str
    height_m: float
    resolution_m: float
    tiles: list[str] = field(default_factory=list)


@dataclass
class GradientResult:
    """Result of a height + gradient lookup."""

    coordinate: str
    height_m: float
    d_east: float
    d_north: float
    slope_degrees: float
    aspect_degrees: float
    resolution_m: float


@dataclass
class MultiHeightResult:
    """Result of a batch height lookup. Missing coverage yields None."""

    coordinates: list[str]
    heights: list[float | None]
    found: int


@dataclass
class IndexResult:
    """Result of indexing a directory or archive into a fragment."""

    fragment: str
    tile_count: int
    bucket_count: int
    resolution_m: float | None
    source: str


class AtlasManager:
    """Central manager for atlas construction and lookups."""

    def __init__(
        self,
        folder: MapFolder | None = None,
        default_resolution: float = DEFAULT_RESOLUTION,
        mockup: bool = False,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.folder = folder
        self.default_resolution = default_resolution
        self.mockup = mockup
        self.progress_callback = progress_callback

        self._atlases: dict[float, Atlas] = {}
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Discovery (sync, no raster I/O)
    # ------------------------------------------------------------------

    def parse_coordinate(self, text: str) -> Coord:
        return Coord.parse(text.strip())

    def describe_coordinate(self, text: str) -> dict:
        """Numeric form, geographic position and bucket of a coordinate."""
        coord = self.parse_coordinate(text)
        lat, lon = coord.latlon()
        return {
            "coordinate": str(coord),
            "easting": coord.e,
            "northing": coord.n,
            "lat": lat,
            "lon": lon,
            "bucket": Tile.bucket(coord),
        }

    def list_locations(self) -> list[dict]:
        """List all named locations."""
        return [{"name": name, "coordinate": coord} for name, coord in LOCATIONS.items()]

    def list_fragments(self) -> list[dict]:
        """List fragment files in the map root with tile count and resolution."""
        folder = self._require_folder()
        fragments = []
        for path in sorted(folder.root.iterdir()):
            if path.is_dir() or not path.name.endswith(FRAGMENT_SUFFIX):
                continue
            atlas = Atlas.read(path, folder)
            fragments.append(
                {
                    "name": path.name,
                    "tile_count": len(atlas.tiles()),
                    "resolution_m": atlas.resolution(),
                }
            )
        return fragments

    def get_atlas(self, resolution: float | None = None) -> Atlas:
        """Atlas for a resolution, merged from the fragment store on first use."""
        resolution = self._resolution(resolution)
        if resolution <= 0:
            raise ValueError(ErrorMessages.INVALID_RESOLUTION.format(resolution))

        if resolution not in self._atlases:
            if self.mockup:
                atlas = Atlas.create_mockup()
            else:
                atlas = Atlas.from_serialized_store(
                    self._require_folder(), resolution, self.progress_callback
                )
            self._atlases[resolution] = atlas
        return self._atlases[resolution]

    def cached_atlas(self, resolution: float | None = None) -> Atlas | None:
        """Already-built atlas for a resolution, without building one."""
        return self._atlases.get(self._resolution(resolution))

    @property
    def loaded_resolutions(self) -> list[float]:
        return sorted(self._atlases)

    # ------------------------------------------------------------------
    # Lookup (async)
    # ------------------------------------------------------------------

    async def lookup_height(self, coordinate: str, resolution: float | None = None) -> HeightResult:
        """Get the height at a single coordinate."""
        coord = self.parse_coordinate(coordinate)
        async with self._lock:
            return await asyncio.to_thread(self._lookup_height, coord, resolution)

    async def lookup_gradient(
        self, coordinate: str, resolution: float | None = None
    ) -> GradientResult:
        """Get height, gradient, slope and aspect at a single coordinate."""
        coord = self.parse_coordinate(coordinate)
        async with self._lock:
            return await asyncio.to_thread(self._lookup_gradient, coord, resolution)

    async def lookup_heights(
        self, coordinates: list[str], resolution: float | None = None
    ) -> MultiHeightResult:
        """Get heights at several coordinates. Uncovered points yield None."""
        if not coordinates:
            raise ValueError(ErrorMessages.EMPTY_POINTS)
        coords = [self.parse_coordinate(c) for c in coordinates]
        async with self._lock:
            heights = await asyncio.to_thread(self._lookup_heights, coords, resolution)
        return MultiHeightResult(
            coordinates=[str(c) for c in coords],
            heights=heights,
            found=sum(1 for h in heights if h is not None),
        )

    async def lookup_tiles(self, coordinate: str, resolution: float | None = None) -> list[dict]:
        """Describe the candidate tiles registered for a coordinate."""
        coord = self.parse_coordinate(coordinate)
        async with self._lock:
            tiles = await asyncio.to_thread(
                lambda: self.get_atlas(resolution).lookup_tiles(coord)
            )
        return [
            {
                "fname": t.fname,
                "archive": t.archive,
                "nw": str(t.nw),
                "se": str(t.se),
                "resolution_m": t.resolution,
                "loaded": t.is_loaded(),
            }
            for t in tiles
        ]

    # ------------------------------------------------------------------
    # Indexing (async)
    # ------------------------------------------------------------------

    async def build_index(
        self,
        directory: str | None = None,
        archive: str | None = None,
    ) -> IndexResult:
        """Index a directory or zip archive below the map root into a fragment."""
        if directory is not None and archive:
            raise ValueError(ErrorMessages.INDEX_SOURCE_CONFLICT)
        async with self._lock:
            return await asyncio.to_thread(self._build_index, directory or "", archive)

    async def close(self) -> None:
        """Release every archive mount."""
        if self.folder is not None:
            async with self._lock:
                await asyncio.to_thread(self.folder.close_all)

    # ------------------------------------------------------------------
    # Sync workers
    # ------------------------------------------------------------------

    def _require_folder(self) -> MapFolder:
        if self.folder is None:
            raise AtlasError(ErrorMessages.NO_MAP_DIR.format(EnvVar.MAP_DIR))
        return self.folder

    def _resolution(self, resolution: float | None) -> float:
        return self.default_resolution if resolution is None else resolution

    def _lookup_height(self, coord: Coord, resolution: float | None) -> HeightResult:
        atlas = self.get_atlas(resolution)
        height = atlas.lookup(coord)
        tiles = [] if atlas.mockup else [t.fname for t in atlas.lookup_tiles(coord)]
        return HeightResult(
            coordinate=str(coord),
            height_m=height,
            resolution_m=self._resolution(resolution),
            tiles=tiles,
        )

    def _lookup_gradient(self, coord: Coord, resolution: float | None) -> GradientResult:
        height, d_east, d_north = self.get_atlas(resolution).lookup_with_gradient(coord)
        slope, aspect = slope_aspect(d_east, d_north)
        return GradientResult(
            coordinate=str(coord),
            height_m=height,
            d_east=d_east,
            d_north=d_north,
            slope_degrees=slope,
            aspect_degrees=aspect,
            resolution_m=self._resolution(resolution),
        )

    def _lookup_heights(self, coords: list[Coord], resolution: float | None) -> list[float | None]:
        atlas = self.get_atlas(resolution)
        heights: list[float | None] = []
        for coord in coords:
            try:
                heights.append(atlas.lookup(coord))
            except TileNotFoundError:
                heights.append(None)
        return heights

    def _build_index(self, directory: str, archive: str | None) -> IndexResult:
        folder = self._require_folder()

        if archive:
            atlas = Atlas.from_archive(folder, archive, self.progress_callback)
        else:
            atlas = Atlas.from_directory(folder, directory, "", self.progress_callback)
        name = fragment_name(archive or directory)

        # Fragments live directly in the root; the store scans nothing else.
        atlas.write(folder.root / name)

        # Cached atlases no longer reflect the fragment store.
        self._atlases.clear()

        return IndexResult(
            fragment=name,
            tile_count=len(atlas.tiles()),
            bucket_count=atlas.bucket_count(),
            resolution_m=atlas.resolution(),
            source=archive or directory or ".",
        )


def fragment_name(source: str) -> str:
    """Fragment file name for an indexed directory or archive.

    The whole relative path is flattened with underscores, so sources that
    share a last path component get distinct fragments. The root itself
    maps to DIRECTORY_FRAGMENT_NAME.
    """
    parts = [part for part in Path(source).parts if part != "/"]
    if not parts:
        return DIRECTORY_FRAGMENT_NAME
    return f"{'_'.join(parts)}.{FRAGMENT_SUFFIX}"


def slope_aspect(d_east: float, d_north: float) -> tuple[float, float]:
    """Slope in degrees and downhill aspect in compass degrees.

    Flat ground gets FLAT_ASPECT as its aspect.
    """
    slope = math.degrees(math.atan(math.hypot(d_east, d_north)))
    if d_east == 0.0 and d_north == 0.0:
        return slope, FLAT_ASPECT
    aspect = math.degrees(math.atan2(-d_east, -d_north)) % 360.0
    return slope, aspect
