"""
Elevation tile — one GeoTIFF's georeferencing plus a lazily read pixel cache.

A tile is created from header metadata only. Pixel data is decoded on the
first load() and then kept for the life of the tile. Lookups sample the
pixel that encloses the coordinate (truncating toward the north-west
corner) and refuse the outermost ring of pixels, so the gradient estimate
always has four neighbours.
"""

import logging

import numpy as np

from ..constants import (
    BUCKET_OFFSET_EAST,
    BUCKET_ORIGIN_NORTH,
    BUCKET_ROW_STRIDE,
    BUCKET_SIZE_M,
    ErrorMessages,
    SuccessMessages,
)
from ..errors import AtlasError, TileLookupError, TileNotLoadedError
from ..models.fragment import TileRecord
from . import raster_io
from .coord import Coord
from .map_folder import MapFolder
from .progress import ProgressCallback, report

logger = logging.getLogger(__name__)


class Tile:
    """A single elevation raster in the atlas."""

    def __init__(
        self,
        folder: MapFolder | None,
        fname: str,
        archive: str,
        width: int,
        height: int,
        nw: Coord,
        delta: Coord,
        se: Coord | None = None,
    ) -> None:
        self._folder = folder
        self._fname = fname
        self._archive = archive
        self._width = width
        self._height = height
        self._nw = nw
        self._delta = delta
        self._se = se if se is not None else nw + Coord(width * delta.e, -height * delta.n)
        self._image: np.ndarray | None = None

    @classmethod
    def open(
        cls,
        folder: MapFolder,
        fname: str,
        archive: str = "",
        progress: ProgressCallback | None = None,
    ) -> "Tile":
        """
        Create a tile from a GeoTIFF header without reading pixels.

        Args:
            folder: Map folder the file name is relative to
            fname: Tile file name relative to the map root
            archive: Zip archive the file was found in, empty if none
            progress: Optional progress callback

        Raises:
            MetadataError: If the header is unreadable or lacks georeferencing
        """
        header = raster_io.read_geotiff_header(folder.resolve(fname))
        tile = cls(
            folder,
            fname,
            archive,
            header.width,
            header.height,
            Coord(header.origin_e, header.origin_n),
            Coord(header.delta_e, header.delta_n),
        )
        report(progress, SuccessMessages.TILE_DISCOVERED.format(fname, tile.nw, tile.se))
        return tile

    @classmethod
    def from_record(cls, folder: MapFolder | None, record: TileRecord) -> "Tile":
        return cls(
            folder,
            record.fname,
            record.archive,
            record.width,
            record.height,
            record.nw,
            record.delta,
            se=record.se,
        )

    def to_record(self) -> TileRecord:
        return TileRecord(
            fname=self._fname,
            archive=self._archive,
            width=self._width,
            height=self._height,
            nw=self._nw,
            se=self._se,
            delta=self._delta,
        )

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def fname(self) -> str:
        return self._fname

    @property
    def archive(self) -> str:
        return self._archive

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def nw(self) -> Coord:
        return self._nw

    @property
    def se(self) -> Coord:
        return self._se

    @property
    def delta(self) -> Coord:
        return self._delta

    @property
    def resolution(self) -> float:
        return self._delta.n

    @staticmethod
    def bucket(coord: Coord) -> int:
        """Spatial bucket id of the 500 m grid cell containing coord."""
        return (
            int((coord.n - BUCKET_ORIGIN_NORTH) / BUCKET_SIZE_M) * BUCKET_ROW_STRIDE
            + int((coord.e + BUCKET_OFFSET_EAST) / BUCKET_SIZE_M)
        )

    def hashes(self) -> set[int]:
        """Bucket ids of every grid cell the tile's rectangle overlaps.

        Samples the rectangle every 500 m from the south-west towards the
        north-east, plus the far edges when the last step falls short.
        """
        northings = _steps(self._se.n, self._nw.n)
        eastings = _steps(self._nw.e, self._se.e)
        return {self.bucket(Coord(e, n)) for n in northings for e in eastings}

    # ------------------------------------------------------------------
    # Pixel cache
    # ------------------------------------------------------------------

    def is_loaded(self) -> bool:
        return self._image is not None and self._image.size > 0

    def load(self, progress: ProgressCallback | None = None) -> None:
        """Decode the whole band into the pixel cache.

        Callers check is_loaded() first; loading again re-reads the file.
        """
        if self._folder is None:
            raise AtlasError(ErrorMessages.NO_TILE_FOLDER.format(self._fname))

        report(progress, SuccessMessages.TILE_READING.format(self._fname))

        if self._archive:
            self._folder.mount(self._archive)

        self._image = raster_io.read_elevation_band(
            self._folder.resolve(self._fname), self._width, self._height
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _pixel(self, coord: Coord) -> tuple[int, int]:
        col = int((coord.e - self._nw.e) / self._delta.e)
        row = int((self._nw.n - coord.n) / self._delta.n)

        # One pixel in from every edge, so gradients always have neighbours.
        if col < 1 or col >= self._width - 1 or row < 1 or row >= self._height - 1:
            raise TileLookupError(coord, self._fname)

        if not self.is_loaded():
            raise TileNotLoadedError(self._fname)

        return row, col

    def lookup(self, coord: Coord) -> float:
        """Height of the pixel enclosing coord."""
        row, col = self._pixel(coord)
        return float(self._image[row, col])

    def lookup_with_gradient(self, coord: Coord) -> tuple[float, float, float]:
        """Height plus central-difference gradient.

        Returns:
            (height, dh/d_east, dh/d_north)
        """
        row, col = self._pixel(coord)
        a = self._image

        h = float(a[row, col])
        dx_1 = h - float(a[row, col - 1])
        dx_2 = float(a[row, col + 1]) - h
        dy_1 = float(a[row - 1, col]) - h
        dy_2 = h - float(a[row + 1, col])

        return (
            h,
            (dx_1 + dx_2) * 0.5 / self._delta.e,
            (dy_1 + dy_2) * 0.5 / self._delta.n,
        )

    def __repr__(self) -> str:
        return f"Tile({self._fname!r}, {self._nw} -> {self._se})"


def _steps(start: float, stop: float) -> list[float]:
    values = []
    value = start
    while value <= stop:
        values.append(value)
        value += BUCKET_SIZE_M
    if not values or values[-1] < stop:
        values.append(stop)
    return values
