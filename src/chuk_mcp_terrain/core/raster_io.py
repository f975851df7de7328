"""
Raster I/O operations for elevation tiles.

All functions are synchronous; the manager runs them via asyncio.to_thread().
Header reading uses Pillow's TIFF tag directory, which parses only the IFD
and never decodes pixels. Band decoding and GeoTIFF writing use rasterio.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from ..constants import (
    PROJECTED_CRS,
    TAG_IMAGE_LENGTH,
    TAG_IMAGE_WIDTH,
    TAG_MODEL_PIXEL_SCALE,
    TAG_MODEL_TIEPOINT,
    ErrorMessages,
)
from ..errors import AtlasError, MetadataError

logger = logging.getLogger(__name__)

# Type aliases
FloatArray = NDArray[np.float32]
PathLike = str | Path


@dataclass
class GeoTiffHeader:
    """Georeferencing metadata of a single GeoTIFF."""

    width: int
    height: int
    delta_e: float
    delta_n: float
    origin_e: float
    origin_n: float


# ---------------------------------------------------------------------------
# Header / tag reading
# ---------------------------------------------------------------------------


def read_tiff_tags(path: PathLike) -> dict[int, Any]:
    """
    Read the primary TIFF tag directory of a file.

    Args:
        path: Path to a TIFF/GeoTIFF file

    Returns:
        Mapping of numeric tag id to decoded value
    """
    try:
        with Image.open(path) as im:
            tags = getattr(im, "tag_v2", None)
            if tags is None:
                raise MetadataError(
                    ErrorMessages.UNREADABLE_TILE.format(path, f"not a TIFF ({im.format})")
                )
            return dict(tags)
    except (OSError, Image.DecompressionBombError) as e:
        raise MetadataError(ErrorMessages.UNREADABLE_TILE.format(path, e)) from e


def read_geotiff_header(path: PathLike) -> GeoTiffHeader:
    """
    Extract size, pixel scale and tie point of a GeoTIFF.

    Args:
        path: Path to the GeoTIFF

    Returns:
        GeoTiffHeader with the north-west tie point and positive pixel steps

    Raises:
        MetadataError: If the file cannot be opened or a required tag is
            missing or malformed
    """
    tags = read_tiff_tags(path)

    return GeoTiffHeader(
        width=_tag_int(tags, TAG_IMAGE_WIDTH, path),
        height=_tag_int(tags, TAG_IMAGE_LENGTH, path),
        delta_e=_tag_float(tags, TAG_MODEL_PIXEL_SCALE, 0, path),
        delta_n=_tag_float(tags, TAG_MODEL_PIXEL_SCALE, 1, path),
        origin_e=_tag_float(tags, TAG_MODEL_TIEPOINT, 3, path),
        origin_n=_tag_float(tags, TAG_MODEL_TIEPOINT, 4, path),
    )


# ---------------------------------------------------------------------------
# Band decoding
# ---------------------------------------------------------------------------


def read_elevation_band(path: PathLike, width: int, height: int) -> FloatArray:
    """
    Read the full first band of a raster as float32.

    Args:
        path: Path to the raster
        width: Expected width in pixels
        height: Expected height in pixels

    Returns:
        Row-major (height, width) float32 array, no resampling
    """
    import rasterio
    from rasterio.errors import RasterioError
    from rasterio.windows import Window

    try:
        with rasterio.open(path) as src:
            data = src.read(1, window=Window(0, 0, width, height)).astype(np.float32)
    except RasterioError as e:
        raise AtlasError(ErrorMessages.UNREADABLE_RASTER.format(path, e)) from e

    if data.shape != (height, width):
        raise AtlasError(ErrorMessages.SHORT_RASTER.format(path, data.size, width * height))

    return data


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def write_geotiff(
    path: PathLike,
    elevation: FloatArray,
    origin_e: float,
    origin_n: float,
    delta_e: float,
    delta_n: float,
    crs: str = PROJECTED_CRS,
) -> None:
    """
    Write a single-band float32 GeoTIFF with a north-up transform.

    Args:
        path: Output path
        elevation: 2D (height, width) array
        origin_e: Easting of the north-west corner
        origin_n: Northing of the north-west corner
        delta_e: Pixel width
        delta_n: Pixel height (positive)
        crs: Coordinate reference system
    """
    import rasterio
    from rasterio.transform import from_origin

    height, width = elevation.shape
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=height,
        width=width,
        count=1,
        dtype="float32",
        crs=crs,
        transform=from_origin(origin_e, origin_n, delta_e, delta_n),
    ) as dst:
        dst.write(elevation.astype(np.float32), 1)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _tag_int(tags: dict[int, Any], tag: int, path: PathLike) -> int:
    value = tags.get(tag)
    if isinstance(value, (tuple, list)):
        value = value[0] if value else None
    if not isinstance(value, (int, np.integer)) or isinstance(value, bool):
        raise MetadataError(ErrorMessages.MISSING_TAG.format(tag, path))
    return int(value)


def _tag_float(tags: dict[int, Any], tag: int, index: int, path: PathLike) -> float:
    value = tags.get(tag)
    if not isinstance(value, (tuple, list)):
        value = (value,) if value is not None else ()
    if len(value) <= index:
        raise MetadataError(ErrorMessages.MISSING_TAG.format(tag, path))
    try:
        return float(value[index])
    except (TypeError, ValueError):
        raise MetadataError(ErrorMessages.MISSING_TAG.format(tag, path)) from None
