"""Response and fragment models for chuk-mcp-terrain."""

from .fragment import TileRecord, dump_fragment, parse_fragment
from .responses import (
    CapabilitiesResponse,
    CoordinateResponse,
    ErrorResponse,
    FragmentInfo,
    FragmentsResponse,
    GradientResponse,
    HeightResponse,
    IndexResponse,
    LocationInfo,
    LocationsResponse,
    MultiHeightResponse,
    PointHeight,
    StatusResponse,
    TileInfo,
    TilesResponse,
    format_response,
)

__all__ = [
    "TileRecord",
    "parse_fragment",
    "dump_fragment",
    "ErrorResponse",
    "LocationInfo",
    "LocationsResponse",
    "CoordinateResponse",
    "FragmentInfo",
    "FragmentsResponse",
    "HeightResponse",
    "GradientResponse",
    "PointHeight",
    "MultiHeightResponse",
    "TileInfo",
    "TilesResponse",
    "IndexResponse",
    "StatusResponse",
    "CapabilitiesResponse",
    "format_response",
]
