"""
Response models for chuk-mcp-terrain tools.

All tool responses are Pydantic models for type safety and consistent API.
"""

from pydantic import BaseModel, ConfigDict, Field


def format_response(model: BaseModel, output_mode: str = "json") -> str:
    """Format a response model as JSON or human-readable text.

    Args:
        model: Pydantic response model instance
        output_mode: "json" (default) or "text"

    Returns:
        Formatted string
    """
    if output_mode == "text" and hasattr(model, "to_text"):
        return str(model.to_text())
    return str(model.model_dump_json())


class ErrorResponse(BaseModel):
    """Error response model for tool failures."""

    model_config = ConfigDict(extra="forbid")

    error: str = Field(..., description="Error message describing what went wrong")

    def to_text(self) -> str:
        return f"Error: {self.error}"


class LocationInfo(BaseModel):
    """A named landmark and its coordinate."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Landmark name")
    coordinate: str = Field(..., description="UTM 33 coordinate as N<northing>E<easting>")

    def to_text(self) -> str:
        return f"{self.name}: {self.coordinate}"


class LocationsResponse(BaseModel):
    """Response model for listing named locations."""

    model_config = ConfigDict(extra="forbid")

    locations: list[LocationInfo] = Field(..., description="Named locations")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message, ""]
        for loc in self.locations:
            lines.append(f"  {loc.to_text()}")
        return "\n".join(lines)


class CoordinateResponse(BaseModel):
    """Response model for describing a coordinate."""

    model_config = ConfigDict(extra="forbid")

    coordinate: str = Field(..., description="Numeric N<northing>E<easting> form")
    easting: float = Field(..., description="UTM 33 easting in metres")
    northing: float = Field(..., description="UTM 33 northing in metres")
    lat: float = Field(..., description="WGS84 latitude")
    lon: float = Field(..., description="WGS84 longitude")
    bucket: int = Field(..., description="Spatial index bucket id")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        return "\n".join(
            [
                f"Coordinate: {self.coordinate}",
                f"UTM 33: E {self.easting:.2f}, N {self.northing:.2f}",
                f"WGS84: lat {self.lat:.6f}, lon {self.lon:.6f}",
                f"Bucket: {self.bucket}",
            ]
        )


class FragmentInfo(BaseModel):
    """Summary of one atlas fragment file."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Fragment file name")
    tile_count: int = Field(..., description="Number of tiles in the fragment")
    resolution_m: float | None = Field(None, description="Pixel size in metres, None if empty")

    def to_text(self) -> str:
        res = f"{self.resolution_m}m" if self.resolution_m is not None else "empty"
        return f"{self.name}: {self.tile_count} tiles ({res})"


class FragmentsResponse(BaseModel):
    """Response model for listing atlas fragments."""

    model_config = ConfigDict(extra="forbid")

    map_dir: str = Field(..., description="Map root directory")
    fragments: list[FragmentInfo] = Field(..., description="Fragments found in the map root")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message, f"Map dir: {self.map_dir}", ""]
        for frag in self.fragments:
            lines.append(f"  {frag.to_text()}")
        return "\n".join(lines)


class HeightResponse(BaseModel):
    """Response model for a single-point height lookup."""

    model_config = ConfigDict(extra="forbid")

    coordinate: str = Field(..., description="Numeric coordinate looked up")
    height_m: float = Field(..., description="Terrain height in metres")
    resolution_m: float = Field(..., description="Atlas resolution used")
    tiles: list[str] = Field(default_factory=list, description="Candidate tile files")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [
            f"Coordinate: {self.coordinate}",
            f"Height: {self.height_m:.1f}m",
            f"Resolution: {self.resolution_m}m",
        ]
        for tile in self.tiles:
            lines.append(f"Tile: {tile}")
        return "\n".join(lines)


class GradientResponse(BaseModel):
    """Response model for a height + gradient lookup."""

    model_config = ConfigDict(extra="forbid")

    coordinate: str = Field(..., description="Numeric coordinate looked up")
    height_m: float = Field(..., description="Terrain height in metres")
    d_east: float = Field(..., description="Height change per metre eastwards")
    d_north: float = Field(..., description="Height change per metre northwards")
    slope_degrees: float = Field(..., description="Slope angle in degrees")
    aspect_degrees: float = Field(..., description="Downhill direction, degrees from north")
    resolution_m: float = Field(..., description="Atlas resolution used")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        return "\n".join(
            [
                f"Coordinate: {self.coordinate}",
                f"Height: {self.height_m:.1f}m",
                f"Gradient: {self.d_east:.4f} east, {self.d_north:.4f} north",
                f"Slope: {self.slope_degrees:.1f} degrees",
                f"Aspect: {self.aspect_degrees:.0f} degrees",
            ]
        )


class PointHeight(BaseModel):
    """Height at one coordinate of a batch lookup."""

    model_config = ConfigDict(extra="forbid")

    coordinate: str = Field(..., description="Numeric coordinate")
    height_m: float | None = Field(None, description="Height in metres, None if uncovered")


class MultiHeightResponse(BaseModel):
    """Response model for a batch height lookup."""

    model_config = ConfigDict(extra="forbid")

    points: list[PointHeight] = Field(..., description="Per-coordinate heights")
    found: int = Field(..., description="Number of coordinates with coverage")
    resolution_m: float = Field(..., description="Atlas resolution used")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message, ""]
        for p in self.points:
            height = f"{p.height_m:.1f}m" if p.height_m is not None else "no data"
            lines.append(f"  {p.coordinate}: {height}")
        return "\n".join(lines)


class TileInfo(BaseModel):
    """Metadata of one candidate tile."""

    model_config = ConfigDict(extra="forbid")

    fname: str = Field(..., description="Tile file relative to the map root")
    archive: str = Field("", description="Zip archive holding the tile")
    nw: str = Field(..., description="North-west corner")
    se: str = Field(..., description="South-east corner")
    resolution_m: float = Field(..., description="Pixel size in metres")
    loaded: bool = Field(..., description="Whether pixel data is in memory")

    def to_text(self) -> str:
        state = "loaded" if self.loaded else "not loaded"
        return f"{self.fname}: {self.nw} -> {self.se} ({self.resolution_m}m, {state})"


class TilesResponse(BaseModel):
    """Response model for listing candidate tiles of a coordinate."""

    model_config = ConfigDict(extra="forbid")

    coordinate: str = Field(..., description="Numeric coordinate")
    tiles: list[TileInfo] = Field(..., description="Candidate tiles")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message]
        for tile in self.tiles:
            lines.append(f"  {tile.to_text()}")
        return "\n".join(lines)


class IndexResponse(BaseModel):
    """Response model for building an atlas fragment."""

    model_config = ConfigDict(extra="forbid")

    source: str = Field(..., description="Indexed directory or archive")
    fragment: str = Field(..., description="Written fragment file name")
    tile_count: int = Field(..., description="Number of tiles indexed")
    bucket_count: int = Field(..., description="Number of spatial buckets")
    resolution_m: float | None = Field(None, description="Pixel size of the indexed tiles")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        return "\n".join(
            [
                self.message,
                f"Source: {self.source}",
                f"Fragment: {self.fragment}",
                f"Resolution: {self.resolution_m}m",
            ]
        )


class StatusResponse(BaseModel):
    """Response model for server status."""

    model_config = ConfigDict(extra="forbid")

    server: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")
    map_dir: str | None = Field(None, description="Configured map root")
    default_resolution_m: float = Field(..., description="Default atlas resolution")
    mockup: bool = Field(..., description="Whether the synthetic surface is served")
    loaded_resolutions: list[float] = Field(..., description="Resolutions with a built atlas")
    tile_count: int = Field(..., description="Tiles in the default-resolution atlas")
    mounted_archives: list[str] = Field(..., description="Currently mounted archives")
    mount_available: bool = Field(..., description="Whether fuse-zip is installed")

    def to_text(self) -> str:
        lines = [
            f"{self.server} v{self.version}",
            f"Map dir: {self.map_dir or 'not configured'}",
            f"Default resolution: {self.default_resolution_m}m",
            f"Tiles: {self.tile_count}",
            f"Mockup: {self.mockup}",
            f"Mounted archives: {len(self.mounted_archives)}",
            f"fuse-zip available: {self.mount_available}",
        ]
        return "\n".join(lines)


class CapabilitiesResponse(BaseModel):
    """Response model for server capabilities."""

    model_config = ConfigDict(extra="forbid")

    server: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")
    resolutions: list[float] = Field(..., description="Common atlas resolutions in metres")
    default_resolution_m: float = Field(..., description="Default atlas resolution")
    lookup_tools: list[str] = Field(..., description="Lookup tool names")
    index_tools: list[str] = Field(..., description="Indexing tool names")
    location_count: int = Field(..., description="Number of named locations")
    llm_guidance: str = Field(..., description="Usage guidance for LLM clients")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [
            f"{self.server} v{self.version}",
            f"Resolutions: {', '.join(str(r) for r in self.resolutions)}",
            f"Lookup tools: {', '.join(self.lookup_tools)}",
            f"Index tools: {', '.join(self.index_tools)}",
            f"Named locations: {self.location_count}",
            "",
            self.llm_guidance,
        ]
        return "\n".join(lines)
