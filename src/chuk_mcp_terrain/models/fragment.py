"""
Serialized atlas fragment records.

A fragment is a JSON array of TileRecord objects, one per distinct tile
file. Pixel data and bucket membership are never stored; the atlas
recomputes buckets when it reads a fragment back.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer, field_validator

from ..core.coord import Coord


class TileRecord(BaseModel):
    """Metadata of one elevation tile, as stored in a fragment."""

    model_config = ConfigDict(extra="forbid")

    fname: str = Field(..., description="Tile file name relative to the map root")
    archive: str = Field("", description="Zip archive the tile lives in, empty if none")
    width: int = Field(..., gt=0, description="Width in pixels")
    height: int = Field(..., gt=0, description="Height in pixels")
    nw: Coord = Field(..., description="North-west corner")
    se: Coord = Field(..., description="South-east corner")
    delta: Coord = Field(..., description="Pixel size (east step, north step)")

    @field_validator("nw", "se", "delta", mode="before")
    @classmethod
    def _parse_coord(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Coord.parse(value)
        if isinstance(value, dict) and set(value) == {"n", "e"}:
            return Coord(e=float(value["e"]), n=float(value["n"]))
        return value

    @field_serializer("nw", "se", "delta")
    def _format_coord(self, value: Coord) -> str:
        return str(value)


FragmentAdapter = TypeAdapter(list[TileRecord])


def parse_fragment(data: str | bytes) -> list[TileRecord]:
    """Parse fragment JSON into tile records."""
    return FragmentAdapter.validate_json(data)


def dump_fragment(records: list[TileRecord]) -> bytes:
    """Serialize tile records to fragment JSON."""
    return FragmentAdapter.dump_json(records)
