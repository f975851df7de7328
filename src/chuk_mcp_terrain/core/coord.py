"""
Planar UTM coordinates.

Coord is an (easting, northing) pair in UTM zone 33 (WGS84). The textual
form is ``N<northing>E<easting>``; parsing also accepts the names in
``constants.LOCATIONS``. Coord3 adds a height component for simple 3-D
geometry (viewing directions, rotations).
"""

import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import numpy as np

from ..constants import GEOGRAPHIC_CRS, LOCATIONS, PROJECTED_CRS
from ..errors import CoordinateParseError

_COORD_RE = re.compile(r"N(-?[0-9.]+)E(-?[0-9.]+)$")


def format_number(value: float) -> str:
    """Shortest round-tripping positional decimal form, without a trailing ``.0``."""
    return np.format_float_positional(float(value), trim="-")


@lru_cache(maxsize=2)
def _transformer(src: str, dst: str) -> Any:
    from pyproj import Transformer

    return Transformer.from_crs(src, dst, always_xy=True)


@dataclass(frozen=True)
class Coord:
    e: float
    n: float

    @classmethod
    def from_polar(cls, r: float, phi: float) -> "Coord":
        return cls(r * math.cos(phi), r * math.sin(phi))

    @classmethod
    def from_latlon(cls, lat: float, lon: float) -> "Coord":
        """Project geographic WGS84 degrees into UTM zone 33."""
        e, n = _transformer(GEOGRAPHIC_CRS, PROJECTED_CRS).transform(lon, lat)
        return cls(float(e), float(n))

    @classmethod
    def parse(cls, text: str) -> "Coord":
        """Parse a named location or an ``N<n>E<e>`` string."""
        if text in LOCATIONS:
            return cls.parse(LOCATIONS[text])

        match = _COORD_RE.search(text)
        if match is None:
            raise CoordinateParseError(text)
        try:
            return cls(float(match.group(2)), float(match.group(1)))
        except ValueError:
            raise CoordinateParseError(text) from None

    def latlon(self) -> tuple[float, float]:
        """Return (latitude, longitude) in WGS84 degrees."""
        lon, lat = _transformer(PROJECTED_CRS, GEOGRAPHIC_CRS).transform(self.e, self.n)
        return float(lat), float(lon)

    def abs(self) -> float:
        return math.sqrt(self.e * self.e + self.n * self.n)

    def abs_sq(self) -> float:
        return self.e * self.e + self.n * self.n

    def dot(self, other: "Coord") -> float:
        return self.e * other.e + self.n * other.n

    def rot90(self) -> "Coord":
        return Coord(-self.n, self.e)

    def normalize(self) -> "Coord":
        length = self.abs()
        if length == 0.0:
            return Coord(math.nan, math.nan)
        return Coord(self.e / length, self.n / length)

    def is_finite(self) -> bool:
        return math.isfinite(self.e) and math.isfinite(self.n)

    def __add__(self, other: "Coord") -> "Coord":
        return Coord(self.e + other.e, self.n + other.n)

    def __sub__(self, other: "Coord") -> "Coord":
        return Coord(self.e - other.e, self.n - other.n)

    def __mul__(self, factor: float) -> "Coord":
        return Coord(self.e * factor, self.n * factor)

    __rmul__ = __mul__

    def __str__(self) -> str:
        return f"N{format_number(self.n)}E{format_number(self.e)}"


@dataclass(frozen=True)
class Coord3:
    e: float
    n: float
    h: float

    def dot(self, other: "Coord3") -> float:
        return self.e * other.e + self.n * other.n + self.h * other.h

    def rot_h(self, angle: float) -> "Coord3":
        """Rotate around the vertical axis."""
        c, s = math.cos(angle), math.sin(angle)
        return Coord3(self.e * c - self.n * s, self.e * s + self.n * c, self.h)

    def rot_e(self, angle: float) -> "Coord3":
        """Rotate around the east axis."""
        c, s = math.cos(angle), math.sin(angle)
        return Coord3(self.e, self.n * c - self.h * s, self.n * s + self.h * c)

    def abs(self) -> float:
        return math.sqrt(self.e * self.e + self.n * self.n + self.h * self.h)

    def __str__(self) -> str:
        return f"({format_number(self.e)}, {format_number(self.n)}, {format_number(self.h)})"
