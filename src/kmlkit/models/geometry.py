"""
KML geometry nodes.

Point, LineString, LinearRing, Polygon and MultiGeometry form the closed
``Geometry`` union. Optional fields are ``None`` when the source document does
not contain the element, so writing reproduces exactly what was read.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .coord import Coord
from .enums import AltitudeMode


@dataclass
class Point:
    """
    ``kml:Point``: a single coordinate.

    Attributes:
        coord: The position
        extrude: Whether to connect the point to the ground
        altitude_mode: How altitude is interpreted
        id: Object id attribute
        attrs: Unrecognized attributes, in source order
    """

    coord: Coord
    extrude: Optional[bool] = None
    altitude_mode: Optional[AltitudeMode] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class LineString:
    """``kml:LineString``: an ordered sequence of coordinates."""

    coords: List[Coord] = field(default_factory=list)
    extrude: Optional[bool] = None
    tessellate: Optional[bool] = None
    altitude_mode: Optional[AltitudeMode] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class LinearRing:
    """
    ``kml:LinearRing``: a closed coordinate sequence.

    By convention the first coordinate is repeated at the end; the model keeps
    whatever the source had and never closes the ring itself.
    """

    coords: List[Coord] = field(default_factory=list)
    extrude: Optional[bool] = None
    tessellate: Optional[bool] = None
    altitude_mode: Optional[AltitudeMode] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)

    @property
    def is_closed(self) -> bool:
        return len(self.coords) > 0 and self.coords[0] == self.coords[-1]


@dataclass
class Polygon:
    """
    ``kml:Polygon``: one mandatory outer boundary and ordered inner boundaries.

    Attributes:
        outer: Outer boundary ring (required)
        inner: Inner boundary rings (holes), in source order
    """

    outer: LinearRing
    inner: List[LinearRing] = field(default_factory=list)
    extrude: Optional[bool] = None
    tessellate: Optional[bool] = None
    altitude_mode: Optional[AltitudeMode] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class MultiGeometry:
    """``kml:MultiGeometry``: ordered, heterogeneous and possibly nested."""

    geometries: List["Geometry"] = field(default_factory=list)
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


Geometry = Union[Point, LineString, LinearRing, Polygon, MultiGeometry]

GEOMETRY_TYPES = (Point, LineString, LinearRing, Polygon, MultiGeometry)


def is_geometry(node: object) -> bool:
    """Return True if ``node`` is one of the geometry variants."""
    return isinstance(node, GEOMETRY_TYPES)
