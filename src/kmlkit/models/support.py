"""
Supporting nodes: Scale, Orientation, Location, Vec2, Alias and ResourceMap.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .enums import Units


@dataclass
class Scale:
    """``kml:Scale``: per-axis scale factors of a Model."""

    x: Optional[Any] = None
    y: Optional[Any] = None
    z: Optional[Any] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class Orientation:
    """``kml:Orientation``: rotation of a Model, in degrees."""

    heading: Optional[Any] = None
    tilt: Optional[Any] = None
    roll: Optional[Any] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class Location:
    """``kml:Location``: longitude, latitude and altitude of a Model origin."""

    longitude: Optional[Any] = None
    latitude: Optional[Any] = None
    altitude: Optional[Any] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class Vec2:
    """
    ``kml:vec2Type``: a 2D point with per-axis units (e.g. IconStyle hotSpot).

    All four values are carried as attributes on the element.
    """

    x: Optional[Any] = None
    y: Optional[Any] = None
    xunits: Optional[Units] = None
    yunits: Optional[Units] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class Alias:
    """``kml:Alias``: maps a texture path in a model to a path in the archive."""

    target_href: Optional[str] = None
    source_href: Optional[str] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class ResourceMap:
    """``kml:ResourceMap``: ordered Aliases."""

    aliases: List[Alias] = field(default_factory=list)
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)
