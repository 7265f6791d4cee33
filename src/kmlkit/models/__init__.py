"""
Typed KML document tree.
"""

from .coord import Coord, CoordType, coords_from_str, coords_to_str, parse_coord
from .data import Data, ExtendedData, SchemaData, SimpleArrayData, SimpleData
from .enums import (
    AltitudeMode,
    ColorMode,
    DisplayMode,
    ListItemType,
    RefreshMode,
    Units,
    ViewRefreshMode,
)
from .feature import FEATURE_TYPES, Document, Feature, Folder, NetworkLink, Placemark
from .geometry import (
    GEOMETRY_TYPES,
    Geometry,
    LinearRing,
    LineString,
    MultiGeometry,
    Point,
    Polygon,
    is_geometry,
)
from .kml import KNOWN_PREFIXES, Kml, KmlDocument, KmlVersion
from .link import Icon, Link
from .style import (
    BalloonStyle,
    IconStyle,
    LabelStyle,
    LineStyle,
    ListStyle,
    Pair,
    PolyStyle,
    Style,
    StyleMap,
    StyleSelector,
)
from .support import Alias, Location, Orientation, ResourceMap, Scale, Vec2

__all__ = [
    "Coord",
    "CoordType",
    "coords_from_str",
    "coords_to_str",
    "parse_coord",
    "AltitudeMode",
    "ColorMode",
    "DisplayMode",
    "ListItemType",
    "RefreshMode",
    "Units",
    "ViewRefreshMode",
    "Point",
    "LineString",
    "LinearRing",
    "Polygon",
    "MultiGeometry",
    "Geometry",
    "GEOMETRY_TYPES",
    "is_geometry",
    "Placemark",
    "Document",
    "Folder",
    "NetworkLink",
    "Feature",
    "FEATURE_TYPES",
    "Style",
    "StyleMap",
    "Pair",
    "IconStyle",
    "LabelStyle",
    "LineStyle",
    "PolyStyle",
    "BalloonStyle",
    "ListStyle",
    "StyleSelector",
    "Icon",
    "Link",
    "Scale",
    "Orientation",
    "Location",
    "Vec2",
    "Alias",
    "ResourceMap",
    "ExtendedData",
    "Data",
    "SchemaData",
    "SimpleData",
    "SimpleArrayData",
    "KmlDocument",
    "KmlVersion",
    "KNOWN_PREFIXES",
    "Kml",
]
