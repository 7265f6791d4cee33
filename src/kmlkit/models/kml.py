"""
Document wrapper and the top-level ``Kml`` union.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from .data import Data, ExtendedData, SchemaData, SimpleArrayData, SimpleData
from .feature import Document, Folder, NetworkLink, Placemark
from .geometry import LinearRing, LineString, MultiGeometry, Point, Polygon
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
)
from .support import Alias, Location, Orientation, ResourceMap, Scale, Vec2


class KmlVersion(str, Enum):
    """KML version, derived from the root element's namespace."""

    V22 = "2.2"
    V21 = "2.1"
    V20 = "2.0"
    UNKNOWN = "unknown"

    @property
    def namespace(self) -> Optional[str]:
        """Canonical namespace URI for this version (None for UNKNOWN)."""
        return _VERSION_NAMESPACES.get(self)

    @classmethod
    def from_namespace(cls, uri: Optional[str]) -> "KmlVersion":
        """Map a namespace URI to a version; unrecognized URIs give UNKNOWN."""
        if not uri:
            return cls.UNKNOWN
        return _NAMESPACE_VERSIONS.get(uri.strip(), cls.UNKNOWN)


_NAMESPACE_VERSIONS = {
    "http://www.opengis.net/kml/2.2": KmlVersion.V22,
    "http://earth.google.com/kml/2.2": KmlVersion.V22,
    "http://earth.google.com/kml/2.1": KmlVersion.V21,
    "http://earth.google.com/kml/2.0": KmlVersion.V20,
}

_VERSION_NAMESPACES = {
    KmlVersion.V22: "http://www.opengis.net/kml/2.2",
    KmlVersion.V21: "http://earth.google.com/kml/2.1",
    KmlVersion.V20: "http://earth.google.com/kml/2.0",
}

# Conventional prefixes of the extension namespaces KML documents declare.
# Prefixed attributes kept in ``attrs`` are written with these bindings when
# no enclosing element being written declares them.
KNOWN_PREFIXES = {
    "gx": "http://www.google.com/kml/ext/2.2",
    "atom": "http://www.w3.org/2005/Atom",
    "xal": "urn:oasis:names:tc:ciq:xsdschema:xAL:2.0",
    "xsi": "http://www.w3.org/2001/XMLSchema-instance",
}


@dataclass
class KmlDocument:
    """
    The ``<kml>`` root element, or the wrapper for a multi-root fragment.

    Attributes:
        version: Version derived from the root namespace
        elements: Top-level nodes, in source order
        attrs: Other attributes and namespace declarations, in source order
    """

    version: KmlVersion = KmlVersion.V22
    elements: List["Kml"] = field(default_factory=list)
    attrs: Dict[str, str] = field(default_factory=dict)


Kml = Union[
    KmlDocument,
    Point,
    LineString,
    LinearRing,
    Polygon,
    MultiGeometry,
    Placemark,
    Document,
    Folder,
    NetworkLink,
    Style,
    StyleMap,
    Pair,
    IconStyle,
    LabelStyle,
    LineStyle,
    PolyStyle,
    BalloonStyle,
    ListStyle,
    Icon,
    Link,
    Scale,
    Orientation,
    Location,
    Vec2,
    Alias,
    ResourceMap,
    ExtendedData,
    Data,
    SchemaData,
    SimpleData,
    SimpleArrayData,
]
