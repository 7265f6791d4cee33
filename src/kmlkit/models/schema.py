"""
XML binding of the KML node types.

Each node type has one ElementSpec listing its slots in schema order: the
attributes it recognizes, then its child elements. The reader uses the table to
route attributes and children into fields; the writer walks the same slots in
order, which keeps the two exact inverses of each other.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Type

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
from .feature import Document, Folder, NetworkLink, Placemark
from .geometry import LinearRing, LineString, MultiGeometry, Point, Polygon
from .kml import KmlDocument
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


class SlotKind(str, Enum):
    """How a field is represented in XML."""

    ATTR = "attr"  # attribute on the element itself
    TEXT = "text"  # leaf child element holding text
    TEXT_LIST = "text_list"  # repeated leaf child element
    CONTENT = "content"  # the element's own character data
    NODE = "node"  # one child node
    NODE_LIST = "node_list"  # repeated child nodes
    BOUNDARY = "boundary"  # wrapper element holding one LinearRing
    BOUNDARY_LIST = "boundary_list"  # repeated wrapper, one ring each


class ValueType(str, Enum):
    """Text representation of a scalar field."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    SCALAR = "scalar"
    COORD = "coord"
    COORDS = "coords"
    ENUM = "enum"


#: ``accepts`` marker for containers that take any node kind.
ANY_NODE = ("*",)


@dataclass(frozen=True)
class Slot:
    """
    One field of a node and where it lives in XML.

    Attributes:
        tag: Attribute or child element name (wrapper name for boundaries)
        field: Dataclass field name
        kind: XML representation
        value: Text representation for attribute and text slots
        enum: Enum class when ``value`` is ENUM
        accepts: Element names allowed in node slots
        required: Whether a missing value is a schema error
    """

    tag: str
    field: str
    kind: SlotKind
    value: ValueType = ValueType.STRING
    enum: Optional[Type[Enum]] = None
    accepts: Tuple[str, ...] = ()
    required: bool = False


@dataclass(frozen=True)
class ElementSpec:
    """Element name, node class and ordered slots of one node type."""

    tag: str
    cls: type
    slots: Tuple[Slot, ...]

    @property
    def attr_slots(self) -> Tuple[Slot, ...]:
        return tuple(s for s in self.slots if s.kind == SlotKind.ATTR)

    @property
    def content_slot(self) -> Optional[Slot]:
        for slot in self.slots:
            if slot.kind == SlotKind.CONTENT:
                return slot
        return None

    def slot_for_attr(self, name: str) -> Optional[Slot]:
        for slot in self.slots:
            if slot.kind == SlotKind.ATTR and slot.tag == name:
                return slot
        return None

    def slot_for_child(self, name: str) -> Optional[Slot]:
        """Find the slot a child element named ``name`` belongs to."""
        for slot in self.slots:
            if slot.kind in (SlotKind.TEXT, SlotKind.TEXT_LIST, SlotKind.BOUNDARY, SlotKind.BOUNDARY_LIST):
                if slot.tag == name:
                    return slot
            elif slot.kind in (SlotKind.NODE, SlotKind.NODE_LIST):
                if name in slot.accepts:
                    return slot
                if slot.accepts == ANY_NODE and name in ELEMENT_SPECS and name != "kml":
                    return slot
        return None


def _attr(tag: str, field: str, value: ValueType = ValueType.STRING, enum=None) -> Slot:
    return Slot(tag, field, SlotKind.ATTR, value=value, enum=enum)


def _text(
    tag: str,
    field: str,
    value: ValueType = ValueType.STRING,
    enum=None,
    required: bool = False,
) -> Slot:
    return Slot(tag, field, SlotKind.TEXT, value=value, enum=enum, required=required)


def _node(field: str, *accepts: str) -> Slot:
    return Slot(accepts[0], field, SlotKind.NODE, accepts=accepts)


def _nodes(field: str, *accepts: str) -> Slot:
    return Slot(accepts[0], field, SlotKind.NODE_LIST, accepts=accepts)


def _enum(tag: str, field: str, enum: Type[Enum]) -> Slot:
    return _text(tag, field, ValueType.ENUM, enum=enum)


GEOMETRY_TAGS = ("Point", "LineString", "LinearRing", "Polygon", "MultiGeometry")

_ID = _attr("id", "id")
_EXTRUDE = _text("extrude", "extrude", ValueType.BOOL)
_TESSELLATE = _text("tessellate", "tessellate", ValueType.BOOL)
_ALTITUDE_MODE = _enum("altitudeMode", "altitude_mode", AltitudeMode)
_COLOR = _text("color", "color")
_COLOR_MODE = _enum("colorMode", "color_mode", ColorMode)

_FEATURE_HEAD = (
    _ID,
    _text("name", "name"),
    _text("visibility", "visibility", ValueType.BOOL),
)
_FEATURE_INFO = (
    _text("description", "description"),
    _text("styleUrl", "style_url"),
)
_OPEN = _text("open", "open", ValueType.BOOL)

_LINK_SLOTS = (
    _ID,
    _text("href", "href"),
    _enum("refreshMode", "refresh_mode", RefreshMode),
    _text("refreshInterval", "refresh_interval", ValueType.SCALAR),
    _enum("viewRefreshMode", "view_refresh_mode", ViewRefreshMode),
    _text("viewRefreshTime", "view_refresh_time", ValueType.SCALAR),
    _text("viewBoundScale", "view_bound_scale", ValueType.SCALAR),
    _text("viewFormat", "view_format"),
    _text("httpQuery", "http_query"),
)

_SPECS = (
    ElementSpec("kml", KmlDocument, (Slot("*", "elements", SlotKind.NODE_LIST, accepts=ANY_NODE),)),
    # Geometry
    ElementSpec(
        "Point",
        Point,
        (_ID, _EXTRUDE, _ALTITUDE_MODE, _text("coordinates", "coord", ValueType.COORD, required=True)),
    ),
    ElementSpec(
        "LineString",
        LineString,
        (_ID, _EXTRUDE, _TESSELLATE, _ALTITUDE_MODE, _text("coordinates", "coords", ValueType.COORDS, required=True)),
    ),
    ElementSpec(
        "LinearRing",
        LinearRing,
        (_ID, _EXTRUDE, _TESSELLATE, _ALTITUDE_MODE, _text("coordinates", "coords", ValueType.COORDS, required=True)),
    ),
    ElementSpec(
        "Polygon",
        Polygon,
        (
            _ID,
            _EXTRUDE,
            _TESSELLATE,
            _ALTITUDE_MODE,
            Slot("outerBoundaryIs", "outer", SlotKind.BOUNDARY, required=True),
            Slot("innerBoundaryIs", "inner", SlotKind.BOUNDARY_LIST),
        ),
    ),
    ElementSpec("MultiGeometry", MultiGeometry, (_ID, _nodes("geometries", *GEOMETRY_TAGS))),
    # Features
    ElementSpec(
        "Placemark",
        Placemark,
        _FEATURE_HEAD
        + _FEATURE_INFO
        + (
            _nodes("styles", "Style", "StyleMap"),
            _node("extended_data", "ExtendedData"),
            _node("geometry", *GEOMETRY_TAGS),
        ),
    ),
    ElementSpec(
        "Document",
        Document,
        _FEATURE_HEAD + (_OPEN,) + _FEATURE_INFO + (Slot("*", "elements", SlotKind.NODE_LIST, accepts=ANY_NODE),),
    ),
    ElementSpec(
        "Folder",
        Folder,
        _FEATURE_HEAD + (_OPEN,) + _FEATURE_INFO + (Slot("*", "elements", SlotKind.NODE_LIST, accepts=ANY_NODE),),
    ),
    ElementSpec(
        "NetworkLink",
        NetworkLink,
        _FEATURE_HEAD
        + (
            _OPEN,
            _text("description", "description"),
            _text("refreshVisibility", "refresh_visibility", ValueType.BOOL),
            _text("flyToView", "fly_to_view", ValueType.BOOL),
            _node("link", "Link", "Url"),
        ),
    ),
    # Styles
    ElementSpec(
        "Style",
        Style,
        (
            _ID,
            _node("icon", "IconStyle"),
            _node("label", "LabelStyle"),
            _node("line", "LineStyle"),
            _node("poly", "PolyStyle"),
            _node("balloon", "BalloonStyle"),
            _node("list", "ListStyle"),
        ),
    ),
    ElementSpec("StyleMap", StyleMap, (_ID, _nodes("pairs", "Pair"))),
    ElementSpec("Pair", Pair, (_ID, _text("key", "key"), _text("styleUrl", "style_url"))),
    ElementSpec(
        "IconStyle",
        IconStyle,
        (
            _ID,
            _COLOR,
            _COLOR_MODE,
            _text("scale", "scale", ValueType.SCALAR),
            _text("heading", "heading", ValueType.SCALAR),
            _node("icon", "Icon"),
            _node("hot_spot", "hotSpot"),
        ),
    ),
    ElementSpec("LabelStyle", LabelStyle, (_ID, _COLOR, _COLOR_MODE, _text("scale", "scale", ValueType.SCALAR))),
    ElementSpec("LineStyle", LineStyle, (_ID, _COLOR, _COLOR_MODE, _text("width", "width", ValueType.SCALAR))),
    ElementSpec(
        "PolyStyle",
        PolyStyle,
        (
            _ID,
            _COLOR,
            _COLOR_MODE,
            _text("fill", "fill", ValueType.BOOL),
            _text("outline", "outline", ValueType.BOOL),
        ),
    ),
    ElementSpec(
        "BalloonStyle",
        BalloonStyle,
        (
            _ID,
            _text("bgColor", "bg_color"),
            _text("textColor", "text_color"),
            _text("text", "text"),
            _enum("displayMode", "display_mode", DisplayMode),
        ),
    ),
    ElementSpec(
        "ListStyle",
        ListStyle,
        (
            _ID,
            _enum("listItemType", "list_item_type", ListItemType),
            _text("bgColor", "bg_color"),
            _text("maxSnippetLines", "max_snippet_lines", ValueType.INT),
        ),
    ),
    ElementSpec("Icon", Icon, _LINK_SLOTS),
    ElementSpec("Link", Link, _LINK_SLOTS),
    # Support
    ElementSpec(
        "Scale",
        Scale,
        (
            _ID,
            _text("x", "x", ValueType.SCALAR),
            _text("y", "y", ValueType.SCALAR),
            _text("z", "z", ValueType.SCALAR),
        ),
    ),
    ElementSpec(
        "Orientation",
        Orientation,
        (
            _ID,
            _text("heading", "heading", ValueType.SCALAR),
            _text("tilt", "tilt", ValueType.SCALAR),
            _text("roll", "roll", ValueType.SCALAR),
        ),
    ),
    ElementSpec(
        "Location",
        Location,
        (
            _ID,
            _text("longitude", "longitude", ValueType.SCALAR),
            _text("latitude", "latitude", ValueType.SCALAR),
            _text("altitude", "altitude", ValueType.SCALAR),
        ),
    ),
    ElementSpec(
        "hotSpot",
        Vec2,
        (
            _attr("x", "x", ValueType.SCALAR),
            _attr("y", "y", ValueType.SCALAR),
            _attr("xunits", "xunits", ValueType.ENUM, enum=Units),
            _attr("yunits", "yunits", ValueType.ENUM, enum=Units),
        ),
    ),
    ElementSpec("Alias", Alias, (_ID, _text("targetHref", "target_href"), _text("sourceHref", "source_href"))),
    ElementSpec("ResourceMap", ResourceMap, (_ID, _nodes("aliases", "Alias"))),
    # Extended data
    ElementSpec("ExtendedData", ExtendedData, (_nodes("data", "Data"), _nodes("schema_data", "SchemaData"))),
    ElementSpec(
        "Data",
        Data,
        (_ID, _attr("name", "name"), _text("displayName", "display_name"), _text("value", "value")),
    ),
    ElementSpec(
        "SchemaData",
        SchemaData,
        (
            _ID,
            _attr("schemaUrl", "schema_url"),
            _nodes("data", "SimpleData"),
            _nodes("arrays", "SimpleArrayData"),
        ),
    ),
    ElementSpec("SimpleData", SimpleData, (_attr("name", "name"), Slot("", "value", SlotKind.CONTENT))),
    ElementSpec(
        "SimpleArrayData",
        SimpleArrayData,
        (_attr("name", "name"), Slot("value", "values", SlotKind.TEXT_LIST)),
    ),
)

#: Specs by element local name, including accepted aliases.
ELEMENT_SPECS: Dict[str, ElementSpec] = {spec.tag: spec for spec in _SPECS}
ELEMENT_SPECS["Url"] = ELEMENT_SPECS["Link"]

#: Specs by node class, used for writing.
TYPE_SPECS: Dict[type, ElementSpec] = {spec.cls: spec for spec in _SPECS}
