"""
KML Feature nodes: Placemark, Document, Folder and NetworkLink.

Document and Folder are recursive containers: ``elements`` holds any node kind
(Features, Geometries, Styles...) in source order.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Union

from .data import ExtendedData
from .geometry import Geometry
from .link import Link
from .style import StyleSelector

if TYPE_CHECKING:
    from .kml import Kml


@dataclass
class Placemark:
    """
    ``kml:Placemark``: a Feature with at most one Geometry.

    Attributes:
        name: Display name
        visibility: Whether the feature is drawn initially
        description: Balloon description (text or HTML)
        style_url: Reference to a shared Style or StyleMap
        styles: Inline style selectors, in source order
        extended_data: Custom data attached to the feature
        geometry: The feature's geometry, if any
    """

    name: Optional[str] = None
    visibility: Optional[bool] = None
    description: Optional[str] = None
    style_url: Optional[str] = None
    styles: List[StyleSelector] = field(default_factory=list)
    extended_data: Optional[ExtendedData] = None
    geometry: Optional[Geometry] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class Document:
    """``kml:Document``: ordered container of Features, Styles and others."""

    name: Optional[str] = None
    visibility: Optional[bool] = None
    open: Optional[bool] = None
    description: Optional[str] = None
    style_url: Optional[str] = None
    elements: List["Kml"] = field(default_factory=list)
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class Folder:
    """``kml:Folder``: ordered container of Features and others."""

    name: Optional[str] = None
    visibility: Optional[bool] = None
    open: Optional[bool] = None
    description: Optional[str] = None
    style_url: Optional[str] = None
    elements: List["Kml"] = field(default_factory=list)
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class NetworkLink:
    """
    ``kml:NetworkLink``: reference to an external KML document.

    The linked document is never fetched.
    """

    name: Optional[str] = None
    visibility: Optional[bool] = None
    open: Optional[bool] = None
    description: Optional[str] = None
    refresh_visibility: Optional[bool] = None
    fly_to_view: Optional[bool] = None
    link: Optional[Link] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


Feature = Union[Placemark, Document, Folder, NetworkLink]

FEATURE_TYPES = (Placemark, Document, Folder, NetworkLink)
