"""
Style nodes.

Each sub-style is a flat record of optional scalar fields; ``None`` means the
element was absent in the source and is omitted on write.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .enums import ColorMode, DisplayMode, ListItemType
from .link import Icon
from .support import Vec2


@dataclass
class IconStyle:
    """``kml:IconStyle``."""

    color: Optional[str] = None
    color_mode: Optional[ColorMode] = None
    scale: Optional[Any] = None
    heading: Optional[Any] = None
    icon: Optional[Icon] = None
    hot_spot: Optional[Vec2] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class LabelStyle:
    """``kml:LabelStyle``."""

    color: Optional[str] = None
    color_mode: Optional[ColorMode] = None
    scale: Optional[Any] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class LineStyle:
    """``kml:LineStyle``."""

    color: Optional[str] = None
    color_mode: Optional[ColorMode] = None
    width: Optional[Any] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class PolyStyle:
    """``kml:PolyStyle``."""

    color: Optional[str] = None
    color_mode: Optional[ColorMode] = None
    fill: Optional[bool] = None
    outline: Optional[bool] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class BalloonStyle:
    """``kml:BalloonStyle``."""

    bg_color: Optional[str] = None
    text_color: Optional[str] = None
    text: Optional[str] = None
    display_mode: Optional[DisplayMode] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class ListStyle:
    """``kml:ListStyle``."""

    list_item_type: Optional[ListItemType] = None
    bg_color: Optional[str] = None
    max_snippet_lines: Optional[int] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class Style:
    """
    ``kml:Style``: a bundle of sub-styles.

    Attributes:
        icon: Icon style for Points
        label: Label style
        line: Line style for LineStrings and outlines
        poly: Polygon fill style
        balloon: Balloon (popup) style
        list: Style of the Feature in list views
    """

    icon: Optional[IconStyle] = None
    label: Optional[LabelStyle] = None
    line: Optional[LineStyle] = None
    poly: Optional[PolyStyle] = None
    balloon: Optional[BalloonStyle] = None
    list: Optional[ListStyle] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class Pair:
    """``kml:Pair``: one key (normal / highlight) of a StyleMap."""

    key: Optional[str] = None
    style_url: Optional[str] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class StyleMap:
    """``kml:StyleMap``: ordered key to style URL pairs."""

    pairs: List[Pair] = field(default_factory=list)
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


StyleSelector = Union[Style, StyleMap]
