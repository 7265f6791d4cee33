"""
Link-type nodes: ``kml:Link`` and ``kml:Icon``.

Both share the ``kml:LinkType`` fields. Icon appears inside IconStyle; Link
inside NetworkLink (and Model). Refresh values use the configured scalar.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .enums import RefreshMode, ViewRefreshMode


@dataclass
class Link:
    """``kml:Link``: reference to an external KML file or image."""

    href: Optional[str] = None
    refresh_mode: Optional[RefreshMode] = None
    refresh_interval: Optional[Any] = None
    view_refresh_mode: Optional[ViewRefreshMode] = None
    view_refresh_time: Optional[Any] = None
    view_bound_scale: Optional[Any] = None
    view_format: Optional[str] = None
    http_query: Optional[str] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class Icon:
    """``kml:Icon``: image reference used by IconStyle."""

    href: Optional[str] = None
    refresh_mode: Optional[RefreshMode] = None
    refresh_interval: Optional[Any] = None
    view_refresh_mode: Optional[ViewRefreshMode] = None
    view_refresh_time: Optional[Any] = None
    view_bound_scale: Optional[Any] = None
    view_format: Optional[str] = None
    http_query: Optional[str] = None
    id: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)
