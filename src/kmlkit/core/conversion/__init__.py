"""
Geometry conversion between the KML document tree and Shapely.
"""

from kmlkit.core.conversion.shapely_converter import (
    flatten_multi_geometry,
    kml_to_shapely,
    quick_collection,
    shapely_to_kml,
    to_geometry_collection,
)

__all__ = [
    "flatten_multi_geometry",
    "kml_to_shapely",
    "quick_collection",
    "shapely_to_kml",
    "to_geometry_collection",
]
