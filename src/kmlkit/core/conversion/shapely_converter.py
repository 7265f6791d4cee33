"""
Conversion between KML geometry nodes and Shapely geometries.

KML coordinates are ``lon,lat[,alt]``; Shapely coordinates are ``x, y[, z]`` in
the same order, so no axis swapping happens. Nested MultiGeometry groups
become one flat GeometryCollection, and Shapely multi-part geometries become
one flat MultiGeometry.

Ring closure is checked, never repaired here: an unclosed ring is an error
unless ``close_rings`` lets Shapely close it.
"""

import copy
import logging
from typing import Any, Iterable, Iterator, List, Optional, Sequence

from shapely.errors import ShapelyError
from shapely.geometry import (
    GeometryCollection,
    LinearRing as ShapelyLinearRing,
    LineString as ShapelyLineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point as ShapelyPoint,
    Polygon as ShapelyPolygon,
)
from shapely.geometry.base import BaseGeometry

from kmlkit.core.config import default_config
from kmlkit.core.errors import ConversionError, ConversionErrorKind
from kmlkit.models.coord import Coord, CoordType
from kmlkit.models.feature import Document, Folder, Placemark
from kmlkit.models.geometry import (
    Geometry,
    LinearRing,
    LineString,
    MultiGeometry,
    Point,
    Polygon,
)
from kmlkit.models.kml import Kml, KmlDocument
from kmlkit.utils.logging import log_performance

logger = logging.getLogger(__name__)


def _check_dimensions(coords: Iterable[Coord], node_type: str) -> None:
    """Raise if some coordinates carry an altitude and others do not."""
    dims = {c.has_z for c in coords}
    if len(dims) > 1:
        raise ConversionError(
            f"{node_type} mixes 2D and 3D coordinates",
            kind=ConversionErrorKind.MIXED_DIMENSIONALITY,
            node_type=node_type,
        )


def _check_closed(ring: LinearRing, node_type: str, close_rings: bool) -> None:
    if ring.coords and not ring.is_closed and not close_rings:
        raise ConversionError(
            f"{node_type} is not closed: first and last coordinates differ",
            kind=ConversionErrorKind.UNCLOSED_RING,
            node_type=node_type,
            details={"first": str(ring.coords[0]), "last": str(ring.coords[-1])},
        )


def _tuples(coords: Sequence[Coord]) -> List[tuple]:
    return [c.to_tuple() for c in coords]


def _build(node_type: str, factory: Any, *args: Any) -> BaseGeometry:
    """Call a Shapely constructor, turning its rejections into ConversionError."""
    try:
        return factory(*args)
    except (ValueError, ShapelyError) as e:
        raise ConversionError(
            f"Shapely rejected {node_type}: {e}",
            kind=ConversionErrorKind.INVALID_GEOMETRY,
            node_type=node_type,
        ) from e


def _leaves(multi: MultiGeometry) -> Iterator[Geometry]:
    stack: List[Any] = list(reversed(multi.geometries))
    while stack:
        item = stack.pop()
        if isinstance(item, MultiGeometry):
            stack.extend(reversed(item.geometries))
        else:
            yield item


def flatten_multi_geometry(multi: MultiGeometry) -> MultiGeometry:
    """
    Flatten nested MultiGeometry groups into one level.

    Members keep their depth-first order. The outer group's id and attrs are
    kept; those of nested groups are dropped. Flattening a flat group returns
    an equal group. The result shares no nodes with the input.

    Args:
        multi: MultiGeometry, possibly nested

    Returns:
        A new MultiGeometry without MultiGeometry members
    """
    flat = [copy.deepcopy(member) for member in _leaves(multi)]
    return MultiGeometry(geometries=flat, id=multi.id, attrs=dict(multi.attrs))


def kml_to_shapely(geometry: Kml, close_rings: Optional[bool] = None) -> BaseGeometry:
    """
    Convert a KML geometry node to a Shapely geometry.

    Args:
        geometry: Point, LineString, LinearRing, Polygon or MultiGeometry
        close_rings: Let Shapely close unclosed rings; defaults to the
            configured ``close_rings``

    Returns:
        Point, LineString, LinearRing, Polygon, or a flat GeometryCollection
        for MultiGeometry

    Raises:
        ConversionError: If the node is not a geometry, mixes 2D and 3D
            coordinates, has an unclosed ring, or is rejected by Shapely
    """
    if close_rings is None:
        close_rings = default_config.close_rings

    node_type = type(geometry).__name__

    if isinstance(geometry, Point):
        return _build(node_type, ShapelyPoint, geometry.coord.to_tuple())

    if isinstance(geometry, LineString):
        _check_dimensions(geometry.coords, node_type)
        return _build(node_type, ShapelyLineString, _tuples(geometry.coords))

    if isinstance(geometry, LinearRing):
        _check_dimensions(geometry.coords, node_type)
        _check_closed(geometry, node_type, close_rings)
        return _build(node_type, ShapelyLinearRing, _tuples(geometry.coords))

    if isinstance(geometry, Polygon):
        rings = [geometry.outer] + list(geometry.inner)
        _check_dimensions((c for ring in rings for c in ring.coords), node_type)
        for ring in rings:
            _check_closed(ring, node_type, close_rings)
        holes = [_tuples(ring.coords) for ring in geometry.inner]
        return _build(node_type, ShapelyPolygon, _tuples(geometry.outer.coords), holes)

    if isinstance(geometry, MultiGeometry):
        parts = [kml_to_shapely(member, close_rings) for member in _leaves(geometry)]
        logger.debug(f"Converted MultiGeometry with {len(parts)} member(s)")
        return GeometryCollection(parts)

    raise ConversionError(
        f"{node_type} is not a geometry and cannot be converted",
        kind=ConversionErrorKind.UNSUPPORTED_NODE,
        node_type=node_type,
    )


def to_geometry_collection(geometry: Kml, close_rings: Optional[bool] = None) -> GeometryCollection:
    """
    Convert a KML geometry node to a GeometryCollection.

    Single geometries become a one-member collection.
    """
    result = kml_to_shapely(geometry, close_rings)
    if isinstance(result, GeometryCollection):
        return result
    return GeometryCollection([result])


def _coords_from(geometry: BaseGeometry, scalar: CoordType) -> List[Coord]:
    return [Coord.from_sequence(values, scalar) for values in geometry.coords]


def shapely_to_kml(geometry: BaseGeometry, scalar: Optional[CoordType] = None) -> Geometry:
    """
    Convert a Shapely geometry to a bare KML geometry node.

    Multi-part geometries and collections become one flat MultiGeometry; no
    Placemark or style is created.

    Args:
        geometry: Shapely geometry
        scalar: Scalar type for the resulting coordinates; defaults to the
            type of the configured ``coord_precision``

    Returns:
        KML geometry node

    Raises:
        ConversionError: If the geometry is empty or not a Shapely geometry
    """
    if scalar is None:
        scalar = default_config.scalar

    if not isinstance(geometry, BaseGeometry):
        raise ConversionError(
            f"{type(geometry).__name__} is not a Shapely geometry",
            kind=ConversionErrorKind.UNSUPPORTED_NODE,
            node_type=type(geometry).__name__,
        )

    if isinstance(geometry, (MultiPoint, MultiLineString, MultiPolygon, GeometryCollection)):
        members: List[Geometry] = []
        stack: List[BaseGeometry] = list(reversed(geometry.geoms))
        while stack:
            part = stack.pop()
            if isinstance(part, (MultiPoint, MultiLineString, MultiPolygon, GeometryCollection)):
                stack.extend(reversed(part.geoms))
            else:
                members.append(shapely_to_kml(part, scalar))
        return MultiGeometry(geometries=members)

    if geometry.is_empty:
        raise ConversionError(
            f"Cannot convert empty {geometry.geom_type}",
            kind=ConversionErrorKind.EMPTY_GEOMETRY,
            node_type=geometry.geom_type,
        )

    if isinstance(geometry, ShapelyPoint):
        return Point(coord=_coords_from(geometry, scalar)[0])

    # LinearRing subclasses LineString in Shapely, so test it first
    if isinstance(geometry, ShapelyLinearRing):
        return LinearRing(coords=_coords_from(geometry, scalar))

    if isinstance(geometry, ShapelyLineString):
        return LineString(coords=_coords_from(geometry, scalar))

    if isinstance(geometry, ShapelyPolygon):
        return Polygon(
            outer=LinearRing(coords=_coords_from(geometry.exterior, scalar)),
            inner=[LinearRing(coords=_coords_from(ring, scalar)) for ring in geometry.interiors],
        )

    raise ConversionError(
        f"Unsupported Shapely geometry type: {geometry.geom_type}",
        kind=ConversionErrorKind.UNSUPPORTED_NODE,
        node_type=geometry.geom_type,
    )


@log_performance(count=lambda collection: len(collection.geoms), unit="geometries")
def quick_collection(kml: Kml, close_rings: Optional[bool] = None) -> GeometryCollection:
    """
    Collect every geometry in a document tree into one GeometryCollection.

    Walks KmlDocument, Document and Folder elements and Placemark geometries
    in document order; other nodes (styles, links, data) are ignored.

    Args:
        kml: Any node of the document tree
        close_rings: Passed to kml_to_shapely

    Returns:
        Flat GeometryCollection of all embedded geometries
    """
    parts: List[BaseGeometry] = []
    stack: List[Any] = [kml]
    while stack:
        node = stack.pop()
        if isinstance(node, (KmlDocument, Document, Folder)):
            stack.extend(reversed(node.elements))
        elif isinstance(node, Placemark):
            if node.geometry is not None:
                stack.append(node.geometry)
        elif isinstance(node, MultiGeometry):
            stack.extend(reversed(node.geometries))
        elif isinstance(node, (Point, LineString, LinearRing, Polygon)):
            parts.append(kml_to_shapely(node, close_rings))

    logger.info(f"Collected {len(parts)} geometries")
    return GeometryCollection(parts)
