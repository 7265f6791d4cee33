"""
Tests for geometry conversion between KML nodes and Shapely.

Tests cover:
- Each geometry kind in both directions
- MultiGeometry flattening
- Dimensionality and ring closure checks
- Shapely rejections and empty geometries
- Collecting every geometry of a document
"""

from pathlib import Path

import numpy as np
import pytest
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

from kmlkit.core.config import KmlConfig
from kmlkit.core.conversion import (
    flatten_multi_geometry,
    kml_to_shapely,
    quick_collection,
    shapely_to_kml,
    to_geometry_collection,
)
from kmlkit.core.conversion import shapely_converter
from kmlkit.core.errors import ConversionError, ConversionErrorKind
from kmlkit.core.parsers import parse_kml_file
from kmlkit.models import (
    Coord,
    Folder,
    LinearRing,
    LineString,
    MultiGeometry,
    Placemark,
    Point,
    Polygon,
    Style,
)

# Test fixtures path
FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _ring(*points) -> LinearRing:
    return LinearRing(coords=[Coord(*p) for p in points])


SQUARE = _ring((0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0))
HOLE = _ring((2.0, 2.0), (4.0, 2.0), (4.0, 4.0), (2.0, 4.0), (2.0, 2.0))


class TestKmlToShapely:
    """Tests for KML to Shapely conversion."""

    def test_point_2d(self):
        """Test a 2D Point."""
        result = kml_to_shapely(Point(coord=Coord(1.0, 2.0)))
        assert isinstance(result, ShapelyPoint)
        assert (result.x, result.y) == (1.0, 2.0)
        assert not result.has_z

    def test_point_3d(self):
        """Test a 3D Point keeps its altitude."""
        result = kml_to_shapely(Point(coord=Coord(1.0, 2.0, 30.0)))
        assert result.has_z
        assert result.z == 30.0

    def test_axis_order(self):
        """Test that longitude maps to x and latitude to y."""
        result = kml_to_shapely(Point(coord=Coord(-122.0, 37.0)))
        assert result.x == -122.0
        assert result.y == 37.0

    def test_line_string(self):
        """Test a LineString."""
        line = LineString(coords=[Coord(0.0, 0.0), Coord(3.0, 4.0)])
        result = kml_to_shapely(line)
        assert isinstance(result, ShapelyLineString)
        assert result.length == pytest.approx(5.0)

    def test_linear_ring(self):
        """Test a closed LinearRing."""
        result = kml_to_shapely(SQUARE)
        assert isinstance(result, ShapelyLinearRing)
        assert result.is_closed

    def test_polygon_with_hole(self):
        """Test that inner boundaries become holes."""
        result = kml_to_shapely(Polygon(outer=SQUARE, inner=[HOLE]))
        assert isinstance(result, ShapelyPolygon)
        assert len(result.interiors) == 1
        assert result.area == pytest.approx(100.0 - 4.0)

    def test_multi_geometry_flattened(self):
        """Test that nested MultiGeometry becomes one flat collection."""
        multi = MultiGeometry(
            geometries=[
                Point(coord=Coord(0.0, 0.0)),
                MultiGeometry(
                    geometries=[
                        LineString(coords=[Coord(0.0, 0.0), Coord(1.0, 1.0)]),
                        MultiGeometry(geometries=[Polygon(outer=SQUARE)]),
                    ]
                ),
            ]
        )
        result = kml_to_shapely(multi)
        assert isinstance(result, GeometryCollection)
        assert [g.geom_type for g in result.geoms] == ["Point", "LineString", "Polygon"]

    def test_to_geometry_collection_wraps_single(self):
        """Test that a single geometry is wrapped in a collection."""
        result = to_geometry_collection(Point(coord=Coord(1.0, 1.0)))
        assert isinstance(result, GeometryCollection)
        assert len(result.geoms) == 1

    def test_unsupported_node(self):
        """Test that Features are not geometries."""
        with pytest.raises(ConversionError) as exc_info:
            kml_to_shapely(Placemark(geometry=Point(coord=Coord(0.0, 0.0))))
        assert exc_info.value.kind == ConversionErrorKind.UNSUPPORTED_NODE
        assert exc_info.value.node_type == "Placemark"

    def test_unsupported_member(self):
        """Test that a non-geometry inside MultiGeometry is rejected."""
        with pytest.raises(ConversionError) as exc_info:
            kml_to_shapely(MultiGeometry(geometries=[Style()]))
        assert exc_info.value.kind == ConversionErrorKind.UNSUPPORTED_NODE

    def test_mixed_dimensionality(self):
        """Test that 2D and 3D coordinates cannot be mixed."""
        line = LineString(coords=[Coord(0.0, 0.0), Coord(1.0, 1.0, 5.0)])
        with pytest.raises(ConversionError) as exc_info:
            kml_to_shapely(line)
        assert exc_info.value.kind == ConversionErrorKind.MIXED_DIMENSIONALITY

    def test_mixed_dimensionality_across_rings(self):
        """Test that a 3D hole in a 2D polygon is rejected."""
        hole = _ring((2.0, 2.0, 1.0), (4.0, 2.0, 1.0), (4.0, 4.0, 1.0), (2.0, 2.0, 1.0))
        with pytest.raises(ConversionError) as exc_info:
            kml_to_shapely(Polygon(outer=SQUARE, inner=[hole]))
        assert exc_info.value.kind == ConversionErrorKind.MIXED_DIMENSIONALITY

    def test_unclosed_ring(self):
        """Test that an unclosed ring is an error by default."""
        ring = _ring((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))
        with pytest.raises(ConversionError) as exc_info:
            kml_to_shapely(ring)
        assert exc_info.value.kind == ConversionErrorKind.UNCLOSED_RING

    def test_unclosed_polygon_ring(self):
        """Test that an unclosed outer boundary is an error."""
        outer = _ring((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))
        with pytest.raises(ConversionError) as exc_info:
            kml_to_shapely(Polygon(outer=outer))
        assert exc_info.value.kind == ConversionErrorKind.UNCLOSED_RING

    def test_close_rings(self):
        """Test that close_rings lets Shapely close the ring."""
        ring = _ring((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))
        result = kml_to_shapely(ring, close_rings=True)
        assert result.is_closed
        assert len(result.coords) == 5

    def test_invalid_geometry(self):
        """Test that a one-point LineString is rejected by Shapely."""
        with pytest.raises(ConversionError) as exc_info:
            kml_to_shapely(LineString(coords=[Coord(0.0, 0.0)]))
        assert exc_info.value.kind == ConversionErrorKind.INVALID_GEOMETRY

    def test_short_ring_invalid(self):
        """Test that a closed ring with three coordinates is rejected."""
        ring = _ring((0.0, 0.0), (1.0, 0.0), (0.0, 0.0))
        with pytest.raises(ConversionError) as exc_info:
            kml_to_shapely(ring)
        assert exc_info.value.kind == ConversionErrorKind.INVALID_GEOMETRY

    def test_source_not_modified(self):
        """Test that conversion leaves the KML tree unchanged."""
        multi = MultiGeometry(geometries=[MultiGeometry(geometries=[Point(coord=Coord(0.0, 0.0))])])
        kml_to_shapely(multi)
        assert isinstance(multi.geometries[0], MultiGeometry)


class TestFlatten:
    """Tests for MultiGeometry flattening."""

    def test_depth_first_order(self):
        """Test that members keep depth-first order."""
        points = [Point(coord=Coord(float(i), 0.0)) for i in range(4)]
        multi = MultiGeometry(
            id="outer",
            geometries=[
                points[0],
                MultiGeometry(id="inner", geometries=[points[1], MultiGeometry(geometries=[points[2]])]),
                points[3],
            ],
        )
        flat = flatten_multi_geometry(multi)
        assert flat.geometries == points
        assert flat.id == "outer"

    def test_idempotent(self):
        """Test that flattening a flat group changes nothing."""
        multi = MultiGeometry(
            geometries=[Point(coord=Coord(0.0, 0.0)), MultiGeometry(geometries=[Polygon(outer=SQUARE)])]
        )
        once = flatten_multi_geometry(multi)
        assert flatten_multi_geometry(once) == once

    def test_deep_nesting(self):
        """Test flattening a very deep chain of groups."""
        multi = MultiGeometry(geometries=[Point(coord=Coord(0.0, 0.0))])
        for _ in range(5000):
            multi = MultiGeometry(geometries=[multi])
        assert len(flatten_multi_geometry(multi).geometries) == 1

    def test_result_shares_no_nodes(self):
        """Test that the flattened group holds copies of the input members."""
        point = Point(coord=Coord(1.0, 2.0), attrs={"k": "v"})
        polygon = Polygon(outer=_ring((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0)))
        multi = MultiGeometry(geometries=[point, MultiGeometry(geometries=[polygon])], attrs={"a": "b"})

        flat = flatten_multi_geometry(multi)
        assert flat.geometries == [point, polygon]
        assert flat.geometries[0] is not point
        assert flat.geometries[1].outer is not polygon.outer

        flat.geometries[0].attrs["k"] = "changed"
        flat.geometries[1].outer.coords.append(Coord(5.0, 5.0))
        flat.attrs["a"] = "changed"
        assert point.attrs == {"k": "v"}
        assert len(polygon.outer.coords) == 4
        assert multi.attrs == {"a": "b"}


class TestShapelyToKml:
    """Tests for Shapely to KML conversion."""

    def test_point(self):
        """Test a 2D point."""
        assert shapely_to_kml(ShapelyPoint(1.0, 2.0)) == Point(coord=Coord(1.0, 2.0))

    def test_point_3d(self):
        """Test a 3D point."""
        assert shapely_to_kml(ShapelyPoint(1.0, 2.0, 3.0)) == Point(coord=Coord(1.0, 2.0, 3.0))

    def test_line_string(self):
        """Test a LineString."""
        result = shapely_to_kml(ShapelyLineString([(0, 0), (1, 1)]))
        assert result == LineString(coords=[Coord(0.0, 0.0), Coord(1.0, 1.0)])

    def test_linear_ring(self):
        """Test that a Shapely LinearRing becomes a LinearRing."""
        result = shapely_to_kml(ShapelyLinearRing([(0, 0), (1, 0), (1, 1)]))
        assert isinstance(result, LinearRing)
        assert result.is_closed

    def test_polygon_round_trip(self):
        """Test that a polygon with a hole survives a round trip."""
        original = ShapelyPolygon(
            [(0, 0), (10, 0), (10, 10), (0, 10)],
            holes=[[(2, 2), (4, 2), (4, 4), (2, 4)]],
        )
        kml = shapely_to_kml(original)
        assert isinstance(kml, Polygon)
        assert len(kml.inner) == 1
        assert kml.outer.is_closed
        assert kml_to_shapely(kml).equals(original)

    def test_kml_round_trip(self):
        """Test KML to Shapely and back yields an equal node."""
        polygon = Polygon(outer=SQUARE, inner=[HOLE])
        assert shapely_to_kml(kml_to_shapely(polygon)) == polygon

    @pytest.mark.parametrize(
        "geometry,member_type",
        [
            (MultiPoint([(0, 0), (1, 1)]), Point),
            (MultiLineString([[(0, 0), (1, 1)], [(2, 2), (3, 3)]]), LineString),
            (
                MultiPolygon(
                    [
                        ShapelyPolygon([(0, 0), (1, 0), (1, 1)]),
                        ShapelyPolygon([(5, 5), (6, 5), (6, 6)]),
                    ]
                ),
                Polygon,
            ),
        ],
    )
    def test_multi_part(self, geometry, member_type):
        """Test that multi-part geometries become MultiGeometry."""
        result = shapely_to_kml(geometry)
        assert isinstance(result, MultiGeometry)
        assert len(result.geometries) == 2
        assert all(isinstance(g, member_type) for g in result.geometries)

    def test_nested_collection_flattened(self):
        """Test that nested collections become one flat MultiGeometry."""
        collection = GeometryCollection(
            [
                ShapelyPoint(0, 0),
                GeometryCollection([MultiPoint([(1, 1), (2, 2)]), ShapelyLineString([(0, 0), (1, 0)])]),
            ]
        )
        result = shapely_to_kml(collection)
        assert [type(g) for g in result.geometries] == [Point, Point, Point, LineString]

    def test_empty_collection(self):
        """Test that an empty collection becomes an empty MultiGeometry."""
        assert shapely_to_kml(GeometryCollection()) == MultiGeometry()

    @pytest.mark.parametrize("geometry", [ShapelyPoint(), ShapelyLineString(), ShapelyPolygon()])
    def test_empty_geometry(self, geometry):
        """Test that empty simple geometries are rejected."""
        with pytest.raises(ConversionError) as exc_info:
            shapely_to_kml(geometry)
        assert exc_info.value.kind == ConversionErrorKind.EMPTY_GEOMETRY

    def test_not_a_geometry(self):
        """Test that non-Shapely input is rejected."""
        with pytest.raises(ConversionError) as exc_info:
            shapely_to_kml([(0, 0)])
        assert exc_info.value.kind == ConversionErrorKind.UNSUPPORTED_NODE

    def test_single_precision(self):
        """Test that the scalar type is applied to coordinates."""
        result = shapely_to_kml(ShapelyPoint(0.5, 0.25), scalar=np.float32)
        assert isinstance(result.coord.x, np.float32)
        assert result.coord == Coord(np.float32(0.5), np.float32(0.25))

    def test_scalar_defaults_to_configured_precision(self, monkeypatch):
        """Test that the scalar type follows the configured coord_precision."""
        monkeypatch.setattr(shapely_converter, "default_config", KmlConfig(coord_precision="single"))
        result = shapely_to_kml(ShapelyLineString([(0.5, 0.25), (1.0, 2.0)]))
        assert all(isinstance(c.x, np.float32) for c in result.coords)

    def test_scalar_default_is_double(self):
        """Test that the default configuration gives Python floats."""
        result = shapely_to_kml(ShapelyPoint(0.5, 0.25))
        assert type(result.coord.x) is float


class TestQuickCollection:
    """Tests for collecting all geometries of a document."""

    def test_complex_document(self):
        """Test that geometries are collected in document order."""
        kml = parse_kml_file(FIXTURES_DIR / "complex.kml")
        collection = quick_collection(kml)
        assert [g.geom_type for g in collection.geoms] == ["Polygon", "LineString", "Point", "Point"]

    def test_ignores_non_geometry_nodes(self):
        """Test that styles and empty placemarks are skipped."""
        folder = Folder(elements=[Style(), Placemark(name="empty"), Placemark(geometry=Point(coord=Coord(0.0, 0.0)))])
        assert len(quick_collection(folder).geoms) == 1

    def test_empty_document(self):
        """Test that a document without geometry gives an empty collection."""
        assert quick_collection(Folder()).is_empty
