"""
Unit tests for the geometry object model.
"""

import dataclasses

import pytest
from wktshapes import (
    parse_wkt, format_geometry,
    Dimensionality, GeometryKind, GeometryVisitor,
    Point, LineString, Polygon, MultiPoint, GeometryCollection,
)


def parse_one(source):
    return parse_wkt(source)[0]


class TestDimensionality:
    """Test the dimensionality enum."""

    def test_component_counts(self):
        assert Dimensionality.XY.component_count == 2
        assert Dimensionality.XYZ.component_count == 3
        assert Dimensionality.XYM.component_count == 3
        assert Dimensionality.XYZM.component_count == 4

    def test_flags(self):
        assert Dimensionality.XYZ.has_z and not Dimensionality.XYZ.has_m
        assert Dimensionality.XYM.has_m and not Dimensionality.XYM.has_z
        assert Dimensionality.XYZM.has_z and Dimensionality.XYZM.has_m

    def test_axes(self):
        assert Dimensionality.XYM.axes == ("x", "y", "m")
        assert Dimensionality.XYZM.axes == ("x", "y", "z", "m")

    def test_from_suffix(self):
        assert Dimensionality.from_suffix("") is Dimensionality.XY
        assert Dimensionality.from_suffix("zm") is Dimensionality.XYZM
        with pytest.raises(ValueError):
            Dimensionality.from_suffix("MZ")


class TestGeometryKind:
    """Test keyword lookup."""

    def test_from_keyword(self):
        assert GeometryKind.from_keyword("multipolygon") is GeometryKind.MULTI_POLYGON
        assert GeometryKind.from_keyword("GeometryCollection") is GeometryKind.GEOMETRY_COLLECTION
        assert GeometryKind.from_keyword("CIRCLE") is None

    def test_node_kind(self):
        assert Point.kind is GeometryKind.POINT
        assert parse_one("MULTIPOINT (1 2)").kind is GeometryKind.MULTI_POINT


class TestNodes:
    """Test node structure."""

    def test_frozen(self):
        point = parse_one("POINT (1 2)")
        with pytest.raises(dataclasses.FrozenInstanceError):
            point.coordinate = (3.0, 4.0)

    def test_equality_ignores_span(self):
        a = parse_one("POINT (1 2)")
        b = parse_one("   POINT(1 2)")
        assert a.span != b.span
        assert a == b

    def test_equality_checks_kind_and_dimension(self):
        assert Point(coordinate=(1.0, 2.0)) != MultiPoint()
        assert Point(is_empty=True) != Point(is_empty=True, dimensionality=Dimensionality.XYZ)

    def test_equality_checks_structure(self):
        flat = parse_one("GEOMETRYCOLLECTION (POINT (1 2), POINT (3 4))")
        nested = parse_one("GEOMETRYCOLLECTION (POINT (1 2), GEOMETRYCOLLECTION (POINT (3 4)))")
        shorter = parse_one("GEOMETRYCOLLECTION (POINT (1 2))")
        assert flat != nested
        assert flat != shorter
        assert shorter != flat
        assert flat == parse_one("GEOMETRYCOLLECTION(POINT(1 2),POINT(3 4))")
        assert flat != "GEOMETRYCOLLECTION (POINT (1 2), POINT (3 4))"

    def test_hashable(self):
        a = parse_one("MULTIPOINT (1 2, 3 4)")
        b = parse_one("MULTIPOINT ((1 2), (3 4))")
        assert a == b
        assert len({a, b}) == 1

    def test_repr(self):
        text = repr(parse_one("POINT (1 2)"))
        assert text.startswith("Point(")
        assert "coordinate=(1.0, 2.0)" in text
        assert "span" not in text
        assert repr(parse_one("MULTIPOINT Z EMPTY")) == "MultiPoint(XYZ, EMPTY)"

    def test_children(self):
        assert parse_one("POINT (1 2)").children == ()
        multi = parse_one("MULTIPOINT (1 2, 3 4)")
        assert multi.children == multi.points
        assert multi.is_collection
        assert not multi.points[0].is_collection

    def test_polygon_rings(self):
        polygon = parse_one("POLYGON ((0 0, 4 0, 4 4, 0 0), (1 1, 2 1, 2 2, 1 1))")
        assert polygon.exterior[0] == (0.0, 0.0)
        assert len(polygon.interiors) == 1

    def test_empty_polygon_rings(self):
        polygon = parse_one("POLYGON EMPTY")
        assert polygon.exterior == ()
        assert polygon.interiors == ()


class TestTraversal:
    """Test walk and descendants."""

    SOURCE = ("GEOMETRYCOLLECTION (POINT (1 2),"
              " GEOMETRYCOLLECTION (LINESTRING (0 0, 1 1), POINT (3 4)),"
              " MULTIPOINT (5 6, 7 8))")

    def test_walk_preorder(self):
        root = parse_one(self.SOURCE)
        walked = [(depth, node.kind) for depth, node in root.walk()]
        assert walked == [
            (0, GeometryKind.GEOMETRY_COLLECTION),
            (1, GeometryKind.POINT),
            (1, GeometryKind.GEOMETRY_COLLECTION),
            (2, GeometryKind.LINE_STRING),
            (2, GeometryKind.POINT),
            (1, GeometryKind.MULTI_POINT),
            (2, GeometryKind.POINT),
            (2, GeometryKind.POINT),
        ]

    def test_descendants_by_kind(self):
        root = parse_one(self.SOURCE)
        points = root.descendants(GeometryKind.POINT)
        assert [p.coordinate for p in points] == [
            (1.0, 2.0), (3.0, 4.0), (5.0, 6.0), (7.0, 8.0)]

    def test_descendants_exclude_self(self):
        root = parse_one(self.SOURCE)
        assert len(root.descendants(GeometryKind.GEOMETRY_COLLECTION)) == 1
        assert len(root.descendants()) == 7

    def test_descendants_restartable(self):
        root = parse_one(self.SOURCE)
        view = root.descendants(GeometryKind.LINE_STRING)
        assert list(view) == list(view)
        assert len(list(view)) == 1

    def test_descendants_lazy(self):
        root = parse_one(self.SOURCE)
        iterator = iter(root.descendants())
        assert next(iterator).kind is GeometryKind.POINT

    def test_leaves(self):
        root = parse_one(self.SOURCE)
        assert [leaf.kind for leaf in root.leaves()] == [
            GeometryKind.POINT, GeometryKind.LINE_STRING, GeometryKind.POINT,
            GeometryKind.POINT, GeometryKind.POINT]


class TestShapeCount:
    """Test shape_count."""

    @pytest.mark.parametrize("source,expected", [
        ("POINT (1 2)", 1),
        ("POINT EMPTY", 0),
        ("LINESTRING (0 0, 1 1)", 1),
        ("POLYGON ((0 0, 1 0, 1 1, 0 0))", 1),
        ("MULTIPOINT (EMPTY, 1 2, 3 4)", 2),
        ("MULTILINESTRING EMPTY", 0),
        ("GEOMETRYCOLLECTION (POINT (1 2), GEOMETRYCOLLECTION EMPTY,"
         " MULTIPOLYGON (((0 0, 1 0, 1 1, 0 0)), EMPTY))", 2),
    ])
    def test_shape_count(self, source, expected):
        assert parse_one(source).shape_count() == expected


class TestVisitor:
    """Test the visitor contract."""

    def test_incomplete_visitor_rejected(self):
        class PointsOnly(GeometryVisitor):
            def visit_Point(self, node):
                return "point"

        with pytest.raises(TypeError):
            PointsOnly()

    def test_dispatch(self):
        class KindNames(GeometryVisitor):
            def visit_Point(self, node): return "Point"
            def visit_LineString(self, node): return "LineString"
            def visit_Polygon(self, node): return "Polygon"
            def visit_MultiPoint(self, node): return "MultiPoint"
            def visit_MultiLineString(self, node): return "MultiLineString"
            def visit_MultiPolygon(self, node): return "MultiPolygon"
            def visit_GeometryCollection(self, node): return "GeometryCollection"

        visitor = KindNames()
        for source in ("POINT EMPTY", "LINESTRING EMPTY", "POLYGON EMPTY",
                       "MULTIPOINT EMPTY", "MULTILINESTRING EMPTY",
                       "MULTIPOLYGON EMPTY", "GEOMETRYCOLLECTION EMPTY"):
            node = parse_one(source)
            assert node.accept(visitor) == type(node).__name__


class TestFormat:
    """Test the outline formatter."""

    def test_format_geometry(self):
        root = parse_one("GEOMETRYCOLLECTION Z (POINT (1 2 3), LINESTRING EMPTY)")
        assert format_geometry(root).splitlines() == [
            "GEOMETRYCOLLECTION Z [2 members]",
            "  POINT Z (1.0, 2.0, 3.0)",
            "  LINESTRING Z EMPTY",
        ]

    def test_hand_built_nodes(self):
        line = LineString(coordinates=((0.0, 0.0), (1.0, 1.0)))
        collection = GeometryCollection(geometries=(line,))
        assert "[2 points]" in format_geometry(collection)
        assert isinstance(Polygon().rings, tuple)
