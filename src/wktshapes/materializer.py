"""Turn geometry nodes into renderer-ready shape primitives.

Point -> PointMarker, LineString -> Polyline, Polygon -> FilledPolygon;
aggregates and collections yield the shapes of their members in order.
Empty geometries yield nothing.
"""

from typing import List

from .errors import error_invalid_geometry
from .geometry import (
    Geometry, GeometryVisitor,
    Point, LineString, Polygon,
    MultiPoint, MultiLineString, MultiPolygon, GeometryCollection,
)
from .shapes import FilledPolygon, PointMarker, Polyline, Shape


class ShapeMaterializer(GeometryVisitor):
    """Visitor returning the list of shapes for a geometry.

    Nothing here mutates the geometry.  Aggregates are flattened through
    ``Geometry.leaves`` rather than by recursing into each member, so deeply
    nested collections do not exhaust the call stack.
    """

    def visit_Point(self, node: Point) -> List[Shape]:
        if node.is_empty:
            return []
        if node.coordinate is None or len(node.coordinate) != node.dimensionality.component_count:
            raise error_invalid_geometry(
                f"point coordinate {node.coordinate!r} does not match {node.dimensionality}")
        return [PointMarker.from_coordinate(node.coordinate, node.dimensionality,
                                            source_kind=node.kind)]

    def visit_LineString(self, node: LineString) -> List[Shape]:
        if node.is_empty:
            return []
        if len(node.coordinates) < 2:
            raise error_invalid_geometry(
                f"line string with {len(node.coordinates)} point(s)")
        return [Polyline.from_coordinates(node.coordinates, node.dimensionality,
                                          source_kind=node.kind)]

    def visit_Polygon(self, node: Polygon) -> List[Shape]:
        if node.is_empty:
            return []
        if not node.rings:
            raise error_invalid_geometry("polygon without rings")
        for index, ring in enumerate(node.rings):
            if len(ring) < 4:
                raise error_invalid_geometry(
                    f"polygon ring {index} has {len(ring)} point(s), at least 4 required")
        return [FilledPolygon.from_rings(node.rings, node.dimensionality,
                                         source_kind=node.kind)]

    def _flatten(self, node: Geometry) -> List[Shape]:
        shapes: List[Shape] = []
        for leaf in node.leaves():
            shapes.extend(leaf.accept(self))
        return shapes

    def visit_MultiPoint(self, node: MultiPoint) -> List[Shape]:
        return self._flatten(node)

    def visit_MultiLineString(self, node: MultiLineString) -> List[Shape]:
        return self._flatten(node)

    def visit_MultiPolygon(self, node: MultiPolygon) -> List[Shape]:
        return self._flatten(node)

    def visit_GeometryCollection(self, node: GeometryCollection) -> List[Shape]:
        return self._flatten(node)


def materialize(node: Geometry) -> List[Shape]:
    """Return the shapes for ``node`` in document order.

    Raises:
        MaterializationError: If the node breaks a model invariant, which
            only happens for geometries built by hand
    """
    return node.accept(ShapeMaterializer())
