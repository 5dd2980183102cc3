"""
Geometry Object Model (GOM) produced by the WKT parser.

The model is a closed set of immutable node types, one per WKT geometry
kind.  Aggregates own their members by value; there are no back
references, so every parsed tree is a plain tree.

Traversal is iterative (``walk``/``descendants``) because geometry
collections may nest far deeper than Python's recursion limit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from itertools import zip_longest
from typing import Any, ClassVar, Iterator, Optional, Tuple

from .tokens import SourceSpan

Coordinate = Tuple[float, ...]


class Dimensionality(Enum):
    """Coordinate layout, keyed by the WKT suffix that selects it."""

    XY = ""
    XYZ = "Z"
    XYM = "M"
    XYZM = "ZM"

    @property
    def suffix(self) -> str:
        return self.value

    @property
    def has_z(self) -> bool:
        return "Z" in self.value

    @property
    def has_m(self) -> bool:
        return "M" in self.value

    @property
    def component_count(self) -> int:
        return 2 + self.has_z + self.has_m

    @property
    def axes(self) -> Tuple[str, ...]:
        """Component names in coordinate order, e.g. ``('x', 'y', 'm')``."""
        return ("x", "y") + (("z",) if self.has_z else ()) + (("m",) if self.has_m else ())

    @classmethod
    def from_suffix(cls, suffix: str) -> "Dimensionality":
        """Map ``''``, ``'Z'``, ``'M'`` or ``'ZM'`` (any case) to a member."""
        return cls(suffix.upper())

    def __str__(self) -> str:
        return self.name


class GeometryKind(Enum):
    """Supported geometry types, valued by their WKT keyword."""

    POINT = "POINT"
    LINE_STRING = "LINESTRING"
    POLYGON = "POLYGON"
    MULTI_POINT = "MULTIPOINT"
    MULTI_LINE_STRING = "MULTILINESTRING"
    MULTI_POLYGON = "MULTIPOLYGON"
    GEOMETRY_COLLECTION = "GEOMETRYCOLLECTION"

    @property
    def keyword(self) -> str:
        return self.value

    @classmethod
    def from_keyword(cls, word: str) -> Optional["GeometryKind"]:
        """Case-insensitive keyword lookup; ``None`` when unknown."""
        return _KEYWORDS.get(word.upper())


_KEYWORDS = {kind.value: kind for kind in GeometryKind}


# =============================================================================
# Base Class
# =============================================================================

@dataclass(frozen=True, eq=False, repr=False)
class Geometry(ABC):
    """Base class for all geometry nodes.

    ``is_empty`` records the explicit ``EMPTY`` token.  An empty node still
    has a kind and a dimensionality.  ``span`` locates the node in the
    source text and is ignored by equality, so ``POINT Z (1 2 3)`` and
    ``POINTZ(1 2 3)`` compare equal.

    Equality, hashing and the aggregate ``repr`` run over ``walk()``
    instead of the generated recursive dataclass methods.
    """

    kind: ClassVar[GeometryKind]

    dimensionality: Dimensionality = Dimensionality.XY
    is_empty: bool = False
    span: Optional[SourceSpan] = field(default=None, repr=False)

    @property
    def _payload(self) -> Any:
        """Coordinates held directly by this node; members are compared by walk."""
        return None

    def _node_keys(self) -> Iterator[Tuple[Any, ...]]:
        for depth, node in self.walk():
            yield (depth, type(node), node.dimensionality, node.is_empty,
                   node._payload, len(node.children))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Geometry):
            return NotImplemented
        if self is other:
            return True
        missing = object()
        for mine, theirs in zip_longest(self._node_keys(), other._node_keys(),
                                        fillvalue=missing):
            if mine != theirs:
                return False
        return True

    def __hash__(self) -> int:
        return hash(tuple(self._node_keys()))

    def __repr__(self) -> str:
        if self.is_empty:
            detail = "EMPTY"
        else:
            detail = f"{len(self.children)} members"
        return f"{self.__class__.__name__}({self.dimensionality.name}, {detail})"

    @property
    def children(self) -> Tuple["Geometry", ...]:
        """Member geometries of an aggregate; empty for single geometries."""
        return ()

    @property
    def is_collection(self) -> bool:
        return False

    def accept(self, visitor: "GeometryVisitor") -> Any:
        """Accept a visitor for traversal."""
        method = getattr(visitor, f"visit_{self.__class__.__name__}")
        return method(self)

    def walk(self) -> Iterator[Tuple[int, "Geometry"]]:
        """Yield ``(depth, node)`` pairs depth-first, pre-order, self first."""
        stack = [(0, self)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            children = node.children
            for child in reversed(children):
                stack.append((depth + 1, child))

    def descendants(self, kind: Optional[GeometryKind] = None) -> "Descendants":
        """Lazy, restartable view over the nodes below this one."""
        return Descendants(self, kind)

    def leaves(self) -> Iterator["Geometry"]:
        """Single (non-aggregate) geometries in document order."""
        for _, node in self.walk():
            if not node.is_collection:
                yield node

    def shape_count(self) -> int:
        """Number of shape primitives this node materializes into."""
        return sum(1 for leaf in self.leaves() if not leaf.is_empty)

    def materialize_shapes(self) -> list:
        """Shape primitives for this geometry, see ``materializer.materialize``."""
        from .materializer import materialize  # materializer imports this module
        return materialize(self)


class Descendants:
    """Iterable over the descendants of a geometry, optionally by kind.

    Each call to ``iter()`` starts a fresh traversal, so the view can be
    consumed any number of times.
    """

    def __init__(self, root: Geometry, kind: Optional[GeometryKind] = None):
        self.root = root
        self.kind = kind

    def __iter__(self) -> Iterator[Geometry]:
        walker = self.root.walk()
        next(walker)  # the root itself
        for _, node in walker:
            if self.kind is None or node.kind is self.kind:
                yield node

    def __len__(self) -> int:
        return sum(1 for _ in self)


# =============================================================================
# Single Geometries
# =============================================================================

@dataclass(frozen=True, eq=False)
class Point(Geometry):
    kind: ClassVar[GeometryKind] = GeometryKind.POINT

    coordinate: Optional[Coordinate] = None

    @property
    def _payload(self) -> Any:
        return self.coordinate


@dataclass(frozen=True, eq=False)
class LineString(Geometry):
    kind: ClassVar[GeometryKind] = GeometryKind.LINE_STRING

    coordinates: Tuple[Coordinate, ...] = ()

    @property
    def _payload(self) -> Any:
        return self.coordinates


@dataclass(frozen=True, eq=False)
class Polygon(Geometry):
    """Polygon with an exterior ring followed by zero or more holes."""
    kind: ClassVar[GeometryKind] = GeometryKind.POLYGON

    rings: Tuple[Tuple[Coordinate, ...], ...] = ()

    @property
    def _payload(self) -> Any:
        return self.rings

    @property
    def exterior(self) -> Tuple[Coordinate, ...]:
        return self.rings[0] if self.rings else ()

    @property
    def interiors(self) -> Tuple[Tuple[Coordinate, ...], ...]:
        return self.rings[1:]


# =============================================================================
# Aggregates
# =============================================================================

@dataclass(frozen=True, eq=False, repr=False)
class MultiPoint(Geometry):
    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_POINT

    points: Tuple[Point, ...] = ()

    @property
    def children(self) -> Tuple[Point, ...]:
        return self.points

    @property
    def is_collection(self) -> bool:
        return True


@dataclass(frozen=True, eq=False, repr=False)
class MultiLineString(Geometry):
    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_LINE_STRING

    line_strings: Tuple[LineString, ...] = ()

    @property
    def children(self) -> Tuple[LineString, ...]:
        return self.line_strings

    @property
    def is_collection(self) -> bool:
        return True


@dataclass(frozen=True, eq=False, repr=False)
class MultiPolygon(Geometry):
    kind: ClassVar[GeometryKind] = GeometryKind.MULTI_POLYGON

    polygons: Tuple[Polygon, ...] = ()

    @property
    def children(self) -> Tuple[Polygon, ...]:
        return self.polygons

    @property
    def is_collection(self) -> bool:
        return True


@dataclass(frozen=True, eq=False, repr=False)
class GeometryCollection(Geometry):
    """Ordered geometries of any kind, including nested collections."""
    kind: ClassVar[GeometryKind] = GeometryKind.GEOMETRY_COLLECTION

    geometries: Tuple[Geometry, ...] = ()

    @property
    def children(self) -> Tuple[Geometry, ...]:
        return self.geometries

    @property
    def is_collection(self) -> bool:
        return True


# =============================================================================
# Visitor
# =============================================================================

class GeometryVisitor(ABC):
    """Base class for geometry visitors.

    Every geometry kind has an abstract method, so a visitor that forgets
    one cannot be instantiated.
    """

    @abstractmethod
    def visit_Point(self, node: Point) -> Any: ...

    @abstractmethod
    def visit_LineString(self, node: LineString) -> Any: ...

    @abstractmethod
    def visit_Polygon(self, node: Polygon) -> Any: ...

    @abstractmethod
    def visit_MultiPoint(self, node: MultiPoint) -> Any: ...

    @abstractmethod
    def visit_MultiLineString(self, node: MultiLineString) -> Any: ...

    @abstractmethod
    def visit_MultiPolygon(self, node: MultiPolygon) -> Any: ...

    @abstractmethod
    def visit_GeometryCollection(self, node: GeometryCollection) -> Any: ...


GEOMETRY_TYPES = {
    cls.kind: cls
    for cls in (Point, LineString, Polygon, MultiPoint, MultiLineString,
                MultiPolygon, GeometryCollection)
}


def format_geometry(node: Geometry, indent: str = "  ") -> str:
    """Render a one-line-per-node outline of a geometry tree."""
    lines = []
    for depth, item in node.walk():
        label = item.kind.keyword
        if item.dimensionality is not Dimensionality.XY:
            label += f" {item.dimensionality.suffix}"
        if item.is_empty:
            label += " EMPTY"
        elif isinstance(item, LineString):
            label += f" [{len(item.coordinates)} points]"
        elif isinstance(item, Polygon):
            label += f" [{len(item.rings)} rings]"
        elif isinstance(item, Point):
            label += f" {item.coordinate}"
        elif item.is_collection:
            label += f" [{len(item.children)} members]"
        lines.append(f"{indent * depth}{label}")
    return "\n".join(lines)
