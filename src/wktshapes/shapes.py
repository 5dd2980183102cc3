"""Renderer-ready shape primitives produced by the materializer.

Positions are float64 arrays of shape ``(n, component_count)``; z and m
columns are kept whenever the source geometry has them, and a renderer
that only draws in 2D slices ``[:, :2]``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .geometry import Coordinate, Dimensionality, GeometryKind
from .triangulator import Point2D, triangulate_polygon


@dataclass
class ShapeAttributes:
    """Pen settings handed to a rendering layer.

    The parsing core never reads these; they travel with a shape so that the
    host renderer can style it.
    """

    point_style: str = "xo"
    point_size: float = 0.1
    line_width: float = 0.1
    line_color: Optional[str] = None
    fill_color: Optional[str] = None
    draw_outline: bool = True
    draw_interior: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShapeAttributes":
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"unknown shape attribute(s): {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.__dataclass_fields__}


def _positions(coords: Sequence[Coordinate], dimensionality: Dimensionality) -> np.ndarray:
    arr = np.asarray(coords, dtype=np.float64)
    return arr.reshape(len(coords), dimensionality.component_count)


@dataclass(eq=False)
class Shape(ABC):
    """Common fields of every primitive.

    ``source_kind`` is the kind of the single geometry the shape was made
    from.  The last four fields are defaults a loader may overwrite.
    """

    dimensionality: Dimensionality = Dimensionality.XY
    source_kind: Optional[GeometryKind] = None
    attributes: Optional[ShapeAttributes] = None
    highlight_attributes: Optional[ShapeAttributes] = None
    pick_delegate: Any = None
    user_properties: Dict[str, Any] = field(default_factory=dict)

    @property
    @abstractmethod
    def vertex_count(self) -> int:
        """Number of positions the shape holds, holes included."""

    def to_json(self) -> Dict[str, Any]:
        return {
            "type": self.__class__.__name__,
            "dimensionality": self.dimensionality.name,
            "source": self.source_kind.keyword if self.source_kind else None,
        }


@dataclass(eq=False)
class PointMarker(Shape):
    """A placemark drawn at a single position."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(2))

    @classmethod
    def from_coordinate(cls, coord: Coordinate, dimensionality: Dimensionality,
                        **kwargs) -> "PointMarker":
        return cls(dimensionality=dimensionality,
                   position=np.asarray(coord, dtype=np.float64),
                   **kwargs)

    @property
    def vertex_count(self) -> int:
        return 1

    def to_json(self) -> Dict[str, Any]:
        doc = super().to_json()
        doc["position"] = self.position.tolist()
        return doc


@dataclass(eq=False)
class Polyline(Shape):
    """An open path through ordered positions."""

    positions: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))

    @classmethod
    def from_coordinates(cls, coords: Sequence[Coordinate],
                         dimensionality: Dimensionality, **kwargs) -> "Polyline":
        return cls(dimensionality=dimensionality,
                   positions=_positions(coords, dimensionality),
                   **kwargs)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    def to_json(self) -> Dict[str, Any]:
        doc = super().to_json()
        doc["positions"] = self.positions.tolist()
        return doc


@dataclass(eq=False)
class FilledPolygon(Shape):
    """A filled area bounded by ``boundary`` with optional ``holes``.

    Rings keep their closing position, exactly as they appeared in the WKT.
    """

    boundary: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    holes: Tuple[np.ndarray, ...] = ()

    @classmethod
    def from_rings(cls, rings: Sequence[Sequence[Coordinate]],
                   dimensionality: Dimensionality, **kwargs) -> "FilledPolygon":
        return cls(dimensionality=dimensionality,
                   boundary=_positions(rings[0], dimensionality),
                   holes=tuple(_positions(ring, dimensionality) for ring in rings[1:]),
                   **kwargs)

    @property
    def vertex_count(self) -> int:
        return len(self.boundary) + sum(len(hole) for hole in self.holes)

    def triangulate(self) -> List[List[Point2D]]:
        """Return XY triangles covering the boundary minus the holes."""
        return triangulate_polygon(self.boundary[:, :2],
                                   [hole[:, :2] for hole in self.holes])

    def to_json(self) -> Dict[str, Any]:
        doc = super().to_json()
        doc["boundary"] = self.boundary.tolist()
        doc["holes"] = [hole.tolist() for hole in self.holes]
        return doc
