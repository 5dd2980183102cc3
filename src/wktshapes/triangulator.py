"""Fill triangulation for polygon shapes.

We delegate to ``mapbox-earcut`` (the ear clipping implementation used by
Mapbox GL).  This module only normalises WKT rings into the flat vertex
buffer and ring-end index array earcut expects, then maps the returned
indices back to XY triangles.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import numpy as np

try:
    import mapbox_earcut as _earcut
except ImportError as exc:  # pragma: no cover - import guard
    raise ImportError(
        "mapbox-earcut must be installed to triangulate polygons with holes"
    ) from exc

epsilon = 1e-12

Point2D = Tuple[float, float]


def triangulate_polygon(boundary: Sequence[Sequence[float]],
                        holes: Iterable[Sequence[Sequence[float]]] | None = None
                        ) -> List[List[Point2D]]:
    """Return triangles covering ``boundary`` minus any ``holes``.

    Rings are sequences or arrays of points whose first two components are
    x and y; z and m are ignored.  A repeated closing point is dropped.
    Rings with fewer than three distinct points are skipped, and a
    degenerate boundary yields no triangles.
    """

    outer = _ring_xy(boundary, want_ccw=True)
    if len(outer) < 3:
        return []

    loops = [outer]
    for hole in holes or ():
        loop = _ring_xy(hole, want_ccw=False)
        if len(loop) >= 3:
            loops.append(loop)

    vertices = np.concatenate(loops)
    ring_ends = np.cumsum([len(loop) for loop in loops]).astype(np.uint32)
    indices = _earcut.triangulate_float64(vertices, ring_ends)

    corners = [(float(x), float(y)) for x, y in vertices]
    return [[corners[a], corners[b], corners[c]]
            for a, b, c in np.asarray(indices).reshape(-1, 3)]


def _ring_xy(points: Sequence[Sequence[float]], *, want_ccw: bool) -> np.ndarray:
    xy = np.asarray(points, dtype=np.float64)
    if xy.size == 0:
        return np.zeros((0, 2))
    xy = xy.reshape(len(xy), -1)[:, :2]
    # collapse consecutive duplicates, then the closing point
    keep = np.ones(len(xy), dtype=bool)
    keep[1:] = np.any(np.abs(np.diff(xy, axis=0)) > epsilon, axis=1)
    xy = xy[keep]
    if len(xy) > 1 and np.all(np.abs(xy[0] - xy[-1]) <= epsilon):
        xy = xy[:-1]
    if len(xy) < 3:
        return xy
    area = signed_area(xy)
    if (want_ccw and area < 0) or (not want_ccw and area > 0):
        xy = xy[::-1]
    return np.ascontiguousarray(xy)


def signed_area(xy: np.ndarray) -> float:
    """Shoelace area of an open XY loop; positive when counter-clockwise."""
    x, y = xy[:, 0], xy[:, 1]
    return float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)) / 2.0
