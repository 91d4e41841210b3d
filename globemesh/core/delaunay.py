"""Incremental Bowyer-Watson Delaunay triangulation in the plane.

The triangulator owns a point arena: the caller's points (indices 0..N-1)
followed by the three super-triangle corners appended at construction.
Triangles are stored as rows of a growable (M, 3) index array with a cached
circumcircle (cx, cy, r2) per row; removed rows are tombstoned with -1 and
compacted in place once dead rows outnumber half the live ones.

Lifecycle: CONSTRUCTED -> INSERTING -> FINALIZED. ``finalize()`` removes every
triangle touching a super-triangle corner and discards the corners; no
insertion is accepted afterwards.

The super triangle is finite (``SUPER_TRIANGLE_SCALE`` times the larger
bounding-box side). A sliver on the convex hull whose circumcircle reaches a
corner is never created, so after ``finalize()`` the triangles can cover
slightly less than the convex hull of the input. Interior coverage has no
gaps or overlaps.
"""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional, Tuple

import numpy as np

from .constants import EPS_CIRCUMCIRCLE, EPS_DEGENERATE, SUPER_TRIANGLE_SCALE
from .errors import TriangulationStateError
from .logging_utils import get_logger

logger = get_logger('globemesh.delaunay')

__all__ = [
    'Circumcircle', 'Triangle', 'PointArena', 'TriangulatorState',
    'DelaunayTriangulator', 'circumcircle', 'triangulate_points',
]


class Circumcircle(NamedTuple):
    x: float
    y: float
    r2: float

    @property
    def is_degenerate(self) -> bool:
        return not math.isfinite(self.r2)

    def contains(self, x: float, y: float, eps: float = EPS_CIRCUMCIRCLE) -> bool:
        """Closed containment with ``eps`` slack; degenerate circles contain nothing."""
        if self.is_degenerate:
            return False
        return (self.x - x) ** 2 + (self.y - y) ** 2 <= self.r2 + eps


_INFINITE_CIRCLE = Circumcircle(math.inf, math.inf, math.inf)


def circumcircle(ax: float, ay: float, bx: float, by: float, cx: float, cy: float) -> Circumcircle:
    """Circle through three points; collinear triples give an infinite placeholder."""
    d = 2.0 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    if abs(d) < EPS_DEGENERATE:
        return _INFINITE_CIRCLE
    a2 = ax * ax + ay * ay
    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    ux = (a2 * (by - cy) + b2 * (cy - ay) + c2 * (ay - by)) / d
    uy = (a2 * (cx - bx) + b2 * (ax - cx) + c2 * (bx - ax)) / d
    return Circumcircle(ux, uy, (ux - ax) ** 2 + (uy - ay) ** 2)


@dataclass
class Triangle:
    """Three arena indices plus the cached circumcircle."""
    a: int
    b: int
    c: int
    circum: Optional[Circumcircle] = None

    @property
    def vertices(self) -> Tuple[int, int, int]:
        return (self.a, self.b, self.c)

    def key(self) -> Tuple[int, int, int]:
        return tuple(sorted(self.vertices))  # type: ignore[return-value]


class PointArena:
    """Growable indexed point store scoped to one triangulator.

    Handles returned by ``add`` are stable and never reused; the arena is
    dropped wholesale with its triangulator.
    """

    def __init__(self, points=None, capacity: int = 16):
        pts = np.empty((0, 2), dtype=np.float64) if points is None else np.asarray(points, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] < 2:
            raise ValueError(f"points must be (N, 2), got shape {pts.shape}")
        n = pts.shape[0]
        self._xy = np.empty((max(capacity, n + 3), 2), dtype=np.float64)
        self._xy[:n] = pts[:, :2]
        self._n = n

    def __len__(self) -> int:
        return self._n

    def add(self, x: float, y: float) -> int:
        if self._n == self._xy.shape[0]:
            grown = np.empty((2 * self._xy.shape[0], 2), dtype=np.float64)
            grown[:self._n] = self._xy[:self._n]
            self._xy = grown
        idx = self._n
        self._xy[idx] = (x, y)
        self._n += 1
        return idx

    def truncate(self, n: int) -> None:
        self._n = min(self._n, n)

    def __getitem__(self, idx: int) -> Tuple[float, float]:
        if idx < 0 or idx >= self._n:
            raise IndexError(idx)
        return float(self._xy[idx, 0]), float(self._xy[idx, 1])

    @property
    def array(self) -> np.ndarray:
        return self._xy[:self._n]


class TriangulatorState(enum.Enum):
    CONSTRUCTED = 'constructed'
    INSERTING = 'inserting'
    FINALIZED = 'finalized'


class DelaunayTriangulator:
    """Bowyer-Watson triangulator over a fixed planar point set.

    Parameters
    ----------
    points : (N, 2) array-like
        Real input points; their indices are preserved in the output.
    """

    def __init__(self, points):
        self.arena = PointArena(points)
        self.n_input = len(self.arena)
        if self.n_input < 3:
            raise ValueError(f"triangulation needs at least 3 points, got {self.n_input}")
        self.state = TriangulatorState.CONSTRUCTED
        self._tris = np.full((64, 3), -1, dtype=np.int64)
        self._circ = np.full((64, 3), np.nan, dtype=np.float64)
        self._alive = np.zeros((64,), dtype=bool)
        self._m = 0
        self._live = 0
        self.super_indices = self._init_super_triangle()

    # ------------------------------------------------------------------ setup
    def _init_super_triangle(self) -> Tuple[int, int, int]:
        pts = self.arena.array
        min_x, min_y = pts.min(axis=0)
        max_x, max_y = pts.max(axis=0)
        d = max(max_x - min_x, max_y - min_y)
        if not d > 0.0:
            d = 1.0  # all points coincide
        cx = (min_x + max_x) / 2.0
        cy = (min_y + max_y) / 2.0
        k = SUPER_TRIANGLE_SCALE
        i1 = self.arena.add(cx - k * d, cy - d)
        i2 = self.arena.add(cx, cy + k * d)
        i3 = self.arena.add(cx + k * d, cy - d)
        self._add_triangle(i1, i2, i3)
        return (i1, i2, i3)

    def _grow(self) -> None:
        cap = 2 * self._tris.shape[0]
        tris = np.full((cap, 3), -1, dtype=np.int64); tris[:self._m] = self._tris[:self._m]
        circ = np.full((cap, 3), np.nan, dtype=np.float64); circ[:self._m] = self._circ[:self._m]
        alive = np.zeros((cap,), dtype=bool); alive[:self._m] = self._alive[:self._m]
        self._tris, self._circ, self._alive = tris, circ, alive

    def _compute_circum(self, a: int, b: int, c: int) -> Circumcircle:
        ax, ay = self.arena[a]; bx, by = self.arena[b]; cx, cy = self.arena[c]
        return circumcircle(ax, ay, bx, by, cx, cy)

    def _add_triangle(self, a: int, b: int, c: int) -> int:
        if self._m == self._tris.shape[0]:
            self._grow()
        row = self._m
        self._tris[row] = (a, b, c)
        self._circ[row] = self._compute_circum(a, b, c)
        self._alive[row] = True
        self._m += 1
        self._live += 1
        return row

    def _compact(self) -> None:
        """Move live rows to the front, keeping their relative order."""
        rows = np.nonzero(self._alive[:self._m])[0]
        n = rows.shape[0]
        self._tris[:n] = self._tris[rows]
        self._circ[:n] = self._circ[rows]
        self._alive[:n] = True
        self._tris[n:self._m] = -1
        self._circ[n:self._m] = np.nan
        self._alive[n:self._m] = False
        self._m = n

    def _refresh_stale_circles(self, rows: np.ndarray) -> None:
        stale = rows[np.isnan(self._circ[rows, 2])]
        for r in stale:
            a, b, c = (int(v) for v in self._tris[r])
            self._circ[r] = self._compute_circum(a, b, c)

    # -------------------------------------------------------------- insertion
    def insert_point(self, idx: int) -> int:
        """Insert real point ``idx``; returns the number of triangles created."""
        if self.state is TriangulatorState.FINALIZED:
            raise TriangulationStateError("insert_point called after finalize()")
        if idx < 0 or idx >= self.n_input:
            raise IndexError(f"point index {idx} out of range [0, {self.n_input})")
        self.state = TriangulatorState.INSERTING
        px, py = self.arena[idx]

        rows = np.nonzero(self._alive[:self._m])[0]
        self._refresh_stale_circles(rows)
        circ = self._circ[rows]
        finite = np.isfinite(circ[:, 2])
        with np.errstate(invalid='ignore'):
            d2 = (circ[:, 0] - px) ** 2 + (circ[:, 1] - py) ** 2
            inside = finite & (d2 <= circ[:, 2] + EPS_CIRCUMCIRCLE)
        bad = rows[inside]

        # edges seen once form the cavity boundary; shared ones are interior
        edge_count: Dict[Tuple[int, int], int] = {}
        for r in bad:
            a, b, c = (int(v) for v in self._tris[r])
            for u, v in ((a, b), (b, c), (c, a)):
                key = (u, v) if u < v else (v, u)
                edge_count[key] = edge_count.get(key, 0) + 1

        self._alive[bad] = False
        self._tris[bad] = -1
        self._live -= int(bad.shape[0])

        created = 0
        for (a, b), count in edge_count.items():
            if count == 1:
                self._add_triangle(a, b, idx)
                created += 1
        if self._m - self._live > self._live // 2:
            self._compact()
        return created

    def insert_all(self) -> 'DelaunayTriangulator':
        """Insert every real point in index order."""
        for i in range(self.n_input):
            self.insert_point(i)
        return self

    def finalize(self) -> 'DelaunayTriangulator':
        """Drop triangles touching a super-triangle corner and the corners themselves."""
        if self.state is TriangulatorState.FINALIZED:
            return self
        rows = np.nonzero(self._alive[:self._m])[0]
        tris = self._tris[rows]
        touches_super = np.any(tris >= self.n_input, axis=1)
        keep = rows[~touches_super]
        self._tris = self._tris[keep].copy()
        self._circ = self._circ[keep].copy()
        self._alive = np.ones((keep.shape[0],), dtype=bool)
        self._m = keep.shape[0]
        self._live = self._m
        if self._m:
            self._refresh_stale_circles(np.arange(self._m))
        self.arena.truncate(self.n_input)
        self.state = TriangulatorState.FINALIZED
        logger.debug('finalized triangulation: %d points -> %d triangles', self.n_input, self._m)
        return self

    # ---------------------------------------------------------------- results
    @property
    def points(self) -> np.ndarray:
        """Real input points (super-triangle corners excluded)."""
        return self.arena.array[:self.n_input]

    @property
    def simplices(self) -> np.ndarray:
        """(M, 3) int array of live triangles."""
        rows = np.nonzero(self._alive[:self._m])[0]
        return self._tris[rows].astype(np.int64)

    @property
    def circumcircles(self) -> np.ndarray:
        """(M, 3) float array of (cx, cy, r2), aligned with ``simplices``."""
        rows = np.nonzero(self._alive[:self._m])[0]
        return self._circ[rows].copy()

    @property
    def triangles(self) -> List[Triangle]:
        rows = np.nonzero(self._alive[:self._m])[0]
        out = []
        for r in rows:
            a, b, c = (int(v) for v in self._tris[r])
            cx, cy, r2 = (float(v) for v in self._circ[r])
            out.append(Triangle(a, b, c, Circumcircle(cx, cy, r2)))
        return out

    def __len__(self) -> int:
        return self._live


def triangulate_points(points) -> np.ndarray:
    """Delaunay triangulation of an (N, 2) point set as an (M, 3) index array."""
    tri = DelaunayTriangulator(points)
    tri.insert_all()
    tri.finalize()
    return tri.simplices
