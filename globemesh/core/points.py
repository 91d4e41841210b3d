"""Point and sample-set data structures shared by the pipeline stages.

Canonical formats:
    polygon ring: sequence of GeoPoint (first/last implicitly connected)
    planar points: (N, 2) float64 array of (lon, lat)
    triangles: (M, 3) int array of indices into the planar points
"""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np


class PointKind(enum.Enum):
    ORIGINAL = 'original'   # vertex of the source ring
    OFFSET = 'offset'       # synthetic inward-offset point
    INTERIOR = 'interior'   # random interior sample


@dataclass(frozen=True)
class GeoPoint:
    lon: float
    lat: float
    kind: PointKind = PointKind.INTERIOR
    boundary_index: Optional[int] = None

    @classmethod
    def original(cls, lon: float, lat: float, index: int) -> 'GeoPoint':
        return cls(float(lon), float(lat), PointKind.ORIGINAL, int(index))

    @classmethod
    def offset_point(cls, lon: float, lat: float) -> 'GeoPoint':
        return cls(float(lon), float(lat), PointKind.OFFSET)

    @property
    def boundary(self) -> bool:
        return self.kind is PointKind.ORIGINAL

    @property
    def offset(self) -> bool:
        return self.kind is PointKind.OFFSET

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.lon, self.lat)


class CartesianPoint(NamedTuple):
    x: float
    y: float
    z: float


PointLike = Union[GeoPoint, Sequence[float]]


def as_geopoint(p: PointLike) -> GeoPoint:
    if isinstance(p, GeoPoint):
        return p
    return GeoPoint(float(p[0]), float(p[1]))


def as_ring(polygon: Iterable[PointLike]) -> List[GeoPoint]:
    """Normalise a polygon to a list of GeoPoint.

    Accepts GeoPoint instances or ``(lon, lat)`` pairs. A closing vertex that
    repeats the first one (GeoJSON convention) is dropped so the ring is
    implicitly closed.
    """
    ring = [as_geopoint(p) for p in polygon]
    if len(ring) > 1 and ring[0].xy == ring[-1].xy:
        ring = ring[:-1]
    return ring


@dataclass
class SampleSet:
    """Ordered samples of one polygon: originals, then offsets, then interior points.

    ``undersampled`` is set when the sampler gave up before reaching
    ``requested`` points.
    """
    points: List[GeoPoint] = field(default_factory=list)
    requested: int = 0
    undersampled: bool = False
    attempts: int = 0

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, idx):
        return self.points[idx]

    def to_xy(self) -> np.ndarray:
        if not self.points:
            return np.empty((0, 2), dtype=np.float64)
        return np.array([p.xy for p in self.points], dtype=np.float64)

    def boundary_mask(self) -> np.ndarray:
        return np.array([p.boundary for p in self.points], dtype=bool)

    def count(self, kind: PointKind) -> int:
        return sum(1 for p in self.points if p.kind is kind)


def is_finite_point(p: GeoPoint) -> bool:
    return math.isfinite(p.lon) and math.isfinite(p.lat)


__all__ = [
    'PointKind', 'GeoPoint', 'CartesianPoint', 'SampleSet',
    'as_geopoint', 'as_ring', 'is_finite_point',
]
