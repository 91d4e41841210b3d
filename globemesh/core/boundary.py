"""Skin-triangle classification strategies.

A Delaunay triangulation of a sampled ring covers the convex hull of the
samples, so concave rings pick up "skin" triangles stretched between
boundary vertices. Classifiers decide which triangles to drop before a
renderer builds its mesh. Two policies exist and are caller-selectable.
"""
from __future__ import annotations

from typing import Dict, Sequence, Tuple, Type

import numpy as np

from .geometry import point_in_polygon, ring_to_array, points_in_polygon
from .points import GeoPoint

__all__ = [
    'SkinClassifier',
    'StrictSkinClassifier',
    'SequentialSkinClassifier',
    'all_edges_are_boundary',
    'are_sequential',
    'is_boundary_sequence_triangle',
    'get_classifier',
    'filter_skin_triangles',
]


def all_edges_are_boundary(pa: GeoPoint, pb: GeoPoint, pc: GeoPoint) -> bool:
    """True if all three vertices are original ring vertices."""
    return pa.boundary and pb.boundary and pc.boundary


def are_sequential(pa: GeoPoint, pb: GeoPoint, polygon) -> bool:
    """True if a-b is a true ring edge.

    Both must be original vertices with consecutive ``boundary_index`` and
    must not both test as strictly inside the ring.
    """
    if not (pa.boundary and pb.boundary):
        return False
    if abs(pa.boundary_index - pb.boundary_index) != 1:
        return False
    both_inside = point_in_polygon(pa, polygon) and point_in_polygon(pb, polygon)
    return not both_inside


def is_boundary_sequence_triangle(pa: GeoPoint, pb: GeoPoint, pc: GeoPoint, polygon) -> bool:
    """True if at least one vertex pair of the triangle is a sequential ring edge."""
    return (are_sequential(pa, pb, polygon)
            or are_sequential(pb, pc, polygon)
            or are_sequential(pc, pa, polygon))


class SkinClassifier:
    """Base class for skin-triangle policies.

    Subclasses implement ``is_skin``; ``classify`` is the batch entry point
    and may be overridden with a vectorized version.
    """
    name = 'base'

    def is_skin(self, pa: GeoPoint, pb: GeoPoint, pc: GeoPoint, polygon) -> bool:
        raise NotImplementedError("Subclasses must implement is_skin")

    def classify(self, points: Sequence[GeoPoint], triangles, polygon) -> np.ndarray:
        """Return a boolean mask of shape (M,), True where the triangle is skin."""
        tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
        mask = np.zeros((tris.shape[0],), dtype=bool)
        for k, (a, b, c) in enumerate(tris):
            mask[k] = self.is_skin(points[int(a)], points[int(b)], points[int(c)], polygon)
        return mask


class StrictSkinClassifier(SkinClassifier):
    """Drop a triangle only when all three vertices are original ring vertices."""
    name = 'strict'

    def is_skin(self, pa, pb, pc, polygon) -> bool:
        return all_edges_are_boundary(pa, pb, pc)


class SequentialSkinClassifier(SkinClassifier):
    """Drop a triangle when any of its vertex pairs is a sequential ring edge.

    The per-pair containment tests dominate the cost, so ``classify``
    evaluates ``point_in_polygon`` once per distinct vertex.
    """
    name = 'sequential'

    def is_skin(self, pa, pb, pc, polygon) -> bool:
        return is_boundary_sequence_triangle(pa, pb, pc, polygon)

    def classify(self, points, triangles, polygon) -> np.ndarray:
        tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
        if tris.shape[0] == 0:
            return np.zeros((0,), dtype=bool)
        is_orig = np.array([p.boundary for p in points], dtype=bool)
        bidx = np.array([p.boundary_index if p.boundary else -1 for p in points], dtype=np.int64)
        xy = np.array([p.xy for p in points], dtype=np.float64)
        inside = np.zeros((len(points),), dtype=bool)
        used = np.unique(tris[is_orig[tris].any(axis=1)])
        used = used[is_orig[used]]
        if used.size:
            inside[used] = points_in_polygon(xy[used], ring_to_array(polygon))

        def pair(u, v):
            return (is_orig[u] & is_orig[v]
                    & (np.abs(bidx[u] - bidx[v]) == 1)
                    & ~(inside[u] & inside[v]))

        a, b, c = tris[:, 0], tris[:, 1], tris[:, 2]
        return pair(a, b) | pair(b, c) | pair(c, a)


_CLASSIFIERS: Dict[str, Type[SkinClassifier]] = {
    StrictSkinClassifier.name: StrictSkinClassifier,
    SequentialSkinClassifier.name: SequentialSkinClassifier,
}


def get_classifier(policy) -> SkinClassifier:
    """Resolve a classifier instance from a policy name or pass one through."""
    if isinstance(policy, SkinClassifier):
        return policy
    try:
        return _CLASSIFIERS[str(policy).lower()]()
    except KeyError:
        raise ValueError(f"unknown skin classifier {policy!r}; expected one of {sorted(_CLASSIFIERS)}") from None


def filter_skin_triangles(points, triangles, polygon, classifier='sequential') -> Tuple[np.ndarray, np.ndarray]:
    """Split triangles into (kept, dropped) (K, 3) arrays under ``classifier``."""
    tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    mask = get_classifier(classifier).classify(points, tris, polygon)
    return tris[~mask], tris[mask]
