"""Interior point sampling for polygon rings.

The sample set seeds the triangulator: it keeps the original ring vertices
(so boundary adjacency can be checked later), an optional inward offset
ring, and uniformly rejection-sampled interior points.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from .config import SamplingConfig
from .constants import EARTH_RADIUS_M
from .errors import InvalidPolygonError
from .geometry import (
    bounding_box, offset_polygon, point_segments_distances, points_in_polygon, ring_to_array,
)
from .logging_utils import get_logger
from .points import GeoPoint, SampleSet, as_ring, is_finite_point
from .projection import geo_to_cartesian_array

logger = get_logger('globemesh.sampling')

_MIN_BATCH = 64
_MAX_BATCH = 4096

__all__ = ['sample_points_in_polygon', 'make_rng']


def make_rng(rng=None, seed: Optional[int] = None) -> np.random.Generator:
    """Return ``rng`` if given, else a fresh generator seeded with ``seed``."""
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


class _EdgeClearance:
    """Chord distance-to-edge filter with the ring projected once."""

    def __init__(self, ring_xy: np.ndarray, min_distance: float, radius: float = EARTH_RADIUS_M):
        self.min_distance = float(min_distance)
        self.radius = radius
        cart = geo_to_cartesian_array(ring_xy, radius=radius)
        self.a = cart
        self.b = np.roll(cart, -1, axis=0)

    def mask(self, xy: np.ndarray) -> np.ndarray:
        cand = geo_to_cartesian_array(xy, radius=self.radius)
        out = np.empty((cand.shape[0],), dtype=bool)
        for k in range(cand.shape[0]):
            out[k] = bool(np.all(point_segments_distances(cand[k], self.a, self.b) >= self.min_distance))
        return out


def sample_points_in_polygon(polygon, target_count: int, rng: Optional[np.random.Generator] = None,
                             config: Optional[SamplingConfig] = None) -> SampleSet:
    """Fill a ring with up to ``target_count`` points.

    Order of the returned points: original vertices (kind ORIGINAL, with
    ``boundary_index``), then offset-ring points (kind OFFSET), then random
    interior points. Rings larger than ``config.offset_vertex_threshold``
    sample inside the bounding box of their offset ring.

    The sampler draws at most ``config.max_attempts`` candidates; when that
    budget runs out the partial set is returned with ``undersampled=True``.

    Raises
    ------
    InvalidPolygonError
        If the ring has fewer than 3 vertices.
    """
    cfg = config or SamplingConfig()
    ring = as_ring(polygon)
    if len(ring) < 3:
        raise InvalidPolygonError(f"polygon needs at least 3 vertices, got {len(ring)}")
    gen = make_rng(rng, cfg.seed)
    ring_xy = ring_to_array(ring)

    samples = SampleSet(
        points=[GeoPoint.original(p.lon, p.lat, i) for i, p in enumerate(ring)],
        requested=int(target_count),
    )

    box_source = ring
    if len(ring) > cfg.offset_vertex_threshold:
        offset = [p for p in offset_polygon(ring, cfg.offset.distance, cfg.offset.min_edge_length)
                  if is_finite_point(p)]
        if offset:
            inside = points_in_polygon(ring_to_array(offset), ring_xy)
            offset = [p for p, ok in zip(offset, inside) if ok]
        if offset:
            samples.points.extend(offset)
            box_source = offset
        else:
            logger.debug('offset ring fully outside polygon (%d vertices); using ring bbox', len(ring))
    min_lon, min_lat, max_lon, max_lat = bounding_box(box_source)

    clearance = None
    if cfg.min_edge_distance > 0.0:
        clearance = _EdgeClearance(ring_xy, cfg.min_edge_distance)

    attempts = 0
    while len(samples.points) < target_count and attempts < cfg.max_attempts:
        remaining = target_count - len(samples.points)
        batch = int(min(_MAX_BATCH, max(_MIN_BATCH, 2 * remaining), cfg.max_attempts - attempts))
        lon = min_lon + gen.random(batch) * (max_lon - min_lon)
        lat = min_lat + gen.random(batch) * (max_lat - min_lat)
        cand = np.column_stack([lon, lat])
        ok = points_in_polygon(cand, ring_xy)
        if clearance is not None and ok.any():
            ok[ok] = clearance.mask(cand[ok])
        accepted = np.nonzero(ok)[0]
        if accepted.size > remaining:
            # candidates past the last accepted one count as never drawn
            accepted = accepted[:remaining]
            attempts += int(accepted[-1]) + 1
        else:
            attempts += batch
        samples.points.extend(GeoPoint(float(cand[k, 0]), float(cand[k, 1])) for k in accepted)

    samples.attempts = attempts
    if len(samples.points) < target_count:
        samples.undersampled = True
        logger.warning('undersampled polygon: %d/%d points after %d attempts',
                       len(samples.points), target_count, attempts)
    return samples
