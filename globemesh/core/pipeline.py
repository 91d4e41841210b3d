"""Ring and region meshing driver.

Runs the sampling -> triangulation -> skin classification chain per ring.
Every ring is an independent triangulation with its own point arena, so
regions are parallelised at ring granularity and merged in the parent.
"""
from __future__ import annotations

import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from .boundary import get_classifier
from .config import PipelineConfig
from .delaunay import DelaunayTriangulator
from .geometry import ensure_positive_orientation, polygon_area_2d
from .logging_utils import get_logger
from .points import GeoPoint, SampleSet, as_ring
from .projection import geo_to_cartesian_array
from .sampling import sample_points_in_polygon

logger = get_logger('globemesh.pipeline')

__all__ = [
    'RingMesh', 'Region', 'RegionMesh',
    'target_point_count', 'mesh_ring', 'mesh_region', 'mesh_regions',
]


@dataclass
class RingMesh:
    """Triangulated samples of one ring.

    Attributes
    ----------
    samples : SampleSet
        Points referenced by ``triangles`` (same order).
    triangles : (M, 3) int ndarray
        All finalized triangles, CCW in the lon/lat plane.
    circumcircles : (M, 3) float ndarray
        (cx, cy, r2) per triangle, for debugging overlays.
    skin_mask : (M,) bool ndarray
        True where the classifier flagged a skin triangle.
    sphere_points : (N, 3) float ndarray
        Samples projected on the sphere, ready for a renderer.
    """
    samples: SampleSet
    triangles: np.ndarray
    circumcircles: np.ndarray
    skin_mask: np.ndarray
    sphere_points: np.ndarray
    elapsed: float = 0.0

    @property
    def surface_triangles(self) -> np.ndarray:
        return self.triangles[~self.skin_mask]

    @property
    def undersampled(self) -> bool:
        return self.samples.undersampled


@dataclass
class Region:
    """A named geographic feature made of one or more rings."""
    name: str
    rings: List[List[GeoPoint]] = field(default_factory=list)


@dataclass
class RegionMesh:
    """Per-ring meshes of a region; skipped rings are None so indices match ``Region.rings``."""
    name: str
    rings: List[Optional[RingMesh]] = field(default_factory=list)

    @property
    def meshed_count(self) -> int:
        return sum(1 for r in self.rings if r is not None)


def target_point_count(polygon, region_name: Optional[str] = None,
                       config: Optional[PipelineConfig] = None) -> int:
    """Sample budget for a ring: area-driven, floored and capped per region size."""
    cfg = config or PipelineConfig()
    cap = cfg.large_region_cap if region_name in cfg.large_regions else cfg.default_cap
    wanted = max(polygon_area_2d(polygon) * cfg.area_scale, cfg.min_points)
    return int(max(min(cap, wanted), len(polygon)))


def mesh_ring(polygon, config: Optional[PipelineConfig] = None,
              rng: Optional[np.random.Generator] = None,
              region_name: Optional[str] = None,
              target_count: Optional[int] = None) -> Optional[RingMesh]:
    """Sample, triangulate and classify one ring.

    Returns None for rings with fewer than ``config.min_ring_vertices``
    vertices; those are not worth a surface.
    """
    cfg = config or PipelineConfig()
    ring = as_ring(polygon)
    if len(ring) < max(3, cfg.min_ring_vertices):
        logger.debug('skipping ring of %d vertices (%s)', len(ring), region_name)
        return None
    t0 = time.perf_counter()
    count = target_count if target_count is not None else target_point_count(ring, region_name, cfg)
    if rng is None:
        rng = np.random.default_rng(cfg.sampling.seed)
    samples = sample_points_in_polygon(ring, count, rng=rng, config=cfg.sampling)
    flat = samples.to_xy()

    tri = DelaunayTriangulator(flat)
    tri.insert_all()
    tri.finalize()
    triangles = ensure_positive_orientation(flat, tri.simplices)
    circles = tri.circumcircles

    skin = get_classifier(cfg.classifier).classify(samples.points, triangles, ring)
    elapsed = time.perf_counter() - t0
    logger.debug('%s: %d points -> %d triangles (%d skin) in %.3fs',
                 region_name or 'ring', len(samples), triangles.shape[0], int(skin.sum()), elapsed)
    return RingMesh(
        samples=samples,
        triangles=triangles,
        circumcircles=circles,
        skin_mask=skin,
        sphere_points=geo_to_cartesian_array(flat, radius=cfg.sphere_radius),
        elapsed=elapsed,
    )


def mesh_region(region: Region, config: Optional[PipelineConfig] = None,
                rng: Optional[np.random.Generator] = None) -> RegionMesh:
    cfg = config or PipelineConfig()
    gen = rng if rng is not None else np.random.default_rng(cfg.sampling.seed)
    out = RegionMesh(name=region.name)
    for ring in region.rings:
        out.rings.append(mesh_ring(ring, cfg, rng=gen, region_name=region.name))
    return out


def _mesh_ring_job(args):
    ring, cfg, seed, name = args
    return mesh_ring(ring, cfg, rng=np.random.default_rng(seed), region_name=name)


def mesh_regions(regions: Sequence[Region], config: Optional[PipelineConfig] = None,
                 workers: int = 1, seed: Optional[int] = None) -> List[RegionMesh]:
    """Mesh many regions, optionally across ``workers`` processes.

    Each ring gets its own generator spawned from ``seed`` (or
    ``config.sampling.seed``), so results do not depend on ``workers``.
    """
    cfg = config or PipelineConfig()
    base = np.random.SeedSequence(seed if seed is not None else cfg.sampling.seed)
    jobs = []
    owners = []
    for r_idx, region in enumerate(regions):
        for ring in region.rings:
            jobs.append([ring, cfg, None, region.name])
            owners.append(r_idx)
    for job, child in zip(jobs, base.spawn(len(jobs))):
        job[2] = child

    t0 = time.perf_counter()
    if workers > 1 and len(jobs) > 1:
        with ProcessPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(_mesh_ring_job, jobs, chunksize=max(1, len(jobs) // (4 * workers))))
    else:
        results = [_mesh_ring_job(j) for j in jobs]

    out = [RegionMesh(name=r.name) for r in regions]
    for owner, res in zip(owners, results):
        out[owner].rings.append(res)
    meshed = sum(m.meshed_count for m in out)
    logger.info('meshed %d/%d rings across %d regions in %.2fs (workers=%d)',
                meshed, len(jobs), len(regions), time.perf_counter() - t0, workers)
    return out
