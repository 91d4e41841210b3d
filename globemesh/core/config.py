"""Configuration objects for polygon sampling and ring meshing."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass
class OffsetConfig:
    """Inward offset ring parameters.

    - distance: offset magnitude in metres on the Earth-radius sphere.
    - min_edge_length: edges shorter than this (same units) produce no
      offset point. 0.0 keeps every non zero-length edge.
    """
    distance: float = 0.5
    min_edge_length: float = 0.0


@dataclass
class SamplingConfig:
    """Rejection sampler parameters.

    Attributes
    ----------
    offset_vertex_threshold : int
        Rings with more vertices than this get an inward offset ring and
        sample inside the offset ring's bounding box.
    min_edge_distance : float
        When positive, candidates closer than this (chord metres on the
        Earth-radius sphere) to any polygon edge are rejected.
    max_attempts : int
        Upper bound on random candidates drawn for one call; the result is
        flagged undersampled when the target is not reached.
    seed : int, optional
        Seed used to build a generator when the caller passes none.
    offset : OffsetConfig
        Parameters of the offset ring.
    """
    offset_vertex_threshold: int = 100
    min_edge_distance: float = 0.0
    max_attempts: int = 200_000
    seed: Optional[int] = None
    offset: OffsetConfig = field(default_factory=OffsetConfig)


@dataclass
class PipelineConfig:
    """Per-ring meshing preferences.

    The target point count for a ring is
    ``min(cap, max(area * area_scale, min_points))`` where ``cap`` is
    ``large_region_cap`` for names listed in ``large_regions`` and
    ``default_cap`` otherwise.
    """
    min_ring_vertices: int = 5
    default_cap: int = 1000
    large_region_cap: int = 2000
    large_regions: Tuple[str, ...] = ('Russia', 'Antarctica')
    min_points: int = 100
    area_scale: float = 1.0
    classifier: str = 'sequential'
    sphere_radius: float = 1.0
    sampling: SamplingConfig = field(default_factory=SamplingConfig)


__all__ = ['OffsetConfig', 'SamplingConfig', 'PipelineConfig']
