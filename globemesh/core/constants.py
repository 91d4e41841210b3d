"""Central numerical tolerances and small geometry constants.

Tiny thresholds used by the geometry, sampling and triangulation code live
here so they can be tuned consistently instead of being scattered as
literals across call sites.
"""
from __future__ import annotations

# Containment / degeneracy tolerances
EPS_EDGE_SLOPE: float = 1e-12      # added to the ray-cast edge denominator (horizontal edges)
EPS_CIRCUMCIRCLE: float = 1e-12    # slack on d2 <= r2 when testing circumcircle containment
EPS_DEGENERATE: float = 1e-12      # |2*det| below this marks a collinear triple

# Super-triangle sizing (multiple of the larger bounding-box dimension)
SUPER_TRIANGLE_SCALE: float = 20.0

# Mean Earth radius in metres
EARTH_RADIUS_M: float = 6371000.0

__all__ = [
    'EPS_EDGE_SLOPE',
    'EPS_CIRCUMCIRCLE',
    'EPS_DEGENERATE',
    'SUPER_TRIANGLE_SCALE',
    'EARTH_RADIUS_M',
]
