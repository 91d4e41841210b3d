"""Geographic <-> Cartesian conversions.

Lon/lat degrees are not metrically uniform, so distance and winding checks
go through the spherical projection while triangulation stays in the plain
lon/lat plane.
"""
from __future__ import annotations

import math

import numpy as np

from .points import CartesianPoint, GeoPoint, PointLike, as_geopoint

__all__ = ['geo_to_cartesian', 'cartesian_to_geo', 'geo_to_cartesian_array']


def geo_to_cartesian(point: PointLike, radius: float = 1.0, alt: float = 0.0) -> CartesianPoint:
    """Project ``(lon, lat)`` degrees onto a sphere of ``radius + alt``.

    NaN coordinates propagate to NaN components.
    """
    p = as_geopoint(point)
    phi = math.radians(p.lat)
    lam = math.radians(p.lon)
    r = radius + alt
    return CartesianPoint(
        r * math.cos(phi) * math.cos(lam),
        r * math.cos(phi) * math.sin(lam),
        r * math.sin(phi),
    )


def cartesian_to_geo(point) -> GeoPoint:
    """Inverse of geo_to_cartesian.

    The origin has no direction; it yields NaN coordinates rather than
    raising, so callers must not feed it.
    """
    x, y, z = float(point[0]), float(point[1]), float(point[2])
    r = math.sqrt(x * x + y * y + z * z)
    if r == 0.0:
        return GeoPoint(math.nan, math.nan)
    ratio = z / r
    if abs(ratio) > 1.0:  # rounding on the poles
        ratio = math.copysign(1.0, ratio)
    lat = math.degrees(math.asin(ratio))
    lon = math.degrees(math.atan2(y, x))
    return GeoPoint(lon, lat)


def geo_to_cartesian_array(lonlat, radius: float = 1.0) -> np.ndarray:
    """Vectorized projection of an (N, 2) lon/lat array to (N, 3) sphere points."""
    arr = np.asarray(lonlat, dtype=np.float64)
    if arr.size == 0:
        return np.empty((0, 3), dtype=np.float64)
    lam = np.radians(arr[:, 0])
    phi = np.radians(arr[:, 1])
    cos_phi = np.cos(phi)
    return np.column_stack([
        radius * cos_phi * np.cos(lam),
        radius * cos_phi * np.sin(lam),
        radius * np.sin(phi),
    ])
