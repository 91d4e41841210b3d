"""Polygon geometry primitives: containment, winding, distances and offsets.

Rings are sequences of GeoPoint or ``(lon, lat)`` pairs. Containment works in
the lon/lat plane; metric checks (offsets, distance to edges) go through the
spherical projection so that degrees of longitude are not treated as
uniform lengths.
"""
from __future__ import annotations
import math
import numpy as np

from .constants import EPS_EDGE_SLOPE, EARTH_RADIUS_M
from .points import GeoPoint, as_geopoint
from .projection import geo_to_cartesian, cartesian_to_geo, geo_to_cartesian_array

# cap on (candidate, edge) pairs held at once by points_in_polygon
_PIP_BLOCK_ELEMENTS = 1 << 18

__all__ = [
	'point_in_polygon', 'points_in_polygon', 'polygon_signed_area', 'polygon_area_2d',
	'polygon_winding', 'point_segment_distance', 'point_segments_distances',
	'offset_polygon', 'is_away_from_edges', 'bounding_box', 'ring_to_array',
	'ensure_positive_orientation',
]


def _xy(p):
	if isinstance(p, GeoPoint):
		return p.lon, p.lat
	return float(p[0]), float(p[1])


def ring_to_array(polygon) -> np.ndarray:
	"""Return an (N, 2) float64 array of (lon, lat) for a ring."""
	if len(polygon) == 0:
		return np.empty((0, 2), dtype=np.float64)
	return np.array([_xy(p) for p in polygon], dtype=np.float64)


def point_in_polygon(point, polygon) -> bool:
	"""Ray casting even-odd rule.

	Returns False for rings with fewer than 3 vertices. EPS_EDGE_SLOPE is
	added to the edge denominator so exactly horizontal edges do not divide
	by zero; this is an approximation, not exact predicates.
	"""
	n = len(polygon)
	if point is None or n < 3:
		return False
	px, py = _xy(point)
	inside = False
	j = n - 1
	for i in range(n):
		xi, yi = _xy(polygon[i])
		xj, yj = _xy(polygon[j])
		if (yi > py) != (yj > py):
			if px < (xj - xi) * (py - yi) / ((yj - yi) + EPS_EDGE_SLOPE) + xi:
				inside = not inside
		j = i
	return inside


def points_in_polygon(xy, polygon, max_elements: int = _PIP_BLOCK_ELEMENTS) -> np.ndarray:
	"""Vectorized point_in_polygon for an (N, 2) array of candidates.

	Same parity rule and tolerance as the scalar version; returns a boolean
	array of shape (N,). Candidates are processed in row blocks so that no
	temporary holds more than ``max_elements`` (candidate, edge) pairs.
	"""
	pts = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
	ring = polygon if isinstance(polygon, np.ndarray) else ring_to_array(polygon)
	out = np.zeros((pts.shape[0],), dtype=bool)
	n_edges = ring.shape[0]
	if n_edges < 3 or pts.shape[0] == 0:
		return out
	xi = ring[:, 0]; yi = ring[:, 1]
	xj = np.roll(xi, 1); yj = np.roll(yi, 1)
	dx = xj - xi
	den = (yj - yi) + EPS_EDGE_SLOPE
	rows = max(1, int(max_elements) // n_edges)
	for start in range(0, pts.shape[0], rows):
		block = pts[start:start + rows]
		px = block[:, 0:1]; py = block[:, 1:2]
		straddle = (yi > py) != (yj > py)
		xint = dx * (py - yi) / den + xi
		crossings = np.count_nonzero(straddle & (px < xint), axis=1)
		out[start:start + rows] = (crossings % 2) == 1
	return out


def polygon_signed_area(points) -> float:
	"""Shoelace signed area over the first two coordinates; positive if CCW."""
	n = len(points)
	if n < 3:
		return 0.0
	if isinstance(points, np.ndarray):
		arr = points[:, :2].astype(np.float64)
	else:
		arr = np.array([(p[0], p[1]) if not isinstance(p, GeoPoint) else p.xy for p in points], dtype=np.float64)
	x = arr[:, 0]; y = arr[:, 1]
	return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def polygon_area_2d(polygon) -> float:
	"""Absolute lon/lat area of a ring (square degrees)."""
	return abs(polygon_signed_area(ring_to_array(polygon)))


def polygon_winding(points) -> int:
	"""Orientation of a ring: +1 counter-clockwise, -1 clockwise.

	Accepts GeoPoint, CartesianPoint or plain tuples; only the first two
	coordinates are used, so callers must pass points in the frame they
	intend to offset in. Zero area reports -1.
	"""
	return 1 if polygon_signed_area(points) > 0 else -1


def point_segment_distance(p, a, b) -> float:
	"""Euclidean distance from p to the closed segment a-b.

	Works for 2D or 3D points. The projection parameter
	t = ((p-a).(b-a)) / |b-a|^2 is clamped to [0, 1]; a zero-length segment
	falls back to the point distance.
	"""
	pv = [float(v) for v in p]; av = [float(v) for v in a]; bv = [float(v) for v in b]
	d = [bi - ai for ai, bi in zip(av, bv)]
	len2 = sum(di * di for di in d)
	if len2 == 0.0:
		return math.sqrt(sum((pi - ai) ** 2 for pi, ai in zip(pv, av)))
	t = sum((pi - ai) * di for pi, ai, di in zip(pv, av, d)) / len2
	t = min(1.0, max(0.0, t))
	return math.sqrt(sum((pi - (ai + t * di)) ** 2 for pi, ai, di in zip(pv, av, d)))


def point_segments_distances(p, a_pts, b_pts) -> np.ndarray:
	"""Vectorized point_segment_distance of one point against M segments.

	a_pts, b_pts : arrays of shape (M, D)
	p : point of dimension D
	Returns array of shape (M,).
	"""
	a = np.asarray(a_pts, dtype=np.float64); b = np.asarray(b_pts, dtype=np.float64)
	if a.size == 0:
		return np.empty((0,), dtype=np.float64)
	q = np.asarray(p, dtype=np.float64)[:a.shape[1]]
	d = b - a
	len2 = np.einsum('ij,ij->i', d, d)
	with np.errstate(divide='ignore', invalid='ignore'):
		t = np.einsum('ij,ij->i', q - a, d) / len2
	t = np.where(len2 == 0.0, 0.0, np.clip(t, 0.0, 1.0))
	closest = a + t[:, None] * d
	return np.linalg.norm(q - closest, axis=1)


def offset_polygon(polygon, distance: float = 0.5, min_edge_length: float = 0.0,
				   radius: float = EARTH_RADIUS_M):
	"""Shift each edge start vertex inward, perpendicular to the edge.

	Vertices are projected to a sphere of ``radius``. For edge i the normal
	is taken in the tangent plane at vertex i (up x edge), which points to
	the left of the direction of travel; it is multiplied by the lon/lat
	winding so it points inside for both orientations. The shifted point is
	projected back to lon/lat. Edges 0..n-2 are visited, so the last vertex
	never produces a point. Edges shorter than ``min_edge_length``
	(projected units) and zero-length edges are skipped.

	Returns a list of GeoPoint tagged OFFSET.
	"""
	ring = [as_geopoint(p) for p in polygon]
	if len(ring) < 2:
		return []
	winding = polygon_winding(ring)
	cart = geo_to_cartesian_array(ring_to_array(ring), radius=radius)
	out = []
	for i in range(len(ring) - 1):
		p1 = cart[i]
		edge = cart[i + 1] - p1
		magnitude = float(np.linalg.norm(edge))
		if magnitude == 0.0 or magnitude < min_edge_length:
			continue
		up = p1 / radius
		normal = np.cross(up, edge)
		n_len = float(np.linalg.norm(normal))
		if n_len == 0.0:
			continue
		shifted = p1 + (winding * distance / n_len) * normal
		g = cartesian_to_geo(shifted)
		out.append(GeoPoint.offset_point(g.lon, g.lat))
	return out


def is_away_from_edges(point, polygon, min_distance: float, radius: float = EARTH_RADIUS_M) -> bool:
	"""True if ``point`` is at least ``min_distance`` from every ring edge.

	Distances are straight-line (chord) distances between the projected
	point and the projected edges on a sphere of ``radius``, never raw
	degrees.
	"""
	n = len(polygon)
	if n == 0:
		return True
	cart = geo_to_cartesian_array(ring_to_array(polygon), radius=radius)
	q = geo_to_cartesian(point, radius=radius)
	dists = point_segments_distances(q, cart, np.roll(cart, -1, axis=0))
	return bool(np.all(dists >= min_distance))


def bounding_box(points):
	"""Return (min_lon, min_lat, max_lon, max_lat) of a point sequence."""
	arr = ring_to_array(points)
	if arr.shape[0] == 0:
		raise ValueError("bounding_box of an empty point set")
	mins = arr.min(axis=0); maxs = arr.max(axis=0)
	return float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1])


def ensure_positive_orientation(points, triangles) -> np.ndarray:
	"""Return a copy of triangles with every row reordered to CCW (positive area).

	Zero-area rows are left as they are.
	"""
	pts = np.asarray(points, dtype=np.float64)
	tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3).copy()
	if tris.size == 0:
		return tris
	p0 = pts[tris[:, 0]]; p1 = pts[tris[:, 1]]; p2 = pts[tris[:, 2]]
	e1 = p1 - p0; e2 = p2 - p0
	cross = e1[:, 0] * e2[:, 1] - e1[:, 1] * e2[:, 0]
	flip = cross < 0.0
	if np.any(flip):
		tris[flip, 1], tris[flip, 2] = tris[flip, 2].copy(), tris[flip, 1].copy()
	return tris
