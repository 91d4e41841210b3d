"""Ring builders shared by the test modules."""
import math


def dense_ring(corners, per_edge):
    """Subdivide each edge of ``corners`` into ``per_edge`` segments."""
    out = []
    n = len(corners)
    for i in range(n):
        x0, y0 = corners[i]
        x1, y1 = corners[(i + 1) % n]
        for k in range(per_edge):
            t = k / per_edge
            out.append((x0 + t * (x1 - x0), y0 + t * (y1 - y0)))
    return out


def circle_ring(cx, cy, r, n, clockwise=False):
    """Regular n-gon approximating a circle of radius ``r`` (degrees)."""
    sign = -1.0 if clockwise else 1.0
    return [(cx + r * math.cos(sign * 2.0 * math.pi * k / n),
             cy + r * math.sin(sign * 2.0 * math.pi * k / n)) for k in range(n)]
