"""Debug plots of planar ring triangulations."""
from __future__ import annotations

import os as _os
import matplotlib as _mpl
# Non-interactive backend in headless environments before importing pyplot
if not _os.environ.get('MPLBACKEND'):
    _mpl.use('Agg')
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle

from .logging_utils import get_logger

logger = get_logger('globemesh.viz')

__all__ = ['plot_triangulation', 'plot_ring_mesh']


def plot_triangulation(points, triangles, circumcircles=None, skin_mask=None,
                       polygon=None, boundary_mask=None, outname="triangulation.png"):
    """Plot a lon/lat triangulation with optional overlays.

    Args:
        points: (N, 2) lon/lat array
        triangles: (M, 3) index array
        circumcircles: optional (M, 3) array of (cx, cy, r2); infinite rows are skipped
        skin_mask: optional (M,) bool array; skin triangles are filled in red
        polygon: optional source ring drawn as a closed polyline
        boundary_mask: optional (N,) bool array; boundary vertices drawn in red
        outname: output image path
    """
    pts = np.asarray(points, dtype=np.float64)
    tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    fig, ax = plt.subplots(figsize=(6, 6))
    if tris.shape[0]:
        ax.triplot(pts[:, 0], pts[:, 1], tris, lw=0.5, color='0.35')
    if skin_mask is not None:
        for t in tris[np.asarray(skin_mask, dtype=bool)]:
            tri_pts = pts[t]
            ax.fill(tri_pts[:, 0], tri_pts[:, 1], facecolor='red', alpha=0.35, edgecolor='none')
    if circumcircles is not None:
        circ = np.asarray(circumcircles, dtype=np.float64).reshape(-1, 3)
        drawn = 0
        for cx, cy, r2 in circ:
            if not np.isfinite(r2):
                continue
            ax.add_patch(Circle((cx, cy), float(np.sqrt(r2)), fill=False, lw=0.3, color=(1.0, 0.53, 0.0)))
            drawn += 1
        logger.debug('drew %d/%d circumcircles', drawn, circ.shape[0])
    if polygon is not None and len(polygon):
        ring = np.array([(p.lon, p.lat) if hasattr(p, 'lon') else (p[0], p[1]) for p in polygon], dtype=float)
        ax.plot(np.append(ring[:, 0], ring[0, 0]), np.append(ring[:, 1], ring[0, 1]), color='black', lw=1.2)
    npts = max(1, pts.shape[0])
    s = max(0.6, min(8.0, 200.0 / float(npts)))
    if boundary_mask is not None:
        bm = np.asarray(boundary_mask, dtype=bool)
        ax.scatter(pts[~bm, 0], pts[~bm, 1], s=s, color='tab:blue')
        ax.scatter(pts[bm, 0], pts[bm, 1], s=s, color='tab:red')
    else:
        ax.scatter(pts[:, 0], pts[:, 1], s=s, color='tab:blue')
    ax.set_aspect('equal')
    ax.set_xlabel('lon')
    ax.set_ylabel('lat')
    if pts.shape[0]:
        ax.set_xlim(pts[:, 0].min() - 1.0, pts[:, 0].max() + 1.0)
        ax.set_ylim(pts[:, 1].min() - 1.0, pts[:, 1].max() + 1.0)
    fig.savefig(outname, dpi=150)
    plt.close(fig)
    return outname


def plot_ring_mesh(mesh, polygon=None, outname="ring_mesh.png", show_circles: bool = False):
    """Plot a RingMesh produced by ``mesh_ring``."""
    return plot_triangulation(
        mesh.samples.to_xy(), mesh.triangles,
        circumcircles=mesh.circumcircles if show_circles else None,
        skin_mask=mesh.skin_mask,
        polygon=polygon,
        boundary_mask=mesh.samples.boundary_mask(),
        outname=outname,
    )
