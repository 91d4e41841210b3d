"""Lightweight file I/O for globemesh.

- read_geojson_regions: load polygon rings per named feature from GeoJSON
- write_vtk: export a ring mesh in legacy VTK format for ParaView/VisIt

Canonical data format:
    points: (N, 2) or (N, 3) float64 array
    triangles: (M, 3) int array
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional, Union

import numpy as np

from .logging_utils import get_logger
from .pipeline import Region
from .points import as_ring

logger = get_logger('globemesh.io')

__all__ = ['read_geojson_regions', 'write_vtk']


def _feature_name(feature: Dict[str, Any]) -> str:
    props = feature.get('properties') or {}
    return props.get('ADMIN') or props.get('name') or 'Unknown'


def read_geojson_regions(source: Union[str, os.PathLike, Dict[str, Any]]) -> List[Region]:
    """Read named polygon rings from a GeoJSON FeatureCollection.

    Parameters
    ----------
    source : path or dict
        Path to a ``.geojson`` file or an already parsed FeatureCollection.

    Returns
    -------
    list of Region
        One region per Polygon/MultiPolygon feature. MultiPolygon parts are
        flattened, so holes and outer rings all appear as separate rings.
        Coordinates are ``[lon, lat]`` degrees; a repeated closing vertex is
        dropped.

    Raises
    ------
    ValueError
        If the document is not a FeatureCollection.
    """
    if isinstance(source, dict):
        doc = source
    else:
        with open(source, 'r', encoding='utf-8') as f:
            doc = json.load(f)
    if doc.get('type') != 'FeatureCollection':
        raise ValueError(f"expected a GeoJSON FeatureCollection, got type={doc.get('type')!r}")

    regions = []
    for feature in doc.get('features', []):
        geom = feature.get('geometry') or {}
        gtype = geom.get('type')
        coords = geom.get('coordinates') or []
        if gtype == 'Polygon':
            rings = coords
        elif gtype == 'MultiPolygon':
            rings = [ring for poly in coords for ring in poly]
        else:
            logger.warning('skipping feature %r with geometry type %r', _feature_name(feature), gtype)
            continue
        regions.append(Region(
            name=_feature_name(feature),
            rings=[as_ring((float(c[0]), float(c[1])) for c in ring) for ring in rings],
        ))
    logger.info('loaded %d regions (%d rings)', len(regions), sum(len(r.rings) for r in regions))
    return regions


def write_vtk(filepath: str,
              points: np.ndarray,
              triangles: np.ndarray,
              point_data: Optional[Dict[str, np.ndarray]] = None,
              cell_data: Optional[Dict[str, np.ndarray]] = None,
              title: str = "globemesh ring") -> None:
    """Write a triangle mesh to legacy VTK format (ASCII).

    Parameters
    ----------
    filepath : str
        Output .vtk file path
    points : (N, 2) or (N, 3) ndarray
        Vertex coordinates. If 2D, z=0 is added.
    triangles : (M, 3) ndarray
        Triangle connectivity (0-indexed)
    point_data, cell_data : dict, optional
        Scalar (N,)/(M,) or vector (N, 2|3)/(M, 2|3) fields by name.
    title : str
        Dataset title

    Examples
    --------
    >>> mesh = mesh_ring(ring)
    >>> write_vtk('ring.vtk', mesh.sphere_points, mesh.surface_triangles)
    """
    points = np.asarray(points)
    triangles = np.asarray(triangles)
    if points.ndim != 2 or points.shape[1] not in (2, 3):
        raise ValueError(f"points must be (N, 2) or (N, 3), got shape {points.shape}")
    if triangles.size and (triangles.ndim != 2 or triangles.shape[1] != 3):
        raise ValueError(f"triangles must be (M, 3), got shape {triangles.shape}")
    triangles = triangles.reshape(-1, 3)

    if points.shape[1] == 2:
        points_3d = np.column_stack([points, np.zeros(len(points))])
    else:
        points_3d = points
    num_points = len(points_3d)
    num_triangles = len(triangles)

    with open(filepath, 'w') as f:
        f.write("# vtk DataFile Version 2.0\n")
        f.write(f"{title}\n")
        f.write("ASCII\n")
        f.write("DATASET UNSTRUCTURED_GRID\n")

        f.write(f"POINTS {num_points} double\n")
        for pt in points_3d:
            f.write(f"{pt[0]:.16e} {pt[1]:.16e} {pt[2]:.16e}\n")

        f.write(f"\nCELLS {num_triangles} {num_triangles * 4}\n")
        for tri in triangles:
            f.write(f"3 {tri[0]} {tri[1]} {tri[2]}\n")

        # 5 = VTK_TRIANGLE
        f.write(f"\nCELL_TYPES {num_triangles}\n")
        for _ in range(num_triangles):
            f.write("5\n")

        if point_data:
            f.write(f"\nPOINT_DATA {num_points}\n")
            _write_fields(f, point_data, 'point_data')
        if cell_data:
            f.write(f"\nCELL_DATA {num_triangles}\n")
            _write_fields(f, cell_data, 'cell_data')


def _write_fields(f, fields: Dict[str, np.ndarray], label: str) -> None:
    for name, data in fields.items():
        data = np.asarray(data, dtype=np.float64)
        if data.ndim == 1:
            f.write(f"SCALARS {name} double 1\n")
            f.write("LOOKUP_TABLE default\n")
            for val in data:
                f.write(f"{val:.16e}\n")
        elif data.ndim == 2 and data.shape[1] in (2, 3):
            if data.shape[1] == 2:
                data = np.column_stack([data, np.zeros(len(data))])
            f.write(f"VECTORS {name} double\n")
            for vec in data:
                f.write(f"{vec[0]:.16e} {vec[1]:.16e} {vec[2]:.16e}\n")
        else:
            logger.warning("skipping %s[%r] with unsupported shape %s", label, name, data.shape)
