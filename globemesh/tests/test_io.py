"""Tests for GeoJSON loading and VTK export."""
import json

import numpy as np
import pytest

from globemesh.core.io import read_geojson_regions, write_vtk
from globemesh.core.pipeline import mesh_ring
from globemesh.core.points import GeoPoint

COLLECTION = {
    'type': 'FeatureCollection',
    'features': [
        {
            'type': 'Feature',
            'properties': {'ADMIN': 'Squareland', 'name': 'ignored'},
            'geometry': {
                'type': 'Polygon',
                'coordinates': [[[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]],
            },
        },
        {
            'type': 'Feature',
            'properties': {'name': 'Twin Isles'},
            'geometry': {
                'type': 'MultiPolygon',
                'coordinates': [
                    [[[20, 0], [21, 0], [21, 1], [20, 0]]],
                    [[[30, 0], [32, 0], [32, 2], [30, 2], [30, 0]], [[30.5, 0.5], [31, 0.5], [31, 1], [30.5, 0.5]]],
                ],
            },
        },
        {
            'type': 'Feature',
            'properties': {'ADMIN': 'Lighthouse'},
            'geometry': {'type': 'Point', 'coordinates': [5, 5]},
        },
        {
            'type': 'Feature',
            'properties': None,
            'geometry': {'type': 'Polygon', 'coordinates': [[[1, 1], [2, 1], [2, 2], [1, 1]]]},
        },
    ],
}


def test_read_geojson_from_dict():
    regions = read_geojson_regions(COLLECTION)
    assert [r.name for r in regions] == ['Squareland', 'Twin Isles', 'Unknown']
    square = regions[0].rings[0]
    # closing vertex dropped, coordinates as GeoPoint
    assert len(square) == 4
    assert all(isinstance(p, GeoPoint) for p in square)
    assert square[1].xy == (10.0, 0.0)
    # MultiPolygon parts and holes flattened
    assert [len(r) for r in regions[1].rings] == [3, 4, 3]


def test_read_geojson_from_file(tmp_path):
    path = tmp_path / 'countries.geojson'
    path.write_text(json.dumps(COLLECTION), encoding='utf-8')
    regions = read_geojson_regions(str(path))
    assert len(regions) == 3
    assert regions == read_geojson_regions(path)


def test_read_geojson_rejects_non_collection():
    with pytest.raises(ValueError):
        read_geojson_regions({'type': 'Feature', 'geometry': None})


def test_write_vtk_basic(tmp_path):
    points = np.array([[0.0, 0.0], [1.0, 0.0], [0.5, 0.8]])
    triangles = np.array([[0, 1, 2]], dtype=np.int32)
    out = tmp_path / 'tri.vtk'
    write_vtk(str(out), points, triangles, title='Test Ring')
    content = out.read_text()
    assert content.startswith('# vtk DataFile Version 2.0\nTest Ring\nASCII\n')
    assert 'DATASET UNSTRUCTURED_GRID' in content
    assert 'POINTS 3 double' in content
    assert 'CELLS 1 4' in content
    assert '3 0 1 2' in content
    assert 'CELL_TYPES 1' in content


def test_write_vtk_with_fields(tmp_path):
    points = np.array([[0.0, 0.0, 1.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    triangles = np.array([[0, 1, 2]])
    out = tmp_path / 'fields.vtk'
    write_vtk(str(out), points, triangles,
              point_data={'boundary': np.array([1.0, 0.0, 1.0]), 'uv': np.zeros((3, 2))},
              cell_data={'skin': np.array([0.0]), 'bad': np.zeros((1, 5))})
    content = out.read_text()
    assert 'POINT_DATA 3' in content
    assert 'SCALARS boundary double 1' in content
    assert 'VECTORS uv double' in content
    assert 'CELL_DATA 1' in content
    assert 'SCALARS skin double 1' in content
    assert 'bad' not in content


def test_write_vtk_rejects_bad_shapes(tmp_path):
    with pytest.raises(ValueError):
        write_vtk(str(tmp_path / 'x.vtk'), np.zeros((3, 4)), np.array([[0, 1, 2]]))
    with pytest.raises(ValueError):
        write_vtk(str(tmp_path / 'x.vtk'), np.zeros((3, 2)), np.array([[0, 1]]))


def test_write_ring_mesh(tmp_path, l_shape, rng):
    mesh = mesh_ring(l_shape, rng=rng)
    out = tmp_path / 'ring.vtk'
    write_vtk(str(out), mesh.sphere_points, mesh.surface_triangles,
              point_data={'boundary': mesh.samples.boundary_mask().astype(float)})
    content = out.read_text()
    assert f'POINTS {len(mesh.samples)} double' in content
    assert f'CELL_TYPES {mesh.surface_triangles.shape[0]}' in content
