"""Public package API for globemesh.

Turns geographic polygon rings into triangle meshes for a 3D globe:
interior point sampling, incremental Delaunay triangulation and skin
triangle classification. This facade gives a flat import surface over
``globemesh.core`` and defers matplotlib until a plot is requested.

Example
-------
    from globemesh import mesh_ring, DelaunayTriangulator, point_in_polygon

The deeper modules (``globemesh.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

try:
    from importlib.metadata import version as _pkg_version, PackageNotFoundError as _NotFound
    __version__ = _pkg_version("globemesh")
except _NotFound:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

# Eager light-weight submodules
_const = _imp('globemesh.core.constants')
_points = _imp('globemesh.core.points')
_proj = _imp('globemesh.core.projection')
_geom = _imp('globemesh.core.geometry')
_samp = _imp('globemesh.core.sampling')
_del = _imp('globemesh.core.delaunay')
_bnd = _imp('globemesh.core.boundary')
_pipe = _imp('globemesh.core.pipeline')
_io = _imp('globemesh.core.io')
_conf = _imp('globemesh.core.config')
_err = _imp('globemesh.core.errors')


def _lazy_module(mod_name):
    class _ModuleProxy:
        __slots__ = ('_m',)
        def _load(self):
            try:
                return self._m
            except AttributeError:
                self._m = _imp(mod_name)
                return self._m
        def __getattr__(self, item):
            if item == '_m':
                raise AttributeError(item)
            return getattr(self._load(), item)
        def __dir__(self):
            return dir(self._load())
    return _ModuleProxy()


# matplotlib is only imported on first use
visualization = _lazy_module('globemesh.core.visualization')

# Data model
PointKind = _points.PointKind
GeoPoint = _points.GeoPoint
CartesianPoint = _points.CartesianPoint
SampleSet = _points.SampleSet

# Projection
geo_to_cartesian = _proj.geo_to_cartesian
cartesian_to_geo = _proj.cartesian_to_geo

# Polygon geometry
point_in_polygon = _geom.point_in_polygon
polygon_winding = _geom.polygon_winding
point_segment_distance = _geom.point_segment_distance
offset_polygon = _geom.offset_polygon

# Sampling / triangulation / classification
sample_points_in_polygon = _samp.sample_points_in_polygon
DelaunayTriangulator = _del.DelaunayTriangulator
triangulate_points = _del.triangulate_points
StrictSkinClassifier = _bnd.StrictSkinClassifier
SequentialSkinClassifier = _bnd.SequentialSkinClassifier
filter_skin_triangles = _bnd.filter_skin_triangles

# Driver and I/O
Region = _pipe.Region
mesh_ring = _pipe.mesh_ring
mesh_region = _pipe.mesh_region
mesh_regions = _pipe.mesh_regions
read_geojson_regions = _io.read_geojson_regions
write_vtk = _io.write_vtk

# Configuration and errors
PipelineConfig = _conf.PipelineConfig
SamplingConfig = _conf.SamplingConfig
OffsetConfig = _conf.OffsetConfig
GlobeMeshError = _err.GlobeMeshError
InvalidPolygonError = _err.InvalidPolygonError
TriangulationStateError = _err.TriangulationStateError

# Tolerances
EPS_EDGE_SLOPE = _const.EPS_EDGE_SLOPE
EPS_CIRCUMCIRCLE = _const.EPS_CIRCUMCIRCLE

# Namespace submodules for exploratory users
constants = _const
geometry = _geom
projection = _proj
sampling = _samp
delaunay = _del
boundary = _bnd
pipeline = _pipe
io = _io

__all__ = [
    '__version__',
    'PointKind', 'GeoPoint', 'CartesianPoint', 'SampleSet',
    'geo_to_cartesian', 'cartesian_to_geo',
    'point_in_polygon', 'polygon_winding', 'point_segment_distance', 'offset_polygon',
    'sample_points_in_polygon', 'DelaunayTriangulator', 'triangulate_points',
    'StrictSkinClassifier', 'SequentialSkinClassifier', 'filter_skin_triangles',
    'Region', 'mesh_ring', 'mesh_region', 'mesh_regions', 'read_geojson_regions', 'write_vtk',
    'PipelineConfig', 'SamplingConfig', 'OffsetConfig',
    'GlobeMeshError', 'InvalidPolygonError', 'TriangulationStateError',
    'EPS_EDGE_SLOPE', 'EPS_CIRCUMCIRCLE',
    'constants', 'geometry', 'projection', 'sampling', 'delaunay', 'boundary', 'pipeline', 'io',
    'visualization',
]
