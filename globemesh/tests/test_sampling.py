import numpy as np
import pytest

from globemesh.core.config import OffsetConfig, SamplingConfig
from globemesh.core.errors import GlobeMeshError, InvalidPolygonError
from globemesh.core.geometry import bounding_box, is_away_from_edges, point_in_polygon
from globemesh.core.points import PointKind
from globemesh.core.sampling import make_rng, sample_points_in_polygon

from .helpers import circle_ring


def test_square_keeps_originals_then_interior(square, rng):
    samples = sample_points_in_polygon(square, 8, rng=rng)
    assert len(samples) == 8
    assert not samples.undersampled
    originals = samples.points[:4]
    assert [p.kind for p in originals] == [PointKind.ORIGINAL] * 4
    assert [p.boundary_index for p in originals] == [0, 1, 2, 3]
    assert [p.xy for p in originals] == square
    interior = samples.points[4:]
    assert all(p.kind is PointKind.INTERIOR for p in interior)
    assert all(point_in_polygon(p, square) for p in interior)
    assert samples.count(PointKind.OFFSET) == 0


def test_same_seed_same_samples(l_shape):
    a = sample_points_in_polygon(l_shape, 60, rng=np.random.default_rng(7))
    b = sample_points_in_polygon(l_shape, 60, rng=np.random.default_rng(7))
    assert np.array_equal(a.to_xy(), b.to_xy())
    c = sample_points_in_polygon(l_shape, 60, config=SamplingConfig(seed=7))
    assert np.array_equal(a.to_xy(), c.to_xy())


def test_interior_points_respect_concavity(l_shape, rng):
    samples = sample_points_in_polygon(l_shape, 300, rng=rng)
    xy = samples.to_xy()[len(l_shape):]
    # nothing may land in the notch of the L
    assert not np.any((xy[:, 0] > 4.0) & (xy[:, 1] > 4.0))


def test_target_below_vertex_count_returns_originals(l_shape, rng):
    samples = sample_points_in_polygon(l_shape, 2, rng=rng)
    assert len(samples) == len(l_shape)
    assert samples.attempts == 0
    assert not samples.undersampled


@pytest.mark.parametrize('ring', [[], [(0.0, 0.0)], [(0.0, 0.0), (1.0, 1.0)]])
def test_too_few_vertices_raises(ring):
    with pytest.raises(InvalidPolygonError):
        sample_points_in_polygon(ring, 10)
    # also catchable as ValueError and as the package base error
    with pytest.raises(ValueError):
        sample_points_in_polygon(ring, 10)
    with pytest.raises(GlobeMeshError):
        sample_points_in_polygon(ring, 10)


def test_closing_vertex_is_not_duplicated(square, rng):
    closed = square + [square[0]]
    samples = sample_points_in_polygon(closed, 4, rng=rng)
    assert samples.count(PointKind.ORIGINAL) == 4


def test_attempt_budget_flags_undersampled(square, rng):
    cfg = SamplingConfig(max_attempts=10)
    samples = sample_points_in_polygon(square, 1000, rng=rng, config=cfg)
    assert samples.undersampled
    assert samples.attempts == 10
    assert len(samples) <= 4 + 10
    assert samples.requested == 1000

    none = sample_points_in_polygon(square, 50, rng=rng, config=SamplingConfig(max_attempts=0))
    assert none.undersampled
    assert len(none) == 4


def test_large_ring_gets_offset_points(rng):
    ring = circle_ring(10.0, 20.0, 5.0, 150)
    samples = sample_points_in_polygon(ring, 400, rng=rng)
    kinds = [p.kind for p in samples]
    n_off = samples.count(PointKind.OFFSET)
    assert n_off > 100
    # originals, then offsets, then interior
    assert kinds[:150] == [PointKind.ORIGINAL] * 150
    assert kinds[150:150 + n_off] == [PointKind.OFFSET] * n_off
    assert all(k is PointKind.INTERIOR for k in kinds[150 + n_off:])
    offsets = [p for p in samples if p.offset]
    assert all(point_in_polygon(p, ring) for p in offsets)
    min_lon, min_lat, max_lon, max_lat = bounding_box(offsets)
    for p in samples.points[150 + n_off:]:
        assert min_lon <= p.lon <= max_lon
        assert min_lat <= p.lat <= max_lat


def test_offset_threshold_is_configurable(rng):
    ring = circle_ring(0.0, 0.0, 3.0, 40)
    cfg = SamplingConfig(offset_vertex_threshold=10, offset=OffsetConfig(distance=100.0))
    samples = sample_points_in_polygon(ring, 100, rng=rng, config=cfg)
    assert samples.count(PointKind.OFFSET) > 0
    plain = sample_points_in_polygon(ring, 100, rng=rng)
    assert plain.count(PointKind.OFFSET) == 0


def test_min_edge_distance_filters_candidates(square, rng):
    cfg = SamplingConfig(min_edge_distance=100_000.0)
    samples = sample_points_in_polygon(square, 40, rng=rng, config=cfg)
    assert len(samples) == 40
    for p in samples.points[4:]:
        assert is_away_from_edges(p, square, min_distance=100_000.0)


def test_make_rng_passthrough():
    gen = np.random.default_rng(3)
    assert make_rng(gen) is gen
    a = make_rng(seed=11).random(3)
    b = make_rng(seed=11).random(3)
    assert np.array_equal(a, b)
