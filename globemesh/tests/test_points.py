import math

import numpy as np
import pytest

from globemesh.core.points import GeoPoint, PointKind, SampleSet, as_ring, is_finite_point


def test_geopoint_kinds():
    o = GeoPoint.original(1, 2, 3)
    assert o.boundary and not o.offset
    assert o.boundary_index == 3 and o.xy == (1.0, 2.0)
    off = GeoPoint.offset_point(1.0, 2.0)
    assert off.offset and not off.boundary and off.boundary_index is None
    plain = GeoPoint(1.0, 2.0)
    assert plain.kind is PointKind.INTERIOR
    assert not plain.boundary and not plain.offset


def test_geopoint_is_immutable():
    p = GeoPoint(0.0, 0.0)
    with pytest.raises(AttributeError):
        p.lon = 1.0


def test_as_ring_normalises_and_drops_closing_vertex():
    ring = as_ring([(0, 0), (1, 0), (1, 1), (0, 0)])
    assert [p.xy for p in ring] == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
    assert as_ring([]) == []
    keep = [GeoPoint.original(0.0, 0.0, 0)]
    assert as_ring(keep)[0] is keep[0]


def test_sample_set_views():
    s = SampleSet(points=[GeoPoint.original(0, 0, 0), GeoPoint.offset_point(1, 1), GeoPoint(2.0, 2.0)],
                  requested=3)
    assert len(s) == 3
    assert s[1].offset
    assert s.to_xy().tolist() == [[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]]
    assert s.boundary_mask().tolist() == [True, False, False]
    assert s.count(PointKind.ORIGINAL) == 1 and s.count(PointKind.INTERIOR) == 1
    assert [p.kind for p in s] == [PointKind.ORIGINAL, PointKind.OFFSET, PointKind.INTERIOR]
    assert SampleSet().to_xy().shape == (0, 2)


def test_is_finite_point():
    assert is_finite_point(GeoPoint(1.0, 2.0))
    assert not is_finite_point(GeoPoint(math.nan, 2.0))
    assert not is_finite_point(GeoPoint(np.inf, 0.0))
