"""Exception types raised by globemesh.

Degenerate geometry (collinear triples, duplicate points, zero-length
edges) is absorbed silently by the algorithms; only precondition and
contract violations raise.
"""
from __future__ import annotations


class GlobeMeshError(Exception):
    """Base class for all globemesh errors."""


class InvalidPolygonError(GlobeMeshError, ValueError):
    """A ring is unusable for sampling or triangulation (fewer than 3 vertices)."""


class TriangulationStateError(GlobeMeshError, RuntimeError):
    """A triangulator was used outside its constructed -> inserting -> finalized lifecycle."""


__all__ = ['GlobeMeshError', 'InvalidPolygonError', 'TriangulationStateError']
