"""Per-polygon error kinds. All are recoverable: the batch driver records them and moves on."""

from __future__ import annotations


class SamplingError(ValueError):
    """Base class for errors scoped to one polygon row."""


class MalformedPolygonError(SamplingError):
    """Ring has fewer than 3 distinct vertices, zero area, or the geometry text is unusable."""


class SeedPlacementFailedError(SamplingError):
    """No initial point inside the polygon within max_seed_attempts."""


class EmptyPolygonSetError(SamplingError):
    """Batch has zero polygon rows."""
