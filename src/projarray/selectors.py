"""
Resolution of selection queries against CRS-aware axes.

Queries are written in the axis' display CRS. They are reprojected into the
native CRS one value at a time and then matched against the native
coordinate sequence.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Tuple

import numpy as np
from numpy.typing import ArrayLike

from .axis import CrsAxis
from .config import AxisConventions, DEFAULT_CONVENTIONS
from .errors import ConfigurationError, NoExactMatchError, OutOfBoundsError, ProjectionError
from .reproject import reproject
from .types import (
    AxisKind,
    AxisOrder,
    Contains,
    Exact,
    Intervals,
    Irregular,
    Range,
    Regular,
    ResolvedIndices,
    SelectionQuery,
)
from .typing import CoordinateArray, Reprojector

logger = logging.getLogger(__name__)


class SelectorResolver:
    """Turn display-CRS selection queries into native index positions."""

    def __init__(self, conventions: Optional[AxisConventions] = None) -> None:
        self.conventions = conventions or DEFAULT_CONVENTIONS

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def reproject_query(
        self,
        axis: CrsAxis,
        axis_kind: AxisKind,
        query: SelectionQuery,
        reproject_fn: Optional[Reprojector] = None,
    ) -> SelectionQuery:
        """
        Express ``query`` in the axis' native CRS.

        Without a display CRS the query is returned as is and ``reproject_fn``
        is never called. Range bounds are reprojected independently and are
        not re-sorted afterwards.

        Raises:
            ConfigurationError: If the axis has a display CRS but no native CRS
            ProjectionError: If reprojection fails
        """
        if axis.display_crs is None:
            return query
        if axis.native_crs is None:
            raise ConfigurationError("Cannot reproject selectors: axis has a display_crs but no native_crs")

        fn = reproject_fn or reproject
        native_values = tuple(
            self._reproject_value(fn, axis, axis_kind, value) for value in query.values
        )
        native_query = query.with_values(native_values)

        if isinstance(native_query, Range) and native_query.is_inverted and not query.is_inverted:
            logger.warning(
                "Range bounds %s became inverted after reprojection to %s; using them as given",
                query.values, native_values,
            )
        return native_query

    def resolve(
        self,
        axis: CrsAxis,
        values: ArrayLike,
        axis_kind: AxisKind,
        query: SelectionQuery,
        reproject_fn: Optional[Reprojector] = None,
    ) -> ResolvedIndices:
        """
        Resolve a selection query into positions along the native axis.

        Args:
            axis: Axis mode of the coordinate sequence
            values: Native coordinate sequence described by ``axis``
            axis_kind: Longitude or latitude, passed to the reprojector
            query: Exact, Contains or Range query in display coordinates
            reproject_fn: Reprojector to use, defaults to pyproj

        Returns:
            ResolvedIndices; scalar for Exact and Contains, possibly empty for Range

        Raises:
            NoExactMatchError: If no coordinate equals an Exact value
            OutOfBoundsError: If a Contains value is outside the axis coverage
            ConfigurationError: On inconsistent axis configuration
            ProjectionError: If reprojection fails
        """
        coords = np.asarray(values, dtype=np.float64)
        if coords.ndim != 1:
            raise ValueError(f"Axis coordinates must be one-dimensional, got shape {coords.shape}")

        native_query = self.reproject_query(axis, axis_kind, query, reproject_fn)

        if isinstance(native_query, Exact):
            resolved = self._resolve_exact(coords, native_query.value)
        elif isinstance(native_query, Contains):
            resolved = self._resolve_contains(coords, axis, native_query.value)
        elif isinstance(native_query, Range):
            resolved = self._resolve_range(coords, axis, native_query.low, native_query.high)
        else:
            raise TypeError(f"Unsupported selection query: {query!r}")

        logger.debug(
            "Resolved %s on %s axis (native %s) -> %s",
            query, axis_kind.value, native_query.values, resolved.positions,
        )
        return resolved

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _reproject_value(self, fn: Reprojector, axis: CrsAxis, axis_kind: AxisKind, value: float) -> float:
        result = list(fn(axis.display_crs, axis.native_crs, axis_kind, [value]))
        if len(result) != 1:
            raise ProjectionError(f"Reprojector returned {len(result)} values for a single input")
        return float(result[0])

    def _isclose(self, a: ArrayLike, b: float) -> np.ndarray:
        return np.isclose(a, b, **self.conventions.tolerances())

    def _resolve_exact(self, coords: CoordinateArray, value: float) -> ResolvedIndices:
        matches = np.flatnonzero(self._isclose(coords, value))
        if matches.size == 0:
            raise NoExactMatchError(f"No coordinate matches {value}")
        return ResolvedIndices(positions=(int(matches[0]),), scalar=True)

    def _resolve_contains(self, coords: CoordinateArray, axis: CrsAxis, value: float) -> ResolvedIndices:
        if coords.size == 0:
            raise OutOfBoundsError(f"{value} is outside an empty axis")

        if not isinstance(axis.sampling, Intervals):
            low, high = float(coords.min()), float(coords.max())
            inside = (low <= value <= high) or self._isclose(low, value) or self._isclose(high, value)
            if not inside:
                raise OutOfBoundsError(f"{value} is outside the axis extent [{low}, {high}]")
            return ResolvedIndices(positions=(int(np.argmin(np.abs(coords - value))),), scalar=True)

        edges = self._cell_edges(coords, axis)
        # Snap values sitting on an edge (within tolerance) onto it so float
        # error does not push them into the neighbouring cell.
        on_edge = np.flatnonzero(self._isclose(edges, value))
        if on_edge.size:
            value = float(edges[on_edge[0]])

        if edges[-1] < edges[0]:
            position = int(np.searchsorted(-edges, -value, side="right")) - 1
        else:
            position = int(np.searchsorted(edges, value, side="right")) - 1

        if not 0 <= position < coords.size:
            low, high = float(edges.min()), float(edges.max())
            raise OutOfBoundsError(f"{value} is outside the axis coverage [{low}, {high})")
        return ResolvedIndices(positions=(position,), scalar=True)

    def _resolve_range(self, coords: CoordinateArray, axis: CrsAxis, low: float, high: float) -> ResolvedIndices:
        if coords.size == 0:
            return ResolvedIndices()

        if not isinstance(axis.sampling, Intervals):
            above = (coords >= low) | self._isclose(coords, low)
            below = (coords <= high) | self._isclose(coords, high)
            selected = above & below
        else:
            cell_min, cell_max = self._cell_bounds(coords, axis)
            # a cell ending on the low bound does not intersect the range
            starts_below = (cell_min <= high) | self._isclose(cell_min, high)
            ends_above = (cell_max > low) & ~self._isclose(cell_max, low)
            selected = starts_below & ends_above

        return ResolvedIndices(positions=tuple(int(i) for i in np.flatnonzero(selected)))

    def _cell_bounds(self, coords: CoordinateArray, axis: CrsAxis) -> Tuple[np.ndarray, np.ndarray]:
        edges = self._cell_edges(coords, axis)
        starts, ends = edges[:-1], edges[1:]
        return np.minimum(starts, ends), np.maximum(starts, ends)

    def _cell_edges(self, coords: CoordinateArray, axis: CrsAxis) -> np.ndarray:
        """
        Edges of every cell along the direction of the axis.

        Cell ``i`` covers ``[edges[i], edges[i + 1])`` taken in the direction
        of the sequence, so each cell owns its start edge.
        """
        if not isinstance(axis.sampling, Intervals):
            raise ConfigurationError("Cell edges are only defined for interval-sampled axes")
        offset = axis.sampling.anchor.offset
        n = coords.size

        if isinstance(axis.span, Regular):
            step = axis.span.step
            edges = np.empty(n + 1, dtype=np.float64)
            edges[:n] = coords - offset * step
            edges[n] = edges[n - 1] + step
            return edges

        if isinstance(axis.span, Irregular):
            return _irregular_edges(coords, axis.order, offset, axis.span.bounds)

        raise ConfigurationError("Interval selectors need a regular or irregular span, the axis span is unknown")


def _irregular_edges(
    coords: CoordinateArray,
    order: AxisOrder,
    offset: float,
    bounds: Optional[Tuple[float, float]],
) -> np.ndarray:
    n = coords.size
    descending = coords[-1] < coords[0] if n >= 2 else order is AxisOrder.DESCENDING
    if bounds is not None:
        near, far = (bounds[1], bounds[0]) if descending else bounds
    elif n >= 2:
        # extrapolate the outer edges from the neighbouring steps
        first_step = coords[1] - coords[0]
        last_step = coords[-1] - coords[-2]
        near = coords[0] - offset * first_step
        far = coords[-1] + (1.0 - offset) * last_step
    else:
        raise ConfigurationError("A single-cell irregular axis needs explicit bounds")

    edges = np.empty(n + 1, dtype=np.float64)
    if math.isclose(offset, 0.0):
        edges[:n] = coords
        edges[n] = far
    elif math.isclose(offset, 1.0):
        edges[0] = near
        edges[1:] = coords
    else:
        edges[0] = near
        edges[1:n] = (coords[:-1] + coords[1:]) / 2.0
        edges[n] = far
    return edges


_DEFAULT_RESOLVER = SelectorResolver()


def reproject_query(
    axis: CrsAxis,
    axis_kind: AxisKind,
    query: SelectionQuery,
    reproject_fn: Optional[Reprojector] = None,
) -> SelectionQuery:
    return _DEFAULT_RESOLVER.reproject_query(axis, axis_kind, query, reproject_fn)


def resolve(
    axis: CrsAxis,
    values: Sequence[float],
    axis_kind: AxisKind,
    query: SelectionQuery,
    reproject_fn: Optional[Reprojector] = None,
) -> ResolvedIndices:
    """:meth:`SelectorResolver.resolve` with the default conventions."""
    return _DEFAULT_RESOLVER.resolve(axis, values, axis_kind, query, reproject_fn)
