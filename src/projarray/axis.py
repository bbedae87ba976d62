"""
CRS-aware axis mode.

A :class:`CrsAxis` describes how the coordinate values of one array dimension
are ordered, spaced and sampled, and which coordinate reference systems they
relate to. When both ``native_crs`` and ``display_crs`` are set, selectors are
written in the display CRS and reprojected to the native CRS before lookup.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

import numpy as np
from numpy.typing import ArrayLike
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import ConfigurationError
from .types import Anchor, AxisOrder, AxisSampling, Intervals, Points, Regular, SpanKind, Unknown
from .typing import CoordinateArray, CRSLike

logger = logging.getLogger(__name__)


class CrsAxis(BaseModel):
    """Ordered, sampled axis carrying a native CRS and an optional display CRS."""

    order: AxisOrder = Field(default=AxisOrder.ASCENDING, description="Direction of the coordinate sequence")
    span: SpanKind = Field(default_factory=Unknown, description="Spacing between coordinates")
    sampling: AxisSampling = Field(default_factory=Points, description="Point or interval semantics")
    native_crs: Optional[CRSLike] = Field(None, description="CRS of the stored coordinate values")
    display_crs: Optional[CRSLike] = Field(None, description="CRS used by selectors and presentation")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode='after')
    def validate_crs_pair(self):
        """Reprojection needs both ends, so a display CRS requires a native CRS."""
        if self.display_crs is not None and self.native_crs is None:
            raise ConfigurationError(
                f"display_crs {self.display_crs!r} was given but native_crs is unknown"
            )
        return self

    @model_validator(mode='after')
    def validate_step_direction(self):
        """A regular step must run in the direction of the axis order."""
        if isinstance(self.span, Regular) and AxisOrder.from_step(self.span.step) is not self.order:
            raise ConfigurationError(
                f"Axis order {self.order.value} disagrees with regular step {self.span.step}"
            )
        return self

    def with_overrides(self, **overrides: Any) -> "CrsAxis":
        """
        Return a new axis with some fields replaced.

        Args:
            **overrides: Any of ``order``, ``span``, ``sampling``,
                ``native_crs`` and ``display_crs``

        Returns:
            A new, validated CrsAxis. The original is left untouched.

        Raises:
            TypeError: If an unknown field name is given
            ConfigurationError: If the result has a display CRS but no native CRS
        """
        field_names = type(self).model_fields
        unknown = sorted(set(overrides) - set(field_names))
        if unknown:
            raise TypeError(f"Unknown CrsAxis fields: {', '.join(unknown)}")

        fields = {name: getattr(self, name) for name in field_names}
        fields.update(overrides)
        return type(self)(**fields)

    @property
    def step(self) -> Optional[float]:
        """Regular step, or None for irregular and unknown spans."""
        return self.span.step if isinstance(self.span, Regular) else None

    @property
    def is_intervals(self) -> bool:
        return isinstance(self.sampling, Intervals)

    @property
    def anchor(self) -> Optional[Anchor]:
        return self.sampling.anchor if isinstance(self.sampling, Intervals) else None

    @property
    def reprojects(self) -> bool:
        """True when selectors go through a reprojection step."""
        return self.display_crs is not None


def native_crs(axis: CrsAxis) -> Optional[CRSLike]:
    """CRS the raw coordinate values are expressed in."""
    return axis.native_crs


def display_crs(axis: CrsAxis) -> Optional[CRSLike]:
    """CRS that selectors are expressed in, if any."""
    return axis.display_crs


def shift_anchor(values: ArrayLike, axis: CrsAxis, anchor: Anchor) -> Tuple[CoordinateArray, CrsAxis]:
    """
    Move interval coordinates so they represent another part of each cell.

    Args:
        values: Coordinate sequence described by ``axis``
        axis: Axis mode of the sequence
        anchor: Anchor the returned coordinates should represent

    Returns:
        Tuple of shifted coordinates and the rebuilt axis. Point-sampled
        axes are returned unchanged.

    Raises:
        ConfigurationError: If the axis is interval-sampled without a regular span
    """
    coords = np.asarray(values, dtype=np.float64)
    if not isinstance(axis.sampling, Intervals):
        return coords, axis
    if axis.sampling.anchor is anchor:
        return coords, axis

    step = axis.step
    if step is None:
        raise ConfigurationError(
            f"Cannot shift interval anchor on an axis with {axis.span.kind} span"
        )

    offset = (anchor.offset - axis.sampling.anchor.offset) * step
    logger.debug("Shifting axis anchor %s -> %s (offset %s)", axis.sampling.anchor.value, anchor.value, offset)
    return coords + offset, axis.with_overrides(sampling=Intervals(anchor=anchor))


def reverse_axis(values: ArrayLike, axis: CrsAxis) -> Tuple[CoordinateArray, CrsAxis]:
    """
    Reverse a coordinate sequence and its axis mode.

    The step changes sign, so START and END anchors swap to keep describing
    the same cells.
    """
    coords = np.asarray(values, dtype=np.float64)[::-1]

    span = axis.span
    if isinstance(span, Regular):
        span = Regular(step=-span.step)

    sampling = axis.sampling
    if isinstance(sampling, Intervals) and sampling.anchor is not Anchor.CENTER:
        flipped = Anchor.END if sampling.anchor is Anchor.START else Anchor.START
        sampling = Intervals(anchor=flipped)

    return coords, axis.with_overrides(order=axis.order.reverse(), span=span, sampling=sampling)

