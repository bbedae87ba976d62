"""
Value types describing CRS-aware axes and the selectors used against them.
"""

from typing import Annotated, List, Literal, Optional, Tuple, Union
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AxisOrder(str, Enum):
    """Direction of a coordinate sequence."""
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def reverse(self) -> "AxisOrder":
        """Return the opposite order."""
        if self is AxisOrder.ASCENDING:
            return AxisOrder.DESCENDING
        return AxisOrder.ASCENDING

    @classmethod
    def from_step(cls, step: float) -> "AxisOrder":
        """Order implied by the sign of a step."""
        return cls.DESCENDING if step < 0 else cls.ASCENDING


class Anchor(str, Enum):
    """Which part of an interval a coordinate value stands for."""
    START = "start"
    CENTER = "center"
    END = "end"

    @property
    def offset(self) -> float:
        """Fraction of a step between the interval start and this anchor."""
        return {Anchor.START: 0.0, Anchor.CENTER: 0.5, Anchor.END: 1.0}[self]


class AxisKind(str, Enum):
    """Which horizontal coordinate an axis holds."""
    LONGITUDE = "longitude"
    LATITUDE = "latitude"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# Sampling


class Points(_FrozenModel):
    """Each coordinate is an exact sample location."""
    kind: Literal["points"] = "points"


class Intervals(_FrozenModel):
    """Each coordinate marks one edge (or the centre) of a cell."""
    kind: Literal["intervals"] = "intervals"
    anchor: Anchor = Field(default=Anchor.START, description="Position of the coordinate inside the cell")


AxisSampling = Annotated[Union[Points, Intervals], Field(discriminator="kind")]


# Span


class Regular(_FrozenModel):
    """A single step separates all consecutive coordinates."""
    kind: Literal["regular"] = "regular"
    step: float = Field(..., description="Signed distance between consecutive coordinates")

    @model_validator(mode='after')
    def validate_step(self):
        """A zero step cannot describe a coordinate sequence."""
        if self.step == 0:
            raise ValueError('step must be non-zero')
        return self


class Irregular(_FrozenModel):
    """Steps vary and must be looked up per interval."""
    kind: Literal["irregular"] = "irregular"
    bounds: Optional[Tuple[float, float]] = Field(
        None, description="Outer (min, max) extent covered by the axis"
    )


class Unknown(_FrozenModel):
    """The span has not been determined yet."""
    kind: Literal["unknown"] = "unknown"


SpanKind = Annotated[Union[Regular, Irregular, Unknown], Field(discriminator="kind")]


# Selection queries


class Exact(_FrozenModel):
    """Select the coordinate equal to ``value``."""
    kind: Literal["exact"] = "exact"
    value: float

    @property
    def values(self) -> Tuple[float, ...]:
        return (self.value,)

    def with_values(self, values: Tuple[float, ...]) -> "Exact":
        (value,) = values
        return Exact(value=value)


class Contains(_FrozenModel):
    """Select the point or cell that contains ``value``."""
    kind: Literal["contains"] = "contains"
    value: float

    @property
    def values(self) -> Tuple[float, ...]:
        return (self.value,)

    def with_values(self, values: Tuple[float, ...]) -> "Contains":
        (value,) = values
        return Contains(value=value)


class Range(_FrozenModel):
    """Select every point or cell intersecting the closed range ``[low, high]``.

    Bounds are kept as given, so an inverted range (``high < low``) is a
    valid query that usually selects nothing.
    """
    kind: Literal["range"] = "range"
    low: float
    high: float

    @property
    def values(self) -> Tuple[float, ...]:
        return (self.low, self.high)

    @property
    def is_inverted(self) -> bool:
        return self.high < self.low

    def with_values(self, values: Tuple[float, ...]) -> "Range":
        low, high = values
        return Range(low=low, high=high)


SelectionQuery = Annotated[Union[Exact, Contains, Range], Field(discriminator="kind")]


class ResolvedIndices(_FrozenModel):
    """Native positions produced by resolving a selection query."""
    positions: Tuple[int, ...] = Field(default_factory=tuple, description="Positions in ascending order")
    scalar: bool = Field(default=False, description="True for single-position queries (Exact, Contains)")

    @model_validator(mode='after')
    def validate_scalar(self):
        """A scalar result holds exactly one position."""
        if self.scalar and len(self.positions) != 1:
            raise ValueError('scalar result must hold exactly one position')
        return self

    def __len__(self) -> int:
        return len(self.positions)

    @property
    def is_empty(self) -> bool:
        return not self.positions

    def to_indexer(self) -> Union[int, slice, List[int]]:
        """
        Convert to an indexer accepted by ``xarray.DataArray.isel``.

        Returns:
            An ``int`` for scalar results, a ``slice`` for contiguous runs
            (including the empty run), otherwise a list of positions.
        """
        if self.scalar:
            return self.positions[0]
        if not self.positions:
            return slice(0, 0)
        first, last = self.positions[0], self.positions[-1]
        if last - first + 1 == len(self.positions):
            return slice(first, last + 1)
        return list(self.positions)
