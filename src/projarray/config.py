"""Configuration describing axis conventions and selector tolerances."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .types import AxisKind, AxisOrder, AxisSampling, Intervals, Anchor


class AxisConventions(BaseModel):
    """Conventions used when building axes from, and back to, a geotransform."""

    lon_order: AxisOrder = Field(
        default=AxisOrder.ASCENDING, description="Expected order of longitude when writing"
    )
    lat_order: AxisOrder = Field(
        default=AxisOrder.DESCENDING, description="Expected order of latitude when writing (north-up)"
    )
    band_order: AxisOrder = Field(
        default=AxisOrder.ASCENDING, description="Order of band values"
    )
    default_sampling: AxisSampling = Field(
        default_factory=lambda: Intervals(anchor=Anchor.START),
        description="Sampling used unless the raster declares point sampling",
    )
    exact_rtol: float = Field(
        default=1e-9, ge=0, description="Relative tolerance for exact coordinate matches"
    )
    exact_atol: float = Field(
        default=1e-9, ge=0, description="Absolute tolerance for exact matches and cell edges"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "AxisConventions":
        """Build conventions from a plain mapping, e.g. a parsed settings file."""

        return cls.model_validate(dict(values))

    # ------------------------------------------------------------------
    # Helper accessors
    # ------------------------------------------------------------------
    def order_for(self, axis_kind: AxisKind) -> AxisOrder:
        """Write order for a horizontal axis kind."""

        if axis_kind is AxisKind.LONGITUDE:
            return self.lon_order
        return self.lat_order

    def tolerances(self) -> Dict[str, float]:
        """Keyword arguments for ``numpy.isclose``."""

        return {"rtol": self.exact_rtol, "atol": self.exact_atol}


DEFAULT_CONVENTIONS = AxisConventions()
