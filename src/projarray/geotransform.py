"""
Geotransform handling: build CRS-aware axes from an affine geotransform and
build a geotransform back from a pair of axes.

In the common case of a "north up" image without rotation or shearing, the
GDAL georeferencing transform takes the following form::

    gt[0]  top left x
    gt[1]  w-e pixel resolution
    gt[2]  0
    gt[3]  top left y
    gt[4]  0
    gt[5]  n-s pixel resolution (negative value)
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from affine import Affine
from pydantic import BaseModel, ConfigDict, Field

from .axis import CrsAxis, shift_anchor
from .config import AxisConventions, DEFAULT_CONVENTIONS
from .errors import ConfigurationError, UnsupportedGeometryError
from .types import Anchor, AxisKind, AxisOrder, AxisSampling, Points, Regular
from .typing import CoordinateArray, CRSLike, GDALTransformTuple

logger = logging.getLogger(__name__)

GDAL_TOPLEFT_X = 0
GDAL_WE_RES = 1
GDAL_ROT1 = 2
GDAL_TOPLEFT_Y = 3
GDAL_ROT2 = 4
GDAL_NS_RES = 5

GDAL_EMPTY_TRANSFORM = (0.0, 1.0, 0.0, 0.0, 0.0, 1.0)

BuiltAxes = Tuple[CoordinateArray, CrsAxis, CoordinateArray, CrsAxis]
TransformInput = Union["GeoTransform", Affine, GDALTransformTuple, None]


class GeoTransform(BaseModel):
    """Six-coefficient affine map from pixel index to native coordinates."""

    origin_x: float = Field(..., description="X coordinate of the top-left pixel corner")
    x_step: float = Field(..., description="Pixel width (w-e resolution)")
    x_rotation: float = Field(default=0.0, description="Row rotation term")
    origin_y: float = Field(..., description="Y coordinate of the top-left pixel corner")
    y_rotation: float = Field(default=0.0, description="Column rotation term")
    y_step: float = Field(..., description="Pixel height (n-s resolution, negative for north-up)")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_gdal(cls, coefficients: GDALTransformTuple) -> "GeoTransform":
        """Create a GeoTransform from six coefficients in GDAL order."""
        values = [float(c) for c in coefficients]
        if len(values) != 6:
            raise ValueError(f"A geotransform has 6 coefficients, got {len(values)}")
        return cls(
            origin_x=values[GDAL_TOPLEFT_X],
            x_step=values[GDAL_WE_RES],
            x_rotation=values[GDAL_ROT1],
            origin_y=values[GDAL_TOPLEFT_Y],
            y_rotation=values[GDAL_ROT2],
            y_step=values[GDAL_NS_RES],
        )

    @classmethod
    def from_affine(cls, transform: Affine) -> "GeoTransform":
        """Create a GeoTransform from an ``affine.Affine`` (rasterio ordering)."""
        return cls.from_gdal(transform.to_gdal())

    @classmethod
    def empty(cls) -> "GeoTransform":
        """Identity transform used when a raster carries no georeferencing."""
        return cls.from_gdal(GDAL_EMPTY_TRANSFORM)

    def to_gdal(self) -> Tuple[float, float, float, float, float, float]:
        return (self.origin_x, self.x_step, self.x_rotation, self.origin_y, self.y_rotation, self.y_step)

    def to_affine(self) -> Affine:
        return Affine.from_gdal(*self.to_gdal())

    @property
    def is_axis_aligned(self) -> bool:
        return self.x_rotation == 0 and self.y_rotation == 0


def _coerce_transform(transform: TransformInput) -> GeoTransform:
    if transform is None:
        logger.debug("No geotransform supplied, using the empty transform")
        return GeoTransform.empty()
    if isinstance(transform, GeoTransform):
        return transform
    if isinstance(transform, Affine):
        return GeoTransform.from_affine(transform)
    return GeoTransform.from_gdal(transform)


def _validate_size(name: str, size: int) -> int:
    if int(size) != size or size <= 0:
        raise ValueError(f"{name} must be a positive integer, got {size!r}")
    return int(size)


def _realized_sequence(origin: float, step: float, size: int) -> Tuple[CoordinateArray, float]:
    # The linspace step differs from the raw coefficient by float error;
    # keep the realized one so repeated round trips do not drift.
    if size == 1:
        return np.array([origin], dtype=np.float64), step
    values, realized = np.linspace(origin, origin + step * (size - 1), size, retstep=True)
    return values, float(realized)


class GeoTransformBuilder:
    """Derive CRS-aware axes from geotransforms and back again."""

    def __init__(self, conventions: Optional[AxisConventions] = None) -> None:
        self.conventions = conventions or DEFAULT_CONVENTIONS

    # ------------------------------------------------------------------
    # Forward: geotransform -> axes
    # ------------------------------------------------------------------
    @staticmethod
    def is_axis_aligned(transform: TransformInput) -> bool:
        """True when both rotation terms are exactly zero."""
        return _coerce_transform(transform).is_axis_aligned

    def sampling_for(self, area_or_point: Optional[str]) -> AxisSampling:
        """Sampling for a raster's AREA_OR_POINT metadata value."""
        if area_or_point is not None and area_or_point.strip().lower() == "point":
            return Points()
        # GeoTIFF uses the "pixel corner" convention
        return self.conventions.default_sampling

    def build_axes(
        self,
        transform: TransformInput,
        grid_width: int,
        grid_height: int,
        native_crs: Optional[CRSLike] = None,
        display_crs: Optional[CRSLike] = None,
        area_or_point: Optional[str] = None,
    ) -> BuiltAxes:
        """
        Build longitude and latitude axes for a raster grid.

        Args:
            transform: Geotransform (GeoTransform, Affine, 6 GDAL coefficients
                or None for an ungeoreferenced raster)
            grid_width: Number of columns
            grid_height: Number of rows
            native_crs: CRS of the geotransform, None if unknown
            display_crs: CRS that selectors will be expressed in
            area_or_point: Raster AREA_OR_POINT flag ("Area", "Point" or None)

        Returns:
            Tuple (lon_values, lon_axis, lat_values, lat_axis)

        Raises:
            UnsupportedGeometryError: If the transform is rotated or sheared
            ConfigurationError: If display_crs is set without native_crs, or a step is zero
            ValueError: If a grid dimension is not a positive integer
        """
        gt = _coerce_transform(transform)
        if not gt.is_axis_aligned:
            raise UnsupportedGeometryError(
                "Rotated/sheared geotransforms are not supported "
                f"(x_rotation={gt.x_rotation}, y_rotation={gt.y_rotation})"
            )

        width = _validate_size("grid_width", grid_width)
        height = _validate_size("grid_height", grid_height)
        if gt.x_step == 0 or gt.y_step == 0:
            raise ConfigurationError(f"Geotransform has a zero pixel size: {gt.to_gdal()}")

        lon_values, lon_step = _realized_sequence(gt.origin_x, gt.x_step, width)
        lat_values, lat_step = _realized_sequence(gt.origin_y, gt.y_step, height)
        sampling = self.sampling_for(area_or_point)

        lon_axis = CrsAxis(
            order=AxisOrder.from_step(lon_step),
            span=Regular(step=lon_step),
            sampling=sampling,
            native_crs=native_crs,
            display_crs=display_crs,
        )
        lat_axis = CrsAxis(
            order=AxisOrder.from_step(lat_step),
            span=Regular(step=lat_step),
            sampling=sampling,
            native_crs=native_crs,
            display_crs=display_crs,
        )

        logger.debug(
            "Built %dx%d grid axes: lon %s..%s (%s), lat %s..%s (%s)",
            width, height,
            lon_values[0], lon_values[-1], lon_axis.order.value,
            lat_values[0], lat_values[-1], lat_axis.order.value,
        )
        return lon_values, lon_axis, lat_values, lat_axis

    def build_band_values(self, nbands: int) -> np.ndarray:
        """Band numbers 1..nbands in the configured band order."""
        count = _validate_size("nbands", nbands)
        bands = np.arange(1, count + 1)
        if self.conventions.band_order is AxisOrder.DESCENDING:
            return bands[::-1]
        return bands

    # ------------------------------------------------------------------
    # Inverse: axes -> geotransform
    # ------------------------------------------------------------------
    @staticmethod
    def build_transform(
        lat_values: Sequence[float],
        lat_step: float,
        lon_values: Sequence[float],
        lon_step: float,
    ) -> GeoTransform:
        """
        Build an axis-aligned geotransform.

        Both coordinate sequences must already represent the top-left corner
        of their first pixel (START anchor).
        """
        if len(lat_values) == 0 or len(lon_values) == 0:
            raise ValueError("Cannot build a geotransform from an empty axis")
        return GeoTransform(
            origin_x=float(lon_values[0]),
            x_step=float(lon_step),
            x_rotation=0.0,
            origin_y=float(lat_values[0]),
            y_rotation=0.0,
            y_step=float(lat_step),
        )

    def transform_from_axes(
        self,
        lon_values: Sequence[float],
        lon_axis: CrsAxis,
        lat_values: Sequence[float],
        lat_axis: CrsAxis,
    ) -> GeoTransform:
        """
        Build the geotransform for writing a lon/lat pair of axes.

        Raises:
            ConfigurationError: If an axis is not regular or does not follow the
                conventions' write order
        """
        for kind, axis in ((AxisKind.LONGITUDE, lon_axis), (AxisKind.LATITUDE, lat_axis)):
            if axis.step is None:
                raise ConfigurationError(f"{kind.value} axis must have a regular span to build a geotransform")
            expected = self.conventions.order_for(kind)
            if axis.order is not expected:
                raise ConfigurationError(
                    f"{kind.value} axis is {axis.order.value}, expected {expected.value}"
                )

        lon_start, lon_axis = shift_anchor(lon_values, lon_axis, Anchor.START)
        lat_start, lat_axis = shift_anchor(lat_values, lat_axis, Anchor.START)
        return self.build_transform(lat_start, lat_axis.step, lon_start, lon_axis.step)


_DEFAULT_BUILDER = GeoTransformBuilder()


def is_axis_aligned(transform: TransformInput) -> bool:
    return GeoTransformBuilder.is_axis_aligned(transform)


def build_axes(
    transform: TransformInput,
    grid_width: int,
    grid_height: int,
    native_crs: Optional[CRSLike] = None,
    display_crs: Optional[CRSLike] = None,
    area_or_point: Optional[str] = None,
) -> BuiltAxes:
    """:meth:`GeoTransformBuilder.build_axes` with the default conventions."""
    return _DEFAULT_BUILDER.build_axes(
        transform, grid_width, grid_height, native_crs, display_crs, area_or_point
    )


def build_transform(
    lat_values: Sequence[float],
    lat_step: float,
    lon_values: Sequence[float],
    lon_step: float,
) -> GeoTransform:
    return GeoTransformBuilder.build_transform(lat_values, lat_step, lon_values, lon_step)
