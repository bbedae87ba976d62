# pyright: reportUnknownMemberType=false, reportUnknownArgumentType=false, reportUnknownVariableType=false

"""High-level helpers binding CRS-aware axes to ``xarray.DataArray``."""

from __future__ import annotations

import logging
from typing import Any, Dict, Hashable, Mapping, Optional, Tuple, Union

import numpy as np
import xarray as xr
from pyproj import CRS as ProjCRS
from pyproj.exceptions import CRSError

from .axis import CrsAxis, reverse_axis
from .config import AxisConventions, DEFAULT_CONVENTIONS
from .geotransform import GeoTransform, GeoTransformBuilder, TransformInput
from .selectors import SelectorResolver
from .types import AxisKind, Contains, Exact, Range, SelectionQuery
from .typing import CRSLike, Reprojector

logger = logging.getLogger(__name__)

LON_DIM = "lon"
LAT_DIM = "lat"
BAND_DIM = "band"
AXIS_ATTR = "crs_axis"

SPATIAL_DIMS: Dict[str, AxisKind] = {
    LON_DIM: AxisKind.LONGITUDE,
    LAT_DIM: AxisKind.LATITUDE,
}


def create_array(
    data: Any,
    transform: TransformInput,
    native_crs: Optional[CRSLike] = None,
    *,
    display_crs: Optional[CRSLike] = None,
    area_or_point: Optional[str] = None,
    name: Optional[Hashable] = None,
    attrs: Optional[Mapping[str, Any]] = None,
    conventions: Optional[AxisConventions] = None,
) -> xr.DataArray:
    """
    Wrap raster data in a DataArray with CRS-aware ``lon``/``lat`` axes.

    Args:
        data: Array of shape (height, width) or (bands, height, width). NumPy
            and Dask arrays are used as is.
        transform: Geotransform of the raster, None if it has none
        native_crs: CRS of the geotransform, None if unknown
        display_crs: CRS that selectors will be written in
        area_or_point: Raster AREA_OR_POINT flag
        name: Name of the array
        attrs: Extra array attributes
        conventions: Axis conventions, defaults to ``DEFAULT_CONVENTIONS``

    Returns:
        xarray.DataArray with dims ("lat", "lon") or ("band", "lat", "lon")

    Raises:
        ValueError: If the data is not 2- or 3-dimensional
        UnsupportedGeometryError: If the transform is rotated or sheared
    """
    builder = GeoTransformBuilder(conventions)
    values = data if hasattr(data, "shape") and hasattr(data, "ndim") else np.asarray(data)

    if values.ndim == 2:
        height, width = values.shape
        dims: Tuple[str, ...] = (LAT_DIM, LON_DIM)
    elif values.ndim == 3:
        nbands, height, width = values.shape
        dims = (BAND_DIM, LAT_DIM, LON_DIM)
    else:
        raise ValueError(f"Raster data must be 2- or 3-dimensional, got shape {values.shape}")

    lon_values, lon_axis, lat_values, lat_axis = builder.build_axes(
        transform, width, height, native_crs, display_crs, area_or_point
    )

    coords: Dict[str, Any] = {
        LAT_DIM: (LAT_DIM, lat_values, {AXIS_ATTR: lat_axis}),
        LON_DIM: (LON_DIM, lon_values, {AXIS_ATTR: lon_axis}),
    }
    if values.ndim == 3:
        coords[BAND_DIM] = builder.build_band_values(nbands)

    array_attrs: Dict[str, Any] = {}
    if native_crs is not None:
        array_attrs["crs"] = _crs_to_string(native_crs)
    if area_or_point is not None:
        array_attrs["area_or_point"] = area_or_point
    if attrs:
        array_attrs.update(attrs)

    return xr.DataArray(values, coords=coords, dims=dims, name=name, attrs=array_attrs)


def get_axis(array: xr.DataArray, dim: str) -> CrsAxis:
    """Return the CrsAxis attached to coordinate ``dim``."""

    if dim not in array.coords:
        raise KeyError(f"Array has no coordinate {dim!r}")
    axis = array.coords[dim].attrs.get(AXIS_ATTR)
    if not isinstance(axis, CrsAxis):
        raise KeyError(f"Coordinate {dim!r} has no CRS axis attached")
    return axis


def with_display_crs(array: xr.DataArray, display_crs: Optional[CRSLike]) -> xr.DataArray:
    """Return a copy of ``array`` whose spatial axes use ``display_crs`` for selectors."""

    updates: Dict[str, Any] = {}
    for dim in SPATIAL_DIMS:
        if dim not in array.coords:
            continue
        axis = get_axis(array, dim).with_overrides(display_crs=display_crs)
        updates[dim] = _rebuild_coord(array.coords[dim], axis)
    return array.assign_coords(updates)


def select(
    array: xr.DataArray,
    *,
    reprojector: Optional[Reprojector] = None,
    resolver: Optional[SelectorResolver] = None,
    **queries: SelectionQuery,
) -> xr.DataArray:
    """
    Select from ``array`` with Exact/Contains/Range queries per dimension.

    ``lon`` and ``lat`` queries are written in the axes' display CRS and are
    resolved through :class:`SelectorResolver`; other dimensions use plain
    xarray label selection.

    Examples:
        >>> subset = select(arr, lon=Range(low=113, high=153), lat=Range(low=-43, high=-10))
        >>> pixel = select(arr, lon=Contains(value=144.9), lat=Contains(value=-37.8))
    """
    resolver = resolver or SelectorResolver()

    indexers: Dict[str, Union[int, slice, list]] = {}
    label_queries: Dict[str, SelectionQuery] = {}
    for dim, query in queries.items():
        if not isinstance(query, (Exact, Contains, Range)):
            raise TypeError(f"Selector for {dim!r} must be Exact, Contains or Range, got {query!r}")
        if dim in SPATIAL_DIMS:
            axis = get_axis(array, dim)
            resolved = resolver.resolve(axis, array.coords[dim].values, SPATIAL_DIMS[dim], query, reprojector)
            indexers[dim] = resolved.to_indexer()
        else:
            label_queries[dim] = query

    result = array.isel(indexers) if indexers else array
    for dim, query in label_queries.items():
        result = _select_labels(result, dim, query)
    return result


def prepare_for_write(
    array: xr.DataArray,
    conventions: Optional[AxisConventions] = None,
) -> Tuple[xr.DataArray, GeoTransform]:
    """
    Reorder an array to the write conventions and compute its geotransform.

    Spatial dims are moved last as (..., lat, lon); any spatial axis running
    against the conventions is reversed along with its data.

    Returns:
        Tuple of the reordered array and its geotransform

    Raises:
        ValueError: If the array lacks a lat or lon dimension
        ConfigurationError: If an axis is not regular
    """
    conventions = conventions or DEFAULT_CONVENTIONS
    missing = [dim for dim in (LAT_DIM, LON_DIM) if dim not in array.dims]
    if missing:
        raise ValueError(f"Array must have lat and lon dims, missing {missing}")

    ordered = array.transpose(..., LAT_DIM, LON_DIM)
    for dim, kind in SPATIAL_DIMS.items():
        axis = get_axis(ordered, dim)
        expected = conventions.order_for(kind)
        if axis.order is expected:
            continue
        logger.debug("Reversing %s axis from %s to %s for writing", dim, axis.order.value, expected.value)
        values, reversed_axis = reverse_axis(ordered.coords[dim].values, axis)
        ordered = ordered.isel({dim: slice(None, None, -1)})
        ordered = ordered.assign_coords({dim: (dim, values, {**ordered.coords[dim].attrs, AXIS_ATTR: reversed_axis})})

    builder = GeoTransformBuilder(conventions)
    transform = builder.transform_from_axes(
        ordered.coords[LON_DIM].values,
        get_axis(ordered, LON_DIM),
        ordered.coords[LAT_DIM].values,
        get_axis(ordered, LAT_DIM),
    )
    return ordered, transform


def geotransform(array: xr.DataArray, conventions: Optional[AxisConventions] = None) -> GeoTransform:
    """Geotransform ``array`` would be written with."""

    return prepare_for_write(array, conventions)[1]


def _rebuild_coord(coord: xr.DataArray, axis: CrsAxis) -> Tuple[Tuple[Hashable, ...], np.ndarray, Dict[str, Any]]:
    return coord.dims, coord.values, {**coord.attrs, AXIS_ATTR: axis}


def _select_labels(array: xr.DataArray, dim: str, query: SelectionQuery) -> xr.DataArray:
    if isinstance(query, Exact):
        return array.sel({dim: query.value})
    if isinstance(query, Contains):
        return array.sel({dim: query.value}, method="nearest")
    return array.sel({dim: slice(query.low, query.high)})


def _crs_to_string(crs: CRSLike) -> str:
    try:
        return ProjCRS.from_user_input(crs).to_wkt()
    except CRSError:
        logger.debug("pyproj cannot parse CRS %r, storing it verbatim", crs)
        return str(crs)
