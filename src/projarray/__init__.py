"""projarray - CRS-aware axes and reprojecting selectors for raster arrays."""

from ._version import __version__

from .array import create_array, get_axis, geotransform, prepare_for_write, select, with_display_crs
from .axis import CrsAxis, display_crs, native_crs, reverse_axis, shift_anchor
from .config import AxisConventions, DEFAULT_CONVENTIONS
from .errors import (
    ConfigurationError,
    NoExactMatchError,
    OutOfBoundsError,
    ProjArrayError,
    ProjectionError,
    SelectionError,
    UnsupportedGeometryError,
)
from .geotransform import GeoTransform, GeoTransformBuilder, build_axes, build_transform, is_axis_aligned
from .reproject import PyprojReprojector, identity_reproject, reproject
from .selectors import SelectorResolver, reproject_query, resolve
from .types import (
    Anchor,
    AxisKind,
    AxisOrder,
    Contains,
    Exact,
    Intervals,
    Irregular,
    Points,
    Range,
    Regular,
    ResolvedIndices,
    Unknown,
)

__all__ = [
    "__version__",
    "create_array",
    "get_axis",
    "geotransform",
    "prepare_for_write",
    "select",
    "with_display_crs",
    "CrsAxis",
    "display_crs",
    "native_crs",
    "reverse_axis",
    "shift_anchor",
    "AxisConventions",
    "DEFAULT_CONVENTIONS",
    "ConfigurationError",
    "NoExactMatchError",
    "OutOfBoundsError",
    "ProjArrayError",
    "ProjectionError",
    "SelectionError",
    "UnsupportedGeometryError",
    "GeoTransform",
    "GeoTransformBuilder",
    "build_axes",
    "build_transform",
    "is_axis_aligned",
    "PyprojReprojector",
    "identity_reproject",
    "reproject",
    "SelectorResolver",
    "reproject_query",
    "resolve",
    "Anchor",
    "AxisKind",
    "AxisOrder",
    "Contains",
    "Exact",
    "Intervals",
    "Irregular",
    "Points",
    "Range",
    "Regular",
    "ResolvedIndices",
    "Unknown",
]
