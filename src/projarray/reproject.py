"""
Reprojection of single-axis coordinates between coordinate reference systems.

Each axis is reprojected on its own: a longitude value is paired with a fixed
reference latitude (and the reverse for latitude) to make the two-coordinate
call, and the companion output is discarded. This is exact only when the two
axes transform independently of each other, which holds for the common
cylindrical projections (e.g. EPSG:4326 <-> EPSG:3857) but not in general.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np
from pyproj import Transformer
from pyproj.exceptions import ProjError

from .errors import ProjectionError
from .types import AxisKind
from .typing import CRSLike

logger = logging.getLogger(__name__)


class PyprojReprojector:
    """Reprojector backed by ``pyproj.Transformer``.

    A transformer is built on every call; nothing is cached between calls.
    """

    def __init__(self, reference: float = 0.0) -> None:
        self.reference = float(reference)

    def __call__(
        self,
        source_crs: Optional[CRSLike],
        target_crs: Optional[CRSLike],
        axis_kind: AxisKind,
        values: Sequence[float],
    ) -> List[float]:
        if source_crs is None or target_crs is None:
            return [float(v) for v in values]

        coords = np.asarray(values, dtype=np.float64)
        if coords.size == 0:
            return []
        companion = np.full_like(coords, self.reference)

        try:
            transformer = Transformer.from_crs(source_crs, target_crs, always_xy=True)
        except ProjError as exc:
            raise ProjectionError(
                f"Cannot build a transformation from {source_crs!r} to {target_crs!r}: {exc}",
                cause=exc,
            ) from exc

        if axis_kind is AxisKind.LONGITUDE:
            xs, ys = coords, companion
        else:
            xs, ys = companion, coords

        try:
            out_x, out_y = transformer.transform(xs, ys, errcheck=True)
        except ProjError as exc:
            raise ProjectionError(f"Reprojection of {axis_kind.value} values failed: {exc}", cause=exc) from exc

        result = np.asarray(out_x if axis_kind is AxisKind.LONGITUDE else out_y, dtype=np.float64)
        if not np.all(np.isfinite(result)):
            raise ProjectionError(
                f"Reprojection of {axis_kind.value} values {coords.tolist()} produced non-finite output"
            )

        logger.debug(
            "Reprojected %s %s -> %s: %s -> %s",
            axis_kind.value, source_crs, target_crs, coords.tolist(), result.tolist(),
        )
        return result.tolist()


def identity_reproject(
    source_crs: Optional[CRSLike],
    target_crs: Optional[CRSLike],
    axis_kind: AxisKind,
    values: Sequence[float],
) -> List[float]:
    """Reprojector that returns its input unchanged."""
    return [float(v) for v in values]


_DEFAULT_REPROJECTOR = PyprojReprojector()


def reproject(
    source_crs: Optional[CRSLike],
    target_crs: Optional[CRSLike],
    axis_kind: AxisKind,
    values: Sequence[float],
) -> List[float]:
    """
    Reproject axis values from ``source_crs`` to ``target_crs``.

    Args:
        source_crs: CRS the values are expressed in
        target_crs: CRS to convert to
        axis_kind: Whether the values are longitude-like or latitude-like
        values: Coordinates to convert

    Returns:
        One converted value per input value, in the same order. If either
        CRS is None the values are returned unchanged.

    Raises:
        ProjectionError: If pyproj rejects the CRS pair or the coordinates
    """
    return _DEFAULT_REPROJECTOR(source_crs, target_crs, axis_kind, values)
