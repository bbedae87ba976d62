"""Type aliases and protocols for projarray."""

from typing import TypeAlias, Protocol, Sequence, Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

# Anything pyproj.CRS.from_user_input accepts: "EPSG:4326", 4326, WKT, pyproj.CRS...
CRSLike: TypeAlias = Any
CoordinateArray: TypeAlias = NDArray[np.float64]
GDALTransformTuple: TypeAlias = Sequence[float]  # GDAL coefficient order, length 6


class Reprojector(Protocol):
    """Protocol for functions that move axis coordinates between CRSs.

    Implementations return one value per input value, in the same order, and
    keep no state between calls.
    """

    def __call__(
        self,
        source_crs: CRSLike,
        target_crs: CRSLike,
        axis_kind: "AxisKind",
        values: Sequence[float],
    ) -> Sequence[float]:
        ...


if TYPE_CHECKING:
    from .types import AxisKind
