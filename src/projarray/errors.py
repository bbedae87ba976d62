"""Custom exception hierarchy for projarray."""

from typing import Optional


class ProjArrayError(Exception):
    """Base exception for projarray library."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class ConfigurationError(ProjArrayError):
    """Invalid axis construction or axis configuration."""
    pass


class UnsupportedGeometryError(ProjArrayError):
    """Geotransform is rotated or sheared."""
    pass


class ProjectionError(ProjArrayError):
    """A reprojection call failed."""
    pass


class SelectionError(ProjArrayError):
    """A selector could not be satisfied by the axis coverage."""
    pass


class NoExactMatchError(SelectionError):
    """No coordinate matches the requested value."""
    pass


class OutOfBoundsError(SelectionError):
    """The requested value lies outside the covered extent."""
    pass
