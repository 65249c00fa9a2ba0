"""Exceptions raised by the layout engine."""


class LayoutError(Exception):
    """Base class for layout engine errors."""


class InvalidDatasetError(LayoutError, ValueError):
    """Input items cannot be turned into target fractions."""


class LayoutNotReadyError(LayoutError):
    """A drag operation was requested before any layout finished."""
