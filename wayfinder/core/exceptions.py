"""Exceptions raised by the Wayfinder core."""

from typing import Optional


class WayfinderError(Exception):
    """Base class for all Wayfinder errors."""
    pass


class ValidationError(WayfinderError):
    """
    Raised when caller input is rejected before any computation.

    Attributes:
        field: Name of the offending input field
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class DataUnavailableError(WayfinderError):
    """Raised when the trip/photo store cannot be read."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(message)
