"""Custom exceptions for the delve engine."""


class DelveError(Exception):
    """Base exception for engine errors."""

    pass


class InvalidCoordinateError(DelveError, IndexError):
    """Raised when writing to a grid position outside its extent.

    Always a local/global translation bug in the caller.
    """

    pass


class GenerationError(DelveError):
    """Raised when random generation runs out of eligible cells or attempts."""

    pass
