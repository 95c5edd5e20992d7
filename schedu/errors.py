"""
Exceptions raised by the schedu library.
"""


class ScheduError(Exception):
    """Base class for all library errors."""


class FetchError(ScheduError):
    """The HTTP request failed (network error or non-success status)."""


class DecodeError(ScheduError, ValueError):
    """The response body is not usable JSON (invalid, null or wrong shape)."""


class InvalidArgument(ScheduError, ValueError):
    """Unknown entity kind, or a name that does not resolve to an id."""
