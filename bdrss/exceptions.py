"""
Exceptions raised by bdrss.
"""


class BdrssError(Exception):
    """Base class for all bdrss errors."""


class FetchError(BdrssError):
    """Raised when the proxy cannot deliver the rendered page."""


class ExtractionError(BdrssError):
    """Raised when the fetched markup cannot be turned into articles."""


class WriteError(BdrssError):
    """Raised when the feed file cannot be written."""
