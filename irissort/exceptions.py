"""
Exception hierarchy for irissort.

Expected per-file outcomes (unsupported content, undetermined timestamps,
duplicates) are reported as values, not exceptions.
"""


class IrisSortError(Exception):
    """Base exception for all irissort errors."""
    pass


class PreconditionError(IrisSortError):
    """Raised when an input or output directory is missing or inaccessible."""
    pass


class DestinationDirectoryError(IrisSortError):
    """Raised when a destination directory cannot be created."""
    pass


class CollisionLimitError(IrisSortError):
    """Raised when no free destination name is found for a file."""
    pass
