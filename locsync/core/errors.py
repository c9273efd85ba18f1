"""LocSync – Fatal error conditions.

Every failure below aborts the whole run. Language files already written
are left in place.
"""


class SyncError(Exception):
    """Base class for all fatal synchronization errors."""
    pass


class FetchError(SyncError):
    """Raised when the upstream platform cannot be reached or answers with an error."""
    pass


class UpstreamFormatError(SyncError):
    """Raised when upstream data does not have the expected shape."""
    pass


class LocaleFileError(SyncError):
    """Raised when a local locale file is not a single-rooted mapping."""
    pass


class ReferenceMissingError(SyncError):
    """Raised when the reference language file is absent from the destination."""
    pass


class CacheError(SyncError):
    """Raised when the upstream cache file is unreadable or of an unknown version."""
    pass
