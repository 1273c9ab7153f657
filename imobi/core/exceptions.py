"""Error taxonomy for the property store and dashboard."""


class StoreError(Exception):
    """Base exception for all property store errors."""


class PermissionDeniedError(StoreError):
    """Raised when the backing store rejects an operation for authorization reasons."""


class NotFoundError(StoreError):
    """Raised when the target property does not exist."""


class WriteFailedError(StoreError):
    """Raised when a write could not be completed by the backing store."""


class StoreUnavailableError(WriteFailedError):
    """Raised when the backing store cannot be reached."""


class PartialClearError(WriteFailedError):
    """Raised when a chunked clear fails after some chunks were committed."""

    def __init__(self, message: str, removed: int) -> None:
        super().__init__(message)
        self.removed = removed


class OperationRefusedError(StoreError):
    """Raised when the current backend mode refuses an operation."""


class EmptyExportError(Exception):
    """Raised when an export is requested over an empty view."""


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing."""
