"""Exceptions raised by the photo organizer."""


class PhotoOrganizerError(Exception):
    """Base class for photo organizer errors."""


class ConfigError(PhotoOrganizerError, ValueError):
    """Raised for invalid configuration values."""


class DirectoryNotFoundError(PhotoOrganizerError, FileNotFoundError):
    """Raised when a directory to scan does not exist."""


class OperationCancelled(PhotoOrganizerError):
    """Raised when a run is stopped through its cancellation token."""


class OperationFailedError(PhotoOrganizerError):
    """Raised when a file operation fails and the batch is aborted.

    The original ``OSError`` is available as ``__cause__``.
    """

    def __init__(self, operation, error: Exception):
        self.operation = operation
        self.source_path = operation.source_path
        self.destination_path = operation.destination_path
        super().__init__(
            f"Failed to {operation.operation_type.value} "
            f"{operation.source_path} -> {operation.destination_path}: {error}"
        )
