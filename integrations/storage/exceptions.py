class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class RemoteServiceError(StorageError):
    """
    Raised when Cloudinary (or the network in between) rejects a request:
    authentication, validation, rate limiting or transport failures.
    The original exception is kept as __cause__.
    """
    pass


class NotFound(StorageError):
    """Raised when a stored file cannot be fetched from its delivery URL."""
    pass


class ConfirmationRequired(StorageError):
    """Raised by clear() when the caller did not confirm the bulk deletion."""

    def __init__(self, message: str = "Clearing storage requires confirm='confirm'."):
        super().__init__(message)
