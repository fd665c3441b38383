from .base import StorageAdapter, StoredFile
from .cloudinary import CloudinaryStorage
from .client import CloudinaryClient
from .exceptions import ConfirmationRequired, NotFound, RemoteServiceError, StorageError
from .manager import StorageManager

__all__ = [
    "StorageAdapter",
    "StoredFile",
    "CloudinaryStorage",
    "CloudinaryClient",
    "StorageManager",
    "StorageError",
    "RemoteServiceError",
    "NotFound",
    "ConfirmationRequired",
]
