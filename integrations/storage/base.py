import shutil
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, Iterable, Optional

from utils.schemas import UploadResult


@dataclass
class StoredFile:
    """
    A file that already lives in some storage, identified by its id there.
    This is the handle an attachment library passes back into upload() when
    promoting a file from one storage to another.
    """
    id: str
    storage: "StorageAdapter"
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> Optional[int]:
        return self.metadata.get("size")

    def url(self, **options) -> Optional[str]:
        return self.storage.url(self.id, **options)

    def open(self) -> BinaryIO:
        return self.storage.open(self.id)

    def download(self):
        return self.storage.download(self.id)


class StorageAdapter(ABC):
    """
    Abstract base class for a storage provider.
    This defines the contract that all storage implementations must follow.
    """

    @abstractmethod
    def upload(self, source: Any, id: str, metadata: Optional[Dict[str, Any]] = None,
               upload_options: Optional[Dict[str, Any]] = None) -> UploadResult:
        """
        Uploads content to the storage provider.

        Args:
            source: Bytes, a file-like object, a local path, or a StoredFile from any storage.
            id (str): The requested identifier of the file.
            metadata (dict): Metadata already known about the file.
            upload_options (dict): Provider-specific options for this call only.

        Returns:
            UploadResult: The final id, the updated metadata and the provider response.
        """
        pass

    @abstractmethod
    def open(self, id: str) -> BinaryIO:
        """
        Opens the stored file for reading.

        Raises:
            NotFound: If the file does not exist.
        """
        pass

    @abstractmethod
    def exists(self, id: str) -> bool:
        pass

    @abstractmethod
    def delete(self, id: str) -> None:
        """
        Deletes the file. Deleting a missing file is not an error.
        """
        pass

    @abstractmethod
    def url(self, id: str, **options) -> Optional[str]:
        pass

    @abstractmethod
    def clear(self, confirm: Optional[str] = None, **options) -> None:
        """
        Deletes every file in the storage. Requires confirm="confirm".
        """
        pass

    def multi_delete(self, ids: Iterable[str]) -> None:
        for id in ids:
            self.delete(id)

    def download(self, id: str):
        """
        Copies the stored file into a named temporary file, rewound and ready to read.
        """
        tempfile_ = tempfile.NamedTemporaryFile(prefix="media-storage-")
        stream = self.open(id)
        try:
            shutil.copyfileobj(stream, tempfile_, 8192)
        finally:
            stream.close()
        tempfile_.seek(0)
        return tempfile_

    def read(self, id: str) -> bytes:
        stream = self.open(id)
        try:
            return stream.read()
        finally:
            stream.close()
