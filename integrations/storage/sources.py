# integrations/storage/sources.py
import io
import os
import re
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Optional, Union

from .base import StoredFile

REMOTE_URL = re.compile(r"^(ftp:|https?:)")


@dataclass(frozen=True)
class LocalSource:
    """Bytes that have to be sent to Cloudinary by us."""
    file: Union[str, BinaryIO]
    size: Optional[int]
    # Temporary copy made by resolve_source; the uploader closes it.
    downloaded: bool = False


@dataclass(frozen=True)
class RemoteSource:
    """A file Cloudinary can fetch by itself from a URL."""
    url: str


@dataclass(frozen=True)
class MovableSource:
    """A file already stored in Cloudinary, which can be renamed server-side."""
    file: StoredFile


Source = Union[LocalSource, RemoteSource, MovableSource]


def is_remote_url(value: Any) -> bool:
    return isinstance(value, str) and REMOTE_URL.match(value) is not None


def io_size(file: BinaryIO) -> Optional[int]:
    """
    Returns the number of bytes left in a file-like object, or None when it
    cannot be determined without consuming the stream.
    """
    size = getattr(file, "size", None)
    if isinstance(size, int):
        return size
    try:
        position = file.tell()
        file.seek(0, os.SEEK_END)
        end = file.tell()
        file.seek(position)
        return end - position
    except (AttributeError, OSError, ValueError):
        return None


def resolve_source(source: Any, movable: Callable[[Any], bool]) -> Source:
    """
    Decides once how an upload source reaches Cloudinary.

    Args:
        source: Bytes, a file-like object, a local path, a URL or a StoredFile.
        movable: Predicate telling whether a StoredFile lives in Cloudinary already.
    """
    if isinstance(source, StoredFile):
        if movable(source):
            return MovableSource(source)
        url = source.url()
        if is_remote_url(url):
            return RemoteSource(url)
        downloaded = source.download()
        return LocalSource(downloaded, io_size(downloaded), downloaded=True)

    if isinstance(source, (bytes, bytearray, memoryview)):
        return LocalSource(io.BytesIO(bytes(source)), len(source))
    if is_remote_url(source):
        return RemoteSource(source)
    if isinstance(source, (str, os.PathLike)):
        path = os.fspath(source)
        return LocalSource(path, os.path.getsize(path))
    if hasattr(source, "read"):
        return LocalSource(source, io_size(source))

    raise TypeError(f"Cannot upload object of type {type(source).__name__}")
