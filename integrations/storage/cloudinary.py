import posixpath
from typing import Any, BinaryIO, Dict, Iterable, Optional

import requests

from utils.logger import logger
from utils.schemas import Presign, ResourceType, UploadResult
from .base import StorageAdapter, StoredFile
from .client import CloudinaryClient
from .exceptions import ConfirmationRequired, NotFound, RemoteServiceError
from .mime_types import MIME_TYPES
from .sources import LocalSource, MovableSource, RemoteSource, resolve_source

CONFIRM = "confirm"
# Metadata key holding the whole Cloudinary response when store_data is on.
PROVIDER_DATA = "provider_data"


class CloudinaryStorage(StorageAdapter):
    """
    Storage adapter for Cloudinary.
    Maps storage ids to Cloudinary public ids under an optional prefix and
    normalizes Cloudinary responses into file metadata.

    Args:
        prefix (str): Folder every id is stored under, e.g. "cache" or "store".
        resource_type (str): "image", "video" or "raw".
        delivery_type (str): Cloudinary delivery type, e.g. "upload" or "authenticated".
        large (int): Size in bytes from which local files are uploaded in chunks.
        chunk_size (int): Default chunk size for chunked uploads.
        store_data (bool): Keep the whole Cloudinary response under metadata["provider_data"].
        upload_options (dict): Upload parameters applied to every upload.
        timeout (float): Seconds before Cloudinary requests and downloads give up.
        client (CloudinaryClient): The remote API wrapper; created when omitted.
    """

    def __init__(
        self,
        prefix: Optional[str] = None,
        resource_type: str = "image",
        delivery_type: str = "upload",
        large: Optional[int] = None,
        chunk_size: Optional[int] = None,
        store_data: bool = False,
        upload_options: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
        client: Optional[CloudinaryClient] = None,
    ):
        self.prefix = prefix
        self.resource_type = ResourceType(resource_type)
        self.delivery_type = delivery_type
        self.large = large
        self.chunk_size = chunk_size
        self.store_data = store_data
        self.upload_options = dict(upload_options or {})
        self.timeout = timeout
        self.client = client or CloudinaryClient(timeout=timeout)

    @property
    def type(self) -> str:
        return self.upload_options.get("type") or self.delivery_type

    def upload(self, source: Any, id: str, metadata: Optional[Dict[str, Any]] = None,
               upload_options: Optional[Dict[str, Any]] = None, move: bool = False) -> UploadResult:
        """
        Uploads a file to Cloudinary.

        Files from other storages that have a URL are fetched by Cloudinary
        directly. Files already in Cloudinary are renamed when move=True and
        copied by URL otherwise. Everything else is sent from here, in chunks
        once it reaches the `large` threshold.

        Returns:
            UploadResult: The id with the extension Cloudinary actually stored,
            the derived metadata and the raw response.
        """
        options = self._upload_options(id, upload_options)
        chunk_size = options.pop("chunk_size", None) or self.chunk_size
        resolved = resolve_source(source, self.movable)

        if isinstance(resolved, MovableSource) and move:
            return self.move(resolved.file, id, metadata)

        try:
            if isinstance(resolved, MovableSource):
                logger.info(f"Copying Cloudinary file {resolved.file.id} to {options['public_id']}...")
                response = self.client.upload(resolved.file.url(), **options)
            elif isinstance(resolved, RemoteSource):
                logger.info(f"Uploading {resolved.url} to Cloudinary as {options['public_id']}...")
                response = self.client.upload(resolved.url, **options)
            elif self._large(resolved):
                logger.info(f"Uploading {options['public_id']} to Cloudinary in chunks ({resolved.size} bytes)...")
                response = self.client.upload_large(resolved.file, chunk_size=chunk_size, **options)
            else:
                logger.info(f"Uploading {options['public_id']} to Cloudinary...")
                response = self.client.upload(resolved.file, **options)
        finally:
            if isinstance(resolved, LocalSource) and resolved.downloaded:
                resolved.file.close()

        return self._result(response, id, metadata)

    def movable(self, source: Any) -> bool:
        return (
            isinstance(source, StoredFile)
            and isinstance(source.storage, CloudinaryStorage)
            and source.storage.resource_type is self.resource_type
        )

    def move(self, source: StoredFile, id: str, metadata: Optional[Dict[str, Any]] = None) -> UploadResult:
        """
        Renames a file already stored in Cloudinary instead of uploading it again.
        """
        if not self.movable(source):
            raise ValueError(f"Cannot move {source!r} into Cloudinary storage; it is not a Cloudinary file.")

        from_public_id = source.storage.public_id(source.id)
        to_public_id = self.public_id(id)
        logger.info(f"Renaming Cloudinary file {from_public_id} to {to_public_id}...")
        response = self.client.rename(
            from_public_id,
            to_public_id,
            resource_type=self.resource_type.value,
            type=source.storage.type,
            to_type=self.type,
        )
        if metadata is None:
            metadata = source.metadata
        return self._result(response, id, metadata)

    def update(self, id: str, **options) -> Dict[str, Any]:
        """
        Re-applies upload options (tags, eager transformations, ...) to a stored file.
        """
        public_id = self.public_id(id)
        logger.info(f"Updating Cloudinary file {public_id} with {sorted(options)}...")
        update_options = {"resource_type": self.resource_type.value, "type": self.type}
        update_options.update(options)
        response = self.client.explicit_update(public_id, **update_options)
        return dict(response)

    def open(self, id: str) -> BinaryIO:
        url = self.url(id)
        try:
            response = requests.get(url, stream=True, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to download {url} from Cloudinary: {e}")
            raise RemoteServiceError(f"Failed to download {url}: {e}") from e

        if response.status_code == 404:
            response.close()
            raise NotFound(f"File {id} was not found at {url}")

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            response.close()
            logger.error(f"Failed to download {url} from Cloudinary: {e}")
            raise RemoteServiceError(f"Failed to download {url}: {e}") from e

        response.raw.decode_content = True
        return response.raw

    def exists(self, id: str) -> bool:
        result = self.client.resources_by_ids(
            [self.public_id(id)],
            resource_type=self.resource_type.value,
            type=self.type,
        )
        return len(result.get("resources", [])) > 0

    def delete(self, id: str) -> None:
        public_id = self.public_id(id)
        result = self.client.destroy(public_id, resource_type=self.resource_type.value, type=self.type)
        if result.get("result") == "not found":
            logger.info(f"Cloudinary file {public_id} was already deleted.")

    def multi_delete(self, ids: Iterable[str]) -> None:
        public_ids = [self.public_id(id) for id in ids]
        if not public_ids:
            return
        self.client.delete_resources(public_ids, resource_type=self.resource_type.value, type=self.type)

    def url(self, id: str, **options) -> str:
        url_options = {"resource_type": self.resource_type.value, "type": self.type}
        url_options.update(options)
        url_options["secure"] = True
        return self.client.build_url(self.path(id), **url_options)

    def clear(self, confirm: Optional[str] = None, **options) -> None:
        """
        Deletes every file under the prefix or, without a prefix, every file of
        this resource type in the whole Cloudinary account.

        Raises:
            ConfirmationRequired: Unless called with confirm="confirm".
        """
        if confirm != CONFIRM:
            raise ConfirmationRequired()

        scope = {"resource_type": self.resource_type.value, "type": self.type}
        scope.update(options)

        while True:
            if self.prefix:
                logger.warning(f"Deleting all Cloudinary files under '{self.prefix}/'.")
                result = self.client.delete_resources_by_prefix(f"{self.prefix}/", **scope)
            else:
                logger.warning(f"Deleting all Cloudinary {self.resource_type.value} files.")
                result = self.client.delete_all_resources(**scope)
            # Cloudinary deletes in batches and flags the rest as "partial".
            if not result.get("partial") or not result.get("next_cursor"):
                break
            scope["next_cursor"] = result["next_cursor"]

    def presign(self, id: Optional[str] = None, **options) -> Presign:
        """
        Builds signed form fields for uploading straight from the browser.

        Without an id Cloudinary picks the public id inside the prefix folder.
        """
        params: Dict[str, Any] = {"type": self.type}
        if id is not None:
            params["public_id"] = self.public_id(id)
        elif self.prefix:
            params["folder"] = self.prefix
        params.update(self.upload_options)
        params.update(options)
        params.pop("chunk_size", None)

        # build_upload_params stamps the timestamp; booleans are signed as "1"/"0".
        fields = self.client.cleanup_params(self.client.build_upload_params(**params))

        api_secret = self.client.api_secret
        if not api_secret:
            raise ValueError("Cloudinary api_secret must be configured to presign uploads.")

        fields["signature"] = self.client.sign_request(fields, api_secret)
        fields["api_key"] = self.client.api_key

        return Presign(method="post", url=self.client.upload_api_url(self.resource_type.value), fields=fields)

    def public_id(self, id: str) -> str:
        if self.resource_type is ResourceType.RAW:
            return self.path(id)
        root, _ = posixpath.splitext(id)
        return self.path(root)

    def path(self, id: str) -> str:
        return f"{self.prefix}/{id}" if self.prefix else id

    def _upload_options(self, id: str, upload_options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        # Precedence: call options > adapter upload_options > defaults.
        options = {
            "public_id": self.public_id(id),
            "resource_type": self.resource_type.value,
            "type": self.delivery_type,
        }
        options.update(self.upload_options)
        options.update(upload_options or {})
        return options

    def _large(self, source: LocalSource) -> bool:
        return self.large is not None and source.size is not None and source.size >= self.large

    def _result(self, response: Dict[str, Any], id: str, metadata: Optional[Dict[str, Any]]) -> UploadResult:
        response = dict(response)
        return UploadResult(
            id=self._final_id(response, id),
            metadata=self._metadata(response, metadata),
            response=response,
        )

    def _final_id(self, response: Dict[str, Any], id: str) -> str:
        public_id = response.get("public_id")
        if not public_id:
            return id

        if self.prefix and public_id.startswith(f"{self.prefix}/"):
            public_id = public_id[len(self.prefix) + 1:]

        format = response.get("format")
        if format and self.resource_type is not ResourceType.RAW:
            public_id = f"{public_id}.{format}"
        return public_id

    def _metadata(self, response: Dict[str, Any], metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        retrieved = {
            "size": response.get("bytes"),
            "mime_type": MIME_TYPES.get(response.get("format")),
            "width": response.get("width"),
            "height": response.get("height"),
        }
        result = dict(metadata or {})
        result.update({key: value for key, value in retrieved.items() if value is not None})
        if self.store_data:
            result[PROVIDER_DATA] = response
        return result
