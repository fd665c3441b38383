import cloudinary
from cloudinary import api, uploader, utils
from cloudinary.exceptions import Error as CloudinaryError
from typing import Any, Dict, Iterable, List, Optional

from utils.logger import logger
from .exceptions import RemoteServiceError


class CloudinaryClient:
    """
    Thin wrapper around the Cloudinary SDK.
    Every remote call goes through _call(), which turns SDK errors into
    RemoteServiceError so callers only deal with the storage exceptions.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def _call(self, action: str, func, *args, **options):
        if self.timeout is not None:
            options.setdefault("timeout", self.timeout)
        try:
            return func(*args, **options)
        except CloudinaryError as e:
            logger.error(f"Cloudinary {action} failed: {e}")
            raise RemoteServiceError(f"Cloudinary {action} failed: {e}") from e

    # --- Upload API ---
    def upload(self, file: Any, **options) -> Dict[str, Any]:
        return self._call("upload", uploader.upload, file, **options)

    def upload_large(self, file: Any, chunk_size: Optional[int] = None, **options) -> Dict[str, Any]:
        if chunk_size:
            options["chunk_size"] = chunk_size
        return self._call("upload_large", uploader.upload_large, file, **options)

    def rename(self, from_public_id: str, to_public_id: str, **options) -> Dict[str, Any]:
        return self._call("rename", uploader.rename, from_public_id, to_public_id, **options)

    def destroy(self, public_id: str, **options) -> Dict[str, Any]:
        return self._call("destroy", uploader.destroy, public_id, **options)

    def explicit_update(self, public_id: str, **options) -> Dict[str, Any]:
        return self._call("explicit", uploader.explicit, public_id, **options)

    # --- Admin API ---
    def resources_by_ids(self, public_ids: List[str], **options) -> Dict[str, Any]:
        return self._call("resources_by_ids", api.resources_by_ids, public_ids, **options)

    def delete_resources(self, public_ids: Iterable[str], **options) -> Dict[str, Any]:
        return self._call("delete_resources", api.delete_resources, list(public_ids), **options)

    def delete_resources_by_prefix(self, prefix: str, **options) -> Dict[str, Any]:
        return self._call("delete_resources_by_prefix", api.delete_resources_by_prefix, prefix, **options)

    def delete_all_resources(self, **options) -> Dict[str, Any]:
        return self._call("delete_all_resources", api.delete_all_resources, **options)

    # --- Local helpers (no network) ---
    def build_upload_params(self, **options) -> Dict[str, Any]:
        return utils.build_upload_params(**options)

    def cleanup_params(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return utils.cleanup_params(fields)

    def sign_request(self, fields: Dict[str, Any], api_secret: str) -> str:
        return utils.api_sign_request(fields, api_secret)

    def build_url(self, path: str, **options) -> str:
        url, _ = utils.cloudinary_url(path, **options)
        return url

    def upload_api_url(self, resource_type: str) -> str:
        return utils.cloudinary_api_url("upload", resource_type=resource_type)

    @property
    def api_key(self) -> Optional[str]:
        return cloudinary.config().api_key

    @property
    def api_secret(self) -> Optional[str]:
        return cloudinary.config().api_secret
