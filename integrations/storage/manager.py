from typing import Dict, Optional

import config
from utils.logger import logger
from .cloudinary import CloudinaryStorage


class StorageManager:
    """
    Holds one Cloudinary storage per tier (e.g. "cache" for fresh uploads and
    "store" for promoted files), each under its own prefix.
    """
    def __init__(self, tiers: Optional[Dict[str, Optional[str]]] = None, **storage_options):
        tiers = config.STORAGE_TIERS if tiers is None else tiers
        options = {
            "resource_type": config.STORAGE_RESOURCE_TYPE,
            "delivery_type": config.STORAGE_DELIVERY_TYPE,
            "large": config.STORAGE_LARGE_FILE_THRESHOLD,
            "chunk_size": config.STORAGE_CHUNK_SIZE,
            "store_data": config.STORAGE_STORE_DATA,
            "timeout": config.CLOUDINARY_TIMEOUT,
        }
        options.update(storage_options)

        self.storages: Dict[str, CloudinaryStorage] = {
            name: CloudinaryStorage(prefix=prefix, **options) for name, prefix in tiers.items()
        }
        logger.info(f"StorageManager initialized. Tiers: {list(self.storages.keys())}")

    def get(self, name: str) -> CloudinaryStorage:
        if name not in self.storages:
            raise KeyError(f"Unknown storage tier: {name}")
        return self.storages[name]

    def __contains__(self, name: str) -> bool:
        return name in self.storages
