# config.py
import cloudinary

from core.config_loader import raw_config, as_bool, as_int
from utils.logger import logger

# --- Cloudinary credentials ---
CLOUDINARY_CLOUD_NAME = raw_config.get("cloudinary_cloud_name")
CLOUDINARY_API_KEY = raw_config.get("cloudinary_api_key")
CLOUDINARY_API_SECRET = raw_config.get("cloudinary_api_secret")
# Seconds; applies to API calls and to downloads of delivered files.
CLOUDINARY_TIMEOUT = as_int(raw_config.get("cloudinary_timeout"), default=60)

# --- Storage adapter settings ---
STORAGE_RESOURCE_TYPE = raw_config.get("storage_resource_type", "image")
STORAGE_DELIVERY_TYPE = raw_config.get("storage_delivery_type", "upload")
# Files at or above this many bytes are sent with chunked uploads.
STORAGE_LARGE_FILE_THRESHOLD = as_int(raw_config.get("storage_large_file_threshold"), default=100 * 1024 * 1024)
STORAGE_CHUNK_SIZE = as_int(raw_config.get("storage_chunk_size"), default=20 * 1024 * 1024)
STORAGE_STORE_DATA = as_bool(raw_config.get("storage_store_data", False))

# Tier name -> prefix. YAML may provide a mapping; otherwise the usual cache/store pair.
STORAGE_TIERS = raw_config.get("storage_tiers")
if not isinstance(STORAGE_TIERS, dict):
    STORAGE_TIERS = {"cache": "cache", "store": "store"}


def configure_cloudinary():
    """
    Pushes the configured credentials into the Cloudinary SDK.
    Unset values are skipped so a CLOUDINARY_URL environment variable still applies.
    """
    settings = {
        "cloud_name": CLOUDINARY_CLOUD_NAME,
        "api_key": CLOUDINARY_API_KEY,
        "api_secret": CLOUDINARY_API_SECRET,
    }
    settings = {k: v for k, v in settings.items() if v}
    if not settings:
        logger.warning("Cloudinary credentials are not configured. Relying on CLOUDINARY_URL.")
        return
    cloudinary.config(secure=True, **settings)
    logger.info(f"Cloudinary configured for cloud '{cloudinary.config().cloud_name}'.")
