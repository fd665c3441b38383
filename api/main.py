import posixpath
import uuid
from typing import Optional

from fastapi import FastAPI, HTTPException, Query

import config
from integrations.storage import StorageManager
from utils.logger import logger
from utils.schemas import Presign

config.configure_cloudinary()

app = FastAPI()

storage_manager = StorageManager()


def _storage(tier: str):
    if tier not in storage_manager:
        raise HTTPException(status_code=404, detail=f"Storage tier '{tier}' not found.")
    return storage_manager.get(tier)


# --- Routes ---
@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.get("/presign", response_model=Presign, tags=["Direct Uploads"])
def presign_upload(filename: Optional[str] = None, tier: str = "cache"):
    """
    Returns the form fields for uploading a file straight to Cloudinary.
    The id is random and keeps the extension of the given filename.
    """
    storage = _storage(tier)
    extension = posixpath.splitext(filename or "")[1]
    id = f"{uuid.uuid4().hex}{extension}"
    logger.info(f"Presigning direct upload of {id} into '{tier}'.")
    return storage.presign(id)


@app.get("/files/{tier}/{id:path}/url", tags=["Delivery"])
def file_url(
    tier: str,
    id: str,
    width: Optional[int] = Query(None, gt=0),
    height: Optional[int] = Query(None, gt=0),
    crop: Optional[str] = None,
):
    storage = _storage(tier)
    options = {"width": width, "height": height, "crop": crop}
    options = {k: v for k, v in options.items() if v is not None}
    return {"id": id, "url": storage.url(id, **options)}
