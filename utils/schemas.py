# utils/schemas.py
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class ResourceType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    RAW = "raw"


class UploadResult(BaseModel):
    """
    Outcome of an upload or move: the id the file is now stored under,
    the metadata derived from the Cloudinary response, and the response itself.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    response: Dict[str, Any] = Field(default_factory=dict)


class Presign(BaseModel):
    """
    Everything a browser needs to POST a file directly to Cloudinary.
    """
    model_config = ConfigDict(frozen=True)

    method: str = "post"
    url: str
    fields: Dict[str, Any]
