"""File schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from memberfiles.core.access.model import ObjectType, Visibility


class FileCreate(BaseModel):
    """Metadata for a new file record."""
    object_type: ObjectType
    object_id: str = Field(..., min_length=1, max_length=64)
    filename: str = Field(..., min_length=1, max_length=255)
    original_name: str = Field(..., min_length=1, max_length=255)
    mime_type: str = Field(..., min_length=1, max_length=127)
    size: int = Field(..., ge=0)
    visibility: Optional[Visibility] = None  # Falls back to the configured default
    owner_id: Optional[str] = Field(None, max_length=64)
    storage_key: Optional[str] = Field(None, max_length=512)


class FileSummary(BaseModel):
    """File as returned by listings."""
    id: str
    object_type: ObjectType
    object_id: str
    filename: str
    original_name: str
    mime_type: str
    size: int
    visibility: Visibility
    uploaded_by_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
