"""Pydantic schemas for Upload API."""

from pydantic import BaseModel


class UploadData(BaseModel):
    """Where an uploaded file ended up."""

    url: str
    path: str
    size: int
    content_type: str


class UploadResponse(BaseModel):
    """Schema for upload response."""

    data: UploadData
