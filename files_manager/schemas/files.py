"""Pydantic schemas for file endpoints."""

from typing import Optional, Union

from pydantic import BaseModel


class UploadFileRequest(BaseModel):
    """Request model for file upload; data is base64-encoded content."""
    name: Optional[str] = None
    type: Optional[str] = None
    parentId: Union[int, str, None] = 0
    isPublic: bool = False
    data: Optional[str] = None


class FileMetadataResponse(BaseModel):
    """Response model for file metadata. parentId is the integer 0 at the root."""
    id: str
    userId: str
    name: str
    type: str
    isPublic: bool
    parentId: Union[int, str]
