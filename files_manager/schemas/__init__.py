"""Pydantic schemas for API requests and responses."""

from files_manager.schemas.app import StatusResponse, StatsResponse
from files_manager.schemas.common import ErrorResponse
from files_manager.schemas.files import FileMetadataResponse, UploadFileRequest
from files_manager.schemas.users import ConnectResponse, RegisterRequest, UserResponse

__all__ = [
    "StatusResponse",
    "StatsResponse",
    "ErrorResponse",
    "FileMetadataResponse",
    "UploadFileRequest",
    "ConnectResponse",
    "RegisterRequest",
    "UserResponse",
]
