"""Service layer for business logic."""

from files_manager.services.auth_service import AuthService
from files_manager.services.file_service import FileService

__all__ = [
    "AuthService",
    "FileService",
]
