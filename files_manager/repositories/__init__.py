"""Repository layer for data access."""

from files_manager.repositories.user_repository import User, UserRepository
from files_manager.repositories.file_repository import File, FileRepository

__all__ = [
    "User",
    "UserRepository",
    "File",
    "FileRepository",
]
