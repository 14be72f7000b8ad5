"""Manages raw upload bytes and derived variants on disk."""

import uuid
from pathlib import Path
from typing import Optional

from files_manager.config import FOLDER_PATH


class ArtifactStorage:
    """
    Blob store keyed by opaque local paths.

    Paths are allocated here and never derived from user input.
    """

    def __init__(self, root: str = FOLDER_PATH):
        self.root = Path(root)

    def ensure_root(self) -> None:
        """Ensure the storage directory exists."""
        self.root.mkdir(parents=True, exist_ok=True)

    def allocate_path(self) -> str:
        """
        Allocate a fresh, unguessable path for a new upload.

        Returns:
            Absolute path string under the storage root
        """
        return str(self.root / str(uuid.uuid4()))

    @staticmethod
    def variant_path(local_path: str, width: Optional[int] = None) -> str:
        """
        Get the path of a size variant.

        Args:
            local_path: Path of the original bytes
            width: Variant width, or None for the original

        Returns:
            "<local_path>_<width>" or local_path itself
        """
        if width is None:
            return local_path
        return f"{local_path}_{width}"

    def write(self, path: str, data: bytes) -> None:
        """
        Write bytes to disk.

        Raises:
            OSError: If write operation fails
        """
        self.ensure_root()
        Path(path).write_bytes(data)

    def read(self, path: str) -> bytes:
        """
        Read stored bytes.

        Raises:
            FileNotFoundError: If nothing is stored at path
        """
        return Path(path).read_bytes()

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def delete(self, path: str) -> bool:
        """
        Delete stored bytes.

        Returns:
            True if the file was deleted, False if it didn't exist
        """
        filepath = Path(path)
        if filepath.exists():
            filepath.unlink()
            return True
        return False
