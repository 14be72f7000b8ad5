"""File service for business logic."""

import asyncio
import base64
import binascii
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from common.constants import FILE_TYPES, FOLDER, IMAGE, ROOT_PARENT_ID, THUMBNAIL_WIDTHS
from common.logging_config import get_logger
from files_manager.access import can_read
from files_manager.artifact_storage import ArtifactStorage
from files_manager.database import parse_id
from files_manager.exceptions import (
    ArtifactNotFoundError,
    ArtifactStorageError,
    InvalidDataError,
    MissingDataError,
    MissingNameError,
    MissingTypeError,
    NotFoundError,
    ParentNotFolderError,
    ParentNotFoundError,
    UnsupportedOperationError,
)
from files_manager.pipeline.queue import JobPipeline
from files_manager.repositories.file_repository import File, FileRepository

logger = get_logger(__name__)


def normalize_parent_id(value) -> int:
    """
    Parent filter for listings: absent or invalid values mean the root.
    """
    if value is None:
        return ROOT_PARENT_ID
    parent_id = parse_id(value)
    return ROOT_PARENT_ID if parent_id is None else parent_id


def normalize_page(value) -> int:
    """
    Page number for listings: anything but a non-negative integer means page 0.
    """
    page = parse_id(value) if value is not None else None
    return page or 0


def parse_size(value) -> Optional[int]:
    """
    Thumbnail width requested for a content fetch, or None for the original.
    """
    width = parse_id(value) if value is not None else None
    if width in THUMBNAIL_WIDTHS:
        return width
    return None


class FileService:
    def __init__(
        self,
        file_repo: FileRepository,
        artifacts: ArtifactStorage,
        thumbnail_pipeline: Optional[JobPipeline] = None,
    ):
        self.file_repo = file_repo
        self.artifacts = artifacts
        self.thumbnail_pipeline = thumbnail_pipeline

    async def create_file(
        self,
        owner_id: int,
        name: Optional[str],
        file_type: Optional[str],
        parent_id=ROOT_PARENT_ID,
        is_public: bool = False,
        data: Optional[str] = None,
    ) -> File:
        """
        Validate and store a new folder, file or image.

        Args:
            owner_id: Id of the uploading user
            name: File name
            file_type: One of folder, file, image
            parent_id: Root sentinel or the id of an existing folder
            is_public: Initial visibility
            data: Base64-encoded content, required unless file_type is folder

        Returns:
            The created File

        Raises:
            ValidationError: Missing name, type or data, or a bad parent
            ArtifactStorageError: Content could not be written
        """
        if not name:
            raise MissingNameError()
        if file_type not in FILE_TYPES:
            raise MissingTypeError()

        content = None
        if file_type != FOLDER:
            if not data:
                raise MissingDataError()
            try:
                content = base64.b64decode(data, validate=True)
            except (binascii.Error, ValueError):
                raise InvalidDataError()

        resolved_parent_id = self._resolve_parent(parent_id)

        local_path = self.artifacts.allocate_path() if content is not None else None
        file = self.file_repo.create_file(
            name=name,
            file_type=file_type,
            parent_id=resolved_parent_id,
            owner_id=owner_id,
            is_public=bool(is_public),
            local_path=local_path,
            created_at=datetime.now(timezone.utc),
        )

        if content is None:
            logger.info(f"Folder created [file_id={file.id}] [owner_id={owner_id}]")
            return file

        try:
            await asyncio.to_thread(self.artifacts.write, local_path, content)
        except OSError as e:
            logger.error(f"Failed to store data for file {file.id}, removing record: {e}", exc_info=True)
            self.file_repo.delete_file(file.id)
            self.artifacts.delete(local_path)
            raise ArtifactStorageError()

        if self.thumbnail_pipeline is not None:
            self.thumbnail_pipeline.enqueue({"fileId": file.id, "userId": owner_id})

        logger.info(f"File uploaded [file_id={file.id}] [owner_id={owner_id}] type={file_type} size={len(content)}")
        return file

    def _resolve_parent(self, parent_id) -> int:
        if parent_id in (None, "", ROOT_PARENT_ID, str(ROOT_PARENT_ID)):
            return ROOT_PARENT_ID

        resolved = parse_id(parent_id)
        parent = self.file_repo.get_file(resolved) if resolved is not None else None
        if parent is None:
            raise ParentNotFoundError()
        if not parent.is_folder:
            raise ParentNotFolderError()
        return parent.id

    def get_file(self, file_id, owner_id: int) -> File:
        resolved = parse_id(file_id)
        file = self.file_repo.get_file(resolved, owner_id=owner_id) if resolved is not None else None
        if file is None:
            raise NotFoundError()
        return file

    def set_visibility(self, file_id, owner_id: int, is_public: bool) -> File:
        """
        Publish or unpublish a file.

        Files owned by someone else are reported as not found.
        """
        resolved = parse_id(file_id)
        if resolved is None or not self.file_repo.set_visibility(resolved, owner_id, is_public):
            raise NotFoundError()

        file = self.file_repo.get_file(resolved, owner_id=owner_id)
        if file is None:
            raise NotFoundError()

        logger.info(f"File {'published' if is_public else 'unpublished'} [file_id={resolved}] [owner_id={owner_id}]")
        return file

    def list_files(self, owner_id: int, parent_id=None, page=None) -> List[File]:
        return self.file_repo.list_files(
            owner_id=owner_id,
            parent_id=normalize_parent_id(parent_id),
            page=normalize_page(page),
        )

    def get_content_path(self, file_id, actor_id: Optional[int], size=None) -> Tuple[File, str]:
        """
        Locate the bytes to serve for a content fetch.

        Checks run in order and the first failure wins: existence, read
        access, folder, stored bytes. Denied access is reported as not found.

        Returns:
            The file and the path of its original bytes or requested variant
        """
        resolved = parse_id(file_id)
        file = self.file_repo.get_file(resolved) if resolved is not None else None
        if file is None:
            raise NotFoundError()

        if not can_read(actor_id, file):
            logger.debug(f"Read denied [file_id={file.id}] [actor_id={actor_id}]")
            raise NotFoundError()

        if file.is_folder:
            raise UnsupportedOperationError()

        width = parse_size(size) if file.type == IMAGE else None
        path = self.artifacts.variant_path(file.local_path, width)
        if not self.artifacts.exists(path):
            raise ArtifactNotFoundError()

        return file, path
