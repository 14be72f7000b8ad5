"""Job handlers for the thumbnail and welcome-notification pipelines."""

import asyncio
from typing import Any, Dict, Iterable, List

from common.constants import IMAGE, THUMBNAIL_WIDTHS
from common.logging_config import get_logger
from files_manager.artifact_storage import ArtifactStorage
from files_manager.database import parse_id
from files_manager.exceptions import (
    ArtifactNotFoundError,
    JobFileNotFoundError,
    JobPayloadError,
    JobUserNotFoundError,
)
from files_manager.pipeline.thumbnails import render_thumbnails
from files_manager.repositories.file_repository import FileRepository
from files_manager.repositories.user_repository import UserRepository

logger = get_logger(__name__)


def _require_id(payload: Dict[str, Any], field: str) -> int:
    if payload.get(field) is None:
        raise JobPayloadError(f"Missing {field}")
    value = parse_id(payload[field])
    if value is None:
        raise JobPayloadError(f"Invalid {field}")
    return value


class ThumbnailJobHandler:
    """
    Produces resized variants of an uploaded image.

    Runs with owner authority: the file is looked up by {id, owner},
    without consulting read access rules.
    """

    def __init__(
        self,
        file_repo: FileRepository,
        artifacts: ArtifactStorage,
        widths: Iterable[int] = THUMBNAIL_WIDTHS,
    ):
        self.file_repo = file_repo
        self.artifacts = artifacts
        self.widths = tuple(widths)

    async def __call__(self, payload: Dict[str, Any]) -> str:
        file_id = _require_id(payload, "fileId")
        owner_id = _require_id(payload, "userId")

        file = self.file_repo.get_file(file_id, owner_id=owner_id)
        if file is None or file.local_path is None:
            raise JobFileNotFoundError()

        try:
            data = await asyncio.to_thread(self.artifacts.read, file.local_path)
        except FileNotFoundError:
            raise ArtifactNotFoundError(f"No stored data for file {file_id}")

        if file.type != IMAGE:
            return f"No thumbnails needed for {file.name}."

        thumbnails = await asyncio.to_thread(render_thumbnails, data, self.widths)

        written: List[str] = []
        write = asyncio.ensure_future(
            asyncio.to_thread(self._write_variants, file.local_path, thumbnails, written)
        )
        try:
            await asyncio.shield(write)
        except asyncio.CancelledError:
            # the write thread cannot be interrupted; undo its output once it returns
            await asyncio.wait({write})
            self._remove_variants(written)
            logger.warning(f"Thumbnail job for file {file_id} cancelled, removed {len(written)} variants")
            raise

        return f"Thumbnails for {file.name} created successfully."

    def _write_variants(self, local_path: str, thumbnails: Dict[int, bytes], written: List[str]) -> None:
        try:
            for width, content in thumbnails.items():
                path = self.artifacts.variant_path(local_path, width)
                self.artifacts.write(path, content)
                written.append(path)
        except OSError:
            self._remove_variants(written)
            raise

    def _remove_variants(self, paths: List[str]) -> None:
        for path in paths:
            self.artifacts.delete(path)


class WelcomeJobHandler:
    """Greets newly registered users."""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def __call__(self, payload: Dict[str, Any]) -> str:
        user_id = _require_id(payload, "userId")

        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise JobUserNotFoundError()

        return f"Welcome {user.email}!"
