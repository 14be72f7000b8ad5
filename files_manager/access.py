"""Read access decision for file content."""

from typing import Optional

from files_manager.repositories.file_repository import File


def can_read(actor_id: Optional[int], file: File) -> bool:
    """
    Decide whether an actor may read a file's content.

    Public files are readable by anyone, including anonymous callers.
    Private files are readable only by their owner.
    """
    if file.is_public:
        return True
    return actor_id is not None and actor_id == file.owner_id
