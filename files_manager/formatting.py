"""Wire representation of stored entities."""

from typing import Any, Dict, Union

from common.constants import ROOT_PARENT_ID
from files_manager.repositories.file_repository import File
from files_manager.repositories.user_repository import User


def format_parent_id(parent_id: int) -> Union[int, str]:
    # root stays the literal 0, real parents render as strings like every other id
    if parent_id == ROOT_PARENT_ID:
        return ROOT_PARENT_ID
    return str(parent_id)


def format_file(file: File) -> Dict[str, Any]:
    return {
        "id": str(file.id),
        "userId": str(file.owner_id),
        "name": file.name,
        "type": file.type,
        "isPublic": file.is_public,
        "parentId": format_parent_id(file.parent_id),
    }


def format_user(user: User) -> Dict[str, Any]:
    return {"id": str(user.id), "email": user.email}
