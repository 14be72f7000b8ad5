"""File API routes."""

import mimetypes
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import FileResponse

from files_manager.dependencies import get_current_user, get_file_service, get_optional_user
from files_manager.formatting import format_file
from files_manager.repositories.user_repository import User
from files_manager.schemas.common import ErrorResponse
from files_manager.schemas.files import FileMetadataResponse, UploadFileRequest
from files_manager.services.file_service import FileService

router = APIRouter(
    prefix="/files",
    tags=["Files"],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.post("", response_model=FileMetadataResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    request: Optional[UploadFileRequest] = None,
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    Create a folder, or upload a file or image.

    Parameters:
        - name: File name
        - type: folder, file or image
        - parentId: Id of the parent folder (default 0, the root)
        - isPublic: Visibility (default false)
        - data: Base64 content, required for file and image
        - X-Token header (required)

    Returns:
        - Formatted file. Thumbnails of images are generated in the background.

    Raises:
        - 400: Missing name, type or data; parent not found or not a folder
        - 401: Invalid or missing token
    """
    request = request or UploadFileRequest()
    file = await file_service.create_file(
        owner_id=current_user.id,
        name=request.name,
        file_type=request.type,
        parent_id=request.parentId,
        is_public=request.isPublic,
        data=request.data,
    )
    return format_file(file)


@router.get("", response_model=List[FileMetadataResponse])
async def list_files(
    parentId: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    List the caller's files under a parent, 20 per page in creation order.

    Parameters:
        - parentId: Parent folder id (default 0, the root)
        - page: Zero-based page number (default 0)

    Raises:
        - 401: Invalid or missing token
    """
    files = file_service.list_files(current_user.id, parent_id=parentId, page=page)
    return [format_file(file) for file in files]


@router.get("/{file_id}", response_model=FileMetadataResponse)
async def get_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    Get metadata of one of the caller's files.

    Raises:
        - 401: Invalid or missing token
        - 404: No such file owned by the caller
    """
    return format_file(file_service.get_file(file_id, current_user.id))


@router.put("/{file_id}/publish", response_model=FileMetadataResponse)
async def publish_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    Make a file's content readable by anyone.

    Raises:
        - 401: Invalid or missing token
        - 404: No such file owned by the caller
    """
    return format_file(file_service.set_visibility(file_id, current_user.id, True))


@router.put("/{file_id}/unpublish", response_model=FileMetadataResponse)
async def unpublish_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    Restrict a file's content to its owner.

    Raises:
        - 401: Invalid or missing token
        - 404: No such file owned by the caller
    """
    return format_file(file_service.set_visibility(file_id, current_user.id, False))


@router.get("/{file_id}/data")
async def get_file_data(
    file_id: str,
    size: Optional[str] = Query(None),
    current_user: Optional[User] = Depends(get_optional_user),
    file_service: FileService = Depends(get_file_service),
):
    """
    Download a file's content, or one of an image's thumbnails.

    Parameters:
        - size: 100, 250 or 500 to fetch a thumbnail of an image
        - X-Token header (optional; public files are readable anonymously)

    Returns:
        - Raw bytes with a content type guessed from the file name

    Raises:
        - 400: The file is a folder
        - 404: File missing, not readable by the caller, or content not stored
    """
    actor_id = current_user.id if current_user is not None else None
    file, path = file_service.get_content_path(file_id, actor_id, size)

    media_type, _ = mimetypes.guess_type(file.name)
    return FileResponse(path, media_type=media_type or "application/octet-stream")
