"""FastAPI dependencies resolving services held on the application state."""

from typing import Optional

from fastapi import Depends, Header, Request

from files_manager.repositories.user_repository import User
from files_manager.services.auth_service import AuthService
from files_manager.services.file_service import FileService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


async def get_current_user(
    x_token: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the X-Token header to a user.

    Raises:
        UnauthorizedError: 401 if the token is missing, invalid or expired
    """
    return await auth_service.require_user(x_token)


async def get_optional_user(
    x_token: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    """
    Resolve the X-Token header if present; anonymous callers get None.
    """
    return await auth_service.resolve_user(x_token)
