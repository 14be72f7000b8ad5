"""User API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from files_manager.dependencies import get_auth_service, get_current_user
from files_manager.formatting import format_user
from files_manager.repositories.user_repository import User
from files_manager.schemas.common import ErrorResponse
from files_manager.schemas.users import RegisterRequest, UserResponse
from files_manager.services.auth_service import AuthService

router = APIRouter(prefix="/users", tags=["Users"], responses={400: {"model": ErrorResponse}})


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Optional[RegisterRequest] = None,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new user account.

    Parameters:
        - email: Unique email address
        - password: User password (will be hashed before storage)

    Returns:
        - id: Id of the created user
        - email: The registered email

    Raises:
        - 400: Missing email, missing password, or email already registered
    """
    request = request or RegisterRequest()
    user = auth_service.register_user(request.email, request.password)
    return format_user(user)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """
    Return the user behind the X-Token header.

    Raises:
        - 401: Invalid or missing token
    """
    return format_user(current_user)
