"""Session API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Response, status

from files_manager.auth import parse_basic_credentials
from files_manager.dependencies import get_auth_service, get_current_user
from files_manager.exceptions import InvalidCredentialsError
from files_manager.repositories.user_repository import User
from files_manager.schemas.common import ErrorResponse
from files_manager.schemas.users import ConnectResponse
from files_manager.services.auth_service import AuthService

router = APIRouter(tags=["Authentication"], responses={401: {"model": ErrorResponse}})


@router.get("/connect", response_model=ConnectResponse)
async def connect(
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with Basic credentials and open a session.

    Parameters:
        - Authorization header: Basic base64(email:password)

    Returns:
        - token: Session token valid for 24 hours, sent back as X-Token

    Raises:
        - 401: Missing header or invalid credentials
    """
    credentials = parse_basic_credentials(authorization)
    if credentials is None:
        raise InvalidCredentialsError()

    email, password = credentials
    token = await auth_service.login_user(email, password)
    return ConnectResponse(token=token)


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect(
    x_token: Optional[str] = Header(None),
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Revoke the session behind the X-Token header.

    Raises:
        - 401: Invalid or missing token
    """
    await auth_service.logout_user(x_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
