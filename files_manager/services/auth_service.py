"""Authentication service for business logic."""

from datetime import datetime, timezone
from typing import Callable, Optional

from common.logging_config import get_logger
from files_manager.auth import hash_password, verify_password
from files_manager.exceptions import (
    InvalidCredentialsError,
    MissingEmailError,
    MissingPasswordError,
    UnauthorizedError,
    UserAlreadyExistsError,
)
from files_manager.pipeline.queue import JobPipeline
from files_manager.repositories.user_repository import User, UserRepository
from files_manager.sessions import SessionStore

logger = get_logger(__name__)


class AuthService:
    def __init__(
        self,
        user_repo: UserRepository,
        sessions: SessionStore,
        welcome_pipeline: Optional[JobPipeline] = None,
        hasher: Callable[[str], str] = hash_password,
        verifier: Callable[[str, str], bool] = verify_password,
    ):
        self.user_repo = user_repo
        self.sessions = sessions
        self.welcome_pipeline = welcome_pipeline
        self.hasher = hasher
        self.verifier = verifier

    def register_user(self, email: Optional[str], password: Optional[str]) -> User:
        if not email:
            raise MissingEmailError()
        if not password:
            raise MissingPasswordError()

        logger.info(f"Attempting to register user: {email}")
        if self.user_repo.get_by_email(email) is not None:
            logger.warning(f"Registration failed: email '{email}' already exists")
            raise UserAlreadyExistsError()

        user = self.user_repo.create_user(
            email=email,
            password_hash=self.hasher(password),
            created_at=datetime.now(timezone.utc),
        )
        logger.info(f"Successfully registered user: {email} [user_id={user.id}]")

        if self.welcome_pipeline is not None:
            self.welcome_pipeline.enqueue({"userId": user.id})

        return user

    def verify_credentials(self, email: str, password: str) -> User:
        user = self.user_repo.get_by_email(email)
        if user is None:
            logger.warning(f"Login failed: email '{email}' not found")
            raise InvalidCredentialsError()

        if not self.verifier(password, user.password_hash):
            logger.warning(f"Login failed: invalid password for email '{email}'")
            raise InvalidCredentialsError()

        return user

    async def login_user(self, email: str, password: str) -> str:
        logger.info(f"Login attempt for user: {email}")
        user = self.verify_credentials(email, password)
        token = await self.sessions.issue(user.id)
        logger.info(f"Successfully logged in user: {email} [user_id={user.id}]")
        return token

    async def logout_user(self, token: str) -> None:
        await self.sessions.revoke(token)

    async def resolve_user(self, token: Optional[str]) -> Optional[User]:
        """
        Find the user behind a session token.

        Returns:
            The user, or None for missing, expired or dangling tokens
        """
        user_id = await self.sessions.resolve(token)
        if user_id is None:
            return None
        return self.user_repo.get_by_id(user_id)

    async def require_user(self, token: Optional[str]) -> User:
        user = await self.resolve_user(token)
        if user is None:
            logger.debug("Token validation failed")
            raise UnauthorizedError()
        return user
