"""User repository for database operations."""

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from common.logging_config import get_logger
from files_manager.database import Database
from files_manager.exceptions import UserAlreadyExistsError

logger = get_logger(__name__)


@dataclass
class User:
    id: int
    email: str
    password_hash: str
    created_at: datetime


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        password_hash=row["password_hash"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class UserRepository:
    def __init__(self, database: Database):
        self.database = database

    def create_user(self, email: str, password_hash: str, created_at: datetime) -> User:
        logger.debug(f"Creating user: {email}")

        with self.database.get_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO users (email, password_hash, created_at)
                    VALUES (?, ?, ?)
                    """,
                    (email, password_hash, created_at.isoformat())
                )
                conn.commit()
            except sqlite3.IntegrityError:
                logger.warning(f"User creation rejected, email already registered: {email}")
                raise UserAlreadyExistsError()

            user_id = cursor.lastrowid
            logger.info(f"User created successfully: {email} [user_id={user_id}]")

            return User(
                id=user_id,
                email=email,
                password_hash=password_hash,
                created_at=created_at,
            )

    def get_by_email(self, email: str) -> Optional[User]:
        logger.debug(f"Fetching user by email: {email}")
        with self.database.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, email, password_hash, created_at FROM users WHERE email = ?",
                (email,)
            )
            row = cursor.fetchone()

            if row is None:
                logger.debug(f"User not found: {email}")
                return None

            return _row_to_user(row)

    def get_by_id(self, user_id: int) -> Optional[User]:
        logger.debug(f"Fetching user by id: {user_id}")
        with self.database.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, email, password_hash, created_at FROM users WHERE id = ?",
                (user_id,)
            )
            row = cursor.fetchone()

            if row is None:
                logger.debug(f"User not found: {user_id}")
                return None

            return _row_to_user(row)

    def count(self) -> int:
        with self.database.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM users")
            return cursor.fetchone()[0]
