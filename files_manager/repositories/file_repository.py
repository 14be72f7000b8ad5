"""File repository for database operations."""

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from common.constants import FOLDER, PAGE_SIZE, MAX_ID
from common.logging_config import get_logger
from files_manager.database import Database

logger = get_logger(__name__)

_COLUMNS = "id, name, type, parent_id, owner_id, is_public, local_path, created_at"


@dataclass
class File:
    id: int
    name: str
    type: str
    parent_id: int
    owner_id: int
    is_public: bool
    local_path: Optional[str]
    created_at: datetime

    @property
    def is_folder(self) -> bool:
        return self.type == FOLDER


def _row_to_file(row: sqlite3.Row) -> File:
    return File(
        id=row["id"],
        name=row["name"],
        type=row["type"],
        parent_id=row["parent_id"],
        owner_id=row["owner_id"],
        is_public=bool(row["is_public"]),
        local_path=row["local_path"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class FileRepository:
    def __init__(self, database: Database):
        self.database = database

    def create_file(
        self,
        name: str,
        file_type: str,
        parent_id: int,
        owner_id: int,
        is_public: bool,
        local_path: Optional[str],
        created_at: datetime,
    ) -> File:
        with self.database.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO files (name, type, parent_id, owner_id, is_public, local_path, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (name, file_type, parent_id, owner_id, int(is_public), local_path, created_at.isoformat())
            )
            conn.commit()
            file_id = cursor.lastrowid

        logger.debug(f"File record created [file_id={file_id}] [owner_id={owner_id}] type={file_type}")

        return File(
            id=file_id,
            name=name,
            type=file_type,
            parent_id=parent_id,
            owner_id=owner_id,
            is_public=is_public,
            local_path=local_path,
            created_at=created_at,
        )

    def get_file(self, file_id: int, owner_id: Optional[int] = None) -> Optional[File]:
        """
        Point lookup by id, optionally scoped to an owner.

        A file owned by someone else is reported as missing when owner_id is given.
        """
        query = f"SELECT {_COLUMNS} FROM files WHERE id = ?"
        params = [file_id]
        if owner_id is not None:
            query += " AND owner_id = ?"
            params.append(owner_id)

        with self.database.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            row = cursor.fetchone()

        if row is None:
            return None
        return _row_to_file(row)

    def set_visibility(self, file_id: int, owner_id: int, is_public: bool) -> bool:
        """
        Match-then-set update of the is_public flag.

        Returns:
            True if a file matched {id, owner_id}
        """
        with self.database.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE files SET is_public = ? WHERE id = ? AND owner_id = ?",
                (int(is_public), file_id, owner_id)
            )
            conn.commit()
            matched = cursor.rowcount > 0

        logger.debug(f"Visibility update [file_id={file_id}] is_public={is_public} matched={matched}")
        return matched

    def list_files(self, owner_id: int, parent_id: int, page: int) -> List[File]:
        """
        Return one page of an owner's files under a parent, in ascending id order.
        """
        skip = page * PAGE_SIZE
        if skip > MAX_ID:
            return []

        with self.database.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_COLUMNS} FROM files
                WHERE owner_id = ? AND parent_id = ?
                ORDER BY id ASC
                LIMIT ? OFFSET ?
                """,
                (owner_id, parent_id, PAGE_SIZE, skip)
            )
            rows = cursor.fetchall()

        return [_row_to_file(row) for row in rows]

    def delete_file(self, file_id: int) -> None:
        with self.database.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM files WHERE id = ?", (file_id,))
            conn.commit()
        logger.debug(f"File record deleted [file_id={file_id}]")

    def count(self) -> int:
        with self.database.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM files")
            return cursor.fetchone()[0]
