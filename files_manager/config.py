"""Configuration settings for the files manager service."""

import os

from common.constants import DEFAULT_SESSION_TTL_SECONDS


HOST = os.environ.get("FILES_MANAGER_HOST", "0.0.0.0")

PORT = int(os.environ.get("FILES_MANAGER_PORT", "5000"))

DATABASE_PATH = os.environ.get("FILES_MANAGER_DATABASE_PATH", "/tmp/files_manager/metadata.db")

FOLDER_PATH = os.environ.get("FOLDER_PATH", "/tmp/files_manager")

REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")

SESSION_TTL_SECONDS = int(os.environ.get("SESSION_TTL_SECONDS", str(DEFAULT_SESSION_TTL_SECONDS)))

THUMBNAIL_CONCURRENCY = int(os.environ.get("THUMBNAIL_CONCURRENCY", "10"))

WELCOME_CONCURRENCY = int(os.environ.get("WELCOME_CONCURRENCY", "20"))

JOB_TIMEOUT_SECONDS = float(os.environ.get("JOB_TIMEOUT_SECONDS", "60"))

DEAD_LETTER_LIMIT = int(os.environ.get("DEAD_LETTER_LIMIT", "1000"))
