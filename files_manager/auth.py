"""Authentication and security utilities."""

import base64
import binascii
import uuid
from typing import Optional, Tuple

import bcrypt


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Bcrypt hash of the password
    """
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a bcrypt hash.

    Args:
        password: Plain text password to verify
        password_hash: Bcrypt hash to verify against

    Returns:
        True if password matches hash, False otherwise
    """
    password_bytes = password.encode('utf-8')
    hash_bytes = password_hash.encode('utf-8')
    try:
        return bcrypt.checkpw(password_bytes, hash_bytes)
    except ValueError:
        return False


def generate_token() -> str:
    """
    Generate a new opaque session token.

    Returns:
        Random UUID4 string
    """
    return str(uuid.uuid4())


def parse_basic_credentials(authorization: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Extract email and password from a Basic Authorization header.

    Args:
        authorization: Header value (format: "Basic base64(email:password)")

    Returns:
        (email, password) tuple, or None if the header is missing or malformed
    """
    if not authorization:
        return None

    scheme, _, encoded = authorization.strip().partition(' ')
    if scheme.lower() != 'basic' or not encoded:
        return None

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError):
        return None

    email, separator, password = decoded.partition(':')
    if not separator:
        return None
    return email, password
