"""Custom exception classes for the files manager."""

from typing import Optional


class FilesManagerError(Exception):
    """
    Base exception class for all files manager errors.

    Subclasses define the message returned to API callers.
    """
    default_message = "Internal error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class ValidationError(FilesManagerError):
    """
    Raised when a request field is missing or invalid.
    """
    default_message = "Invalid request"


class MissingEmailError(ValidationError):
    default_message = "Missing email"


class MissingPasswordError(ValidationError):
    default_message = "Missing password"


class UserAlreadyExistsError(ValidationError):
    """
    Raised when attempting to register an email that already has an account.
    """
    default_message = "Already exist"


class MissingNameError(ValidationError):
    default_message = "Missing name"


class MissingTypeError(ValidationError):
    """
    Raised when the file type is absent or not one of folder, file, image.
    """
    default_message = "Missing type"


class MissingDataError(ValidationError):
    default_message = "Missing data"


class InvalidDataError(ValidationError):
    """
    Raised when upload data is not valid base64.
    """
    default_message = "Invalid data"


class ParentNotFoundError(ValidationError):
    default_message = "Parent not found"


class ParentNotFolderError(ValidationError):
    default_message = "Parent is not a folder"


class UnsupportedOperationError(FilesManagerError):
    """
    Raised when content is requested for a folder.
    """
    default_message = "A folder doesn't have content"


class UnauthorizedError(FilesManagerError):
    """
    Raised when a session token is missing, invalid or expired.
    """
    default_message = "Unauthorized"


class InvalidCredentialsError(UnauthorizedError):
    """
    Raised when login credentials are invalid.

    Unknown email and wrong password are reported identically.
    """
    pass


class NotFoundError(FilesManagerError):
    """
    Raised when an entity does not exist or the caller may not see it.
    """
    default_message = "Not found"


class ArtifactNotFoundError(NotFoundError):
    """
    Raised when stored bytes for a file or one of its variants are missing.
    """
    pass


class ArtifactStorageError(FilesManagerError):
    """
    Raised when the artifact store fails to persist bytes.
    """
    default_message = "Failed to store file data"


class JobError(FilesManagerError):
    """
    Base class for background job failures.
    """
    default_message = "Job failed"


class JobPayloadError(JobError):
    pass


class JobFileNotFoundError(JobError):
    default_message = "File not found"


class JobUserNotFoundError(JobError):
    default_message = "User not found"
