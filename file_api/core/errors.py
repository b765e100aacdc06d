# file_api/core/errors.py - Error taxonomy for file operations

from fastapi import status


class FileOperationError(Exception):
    """Base class for every failure surfaced by the file service."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidFilenameError(FileOperationError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid filename"


class FileAlreadyExistsError(FileOperationError):
    status_code = status.HTTP_409_CONFLICT
    message = "File already exists"


class FileNotFoundInStoreError(FileOperationError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "File not found"


class InitializationError(FileOperationError):
    """The base directory could not be created. Fatal at startup."""
    message = "Failed to initialize file system"


class StorageError(FileOperationError):
    """Catch-all for filesystem errors that are not otherwise classified."""
    message = "Storage operation failed"


class MalformedRequestError(FileOperationError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Filename and content are required"


class OperationTimeoutError(FileOperationError):
    status_code = status.HTTP_408_REQUEST_TIMEOUT
    message = "Request timed out"
