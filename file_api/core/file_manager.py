# file_api/core/file_manager.py - Async file operations confined to one base directory

import asyncio
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List

import aiofiles
import aiofiles.os

from ..models.files import CreatedFile, DeletionResult, FileContent, FileSummary
from .errors import (
    FileAlreadyExistsError, FileNotFoundInStoreError, InitializationError,
    InvalidFilenameError, MalformedRequestError, StorageError,
)
from .validation import is_valid_filename

logger = logging.getLogger(__name__)

FILE_ENCODING = "utf-8"


def _to_datetime(timestamp: float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def _created_time(stats: os.stat_result) -> datetime:
    # st_birthtime is missing on Linux; fall back to the inode change time
    return _to_datetime(getattr(stats, "st_birthtime", stats.st_ctime))


class FileManager:
    """
    Creates, reads, lists and deletes files directly under a single base directory.

    Every filesystem call is awaited, so concurrent requests never block each other.
    The filesystem is the only source of truth; nothing is cached between calls.
    """

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir).resolve()

    # --- Helpers ---

    def _log_event(self, operation: str, filename: str | None, outcome: str, level: int = logging.INFO):
        logger.log(
            level,
            f"{operation} '{filename or '*'}': {outcome}",
            extra={"operation": operation, "file_name": filename, "outcome": outcome},
        )

    def _resolve(self, operation: str, filename: str) -> Path:
        """Validates the filename and returns its path inside the base directory."""
        if not is_valid_filename(filename):
            self._log_event(operation, filename, "invalid filename", logging.WARNING)
            raise InvalidFilenameError()
        return self.base_dir / filename

    # --- Lifecycle ---

    async def initialize(self) -> None:
        """Ensures the base directory exists. Safe to call repeatedly."""
        try:
            await aiofiles.os.makedirs(self.base_dir, exist_ok=True)
        except OSError as e:
            logger.critical(f"Failed to initialize file directory at {self.base_dir}: {e}", exc_info=True)
            raise InitializationError() from e
        logger.info(f"Initialized file directory at {self.base_dir}")

    # --- Operations ---

    async def create(self, filename: str, content: str) -> CreatedFile:
        """
        Creates a new file with the given text content.

        The file is opened in exclusive-create mode, so the existence check and
        the create are a single atomic call and an existing file is never
        overwritten.
        """
        file_path = self._resolve("create", filename)
        try:
            data = content.encode(FILE_ENCODING)
        except UnicodeEncodeError as e:
            self._log_event("create", filename, "content is not valid UTF-8", logging.WARNING)
            raise MalformedRequestError("Content must be valid UTF-8 text") from e

        try:
            f = await aiofiles.open(file_path, mode="xb")
        except FileExistsError:
            self._log_event("create", filename, "already exists", logging.WARNING)
            raise FileAlreadyExistsError()
        except OSError as e:
            self._log_event("create", filename, f"storage failure ({e})", logging.ERROR)
            raise StorageError("Failed to create file") from e

        try:
            try:
                await f.write(data)
            finally:
                await f.close()
        except (OSError, asyncio.CancelledError) as e:
            cancelled = isinstance(e, asyncio.CancelledError)
            outcome = "cancelled during write" if cancelled else f"write failed ({e})"
            self._log_event("create", filename, outcome, logging.WARNING if cancelled else logging.ERROR)
            try:
                await aiofiles.os.remove(file_path)
            except OSError:
                logger.error(f"Could not remove partially written file '{file_path}'", exc_info=True)
            if cancelled:
                raise
            raise StorageError("Failed to write file") from e

        self._log_event("create", filename, "created")
        return CreatedFile(
            filename=filename,
            path=str(file_path),
            size=len(data),
            created=datetime.now(timezone.utc),
        )

    async def read(self, filename: str) -> FileContent:
        """Reads a file's content and metadata. A file removed mid-read is reported as not found."""
        file_path = self._resolve("read", filename)
        try:
            async with aiofiles.open(file_path, mode="r", encoding=FILE_ENCODING, newline="") as f:
                content = await f.read()
            stats = await aiofiles.os.stat(file_path)
        except FileNotFoundError:
            self._log_event("read", filename, "not found", logging.WARNING)
            raise FileNotFoundInStoreError()
        except (OSError, UnicodeDecodeError) as e:
            self._log_event("read", filename, f"storage failure ({e})", logging.ERROR)
            raise StorageError("Failed to read file") from e

        self._log_event("read", filename, "read")
        return FileContent(
            filename=filename,
            content=content,
            size=stats.st_size,
            created=_created_time(stats),
            modified=_to_datetime(stats.st_mtime),
        )

    async def delete(self, filename: str) -> DeletionResult:
        """
        Removes a file. The remove call itself reports absence, so a missing
        file (including one deleted concurrently) raises not found rather than
        silently succeeding.
        """
        file_path = self._resolve("delete", filename)
        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            self._log_event("delete", filename, "not found", logging.WARNING)
            raise FileNotFoundInStoreError()
        except OSError as e:
            self._log_event("delete", filename, f"storage failure ({e})", logging.ERROR)
            raise StorageError("Failed to delete file") from e

        self._log_event("delete", filename, "deleted")
        return DeletionResult(filename=filename, deleted=True, timestamp=datetime.now(timezone.utc))

    async def list(self) -> List[FileSummary]:
        """
        Lists every entry of the base directory with its metadata, sorted by filename.

        Entries are stat'ed concurrently; if any one of them fails the whole
        listing fails, and no partial result is returned.
        """
        async def describe(name: str) -> FileSummary:
            stats = await aiofiles.os.stat(self.base_dir / name)
            return FileSummary(
                filename=name,
                size=stats.st_size,
                created=_created_time(stats),
                modified=_to_datetime(stats.st_mtime),
            )

        try:
            names = await aiofiles.os.listdir(self.base_dir)
            files = await asyncio.gather(*(describe(name) for name in names))
        except OSError as e:
            self._log_event("list", None, f"storage failure ({e})", logging.ERROR)
            raise StorageError("Failed to list files") from e

        self._log_event("list", None, f"listed {len(files)} files")
        return sorted(files, key=lambda entry: entry.filename)
