# file_api/models/files.py - Pydantic models for the file store API

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

# --- Request Models ---

class FileCreateRequest(BaseModel):
    """Request body for creating a file. Presence is checked by the router."""
    filename: Optional[str] = Field(None, description="Name of the file to create, relative to the base directory.")
    content: Optional[str] = Field(None, description="Text content to write to the file.")

# --- Response Models ---

class CreatedFile(BaseModel):
    """Result of a successful create."""
    filename: str = Field(..., description="The validated filename.")
    path: str = Field(..., description="Absolute location of the file on the server.")
    size: int = Field(..., description="Size of the written content in bytes.")
    created: datetime = Field(..., description="Wall-clock time of the create operation.")

class FileContent(BaseModel):
    """A file read back with its content and metadata."""
    filename: str
    content: str = Field(..., description="Full file content, UTF-8 decoded.")
    size: int = Field(..., description="Size of the file in bytes.")
    created: datetime
    modified: datetime

class FileSummary(BaseModel):
    """One entry of a directory listing."""
    filename: str
    size: int
    created: datetime
    modified: datetime

class FileListResponse(BaseModel):
    files: List[FileSummary] = Field(..., description="Files in the base directory, sorted by filename.")

class DeletionResult(BaseModel):
    filename: str
    deleted: bool = True
    timestamp: datetime = Field(..., description="Time the file was removed.")

class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str
    status: int
