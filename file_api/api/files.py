# file_api/api/files.py - API Router for File Store Operations

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from fastapi import APIRouter, Body, Depends, Request, status

from ..core.errors import MalformedRequestError, OperationTimeoutError
from ..core.file_manager import FileManager
from ..models.files import (
    CreatedFile, DeletionResult, ErrorResponse, FileContent, FileCreateRequest, FileListResponse
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Create an API router
router = APIRouter(
    prefix="/api/files",
    tags=["Files"],
)

# Error bodies shared by the endpoints for OpenAPI documentation
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid filename or malformed request."},
    408: {"model": ErrorResponse, "description": "The file operation timed out."},
    500: {"model": ErrorResponse, "description": "Storage failure."},
}

# --- Dependencies ---

def get_file_manager(request: Request) -> FileManager:
    """Returns the FileManager owned by the running application."""
    return request.app.state.file_manager

async def run_with_timeout(request: Request, operation: str, awaitable: Awaitable[T]) -> T:
    """Awaits a file operation, converting an expired deadline into a 408."""
    timeout = request.app.state.operation_timeout
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"File operation '{operation}' timed out after {timeout} seconds.")
        raise OperationTimeoutError()

# --- API Endpoints ---

@router.post(
    "",
    response_model=CreatedFile,
    status_code=status.HTTP_201_CREATED,
    summary="Create a file",
    description="Creates a new file in the base directory. Existing files are never overwritten.",
    responses={**ERROR_RESPONSES, 409: {"model": ErrorResponse, "description": "File already exists."}},
)
async def create_file(
    request: Request,
    payload: Optional[FileCreateRequest] = Body(None),
    file_manager: FileManager = Depends(get_file_manager),
):
    # Empty strings are rejected along with missing fields
    if payload is None or not payload.filename or not payload.content:
        raise MalformedRequestError()
    return await run_with_timeout(request, "create", file_manager.create(payload.filename, payload.content))


@router.get(
    "",
    response_model=FileListResponse,
    summary="List files",
    description="Lists every file in the base directory with its size and timestamps, sorted by filename.",
    responses={408: ERROR_RESPONSES[408], 500: ERROR_RESPONSES[500]},
)
async def list_files(request: Request, file_manager: FileManager = Depends(get_file_manager)):
    files = await run_with_timeout(request, "list", file_manager.list())
    return FileListResponse(files=files)


@router.get(
    "/{filename}",
    response_model=FileContent,
    summary="Read a file",
    description="Returns the content and metadata of a single file.",
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": "File not found."}},
)
async def read_file(request: Request, filename: str, file_manager: FileManager = Depends(get_file_manager)):
    return await run_with_timeout(request, "read", file_manager.read(filename))


@router.delete(
    "/{filename}",
    response_model=DeletionResult,
    summary="Delete a file",
    description="Removes a single file from the base directory.",
    responses={**ERROR_RESPONSES, 404: {"model": ErrorResponse, "description": "File not found."}},
)
async def delete_file(request: Request, filename: str, file_manager: FileManager = Depends(get_file_manager)):
    return await run_with_timeout(request, "delete", file_manager.delete(filename))
