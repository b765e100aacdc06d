# file_api/main.py - FastAPI application for the file store service

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.files import router as files_router
from .config import FILE_OPERATION_TIMEOUT, FILES_BASE_DIR, HOST, LOG_LEVEL, PORT
from .core.errors import FileOperationError, MalformedRequestError
from .core.file_manager import FileManager
from .utils.responses import PrettyJSONResponse, error_response

# --- Logging Setup ---
logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

HEALTH_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

ENDPOINTS = [
    "POST   /api/files            - Create a new file",
    "GET    /api/files            - List all files",
    "GET    /api/files/{filename} - Read a file",
    "DELETE /api/files/{filename} - Delete a file",
    "ANY    /health               - Health check",
]

# --- Lifespan Context Manager ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup...")
    # An unusable base directory is fatal: let InitializationError abort startup
    await app.state.file_manager.initialize()
    logger.info("Available endpoints:")
    for endpoint in ENDPOINTS:
        logger.info(f"  {endpoint}")
    yield
    logger.info("Application shutdown...")

# --- Exception Handlers ---

async def file_operation_error_handler(request: Request, exc: FileOperationError):
    return error_response(exc.message, exc.status_code)

async def validation_error_handler(request: Request, exc: RequestValidationError):
    if any(error.get("type") == "json_invalid" for error in exc.errors()):
        message = "Invalid JSON"
    else:
        message = MalformedRequestError.message
    logger.warning(f"Rejected request body for {request.method} {request.url.path}: {message}")
    return error_response(message, status.HTTP_400_BAD_REQUEST)

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "Not found"
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = "Method not allowed"
    else:
        message = str(exc.detail)
    return error_response(message, exc.status_code, headers=getattr(exc, "headers", None))

async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error handling {request.method} {request.url.path}: {exc}", exc_info=True)
    return error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)

# --- FastAPI App Initialization ---

def create_app(base_dir: str | Path | None = None, operation_timeout: float = FILE_OPERATION_TIMEOUT) -> FastAPI:
    """Builds the application around a FileManager rooted at base_dir (defaults to FILES_BASE_DIR)."""
    app = FastAPI(
        title="File Store Service",
        description="API to create, read, list and delete files in a single server-managed directory.",
        version="1.0.0",
        lifespan=lifespan,
        default_response_class=PrettyJSONResponse,
    )
    app.state.file_manager = FileManager(base_dir or FILES_BASE_DIR)
    app.state.operation_timeout = operation_timeout

    app.add_exception_handler(FileOperationError, file_operation_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    app.include_router(files_router)

    # Answers every method, as the health check always has
    @app.api_route("/health", methods=HEALTH_METHODS, status_code=status.HTTP_200_OK)
    async def health_check():
        """Basic liveness check."""
        return {"status": "healthy"}

    return app


app = create_app()

# --- Main execution block ---
if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Uvicorn server at http://{HOST}:{PORT} ...")
    uvicorn.run("file_api.main:app", host=HOST, port=PORT)
