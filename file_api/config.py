# file_api/config.py - Environment-driven settings for the file service

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# --- Storage ---
FILES_BASE_DIR = os.getenv("FILES_BASE_DIR", str(PROJECT_ROOT / "files"))
FILE_OPERATION_TIMEOUT = float(os.getenv("FILE_OPERATION_TIMEOUT", 30))

# --- Server ---
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Client ---
FILE_API_URL = os.getenv("FILE_API_URL", f"http://localhost:{PORT}")
