# tests/conftest.py - Shared fixtures for the file store tests

import pytest
from fastapi.testclient import TestClient

from file_api.core.file_manager import FileManager
from file_api.main import create_app

# --- Fixtures ---

@pytest.fixture
def base_dir(tmp_path):
    """A base directory that does not exist yet, so initialization is exercised."""
    return tmp_path / "store" / "files"

@pytest.fixture
def file_manager(tmp_path):
    """A FileManager rooted at an existing, empty directory."""
    return FileManager(tmp_path)

@pytest.fixture
def app(base_dir):
    return create_app(base_dir=base_dir)

@pytest.fixture
def client(app):
    """TestClient with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client
