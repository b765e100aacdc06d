# tests/test_api.py - Pytest tests for the file store API

import asyncio

import pytest
from aiofiles.threadpool.binary import AsyncBufferedIOBase
from fastapi.testclient import TestClient

from file_api.core.errors import InitializationError
from file_api.main import create_app

# --- Health & Routing ---

def test_health_check(client):
    """Test the /health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
    assert response.headers["content-type"].startswith("application/json")

def test_startup_creates_base_dir(client, base_dir):
    assert base_dir.is_dir()

def test_startup_fails_when_base_dir_unusable(tmp_path):
    occupied = tmp_path / "occupied"
    occupied.write_text("not a directory")
    app = create_app(base_dir=occupied)
    with pytest.raises(InitializationError):
        with TestClient(app):
            pass

def test_unknown_path_is_not_found(client):
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert response.json() == {"error": "Not found", "status": 404}

def test_unsupported_method_is_not_allowed(client):
    response = client.put("/api/files", json={"filename": "a.txt", "content": "x"})
    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed", "status": 405}

    response = client.patch("/api/files/a.txt")
    assert response.status_code == 405
    assert "GET" in response.headers["allow"]

@pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE"])
def test_health_answers_any_method(client, method):
    response = client.request(method, "/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}

def test_responses_are_pretty_printed(client):
    response = client.get("/health")
    assert response.text == '{\n  "status": "healthy"\n}'

# --- Create ---

def test_create_file_success(client, base_dir):
    response = client.post("/api/files", json={"filename": "report.txt", "content": "hello"})
    assert response.status_code == 201
    json_response = response.json()
    assert json_response["filename"] == "report.txt"
    assert json_response["size"] == 5
    assert json_response["path"] == str(base_dir.resolve() / "report.txt")
    assert "created" in json_response
    assert "content" not in json_response
    assert (base_dir / "report.txt").read_text() == "hello"

def test_create_existing_file_conflicts(client):
    client.post("/api/files", json={"filename": "dup.txt", "content": "one"})
    for _ in range(2):
        response = client.post("/api/files", json={"filename": "dup.txt", "content": "two"})
        assert response.status_code == 409
        assert response.json() == {"error": "File already exists", "status": 409}

def test_create_traversal_is_rejected(client, base_dir):
    response = client.post("/api/files", json={"filename": "../etc/passwd", "content": "x"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid filename", "status": 400}
    assert not (base_dir.parent / "etc").exists()
    assert list(base_dir.iterdir()) == []

@pytest.mark.parametrize("payload", [
    {"filename": "a.txt"},
    {"content": "orphan"},
    {"filename": "", "content": "x"},
    {"filename": "a.txt", "content": ""},
    {},
])
def test_create_missing_fields(client, payload):
    response = client.post("/api/files", json=payload)
    assert response.status_code == 400
    assert response.json() == {"error": "Filename and content are required", "status": 400}

def test_create_without_body(client):
    response = client.post("/api/files")
    assert response.status_code == 400
    assert response.json()["error"] == "Filename and content are required"

def test_create_wrong_body_shape(client):
    response = client.post("/api/files", json=["a.txt", "content"])
    assert response.status_code == 400

    response = client.post("/api/files", json={"filename": "a.txt", "content": 123})
    assert response.status_code == 400

def test_create_unencodable_content(client, base_dir):
    response = client.post(
        "/api/files",
        content='{"filename": "s.txt", "content": "\\ud800"}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Content must be valid UTF-8 text", "status": 400}
    assert list(base_dir.iterdir()) == []

def test_create_timeout_leaves_no_file(tmp_path, monkeypatch):
    app = create_app(base_dir=tmp_path, operation_timeout=0.05)

    async def slow_write(self, data):
        await asyncio.sleep(1)

    with TestClient(app) as test_client:
        monkeypatch.setattr(AsyncBufferedIOBase, "write", slow_write)
        response = test_client.post("/api/files", json={"filename": "slow.txt", "content": "x"})
        assert response.status_code == 408
        assert list(tmp_path.iterdir()) == []

        monkeypatch.undo()
        response = test_client.post("/api/files", json={"filename": "slow.txt", "content": "x"})
        assert response.status_code == 201

def test_create_malformed_json(client):
    response = client.post(
        "/api/files",
        content='{"filename": "a.txt", "content": ',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON", "status": 400}

# --- Read ---

def test_read_file_success(client):
    client.post("/api/files", json={"filename": "notes.md", "content": "# Title\nbody ✓"})
    response = client.get("/api/files/notes.md")
    assert response.status_code == 200
    json_response = response.json()
    assert json_response["filename"] == "notes.md"
    assert json_response["content"] == "# Title\nbody ✓"
    assert json_response["size"] == len("# Title\nbody ✓".encode("utf-8"))
    assert "created" in json_response
    assert "modified" in json_response

def test_read_missing_file(client):
    response = client.get("/api/files/missing.txt")
    assert response.status_code == 404
    assert response.json() == {"error": "File not found", "status": 404}

def test_read_invalid_filename(client):
    response = client.get("/api/files/.hidden")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid filename"

def test_read_storage_failure_hides_details(client, base_dir):
    (base_dir / "binary.bin").write_bytes(b"\xff\xfe\x00\x80")
    response = client.get("/api/files/binary.bin")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to read file", "status": 500}

# --- Delete ---

def test_delete_file_success(client, base_dir):
    client.post("/api/files", json={"filename": "old.log", "content": "x"})
    response = client.delete("/api/files/old.log")
    assert response.status_code == 200
    json_response = response.json()
    assert json_response["filename"] == "old.log"
    assert json_response["deleted"] is True
    assert "timestamp" in json_response
    assert not (base_dir / "old.log").exists()

def test_delete_missing_file(client):
    response = client.delete("/api/files/ghost.txt")
    assert response.status_code == 404
    assert response.json()["error"] == "File not found"

def test_delete_invalid_filename(client):
    response = client.delete("/api/files/bad%20name.txt")
    assert response.status_code == 400

# --- List ---

def test_list_files_empty(client):
    response = client.get("/api/files")
    assert response.status_code == 200
    assert response.json() == {"files": []}

def test_list_files_tracks_changes(client):
    client.post("/api/files", json={"filename": "b.txt", "content": "bbb"})
    client.post("/api/files", json={"filename": "a.txt", "content": "a"})

    files = client.get("/api/files").json()["files"]
    assert [(f["filename"], f["size"]) for f in files] == [("a.txt", 1), ("b.txt", 3)]
    assert set(files[0]) == {"filename", "size", "created", "modified"}

    client.delete("/api/files/a.txt")
    files = client.get("/api/files").json()["files"]
    assert [f["filename"] for f in files] == ["b.txt"]

# --- Scenarios ---

def test_report_lifecycle(client):
    """Create, read, delete, then read again."""
    response = client.post("/api/files", json={"filename": "report.txt", "content": "hello"})
    assert response.status_code == 201
    assert response.json()["size"] == 5

    response = client.get("/api/files/report.txt")
    assert response.status_code == 200
    assert response.json()["content"] == "hello"

    response = client.delete("/api/files/report.txt")
    assert response.status_code == 200
    assert response.json()["deleted"] is True

    response = client.get("/api/files/report.txt")
    assert response.status_code == 404

def test_slow_operation_times_out(tmp_path):
    app = create_app(base_dir=tmp_path, operation_timeout=0.05)

    async def slow_read(filename):
        await asyncio.sleep(1)

    with TestClient(app) as test_client:
        app.state.file_manager.read = slow_read
        response = test_client.get("/api/files/slow.txt")
    assert response.status_code == 408
    assert response.json() == {"error": "Request timed out", "status": 408}
