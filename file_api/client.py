# file_api/client.py - HTTP client for the file store service, plus a demo walkthrough

import json
import sys
from typing import Any, Dict, Optional

import httpx

from .config import FILE_API_URL


class FileServiceError(Exception):
    """Raised when the service answers with an error status or cannot be reached."""

    def __init__(self, status_code: Optional[int], message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}" if status_code else message)


class FileServiceClient:
    """
    Thin wrapper over the file store REST API.

    Pass an existing httpx.Client (for example FastAPI's TestClient) to reuse
    its connection; otherwise a short-lived client is opened for every call.
    """

    def __init__(self, base_url: str = FILE_API_URL, timeout: float = 30.0, http_client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http_client = http_client

    def _call_api(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        try:
            if self.http_client is not None:
                response = self.http_client.request(method, endpoint, **kwargs)
            else:
                with httpx.Client(base_url=self.base_url, timeout=self.timeout) as client:
                    response = client.request(method, endpoint, **kwargs)
        except httpx.RequestError as e:
            raise FileServiceError(None, f"HTTP Request Error: {e}") from e

        try:
            data = response.json()
        except json.JSONDecodeError:
            data = {"error": response.text[:200]}

        if response.is_error:
            raise FileServiceError(response.status_code, data.get("error", "Unknown error"))
        return data

    def create_file(self, filename: str, content: str) -> Dict[str, Any]:
        return self._call_api("POST", "/api/files", json={"filename": filename, "content": content})

    def read_file(self, filename: str) -> Dict[str, Any]:
        return self._call_api("GET", f"/api/files/{filename}")

    def list_files(self) -> Dict[str, Any]:
        return self._call_api("GET", "/api/files")

    def delete_file(self, filename: str) -> Dict[str, Any]:
        return self._call_api("DELETE", f"/api/files/{filename}")

    def health(self) -> Dict[str, Any]:
        return self._call_api("GET", "/health")


def run_demo(client: FileServiceClient, filename: str = "demo.txt", content: str = "Hello from the file store!") -> bool:
    """Creates, reads, lists and deletes a file, printing every step. Stops at the first failure."""
    steps = [
        ("Create", lambda: client.create_file(filename, content)),
        ("Read", lambda: client.read_file(filename)),
        ("List", client.list_files),
        ("Delete", lambda: client.delete_file(filename)),
    ]
    for name, call in steps:
        try:
            result = call()
        except FileServiceError as e:
            print(f"{name} Error: {e}")
            return False
        print(f"{name} Success: {json.dumps(result, indent=2)}")
    return True


if __name__ == "__main__":
    demo_filename = sys.argv[1] if len(sys.argv) > 1 else "demo.txt"
    print(f"Connecting to file store at: {FILE_API_URL}")
    sys.exit(0 if run_demo(FileServiceClient(), demo_filename) else 1)
