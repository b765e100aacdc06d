# file_api/utils/responses.py - Response helpers shared by the app and its routers

import json
from typing import Any, Mapping, Optional

from fastapi.responses import JSONResponse


class PrettyJSONResponse(JSONResponse):
    """JSON response rendered with two-space indentation."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")


def error_response(message: str, status_code: int, headers: Optional[Mapping[str, str]] = None) -> PrettyJSONResponse:
    """Builds the uniform error body: {"error": ..., "status": ...}."""
    return PrettyJSONResponse(status_code=status_code, content={"error": message, "status": status_code}, headers=headers)
