"""Shared utilities for serve.py: request validation and HTTP response helpers."""

from __future__ import annotations

import base64
import io
import json
import logging
from http.server import BaseHTTPRequestHandler
from typing import Any

from pydantic import ValidationError

from text2stitch.config import FABRIC_COLORS, FONT_FAMILIES, FONT_SIZES, LINE_SPACINGS
from text2stitch.pipeline import PatternResult
from text2stitch.schema import PatternRequest

logger = logging.getLogger("text2stitch.server")

MAX_BODY_SIZE = 64 * 1024  # 64KB
MAX_TEXT_LENGTH = 2000
MAX_LINES_LIMIT = 20

ALLOWED_ORIGINS = {"http://localhost:8042", "http://127.0.0.1:8042"}


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------


def validate_pattern_params(body: Any) -> tuple[PatternRequest | None, str | None]:
    """Validate a pattern request body.

    Returns (request, None) on success or (None, error_message) on failure.
    Accepts camelCase or snake_case keys.
    """
    if not isinstance(body, dict):
        return None, "Body must be a JSON object"

    text = body.get("text", "")
    if not isinstance(text, str):
        return None, "text must be a string"
    if len(text) > MAX_TEXT_LENGTH:
        return None, f"text must be at most {MAX_TEXT_LENGTH} characters"

    max_lines = body.get("maxLines", body.get("max_lines", 3))
    if not isinstance(max_lines, int) or isinstance(max_lines, bool):
        return None, "maxLines must be an integer"
    if max_lines < 0 or max_lines > MAX_LINES_LIMIT:
        return None, f"maxLines must be between 0 and {MAX_LINES_LIMIT}"

    try:
        request = PatternRequest.model_validate(body)
    except ValidationError as e:
        first = e.errors()[0]
        return None, first["msg"].removeprefix("Value error, ")
    return request, None


def pattern_options() -> dict:
    """The enumerated choices a client can offer, for GET /api/options."""
    return {
        "fontSizes": list(FONT_SIZES),
        "fontFamilies": list(FONT_FAMILIES),
        "lineSpacings": list(LINE_SPACINGS),
        "fabricColors": FABRIC_COLORS,
    }


def result_payload(result: PatternResult) -> dict:
    """JSON body for a generated pattern: report fields, grid rows and a base64 PNG."""
    if result.is_empty:
        return {"empty": True, "stitchCount": 0}

    buf = io.BytesIO()
    result.surface.image.save(buf, format="PNG")
    return {
        "empty": False,
        **result.report.model_dump_camel(),
        "rows": result.grid.to_rows(),
        "image": base64.b64encode(buf.getvalue()).decode("ascii"),
    }


# ---------------------------------------------------------------------------
# HTTP helpers (work with any BaseHTTPRequestHandler subclass)
# ---------------------------------------------------------------------------


def _cors_headers(handler: BaseHTTPRequestHandler) -> None:
    origin = handler.headers.get("Origin", "")
    if origin in ALLOWED_ORIGINS:
        handler.send_header("Access-Control-Allow-Origin", origin)
        handler.send_header("Vary", "Origin")


def bytes_response(
    handler: BaseHTTPRequestHandler,
    body: bytes,
    content_type: str,
    status: int = 200,
    headers: dict[str, str] | None = None,
) -> None:
    """Send a raw body with CORS headers and optional extra headers."""
    handler.send_response(status)
    handler.send_header("Content-Type", content_type)
    handler.send_header("Content-Length", str(len(body)))
    _cors_headers(handler)
    if headers:
        for k, v in headers.items():
            handler.send_header(k, v)
    handler.end_headers()
    handler.wfile.write(body)


def json_response(
    handler: BaseHTTPRequestHandler,
    data: Any,
    status: int = 200,
    headers: dict[str, str] | None = None,
) -> None:
    """Send a JSON response."""
    body = json.dumps(data, ensure_ascii=False).encode("utf-8")
    bytes_response(handler, body, "application/json", status, headers)


def json_error(handler: BaseHTTPRequestHandler, message: str, status: int = 400) -> None:
    """Send a JSON error response."""
    json_response(handler, {"error": message}, status)


def read_json_body(handler: BaseHTTPRequestHandler, max_size: int = MAX_BODY_SIZE) -> Any:
    """Read and parse a JSON body from an HTTP request handler.

    Returns the parsed value on success, or None if an error response was
    already sent to the client.
    """
    length = int(handler.headers.get("Content-Length", 0))
    if length > max_size:
        logger.warning(
            "Rejected request from %s: payload too large (%d bytes)",
            handler.client_address[0],
            length,
        )
        json_error(handler, "Payload too large", 413)
        return None
    if length == 0:
        logger.warning("Rejected request from %s: empty body", handler.client_address[0])
        json_error(handler, "Empty body", 400)
        return None

    try:
        return json.loads(handler.rfile.read(length))
    except json.JSONDecodeError:
        logger.warning("Rejected request from %s: invalid JSON body", handler.client_address[0])
        json_error(handler, "Invalid JSON", 400)
        return None
