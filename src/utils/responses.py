"""API Gateway HTTP API request/response helpers."""

from __future__ import annotations

import base64
import json
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from utils.error_handling import AppError, ValidationError, to_response

JSON_HEADERS = {"Content-Type": "application/json"}


def json_response(status: int, body: Any) -> Dict[str, Any]:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": dict(JSON_HEADERS),
        "body": body if isinstance(body, str) else json.dumps(body),
    }


def parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the JSON request body; direct invocations pass the payload as the event."""
    raw = event.get("body")
    if raw is None:
        return {k: v for k, v in event.items() if k not in ("requestContext", "headers")}
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")
    payload = json.loads(raw or "{}")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def path_parameter(event: Dict[str, Any], name: str) -> Optional[str]:
    return (event.get("pathParameters") or {}).get(name)


def error_response(exc: Exception, correlation_id: str) -> Dict[str, Any]:
    """Map request errors onto proxy responses."""
    if isinstance(exc, AppError):
        return to_response(exc, correlation_id)
    if isinstance(exc, PydanticValidationError):
        return json_response(
            422,
            {
                "message": "Invalid request",
                "errors": json.loads(exc.json(include_url=False)),
                "correlation_id": correlation_id,
            },
        )
    return json_response(
        400,
        {"message": "Invalid request", "error": str(exc), "correlation_id": correlation_id},
    )
