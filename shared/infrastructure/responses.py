"""
Response envelope helpers.

Every payload leaving the API has the shape
``{success, message, data, timestamp}``; error payloads also carry the
request ``path`` and ``method``.
"""

from __future__ import annotations

from typing import Any

from django.utils import timezone  # type: ignore
from rest_framework import status as http_status  # type: ignore
from rest_framework.response import Response  # type: ignore


def timestamp() -> str:
    return timezone.now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def envelope(message: str, data: Any = None, *, success: bool = True, **extra: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": success, "message": message}
    payload.update({key: value for key, value in extra.items() if value is not None})
    payload["data"] = data
    payload["timestamp"] = timestamp()
    return payload


def success(message: str, data: Any = None, *, status: int = http_status.HTTP_200_OK) -> Response:
    return Response(envelope(message, data), status=status)


def created(message: str, data: Any) -> Response:
    return success(message, data, status=http_status.HTTP_201_CREATED)


def error(message: str, data: Any = None, *, path: str | None = None, method: str | None = None) -> dict[str, Any]:
    return envelope(message, data, success=False, path=path, method=method)
