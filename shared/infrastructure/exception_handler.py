"""DRF exception handler producing the error envelope."""

from __future__ import annotations

import logging
from typing import Any, Iterator

from rest_framework import exceptions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler, set_rollback  # type: ignore

from shared.domain.exceptions import DomainError
from shared.infrastructure.responses import error

logger = logging.getLogger(__name__)


def _flatten(detail: Any, prefix: str = "") -> Iterator[str]:
    if isinstance(detail, dict):
        for key, value in detail.items():
            label = "" if key in ("non_field_errors", "detail") else f"{key}: "
            yield from _flatten(value, label)
    elif isinstance(detail, (list, tuple)):
        for item in detail:
            yield from _flatten(item, prefix)
    else:
        yield f"{prefix}{detail}"


def envelope_exception_handler(exc, context):  # type: ignore
    request = context.get("request")
    path = getattr(request, "path", None)
    method = getattr(request, "method", None)

    if isinstance(exc, DomainError):
        if exc.status_code >= 500:
            logger.error(f"{method} {path} failed: {exc.message}")
        else:
            logger.info(f"{method} {path} rejected ({exc.kind}): {exc.message}")
        set_rollback()
        body = error(exc.message, exc.to_dict(), path=path, method=method)
        return Response(body, status=exc.status_code)

    response = drf_exception_handler(exc, context)
    if response is not None:
        detail = exc.detail if isinstance(exc, exceptions.APIException) else response.data
        message = ", ".join(_flatten(detail)) or "Request failed"
        data = {"errors": response.data} if isinstance(exc, exceptions.ValidationError) else None
        response.data = error(message, data, path=path, method=method)
        return response

    logger.exception(f"Unhandled error on {method} {path}")
    set_rollback()
    body = error("Internal server error", path=path, method=method)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
