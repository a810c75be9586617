"""Page/limit pagination with the enveloped list response."""

from __future__ import annotations

import math

from django.conf import settings  # type: ignore
from rest_framework.pagination import BasePagination  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import InvalidPaginationError
from shared.infrastructure.responses import timestamp

PAGINATION_ERROR = "Invalid pagination parameters. Page must be >= 1, limit must be between 1 and 100."


def _limits() -> tuple[int, int]:
    conf = getattr(settings, "BOOKINGS", {})
    return conf.get("DEFAULT_PAGE_SIZE", 10), conf.get("MAX_PAGE_SIZE", 100)


def parse_pagination(params) -> tuple[int, int]:
    """Read ``page`` and ``limit`` from query params, validating both."""
    default_limit, max_limit = _limits()
    raw_page = params.get("page") or 1
    raw_limit = params.get("limit") or default_limit
    try:
        page = int(raw_page)
        limit = int(raw_limit)
    except (TypeError, ValueError):
        raise InvalidPaginationError(PAGINATION_ERROR) from None

    if page < 1 or limit < 1 or limit > max_limit:
        raise InvalidPaginationError(PAGINATION_ERROR)
    return page, limit


class EnvelopePagination(BasePagination):
    """
    Offset pagination driven by ``page`` and ``limit``.

    Pages past the end yield an empty ``data`` list rather than a 404.
    """

    def paginate_queryset(self, queryset, request, view=None):  # type: ignore
        self.page, self.limit = parse_pagination(request.query_params)
        self.message = getattr(view, "list_message", "Items retrieved successfully")
        self.total_items = queryset.count()
        offset = (self.page - 1) * self.limit
        return list(queryset[offset : offset + self.limit])

    def get_paginated_response(self, data):  # type: ignore
        total_pages = math.ceil(self.total_items / self.limit)
        return Response(
            {
                "success": True,
                "message": self.message,
                "currentPage": self.page,
                "pageSize": self.limit,
                "totalItems": self.total_items,
                "totalPages": total_pages,
                "hasMore": self.page < total_pages,
                "length": len(data),
                "data": data,
                "timestamp": timestamp(),
            }
        )
