from __future__ import annotations

import math
from typing import Any

from rest_framework.pagination import PageNumberPagination

from .responses import success_response


def pagination_meta(page: int, per_page: int, total: int) -> dict[str, Any]:
    total_pages = math.ceil(total / per_page) if per_page else 0
    has_next = page < total_pages
    has_prev = page > 1
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalItems": total,
        "itemsPerPage": per_page,
        "hasNextPage": has_next,
        "hasPrevPage": has_prev,
        "nextPage": page + 1 if has_next else None,
        "prevPage": page - 1 if has_prev else None,
    }


class EnvelopePagination(PageNumberPagination):
    """``page``/``limit`` pagination reporting the camel-cased metadata the web client reads."""

    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100
    items_key = "results"

    def paginate(self, queryset, request, view=None, items_key: str | None = None):
        if items_key:
            self.items_key = items_key
        return self.paginate_queryset(queryset, request, view=view)

    def get_payload(self, data) -> dict[str, Any]:
        return {
            self.items_key: data,
            "pagination": pagination_meta(
                self.page.number,
                self.page.paginator.per_page,
                self.page.paginator.count,
            ),
        }

    def get_paginated_response(self, data):
        return success_response("Retrieved successfully", self.get_payload(data))
