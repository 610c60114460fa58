"""
Collection pagination and the range headers sent with every page.

    GET /api/v1/events?page=2&itemsPerPage=10

    Accept-Ranges: items
    Range-Unit: items
    Content-Range: 10-20/42
    X-Total-Count: 42
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from fastapi import Query
from sqlalchemy import Select, func
from sqlalchemy.orm import Session

T = TypeVar("T")

DEFAULT_ITEMS_PER_PAGE = 30
MAX_ITEMS_PER_PAGE = 100


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    items_per_page: int = DEFAULT_ITEMS_PER_PAGE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.items_per_page


def page_request(
    page: int = Query(1, ge=1),
    items_per_page: int = Query(DEFAULT_ITEMS_PER_PAGE, ge=1, le=MAX_ITEMS_PER_PAGE, alias="itemsPerPage"),
) -> PageRequest:
    return PageRequest(page=page, items_per_page=items_per_page)


@dataclass(frozen=True)
class Paginator(Generic[T]):
    items: list[T]
    total_items: int
    current_page: int
    items_per_page: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total_items / self.items_per_page))

    def headers(self) -> dict[str, str]:
        start = (self.current_page - 1) * self.items_per_page if self.items else 0
        end = self.current_page * self.items_per_page if self.current_page < self.last_page else self.total_items

        return {
            "Accept-Ranges": "items",
            "Range-Unit": "items",
            "Content-Range": f"{start}-{end}/{self.total_items}",
            "X-Total-Count": str(self.total_items),
        }


def paginate(db: Session, stmt: Select, request: PageRequest) -> Paginator:
    """
    Run `stmt` for one page plus a count over the same FROM/WHERE.

    Execution options (e.g. `row_scope`) are carried over to the count, so
    both queries see the same rows.
    """

    count_stmt = stmt.with_only_columns(func.count(), maintain_column_froms=True).order_by(None)
    total = db.execute(count_stmt).scalar_one()

    items = list(db.scalars(stmt.offset(request.offset).limit(request.items_per_page)).all())

    return Paginator(
        items=items,
        total_items=int(total),
        current_page=request.page,
        items_per_page=request.items_per_page,
    )
