"""Page envelope and the shared paginated fetch."""

import math
from collections.abc import Callable
from typing import Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.schemas import CamelModel

T = TypeVar("T")


class Page(CamelModel, Generic[T]):
    """One page of a listing plus the numbers a client needs to navigate."""

    items: list[T]
    total_count: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, items: list[T], total_count: int, page: int, limit: int) -> "Page[T]":
        total_pages = math.ceil(total_count / limit) if limit else 0
        return cls(
            items=items,
            total_count=total_count,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


async def paginate(
    db: AsyncSession,
    stmt: Select,
    page: int,
    limit: int,
    to_item: Callable[[Row], T],
) -> Page[T]:
    """Run a composed listing query for one page.

    The total is carried on every row as ``COUNT(*) OVER ()``, so a page and
    its total come back in one round trip. Only an empty page past the end
    needs a separate count.
    """
    page = max(page, 1)
    rows = (
        await db.execute(
            stmt.add_columns(func.count().over().label("total_count"))
            .limit(limit)
            .offset((page - 1) * limit)
        )
    ).all()

    if rows:
        total = rows[0].total_count
    elif page > 1:
        total = await db.scalar(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        )
    else:
        total = 0

    return Page.build([to_item(row) for row in rows], total or 0, page, limit)
