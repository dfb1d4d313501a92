# fastapi_pagedquery/core.py

from dataclasses import dataclass
from typing import Any, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine

from .builder import build_paged_query
from .descriptor import JoinData, QueryDescriptor
from .errors import ServerError
from .params import PageInfo, SearchParams

logger = structlog.get_logger()


@dataclass(frozen=True)
class PagedResult:
    items: list[Any]
    total: int

    def page_info(self, params: SearchParams) -> PageInfo:
        return params.page_info.with_total(self.total)


async def execute_paged_query(
    engine: AsyncEngine,
    descriptor: QueryDescriptor,
    params: SearchParams,
    context_joins: Sequence[JoinData] = (),
) -> PagedResult:
    """
    Run one page of a list query plus its total count in a single transaction.

    Input errors (unknown scope or sort, rejected term) are raised before a
    connection is taken from the pool. Any failure once the transaction is
    open rolls it back and surfaces as ``ServerError``; cancellation rolls
    back and propagates as is.
    """
    query = build_paged_query(descriptor, params, context_joins)
    log = logger.bind(resource=descriptor.resource_name)

    try:
        page_sql, count_sql = query.compile(engine.dialect)
        log.debug("pagedquery.statement", sql=page_sql.sql, params=page_sql.params, count_sql=count_sql.sql)
        async with engine.connect() as conn:
            async with conn.begin():
                result = await conn.execute(query.page)
                try:
                    items = [descriptor.decode(row) for row in result]
                finally:
                    result.close()
                # the page result must be closed before the next statement runs
                total = (await conn.execute(query.count)).scalar_one()
    except Exception as e:
        log.error("pagedquery.rollback", error=str(e), error_type=type(e).__name__)
        raise ServerError(descriptor.resource_name) from e

    log.debug(
        "pagedquery.executed",
        returned=len(items),
        total=total,
        page_index=params.page_info.page_index,
        items_per_page=params.page_info.items_per_page,
    )
    return PagedResult(items=items, total=total)
