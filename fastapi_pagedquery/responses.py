from typing import Generic, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncEngine

from .core import execute_paged_query
from .descriptor import JoinData, QueryDescriptor
from .params import PageInfo, SearchParams

T = TypeVar("T")


class PagedResponse(BaseModel, Generic[T]):
    """Envelope returned by list endpoints: one page of items plus paging totals."""

    model_config = ConfigDict(populate_by_name=True)

    data: list[T]
    message: str
    page_info: PageInfo = Field(alias="pageInfo")


async def list_resource(
    engine: AsyncEngine,
    descriptor: QueryDescriptor,
    params: SearchParams,
    context_joins: Sequence[JoinData] = (),
    single_scope: bool = False,
) -> PagedResponse:
    if single_scope:
        params.ensure_single_scope()

    result = await execute_paged_query(engine, descriptor, params, context_joins)
    params = params.with_total_pages(result.total)
    return PagedResponse(
        data=result.items,
        message=f"{descriptor.resource_name[:1].upper()}{descriptor.resource_name[1:]} retrieved.",
        page_info=params.page_info,
    )
