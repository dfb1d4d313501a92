# fastapi_pagedquery/dependencies.py

from typing import Callable, Optional, Sequence

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine

from .db import get_engine as default_get_engine
from .descriptor import JoinData, QueryDescriptor
from .params import SearchParams, get_search_params
from .responses import PagedResponse, list_resource


def no_context() -> Sequence[JoinData]:
    return ()


def PagedList(
    descriptor: QueryDescriptor,
    get_engine: Callable[[], AsyncEngine] = default_get_engine,
    context: Optional[Callable[..., Sequence[JoinData]]] = None,
    single_scope: bool = False,
):
    """
    Dependency resolving to a ``PagedResponse`` for ``descriptor``.

    ``context`` is itself a dependency, typically reading path parameters,
    that returns the context joins for the request, e.g. limiting stores to
    the mall named in ``/malls/{mall_id}/stores``.
    """
    async def wrapper(
        params: SearchParams = Depends(get_search_params),
        context_joins: Sequence[JoinData] = Depends(context or no_context),
        engine: AsyncEngine = Depends(get_engine),
    ) -> PagedResponse:
        return await list_resource(engine, descriptor, params, context_joins, single_scope)
    return Depends(wrapper)
