from .builder import PagedQuery, PagedQueryBuilder, build_paged_query
from .config import Settings, get_settings
from .core import PagedResult, execute_paged_query
from .db import create_engine, dispose_engine, get_engine
from .dependencies import PagedList
from .descriptor import JoinClause, JoinData, JoinTest, QueryDescriptor
from .errors import BadRequestError, PagedQueryError, ServerError, UnprocessableEntityError
from .log import configure_logging
from .params import PageInfo, SearchParams, SearchQueryParams, get_search_params
from .responses import PagedResponse, list_resource

__all__ = [
    "BadRequestError",
    "JoinClause",
    "JoinData",
    "JoinTest",
    "PageInfo",
    "PagedList",
    "PagedQuery",
    "PagedQueryBuilder",
    "PagedQueryError",
    "PagedResponse",
    "PagedResult",
    "QueryDescriptor",
    "SearchParams",
    "SearchQueryParams",
    "ServerError",
    "Settings",
    "UnprocessableEntityError",
    "build_paged_query",
    "configure_logging",
    "create_engine",
    "dispose_engine",
    "execute_paged_query",
    "get_engine",
    "get_search_params",
    "get_settings",
    "list_resource",
]
