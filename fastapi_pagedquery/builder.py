from dataclasses import dataclass
from typing import Any, Sequence

from sqlalchemy import ColumnElement, FromClause, Select, func, select
from sqlalchemy.engine import Dialect

from .descriptor import JoinClause, JoinData, QueryDescriptor
from .errors import BadRequestError, UnprocessableEntityError
from .params import SearchParams


@dataclass(frozen=True)
class CompiledQuery:
    sql: str
    params: tuple[Any, ...]


@dataclass(frozen=True)
class PagedQuery:
    page: Select
    count: Select
    offset: int
    limit: int

    def compile(self, dialect: Dialect) -> tuple[CompiledQuery, CompiledQuery]:
        return _compile(self.page, dialect), _compile(self.count, dialect)


def _compile(stmt: Select, dialect: Dialect) -> CompiledQuery:
    compiled = stmt.compile(dialect=dialect)
    if compiled.positiontup is not None:
        params = tuple(compiled.params[name] for name in compiled.positiontup)
    else:
        params = tuple(compiled.params.values())
    return CompiledQuery(str(compiled), params)


class PagedQueryBuilder:
    """
    Accumulates JOINs and WHERE conditions in the order they are added.

    Each condition carries its own bound values, so placeholders and values
    cannot drift apart no matter how many sources contribute clauses.
    """

    def __init__(self, descriptor: QueryDescriptor):
        self.descriptor = descriptor
        self.joins: list[JoinClause] = []
        self.criteria: list[ColumnElement[bool]] = []

    def add_join(self, join: JoinClause | None) -> "PagedQueryBuilder":
        if join is not None:
            self.joins.append(join)
        return self

    def add_where(self, criterion: ColumnElement[bool] | None) -> "PagedQueryBuilder":
        if criterion is not None:
            self.criteria.append(criterion)
        return self

    def add_join_data(self, join_data: JoinData, join: JoinClause | None) -> "PagedQueryBuilder":
        return self.add_join(join).add_where(join_data.criterion())

    def from_clause(self) -> FromClause:
        from_ = self.descriptor.base_from
        for join in self.joins:
            from_ = from_.join(join.target, join.onclause, isouter=join.isouter)
        return from_

    def build(self, order_by: Sequence[ColumnElement[Any]], offset: int, limit: int) -> PagedQuery:
        filtered = select(*self.descriptor.columns).distinct().select_from(self.from_clause())
        # no conditions at all: leave the WHERE clause out
        if self.criteria:
            filtered = filtered.where(*self.criteria)

        page = filtered.order_by(*order_by).limit(limit).offset(offset)
        count = select(func.count()).select_from(filtered.subquery("matching"))
        return PagedQuery(page=page, count=count, offset=offset, limit=limit)


def build_paged_query(
    descriptor: QueryDescriptor,
    params: SearchParams,
    context_joins: Sequence[JoinData] = (),
) -> PagedQuery:
    """
    Compose the page and total-count statements for one request.

    Clauses are added in a fixed order: context joins, then scopes, then
    search terms. Raises ``BadRequestError`` for unknown scopes or rejected
    terms and ``UnprocessableEntityError`` for unknown sort keys. Nothing here
    touches the database.
    """
    builder = PagedQueryBuilder(descriptor)

    for context_join in context_joins:
        builder.add_join_data(context_join, context_join.join)

    for scope in params.scopes:
        scope_join = descriptor.scope_joins.get(scope)
        if scope_join is None:
            raise BadRequestError(f"Found unknown scope: '{scope}'.", {"scope": scope})
        builder.add_join_data(scope_join, scope_join.resolve_join(context_joins))

    for term in params.terms:
        try:
            builder.add_where(descriptor.term_where(term))
        except (ValueError, TypeError) as e:
            raise BadRequestError(f"Could not process search term: '{term}'.", {"term": term}) from e

    order_by = descriptor.sort_map.get(params.sort)
    if order_by is None:
        raise UnprocessableEntityError(f"Bad sort value: '{params.sort}'.", {"sort": params.sort})

    page_info = params.page_info
    return builder.build(order_by, offset=page_info.offset, limit=page_info.items_per_page)
