"""
Per-resource templates for paged list queries.

A resource module builds one ``QueryDescriptor`` at import time and reuses it
for every request. Request handlers add ``JoinData`` derived from the URL
(e.g. ``/malls/{id}/stores`` limits stores to one mall); end users pick named
scopes out of the descriptor's ``scope_joins``.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, Union

from sqlalchemy import ColumnElement, FromClause, Row, bindparam, text
from sqlalchemy.sql.elements import TextClause


@dataclass(frozen=True)
class JoinClause:
    target: FromClause
    onclause: Optional[ColumnElement[bool]] = None
    isouter: bool = False


# Given the context joins of the current request, return (True, override) to
# replace a scope's own JOIN. An override of None drops the JOIN altogether.
JoinTest = Callable[[Sequence["JoinData"]], Tuple[bool, Optional[JoinClause]]]

# Turns one raw search term into a WHERE condition. Raise ValueError or
# TypeError to reject the term.
TermWhereGenerator = Callable[[str], ColumnElement[bool]]

ResultDecoder = Callable[[Row], Any]

WhereClause = Union[ColumnElement[bool], TextClause, str]


@dataclass(frozen=True)
class JoinData:
    """
    A JOIN plus the WHERE condition that goes with it.

    ``where`` may be a SQLAlchemy expression, in which case its bound values
    are already embedded, or raw SQL using ``:name`` placeholders that are
    filled from ``params``. Either way the condition and its values stay
    together.
    """

    join: Optional[JoinClause] = None
    where: Optional[WhereClause] = None
    params: Mapping[str, Any] = field(default_factory=dict)
    join_test: Optional[JoinTest] = None

    def __post_init__(self):
        if self.params and not isinstance(self.where, (str, TextClause)):
            raise ValueError("params only apply to a raw SQL where clause.")

    def resolve_join(self, context_joins: Sequence["JoinData"]) -> Optional[JoinClause]:
        if self.join_test is None:
            return self.join
        use_override, override = self.join_test(context_joins)
        return override if use_override else self.join

    def criterion(self) -> Optional[ColumnElement[bool]]:
        if self.where is None:
            return None
        clause = text(self.where) if isinstance(self.where, str) else self.where
        if self.params:
            # unique, so fragments reusing a placeholder name keep their own values
            clause = clause.bindparams(
                *(bindparam(key, value, unique=True) for key, value in self.params.items())
            )
        return clause


@dataclass(frozen=True)
class QueryDescriptor:
    resource_name: str
    columns: Sequence[ColumnElement[Any]]
    base_from: FromClause
    term_where: TermWhereGenerator
    # ORDER BY clauses per sort key; "" is the default order
    sort_map: Mapping[str, Sequence[ColumnElement[Any]]]
    decode: ResultDecoder
    scope_joins: Mapping[str, JoinData] = field(default_factory=dict)

    def __post_init__(self):
        if "" not in self.sort_map:
            raise ValueError(f"Sort map for {self.resource_name} needs a default entry keyed by ''.")
        if not self.columns:
            raise ValueError(f"No columns selected for {self.resource_name}.")
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "sort_map", MappingProxyType(
            {key: tuple(clauses) for key, clauses in self.sort_map.items()}))
        object.__setattr__(self, "scope_joins", MappingProxyType(dict(self.scope_joins)))
