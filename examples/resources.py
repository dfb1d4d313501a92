from datetime import datetime, timedelta, timezone

from sqlalchemy import DateTime, bindparam, or_

from fastapi_pagedquery import JoinClause, JoinData, QueryDescriptor

from examples.models import Brand, Mall, MallStore, Store
from examples.schemas import MallResponse, StoreResponse

stores = Store.__table__
brands = Brand.__table__
mall_stores = MallStore.__table__

MAX_TERM_LENGTH = 100


def like_term(term: str) -> str:
    term = term.strip()
    if not term:
        raise ValueError("Empty search term")
    if len(term) > MAX_TERM_LENGTH:
        raise ValueError(f"Search term longer than {MAX_TERM_LENGTH} characters")
    return f"%{term}%"


# ───── Stores ────────────────────────────────────

def store_term_where(term: str):
    pattern = like_term(term)
    return or_(Store.name.ilike(pattern), Store.description.ilike(pattern), Brand.name.ilike(pattern))


def reuse_mall_stores_join(context_joins):
    """Anchor stores need mall_stores; a mall context already joins it."""
    for join_data in context_joins:
        if join_data.join is not None and join_data.join.target is mall_stores:
            return True, None
    return False, None


def thirty_days_ago() -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=30)


STORE_SCOPES = {
    "active": JoinData(where=Store.active.is_(True)),
    "recent": JoinData(
        where=Store.updated_at >= bindparam("recent_since", callable_=thirty_days_ago, type_=DateTime),
    ),
    "unbranded": JoinData(where="stores.brand_id IS NULL"),
    "anchor": JoinData(
        join=JoinClause(mall_stores, mall_stores.c.store_id == stores.c.id),
        where=mall_stores.c.anchor.is_(True),
        join_test=reuse_mall_stores_join,
    ),
}

STORES = QueryDescriptor(
    resource_name="stores",
    columns=[
        Store.id,
        Store.name,
        Store.description,
        Store.active,
        Store.updated_at,
        Brand.name.label("brand_name"),
    ],
    # brand is denormalized into every row
    base_from=stores.outerjoin(brands, stores.c.brand_id == brands.c.id),
    scope_joins=STORE_SCOPES,
    term_where=store_term_where,
    sort_map={
        "": [Store.name.asc(), Store.id.asc()],
        "name": [Store.name.asc(), Store.id.asc()],
        "-name": [Store.name.desc(), Store.id.desc()],
        "updated": [Store.updated_at.desc(), Store.id.asc()],
    },
    decode=lambda row: StoreResponse.model_validate(dict(row._mapping)),
)


def mall_context(mall_id: int) -> list[JoinData]:
    """Context joins for /malls/{mall_id}/stores."""
    return [
        JoinData(
            join=JoinClause(mall_stores, mall_stores.c.store_id == stores.c.id),
            where="mall_stores.mall_id = :mall_id",
            params={"mall_id": mall_id},
        )
    ]


# ───── Malls ─────────────────────────────────────

def mall_term_where(term: str):
    pattern = like_term(term)
    return or_(Mall.name.ilike(pattern), Mall.city.ilike(pattern))


MALLS = QueryDescriptor(
    resource_name="malls",
    columns=[Mall.id, Mall.name, Mall.city, Mall.is_open],
    base_from=Mall.__table__,
    scope_joins={
        "all": JoinData(),
        "open": JoinData(where=Mall.is_open.is_(True)),
        "closed": JoinData(where=Mall.is_open.is_(False)),
    },
    term_where=mall_term_where,
    sort_map={
        "": [Mall.name.asc()],
        "city": [Mall.city.asc(), Mall.name.asc()],
    },
    decode=lambda row: MallResponse.model_validate(dict(row._mapping)),
)
