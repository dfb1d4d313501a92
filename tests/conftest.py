"""Pytest configuration and fixtures for paged query tests."""

import pytest
import pytest_asyncio
from sqlalchemy import Boolean, Column, ForeignKey, Integer, MetaData, String, Table, insert

from fastapi_pagedquery import JoinClause, JoinData, QueryDescriptor, Settings, create_engine

metadata = MetaData()

parents = Table(
    "parents",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String, nullable=False),
)

widgets = Table(
    "widgets",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String, nullable=False),
    Column("weight", Integer, nullable=False, default=0),
    Column("active", Boolean, nullable=False, default=True),
    Column("parent_id", Integer, ForeignKey("parents.id"), nullable=True),
)


def widget_term_where(term: str):
    if not term.strip():
        raise ValueError("blank term")
    return widgets.c.name.like(f"%{term}%")


def widget_row(row):
    return {"id": row.id, "name": row.name}


WIDGETS = QueryDescriptor(
    resource_name="widgets",
    columns=[widgets.c.id, widgets.c.name, widgets.c.weight],
    base_from=widgets,
    scope_joins={
        "active": JoinData(where=widgets.c.active.is_(True)),
        "heavy": JoinData(where=widgets.c.weight >= 3),
        "raw_heavy": JoinData(where="widgets.weight >= :min_weight", params={"min_weight": 3}),
        "with_parent": JoinData(
            join=JoinClause(parents, parents.c.id == widgets.c.parent_id),
            where=parents.c.name != "orphanage",
        ),
    },
    term_where=widget_term_where,
    sort_map={
        "": [widgets.c.id.asc()],
        "name": [widgets.c.name.asc(), widgets.c.id.asc()],
        "-weight": [widgets.c.weight.desc(), widgets.c.id.asc()],
    },
    decode=widget_row,
)


def parent_context(parent_id: int) -> JoinData:
    return JoinData(
        join=JoinClause(parents, parents.c.id == widgets.c.parent_id),
        where=parents.c.id == parent_id,
    )


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'widgets.db'}"


@pytest_asyncio.fixture
async def engine(database_url):
    """File-backed SQLite engine with the widget schema created."""
    engine = create_engine(Settings(database_url=database_url))
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    await engine.dispose()


async def seed_widgets(engine, rows: list[dict], parent_rows: list[dict] | None = None) -> None:
    async with engine.begin() as conn:
        if parent_rows:
            await conn.execute(insert(parents), parent_rows)
        await conn.execute(insert(widgets), rows)
