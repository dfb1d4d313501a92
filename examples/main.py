from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

from fastapi import FastAPI
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker
import uvicorn

from fastapi_pagedquery import PagedList, PagedResponse, configure_logging, dispose_engine, get_engine

from examples.models import Base, Brand, Mall, MallStore, Store
from examples.resources import MALLS, STORES, mall_context
from examples.schemas import MallResponse, StoreResponse


# ───── Lifespan / Seed Data ─────────────────────

@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False)
    async with SessionLocal() as session:
        result = await session.execute(select(Mall))
        if not result.scalars().first():
            now = datetime.now(timezone.utc)
            acme = Brand(name="Acme")
            globex = Brand(name="Globex")
            north = Mall(name="Northgate", city="Seattle", is_open=True)
            south = Mall(name="Southpoint", city="Durham", is_open=True)
            east = Mall(name="Eastland", city="Columbus", is_open=False)
            session.add_all([acme, globex, north, south, east])
            await session.flush()

            widgets = Store(name="Widget World", description="All things widget", brand=acme, updated_at=now)
            gadgets = Store(name="Gadget Garage", description="Gadgets and widgets", brand=globex,
                            updated_at=now - timedelta(days=90))
            books = Store(name="Book Nook", description="Used books", brand=None, updated_at=now)
            closed = Store(name="Old Widget Outlet", description="Closing down", brand=acme, active=False,
                           updated_at=now - timedelta(days=400))
            session.add_all([widgets, gadgets, books, closed])
            await session.flush()

            session.add_all([
                MallStore(mall_id=north.id, store_id=widgets.id, anchor=True),
                MallStore(mall_id=north.id, store_id=books.id),
                MallStore(mall_id=south.id, store_id=widgets.id),
                MallStore(mall_id=south.id, store_id=gadgets.id, anchor=True),
                MallStore(mall_id=east.id, store_id=closed.id, anchor=True),
            ])
            await session.commit()

    yield

    await dispose_engine()

# ───── FastAPI App ───────────────────────────────

app = FastAPI(lifespan=lifespan)


@app.get("/stores", response_model=PagedResponse[StoreResponse])
async def list_stores(page=PagedList(STORES)):
    return page


@app.get("/malls/{mall_id}/stores", response_model=PagedResponse[StoreResponse])
async def list_mall_stores(page=PagedList(STORES, context=mall_context)):
    return page


@app.get("/malls", response_model=PagedResponse[MallResponse])
async def list_malls(page=PagedList(MALLS, single_scope=True)):
    return page


# ───── Run Server ────────────────────────────────

if __name__ == "__main__":
    uvicorn.run("examples.main:app", host="0.0.0.0", port=8000, reload=True)
