import asyncio
import os
from decimal import Decimal

import pytest

# fleetdesk.db refuses to import without a URL; tests build their own engines.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./fleetdesk-test.db")
os.environ["AUTO_CREATE_TABLES"] = "false"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

import fleetdesk.models  # noqa: E402,F401
from fleetdesk.crud.route_status import seed_default_statuses  # noqa: E402
from fleetdesk.db import get_db  # noqa: E402
from fleetdesk.main import app  # noqa: E402
from fleetdesk.models.base import Base  # noqa: E402
from fleetdesk.models.dispatcher import Dispatcher  # noqa: E402
from fleetdesk.models.driver import Driver  # noqa: E402


@pytest.fixture
def session_factory(tmp_path):
    """Fresh SQLite file per test, schema created and the status catalog seeded."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'fleetdesk.db'}", poolclass=NullPool)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _setup():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with factory() as db:
            await seed_default_statuses(db)

    asyncio.run(_setup())
    yield factory
    asyncio.run(engine.dispose())


@pytest.fixture
def run_db(session_factory):
    """Run ``fn(db)`` on its own session and return the result."""
    def _run(fn):
        async def _go():
            async with session_factory() as db:
                return await fn(db)
        return asyncio.run(_go())
    return _run


@pytest.fixture
def driver(run_db):
    """Jane Doe on 25% commission, dispatched by Sam Hill."""
    async def _create(db):
        dispatcher = Dispatcher(first_name="Sam", last_name="Hill")
        db.add(dispatcher)
        await db.flush()
        driver = Driver(
            first_name="Jane",
            last_name="Doe",
            count=1,
            percentage=Decimal("25"),
            dispatcher_id=dispatcher.id,
        )
        db.add(driver)
        await db.commit()
        return driver
    return run_db(_create)


@pytest.fixture
def client(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
