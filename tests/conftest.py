import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.main import app
from src.database.db import get_db, Base
from src.database.models import Contact
from src.conf.config import settings


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh in-memory database for every test.
    """
    engine = create_async_engine(
        settings.database_test_url,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncSession:
    session_factory = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest_asyncio.fixture
async def test_client(db_session: AsyncSession):
    async def override_get_db_for_test_client():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db_for_test_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        try:
            yield client
        finally:
            app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def saved_contact(db_session: AsyncSession) -> Contact:
    contact = Contact(first_name="Jane", last_name="Smith", email="jane@example.com", phone="+1-555-123-4567")
    db_session.add(contact)
    await db_session.commit()
    await db_session.refresh(contact)
    return contact
