import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.config import Settings
from app.database import create_engine, create_sessionmaker, init_models
from app.schemas import IssueCreate


def sqlite_url(path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    # A file database so concurrent sessions see the same data
    engine = create_engine(sqlite_url(tmp_path / "test.db"))
    await init_models(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(engine):
    return create_sessionmaker(engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_issue():
    """Build issue fields with sensible defaults, overridable per test."""

    def _make_issue(**overrides) -> IssueCreate:
        fields = {
            "title": "Pothole on Main Street",
            "category": "roads",
            "location": "Main St & 3rd Ave",
            "description": "Deep pothole in the left lane",
            "priority": "high",
        }
        fields.update(overrides)
        return IssueCreate(**fields)

    return _make_issue


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=sqlite_url(tmp_path / "api.db"),
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def client(settings):
    """Test client running the full application lifespan against temp storage."""
    from main import create_app

    with TestClient(create_app(settings)) as client:
        yield client
