import os
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "60"

from racecoach.core.clock import FixedClock, get_clock  # noqa: E402
from racecoach.database import Base, get_db  # noqa: E402
from racecoach.main import app  # noqa: E402

# Monday 10 February 2025, one week after the default program start.
NOW = datetime(2025, 2, 10, 9, 0, tzinfo=timezone.utc)

engine = create_engine(
    os.environ["DATABASE_URL"],
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def reset_database() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture(autouse=True)
def _prepare_db():
    reset_database()


@pytest.fixture()
def set_now():
    def _set(instant: datetime) -> None:
        app.dependency_overrides[get_clock] = lambda: FixedClock(instant)

    return _set


@pytest.fixture()
def client(set_now):
    app.dependency_overrides[get_db] = override_get_db
    set_now(NOW)
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
