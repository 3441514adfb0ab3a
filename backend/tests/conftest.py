import os
from datetime import datetime, timedelta, timezone

import pytest

# point the app at a throwaway in-memory database before it is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "dev"
os.environ["SEED_ON_STARTUP"] = "false"

from sqlmodel import SQLModel, Session  # noqa: E402

from app import models  # noqa: E402
from app.database import engine, create_db_and_tables  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    """Ensure every test starts from an empty schema."""
    SQLModel.metadata.drop_all(engine)
    create_db_and_tables()
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def ticking_clock(monkeypatch):
    """Make every service timestamp one second later than the previous one."""
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    ticks = iter(range(1, 100000))
    monkeypatch.setattr(models, "utcnow", lambda: start + timedelta(seconds=next(ticks)))
