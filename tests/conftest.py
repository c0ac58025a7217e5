import os
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENABLE_SCHEDULER", "false")
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("FREE_TIER_ANALYSIS_LIMIT", "5")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from adintel.database import Base, get_db
from adintel.main import app
from adintel.models import Analysis, Creative, User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def api_client(db_session):
    def get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = get_db_override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def user(db_session):
    user = User(id="user-1", email="marketer@example.com")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def make_creative(creative_id, cta=None, performance=None, **kwargs):
    """Unsaved creative for pure metric tests."""
    return Creative(
        id=creative_id,
        user_id=kwargs.pop("user_id", "user-1"),
        source_type=kwargs.pop("source_type", "own"),
        cta=cta,
        performance=performance if performance is not None else {},
        **kwargs,
    )


def make_analysis(creative_id, **result):
    return Analysis(id=f"analysis-{creative_id}", creative_id=creative_id, analysis_result=result)
