"""
Pytest configuration and fixtures for testing.
"""
import json
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from learning_app.core.database import Base, get_db
from learning_app.main import app
from learning_app.models import Source, Session, Problem

SAMPLE_TRANSCRIPT = "\n".join([
    "[0:00] Welcome to this lecture on graph search.",
    "[0:45] Breadth first search explores the graph level by level using a queue.",
    "[2:30] Depth first search follows one path as deep as possible using a stack.",
    "[5:10] Breadth first search finds shortest paths in unweighted graphs.",
    "[8:20] Dijkstra generalizes breadth first search to weighted graphs.",
])


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test.db"


@pytest.fixture
def test_engine(db_path):
    """Create a file-backed SQLite database with all tables."""
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(test_engine):
    """Sync session for seeding and inspecting the test database."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=test_engine)
    session = TestingSessionLocal()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def client(db_path, test_engine):
    """Create a test client whose requests use the test database."""
    async_engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    TestingAsyncSessionLocal = sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with TestingAsyncSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def sample_source(db_session):
    """A processed video with two stored breakpoints."""
    source = Source(
        title="Graph Search Explained",
        url="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        video_id="dQw4w9WgXcQ",
        transcript=SAMPLE_TRANSCRIPT,
        duration=600,
        thumbnail="https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
        breakpoints=json.dumps([
            {"timestamp": 300, "reason": "BFS and DFS introduced"},
            {"timestamp": 600, "reason": "End of video"},
        ])
    )
    db_session.add(source)
    db_session.commit()
    return source


@pytest.fixture
def make_session(db_session):
    """Factory for sessions; later calls get later created_at values."""
    counter = {"n": 0}

    def _make(source, viewer_id="viewer-1", start_time=0, end_time=300, status="challenging"):
        counter["n"] += 1
        created = datetime(2026, 1, 1) + timedelta(minutes=counter["n"])
        session = Session(
            viewer_id=viewer_id,
            source_id=source.id,
            start_time=start_time,
            end_time=end_time,
            status=status,
            created_at=created,
            updated_at=created
        )
        db_session.add(session)
        db_session.commit()
        return session

    return _make


@pytest.fixture
def make_problems(db_session):
    """Factory storing a multiple choice, a true/false and a free-text problem."""

    def _make(session):
        problems = [
            Problem(
                session_id=session.id,
                position=0,
                type="multiple_choice",
                text="Which data structure drives breadth first search?",
                difficulty="Easy",
                options=["Stack", "Queue", "Heap"],
                solution=1
            ),
            Problem(
                session_id=session.id,
                position=1,
                type="true_false",
                text="Depth first search always finds the shortest path.",
                difficulty="Medium",
                solution=False
            ),
            Problem(
                session_id=session.id,
                position=2,
                type="application",
                text="How would you find the fewest subway transfers between two stations?",
                difficulty="Hard"
            ),
        ]
        db_session.add_all(problems)
        db_session.commit()
        return problems

    return _make
