"""Pytest configuration for backend tests."""
import sys
import os
from datetime import datetime, timedelta
from pathlib import Path
from uuid import uuid4
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are read at import time; never point tests at a real database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_JWT_SECRET", "test-session-secret")

from app.database import Base, get_db  # noqa: E402

# Register every model with Base.metadata before create_all()
import app.models  # noqa: E402,F401
from app.models import Profile, Startup, UserPreferences  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture(scope="function")
def engine():
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps the single connection shared between the test and the
    TestClient worker thread.
    """
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Session:
    """Database session for each test; routers under test share it."""
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db: Session):
    """TestClient whose get_db dependency yields the test session."""
    from fastapi.testclient import TestClient

    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_profile(db: Session):
    """Factory for Profile rows."""
    def _make(email: str = None, **kwargs) -> Profile:
        profile = Profile(
            id=uuid4(),
            email=email or f"{uuid4().hex[:8]}@example.com",
            full_name=kwargs.pop("full_name", "Test Founder"),
            **kwargs,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
    return _make


@pytest.fixture
def make_preferences(db: Session, make_profile):
    """Factory for a Profile plus its onboarding preferences."""
    def _make(email: str = "visitor@example.com", tags=None, stage=None, location=None) -> UserPreferences:
        profile = make_profile(email=email)
        prefs = UserPreferences(
            profile_id=profile.id,
            tags=tags,
            stage=stage,
            location=location,
        )
        db.add(prefs)
        db.commit()
        db.refresh(prefs)
        return prefs
    return _make


@pytest.fixture
def make_startup(db: Session):
    """Factory for Startup rows; ``age_days`` sets created_at relative to now."""
    def _make(
        name: str = "Test Startup",
        tags=None,
        funding_stage: str = "Seed",
        location: str = None,
        likes: int = 0,
        views: int = 0,
        age_days: float = 1.0,
        **kwargs,
    ) -> Startup:
        startup = Startup(
            id=uuid4(),
            slug=kwargs.pop("slug", f"{name.lower().replace(' ', '-')}-{uuid4().hex[:8]}"),
            name=name,
            short_description=kwargs.pop("short_description", f"{name} in one line"),
            tags=tags if tags is not None else [],
            funding_stage=funding_stage,
            location=location,
            likes=likes,
            views=views,
            created_at=kwargs.pop("created_at", datetime.utcnow() - timedelta(days=age_days)),
            **kwargs,
        )
        db.add(startup)
        db.commit()
        db.refresh(startup)
        return startup
    return _make
