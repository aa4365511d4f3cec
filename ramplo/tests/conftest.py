from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import ramplo.db.base  # noqa: F401  registers every model on Base
from ramplo.core.auth_guard import create_access_token
from ramplo.core.config import settings
from ramplo.core.dependencies import get_today
from ramplo.db.base_class import Base
from ramplo.db.crud.users import create_user
from ramplo.db.session import get_db
from ramplo.main import app as fastapi_app, init_app_state
from ramplo.schemas.roadmap import SprintTemplate
from ramplo.services.catalog import (
    RoadmapCatalog,
    TemplateCatalog,
    load_roadmap_catalog,
    load_template_catalog,
)

# A Monday, so week 1 day 1 of a program started on it
TODAY = date(2025, 3, 3)


@pytest.fixture
def db():
    # Use StaticPool to share sqlite memory across connections
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="session")
def roadmap_catalog() -> RoadmapCatalog:
    return load_roadmap_catalog(settings.ROADMAP_CATALOG_PATH)


@pytest.fixture(scope="session")
def template_catalog() -> TemplateCatalog:
    return load_template_catalog(settings.TEMPLATE_CATALOG_PATH)


@pytest.fixture
def make_sprint():
    """Builds a small sprint: ``weeks`` weeks with ``per_day`` tasks on each of days 1..5."""
    def _make(sprint_id="s1", focus="purchase", experience_level="new", time_commitment="30", weeks=2, per_day=1):
        return SprintTemplate.model_validate({
            "id": sprint_id,
            "name": f"Sprint {sprint_id}",
            "focus": focus,
            "experience_level": experience_level,
            "time_commitment": time_commitment,
            "description": f"{focus} / {experience_level} / {time_commitment}",
            "weeks": [
                {
                    "week": w,
                    "theme": f"Theme {w}",
                    "tasks": [
                        {
                            "day": d,
                            "title": f"W{w}D{d} task {n}",
                            "description": f"Do thing {n} on week {w} day {d}",
                            "category": "networking",
                            "estimated_minutes": 10 + n,
                        }
                        for d in range(1, 6)
                        for n in range(1, per_day + 1)
                    ],
                }
                for w in range(1, weeks + 1)
            ],
        })
    return _make


@pytest.fixture
def user(db):
    return create_user(db, "lo@example.com", first_name="Dana", last_name="Reyes")


@pytest.fixture
def other_user(db):
    return create_user(db, "other@example.com", first_name="Sam")


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _headers


@pytest.fixture
def app(db):
    """The FastAPI app wired to the test session, shipped catalogs and no advisory key."""
    init_app_state(fastapi_app)

    def override_get_db():
        yield db

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_today] = lambda: TODAY
    yield fastapi_app
    fastapi_app.dependency_overrides = {}
