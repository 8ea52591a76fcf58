"""
Test configuration and shared fixtures for the Template Editor test suite.

Uses a throwaway SQLite database whose schema is built by the Alembic
migrations. Each test starts with an empty ``templates`` table.
"""

import os

# Keep the application engine off any developer database
os.environ.setdefault("DATABASE_URL", "sqlite://")

from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from alembic.config import Config
from alembic import command

from core.database import get_db
from models import Template
from shared_types.template import Template as TemplateDocument

BACKEND_DIR = Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session")
def test_database_url(tmp_path_factory) -> str:
    return f"sqlite:///{tmp_path_factory.mktemp('db') / 'test.db'}"


@pytest.fixture(scope="session")
def db_engine(test_database_url):
    """
    Create a database engine for the test session.

    The schema comes from running every Alembic migration from scratch, so
    the migrations are exercised by the whole suite.
    """
    alembic_cfg = Config(str(BACKEND_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", test_database_url)
    command.upgrade(alembic_cfg, "head")

    engine = create_engine(
        test_database_url,
        poolclass=NullPool,
        connect_args={"check_same_thread": False},
    )

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Provide a database session; rows written by the test are removed afterwards."""
    TestSession = sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)
    session = TestSession()

    yield session

    session.rollback()
    session.execute(delete(Template))
    session.commit()
    session.close()


@pytest.fixture
def client(db_session) -> Generator[TestClient, None, None]:
    """TestClient whose requests share the test's database session."""
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def sample_template_data():
    """A template document as a client would POST it."""
    return {
        "name": "Summer Sale",
        "width": 1080,
        "height": 1080,
        "backgroundColor": "#ffffff",
        "outputFormat": "png",
        "layers": [
            {
                "id": "headline",
                "type": "text",
                "name": "Headline",
                "position": {"x": 100, "y": 100},
                "size": {"width": 880, "height": 200},
                "zIndex": 2,
                "text": "Big ~Summer~ Sale",
                "font": {"family": "Arial", "size": 72, "weight": 700},
                "color": "#111111",
                "alignment": "center",
                "verticalAlignment": "middle",
                "dynamicField": "headline",
            },
            {
                "id": "backdrop",
                "type": "shape",
                "name": "Backdrop",
                "position": {"x": 0, "y": 0},
                "size": {"width": 1080, "height": 1080},
                "zIndex": 0,
                "shape": "rectangle",
                "fill": "#fde68a",
            },
        ],
    }


@pytest.fixture
def sample_template(sample_template_data) -> TemplateDocument:
    return TemplateDocument.model_validate(sample_template_data)
