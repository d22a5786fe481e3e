"""
Shared fixtures: an in-memory SQLite database per test and a FastAPI test
client wired to it. Quote templates are looked up in an empty temp dir so
the renderer exercises its fallback chain unless a test provides one.
"""
import os
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marinecrm.core.config import settings
from marinecrm.database import Base, get_db
from marinecrm.main import app
from marinecrm import models


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def template_dir(tmp_path, monkeypatch):
    path = tmp_path / "templates"
    path.mkdir()
    monkeypatch.setattr(settings, "quote_template_dir", str(path))
    return path


@pytest.fixture
def client(session_factory, template_dir):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def project(db):
    row = models.Project(
        name="Ferry 2",
        project_type="Anti-Heeling",
        opportunity_number="OPP-100",
        currency="USD",
        price_per_vessel=50000,
        number_of_vessels=2,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
