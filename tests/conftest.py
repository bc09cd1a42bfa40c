"""
Pytest fixtures for the budget administration test suite.

Provides:
- An in-memory SQLite database shared by the test session and the API
  client (``StaticPool`` keeps a single connection alive)
- A ``TestClient`` with ``get_db`` overridden
- ``budget_factory`` for budgets whose phases start on 2015-07-15

The phase catalog is always passed explicitly; tests that retire a kind
build their own ``PhaseCatalog`` instead of touching settings.
"""

import datetime
import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from budget_admin import models  # noqa: F401
from budget_admin.database import Base, get_db
from budget_admin.main import app
from budget_admin.schemas.budget import BudgetCreate
from budget_admin.services import budget_service
from budget_admin.utils.catalog import PhaseCatalog
from budget_admin.utils.constants import DRAFTING, PHASE_KINDS

LOCALES = ["en", "es"]
PHASES_START = datetime.datetime(2015, 7, 15)

_UNSET = object()


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        app.state.winner_calculator = None


@pytest.fixture
def catalog():
    return PhaseCatalog.of(PHASE_KINDS)


@pytest.fixture
def catalog_with_drafting():
    """Catalog from before the drafting kind was retired."""
    return PhaseCatalog.of([DRAFTING, *PHASE_KINDS])


@pytest.fixture
def budget_factory(db_session, catalog):
    """Create budgets through the service, optionally forcing raw columns.

    ``published`` and ``phase`` are written after creation, bypassing the
    draft rule and catalog validation, the way old rows look.
    """
    counter = itertools.count(1)

    def _make(
        name=None,
        phase=None,
        published=_UNSET,
        catalog=catalog,
        start=PHASES_START,
    ):
        data = BudgetCreate(name={"en": name or f"Budget {next(counter)}"})
        budget = budget_service.create_budget(
            db_session, data, catalog, LOCALES, start=start
        )
        if phase is not None:
            budget.phase = phase
        if published is not _UNSET:
            budget.published = published
        db_session.commit()
        return budget

    return _make
