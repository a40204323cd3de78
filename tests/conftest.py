"""Shared fixtures: in-memory SQLite database, seeded users, fake prospect store"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("APP_ENV", "dev")

from typing import List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from src.prospect_tool.database import SessionLocal, engine
from src.prospect_tool.exceptions import StoreError
from src.prospect_tool.models import Base
from src.prospect_tool.models.user import User, UserRole
from src.prospect_tool.services.csv_import import IMPORT_SESSIONS
from src.prospect_tool.services.prospect_store import ExistingProspect


class FakeStore:
    """In-memory ProspectStore that records every call."""

    def __init__(
        self,
        existing: Sequence[ExistingProspect] = (),
        lookup_error: Optional[Exception] = None,
        failing_batches: Sequence[int] = (),
    ):
        self.existing = list(existing)
        self.lookup_error = lookup_error
        self.failing_batches = set(failing_batches)
        self.lookups: List[tuple] = []
        self.batches: List[list] = []

    async def find_existing(self, domains, emails):
        self.lookups.append((list(domains), list(emails)))
        if self.lookup_error is not None:
            raise self.lookup_error
        return [
            p for p in self.existing
            if (p.company_domain and p.company_domain.lower() in domains)
            or (p.contact_email and p.contact_email.lower() in emails)
        ]

    async def insert_batch(self, records):
        self.batches.append(list(records))
        if len(self.batches) in self.failing_batches:
            raise StoreError("insert failed: connection reset")

    @property
    def batch_sizes(self) -> List[int]:
        return [len(batch) for batch in self.batches]


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    IMPORT_SESSIONS.clear()
    yield
    IMPORT_SESSIONS.clear()
    Base.metadata.drop_all(bind=engine)


def _create_user(email: str, name: str, role: UserRole) -> User:
    with SessionLocal() as db:
        user = User(email=email, name=name, role=role, is_active=True)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user


@pytest.fixture
def agent() -> User:
    return _create_user("agent@example.com", "Agent", UserRole.AGENT)


@pytest.fixture
def viewer() -> User:
    return _create_user("viewer@example.com", "Viewer", UserRole.VIEWER)


@pytest.fixture
def client():
    from src.prospect_tool.main import app
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
