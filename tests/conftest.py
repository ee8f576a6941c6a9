"""
Pytest fixtures: an in-memory SQLite database per test, a record store
bound to it, and helpers to build teams and task sets quickly.
"""
import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from sqlalchemy.orm import sessionmaker

from app.db import create_db_engine, init_db
from app.models import Priority, Status
from app.store import RecordStore


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return RecordStore(db)


@pytest.fixture
def owner(store):
    """A user owning the records under test. Password hashing is not needed here."""
    return store.create_user("owner", "not-a-real-hash")


@pytest.fixture
def other_owner(store):
    return store.create_user("someone-else", "not-a-real-hash")


@pytest.fixture
def make_members(store, owner):
    """Create members in registration order: make_members(("A", 2), ("B", 3))."""
    def _make(*specs, owner_id=None):
        oid = owner_id if owner_id is not None else owner.id
        return [store.create_member(oid, name, capacity) for name, capacity in specs]
    return _make


@pytest.fixture
def add_tasks(store, owner):
    """Add one Todo task per priority to a member: add_tasks(member, "Low", "High")."""
    def _add(member, *priorities, status=Status.TODO, owner_id=None):
        oid = owner_id if owner_id is not None else owner.id
        member_id = member.id if member is not None else None
        return [
            store.create_task(oid, f"{Priority(p).value} task {i}", member_id, Priority(p), status)
            for i, p in enumerate(priorities)
        ]
    return _add
