# tests/conftest.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from taskboard.identity import IdentityProvider
from taskboard.schemas import Role, User
from taskboard.storage import USERS, DocumentStorage
from taskboard.task_store import TaskStore

from .fakes import NOW, FailingBackend, FakeClock


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture()
def backend() -> FailingBackend:
    return FailingBackend()


@pytest.fixture()
def storage(backend: FailingBackend) -> DocumentStorage:
    return DocumentStorage(backend)


@pytest.fixture()
def users(storage: DocumentStorage) -> SimpleNamespace:
    """Admin plus two employees, already persisted."""
    admin = User(id="u-admin", name="Ada Admin", email="ada@example.com", role=Role.ADMIN)
    john = User(id="u-john", name="John Employee", email="john@example.com", role=Role.EMPLOYEE)
    jane = User(id="u-jane", name="Jane Employee", email="jane@example.com", role=Role.EMPLOYEE)
    for user in (admin, john, jane):
        storage.put(USERS, user.to_record())
    return SimpleNamespace(admin=admin, john=john, jane=jane)


@pytest.fixture()
def identity(storage: DocumentStorage, users: SimpleNamespace) -> IdentityProvider:
    return IdentityProvider(storage)


@pytest.fixture()
def store(storage: DocumentStorage, identity: IdentityProvider, clock: FakeClock) -> TaskStore:
    return TaskStore(storage, identity, clock=clock)
