# backend/tests/conftest.py
import os
import sys
import mongomock
import pytest
from pathlib import Path

# Ensure the backend folder is on sys.path no matter where pytest is invoked from
BACKEND_DIR = Path(__file__).resolve().parents[1]  # .../backend
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGODB_DB", "budget_tracker_test")
os.environ.setdefault("INIT_SCHEMA_ON_STARTUP", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from errors import IndexCreationFailed  # noqa: E402
from store import Outcome  # noqa: E402


class FakeStore:
    """
    In-memory collection/index capability.
    - calls: every mutation request, in order
    - fail_on: {(collection, keys): exception} raised instead of creating
    """

    def __init__(self, fail_on=None):
        self.collections = set()
        self.indexes = {}
        self.calls = []
        self.fail_on = fail_on or {}

    def ensure_collection(self, name):
        self.calls.append(("collection", name))
        if name in self.collections:
            return Outcome.ALREADY_PRESENT
        self.collections.add(name)
        return Outcome.CREATED

    def ensure_index(self, collection, keys, unique=False):
        keys = tuple(keys)
        self.calls.append(("index", collection, keys))
        if (collection, keys) in self.fail_on:
            raise self.fail_on[(collection, keys)]
        if (collection, keys) in self.indexes:
            if self.indexes[(collection, keys)] != unique:
                raise IndexCreationFailed(f"conflicting uniqueness on {collection}")
            return Outcome.ALREADY_PRESENT
        self.indexes[(collection, keys)] = unique
        return Outcome.CREATED


@pytest.fixture()
def mock_db():
    mm_client = mongomock.MongoClient()
    return mm_client["budget_tracker_test"]


@pytest.fixture()
def fake_store():
    return FakeStore()


@pytest.fixture()
def failing_store():
    """Build a FakeStore that raises on the given (collection, keys) pairs."""
    return lambda fail_on: FakeStore(fail_on=fail_on)


@pytest.fixture()
def app(mock_db):
    from app import create_app

    app = create_app(database=mock_db)
    app.config.update(TESTING=True)
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()
