"""
Shared pytest fixtures.

The API and services run against an in-memory stand-in for the motor
collection API, so no MongoDB server is needed.
"""

import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from core.database import DatabaseManager, database


class FakeCursor:
    def __init__(self, documents, fail=None):
        self._documents = documents
        self._fail = fail

    def sort(self, field, direction=1):
        self._documents = sorted(
            self._documents, key=lambda doc: doc.get(field), reverse=direction == -1
        )
        return self

    def limit(self, count):
        self._documents = self._documents[:count]
        return self

    async def to_list(self, length=None):
        if self._fail:
            raise self._fail
        documents = self._documents if length is None else self._documents[:length]
        return [copy.deepcopy(doc) for doc in documents]


class FakeCollection:
    def __init__(self, fail=None):
        self.documents = {}
        self.fail = fail
        self.indexes = []

    def _check(self):
        if self.fail:
            raise self.fail

    @staticmethod
    def _matches(document, query):
        return all(document.get(key) == value for key, value in query.items())

    async def insert_one(self, document):
        self._check()
        document_id = document.get("_id") or ObjectId()
        stored = copy.deepcopy(document)
        stored["_id"] = document_id
        self.documents[document_id] = stored
        return SimpleNamespace(inserted_id=document_id)

    async def find_one(self, query):
        self._check()
        for document in self.documents.values():
            if self._matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query=None):
        matching = [
            doc for doc in self.documents.values() if self._matches(doc, query or {})
        ]
        return FakeCursor(matching, fail=self.fail)

    async def replace_one(self, query, replacement):
        self._check()
        for document_id, document in self.documents.items():
            if self._matches(document, query):
                stored = copy.deepcopy(replacement)
                stored["_id"] = document_id
                self.documents[document_id] = stored
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query):
        self._check()
        for document_id, document in list(self.documents.items()):
            if self._matches(document, query):
                del self.documents[document_id]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def create_index(self, keys, **kwargs):
        self.indexes.append(keys)
        return str(keys)


class FakeDatabase:
    def __init__(self, fail=None):
        self.fail = fail
        self.collections = {}

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(fail=self.fail)
        return self.collections[name]

    async def command(self, name):
        if self.fail:
            raise self.fail
        return {"ok": 1}


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def failing_db():
    """Every operation raises, as a dropped connection would"""
    return FakeDatabase(fail=RuntimeError("connection reset"))


@pytest.fixture
def manager(fake_db):
    """A connected DatabaseManager backed by the in-memory store"""
    db_manager = DatabaseManager()
    db_manager.db = fake_db
    db_manager.connected = True
    return db_manager


@pytest.fixture
def api_db(monkeypatch, fake_db):
    """Point the shared manager used by the routers at the in-memory store"""
    monkeypatch.setattr(database, "db", fake_db)
    monkeypatch.setattr(database, "connected", True)
    return fake_db


@pytest.fixture
def client(api_db):
    from api.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def support_payload():
    return {
        "fullName": "  Jane Doe ",
        "email": " Jane.Doe@Example.COM ",
        "inquiryType": "patient",
        "message": "I need help arranging a home visit.",
    }


@pytest.fixture
def appointment_payload():
    return {
        "patientName": " John Smith ",
        "email": "John@Example.com",
        "phone": " 555-0100 ",
        "appointmentDate": "2026-11-02T10:30:00",
        "appointmentType": "checkup",
        "notes": "First visit",
    }
