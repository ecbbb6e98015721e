"""
Shared fixtures: an in-memory stand-in for the Mongo collection, the
settings built from a clean environment and a TestClient on the app.
"""
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError
from pymongo.results import InsertOneResult

from members_api.core.config import Settings
from members_api.main import create_app
from members_api.storage.members import MemberStore

ENV_VARS = (
    "PORT", "LOG_LEVEL", "CORS_ORIGINS",
    "MONGO_URI", "MONGO_DB", "MONGO_COLLECTION", "MONGO_TIMEOUT_MS",
    "CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET",
    "CLOUDINARY_API_BASE", "CLOUDINARY_TIMEOUT",
    "KEEP_ALIVE_URL", "KEEP_ALIVE_INTERVAL", "KEEP_ALIVE_TIMEOUT", "KEEP_ALIVE_ENABLED",
    "RENDER_EXTERNAL_URL",
)


# ── In-memory collection ─────────────────────────────────────────────────
class FakeCursor:
    def __init__(self, collection, documents):
        self._collection = collection
        self._documents = list(documents)

    def sort(self, key, direction=1):
        self._documents.sort(key=lambda d: d.get(key) or "", reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        self._collection.check()
        return [dict(d) for d in self._documents]


class FakeDatabase:
    name = "members"

    def __init__(self):
        self.available = True

    async def command(self, name):
        if not self.available:
            raise ServerSelectionTimeoutError("No servers found yet")
        return {"ok": 1.0}


class FakeCollection:
    """Implements the handful of AsyncCollection calls MemberStore makes."""

    def __init__(self):
        self.documents = {}
        self.database = FakeDatabase()
        self.error = None

    def fail(self, message="connection refused"):
        self.error = ServerSelectionTimeoutError(message)
        self.database.available = False

    def check(self):
        if self.error is not None:
            raise self.error

    async def insert_one(self, document):
        self.check()
        document.setdefault("_id", ObjectId())
        self.documents[document["_id"]] = dict(document)
        return InsertOneResult(document["_id"], acknowledged=True)

    def find(self, filter=None):
        return FakeCursor(self, self.documents.values())

    async def find_one(self, filter):
        self.check()
        document = self.documents.get(filter["_id"])
        return dict(document) if document is not None else None

    async def find_one_and_update(self, filter, update, return_document=False):
        self.check()
        document = self.documents.get(filter["_id"])
        if document is None:
            return None
        before = dict(document)
        document.update(update["$set"])
        return dict(document) if return_document else before

    async def find_one_and_delete(self, filter):
        self.check()
        return self.documents.pop(filter["_id"], None)


# ── Fixtures ─────────────────────────────────────────────────────────────
@pytest.fixture
def settings(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    monkeypatch.setenv("CLOUDINARY_API_KEY", "123456")
    monkeypatch.setenv("CLOUDINARY_API_SECRET", "s3cr3t")
    monkeypatch.setenv("KEEP_ALIVE_ENABLED", "false")
    return Settings()


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def store(collection):
    return MemberStore(collection)


@pytest.fixture
def app(settings, store):
    application = create_app(settings)
    application.state.member_store = store
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


def member_payload(**overrides):
    payload = {
        "nome": "Maria Silva",
        "dataNascimento": "1990-04-12",
        "endereco": "Rua das Flores, 10",
        "telefone": "(11) 99999-0000",
        "cargo": "Tesoureira",
    }
    payload.update(overrides)
    return payload
