import itertools
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_token_verifier
from app.core import time as app_time
from app.core.config import settings
from app.infrastructure.http.firebase_token_client import IdentityTokenError
from app.main import app
from app.repositories import note_repo, user_repo

PROJECT = "notes-tests"
ISSUER = f"https://securetoken.google.com/{PROJECT}"
STOPPED_AT = datetime(2026, 3, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)


class FakeVerifier:
    """Stand-in for Firebase: known tokens map to fixed claims."""

    def __init__(self, tokens: Dict[str, Dict[str, Any]]) -> None:
        self.tokens = tokens
        self.calls = 0

    def verify(self, token: str) -> Dict[str, Any]:
        self.calls += 1
        if token not in self.tokens:
            raise IdentityTokenError("unknown token")
        return dict(self.tokens[token])


class StoreSpy:
    """Replaces `get_db` in the repositories and counts every access."""

    def __init__(self, db) -> None:
        self.db = db
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.db


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def clock(monkeypatch):
    """Each timestamp is one second after the previous one."""
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    ticks = itertools.count()

    def _now() -> datetime:
        return start + timedelta(seconds=next(ticks))

    monkeypatch.setattr(note_repo, "_now", _now)
    monkeypatch.setattr(user_repo, "_now", _now)


class _StoppedDatetime(datetime):
    @classmethod
    def now(cls, tz=None):
        return STOPPED_AT if tz is not None else STOPPED_AT.replace(tzinfo=None)


@pytest.fixture()
def stopped_clock(monkeypatch):
    """System clock stuck on one instant; repositories use the real `now_utc`."""
    monkeypatch.setattr(app_time, "datetime", _StoppedDatetime)
    monkeypatch.setattr(app_time, "_last", None)
    monkeypatch.setattr(note_repo, "_now", app_time.now_utc)
    monkeypatch.setattr(user_repo, "_now", app_time.now_utc)
    return STOPPED_AT


@pytest.fixture()
def store(monkeypatch):
    db = mongomock.MongoClient()["notes_test"]
    db["users"].create_index([("email", 1)], unique=True)
    spy = StoreSpy(db)
    monkeypatch.setattr(user_repo, "get_db", spy)
    monkeypatch.setattr(note_repo, "get_db", spy)
    return spy


@pytest.fixture()
def verifier():
    return FakeVerifier(
        {
            "alice-token": {"email": "alice@example.com", "name": "Alice", "sub": "uid-alice", "iss": ISSUER},
            "bob-token": {"email": "bob@example.com", "name": "Bob", "sub": "uid-bob", "iss": ISSUER},
            "carol-token": {"email": "Carol.Doe@Example.com", "sub": "uid-carol", "iss": ISSUER},
            "no-email-token": {"sub": "uid-anon", "iss": ISSUER},
        }
    )


@pytest.fixture()
def client(store, verifier, monkeypatch):
    """FastAPI test client with the verifier overridden (startup hooks not run)."""
    monkeypatch.setattr(settings, "jwt_secret", "tests-secret")
    app.dependency_overrides[get_token_verifier] = lambda: verifier
    yield TestClient(app)
    app.dependency_overrides.clear()
