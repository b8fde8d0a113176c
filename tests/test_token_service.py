from datetime import datetime, timedelta, timezone

import jwt
import pytest
from bson import ObjectId

from app.core.config import settings
from app.services import token_service


@pytest.fixture(autouse=True)
def secret(monkeypatch):
    monkeypatch.setattr(settings, "jwt_secret", "tests-secret")


def test_session_token_round_trip():
    uid = ObjectId()
    token = token_service.create_session_token(user={"_id": uid, "email": "a@example.com"})

    payload = token_service.verify_session_token(token)
    assert payload["sub"] == str(uid)
    assert payload["email"] == "a@example.com"


def test_expired_session_token_rejected():
    past = datetime.now(timezone.utc) - timedelta(days=1)
    token = jwt.encode({"sub": "x", "exp": int(past.timestamp())}, "tests-secret", algorithm="HS256")
    with pytest.raises(jwt.ExpiredSignatureError):
        token_service.verify_session_token(token)


def test_token_without_subject_rejected():
    future = datetime.now(timezone.utc) + timedelta(days=1)
    token = jwt.encode({"exp": int(future.timestamp())}, "tests-secret", algorithm="HS256")
    with pytest.raises(jwt.MissingRequiredClaimError):
        token_service.verify_session_token(token)


def test_no_secret_configured(monkeypatch):
    token = token_service.create_session_token(user={"_id": ObjectId()})
    monkeypatch.setattr(settings, "jwt_secret", None)

    with pytest.raises(jwt.InvalidTokenError):
        token_service.verify_session_token(token)
    with pytest.raises(RuntimeError):
        token_service.create_session_token(user={"_id": ObjectId()})
