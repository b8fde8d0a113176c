import logging
import re

import pytest
from fastapi.testclient import TestClient

from app.core.logging import setup_logging
from app.core.middleware import incoming_request_id
from app.main import app
from app.services import note_service

GENERATED = re.compile(r"^[0-9a-f]{32}$")


@pytest.mark.parametrize("sent", ["a b<script>", "x" * 65, ""])
def test_unsafe_request_ids_are_replaced(client, sent):
    response = client.get("/api/notes", headers={"X-Request-Id": sent})

    rid = response.headers["X-Request-Id"]
    assert rid != sent
    assert GENERATED.match(rid)
    assert response.json()["request_id"] == rid


def test_proxy_style_request_id_is_kept():
    assert incoming_request_id("edge-01.7f3a_9") == "edge-01.7f3a_9"
    assert GENERATED.match(incoming_request_id(None))


def test_cors_exposes_request_id_to_the_frontend(client):
    response = client.get("/api/health", headers={"Origin": "http://localhost:5173"})

    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert response.headers["access-control-allow-credentials"] == "true"
    assert "X-Request-Id" in response.headers["access-control-expose-headers"]


def _request_levels(caplog):
    return {
        r.getMessage().split(" ")[1]: r.levelno
        for r in caplog.records
        if r.name == "notes.request"
    }


def test_request_log_levels(client, monkeypatch, caplog):
    caplog.set_level(logging.DEBUG, logger="notes.request")

    def boom(identity):
        raise RuntimeError("store down")

    monkeypatch.setattr(note_service, "list_notes", boom)

    client.get("/api/health")
    client.get("/api/notes/abc")
    TestClient(app, raise_server_exceptions=False).get(
        "/api/notes", headers={"Authorization": "Bearer alice-token"}
    )

    levels = _request_levels(caplog)
    assert levels["path=/api/health"] == logging.DEBUG
    assert levels["path=/api/notes/abc"] == logging.INFO
    assert levels["path=/api/notes"] == logging.WARNING


@pytest.fixture()
def restore_levels():
    names = ["", "notes", "uvicorn", "uvicorn.error", "uvicorn.access", "pymongo", "google.auth", "urllib3"]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_setup_logging_debug_keeps_libraries_quiet(restore_levels):
    assert setup_logging("debug") == logging.DEBUG

    assert logging.getLogger("notes").level == logging.DEBUG
    assert logging.getLogger("uvicorn.access").level == logging.DEBUG
    assert logging.getLogger("pymongo").level == logging.INFO
    assert logging.getLogger("google.auth").level == logging.WARNING
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_setup_logging_never_lowers_below_requested(restore_levels):
    setup_logging("ERROR")

    assert logging.getLogger("notes").level == logging.ERROR
    assert logging.getLogger("pymongo").level == logging.ERROR
    assert logging.getLogger("google.auth").level == logging.ERROR


def test_unknown_level_falls_back_to_info(restore_levels, caplog):
    assert setup_logging("verbose") == logging.INFO

    assert logging.getLogger("notes").level == logging.INFO
    assert any("verbose" in r.getMessage() for r in caplog.records if r.name == "notes.startup")
