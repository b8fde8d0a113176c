from unittest.mock import MagicMock

from pymongo.errors import OperationFailure

from app.infrastructure.db import bootstrap


def _fake_db(existing=()):
    colls = {"users": MagicMock(name="users"), "notes": MagicMock(name="notes")}
    db = MagicMock()
    db.list_collection_names.return_value = list(existing)
    db.__getitem__.side_effect = colls.__getitem__
    return db, colls


def test_creates_collections_and_indexes(monkeypatch):
    db, colls = _fake_db()
    monkeypatch.setattr(bootstrap, "get_db", lambda: db)

    bootstrap.ensure_collections()

    created = [c.args[0] for c in db.create_collection.call_args_list]
    assert created == ["users", "notes"]

    user_ix = colls["users"].create_index.call_args_list
    assert user_ix[0].args[0] == [("email", 1)]
    assert user_ix[0].kwargs["unique"] is True

    note_keys = [c.args[0] for c in colls["notes"].create_index.call_args_list]
    assert [("user_id", 1), ("updated_at", -1)] in note_keys
    assert [("tags", 1)] in note_keys
    assert [("is_public", 1)] in note_keys


def test_existing_collections_get_collmod(monkeypatch):
    db, _ = _fake_db(existing=["users", "notes"])
    monkeypatch.setattr(bootstrap, "get_db", lambda: db)

    bootstrap.ensure_collections()

    db.create_collection.assert_not_called()
    mods = [c.args[0]["collMod"] for c in db.command.call_args_list]
    assert mods == ["users", "notes"]


def test_failures_do_not_abort(monkeypatch):
    db, colls = _fake_db(existing=["users", "notes"])
    db.command.side_effect = OperationFailure("not authorized")
    colls["users"].create_index.side_effect = OperationFailure("duplicate key")
    monkeypatch.setattr(bootstrap, "get_db", lambda: db)

    bootstrap.ensure_collections()

    assert colls["notes"].create_index.call_count == 3
