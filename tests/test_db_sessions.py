"""Tests for SessionStore persistence."""

import dataclasses
import sqlite3

import pytest

from mercado.db import SessionStore
from mercado.errors import StorageReadError, StorageWriteError
from mercado.models import Analysis, Item

from conftest import make_item, make_session


def _raw_rows(store_path):
    conn = sqlite3.connect(str(store_path))
    try:
        return conn.execute("SELECT id, name, total, items, timestamp FROM lists").fetchall()
    finally:
        conn.close()


def test_empty_store_lists_nothing(store):
    assert store.list_sessions() == []


def test_save_then_list_roundtrip(store):
    """A saved list comes back equal, items included and in order."""
    items = [
        make_item(name="Arroz", price=29.9, category="mercearia"),
        make_item(name="Banana", price=5.5, category="frutas", analysis=Analysis.CHEAP),
        make_item(name="Café", price=18.0, category="mercearia", analysis=Analysis.EXPENSIVE),
    ]
    session = make_session(id="abc", items=items, timestamp=1234)
    store.save_session(session)

    listed = store.list_sessions()
    assert listed == [session]
    assert [i.name for i in listed[0].items] == ["Arroz", "Banana", "Café"]


def test_list_newest_first(store):
    store.save_session(make_session(id="old", total=1.0, timestamp=100))
    store.save_session(make_session(id="new", total=2.0, timestamp=300))
    store.save_session(make_session(id="mid", total=3.0, timestamp=200))

    assert [s.id for s in store.list_sessions()] == ["new", "mid", "old"]


def test_upsert_replaces_existing(store):
    """Saving the same id twice keeps one record with the latest contents."""
    store.save_session(make_session(id="x", total=10.0, items=[make_item(price=10.0)]))
    store.save_session(make_session(id="x", total=20.0, items=[]))

    sessions = store.list_sessions()
    assert len(sessions) == 1
    assert sessions[0].id == "x"
    assert sessions[0].total == 20.0
    assert sessions[0].items == ()


def test_upsert_idempotent(store, tmp_path):
    session = make_session(id="x", items=[make_item(price=3.0)])
    store.save_session(session)
    once = _raw_rows(tmp_path / "shopping.db")
    store.save_session(session)
    twice = _raw_rows(tmp_path / "shopping.db")

    assert once == twice
    assert store.list_sessions() == [session]


def test_total_is_stored_as_given(store):
    """The store trusts the caller-supplied total and never recomputes it."""
    session = make_session(id="t", total=99.0, items=[make_item(price=1.0)])
    store.save_session(session)
    assert store.list_sessions()[0].total == 99.0


def test_delete_removes_session(store):
    store.save_session(make_session(id="a", timestamp=1))
    store.save_session(make_session(id="b", timestamp=2))
    store.delete_session("a")
    assert [s.id for s in store.list_sessions()] == ["b"]


def test_delete_missing_is_noop(store):
    store.save_session(make_session(id="a"))
    store.delete_session("does-not-exist")
    store.delete_session("does-not-exist")
    assert [s.id for s in store.list_sessions()] == ["a"]


def test_get_session(store):
    session = make_session(id="g", items=[make_item()])
    store.save_session(session)
    assert store.get_session("g") == session
    assert store.get_session("missing") is None


def test_persists_across_instances(tmp_path):
    db_path = tmp_path / "shopping.db"
    first = SessionStore(db_path=db_path)
    first.save_session(make_session(id="p", items=[make_item()]))
    first.close()

    second = SessionStore(db_path=db_path)
    try:
        assert [s.id for s in second.list_sessions()] == ["p"]
    finally:
        second.close()


def _insert_raw(db_path, items_blob, id="bad"):
    conn = sqlite3.connect(str(db_path))
    with conn:
        conn.execute(
            "INSERT INTO lists (id, name, total, items, timestamp) VALUES (?, ?, ?, ?, ?)",
            (id, "Compra", 1.0, items_blob, 1),
        )
    conn.close()


@pytest.mark.parametrize(
    "blob",
    [
        "not json",
        '{"id": "x"}',
        '[{"id": "x", "name": "y"}]',
        '[{"id": "x", "name": "y", "price": 1, "category": "c", '
        '"analysis": "unknown", "timestamp": 1}]',
    ],
)
def test_corrupt_items_fail_the_whole_read(store, tmp_path, blob):
    """One unparseable row fails list_sessions instead of returning partial data."""
    store.save_session(make_session(id="good"))
    _insert_raw(tmp_path / "shopping.db", blob)

    with pytest.raises(StorageReadError, match="bad"):
        store.list_sessions()


def test_corrupt_items_fail_get_session(store, tmp_path):
    store.list_sessions()  # create schema
    _insert_raw(tmp_path / "shopping.db", "{{{")
    with pytest.raises(StorageReadError):
        store.get_session("bad")


def test_save_rejects_unserializable_items(store):
    session = make_session(id="w")
    broken = session.__class__(
        id="w", name="n", items=("not an item",), total=1.0, timestamp=1
    )
    with pytest.raises(StorageWriteError, match="w"):
        store.save_session(broken)
    assert store.list_sessions() == []


def test_save_rejects_nan_price(store):
    item = make_item()
    object.__setattr__(item, "price", float("nan"))
    with pytest.raises(StorageWriteError):
        store.save_session(make_session(id="nan", total=1.0, items=[item]))


@pytest.mark.parametrize(
    "item_fields",
    [
        {"price": -5.0},
        {"timestamp": 1.5},
        {"price": "5,00"},
        {"category": None},
    ],
)
def test_save_rejects_items_the_reader_would_reject(store, item_fields):
    """A malformed item is refused on write and the history stays readable."""
    store.save_session(make_session(id="good", items=[make_item()]))
    fields = {
        "name": "Arroz",
        "price": 5.0,
        "category": "mercearia",
        "analysis": Analysis.FAIR,
        "timestamp": 1,
        **item_fields,
    }
    bad = make_session(id="bad", total=5.0, items=[Item(**fields)])

    with pytest.raises(StorageWriteError, match="bad"):
        store.save_session(bad)
    assert [s.id for s in store.list_sessions()] == ["good"]


@pytest.mark.parametrize(
    "session_fields",
    [
        {"timestamp": 1.5},
        {"timestamp": True},
        {"total": "10"},
        {"total": float("inf")},
    ],
)
def test_save_rejects_malformed_session_fields(store, session_fields):
    session = make_session(id="bad", items=[make_item()])
    bad = dataclasses.replace(session, **session_fields)
    with pytest.raises(StorageWriteError):
        store.save_session(bad)
    assert store.list_sessions() == []


def test_write_failure_raises_storage_write_error(tmp_path):
    db_path = tmp_path / "shopping.db"
    store = SessionStore(db_path=db_path)
    store.list_sessions()
    conn = store._get_conn()
    conn.execute("DROP TABLE lists")
    conn.commit()

    with pytest.raises(StorageWriteError):
        store.save_session(make_session(id="z"))
    with pytest.raises(StorageWriteError):
        store.delete_session("z")
    store.close()


def test_read_failure_raises_storage_read_error(tmp_path):
    store = SessionStore(db_path=tmp_path / "shopping.db")
    conn = store._get_conn()
    conn.execute("DROP TABLE lists")
    conn.commit()

    with pytest.raises(StorageReadError):
        store.list_sessions()
    store.close()
