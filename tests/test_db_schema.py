"""Tests for database schema creation."""

from mercado.db.schema import _SCHEMA_VERSION, ensure_schema


def test_ensure_schema_creates_tables(tmp_path):
    """Schema creates the lists and schema_version tables."""
    conn = ensure_schema(tmp_path / "test.db")

    tables = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    ).fetchall()
    table_names = {row["name"] for row in tables}

    assert "lists" in table_names
    assert "schema_version" in table_names

    conn.close()


def test_ensure_schema_creates_parent_dirs(tmp_path):
    db_path = tmp_path / "sub" / "dir" / "test.db"
    conn = ensure_schema(db_path)
    assert db_path.exists()
    conn.close()


def test_ensure_schema_idempotent(tmp_path):
    """Calling ensure_schema twice doesn't error."""
    db_path = tmp_path / "test.db"
    ensure_schema(db_path).close()

    conn = ensure_schema(db_path)
    row = conn.execute("SELECT version FROM schema_version").fetchone()
    assert row["version"] == _SCHEMA_VERSION
    conn.close()


def test_ensure_schema_wal_mode(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    mode = conn.execute("PRAGMA journal_mode").fetchone()
    assert mode[0] == "wal"
    conn.close()


def test_ensure_schema_in_memory():
    conn = ensure_schema(":memory:")
    row = conn.execute("SELECT version FROM schema_version").fetchone()
    assert row["version"] == _SCHEMA_VERSION
    conn.close()


def test_lists_columns(tmp_path):
    """lists table matches the persisted record shape."""
    conn = ensure_schema(tmp_path / "test.db")

    info = conn.execute("PRAGMA table_info(lists)").fetchall()
    columns = {row["name"]: row for row in info}

    assert set(columns) == {"id", "name", "total", "items", "timestamp"}
    assert columns["id"]["pk"] == 1
    assert columns["timestamp"]["type"] == "INTEGER"

    conn.close()
