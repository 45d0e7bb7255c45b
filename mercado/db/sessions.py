"""Saved shopping list storage."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path

from ..errors import StorageReadError, StorageWriteError
from ..models import Item, Session
from .schema import ensure_schema

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "~/.config/mercado/shopping.db"


class SessionStore:
    """Manages the lists table.

    Items are kept as a JSON blob inside each row; they are only ever read
    together with the list that owns them.
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def list_sessions(self) -> list[Session]:
        """Return every saved list, newest first.

        Raises:
            StorageReadError: If the database can't be read or any row's
                items can't be parsed. No partial result is returned.
        """
        try:
            conn = self._get_conn()
            rows = conn.execute(
                "SELECT * FROM lists ORDER BY timestamp DESC, rowid DESC"
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageReadError(f"falha ao ler as listas salvas: {e}") from e
        return [_row_to_session(row) for row in rows]

    def get_session(self, session_id: str) -> Session | None:
        """Return one saved list by id, or None if it doesn't exist."""
        try:
            conn = self._get_conn()
            row = conn.execute(
                "SELECT * FROM lists WHERE id = ?", (session_id,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageReadError(f"falha ao ler a lista {session_id}: {e}") from e
        return _row_to_session(row) if row else None

    def save_session(self, session: Session) -> None:
        """Insert or fully replace a saved list by id.

        The record is checked with the same rules used when reading it back,
        so a list accepted here can always be listed later.

        Raises:
            StorageWriteError: If the list or its items are malformed, or the
                write fails.
        """
        try:
            checked = Session.from_dict(_session_to_dict(session))
            items_json = json.dumps(
                [i.to_dict() for i in checked.items],
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise StorageWriteError(
                f"itens inválidos na lista {session.id}: {e}"
            ) from e

        try:
            conn = self._get_conn()
            with conn:
                conn.execute(
                    """INSERT OR REPLACE INTO lists
                       (id, name, total, items, timestamp)
                       VALUES (?, ?, ?, ?, ?)""",
                    (
                        checked.id,
                        checked.name,
                        checked.total,
                        items_json,
                        checked.timestamp,
                    ),
                )
        except sqlite3.Error as e:
            raise StorageWriteError(
                f"falha ao salvar a lista {session.id}: {e}"
            ) from e
        logger.info("lista salva: %s (%d itens)", session.id, len(session.items))

    def delete_session(self, session_id: str) -> None:
        """Delete a saved list. Deleting an unknown id is not an error."""
        try:
            conn = self._get_conn()
            with conn:
                cur = conn.execute("DELETE FROM lists WHERE id = ?", (session_id,))
        except sqlite3.Error as e:
            raise StorageWriteError(
                f"falha ao excluir a lista {session_id}: {e}"
            ) from e
        if cur.rowcount:
            logger.info("lista excluída: %s", session_id)
        else:
            logger.debug("lista inexistente, nada a excluir: %s", session_id)


def _session_to_dict(session: Session) -> dict:
    data = {
        "id": session.id,
        "name": session.name,
        "items": [],
        "total": session.total,
        "timestamp": session.timestamp,
    }
    for item in session.items:
        if not isinstance(item, Item):
            raise TypeError(f"esperado Item, recebido {type(item).__name__}")
        data["items"].append(item.to_dict())
    return data


def _row_to_session(row: sqlite3.Row) -> Session:
    try:
        data = dict(row)
        data["items"] = json.loads(row["items"])
        return Session.from_dict(data)
    except (TypeError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        raise StorageReadError(
            f"itens corrompidos na lista {row['id']}: {e}"
        ) from e
