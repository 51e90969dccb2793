"""
Document collections on top of SQLite.

Items and outfits are loosely typed records, so each one is kept as a
JSON document in its own table.  ``DocumentCollection`` offers the
small find/save vocabulary the services need, plus the ownership list
operations backed by a link table (``user_items`` / ``user_outfits``).

All methods take a cursor so that callers control the transaction:
creating a document and appending its id to the owner's list happen in
the same ``get_cursor()`` block and commit or roll back together.
"""

import json
import re
import sqlite3
from typing import Any, Dict, List, Optional


_FIELD_PATH = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class DocumentCollection:
    """A table of JSON documents with an owner link table."""

    def __init__(self, table: str, link_table: str, link_column: str) -> None:
        self.table = table
        self.link_table = link_table
        self.link_column = link_column

    @staticmethod
    def _to_document(row: sqlite3.Row) -> Dict[str, Any]:
        document = json.loads(row["document"])
        document["id"] = row["id"]
        return document

    def _where(self, filters: Dict[str, Any]) -> tuple[str, list]:
        clauses: List[str] = []
        params: List[Any] = []
        for key, value in filters.items():
            if key == "id":
                clauses.append("id = ?")
                params.append(value)
                continue
            if not _FIELD_PATH.match(key):
                raise ValueError(f"Invalid document field {key!r}")
            expr = f"json_extract(document, '$.{key}')"
            if value is None:
                clauses.append(f"{expr} IS NULL")
            else:
                clauses.append(f"{expr} = ?")
                params.append(int(value) if isinstance(value, bool) else value)
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    def find(self, cursor: sqlite3.Cursor, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return all documents whose fields equal the given values.

        Keys may be dotted paths into nested objects (``"size.kind"``).
        """
        where, params = self._where(filters or {})
        rows = cursor.execute(
            f"SELECT id, document FROM {self.table}{where} ORDER BY id", tuple(params)
        ).fetchall()
        return [self._to_document(row) for row in rows]

    def find_one(self, cursor: sqlite3.Cursor, filters: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        where, params = self._where(filters or {})
        row = cursor.execute(
            f"SELECT id, document FROM {self.table}{where} ORDER BY id LIMIT 1", tuple(params)
        ).fetchone()
        return self._to_document(row) if row else None

    def find_by_id(self, cursor: sqlite3.Cursor, document_id: int) -> Optional[Dict[str, Any]]:
        row = cursor.execute(
            f"SELECT id, document FROM {self.table} WHERE id = ?", (document_id,)
        ).fetchone()
        return self._to_document(row) if row else None

    def save(self, cursor: sqlite3.Cursor, document: Dict[str, Any]) -> int:
        """Insert a document, or replace it when it carries an ``id``.

        Returns the document id.
        """
        body = dict(document)
        document_id = body.pop("id", None)
        payload = json.dumps(body)
        if document_id is None:
            cursor.execute(f"INSERT INTO {self.table} (document) VALUES (?)", (payload,))
            return cursor.lastrowid
        cursor.execute(
            f"""
            INSERT INTO {self.table} (id, document) VALUES (?, ?)
            ON CONFLICT(id) DO UPDATE SET document = excluded.document, updated_at = CURRENT_TIMESTAMP
            """,
            (document_id, payload),
        )
        return document_id

    def append_id(self, cursor: sqlite3.Cursor, username: str, document_id: int) -> bool:
        """Append ``document_id`` to the owner's list.

        The insert selects the user row itself, so it is a single atomic
        statement; returns ``False`` when no such user exists.
        """
        cursor.execute(
            f"""
            INSERT INTO {self.link_table} (user_id, {self.link_column})
            SELECT id, ? FROM users WHERE username = ?
            """,
            (document_id, username),
        )
        return cursor.rowcount == 1

    def owned_ids(self, cursor: sqlite3.Cursor, username: str) -> List[int]:
        rows = cursor.execute(
            f"""
            SELECT link.{self.link_column} AS document_id
            FROM {self.link_table} AS link
            JOIN users AS u ON u.id = link.user_id
            WHERE u.username = ?
            ORDER BY link.id
            """,
            (username,),
        ).fetchall()
        return [row["document_id"] for row in rows]

    def owned_by(self, cursor: sqlite3.Cursor, username: str) -> List[Dict[str, Any]]:
        """Return the owner's documents in the order they were added."""
        rows = cursor.execute(
            f"""
            SELECT d.id, d.document
            FROM {self.link_table} AS link
            JOIN users AS u ON u.id = link.user_id
            JOIN {self.table} AS d ON d.id = link.{self.link_column}
            WHERE u.username = ?
            ORDER BY link.id
            """,
            (username,),
        ).fetchall()
        return [self._to_document(row) for row in rows]

    def owner_of(self, cursor: sqlite3.Cursor, document_id: int) -> Optional[str]:
        row = cursor.execute(
            f"""
            SELECT u.username AS username
            FROM {self.link_table} AS link
            JOIN users AS u ON u.id = link.user_id
            WHERE link.{self.link_column} = ?
            """,
            (document_id,),
        ).fetchone()
        return row["username"] if row else None


items = DocumentCollection("items", link_table="user_items", link_column="item_id")
outfits = DocumentCollection("outfits", link_table="user_outfits", link_column="outfit_id")
