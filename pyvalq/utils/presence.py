"""Answers existence and uniqueness questions against a persistent store.

The ``unique`` and ``exists`` rules delegate to a `PresenceVerifier`. The
default implementation, `DatabasePresenceVerifier`, runs ``COUNT`` queries
over an ``sqlite3`` connection.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)


class PresenceVerifier(ABC):
    """Abstract presence verifier."""

    @abstractmethod
    def get_count(self, collection: str, column: str, value: Any, exclude_id: Optional[Any] = None, id_column: Optional[str] = None) -> int:
        """Counts the records in `collection` whose `column` equals `value`.

        Args:
            collection (str): The table (or collection) name.
            column (str): The column to compare.
            value (Any): The value to look for.
            exclude_id (Optional[Any]): A record id to leave out of the count,
                typically the record being updated.
            id_column (Optional[str]): The id column for `exclude_id`.
                Defaults to ``"id"``.

        Returns:
            int: The number of matching records.
        """
        raise NotImplementedError

    @abstractmethod
    def get_multi_count(self, collection: str, column: str, values: Sequence[Any]) -> int:
        """Counts the records in `collection` whose `column` is one of `values`."""
        raise NotImplementedError

    @abstractmethod
    def verify_unique(self, collection: str, column: str, exclude_id: Optional[Any] = None, id_column: Optional[str] = None) -> bool:
        """Checks that no two records in `collection` share a `column` value.

        Records matching `exclude_id` are left out of the check.
        """
        raise NotImplementedError


def _quote(identifier: str) -> str:
    """Quotes an SQL identifier so table and column names cannot inject SQL."""
    return '"' + identifier.replace('"', '""') + '"'


class DatabasePresenceVerifier(PresenceVerifier):
    """A presence verifier backed by an ``sqlite3`` connection.

    Args:
        connection (sqlite3.Connection): An open database connection. The
            verifier never closes it.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    @classmethod
    def connect(cls, database: str) -> "DatabasePresenceVerifier":
        """Opens `database` (a path or ``":memory:"``) and wraps the connection."""
        return cls(sqlite3.connect(database))

    def get_count(self, collection: str, column: str, value: Any, exclude_id: Optional[Any] = None, id_column: Optional[str] = None) -> int:
        query = f"SELECT COUNT(*) FROM {_quote(collection)} WHERE {_quote(column)} = ?"
        bindings = [value]

        if exclude_id is not None:
            query += f" AND {_quote(id_column or 'id')} <> ?"
            bindings.append(exclude_id)

        return self._count(query, bindings)

    def get_multi_count(self, collection: str, column: str, values: Sequence[Any]) -> int:
        if not values:
            return 0
        placeholders = ", ".join("?" for _ in values)
        query = f"SELECT COUNT(*) FROM {_quote(collection)} WHERE {_quote(column)} IN ({placeholders})"
        return self._count(query, list(values))

    def verify_unique(self, collection: str, column: str, exclude_id: Optional[Any] = None, id_column: Optional[str] = None) -> bool:
        query = f"SELECT COUNT(*) FROM {_quote(collection)}"
        bindings = []
        if exclude_id is not None:
            query += f" WHERE {_quote(id_column or 'id')} <> ?"
            bindings.append(exclude_id)
        query += f" GROUP BY {_quote(column)} HAVING COUNT(*) > 1"

        rows = self.connection.execute(query, bindings).fetchall()
        return not rows

    def _count(self, query: str, bindings: Sequence[Any]) -> int:
        logger.debug(f"Presence query: {query} {list(bindings)}")
        row = self.connection.execute(query, bindings).fetchone()
        return int(row[0]) if row else 0
