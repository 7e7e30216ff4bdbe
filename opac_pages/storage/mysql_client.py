# ==============================================
# MySQLClient
# ==============================================
#
# PURPOSE:
#   Manages the MySQL connection and every SQL statement the
#   page adapters need: predicate search, insert, update, delete,
#   and INFORMATION_SCHEMA introspection for the schema probe.
#
# CLASS: MySQLClient
# ------------------
#   Stateful — holds the connection to MySQL.
#
#   Constructor:
#   ------------
#   - __init__(host, port, user, password, database)
#       Store connection params. Don't connect yet.
#
#   Methods:
#   --------
#   - connect() / disconnect()
#   - get_current_columns(table_name) -> dict[str, str]
#   - table_exists(table_name) -> bool
#   - select(table, where, order_by=None, limit=None) -> list[dict]
#   - count(table, where) -> int
#   - insert(table, values) -> int            (lastrowid)
#   - update(table, values, where) -> int     (affected rows)
#   - delete(table, where) -> int             (affected rows)
#   - transaction()                           (context manager)
#
#   Predicates:
#   -----------
#   `where` is a plain dict of column → value, joined with AND.
#   A value of None renders as `col IS NULL`.
#
#   Errors:
#   -------
#   - duplicate key (1062)     → AlreadyExists
#   - other MySQL write errors → PersistenceError
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with MySQLClient(...) as db:` usage.
#
# ==============================================

import logging
import re
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple, cast

import pymysql
import pymysql.cursors
from pymysql.constants import ER

from opac_pages.errors import AlreadyExists, PersistenceError

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z0-9_]+$")


def quote_identifier(name: str) -> str:
    """Backtick-quote a table/column name, rejecting anything unusual."""
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return f"`{name}`"


def build_where(where: Dict[str, Any]) -> Tuple[str, Tuple[Any, ...]]:
    """
    Render a predicate dict as a WHERE clause.

    Returns:
        (clause, params); clause is "" when where is empty.
    """
    if not where:
        return "", ()
    parts = []
    params = []
    for column, value in where.items():
        if value is None:
            parts.append(f"{quote_identifier(column)} IS NULL")
        else:
            parts.append(f"{quote_identifier(column)} = %s")
            params.append(value)
    return " WHERE " + " AND ".join(parts), tuple(params)


class MySQLClient:
    def __init__(self, host, port, user, password, database):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connection = None
        self._in_transaction = False

    @classmethod
    def from_config(cls, config) -> "MySQLClient":
        """Build a client from a MySQLConfig."""
        return cls(
            host=config.host,
            port=config.port,
            user=config.user,
            password=config.password,
            database=config.database,
        )

    def connect(self) -> None:
        # The Koha database must already exist, never create it here
        self.connection = pymysql.connect(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            database=self.database,
            charset="utf8mb4",
            autocommit=False,
        )

    def disconnect(self) -> None:
        if self.connection:
            self.connection.close()
            self.connection = None

    def _ensure_connection(self):
        if self.connection is None:
            self.connect()
        return self.connection

    # ---------------------------------------------
    # Introspection
    # ---------------------------------------------

    def get_current_columns(self, table_name: str) -> dict[str, str]:
        # Query INFORMATION_SCHEMA to get current column names and types
        rows = self._fetch(
            "SELECT COLUMN_NAME, DATA_TYPE FROM INFORMATION_SCHEMA.COLUMNS "
            "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s",
            (self.database, table_name),
        )
        return {str(row["COLUMN_NAME"]): str(row["DATA_TYPE"]) for row in rows}

    def table_exists(self, table_name: str) -> bool:
        rows = self._fetch(
            "SELECT COUNT(*) AS n FROM INFORMATION_SCHEMA.TABLES "
            "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s",
            (self.database, table_name),
        )
        return bool(rows) and int(rows[0]["n"]) > 0

    # ---------------------------------------------
    # Reads
    # ---------------------------------------------

    def select(
        self,
        table: str,
        where: Dict[str, Any],
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        clause, params = build_where(where)
        query = f"SELECT * FROM {quote_identifier(table)}{clause}"
        if order_by:
            query += f" ORDER BY {quote_identifier(order_by)}"
        if limit is not None:
            query += f" LIMIT {int(limit)}"
        return self._fetch(query, params)

    def count(self, table: str, where: Dict[str, Any]) -> int:
        clause, params = build_where(where)
        rows = self._fetch(f"SELECT COUNT(*) AS n FROM {quote_identifier(table)}{clause}", params)
        return int(rows[0]["n"]) if rows else 0

    # ---------------------------------------------
    # Writes
    # ---------------------------------------------

    def insert(self, table: str, values: Dict[str, Any]) -> int:
        columns = ", ".join(quote_identifier(col) for col in values)
        placeholders = ", ".join(["%s"] * len(values))
        query = f"INSERT INTO {quote_identifier(table)} ({columns}) VALUES ({placeholders})"
        cursor = self._write(query, tuple(values.values()), table)
        return int(cursor.lastrowid)

    def update(self, table: str, values: Dict[str, Any], where: Dict[str, Any]) -> int:
        if not values:
            return 0
        set_clause = ", ".join(f"{quote_identifier(col)} = %s" for col in values)
        clause, params = build_where(where)
        query = f"UPDATE {quote_identifier(table)} SET {set_clause}{clause}"
        cursor = self._write(query, tuple(values.values()) + params, table)
        return cursor.rowcount

    def delete(self, table: str, where: Dict[str, Any]) -> int:
        clause, params = build_where(where)
        query = f"DELETE FROM {quote_identifier(table)}{clause}"
        cursor = self._write(query, params, table)
        return cursor.rowcount

    @contextmanager
    def transaction(self) -> Iterator["MySQLClient"]:
        """
        Group several writes into one unit of work.

        Commits when the block exits normally, rolls back and re-raises
        otherwise. Nested use joins the outer transaction.
        """
        if self._in_transaction:
            yield self
            return
        connection = self._ensure_connection()
        connection.begin()
        self._in_transaction = True
        try:
            yield self
        except BaseException:
            connection.rollback()
            raise
        else:
            connection.commit()
        finally:
            self._in_transaction = False

    # ---------------------------------------------
    # Internals
    # ---------------------------------------------

    def _fetch(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        connection = self._ensure_connection()
        logger.debug("SQL: %s %r", query, params)
        with connection.cursor(pymysql.cursors.DictCursor) as cursor:
            cursor.execute(query, params)
            rows = cast(List[Dict[str, Any]], list(cursor.fetchall()))
        # End the read snapshot unless an explicit transaction owns it
        if not self._in_transaction:
            connection.commit()
        return rows

    def _write(self, query: str, params: tuple, table: str):
        connection = self._ensure_connection()
        logger.debug("SQL: %s %r", query, params)
        cursor = connection.cursor()
        try:
            cursor.execute(query, params)
            if not self._in_transaction:
                connection.commit()
        except pymysql.err.IntegrityError as e:
            if not self._in_transaction:
                connection.rollback()
            if e.args and e.args[0] == ER.DUP_ENTRY:
                raise AlreadyExists(f"Duplicate entry in {table}: {e.args[1]}") from e
            raise PersistenceError(f"Failed to write to {table}", str(e)) from e
        except pymysql.MySQLError as e:
            if not self._in_transaction:
                connection.rollback()
            raise PersistenceError(f"Failed to write to {table}", str(e)) from e
        finally:
            cursor.close()
        return cursor

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
