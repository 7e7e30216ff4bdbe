"""
Database Protocol
=================

The contract the schema probe and the layout adapters expect from the
relational store. ``MySQLClient`` satisfies it structurally; tests use an
in-memory stand-in with the same methods.

Predicates are plain dicts joined with AND; a ``None`` value means
``IS NULL``.
"""

from typing import Any, ContextManager, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class Database(Protocol):

    def get_current_columns(self, table_name: str) -> Dict[str, str]:
        """Column name → data type, empty when the table does not exist."""
        ...

    def table_exists(self, table_name: str) -> bool:
        ...

    def select(
        self,
        table: str,
        where: Dict[str, Any],
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...

    def count(self, table: str, where: Dict[str, Any]) -> int:
        ...

    def insert(self, table: str, values: Dict[str, Any]) -> int:
        """Insert one row and return its auto-generated id."""
        ...

    def update(self, table: str, values: Dict[str, Any], where: Dict[str, Any]) -> int:
        ...

    def delete(self, table: str, where: Dict[str, Any]) -> int:
        ...

    def transaction(self) -> ContextManager[Any]:
        """Commit on normal exit, roll back on exception."""
        ...


__all__ = ["Database"]
