"""
Base Repository - EvalBoard
evalboard/repositories/base.py

Base repository class with Snowflake connection management and common utilities.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List, Optional, Sequence, Tuple
from uuid import UUID

import snowflake.connector
from snowflake.connector import DictCursor
from snowflake.connector.errors import DatabaseError, InterfaceError, OperationalError, ProgrammingError

from evalboard.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    ForeignKeyViolationException,
    RepositoryException,
)
from evalboard.services import snowflake as snowflake_service


class BaseRepository:
    """Base repository with Snowflake connection management."""

    @contextmanager
    def get_connection(self) -> Generator[snowflake.connector.SnowflakeConnection, None, None]:
        """Context manager for Snowflake connections."""
        try:
            conn = snowflake_service.get_snowflake_connection()
        except (InterfaceError, DatabaseError) as e:
            raise DatabaseConnectionException(f"Failed to connect to Snowflake: {e}")
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def get_cursor(self, dict_cursor: bool = True) -> Generator[Any, None, None]:
        """Context manager for Snowflake cursors with automatic connection cleanup."""
        with self.get_connection() as conn:
            cursor = conn.cursor(DictCursor) if dict_cursor else conn.cursor()
            try:
                yield cursor
            finally:
                cursor.close()

    def execute_query(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        fetch_one: bool = False,
        fetch_all: bool = False,
        commit: bool = False,
    ) -> Optional[Any]:
        """
        Execute a SQL query with error handling.

        Args:
            sql: SQL query string
            params: Query parameters
            fetch_one: Return single row
            fetch_all: Return all rows
            commit: Commit transaction after execution

        Returns:
            Query results, or the affected row count when nothing is fetched
        """
        with self.get_cursor() as cursor:
            try:
                cursor.execute(sql, tuple(params or ()))

                if commit:
                    cursor.connection.commit()

                if fetch_one:
                    return cursor.fetchone()
                elif fetch_all:
                    return cursor.fetchall()

                return cursor.rowcount

            except (InterfaceError, DatabaseError) as e:
                raise self._translate_error(e)

    def execute_transaction(self, statements: List[Tuple[str, Sequence[Any]]]) -> None:
        """
        Run several statements atomically. Any failure rolls the whole batch
        back and leaves the tables as they were.
        """
        with self.get_cursor(dict_cursor=False) as cursor:
            conn = cursor.connection
            try:
                cursor.execute("BEGIN")
                for sql, params in statements:
                    cursor.execute(sql, tuple(params or ()))
                conn.commit()
            except (InterfaceError, DatabaseError) as e:
                conn.rollback()
                raise self._translate_error(e)

    def _translate_error(self, e: Exception) -> RepositoryException:
        """Map a Snowflake error onto the repository exception hierarchy."""
        if isinstance(e, (InterfaceError, OperationalError)):
            return DatabaseConnectionException(f"Snowflake unavailable: {e}")
        error_msg = str(e).upper()
        if "UNIQUE" in error_msg or "DUPLICATE" in error_msg:
            return DuplicateEntityException(str(e))
        if "FOREIGN KEY" in error_msg:
            return ForeignKeyViolationException(str(e))
        if isinstance(e, ProgrammingError):
            return RepositoryException(f"Query error: {e}")
        return RepositoryException(f"Database error: {e}")

    def uuid_to_str(self, uuid_val: Optional[UUID]) -> Optional[str]:
        """Convert UUID to string for Snowflake storage."""
        return str(uuid_val) if uuid_val else None

    def str_to_uuid(self, uuid_str: Optional[str]) -> Optional[UUID]:
        """Convert string from Snowflake to UUID."""
        return UUID(uuid_str) if uuid_str else None

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def normalize_timestamp(self, dt: Optional[datetime]) -> Optional[datetime]:
        """Ensure timestamp is UTC-aware."""
        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    def row_to_dict(self, row: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Convert Snowflake row (uppercase keys) to lowercase dict."""
        if row is None:
            return {}
        return {k.lower(): v for k, v in row.items()}

    def placeholders(self, values: Sequence[Any]) -> str:
        """'%s, %s, ...' for an IN clause."""
        return ", ".join(["%s"] * len(values))

    def build_update_query(
        self,
        table_name: str,
        update_data: Dict[str, Any],
        where_column: str,
        where_value: Any,
        additional_set: Optional[Dict[str, Any]] = None,
        where_in: Optional[Tuple[str, Sequence[Any]]] = None,
    ) -> Tuple[str, List[Any]]:
        """
        Build a dynamic UPDATE query.

        Args:
            table_name: Name of the table
            update_data: Dictionary of column -> value to update
            where_column: Column name for WHERE clause
            where_value: Value for WHERE clause
            additional_set: Additional SET clauses (e.g., UPDATED_AT)
            where_in: Optional (column, allowed values) guard, making the
                      update a compare-and-set

        Returns:
            Tuple of (sql_string, params_list)
        """
        set_clauses = []
        params: List[Any] = []

        for column, value in update_data.items():
            set_clauses.append(f"{column.upper()} = %s")
            params.append(value)

        if additional_set:
            for column, value in additional_set.items():
                set_clauses.append(f"{column.upper()} = %s")
                params.append(value)

        where_sql = f"{where_column} = %s"
        params.append(where_value)

        if where_in:
            column, allowed = where_in
            where_sql += f" AND {column.upper()} IN ({self.placeholders(allowed)})"
            params.extend(allowed)

        sql = f"""
            UPDATE {table_name}
            SET {', '.join(set_clauses)}
            WHERE {where_sql}
        """

        return sql, params
