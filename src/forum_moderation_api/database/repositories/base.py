"""Base repository class for the forum moderation API."""

from abc import ABC
from abc import abstractmethod
from typing import Any
from uuid import UUID

from asyncpg import Connection
from asyncpg import Record

from forum_moderation_api.database.connection import use_connection


class BaseRepository[T](ABC):
    """Base repository class with common database operations.

    Write helpers take an optional ``connection`` so callers can run them
    inside a transaction they already hold.
    """

    def __init__(self, table_name: str):
        self.table_name = table_name

    @abstractmethod
    def _record_to_model(self, record: Record) -> T:
        """Convert database record to model instance."""

    async def get_by_pk(
        self, pk: UUID, connection: Connection | None = None
    ) -> T | None:
        """Get a record by primary key."""
        query = f"SELECT * FROM {self.table_name} WHERE pk = $1"  # nosec B608

        async with use_connection(connection) as conn:
            record = await conn.fetchrow(query, pk)
            return self._record_to_model(record) if record else None

    async def get_for_update(self, pk: UUID, connection: Connection) -> T | None:
        """Lock a row for the rest of the caller's transaction and return it."""
        query = f"SELECT * FROM {self.table_name} WHERE pk = $1 FOR UPDATE"  # nosec B608

        record = await connection.fetchrow(query, pk)
        return self._record_to_model(record) if record else None

    async def count(
        self, where_clause: str = "", params: list[Any] | None = None
    ) -> int:
        """Count records with optional where clause."""
        if params is None:
            params = []

        query = f"SELECT COUNT(*) FROM {self.table_name}"  # nosec B608
        if where_clause:
            query += f" WHERE {where_clause}"

        async with use_connection() as conn:
            result = await conn.fetchval(query, *params)
            return result or 0

    async def exists(self, pk: UUID) -> bool:
        """Check if a record exists by primary key."""
        query = f"SELECT EXISTS(SELECT 1 FROM {self.table_name} WHERE pk = $1)"  # nosec B608

        async with use_connection() as conn:
            result = await conn.fetchval(query, pk)
            return bool(result)

    async def delete_by_pk(self, pk: UUID) -> bool:
        """Delete a record by primary key."""
        query = f"DELETE FROM {self.table_name} WHERE pk = $1"  # nosec B608

        async with use_connection() as conn:
            result = await conn.execute(query, pk)
            return result == "DELETE 1"

    async def create_from_dict(
        self, data: dict[str, Any], connection: Connection | None = None
    ) -> T:
        """Create a new record."""
        columns = list(data.keys())
        placeholders = [f"${i + 1}" for i in range(len(columns))]
        values = list(data.values())

        query = f"""
            INSERT INTO {self.table_name} ({", ".join(columns)})
            VALUES ({", ".join(placeholders)})
            RETURNING *
        """  # nosec B608

        async with use_connection(connection) as conn:
            record = await conn.fetchrow(query, *values)
            if record is None:
                raise ValueError(f"Failed to create record in {self.table_name}")
            return self._record_to_model(record)

    async def update_from_dict(
        self,
        pk: UUID,
        data: dict[str, Any],
        connection: Connection | None = None,
    ) -> T | None:
        """Update a record by primary key, stamping updated_at."""
        if not data:
            return await self.get_by_pk(pk, connection)

        set_clauses = []
        values = []
        for index, (column, value) in enumerate(data.items(), start=1):
            set_clauses.append(f"{column} = ${index}")
            values.append(value)
        set_clauses.append("updated_at = NOW()")
        values.append(pk)

        query = f"""
            UPDATE {self.table_name}
            SET {", ".join(set_clauses)}
            WHERE pk = ${len(values)}
            RETURNING *
        """  # nosec B608

        async with use_connection(connection) as conn:
            record = await conn.fetchrow(query, *values)
            return self._record_to_model(record) if record else None
