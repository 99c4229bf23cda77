"""Moderation log repository for the forum moderation API.

The log is append-only: this repository exposes inserts and reads, nothing
that updates or deletes an entry.
"""

import json

from typing import Any

from asyncpg import Connection
from asyncpg import Record

from forum_moderation_api.database.connection import get_db_connection
from forum_moderation_api.database.connection import use_connection
from forum_moderation_api.database.models.mod_log import ModLogEntry
from forum_moderation_api.database.models.mod_log import ModLogEntryCreate
from forum_moderation_api.database.models.mod_log import ModLogFilters


class ModLogRepository:
    """Repository for the append-only moderation log."""

    table_name = "mod_logs"

    def _record_to_model(self, record: Record) -> ModLogEntry:
        """Convert database record to ModLogEntry model."""
        data = dict(record)
        if isinstance(data.get("details"), str):
            data["details"] = json.loads(data["details"])
        return ModLogEntry.model_validate(data)

    def _build_where(self, filters: ModLogFilters) -> tuple[str, list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []

        def add(clause: str, value: Any) -> None:
            params.append(value)
            clauses.append(clause.format(f"${len(params)}"))

        if filters.topic_pk is not None:
            add("topic_pk = {}", filters.topic_pk)
        if filters.moderator_pk is not None:
            add("moderator_pk = {}", filters.moderator_pk)
        if filters.action is not None:
            add("action = {}", filters.action)
        if filters.target_pk is not None:
            add("target_pk = {}", filters.target_pk)
        if filters.start_date is not None:
            add("created_at >= {}", filters.start_date)
        if filters.end_date is not None:
            add("created_at <= {}", filters.end_date)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    async def append(
        self, entry: ModLogEntryCreate, connection: Connection | None = None
    ) -> ModLogEntry:
        """Insert one audit entry."""
        query = """
            INSERT INTO mod_logs (
                topic_pk, moderator_pk, action, target_type, target_pk,
                reason, details
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7::jsonb)
            RETURNING *
        """
        details = json.dumps(entry.details, default=str) if entry.details else None

        async with use_connection(connection) as conn:
            record = await conn.fetchrow(
                query,
                entry.topic_pk,
                entry.moderator_pk,
                entry.action,
                entry.target_type,
                entry.target_pk,
                entry.reason,
                details,
            )
            if record is None:
                raise ValueError("Failed to append mod log entry")
            return self._record_to_model(record)

    async def list_entries(
        self, filters: ModLogFilters, limit: int, offset: int
    ) -> tuple[list[ModLogEntry], int]:
        """A page of entries, most recent first, with the total match count."""
        where, params = self._build_where(filters)
        query = f"""
            SELECT * FROM mod_logs
            {where}
            ORDER BY created_at DESC, pk DESC
            LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
        """  # nosec B608
        count_query = f"SELECT COUNT(*) FROM mod_logs {where}"  # nosec B608

        async with get_db_connection() as connection:
            records = await connection.fetch(query, *params, limit, offset)
            total = await connection.fetchval(count_query, *params)
            return [self._record_to_model(record) for record in records], total or 0

    async def count_by_action(self, filters: ModLogFilters) -> dict[str, int]:
        """Number of entries per action."""
        where, params = self._build_where(filters)
        query = f"""
            SELECT action, COUNT(*) AS count
            FROM mod_logs
            {where}
            GROUP BY action
            ORDER BY action
        """  # nosec B608

        async with get_db_connection() as connection:
            records = await connection.fetch(query, *params)
            return {record["action"]: record["count"] for record in records}
