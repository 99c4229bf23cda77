"""Automod rule repository for the forum moderation API."""

import json
import logging

from typing import Any
from uuid import UUID

from asyncpg import Record

from forum_moderation_api.database.connection import get_db_connection
from forum_moderation_api.database.models.automod_rule import ActionData
from forum_moderation_api.database.models.automod_rule import AutomodRule
from forum_moderation_api.database.models.automod_rule import RuleCondition
from forum_moderation_api.database.models.automod_rule import dump_conditions
from forum_moderation_api.database.models.automod_rule import parse_conditions
from forum_moderation_api.database.models.base import AutomodAction
from forum_moderation_api.database.repositories.base import BaseRepository
from forum_moderation_api.errors import ValidationError

logger = logging.getLogger(__name__)


def _decode_json(value: Any) -> Any:
    if isinstance(value, str):
        return json.loads(value)
    return value


class AutomodRuleRepository(BaseRepository[AutomodRule]):
    """Repository for automod rules.

    Conditions are stored as jsonb. A stored row whose conditions no longer
    parse is loaded with ``conditions_valid=False`` so the matcher can skip it.
    """

    def __init__(self):
        super().__init__("automod_rules")

    def _record_to_model(self, record: Record) -> AutomodRule:
        """Convert database record to AutomodRule model."""
        data = dict(record)
        conditions: list[RuleCondition] = []
        conditions_valid = True
        try:
            conditions = parse_conditions(_decode_json(data.get("conditions")))
        except (ValidationError, json.JSONDecodeError) as e:
            conditions_valid = False
            logger.warning(
                f"Automod rule {data.get('pk')} has unusable conditions: {e}"
            )

        action_data = None
        try:
            raw_action_data = _decode_json(data.get("action_data"))
            if raw_action_data:
                action_data = ActionData.model_validate(raw_action_data)
        except ValueError as e:
            logger.warning(
                f"Automod rule {data.get('pk')} has unusable action data: {e}"
            )

        data["conditions"] = conditions
        data["conditions_valid"] = conditions_valid
        data["action_data"] = action_data
        return AutomodRule.model_validate(data)

    async def create_rule(
        self,
        topic_pk: UUID,
        created_by_pk: UUID,
        name: str,
        conditions: list[RuleCondition],
        action: str,
        action_data: ActionData | None,
        priority: int,
        enabled: bool,
    ) -> AutomodRule:
        """Insert a validated rule."""
        return await self.create_from_dict(
            {
                "topic_pk": topic_pk,
                "created_by_pk": created_by_pk,
                "name": name,
                "conditions": dump_conditions(conditions),
                "action": AutomodAction(action).value,
                "action_data": (
                    action_data.model_dump_json(exclude_none=True)
                    if action_data
                    else None
                ),
                "priority": priority,
                "enabled": enabled,
            }
        )

    async def update_rule(
        self, rule_pk: UUID, changes: dict[str, Any]
    ) -> AutomodRule | None:
        """Apply a partial update; typed fields are serialized for jsonb."""
        data = dict(changes)
        if "action" in data:
            data["action"] = AutomodAction(data["action"]).value
        if "conditions" in data:
            data["conditions"] = dump_conditions(data["conditions"])
        if "action_data" in data:
            action_data = data["action_data"]
            data["action_data"] = (
                action_data.model_dump_json(exclude_none=True) if action_data else None
            )
        return await self.update_from_dict(rule_pk, data)

    async def get_topic_rules(
        self, topic_pk: UUID, enabled_only: bool = False
    ) -> list[AutomodRule]:
        """Rules for a topic, highest priority first, oldest first within a priority.

        A single statement so a caller sees one consistent rule set.
        """
        query = """
            SELECT * FROM automod_rules
            WHERE topic_pk = $1 AND ($2::boolean IS FALSE OR enabled)
            ORDER BY priority DESC, created_at ASC, pk ASC
        """

        async with get_db_connection() as connection:
            records = await connection.fetch(query, topic_pk, enabled_only)
            return [self._record_to_model(record) for record in records]
