"""Automod rule management."""

import logging

from typing import Any
from uuid import UUID

from forum_moderation_api.database.models.automod_rule import AutomodRule
from forum_moderation_api.database.models.automod_rule import AutomodRuleCreate
from forum_moderation_api.database.models.automod_rule import AutomodRuleUpdate
from forum_moderation_api.database.models.automod_rule import parse_conditions
from forum_moderation_api.database.models.base import ModLogAction
from forum_moderation_api.database.models.base import ModTargetType
from forum_moderation_api.database.models.mod_log import ModLogEntryCreate
from forum_moderation_api.database.models.user import User
from forum_moderation_api.database.repositories.automod_rule import (
    AutomodRuleRepository,
)
from forum_moderation_api.errors import NotFoundError
from forum_moderation_api.services.authorization_gate import AuthorizationGate
from forum_moderation_api.services.mod_log_service import ModLogService

logger = logging.getLogger(__name__)


class AutomodService:
    """Create, read, update, toggle and delete automod rules.

    Every change is written to the moderation log against the rule.
    Conditions are validated into their typed form before storage; an
    unparseable payload is rejected with ValidationError.
    """

    def __init__(
        self,
        rule_repo: AutomodRuleRepository | None = None,
        gate: AuthorizationGate | None = None,
        mod_log_service: ModLogService | None = None,
    ):
        self.rule_repo = rule_repo or AutomodRuleRepository()
        self.gate = gate or AuthorizationGate()
        self.mod_log_service = mod_log_service or ModLogService()

    async def _log(
        self,
        rule: AutomodRule,
        actor: User,
        action: ModLogAction,
        details: dict[str, Any] | None = None,
    ) -> None:
        await self.mod_log_service.record(
            ModLogEntryCreate(
                topic_pk=rule.topic_pk,
                moderator_pk=actor.pk,
                action=action,
                target_type=ModTargetType.AUTOMOD_RULE,
                target_pk=rule.pk,
                reason=f"Automod rule '{rule.name}'",
                details={"rule_name": rule.name, **(details or {})},
            )
        )

    async def create_rule(self, actor: User, data: AutomodRuleCreate) -> AutomodRule:
        """Create a rule in a topic the actor moderates."""
        await self.gate.require_moderator(actor, data.topic_pk)
        conditions = parse_conditions(data.conditions)

        rule = await self.rule_repo.create_rule(
            topic_pk=data.topic_pk,
            created_by_pk=actor.pk,
            name=data.name,
            conditions=conditions,
            action=data.action,
            action_data=data.action_data,
            priority=data.priority,
            enabled=data.enabled,
        )
        await self._log(
            rule,
            actor,
            ModLogAction.CREATE_RULE,
            {"action": rule.action, "priority": rule.priority},
        )
        logger.info(f"Automod rule {rule.pk} created in topic {rule.topic_pk}")
        return rule

    async def get_topic_rules(self, topic_pk: UUID) -> list[AutomodRule]:
        """All rules of a topic in evaluation order."""
        await self.gate.get_topic_access(None, topic_pk)
        return await self.rule_repo.get_topic_rules(topic_pk)

    async def get_active_topic_rules(self, topic_pk: UUID) -> list[AutomodRule]:
        """Enabled rules of a topic in evaluation order."""
        await self.gate.get_topic_access(None, topic_pk)
        return await self.rule_repo.get_topic_rules(topic_pk, enabled_only=True)

    async def get_rule(self, rule_pk: UUID) -> AutomodRule:
        rule = await self.rule_repo.get_by_pk(rule_pk)
        if rule is None:
            raise NotFoundError("Automod rule not found")
        return rule

    async def update_rule(
        self, rule_pk: UUID, actor: User, data: AutomodRuleUpdate
    ) -> AutomodRule:
        """Apply a partial update; supplied conditions are re-validated."""
        rule = await self.get_rule(rule_pk)
        await self.gate.require_moderator(actor, rule.topic_pk)

        changes = data.model_dump(exclude_unset=True)
        if "conditions" in changes:
            changes["conditions"] = parse_conditions(changes["conditions"])
        if "action_data" in changes:
            changes["action_data"] = data.action_data
        if not changes:
            return rule

        updated = await self.rule_repo.update_rule(rule_pk, changes)
        if updated is None:
            raise NotFoundError("Automod rule not found")
        await self._log(
            updated, actor, ModLogAction.UPDATE_RULE, {"fields": sorted(changes)}
        )
        return updated

    async def toggle_rule(
        self, rule_pk: UUID, actor: User, enabled: bool
    ) -> AutomodRule:
        rule = await self.get_rule(rule_pk)
        await self.gate.require_moderator(actor, rule.topic_pk)

        updated = await self.rule_repo.update_rule(rule_pk, {"enabled": enabled})
        if updated is None:
            raise NotFoundError("Automod rule not found")
        await self._log(updated, actor, ModLogAction.TOGGLE_RULE, {"enabled": enabled})
        return updated

    async def delete_rule(self, rule_pk: UUID, actor: User) -> None:
        rule = await self.get_rule(rule_pk)
        await self.gate.require_moderator(actor, rule.topic_pk)

        if not await self.rule_repo.delete_by_pk(rule_pk):
            raise NotFoundError("Automod rule not found")
        await self._log(rule, actor, ModLogAction.DELETE_RULE)
        logger.info(f"Automod rule {rule_pk} deleted from topic {rule.topic_pk}")


async def get_automod_service() -> AutomodService:
    """Get an automod service instance."""
    return AutomodService()
