"""Automod rule endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status

from forum_moderation_api.auth.dependencies import get_current_user
from forum_moderation_api.database.models.automod_rule import AutomodRule
from forum_moderation_api.database.models.automod_rule import AutomodRuleCreate
from forum_moderation_api.database.models.automod_rule import AutomodRuleToggle
from forum_moderation_api.database.models.automod_rule import AutomodRuleUpdate
from forum_moderation_api.database.models.user import User
from forum_moderation_api.services.automod_service import AutomodService
from forum_moderation_api.services.automod_service import get_automod_service

router = APIRouter(prefix="/automod", tags=["automod"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_rule(
    rule_data: AutomodRuleCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    automod_service: Annotated[AutomodService, Depends(get_automod_service)],
) -> AutomodRule:
    """Create an automod rule (topic moderators and owners)."""
    return await automod_service.create_rule(current_user, rule_data)


@router.get("/topic/{topic_id}")
async def get_topic_rules(
    topic_id: UUID,
    _: Annotated[User, Depends(get_current_user)],
    automod_service: Annotated[AutomodService, Depends(get_automod_service)],
) -> list[AutomodRule]:
    """All rules of a topic, highest priority first."""
    return await automod_service.get_topic_rules(topic_id)


@router.get("/topic/{topic_id}/active")
async def get_active_topic_rules(
    topic_id: UUID,
    _: Annotated[User, Depends(get_current_user)],
    automod_service: Annotated[AutomodService, Depends(get_automod_service)],
) -> list[AutomodRule]:
    """Enabled rules of a topic, highest priority first."""
    return await automod_service.get_active_topic_rules(topic_id)


@router.get("/{rule_id}")
async def get_rule(
    rule_id: UUID,
    _: Annotated[User, Depends(get_current_user)],
    automod_service: Annotated[AutomodService, Depends(get_automod_service)],
) -> AutomodRule:
    return await automod_service.get_rule(rule_id)


@router.put("/{rule_id}")
async def update_rule(
    rule_id: UUID,
    rule_data: AutomodRuleUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    automod_service: Annotated[AutomodService, Depends(get_automod_service)],
) -> AutomodRule:
    """Update a rule (topic moderators and owners)."""
    return await automod_service.update_rule(rule_id, current_user, rule_data)


@router.patch("/{rule_id}/toggle")
async def toggle_rule(
    rule_id: UUID,
    toggle: AutomodRuleToggle,
    current_user: Annotated[User, Depends(get_current_user)],
    automod_service: Annotated[AutomodService, Depends(get_automod_service)],
) -> AutomodRule:
    """Enable or disable a rule (topic moderators and owners)."""
    return await automod_service.toggle_rule(rule_id, current_user, toggle.enabled)


@router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rule(
    rule_id: UUID,
    current_user: Annotated[User, Depends(get_current_user)],
    automod_service: Annotated[AutomodService, Depends(get_automod_service)],
) -> None:
    """Delete a rule (topic moderators and owners)."""
    await automod_service.delete_rule(rule_id, current_user)
