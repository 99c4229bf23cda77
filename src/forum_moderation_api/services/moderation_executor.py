"""Moderation action executor.

Each action is an entry in ``ACTION_TABLE``: a pure transition function plus
a side-effect descriptor. ``ModerationExecutor.apply`` locks the content row,
plans the transition, then writes the new state, any report and the audit
entry in one transaction. Author notifications are sent after commit.
"""

import logging

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from enum import Enum
from typing import Any
from typing import Literal
from uuid import UUID

from asyncpg import Connection
from pydantic import BaseModel
from pydantic import ConfigDict

from forum_moderation_api.database.connection import get_db_transaction
from forum_moderation_api.database.models.automod_rule import AutomodRule
from forum_moderation_api.database.models.base import AutomodAction
from forum_moderation_api.database.models.base import ContentKind
from forum_moderation_api.database.models.base import ModerationState
from forum_moderation_api.database.models.base import ModLogAction
from forum_moderation_api.database.models.base import ModTargetType
from forum_moderation_api.database.models.base import TopicRole
from forum_moderation_api.database.models.content import AppliedAction
from forum_moderation_api.database.models.content import Comment
from forum_moderation_api.database.models.content import Post
from forum_moderation_api.database.models.mod_log import ModLogEntry
from forum_moderation_api.database.models.mod_log import ModLogEntryCreate
from forum_moderation_api.database.models.report import Report
from forum_moderation_api.database.models.report import ReportCreate
from forum_moderation_api.database.repositories.comment import CommentRepository
from forum_moderation_api.database.repositories.post import PostRepository
from forum_moderation_api.database.repositories.report import ReportRepository
from forum_moderation_api.errors import AuditLogError
from forum_moderation_api.errors import ConflictError
from forum_moderation_api.errors import NotFoundError
from forum_moderation_api.errors import ValidationError
from forum_moderation_api.services.mod_log_service import ModLogService
from forum_moderation_api.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class AutomatedSource(BaseModel):
    """An action fired by a matched automod rule."""

    kind: Literal["AUTOMATED"] = "AUTOMATED"
    rule: AutomodRule


class ManualSource(BaseModel):
    """An action requested by a moderator, owner or superuser."""

    kind: Literal["MANUAL"] = "MANUAL"
    actor_pk: UUID
    actor_role: TopicRole
    reason: str | None = None


ActionSource = AutomatedSource | ManualSource


class HumanActor(BaseModel):
    user_pk: UUID

    @property
    def attributed_pk(self) -> UUID:
        return self.user_pk

    def details(self) -> dict[str, Any]:
        return {"automated": False}


class AutomatedActor(BaseModel):
    """A rule acting on its creator's authority.

    The log row needs a real user, so the rule creator is attributed; the
    details payload keeps the rule visible to readers.
    """

    rule_pk: UUID
    rule_name: str
    attributed_user_pk: UUID

    @property
    def attributed_pk(self) -> UUID:
        return self.attributed_user_pk

    def details(self) -> dict[str, Any]:
        return {
            "automated": True,
            "rule_pk": str(self.rule_pk),
            "rule_name": self.rule_name,
        }


Actor = HumanActor | AutomatedActor


def actor_for(source: ActionSource) -> Actor:
    if isinstance(source, AutomatedSource):
        return AutomatedActor(
            rule_pk=source.rule.pk,
            rule_name=source.rule.name,
            attributed_user_pk=source.rule.created_by_pk,
        )
    return HumanActor(user_pk=source.actor_pk)


class SideEffect(str, Enum):
    """Work done after the state change commits."""

    NONE = "NONE"
    CREATE_REPORT = "CREATE_REPORT"
    NOTIFY_AUTHOR = "NOTIFY_AUTHOR"


class Transition(BaseModel):
    """Planned state after an action."""

    state: ModerationState
    is_locked: bool
    changed: bool

    model_config = ConfigDict(use_enum_values=True)


TransitionFn = Callable[[ModerationState, bool, ContentKind], Transition]


def _unchanged(state: ModerationState, is_locked: bool) -> Transition:
    return Transition(state=state, is_locked=is_locked, changed=False)


def _remove(state: ModerationState, is_locked: bool, kind: ContentKind) -> Transition:
    if state == ModerationState.REMOVED:
        return _unchanged(state, is_locked)
    return Transition(state=ModerationState.REMOVED, is_locked=is_locked, changed=True)


def _filter(state: ModerationState, is_locked: bool, kind: ContentKind) -> Transition:
    if state == ModerationState.REMOVED:
        raise ConflictError("Removed content cannot be filtered")
    if state == ModerationState.FILTERED:
        return _unchanged(state, is_locked)
    return Transition(state=ModerationState.FILTERED, is_locked=is_locked, changed=True)


def _approve(state: ModerationState, is_locked: bool, kind: ContentKind) -> Transition:
    if state == ModerationState.REMOVED:
        raise ConflictError("Removed content cannot be approved")
    if state == ModerationState.ACTIVE:
        return _unchanged(state, is_locked)
    return Transition(state=ModerationState.ACTIVE, is_locked=is_locked, changed=True)


def _lock(state: ModerationState, is_locked: bool, kind: ContentKind) -> Transition:
    if kind != ContentKind.POST:
        raise ValidationError("Only posts can be locked")
    if state == ModerationState.REMOVED:
        raise ConflictError("Removed content cannot be locked")
    if is_locked:
        return _unchanged(state, is_locked)
    return Transition(state=state, is_locked=True, changed=True)


def _keep(state: ModerationState, is_locked: bool, kind: ContentKind) -> Transition:
    return _unchanged(state, is_locked)


class ActionSpec(BaseModel):
    """How one action changes content and what it does afterwards."""

    transition: TransitionFn
    side_effect: SideEffect = SideEffect.NONE
    audit_automated: bool = True


ACTION_TABLE: dict[AutomodAction, ActionSpec] = {
    AutomodAction.REMOVE: ActionSpec(transition=_remove),
    AutomodAction.FILTER: ActionSpec(transition=_filter),
    AutomodAction.APPROVE: ActionSpec(transition=_approve),
    AutomodAction.LOCK: ActionSpec(transition=_lock),
    AutomodAction.REPORT: ActionSpec(
        transition=_keep,
        side_effect=SideEffect.CREATE_REPORT,
        audit_automated=False,
    ),
    AutomodAction.MESSAGE: ActionSpec(
        transition=_keep,
        side_effect=SideEffect.NOTIFY_AUTHOR,
        audit_automated=False,
    ),
}


def plan_transition(
    action: AutomodAction,
    state: ModerationState,
    is_locked: bool,
    kind: ContentKind,
) -> Transition:
    """Pure planning step; raises ConflictError for illegal transitions."""
    return ACTION_TABLE[AutomodAction(action)].transition(
        ModerationState(state), is_locked, ContentKind(kind)
    )


class ActionResult(BaseModel):
    """Outcome of one executed action."""

    action: AutomodAction
    content_kind: ContentKind
    content_pk: UUID
    previous_state: ModerationState
    new_state: ModerationState
    is_locked: bool
    changed: bool
    log_entry: ModLogEntry | None = None
    report: Report | None = None

    model_config = ConfigDict(use_enum_values=True)

    def summary(self, rule_pk: UUID | None = None) -> AppliedAction:
        return AppliedAction(
            action=self.action,
            previous_state=self.previous_state,
            new_state=self.new_state,
            changed=self.changed,
            rule_pk=rule_pk,
            log_entry_pk=self.log_entry.pk if self.log_entry else None,
            report_pk=self.report.pk if self.report else None,
        )


class ModerationExecutor:
    """Applies automated and manual moderation actions to posts and comments."""

    def __init__(
        self,
        post_repo: PostRepository | None = None,
        comment_repo: CommentRepository | None = None,
        report_repo: ReportRepository | None = None,
        mod_log_service: ModLogService | None = None,
        notification_service: NotificationService | None = None,
        transaction_factory: Callable[
            [], AbstractAsyncContextManager[Connection]
        ] = get_db_transaction,
    ):
        self.post_repo = post_repo or PostRepository()
        self.comment_repo = comment_repo or CommentRepository()
        self.report_repo = report_repo or ReportRepository()
        self.mod_log_service = mod_log_service or ModLogService()
        self.notification_service = notification_service or NotificationService()
        self.transaction_factory = transaction_factory

    async def apply(
        self,
        content_kind: ContentKind,
        content_pk: UUID,
        action: AutomodAction,
        source: ActionSource,
    ) -> ActionResult:
        """Apply one action to one content unit.

        Authorization of manual sources happens before this call. Raises
        NotFoundError, ConflictError or ValidationError without writing
        anything, and AuditLogError when the audit entry cannot be stored.
        A failed state write, report insert or audit append rolls back all
        three.
        """
        kind = ContentKind(content_kind)
        action = AutomodAction(action)
        action_spec = ACTION_TABLE[action]
        actor = actor_for(source)

        async with self.transaction_factory() as connection:
            content = await self._lock_content(kind, content_pk, connection)
            previous_state = ModerationState(content.moderation_state)
            is_locked = content.is_locked if isinstance(content, Post) else False

            transition = plan_transition(action, previous_state, is_locked, kind)
            if transition.changed:
                await self._write_state(kind, content_pk, transition, connection)

            report = None
            if action_spec.side_effect == SideEffect.CREATE_REPORT:
                report = await self._create_report(
                    kind, content, source, actor, connection
                )

            log_entry = None
            if isinstance(source, ManualSource) or (
                action_spec.audit_automated and transition.changed
            ):
                log_entry = await self._append_log(
                    kind,
                    content,
                    action,
                    source,
                    actor,
                    previous_state,
                    transition,
                    connection,
                )

        result = ActionResult(
            action=action,
            content_kind=kind,
            content_pk=content_pk,
            previous_state=previous_state,
            new_state=transition.state,
            is_locked=transition.is_locked,
            changed=transition.changed,
            log_entry=log_entry,
            report=report,
        )

        if action_spec.side_effect == SideEffect.NOTIFY_AUTHOR:
            await self._notify_author(kind, content, source)

        if isinstance(source, AutomatedSource):
            logger.info(
                f"Automod rule {source.rule.pk} applied {action.value} to "
                f"{kind.value.lower()} {content_pk} (changed={transition.changed})"
            )
        return result

    async def _lock_content(
        self, kind: ContentKind, content_pk: UUID, connection: Connection
    ) -> Post | Comment:
        repo = self.post_repo if kind == ContentKind.POST else self.comment_repo
        content = await repo.get_for_update(content_pk, connection)
        if content is None:
            raise NotFoundError(f"{kind.value.capitalize()} not found")
        return content

    async def _write_state(
        self,
        kind: ContentKind,
        content_pk: UUID,
        transition: Transition,
        connection: Connection,
    ) -> None:
        if kind == ContentKind.POST:
            await self.post_repo.set_moderation_state(
                content_pk, transition.state, transition.is_locked, connection
            )
        else:
            await self.comment_repo.set_moderation_state(
                content_pk, transition.state, connection
            )

    async def _append_log(
        self,
        kind: ContentKind,
        content: Post | Comment,
        action: AutomodAction,
        source: ActionSource,
        actor: Actor,
        previous_state: ModerationState,
        transition: Transition,
        connection: Connection,
    ) -> ModLogEntry:
        details = actor.details()
        details["previous_state"] = ModerationState(previous_state).value
        details["new_state"] = ModerationState(transition.state).value
        if kind == ContentKind.POST:
            details["is_locked"] = transition.is_locked

        entry = ModLogEntryCreate(
            topic_pk=content.topic_pk,
            moderator_pk=actor.attributed_pk,
            action=ModLogAction(action.value),
            target_type=ModTargetType(kind.value),
            target_pk=content.pk,
            reason=_reason(source),
            details=details,
        )
        try:
            return await self.mod_log_service.record(entry, connection)
        except Exception as e:
            raise AuditLogError(
                f"Failed to record {action.value} on {kind.value.lower()} "
                f"{content.pk}: {e}"
            ) from e

    async def _create_report(
        self,
        kind: ContentKind,
        content: Post | Comment,
        source: ActionSource,
        actor: Actor,
        connection: Connection,
    ) -> Report:
        return await self.report_repo.create_report(
            ReportCreate(
                reporter_pk=actor.attributed_pk,
                topic_pk=content.topic_pk,
                post_pk=content.pk if kind == ContentKind.POST else None,
                comment_pk=content.pk if kind == ContentKind.COMMENT else None,
                reason=_reason(source) or "Reported by a moderator",
            ),
            connection,
        )

    async def _notify_author(
        self, kind: ContentKind, content: Post | Comment, source: ActionSource
    ) -> None:
        if isinstance(source, AutomatedSource):
            rule = source.rule
            message = (rule.action_data.message if rule.action_data else None) or (
                f"Your {kind.value.lower()} matched the automod rule '{rule.name}'"
            )
        else:
            message = source.reason or (
                f"A moderator sent you a message about your {kind.value.lower()}"
            )
        await self.notification_service.notify_automod_message(
            content.author_pk, content.pk, message
        )


def _reason(source: ActionSource) -> str | None:
    if isinstance(source, ManualSource):
        return source.reason
    rule = source.rule
    if rule.action_data and rule.action_data.reason:
        return rule.action_data.reason
    return f"Automod rule '{rule.name}' matched"
