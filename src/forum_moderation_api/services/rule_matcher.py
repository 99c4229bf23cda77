"""Pure automod rule evaluation.

Nothing here touches the database: evaluation is a function of the rule list
and a snapshot of the content and its author.
"""

from datetime import UTC
from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict

from forum_moderation_api.database.models.automod_rule import AccountAgeBelow
from forum_moderation_api.database.models.automod_rule import AutomodRule
from forum_moderation_api.database.models.automod_rule import ContentContains
from forum_moderation_api.database.models.automod_rule import RuleCondition
from forum_moderation_api.database.models.automod_rule import UserKarmaBelow
from forum_moderation_api.database.models.base import TopicRole

SECONDS_PER_DAY = 86400


class AuthorContext(BaseModel):
    """What the matcher may know about the author."""

    karma: int
    created_at: datetime
    is_banned: bool = False
    role: TopicRole = TopicRole.MEMBER

    model_config = ConfigDict(frozen=True)


class MatchContext(BaseModel):
    """Content body, author snapshot and the evaluation instant."""

    body: str
    author: AuthorContext
    now: datetime

    model_config = ConfigDict(frozen=True)

    def account_age_days(self) -> float:
        created_at = self.author.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return (self.now - created_at).total_seconds() / SECONDS_PER_DAY


def sort_rules(rules: list[AutomodRule]) -> list[AutomodRule]:
    """Priority descending, then oldest first, then pk for full determinism."""
    by_pk = sorted(rules, key=lambda rule: str(rule.pk))
    by_age = sorted(by_pk, key=lambda rule: rule.created_at)
    return sorted(by_age, key=lambda rule: rule.priority, reverse=True)


def condition_holds(condition: RuleCondition, context: MatchContext) -> bool:
    """Evaluate one predicate."""
    if isinstance(condition, ContentContains):
        body = context.body.casefold()
        return any(keyword.casefold() in body for keyword in condition.keywords)
    if isinstance(condition, UserKarmaBelow):
        return context.author.karma < condition.threshold
    if isinstance(condition, AccountAgeBelow):
        return context.account_age_days() < condition.days
    return False


def rule_matches(rule: AutomodRule, context: MatchContext) -> bool:
    """All predicates hold. Disabled, empty or unparseable rules never match."""
    if not rule.enabled or not rule.conditions_valid or not rule.conditions:
        return False
    return all(condition_holds(condition, context) for condition in rule.conditions)


def evaluate_rules(
    rules: list[AutomodRule], context: MatchContext
) -> list[AutomodRule]:
    """Every matching rule in evaluation order (not first-match-wins)."""
    return [rule for rule in sort_rules(rules) if rule_matches(rule, context)]
