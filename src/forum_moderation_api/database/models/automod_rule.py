"""Automod rule models and typed rule conditions."""

import json

from typing import Annotated
from typing import Any
from typing import Literal
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic import field_validator

from forum_moderation_api.database.models.base import AutomodAction
from forum_moderation_api.database.models.base import BaseDBModel
from forum_moderation_api.errors import ValidationError


class ContentContains(BaseModel):
    """Body contains any of the keywords (case-insensitive substring)."""

    type: Literal["content_contains"] = "content_contains"
    keywords: list[str] = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")

    @field_validator("keywords")
    @classmethod
    def strip_blank_keywords(cls, keywords: list[str]) -> list[str]:
        cleaned = [keyword.strip() for keyword in keywords if keyword.strip()]
        if not cleaned:
            raise ValueError("at least one non-blank keyword is required")
        return cleaned


class UserKarmaBelow(BaseModel):
    """Author karma is strictly below the threshold."""

    type: Literal["user_karma_below"] = "user_karma_below"
    threshold: int

    model_config = ConfigDict(extra="forbid")


class AccountAgeBelow(BaseModel):
    """Author account is younger than the given number of days."""

    type: Literal["account_age_below"] = "account_age_below"
    days: int = Field(..., ge=0)

    model_config = ConfigDict(extra="forbid")


RuleCondition = Annotated[
    ContentContains | UserKarmaBelow | AccountAgeBelow,
    Field(discriminator="type"),
]

_conditions_adapter = TypeAdapter(list[RuleCondition])

# Older clients send {"type", "operator", "value"}; map value onto the typed field.
_LEGACY_VALUE_FIELDS = {
    "content_contains": "keywords",
    "user_karma_below": "threshold",
    "account_age_below": "days",
}

_TYPE_ALIASES = {
    "contentcontains": "content_contains",
    "userkarmabelow": "user_karma_below",
    "accountagebelow": "account_age_below",
}


def _normalize_condition(raw: Any) -> Any:
    if not isinstance(raw, dict):
        return raw

    condition = dict(raw)
    condition_type = condition.get("type")
    if isinstance(condition_type, str):
        condition_type = condition_type.strip()
        condition_type = _TYPE_ALIASES.get(
            condition_type.lower().replace("_", ""), condition_type
        )
        condition["type"] = condition_type

    if "value" in condition and condition_type in _LEGACY_VALUE_FIELDS:
        value = condition.pop("value")
        condition.pop("operator", None)
        field = _LEGACY_VALUE_FIELDS[condition_type]
        if field == "keywords" and isinstance(value, str):
            value = [value]
        condition.setdefault(field, value)

    return condition


def parse_conditions(raw: Any) -> list[RuleCondition]:
    """Validate a boundary payload into the typed condition list.

    Accepts a list of condition objects or a JSON string holding one.
    Raises ValidationError for anything that does not parse.
    """
    if isinstance(raw, str | bytes):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Conditions are not valid JSON: {e.msg}") from e

    if isinstance(raw, dict):
        raw = [raw]

    if not isinstance(raw, list) or not raw:
        raise ValidationError("Conditions must be a non-empty list")

    try:
        return _conditions_adapter.validate_python(
            [_normalize_condition(item) for item in raw]
        )
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValidationError(
            f"Invalid rule condition at {location}: {first['msg']}"
        ) from e


def dump_conditions(conditions: list[RuleCondition]) -> str:
    """Serialize typed conditions for the jsonb column."""
    return json.dumps([condition.model_dump() for condition in conditions])


class ActionData(BaseModel):
    """Optional parameters for a rule's action."""

    message: str | None = Field(None, max_length=2000)
    reason: str | None = Field(None, max_length=1000)


class AutomodRule(BaseDBModel):
    """Automod rule database model."""

    topic_pk: UUID
    name: str
    enabled: bool = True
    priority: int = 0
    conditions: list[RuleCondition] = Field(default_factory=list)
    conditions_valid: bool = True
    action: AutomodAction
    action_data: ActionData | None = None
    created_by_pk: UUID


class AutomodRuleCreate(BaseModel):
    """Payload for creating an automod rule."""

    topic_pk: UUID
    name: str = Field(..., min_length=1, max_length=255)
    conditions: Any
    action: AutomodAction
    action_data: ActionData | None = None
    priority: int = 0
    enabled: bool = True


class AutomodRuleUpdate(BaseModel):
    """Partial update payload for an automod rule."""

    name: str | None = Field(None, min_length=1, max_length=255)
    conditions: Any = None
    action: AutomodAction | None = None
    action_data: ActionData | None = None
    priority: int | None = None
    enabled: bool | None = None


class AutomodRuleToggle(BaseModel):
    """Enable or disable a rule."""

    enabled: bool

