"""Tests for automod rule condition parsing."""

import json

import pytest

from forum_moderation_api.database.models.automod_rule import AccountAgeBelow
from forum_moderation_api.database.models.automod_rule import AutomodRuleUpdate
from forum_moderation_api.database.models.automod_rule import ContentContains
from forum_moderation_api.database.models.automod_rule import UserKarmaBelow
from forum_moderation_api.database.models.automod_rule import dump_conditions
from forum_moderation_api.database.models.automod_rule import parse_conditions
from forum_moderation_api.errors import ValidationError


class TestParseConditions:
    """Test the typed condition parser."""

    def test_parses_each_condition_type(self):
        conditions = parse_conditions(
            [
                {"type": "content_contains", "keywords": ["buy now", "free"]},
                {"type": "user_karma_below", "threshold": 10},
                {"type": "account_age_below", "days": 3},
            ]
        )

        assert isinstance(conditions[0], ContentContains)
        assert conditions[0].keywords == ["buy now", "free"]
        assert isinstance(conditions[1], UserKarmaBelow)
        assert conditions[1].threshold == 10
        assert isinstance(conditions[2], AccountAgeBelow)
        assert conditions[2].days == 3

    def test_accepts_json_string(self):
        raw = json.dumps([{"type": "user_karma_below", "threshold": -5}])

        conditions = parse_conditions(raw)

        assert conditions == [UserKarmaBelow(threshold=-5)]

    def test_accepts_single_object(self):
        conditions = parse_conditions({"type": "account_age_below", "days": 0})

        assert conditions == [AccountAgeBelow(days=0)]

    def test_legacy_operator_value_shape(self):
        conditions = parse_conditions(
            [
                {"type": "contentContains", "operator": "contains", "value": "spam"},
                {"type": "userKarmaBelow", "operator": "<", "value": 5},
            ]
        )

        assert conditions == [
            ContentContains(keywords=["spam"]),
            UserKarmaBelow(threshold=5),
        ]

    def test_blank_keywords_are_stripped(self):
        conditions = parse_conditions(
            [{"type": "content_contains", "keywords": ["  spam ", "", "   "]}]
        )

        assert conditions[0].keywords == ["spam"]

    @pytest.mark.parametrize(
        "raw",
        [
            [],
            "",
            "not json",
            "{}",
            [{"type": "unknown_condition", "value": 1}],
            [{"type": "content_contains", "keywords": []}],
            [{"type": "content_contains", "keywords": ["  "]}],
            [{"type": "account_age_below", "days": -1}],
            [{"type": "user_karma_below", "threshold": 1, "extra": True}],
            [{"threshold": 1}],
            42,
        ],
    )
    def test_rejects_invalid_payloads(self, raw):
        with pytest.raises(ValidationError):
            parse_conditions(raw)

    def test_dump_conditions_round_trips_through_storage(self):
        conditions = parse_conditions(
            [
                {"type": "content_contains", "keywords": ["spam"]},
                {"type": "user_karma_below", "threshold": 3},
            ]
        )

        stored = dump_conditions(conditions)

        assert json.loads(stored) == [
            {"type": "content_contains", "keywords": ["spam"]},
            {"type": "user_karma_below", "threshold": 3},
        ]
        assert parse_conditions(stored) == conditions


class TestAutomodRuleUpdate:
    """Test the partial update payload."""

    def test_unset_fields_are_excluded(self):
        update = AutomodRuleUpdate(priority=5)

        assert update.model_dump(exclude_unset=True) == {"priority": 5}
