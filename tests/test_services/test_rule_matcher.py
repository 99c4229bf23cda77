"""Tests for automod rule evaluation."""

from datetime import UTC
from datetime import datetime
from datetime import timedelta

import pytest

from forum_moderation_api.services.rule_matcher import AuthorContext
from forum_moderation_api.services.rule_matcher import MatchContext
from forum_moderation_api.services.rule_matcher import evaluate_rules
from forum_moderation_api.services.rule_matcher import rule_matches
from forum_moderation_api.services.rule_matcher import sort_rules

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def make_context(body="hello world", karma=50, age_days=100):
    return MatchContext(
        body=body,
        author=AuthorContext(karma=karma, created_at=NOW - timedelta(days=age_days)),
        now=NOW,
    )


class TestRuleMatches:
    """Test single-rule matching."""

    def test_keyword_match_is_case_insensitive_substring(self, make_rule):
        rule = make_rule(
            conditions=[{"type": "content_contains", "keywords": ["SPAM"]}]
        )

        assert rule_matches(rule, make_context(body="this is spammy")) is True
        assert rule_matches(rule, make_context(body="nothing here")) is False

    def test_any_keyword_matches(self, make_rule):
        rule = make_rule(
            conditions=[{"type": "content_contains", "keywords": ["foo", "bar"]}]
        )

        assert rule_matches(rule, make_context(body="a bar b")) is True

    def test_karma_threshold_is_strict(self, make_rule):
        rule = make_rule(conditions=[{"type": "user_karma_below", "threshold": 10}])

        assert rule_matches(rule, make_context(karma=9)) is True
        assert rule_matches(rule, make_context(karma=10)) is False

    def test_account_age(self, make_rule):
        rule = make_rule(conditions=[{"type": "account_age_below", "days": 7}])

        assert rule_matches(rule, make_context(age_days=2)) is True
        assert rule_matches(rule, make_context(age_days=7)) is False

    def test_all_conditions_must_hold(self, make_rule):
        rule = make_rule(
            conditions=[
                {"type": "content_contains", "keywords": ["link"]},
                {"type": "user_karma_below", "threshold": 5},
            ]
        )

        assert rule_matches(rule, make_context(body="link", karma=1)) is True
        assert rule_matches(rule, make_context(body="link", karma=50)) is False
        assert rule_matches(rule, make_context(body="text", karma=1)) is False

    def test_disabled_rule_never_matches(self, make_rule):
        rule = make_rule(enabled=False)

        assert rule_matches(rule, make_context(body="spam")) is False

    def test_invalid_conditions_never_match(self, make_rule):
        rule = make_rule(conditions=[], conditions_valid=False)

        assert rule_matches(rule, make_context(body="spam")) is False

    def test_empty_conditions_never_match(self, make_rule):
        rule = make_rule(conditions=[])

        assert rule_matches(rule, make_context(body="spam")) is False

    def test_naive_created_at_is_treated_as_utc(self, make_rule):
        rule = make_rule(conditions=[{"type": "account_age_below", "days": 1}])
        context = MatchContext(
            body="x",
            author=AuthorContext(
                karma=0, created_at=(NOW - timedelta(hours=2)).replace(tzinfo=None)
            ),
            now=NOW,
        )

        assert rule_matches(rule, context) is True


class TestEvaluateRules:
    """Test ordering and multi-match behaviour."""

    def test_every_matching_rule_is_returned_in_priority_order(self, make_rule):
        low = make_rule(name="low", priority=1)
        high = make_rule(name="high", priority=10)
        unrelated = make_rule(
            name="unrelated",
            priority=50,
            conditions=[{"type": "content_contains", "keywords": ["zzz"]}],
        )

        matched = evaluate_rules([low, unrelated, high], make_context(body="spam"))

        assert [rule.name for rule in matched] == ["high", "low"]

    def test_ties_break_on_creation_time(self, make_rule):
        older = make_rule(name="older", created_at=NOW - timedelta(days=2))
        newer = make_rule(name="newer", created_at=NOW - timedelta(days=1))

        assert [rule.name for rule in sort_rules([newer, older])] == [
            "older",
            "newer",
        ]

    def test_no_rules(self):
        assert evaluate_rules([], make_context()) == []

    @pytest.mark.parametrize("body", ["", "   "])
    def test_blank_body_only_matches_author_conditions(self, make_rule, body):
        keyword = make_rule(name="keyword")
        karma = make_rule(
            name="karma", conditions=[{"type": "user_karma_below", "threshold": 100}]
        )

        matched = evaluate_rules([keyword, karma], make_context(body=body))

        assert [rule.name for rule in matched] == ["karma"]
