"""Tests for the heads-up eligibility rules."""

from unittest.mock import MagicMock

import pytest

from conftest import high_ranking, make_item
from herald.collaborators.base import LockState, MuteState, TrustEvaluator
from herald.config import HeraldConfig
from herald.headsup.eligibility import EligibilityDecision, EligibilityPolicy, Reason
from herald.notifications.item import Category, Importance, NotificationFlag, Ranking, RankingSnapshot


def _ranking(key, importance):
    return RankingSnapshot({key: Ranking(rank=0, importance=importance)})


class TestSuppressionRules:
    def test_locked_display_blocks_everything(self, policy, lock_state):
        lock_state.set_locked(True)
        item = make_item("k1", package_name="android", category=Category.CALL)
        decision = policy.evaluate(item, _ranking("k1", Importance.MAX))
        assert decision == EligibilityDecision(False, Reason.LOCKED)

    def test_navigation_disabled(self, lock_state, mute_state, trust):
        config = HeraldConfig(navigation_headsup_enabled=False)
        policy = EligibilityPolicy(config, lock_state, mute_state, trust)
        item = make_item("nav", category=Category.NAVIGATION)
        assert policy.evaluate(item, _ranking("nav", Importance.HIGH)).reason is Reason.NAVIGATION_DISABLED

    def test_navigation_enabled_allows_category(self, policy):
        item = make_item("nav", category=Category.NAVIGATION)
        assert policy.evaluate(item, RankingSnapshot()).reason is Reason.ALLOWED_CATEGORY

    def test_group_suppression(self, policy):
        item = make_item(flags=NotificationFlag.SUPPRESS_ALERTING_DUE_TO_GROUPING)
        assert policy.evaluate(item, high_ranking("k1")).reason is Reason.SUPPRESSED_BY_GROUP

    def test_muted_conversation(self, policy, mute_state):
        mute_state.mute("k1")
        assert policy.evaluate(make_item(), high_ranking("k1")).reason is Reason.MUTED

    def test_muted_package(self, policy, mute_state):
        mute_state.mute_package("com.example.chat")
        assert policy.should_show_heads_up(make_item(), high_ranking("k1")) is False

    @pytest.mark.parametrize("importance", [Importance.NONE, Importance.LOW, Importance.DEFAULT])
    def test_low_importance_blocks_even_trusted(self, policy, importance):
        item = make_item("k1", package_name="android", category=Category.CALL)
        decision = policy.evaluate(item, _ranking("k1", importance))
        assert decision == EligibilityDecision(False, Reason.LOW_IMPORTANCE)


class TestAllowRules:
    @pytest.mark.parametrize("importance", [Importance.HIGH, Importance.MAX])
    def test_high_importance(self, policy, importance):
        decision = policy.evaluate(make_item(), _ranking("k1", importance))
        assert decision == EligibilityDecision(True, Reason.HIGH_IMPORTANCE)

    def test_high_importance_with_no_category(self, policy):
        item = make_item(category=Category.NONE)
        assert policy.should_show_heads_up(item, high_ranking("k1")) is True

    def test_trusted_source_without_ranking(self, policy):
        item = make_item(package_name="android")
        assert policy.evaluate(item, RankingSnapshot()).reason is Reason.TRUSTED_SOURCE

    def test_car_compatible_message(self, policy):
        item = make_item(
            category=Category.MESSAGE,
            extras={"car_compatible_actions": ["reply", "mark_as_read"]},
        )
        assert policy.evaluate(item, RankingSnapshot()).reason is Reason.CAR_COMPATIBLE_MESSAGE

    def test_message_without_actions_does_not_match(self, policy):
        item = make_item(category=Category.MESSAGE, extras={"car_compatible_actions": ["reply"]})
        assert policy.evaluate(item, RankingSnapshot()) == EligibilityDecision(False, Reason.NO_MATCH)

    def test_call_category(self, policy):
        item = make_item(category=Category.CALL)
        assert policy.should_show_heads_up(item, RankingSnapshot()) is True

    def test_no_rule_matches(self, policy):
        item = make_item(category=Category.TRANSPORT)
        assert policy.evaluate(item, RankingSnapshot()) == EligibilityDecision(False, Reason.NO_MATCH)


class TestRuleOrder:
    def test_later_collaborators_not_consulted_when_locked(self, config):
        lock = MagicMock(spec=LockState)
        lock.is_locked.return_value = True
        mute = MagicMock(spec=MuteState)
        trust = MagicMock(spec=TrustEvaluator)

        policy = EligibilityPolicy(config, lock, mute, trust)
        assert policy.should_show_heads_up(make_item(), high_ranking("k1")) is False

        mute.is_muted.assert_not_called()
        trust.is_trusted_source.assert_not_called()

    def test_ranked_item_skips_trust_checks(self, config):
        lock = MagicMock(spec=LockState)
        lock.is_locked.return_value = False
        mute = MagicMock(spec=MuteState)
        mute.is_muted.return_value = False
        trust = MagicMock(spec=TrustEvaluator)

        policy = EligibilityPolicy(config, lock, mute, trust)
        assert policy.should_show_heads_up(make_item(), high_ranking("k1")) is True

        trust.is_trusted_source.assert_not_called()
        trust.is_car_compatible_message.assert_not_called()
