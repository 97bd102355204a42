"""Tests for notification value types and ranking snapshots."""

import dataclasses

import pytest

from herald.notifications.item import (
    Category,
    Importance,
    NotificationFlag,
    NotificationItem,
    Ranking,
    RankingSnapshot,
)


class TestNotificationItem:
    def test_defaults(self):
        item = NotificationItem(key="k", package_name="com.app")
        assert item.category is Category.NONE
        assert item.group_key is None
        assert item.flags == NotificationFlag.NONE
        assert item.only_alert_once is False
        assert item.suppresses_alerting is False
        assert dict(item.extras) == {}

    def test_is_immutable(self):
        item = NotificationItem(key="k", package_name="com.app")
        with pytest.raises(dataclasses.FrozenInstanceError):
            item.key = "other"

    def test_extras_are_read_only(self):
        extras = {"title": "Hi"}
        item = NotificationItem(key="k", package_name="com.app", extras=extras)
        with pytest.raises(TypeError):
            item.extras["title"] = "changed"
        # Later changes to the caller's dict do not leak in
        extras["title"] = "changed"
        assert item.extras["title"] == "Hi"

    def test_flag_properties(self):
        item = NotificationItem(
            key="k",
            package_name="com.app",
            flags=NotificationFlag.ONLY_ALERT_ONCE | NotificationFlag.SUPPRESS_ALERTING_DUE_TO_GROUPING,
        )
        assert item.only_alert_once is True
        assert item.suppresses_alerting is True

    def test_hashable_despite_extras(self):
        a = NotificationItem(key="k", package_name="com.app", extras={"title": "Hi"})
        b = NotificationItem(key="k", package_name="com.app", extras={"title": "Hi"})
        assert hash(a) == hash(b)
        assert {a, b} == {a}
        assert {a: 1}[b] == 1

    def test_extras_still_compared(self):
        a = NotificationItem(key="k", package_name="com.app", extras={"title": "Hi"})
        b = NotificationItem(key="k", package_name="com.app", extras={"title": "Bye"})
        assert a != b
        assert len({a, b}) == 2

    def test_update_is_a_new_value(self):
        first = NotificationItem(key="k", package_name="com.app", post_time_ms=1)
        update = dataclasses.replace(first, post_time_ms=2)
        assert first.post_time_ms == 1
        assert update.key == first.key
        assert update != first


class TestFromDict:
    def test_full_mapping(self):
        item = NotificationItem.from_dict({
            "key": "0|com.chat|7",
            "package_name": "com.chat",
            "category": "message",
            "group_key": "thread",
            "flags": ["only_alert_once", "ongoing_event"],
            "post_time_ms": "42",
            "has_full_screen_intent": True,
            "extras": {"title": "Ana"},
        })
        assert item.category is Category.MESSAGE
        assert item.group_key == "thread"
        assert item.flags == NotificationFlag.ONLY_ALERT_ONCE | NotificationFlag.ONGOING_EVENT
        assert item.post_time_ms == 42
        assert item.has_full_screen_intent is True
        assert item.extras["title"] == "Ana"

    def test_unknown_category_rejected(self):
        with pytest.raises(ValueError):
            NotificationItem.from_dict({"key": "k", "package_name": "p", "category": "spam"})

    def test_missing_key_rejected(self):
        with pytest.raises(KeyError):
            NotificationItem.from_dict({"package_name": "p"})


class TestRankingSnapshot:
    def test_lookup(self):
        snapshot = RankingSnapshot({"a": Ranking(rank=3, importance=Importance.HIGH)})
        assert snapshot.rank_of("a") == 3
        assert snapshot.get("a").importance == Importance.HIGH
        assert "a" in snapshot
        assert len(snapshot) == 1

    def test_missing_key(self):
        snapshot = RankingSnapshot()
        assert snapshot.rank_of("missing") is None
        assert snapshot.get("missing") is None
        with pytest.raises(KeyError):
            snapshot["missing"]

    def test_from_dict(self):
        snapshot = RankingSnapshot.from_dict({
            "a": {"rank": 1, "importance": 4, "channel_sound": "default"},
            "b": {"rank": 0},
        })
        assert snapshot["a"] == Ranking(rank=1, importance=4, channel_sound="default")
        assert snapshot["b"].importance == Importance.DEFAULT
        assert snapshot["b"].channel_sound is None

    def test_in_order(self):
        snapshot = RankingSnapshot.in_order(["x", "y"], importance=Importance.HIGH)
        assert snapshot.rank_of("x") == 0
        assert snapshot.rank_of("y") == 1
        assert snapshot["y"].importance == Importance.HIGH

    def test_snapshot_does_not_track_source_dict(self):
        source = {"a": Ranking(rank=0)}
        snapshot = RankingSnapshot(source)
        source["b"] = Ranking(rank=1)
        assert "b" not in snapshot
