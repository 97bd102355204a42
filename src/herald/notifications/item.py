"""Notification value types — posted items, categories, flags, and ranking data."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag
from types import MappingProxyType
from typing import Any

# Well-known keys in NotificationItem.extras
EXTRA_BIG_TEXT = "big_text"
EXTRA_BIG_TITLE = "big_title"
EXTRA_SUMMARY_TEXT = "summary_text"


class Category(str, Enum):
    """Closed set of notification categories the car UI distinguishes."""

    EMERGENCY = "emergency"
    WARNING = "warning"
    INFORMATION = "information"
    MESSAGE = "message"
    CALL = "call"
    NAVIGATION = "navigation"
    TRANSPORT = "transport"
    NONE = "none"


class NotificationFlag(IntFlag):
    """Bitset of notification flags relevant to alerting."""

    NONE = 0
    FOREGROUND_SERVICE = 1
    ONGOING_EVENT = 2
    ONLY_ALERT_ONCE = 4
    SUPPRESS_ALERTING_DUE_TO_GROUPING = 8


class Importance(IntEnum):
    """Channel importance levels carried by a ranking snapshot."""

    NONE = 0
    MIN = 1
    LOW = 2
    DEFAULT = 3
    HIGH = 4
    MAX = 5


@dataclass(frozen=True)
class NotificationItem:
    """One posted notification.

    Immutable: a re-post with the same ``key`` is a new value that
    represents an update, never a mutation of the earlier item.
    """

    key: str
    package_name: str
    post_time_ms: int = 0
    category: Category = Category.NONE
    group_key: str | None = None
    is_group_summary: bool = False
    flags: NotificationFlag = NotificationFlag.NONE
    has_full_screen_intent: bool = False
    is_ongoing: bool = False
    channel_sound_uri: str | None = None
    override_group_key: str | None = None  # set when the platform auto-grouped it
    app_label: str | None = None
    extras: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extras", MappingProxyType(dict(self.extras)))

    @property
    def only_alert_once(self) -> bool:
        return bool(self.flags & NotificationFlag.ONLY_ALERT_ONCE)

    @property
    def suppresses_alerting(self) -> bool:
        return bool(self.flags & NotificationFlag.SUPPRESS_ALERTING_DUE_TO_GROUPING)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NotificationItem":
        """Build an item from a JSON-style mapping.

        Args:
            data: Mapping with snake_case field names. ``category`` is a
                category value string, ``flags`` a list of flag names.

        Returns:
            The constructed NotificationItem.

        Raises:
            KeyError: If ``key`` or ``package_name`` is missing, or a flag
                name is unknown.
            ValueError: If the category value is unknown.
        """
        flags = NotificationFlag.NONE
        for name in data.get("flags", []):
            flags |= NotificationFlag[name.upper()]

        category = data.get("category")
        return cls(
            key=data["key"],
            package_name=data["package_name"],
            post_time_ms=int(data.get("post_time_ms", 0)),
            category=Category(category) if category else Category.NONE,
            group_key=data.get("group_key"),
            is_group_summary=bool(data.get("is_group_summary", False)),
            flags=flags,
            has_full_screen_intent=bool(data.get("has_full_screen_intent", False)),
            is_ongoing=bool(data.get("is_ongoing", False)),
            channel_sound_uri=data.get("channel_sound_uri"),
            override_group_key=data.get("override_group_key"),
            app_label=data.get("app_label"),
            extras=data.get("extras", {}),
        )


@dataclass(frozen=True)
class Ranking:
    """Ranking data for a single notification key."""

    rank: int
    importance: int = Importance.DEFAULT
    channel_sound: str | None = None


class RankingSnapshot(Mapping[str, Ranking]):
    """Read-only, point-in-time mapping of notification key to Ranking.

    A snapshot does not necessarily cover every currently posted key.
    """

    def __init__(self, rankings: Mapping[str, Ranking] | None = None) -> None:
        self._rankings: dict[str, Ranking] = dict(rankings or {})

    def __getitem__(self, key: str) -> Ranking:
        return self._rankings[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rankings)

    def __len__(self) -> int:
        return len(self._rankings)

    def __repr__(self) -> str:
        return f"RankingSnapshot({self._rankings!r})"

    def rank_of(self, key: str) -> int | None:
        """Return the rank for ``key`` or None if the snapshot omits it."""
        ranking = self._rankings.get(key)
        return ranking.rank if ranking is not None else None

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]]) -> "RankingSnapshot":
        """Build a snapshot from ``{key: {"rank": .., "importance": .., "channel_sound": ..}}``."""
        return cls({
            key: Ranking(
                rank=int(entry["rank"]),
                importance=int(entry.get("importance", Importance.DEFAULT)),
                channel_sound=entry.get("channel_sound"),
            )
            for key, entry in data.items()
        })

    @classmethod
    def in_order(
        cls,
        keys: list[str],
        importance: int = Importance.DEFAULT,
    ) -> "RankingSnapshot":
        """Build a snapshot ranking ``keys`` in list order with one importance."""
        return cls({
            key: Ranking(rank=i, importance=importance)
            for i, key in enumerate(keys)
        })
