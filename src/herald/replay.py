"""Replay scripted listener events against a NotificationCenter on simulated time.

A script is a JSON object::

    {
      "ranking": {"k1": {"rank": 0, "importance": 4, "channel_sound": "default"}},
      "events": [
        {"at": 0, "type": "post", "notification": {"key": "k1", "package_name": "com.chat"}},
        {"at": 1200, "type": "remove", "key": "k1"}
      ]
    }

Event types: post, remove, rank, lock, unlock, mute, unmute, click, swipe,
advance. ``at`` is milliseconds on the simulated clock.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from herald.collaborators.state import MutedConversations, StaticLockState
from herald.errors import HeraldError
from herald.notifications.item import NotificationItem, RankingSnapshot
from herald.orchestrator import NotificationCenter
from herald.scheduling.scheduler import VirtualScheduler

logger = logging.getLogger(__name__)

EVENT_TYPES = frozenset({
    "post", "remove", "rank", "lock", "unlock",
    "mute", "unmute", "click", "swipe", "advance",
})


class ReplayError(HeraldError, ValueError):
    """Raised for malformed replay scripts."""


@dataclass(frozen=True)
class ReplayEvent:
    """One scripted listener or user event."""

    at_ms: int
    kind: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str | None:
        if "key" in self.payload:
            return self.payload["key"]
        notification = self.payload.get("notification")
        return notification.get("key") if notification else None


@dataclass(frozen=True)
class ReplayStep:
    """State observed right after an event was applied."""

    at_ms: int
    kind: str
    key: str | None
    heads_up: tuple[str, ...]
    result: bool | None = None


@dataclass
class ReplayScript:
    """Parsed script: initial ranking plus time-ordered events."""

    ranking: RankingSnapshot
    events: list[ReplayEvent]


def parse_script(data: Mapping[str, Any]) -> ReplayScript:
    """Validate and parse a script mapping.

    Raises:
        ReplayError: On unknown event types or missing fields.
    """
    events = []
    for index, raw in enumerate(data.get("events", [])):
        kind = raw.get("type")
        if kind not in EVENT_TYPES:
            raise ReplayError(f"Event #{index}: unknown type {kind!r}")
        if "at" not in raw:
            raise ReplayError(f"Event #{index}: missing 'at'")
        if kind == "post" and "notification" not in raw:
            raise ReplayError(f"Event #{index}: 'post' needs a notification")
        if kind in ("remove", "mute", "unmute", "click", "swipe") and "key" not in raw:
            raise ReplayError(f"Event #{index}: {kind!r} needs a key")
        if kind == "rank" and "ranking" not in raw:
            raise ReplayError(f"Event #{index}: 'rank' needs a ranking")
        payload = {k: v for k, v in raw.items() if k not in ("at", "type")}
        events.append(ReplayEvent(at_ms=int(raw["at"]), kind=kind, payload=payload))

    # Stable: events sharing a timestamp keep script order.
    events.sort(key=lambda e: e.at_ms)
    return ReplayScript(
        ranking=RankingSnapshot.from_dict(data.get("ranking", {})),
        events=events,
    )


def load_script(path: Path) -> ReplayScript:
    """Read and parse a JSON script file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ReplayError(f"{path}: invalid JSON ({exc})") from exc
    return parse_script(data)


class Replayer:
    """Drives a NotificationCenter through a script on a VirtualScheduler."""

    def __init__(
        self,
        center: NotificationCenter,
        scheduler: VirtualScheduler,
        lock_state: StaticLockState,
        mute_state: MutedConversations,
    ) -> None:
        self._center = center
        self._scheduler = scheduler
        self._lock_state = lock_state
        self._mute_state = mute_state

    def run(self, script: ReplayScript, settle_ms: int = 0) -> list[ReplayStep]:
        """Apply every event at its time, then let timers run for ``settle_ms``.

        Returns:
            One step per event, plus a final "settle" step if ``settle_ms`` > 0.
        """
        self._center.on_ranking_update(script.ranking)
        steps = []

        for event in script.events:
            self._scheduler.advance_to(max(event.at_ms, self._scheduler.now()))
            result = self._apply(event)
            steps.append(ReplayStep(
                at_ms=self._scheduler.now(),
                kind=event.kind,
                key=event.key,
                heads_up=tuple(self._center.heads_up_keys()),
                result=result,
            ))

        if settle_ms > 0:
            self._scheduler.advance(settle_ms)
            steps.append(ReplayStep(
                at_ms=self._scheduler.now(),
                kind="settle",
                key=None,
                heads_up=tuple(self._center.heads_up_keys()),
            ))
        return steps

    def _apply(self, event: ReplayEvent) -> bool | None:
        payload = event.payload
        ranking = (
            RankingSnapshot.from_dict(payload["ranking"]) if "ranking" in payload else None
        )
        logger.debug("Replaying %s at %dms (key=%s)", event.kind, event.at_ms, event.key)

        if event.kind == "post":
            data = dict(payload["notification"])
            data.setdefault("post_time_ms", event.at_ms)
            return self._center.on_posted(NotificationItem.from_dict(data), ranking)
        if event.kind == "remove":
            item = self._posted_item(payload["key"])
            if item is None:
                logger.warning("Replay removes unknown notification %s", payload["key"])
                return None
            self._center.on_removed(item, ranking)
            return None
        if event.kind == "rank":
            self._center.on_ranking_update(ranking)
            return None
        if event.kind in ("lock", "unlock"):
            self._lock_state.set_locked(event.kind == "lock")
            return None
        if event.kind == "mute":
            self._mute_state.mute(payload["key"])
            return None
        if event.kind == "unmute":
            self._mute_state.unmute(payload["key"])
            return None
        if event.kind == "click":
            self._center.click(payload["key"])
            return None
        if event.kind == "swipe":
            return self._center.swipe(payload["key"])
        # "advance" only moves the clock
        return None

    def _posted_item(self, key: str) -> NotificationItem | None:
        for item in self._center.posted():
            if item.key == key:
                return item
        return None
