"""NotificationCenter — composes preprocessing, eligibility, and the heads-up registry.

Receives listener events (posted, removed, ranking updated), keeps the set
of currently posted notifications, feeds heads-up decisions to the
registry, and produces the ordered list rows on demand.
"""

import logging
import threading

from herald.audio.beeper import Beeper, NullAudio
from herald.collaborators.base import (
    AudioAlert,
    LockState,
    MuteState,
    RenderingSurface,
    Scheduler,
    TrustEvaluator,
)
from herald.collaborators.state import MutedConversations, PackageTrustEvaluator, StaticLockState
from herald.config import HeraldConfig
from herald.headsup.eligibility import EligibilityPolicy
from herald.headsup.registry import HeadsUpRegistry
from herald.notifications.group import NotificationGroup
from herald.notifications.item import NotificationItem, RankingSnapshot
from herald.preprocessing.pipeline import PreprocessingPipeline

logger = logging.getLogger(__name__)


class NotificationCenter:
    """Owns one heads-up registry and the notifications currently posted."""

    def __init__(
        self,
        config: HeraldConfig,
        surface: RenderingSurface,
        scheduler: Scheduler,
        audio: AudioAlert | None = None,
        lock_state: LockState | None = None,
        mute_state: MuteState | None = None,
        trust_evaluator: TrustEvaluator | None = None,
        pipeline: PreprocessingPipeline | None = None,
    ) -> None:
        """Wire the components together.

        Collaborators left as None get the in-memory defaults; audio
        defaults to a Beeper, or NullAudio when ``config.beep_enabled`` is
        off.
        """
        if audio is None:
            audio = (
                Beeper(volume=config.beep_volume, sample_rate=config.beep_sample_rate)
                if config.beep_enabled else NullAudio()
            )
        self.lock_state = lock_state or StaticLockState()
        self.mute_state = mute_state or MutedConversations()
        trust_evaluator = trust_evaluator or PackageTrustEvaluator(config.trusted_packages)

        self._pipeline = pipeline or PreprocessingPipeline()
        self._policy = EligibilityPolicy(config, self.lock_state, self.mute_state, trust_evaluator)
        self._registry = HeadsUpRegistry(config, self._policy, surface, audio, scheduler)

        self._posted: dict[str, NotificationItem] = {}
        self._ranking = RankingSnapshot()
        self._lock = threading.Lock()

        logger.info(
            "NotificationCenter initialized — duration=%dms | min_display=%dms | navigation_headsup=%s",
            config.headsup_duration_ms,
            config.min_display_duration_ms,
            "enabled" if config.navigation_headsup_enabled else "disabled",
        )

    @property
    def registry(self) -> HeadsUpRegistry:
        return self._registry

    @property
    def policy(self) -> EligibilityPolicy:
        return self._policy

    @property
    def ranking(self) -> RankingSnapshot:
        return self._ranking

    # ── Listener events ───────────────────────────────────────────────

    def on_posted(self, item: NotificationItem, ranking: RankingSnapshot | None = None) -> bool:
        """Handle a new or updated notification.

        Returns:
            True if the notification is showing as a heads-up afterwards.
        """
        with self._lock:
            if ranking is not None:
                self._ranking = ranking
            self._posted[item.key] = item
            current = self._ranking
        return self._registry.show(item, current)

    def on_removed(self, item: NotificationItem, ranking: RankingSnapshot | None = None) -> None:
        """Handle the app cancelling a notification."""
        with self._lock:
            if ranking is not None:
                self._ranking = ranking
            self._posted.pop(item.key, None)
        self._registry.remove(item)

    def on_ranking_update(self, ranking: RankingSnapshot) -> None:
        """Replace the current ranking snapshot."""
        with self._lock:
            self._ranking = ranking

    # ── User actions ──────────────────────────────────────────────────

    def click(self, key: str) -> None:
        """The user tapped the heads-up for ``key``."""
        self._registry.clear(key)

    def swipe(self, key: str) -> bool:
        """The user swiped the heads-up for ``key``. Returns True if it went away."""
        return self._registry.dismiss(key)

    # ── Views ─────────────────────────────────────────────────────────

    def posted(self) -> list[NotificationItem]:
        """Currently posted notifications, in posting order."""
        with self._lock:
            return list(self._posted.values())

    def groups(self) -> list[NotificationGroup]:
        """Ordered rows for the notification list."""
        with self._lock:
            items = list(self._posted.values())
            ranking = self._ranking
        return self._pipeline.process(items, ranking)

    def heads_up_keys(self) -> list[str]:
        """Keys currently shown as heads-up."""
        return self._registry.active_keys()

    def shutdown(self) -> None:
        """Release every heads-up."""
        self._registry.shutdown()
