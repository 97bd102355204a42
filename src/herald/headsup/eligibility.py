"""Heads-up eligibility — decides whether a notification is promoted to heads-up.

A notification is never shown as a heads-up if:
    - the lock screen is showing,
    - it is a navigation notification and navigation heads-up is disabled,
    - group alert behaviour suppresses it,
    - the user muted its conversation, or
    - the ranking snapshot gives it an importance below HIGH.

Otherwise it is shown when its importance is HIGH or above, when it comes
from a trusted source, when it is a car-compatible message, or when it is
a call or navigation notification.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from herald.collaborators.base import LockState, MuteState, TrustEvaluator
from herald.config import HeraldConfig
from herald.notifications.item import Category, Importance, NotificationItem, RankingSnapshot

logger = logging.getLogger(__name__)


class Reason(str, Enum):
    """The rule that decided an eligibility evaluation."""

    LOCKED = "locked"
    NAVIGATION_DISABLED = "navigation_disabled"
    SUPPRESSED_BY_GROUP = "suppressed_by_group"
    MUTED = "muted"
    LOW_IMPORTANCE = "low_importance"
    HIGH_IMPORTANCE = "high_importance"
    TRUSTED_SOURCE = "trusted_source"
    CAR_COMPATIBLE_MESSAGE = "car_compatible_message"
    ALLOWED_CATEGORY = "allowed_category"
    NO_MATCH = "no_match"


@dataclass(frozen=True)
class EligibilityDecision:
    """Outcome of an eligibility evaluation."""

    eligible: bool
    reason: Reason


_ALLOWED_CATEGORIES = frozenset({Category.CALL, Category.NAVIGATION})


class EligibilityPolicy:
    """Ordered rule list deciding heads-up eligibility.

    Rules are evaluated in priority order and the first one that decides
    wins; collaborators behind later rules are not consulted.
    """

    def __init__(
        self,
        config: HeraldConfig,
        lock_state: LockState,
        mute_state: MuteState,
        trust_evaluator: TrustEvaluator,
    ) -> None:
        self._config = config
        self._lock_state = lock_state
        self._mute_state = mute_state
        self._trust = trust_evaluator

    def should_show_heads_up(self, item: NotificationItem, ranking: RankingSnapshot) -> bool:
        """Return True if ``item`` should be shown as a heads-up."""
        return self.evaluate(item, ranking).eligible

    def evaluate(self, item: NotificationItem, ranking: RankingSnapshot) -> EligibilityDecision:
        """Evaluate the rule list for ``item``.

        Args:
            item: Notification being posted or updated.
            ranking: Current ranking snapshot. A missing entry means the
                importance is unknown; evaluation falls through to the
                source and category rules.

        Returns:
            The decision and the rule that produced it.
        """
        decision = self._decide(item, ranking)
        logger.debug(
            "Heads-up eligibility for %s: %s (%s)",
            item.key, decision.eligible, decision.reason.value,
        )
        return decision

    def _decide(self, item: NotificationItem, ranking: RankingSnapshot) -> EligibilityDecision:
        if self._lock_state.is_locked():
            return EligibilityDecision(False, Reason.LOCKED)

        if item.category is Category.NAVIGATION and not self._config.navigation_headsup_enabled:
            return EligibilityDecision(False, Reason.NAVIGATION_DISABLED)

        if item.suppresses_alerting:
            return EligibilityDecision(False, Reason.SUPPRESSED_BY_GROUP)

        if self._mute_state.is_muted(item):
            return EligibilityDecision(False, Reason.MUTED)

        entry = ranking.get(item.key)
        if entry is not None:
            if entry.importance < Importance.HIGH:
                return EligibilityDecision(False, Reason.LOW_IMPORTANCE)
            return EligibilityDecision(True, Reason.HIGH_IMPORTANCE)

        if self._trust.is_trusted_source(item):
            return EligibilityDecision(True, Reason.TRUSTED_SOURCE)

        if self._trust.is_car_compatible_message(item):
            return EligibilityDecision(True, Reason.CAR_COMPATIBLE_MESSAGE)

        if item.category in _ALLOWED_CATEGORIES:
            return EligibilityDecision(True, Reason.ALLOWED_CATEGORY)

        return EligibilityDecision(False, Reason.NO_MATCH)
