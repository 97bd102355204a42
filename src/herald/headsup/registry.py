"""HeadsUpRegistry — lifecycle state machine for active heads-up notifications.

Each key moves through absent → active (new) → active (steady) → removed.
Removal deletes the entry, so a key can become active again later.

Three kinds of show are handled:
    1. A new heads-up is presented with its enter animation.
    2. An update that alerts again (no ONLY_ALERT_ONCE flag) restarts the
       display window: post time, sound, and auto-dismiss timer.
    3. An update that must not alert again only refreshes the content.

Every public operation and every timer callback runs under one re-entrant
lock, so transitions never interleave even with a threaded scheduler.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from herald.collaborators.base import AudioAlert, RenderingSurface, Scheduler
from herald.config import HeraldConfig
from herald.errors import AudioAlertError, CollaboratorError, RenderingError
from herald.headsup.eligibility import EligibilityPolicy
from herald.headsup.entry import HeadsUpEntry
from herald.headsup.template import template_kind_for
from herald.notifications.item import Category, NotificationItem, RankingSnapshot

logger = logging.getLogger(__name__)


def is_dismissible(item: NotificationItem) -> bool:
    """Whether the user may swipe the heads-up for ``item`` away.

    Ongoing calls that requested a full-screen intent stay put.
    """
    return not (
        item.has_full_screen_intent
        and item.category is Category.CALL
        and item.is_ongoing
    )


class HeadsUpRegistry:
    """Owns the active heads-up entries and their timers."""

    def __init__(
        self,
        config: HeraldConfig,
        policy: EligibilityPolicy,
        surface: RenderingSurface,
        audio: AudioAlert,
        scheduler: Scheduler,
    ) -> None:
        """Initialize the registry.

        Args:
            config: Durations for auto-dismiss, minimum display and snooze.
            policy: Eligibility rules consulted on every show.
            surface: Rendering collaborator that owns the views.
            audio: Plays channel sounds.
            scheduler: Clock and timer source for the single timeline.
        """
        self._config = config
        self._policy = policy
        self._surface = surface
        self._audio = audio
        self._scheduler = scheduler
        self._entries: dict[str, HeadsUpEntry] = {}
        self._snoozed_until: dict[str, int] = {}
        self._lock = threading.RLock()

    # ── Queries ───────────────────────────────────────────────────────

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> HeadsUpEntry | None:
        """Return the active entry for ``key``, if any."""
        with self._lock:
            return self._entries.get(key)

    def active_keys(self) -> list[str]:
        """Keys of all active heads-up entries, in creation order."""
        with self._lock:
            return list(self._entries)

    def is_snoozed(self, key: str) -> bool:
        """True while re-posts of ``key`` are ignored after a user dismissal."""
        with self._lock:
            until = self._snoozed_until.get(key)
            if until is None:
                return False
            if self._scheduler.now() >= until:
                del self._snoozed_until[key]
                return False
            return True

    # ── Show ──────────────────────────────────────────────────────────

    def show(self, item: NotificationItem, ranking: RankingSnapshot) -> bool:
        """Show ``item`` as a heads-up if it qualifies.

        Args:
            item: Newly posted or updated notification.
            ranking: Current ranking snapshot.

        Returns:
            True if ``item`` is an active heads-up after the call.

        Raises:
            CollaboratorError: If the surface or audio collaborator failed.
                The entry for ``item`` has been removed in that case.
        """
        with self._lock:
            entry = self._entries.get(item.key)

            if not self._policy.should_show_heads_up(item, ranking):
                # An update that is no longer eligible takes a displaying heads-up down.
                if entry is not None and entry.has_pending_timer:
                    logger.info("Heads-up %s no longer eligible, removing", item.key)
                    self._animate_out(item.key)
                return False

            if entry is None:
                if self.is_snoozed(item.key):
                    logger.debug("Heads-up %s is snoozed, ignoring", item.key)
                    return False
                self._create(item, ranking)
            else:
                self._update(entry, item, ranking)
            return True

    def _create(self, item: NotificationItem, ranking: RankingSnapshot) -> None:
        entry = HeadsUpEntry(
            key=item.key,
            item=item,
            first_shown_at_ms=self._scheduler.now(),
            alerts_again=not item.only_alert_once,
        )
        self._entries[item.key] = entry

        try:
            self._beep(item, ranking)
            entry.view_handle = self._call_surface(
                "present", self._surface.present, item.key, template_kind_for(item), item,
            )
            self._call_surface("animate_in", self._surface.animate_in, entry.view_handle)
        except CollaboratorError:
            self._abandon(entry)
            raise

        self._arm_auto_dismiss(entry)
        entry.is_newly_created = False
        logger.info(
            "Heads-up shown: %s (package=%s, auto_dismiss=%s)",
            item.key, item.package_name, entry.has_pending_timer,
        )

    def _update(
        self,
        entry: HeadsUpEntry,
        item: NotificationItem,
        ranking: RankingSnapshot,
    ) -> None:
        entry.item = item
        entry.is_newly_created = False
        entry.alerts_again = not item.only_alert_once

        try:
            if entry.alerts_again:
                entry.first_shown_at_ms = self._scheduler.now()
                self._beep(item, ranking)
            if entry.view_handle is not None:
                self._call_surface(
                    "update_content", self._surface.update_content, entry.view_handle, item,
                )
        except CollaboratorError:
            self._abandon(entry)
            raise

        if entry.alerts_again:
            self._arm_auto_dismiss(entry)
        logger.debug("Heads-up updated: %s (alerts_again=%s)", item.key, entry.alerts_again)

    # ── Remove ────────────────────────────────────────────────────────

    def remove(self, item: NotificationItem) -> None:
        """Handle the app cancelling or withdrawing ``item``.

        The heads-up stays up until it has been visible for at least the
        minimum display duration, then animates out.
        """
        with self._lock:
            self._snoozed_until.pop(item.key, None)
            entry = self._entries.get(item.key)
            if entry is None:
                logger.debug("Heads-up %s already removed", item.key)
                return

            elapsed = entry.elapsed_ms(self._scheduler.now())
            if elapsed >= self._config.min_display_duration_ms:
                self._animate_out(item.key)
                return

            remaining = self._config.min_display_duration_ms - elapsed
            logger.debug("Heads-up %s withdrawn early, removing in %dms", item.key, remaining)
            self._arm(entry, remaining)

    def clear(self, key: str) -> None:
        """Animate the heads-up for ``key`` out now (the user clicked it)."""
        with self._lock:
            self._animate_out(key)

    def dismiss(self, key: str) -> bool:
        """Handle a swipe on the heads-up for ``key``.

        The view is removed without an exit animation and the key is
        snoozed: eligible re-posts are ignored for ``snooze_duration_ms``.

        Returns:
            False if there is no such heads-up or it may not be swiped away.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if not is_dismissible(entry.item):
                logger.info("Heads-up %s ignores swipe dismissal", key)
                return False

            del self._entries[key]
            self._cancel_timer(entry)
            self._snoozed_until[key] = self._scheduler.now() + self._config.snooze_duration_ms
            logger.info("Heads-up dismissed by user: %s", key)
            self._release(entry)
            return True

    def shutdown(self) -> None:
        """Remove every active heads-up without animation."""
        with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()
            self._snoozed_until.clear()
            for entry in entries:
                self._cancel_timer(entry)
                self._release_quietly(entry)
            logger.info("Heads-up registry shut down (%d entries released)", len(entries))

    # ── Timers ────────────────────────────────────────────────────────

    def _arm_auto_dismiss(self, entry: HeadsUpEntry) -> None:
        # Full-screen intents are never auto-dismissed.
        if entry.item.has_full_screen_intent:
            self._cancel_timer(entry)
            return
        self._arm(entry, self._config.headsup_duration_ms)

    def _arm(self, entry: HeadsUpEntry, delay_ms: int) -> None:
        self._cancel_timer(entry)
        key = entry.key

        def fire() -> None:
            self._on_timer(key, token)

        token = self._scheduler.schedule(delay_ms, fire)
        entry.pending_timer = token

    def _cancel_timer(self, entry: HeadsUpEntry) -> None:
        if entry.pending_timer is not None:
            self._scheduler.cancel(entry.pending_timer)
            entry.pending_timer = None

    def _on_timer(self, key: str, token: Any) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.pending_timer is not token:
                logger.debug("Ignoring stale timer for %s", key)
                return
            entry.pending_timer = None
            self._animate_out(key)

    # ── Finalization ──────────────────────────────────────────────────

    def _animate_out(self, key: str) -> None:
        """Delete the entry, cancel its timer, and start the exit animation.

        The view is released when the animation completes. Calling this for
        a key that is no longer active does nothing.
        """
        entry = self._entries.pop(key, None)
        if entry is None:
            logger.debug("Heads-up %s already removed", key)
            return

        self._cancel_timer(entry)
        if entry.view_handle is None:
            entry.released = True
            return

        logger.info("Heads-up removed: %s", key)
        try:
            self._surface.animate_out(entry.view_handle, lambda: self._release(entry))
        except Exception as exc:
            self._release_quietly(entry)
            raise RenderingError(f"animate_out failed for {key}: {exc}") from exc

    def _release(self, entry: HeadsUpEntry) -> None:
        with self._lock:
            if entry.released:
                return
            entry.released = True
            if entry.view_handle is not None:
                self._call_surface("dismiss", self._surface.dismiss, entry.view_handle)

    def _release_quietly(self, entry: HeadsUpEntry) -> None:
        try:
            self._release(entry)
        except RenderingError as exc:
            logger.warning("Releasing heads-up %s failed: %s", entry.key, exc)

    def _abandon(self, entry: HeadsUpEntry) -> None:
        """Drop an entry whose collaborator call failed, leaving bookkeeping consistent."""
        if self._entries.get(entry.key) is entry:
            del self._entries[entry.key]
        self._cancel_timer(entry)
        self._release_quietly(entry)
        logger.error("Heads-up %s abandoned after collaborator failure", entry.key)

    # ── Collaborator calls ────────────────────────────────────────────

    def _beep(self, item: NotificationItem, ranking: RankingSnapshot) -> None:
        entry = ranking.get(item.key)
        # No sound configured on the channel means no beep.
        if entry is None or entry.channel_sound is None:
            return
        try:
            self._audio.beep(item.package_name, entry.channel_sound)
        except Exception as exc:
            raise AudioAlertError(f"beep failed for {item.key}: {exc}") from exc

    @staticmethod
    def _call_surface(action: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except Exception as exc:
            raise RenderingError(f"{action} failed: {exc}") from exc
