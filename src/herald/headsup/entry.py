"""Runtime state for one active heads-up notification."""

from dataclasses import dataclass

from herald.collaborators.base import CancelToken, ViewHandle
from herald.notifications.item import NotificationItem


@dataclass
class HeadsUpEntry:
    """An active heads-up, keyed by notification key.

    Owns at most one pending timer and the view handle created for it;
    the view is released exactly once when the entry is removed.
    """

    key: str
    item: NotificationItem
    first_shown_at_ms: int
    is_newly_created: bool = True
    alerts_again: bool = True
    pending_timer: CancelToken | None = None
    view_handle: ViewHandle | None = None
    released: bool = False

    @property
    def has_pending_timer(self) -> bool:
        return self.pending_timer is not None

    def elapsed_ms(self, now_ms: int) -> int:
        """Milliseconds since the entry was (re-)alerted."""
        return now_ms - self.first_shown_at_ms
