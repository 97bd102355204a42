"""Abstract base classes for the external collaborators herald drives."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from herald.headsup.template import TemplateKind
from herald.notifications.item import NotificationItem

ViewHandle = Any


class CancelToken:
    """Handle for one scheduled callback; cancelling it is idempotent."""

    def __init__(self, due_ms: int, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self.cancelled = False
        self._callback = callback

    def run(self) -> None:
        """Invoke the callback unless the token was cancelled."""
        if not self.cancelled:
            self._callback()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "pending"
        return f"CancelToken(due_ms={self.due_ms}, {state})"


class RenderingSurface(ABC):
    """Presents heads-up cards. Internals (inflation, windows) are out of scope."""

    @abstractmethod
    def present(
        self,
        entry_id: str,
        template_kind: TemplateKind,
        item: NotificationItem,
    ) -> ViewHandle:
        """Create the view for a new heads-up entry.

        Args:
            entry_id: Notification key the view belongs to.
            template_kind: Layout template chosen for the item.
            item: Notification to bind.

        Returns:
            Opaque handle owned by the heads-up entry.
        """

    @abstractmethod
    def update_content(self, handle: ViewHandle, item: NotificationItem) -> None:
        """Rebind an existing view to an updated notification, without animation."""

    @abstractmethod
    def dismiss(self, handle: ViewHandle) -> None:
        """Release all resources behind ``handle``. Called exactly once per view."""

    @abstractmethod
    def animate_in(self, handle: ViewHandle) -> None:
        """Start the enter animation. Fire-and-forget."""

    @abstractmethod
    def animate_out(self, handle: ViewHandle, on_complete: Callable[[], None]) -> None:
        """Start the exit animation and call ``on_complete`` when it finishes."""


class AudioAlert(ABC):
    """Plays the alert sound for a notification channel."""

    @abstractmethod
    def beep(self, package_name: str, sound_uri: str) -> None:
        """Start playing ``sound_uri`` on behalf of ``package_name``. Must not block."""


class LockState(ABC):
    """Reports whether the display is locked."""

    @abstractmethod
    def is_locked(self) -> bool:
        """True while the lock screen is showing."""


class MuteState(ABC):
    """Reports whether the user muted the conversation an item belongs to."""

    @abstractmethod
    def is_muted(self, item: NotificationItem) -> bool:
        """True if alerts for ``item`` are muted by the user."""


class TrustEvaluator(ABC):
    """Recognizes privileged sources and car-compatible messages."""

    @abstractmethod
    def is_trusted_source(self, item: NotificationItem) -> bool:
        """True if ``item`` was posted by a privileged or system-trusted package."""

    @abstractmethod
    def is_car_compatible_message(self, item: NotificationItem) -> bool:
        """True if ``item`` has the shape of a car-compatible messaging notification."""


class Scheduler(ABC):
    """Clock plus delayed callbacks on the registry's single timeline."""

    @abstractmethod
    def now(self) -> int:
        """Current time in milliseconds."""

    @abstractmethod
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> CancelToken:
        """Run ``callback`` once after ``delay_ms`` milliseconds.

        Returns:
            Token that cancels the callback.
        """

    @abstractmethod
    def cancel(self, token: CancelToken) -> None:
        """Cancel a scheduled callback. Cancelling twice is a no-op."""
