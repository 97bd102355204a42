"""In-memory lock, mute, and trust collaborators."""

import logging
import threading
from collections.abc import Iterable

from herald.collaborators.base import LockState, MuteState, TrustEvaluator
from herald.notifications.item import Category, NotificationItem

logger = logging.getLogger(__name__)

# Actions a messaging notification must offer to be handled in the car.
CAR_COMPATIBLE_ACTIONS = frozenset({"reply", "mark_as_read"})
EXTRA_CAR_COMPATIBLE_ACTIONS = "car_compatible_actions"


class StaticLockState(LockState):
    """Lock state toggled explicitly by the host."""

    def __init__(self, locked: bool = False) -> None:
        self._locked = locked

    def is_locked(self) -> bool:
        return self._locked

    def set_locked(self, locked: bool) -> None:
        if locked != self._locked:
            logger.info("Display %s", "locked" if locked else "unlocked")
        self._locked = locked


class MutedConversations(MuteState):
    """Tracks conversations the user muted, by notification key or whole package."""

    def __init__(self) -> None:
        self._keys: set[str] = set()
        self._packages: set[str] = set()
        self._lock = threading.Lock()

    def is_muted(self, item: NotificationItem) -> bool:
        with self._lock:
            return item.key in self._keys or item.package_name in self._packages

    def mute(self, key: str) -> None:
        with self._lock:
            self._keys.add(key)

    def unmute(self, key: str) -> None:
        with self._lock:
            self._keys.discard(key)

    def mute_package(self, package_name: str) -> None:
        with self._lock:
            self._packages.add(package_name)

    def unmute_package(self, package_name: str) -> None:
        with self._lock:
            self._packages.discard(package_name)


class PackageTrustEvaluator(TrustEvaluator):
    """Trusts a fixed set of packages; recognizes messages with car actions.

    A message is car-compatible when its extras advertise both a reply and
    a mark-as-read action.
    """

    def __init__(self, trusted_packages: Iterable[str] = ()) -> None:
        self._trusted = frozenset(trusted_packages)

    def is_trusted_source(self, item: NotificationItem) -> bool:
        return item.package_name in self._trusted

    def is_car_compatible_message(self, item: NotificationItem) -> bool:
        if item.category is not Category.MESSAGE:
            return False
        actions = item.extras.get(EXTRA_CAR_COMPATIBLE_ACTIONS, ())
        return CAR_COMPATIBLE_ACTIONS.issubset(actions)
