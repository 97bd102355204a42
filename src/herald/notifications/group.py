"""NotificationGroup — one row of the notification list.

A group holds either:
    1. one notification with no group header,
    2. one group header with no children, or
    3. a header plus its child notifications.
"""

from dataclasses import dataclass

from herald.errors import GroupKeyMismatchError
from herald.notifications.item import NotificationItem


def group_identity(item: NotificationItem) -> str:
    """Return the identity an item is grouped under.

    Ungrouped items are their own singleton group. Grouped items get the
    package name appended, so two apps sharing a default group key (the
    platform's auto-group key is the same for every package) never collide.
    """
    if item.group_key is None:
        return item.key
    return item.group_key + item.package_name


@dataclass(frozen=True)
class GroupPresentation:
    """Header text synthesized for an auto-generated group summary."""

    title: str | None = None
    summary_text: str | None = None


class NotificationGroup:
    """Children and optional header sharing one group identity."""

    def __init__(self) -> None:
        self._group_key: str | None = None
        self._children: list[NotificationItem] = []
        self._header: NotificationItem | None = None
        self.presentation: GroupPresentation | None = None

    # ── Group key ─────────────────────────────────────────────────────

    @property
    def group_key(self) -> str | None:
        return self._group_key

    @group_key.setter
    def group_key(self, value: str) -> None:
        if self._group_key is None:
            self._group_key = value
        elif self._group_key != value:
            raise GroupKeyMismatchError(self._group_key, value)

    # ── Membership ────────────────────────────────────────────────────

    def add_child(self, item: NotificationItem) -> None:
        """Append a child and keep children ordered newest first."""
        self.group_key = group_identity(item)
        self._children.append(item)
        self._sort_children()

    def set_header(self, item: NotificationItem) -> None:
        """Install a summary as the header, demoting any previous header to a child."""
        self.group_key = group_identity(item)
        previous = self._header
        self._header = item
        if previous is not None:
            self._children.append(previous)
            self._sort_children()

    def _sort_children(self) -> None:
        self._children.sort(key=lambda c: (group_identity(c), -c.post_time_ms))

    # ── Views ─────────────────────────────────────────────────────────

    @property
    def children(self) -> tuple[NotificationItem, ...]:
        return tuple(self._children)

    @property
    def header_item(self) -> NotificationItem | None:
        return self._header

    @property
    def child_count(self) -> int:
        return len(self._children)

    def is_group(self) -> bool:
        """True when there is a header and more than one child."""
        return self._header is not None and self.child_count > 1

    @property
    def single_item(self) -> NotificationItem:
        """The one item that stands for this group when shown as a single card.

        The header for a real group or a header-only group, otherwise the
        first child.
        """
        if self.is_group() or self.child_count == 0:
            return self._header  # type: ignore[return-value]
        return self._children[0]

    @property
    def representative_item(self) -> NotificationItem:
        """The item used for ranking: the header if present, else the first child."""
        if self._header is not None:
            return self._header
        return self.single_item

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NotificationGroup):
            return NotImplemented
        return (
            self._group_key == other._group_key
            and self._children == other._children
            and self._header == other._header
            and self.presentation == other.presentation
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"NotificationGroup(group_key={self._group_key!r}, "
            f"header={self._header.key if self._header else None!r}, "
            f"children={[c.key for c in self._children]!r})"
        )
