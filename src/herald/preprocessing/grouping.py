"""Step 1 of preprocessing: group notifications that share a group identity."""

import logging
from collections.abc import Iterable

from herald.notifications.group import NotificationGroup, group_identity
from herald.notifications.item import NotificationItem

logger = logging.getLogger(__name__)


class GroupingEngine:
    """Groups a flat sequence of notifications into NotificationGroups."""

    def group(self, items: Iterable[NotificationItem]) -> list[NotificationGroup]:
        """Group items by identity.

        Items are processed in input order. A group summary becomes the
        group's header (demoting any earlier header to a child); every
        other item becomes a child.

        Args:
            items: Notifications in posting order.

        Returns:
            Freshly allocated groups, in order of first-seen identity.
        """
        groups: dict[str, NotificationGroup] = {}

        for item in items:
            identity = group_identity(item)
            group = groups.get(identity)
            if group is None:
                group = NotificationGroup()
                groups[identity] = group

            if item.is_group_summary:
                group.set_header(item)
            else:
                group.add_child(item)

        logger.debug("Grouped notifications into %d groups", len(groups))
        return list(groups.values())
