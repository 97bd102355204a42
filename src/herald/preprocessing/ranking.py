"""Step 3 of preprocessing: order groups by the ranking snapshot."""

import logging
import sys

from herald.notifications.group import NotificationGroup
from herald.notifications.item import RankingSnapshot

logger = logging.getLogger(__name__)

# Rank used for keys the snapshot does not cover: after every ranked group.
MISSING_RANK = sys.maxsize


class RankingStep:
    """Stable sort of groups by the rank of their representative item."""

    def rank(
        self,
        groups: list[NotificationGroup],
        ranking: RankingSnapshot,
    ) -> list[NotificationGroup]:
        """Return ``groups`` ordered by rank, ascending.

        Groups whose representative key is missing from ``ranking`` sort
        last and keep their relative input order.
        """
        missing = 0

        def sort_key(group: NotificationGroup) -> int:
            nonlocal missing
            rank = ranking.rank_of(group.representative_item.key)
            if rank is None:
                missing += 1
                return MISSING_RANK
            return rank

        ordered = sorted(groups, key=sort_key)
        if missing:
            logger.debug("%d groups missing from ranking snapshot, placed last", missing)
        return ordered
