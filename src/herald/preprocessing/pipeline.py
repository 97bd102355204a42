"""PreprocessingPipeline — group, summarize, and rank notifications for the list view."""

from collections.abc import Iterable

from herald.notifications.group import NotificationGroup
from herald.notifications.item import NotificationItem, RankingSnapshot
from herald.preprocessing.grouping import GroupingEngine
from herald.preprocessing.ranking import RankingStep
from herald.preprocessing.summarization import SummarizationStep


class PreprocessingPipeline:
    """Composes the three preprocessing steps into a single pure call."""

    def __init__(
        self,
        grouping: GroupingEngine | None = None,
        summarization: SummarizationStep | None = None,
        ranking: RankingStep | None = None,
    ) -> None:
        self._grouping = grouping or GroupingEngine()
        self._summarization = summarization or SummarizationStep()
        self._ranking = ranking or RankingStep()

    def process(
        self,
        items: Iterable[NotificationItem],
        ranking: RankingSnapshot,
    ) -> list[NotificationGroup]:
        """Process notifications into ordered list rows.

        Every call builds new group objects, so consumers comparing by
        identity see a change on each pass. No state is retained.

        Args:
            items: Currently posted notifications.
            ranking: Ranking snapshot to order by.

        Returns:
            Ordered list of NotificationGroups.
        """
        groups = self._grouping.group(items)
        groups = self._summarization.summarize(groups)
        return self._ranking.rank(groups, ranking)
