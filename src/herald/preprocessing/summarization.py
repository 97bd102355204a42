"""Step 2 of preprocessing: synthesize header text for platform-generated groups."""

from collections.abc import Callable

from herald.notifications.group import GroupPresentation, NotificationGroup
from herald.notifications.item import EXTRA_BIG_TITLE, EXTRA_SUMMARY_TEXT


def default_summary_text(count: int) -> str:
    """Pluralized summary line for a group of ``count`` children."""
    if count == 1:
        return "1 new notification"
    return f"{count} new notifications"


class SummarizationStep:
    """Fills in title and summary text for auto-generated group headers.

    Only groups whose header carries an override group key (the platform
    grouped them, not the app) are touched, and text the app authored is
    never replaced. The result is stored as a GroupPresentation on the
    group; the notification items themselves are left as they are.
    """

    def __init__(
        self,
        summary_text_fn: Callable[[int], str] = default_summary_text,
    ) -> None:
        self._summary_text_fn = summary_text_fn

    def summarize(self, groups: list[NotificationGroup]) -> list[NotificationGroup]:
        """Annotate ``groups`` in place and return the same list."""
        for group in groups:
            if not group.is_group():
                continue

            header = group.header_item
            if header is None or header.override_group_key is None:
                continue

            title = None
            if EXTRA_BIG_TITLE not in header.extras and header.app_label is not None:
                title = header.app_label

            summary_text = None
            if EXTRA_SUMMARY_TEXT not in header.extras:
                summary_text = self._summary_text_fn(group.child_count)

            if title is not None or summary_text is not None:
                group.presentation = GroupPresentation(
                    title=title,
                    summary_text=summary_text,
                )
        return groups
