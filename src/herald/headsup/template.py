"""Heads-up layout template selection.

The template chosen for a heads-up can differ from the one the same
notification uses in the notification list.
"""

from enum import Enum

from herald.notifications.item import EXTRA_BIG_TEXT, EXTRA_SUMMARY_TEXT, Category, NotificationItem


class TemplateKind(str, Enum):
    """Heads-up layout templates known to the rendering surface."""

    CAR_EMERGENCY = "car_emergency"
    CAR_WARNING = "car_warning"
    CAR_INFORMATION = "car_information"
    MESSAGE = "message"
    INBOX = "inbox"
    BASIC = "basic"


# Every Category has an entry; None means "decide from the payload".
_CATEGORY_TEMPLATES: dict[Category, TemplateKind | None] = {
    Category.EMERGENCY: TemplateKind.CAR_EMERGENCY,
    Category.WARNING: TemplateKind.CAR_WARNING,
    Category.INFORMATION: TemplateKind.CAR_INFORMATION,
    Category.MESSAGE: TemplateKind.MESSAGE,
    Category.CALL: None,
    Category.NAVIGATION: None,
    Category.TRANSPORT: None,
    Category.NONE: None,
}


def template_kind_for(item: NotificationItem) -> TemplateKind:
    """Choose the heads-up template for ``item``."""
    kind = _CATEGORY_TEMPLATES[item.category]
    if kind is not None:
        return kind

    if EXTRA_BIG_TEXT in item.extras and EXTRA_SUMMARY_TEXT in item.extras:
        return TemplateKind.INBOX
    # progress, media, big text, big picture and plain notifications
    return TemplateKind.BASIC
