"""Tests for heads-up template selection."""

import pytest

from conftest import make_item
from herald.headsup.template import TemplateKind, template_kind_for
from herald.notifications.item import Category


@pytest.mark.parametrize(
    ("category", "expected"),
    [
        (Category.EMERGENCY, TemplateKind.CAR_EMERGENCY),
        (Category.WARNING, TemplateKind.CAR_WARNING),
        (Category.INFORMATION, TemplateKind.CAR_INFORMATION),
        (Category.MESSAGE, TemplateKind.MESSAGE),
    ],
)
def test_category_templates(category, expected):
    assert template_kind_for(make_item(category=category)) is expected


@pytest.mark.parametrize("category", [Category.CALL, Category.NAVIGATION, Category.TRANSPORT, Category.NONE])
def test_other_categories_use_basic(category):
    assert template_kind_for(make_item(category=category)) is TemplateKind.BASIC


def test_inbox_style():
    item = make_item(extras={"big_text": "Long body", "summary_text": "+2 more"})
    assert template_kind_for(item) is TemplateKind.INBOX


def test_big_text_alone_is_basic():
    item = make_item(extras={"big_text": "Long body"})
    assert template_kind_for(item) is TemplateKind.BASIC


def test_category_wins_over_inbox_extras():
    item = make_item(category=Category.MESSAGE, extras={"big_text": "a", "summary_text": "b"})
    assert template_kind_for(item) is TemplateKind.MESSAGE
