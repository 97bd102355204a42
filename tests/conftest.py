"""Shared fixtures for the herald test suite."""

import os
from unittest.mock import MagicMock

import pytest

from herald.collaborators.base import AudioAlert, RenderingSurface
from herald.collaborators.state import MutedConversations, PackageTrustEvaluator, StaticLockState
from herald.config import HeraldConfig
from herald.headsup.eligibility import EligibilityPolicy
from herald.headsup.registry import HeadsUpRegistry
from herald.notifications.item import Importance, NotificationItem, Ranking, RankingSnapshot
from herald.scheduling.scheduler import VirtualScheduler

DURATION_MS = 8000
MIN_DISPLAY_MS = 3000
SNOOZE_MS = 60_000


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep a developer's .env and HERALD_* variables out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("HERALD_"):
            monkeypatch.delenv(name)


@pytest.fixture
def config():
    return HeraldConfig(
        headsup_duration_ms=DURATION_MS,
        min_display_duration_ms=MIN_DISPLAY_MS,
        snooze_duration_ms=SNOOZE_MS,
        navigation_headsup_enabled=True,
        trusted_packages=["android"],
    )


@pytest.fixture
def scheduler():
    return VirtualScheduler(start_ms=1_000)


@pytest.fixture
def surface():
    """Mock surface whose exit animations complete immediately."""
    mock = MagicMock(spec=RenderingSurface)
    mock.present.side_effect = lambda entry_id, kind, item: f"view:{entry_id}"
    mock.animate_out.side_effect = lambda handle, on_complete: on_complete()
    return mock


@pytest.fixture
def audio():
    return MagicMock(spec=AudioAlert)


@pytest.fixture
def lock_state():
    return StaticLockState()


@pytest.fixture
def mute_state():
    return MutedConversations()


@pytest.fixture
def trust():
    return PackageTrustEvaluator(["android"])


@pytest.fixture
def policy(config, lock_state, mute_state, trust):
    return EligibilityPolicy(config, lock_state, mute_state, trust)


@pytest.fixture
def registry(config, policy, surface, audio, scheduler):
    return HeadsUpRegistry(config, policy, surface, audio, scheduler)


def make_item(key="k1", package_name="com.example.chat", **kwargs) -> NotificationItem:
    """Build a NotificationItem with test defaults."""
    return NotificationItem(key=key, package_name=package_name, **kwargs)


def high_ranking(*keys: str, sound: str | None = None) -> RankingSnapshot:
    """Ranking with every key at HIGH importance, ranked in argument order."""
    return RankingSnapshot({
        key: Ranking(rank=i, importance=Importance.HIGH, channel_sound=sound)
        for i, key in enumerate(keys)
    })
