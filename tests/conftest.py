"""
Pytest Configuration and Fixtures

Shared fixtures for all tests.
"""

import pytest

from core.handles import HandleRegistry
from core.panels import PanelStore
from core.playback import PlaybackController
from tests.utils import FakeTimerFactory, make_image


@pytest.fixture
def handles():
    return HandleRegistry()


@pytest.fixture
def store(handles):
    return PanelStore(handles=handles)


@pytest.fixture
def sample_images():
    """Three uploads in a known order."""
    return [make_image("p1.png"), make_image("p2.png"), make_image("p3.jpg")]


@pytest.fixture
def timers():
    return FakeTimerFactory()


@pytest.fixture
def controller(store, timers):
    playback = PlaybackController(store, interval=2.0, timer_factory=timers)
    yield playback
    playback.close()
