"""
Pytest fixtures for Memory Match tests.
"""

import pytest

from ..config import GameSettings
from ..engine_core.shuffle import IdentityShuffle
from ..engine_core.state import Card, GameState, GameStatus
from ..ports.audio import RecordingAudio
from ..ports.timer import ManualTimerService
from ..session import GameController


@pytest.fixture
def three_pair_state() -> GameState:
    """Cards 1-6 in order: (1,2)=image 1, (3,4)=image 2, (5,6)=image 3."""
    cards = (
        Card(id=1, image_id=1),
        Card(id=2, image_id=1),
        Card(id=3, image_id=2),
        Card(id=4, image_id=2),
        Card(id=5, image_id=3),
        Card(id=6, image_id=3),
    )
    return GameState(cards=cards, status=GameStatus.IN_PROGRESS)


@pytest.fixture
def identity() -> IdentityShuffle:
    return IdentityShuffle()


@pytest.fixture
def manual_timer() -> ManualTimerService:
    return ManualTimerService()


@pytest.fixture
def recording_audio() -> RecordingAudio:
    return RecordingAudio()


@pytest.fixture
def settings() -> GameSettings:
    return GameSettings(reveal_delay_ms=2000)


@pytest.fixture
def completions() -> list:
    """Collects the move counts passed to on_completed."""
    return []


@pytest.fixture
def controller(settings, manual_timer, recording_audio, identity, completions) -> GameController:
    """3-pair game in deck order, with a manual clock and recorded audio."""
    return GameController(
        settings,
        timer=manual_timer,
        audio=recording_audio,
        shuffler=identity,
        on_completed=completions.append,
        pair_count=3,
    )
