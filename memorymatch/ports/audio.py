"""
Audio Port - Fire-and-forget sound triggers.

The controller plays:
- "cardFlip" when a card turns over (either way)
- "match" after a successful match
- "gameComplete" music on the final match; the game is finalized when the
  music ends (on_end callback)

Actual playback is a front-end concern; these implementations record or
ignore the calls.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable
import logging

logger = logging.getLogger(__name__)

EFFECT_CARD_FLIP = "cardFlip"
EFFECT_MATCH = "match"
MUSIC_GAME_COMPLETE = "gameComplete"


@dataclass(frozen=True)
class AudioEffect:
    """A named sound asset."""
    id: str
    path: str


DEFAULT_EFFECTS: tuple[AudioEffect, ...] = (
    AudioEffect(EFFECT_CARD_FLIP, "/Card Flip.wav"),
    AudioEffect(EFFECT_MATCH, "/Match Sound.wav"),
)

DEFAULT_MUSIC: tuple[AudioEffect, ...] = (
    AudioEffect(MUSIC_GAME_COMPLETE, "/Game Complete.mp3"),
)


class AudioEffectsPort(ABC):
    """Abstract audio port."""

    @abstractmethod
    def play_effect(self, name: str, volume: float = 1.0) -> bool:
        """Play a short effect. Returns False if it wasn't played."""
        pass

    @abstractmethod
    def play_music(self, name: str, on_end: Callable[[], None] | None = None) -> bool:
        """Start a music track; `on_end` runs when it finishes."""
        pass

    @abstractmethod
    def stop_music(self) -> None:
        """Stop the current track without running its on_end callback."""
        pass

    @property
    @abstractmethod
    def is_music_playing(self) -> bool:
        pass


class NullAudio(AudioEffectsPort):
    """
    Silent audio port.

    Music "ends" immediately so the game still finalizes.
    """

    def play_effect(self, name: str, volume: float = 1.0) -> bool:
        return False

    def play_music(self, name: str, on_end: Callable[[], None] | None = None) -> bool:
        if on_end:
            on_end()
        return False

    def stop_music(self) -> None:
        return None

    @property
    def is_music_playing(self) -> bool:
        return False


class RecordingAudio(AudioEffectsPort):
    """
    Records every call; music plays until finish_music() or stop_music().

    Used by tests and by the API, which reports the sounds a client
    should play.
    """

    def __init__(
        self,
        effects: tuple[AudioEffect, ...] = DEFAULT_EFFECTS,
        music: tuple[AudioEffect, ...] = DEFAULT_MUSIC,
        silent: bool = False,
    ):
        self.effects = {e.id: e for e in effects}
        self.music = {m.id: m for m in music}
        self.silent = silent
        self.played: list[str] = []
        self.current_music: str | None = None
        self._on_end: Callable[[], None] | None = None

    def play_effect(self, name: str, volume: float = 1.0) -> bool:
        if self.silent:
            return False
        if name not in self.effects:
            logger.warning(f"Unknown audio effect: {name}")
            return False
        self.played.append(name)
        return True

    def play_music(self, name: str, on_end: Callable[[], None] | None = None) -> bool:
        if name not in self.music:
            logger.warning(f"Unknown music track: {name}")
            return False
        self.current_music = name
        self._on_end = on_end
        if not self.silent:
            self.played.append(name)
        return True

    def stop_music(self) -> None:
        self.current_music = None
        self._on_end = None

    def finish_music(self) -> None:
        """Simulate the track reaching its end."""
        callback = self._on_end
        self.current_music = None
        self._on_end = None
        if callback:
            callback()

    @property
    def is_music_playing(self) -> bool:
        return self.current_music is not None

    def drain(self) -> list[str]:
        """Return and clear the recorded sounds."""
        played = self.played.copy()
        self.played.clear()
        return played

    def get_audio_effect_by_id(self, effect_id: str) -> AudioEffect | None:
        return self.effects.get(effect_id) or self.music.get(effect_id)
