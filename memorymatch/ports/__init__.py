"""
Ports - Side-effect interfaces used around the engine.

- timer: delayed, cancellable callbacks (auto-hide of unmatched cards)
- audio: sound effect and music triggers
- assets: image lookup for card faces

Constructed once at startup and injected into the controller.
"""

from .timer import (
    TimerHandle,
    TimerService,
    ThreadingTimerService,
    AsyncioTimerService,
    SynchronousTimerService,
    ManualTimerService,
)
from .audio import (
    AudioEffect,
    AudioEffectsPort,
    NullAudio,
    RecordingAudio,
    EFFECT_CARD_FLIP,
    EFFECT_MATCH,
    MUSIC_GAME_COMPLETE,
)
from .assets import (
    CardImage,
    ImageCatalog,
    StaticImageCatalog,
    DirectoryImageCatalog,
    extract_name_from_path,
    catalog_for,
    THEMES,
)

__all__ = [
    "TimerHandle",
    "TimerService",
    "ThreadingTimerService",
    "AsyncioTimerService",
    "SynchronousTimerService",
    "ManualTimerService",
    "AudioEffect",
    "AudioEffectsPort",
    "NullAudio",
    "RecordingAudio",
    "EFFECT_CARD_FLIP",
    "EFFECT_MATCH",
    "MUSIC_GAME_COMPLETE",
    "CardImage",
    "ImageCatalog",
    "StaticImageCatalog",
    "DirectoryImageCatalog",
    "extract_name_from_path",
    "catalog_for",
    "THEMES",
]
