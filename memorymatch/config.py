"""
Configuration - Game and server settings.

Settings are read once at startup. Environment variables (MEMORYMATCH_*)
override the defaults; values that don't parse or fall outside their
bounds are ignored with a warning, never an error.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import os

from .engine_core.setup import (
    DEFAULT_MAX_PAIRS,
    DEFAULT_MIN_PAIRS,
    DIFFICULTY_PAIRS,
    PairBounds,
    resolve_pair_count,
)
from .engine_core.state import Difficulty

logger = logging.getLogger(__name__)

ENV_PREFIX = "MEMORYMATCH_"

DEFAULT_THEME = "impressionist"
DEFAULT_REVEAL_DELAY_MS = 2000
DEFAULT_SESSION_MAX_AGE = 3600


@dataclass
class GameSettings:
    """
    Everything the controller reads at game start.

    The engine itself only ever sees the resolved pair count.
    """
    min_pairs: int = DEFAULT_MIN_PAIRS
    max_pairs: int = DEFAULT_MAX_PAIRS
    default_difficulty: Difficulty = Difficulty.HARD
    difficulty_pairs: dict[Difficulty, int] = field(
        default_factory=lambda: dict(DIFFICULTY_PAIRS)
    )
    default_theme: str = DEFAULT_THEME
    reveal_delay_ms: int = DEFAULT_REVEAL_DELAY_MS
    session_max_age_seconds: int = DEFAULT_SESSION_MAX_AGE
    image_dir: str | None = None
    log_level: str = "INFO"

    @property
    def bounds(self) -> PairBounds:
        return PairBounds(self.min_pairs, self.max_pairs)

    def pair_count(
        self,
        override: object = None,
        difficulty: Difficulty | str | None = None,
    ) -> int:
        """Resolve the pair count for a new game (invalid overrides ignored)."""
        tier = difficulty if difficulty is not None else self.default_difficulty
        default = self.difficulty_pairs.get(self.default_difficulty, self.max_pairs)
        return resolve_pair_count(
            override,
            tier,
            bounds=self.bounds,
            default=default,
            table=self.difficulty_pairs,
        )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> GameSettings:
        """Build settings from MEMORYMATCH_* variables."""
        env = os.environ if environ is None else environ
        settings = cls()

        settings.reveal_delay_ms = _int_setting(
            env, "REVEAL_DELAY_MS", settings.reveal_delay_ms, minimum=0
        )
        settings.session_max_age_seconds = _int_setting(
            env, "SESSION_MAX_AGE", settings.session_max_age_seconds, minimum=1
        )

        difficulty = env.get(ENV_PREFIX + "DIFFICULTY")
        if difficulty:
            try:
                settings.default_difficulty = Difficulty(difficulty.lower())
            except ValueError:
                logger.warning(f"Ignoring unknown difficulty: {difficulty!r}")

        theme = env.get(ENV_PREFIX + "THEME")
        if theme:
            settings.default_theme = theme

        settings.image_dir = env.get(ENV_PREFIX + "IMAGE_DIR") or None
        settings.log_level = env.get(ENV_PREFIX + "LOG_LEVEL", settings.log_level).upper()
        return settings


def _int_setting(env, name: str, default: int, minimum: int = 0) -> int:
    """Read an integer variable, falling back to `default` on bad input."""
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {ENV_PREFIX}{name}={raw!r}")
        return default
    if value < minimum:
        logger.warning(f"Ignoring out-of-range {ENV_PREFIX}{name}={value}")
        return default
    return value
