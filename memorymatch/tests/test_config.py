"""
Tests for settings loading.
"""

from ..config import GameSettings
from ..engine_core.state import Difficulty


class TestGameSettings:
    """Tests for GameSettings."""

    def test_defaults(self):
        settings = GameSettings.from_env({})

        assert settings.reveal_delay_ms == 2000
        assert settings.default_difficulty == Difficulty.HARD
        assert settings.default_theme == "impressionist"
        assert settings.image_dir is None
        assert settings.log_level == "INFO"

    def test_env_overrides(self):
        settings = GameSettings.from_env({
            "MEMORYMATCH_REVEAL_DELAY_MS": "500",
            "MEMORYMATCH_SESSION_MAX_AGE": "60",
            "MEMORYMATCH_DIFFICULTY": "EASY",
            "MEMORYMATCH_THEME": "robgon",
            "MEMORYMATCH_IMAGE_DIR": "/srv/cards",
            "MEMORYMATCH_LOG_LEVEL": "debug",
        })

        assert settings.reveal_delay_ms == 500
        assert settings.session_max_age_seconds == 60
        assert settings.default_difficulty == Difficulty.EASY
        assert settings.default_theme == "robgon"
        assert settings.image_dir == "/srv/cards"
        assert settings.log_level == "DEBUG"

    def test_bad_values_ignored(self):
        settings = GameSettings.from_env({
            "MEMORYMATCH_REVEAL_DELAY_MS": "soon",
            "MEMORYMATCH_SESSION_MAX_AGE": "0",
            "MEMORYMATCH_DIFFICULTY": "nightmare",
        })

        assert settings.reveal_delay_ms == 2000
        assert settings.session_max_age_seconds == 3600
        assert settings.default_difficulty == Difficulty.HARD

    def test_pair_count(self):
        settings = GameSettings()

        assert settings.pair_count() == 12
        assert settings.pair_count(difficulty="easy") == 5
        assert settings.pair_count(override=3) == 3
        assert settings.pair_count(override=40, difficulty=Difficulty.EASY) == 5

    def test_custom_tiers(self):
        settings = GameSettings(difficulty_pairs={Difficulty.EASY: 3, Difficulty.HARD: 8})
        assert settings.pair_count() == 8
        assert settings.pair_count(difficulty="easy") == 3
