"""
Tests for the GameController.

Tests:
- Flip sequencing and sounds
- Delayed hide of mismatches
- Third click during the hide delay
- Victory music and completion
- Restart, preview and rendering
"""

import time

from ..config import GameSettings
from ..engine_core.shuffle import SeededFisherYates
from ..engine_core.state import GameStatus
from ..ports.assets import CARD_BACK_PATH, StaticImageCatalog
from ..ports.audio import EFFECT_CARD_FLIP, EFFECT_MATCH, MUSIC_GAME_COMPLETE, NullAudio
from ..ports.timer import SynchronousTimerService, TimerHandle, TimerService
from ..session import GameController


def _revealed(controller) -> set:
    return {c.id for c in controller.state.cards if c.is_revealed}


class HeldTimer(TimerService):
    """
    Timer whose callbacks are started by the test.

    start() marks the handle fired and returns the callback without running
    it, like a timer thread that fired and is waiting for the controller lock.
    """

    def __init__(self):
        self.scheduled: list[tuple[TimerHandle, object]] = []

    def schedule(self, callback, delay_ms):
        handle = TimerHandle(delay_ms=delay_ms)
        self.scheduled.append((handle, callback))
        return handle

    def cancel(self, handle):
        if handle is not None and handle.pending:
            handle.cancelled = True

    def start(self):
        handle, callback = self.scheduled[-1]
        handle.fired = True
        return callback


class TestFlipCard:
    """Tests for basic flipping."""

    def test_initial_game(self, controller):
        state = controller.state

        assert state.status == GameStatus.READY
        assert state.pair_count == 3
        assert [c.image_id for c in state.cards] == [1, 1, 2, 2, 3, 3]
        assert state.theme == "impressionist"

    def test_first_flip(self, controller):
        result = controller.flip_card(1)

        assert result.accepted
        assert result.sounds == [EFFECT_CARD_FLIP]
        assert result.state.selected_card_ids == (1,)
        assert result.state.status == GameStatus.IN_PROGRESS

    def test_match(self, controller, manual_timer):
        controller.flip_card(1)
        result = controller.flip_card(2)

        assert result.matched
        assert not result.mismatched
        assert result.sounds == [EFFECT_CARD_FLIP, EFFECT_MATCH]
        assert result.state.moves == 1
        assert manual_timer.pending_count == 0

    def test_rejected_click(self, controller):
        controller.flip_card(1)
        result = controller.flip_card(1)

        assert not result.accepted
        assert result.sounds == []

    def test_unknown_card(self, controller):
        assert not controller.flip_card(42).accepted

    def test_history_records_changes(self, controller):
        controller.flip_card(1)
        controller.flip_card(2)
        assert len(controller.history) == 3  # reveal, reveal, check

    def test_history_is_timestamped(self, controller):
        before = time.time()
        controller.flip_card(1)
        controller.flip_card(3)

        stamps = [action.timestamp for action in controller.history]
        assert all(stamp is not None and stamp >= before for stamp in stamps)
        assert stamps == sorted(stamps)


class TestMismatch:
    """Tests for the delayed flip-back."""

    def test_cards_flip_back_after_delay(self, controller, manual_timer, recording_audio):
        controller.flip_card(1)
        result = controller.flip_card(3)

        assert result.mismatched
        assert controller.has_pending_hide
        assert _revealed(controller) == {1, 3}

        manual_timer.advance(1999)
        assert _revealed(controller) == {1, 3}

        manual_timer.advance(1)
        assert _revealed(controller) == set()
        assert controller.state.selected_card_ids == ()
        assert not controller.has_pending_hide
        assert recording_audio.played[-1] == EFFECT_CARD_FLIP

    def test_hide_now(self, controller, manual_timer):
        controller.flip_card(1)
        controller.flip_card(3)

        controller.hide_now()

        assert _revealed(controller) == set()
        assert manual_timer.pending_count == 0

    def test_synchronous_timer(self, recording_audio, identity):
        """With an immediate timer the pair is hidden within the flip."""
        controller = GameController(
            GameSettings(),
            timer=SynchronousTimerService(),
            audio=recording_audio,
            shuffler=identity,
            pair_count=3,
        )
        controller.flip_card(1)
        result = controller.flip_card(3)

        assert result.mismatched
        assert _revealed(controller) == set()
        assert not controller.has_pending_hide


class TestThirdClick:
    """Tests for clicking a new card while a mismatch is showing."""

    def test_clears_and_reveals(self, controller, manual_timer):
        controller.flip_card(1)
        controller.flip_card(3)

        result = controller.flip_card(5)

        assert result.accepted
        assert result.cleared_pending
        assert result.sounds == [EFFECT_CARD_FLIP, EFFECT_CARD_FLIP]
        assert controller.state.selected_card_ids == (5,)
        assert _revealed(controller) == {5}
        assert manual_timer.pending_count == 0

    def test_stale_timer_ignored(self, controller, manual_timer):
        """The cancelled hide never touches the new selection."""
        controller.flip_card(1)
        controller.flip_card(3)
        controller.flip_card(5)

        manual_timer.advance(10_000)

        assert controller.state.selected_card_ids == (5,)
        assert _revealed(controller) == {5}

    def test_click_on_shown_card_keeps_pending(self, controller):
        controller.flip_card(1)
        controller.flip_card(3)

        result = controller.flip_card(3)

        assert not result.accepted
        assert controller.has_pending_hide
        assert _revealed(controller) == {1, 3}

    def test_click_while_fired_timer_waits(self, recording_audio, identity):
        """A timer that fired but hasn't hidden the pair yet still counts as pending."""
        timer = HeldTimer()
        controller = GameController(
            GameSettings(), timer=timer, audio=recording_audio, shuffler=identity, pair_count=3
        )
        controller.flip_card(1)
        controller.flip_card(3)
        late_hide = timer.start()

        assert controller.has_pending_hide

        result = controller.flip_card(5)

        assert result.accepted
        assert result.cleared_pending
        assert controller.state.selected_card_ids == (5,)

        late_hide()

        assert controller.state.selected_card_ids == (5,)
        assert _revealed(controller) == {5}

    def test_clear_then_match(self, controller):
        controller.flip_card(1)
        controller.flip_card(3)
        controller.flip_card(2)
        result = controller.flip_card(1)

        assert result.matched
        assert controller.state.moves == 2


class TestVictory:
    """Tests for the end of the game."""

    def _win(self, controller):
        last = None
        for first, second in [(1, 2), (3, 4), (5, 6)]:
            controller.flip_card(first)
            last = controller.flip_card(second)
        return last

    def test_completes_when_music_ends(self, controller, recording_audio, completions):
        result = self._win(controller)

        assert result.victory
        assert controller.state.status == GameStatus.VICTORY_PENDING
        assert recording_audio.current_music == MUSIC_GAME_COMPLETE
        assert completions == []

        recording_audio.finish_music()

        assert controller.state.status == GameStatus.COMPLETED
        assert completions == [3]

    def test_no_audio_completes_immediately(self, identity, manual_timer):
        completions = []
        controller = GameController(
            timer=manual_timer,
            audio=NullAudio(),
            shuffler=identity,
            on_completed=completions.append,
            pair_count=3,
        )
        self._win(controller)

        assert controller.state.status == GameStatus.COMPLETED
        assert completions == [3]

    def test_full_progress_starts_victory(self, settings, manual_timer, recording_audio, identity):
        controller = GameController(
            settings,
            timer=manual_timer,
            audio=recording_audio,
            shuffler=identity,
            pair_count=4,
            progress=4,
        )

        assert controller.state.status == GameStatus.VICTORY_PENDING
        assert recording_audio.is_music_playing

    def test_restart_during_music(self, controller, recording_audio, completions):
        self._win(controller)
        controller.restart()
        recording_audio.finish_music()

        assert controller.state.status == GameStatus.READY
        assert completions == []


class TestLifecycle:
    """Tests for restart, preview and display helpers."""

    def test_restart_cancels_pending_hide(self, controller, manual_timer):
        controller.flip_card(1)
        controller.flip_card(3)

        state = controller.restart()

        assert state.status == GameStatus.READY
        assert state.moves == 0
        assert state.pair_count == 3
        assert manual_timer.pending_count == 0
        assert controller.history == []

    def test_seeded_restart_deals_next_layout(self, manual_timer):
        """Restarts move to the next seed; the sequence of deals is reproducible."""
        def deals(seed):
            controller = GameController(
                timer=manual_timer, shuffler=SeededFisherYates(seed), pair_count=6
            )
            first = [c.id for c in controller.state.cards]
            second = [c.id for c in controller.restart().cards]
            return first, second, controller.shuffler.seed

        first, second, next_seed = deals(7)

        assert second != first
        assert next_seed == (7 * 9301 + 49297) % 233280
        assert deals(7) == (first, second, next_seed)

    def test_invalid_overrides_use_defaults(self, manual_timer):
        controller = GameController(timer=manual_timer, pair_count=50, difficulty="extreme")
        assert controller.state.pair_count == 12

    def test_difficulty_selects_pairs(self, manual_timer):
        controller = GameController(timer=manual_timer, difficulty="easy")
        assert controller.state.pair_count == 5

    def test_preview(self, controller):
        controller.toggle_preview(True)
        assert controller.state.is_preview_mode
        assert _revealed(controller) == {1, 2, 3, 4, 5, 6}

        controller.toggle_preview(False)
        assert not controller.state.is_preview_mode

    def test_describe_card(self, controller):
        card = controller.state.get_card(1)
        assert controller.describe_card(card) == {"image": CARD_BACK_PATH, "alt": "Card Back"}

        controller.flip_card(1)
        face = controller.describe_card(controller.state.get_card(1))
        assert face["alt"] == "A Sunday Afternoon"

    def test_fixed_catalog(self, manual_timer, identity):
        catalog = StaticImageCatalog(["/a/One.jpg", "/a/Two.jpg"], back_image_path="/back.png")
        controller = GameController(
            timer=manual_timer, images=catalog, shuffler=identity, pair_count=2
        )

        assert controller.describe_card(controller.state.cards[0])["image"] == "/back.png"

    def test_small_catalog_falls_back(self, manual_timer):
        """A catalog without enough images still deals a game."""
        catalog = StaticImageCatalog(["/a/One.jpg"])
        controller = GameController(timer=manual_timer, images=catalog, pair_count=4)
        assert controller.state.pair_count == 4

    def test_render_text(self, controller):
        controller.flip_card(1)
        text = controller.render_text(columns=3)
        lines = text.splitlines()

        assert lines[0] == "< 1> ( 2) ( 3)"
        assert lines[-1].startswith("Moves: 0")
