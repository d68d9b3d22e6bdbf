"""
Game Loop - The controller that drives the engine from user input.

The loop:
1. User flips a card
2. Controller reveals it (reducer), plays the flip sound
3. On the second card, controller evaluates the match
4. Match: match sound; final match starts the victory music and the game
   completes when the music ends
5. Mismatch: a hide timer is armed; when it fires the cards flip back
6. A click on a new card while the hide timer is pending cancels the
   timer, clears the pair immediately, then reveals the new card

The controller owns every side effect (timer, audio, logging). The engine
it calls is pure. At most one hide timer is pending at a time.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable
import logging
import threading
import time

from ..config import GameSettings
from ..engine_core.action import Action, ActionResult
from ..engine_core.reducer import Reducer
from ..engine_core.setup import ShuffleFn, initialize_game_with_progress
from ..engine_core.shuffle import Shuffler
from ..engine_core.state import Card, Difficulty, GameState, GameStatus
from ..ports.assets import DEFAULT_ALT_TEXT, ImageCatalog, catalog_for
from ..ports.audio import (
    EFFECT_CARD_FLIP,
    EFFECT_MATCH,
    MUSIC_GAME_COMPLETE,
    AudioEffectsPort,
    NullAudio,
)
from ..ports.timer import ThreadingTimerService, TimerHandle, TimerService

logger = logging.getLogger(__name__)

GameCompletionCallback = Callable[[int], None]


@dataclass
class FlipResult:
    """
    Outcome of one card flip.

    `accepted` is False when the click had no effect (third card, matched
    card, unknown id); front ends can use it for "not allowed" feedback.
    """
    accepted: bool
    state: GameState
    matched: bool = False
    mismatched: bool = False
    victory: bool = False
    cleared_pending: bool = False  # previous mismatch was force-cleared
    sounds: list[str] = field(default_factory=list)


class GameController:
    """
    Drives one game: input, sequencing, timers and sounds.

    Usage:
        controller = GameController(settings, timer=ThreadingTimerService())
        result = controller.flip_card(3)
        if not result.accepted:
            shake()
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        *,
        timer: TimerService | None = None,
        audio: AudioEffectsPort | None = None,
        images: ImageCatalog | None = None,
        shuffler: ShuffleFn = None,
        on_completed: GameCompletionCallback | None = None,
        pair_count: Any = None,
        progress: Any = None,
        theme: str | None = None,
        difficulty: Difficulty | str | None = None,
    ):
        self.settings = settings or GameSettings()
        self.timer = timer or ThreadingTimerService()
        self.audio = audio or NullAudio()
        self.shuffler = shuffler
        self.on_completed = on_completed or self._log_completion
        self.reducer = Reducer()
        self.history: list[Action] = []

        self._fixed_images = images
        self.images: ImageCatalog | None = images
        self._lock = threading.RLock()
        self._hide_timer: TimerHandle | None = None
        self._hide_generation = 0
        self._options: dict[str, Any] = {}
        self._sounds: list[str] = []

        self.state: GameState = self.new_game(
            pair_count=pair_count,
            progress=progress,
            theme=theme,
            difficulty=difficulty,
        )

    # =========================================================================
    # Game lifecycle
    # =========================================================================

    def new_game(
        self,
        pair_count: Any = None,
        progress: Any = None,
        theme: str | None = None,
        difficulty: Difficulty | str | None = None,
    ) -> GameState:
        """
        Start a fresh game from configuration inputs.

        Invalid overrides (pair count, progress, difficulty) are ignored and
        the configured defaults used instead.
        """
        with self._lock:
            self._cancel_hide_timer()
            self.audio.stop_music()

            tier = self._resolve_difficulty(difficulty)
            count = self.settings.pair_count(pair_count, tier)
            theme = theme or self.settings.default_theme

            self.images = self._fixed_images or catalog_for(theme, self.settings.image_dir)
            refs = self.images.choose_images(count)
            if len(refs) < count:
                logger.warning(
                    f"Theme {theme!r} has {len(refs)} images, {count} needed; "
                    f"using plain image ids"
                )
                refs = None

            self.state = initialize_game_with_progress(
                count,
                progress,
                self.shuffler,
                images=refs,
                bounds=self.settings.bounds,
                theme=theme,
                difficulty=tier,
            )
            self.history = []
            self._options = {
                "pair_count": pair_count,
                "progress": progress,
                "theme": theme,
                "difficulty": difficulty,
            }
            logger.info(
                f"New game: {count} pairs, theme={theme}, "
                f"difficulty={tier.value}, status={self.state.status.value}"
            )

            if self.state.status == GameStatus.VICTORY_PENDING:
                self._start_victory()
            return self.state

    def restart(self) -> GameState:
        """
        Cancel pending work, stop music and deal a new game with the same options.

        Seeded shufflers move on to their next seed, so a restart shows a
        different (but still reproducible) layout.
        """
        with self._lock:
            self._cancel_hide_timer()
            self.audio.stop_music()
            self._play(EFFECT_CARD_FLIP)
            if isinstance(self.shuffler, Shuffler):
                self.shuffler = self.shuffler.reseeded()
            return self.new_game(**self._options)

    def close(self) -> None:
        """Release the timer and music (session ended)."""
        with self._lock:
            self._cancel_hide_timer()
            self.audio.stop_music()

    # =========================================================================
    # Input
    # =========================================================================

    def flip_card(self, card_id: int) -> FlipResult:
        """Handle a click on a card."""
        with self._lock:
            self._sounds = []
            cleared = False
            target = self.state.get_card(card_id)

            if (
                self.has_pending_hide
                and len(self.state.selected_card_ids) == 2
                and target is not None
                and not target.is_revealed
            ):
                self._cancel_hide_timer()
                self._dispatch(Action.force_clear())
                self._play(EFFECT_CARD_FLIP)
                cleared = True

            result = self._dispatch(Action.reveal(card_id))
            if not result.changed:
                return FlipResult(
                    accepted=False,
                    state=self.state,
                    cleared_pending=cleared,
                    sounds=list(self._sounds),
                )

            self._play(EFFECT_CARD_FLIP)
            flip = FlipResult(
                accepted=True,
                state=self.state,
                cleared_pending=cleared,
                sounds=self._sounds,
            )
            if len(self.state.selected_card_ids) == 2:
                self._evaluate(flip)
            flip.state = self.state
            flip.sounds = list(self._sounds)
            return flip

    def hide_now(self) -> GameState:
        """Apply a pending hide immediately instead of waiting for the timer."""
        with self._lock:
            self._cancel_hide_timer()
            result = self._dispatch(Action.hide_unmatched())
            if result.changed:
                self._play(EFFECT_CARD_FLIP)
            return self.state

    def toggle_preview(self, on: bool) -> GameState:
        with self._lock:
            self._dispatch(Action.set_preview(on))
            return self.state

    # =========================================================================
    # Sequencing
    # =========================================================================

    def _evaluate(self, flip: FlipResult) -> None:
        """Match check after the second card of a turn."""
        result = self._dispatch(Action.check_matches())
        if not self.state.selected_card_ids:
            flip.matched = True
            self._play(EFFECT_MATCH)
            if self.state.status == GameStatus.VICTORY_PENDING:
                flip.victory = True
                self._start_victory()
        elif not result.changed:
            flip.mismatched = True
            self._arm_hide_timer()

    def _arm_hide_timer(self) -> None:
        """Schedule the auto-hide, replacing any pending one."""
        self._cancel_hide_timer()
        generation = self._hide_generation
        handle = self.timer.schedule(
            lambda: self._auto_hide(generation),
            self.settings.reveal_delay_ms,
        )
        # A synchronous timer has already run the hide
        if generation == self._hide_generation:
            self._hide_timer = handle

    def _cancel_hide_timer(self) -> None:
        self._hide_generation += 1
        if self._hide_timer is not None:
            self.timer.cancel(self._hide_timer)
            self._hide_timer = None

    def _auto_hide(self, generation: int) -> None:
        """Timer callback: flip the unmatched pair back."""
        with self._lock:
            if generation != self._hide_generation:
                return
            self._hide_timer = None
            self._hide_generation += 1
            result = self._dispatch(Action.hide_unmatched())
            if result.changed:
                self._play(EFFECT_CARD_FLIP)

    def _start_victory(self) -> None:
        """Play the victory music; the game completes when it ends."""
        logger.info(f"All pairs matched in {self.state.moves} moves")
        started = self.audio.play_music(MUSIC_GAME_COMPLETE, on_end=self._on_victory_music_end)
        if not started and self.state.status == GameStatus.VICTORY_PENDING:
            self._on_victory_music_end()

    def _on_victory_music_end(self) -> None:
        with self._lock:
            result = self._dispatch(Action.complete_victory())
            if result.changed:
                self.on_completed(self.state.moves)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _dispatch(self, action: Action) -> ActionResult:
        """Route an action through the reducer and keep the history."""
        if action.timestamp is None:
            action.timestamp = time.time()
        result = self.reducer.apply(self.state, action)
        if not result.success:
            logger.error(f"Action {action.action_type.value} failed: {result.error}")
            return result
        if result.changed:
            self.state = result.new_state
            self.history.append(action)
        return result

    def _play(self, effect: str) -> None:
        self.audio.play_effect(effect)
        self._sounds.append(effect)

    def _resolve_difficulty(self, difficulty: Difficulty | str | None) -> Difficulty:
        if difficulty is None:
            return self.settings.default_difficulty
        try:
            return Difficulty(difficulty)
        except ValueError:
            logger.warning(f"Ignoring unknown difficulty {difficulty!r}")
            return self.settings.default_difficulty

    @staticmethod
    def _log_completion(moves: int) -> None:
        logger.info(f"Game completed in {moves} moves!")

    @property
    def has_pending_hide(self) -> bool:
        """
        True until the hide has been applied or cancelled.

        Stays True while a timer thread that already fired waits for the
        lock, so a click in that window still clears the pair first.
        """
        return self._hide_timer is not None

    def describe_card(self, card: Card) -> dict[str, Any]:
        """Image path and alt text for the face the card currently shows."""
        face_up = card.is_revealed or card.is_matched or self.state.is_preview_mode
        if not face_up:
            return {"image": self.images.get_back_image_path(), "alt": "Card Back"}
        image = self.images.get_image_by_id(card.image_id)
        return {
            "image": image.path if image else "",
            "alt": image.name if image else DEFAULT_ALT_TEXT,
        }

    def render_text(self, columns: int = 6) -> str:
        """Plain-text board for terminals."""
        state = self.state
        cells = []
        for card in state.cards:
            shown = card.is_revealed or card.is_matched or state.is_preview_mode
            if card.is_matched:
                cells.append(f"[{card.image_id:>2}]")
            elif shown:
                cells.append(f"<{card.image_id:>2}>")
            else:
                cells.append(f"({card.id:>2})")
        rows = [
            " ".join(cells[i:i + columns])
            for i in range(0, len(cells), columns)
        ]
        status_line = f"Moves: {state.moves}  Status: {state.status.value}"
        if state.status == GameStatus.COMPLETED:
            status_line += "  Game Complete!"
        return "\n".join(rows + [status_line])
