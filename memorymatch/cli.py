"""
Memory Match CLI - Command-line interface for the engine.

Usage:
    memorymatch play [--pairs N] [--difficulty easy|hard] [--seed S]
    memorymatch serve [--host H] [--port P]
    memorymatch shuffle <count> --seed S
"""

import argparse
import sys
import time

from .config import GameSettings
from .logging_setup import configure_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Memory Match - concentration card game",
        prog="memorymatch",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from env)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--pairs", type=int, help="Number of pairs (2-12)")
    play_parser.add_argument("--difficulty", choices=["easy", "hard"], help="Difficulty tier")
    play_parser.add_argument("--theme", help="Image theme")
    play_parser.add_argument("--seed", type=int, help="Seed for a reproducible layout")
    play_parser.add_argument("--progress", help="Pairs to pre-match")
    play_parser.add_argument(
        "--delay", type=int, default=None,
        help="Milliseconds before a mismatch flips back (0: wait for the next pick)",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    # Shuffle command
    shuffle_parser = subparsers.add_parser("shuffle", help="Print a seeded shuffle of 1..N")
    shuffle_parser.add_argument("count", type=int)
    shuffle_parser.add_argument("--seed", type=int, required=True)

    args = parser.parse_args(argv)

    settings = GameSettings.from_env()
    configure_logging(args.log_level or settings.log_level)

    if args.command == "play":
        cmd_play(args, settings)
    elif args.command == "serve":
        cmd_serve(args, settings)
    elif args.command == "shuffle":
        cmd_shuffle(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_play(args, settings: GameSettings):
    """Interactive terminal game."""
    from .engine_core.shuffle import SeededFisherYates
    from .ports.timer import ManualTimerService
    from .session import GameController

    if args.delay is not None:
        settings.reveal_delay_ms = max(args.delay, 0)

    timer = ManualTimerService()
    controller = GameController(
        settings,
        timer=timer,
        shuffler=SeededFisherYates(args.seed) if args.seed is not None else None,
        on_completed=lambda moves: print(f"\nGame completed in {moves} moves!"),
        pair_count=args.pairs,
        progress=args.progress,
        theme=args.theme,
        difficulty=args.difficulty,
    )

    print("Memory Match - enter a card number, 'r' to restart, 'p' to preview, 'q' to quit")
    print(controller.render_text())

    while not controller.state.is_finished:
        try:
            command = input("> ").strip().lower()
        except EOFError:
            break

        if command in {"q", "quit"}:
            break
        if command in {"r", "restart"}:
            controller.restart()
            print(controller.render_text())
            continue
        if command in {"p", "preview"}:
            controller.toggle_preview(not controller.state.is_preview_mode)
            print(controller.render_text())
            continue
        if not command.isdigit():
            print("Enter a card number")
            continue

        result = controller.flip_card(int(command))
        if not result.accepted:
            print("Can't flip that card")
            continue

        print(controller.render_text())
        if result.matched:
            print("Match!")
        elif result.mismatched and settings.reveal_delay_ms > 0:
            time.sleep(settings.reveal_delay_ms / 1000.0)
            timer.advance(settings.reveal_delay_ms)
            print(controller.render_text())

    if controller.state.is_finished:
        print(controller.render_text())


def cmd_serve(args, settings: GameSettings):
    """Run the HTTP API with uvicorn."""
    import uvicorn
    from .api import create_app

    app = create_app(settings=settings)
    uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())


def cmd_shuffle(args):
    """Print the seeded ordering of 1..count."""
    from .engine_core.shuffle import seeded_shuffle

    order = seeded_shuffle(list(range(1, args.count + 1)), args.seed)
    print(" ".join(str(n) for n in order))


if __name__ == "__main__":
    main()
