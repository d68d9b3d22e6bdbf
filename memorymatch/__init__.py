"""
Memory Match - Concentration card game engine.

A pure, immutable game-state engine for the memory matching game,
with the pieces needed to run it:
- Deck factory and Fisher-Yates shuffles (random and seeded)
- State transitions (reveal, match, auto-hide, reset, preview)
- A controller that sequences timers and sounds around the engine
- An HTTP API and a terminal CLI
"""

__version__ = "0.1.0"
