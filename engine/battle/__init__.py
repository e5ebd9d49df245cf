"""
Battle engine module.

The turn/grid simulation core, split into logical components:
- world.py: World, the turn controller (selection, clicks, turn sequencing)
- ai.py: Hostile AI decision-making
- types.py: Turn phases, highlight kinds, move animations, observer hooks
- renderer.py: pygame drawing (presentation only, not imported here)
"""

from .ai import AIController
from .types import HighlightKind, MoveAnimation, TurnPhase, WorldObserver
from .world import World

__all__ = [
    "AIController",
    "HighlightKind",
    "MoveAnimation",
    "TurnPhase",
    "World",
    "WorldObserver",
]
