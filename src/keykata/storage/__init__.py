"""Storage module for persistence."""

from .persistence import ProgressStore, load_state, save_state
from .state import AttemptRecord, BestResult, GameState, Stats

__all__ = [
    "AttemptRecord",
    "BestResult",
    "GameState",
    "ProgressStore",
    "Stats",
    "load_state",
    "save_state",
]
