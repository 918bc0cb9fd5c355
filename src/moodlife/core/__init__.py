"""Core two-species automaton logic."""

from .errors import MoodLifeError, LoadError, InvalidGridError
from .grid import CellState, NeighborCount, Grid
from .rules import evaluate, next_state, next_generation
from .session import Cursor, Session, SessionState, StepMode, tick
from .scheduler import PeriodicTicker
from .config import SimulationConfig, clamp_speed

__all__ = [
    "MoodLifeError",
    "LoadError",
    "InvalidGridError",
    "CellState",
    "NeighborCount",
    "Grid",
    "evaluate",
    "next_state",
    "next_generation",
    "Cursor",
    "Session",
    "SessionState",
    "StepMode",
    "tick",
    "PeriodicTicker",
    "SimulationConfig",
    "clamp_speed",
]
