"""Two-species Game of Life, stepped one cell at a time."""

__version__ = "0.1.0"

from .core.grid import CellState, Grid
from .core.rules import evaluate
from .core.session import Session, tick

__all__ = ["CellState", "Grid", "evaluate", "Session", "tick"]
