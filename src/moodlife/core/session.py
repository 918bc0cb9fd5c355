"""Simulation session and the one-cell-per-tick stepper."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .config import DEFAULT_SPEED, clamp_speed
from .errors import InvalidGridError, LoadError
from .grid import Grid
from .rules import evaluate, next_generation
from . import seeds


@dataclass(frozen=True)
class Cursor:
    """Coordinate of the next cell the stepper will evaluate."""

    y: int = 0
    x: int = 0

    @classmethod
    def origin(cls) -> "Cursor":
        """Return the cursor for the first cell of the grid."""
        return cls(0, 0)

    def advance(self, grid: Grid) -> "Cursor":
        """Return the cursor for the following cell in row-major order.

        Wraps to the next row at the end of a row, and back to the origin
        after the last cell of the last row.
        """
        x = self.x + 1
        if self.y >= grid.rows - 1 and x >= grid.cols:
            return Cursor.origin()
        if x >= grid.cols:
            return Cursor(self.y + 1, 0)
        return Cursor(self.y, x)


class SessionState(Enum):
    """Play state of a session."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class StepMode(Enum):
    """How a tick reads its neighbors.

    IN_PLACE reads the live grid, so a sweep sees the cells it has already
    rewritten. DOUBLE_BUFFERED reads a snapshot taken when the sweep began,
    so each completed sweep equals one synchronous generation.
    """

    IN_PLACE = "in_place"
    DOUBLE_BUFFERED = "double_buffered"


class Session:
    """State of one simulation: grid, cursor, play state and speed."""

    def __init__(
        self,
        grid: Optional[Grid] = None,
        speed: int = DEFAULT_SPEED,
        step_mode: StepMode = StepMode.IN_PLACE,
    ) -> None:
        """Initialize a session.

        Args:
            grid: Initial grid, or None until a seed is loaded
            speed: Tick period in milliseconds
            step_mode: Neighbor-reading mode for ticks
        """
        self.grid = grid
        self.cursor = Cursor.origin()
        self.state = SessionState.IDLE
        self.step_mode = step_mode
        self.error: Optional[str] = None
        self._speed = clamp_speed(speed)

        # Next generation for the current sweep in double-buffered mode
        self._pending: Optional[Grid] = None

    @property
    def speed(self) -> int:
        """Effective tick period in milliseconds."""
        return self._speed

    @speed.setter
    def speed(self, value: int) -> None:
        self._speed = clamp_speed(value)

    @property
    def is_running(self) -> bool:
        """Whether the session is currently stepping."""
        return self.state is SessionState.RUNNING

    def start(self) -> None:
        """Begin stepping a freshly loaded grid.

        Raises:
            InvalidGridError: If no usable grid is loaded
            RuntimeError: If the session is not idle or its last load failed
        """
        if self.state is not SessionState.IDLE:
            raise RuntimeError(f"Cannot start a session that is {self.state.value}")
        if self.error is not None:
            raise RuntimeError(f"Cannot start after a load error: {self.error}")
        _check_grid(self.grid)

        self.state = SessionState.RUNNING

    def pause(self) -> None:
        """Suspend stepping; grid and cursor are kept."""
        if self.state is SessionState.RUNNING:
            self.state = SessionState.PAUSED

    def resume(self) -> None:
        """Continue stepping after a pause."""
        if self.state is SessionState.PAUSED:
            self.state = SessionState.RUNNING

    def toggle(self) -> SessionState:
        """Play/pause toggle.

        Returns:
            The new session state
        """
        if self.state is SessionState.RUNNING:
            self.pause()
        elif self.state is SessionState.PAUSED:
            self.resume()
        else:
            self.start()
        return self.state

    def reseed(self, grid: Grid) -> None:
        """Replace the grid and return to idle with the cursor at the origin."""
        self.grid = grid
        self.cursor = Cursor.origin()
        self.state = SessionState.IDLE
        self.error = None
        self._pending = None

    def load(self, source: str) -> bool:
        """Fetch a seed grid and reseed with it.

        Args:
            source: URL or path of the seed payload

        Returns:
            True if the grid was loaded, False if the load failed (see ``error``)
        """
        try:
            grid = seeds.load_seed(source)
        except LoadError as e:
            self.fail_load(e)
            return False

        self.reseed(grid)
        return True

    def fail_load(self, error: Exception) -> None:
        """Record a failed seed load; the session stays idle and cannot start."""
        self.state = SessionState.IDLE
        self.error = str(error)

    def abort(self, error: Exception) -> None:
        """Stop the session after a fatal stepping error."""
        self.state = SessionState.IDLE
        self.error = str(error)
        self._pending = None

    def population_counts(self) -> Tuple[int, int]:
        """Get the number of (SpeciesA, SpeciesB) cells, or zeros without a grid."""
        if self.grid is None:
            return (0, 0)
        return self.grid.population_counts()

    def tick(self) -> Cursor:
        """Advance the simulation by one cell. See :func:`tick`."""
        return tick(self)


def _check_grid(grid: Optional[Grid]) -> None:
    if grid is None:
        raise InvalidGridError("No grid loaded")
    if grid.is_empty:
        raise InvalidGridError(f"Cannot step an empty grid of shape {grid.shape}")


def tick(session: Session) -> Cursor:
    """Evaluate and write the cell under the cursor, then advance the cursor.

    In IN_PLACE mode the new state is written straight into the live grid,
    so cells evaluated later in the same sweep read it as their neighbor.

    Args:
        session: Session to advance

    Returns:
        The cursor of the cell that was written

    Raises:
        InvalidGridError: If the session has no grid or an empty one; the
            session is aborted before the error propagates
    """
    try:
        _check_grid(session.grid)
    except InvalidGridError as e:
        session.abort(e)
        raise

    grid = session.grid
    cursor = session.cursor

    if session.step_mode is StepMode.DOUBLE_BUFFERED:
        if session._pending is None or cursor == Cursor.origin():
            session._pending = next_generation(grid)
        new_state = session._pending.get_cell(cursor.y, cursor.x)
    else:
        new_state = evaluate(grid, cursor.y, cursor.x)

    grid.set_cell(cursor.y, cursor.x, new_state)
    session.cursor = cursor.advance(grid)
    return cursor
