"""Grid data structure for the two-species automaton."""

from enum import IntEnum
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple
import numpy as np
import torch
import torch.nn.functional as F

from .errors import InvalidGridError


class CellState(IntEnum):
    """State of a single cell."""

    DEAD = 0
    SPECIES_A = 1  # "sad"
    SPECIES_B = 2  # "happy"


VALID_STATES = frozenset(int(state) for state in CellState)

# Relative (dy, dx) offsets in the order they are scanned: row above, sides, row below
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


class NeighborCount(NamedTuple):
    """Species counts among the neighbors of one cell."""

    count_a: int
    count_b: int


class Grid:
    """Represents a bounded 2D grid of cell states.

    Cells are stored in a numpy array of shape ``(rows, cols)`` and are
    addressed as ``(y, x)``. Edges never wrap: positions outside the grid
    are simply not neighbors.
    """

    def __init__(self, rows: int, cols: int) -> None:
        """Initialize an all-dead grid.

        Args:
            rows: Number of rows
            cols: Number of columns
        """
        if rows < 0 or cols < 0:
            raise InvalidGridError(f"Grid dimensions must be non-negative, got {rows}x{cols}")

        self._cells = np.zeros((rows, cols), dtype=np.int8)

        # Kernel for whole-grid neighbor counts (reused for efficiency)
        self._torch_kernel = (
            torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)
        )

    @classmethod
    def from_list(cls, data: Sequence[Sequence[int]]) -> "Grid":
        """Build a grid from nested lists of cell states.

        Args:
            data: Sequence of rows, each a sequence of integers in {0, 1, 2}

        Returns:
            New Grid instance

        Raises:
            InvalidGridError: If the data is empty, ragged or holds invalid values
        """
        if not isinstance(data, (list, tuple)) or len(data) == 0:
            raise InvalidGridError("Grid data must be a non-empty list of rows")

        width = None
        for y, row in enumerate(data):
            if not isinstance(row, (list, tuple)):
                raise InvalidGridError(f"Row {y} is not a list")
            if width is None:
                width = len(row)
            elif len(row) != width:
                raise InvalidGridError(f"Row {y} has length {len(row)}, expected {width}")

            for x, value in enumerate(row):
                # bool is an int subclass but never a valid cell state
                if isinstance(value, bool) or not isinstance(value, int) or value not in VALID_STATES:
                    raise InvalidGridError(f"Invalid cell state {value!r} at ({y}, {x})")

        if width == 0:
            raise InvalidGridError("Grid rows must not be empty")

        grid = cls(len(data), width)
        grid._cells[:] = np.array(data, dtype=np.int8)
        return grid

    @property
    def cells(self) -> np.ndarray:
        """Get the underlying cell array."""
        return self._cells

    @property
    def rows(self) -> int:
        """Number of rows."""
        return self._cells.shape[0]

    @property
    def cols(self) -> int:
        """Number of columns."""
        return self._cells.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        """Get grid dimensions as (rows, cols)."""
        return (self.rows, self.cols)

    @property
    def is_empty(self) -> bool:
        """Whether the grid has no rows or an empty first row."""
        return self.rows == 0 or self.cols == 0

    def in_bounds(self, y: int, x: int) -> bool:
        """Check whether (y, x) lies inside the grid."""
        return 0 <= y < self.rows and 0 <= x < self.cols

    def get_cell(self, y: int, x: int) -> CellState:
        """Get the state of a cell.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not self.in_bounds(y, x):
            raise IndexError(f"Coordinates ({y}, {x}) out of bounds")

        return CellState(int(self._cells[y, x]))

    def set_cell(self, y: int, x: int, state: int) -> None:
        """Set the state of a cell.

        Raises:
            IndexError: If coordinates are out of bounds
            InvalidGridError: If state is not a valid cell state
        """
        if not self.in_bounds(y, x):
            raise IndexError(f"Coordinates ({y}, {x}) out of bounds")
        if int(state) not in VALID_STATES:
            raise InvalidGridError(f"Invalid cell state {state!r}")

        self._cells[y, x] = int(state)

    def neighbor_coordinates(self, y: int, x: int) -> Iterator[Tuple[int, int]]:
        """Yield the in-bounds neighbors of (y, x).

        Yields:
            Tuples of (y, x) coordinates
        """
        for dy, dx in NEIGHBOR_OFFSETS:
            ny, nx = y + dy, x + dx
            if self.in_bounds(ny, nx):
                yield (ny, nx)

    def count_neighbors(self, y: int, x: int) -> NeighborCount:
        """Count neighbors of each species around a cell.

        Args:
            y: Row coordinate
            x: Column coordinate

        Returns:
            NeighborCount with the number of SpeciesA and SpeciesB neighbors
        """
        count_a = 0
        count_b = 0
        for ny, nx in self.neighbor_coordinates(y, x):
            value = self._cells[ny, nx]
            if value == CellState.SPECIES_A:
                count_a += 1
            elif value == CellState.SPECIES_B:
                count_b += 1

        return NeighborCount(count_a, count_b)

    def count_all_neighbors(self) -> Tuple[np.ndarray, np.ndarray]:
        """Count neighbors of each species for all cells using PyTorch convolution.

        Returns:
            Tuple of (counts_a, counts_b) arrays shaped like the grid
        """
        if self.is_empty:
            empty = np.zeros(self.shape, dtype=np.int8)
            return empty, empty.copy()

        # One batch entry per species; zero padding keeps the edges bounded
        masks = np.stack(
            [self._cells == CellState.SPECIES_A, self._cells == CellState.SPECIES_B]
        ).astype(np.float32)
        torch_input = torch.from_numpy(masks).unsqueeze(1)
        neighbors = F.conv2d(torch_input, self._torch_kernel, padding=1)

        counts = neighbors[:, 0].numpy().astype(np.int8)
        return counts[0], counts[1]

    def population(self, state: int) -> int:
        """Get the number of cells in the given state."""
        return int(np.sum(self._cells == int(state)))

    def population_counts(self) -> Tuple[int, int]:
        """Get the number of (SpeciesA, SpeciesB) cells."""
        return (self.population(CellState.SPECIES_A), self.population(CellState.SPECIES_B))

    def randomize(
        self,
        probabilities: Sequence[float] = (0.6, 0.2, 0.2),
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Randomly populate the grid.

        Args:
            probabilities: Chance of (Dead, SpeciesA, SpeciesB) for each cell
            rng: Random generator to draw from (a fresh one if omitted)
        """
        if len(probabilities) != len(CellState):
            raise ValueError(f"Expected {len(CellState)} probabilities, got {len(probabilities)}")

        rng = rng or np.random.default_rng()
        self._cells[:] = rng.choice(len(CellState), size=self.shape, p=list(probabilities))

    def copy(self) -> "Grid":
        """Return an independent copy of this grid."""
        grid = Grid(self.rows, self.cols)
        grid._cells[:] = self._cells
        return grid

    def to_list(self) -> List[List[int]]:
        """Convert grid to nested list for serialization."""
        return self._cells.tolist()

    def __eq__(self, other: object) -> bool:
        """Check if two grids are equal."""
        if not isinstance(other, Grid):
            return False
        return self.shape == other.shape and np.array_equal(self._cells, other._cells)

    def __str__(self) -> str:
        """String representation: '.' for dead, 'a' and 'b' for the two species."""
        symbols = {0: ".", 1: "a", 2: "b"}
        return "\n".join("".join(symbols[int(value)] for value in row) for row in self._cells)
