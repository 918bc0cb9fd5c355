"""Two-species Game of Life rules.

Rules for a cell with ``a`` SpeciesA ("sad") and ``b`` SpeciesB ("happy")
neighbors:

- An occupied cell survives, keeping its species, when ``a`` is 2 or 3 or
  ``b`` is 2 or 3. Either species' count sustains the current occupant.
- A cell that does not survive is born, first match wins:
  ``a == 3`` -> SpeciesA, ``a == 2 and b == 1`` -> SpeciesA,
  ``a == 1 and b == 2`` -> SpeciesB, ``b == 3`` -> SpeciesB.
- Every other cell becomes (or stays) dead.
"""

import numpy as np

from .grid import CellState, Grid

SURVIVAL_COUNTS = (2, 3)

# (count_a, count_b) condition -> newborn state, in priority order
BIRTH_RULES = (
    (lambda a, b: a == 3, CellState.SPECIES_A),
    (lambda a, b: a == 2 and b == 1, CellState.SPECIES_A),
    (lambda a, b: a == 1 and b == 2, CellState.SPECIES_B),
    (lambda a, b: b == 3, CellState.SPECIES_B),
)


def next_state(current: int, count_a: int, count_b: int) -> CellState:
    """Compute the next state of a cell from its state and neighbor counts.

    Args:
        current: Current cell state
        count_a: Number of SpeciesA neighbors
        count_b: Number of SpeciesB neighbors

    Returns:
        The cell's next state
    """
    if current != CellState.DEAD and (count_a in SURVIVAL_COUNTS or count_b in SURVIVAL_COUNTS):
        return CellState(current)

    for condition, newborn in BIRTH_RULES:
        if condition(count_a, count_b):
            return newborn

    return CellState.DEAD


def evaluate(grid: Grid, y: int, x: int) -> CellState:
    """Compute the next state of the cell at (y, x).

    Only the cell itself and its in-bounds neighbors are read; the grid is
    not modified.

    Args:
        grid: Current grid
        y: Row coordinate
        x: Column coordinate

    Returns:
        The cell's next state
    """
    count_a, count_b = grid.count_neighbors(y, x)
    return next_state(grid.get_cell(y, x), count_a, count_b)


def next_generation(grid: Grid) -> Grid:
    """Apply the rules to every cell at once, reading only the given snapshot.

    Args:
        grid: Current grid (left untouched)

    Returns:
        New grid holding the next generation
    """
    counts_a, counts_b = grid.count_all_neighbors()
    cells = grid.cells

    survives = (cells != CellState.DEAD) & (
        np.isin(counts_a, SURVIVAL_COUNTS) | np.isin(counts_b, SURVIVAL_COUNTS)
    )

    born_a = (counts_a == 3) | ((counts_a == 2) & (counts_b == 1))
    # a == 3 and b == 3 matches both; SpeciesA has priority
    born_b = (((counts_a == 1) & (counts_b == 2)) | (counts_b == 3)) & ~born_a

    result = Grid(grid.rows, grid.cols)
    out = result.cells
    out[born_a] = CellState.SPECIES_A
    out[born_b] = CellState.SPECIES_B
    out[survives] = cells[survives]
    return result
