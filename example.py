#!/usr/bin/env python3
"""
Example usage of the moodlife package.
"""

from moodlife import Grid, Session, tick
from moodlife.core.session import StepMode


def main():
    """Demonstrate programmatic usage of the moodlife package."""
    # A sad line on the top edge with a happy pair below it
    grid = Grid.from_list(
        [
            [1, 1, 1, 0, 0],
            [0, 0, 0, 2, 0],
            [0, 0, 2, 2, 0],
            [0, 0, 0, 0, 0],
        ]
    )

    for step_mode in StepMode:
        session = Session(grid.copy(), step_mode=step_mode)
        session.start()

        print(f"{step_mode.value}:")
        print(session.grid)
        print()

        # Three full sweeps, one cell per tick
        for sweep in range(1, 4):
            for _ in range(session.grid.rows * session.grid.cols):
                tick(session)

            sad, happy = session.population_counts()
            print(f"After sweep {sweep} (sad={sad}, happy={happy}):")
            print(session.grid)
            print()


if __name__ == "__main__":
    main()
