"""Tkinter GUI frontend for the two-species automaton."""

import argparse
import tkinter as tk
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

from ..core.config import DEFAULT_SPEED, MAX_SPEED, MIN_SPEED, SimulationConfig
from ..core.errors import InvalidGridError, LoadError
from ..core.grid import Grid
from ..core.scheduler import PeriodicTicker
from ..core.seeds import fetch_seed_async, random_seed
from ..core.session import Cursor, Session, SessionState, StepMode

# Fill colour per CellState: dead, sad, happy
COLORS = ["#A3A3A3", "#5DAAFF", "#2CB48A"]

LOADING_MESSAGE = "Loading..."
LOAD_ERROR_MESSAGE = "There was problem when trying to get the data"


class MoodLifeGUI:
    """Tkinter window showing the grid, the cursor and play/speed controls."""

    def __init__(
        self,
        master: tk.Tk,
        config: Optional[SimulationConfig] = None,
        autoplay: bool = False,
    ) -> None:
        """Initialize the GUI and start loading the seed grid.

        Args:
            master: Root Tkinter window
            config: Simulation settings (defaults if omitted)
            autoplay: Start running as soon as the seed is loaded
        """
        self.master = master
        self.master.title("Two-Species Life")
        self.master.configure(bg="#FFFFFF")

        self.config = config or SimulationConfig()
        self.autoplay = autoplay
        self.cell_size = self.config.cell_size

        step_mode = StepMode.DOUBLE_BUFFERED if self.config.double_buffered else StepMode.IN_PLACE
        self.session = Session(speed=self.config.speed, step_mode=step_mode)
        self.ticker = PeriodicTicker(self.master, self.session, on_tick=self.on_tick)

        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="moodlife-seed")
        self.load_future: Optional["Future[Grid]"] = None

        # Canvas rectangle per (y, x)
        self.cell_objects: Dict[Tuple[int, int], int] = {}

        self.setup_ui()
        self.begin_load()

    def setup_ui(self) -> None:
        """Set up the user interface."""
        self.message_label = tk.Label(self.master, text="", bg="#FFFFFF", font=("Arial", 11))
        self.message_label.pack(pady=5)

        self.canvas = tk.Canvas(self.master, width=0, height=0, bg="#FFFFFF", highlightthickness=0)
        self.canvas.pack(padx=10, pady=5)

        control_frame = tk.Frame(self.master, bg="#FFFFFF")
        control_frame.pack(pady=5)
        self._create_controls(control_frame)

        stats_frame = tk.Frame(self.master, bg="#FFFFFF")
        stats_frame.pack(pady=(0, 10))
        self._create_statistics_display(stats_frame)

    def _create_controls(self, parent: tk.Frame) -> None:
        """Create the play/pause, speed and reseed controls."""
        self.play_btn = tk.Button(parent, text="Play", command=self.toggle_running, width=8)
        self.play_btn.pack(side=tk.LEFT, padx=3)

        self.speed_var = tk.StringVar(value=str(self.session.speed))
        self.speed_input = tk.Spinbox(
            parent,
            from_=MIN_SPEED,
            to=MAX_SPEED,
            increment=50,
            width=7,
            textvariable=self.speed_var,
            command=self.on_speed_change,
        )
        self.speed_input.pack(side=tk.LEFT, padx=3)
        # Spinbox resets its variable to from_ on creation
        self.speed_var.set(str(self.session.speed))
        self.speed_input.bind("<Return>", lambda event: self.on_speed_change())
        self.speed_input.bind("<FocusOut>", lambda event: self.on_speed_change())

        tk.Label(parent, text="ms", bg="#FFFFFF").pack(side=tk.LEFT)

        self.reseed_btn = tk.Button(parent, text="Reseed", command=self.reseed_grid, width=8)
        self.reseed_btn.pack(side=tk.LEFT, padx=3)

    def _create_statistics_display(self, parent: tk.Frame) -> None:
        """Create the status labels."""
        self.stats_labels: Dict[str, tk.Label] = {}
        for stat in ["State", "Sad", "Happy", "Cursor", "Speed"]:
            label = tk.Label(parent, text=f"{stat}: ", bg="#FFFFFF", font=("Arial", 9))
            label.pack(side=tk.LEFT, padx=6)
            self.stats_labels[stat] = label

    def begin_load(self) -> None:
        """Load the seed grid: fetch the configured source, or generate one."""
        self.ticker.cancel()

        if not self.config.source:
            grid = random_seed(self.config.rows, self.config.cols, seed=self.config.random_seed)
            # Further reseeds draw fresh grids
            self.config.random_seed = None
            self.apply_seed(grid)
            return

        self.show_message(LOADING_MESSAGE)
        self.play_btn.config(state=tk.DISABLED)
        self.load_future = fetch_seed_async(self.config.source, self.executor)
        self.master.after(50, self._poll_load)

    def _poll_load(self) -> None:
        """Wait for the background fetch without blocking the event loop."""
        if self.load_future is None:
            return
        if not self.load_future.done():
            self.master.after(50, self._poll_load)
            return

        future, self.load_future = self.load_future, None
        try:
            grid = future.result()
        except LoadError as e:
            print(f"Error: {e}")
            self.session.fail_load(e)
            self.clear_canvas()
            self.show_message(LOAD_ERROR_MESSAGE)
            self.update_controls()
            return

        self.apply_seed(grid)

    def apply_seed(self, grid: Grid) -> None:
        """Replace the session grid and redraw everything."""
        self.ticker.cancel()
        self.session.reseed(grid)
        self.show_message("")
        self.canvas.config(width=grid.cols * self.cell_size, height=grid.rows * self.cell_size)
        self.redraw_all_cells()
        self.update_controls()

        if self.autoplay:
            self.toggle_running()

    def reseed_grid(self) -> None:
        """Replace the grid with a new seed."""
        self.begin_load()

    def toggle_running(self) -> None:
        """Toggle between playing and paused."""
        if self.session.error is not None or self.session.grid is None:
            return

        try:
            state = self.session.toggle()
        except InvalidGridError as e:
            print(f"Warning: Cannot start simulation: {e}")
            return

        if state is SessionState.RUNNING:
            self.ticker.start()
        else:
            self.ticker.cancel()

        self.update_controls()

    def on_speed_change(self) -> None:
        """Apply the value typed into the speed input."""
        try:
            self.session.speed = self.speed_var.get()
        except ValueError:
            print(f"Warning: Ignoring invalid speed {self.speed_var.get()!r}")

        self.speed_var.set(str(self.session.speed))

        # Pick up the new period for the pending tick
        if self.ticker.active:
            self.ticker.restart()

        self.update_statistics()

    def on_tick(self, written: Cursor) -> None:
        """Redraw the cell that was just written and the new cursor cell."""
        self.draw_cell(written.y, written.x)
        self.draw_cell(self.session.cursor.y, self.session.cursor.x)
        self.update_statistics()

    def show_message(self, text: str) -> None:
        self.message_label.config(text=text)

    def clear_canvas(self) -> None:
        self.canvas.delete("all")
        self.cell_objects.clear()
        self.canvas.config(width=0, height=0)

    def draw_cell(self, y: int, x: int) -> None:
        """Draw or update a single cell on the canvas."""
        grid = self.session.grid
        if grid is None:
            return

        color = COLORS[grid.get_cell(y, x)]
        active = self.session.cursor == Cursor(y, x)
        outline = "black" if active else ""

        cell_key = (y, x)
        if cell_key in self.cell_objects:
            self.canvas.itemconfig(self.cell_objects[cell_key], fill=color, outline=outline)
        else:
            x1 = x * self.cell_size
            y1 = y * self.cell_size
            self.cell_objects[cell_key] = self.canvas.create_rectangle(
                x1, y1, x1 + self.cell_size, y1 + self.cell_size, fill=color, outline=outline, width=1
            )

    def redraw_all_cells(self) -> None:
        """Redraw all cells on the canvas."""
        self.canvas.delete("all")
        self.cell_objects.clear()

        grid = self.session.grid
        if grid is None:
            return

        for y in range(grid.rows):
            for x in range(grid.cols):
                self.draw_cell(y, x)

    def update_controls(self) -> None:
        """Sync the button labels and status panel with the session."""
        can_play = self.session.error is None and self.session.grid is not None
        self.play_btn.config(
            text="Pause" if self.session.is_running else "Play",
            state=tk.NORMAL if can_play else tk.DISABLED,
        )
        self.update_statistics()

    def update_statistics(self) -> None:
        """Update the status labels."""
        sad, happy = self.session.population_counts()
        cursor = self.session.cursor

        display_stats = {
            "State": self.session.state.value.capitalize(),
            "Sad": str(sad),
            "Happy": str(happy),
            "Cursor": f"({cursor.y}, {cursor.x})",
            "Speed": f"{self.session.speed} ms",
        }

        for stat, value in display_stats.items():
            self.stats_labels[stat].config(text=f"{stat}: {value}")

    def close(self) -> None:
        """Stop stepping and destroy the window."""
        self.ticker.cancel()
        self.executor.shutdown(wait=False)
        self.master.destroy()


def build_parser() -> argparse.ArgumentParser:
    """Build the launcher's argument parser."""
    parser = argparse.ArgumentParser(description="Two-species Game of Life, stepped one cell at a time")
    parser.add_argument("--source", help="URL or JSON file with the seed grid (random if omitted)")
    parser.add_argument("--rows", type=int, default=30, help="Rows of a random seed grid")
    parser.add_argument("--cols", type=int, default=40, help="Columns of a random seed grid")
    parser.add_argument(
        "--speed", type=int, default=DEFAULT_SPEED, help=f"Tick period in ms (minimum {MIN_SPEED})"
    )
    parser.add_argument("--cell-size", type=int, default=16, help="Cell size in pixels")
    parser.add_argument(
        "--double-buffered",
        action="store_true",
        help="Read neighbors from a per-sweep snapshot instead of the live grid",
    )
    parser.add_argument("--random-seed", type=int, help="Random seed for reproducible grids")
    parser.add_argument("--test", action="store_true", help="Play for 3 seconds, then exit")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the Tkinter GUI."""
    args = build_parser().parse_args(argv)

    try:
        config = SimulationConfig.from_args(args)
    except ValueError as e:
        print(f"Error: {e}")
        raise SystemExit(2)

    root = tk.Tk()
    root.resizable(False, False)

    app = MoodLifeGUI(root, config, autoplay=args.test)
    root.protocol("WM_DELETE_WINDOW", app.close)

    if args.test:
        print("Running in test mode...")

        def auto_exit() -> None:
            sad, happy = app.session.population_counts()
            cursor = app.session.cursor
            print(f"Test completed. Cursor at ({cursor.y}, {cursor.x}); sad={sad} happy={happy}")
            if app.session.error:
                print(f"Load error: {app.session.error}")
            app.close()

        root.after(3000, auto_exit)

    root.mainloop()


if __name__ == "__main__":
    main()
