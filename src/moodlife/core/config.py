"""Simulation configuration."""

from dataclasses import dataclass
from typing import Any, Optional

DEFAULT_SPEED = 100
MIN_SPEED = 10
MAX_SPEED = 60000


def clamp_speed(value: Any) -> int:
    """Convert a requested tick period to the effective one.

    Args:
        value: Requested period in milliseconds (number or numeric string)

    Returns:
        The period, with anything at or below MIN_SPEED raised to MIN_SPEED
        and anything above MAX_SPEED lowered to MAX_SPEED

    Raises:
        ValueError: If value is not a finite number
    """
    try:
        period = int(float(value))
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"Speed must be a number, got {value!r}") from None

    if period <= MIN_SPEED:
        return MIN_SPEED
    return min(period, MAX_SPEED)


@dataclass
class SimulationConfig:
    """Configuration for a simulation window."""

    speed: int = DEFAULT_SPEED
    double_buffered: bool = False
    source: Optional[str] = None
    rows: int = 30
    cols: int = 40
    random_seed: Optional[int] = None
    cell_size: int = 16

    def __post_init__(self) -> None:
        self.speed = clamp_speed(self.speed)
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Grid size must be positive, got {self.rows}x{self.cols}")
        if self.cell_size <= 0:
            raise ValueError(f"Cell size must be positive, got {self.cell_size}")

    @classmethod
    def from_args(cls, args: Any) -> "SimulationConfig":
        """Create a configuration from parsed command-line arguments."""
        return cls(
            speed=args.speed,
            double_buffered=args.double_buffered,
            source=args.source,
            rows=args.rows,
            cols=args.cols,
            random_seed=args.random_seed,
            cell_size=args.cell_size,
        )
