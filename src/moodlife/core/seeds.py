"""Loading initial grids.

A seed payload is JSON shaped like ``{"data": {"state": [[0, 1, 2], ...]}}``
and is read from an ``http(s)://`` URL or a local file.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Optional, Sequence
import http.client
import json
import urllib.error
import urllib.request

import numpy as np

from .errors import InvalidGridError, LoadError
from .grid import Grid

FETCH_TIMEOUT = 10.0


def parse_payload(payload: Any) -> Grid:
    """Build a grid from a decoded seed payload.

    Args:
        payload: Decoded JSON payload

    Returns:
        Grid holding ``payload["data"]["state"]``

    Raises:
        LoadError: If the payload lacks ``data.state`` or the state is not a
            non-empty rectangular matrix of cell states
    """
    if not isinstance(payload, dict):
        raise LoadError(f"Seed payload must be an object, got {type(payload).__name__}")

    data = payload.get("data")
    if not isinstance(data, dict) or "state" not in data:
        raise LoadError("Seed payload is missing data.state")

    try:
        return Grid.from_list(data["state"])
    except InvalidGridError as e:
        raise LoadError(f"Seed state is invalid: {e}") from e


def fetch_payload(source: str, timeout: float = FETCH_TIMEOUT) -> Any:
    """Read and decode a seed payload.

    Args:
        source: ``http://`` or ``https://`` URL, or a path to a JSON file
        timeout: Network timeout in seconds

    Returns:
        Decoded JSON payload

    Raises:
        LoadError: If the source is unreachable or not valid JSON
    """
    try:
        if source.startswith(("http://", "https://")):
            with urllib.request.urlopen(source, timeout=timeout) as response:
                return json.load(response)

        with open(Path(source).expanduser()) as f:
            return json.load(f)
    except (OSError, urllib.error.URLError, http.client.HTTPException) as e:
        raise LoadError(f"Could not read seed from {source}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LoadError(f"Seed from {source} is not valid JSON: {e}") from e


def load_seed(source: str) -> Grid:
    """Fetch and parse a seed grid.

    Raises:
        LoadError: If the seed cannot be fetched or is malformed
    """
    return parse_payload(fetch_payload(source))


def fetch_seed_async(source: str, executor: Optional[ThreadPoolExecutor] = None) -> "Future[Grid]":
    """Start loading a seed grid in the background.

    Args:
        source: URL or path of the seed payload
        executor: Executor to run on; a single-use one is created if omitted

    Returns:
        Future resolving to the Grid, or raising LoadError
    """
    if executor is not None:
        return executor.submit(load_seed, source)

    own_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="moodlife-seed")
    future = own_executor.submit(load_seed, source)
    own_executor.shutdown(wait=False)
    return future


def random_seed(
    rows: int,
    cols: int,
    probabilities: Sequence[float] = (0.6, 0.2, 0.2),
    seed: Optional[int] = None,
) -> Grid:
    """Create a randomly populated grid.

    Args:
        rows: Number of rows
        cols: Number of columns
        probabilities: Chance of (Dead, SpeciesA, SpeciesB) for each cell
        seed: Random seed for reproducibility

    Returns:
        New Grid instance
    """
    if rows <= 0 or cols <= 0:
        raise InvalidGridError(f"Seed grid must not be empty, got {rows}x{cols}")

    grid = Grid(rows, cols)
    grid.randomize(probabilities, np.random.default_rng(seed))
    return grid


def seed_payload(grid: Grid) -> Dict[str, Any]:
    """Wrap a grid in the seed payload shape."""
    return {"data": {"state": grid.to_list()}}
