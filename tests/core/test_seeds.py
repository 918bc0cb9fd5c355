"""Tests for seed loading."""

import http.client
import io
import json
import urllib.error
from pathlib import Path

import pytest
from unittest.mock import patch

from moodlife.core.errors import LoadError
from moodlife.core.grid import CellState, Grid
from moodlife.core.seeds import (
    fetch_payload,
    fetch_seed_async,
    load_seed,
    parse_payload,
    random_seed,
    seed_payload,
)


class TestParsePayload:
    """Test cases for parse_payload."""

    def test_valid_payload(self):
        """Test parsing a well-formed payload."""
        grid = parse_payload({"data": {"state": [[0, 1, 2], [2, 1, 0]]}})
        assert grid.shape == (2, 3)
        assert grid.get_cell(0, 2) is CellState.SPECIES_B

    def test_missing_state(self):
        """Test payloads without data.state."""
        for payload in [{}, {"data": {}}, {"data": None}, {"state": [[1]]}, [], None, "seed"]:
            with pytest.raises(LoadError):
                parse_payload(payload)

    def test_invalid_state(self):
        """Test that bad matrices become LoadError."""
        for state in [[], [[]], [[0, 1], [1]], [[0, 5]], "0,1"]:
            with pytest.raises(LoadError):
                parse_payload({"data": {"state": state}})

    def test_seed_payload_shape(self):
        """Test building a payload from a grid."""
        grid = Grid.from_list([[1, 0], [0, 2]])
        payload = seed_payload(grid)
        assert payload == {"data": {"state": [[1, 0], [0, 2]]}}
        assert parse_payload(payload) == grid


class TestFetchPayload:
    """Test cases for reading payloads from files and URLs."""

    def test_file(self, tmp_path):
        """Test reading a payload from a JSON file."""
        path = tmp_path / "seed.json"
        path.write_text(json.dumps({"data": {"state": [[1]]}}))

        assert fetch_payload(str(path)) == {"data": {"state": [[1]]}}
        assert load_seed(str(path)) == Grid.from_list([[1]])

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises LoadError."""
        with pytest.raises(LoadError):
            fetch_payload(str(tmp_path / "nope.json"))

    def test_invalid_json(self, tmp_path):
        """Test that unparsable content raises LoadError."""
        path = tmp_path / "seed.json"
        path.write_text("{not json")

        with pytest.raises(LoadError):
            load_seed(str(path))

    def test_url(self):
        """Test fetching a payload over HTTP."""
        body = json.dumps({"data": {"state": [[0, 2]]}}).encode()

        with patch("urllib.request.urlopen") as mock_urlopen:
            mock_urlopen.return_value.__enter__.return_value = io.BytesIO(body)
            grid = load_seed("http://localhost:3000/seed")

        assert grid.to_list() == [[0, 2]]
        assert mock_urlopen.call_args[0][0] == "http://localhost:3000/seed"

    def test_unreachable_url(self):
        """Test that network failures raise LoadError."""
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("refused")):
            with pytest.raises(LoadError):
                load_seed("https://example.invalid/seed")

    def test_broken_http_response(self):
        """Test that HTTP protocol errors raise LoadError."""
        for error in [http.client.IncompleteRead(b""), http.client.BadStatusLine("garbage")]:
            with patch("urllib.request.urlopen", side_effect=error):
                with pytest.raises(LoadError):
                    load_seed("http://localhost/seed")

    def test_example_seed_file(self):
        """Test that the bundled example seed loads."""
        path = Path(__file__).resolve().parents[2] / "data" / "example_seed.json"
        grid = load_seed(str(path))
        assert grid.shape == (12, 12)
        assert grid.population_counts() == (15, 15)


class TestFetchSeedAsync:
    """Test cases for the background fetch."""

    def test_success(self, tmp_path):
        """Test that the future resolves to the grid."""
        path = tmp_path / "seed.json"
        path.write_text(json.dumps({"data": {"state": [[2, 2], [1, 1]]}}))

        future = fetch_seed_async(str(path))
        assert future.result(timeout=10).to_list() == [[2, 2], [1, 1]]

    def test_failure(self, tmp_path):
        """Test that the future carries the LoadError."""
        path = tmp_path / "seed.json"
        path.write_text("{}")

        future = fetch_seed_async(str(path))
        assert isinstance(future.exception(timeout=10), LoadError)


class TestRandomSeed:
    """Test cases for random_seed."""

    def test_shape_and_values(self):
        """Test random grid dimensions and states."""
        grid = random_seed(8, 12, seed=1)
        assert grid.shape == (8, 12)
        assert all(value in (0, 1, 2) for row in grid.to_list() for value in row)

    def test_reproducible(self):
        """Test that the same seed gives the same grid."""
        assert random_seed(5, 5, seed=9) == random_seed(5, 5, seed=9)

    def test_empty_rejected(self):
        """Test that an empty random grid is refused."""
        with pytest.raises(ValueError):
            random_seed(0, 5)
