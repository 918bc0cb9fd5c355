"""Exceptions raised by the simulation core."""


class MoodLifeError(Exception):
    """Base class for simulation errors."""


class LoadError(MoodLifeError):
    """The initial grid could not be fetched or was malformed."""


class InvalidGridError(MoodLifeError, ValueError):
    """A grid is empty, ragged, or holds values outside the cell states."""
