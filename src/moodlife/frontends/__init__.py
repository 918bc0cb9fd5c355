"""Frontend interfaces for the two-species automaton."""

from .tkinter_gui import MoodLifeGUI

__all__ = ["MoodLifeGUI"]
