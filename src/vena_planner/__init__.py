"""Periodization planner for a squat/bench heavy-single and volume-wave program."""

__version__ = "0.1.0"
