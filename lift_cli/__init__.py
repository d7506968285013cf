"""Workout progression and gamification engine with a command-line front end."""

__version__ = "0.1.0"
