"""Headless-browser runtime error check for interactive-graphics sketches."""

__version__ = "0.1.0"
