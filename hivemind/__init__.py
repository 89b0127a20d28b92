"""Hivemind: the decision core of a tick-based colony bot."""

__version__ = "0.1.0"
