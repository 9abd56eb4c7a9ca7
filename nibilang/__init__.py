"""Environments, error reports, REPL input handling and a terminal line editor for the Nibi language."""

__version__ = "0.1.0"