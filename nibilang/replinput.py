"""Accumulation of REPL input lines into complete bracket-balanced statements."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ReplConfig:
    """Settings for a REPL session; the prelude is interpreted first."""

    prelude: str | None = None


class InputBuffer:
    """Collects lines until their parentheses balance."""

    def __init__(self) -> None:
        self._buffer = ""
        self._depth = 0

    def submit(self, line: str) -> str | None:
        """Add a line; return the full statement once brackets close.

        Anything after a ``#`` is discarded as a comment.
        """
        line = line.split("#", 1)[0]
        if not line:
            return None
        self._depth += line.count("(") - line.count(")")
        self._buffer += line
        if self._depth == 0 and self._buffer:
            statement, self._buffer = self._buffer, ""
            return statement
        return None