"""Errors reported to the user, with optional source location."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, TextIO

_RED = "\x1b[31m"
_CYAN = "\x1b[36m"
_RESET = "\x1b[39m"


def _colour(stream: TextIO, code: str) -> str:
    isatty = getattr(stream, "isatty", None)
    return code if isatty is not None and isatty() else ""


@dataclass(frozen=True)
class ErrorReport:
    """An error message, optionally tied to a location in the source."""

    message: str
    locator: Any = None

    def has_locator(self) -> bool:
        """True if the error carries a source location."""
        return self.locator is not None

    def draw(self, markup: bool = True, stream: TextIO | None = None) -> None:
        """Write the error to a stream (stdout by default).

        With markup and a location, the location is written first, rendered
        with ``str``, then the message.
        """
        out = stream if stream is not None else sys.stdout
        if self.locator is None or not markup:
            out.write(
                f"{_colour(out, _RED)}ERROR: {_colour(out, _RESET)}{self.message}\n"
            )
            out.flush()
            return
        out.write(f"{self.locator}\n")
        out.write(
            f"{_colour(out, _CYAN)}\nMessage: {_colour(out, _RESET)}{self.message}\n\n"
        )
        out.flush()