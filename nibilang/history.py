"""Bounded line history for the line editor, with file persistence."""

from __future__ import annotations

from collections.abc import Iterator
from os import PathLike

DEFAULT_MAX_LEN = 100


class History:
    """An ordered list of previously entered lines, oldest first.

    Consecutive duplicates are not stored. Once ``max_len`` entries are
    held, adding a line evicts the oldest one.
    """

    def __init__(self, max_len: int = DEFAULT_MAX_LEN) -> None:
        self._entries: list[str] = []
        self._max_len = max_len

    @property
    def max_len(self) -> int:
        """The largest number of entries kept."""
        return self._max_len

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    def __setitem__(self, index: int, line: str) -> None:
        self._entries[index] = line

    def __bool__(self) -> bool:
        return bool(self._entries)

    def pop(self) -> str:
        """Remove and return the newest entry."""
        return self._entries.pop()

    def add(self, line: str) -> bool:
        """Append a line; return False if it was not stored.

        A line is refused when the history is disabled (``max_len`` of 0)
        or when it equals the newest entry.
        """
        if self._max_len == 0:
            return False
        if self._entries and self._entries[-1] == line:
            return False
        if len(self._entries) == self._max_len:
            del self._entries[0]
        self._entries.append(line)
        return True

    def set_max_len(self, length: int) -> bool:
        """Change the capacity; return False if ``length`` is below 1.

        When the new capacity is smaller than the number of entries held,
        only the first ``length`` entries are kept.
        """
        if length < 1:
            return False
        self._max_len = length
        if length < len(self._entries):
            del self._entries[length:]
        return True

    def save(self, path: str | PathLike[str]) -> None:
        """Write every entry to ``path``, one per line.

        Raises OSError if the file cannot be written.
        """
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.writelines(f"{entry}\n" for entry in self._entries)

    def load(self, path: str | PathLike[str]) -> bool:
        """Add each line of ``path`` to the history.

        Returns False if the file does not exist, True once it is read.
        Other read failures raise OSError.
        """
        try:
            with open(path, encoding="utf-8", newline="") as handle:
                text = handle.read()
        except FileNotFoundError:
            return False
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        for line in lines:
            self.add(line)
        return True