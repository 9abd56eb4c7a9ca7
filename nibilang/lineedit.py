"""Line editing state and operations for an interactive prompt.

The edit buffer is held as UTF-8 bytes. Cursor positions are byte offsets,
and cursor movement steps over whole graphemes. Each operation that changes
what is on screen writes the terminal escape sequences needed to redraw it.
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import Callable

from nibilang.history import History
from nibilang.textwidth import (
    column_pos,
    column_pos_multiline,
    grapheme_len,
    prev_grapheme_len,
)

MAX_LINE = 4096
HISTORY_NEXT = 0
HISTORY_PREV = 1


class Key(IntEnum):
    """Control codes the editor reacts to."""

    NULL = 0
    CTRL_A = 1
    CTRL_B = 2
    CTRL_C = 3
    CTRL_D = 4
    CTRL_E = 5
    CTRL_F = 6
    CTRL_H = 8
    TAB = 9
    CTRL_K = 11
    CTRL_L = 12
    ENTER = 13
    CTRL_N = 14
    CTRL_P = 16
    CTRL_T = 20
    CTRL_U = 21
    CTRL_W = 23
    ESC = 27
    BACKSPACE = 127


def _stdout_write(data: bytes) -> None:
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()


def _to_bytes(data: bytes | bytearray | str) -> bytes:
    return data.encode("utf-8", "surrogateescape") if isinstance(data, str) else bytes(data)


class LineEditor:
    """The state of one line being edited at a terminal prompt."""

    def __init__(
        self,
        prompt: str = "",
        cols: int = 80,
        history: History | None = None,
        output: Callable[[bytes], object] | None = None,
        multiline: bool = False,
        max_len: int = MAX_LINE - 1,
    ) -> None:
        self.prompt = prompt
        self.cols = cols
        self.history = history if history is not None else History()
        self.output = output if output is not None else _stdout_write
        self.multiline = multiline
        self.max_len = max_len
        self.pos = 0
        self.maxrows = 0
        self.history_index = 0
        self._oldcolpos = 0
        self._buf = bytearray()

    @property
    def buf(self) -> bytes:
        """The edit buffer as UTF-8 bytes."""
        return bytes(self._buf)

    @buf.setter
    def buf(self, data: bytes | bytearray | str) -> None:
        self._buf = bytearray(_to_bytes(data))
        self.pos = min(self.pos, len(self._buf))

    @property
    def line(self) -> str:
        """The edit buffer as text."""
        return self._buf.decode("utf-8", "surrogateescape")

    def __len__(self) -> int:
        return len(self._buf)

    @property
    def _prompt_bytes(self) -> bytes:
        return _to_bytes(self.prompt)

    def refresh(self) -> None:
        """Redraw the prompt and buffer and place the cursor."""
        if self.multiline:
            self._refresh_multi()
        else:
            self._refresh_single()

    def _refresh_single(self) -> None:
        prompt = self._prompt_bytes
        pcolwid = column_pos(prompt)
        view = bytes(self._buf)
        length = len(view)
        pos = self.pos
        while pcolwid + column_pos(view[:pos]) >= self.cols:
            glen = grapheme_len(view[:length], 0)
            if glen == 0:
                break
            view = view[glen:]
            length -= glen
            pos -= glen
        while pcolwid + column_pos(view[:length]) > self.cols:
            glen = prev_grapheme_len(view, length)
            if glen == 0:
                break
            length -= glen
        out = b"\r" + prompt + view[:length] + b"\x1b[0K"
        out += b"\r\x1b[%dC" % (column_pos(view[:pos]) + pcolwid)
        self.output(out)

    def _refresh_multi(self) -> None:
        cols = self.cols
        prompt = self._prompt_bytes
        data = bytes(self._buf)
        pcolwid = column_pos(prompt)
        colpos = column_pos_multiline(data, len(data), cols, pcolwid)
        rows = (pcolwid + colpos + cols - 1) // cols
        rpos = (pcolwid + self._oldcolpos + cols) // cols
        old_rows = self.maxrows
        if rows > self.maxrows:
            self.maxrows = rows

        out = bytearray()
        if old_rows - rpos > 0:
            out += b"\x1b[%dB" % (old_rows - rpos)
        out += b"\r\x1b[0K\x1b[1A" * max(old_rows - 1, 0)
        out += b"\r\x1b[0K"
        out += prompt + data

        colpos2 = column_pos_multiline(data, self.pos, cols, pcolwid)
        if self.pos and self.pos == len(data) and (colpos2 + pcolwid) % cols == 0:
            out += b"\n\r"
            rows += 1
            if rows > self.maxrows:
                self.maxrows = rows

        rpos2 = (pcolwid + colpos2 + cols) // cols
        if rows - rpos2 > 0:
            out += b"\x1b[%dA" % (rows - rpos2)

        col = (pcolwid + colpos2) % cols
        out += b"\r\x1b[%dC" % col if col else b"\r"
        self._oldcolpos = colpos2
        self.output(bytes(out))

    def insert(self, data: bytes | bytearray | str) -> None:
        """Insert a character's bytes at the cursor."""
        chunk = _to_bytes(data)
        if len(self._buf) >= self.max_len:
            return
        if self.pos == len(self._buf):
            self._buf += chunk
            self.pos += len(chunk)
            fits = (
                column_pos(self._prompt_bytes) + column_pos(bytes(self._buf)) < self.cols
            )
            if not self.multiline and fits:
                # Trivial case: just echo what was typed.
                self.output(chunk)
            else:
                self.refresh()
        else:
            self._buf[self.pos : self.pos] = chunk
            self.pos += len(chunk)
            self.refresh()

    def move_left(self) -> None:
        """Move the cursor one grapheme to the left."""
        if self.pos > 0:
            self.pos -= prev_grapheme_len(bytes(self._buf), self.pos)
            self.refresh()

    def move_right(self) -> None:
        """Move the cursor one grapheme to the right."""
        if self.pos != len(self._buf):
            self.pos += grapheme_len(bytes(self._buf), self.pos)
            self.refresh()

    def move_home(self) -> None:
        """Move the cursor to the start of the line."""
        if self.pos != 0:
            self.pos = 0
            self.refresh()

    def move_end(self) -> None:
        """Move the cursor to the end of the line."""
        if self.pos != len(self._buf):
            self.pos = len(self._buf)
            self.refresh()

    def history_step(self, direction: int) -> None:
        """Replace the line with the previous or next history entry.

        ``direction`` is HISTORY_PREV (older) or HISTORY_NEXT (newer). The
        line being edited is stored back into its history slot first.
        """
        size = len(self.history)
        if size <= 1:
            return
        self.history[size - 1 - self.history_index] = self.line
        self.history_index += 1 if direction == HISTORY_PREV else -1
        if self.history_index < 0:
            self.history_index = 0
            return
        if self.history_index >= size:
            self.history_index = size - 1
            return
        self._buf = bytearray(_to_bytes(self.history[size - 1 - self.history_index]))
        self.pos = len(self._buf)
        self.refresh()

    def delete(self) -> None:
        """Delete the grapheme under the cursor."""
        if self._buf and self.pos < len(self._buf):
            glen = grapheme_len(bytes(self._buf), self.pos)
            del self._buf[self.pos : self.pos + glen]
            self.refresh()

    def backspace(self) -> None:
        """Delete the grapheme before the cursor."""
        if self.pos > 0 and self._buf:
            glen = prev_grapheme_len(bytes(self._buf), self.pos)
            del self._buf[self.pos - glen : self.pos]
            self.pos -= glen
            self.refresh()

    def delete_prev_word(self) -> None:
        """Delete the word before the cursor, along with spaces after it."""
        old_pos = self.pos
        while self.pos > 0 and self._buf[self.pos - 1] == 0x20:
            self.pos -= 1
        while self.pos > 0 and self._buf[self.pos - 1] != 0x20:
            self.pos -= 1
        del self._buf[self.pos : old_pos]
        self.refresh()

    def transpose(self) -> None:
        """Swap the byte before the cursor with the one under it."""
        if 0 < self.pos < len(self._buf):
            before, here = self._buf[self.pos - 1], self._buf[self.pos]
            self._buf[self.pos - 1], self._buf[self.pos] = here, before
            if self.pos != len(self._buf) - 1:
                self.pos += 1
            self.refresh()

    def kill_line(self) -> None:
        """Clear the whole line."""
        self._buf.clear()
        self.pos = 0
        self.refresh()

    def kill_to_end(self) -> None:
        """Delete from the cursor to the end of the line."""
        del self._buf[self.pos :]
        self.refresh()