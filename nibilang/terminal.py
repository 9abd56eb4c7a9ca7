"""Reading a line from the terminal with editing, history and completion."""

from __future__ import annotations

import errno
import os
import sys
from contextlib import contextmanager
from typing import Callable, Iterator

try:
    import termios
except ImportError:  # pragma: no cover - platforms without termios
    termios = None  # type: ignore[assignment]

from nibilang.history import History
from nibilang.lineedit import HISTORY_NEXT, HISTORY_PREV, Key, LineEditor
from nibilang.textwidth import utf8_to_code_point

UNSUPPORTED_TERMS = frozenset({"dumb", "cons25", "emacs"})
DEFAULT_COLUMNS = 80

Completer = Callable[[str], list]
Reader = Callable[[int], bytes]


def is_unsupported_term(term: str | None = None) -> bool:
    """True if the terminal cannot handle basic escape sequences.

    With no argument the ``TERM`` environment variable is consulted.
    """
    if term is None:
        term = os.environ.get("TERM")
        if term is None:
            return False
    return term.lower() in UNSUPPORTED_TERMS


@contextmanager
def raw_mode(fd: int) -> Iterator[None]:
    """Put the terminal on ``fd`` in raw mode for the duration of the block.

    Raises OSError (ENOTTY) when ``fd`` is not a terminal.
    """
    if termios is None or not os.isatty(fd):
        raise OSError(errno.ENOTTY, os.strerror(errno.ENOTTY))
    original = termios.tcgetattr(fd)
    raw = termios.tcgetattr(fd)
    raw[0] &= ~(
        termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON
    )
    raw[2] |= termios.CS8
    raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    raw[6][termios.VMIN] = 1
    raw[6][termios.VTIME] = 0
    termios.tcsetattr(fd, termios.TCSAFLUSH, raw)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSAFLUSH, original)


def _cursor_column(ifd: int, ofd: int) -> int | None:
    """Ask the terminal where the cursor is and return its column."""
    if os.write(ofd, b"\x1b[6n") != 4:
        return None
    reply = bytearray()
    while len(reply) < 31:
        byte = os.read(ifd, 1)
        if len(byte) != 1 or byte == b"R":
            break
        reply += byte
    if not reply.startswith(b"\x1b["):
        return None
    rows, sep, cols = bytes(reply[2:]).partition(b";")
    if not sep:
        return None
    try:
        int(rows)
        return int(cols)
    except ValueError:
        return None


def get_columns(fd: int = 1) -> int:
    """Return the terminal width on ``fd``, or 80 if it cannot be found."""
    try:
        columns = os.get_terminal_size(fd).columns
    except OSError:
        columns = 0
    if columns > 0:
        return columns
    if not os.isatty(fd):
        return DEFAULT_COLUMNS
    try:
        start = _cursor_column(fd, fd)
        if start is None:
            return DEFAULT_COLUMNS
        if os.write(fd, b"\x1b[999C") != 6:
            return DEFAULT_COLUMNS
        columns = _cursor_column(fd, fd)
        if columns is None:
            return DEFAULT_COLUMNS
        if columns > start:
            os.write(fd, b"\x1b[%dD" % (columns - start))
        return columns
    except OSError:
        return DEFAULT_COLUMNS


def _beep() -> None:
    sys.stderr.write("\x07")
    sys.stderr.flush()


def _read_char(read: Reader) -> bytes | None:
    """Read one UTF-8 encoded character; None on end of input or bad data."""
    first = read(1)
    if not first:
        return None
    lead = first[0]
    if lead & 0x80 == 0:
        extra = 0
    elif lead & 0xE0 == 0xC0:
        extra = 1
    elif lead & 0xF0 == 0xE0:
        extra = 2
    elif lead & 0xF8 == 0xF0:
        extra = 3
    else:
        return None
    rest = b""
    while len(rest) < extra:
        chunk = read(extra - len(rest))
        if not chunk:
            return None
        rest += chunk
    data = first + rest
    _, length = utf8_to_code_point(data)
    return data if length else None


def _complete(
    editor: LineEditor,
    read: Reader,
    completer: Completer,
    beep: Callable[[], None],
) -> bytes | None:
    """Cycle through completions; return the key that ended it.

    Returns b"" when there was nothing to complete and None at end of input.
    """
    candidates = list(completer(editor.line))
    if not candidates:
        beep()
        return b""
    index = 0
    while True:
        if index < len(candidates):
            saved_buf, saved_pos = editor.buf, editor.pos
            editor.buf = candidates[index]
            editor.pos = len(editor.buf)
            editor.refresh()
            editor.buf = saved_buf
            editor.pos = saved_pos
        else:
            editor.refresh()

        char = _read_char(read)
        if char is None:
            return None
        code, _ = utf8_to_code_point(char)
        if code == Key.TAB:
            index = (index + 1) % (len(candidates) + 1)
            if index == len(candidates):
                beep()
            continue
        if code == Key.ESC:
            if index < len(candidates):
                editor.refresh()
            return char
        if index < len(candidates):
            editor.buf = candidates[index].encode("utf-8")[: editor.max_len]
            editor.pos = len(editor.buf)
        return char


def _escape(editor: LineEditor, read: Reader) -> None:
    first = read(1)
    if not first:
        return
    second = read(1)
    if not second:
        return
    if first == b"[":
        if second.isdigit():
            third = read(1)
            if third == b"~" and second == b"3":
                editor.delete()
            return
        actions = {
            b"A": lambda: editor.history_step(HISTORY_PREV),
            b"B": lambda: editor.history_step(HISTORY_NEXT),
            b"C": editor.move_right,
            b"D": editor.move_left,
            b"H": editor.move_home,
            b"F": editor.move_end,
        }
    elif first == b"O":
        actions = {b"H": editor.move_home, b"F": editor.move_end}
    else:
        return
    action = actions.get(second)
    if action is not None:
        action()


def _edit(
    editor: LineEditor,
    read: Reader,
    completer: Completer | None = None,
    beep: Callable[[], None] | None = None,
) -> str:
    """Run the key loop for ``editor`` and return the entered line.

    Raises KeyboardInterrupt on Ctrl-C and EOFError on Ctrl-D at an empty line.
    """
    beep = beep if beep is not None else _beep
    history = editor.history
    history.add("")
    editor.output(editor.prompt.encode("utf-8"))

    simple = {
        Key.BACKSPACE: editor.backspace,
        Key.CTRL_H: editor.backspace,
        Key.CTRL_T: editor.transpose,
        Key.CTRL_B: editor.move_left,
        Key.CTRL_F: editor.move_right,
        Key.CTRL_P: lambda: editor.history_step(HISTORY_PREV),
        Key.CTRL_N: lambda: editor.history_step(HISTORY_NEXT),
        Key.CTRL_U: editor.kill_line,
        Key.CTRL_K: editor.kill_to_end,
        Key.CTRL_A: editor.move_home,
        Key.CTRL_E: editor.move_end,
        Key.CTRL_W: editor.delete_prev_word,
    }

    while True:
        char = _read_char(read)
        if char is None:
            return editor.line
        code, _ = utf8_to_code_point(char)

        if code == Key.TAB and completer is not None:
            char = _complete(editor, read, completer, beep)
            if char is None:
                return editor.line
            if char == b"":
                continue
            code, _ = utf8_to_code_point(char)

        if code == Key.ENTER:
            if history:
                history.pop()
            if editor.multiline:
                editor.move_end()
            return editor.line
        if code == Key.CTRL_C:
            raise KeyboardInterrupt
        if code == Key.CTRL_D:
            if len(editor) > 0:
                editor.delete()
                continue
            if history:
                history.pop()
            raise EOFError
        if code == Key.ESC:
            _escape(editor, read)
            continue
        if code == Key.CTRL_L:
            editor.output(b"\x1b[H\x1b[2J")
            editor.refresh()
            continue
        action = simple.get(code)
        if action is not None:
            action()
        else:
            editor.insert(char)


def _read_plain() -> str:
    line = sys.stdin.readline()
    if line == "":
        raise EOFError
    return line[:-1] if line.endswith("\n") else line


def readline(
    prompt: str,
    history: History | None = None,
    completer: Completer | None = None,
    multiline: bool = False,
) -> str:
    """Read one line, with editing when stdin is a capable terminal.

    Raises EOFError at end of input and KeyboardInterrupt on Ctrl-C.
    """
    if termios is None or is_unsupported_term():
        sys.stdout.write(prompt)
        sys.stdout.flush()
        return _read_plain()
    if not sys.stdin.isatty():
        return _read_plain()

    fd = sys.stdin.fileno()
    editor = LineEditor(
        prompt=prompt,
        cols=get_columns(sys.stdout.fileno()),
        history=history,
        multiline=multiline,
    )
    try:
        with raw_mode(fd):
            try:
                return _edit(editor, lambda n: os.read(fd, n), completer)
            finally:
                pass
    except OSError as error:
        if error.errno == errno.ENOTTY:
            return ""
        raise
    finally:
        sys.stdout.write("\n")
        sys.stdout.flush()