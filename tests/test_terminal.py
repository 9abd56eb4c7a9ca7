import errno
import io
import os
import sys

import pytest

from nibilang.completion import complete
from nibilang.history import History
from nibilang.lineedit import LineEditor
from nibilang.terminal import (
    _edit,
    _read_char,
    get_columns,
    is_unsupported_term,
    raw_mode,
    readline,
)


def _run(data, history=None, completer=None, multiline=False):
    written = []
    beeps = []
    editor = LineEditor(
        prompt="> ",
        cols=80,
        history=history if history is not None else History(),
        output=written.append,
        multiline=multiline,
    )
    line = _edit(editor, io.BytesIO(data).read, completer, lambda: beeps.append(1))
    return line, written, beeps, editor


@pytest.mark.parametrize("term", ["dumb", "cons25", "emacs", "DUMB"])
def test_unsupported_terms(term):
    assert is_unsupported_term(term) is True


def test_supported_term():
    assert is_unsupported_term("xterm") is False


def test_term_from_environment(monkeypatch):
    monkeypatch.setenv("TERM", "emacs")
    assert is_unsupported_term() is True
    monkeypatch.delenv("TERM")
    assert is_unsupported_term() is False


def test_raw_mode_rejects_non_tty():
    read_fd, write_fd = os.pipe()
    try:
        with pytest.raises(OSError) as info:
            with raw_mode(read_fd):
                pass
        assert info.value.errno == errno.ENOTTY
    finally:
        os.close(read_fd)
        os.close(write_fd)


def test_get_columns_defaults_for_pipe():
    read_fd, write_fd = os.pipe()
    try:
        assert get_columns(write_fd) == 80
    finally:
        os.close(read_fd)
        os.close(write_fd)


def test_read_char_multibyte():
    data = "é".encode("utf-8")
    assert _read_char(io.BytesIO(data).read) == data


def test_read_char_end_and_invalid():
    assert _read_char(io.BytesIO(b"").read) is None
    assert _read_char(io.BytesIO(b"\xff").read) is None


def test_edit_simple_line():
    line, written, _, _ = _run(b"abc\r")
    assert line == "abc"
    assert written[0] == b"> "


def test_edit_enter_leaves_history_unchanged():
    history = History()
    history.add("old")
    _run(b"x\r", history=history)
    assert list(history) == ["old"]


def test_edit_ctrl_c_interrupts():
    with pytest.raises(KeyboardInterrupt):
        _run(b"ab\x03")


def test_edit_ctrl_d_on_empty_line_is_eof():
    history = History()
    with pytest.raises(EOFError):
        _run(b"\x04", history=history)
    assert len(history) == 0


def test_edit_ctrl_d_deletes_under_cursor():
    line, *_ = _run(b"abc\x01\x04\r")
    assert line == "bc"


def test_edit_arrow_left_then_insert():
    line, *_ = _run(b"ac\x1b[Db\r")
    assert line == "abc"


def test_edit_delete_key_sequence():
    line, *_ = _run(b"abc\x1b[H\x1b[3~\r")
    assert line == "bc"


def test_edit_backspace_and_kill():
    assert _run(b"abc\x7f\r")[0] == "ab"
    assert _run(b"abc\x15xy\r")[0] == "xy"
    assert _run(b"abc\x01\x0b\r")[0] == ""


def test_edit_delete_previous_word():
    line, *_ = _run(b"foo bar\x17\r")
    assert line == "foo "


def test_edit_history_up():
    history = History()
    history.add("old")
    line, *_ = _run(b"\x1b[A\r", history=history)
    assert line == "old"


def test_edit_completion_accepts_candidate():
    line, *_ = _run(b"(e\t\r", completer=complete)
    assert line == "(exit "


def test_edit_completion_without_candidates_beeps():
    line, _, beeps, _ = _run(b"zz\tq\r", completer=complete)
    assert line == "zzq"
    assert beeps == [1]


def test_edit_end_of_input_returns_partial_line():
    line, *_ = _run(b"partial")
    assert line == "partial"


def test_readline_from_pipe(monkeypatch):
    monkeypatch.setenv("TERM", "xterm")
    monkeypatch.setattr(sys, "stdin", io.StringIO("hello\nworld\n"))
    assert readline("p> ") == "hello"
    assert readline("p> ") == "world"
    with pytest.raises(EOFError):
        readline("p> ")


def test_readline_unsupported_term_prints_prompt(monkeypatch, capsys):
    monkeypatch.setenv("TERM", "dumb")
    monkeypatch.setattr(sys, "stdin", io.StringIO("line\n"))
    assert readline("p> ") == "line"
    assert capsys.readouterr().out == "p> "