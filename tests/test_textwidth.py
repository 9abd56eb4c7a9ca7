import pytest

from nibilang.textwidth import (
    ansi_escape_len,
    column_pos,
    column_pos_multiline,
    grapheme_len,
    is_combining_char,
    is_wide_char,
    prev_grapheme_len,
    prev_utf8_char_len,
    utf8_char_len,
    utf8_to_code_point,
)

E_ACUTE = "e\u0301"  # e followed by a combining acute accent


@pytest.mark.parametrize(
    "cp, expected",
    [(0x1100, True), (0x115F, True), (0x10FF, False), (0x1160, False),
     (0x4E2D, True), (0x20000, True), (0x3FFFE, False), (ord("a"), False)],
)
def test_is_wide_char(cp, expected):
    assert is_wide_char(cp) is expected


@pytest.mark.parametrize(
    "cp, expected",
    [(0x0300, True), (0x036F, True), (0x0370, False), (0x05BF, True),
     (0x05BE, False), (0xE01EF, True), (0xE01F0, False), (ord("e"), False)],
)
def test_is_combining_char(cp, expected):
    assert is_combining_char(cp) is expected


@pytest.mark.parametrize("ch", ["a", "é", "中", "\U0001F600", "\u0301"])
def test_utf8_to_code_point_round_trip(ch):
    encoded = ch.encode("utf-8")
    assert utf8_to_code_point(encoded) == (ord(ch), len(encoded))
    assert utf8_char_len(encoded, 0) == len(encoded)
    assert prev_utf8_char_len(encoded, len(encoded)) == len(encoded)


def test_utf8_to_code_point_truncated_and_empty():
    encoded = "中".encode("utf-8")
    assert utf8_to_code_point(encoded[:2]) == (0, 0)
    assert utf8_to_code_point(b"") == (0, 0)


def test_utf8_char_len_at_end_is_zero():
    assert utf8_char_len(b"abc", 3) == 0


def test_prev_utf8_char_len_after_multibyte():
    data = "a中".encode("utf-8")
    assert prev_utf8_char_len(data, len(data)) == len("中".encode("utf-8"))
    assert prev_utf8_char_len(data, 1) == 1


def test_grapheme_len_includes_combining_marks():
    data = (E_ACUTE + "x").encode("utf-8")
    assert grapheme_len(data, 0) == len(E_ACUTE.encode("utf-8"))
    assert grapheme_len(data, len(data)) == 0


def test_prev_grapheme_len_includes_combining_marks():
    data = ("x" + E_ACUTE).encode("utf-8")
    assert prev_grapheme_len(data, len(data)) == len(E_ACUTE.encode("utf-8"))
    assert prev_grapheme_len(data, 0) == 0


def test_grapheme_steps_cover_buffer():
    data = ("a" + E_ACUTE + "中b").encode("utf-8")
    pos, forward = 0, []
    while pos < len(data):
        step = grapheme_len(data, pos)
        forward.append(step)
        pos += step
    pos, backward = len(data), []
    while pos > 0:
        step = prev_grapheme_len(data, pos)
        backward.append(step)
        pos -= step
    assert sum(forward) == len(data)
    assert forward == list(reversed(backward))


def test_ansi_escape_len():
    seq = "\x1b[31m"
    assert ansi_escape_len(seq + "abc") == len(seq)
    assert ansi_escape_len("abc") == 0
    assert ansi_escape_len("\x1b[") == 0
    assert ansi_escape_len("\x1b[12") == 0


def test_column_pos_ascii_and_escapes():
    assert column_pos("hello") == len("hello")
    assert column_pos("\x1b[31mhello\x1b[0m") == column_pos("hello")
    assert column_pos("") == 0


def test_column_pos_wide_and_combining():
    assert column_pos("中文") == 2 * column_pos("ab")
    assert column_pos(E_ACUTE) == column_pos("e")


def test_column_pos_accepts_bytes_and_str_alike():
    text = "nibi> 中" + E_ACUTE
    assert column_pos(text) == column_pos(text.encode("utf-8"))


def test_column_pos_multiline_matches_single_line_when_unwrapped():
    text = "ab中" + E_ACUTE
    data = text.encode("utf-8")
    assert column_pos_multiline(data, len(data), 1000, 0) == column_pos(text)


def test_column_pos_multiline_position_zero():
    assert column_pos_multiline(b"abc", 0, 80, 0) == 0


def test_column_pos_multiline_wide_char_at_edge_counts_skipped_cell():
    text = "a中"
    data = text.encode("utf-8")
    assert column_pos_multiline(data, len(data), 2, 0) == column_pos(text) + 1


def test_column_pos_multiline_exact_fit_adds_nothing():
    assert column_pos_multiline(b"abcd", 4, 2, 0) == column_pos("abcd")