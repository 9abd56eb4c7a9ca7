"""Display-width measurement of UTF-8 edit buffers for terminal line editing.

Buffers are UTF-8 bytes; ``str`` arguments are encoded first. Positions and
lengths are byte offsets, as the line editor keeps its buffer in bytes.
"""

from __future__ import annotations

from bisect import bisect_right

_WIDE_RANGES: tuple[tuple[int, int], ...] = (
    (0x1100, 0x115F),
    (0x2329, 0x232A),
    (0x2E80, 0x2E99),
    (0x2E9B, 0x2EF3),
    (0x2F00, 0x2FD5),
    (0x2FF0, 0x2FFB),
    (0x3000, 0x303E),
    (0x3041, 0x3096),
    (0x3099, 0x30FF),
    (0x3105, 0x312D),
    (0x3131, 0x318E),
    (0x3190, 0x31BA),
    (0x31C0, 0x31E3),
    (0x31F0, 0x321E),
    (0x3220, 0x3247),
    (0x3250, 0x4DBF),
    (0x4E00, 0xA48C),
    (0xA490, 0xA4C6),
    (0xA960, 0xA97C),
    (0xAC00, 0xD7A3),
    (0xF900, 0xFAFF),
    (0xFE10, 0xFE19),
    (0xFE30, 0xFE52),
    (0xFE54, 0xFE66),
    (0xFE68, 0xFE6B),
    (0xFF01, 0xFFE6),
    (0x1B000, 0x1B001),
    (0x1F200, 0x1F202),
    (0x1F210, 0x1F23A),
    (0x1F240, 0x1F248),
    (0x1F250, 0x1F251),
    (0x20000, 0x3FFFD),
)

_COMBINING_RANGES: tuple[tuple[int, int], ...] = (
    (0x0300, 0x036F), (0x0483, 0x0487), (0x0591, 0x05BD), (0x05BF, 0x05BF),
    (0x05C1, 0x05C2), (0x05C4, 0x05C5), (0x05C7, 0x05C7), (0x0610, 0x061A),
    (0x064B, 0x065F), (0x0670, 0x0670), (0x06D6, 0x06DC), (0x06DF, 0x06E4),
    (0x06E7, 0x06E8), (0x06EA, 0x06ED), (0x0711, 0x0711), (0x0730, 0x074A),
    (0x07A6, 0x07B0), (0x07EB, 0x07F3), (0x0816, 0x0819), (0x081B, 0x0823),
    (0x0825, 0x0827), (0x0829, 0x082D), (0x0859, 0x085B), (0x08E3, 0x0902),
    (0x093A, 0x093A), (0x093C, 0x093C), (0x0941, 0x0948), (0x094D, 0x094D),
    (0x0951, 0x0957), (0x0962, 0x0963), (0x0981, 0x0981), (0x09BC, 0x09BC),
    (0x09C1, 0x09C4), (0x09CD, 0x09CD), (0x09E2, 0x09E3), (0x0A01, 0x0A02),
    (0x0A3C, 0x0A3C), (0x0A41, 0x0A42), (0x0A47, 0x0A48), (0x0A4B, 0x0A4D),
    (0x0A51, 0x0A51), (0x0A70, 0x0A71), (0x0A75, 0x0A75), (0x0A81, 0x0A82),
    (0x0ABC, 0x0ABC), (0x0AC1, 0x0AC5), (0x0AC7, 0x0AC8), (0x0ACD, 0x0ACD),
    (0x0AE2, 0x0AE3), (0x0B01, 0x0B01), (0x0B3C, 0x0B3C), (0x0B3F, 0x0B3F),
    (0x0B41, 0x0B44), (0x0B4D, 0x0B4D), (0x0B56, 0x0B56), (0x0B62, 0x0B63),
    (0x0B82, 0x0B82), (0x0BC0, 0x0BC0), (0x0BCD, 0x0BCD), (0x0C00, 0x0C00),
    (0x0C3E, 0x0C40), (0x0C46, 0x0C48), (0x0C4A, 0x0C4D), (0x0C55, 0x0C56),
    (0x0C62, 0x0C63), (0x0C81, 0x0C81), (0x0CBC, 0x0CBC), (0x0CBF, 0x0CBF),
    (0x0CC6, 0x0CC6), (0x0CCC, 0x0CCD), (0x0CE2, 0x0CE3), (0x0D01, 0x0D01),
    (0x0D41, 0x0D44), (0x0D4D, 0x0D4D), (0x0D62, 0x0D63), (0x0DCA, 0x0DCA),
    (0x0DD2, 0x0DD4), (0x0DD6, 0x0DD6), (0x0E31, 0x0E31), (0x0E34, 0x0E3A),
    (0x0E47, 0x0E4E), (0x0EB1, 0x0EB1), (0x0EB4, 0x0EB9), (0x0EBB, 0x0EBC),
    (0x0EC8, 0x0ECD), (0x0F18, 0x0F19), (0x0F35, 0x0F35), (0x0F37, 0x0F37),
    (0x0F39, 0x0F39), (0x0F71, 0x0F7E), (0x0F80, 0x0F84), (0x0F86, 0x0F87),
    (0x0F8D, 0x0F97), (0x0F99, 0x0FBC), (0x0FC6, 0x0FC6), (0x102D, 0x1030),
    (0x1032, 0x1037), (0x1039, 0x103A), (0x103D, 0x103E), (0x1058, 0x1059),
    (0x105E, 0x1060), (0x1071, 0x1074), (0x1082, 0x1082), (0x1085, 0x1086),
    (0x108D, 0x108D), (0x109D, 0x109D), (0x135D, 0x135F), (0x1712, 0x1714),
    (0x1732, 0x1734), (0x1752, 0x1753), (0x1772, 0x1773), (0x17B4, 0x17B5),
    (0x17B7, 0x17BD), (0x17C6, 0x17C6), (0x17C9, 0x17D3), (0x17DD, 0x17DD),
    (0x180B, 0x180D), (0x18A9, 0x18A9), (0x1920, 0x1922), (0x1927, 0x1928),
    (0x1932, 0x1932), (0x1939, 0x193B), (0x1A17, 0x1A18), (0x1A1B, 0x1A1B),
    (0x1A56, 0x1A56), (0x1A58, 0x1A5E), (0x1A60, 0x1A60), (0x1A62, 0x1A62),
    (0x1A65, 0x1A6C), (0x1A73, 0x1A7C), (0x1A7F, 0x1A7F), (0x1AB0, 0x1ABD),
    (0x1B00, 0x1B03), (0x1B34, 0x1B34), (0x1B36, 0x1B3A), (0x1B3C, 0x1B3C),
    (0x1B42, 0x1B42), (0x1B6B, 0x1B73), (0x1B80, 0x1B81), (0x1BA2, 0x1BA5),
    (0x1BA8, 0x1BA9), (0x1BAB, 0x1BAD), (0x1BE6, 0x1BE6), (0x1BE8, 0x1BE9),
    (0x1BED, 0x1BED), (0x1BEF, 0x1BF1), (0x1C2C, 0x1C33), (0x1C36, 0x1C37),
    (0x1CD0, 0x1CD2), (0x1CD4, 0x1CE0), (0x1CE2, 0x1CE8), (0x1CED, 0x1CED),
    (0x1CF4, 0x1CF4), (0x1CF8, 0x1CF9), (0x1DC0, 0x1DF5), (0x1DFC, 0x1DFF),
    (0x20D0, 0x20DC), (0x20E1, 0x20E1), (0x20E5, 0x20F0), (0x2CEF, 0x2CF1),
    (0x2D7F, 0x2D7F), (0x2DE0, 0x2DFF), (0x302A, 0x302D), (0x3099, 0x309A),
    (0xA66F, 0xA66F), (0xA674, 0xA67D), (0xA69E, 0xA69F), (0xA6F0, 0xA6F1),
    (0xA802, 0xA802), (0xA806, 0xA806), (0xA80B, 0xA80B), (0xA825, 0xA826),
    (0xA8C4, 0xA8C4), (0xA8E0, 0xA8F1), (0xA926, 0xA92D), (0xA947, 0xA951),
    (0xA980, 0xA982), (0xA9B3, 0xA9B3), (0xA9B6, 0xA9B9), (0xA9BC, 0xA9BC),
    (0xA9E5, 0xA9E5), (0xAA29, 0xAA2E), (0xAA31, 0xAA32), (0xAA35, 0xAA36),
    (0xAA43, 0xAA43), (0xAA4C, 0xAA4C), (0xAA7C, 0xAA7C), (0xAAB0, 0xAAB0),
    (0xAAB2, 0xAAB4), (0xAAB7, 0xAAB8), (0xAABE, 0xAABF), (0xAAC1, 0xAAC1),
    (0xAAEC, 0xAAED), (0xAAF6, 0xAAF6), (0xABE5, 0xABE5), (0xABE8, 0xABE8),
    (0xABED, 0xABED), (0xFB1E, 0xFB1E), (0xFE00, 0xFE0F), (0xFE20, 0xFE2F),
    (0x101FD, 0x101FD), (0x102E0, 0x102E0), (0x10376, 0x1037A),
    (0x10A01, 0x10A03), (0x10A05, 0x10A06), (0x10A0C, 0x10A0F),
    (0x10A38, 0x10A3A), (0x10A3F, 0x10A3F), (0x10AE5, 0x10AE6),
    (0x11001, 0x11001), (0x11038, 0x11046), (0x1107F, 0x11081),
    (0x110B3, 0x110B6), (0x110B9, 0x110BA), (0x11100, 0x11102),
    (0x11127, 0x1112B), (0x1112D, 0x11134), (0x11173, 0x11173),
    (0x11180, 0x11181), (0x111B6, 0x111BE), (0x111CA, 0x111CC),
    (0x1122F, 0x11231), (0x11234, 0x11234), (0x11236, 0x11237),
    (0x112DF, 0x112DF), (0x112E3, 0x112EA), (0x11300, 0x11301),
    (0x1133C, 0x1133C), (0x11340, 0x11340), (0x11366, 0x1136C),
    (0x11370, 0x11374), (0x114B3, 0x114B8), (0x114BA, 0x114BA),
    (0x114BF, 0x114C0), (0x114C2, 0x114C3), (0x115B2, 0x115B5),
    (0x115BC, 0x115BD), (0x115BF, 0x115C0), (0x115DC, 0x115DD),
    (0x11633, 0x1163A), (0x1163D, 0x1163D), (0x1163F, 0x11640),
    (0x116AB, 0x116AB), (0x116AD, 0x116AD), (0x116B0, 0x116B5),
    (0x116B7, 0x116B7), (0x1171D, 0x1171F), (0x11722, 0x11725),
    (0x11727, 0x1172B), (0x16AF0, 0x16AF4), (0x16B30, 0x16B36),
    (0x16F8F, 0x16F92), (0x1BC9D, 0x1BC9E), (0x1D167, 0x1D169),
    (0x1D17B, 0x1D182), (0x1D185, 0x1D18B), (0x1D1AA, 0x1D1AD),
    (0x1D242, 0x1D244), (0x1DA00, 0x1DA36), (0x1DA3B, 0x1DA6C),
    (0x1DA75, 0x1DA75), (0x1DA84, 0x1DA84), (0x1DA9B, 0x1DA9F),
    (0x1DAA1, 0x1DAAF), (0x1E8D0, 0x1E8D6), (0xE0100, 0xE01EF),
)

_WIDE_STARTS = [start for start, _ in _WIDE_RANGES]
_COMBINING_STARTS = [start for start, _ in _COMBINING_RANGES]

# Final bytes that end the escape sequences the editor recognises.
_ANSI_FINAL = frozenset(b"ABCDEFGHJKSTfm")


def _in_ranges(cp: int, starts: list[int], ranges: tuple[tuple[int, int], ...]) -> bool:
    index = bisect_right(starts, cp) - 1
    return index >= 0 and cp <= ranges[index][1]


def _as_bytes(buf: bytes | bytearray | str) -> bytes:
    return buf.encode("utf-8") if isinstance(buf, str) else bytes(buf)


def is_wide_char(cp: int) -> bool:
    """True if the code point occupies two terminal columns."""
    return _in_ranges(cp, _WIDE_STARTS, _WIDE_RANGES)


def is_combining_char(cp: int) -> bool:
    """True if the code point combines with the preceding character."""
    return _in_ranges(cp, _COMBINING_STARTS, _COMBINING_RANGES)


def utf8_char_len(buf: bytes | bytearray | str, pos: int) -> int:
    """Byte length of the UTF-8 character starting at ``pos``; 0 at the end."""
    data = _as_bytes(buf)
    if pos == len(data):
        return 0
    lead = data[pos]
    if lead < 0x80:
        return 1
    if lead < 0xE0:
        return 2
    if lead < 0xF0:
        return 3
    return 4


def prev_utf8_char_len(buf: bytes | bytearray | str, pos: int) -> int:
    """Byte length of the UTF-8 character that ends just before ``pos``."""
    data = _as_bytes(buf)
    start = pos - 1
    while start >= 0 and (data[start] & 0xC0) == 0x80:
        start -= 1
    return pos - start


def utf8_to_code_point(buf: bytes | bytearray | str) -> tuple[int, int]:
    """Decode the first UTF-8 character of ``buf``.

    Returns ``(code_point, byte_length)``, or ``(0, 0)`` if the buffer is
    empty, truncated or starts with an invalid lead byte.
    """
    data = _as_bytes(buf)
    if not data:
        return 0, 0
    lead = data[0]
    if lead & 0x80 == 0:
        return lead, 1
    if lead & 0xE0 == 0xC0:
        if len(data) >= 2:
            return ((lead & 0x1F) << 6) | (data[1] & 0x3F), 2
    elif lead & 0xF0 == 0xE0:
        if len(data) >= 3:
            return (
                ((lead & 0x0F) << 12) | ((data[1] & 0x3F) << 6) | (data[2] & 0x3F),
                3,
            )
    elif lead & 0xF8 == 0xF0:
        if len(data) >= 4:
            return (
                ((lead & 0x07) << 18)
                | ((data[1] & 0x3F) << 12)
                | ((data[2] & 0x3F) << 6)
                | (data[3] & 0x3F),
                4,
            )
    return 0, 0


def grapheme_len(buf: bytes | bytearray | str, pos: int) -> int:
    """Byte length of the grapheme (base plus combining marks) at ``pos``."""
    data = _as_bytes(buf)
    if pos == len(data):
        return 0
    begin = pos
    pos += utf8_char_len(data, pos)
    while pos < len(data):
        length = utf8_char_len(data, pos)
        cp, _ = utf8_to_code_point(data[pos : pos + length])
        if not is_combining_char(cp):
            return pos - begin
        pos += length
    return pos - begin


def prev_grapheme_len(buf: bytes | bytearray | str, pos: int) -> int:
    """Byte length of the grapheme that ends just before ``pos``."""
    data = _as_bytes(buf)
    end = pos
    while pos > 0:
        length = prev_utf8_char_len(data, pos)
        pos -= length
        cp, _ = utf8_to_code_point(data[pos : pos + length])
        if not is_combining_char(cp):
            return end - pos
    return 0


def ansi_escape_len(buf: bytes | bytearray | str) -> int:
    """Length of a recognised ``ESC [`` sequence at the start of ``buf``, else 0."""
    data = _as_bytes(buf)
    if len(data) > 2 and data.startswith(b"\x1b["):
        for offset in range(2, len(data)):
            if data[offset] in _ANSI_FINAL:
                return offset + 1
    return 0


def _char_width(cp: int) -> int:
    if is_combining_char(cp):
        return 0
    return 2 if is_wide_char(cp) else 1


def column_pos(buf: bytes | bytearray | str) -> int:
    """Number of terminal columns ``buf`` occupies on a single line.

    Recognised escape sequences take no columns.
    """
    data = _as_bytes(buf)
    columns = 0
    offset = 0
    while offset < len(data):
        escape = ansi_escape_len(data[offset:])
        if escape:
            offset += escape
            continue
        cp, length = utf8_to_code_point(data[offset:])
        columns += _char_width(cp)
        offset += max(length, 1)
    return columns


def column_pos_multiline(
    buf: bytes | bytearray | str, pos: int, cols: int, ini_pos: int
) -> int:
    """Columns used up to byte ``pos`` when wrapping at ``cols`` columns.

    ``ini_pos`` is the column the text starts in (the prompt width). Wide
    characters that do not fit at a line's end count the skipped cells too.
    """
    data = _as_bytes(buf)
    columns = 0
    line_width = ini_pos
    offset = 0
    while offset < len(data):
        cp, length = utf8_to_code_point(data[offset:])
        width = _char_width(cp)
        overflow = line_width + width - cols
        if overflow > 0:
            columns += overflow
            line_width = width
        elif overflow == 0:
            line_width = 0
        else:
            line_width += width
        if offset >= pos:
            break
        offset += max(length, 1)
        columns += width
    return columns