"""UTF-8 / UTF-16 conversion and byte-level character-class checks.

Text is handled as UTF-8 byte strings and UTF-16 code units held in
lists of ints (only the Basic Multilingual Plane is supported; lead
bytes of four-byte or longer sequences are treated as invalid).
Functions that take ``data`` accept ``bytes``, ``bytearray`` or ``str``;
a ``str`` is encoded as UTF-8 first.
"""

from __future__ import annotations

import string
from collections.abc import Iterable, Sequence

DEF_UNI_CHAR = 0x25A1  # WHITE SQUARE, used for broken sequences by to_uni

_ALPHA = frozenset(string.ascii_letters.encode("ascii"))
_DIGIT = frozenset(string.digits.encode("ascii"))
_PUNCT = frozenset(string.punctuation.encode("ascii"))
_BLANK = frozenset(b" \t")
_APOSTROPHE = ord("'")


def _as_bytes(data: bytes | bytearray | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _byte_at(data: bytes, index: int) -> int:
    """Byte at ``index``, or 0 past the end (a terminating NUL)."""
    return data[index] if index < len(data) else 0


def _is_cont(byte: int) -> bool:
    return (byte & 0xC0) == 0x80


def _decode_two(b0: int, b1: int) -> int:
    return ((b0 & 0x1F) << 6) | (b1 & 0x3F)


def _decode_three(b0: int, b1: int, b2: int) -> int:
    return ((b0 & 0x0F) << 12) | ((b1 & 0x3F) << 6) | (b2 & 0x3F)


def swap_endian(units: Iterable[int]) -> list[int]:
    """Swap the byte order of each 16-bit code unit."""
    return [((u >> 8) | (u << 8)) & 0xFFFF for u in units]


def encode_unit(code: int) -> bytes:
    """Encode one UTF-16 code unit as one to three UTF-8 bytes."""
    code &= 0xFFFF
    if code <= 0x7F:
        return bytes((code,))
    if code <= 0x7FF:
        return bytes((0xC0 | ((code >> 6) & 0x1F), 0x80 | (code & 0x3F)))
    return bytes(
        (
            0xE0 | ((code >> 12) & 0x0F),
            0x80 | ((code >> 6) & 0x3F),
            0x80 | (code & 0x3F),
        )
    )


def utf16_to_utf8(units: Iterable[int], limit: int | None = None) -> bytes:
    """Encode code units as UTF-8.

    With ``limit`` the output holds at most that many bytes: a unit whose
    encoding would not fit is dropped and later, shorter units may still
    be taken, until the output is full.
    """
    out = bytearray()
    for unit in units:
        if limit is not None and len(out) >= limit:
            break
        encoded = encode_unit(unit)
        if limit is None or len(out) + len(encoded) <= limit:
            out += encoded
    return bytes(out)


def decode_unit(data: bytes | bytearray | str) -> tuple[int, int]:
    """Decode the first character of ``data``.

    Returns ``(code_unit, bytes_consumed)``. Malformed, truncated or
    overlong sequences yield ``(0, 1)`` so decoding can resume on the
    next byte.
    """
    buf = _as_bytes(data)
    if not buf:
        raise ValueError("cannot decode a character from empty input")
    b0 = buf[0]
    if (b0 & 0xF0) == 0xE0 and len(buf) >= 3:
        if _is_cont(buf[1]) and _is_cont(buf[2]):
            code = _decode_three(b0, buf[1], buf[2])
            return (code, 3) if code >= 0x0800 else (0, 1)
        return 0, 1
    if (b0 & 0xE0) == 0xC0 and len(buf) >= 2:
        if _is_cont(buf[1]):
            code = _decode_two(b0, buf[1])
            return (code, 2) if 0x0080 <= code <= 0x07FF else (0, 1)
        return 0, 1
    if (b0 & 0x80) == 0:
        return b0, 1
    return 0, 1


def utf8_to_utf16(data: bytes | bytearray | str) -> list[int]:
    """Decode UTF-8 into code units; each malformed byte becomes a 0 unit."""
    buf = _as_bytes(data)
    units: list[int] = []
    pos = 0
    while pos < len(buf):
        code, consumed = decode_unit(buf[pos:pos + 3])
        units.append(code)
        pos += consumed
    return units


def utf16_to_utf8_len(units: Iterable[int]) -> int:
    """Number of UTF-8 bytes the code units encode to."""
    total = 0
    for unit in units:
        unit &= 0xFFFF
        if unit <= 0x7F:
            total += 1
        elif unit <= 0x7FF:
            total += 2
        else:
            total += 3
    return total


def _scan_utf8(buf: bytes) -> tuple[int, int]:
    """Walk well-formed sequences; return (bytes_accepted, characters)."""
    pos = 0
    count = 0
    while pos < len(buf):
        b0 = buf[pos]
        b1 = _byte_at(buf, pos + 1)
        if (b0 & 0xF0) == 0xE0 and _is_cont(b1) and _is_cont(_byte_at(buf, pos + 2)):
            pos += 3
        elif (b0 & 0xE0) == 0xC0 and _is_cont(b1):
            pos += 2
        elif (b0 & 0x80) == 0:
            pos += 1
        else:
            break
        count += 1
    return pos, count


def is_utf8(data: bytes | bytearray | str) -> bool:
    """True if ``data`` consists only of one- to three-byte UTF-8 sequences."""
    buf = _as_bytes(data)
    accepted, _ = _scan_utf8(buf)
    return accepted == len(buf)


def get_utf8_len(data: bytes | bytearray | str) -> int:
    """Characters before the first invalid sequence; 0 if all of ``data`` is valid."""
    buf = _as_bytes(data)
    accepted, count = _scan_utf8(buf)
    return 0 if accepted == len(buf) else count


def to_uni(data: bytes | bytearray | str) -> tuple[int, int]:
    """Decode the leading character without range checks.

    Returns ``(code_unit, length)``. A lead byte whose continuation bytes
    are wrong gives ``DEF_UNI_CHAR`` with the full sequence length; a byte
    that cannot start a sequence gives ``(0, 0)``.
    """
    buf = _as_bytes(data)
    b0 = _byte_at(buf, 0)
    b1 = _byte_at(buf, 1)
    if (b0 & 0xF0) == 0xE0:
        b2 = _byte_at(buf, 2)
        if _is_cont(b1) and _is_cont(b2):
            return _decode_three(b0, b1, b2), 3
        return DEF_UNI_CHAR, 3
    if (b0 & 0xE0) == 0xC0:
        if _is_cont(b1):
            return _decode_two(b0, b1), 2
        return DEF_UNI_CHAR, 2
    if (b0 & 0x80) == 0:
        return b0, 1
    return 0, 0


def is_chinese_character(code: int) -> bool:
    """True for CJK unified ideographs, including extension A."""
    return 0x4E00 <= code <= 0x9FFF or 0x3400 <= code <= 0x4DFF


def is_all_chinese(data: bytes | bytearray | str) -> bool:
    """True if ``data`` is non-empty and every character is in U+4E00..U+9FFF."""
    buf = _as_bytes(data)
    if not buf:
        return False
    return all(0x4E00 <= unit <= 0x9FFF for unit in utf8_to_utf16(buf))


def has_alpha(data: bytes | bytearray | str) -> bool:
    """True if any byte is an ASCII letter."""
    return any(byte in _ALPHA for byte in _as_bytes(data))


def is_all_alpha(data: bytes | bytearray | str) -> bool:
    """True if ``data`` is non-empty and only ASCII letters."""
    buf = _as_bytes(data)
    return bool(buf) and all(byte in _ALPHA for byte in buf)


def is_all_alpha_and_punct(data: bytes | bytearray | str) -> bool:
    """True if ``data`` has a letter and only ASCII letters and punctuation."""
    buf = _as_bytes(data)
    if not buf or not has_alpha(buf):
        return False
    return all(byte in _ALPHA or byte in _PUNCT for byte in buf)


def is_all_alpha_and_digit(data: bytes | bytearray | str) -> bool:
    """True if ``data`` has a letter and only ASCII letters, digits and apostrophes."""
    buf = _as_bytes(data)
    if not buf or not has_alpha(buf):
        return False
    return all(
        byte in _ALPHA or byte in _DIGIT or byte == _APOSTROPHE for byte in buf
    )


def is_all_alpha_digit_and_blank(data: bytes | bytearray | str) -> bool:
    """True if ``data`` is non-empty and only letters, digits, blanks and apostrophes."""
    buf = _as_bytes(data)
    if not buf:
        return False
    return all(
        byte in _ALPHA or byte in _DIGIT or byte in _BLANK or byte == _APOSTROPHE
        for byte in buf
    )


def need_add_tail_blank(text: bytes | bytearray | str) -> bool:
    """True if ``text`` looks like an English word that wants a trailing space."""
    buf = _as_bytes(text)
    if not buf:
        return False
    return (
        is_all_alpha(buf)
        or is_all_alpha_and_punct(buf)
        or is_all_alpha_and_digit(buf)
    )


def merge_english_word(words: Sequence[str], merge_mask: Sequence[int]) -> list[str]:
    """Join each word whose mask is 1 onto the word before it.

    The first word is never merged. The mask decides how many words are
    read; a mask longer than ``words`` raises ``IndexError``.
    """
    merged: list[str] = []
    for index, flag in enumerate(merge_mask):
        word = words[index]
        if flag == 1 and index > 0:
            merged[-1] += word
        else:
            merged.append(word)
    return merged


def utf8_to_charset(data: bytes | bytearray | str) -> list[bytes]:
    """Split UTF-8 bytes into per-character chunks judged by the lead byte."""
    buf = _as_bytes(data)
    chunks: list[bytes] = []
    pos = 0
    while pos < len(buf):
        lead = buf[pos]
        if lead >= 0xFC:
            size = 6
        elif lead >= 0xF8:
            size = 5
        elif lead >= 0xF0:
            size = 4
        elif lead >= 0xE0:
            size = 3
        elif lead >= 0xC0:
            size = 2
        else:
            size = 1
        chunks.append(buf[pos:pos + size])
        pos += size
    return chunks