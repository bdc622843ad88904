"""Character classes from the Turtle grammar (``PN_CHARS`` and friends)."""

from __future__ import annotations

from collections.abc import Iterable

WHITESPACE = " \t\r\n"

# Punctuation that ends a bare word such as ``a`` or a prefixed name.
NAME_DELIMITERS = ";,.[]<>\"'#"

# Characters a ``PN_LOCAL`` may carry behind a backslash.
PN_LOCAL_ESCAPABLE = "_~.-!$&'()*+,;=/?#@%"

PN_BASE_RANGES = (
    (0x00C0, 0x00D6),
    (0x00D8, 0x00F6),
    (0x00F8, 0x02FF),
    (0x0370, 0x037D),
    (0x037F, 0x1FFF),
    (0x200C, 0x200D),
    (0x2070, 0x218F),
    (0x2C00, 0x2FEF),
    (0x3001, 0xD7FF),
    (0xF900, 0xFDCF),
    (0xFDF0, 0xFFFD),
    (0x10000, 0xEFFFF),
)


def in_ranges(cp: int, ranges: Iterable[tuple[int, int]]) -> bool:
    return any(lo <= cp <= hi for lo, hi in ranges)


def is_space(ch: str) -> bool:
    return ch != "" and ch in WHITESPACE


def is_hex(ch: str) -> bool:
    """Return whether a character is a hexadecimal digit."""
    return ch != "" and ch in "0123456789abcdefABCDEF"


def is_pn_chars_base(ch: str) -> bool:
    """Return whether a character is a valid ``PN_CHARS_BASE`` code point."""
    if len(ch) != 1:
        return False
    if "A" <= ch <= "Z" or "a" <= ch <= "z":
        return True
    return in_ranges(ord(ch), PN_BASE_RANGES)


def is_pn_chars_u(ch: str) -> bool:
    return ch == "_" or is_pn_chars_base(ch)


def is_pn_chars(ch: str) -> bool:
    """Return whether a character is a valid ``PN_CHARS`` code point."""
    if len(ch) != 1:
        return False
    if is_pn_chars_u(ch) or ch in "-0123456789":
        return True
    cp = ord(ch)
    return cp == 0x00B7 or 0x0300 <= cp <= 0x036F or 0x203F <= cp <= 0x2040


def is_name_boundary(ch: str) -> bool:
    """Return whether ``ch`` (``""`` at end of input) terminates a bare word."""
    return ch == "" or is_space(ch) or ch in NAME_DELIMITERS


def is_valid_prefix_label(prefix: str) -> bool:
    """Return whether ``prefix`` is a legal ``PN_PREFIX`` (the empty prefix is)."""
    if prefix == "":
        return True
    if not is_pn_chars_base(prefix[0]) or prefix[-1] == ".":
        return False
    return all(ch == "." or is_pn_chars(ch) for ch in prefix[1:])
