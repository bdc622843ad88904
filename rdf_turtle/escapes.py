"""Escaping and unescaping of Turtle string bodies and prefixed-name locals."""

from __future__ import annotations

from .grammar import PN_LOCAL_ESCAPABLE, is_hex, is_pn_chars, is_pn_chars_u

ECHAR_DECODE = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    '"': '"',
    "'": "'",
    "\\": "\\",
}

ECHAR_ENCODE = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
    '"': '\\"',
    "\\": "\\\\",
}


def escape_string(value: str) -> str:
    """Escape a literal value for use between double quotes.

    Named escapes cover backspace, tab, newline, form feed, carriage return,
    quote and backslash; any other character outside printable ASCII becomes
    ``\\uXXXX`` or, above the BMP, ``\\UXXXXXXXX``. Surrogate code points
    also take the long form so that decoding never pairs them up.
    """
    out: list[str] = []
    for ch in value:
        named = ECHAR_ENCODE.get(ch)
        if named is not None:
            out.append(named)
            continue
        cp = ord(ch)
        if 0x20 <= cp <= 0x7E:
            out.append(ch)
        elif cp <= 0xFFFF and not 0xD800 <= cp <= 0xDFFF:
            out.append(f"\\u{cp:04X}")
        else:
            out.append(f"\\U{cp:08X}")
    return "".join(out)


def _read_hex(text: str, start: int, width: int) -> int | None:
    """Return the value of exactly ``width`` hex digits at ``start``, or ``None``."""
    digits = text[start : start + width]
    if len(digits) != width or not all(is_hex(ch) for ch in digits):
        return None
    return int(digits, 16)


def unescape_string(text: str, named: bool = True) -> str:
    """Decode Turtle escapes in a string body.

    ``\\uXXXX`` and ``\\UXXXXXXXX`` need exactly 4 and 8 hex digits. A
    malformed or unknown escape is kept verbatim as the backslash followed by
    the next character. A ``\\u`` high surrogate followed by a ``\\u`` low
    surrogate decodes to the single code point they encode. With
    ``named=False`` only the numeric escapes are decoded (IRI references).
    """
    out: list[str] = []
    i = 0
    length = len(text)
    while i < length:
        ch = text[i]
        if ch != "\\" or i + 1 >= length:
            out.append(ch)
            i += 1
            continue
        esc = text[i + 1]
        if esc == "u":
            cp = _read_hex(text, i + 2, 4)
            if cp is not None:
                i += 6
                if 0xD800 <= cp <= 0xDBFF and text.startswith("\\u", i):
                    low = _read_hex(text, i + 2, 4)
                    if low is not None and 0xDC00 <= low <= 0xDFFF:
                        cp = 0x10000 + ((cp - 0xD800) << 10) + (low - 0xDC00)
                        i += 6
                out.append(chr(cp))
                continue
        elif esc == "U":
            cp = _read_hex(text, i + 2, 8)
            if cp is not None and cp <= 0x10FFFF:
                out.append(chr(cp))
                i += 10
                continue
        elif named and esc in ECHAR_DECODE:
            out.append(ECHAR_DECODE[esc])
            i += 2
            continue
        out.append(ch)
        out.append(esc)
        i += 2
    return "".join(out)


def escape_pn_local(local: str) -> str | None:
    """Escape ``local`` as a ``PN_LOCAL``, or return ``None`` if it cannot be one."""
    if local == "":
        return ""
    out: list[str] = []
    endable = False
    i = 0
    while i < len(local):
        ch = local[i]
        first = i == 0
        if ch == "%" and is_hex(local[i + 1 : i + 2]) and is_hex(local[i + 2 : i + 3]):
            out.append(local[i : i + 3])
            endable = True
            i += 3
            continue
        if ch == ".":
            if i == len(local) - 1 or first:
                out.append("\\.")
                endable = True
            else:
                out.append(".")
                endable = False
        elif (first and (ch == ":" or ch in "0123456789" or is_pn_chars_u(ch))) or (
            not first and (ch == ":" or is_pn_chars(ch))
        ):
            out.append(ch)
            endable = True
        elif ch in PN_LOCAL_ESCAPABLE:
            out.append("\\" + ch)
            endable = True
        else:
            return None
        i += 1
    if not endable:
        return None
    return "".join(out)


def unescape_pn_local(local: str) -> str:
    """Drop the backslashes of ``PN_LOCAL`` escapes; ``%XX`` stays encoded."""
    out: list[str] = []
    i = 0
    while i < len(local):
        ch = local[i]
        if ch == "\\" and i + 1 < len(local):
            out.append(local[i + 1])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)
