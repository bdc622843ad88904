"""Turtle tokenizer.

Turns raw text into a lazy, forward-only stream of :class:`Token` values,
each with its type, raw lexeme and 1-based line/column. Whitespace and
``#`` comments between tokens are dropped. Lexemes are kept raw; decoding of
escapes and prefix expansion happen in the parser.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from .errors import RdfSyntaxError, SourceLocation
from .grammar import is_hex, is_name_boundary, is_pn_chars, is_pn_chars_base, is_pn_chars_u, is_space

MAX_CONTEXT = 40


class TokenType(Enum):
    """Kinds of Turtle tokens; the value is the name used in error messages."""
    PREFIX = "prefixDirective"
    BASE = "baseDirective"
    IRI_REF = "iriRef"
    PREFIXED_NAME = "prefixedName"
    BLANK_NODE_LABEL = "blankNodeLabel"
    OPEN_BRACKET = "openBracket"
    CLOSE_BRACKET = "closeBracket"
    DOT = "dot"
    COMMA = "comma"
    SEMICOLON = "semicolon"
    A = "aKeyword"
    LITERAL = "literal"
    EOF = "eof"

    def __str__(self) -> str:
        return self.value


PUNCTUATION = {
    "[": TokenType.OPEN_BRACKET,
    "]": TokenType.CLOSE_BRACKET,
    ".": TokenType.DOT,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
}

AT_DIRECTIVES = {"@prefix": TokenType.PREFIX, "@base": TokenType.BASE}
SPARQL_DIRECTIVES = {"PREFIX": TokenType.PREFIX, "BASE": TokenType.BASE}


@dataclass(frozen=True)
class Token:
    """One lexical token with its raw text and start position."""
    type: TokenType
    text: str
    line: int
    column: int

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.text)


class Scanner:
    """Stateful character scanner with line and column tracking."""
    def __init__(self, text: str, source: str):
        """Initialize scanner state for the provided source text."""
        self.text = text
        self.source = source
        self.i = 0
        self.line = 1
        self.col = 1

    def eof(self) -> bool:
        """Return whether the whole input has been consumed."""
        return self.i >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        """Return the character at the cursor plus ``offset``, or ``""`` past the end."""
        idx = self.i + offset
        if idx >= len(self.text):
            return ""
        return self.text[idx]

    def startswith(self, token: str) -> bool:
        """Return whether the unread input starts with ``token``."""
        return self.text.startswith(token, self.i)

    def advance(self) -> str:
        """Consume and return one character while updating line/column counters."""
        ch = self.text[self.i]
        self.i += 1
        if ch == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def consume(self, token: str) -> bool:
        """Consume ``token`` if present and return whether it matched."""
        if not self.startswith(token):
            return False
        for _ in token:
            self.advance()
        return True

    def skip_ws_comments(self) -> None:
        """Skip whitespace and ``#`` comments up to the next token."""
        while not self.eof():
            ch = self.peek()
            if is_space(ch):
                self.advance()
            elif ch == "#":
                while not self.eof() and self.peek() not in "\r\n":
                    self.advance()
            else:
                break


class TurtleTokenizer:
    """Lazy tokenizer over one Turtle document.

    Call :meth:`next_token` repeatedly or iterate; the stream ends with a
    single ``EOF`` token, and asking again keeps returning ``EOF``.
    """

    def __init__(self, text: str, source: str = "<string>"):
        self.scanner = Scanner(text, source)
        self.source = source
        self._start = (0, 1, 1)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type is TokenType.EOF:
                return

    def next_token(self) -> Token:
        """Read and return the next token."""
        sc = self.scanner
        sc.skip_ws_comments()
        self._start = (sc.i, sc.line, sc.col)
        if sc.eof():
            return self._emit(TokenType.EOF)

        ch = sc.peek()
        if ch in PUNCTUATION:
            sc.advance()
            return self._emit(PUNCTUATION[ch])
        if ch == "@":
            return self._read_at_directive()
        if ch == "<":
            self._scan_iri_ref()
            return self._emit(TokenType.IRI_REF)
        if ch in "\"'":
            return self._read_literal()
        if sc.startswith("_:"):
            return self._read_blank_node_label()
        if ch == ":" or is_pn_chars_base(ch):
            return self._read_word()
        sc.advance()
        self._fail(f"unexpected character {ch!r}")

    def _emit(self, token_type: TokenType) -> Token:
        """Build a token from the text scanned since the token start."""
        start, line, col = self._start
        return Token(token_type, self.scanner.text[start : self.scanner.i], line, col)

    def _fail(self, message: str) -> None:
        """Raise a syntax error positioned at the token start."""
        start, line, col = self._start
        context = self.scanner.text[start : self.scanner.i][:MAX_CONTEXT]
        raise RdfSyntaxError(message, SourceLocation(line, col, context), source=self.source)

    def _read_at_directive(self) -> Token:
        """Read ``@prefix`` or ``@base``."""
        sc = self.scanner
        sc.advance()
        while sc.peek().isalpha():
            sc.advance()
        word = sc.text[self._start[0] : sc.i]
        token_type = AT_DIRECTIVES.get(word)
        if token_type is None:
            self._fail(f"unknown directive {word!r}")
        return self._emit(token_type)

    def _scan_iri_ref(self) -> None:
        """Scan ``<...>``, allowing only numeric escapes inside."""
        sc = self.scanner
        sc.advance()
        while True:
            if sc.eof():
                self._fail("unterminated IRI reference")
            ch = sc.peek()
            if ch == ">":
                sc.advance()
                return
            if ch == "\\":
                sc.advance()
                if sc.peek() not in ("u", "U"):
                    self._fail("only \\u and \\U escapes are allowed in an IRI reference")
                continue
            if ord(ch) <= 0x20:
                self._fail("whitespace or control character in IRI reference")
            if ch in '<"{}|^`':
                self._fail(f"invalid character {ch!r} in IRI reference")
            sc.advance()

    def _read_literal(self) -> Token:
        """Read a quoted literal with its optional ``@lang`` or ``^^datatype`` suffix."""
        sc = self.scanner
        quote = sc.peek()
        if sc.startswith(quote * 3):
            self._scan_long_string(quote)
        else:
            self._scan_short_string(quote)

        if sc.peek() == "@":
            self._scan_language_tag()
        elif sc.consume("^^"):
            ch = sc.peek()
            if ch == "<":
                self._scan_iri_ref()
            elif ch == ":" or is_pn_chars_base(ch):
                self._scan_prefix_label()
                if not sc.consume(":"):
                    self._fail("expected prefixed name as literal datatype")
                self._scan_pn_local()
            else:
                self._fail("expected datatype IRI after '^^'")
        return self._emit(TokenType.LITERAL)

    def _scan_short_string(self, quote: str) -> None:
        """Scan a single-line string closed by ``quote``."""
        sc = self.scanner
        sc.advance()
        while True:
            if sc.eof():
                self._fail("unterminated string literal")
            ch = sc.peek()
            if ch in "\r\n":
                self._fail("newline in short string literal")
            if ch == "\\":
                sc.advance()
                if sc.eof():
                    self._fail("unterminated string literal")
                sc.advance()
                continue
            sc.advance()
            if ch == quote:
                return

    def _scan_long_string(self, quote: str) -> None:
        """Scan a triple-quoted string that may span lines."""
        # The closing delimiter is the last three quotes of a run, so content
        # may end with one or two quote characters.
        sc = self.scanner
        sc.consume(quote * 3)
        while True:
            if sc.eof():
                self._fail("unterminated long string literal")
            if sc.startswith(quote * 3):
                while sc.peek() == quote:
                    sc.advance()
                return
            if sc.advance() == "\\":
                if sc.eof():
                    self._fail("unterminated long string literal")
                sc.advance()

    def _scan_language_tag(self) -> None:
        """Scan ``@`` followed by a language tag."""
        sc = self.scanner
        sc.advance()
        if not sc.peek().isascii() or not sc.peek().isalpha():
            self._fail("invalid language tag")
        while sc.peek().isascii() and sc.peek().isalpha():
            sc.advance()
        while sc.peek() == "-" and sc.peek(1).isascii() and sc.peek(1).isalnum():
            sc.advance()
            while sc.peek().isascii() and sc.peek().isalnum():
                sc.advance()

    def _read_blank_node_label(self) -> Token:
        """Read ``_:label``."""
        sc = self.scanner
        sc.consume("_:")
        first = sc.peek()
        if not (is_pn_chars_u(first) or first in "0123456789") or first == "":
            self._fail("invalid blank node label")
        sc.advance()
        self._scan_name_tail()
        return self._emit(TokenType.BLANK_NODE_LABEL)

    def _scan_name_tail(self) -> None:
        """Consume ``PN_CHARS`` with inner dots; a trailing dot is left alone."""
        sc = self.scanner
        while True:
            ch = sc.peek()
            if is_pn_chars(ch):
                sc.advance()
            elif ch == "." and (sc.peek(1) == "." or is_pn_chars(sc.peek(1))):
                sc.advance()
            else:
                return

    def _scan_prefix_label(self) -> None:
        """Scan the ``PN_PREFIX`` part of a prefixed name."""
        sc = self.scanner
        if sc.peek() == ":":
            return
        sc.advance()
        self._scan_name_tail()

    def _read_word(self) -> Token:
        """Read a prefixed name, the ``a`` keyword or a SPARQL-style directive."""
        sc = self.scanner
        self._scan_prefix_label()
        if sc.consume(":"):
            if not is_name_boundary(sc.peek()):
                self._scan_pn_local()
            return self._emit(TokenType.PREFIXED_NAME)

        word = sc.text[self._start[0] : sc.i]
        if not is_name_boundary(sc.peek()):
            sc.advance()
            self._fail(f"unexpected character after {word!r}")
        if word == "a":
            return self._emit(TokenType.A)
        directive = SPARQL_DIRECTIVES.get(word.upper())
        if directive is not None:
            return self._emit(directive)
        self._fail(f"unexpected bare word {word!r}")

    def _scan_pn_local(self) -> None:
        """Scan a ``PN_LOCAL`` including ``%XX`` and backslash escapes."""
        sc = self.scanner
        endable = False
        first = True
        while True:
            ch = sc.peek()
            if ch == "%":
                sc.advance()
                for _ in range(2):
                    if not is_hex(sc.peek()):
                        self._fail("invalid percent escape in local name")
                    sc.advance()
                endable = True
            elif ch == "\\":
                sc.advance()
                if sc.peek() == "" or sc.peek() not in "_~.-!$&'()*+,;=/?#@%":
                    self._fail("invalid escape in local name")
                sc.advance()
                endable = True
            elif ch == ":" or is_pn_chars(ch) and (not first or is_pn_chars_u(ch) or ch in "0123456789"):
                sc.advance()
                endable = True
            elif ch == "." and not first and (
                sc.peek(1) in (".", "%", "\\", ":") or is_pn_chars(sc.peek(1))
            ):
                sc.advance()
                endable = False
            else:
                break
            first = False
        if first or not endable:
            self._fail("invalid local name")
