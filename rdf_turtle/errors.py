"""Exception types raised by the term model, tokenizer, and parser."""

from __future__ import annotations

from dataclasses import dataclass


class RdfError(Exception):
    """Root of every error raised by this package."""


class ConstraintViolation(RdfError, ValueError):
    """Raised when a term or triple would violate an RDF data-model invariant.

    ``constraint`` is a short tag for programmatic discrimination:
    ``absolute-iri``, ``scheme-format``, ``language-datatype``,
    ``term-position`` or ``iri-reference`` (a reference that cannot be
    split or resolved).
    """

    def __init__(self, message: str, constraint: str):
        """Initialize the violation with a message and its constraint tag."""
        super().__init__(message)
        self.message = message
        self.constraint = constraint

    def __str__(self) -> str:
        return f"{self.message} [{self.constraint}]"


@dataclass(frozen=True)
class SourceLocation:
    """Position of a token inside a parsed document (1-based)."""
    line: int
    column: int
    token: str = ""


class RdfSyntaxError(RdfError, ValueError):
    """Raised on the first grammar violation found while reading Turtle."""

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        source: str = "<string>",
        cause: BaseException | None = None,
        format: str = "Turtle",
    ):
        """Initialize a syntax error with source location details."""
        text = f"{source}:{location.line}:{location.column}: {message}"
        if location.token:
            text += f" (near {location.token!r})"
        super().__init__(text)
        self.message = message
        self.location = location
        self.source = source
        self.cause = cause
        self.format = format

    @property
    def line(self) -> int:
        """1-based line of the offending token."""
        return self.location.line

    @property
    def column(self) -> int:
        """1-based column of the offending token."""
        return self.location.column

    @property
    def token(self) -> str:
        """Text of the offending token, possibly truncated."""
        return self.location.token
