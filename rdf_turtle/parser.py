"""Recursive-descent Turtle parser.

Supported subset: ``@prefix``/``@base`` (and SPARQL-style ``PREFIX``/``BASE``)
directives, IRI references, prefixed names, blank-node labels, anonymous and
nested ``[...]`` blank nodes, ``;``/``,`` predicate-object lists, the ``a``
shorthand, and quoted literals (short or triple-quoted) with an optional
language tag or datatype. Collections and bare numeric/boolean literals are
rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .errors import ConstraintViolation, RdfSyntaxError
from .escapes import unescape_pn_local, unescape_string
from .iri import has_scheme, is_iriref_char, resolve_iri_reference
from .namespaces import RDF_LANG_STRING_IRI
from .terms import IRI, BlankNode, Literal, Object, Subject, Triple
from .tokenizer import Token, TokenType, TurtleTokenizer
from .vocab import RDF_TYPE

logger = logging.getLogger(__name__)

VERB_TOKENS = (TokenType.A, TokenType.IRI_REF, TokenType.PREFIXED_NAME)


class TurtleParser:
    """Parser for one Turtle document.

    State is private to the instance: the current token, the prefix map, the
    base IRI in effect, and the label -> blank node map. Labels map to the same
    :class:`BlankNode` for the whole document; every ``[...]`` creates a new
    one. Triples come out in encounter order, so the triples of a nested
    ``[...]`` precede the triple that refers to its blank node.
    """

    def __init__(
        self,
        text: str,
        base_uri: str | None = None,
        source: str = "<string>",
        prefixes: Mapping[str, str] | None = None,
    ):
        """Initialize the parser over ``text``.

        Relative IRIs resolve against ``base_uri``. ``prefixes`` seeds the
        prefix map as if declared at the top of the document.
        """
        self.tokenizer = TurtleTokenizer(text, source)
        self.source = source
        self.base_uri = base_uri
        self.prefixes: dict[str, str] = dict(prefixes or {})
        self.blank_nodes: dict[str, BlankNode] = {}
        self.triples: list[Triple] = []
        self.current = Token(TokenType.EOF, "", 1, 1)
        self._done = False

    def parse(self) -> list[Triple]:
        """Parse the whole document and return its triples.

        Raises ``RdfSyntaxError`` on the first error; nothing is recovered.
        """
        if self._done:
            return list(self.triples)
        try:
            self._advance()
            while self.current.type is not TokenType.EOF:
                if self.current.type is TokenType.PREFIX:
                    self.parse_prefix()
                elif self.current.type is TokenType.BASE:
                    self.parse_base()
                else:
                    self.parse_statement()
        except ConstraintViolation as exc:
            raise self._error(str(exc), cause=exc) from exc
        self._done = True
        logger.debug("parsed %d triples from %s", len(self.triples), self.source)
        return list(self.triples)

    def parse_prefix(self) -> None:
        """Parse ``@prefix p: <iri> .`` (or ``PREFIX p: <iri>``) into the prefix map."""
        at_form = self.current.text.startswith("@")
        self._advance()
        token = self._expect(TokenType.PREFIXED_NAME, "expected prefix name after prefix directive")
        if not token.text.endswith(":") or token.text.count(":") != 1:
            raise self._error("prefix name must end with ':' and have no local part")
        self._advance()
        iri_token = self._expect(TokenType.IRI_REF, "expected IRI reference in prefix directive")
        # Stored unresolved; expansion resolves the full IRI against the base.
        self.prefixes[token.text[:-1]] = self._iri_ref_value(iri_token)
        self._advance()
        if at_form:
            self._expect(TokenType.DOT, "expected '.' after @prefix")
            self._advance()

    def parse_base(self) -> None:
        """Parse ``@base <iri> .``; a relative IRI resolves against the previous base."""
        at_form = self.current.text.startswith("@")
        self._advance()
        iri_token = self._expect(TokenType.IRI_REF, "expected IRI reference after base directive")
        value = self._iri_ref_value(iri_token)
        if not has_scheme(value) and self.base_uri is None:
            raise self._error("relative base IRI with no enclosing base")
        self.base_uri = self._resolve(value)
        logger.debug("base IRI set to %s", self.base_uri)
        self._advance()
        if at_form:
            self._expect(TokenType.DOT, "expected '.' after @base")
            self._advance()

    def parse_statement(self) -> None:
        """Parse ``subject predicateObjectList '.'``; ``[...] .`` alone is allowed."""
        if self.current.type is TokenType.OPEN_BRACKET:
            subject = self.parse_blank_node_property_list()
            if self.current.type is not TokenType.DOT:
                self.parse_predicate_object_list(subject)
        else:
            subject = self.parse_subject()
            self.parse_predicate_object_list(subject)
        self._expect(TokenType.DOT, "expected '.' to end statement")
        self._advance()

    def parse_predicate_object_list(self, subject: Subject) -> None:
        """Parse ``verb objectList (';' (verb objectList)?)*`` for ``subject``."""
        while True:
            predicate = self.parse_predicate()
            self.parse_object_list(subject, predicate)
            if self.current.type is not TokenType.SEMICOLON:
                return
            while self.current.type is TokenType.SEMICOLON:
                self._advance()
            if self.current.type not in VERB_TOKENS:
                return

    def parse_object_list(self, subject: Subject, predicate: IRI) -> None:
        """Parse ``object (',' object)*`` and record one triple per object."""
        while True:
            obj = self.parse_object()
            self.triples.append(Triple(subject, predicate, obj))
            if self.current.type is not TokenType.COMMA:
                return
            self._advance()

    def parse_subject(self) -> Subject:
        """Parse a subject: IRI, prefixed name, blank-node label or ``[...]``."""
        token = self.current
        if token.type is TokenType.IRI_REF:
            term = self._iri_ref_term(token)
            self._advance()
            return term
        if token.type is TokenType.PREFIXED_NAME:
            term = self._prefixed_name_term(token)
            self._advance()
            return term
        if token.type is TokenType.BLANK_NODE_LABEL:
            term = self._labeled_blank_node(token)
            self._advance()
            return term
        if token.type is TokenType.OPEN_BRACKET:
            return self.parse_blank_node_property_list()
        if token.type is TokenType.A:
            raise self._error("cannot use 'a' as a subject")
        if token.type is TokenType.LITERAL:
            raise self._error("a literal cannot be a subject")
        raise self._error(f"expected subject but found {token.type}")

    def parse_predicate(self) -> IRI:
        """Parse a verb: ``a``, an IRI or a prefixed name."""
        token = self.current
        if token.type is TokenType.A:
            self._advance()
            return RDF_TYPE
        if token.type is TokenType.IRI_REF:
            term = self._iri_ref_term(token)
            self._advance()
            return term
        if token.type is TokenType.PREFIXED_NAME:
            term = self._prefixed_name_term(token)
            self._advance()
            return term
        raise self._error(f"expected predicate but found {token.type}")

    def parse_object(self) -> Object:
        """Parse an object term, including literals and nested ``[...]``."""
        token = self.current
        if token.type is TokenType.IRI_REF:
            term = self._iri_ref_term(token)
            self._advance()
            return term
        if token.type is TokenType.PREFIXED_NAME:
            term = self._prefixed_name_term(token)
            self._advance()
            return term
        if token.type is TokenType.BLANK_NODE_LABEL:
            term = self._labeled_blank_node(token)
            self._advance()
            return term
        if token.type is TokenType.LITERAL:
            literal = self.parse_literal(token)
            self._advance()
            return literal
        if token.type is TokenType.OPEN_BRACKET:
            return self.parse_blank_node_property_list()
        raise self._error(f"expected object but found {token.type}")

    def parse_blank_node_property_list(self) -> BlankNode:
        """Parse ``[ predicateObjectList? ]`` and return its fresh blank node."""
        self._expect(TokenType.OPEN_BRACKET)
        node = BlankNode()
        self._advance()
        if self.current.type is not TokenType.CLOSE_BRACKET:
            self.parse_predicate_object_list(node)
        self._expect(TokenType.CLOSE_BRACKET, "expected ']' to close blank node property list")
        self._advance()
        return node

    def parse_literal(self, token: Token) -> Literal:
        """Build a literal from a raw literal token (delimiters, escapes, suffix)."""
        text = token.text
        quote = text[0]
        delimiter = quote * 3
        if text.startswith(delimiter) and len(text) >= 6:
            end = text.rfind(delimiter)
            if end < 3:
                raise self._error("invalid triple-quoted literal")
            body, suffix = text[3:end], text[end + 3 :]
        else:
            i = 1
            while i < len(text) and text[i] != quote:
                i += 2 if text[i] == "\\" else 1
            if i >= len(text):
                raise self._error("invalid literal")
            body, suffix = text[1:i], text[i + 1 :]

        value = unescape_string(body)
        try:
            if suffix.startswith("@"):
                return Literal(value, IRI(RDF_LANG_STRING_IRI), suffix[1:])
            if suffix.startswith("^^"):
                datatype = suffix[2:]
                if datatype.startswith("<"):
                    return Literal(value, IRI(self._resolve(self._decode_iri_ref(datatype))))
                return Literal(value, IRI(self._expand_prefixed_name(datatype)))
        except ConstraintViolation as exc:
            raise self._error(f"invalid literal: {exc.message}", cause=exc) from exc
        if suffix:
            raise self._error(f"unexpected literal suffix {suffix!r}")
        return Literal.string(value)

    def _advance(self) -> Token:
        """Move to the next token and return it."""
        self.current = self.tokenizer.next_token()
        return self.current

    def _expect(self, token_type: TokenType, message: str | None = None) -> Token:
        """Return the current token, failing unless it has ``token_type``."""
        if self.current.type is not token_type:
            raise self._error(message or f"expected {token_type} but found {self.current.type}")
        return self.current

    def _error(self, message: str, cause: BaseException | None = None) -> RdfSyntaxError:
        """Build a syntax error located at the current token."""
        return RdfSyntaxError(message, self.current.location, source=self.source, cause=cause)

    def _resolve(self, value: str) -> str:
        """Resolve ``value`` against the current base, if any."""
        if self.base_uri is None or has_scheme(value):
            return value
        try:
            return resolve_iri_reference(self.base_uri, value)
        except ValueError as exc:
            message = f"cannot resolve IRI {value!r} against {self.base_uri!r}"
            raise self._error(message, cause=exc) from exc

    def _decode_iri_ref(self, text: str) -> str:
        """Decode the body of ``<...>``; escapes may not produce forbidden characters."""
        value = unescape_string(text[1:-1], named=False)
        for ch in value:
            if not is_iriref_char(ch):
                raise self._error(f"invalid escaped character {ch!r} in IRI")
        return value

    def _iri_ref_value(self, token: Token) -> str:
        """Return the decoded, unresolved value of an IRI token."""
        return self._decode_iri_ref(token.text)

    def _make_iri(self, value: str) -> IRI:
        """Construct an IRI, reporting a violation as a syntax error."""
        try:
            return IRI(value)
        except ConstraintViolation as exc:
            raise self._error(f"invalid IRI {value!r}: {exc.message}", cause=exc) from exc

    def _iri_ref_term(self, token: Token) -> IRI:
        return self._make_iri(self._resolve(self._iri_ref_value(token)))

    def _expand_prefixed_name(self, text: str) -> str:
        """Expand ``prefix:local`` with the prefix map and resolve the result."""
        prefix, _, local = text.partition(":")
        namespace = self.prefixes.get(prefix)
        if namespace is None:
            raise self._error(f"unknown prefix {prefix!r}")
        return self._resolve(namespace + unescape_pn_local(local))

    def _prefixed_name_term(self, token: Token) -> IRI:
        return self._make_iri(self._expand_prefixed_name(token.text))

    def _labeled_blank_node(self, token: Token) -> BlankNode:
        """Return the document's blank node for ``_:label``, creating it once."""
        label = token.text[2:]
        node = self.blank_nodes.get(label)
        if node is None:
            node = self.blank_nodes[label] = BlankNode()
        return node


def parse_turtle(
    text: str,
    base_uri: str | None = None,
    source: str = "<string>",
    prefixes: Mapping[str, str] | None = None,
) -> list[Triple]:
    """Parse Turtle text and return its triples in encounter order."""
    return TurtleParser(text, base_uri=base_uri, source=source, prefixes=prefixes).parse()
