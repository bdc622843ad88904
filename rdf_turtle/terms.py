"""RDF 1.1 term model: IRIs, blank nodes, literals, triples and graphs.

All values are immutable. IRIs and literals compare by value; blank nodes
compare by identity only, so two separately created blank nodes are never
equal no matter what is said about them.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Union

from .errors import ConstraintViolation
from .namespaces import RDF_LANG_STRING_IRI, XSD_NS, XSD_STRING_IRI

SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*")


def validate_absolute_iri(value: str) -> None:
    """Raise ``ConstraintViolation`` unless ``value`` is an absolute IRI.

    This is a scheme check only, not full RFC 3987 validation.
    """
    if not value:
        raise ConstraintViolation("IRI cannot be empty", constraint="absolute-iri")
    scheme_end = value.find(":")
    if scheme_end <= 0:
        raise ConstraintViolation(
            f"IRI must be absolute with a scheme followed by a colon: {value!r}",
            constraint="absolute-iri",
        )
    if not SCHEME_RE.fullmatch(value[:scheme_end]):
        raise ConstraintViolation(
            "IRI scheme must start with a letter and contain only letters, "
            f"digits, '+', '-' or '.': {value!r}",
            constraint="scheme-format",
        )


@dataclass(frozen=True)
class IRI:
    """Absolute IRI. Equality and hashing are both case-sensitive."""
    value: str

    def __post_init__(self) -> None:
        validate_absolute_iri(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, eq=False)
class BlankNode:
    """Anonymous resource identified only by object identity.

    ``eq=False`` keeps the inherited identity-based ``__eq__``/``__hash__``;
    serialization labels live outside the node.
    """

    def __repr__(self) -> str:
        return f"BlankNode({id(self):#x})"


@dataclass(frozen=True)
class Literal:
    """Lexical value with a datatype and an optional language tag.

    A language tag is present iff the datatype is ``rdf:langString``. When the
    datatype is omitted it defaults to ``rdf:langString`` for tagged values and
    ``xsd:string`` otherwise.
    """
    value: str
    datatype: IRI = None  # type: ignore[assignment]
    language: str | None = None

    def __post_init__(self) -> None:
        if self.datatype is None:
            default = RDF_LANG_STRING_IRI if self.language is not None else XSD_STRING_IRI
            object.__setattr__(self, "datatype", IRI(default))
        elif not isinstance(self.datatype, IRI):
            raise ConstraintViolation(
                f"literal datatype must be an IRI, got {type(self.datatype).__name__}",
                constraint="term-position",
            )
        if self.language == "":
            raise ConstraintViolation(
                "language tag must not be empty", constraint="language-datatype"
            )
        is_lang_string = self.datatype.value == RDF_LANG_STRING_IRI
        if (self.language is not None) != is_lang_string:
            raise ConstraintViolation(
                "language-tagged literals must use rdf:langString, and "
                "rdf:langString literals must carry a language tag",
                constraint="language-datatype",
            )

    @classmethod
    def string(cls, value: str) -> Literal:
        """Create a plain ``xsd:string`` literal."""
        return cls(value, IRI(XSD_STRING_IRI))

    @classmethod
    def typed(cls, value: str, xsd_type: str) -> Literal:
        """Create a literal typed with ``xsd:<xsd_type>``, e.g. ``"integer"``."""
        return cls(value, IRI(f"{XSD_NS}{xsd_type}"))

    @classmethod
    def with_language(cls, value: str, language: str) -> Literal:
        """Create an ``rdf:langString`` literal tagged with ``language``."""
        return cls(value, IRI(RDF_LANG_STRING_IRI), language)


Subject = Union[IRI, BlankNode]
Predicate = IRI
Object = Union[IRI, BlankNode, Literal]
Term = Object

SUBJECT_TYPES = (IRI, BlankNode)
OBJECT_TYPES = (IRI, BlankNode, Literal)


@dataclass(frozen=True)
class Triple:
    """One ``(subject, predicate, object)`` statement."""
    subject: Subject
    predicate: Predicate
    object: Object

    def __post_init__(self) -> None:
        if not isinstance(self.subject, SUBJECT_TYPES):
            raise ConstraintViolation(
                f"subject must be an IRI or blank node, got {self.subject!r}",
                constraint="term-position",
            )
        if not isinstance(self.predicate, IRI):
            raise ConstraintViolation(
                f"predicate must be an IRI, got {self.predicate!r}",
                constraint="term-position",
            )
        if not isinstance(self.object, OBJECT_TYPES):
            raise ConstraintViolation(
                f"object must be an IRI, blank node or literal, got {self.object!r}",
                constraint="term-position",
            )

    def __iter__(self) -> Iterator[Term]:
        yield self.subject
        yield self.predicate
        yield self.object


@dataclass(frozen=True)
class Graph:
    """Ordered multiset of triples.

    Duplicates are kept. Insertion order has no meaning in RDF but decides
    the grouping order of serialized output. "Adding" returns a new graph.
    """
    triples: tuple[Triple, ...] = field(default=())

    def __post_init__(self) -> None:
        triples = tuple(self.triples)
        for triple in triples:
            if not isinstance(triple, Triple):
                raise TypeError(f"graph members must be Triple, got {type(triple)!r}")
        object.__setattr__(self, "triples", triples)

    def __iter__(self) -> Iterator[Triple]:
        return iter(self.triples)

    def __len__(self) -> int:
        return len(self.triples)

    def with_triple(self, triple: Triple) -> Graph:
        return Graph(self.triples + (triple,))

    def with_triples(self, triples: Iterable[Triple]) -> Graph:
        return Graph(self.triples + tuple(triples))

    def find_triples(
        self,
        subject: Subject | None = None,
        predicate: Predicate | None = None,
        obj: Object | None = None,
    ) -> list[Triple]:
        """Return matching triples in graph order; ``None`` matches anything."""
        return [
            triple
            for triple in self.triples
            if (subject is None or triple.subject == subject)
            and (predicate is None or triple.predicate == predicate)
            and (obj is None or triple.object == obj)
        ]
