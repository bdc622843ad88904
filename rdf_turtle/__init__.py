"""RDF 1.1 terms plus a Turtle parser and compact Turtle serializer."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .errors import ConstraintViolation, RdfError, RdfSyntaxError, SourceLocation
from .namespaces import DEFAULT_NAMESPACE_MAPPINGS, WELL_KNOWN_PREFIXES, NamespaceMappings
from .parser import TurtleParser, parse_turtle
from .serializer import TurtleSerializer, serialize_turtle
from .terms import IRI, BlankNode, Graph, Literal, Object, Predicate, Subject, Term, Triple
from .vocab import RDF_LANG_STRING, RDF_TYPE, XSD_STRING

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_NAMESPACE_MAPPINGS",
    "IRI",
    "RDF_LANG_STRING",
    "RDF_TYPE",
    "WELL_KNOWN_PREFIXES",
    "XSD_STRING",
    "BlankNode",
    "ConstraintViolation",
    "Graph",
    "Literal",
    "NamespaceMappings",
    "Object",
    "Predicate",
    "RdfError",
    "RdfSyntaxError",
    "SourceLocation",
    "Subject",
    "Term",
    "Triple",
    "TurtleParser",
    "TurtleSerializer",
    "parse",
    "parse_graph",
    "parse_turtle",
    "serialize_turtle",
    "write",
]


def parse(
    text: str,
    base_uri: str | None = None,
    source: str = "<string>",
    prefixes: Mapping[str, str] | None = None,
) -> list[Triple]:
    """Parse Turtle ``text`` into a list of triples."""
    return parse_turtle(text, base_uri=base_uri, source=source, prefixes=prefixes)


def parse_graph(
    text: str,
    base_uri: str | None = None,
    source: str = "<string>",
    prefixes: Mapping[str, str] | None = None,
) -> Graph:
    """Parse Turtle ``text`` into a :class:`Graph`."""
    return Graph(parse(text, base_uri=base_uri, source=source, prefixes=prefixes))


def write(
    graph: Graph | Iterable[Triple],
    base_uri: str | None = None,
    custom_prefixes: Mapping[str, str] | None = None,
    namespace_mappings: Mapping[str, str] | None = None,
) -> str:
    """Serialize ``graph`` to Turtle text."""
    return serialize_turtle(
        graph,
        base_uri=base_uri,
        custom_prefixes=custom_prefixes,
        namespace_mappings=namespace_mappings,
    )
