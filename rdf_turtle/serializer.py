"""Compact Turtle serializer.

Output layout::

    @prefix ex: <http://example.com/> .

    ex:s a ex:C ;
        ex:p "one", "two" .

Subjects are grouped in first-encounter order and, inside each subject,
predicates too. Blank nodes get per-call labels ``b0``, ``b1``, ... in the
order they are first seen.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from .escapes import escape_pn_local, escape_string
from .grammar import is_valid_prefix_label
from .iri import encode_iri_ref
from .namespaces import DEFAULT_NAMESPACE_MAPPINGS, NamespaceMappings
from .terms import IRI, BlankNode, Graph, Literal, Object, Subject, Triple
from .vocab import IMPLICIT_DATATYPES, RDF_TYPE


HTTPS = "https://"
HTTP = "http://"


def label_blank_nodes(triples: Iterable[Triple]) -> dict[BlankNode, str]:
    """Assign ``b0``, ``b1``, ... to blank nodes in first-encounter order."""
    labels: dict[BlankNode, str] = {}
    for subject, _, obj in triples:
        for node in (subject, obj):
            if isinstance(node, BlankNode) and node not in labels:
                labels[node] = f"b{len(labels)}"
    return labels


def iter_prefixable_iris(triples: Iterable[Triple]) -> Iterable[IRI]:
    """Yield every IRI the output may abbreviate, in order, with repeats."""
    for subject, predicate, obj in triples:
        if isinstance(subject, IRI):
            yield subject
        if predicate != RDF_TYPE:
            yield predicate
        if isinstance(obj, IRI):
            yield obj
        elif isinstance(obj, Literal) and obj.datatype not in IMPLICIT_DATATYPES:
            yield obj.datatype


class TurtleSerializer:
    """Writes graphs as prefixed, grouped Turtle text.

    ``namespace_mappings`` is the table of candidate prefixes (the well-known
    vocabularies by default). ``logger`` receives non-fatal diagnostics, such
    as an ``https://`` IRI whose registered namespace is ``http://``.
    A serializer keeps no state between :meth:`write` calls.
    """

    def __init__(
        self,
        namespace_mappings: Mapping[str, str] | None = None,
        logger: logging.Logger | None = None,
    ):
        if namespace_mappings is None:
            namespace_mappings = DEFAULT_NAMESPACE_MAPPINGS
        self.namespace_mappings = namespace_mappings
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def write(
        self,
        graph: Graph | Iterable[Triple],
        base_uri: str | None = None,
        custom_prefixes: Mapping[str, str] | None = None,
    ) -> str:
        """Serialize ``graph`` to Turtle text."""
        text, _ = self.write_with_meta(graph, base_uri=base_uri, custom_prefixes=custom_prefixes)
        return text

    def write_with_meta(
        self,
        graph: Graph | Iterable[Triple],
        base_uri: str | None = None,
        custom_prefixes: Mapping[str, str] | None = None,
    ) -> tuple[str, dict[str, int]]:
        """Serialize ``graph`` and return the text with output counters."""
        if not isinstance(graph, Graph):
            graph = Graph(graph)
        if base_uri is not None:
            self.logger.debug("base IRI %s is informational; IRIs are written in full", base_uri)

        triples = list(graph)
        meta = {
            "prefixes_emitted": 0,
            "subjects_serialized": 0,
            "triples_serialized": len(triples),
            "blank_nodes_labeled": 0,
        }
        if not triples:
            return "", meta

        labels = label_blank_nodes(triples)
        candidates = self.candidate_namespaces(custom_prefixes)
        choices, used = self.choose_prefixes(triples, candidates)

        lines: list[str] = []
        for prefix, namespace in sorted(used.items()):
            lines.append(f"@prefix {prefix}: {encode_iri_ref(namespace)} .")
        if lines:
            lines.append("")

        blocks = build_statement_blocks(triples, _TermFormatter(choices, labels))
        lines.append("\n\n".join(blocks))

        meta["prefixes_emitted"] = len(used)
        meta["subjects_serialized"] = len(blocks)
        meta["blank_nodes_labeled"] = len(labels)
        return "\n".join(lines) + "\n", meta

    def candidate_namespaces(self, custom_prefixes: Mapping[str, str] | None) -> dict[str, str]:
        """Return ``namespace -> prefix`` for every usable candidate.

        Custom prefixes override the configured table; when two prefixes bind
        the same namespace, a custom one wins, then the alphabetically first.
        """
        custom = dict(custom_prefixes or {})
        merged = {**dict(self.namespace_mappings), **custom}
        ordered = sorted(merged.items(), key=lambda item: (item[0] not in custom, item[0]))

        candidates: dict[str, str] = {}
        for prefix, namespace in ordered:
            if not is_valid_prefix_label(prefix):
                self.logger.warning("ignoring invalid prefix label %r for %s", prefix, namespace)
                continue
            candidates.setdefault(namespace, prefix)
        return candidates

    def choose_prefixes(
        self,
        triples: list[Triple],
        candidates: dict[str, str],
    ) -> tuple[dict[str, tuple[str, str]], dict[str, str]]:
        """Pick the abbreviation of every prefixable IRI.

        Returns ``(choices, used)``: ``choices`` maps an IRI string to its
        ``(prefix, escaped_local)`` pair, ``used`` maps each emitted prefix to
        its namespace.
        """
        choices: dict[str, tuple[str, str]] = {}
        used: dict[str, str] = {}
        seen: set[str] = set()
        warned: set[str] = set()

        for iri in iter_prefixable_iris(triples):
            value = iri.value
            if value in seen:
                continue
            seen.add(value)
            match = best_namespace_match(value, candidates)
            if match is None:
                self._check_https_mismatch(value, candidates, warned)
                continue
            namespace, local = match
            prefix = candidates[namespace]
            choices[value] = (prefix, local)
            used[prefix] = namespace
        return choices, used

    def _check_https_mismatch(self, value: str, candidates: dict[str, str], warned: set[str]) -> None:
        """Warn once per namespace when an https IRI misses an http-registered prefix."""
        if not value.startswith(HTTPS):
            return
        match = best_namespace_match(HTTP + value[len(HTTPS) :], candidates)
        if match is None:
            return
        namespace = match[0]
        if namespace in warned:
            return
        warned.add(namespace)
        self.logger.warning(
            "IRI %s uses https:// but prefix %r is registered as %s; writing the IRI in full",
            value,
            candidates[namespace],
            namespace,
        )


def best_namespace_match(value: str, candidates: Mapping[str, str]) -> tuple[str, str] | None:
    """Return ``(namespace, escaped_local)`` for the longest usable namespace.

    A namespace is usable when it is a string prefix of ``value`` and the
    remainder is a legal prefixed-name local part with no ``/`` or ``#``.
    """
    best: tuple[str, str] | None = None
    for namespace in candidates:
        if not value.startswith(namespace):
            continue
        if best is not None and len(namespace) <= len(best[0]):
            continue
        local = value[len(namespace) :]
        if "/" in local or "#" in local:
            continue
        escaped = escape_pn_local(local)
        if escaped is None:
            continue
        best = (namespace, escaped)
    return best


class _TermFormatter:
    """Renders terms with a fixed prefix choice and blank-node labelling."""
    def __init__(self, choices: dict[str, tuple[str, str]], labels: dict[BlankNode, str]):
        self.choices = choices
        self.labels = labels

    def iri(self, iri: IRI) -> str:
        """Render ``iri`` as ``prefix:local`` when chosen, else as ``<...>``."""
        choice = self.choices.get(iri.value)
        if choice is None:
            return encode_iri_ref(iri.value)
        prefix, local = choice
        return f"{prefix}:{local}"

    def predicate(self, predicate: IRI) -> str:
        """Render a predicate; ``rdf:type`` becomes ``a``."""
        if predicate == RDF_TYPE:
            return "a"
        return self.iri(predicate)

    def node(self, node: Subject | Object) -> str:
        """Render a subject or object term."""
        if isinstance(node, IRI):
            return self.iri(node)
        if isinstance(node, BlankNode):
            return f"_:{self.labels[node]}"
        if isinstance(node, Literal):
            return self.literal(node)
        raise TypeError(f"unsupported node type: {type(node)!r}")

    def literal(self, literal: Literal) -> str:
        """Render a literal with its language tag or non-implicit datatype."""
        text = f'"{escape_string(literal.value)}"'
        if literal.language is not None:
            return f"{text}@{literal.language}"
        if literal.datatype in IMPLICIT_DATATYPES:
            return text
        return f"{text}^^{self.iri(literal.datatype)}"


def build_statement_blocks(triples: list[Triple], fmt: _TermFormatter) -> list[str]:
    """Render one ``subject predicate objects ; ... .`` block per subject."""
    grouped: dict[Subject, dict[IRI, list[Object]]] = {}
    for subject, predicate, obj in triples:
        grouped.setdefault(subject, {}).setdefault(predicate, []).append(obj)

    blocks: list[str] = []
    for subject, predicates in grouped.items():
        parts = [
            f"{fmt.predicate(predicate)} {', '.join(fmt.node(obj) for obj in objects)}"
            for predicate, objects in predicates.items()
        ]
        blocks.append(f"{fmt.node(subject)} " + " ;\n    ".join(parts) + " .")
    return blocks


def serialize_turtle(
    graph: Graph | Iterable[Triple],
    base_uri: str | None = None,
    custom_prefixes: Mapping[str, str] | None = None,
    namespace_mappings: NamespaceMappings | Mapping[str, str] | None = None,
) -> str:
    """Serialize ``graph`` to Turtle using a one-off :class:`TurtleSerializer`."""
    serializer = TurtleSerializer(namespace_mappings=namespace_mappings)
    return serializer.write(graph, base_uri=base_uri, custom_prefixes=custom_prefixes)
