"""``rdf-turtle`` command: parse Turtle, then validate it or rewrite it normalized."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .errors import RdfError
from .grammar import is_valid_prefix_label
from .parser import parse_turtle
from .serializer import TurtleSerializer
from .terms import IRI, BlankNode, Literal, Triple, validate_absolute_iri

logger = logging.getLogger(__name__)

STATS_ORDER = [
    "triples",
    "subjects_unique",
    "predicates_unique",
    "objects_unique",
    "iris_unique",
    "blank_nodes_unique",
    "literals_unique",
    "triples_serialized",
    "subjects_serialized",
    "prefixes_emitted",
    "blank_nodes_labeled",
]


def read_input(path: str) -> str:
    """Read UTF-8 input text from a file or stdin."""
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def write_output(path: str, data: str) -> None:
    """Write output text to a file or stdout."""
    if path == "-":
        sys.stdout.write(data)
        return
    Path(path).write_text(data, encoding="utf-8")


def guess_base_iri(path: str, explicit_base: str | None) -> str | None:
    """Return ``--base`` if given, else the input file's ``file:`` URI."""
    if explicit_base is not None:
        return explicit_base
    if path == "-":
        return None
    return Path(path).resolve().as_uri()


def parse_prefix_binding(raw: str) -> tuple[str, str]:
    """Split one ``PREFIX=IRI`` option value."""
    if "=" not in raw:
        raise ValueError(f"invalid --prefix value '{raw}', expected PREFIX=IRI")
    prefix, iri = raw.split("=", 1)
    if not is_valid_prefix_label(prefix):
        raise ValueError(f"invalid prefix label '{prefix}' in --prefix")
    try:
        validate_absolute_iri(iri)
    except ValueError as exc:
        raise ValueError(f"invalid IRI for --prefix '{raw}': {exc}") from exc
    return prefix, iri


def normalize_manual_prefixes(raw_values: list[str]) -> dict[str, str]:
    """Collect ``--prefix`` bindings; repeating a prefix with another IRI is an error."""
    by_prefix: dict[str, str] = {}
    for raw in raw_values:
        prefix, iri = parse_prefix_binding(raw)
        existing = by_prefix.get(prefix)
        if existing is not None and existing != iri:
            raise ValueError(f"conflicting --prefix for '{prefix}': '{existing}' vs '{iri}'")
        by_prefix[prefix] = iri
    return by_prefix


def compute_graph_stats(triples: list[Triple]) -> dict[str, int]:
    """Count triples and distinct terms of a parsed document."""
    subjects: set = set()
    predicates: set = set()
    objects: set = set()
    iris: set[IRI] = set()
    blank_nodes: set[BlankNode] = set()
    literals: set[Literal] = set()

    for triple in triples:
        subjects.add(triple.subject)
        predicates.add(triple.predicate)
        objects.add(triple.object)
        for term in triple:
            if isinstance(term, IRI):
                iris.add(term)
            elif isinstance(term, BlankNode):
                blank_nodes.add(term)
            else:
                literals.add(term)
                iris.add(term.datatype)

    return {
        "triples": len(triples),
        "subjects_unique": len(subjects),
        "predicates_unique": len(predicates),
        "objects_unique": len(objects),
        "iris_unique": len(iris),
        "blank_nodes_unique": len(blank_nodes),
        "literals_unique": len(literals),
    }


def emit_stats(stats: dict[str, int]) -> None:
    """Print collected statistics to stderr."""
    print("stats:", file=sys.stderr)
    for key in STATS_ORDER:
        if key in stats:
            print(f"{key}: {stats[key]}", file=sys.stderr)
    for key in sorted(stats):
        if key not in STATS_ORDER:
            print(f"{key}: {stats[key]}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser for ``rdf-turtle``."""
    parser = argparse.ArgumentParser(
        prog="rdf-turtle",
        description="Parse Turtle and write it back as compact, prefixed Turtle.",
        epilog="--validate-only parses input only and does not write output.",
    )
    parser.add_argument("input", help="Input file path, or '-' for stdin.")
    parser.add_argument(
        "output",
        nargs="?",
        default="-",
        help="Output file path, or '-' for stdout (default).",
    )
    parser.add_argument(
        "--base",
        default=None,
        help="Base IRI for resolving relative IRIs (default: input file URI).",
    )
    parser.add_argument(
        "--prefix",
        action="append",
        default=[],
        metavar="PREFIX=IRI",
        help="Extra prefix candidate for output; may be repeated.",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Parse input and report errors without writing output.",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print graph and serialization counts to stderr.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the ``rdf-turtle`` command-line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        custom_prefixes = normalize_manual_prefixes(args.prefix)
        input_text = read_input(args.input)
        source_name = args.input if args.input != "-" else "<stdin>"
        base_iri = guess_base_iri(args.input, args.base)
        logger.debug("reading %s with base %s", source_name, base_iri)

        triples = parse_turtle(input_text, base_uri=base_iri, source=source_name)
        if args.validate_only:
            if args.stats:
                emit_stats(compute_graph_stats(triples))
            return 0

        output_text, meta = TurtleSerializer().write_with_meta(
            triples, base_uri=base_iri, custom_prefixes=custom_prefixes
        )
        write_output(args.output, output_text)

        if args.stats:
            stats = compute_graph_stats(triples)
            stats.update(meta)
            emit_stats(stats)
        return 0
    except (RdfError, ValueError, OSError) as exc:
        parser.exit(status=1, message=f"Error: {exc}\n")


if __name__ == "__main__":
    raise SystemExit(main())
