from __future__ import annotations

import logging

import pytest

from rdf_turtle import IRI, BlankNode, Literal, RdfSyntaxError, Triple, parse, parse_graph
from rdf_turtle.parser import TurtleParser
from rdf_turtle.vocab import RDF_TYPE, XSD_INTEGER

EX = "http://example.com/"


def ex(local: str) -> IRI:
    return IRI(EX + local)


def test_prefixed_statement() -> None:
    triples = parse('@prefix ex: <http://example.com/> .\nex:s ex:p "o" .')
    assert triples == [Triple(ex("s"), ex("p"), Literal.string("o"))]


def test_full_iris() -> None:
    triples = parse('<http://example.com/foo> <http://example.com/bar> "baz" .')
    assert triples == [Triple(ex("foo"), ex("bar"), Literal("baz"))]


def test_a_expands_to_rdf_type() -> None:
    [triple] = parse("<http://ex/s> a <http://ex/C> .")
    assert triple.predicate == RDF_TYPE


def test_a_as_subject_fails() -> None:
    with pytest.raises(RdfSyntaxError) as excinfo:
        parse("a <http://ex/p> <http://ex/o> .")
    assert excinfo.value.token == "a"
    assert (excinfo.value.line, excinfo.value.column) == (1, 1)


def test_literal_subject_fails() -> None:
    with pytest.raises(RdfSyntaxError):
        parse('"s" <http://ex/p> <http://ex/o> .')


def test_relative_iris_resolve_against_base_argument() -> None:
    [triple] = parse("<foo> <bar> <baz> .", base_uri="http://example.org/")
    assert list(triple) == [
        IRI("http://example.org/foo"),
        IRI("http://example.org/bar"),
        IRI("http://example.org/baz"),
    ]


def test_relative_iri_without_base_fails() -> None:
    with pytest.raises(RdfSyntaxError) as excinfo:
        parse("<foo> <http://ex/p> <http://ex/o> .")
    assert excinfo.value.cause is not None
    assert excinfo.value.token == "<foo>"


def test_base_directive_applies_forward_only() -> None:
    text = """
    <http://ex/first> <http://ex/p> <a> .
    @base <http://other.org/dir/> .
    <b> <http://ex/p> <c> .
    @base <sub/> .
    <d> <http://ex/p> <../e> .
    """
    triples = parse(text, base_uri="http://example.org/")
    assert triples[0].object == IRI("http://example.org/a")
    assert triples[1].subject == IRI("http://other.org/dir/b")
    assert triples[2].subject == IRI("http://other.org/dir/sub/d")
    assert triples[2].object == IRI("http://other.org/dir/e")


def test_relative_base_without_enclosing_base_fails() -> None:
    with pytest.raises(RdfSyntaxError):
        parse("@base <relative/> .")


def test_sparql_style_directives() -> None:
    text = "PREFIX ex: <http://example.com/>\nBASE <http://example.com/>\nex:s ex:p <o> ."
    assert parse(text) == [Triple(ex("s"), ex("p"), ex("o"))]


def test_prefix_redefinition_overrides() -> None:
    text = (
        "@prefix ex: <http://one/> .\nex:a ex:p ex:b .\n"
        "@prefix ex: <http://two/> .\nex:a ex:p ex:b ."
    )
    first, second = parse(text)
    assert first.subject == IRI("http://one/a")
    assert second.subject == IRI("http://two/a")


def test_empty_prefix() -> None:
    [triple] = parse("@prefix : <http://ex/> .\n:s :p : .")
    assert triple.object == IRI("http://ex/")


def test_relative_prefix_resolves_against_base() -> None:
    [triple] = parse("@prefix v: <vocab#> .\nv:s v:p v:o .", base_uri="http://example.org/doc")
    assert triple.subject == IRI("http://example.org/vocab#s")


def test_unknown_prefix_fails_at_token() -> None:
    with pytest.raises(RdfSyntaxError) as excinfo:
        parse("@prefix ex: <http://ex/> .\nex:s nope:p ex:o .")
    assert excinfo.value.token == "nope:p"
    assert (excinfo.value.line, excinfo.value.column) == (2, 6)


def test_local_name_escapes_and_percent_encoding() -> None:
    [triple] = parse("@prefix ex: <http://ex/> .\nex:a\\~b ex:p ex:%20x .")
    assert triple.subject == IRI("http://ex/a~b")
    assert triple.object == IRI("http://ex/%20x")


def test_predicate_object_lists() -> None:
    text = """
    @prefix ex: <http://example.com/> .
    ex:s ex:p ex:a, ex:b ;
        ex:q "x" ;
        a ex:C ;
    .
    """
    triples = parse(text)
    assert [(t.predicate, t.object) for t in triples] == [
        (ex("p"), ex("a")),
        (ex("p"), ex("b")),
        (ex("q"), Literal("x")),
        (RDF_TYPE, ex("C")),
    ]
    assert all(t.subject == ex("s") for t in triples)


def test_blank_node_labels_share_identity_within_document() -> None:
    text = "_:x <http://ex/p> _:y .\n_:y <http://ex/p> _:x ."
    first, second = parse(text)
    assert isinstance(first.subject, BlankNode)
    assert first.subject is second.object
    assert first.object is second.subject
    assert first.subject != first.object


def test_blank_node_labels_do_not_leak_between_documents() -> None:
    [one] = parse("_:x <http://ex/p> <http://ex/o> .")
    [two] = parse("_:x <http://ex/p> <http://ex/o> .")
    assert one.subject != two.subject


def test_anonymous_blank_node_subject_with_seeded_prefix() -> None:
    [triple] = parse("[ :a :b ] .", prefixes={"": "http://ex/"})
    assert isinstance(triple.subject, BlankNode)
    assert triple.predicate == IRI("http://ex/a")
    assert triple.object == IRI("http://ex/b")


def test_each_anonymous_blank_node_is_fresh() -> None:
    first, second = parse("<http://ex/s> <http://ex/p> [], [] .")
    assert isinstance(first.object, BlankNode)
    assert first.object != second.object


def test_nested_blank_nodes_emit_in_encounter_order() -> None:
    text = """
    @prefix ex: <http://example.com/> .
    ex:alice ex:knows [
        ex:name "Bob" ;
        ex:address [ ex:city "Paris" ]
    ] ;
        ex:age "30"^^<http://www.w3.org/2001/XMLSchema#integer> .
    """
    triples = parse(text)
    assert len(triples) == 5
    name, city, address, knows, age = triples
    assert name.predicate == ex("name")
    assert city.object == Literal("Paris")
    assert address.object is city.subject
    assert address.subject is name.subject
    assert knows.subject == ex("alice")
    assert knows.object is name.subject
    assert age.object == Literal("30", XSD_INTEGER)


def test_blank_node_property_list_as_subject_with_predicates() -> None:
    [inner, outer] = parse("[ <http://ex/p> <http://ex/o> ] <http://ex/q> <http://ex/r> .")
    assert inner.subject is outer.subject


def test_literal_forms() -> None:
    text = r"""
    @prefix ex: <http://example.com/> .
    @prefix xsd: <http://www.w3.org/2001/XMLSchema#> .
    ex:s ex:p "plain", 'single', "chat"@fr, "5"^^xsd:integer,
        "tab\tnew\nquote\"unié\U0001F600",
        "x"^^<http://example.com/dt> .
    """
    objects = [t.object for t in parse(text)]
    assert objects == [
        Literal("plain"),
        Literal("single"),
        Literal.with_language("chat", "fr"),
        Literal.typed("5", "integer"),
        Literal('tab\tnew\nquote"unié\U0001F600'),
        Literal("x", ex("dt")),
    ]


def test_language_tag_kept_as_written() -> None:
    [triple] = parse('<http://ex/s> <http://ex/p> "colour"@en-GB .')
    assert triple.object.language == "en-GB"


def test_multiline_literal() -> None:
    text = '<http://ex/s> <http://ex/p> """first line\nsecond "quoted" line\n""" .'
    [triple] = parse(text)
    assert triple.object.value == 'first line\nsecond "quoted" line\n'


def test_long_literal_ending_in_quote() -> None:
    [triple] = parse('<http://ex/s> <http://ex/p> """ends with ""quote"""" .')
    assert triple.object.value == 'ends with ""quote"'


def test_incomplete_unicode_escape_passes_through() -> None:
    [triple] = parse(r'<http://ex/s> <http://ex/p> "bad \u12 escape" .')
    assert triple.object.value == "bad \\u12 escape"


def test_iri_with_unicode_escape() -> None:
    [triple] = parse(r"<http://ex/caf\u00E9> <http://ex/p> <http://ex/o> .")
    assert triple.subject == IRI("http://ex/café")


def test_malformed_relative_iri_fails_at_token() -> None:
    with pytest.raises(RdfSyntaxError) as excinfo:
        parse("<//[x/a> <http://ex/p> <http://ex/o> .", base_uri="http://example.org/")
    assert excinfo.value.token == "<//[x/a>"
    assert isinstance(excinfo.value.cause, ValueError)


def test_malformed_base_fails_as_syntax_error() -> None:
    with pytest.raises(RdfSyntaxError) as excinfo:
        parse("<a> <http://ex/p> <http://ex/o> .", base_uri="http://[x/")
    assert excinfo.value.token == "<a>"
    assert "cannot resolve IRI" in excinfo.value.message


@pytest.mark.parametrize(
    "escape", ["\\u0009", "\\u0020", "\\u000A", "\\u003C", "\\u007B", "\\U00000000"]
)
def test_escape_decoding_to_forbidden_iri_character_fails(escape: str) -> None:
    text = f"<a{escape}b> <http://ex/p> <http://ex/o> ."
    with pytest.raises(RdfSyntaxError) as excinfo:
        parse(text, base_uri="http://example.org/")
    assert "invalid escaped character" in excinfo.value.message
    assert excinfo.value.token == f"<a{escape}b>"


def test_escaped_tab_in_absolute_iri_fails() -> None:
    with pytest.raises(RdfSyntaxError):
        parse(r"<http://ex/a\u0009b> <http://ex/p> <http://ex/o> .")


def test_escaped_space_in_datatype_fails() -> None:
    with pytest.raises(RdfSyntaxError) as excinfo:
        parse(r'<http://ex/s> <http://ex/p> "x"^^<http://ex/d\u0020t> .')
    assert "invalid escaped character" in excinfo.value.message


def test_escaped_forbidden_character_in_prefix_fails() -> None:
    with pytest.raises(RdfSyntaxError):
        parse(r"@prefix ex: <http://ex/\u007C> .")


def test_comments_are_ignored() -> None:
    text = "# header\n<http://ex/s> <http://ex/p> <http://ex/o> . # trailing\n# end"
    assert len(parse(text)) == 1


def test_missing_final_dot_fails() -> None:
    with pytest.raises(RdfSyntaxError) as excinfo:
        parse("<http://ex/s> <http://ex/p> <http://ex/o>")
    assert "'.'" in excinfo.value.message


def test_unclosed_bracket_fails() -> None:
    with pytest.raises(RdfSyntaxError):
        parse("<http://ex/s> <http://ex/p> [ <http://ex/q> <http://ex/r> .")


def test_literal_predicate_fails() -> None:
    with pytest.raises(RdfSyntaxError):
        parse('<http://ex/s> "p" <http://ex/o> .')


def test_syntax_error_reports_source_name() -> None:
    with pytest.raises(RdfSyntaxError) as excinfo:
        parse("<http://ex/s> ;", source="data.ttl")
    assert excinfo.value.source == "data.ttl"
    assert str(excinfo.value).startswith("data.ttl:1:15: ")


def test_parse_graph_returns_graph() -> None:
    graph = parse_graph("<http://ex/s> <http://ex/p> <http://ex/o> .")
    assert len(graph) == 1


def test_empty_document() -> None:
    assert parse("") == []
    assert parse("# only a comment\n") == []


def test_parser_logs_triple_count(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="rdf_turtle.parser")
    TurtleParser("<http://ex/s> <http://ex/p> <http://ex/o> .", source="doc.ttl").parse()
    assert "parsed 1 triples from doc.ttl" in caplog.text
