from __future__ import annotations

import pytest

from rdf_turtle.escapes import escape_pn_local, escape_string, unescape_pn_local, unescape_string


def test_escape_string_named_escapes() -> None:
    assert escape_string('a\nb"c\\d\te\rf\bg\fh') == 'a\\nb\\"c\\\\d\\te\\rf\\bg\\fh'


def test_escape_string_non_ascii() -> None:
    assert escape_string("café") == "caf\\u00E9"
    assert escape_string("\U0001F600") == "\\U0001F600"
    assert escape_string("\x7f") == "\\u007F"
    assert escape_string("plain ASCII ~!") == "plain ASCII ~!"


@pytest.mark.parametrize(
    "value",
    ["", "line one\nline two", 'say "hi"', "back\\slash", "café üß", "\U0001F600 smile", "\x00\x1f"],
)
def test_unescape_reverses_escape(value: str) -> None:
    assert unescape_string(escape_string(value)) == value


def test_unescape_numeric_escapes() -> None:
    assert unescape_string("\\u00E9") == "é"
    assert unescape_string("\\U0001F600") == "\U0001F600"
    assert unescape_string("\\uD83D\\uDE00") == "\U0001F600"


def test_lone_surrogates_use_long_escape() -> None:
    assert escape_string("\ud800") == "\\U0000D800"
    assert escape_string("\udfff") == "\\U0000DFFF"


@pytest.mark.parametrize("value", ["\ud800\udc00", "\udbff", "a\udc00b", "\ud83d\ude00"])
def test_surrogate_code_points_survive_round_trip(value: str) -> None:
    assert unescape_string(escape_string(value)) == value


def test_unescape_single_quote() -> None:
    assert unescape_string("it\\'s") == "it's"


@pytest.mark.parametrize(
    "text",
    ["\\u12", "\\u12G4", "\\U0001F60", "\\UFFFFFFFF", "\\q", "trailing\\"],
)
def test_malformed_escapes_pass_through(text: str) -> None:
    assert unescape_string(text) == text


def test_unescape_without_named_escapes() -> None:
    assert unescape_string("a\\nb\\u0041", named=False) == "a\\nbA"


@pytest.mark.parametrize(
    ("local", "expected"),
    [
        ("Person", "Person"),
        ("", ""),
        ("123", "123"),
        ("a.b", "a.b"),
        ("end.", "end\\."),
        ("a~b", "a\\~b"),
        ("x:y", "x:y"),
        ("%20", "%20"),
        ("with space", None),
        ("-start", "\\-start"),
        ("caf\u00e9", "caf\u00e9"),
    ],
)
def test_escape_pn_local(local: str, expected: str | None) -> None:
    assert escape_pn_local(local) == expected


def test_unescape_pn_local() -> None:
    assert unescape_pn_local("a\\~b\\.") == "a~b."
    assert unescape_pn_local("%20") == "%20"
