"""Tests for docsync.snippets."""

from __future__ import annotations

import pytest

from docsync.errors import ParseError
from docsync.snippets import (
    Assign,
    Attribute,
    Await,
    Call,
    Comment,
    ExprStatement,
    Import,
    Keyword,
    ListLiteral,
    Literal,
    Name,
    TypeRef,
    parse_snippet,
    parse_type,
)


def test_parse_snippet_builds_statements() -> None:
    snippet = parse_snippet(
        "# Connect first\n"
        "import acme.sdk: Client, Config\n"
        "\n"
        "client = create_client(timeout=30)\n"
        "names: list<string> = [\"alpha\", 'beta']\n"
        "await client.fetch_all(names, retries=2, **extra)\n"
    )

    assert snippet.statements == (
        Comment(text="Connect first"),
        Import(package="acme.sdk", names=("Client", "Config")),
        Assign(
            name="client",
            value=Call(target=Name("create_client"), keywords=(Keyword("timeout", Literal(30)),)),
        ),
        Assign(
            name="names",
            value=ListLiteral(items=(Literal("alpha"), Literal("beta"))),
            annotation=TypeRef("list", (TypeRef("string"),)),
        ),
        ExprStatement(
            value=Await(
                Call(
                    target=Attribute(Name("client"), "fetch_all"),
                    args=(Name("names"),),
                    keywords=(Keyword("retries", Literal(2)),),
                    spread="extra",
                )
            )
        ),
    )


def test_parse_snippet_reads_literals() -> None:
    snippet = parse_snippet('configure(true, false, null, 1.5, -3, "a\\"b")')
    call = snippet.statements[0].value  # type: ignore[union-attr]
    assert [arg.value for arg in call.args] == [True, False, None, 1.5, -3, 'a"b']


def test_parse_type_handles_nested_generics() -> None:
    parsed = parse_type("map<string, list<optional<int>>>")
    assert str(parsed) == "map<string, list<optional<int>>>"
    assert parsed.args[1].args[0] == TypeRef("optional", (TypeRef("int"),))


@pytest.mark.parametrize(
    "source, message",
    [
        ("create_client(timeout=30, 5)", "positional argument follows keyword argument"),
        ("x: lst<string> = []", "unknown type 'lst'"),
        ("x: map<string> = []", "takes 2 argument(s)"),
        ("x: union<string> = null", "at least two arguments"),
        ("x: Client<int> = null", "does not take arguments"),
        ('log("unterminated)', "unexpected character"),
        ("launch(**opts, headless=true)", "keyword spread must be the last argument"),
        ("connect(timeout=1, timeout=2)", "duplicate keyword argument"),
        ("await 5", "await must be followed"),
        ("import acme.sdk", "malformed import"),
        ("client.timeout = 5", "unexpected '='"),
    ],
)
def test_parse_snippet_rejects_malformed_statements(source: str, message: str) -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_snippet(source)
    assert message in str(excinfo.value)


def test_parse_snippet_reports_document_line_numbers() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_snippet("ok()\n\nbroken(\n", first_line=10)
    assert excinfo.value.line == 12
