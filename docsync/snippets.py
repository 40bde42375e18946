"""Neutral snippet specs: the language-independent form of documentation code samples.

A snippet holds one statement per line::

    # Connect with a custom timeout
    import acme.sdk: Client
    client = create_client(timeout=30)
    names: list<string> = ["alpha", "beta"]
    await client.fetch(names, retries=2)

Formatters turn the parsed statements into each target language's syntax.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .errors import ParseError

_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
    |(?P<number>-?\d+(?:\.\d+)?)
    |(?P<name>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<op>\*\*|[()\[\],.=:<>])
    """,
    re.VERBOSE,
)
_IMPORT_RE = re.compile(r"^import\s+([A-Za-z_][\w]*(?:\.[A-Za-z_][\w]*)*)\s*:\s*(.+)$")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"', "'": "'"}

# name -> number of type arguments (None means two or more)
BUILTIN_TYPES = {
    "string": 0,
    "int": 0,
    "float": 0,
    "bool": 0,
    "void": 0,
    "any": 0,
    "list": 1,
    "map": 2,
    "optional": 1,
    "union": None,
    "tuple": None,
}
_KEYWORDS = {"await", "true", "false", "null", "import"}


@dataclass(frozen=True)
class TypeRef:
    """Neutral type descriptor such as ``list<string>`` or ``Client``."""

    name: str
    args: Tuple["TypeRef", ...] = ()

    @property
    def is_builtin(self) -> bool:
        return self.name in BUILTIN_TYPES

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}<{', '.join(str(arg) for arg in self.args)}>"


@dataclass(frozen=True)
class Literal:
    value: Union[str, int, float, bool, None]


@dataclass(frozen=True)
class ListLiteral:
    items: Tuple["Expr", ...]


@dataclass(frozen=True)
class Name:
    identifier: str


@dataclass(frozen=True)
class Attribute:
    target: "Expr"
    name: str


@dataclass(frozen=True)
class Keyword:
    name: str
    value: "Expr"


@dataclass(frozen=True)
class Call:
    target: "Expr"
    args: Tuple["Expr", ...] = ()
    keywords: Tuple[Keyword, ...] = ()
    spread: Optional[str] = None

    @property
    def has_options(self) -> bool:
        return bool(self.keywords) or self.spread is not None


@dataclass(frozen=True)
class Await:
    value: "Expr"


Expr = Union[Literal, ListLiteral, Name, Attribute, Call, Await]


@dataclass(frozen=True)
class Comment:
    text: str


@dataclass(frozen=True)
class Import:
    package: str
    names: Tuple[str, ...]


@dataclass(frozen=True)
class Assign:
    name: str
    value: Expr
    annotation: Optional[TypeRef] = None


@dataclass(frozen=True)
class ExprStatement:
    value: Expr


Statement = Union[Comment, Import, Assign, ExprStatement]


@dataclass(frozen=True)
class Snippet:
    """A parsed snippet spec."""

    statements: Tuple[Statement, ...]
    source: str = ""


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    column: int


def parse_snippet(source: str, *, first_line: int = 1) -> Snippet:
    """Parse a snippet spec; ``first_line`` locates errors inside the enclosing document."""
    statements: List[Statement] = []
    for offset, raw in enumerate(source.splitlines()):
        line = raw.strip()
        if not line:
            continue
        line_number = first_line + offset
        statements.append(_parse_statement(line, line_number))
    return Snippet(statements=tuple(statements), source=source)


def parse_type(text: str, *, line: int | None = None) -> TypeRef:
    """Parse a standalone type descriptor."""
    parser = _LineParser(_tokenize(text, line), line)
    result = parser.parse_type()
    parser.expect_end()
    return result


def _parse_statement(line: str, line_number: int) -> Statement:
    if line.startswith("#"):
        return Comment(text=line[1:].strip())
    if line.startswith("import ") or line == "import":
        match = _IMPORT_RE.match(line)
        if not match:
            raise ParseError("malformed import, expected 'import package: Name, ...'", line=line_number)
        names = tuple(part.strip() for part in match.group(2).split(","))
        for name in names:
            if not _IDENTIFIER_RE.match(name):
                raise ParseError(f"invalid imported name '{name}'", line=line_number)
        return Import(package=match.group(1), names=names)

    parser = _LineParser(_tokenize(line, line_number), line_number)
    statement = parser.parse_statement()
    parser.expect_end()
    return statement


def _tokenize(text: str, line: int | None) -> List[_Token]:
    tokens: List[_Token] = []
    position = 0
    while position < len(text):
        match = _TOKEN_RE.match(text, position)
        if match is None:
            raise ParseError(f"unexpected character '{text[position]}'", line=line)
        kind = match.lastgroup or ""
        if kind != "space":
            tokens.append(_Token(kind=kind, text=match.group(), column=position))
        position = match.end()
    return tokens


class _LineParser:
    """Recursive-descent parser over the tokens of a single statement."""

    def __init__(self, tokens: Sequence[_Token], line: int | None) -> None:
        self.tokens = list(tokens)
        self.index = 0
        self.line = line

    def parse_statement(self) -> Statement:
        first = self._peek()
        second = self._peek(1)
        if first is not None and first.kind == "name" and first.text not in _KEYWORDS and second is not None:
            if second.text == "=":
                self.index += 2
                return Assign(name=self._identifier(first), value=self.parse_value())
            if second.text == ":":
                self.index += 2
                annotation = self.parse_type()
                self._expect("=")
                return Assign(name=self._identifier(first), value=self.parse_value(), annotation=annotation)
        return ExprStatement(value=self.parse_value())

    def parse_value(self) -> Expr:
        token = self._peek()
        if token is not None and token.kind == "name" and token.text == "await":
            self.index += 1
            inner = self.parse_expr()
            if not isinstance(inner, (Call, Attribute, Name)):
                raise self._error("await must be followed by a call or member access")
            return Await(value=inner)
        return self.parse_expr()

    def parse_expr(self) -> Expr:
        expr = self._parse_primary()
        while True:
            token = self._peek()
            if token is None:
                return expr
            if token.text == ".":
                self.index += 1
                name_token = self._take("name")
                expr = Attribute(target=expr, name=self._identifier(name_token))
            elif token.text == "(":
                self.index += 1
                expr = self._parse_call(expr)
            else:
                return expr

    def parse_type(self) -> TypeRef:
        token = self._take("name")
        name = token.text
        args: List[TypeRef] = []
        if self._accept("<"):
            args.append(self.parse_type())
            while self._accept(","):
                args.append(self.parse_type())
            self._expect(">")
        arity = BUILTIN_TYPES.get(name, 0)
        if name in BUILTIN_TYPES:
            if arity is None and len(args) < 2:
                raise self._error(f"type '{name}' needs at least two arguments")
            if arity is not None and len(args) != arity:
                raise self._error(f"type '{name}' takes {arity} argument(s), got {len(args)}")
        elif not name[0].isupper():
            raise self._error(f"unknown type '{name}'")
        elif args:
            raise self._error(f"class type '{name}' does not take arguments")
        return TypeRef(name=name, args=tuple(args))

    def expect_end(self) -> None:
        token = self._peek()
        if token is not None:
            raise self._error(f"unexpected '{token.text}'")

    def _parse_primary(self) -> Expr:
        token = self._peek()
        if token is None:
            raise self._error("expected an expression")
        self.index += 1
        if token.kind == "string":
            return Literal(value=_unquote(token.text))
        if token.kind == "number":
            return Literal(value=float(token.text) if "." in token.text else int(token.text))
        if token.kind == "name":
            if token.text == "true":
                return Literal(value=True)
            if token.text == "false":
                return Literal(value=False)
            if token.text == "null":
                return Literal(value=None)
            return Name(identifier=self._identifier(token))
        if token.text == "[":
            items: List[Expr] = []
            if not self._accept("]"):
                items.append(self.parse_expr())
                while self._accept(","):
                    items.append(self.parse_expr())
                self._expect("]")
            return ListLiteral(items=tuple(items))
        raise self._error(f"unexpected '{token.text}'")

    def _parse_call(self, target: Expr) -> Call:
        args: List[Expr] = []
        keywords: List[Keyword] = []
        spread: Optional[str] = None
        if self._accept(")"):
            return Call(target=target)
        while True:
            if spread is not None:
                raise self._error("keyword spread must be the last argument")
            if self._accept("**"):
                spread = self._identifier(self._take("name"))
            else:
                token = self._peek()
                following = self._peek(1)
                if token is not None and token.kind == "name" and following is not None and following.text == "=":
                    self.index += 2
                    name = self._identifier(token)
                    if any(keyword.name == name for keyword in keywords):
                        raise self._error(f"duplicate keyword argument '{name}'")
                    keywords.append(Keyword(name=name, value=self.parse_expr()))
                else:
                    if keywords:
                        raise self._error("positional argument follows keyword argument")
                    args.append(self.parse_expr())
            if self._accept(")"):
                break
            self._expect(",")
        return Call(target=target, args=tuple(args), keywords=tuple(keywords), spread=spread)

    def _identifier(self, token: _Token) -> str:
        if token.text in _KEYWORDS:
            raise self._error(f"'{token.text}' cannot be used as a name")
        return token.text

    def _peek(self, offset: int = 0) -> Optional[_Token]:
        position = self.index + offset
        if position < len(self.tokens):
            return self.tokens[position]
        return None

    def _accept(self, text: str) -> bool:
        token = self._peek()
        if token is not None and token.kind == "op" and token.text == text:
            self.index += 1
            return True
        return False

    def _expect(self, text: str) -> None:
        if not self._accept(text):
            token = self._peek()
            found = f"'{token.text}'" if token else "end of line"
            raise self._error(f"expected '{text}', found {found}")

    def _take(self, kind: str) -> _Token:
        token = self._peek()
        if token is None or token.kind != kind:
            found = f"'{token.text}'" if token else "end of line"
            raise self._error(f"expected {kind}, found {found}")
        self.index += 1
        return token

    def _error(self, message: str) -> ParseError:
        return ParseError(message, line=self.line)


def _unquote(text: str) -> str:
    body = text[1:-1]
    result: List[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\" and index + 1 < len(body):
            escaped = body[index + 1]
            result.append(_ESCAPES.get(escaped, escaped))
            index += 2
            continue
        result.append(char)
        index += 1
    return "".join(result)


__all__ = [
    "Assign",
    "Attribute",
    "Await",
    "BUILTIN_TYPES",
    "Call",
    "Comment",
    "ExprStatement",
    "Import",
    "Keyword",
    "ListLiteral",
    "Literal",
    "Name",
    "Snippet",
    "TypeRef",
    "parse_snippet",
    "parse_type",
]
