"""Base class for per-language formatters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import FrozenSet, List, Optional

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from ..api import ApiMember, ApiSurface
from ..errors import ConfigurationError, UnsupportedConstructError
from ..models import ApiReference
from ..naming import is_class_name, kebab_case
from ..snippets import (
    Assign,
    Attribute,
    Await,
    Call,
    Comment,
    Expr,
    ExprStatement,
    Import,
    ListLiteral,
    Literal,
    Name,
    Snippet,
    Statement,
    TypeRef,
)

UNION_TYPE = "union type"
TUPLE_TYPE = "tuple type"
KEYWORD_SPREAD = "keyword spread"
FUNCTION_IMPORT = "module-level function import"

DEFAULT_LINK_TEMPLATE = (
    "[`{{ text }}`](./api/class-{{ symbol | lower }}.md{% if anchor %}#{{ anchor }}{% endif %})"
)


class Formatter(ABC):
    """Contract for rendering neutral snippets, types and API references in one language.

    The shared statement walk lives here; subclasses supply the spelling of each
    construct. Instances hold configuration only, so one instance can serve every
    document of a generation pass.
    """

    language: str = ""
    display_name: str = ""
    code_fence: str = ""
    unsupported: FrozenSet[str] = frozenset()
    comment_prefix = "//"
    terminator = ";"
    await_keyword: Optional[str] = "await"

    def __init__(
        self,
        api: ApiSurface | None = None,
        *,
        link_template: str = DEFAULT_LINK_TEMPLATE,
    ) -> None:
        self.api = api
        self._link_template = _compile_link_template(link_template)

    def supports(self, construct: str) -> bool:
        return construct not in self.unsupported

    def require(self, construct: str, detail: str | None = None) -> None:
        """Fail loudly when ``construct`` has no equivalent in this language."""
        if not self.supports(construct):
            raise UnsupportedConstructError(self.language, construct, detail)

    # code samples

    def render_code_sample(self, snippet: Snippet) -> str:
        """Render every statement of ``snippet`` as target-language source."""
        lines: List[str] = []
        for statement in snippet.statements:
            lines.extend(self.render_statement(statement))
        return "\n".join(lines)

    def render_statement(self, statement: Statement) -> List[str]:
        if isinstance(statement, Comment):
            return [f"{self.comment_prefix} {statement.text}".rstrip()]
        if isinstance(statement, Import):
            return self.render_import(statement)
        if isinstance(statement, Assign):
            return [self.render_assign(statement) + self.terminator]
        if isinstance(statement, ExprStatement):
            return [self.render_expr(statement.value) + self.terminator]
        raise TypeError(f"Unknown statement type: {type(statement).__name__}")

    def render_assign(self, statement: Assign) -> str:
        value = self.render_expr(statement.value)
        name = self.format_variable(statement.name)
        if statement.annotation is None:
            return self.render_declaration(name, value)
        return self.render_typed_declaration(name, self.render_type_name(statement.annotation), value)

    def render_expr(self, expr: Expr) -> str:
        if isinstance(expr, Literal):
            return self.render_literal(expr.value)
        if isinstance(expr, ListLiteral):
            return self.render_list([self.render_expr(item) for item in expr.items])
        if isinstance(expr, Name):
            return self.format_variable(expr.identifier)
        if isinstance(expr, Attribute):
            return f"{self.render_expr(expr.target)}.{self.format_attribute(expr.name)}"
        if isinstance(expr, Call):
            return self.render_call(expr)
        if isinstance(expr, Await):
            return self.render_await(expr)
        raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def render_await(self, expr: Await) -> str:
        inner = expr.value
        if isinstance(inner, Call):
            text = self.render_call(inner, awaited=True)
        else:
            text = self.render_expr(inner)
        if self.await_keyword:
            return f"{self.await_keyword} {text}"
        return text

    def render_call(self, call: Call, *, awaited: bool = False) -> str:
        target = call.target
        name: Optional[str] = None
        if isinstance(target, Name):
            name = target.identifier
            if is_class_name(name):
                callee = self.format_constructor(name)
            else:
                callee = self.format_function(name, awaited=awaited)
        elif isinstance(target, Attribute):
            name = target.name
            callee = f"{self.render_expr(target.target)}.{self.format_method(name, awaited=awaited)}"
        else:
            callee = self.render_expr(target)
        if call.spread is not None:
            self.require(KEYWORD_SPREAD, f"**{call.spread}")
        arguments = self.render_arguments(call, name)
        return f"{callee}({', '.join(arguments)})"

    def render_arguments(self, call: Call, name: Optional[str]) -> List[str]:
        arguments = [self.render_expr(arg) for arg in call.args]
        if call.has_options:
            arguments.append(self.render_options(call, name))
        return arguments

    def format_constructor(self, name: str) -> str:
        return f"new {name}"

    @abstractmethod
    def render_import(self, statement: Import) -> List[str]:
        """Return the import/using lines for ``statement``."""

    @abstractmethod
    def render_declaration(self, name: str, value: str) -> str:
        """Declare an untyped local variable."""

    @abstractmethod
    def render_typed_declaration(self, name: str, type_name: str, value: str) -> str:
        """Declare a local variable with an explicit type annotation."""

    @abstractmethod
    def render_literal(self, value: object) -> str:
        """Spell a string, number, boolean or null literal."""

    @abstractmethod
    def render_list(self, items: List[str]) -> str:
        """Spell a list literal from already-rendered items."""

    @abstractmethod
    def render_options(self, call: Call, name: Optional[str]) -> str:
        """Spell the keyword arguments of ``call`` in the language's optional-parameter idiom."""

    @abstractmethod
    def format_variable(self, name: str) -> str:
        ...

    @abstractmethod
    def format_attribute(self, name: str) -> str:
        ...

    @abstractmethod
    def format_function(self, name: str, *, awaited: bool = False) -> str:
        ...

    @abstractmethod
    def format_method(self, name: str, *, awaited: bool = False) -> str:
        ...

    # types

    @abstractmethod
    def render_type_name(self, descriptor: TypeRef) -> str:
        """Return the idiomatic spelling of a neutral type descriptor."""

    # API references

    def render_api_reference(self, reference: ApiReference) -> str:
        """Render ``reference`` as a link into this language's API documentation."""
        member = self.resolve_reference(reference)
        return self._link_template.render(
            text=self.format_reference_text(reference, member),
            symbol=reference.symbol,
            anchor=self.reference_anchor(reference),
            kind=reference.kind,
            language=self.language,
        )

    def resolve_reference(self, reference: ApiReference) -> Optional[ApiMember]:
        """Check ``reference`` against the API surface, returning the member it names."""
        if self.api is None:
            return None
        described = reference.describe()
        if self.api.lookup_class(reference.symbol, self.language) is None:
            raise UnsupportedConstructError(
                self.language, f"API reference [{described}]", f"{reference.symbol} is not part of the API surface"
            )
        if reference.kind == "class" or reference.member is None:
            return None
        member = self.api.lookup_member(reference.symbol, reference.member, self.language)
        if member is None:
            raise UnsupportedConstructError(
                self.language,
                f"API reference [{described}]",
                f"{reference.symbol}.{reference.member} is not part of the API surface",
            )
        if reference.kind in ("method", "property", "event") and member.kind != reference.kind:
            raise UnsupportedConstructError(
                self.language,
                f"API reference [{described}]",
                f"{reference.symbol}.{reference.member} is a {member.kind}",
            )
        if reference.argument is not None and reference.argument not in member.params:
            raise UnsupportedConstructError(
                self.language,
                f"API reference [{described}]",
                f"{reference.symbol}.{reference.member} has no parameter '{reference.argument}'",
            )
        return member

    def reference_anchor(self, reference: ApiReference) -> str:
        if reference.member is None:
            return ""
        anchor = f"{kebab_case(reference.symbol)}-{kebab_case(reference.member)}"
        if reference.argument is not None:
            anchor = f"{anchor}-{reference.kind}-{kebab_case(reference.argument)}"
        return anchor

    @abstractmethod
    def format_reference_text(self, reference: ApiReference, member: Optional[ApiMember]) -> str:
        """Return the visible link text for ``reference``."""


def _compile_link_template(source: str) -> Template:
    """Compile the reference link template and render it once per anchor shape."""
    environment = Environment(undefined=StrictUndefined, autoescape=False)
    try:
        template = environment.from_string(source)
        for anchor in ("", "client-close"):
            template.render(text="Client.close()", symbol="Client", anchor=anchor, kind="method", language="js")
    except TemplateError as exc:
        raise ConfigurationError(f"Invalid link_template: {exc}") from exc
    return template


def quote_string(value: str, quote: str = '"') -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace(quote, f"\\{quote}")
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f"{quote}{escaped}{quote}"


def render_number(value: object) -> str:
    if isinstance(value, float):
        return repr(value)
    return str(value)


__all__ = [
    "DEFAULT_LINK_TEMPLATE",
    "FUNCTION_IMPORT",
    "Formatter",
    "KEYWORD_SPREAD",
    "TUPLE_TYPE",
    "UNION_TYPE",
    "quote_string",
    "render_number",
]
