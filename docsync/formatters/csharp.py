"""C#/.NET formatter."""

from __future__ import annotations

from typing import List, Optional

from ..api import ApiMember
from ..models import ApiReference
from ..naming import camel_case, is_class_name, pascal_case
from ..snippets import Assign, Call, Import, ListLiteral, TypeRef
from .base import FUNCTION_IMPORT, KEYWORD_SPREAD, UNION_TYPE, Formatter, quote_string, render_number

_PRIMITIVES = {
    "string": "string",
    "int": "int",
    "float": "double",
    "bool": "bool",
    "void": "void",
    "any": "object",
}


class CSharpFormatter(Formatter):
    """Renders samples for the .NET docs: PascalCase members and Async-suffixed awaits."""

    language = "csharp"
    display_name = ".NET"
    code_fence = "csharp"
    unsupported = frozenset({UNION_TYPE, KEYWORD_SPREAD, FUNCTION_IMPORT})

    def render_import(self, statement: Import) -> List[str]:
        for name in statement.names:
            if not is_class_name(name):
                self.require(FUNCTION_IMPORT, f"{statement.package}: {name}")
        namespace = ".".join(pascal_case(part) for part in statement.package.split("."))
        return [f"using {namespace};"]

    def render_assign(self, statement: Assign) -> str:
        if statement.annotation is not None and isinstance(statement.value, ListLiteral):
            # Target-typed collection initializer.
            items = ", ".join(self.render_expr(item) for item in statement.value.items)
            value = f"new() {{ {items} }}" if items else "new()"
            return self.render_typed_declaration(
                self.format_variable(statement.name), self.render_type_name(statement.annotation), value
            )
        return super().render_assign(statement)

    def render_declaration(self, name: str, value: str) -> str:
        return f"var {name} = {value}"

    def render_typed_declaration(self, name: str, type_name: str, value: str) -> str:
        return f"{type_name} {name} = {value}"

    def render_literal(self, value: object) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return quote_string(value)
        return render_number(value)

    def render_list(self, items: List[str]) -> str:
        if not items:
            return "Array.Empty<object>()"
        return f"new[] {{ {', '.join(items)} }}"

    def render_options(self, call: Call, name: Optional[str]) -> str:
        assignments = ", ".join(
            f"{pascal_case(keyword.name)} = {self.render_expr(keyword.value)}" for keyword in call.keywords
        )
        return f"new() {{ {assignments} }}"

    def format_variable(self, name: str) -> str:
        return camel_case(name)

    def format_attribute(self, name: str) -> str:
        return pascal_case(name)

    def format_function(self, name: str, *, awaited: bool = False) -> str:
        return self.format_method(name, awaited=awaited)

    def format_method(self, name: str, *, awaited: bool = False) -> str:
        method = pascal_case(name)
        if awaited and not method.endswith("Async"):
            method = f"{method}Async"
        return method

    def render_type_name(self, descriptor: TypeRef) -> str:
        if descriptor.name == "union":
            self.require(UNION_TYPE, str(descriptor))
        if descriptor.name in _PRIMITIVES:
            return _PRIMITIVES[descriptor.name]
        args = [self.render_type_name(arg) for arg in descriptor.args]
        if descriptor.name == "list":
            return f"List<{args[0]}>"
        if descriptor.name == "map":
            return f"Dictionary<{args[0]}, {args[1]}>"
        if descriptor.name == "optional":
            return args[0] if args[0].endswith("?") else f"{args[0]}?"
        if descriptor.name == "tuple":
            return f"({', '.join(args)})"
        return descriptor.name

    def format_reference_text(self, reference: ApiReference, member: Optional[ApiMember]) -> str:
        if reference.member is None:
            return reference.symbol
        if reference.kind == "method":
            awaited = member is not None and member.is_async
            return f"{reference.symbol}.{self.format_method(reference.member, awaited=awaited)}()"
        if reference.kind == "param":
            return camel_case(reference.argument or reference.member)
        if reference.kind == "option":
            return pascal_case(reference.argument or reference.member)
        return f"{reference.symbol}.{pascal_case(reference.member)}"


__all__ = ["CSharpFormatter"]
