"""Python formatter."""

from __future__ import annotations

from typing import List, Optional

from ..api import ApiMember
from ..models import ApiReference
from ..naming import lower_first, snake_case, split_words
from ..snippets import Call, Import, TypeRef
from .base import Formatter, quote_string, render_number

_PRIMITIVES = {
    "string": "str",
    "int": "int",
    "float": "float",
    "bool": "bool",
    "void": "None",
    "any": "Any",
}
_GENERICS = {
    "list": "List",
    "map": "Dict",
    "optional": "Optional",
    "union": "Union",
    "tuple": "Tuple",
}


class PythonFormatter(Formatter):
    """Renders samples for the Python docs: snake_case and keyword arguments."""

    language = "python"
    display_name = "Python"
    code_fence = "py"
    comment_prefix = "#"
    terminator = ""

    def render_import(self, statement: Import) -> List[str]:
        names = ", ".join(snake_case(name) for name in statement.names)
        return [f"from {statement.package} import {names}"]

    def render_declaration(self, name: str, value: str) -> str:
        return f"{name} = {value}"

    def render_typed_declaration(self, name: str, type_name: str, value: str) -> str:
        return f"{name}: {type_name} = {value}"

    def render_literal(self, value: object) -> str:
        if value is None:
            return "None"
        if isinstance(value, bool):
            return "True" if value else "False"
        if isinstance(value, str):
            return quote_string(value)
        return render_number(value)

    def render_list(self, items: List[str]) -> str:
        return f"[{', '.join(items)}]"

    def render_options(self, call: Call, name: Optional[str]) -> str:
        # Keyword arguments are native, so no options object is built.
        arguments = [
            f"{snake_case(keyword.name)}={self.render_expr(keyword.value)}" for keyword in call.keywords
        ]
        if call.spread is not None:
            arguments.append(f"**{snake_case(call.spread)}")
        return ", ".join(arguments)

    def format_constructor(self, name: str) -> str:
        return name

    def format_variable(self, name: str) -> str:
        return snake_case(name)

    def format_attribute(self, name: str) -> str:
        return snake_case(name)

    def format_function(self, name: str, *, awaited: bool = False) -> str:
        return snake_case(name)

    def format_method(self, name: str, *, awaited: bool = False) -> str:
        return snake_case(name)

    def render_type_name(self, descriptor: TypeRef) -> str:
        if descriptor.name in _PRIMITIVES:
            return _PRIMITIVES[descriptor.name]
        if descriptor.name in _GENERICS:
            args = ", ".join(self.render_type_name(arg) for arg in descriptor.args)
            return f"{_GENERICS[descriptor.name]}[{args}]"
        return descriptor.name

    def format_reference_text(self, reference: ApiReference, member: Optional[ApiMember]) -> str:
        if reference.member is None:
            return reference.symbol
        owner = snake_case(lower_first(reference.symbol))
        if reference.kind == "method":
            return f"{owner}.{snake_case(reference.member)}()"
        if reference.kind == "event":
            event = quote_string("".join(split_words(reference.member)))
            return f"{owner}.on({event})"
        if reference.argument is not None:
            return snake_case(reference.argument)
        return f"{owner}.{snake_case(reference.member)}"


__all__ = ["PythonFormatter"]
