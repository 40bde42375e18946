"""Java formatter."""

from __future__ import annotations

from typing import List, Optional

from ..api import ApiMember
from ..models import ApiReference
from ..naming import camel_case, is_class_name, pascal_case
from ..snippets import Call, Import, TypeRef
from .base import FUNCTION_IMPORT, KEYWORD_SPREAD, TUPLE_TYPE, UNION_TYPE, Formatter, quote_string, render_number

_PRIMITIVES = {
    "string": "String",
    "int": "int",
    "float": "double",
    "bool": "boolean",
    "void": "void",
    "any": "Object",
}
_BOXED = {
    "int": "Integer",
    "double": "Double",
    "boolean": "Boolean",
    "void": "Void",
}


class JavaFormatter(Formatter):
    """Renders samples for the Java docs: synchronous calls and options builders."""

    language = "java"
    display_name = "Java"
    code_fence = "java"
    unsupported = frozenset({UNION_TYPE, TUPLE_TYPE, KEYWORD_SPREAD, FUNCTION_IMPORT})
    await_keyword = None

    def render_import(self, statement: Import) -> List[str]:
        lines = []
        for name in statement.names:
            if not is_class_name(name):
                self.require(FUNCTION_IMPORT, f"{statement.package}: {name}")
            lines.append(f"import {statement.package}.{name};")
        return lines

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
        return f"Arrays.asList({', '.join(items)})"

    def render_options(self, call: Call, name: Optional[str]) -> str:
        options_class = f"{pascal_case(name)}Options" if name else "Options"
        setters = "".join(
            f".set{pascal_case(keyword.name)}({self.render_expr(keyword.value)})" for keyword in call.keywords
        )
        return f"new {options_class}(){setters}"

    def format_variable(self, name: str) -> str:
        return camel_case(name)

    def format_attribute(self, name: str) -> str:
        return camel_case(name)

    def format_function(self, name: str, *, awaited: bool = False) -> str:
        return camel_case(name)

    def format_method(self, name: str, *, awaited: bool = False) -> str:
        return camel_case(name)

    def render_type_name(self, descriptor: TypeRef) -> str:
        return self._type_name(descriptor, boxed=False)

    def _type_name(self, descriptor: TypeRef, *, boxed: bool) -> str:
        if descriptor.name == "union":
            self.require(UNION_TYPE, str(descriptor))
        if descriptor.name == "tuple":
            self.require(TUPLE_TYPE, str(descriptor))
        if descriptor.name in _PRIMITIVES:
            spelled = _PRIMITIVES[descriptor.name]
            return _BOXED.get(spelled, spelled) if boxed else spelled
        if descriptor.name == "list":
            return f"List<{self._type_name(descriptor.args[0], boxed=True)}>"
        if descriptor.name == "map":
            key = self._type_name(descriptor.args[0], boxed=True)
            value = self._type_name(descriptor.args[1], boxed=True)
            return f"Map<{key}, {value}>"
        if descriptor.name == "optional":
            return self._type_name(descriptor.args[0], boxed=True)
        return descriptor.name

    def format_reference_text(self, reference: ApiReference, member: Optional[ApiMember]) -> str:
        if reference.member is None:
            return reference.symbol
        if reference.kind == "method":
            return f"{reference.symbol}.{camel_case(reference.member)}()"
        if reference.kind == "property":
            return f"{reference.symbol}.{camel_case(reference.member)}()"
        if reference.kind == "event":
            return f"{reference.symbol}.on{pascal_case(reference.member)}(handler)"
        if reference.kind == "option":
            return f"set{pascal_case(reference.argument or reference.member)}"
        return camel_case(reference.argument or reference.member)


__all__ = ["JavaFormatter"]
