"""JavaScript/TypeScript formatter."""

from __future__ import annotations

from typing import List, Optional

from ..api import ApiMember
from ..models import ApiReference
from ..naming import camel_case, lower_first, split_words
from ..snippets import Call, Import, TypeRef
from .base import Formatter, quote_string, render_number

_PRIMITIVES = {
    "string": "string",
    "int": "number",
    "float": "number",
    "bool": "boolean",
    "void": "void",
    "any": "any",
}


class JavaScriptFormatter(Formatter):
    """Renders samples for the Node.js docs: camelCase, require(), options objects."""

    language = "js"
    display_name = "JavaScript"
    code_fence = "js"

    def render_import(self, statement: Import) -> List[str]:
        names = ", ".join(camel_case(name) for name in statement.names)
        module = quote_string(statement.package.replace(".", "/"), "'")
        return [f"const {{ {names} }} = require({module});"]

    def render_declaration(self, name: str, value: str) -> str:
        return f"const {name} = {value}"

    def render_typed_declaration(self, name: str, type_name: str, value: str) -> str:
        return f"const {name}: {type_name} = {value}"

    def render_literal(self, value: object) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return quote_string(value, "'")
        return render_number(value)

    def render_list(self, items: List[str]) -> str:
        return f"[{', '.join(items)}]"

    def render_options(self, call: Call, name: Optional[str]) -> str:
        entries = [f"{camel_case(keyword.name)}: {self.render_expr(keyword.value)}" for keyword in call.keywords]
        if call.spread is not None:
            entries.append(f"...{camel_case(call.spread)}")
        return f"{{ {', '.join(entries)} }}"

    def format_variable(self, name: str) -> str:
        return camel_case(name)

    def format_attribute(self, name: str) -> str:
        return camel_case(name)

    def format_function(self, name: str, *, awaited: bool = False) -> str:
        return camel_case(name)

    def format_method(self, name: str, *, awaited: bool = False) -> str:
        return camel_case(name)

    def render_type_name(self, descriptor: TypeRef) -> str:
        if descriptor.name in _PRIMITIVES:
            return _PRIMITIVES[descriptor.name]
        args = [self.render_type_name(arg) for arg in descriptor.args]
        if descriptor.name == "list":
            return f"Array<{args[0]}>"
        if descriptor.name == "map":
            return f"Record<{args[0]}, {args[1]}>"
        if descriptor.name == "optional":
            return f"{args[0]}|null"
        if descriptor.name == "union":
            return "|".join(args)
        if descriptor.name == "tuple":
            return f"[{', '.join(args)}]"
        return descriptor.name

    def format_reference_text(self, reference: ApiReference, member: Optional[ApiMember]) -> str:
        if reference.member is None:
            return reference.symbol
        owner = lower_first(reference.symbol)
        if reference.kind == "method":
            return f"{owner}.{camel_case(reference.member)}()"
        if reference.kind == "event":
            event = quote_string("".join(split_words(reference.member)), "'")
            return f"{owner}.on({event})"
        if reference.argument is not None:
            return camel_case(reference.argument)
        return f"{owner}.{camel_case(reference.member)}"


__all__ = ["JavaScriptFormatter"]
