from __future__ import annotations

import json

from .exceptions import UnsupportedExpression, UnsupportedParameterPattern
from .models import (
    ArrayExpression,
    CallExpression,
    Identifier,
    Literal,
    MemberExpression,
    ObjectPattern,
    OpaquePattern,
    TemplateLiteral,
    UnsupportedNode,
)

SAMPLE_PREFIX = "sample"


def sample_name(name: str) -> str:
    """
    Placeholder for a free variable: ``user_id`` -> ``sampleUser_id``.
    """
    return SAMPLE_PREFIX + name[:1].upper() + name[1:]


def _fstring_text(text: str) -> str:
    escaped = json.dumps(text, ensure_ascii=False)[1:-1]
    return escaped.replace("{", "{{").replace("}", "}}")


def render(node, substitute: bool = False) -> str:
    """
    Re-render an expression node as source text.

    With ``substitute`` every free variable becomes its sample placeholder,
    except the first argument of a call (it names the effect target) and the
    property half of a member expression.
    """
    if isinstance(node, Literal):
        return node.raw

    if isinstance(node, Identifier):
        return sample_name(node.name) if substitute else node.name

    if isinstance(node, MemberExpression):
        obj = sample_name(node.object_name) if substitute else node.object_name
        return f"{obj}.{node.property_name}"

    if isinstance(node, CallExpression):
        args = [
            render(arg, substitute=substitute if index else False)
            for index, arg in enumerate(node.arguments)
        ]
        return f"{render(node.callee)}({', '.join(args)})"

    if isinstance(node, ArrayExpression):
        return "[" + ", ".join(render(e, substitute) for e in node.elements) + "]"

    if isinstance(node, TemplateLiteral):
        parts = [(quasi.start, _fstring_text(quasi.text)) for quasi in node.quasis]
        parts += [
            (part.start, "{" + render(part.expression, substitute) + "}")
            for part in node.expressions
        ]
        parts.sort(key=lambda part: part[0])
        return 'f"' + "".join(text for _, text in parts) + '"'

    if isinstance(node, UnsupportedNode):
        raise UnsupportedExpression(node.kind)
    raise UnsupportedExpression(type(node).__name__)


def summarize_param(pattern) -> str:
    """
    Call-site argument text for one parameter pattern, e.g.
    ``**{"user_id": sampleUser_id, "page": samplePage}``.
    """
    if isinstance(pattern, ObjectPattern):
        items = [f'"{key}": {sample_name(binding)}' for key, binding in pattern.properties]
        return "**{" + ", ".join(items) + "}"
    if isinstance(pattern, OpaquePattern):
        raise UnsupportedParameterPattern(pattern.name, pattern.kind)
    raise UnsupportedParameterPattern(str(pattern), type(pattern).__name__)
