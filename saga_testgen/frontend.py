"""
Translate Python syntax trees into the expression and parameter shapes the
renderer and path tracer work on.

Only the handful of expression kinds an effect description is made of are
translated; anything else becomes an ``UnsupportedNode`` so the renderer can
report exactly which construct it stopped at.
"""

from __future__ import annotations

import ast
from pathlib import Path

from .exceptions import MalformedModule
from .models import (
    ArrayExpression,
    CallExpression,
    ExpressionNode,
    Identifier,
    Literal,
    MemberExpression,
    ObjectPattern,
    OpaquePattern,
    ParameterPattern,
    TemplateElement,
    TemplateExpression,
    TemplateLiteral,
    UnsupportedNode,
)


def decode_source(data: bytes, filename: Path | str = "<unknown>") -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedModule(filename, f"not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc


def parse_module(source: str, filename: Path | str = "<unknown>") -> ast.Module:
    try:
        return ast.parse(source, filename=str(filename))
    except SyntaxError as exc:
        detail = f"{exc.msg} (line {exc.lineno})" if exc.lineno else str(exc.msg)
        raise MalformedModule(filename, detail) from exc
    except ValueError as exc:
        # null bytes in the source, before Python 3.12
        raise MalformedModule(filename, str(exc)) from exc


def _raw_text(node: ast.AST, source: str) -> str:
    segment = ast.get_source_segment(source, node)
    if segment is None:
        return ast.unparse(node)
    if "\n" in segment:
        # implicit concatenation across lines only parses inside brackets
        return f"({segment})"
    return segment


def to_expression(node: ast.AST, source: str) -> ExpressionNode:
    if isinstance(node, ast.Constant):
        return Literal(_raw_text(node, source))

    # -1, +2.5: a sign in front of a number is still written as one literal
    if (
        isinstance(node, ast.UnaryOp)
        and isinstance(node.op, (ast.USub, ast.UAdd))
        and isinstance(node.operand, ast.Constant)
    ):
        return Literal(_raw_text(node, source))

    if isinstance(node, ast.Name):
        return Identifier(node.id)

    if isinstance(node, ast.Attribute):
        if not isinstance(node.value, ast.Name):
            return UnsupportedNode("Attribute")
        return MemberExpression(node.value.id, node.attr)

    if isinstance(node, ast.Call):
        if node.keywords:
            return UnsupportedNode("keyword")
        if any(isinstance(arg, ast.Starred) for arg in node.args):
            return UnsupportedNode("Starred")
        return CallExpression(
            callee=to_expression(node.func, source),
            arguments=[to_expression(arg, source) for arg in node.args],
        )

    if isinstance(node, ast.List):
        return ArrayExpression([to_expression(elt, source) for elt in node.elts])

    if isinstance(node, ast.JoinedStr):
        return _to_template(node, source)

    return UnsupportedNode(type(node).__name__)


def _to_template(node: ast.JoinedStr, source: str) -> ExpressionNode:
    # The parts of an f-string come back in source order, so their index is
    # the offset used to interleave them again.
    template = TemplateLiteral()
    for start, part in enumerate(node.values):
        if isinstance(part, ast.Constant):
            template.quasis.append(TemplateElement(text=str(part.value), start=start))
        elif isinstance(part, ast.FormattedValue):
            if part.conversion != -1 or part.format_spec is not None:
                return UnsupportedNode("FormattedValue")
            template.expressions.append(
                TemplateExpression(to_expression(part.value, source), start=start)
            )
        else:
            return UnsupportedNode(type(part).__name__)
    return template


def to_parameter_patterns(args: ast.arguments) -> list[ParameterPattern]:
    """
    Keyword-only parameters are bound by name at the call site, so together
    they form one object pattern; every other parameter is opaque.
    """
    patterns: list[ParameterPattern] = []
    for arg in [*args.posonlyargs, *args.args]:
        patterns.append(OpaquePattern(kind="positional", name=arg.arg))
    if args.vararg is not None:
        patterns.append(OpaquePattern(kind="vararg", name=args.vararg.arg))
    if args.kwonlyargs:
        patterns.append(ObjectPattern([(arg.arg, arg.arg) for arg in args.kwonlyargs]))
    if args.kwarg is not None:
        patterns.append(OpaquePattern(kind="kwarg", name=args.kwarg.arg))
    return patterns
