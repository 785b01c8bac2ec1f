"""
Control-flow-sensitive walk over a declaration body.

Every ``if`` with an ``else`` and every ``try`` with an ``except`` forks the
path being traced; each path collects the effects yielded along it, in source
order, until a ``return`` freezes it.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Iterable

from .frontend import to_expression
from .models import Assertion, Literal, Path, StepKind
from .renderer import render

FAILURE_MARKER = "fail to "


@dataclass
class TraceContext:
    path: Path
    paths: list[Path]
    source: str
    exceptional: bool = False

    def branch(self, path: Path, exceptional: bool = False) -> "TraceContext":
        return TraceContext(path=path, paths=self.paths, source=self.source, exceptional=exceptional)


def trace(statements: Iterable[ast.AST], root: Path, source: str) -> list[Path]:
    """
    Trace ``statements`` starting from ``root`` and return every path found,
    ``root`` first.
    """
    paths = [root]
    trace_block(list(statements), TraceContext(path=root, paths=paths, source=source))
    return paths


def trace_block(statements: list[ast.AST], ctx: TraceContext) -> None:
    for statement in statements:
        trace_node(statement, ctx)
        if ctx.path.returned:
            # carry on with a sibling path that is still open, if any
            active = next((path for path in ctx.paths if not path.returned), None)
            if active is None:
                return
            ctx.path = active


def trace_node(node: ast.AST, ctx: TraceContext) -> None:
    if isinstance(node, ast.Return):
        ctx.path.returned = True

    elif isinstance(node, ast.If):
        _trace_if(node, ctx)

    elif isinstance(node, ast.Try):
        _trace_try(node, ctx)

    elif isinstance(node, ast.Expr):
        trace_node(node.value, ctx)

    elif isinstance(node, ast.Assign):
        if len(node.targets) == 1:
            trace_node(node.value, ctx)

    elif isinstance(node, ast.AnnAssign):
        if node.value is not None:
            trace_node(node.value, ctx)

    elif isinstance(node, ast.Yield):
        _trace_yield(node, ctx)


def _trace_if(node: ast.If, ctx: TraceContext) -> None:
    alternate = ctx.path.fork(FAILURE_MARKER)
    trace_block(node.body, ctx.branch(ctx.path))
    if node.orelse:
        ctx.paths.append(alternate)
        trace_block(node.orelse, ctx.branch(alternate))


def _trace_try(node: ast.Try, ctx: TraceContext) -> None:
    snapshot = ctx.path.fork(FAILURE_MARKER)
    # the else clause only runs when the body completed, so it extends the body
    trace_block(node.body + node.orelse, ctx.branch(ctx.path))
    for handler in node.handlers:
        failed = snapshot.fork()
        ctx.paths.append(failed)
        trace_block(handler.body, ctx.branch(failed, exceptional=True))


def _trace_yield(node: ast.Yield, ctx: TraceContext) -> None:
    effect = Literal("None") if node.value is None else to_expression(node.value, ctx.source)
    step = StepKind.THROW if ctx.exceptional else StepKind.NEXT
    ctx.path.assertions.append(Assertion(step=step, content=render(effect, substitute=True)))
