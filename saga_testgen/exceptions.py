from __future__ import annotations

from pathlib import Path


class AnalysisError(Exception):
    """
    Base class for everything the analysis reports to its caller.

    ``declaration`` and ``node_kind`` locate the construct that could not be
    handled; either may be unknown at the point the error is raised and
    filled in while it propagates.
    """

    def __init__(
        self,
        message: str,
        declaration: str | None = None,
        node_kind: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.declaration = declaration
        self.node_kind = node_kind

    def with_declaration(self, name: str) -> "AnalysisError":
        if self.declaration is None:
            self.declaration = name
        return self

    def __str__(self) -> str:
        if self.declaration:
            return f"{self.declaration}: {self.message}"
        return self.message


class UnsupportedExpression(AnalysisError):
    def __init__(self, node_kind: str, declaration: str | None = None) -> None:
        super().__init__(
            f"cannot render expression of kind {node_kind!r}",
            declaration=declaration,
            node_kind=node_kind,
        )


class UnsupportedParameterPattern(AnalysisError):
    def __init__(self, param: str, node_kind: str, declaration: str | None = None) -> None:
        super().__init__(
            f"parameter {param!r} is a {node_kind} parameter; "
            "only keyword-only parameters can be sampled",
            declaration=declaration,
            node_kind=node_kind,
        )
        self.param = param


class MalformedModule(AnalysisError):
    def __init__(self, path: Path | str, detail: str) -> None:
        super().__init__(f"cannot parse {path}: {detail}", node_kind="Module")
        self.path = path
        self.detail = detail
