from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path as FilePath
from typing import Union

from .exceptions import AnalysisError


@dataclass
class FileInfo:
    path: FilePath                  # absolute path
    rel_path: FilePath              # path relative to project root
    module_path: str | None = None  # e.g. "app.sagas.client"


# ---- expression nodes ----


@dataclass
class Literal:
    raw: str                        # source text exactly as written


@dataclass
class Identifier:
    name: str


@dataclass
class MemberExpression:
    object_name: str
    property_name: str


@dataclass
class CallExpression:
    callee: "ExpressionNode"
    arguments: list["ExpressionNode"] = field(default_factory=list)


@dataclass
class ArrayExpression:
    elements: list["ExpressionNode"] = field(default_factory=list)


@dataclass
class TemplateElement:
    text: str
    start: int                      # source offset of the part


@dataclass
class TemplateExpression:
    expression: "ExpressionNode"
    start: int


@dataclass
class TemplateLiteral:
    """
    Literal text parts and embedded expressions kept in separate sequences.
    Only their ``start`` offsets say how they interleave.
    """

    quasis: list[TemplateElement] = field(default_factory=list)
    expressions: list[TemplateExpression] = field(default_factory=list)


@dataclass
class UnsupportedNode:
    kind: str                       # syntax node class name, e.g. "Dict"


ExpressionNode = Union[
    Literal,
    Identifier,
    MemberExpression,
    CallExpression,
    ArrayExpression,
    TemplateLiteral,
    UnsupportedNode,
]


# ---- parameter patterns ----


@dataclass
class ObjectPattern:
    properties: list[tuple[str, str]] = field(default_factory=list)  # (key, binding)


@dataclass
class OpaquePattern:
    kind: str                       # "positional", "vararg", "kwarg", ...
    name: str


ParameterPattern = Union[ObjectPattern, OpaquePattern]


# ---- traced paths ----


class StepKind(str, Enum):
    NEXT = "next"                   # generator resumed normally
    THROW = "throw"                 # generator resumed with a thrown failure


class DeclarationKind(str, Enum):
    SAGA = "saga"
    SELECT = "select"


@dataclass
class Assertion:
    step: StepKind
    content: str


@dataclass
class Path:
    variation: str = ""
    assertions: list[Assertion] = field(default_factory=list)
    returned: bool = False

    def fork(self, marker: str = "") -> "Path":
        return Path(
            variation=self.variation + marker,
            assertions=list(self.assertions),
        )


@dataclass
class Declaration:
    kind: DeclarationKind
    name: str
    lineno: int
    params: list[str] = field(default_factory=list)
    paths: list[Path] = field(default_factory=list)


@dataclass
class ImportBinding:
    name: str                       # name bound in the analyzed module
    statement: str                  # import line that binds it


@dataclass
class ModuleAnalysis:
    """
    Result of one traversal of one module, handed as-is to the scenario
    assembler.
    """

    module_path: str
    declarations: list[Declaration] = field(default_factory=list)
    errors: list[AnalysisError] = field(default_factory=list)
    imports: list[ImportBinding] = field(default_factory=list)
    defined_names: list[str] = field(default_factory=list)

    @property
    def sagas(self) -> list[Declaration]:
        return [d for d in self.declarations if d.kind is DeclarationKind.SAGA]

    @property
    def selects(self) -> list[Declaration]:
        return [d for d in self.declarations if d.kind is DeclarationKind.SELECT]


@dataclass
class GeneratedTestModule:
    source_file: FileInfo
    test_path: FilePath
    test_code: str
    analysis: ModuleAnalysis
    pylint_output: str | None = None
