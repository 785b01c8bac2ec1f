from __future__ import annotations

import ast
import logging

from .exceptions import AnalysisError
from .frontend import to_parameter_patterns
from .models import Declaration, DeclarationKind, ImportBinding, ModuleAnalysis, Path
from .path_tracer import trace
from .renderer import summarize_param

logger = logging.getLogger("saga_testgen.collector")


def exported_names(tree: ast.Module) -> set[str] | None:
    """
    Names listed in a literal top-level ``__all__``, or None when the module
    does not declare one.
    """
    for node in tree.body:
        if not isinstance(node, ast.Assign):
            continue
        if not any(isinstance(t, ast.Name) and t.id == "__all__" for t in node.targets):
            continue
        try:
            names = ast.literal_eval(node.value)
        except (ValueError, TypeError):
            names = None
        if not isinstance(names, (list, tuple)):
            logger.debug("__all__ is not a literal sequence; falling back to public names")
            return None
        return {name for name in names if isinstance(name, str)}
    return None


def _is_exported(name: str, exported: set[str] | None) -> bool:
    if exported is not None:
        return name in exported
    return not name.startswith("_")


def _declared_name(node: ast.stmt) -> str | None:
    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
        return node.name
    if isinstance(node, ast.Assign):
        if len(node.targets) == 1 and isinstance(node.targets[0], ast.Name):
            return node.targets[0].id
    if isinstance(node, ast.AnnAssign):
        if node.value is not None and isinstance(node.target, ast.Name):
            return node.target.id
    return None


def _resolve_relative(module_path: str, level: int, module: str | None, is_package: bool = False) -> str:
    # "app.sagas.client", level 1 -> "app.sagas"; a package is its own level 1
    parts = module_path.split(".")
    drop = level - 1 if is_package else level
    package = ".".join(parts[: len(parts) - drop]) if drop < len(parts) else ""
    return ".".join(part for part in (package, module) if part)


def import_bindings(
    node: ast.Import | ast.ImportFrom, module_path: str, is_package: bool = False
) -> list[ImportBinding]:
    bindings: list[ImportBinding] = []
    if isinstance(node, ast.Import):
        for alias in node.names:
            if alias.asname:
                bindings.append(ImportBinding(alias.asname, f"import {alias.name} as {alias.asname}"))
            else:
                bindings.append(ImportBinding(alias.name.split(".")[0], f"import {alias.name}"))
        return bindings

    source_module = node.module or ""
    if node.level:
        source_module = _resolve_relative(module_path, node.level, node.module, is_package)
    for alias in node.names:
        if alias.name == "*":
            continue
        if alias.asname:
            statement = f"from {source_module} import {alias.name} as {alias.asname}"
        else:
            statement = f"from {source_module} import {alias.name}"
        bindings.append(ImportBinding(alias.asname or alias.name, statement))
    return bindings


def collect_declaration(node: ast.stmt, name: str, source: str) -> Declaration | None:
    """
    Analyze one exported top-level statement. Functions are sagas, bound
    values are selects; anything else is not a declaration.
    """
    if isinstance(node, ast.FunctionDef):
        params = [summarize_param(p) for p in to_parameter_patterns(node.args)]
        root = Path()
        return Declaration(
            kind=DeclarationKind.SAGA,
            name=name,
            lineno=node.lineno,
            params=params,
            paths=trace(node.body, root, source),
        )

    if isinstance(node, (ast.Assign, ast.AnnAssign)):
        root = Path()
        return Declaration(
            kind=DeclarationKind.SELECT,
            name=name,
            lineno=node.lineno,
            paths=trace([node.value], root, source),
        )

    return None


def collect_declarations(
    tree: ast.Module, source: str, module_path: str = "", is_package: bool = False
) -> ModuleAnalysis:
    analysis = ModuleAnalysis(module_path=module_path)
    exported = exported_names(tree)

    for node in tree.body:
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            analysis.imports.extend(import_bindings(node, module_path, is_package))
            continue

        name = _declared_name(node)
        if name is None:
            continue
        analysis.defined_names.append(name)
        if not _is_exported(name, exported):
            continue

        try:
            declaration = collect_declaration(node, name, source)
        except AnalysisError as exc:
            exc.with_declaration(name)
            logger.warning("Skipping %s.%s: %s", module_path or "<module>", name, exc.message)
            analysis.errors.append(exc)
            continue

        if declaration is not None:
            logger.debug(
                "Collected %s %s with %d path(s)",
                declaration.kind.value,
                name,
                len(declaration.paths),
            )
            analysis.declarations.append(declaration)

    return analysis
