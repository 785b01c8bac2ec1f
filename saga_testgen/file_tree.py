from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .models import FileInfo

IGNORE_DIRS = (".venv", "env", "__pycache__", ".git", ".mypy_cache")


def is_test_file(path: Path) -> bool:
    return path.name.startswith("test_") or path.name == "conftest.py"


def collect_python_files(
    directory: Path,
    project_root: Path,
    ignore_dirs: Iterable[str] = IGNORE_DIRS,
) -> list[FileInfo]:
    """
    Every module below ``directory`` that could hold sagas; existing test
    modules (including generated ones) are skipped.
    """
    project_root = project_root.resolve()
    ignored = set(ignore_dirs)
    files: list[FileInfo] = []
    directory = directory.resolve()
    for path in sorted(directory.rglob("*.py")):
        if any(part in ignored for part in path.relative_to(directory).parts):
            continue
        if is_test_file(path):
            continue
        files.append(FileInfo(path=path, rel_path=_relative_to(path, project_root)))
    return files


def _relative_to(path: Path, project_root: Path) -> Path:
    try:
        return path.relative_to(project_root)
    except ValueError:
        # outside the project: only the file name is meaningful
        return Path(path.name)


def infer_module_path(project_root: Path, rel_path: Path) -> str:
    """
    Convert a relative file path to a Python module path.

    Example:
        src/app/sagas/client.py -> app.sagas.client
        app/sagas/__init__.py   -> app.sagas
    """
    parts = list(rel_path.with_suffix("").parts)
    if parts and parts[0] in {"src"}:
        parts = parts[1:]
    if len(parts) > 1 and parts[-1] == "__init__":
        parts = parts[:-1]
    return ".".join(parts)


def fill_module_paths(project_root: Path, files: list[FileInfo]) -> None:
    for f in files:
        f.module_path = infer_module_path(project_root, f.rel_path)


def resolve_targets(project_root: Path, targets: Iterable[Path]) -> list[FileInfo]:
    """
    Expand files and directories given on the command line into FileInfos
    with their module paths filled in. Duplicates are dropped.
    """
    project_root = project_root.resolve()
    files: list[FileInfo] = []
    seen: set[Path] = set()
    for target in targets:
        target = target if target.is_absolute() else project_root / target
        if target.is_dir():
            found = collect_python_files(target, project_root)
        else:
            target = target.resolve()
            found = [FileInfo(path=target, rel_path=_relative_to(target, project_root))]
        for f in found:
            if f.path in seen:
                continue
            seen.add(f.path)
            files.append(f)
    fill_module_paths(project_root, files)
    return files
