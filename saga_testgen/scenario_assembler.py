"""
Turn a module analysis into the text of a pytest module: one test per saga
path, driving the generator step by step and comparing every yielded effect.
"""

from __future__ import annotations

import re
from textwrap import dedent

from .config import ScenarioConfig
from .models import Assertion, Declaration, ModuleAnalysis, Path, StepKind

_NAME_PATTERN = re.compile(r"(?<![\w.])([A-Za-z_]\w*)")
_SAMPLE_PATTERN = re.compile(r"(?<![\w.])(sample[A-Z_]\w*)")


def step_call(assertion: Assertion, config: ScenarioConfig) -> str:
    if assertion.step is StepKind.THROW:
        return f"saga.throw({config.thrown_exception})"
    return "next(saga)"


def scenario_name(path: Path, declaration: Declaration) -> str:
    title = (path.variation + declaration.name).replace(" ", "_")
    return "test_" + re.sub(r"\W", "_", title)


def render_scenario(
    declaration: Declaration,
    path: Path,
    function_name: str,
    config: ScenarioConfig,
) -> str:
    params = ", ".join(declaration.params)
    lines = [
        f"def {function_name}() -> None:",
        f"    saga = {config.module_alias}.{declaration.name}({params})",
    ]
    for assertion in path.assertions:
        lines.append("")
        lines.append(f"    assert {step_call(assertion, config)} == {assertion.content}")
    lines.append("")
    lines.append("    with pytest.raises(StopIteration):")
    lines.append("        next(saga)")
    return "\n".join(lines)


def render_scenarios(analysis: ModuleAnalysis, config: ScenarioConfig) -> list[str]:
    scenarios: list[str] = []
    seen: dict[str, int] = {}
    for declaration in analysis.sagas:
        for path in declaration.paths:
            name = scenario_name(path, declaration)
            seen[name] = seen.get(name, 0) + 1
            if seen[name] > 1:
                name = f"{name}_{seen[name]}"
            scenarios.append(render_scenario(declaration, path, name, config))
    return scenarios


def _referenced_text(analysis: ModuleAnalysis) -> str:
    chunks: list[str] = []
    for declaration in analysis.sagas:
        chunks.extend(declaration.params)
        for path in declaration.paths:
            chunks.extend(assertion.content for assertion in path.assertions)
    return "\n".join(chunks)


def import_lines(analysis: ModuleAnalysis, config: ScenarioConfig) -> list[str]:
    """
    Imports the generated tests need: pytest, the module under test, and the
    analyzed module's own imports for every name the assertions mention.
    """
    referenced = set(_NAME_PATTERN.findall(_referenced_text(analysis)))

    lines = ["import pytest", ""]
    lines.append(f"import {analysis.module_path} as {config.module_alias}")

    statements = sorted(
        {binding.statement for binding in analysis.imports if binding.name in referenced}
    )
    lines.extend(statements)

    imported = {binding.name for binding in analysis.imports}
    local = [
        name
        for name in dict.fromkeys(analysis.defined_names)
        if name in referenced and name not in imported
    ]
    if local:
        lines.append(f"from {analysis.module_path} import {', '.join(local)}")
    return lines


def sample_constants(analysis: ModuleAnalysis, config: ScenarioConfig) -> list[str]:
    known = {binding.name for binding in analysis.imports} | set(analysis.defined_names)
    samples = sorted(
        set(_SAMPLE_PATTERN.findall(_referenced_text(analysis))) - known
    )
    return [f"{sample} = {config.sample_value}" for sample in samples]


def assemble_test_module(analysis: ModuleAnalysis, config: ScenarioConfig | None = None) -> str:
    config = config or ScenarioConfig()
    header = dedent(
        f'''\
        """
        Generated scenarios for {analysis.module_path}.
        """
        '''
    )
    sections = [header + "\n" + "\n".join(import_lines(analysis, config))]
    constants = sample_constants(analysis, config)
    if constants:
        sections.append("\n".join(constants))
    sections.extend(render_scenarios(analysis, config))
    return "\n\n\n".join(sections) + "\n"
