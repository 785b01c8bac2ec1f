from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from .config import AppConfig
from .declaration_collector import collect_declarations
from .exceptions import AnalysisError, MalformedModule
from .file_tree import resolve_targets
from .frontend import decode_source, parse_module
from .models import FileInfo, GeneratedTestModule, ModuleAnalysis
from .scenario_assembler import assemble_test_module

logger = logging.getLogger("saga_testgen.generator")

PYLINT_MISSING = "pylint not found in PATH"
_PYLINT_ERROR = re.compile(r"\bE\d{4}\b|SyntaxError")


@dataclass
class GenerationReport:
    generated: list[GeneratedTestModule] = field(default_factory=list)
    malformed: list[MalformedModule] = field(default_factory=list)
    skipped: list[FileInfo] = field(default_factory=list)  # no sagas found
    declaration_errors: list[AnalysisError] = field(default_factory=list)


class SagaTestGenerator:
    """
    Glue between storage and the analysis: read a module, analyze it, write
    its scenarios next to it (or into the output directory) and optionally
    lint the result.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def analyze_file(self, file_info: FileInfo) -> ModuleAnalysis:
        source = decode_source(file_info.path.read_bytes(), filename=file_info.path)
        tree = parse_module(source, filename=file_info.path)
        module_path = file_info.module_path or file_info.path.stem
        return collect_declarations(
            tree,
            source,
            module_path=module_path,
            is_package=file_info.path.name == "__init__.py",
        )

    def test_path_for(self, file_info: FileInfo) -> Path:
        file_name = f"{self.config.scenario.test_file_prefix}{file_info.path.name}"
        output_dir = self.config.project.output_dir
        if output_dir is None:
            return file_info.path.parent / file_name
        # keep the package layout so same-named modules do not collide
        return output_dir / file_info.rel_path.parent / file_name

    def generate_for_file(self, file_info: FileInfo) -> GeneratedTestModule | None:
        return self.write_scenarios(file_info, self.analyze_file(file_info))

    def write_scenarios(
        self, file_info: FileInfo, analysis: ModuleAnalysis
    ) -> GeneratedTestModule | None:
        if not analysis.sagas:
            logger.info("No exported sagas in %s", file_info.rel_path)
            return None

        test_code = assemble_test_module(analysis, self.config.scenario)
        test_path = self.test_path_for(file_info)
        test_path.parent.mkdir(parents=True, exist_ok=True)
        test_path.write_text(test_code, encoding="utf-8")
        logger.info(
            "Wrote %d scenario(s) for %s to %s",
            sum(len(saga.paths) for saga in analysis.sagas),
            analysis.module_path,
            test_path,
        )

        generated = GeneratedTestModule(
            source_file=file_info,
            test_path=test_path,
            test_code=test_code,
            analysis=analysis,
        )
        if self.config.check.run_pylint:
            generated.pylint_output = self._run_pylint_on_file(test_path)
            if self._has_pylint_errors(generated.pylint_output):
                logger.warning("pylint reported errors in %s", test_path)
        return generated

    def run(self) -> GenerationReport:
        report = GenerationReport()
        files = resolve_targets(self.config.project.project_dir, self.config.project.targets)
        for file_info in files:
            try:
                analysis = self.analyze_file(file_info)
            except MalformedModule as exc:
                logger.error("%s", exc)
                report.malformed.append(exc)
                continue
            report.declaration_errors.extend(analysis.errors)
            generated = self.write_scenarios(file_info, analysis)
            if generated is None:
                report.skipped.append(file_info)
            else:
                report.generated.append(generated)
        return report

    def _run_pylint_on_file(self, path: Path) -> str:
        command = ["pylint", "--disable=all", "--enable=E", str(path)]
        try:
            # from the project root, so the generated imports resolve
            completed = subprocess.run(
                command,
                cwd=str(self.config.project.project_dir),
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError:
            logger.warning("pylint is not installed; skipping check of %s", path)
            return PYLINT_MISSING
        return f"{completed.stdout}\n{completed.stderr}"

    def _has_pylint_errors(self, pylint_output: str) -> bool:
        if not pylint_output or pylint_output == PYLINT_MISSING:
            return False
        return bool(_PYLINT_ERROR.search(pylint_output))
