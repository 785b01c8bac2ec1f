from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ScenarioConfig:
    module_alias: str = "sagas"
    sample_value: str = '"Sample"'
    thrown_exception: str = 'Exception("Sample")'
    test_file_prefix: str = "test_"


@dataclass
class CheckConfig:
    run_pylint: bool = False
    strict: bool = False            # per-declaration failures fail the run


@dataclass
class ProjectConfig:
    project_dir: Path
    output_dir: Path | None = None  # if None -> next to each analyzed module
    targets: list[Path] = field(default_factory=list)


@dataclass
class AppConfig:
    project: ProjectConfig
    scenario: ScenarioConfig = field(default_factory=ScenarioConfig)
    check: CheckConfig = field(default_factory=CheckConfig)
