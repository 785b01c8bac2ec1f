from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from .config import AppConfig, CheckConfig, ProjectConfig, ScenarioConfig
from .generator import GenerationReport, SagaTestGenerator


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="saga-testgen",
        description="Generate pytest scenarios for every control-flow path of exported saga generators",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Modules or directories to analyze. Directories are searched recursively.",
    )
    parser.add_argument(
        "--project-dir",
        default=".",
        help="Project root used to derive module import paths (default: current directory).",
    )
    parser.add_argument(
        "--output-dir",
        help="Directory to write generated test modules to. Defaults to next to each module.",
    )
    parser.add_argument(
        "--module-alias",
        default="sagas",
        help="Name the module under test is imported as in generated tests.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Run pylint (errors only) on every generated file.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with an error if any declaration could not be analyzed.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("saga_testgen")
    if logger.handlers:
        return
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    formatter.converter = time.gmtime
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def build_config(args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        project=ProjectConfig(
            project_dir=Path(args.project_dir).resolve(),
            output_dir=Path(args.output_dir).resolve() if args.output_dir else None,
            targets=[Path(p).resolve() for p in args.paths],
        ),
        scenario=ScenarioConfig(module_alias=args.module_alias),
        check=CheckConfig(run_pylint=args.check, strict=args.strict),
    )


def exit_code(report: GenerationReport, config: AppConfig) -> int:
    if report.malformed:
        return 1
    if config.check.strict and report.declaration_errors:
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    config = build_config(args)

    report = SagaTestGenerator(config).run()

    scenarios = sum(
        len(saga.paths) for module in report.generated for saga in module.analysis.sagas
    )
    print(
        f"Generated {scenarios} scenario(s) in {len(report.generated)} file(s); "
        f"{len(report.skipped)} module(s) without sagas, "
        f"{len(report.malformed)} malformed, "
        f"{len(report.declaration_errors)} declaration(s) skipped."
    )
    for module in report.generated:
        if module.pylint_output is not None:
            print(f"\n=== pylint: {module.test_path} ===\n{module.pylint_output.strip()}")
    return exit_code(report, config)


if __name__ == "__main__":
    sys.exit(main())
