from pathlib import Path

from saga_testgen.config import ScenarioConfig
from saga_testgen.declaration_collector import collect_declarations
from saga_testgen.frontend import parse_module
from saga_testgen.models import (
    Assertion,
    Declaration,
    DeclarationKind,
    ModuleAnalysis,
    Path as TracePath,
    StepKind,
)
from saga_testgen.scenario_assembler import (
    assemble_test_module,
    import_lines,
    render_scenario,
    sample_constants,
    scenario_name,
)


def get_example_root() -> Path:
    return Path(__file__).parent / "example_project"


def analyze_client() -> ModuleAnalysis:
    source = (get_example_root() / "app" / "sagas" / "client.py").read_text(encoding="utf-8")
    return collect_declarations(parse_module(source), source, module_path="app.sagas.client")


def test_scenario_name_prefixes_variation() -> None:
    declaration = Declaration(kind=DeclarationKind.SAGA, name="fetch_user", lineno=1)
    assert scenario_name(TracePath(), declaration) == "test_fetch_user"
    assert scenario_name(TracePath(variation="fail to fail to "), declaration) == "test_fail_to_fail_to_fetch_user"


def test_render_scenario_drives_each_step() -> None:
    path = TracePath(
        variation="fail to ",
        assertions=[
            Assertion(StepKind.NEXT, 'put("START", sampleA)'),
            Assertion(StepKind.THROW, 'put("FAILED", sampleA)'),
        ],
    )
    declaration = Declaration(
        kind=DeclarationKind.SAGA,
        name="run",
        lineno=1,
        params=['**{"a": sampleA}'],
        paths=[path],
    )
    text = render_scenario(declaration, path, "test_fail_to_run", ScenarioConfig())
    assert text == "\n".join(
        [
            "def test_fail_to_run() -> None:",
            '    saga = sagas.run(**{"a": sampleA})',
            "",
            '    assert next(saga) == put("START", sampleA)',
            "",
            '    assert saga.throw(Exception("Sample")) == put("FAILED", sampleA)',
            "",
            "    with pytest.raises(StopIteration):",
            "        next(saga)",
        ]
    )


def test_import_lines_only_for_referenced_names() -> None:
    lines = import_lines(analyze_client(), ScenarioConfig())
    assert lines == [
        "import pytest",
        "",
        "import app.sagas.client as sagas",
        "from app import api",
        "from app.effects import call",
        "from app.effects import put",
        "from app.effects import select",
        "from app.sagas.client import get_token",
    ]


def test_sample_constants_are_sorted_and_unique() -> None:
    assert sample_constants(analyze_client(), ScenarioConfig(sample_value="'x'")) == [
        "sampleName = 'x'",
        "sampleToken = 'x'",
        "sampleUser_id = 'x'",
    ]


def test_assembled_module_has_one_test_per_saga_path() -> None:
    code = assemble_test_module(analyze_client())
    compile(code, "test_client.py", "exec")

    for name in (
        "def test_ping() -> None:",
        "def test_fetch_user() -> None:",
        "def test_fail_to_fetch_user() -> None:",
        "def test_save_profile() -> None:",
        "def test_fail_to_save_profile() -> None:",
    ):
        assert name in code
    assert code.count("def test_") == 5
    assert 'saga = sagas.save_profile(**{"user_id": sampleUser_id, "name": sampleName})' in code
    assert code.count("with pytest.raises(StopIteration):") == 5


def test_duplicate_titles_get_suffixes() -> None:
    declaration = Declaration(
        kind=DeclarationKind.SAGA,
        name="run",
        lineno=1,
        paths=[TracePath(variation="fail to "), TracePath(variation="fail to ")],
    )
    code = assemble_test_module(ModuleAnalysis(module_path="pkg.mod", declarations=[declaration]))
    assert "def test_fail_to_run() -> None:" in code
    assert "def test_fail_to_run_2() -> None:" in code


def test_custom_module_alias() -> None:
    code = assemble_test_module(analyze_client(), ScenarioConfig(module_alias="client"))
    assert "import app.sagas.client as client" in code
    assert "saga = client.ping()" in code


def test_multiline_literal_effect_compiles() -> None:
    source = 'def notice(*, a):\n    yield ("first "\n           "second")\n'
    analysis = collect_declarations(parse_module(source), source, module_path="pkg.notices")
    code = assemble_test_module(analysis)
    compile(code, "test_notices.py", "exec")
    assert 'assert next(saga) == ("first "\n           "second")' in code
