import pytest

from saga_testgen.exceptions import UnsupportedExpression, UnsupportedParameterPattern
from saga_testgen.models import (
    ArrayExpression,
    CallExpression,
    Identifier,
    Literal,
    MemberExpression,
    ObjectPattern,
    OpaquePattern,
    TemplateElement,
    TemplateExpression,
    TemplateLiteral,
    UnsupportedNode,
)
from saga_testgen.renderer import render, sample_name, summarize_param


def test_sample_name_capitalizes_first_character() -> None:
    assert sample_name("user") == "sampleUser"
    assert sample_name("user_id") == "sampleUser_id"
    assert sample_name("x") == "sampleX"


def test_literal_keeps_source_text_verbatim() -> None:
    assert render(Literal("'single'")) == "'single'"
    assert render(Literal('"with \\"escape\\""'), substitute=True) == '"with \\"escape\\""'


def test_identifier_substitution() -> None:
    assert render(Identifier("user")) == "user"
    assert render(Identifier("user"), substitute=True) == "sampleUser"


def test_member_expression_substitutes_object_only() -> None:
    node = MemberExpression("action", "payload")
    assert render(node) == "action.payload"
    assert render(node, substitute=True) == "sampleAction.payload"


def test_call_keeps_callee_and_first_argument() -> None:
    node = CallExpression(
        callee=Identifier("call"),
        arguments=[MemberExpression("api", "fetch"), Identifier("user"), Identifier("page")],
    )
    assert render(node, substitute=True) == "call(api.fetch, sampleUser, samplePage)"
    assert render(node) == "call(api.fetch, user, page)"


def test_nested_first_argument_is_never_substituted() -> None:
    inner = CallExpression(Identifier("user_loaded"), [Identifier("user"), Identifier("extra")])
    node = CallExpression(Identifier("put"), [inner, Identifier("meta")])
    assert render(node, substitute=True) == "put(user_loaded(user, extra), sampleMeta)"


def test_array_threads_flag_to_elements() -> None:
    node = ArrayExpression([Identifier("a"), Literal("1"), CallExpression(Identifier("f"), [Identifier("b"), Identifier("c")])])
    assert render(node, substitute=True) == "[sampleA, 1, f(b, sampleC)]"
    assert render(ArrayExpression([])) == "[]"


def test_template_parts_merge_by_offset() -> None:
    node = TemplateLiteral(
        quasis=[TemplateElement("!", start=4), TemplateElement("Hello ", start=0)],
        expressions=[
            TemplateExpression(Identifier("last"), start=3),
            TemplateExpression(Identifier("first"), start=1),
        ],
    )
    assert render(node) == 'f"Hello {first}{last}!"'
    assert render(node, substitute=True) == 'f"Hello {sampleFirst}{sampleLast}!"'


def test_template_text_is_escaped_for_fstring() -> None:
    node = TemplateLiteral(quasis=[TemplateElement('say "hi" {x}\n', start=0)])
    assert render(node) == 'f"say \\"hi\\" {{x}}\\n"'


def test_render_is_repeatable() -> None:
    node = CallExpression(Identifier("call"), [Identifier("fn"), Identifier("arg")])
    assert render(node, True) == render(node, True)


def test_unsupported_node_raises_with_kind() -> None:
    with pytest.raises(UnsupportedExpression) as excinfo:
        render(CallExpression(Identifier("call"), [Identifier("fn"), UnsupportedNode("Dict")]), True)
    assert excinfo.value.node_kind == "Dict"


def test_unknown_object_raises() -> None:
    with pytest.raises(UnsupportedExpression):
        render(object())


def test_summarize_object_pattern_keeps_every_property() -> None:
    pattern = ObjectPattern([("user_id", "user_id"), ("page", "page")])
    assert summarize_param(pattern) == '**{"user_id": sampleUser_id, "page": samplePage}'


def test_summarize_opaque_pattern_is_unsupported() -> None:
    with pytest.raises(UnsupportedParameterPattern) as excinfo:
        summarize_param(OpaquePattern(kind="positional", name="action"))
    assert excinfo.value.param == "action"
    assert excinfo.value.node_kind == "positional"
