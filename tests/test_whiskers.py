import pytest

from solsynth.utils.exceptions import InvariantViolation
from solsynth.utils.whiskers import render


def test_parameters_are_substituted():
    assert render("contract <id> {}", {"id": "C0"}) == "contract C0 {}"


def test_values_are_not_rescanned():
    assert render("<a>", {"a": "<b>", "b": "x"}) == "<b>"


def test_conditional_keeps_body_when_true():
    assert render("x<?f> y</f>", {"f": True}) == "x y"


def test_conditional_drops_body_when_false():
    assert render("x<?f> <y></f>", {"f": False}) == "x"


def test_conditional_else_branch():
    template = "<?definition>{ }<!definition>;</definition>"
    assert render(template, {"definition": True}) == "{ }"
    assert render(template, {"definition": False}) == ";"


def test_nested_conditionals():
    template = "<?a>1<?b>2</b></a>"
    assert render(template, {"a": True, "b": True}) == "12"
    assert render(template, {"a": True, "b": False}) == "1"
    assert render(template, {"a": False, "b": True}) == ""


def test_parameters_inside_taken_branch():
    template = "function f()<?return> returns (<ret>)</return>"
    assert render(template, {"return": True, "ret": "uint8 r0"}) == "function f() returns (uint8 r0)"


def test_unbound_parameter_is_an_invariant_violation():
    with pytest.raises(InvariantViolation):
        render("<missing>", {})


def test_non_bool_flag_is_an_invariant_violation():
    with pytest.raises(InvariantViolation):
        render("<?f>x</f>", {"f": "yes"})


def test_non_text_value_is_an_invariant_violation():
    with pytest.raises(InvariantViolation):
        render("<n>", {"n": True})
