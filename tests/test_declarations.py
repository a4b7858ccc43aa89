import re

import pytest

from solsynth.constants import MAX_FUNCTION_IDENTIFIERS
from solsynth.core.synthesizer import SolidityGenerator
from solsynth.generator.base import GeneratorKind
from solsynth.generator.expressions import CONSTANT_KINDS, ExpressionKind
from solsynth.generator.state import FunctionState, Inheritance, Mutability, Visibility


@pytest.fixture
def synthesizer():
    synthesizer = SolidityGenerator(57)
    synthesizer.test_state().add_source_unit("su0.sol")
    return synthesizer


def _strip_natspec(text):
    lines = text.splitlines()
    while lines and lines[0].startswith("///"):
        lines.pop(0)
    return "\n".join(lines)


def test_free_functions(synthesizer):
    generator = synthesizer.generator(GeneratorKind.FUNCTION_DEFINITION)
    generator.free_function_mode()
    for _ in range(50):
        text = _strip_natspec(generator.visit())
        header = text.split("{", 1)[0]
        assert re.match(r"^function f\d+\(", text)
        assert text.endswith("}")
        assert not re.search(r"\b(virtual|override)\b", header)
        assert generator.function_state.mutability is not Mutability.PAYABLE
        assert generator.function_state.inheritance is Inheritance.NONE


def test_no_duplicate_signatures_in_a_unit(synthesizer):
    generator = synthesizer.generator(GeneratorKind.FUNCTION_DEFINITION)
    generator.contract_function_mode(abstract=True, has_base_contracts=True)
    for _ in range(60):
        generator.visit()
    functions = synthesizer.test_state().current_unit().functions
    assert len(functions) == 60
    for i, left in enumerate(functions):
        assert all(left != right for right in functions[i + 1:])


def test_exhausted_names_fall_back_to_a_fresh_one(synthesizer):
    state = synthesizer.test_state()
    for i in range(1, MAX_FUNCTION_IDENTIFIERS + 1):
        assert state.register_function(FunctionState(name=f"f{i}"))
    generator = synthesizer.generator(GeneratorKind.FUNCTION_DEFINITION)
    function = FunctionState(name="f1")
    generator._register(function)
    assert function.name == f"f{2 * MAX_FUNCTION_IDENTIFIERS + 1}"
    assert state.current_unit().functions[-1] is function


def test_bare_declarations_only_in_abstract_contracts(synthesizer):
    generator = synthesizer.generator(GeneratorKind.FUNCTION_DEFINITION)
    generator.contract_function_mode(abstract=False)
    for _ in range(50):
        assert generator.visit().endswith("}")

    generator.contract_function_mode(abstract=True)
    bare = [t for t in (generator.visit() for _ in range(100)) if t.endswith(";")]
    assert bare
    assert all(re.search(r"\bvirtual\b", t) for t in bare)


def test_overrides_need_base_contracts(synthesizer):
    generator = synthesizer.generator(GeneratorKind.FUNCTION_DEFINITION)
    generator.contract_function_mode(abstract=False, has_base_contracts=False)
    for _ in range(50):
        generator.visit()
        assert not generator.function_state.inheritance.overrides


def test_contract_functions_use_every_visibility(synthesizer):
    generator = synthesizer.generator(GeneratorKind.FUNCTION_DEFINITION)
    generator.contract_function_mode()
    visibilities = set()
    for _ in range(100):
        generator.visit()
        visibilities.add(generator.function_state.visibility)
    assert visibilities == set(Visibility)


def test_enum_declarations(synthesizer):
    generator = synthesizer.generator(GeneratorKind.ENUM)
    for _ in range(30):
        text = generator.visit()
        match = re.fullmatch(r"enum (E[0-3]) \{ M0(, M\d)* \}", text)
        assert match
        assert len(re.findall(r"M\d", text)) <= 5
        assert match.group(1) in synthesizer.test_state().current_unit().exported_symbols.types


def test_constant_variables_are_exported(synthesizer):
    generator = synthesizer.generator(GeneratorKind.CONSTANT_VARIABLE)
    for _ in range(30):
        match = re.match(r"^.+ constant (c[1-4]) = .+;$", generator.visit())
        assert match
        assert match.group(1) in synthesizer.test_state().current_unit().exported_symbols.symbols


def test_state_variables(synthesizer):
    generator = synthesizer.generator(GeneratorKind.STATE_VARIABLE)
    for _ in range(100):
        text = generator.visit()
        declaration = _strip_natspec(text)
        assert re.search(r" (public|private|internal)", declaration)
        assert re.search(r" sv[1-3]( = .+)?;$", declaration)
        if " constant " in declaration:
            assert " = " in declaration
            assert " immutable " not in declaration
        if text.startswith("///"):
            assert " public" in declaration
        assert " override " not in declaration


def test_events(synthesizer):
    generator = synthesizer.generator(GeneratorKind.EVENT)
    for _ in range(50):
        declaration = _strip_natspec(generator.visit())
        assert re.fullmatch(r"event Ev[1-3]\(.*\)( anonymous)?;", declaration)
        params = re.fullmatch(r"event Ev[1-3]\((.*)\)( anonymous)?;", declaration).group(1)
        names = re.findall(r" a(\d)(?=, |$)", params)
        assert names == [str(i) for i in range(len(names))]
        assert re.findall(r" indexed(?! a\d)", params) == []


def _assert_constant_initializer(synthesizer):
    productions = synthesizer.generator(GeneratorKind.CONSTANT_EXPRESSION).productions
    assert productions
    assert set(productions) <= set(CONSTANT_KINDS)
    for kind in (ExpressionKind.FUNCTION_CALL, ExpressionKind.ASSIGNMENT, ExpressionKind.NEW_EXPRESSION):
        assert kind not in productions


def test_constant_variables_use_constant_expressions(synthesizer):
    constant = synthesizer.generator(GeneratorKind.CONSTANT_EXPRESSION)
    generator = synthesizer.generator(GeneratorKind.CONSTANT_VARIABLE)
    for _ in range(30):
        constant.reset()
        generator.visit()
        _assert_constant_initializer(synthesizer)


def test_constant_state_variables_use_constant_expressions(synthesizer):
    constant = synthesizer.generator(GeneratorKind.CONSTANT_EXPRESSION)
    generator = synthesizer.generator(GeneratorKind.STATE_VARIABLE)
    seen = 0
    for _ in range(100):
        constant.reset()
        if " constant " not in _strip_natspec(generator.visit()):
            continue
        seen += 1
        _assert_constant_initializer(synthesizer)
    assert seen > 0
