import pytest

from solsynth.constants import MAX_NESTED_BLOCKS, MAX_STATEMENTS_IN_BLOCK
from solsynth.core.synthesizer import SolidityGenerator
from solsynth.generator.base import GeneratorKind
from solsynth.generator.statements import (
    BlockStatement,
    Location,
    SimpleVariableDeclaration,
    VariableDeclaration,
    VariableDeclarationTupleAssignment,
)


@pytest.fixture
def synthesizer():
    synthesizer = SolidityGenerator(31)
    synthesizer.test_state().add_source_unit("su0.sol")
    return synthesizer


def test_variable_declaration_rendering():
    assert VariableDeclaration("uint8", Location.STACK, "v1").visit() == "uint8 v1"
    assert VariableDeclaration("bytes", Location.MEMORY, "v2").visit() == "bytes memory v2"
    assert VariableDeclaration("bool", Location.STACK, "p0").param() == ("bool", "p0")


def test_simple_variable_declaration_rendering():
    declaration = VariableDeclaration("bool", Location.STACK, "v1")
    assert SimpleVariableDeclaration(declaration).visit() == "bool v1;"
    assert SimpleVariableDeclaration(declaration, "true").visit() == "bool v1 = true;"


def test_tuple_assignment_leaves_gaps_empty():
    declaration = VariableDeclaration("uint8", Location.STACK, "v1")
    statement = VariableDeclarationTupleAssignment([declaration, None], "x")
    assert statement.visit() == "(uint8 v1, ) = x;"


def test_value_types_live_on_the_stack(synthesizer):
    generator = synthesizer.generator(GeneratorKind.LOCATION)
    assert all(generator.location_for(False) is Location.STACK for _ in range(20))
    assert all(generator.location_for(True) is not Location.STACK for _ in range(20))


def test_declarations_pick_a_location_for_reference_types(synthesizer):
    generator = synthesizer.generator(GeneratorKind.VARIABLE_DECLARATION)
    for _ in range(200):
        declaration = generator.declaration()
        needs_location = declaration.type.endswith("]") or declaration.type == "bytes"
        assert (declaration.location is not Location.STACK) == needs_location


def test_parameters_are_numbered(synthesizer):
    generator = synthesizer.generator(GeneratorKind.PARAMETER_LIST)
    for _ in range(50):
        parameters = generator.parameters("r", minimum=1)
        assert len(parameters) >= 1
        assert [p.identifier for p in parameters] == [f"r{i}" for i in range(len(parameters))]


def test_tuple_declarations_have_a_component(synthesizer):
    generator = synthesizer.generator(GeneratorKind.SIMPLE_STATEMENT)
    for _ in range(100):
        statement = generator.tuple_declaration()
        assert len(statement.declarations) >= 2
        assert any(d is not None for d in statement.declarations)


def _block_depth(block):
    nested = [_block_depth(s) for s in block.statements if isinstance(s, BlockStatement)]
    return 1 + max(nested, default=0)


def test_block_nesting_is_bounded(synthesizer):
    generator = synthesizer.generator(GeneratorKind.BLOCK)
    for _ in range(200):
        block = generator.block()
        assert _block_depth(block) <= MAX_NESTED_BLOCKS + 1
        assert len(block.statements) <= MAX_STATEMENTS_IN_BLOCK
        assert generator.nesting_depth == 0


def test_block_rendering(synthesizer):
    text = synthesizer.generator(GeneratorKind.BLOCK).visit()
    assert text == "{}" or (text.startswith("{ ") and text.endswith(" }"))


def test_empty_block_has_no_padding():
    assert BlockStatement().visit() == "{}"
    assert BlockStatement([BlockStatement()]).visit() == "{ {} }"
