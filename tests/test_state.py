import random

import pytest

from solsynth.generator.state import (
    ExportedSymbols,
    FunctionState,
    ImportState,
    Inheritance,
    Mutability,
    ProgramState,
    Visibility,
)
from solsynth.utils.exceptions import InvariantViolation


@pytest.fixture
def state():
    return ProgramState(random.Random(0))


def test_exported_symbols_merge_is_a_union():
    a = ExportedSymbols({"f1"}, set())
    a.add_type("E0")
    b = ExportedSymbols({"f1", "c2"}, {"C0"})
    a += b
    assert a.symbols == {"f1", "c2", "E0", "C0"}
    assert a.types == {"E0", "C0"}


def test_random_pick_from_empty_exports_fails():
    with pytest.raises(InvariantViolation):
        ExportedSymbols().random_symbol(random.Random(0))
    with pytest.raises(InvariantViolation):
        ExportedSymbols({"x"}).random_user_defined_type(random.Random(0))


def test_queries_before_first_unit_fail(state):
    assert state.empty()
    with pytest.raises(InvariantViolation):
        state.current_path()
    with pytest.raises(InvariantViolation):
        state.current_unit()
    with pytest.raises(InvariantViolation):
        state.export_symbol("x")
    with pytest.raises(InvariantViolation):
        state.random_path()


def test_add_source_unit_becomes_current(state):
    state.add_source_unit("su0.sol")
    state.add_source_unit("su1.sol")
    assert state.current_path() == "su1.sol"
    assert state.paths() == ["su0.sol", "su1.sol"]
    assert state.size() == 2


def test_duplicate_source_unit_fails(state):
    state.add_source_unit("su0.sol")
    with pytest.raises(InvariantViolation):
        state.add_source_unit("su0.sol")


def test_register_function_rejects_equal_signature(state):
    state.add_source_unit("su0.sol")
    signature = FunctionState(
        name="f1",
        mutability=Mutability.VIEW,
        visibility=Visibility.PUBLIC,
        input_parameters=(("uint8", "p0"),),
    )
    assert state.register_function(signature)
    assert not state.register_function(FunctionState(
        name="f1",
        mutability=Mutability.VIEW,
        visibility=Visibility.PUBLIC,
        input_parameters=(("uint8", "p0"),),
    ))
    assert len(state.current_unit().functions) == 1
    assert "f1" in state.current_unit().exported_symbols.symbols


def test_signatures_differing_in_one_field_are_distinct(state):
    state.add_source_unit("su0.sol")
    assert state.register_function(FunctionState(name="f1"))
    assert state.register_function(FunctionState(name="f1", inheritance=Inheritance.VIRTUAL))
    assert len(state.current_unit().functions) == 2


def test_signatures_are_tracked_per_unit(state):
    state.add_source_unit("su0.sol")
    assert state.register_function(FunctionState(name="f1"))
    state.add_source_unit("su1.sol")
    assert state.register_function(FunctionState(name="f1"))


def test_random_other_path_excludes_current(state):
    state.add_source_unit("su0.sol")
    with pytest.raises(InvariantViolation):
        state.random_other_path()
    state.add_source_unit("su1.sol")
    state.add_source_unit("su2.sol")
    assert {state.random_other_path() for _ in range(50)} == {"su0.sol", "su1.sol"}


def test_contracts_are_counted_across_units(state):
    state.add_source_unit("su0.sol")
    state.current_unit().add_contract("C0")
    state.add_source_unit("su1.sol")
    state.current_unit().add_contract("C1")
    assert state.contract_count() == 2
    assert state.current_unit().exported_symbols.types == {"C1"}


def test_clear_forgets_every_unit(state):
    state.add_source_unit("su0.sol")
    state.clear()
    assert state.empty()
    state.add_source_unit("su0.sol")


def test_import_cannot_carry_both_alias_forms():
    with pytest.raises(InvariantViolation):
        ImportState("su0.sol", {"f1"}, unit_alias="A0", symbol_aliases={"f1": "A1"})


def test_import_aliases_must_name_imported_symbols():
    with pytest.raises(InvariantViolation):
        ImportState("su0.sol", {"f1"}, symbol_aliases={"f2": "A0"})
