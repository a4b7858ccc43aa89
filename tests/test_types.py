import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from solsynth.core.synthesizer import SolidityGenerator
from solsynth.generator.base import GeneratorKind
from solsynth.generator.types import IntegerWidth

INTEGER = re.compile(r"^u?int(\d+)$")
BYTES = re.compile(r"^bytes(\d+)?$")


@pytest.fixture
def synthesizer():
    synthesizer = SolidityGenerator(23)
    synthesizer.test_state().add_source_unit("su0.sol")
    return synthesizer


@given(st.integers(min_value=0, max_value=10 ** 6))
def test_integer_width_is_normalized(raw):
    bits = IntegerWidth(raw).bits
    assert 8 <= bits <= 256
    assert bits % 8 == 0


@pytest.mark.parametrize("raw, bits", [(0, 256), (1, 8), (4, 32), (31, 248), (32, 256), (33, 8)])
def test_integer_width_wraps_zero_to_256(raw, bits):
    assert IntegerWidth(raw).bits == bits
    assert IntegerWidth(raw).visit() == str(bits)


def test_integer_types(synthesizer):
    generator = synthesizer.generator(GeneratorKind.INTEGER_TYPE)
    for _ in range(200):
        match = INTEGER.match(generator.visit())
        assert match
        assert int(match.group(1)) % 8 == 0 and int(match.group(1)) <= 256


def test_bytes_types(synthesizer):
    generator = synthesizer.generator(GeneratorKind.BYTES_TYPE)
    for _ in range(200):
        text = generator.visit()
        match = BYTES.match(text)
        assert match
        assert generator.dynamic == (text == "bytes")
        if match.group(1):
            assert 1 <= int(match.group(1)) <= 32


def test_address_types(synthesizer):
    generator = synthesizer.generator(GeneratorKind.ADDRESS_TYPE)
    assert {generator.visit() for _ in range(50)} == {"address", "address payable"}


def test_user_defined_type_falls_back_to_integer(synthesizer):
    generator = synthesizer.generator(GeneratorKind.USER_DEFINED_TYPE)
    for _ in range(20):
        assert INTEGER.match(generator.visit())


def test_user_defined_type_uses_exported_types(synthesizer):
    synthesizer.test_state().export_type("E1")
    synthesizer.test_state().export_symbol("c1")
    generator = synthesizer.generator(GeneratorKind.USER_DEFINED_TYPE)
    assert {generator.visit() for _ in range(20)} == {"E1"}


def test_array_dimensions(synthesizer):
    generator = synthesizer.generator(GeneratorKind.ARRAY_TYPE)
    for _ in range(200):
        text = generator.visit()
        dimensions = re.findall(r"\[(\d*)\]", text)
        assert len(dimensions) == generator.num_dimensions
        assert 1 <= len(dimensions) <= 3
        assert all(d == "" or 1 <= int(d) <= 5 for d in dimensions)


def test_function_types(synthesizer):
    generator = synthesizer.generator(GeneratorKind.FUNCTION_TYPE)
    for _ in range(100):
        text = generator.visit()
        assert re.match(r"^function \(.*\) (internal|external)", text)
        assert "  " not in text


def test_type_tracks_values_needing_a_location(synthesizer):
    generator = synthesizer.generator(GeneratorKind.TYPE)
    for _ in range(300):
        text = generator.visit()
        if text.endswith("]") or text == "bytes":
            assert generator.non_value_type
        elif not text.startswith("function"):
            assert not generator.non_value_type


def test_elementary_types_are_never_arrays(synthesizer):
    generator = synthesizer.generator(GeneratorKind.TYPE)
    for _ in range(100):
        assert "[" not in generator.visit_elementary_type()
        assert "[" not in generator.visit_non_array_type()
