import random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from solsynth.generator.probability import (
    NumberLiteral,
    coin_flip,
    one_in,
    pick_in_range,
    pick_one_of,
    random_ascii_string,
    random_hex_string,
    random_number_literal,
)
from solsynth.utils.exceptions import InvariantViolation

seeds = st.integers(min_value=0, max_value=2 ** 32)


@given(st.integers(min_value=1, max_value=1000), seeds)
def test_pick_in_range_stays_in_bounds(n, seed):
    assert 1 <= pick_in_range(n, random.Random(seed)) <= n


def test_pick_in_range_rejects_empty_range():
    with pytest.raises(InvariantViolation):
        pick_in_range(0, random.Random(0))


def test_pick_one_of_rejects_empty_sequence():
    with pytest.raises(InvariantViolation):
        pick_one_of([], random.Random(0))


def test_pick_one_of_reaches_every_item():
    rand = random.Random(11)
    picked = {pick_one_of("abc", rand) for _ in range(200)}
    assert picked == {"a", "b", "c"}


def test_one_in_one_always_holds():
    rand = random.Random(5)
    assert all(one_in(1, rand) for _ in range(50))


def test_coin_flip_is_roughly_fair():
    rand = random.Random(3)
    heads = sum(coin_flip(rand) for _ in range(2000))
    assert 800 < heads < 1200


def test_same_seed_same_draws():
    a, b = random.Random(99), random.Random(99)
    assert [pick_in_range(1000, a) for _ in range(20)] == [pick_in_range(1000, b) for _ in range(20)]


@given(seeds, st.integers(min_value=1, max_value=30))
def test_ascii_string_is_embeddable(seed, max_length):
    text = random_ascii_string(max_length, random.Random(seed))
    assert 1 <= len(text) <= max_length
    assert not set(text) & set("\"'\\{}")
    assert all(0x21 <= ord(c) <= 0x7E for c in text)


@given(seeds, st.integers(min_value=0, max_value=64))
def test_hex_string_has_exact_length(seed, length):
    text = random_hex_string(length, random.Random(seed))
    assert len(text) == length
    assert set(text) <= set("0123456789abcdef")


@given(seeds)
def test_number_literal_shape(seed):
    kind, text = random_number_literal(10, random.Random(seed))
    if kind is NumberLiteral.HEX:
        assert text.startswith("0x")
        assert 1 <= len(text) - 2 <= 10
        int(text, 16)
    else:
        assert text.isdigit()
        assert 1 <= len(text) <= 10
        assert text == "0" or not text.startswith("0")
