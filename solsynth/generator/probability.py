"""Probability primitives over the shared random stream.

Every production decision in the package is drawn through these helpers (or
directly from the same ``random.Random`` instance), which is what makes a seed
reproduce a program byte for byte.
"""

from __future__ import annotations

import enum
import random
import string
from typing import Sequence, Tuple, TypeVar

from solsynth.utils.exceptions import sol_assert

T = TypeVar("T")

# Printable ASCII without quotes, backslash and braces so the text can be
# embedded in string literals and comments unchanged.
_ASCII_ALPHABET = "".join(
    c for c in map(chr, range(0x21, 0x7F)) if c not in "\"'\\{}"
)
_HEX_DIGITS = string.digits + "abcdef"


class NumberLiteral(enum.Enum):
    DECIMAL = "decimal"
    HEX = "hex"


def pick_in_range(n: int, rand: random.Random) -> int:
    """Return a uniformly drawn integer in ``[1, n]``."""
    sol_assert(n >= 1, f"pick_in_range needs a positive bound, got {n}")
    return rand.randint(1, n)


def one_in(n: int, rand: random.Random) -> bool:
    return pick_in_range(n, rand) == 1


def coin_flip(rand: random.Random) -> bool:
    """Return True or False with roughly the same probability."""
    return rand.getrandbits(64) % 2 == 0


def pick_one_of(items: Sequence[T], rand: random.Random) -> T:
    sol_assert(len(items) > 0, "pick_one_of called with no options")
    return items[pick_in_range(len(items), rand) - 1]


def random_ascii_string(max_length: int, rand: random.Random) -> str:
    length = pick_in_range(max_length, rand)
    return "".join(pick_one_of(_ASCII_ALPHABET, rand) for _ in range(length))


def random_hex_string(length: int, rand: random.Random) -> str:
    return "".join(pick_one_of(_HEX_DIGITS, rand) for _ in range(length))


def random_number_literal(max_length: int, rand: random.Random) -> Tuple[NumberLiteral, str]:
    """Return a decimal or hexadecimal literal of at most *max_length* digits."""
    length = pick_in_range(max_length, rand)
    if coin_flip(rand):
        return NumberLiteral.HEX, "0x" + random_hex_string(length, rand)
    if length == 1:
        return NumberLiteral.DECIMAL, pick_one_of(string.digits, rand)
    first = pick_one_of(string.digits[1:], rand)
    rest = "".join(pick_one_of(string.digits, rand) for _ in range(length - 1))
    return NumberLiteral.DECIMAL, first + rest
