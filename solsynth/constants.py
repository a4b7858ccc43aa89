"""
Global constants used across solsynth.

Guidelines
----------
* Every constant is typed and immutable (``Final`` / ``tuple``).
* These are bounds of the generated language, not tuning knobs. Program-shape
  knobs that callers may change live in ``solsynth.config.generator_config``.
"""

from __future__ import annotations

from typing import Final, Tuple

# -- Output conventions ------------------------------------------------------

BANNER_TEMPLATE: Final[str] = "// solsynth test program, seed: <seed>"
SOURCE_UNIT_HEADER_TEMPLATE: Final[str] = "\n==== Source: <path> ====\n"
SOURCE_UNIT_PREFIX: Final[str] = "su"
SOURCE_UNIT_SUFFIX: Final[str] = ".sol"

# -- Recursion bounds --------------------------------------------------------

MAX_NESTED_EXPRESSIONS: Final[int] = 5
MAX_NESTED_TAGS: Final[int] = 3
MAX_NESTED_BLOCKS: Final[int] = 2

# -- Type layer --------------------------------------------------------------

INTEGER_WIDTH_STEP: Final[int] = 8
MAX_INTEGER_WIDTH: Final[int] = 256
MAX_FIXED_BYTES: Final[int] = 32
MAX_ARRAY_DIMENSIONS: Final[int] = 3
MAX_STATIC_ARRAY_SIZE: Final[int] = 5
MAX_FUNCTION_TYPE_PARAMS: Final[int] = 3

# -- Literals ----------------------------------------------------------------

MAX_STRING_LENGTH: Final[int] = 10
MAX_HEX_LITERAL_LENGTH: Final[int] = 64
MAX_NUMBER_LITERAL_LENGTH: Final[int] = 10
ADDRESS_HEX_LENGTH: Final[int] = 40
MAX_ELEMENTS_IN_TUPLE: Final[int] = 4
MAX_ELEMENTS_INLINE_ARRAY: Final[int] = 4
MAX_CALL_ARGUMENTS: Final[int] = 3

# -- Identifier pools --------------------------------------------------------

MAX_LOCAL_VARIABLES: Final[int] = 4
MAX_STATE_VARIABLES: Final[int] = 3
MAX_CONSTANT_VARIABLES: Final[int] = 4
MAX_FUNCTION_IDENTIFIERS: Final[int] = 4
MAX_ENUM_IDENTIFIERS: Final[int] = 4
MAX_ENUM_MEMBERS: Final[int] = 5
MAX_EVENT_IDENTIFIERS: Final[int] = 3
MAX_MEMBER_IDENTIFIERS: Final[int] = 3

# -- Statements and declarations ---------------------------------------------

MAX_STATEMENTS_IN_BLOCK: Final[int] = 4
MAX_PARAMETERS: Final[int] = 3
MAX_TUPLE_DECLARATIONS: Final[int] = 3
MAX_NATSPEC_TEXT_LENGTH: Final[int] = 8

# -- Inverse probabilities (1 in N) ------------------------------------------

SELF_IMPORT_INV_PROB: Final[int] = 101
ABSTRACT_CONTRACT_INV_PROB: Final[int] = 10
INHERITANCE_INV_PROB: Final[int] = 10
NATSPEC_INV_PROB: Final[int] = 3
ANONYMOUS_EVENT_INV_PROB: Final[int] = 3

# -- Pragmas -----------------------------------------------------------------

VERSION_PRAGMAS: Final[Tuple[str, ...]] = (
    "solidity >= 0.0.0",
    "solidity ^0.8.0",
    "solidity >=0.7.0 <0.9.0",
)

EXPERIMENTAL_PRAGMAS: Final[Tuple[str, ...]] = (
    "experimental SMTChecker",
    "experimental ABIEncoderV2",
    "abicoder v1",
    "abicoder v2",
)
