"""
Common protocol of all production-rule generators.

A generator is identified by its :class:`GeneratorKind`. The synthesizer owns
exactly one instance per kind; generators refer to each other by kind and
resolve the instance through the synthesizer, so no generator owns another.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from solsynth.generator.probability import pick_one_of
from solsynth.utils.exceptions import sol_assert

if TYPE_CHECKING:
    from solsynth.core.synthesizer import SolidityGenerator

logger = logging.getLogger(__name__)


class GeneratorKind(enum.Enum):
    # Types
    INTEGER_TYPE = "integer_type"
    BYTES_TYPE = "bytes_type"
    BOOL_TYPE = "bool_type"
    ADDRESS_TYPE = "address_type"
    FUNCTION_TYPE = "function_type"
    USER_DEFINED_TYPE = "user_defined_type"
    ARRAY_TYPE = "array_type"
    TYPE = "type"
    # Expressions
    EXPRESSION = "expression"
    CONSTANT_EXPRESSION = "constant_expression"
    # Statements and declarations
    LOCATION = "location"
    VARIABLE_DECLARATION = "variable_declaration"
    PARAMETER_LIST = "parameter_list"
    SIMPLE_STATEMENT = "simple_statement"
    BLOCK = "block"
    NATSPEC = "natspec"
    STATE_VARIABLE = "state_variable"
    CONSTANT_VARIABLE = "constant_variable"
    ENUM = "enum"
    EVENT = "event"
    FUNCTION_DEFINITION = "function_definition"
    # Top level
    CONTRACT_DEFINITION = "contract_definition"
    PRAGMA = "pragma"
    IMPORT = "import"
    SOURCE_UNIT = "source_unit"
    TEST_CASE = "test_case"


class GeneratorBase:
    """Base class of every production rule.

    Subclasses set ``kind`` and ``requires``; ``setup()`` registers the
    required kinds as dependencies. ``visit()`` applies the rule once and
    returns the rendered text.
    """

    kind: GeneratorKind
    requires: Tuple[GeneratorKind, ...] = ()

    def __init__(self, synthesizer: "SolidityGenerator"):
        self.synthesizer = synthesizer
        # Random engine shared by all generators of this synthesizer
        self.rand = synthesizer.random_engine()
        self.state = synthesizer.test_state()
        self.dependencies: List[GeneratorKind] = []

    def name(self) -> str:
        return type(self).__name__

    def setup(self) -> None:
        self.add_generators(self.requires)
        if self.dependencies:
            logger.debug("%s depends on %s", self.name(), ", ".join(k.name for k in self.dependencies))

    def reset(self) -> None:
        pass

    def visit(self) -> str:
        raise NotImplementedError

    def add_generators(self, kinds: Iterable[GeneratorKind]) -> None:
        for kind in kinds:
            sol_assert(kind is not self.kind, f"{self.name()} cannot depend on itself")
            if kind not in self.dependencies:
                self.dependencies.append(kind)

    def generator(self, kind: GeneratorKind) -> "GeneratorBase":
        sol_assert(
            kind in self.dependencies,
            f"{self.name()} uses {kind.name} without declaring it",
        )
        return self.synthesizer.generator(kind)

    def random_generator(self, kinds: Optional[Iterable[GeneratorKind]] = None) -> "GeneratorBase":
        """Pick one dependency uniformly, optionally among *kinds* only."""
        candidates = self.dependencies if kinds is None else [k for k in kinds if k in self.dependencies]
        return self.generator(pick_one_of(candidates, self.rand))

    def visit_children(self) -> str:
        """Visit every dependency once, in an order drawn from the stream."""
        children = list(self.dependencies)
        self.rand.shuffle(children)
        return "".join(self.generator(kind).visit() for kind in children)
