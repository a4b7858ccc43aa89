"""
Statements, variable declarations and blocks.

Statements are built as small data objects first and rendered with
``visit()``; the generators below decide which variant to build.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Union

from solsynth.constants import (
    MAX_LOCAL_VARIABLES,
    MAX_NESTED_BLOCKS,
    MAX_PARAMETERS,
    MAX_STATEMENTS_IN_BLOCK,
    MAX_TUPLE_DECLARATIONS,
)
from solsynth.generator.base import GeneratorBase, GeneratorKind
from solsynth.generator.probability import coin_flip, pick_in_range, pick_one_of
from solsynth.generator.state import ParamType
from solsynth.utils.whiskers import render


class Location(enum.Enum):
    MEMORY = "memory"
    STORAGE = "storage"
    CALLDATA = "calldata"
    STACK = ""

    def visit(self) -> str:
        return self.value


_REFERENCE_LOCATIONS = (Location.MEMORY, Location.STORAGE, Location.CALLDATA)


class LocationGenerator(GeneratorBase):
    kind = GeneratorKind.LOCATION

    def visit(self) -> str:
        return pick_one_of(tuple(Location), self.rand).visit()

    def location_for(self, non_value_type: bool) -> Location:
        """Value types live on the stack; reference types need a data location."""
        if non_value_type:
            return pick_one_of(_REFERENCE_LOCATIONS, self.rand)
        return Location.STACK


@dataclass
class VariableDeclaration:
    type: str
    location: Location
    identifier: str

    def visit(self) -> str:
        return render("<type><?location> <loc></location> <name>", {
            "type": self.type,
            "location": self.location is not Location.STACK,
            "loc": self.location.visit(),
            "name": self.identifier,
        })

    def param(self) -> ParamType:
        return self.type, self.identifier


@dataclass
class ExpressionStatement:
    expression: str

    def visit(self) -> str:
        return render("<expression>;", {"expression": self.expression})


@dataclass
class SimpleVariableDeclaration:
    declaration: VariableDeclaration
    expression: Optional[str] = None

    def visit(self) -> str:
        return render("<varDecl><?assign> = <expression></assign>;", {
            "varDecl": self.declaration.visit(),
            "assign": self.expression is not None,
            "expression": self.expression or "",
        })


@dataclass
class VariableDeclarationTupleAssignment:
    """``(T a, , T b) = expr;`` where ``None`` components are left empty."""

    declarations: List[Optional[VariableDeclaration]]
    expression: str

    def visit(self) -> str:
        components = [d.visit() if d is not None else "" for d in self.declarations]
        return render("(<tuple>) = <expression>;", {
            "tuple": ", ".join(components),
            "expression": self.expression,
        })


SimpleStatement = Union[ExpressionStatement, SimpleVariableDeclaration, VariableDeclarationTupleAssignment]


@dataclass
class BlockStatement:
    statements: List[Union[SimpleStatement, "BlockStatement"]] = field(default_factory=list)

    def visit(self) -> str:
        return render("{<?statements> <body> </statements>}", {
            "statements": bool(self.statements),
            "body": " ".join(s.visit() for s in self.statements),
        })


class VariableDeclarationGenerator(GeneratorBase):
    kind = GeneratorKind.VARIABLE_DECLARATION
    requires = (GeneratorKind.TYPE, GeneratorKind.LOCATION)

    def identifier(self) -> str:
        return f"v{pick_in_range(MAX_LOCAL_VARIABLES, self.rand)}"

    def declaration(self, identifier: Optional[str] = None) -> VariableDeclaration:
        type_generator = self.generator(GeneratorKind.TYPE)
        type_name = type_generator.visit()
        location = self.generator(GeneratorKind.LOCATION).location_for(type_generator.non_value_type)
        return VariableDeclaration(type_name, location, identifier or self.identifier())

    def visit(self) -> str:
        return self.declaration().visit() + ";"


class ParameterListGenerator(GeneratorBase):
    kind = GeneratorKind.PARAMETER_LIST
    requires = (GeneratorKind.VARIABLE_DECLARATION,)

    def parameters(self, prefix: str = "p", minimum: int = 0) -> List[VariableDeclaration]:
        count = max(pick_in_range(MAX_PARAMETERS + 1, self.rand) - 1, minimum)
        generator = self.generator(GeneratorKind.VARIABLE_DECLARATION)
        return [generator.declaration(f"{prefix}{i}") for i in range(count)]

    @staticmethod
    def render_parameters(parameters: List[VariableDeclaration]) -> str:
        return ", ".join(p.visit() for p in parameters)

    def visit(self) -> str:
        return self.render_parameters(self.parameters())


class SimpleStatementGenerator(GeneratorBase):
    kind = GeneratorKind.SIMPLE_STATEMENT
    requires = (GeneratorKind.VARIABLE_DECLARATION, GeneratorKind.EXPRESSION)

    def _expression(self) -> str:
        return self.generator(GeneratorKind.EXPRESSION).visit()

    def expression_statement(self) -> ExpressionStatement:
        return ExpressionStatement(self._expression())

    def simple_variable_declaration(self) -> SimpleVariableDeclaration:
        declaration = self.generator(GeneratorKind.VARIABLE_DECLARATION).declaration()
        initializer = self._expression() if coin_flip(self.rand) else None
        return SimpleVariableDeclaration(declaration, initializer)

    def tuple_declaration(self) -> VariableDeclarationTupleAssignment:
        generator = self.generator(GeneratorKind.VARIABLE_DECLARATION)
        count = pick_in_range(MAX_TUPLE_DECLARATIONS, self.rand) + 1
        declarations = [generator.declaration() if coin_flip(self.rand) else None for _ in range(count)]
        if all(d is None for d in declarations):
            declarations[0] = generator.declaration()
        return VariableDeclarationTupleAssignment(declarations, self._expression())

    def statement(self) -> SimpleStatement:
        return pick_one_of((
            self.expression_statement,
            self.simple_variable_declaration,
            self.tuple_declaration,
        ), self.rand)()

    def visit(self) -> str:
        return self.statement().visit()


class BlockGenerator(GeneratorBase):
    kind = GeneratorKind.BLOCK
    requires = (GeneratorKind.SIMPLE_STATEMENT,)

    def __init__(self, synthesizer):
        super().__init__(synthesizer)
        self.nesting_depth = 0

    def reset(self) -> None:
        self.nesting_depth = 0

    def block(self) -> BlockStatement:
        self.nesting_depth += 1
        statements = []
        simple = self.generator(GeneratorKind.SIMPLE_STATEMENT)
        for _ in range(pick_in_range(MAX_STATEMENTS_IN_BLOCK + 1, self.rand) - 1):
            if self.nesting_depth <= MAX_NESTED_BLOCKS and coin_flip(self.rand) and coin_flip(self.rand):
                statements.append(self.block())
            else:
                statements.append(simple.statement())
        self.nesting_depth -= 1
        return BlockStatement(statements)

    def visit(self) -> str:
        self.reset()
        return self.block().visit()
