"""
Generator table.

Maps every :class:`GeneratorKind` to the class implementing its production
rule. The synthesizer instantiates one object per entry.
"""

from typing import Dict, Type

from solsynth.generator.base import GeneratorBase, GeneratorKind
from solsynth.generator.declarations import (
    ConstantVariableDeclarationGenerator,
    EnumDeclarationGenerator,
    EventDeclarationGenerator,
    FunctionDefinitionGenerator,
    StateVariableDeclarationGenerator,
)
from solsynth.generator.expressions import ConstantExpressionGenerator, ExpressionGenerator
from solsynth.generator.natspec import NatSpecGenerator
from solsynth.generator.statements import (
    BlockGenerator,
    LocationGenerator,
    ParameterListGenerator,
    SimpleStatementGenerator,
    VariableDeclarationGenerator,
)
from solsynth.generator.types import (
    AddressTypeGenerator,
    ArrayTypeGenerator,
    BoolTypeGenerator,
    BytesTypeGenerator,
    FunctionTypeGenerator,
    IntegerTypeGenerator,
    TypeGenerator,
    UserDefinedTypeGenerator,
)
from solsynth.generator.units import (
    ContractDefinitionGenerator,
    ImportGenerator,
    PragmaGenerator,
    ProgramGenerator,
    SourceUnitGenerator,
)
from solsynth.utils.exceptions import sol_assert

GENERATORS: Dict[GeneratorKind, Type[GeneratorBase]] = {
    cls.kind: cls
    for cls in (
        IntegerTypeGenerator,
        BytesTypeGenerator,
        BoolTypeGenerator,
        AddressTypeGenerator,
        FunctionTypeGenerator,
        UserDefinedTypeGenerator,
        ArrayTypeGenerator,
        TypeGenerator,
        ExpressionGenerator,
        ConstantExpressionGenerator,
        LocationGenerator,
        VariableDeclarationGenerator,
        ParameterListGenerator,
        SimpleStatementGenerator,
        BlockGenerator,
        NatSpecGenerator,
        StateVariableDeclarationGenerator,
        ConstantVariableDeclarationGenerator,
        EnumDeclarationGenerator,
        EventDeclarationGenerator,
        FunctionDefinitionGenerator,
        ContractDefinitionGenerator,
        PragmaGenerator,
        ImportGenerator,
        SourceUnitGenerator,
        ProgramGenerator,
    )
}


def get_generator_class(kind: GeneratorKind) -> Type[GeneratorBase]:
    """
    Get the class implementing *kind*.

    Raises InvariantViolation when no class is registered for it.
    """
    sol_assert(kind in GENERATORS, f"No generator registered for {kind!r}")
    return GENERATORS[kind]
