"""Declaration production rules: state variables, constants, enums, events and functions."""

from __future__ import annotations

import enum
import logging

from solsynth.constants import (
    ANONYMOUS_EVENT_INV_PROB,
    MAX_CONSTANT_VARIABLES,
    MAX_ENUM_IDENTIFIERS,
    MAX_ENUM_MEMBERS,
    MAX_EVENT_IDENTIFIERS,
    MAX_FUNCTION_IDENTIFIERS,
    MAX_PARAMETERS,
    MAX_STATE_VARIABLES,
    NATSPEC_INV_PROB,
)
from solsynth.generator.base import GeneratorBase, GeneratorKind
from solsynth.generator.natspec import TagCategory
from solsynth.generator.probability import coin_flip, one_in, pick_in_range, pick_one_of
from solsynth.generator.state import FunctionState, Inheritance, Mutability, Visibility
from solsynth.utils.exceptions import sol_assert
from solsynth.utils.whiskers import render

logger = logging.getLogger(__name__)


class StateVariableDeclarationGenerator(GeneratorBase):
    kind = GeneratorKind.STATE_VARIABLE
    requires = (
        GeneratorKind.TYPE,
        GeneratorKind.EXPRESSION,
        GeneratorKind.CONSTANT_EXPRESSION,
        GeneratorKind.NATSPEC,
    )

    class Mode(enum.Enum):
        MUTABLE = "mutable"
        CONSTANT = "constant"
        IMMUTABLE = "immutable"

    _visibility = ("public", "private", "internal")
    _template = (
        "<natSpecString><type> <vis><?constant> constant</constant>"
        "<?immutable> immutable</immutable><?override> override</override> <id>"
        "<?assign> = <value></assign>;"
    )

    def __init__(self, synthesizer):
        super().__init__(synthesizer)
        # Set by the contract generator when the contract has base contracts
        self.overriding_allowed = False

    def reset(self) -> None:
        self.overriding_allowed = False

    def identifier(self) -> str:
        return f"sv{pick_in_range(MAX_STATE_VARIABLES, self.rand)}"

    def visit(self) -> str:
        mode = pick_one_of(tuple(self.Mode), self.rand)
        type_name = self.generator(GeneratorKind.TYPE).visit()
        visibility = pick_one_of(self._visibility, self.rand)
        overriding = self.overriding_allowed and visibility == "public" and coin_flip(self.rand)

        natspec = ""
        if visibility == "public" and one_in(NATSPEC_INV_PROB, self.rand):
            generator = self.generator(GeneratorKind.NATSPEC)
            generator.tag_category(TagCategory.PUBLIC_STATE_VAR, overriding)
            natspec = generator.visit()

        if mode is self.Mode.CONSTANT:
            value = self.generator(GeneratorKind.CONSTANT_EXPRESSION).visit()
        elif coin_flip(self.rand):
            value = self.generator(GeneratorKind.EXPRESSION).visit()
        else:
            value = None

        return render(self._template, {
            "natSpecString": natspec,
            "type": type_name,
            "vis": visibility,
            "constant": mode is self.Mode.CONSTANT,
            "immutable": mode is self.Mode.IMMUTABLE,
            "override": overriding,
            "id": self.identifier(),
            "assign": value is not None,
            "value": value or "",
        })


class ConstantVariableDeclarationGenerator(GeneratorBase):
    """File-level constant; its name is exported from the unit."""

    kind = GeneratorKind.CONSTANT_VARIABLE
    requires = (GeneratorKind.TYPE, GeneratorKind.CONSTANT_EXPRESSION)

    _template = "<type> constant <name> = <expression>;"

    def visit(self) -> str:
        type_name = self.generator(GeneratorKind.TYPE).visit_elementary_type()
        name = f"c{pick_in_range(MAX_CONSTANT_VARIABLES, self.rand)}"
        expression = self.generator(GeneratorKind.CONSTANT_EXPRESSION).visit()
        self.state.export_symbol(name)
        return render(self._template, {"type": type_name, "name": name, "expression": expression})


class EnumDeclarationGenerator(GeneratorBase):
    kind = GeneratorKind.ENUM

    _template = "enum <name> { <members> }"

    def enum_name(self) -> str:
        return f"E{self.rand.getrandbits(64) % MAX_ENUM_IDENTIFIERS}"

    def visit(self) -> str:
        name = self.enum_name()
        members = [f"M{i}" for i in range(pick_in_range(MAX_ENUM_MEMBERS, self.rand))]
        self.state.export_type(name)
        return render(self._template, {"name": name, "members": ", ".join(members)})


class EventDeclarationGenerator(GeneratorBase):
    kind = GeneratorKind.EVENT
    requires = (GeneratorKind.TYPE, GeneratorKind.NATSPEC)

    _template = "<natSpecString>event <name>(<params>)<?anonymous> anonymous</anonymous>;"
    _parameter_template = "<type><?indexed> indexed</indexed> <name>"

    def _parameter(self, index: int) -> str:
        type_name = self.generator(GeneratorKind.TYPE).visit_non_array_type()
        return render(self._parameter_template, {
            "type": type_name,
            "indexed": coin_flip(self.rand),
            "name": f"a{index}",
        })

    def visit(self) -> str:
        count = pick_in_range(MAX_PARAMETERS + 1, self.rand) - 1
        natspec = ""
        if one_in(NATSPEC_INV_PROB, self.rand):
            generator = self.generator(GeneratorKind.NATSPEC)
            generator.tag_category(TagCategory.EVENT)
            natspec = generator.visit()
        return render(self._template, {
            "natSpecString": natspec,
            "name": f"Ev{pick_in_range(MAX_EVENT_IDENTIFIERS, self.rand)}",
            "params": ", ".join(self._parameter(i) for i in range(count)),
            "anonymous": one_in(ANONYMOUS_EVENT_INV_PROB, self.rand),
        })


class FunctionDefinitionGenerator(GeneratorBase):
    """Free functions and contract member functions.

    Before emitting, the signature is registered with the program state; an
    identical signature already declared in the unit forces a different name.
    """

    kind = GeneratorKind.FUNCTION_DEFINITION
    requires = (GeneratorKind.PARAMETER_LIST, GeneratorKind.BLOCK, GeneratorKind.NATSPEC)

    _template = (
        "<natSpecString>function <id>(<paramList>)"
        "<?visibility> <vis></visibility>"
        "<?mutability> <stateMutability></mutability>"
        "<?inheritance> <inheritanceSpec></inheritance>"
        "<?return> returns (<retParamList>)</return>"
        "<?definition> <body><!definition>;</definition>"
    )

    def __init__(self, synthesizer):
        super().__init__(synthesizer)
        self.free_function = True
        self.abstract_contract = False
        self.has_base_contracts = False
        # Signature of the last emitted function
        self.function_state = FunctionState()

    def reset(self) -> None:
        self.free_function_mode()

    def free_function_mode(self) -> None:
        self.free_function = True
        self.abstract_contract = False
        self.has_base_contracts = False

    def contract_function_mode(self, abstract: bool = False, has_base_contracts: bool = False) -> None:
        self.free_function = False
        self.abstract_contract = abstract
        self.has_base_contracts = has_base_contracts

    def function_identifier(self) -> str:
        return f"f{pick_in_range(MAX_FUNCTION_IDENTIFIERS, self.rand)}"

    def _inheritance(self) -> Inheritance:
        if self.free_function:
            return Inheritance.NONE
        if self.has_base_contracts:
            return pick_one_of(tuple(Inheritance), self.rand)
        return pick_one_of((Inheritance.VIRTUAL, Inheritance.NONE), self.rand)

    def _register(self, function: FunctionState) -> None:
        for _ in range(MAX_FUNCTION_IDENTIFIERS):
            if self.state.register_function(function):
                return
            function.name = self.function_identifier()
        function.name = f"f{MAX_FUNCTION_IDENTIFIERS + len(self.state.current_unit().functions) + 1}"
        logger.debug("Function pool exhausted, falling back to %s", function.name)
        sol_assert(self.state.register_function(function), f"Could not register {function.name}")

    def visit(self) -> str:
        parameter_list = self.generator(GeneratorKind.PARAMETER_LIST)
        params = parameter_list.parameters("p")
        returns = parameter_list.parameters("r", minimum=1) if coin_flip(self.rand) else []

        if self.free_function:
            mutability = FunctionState.random_free_function_mutability(self.rand)
            visibility = Visibility.INTERNAL
        else:
            mutability = FunctionState.random_mutability(self.rand)
            visibility = pick_one_of(tuple(Visibility), self.rand)
        inheritance = self._inheritance()

        definition = self.free_function or not self.abstract_contract or coin_flip(self.rand)
        if not definition:
            # Unimplemented functions must be virtual
            if inheritance is Inheritance.NONE:
                inheritance = Inheritance.VIRTUAL
            elif inheritance is Inheritance.OVERRIDE:
                inheritance = Inheritance.VIRTUAL_OVERRIDE

        function = FunctionState(
            name=self.function_identifier(),
            mutability=mutability,
            visibility=visibility,
            input_parameters=tuple(p.param() for p in params),
            return_parameters=tuple(r.param() for r in returns),
            inheritance=inheritance,
        )
        self._register(function)
        self.function_state = function

        natspec = ""
        if one_in(NATSPEC_INV_PROB, self.rand):
            generator = self.generator(GeneratorKind.NATSPEC)
            generator.tag_category(TagCategory.FUNCTION, inheritance.overrides)
            natspec = generator.visit()

        return render(self._template, {
            "natSpecString": natspec,
            "id": function.name,
            "paramList": parameter_list.render_parameters(params),
            "visibility": not self.free_function,
            "vis": visibility.value,
            "mutability": mutability is not Mutability.NONPAYABLE,
            "stateMutability": mutability.value,
            "inheritance": inheritance is not Inheritance.NONE,
            "inheritanceSpec": inheritance.value,
            "return": bool(returns),
            "retParamList": parameter_list.render_parameters(returns),
            "definition": definition,
            "body": self.generator(GeneratorKind.BLOCK).visit() if definition else "",
        })
