"""Type-name production rules."""

from __future__ import annotations

from typing import List

from solsynth.constants import (
    INTEGER_WIDTH_STEP,
    MAX_ARRAY_DIMENSIONS,
    MAX_FIXED_BYTES,
    MAX_FUNCTION_TYPE_PARAMS,
    MAX_INTEGER_WIDTH,
    MAX_STATIC_ARRAY_SIZE,
)
from solsynth.generator.base import GeneratorBase, GeneratorKind
from solsynth.generator.probability import coin_flip, pick_in_range, pick_one_of
from solsynth.utils.whiskers import render

_ELEMENTARY_KINDS = (
    GeneratorKind.INTEGER_TYPE,
    GeneratorKind.BYTES_TYPE,
    GeneratorKind.BOOL_TYPE,
    GeneratorKind.ADDRESS_TYPE,
)
_NON_ARRAY_KINDS = _ELEMENTARY_KINDS + (GeneratorKind.USER_DEFINED_TYPE,)


class IntegerWidth:
    """Bit width derived from a raw draw: multiples of 8, wrapping 0 to 256."""

    def __init__(self, raw: int):
        self.width = (INTEGER_WIDTH_STEP * raw) % MAX_INTEGER_WIDTH

    def visit(self) -> str:
        return str(self.bits)

    @property
    def bits(self) -> int:
        return self.width if self.width > 0 else MAX_INTEGER_WIDTH


class IntegerTypeGenerator(GeneratorBase):
    kind = GeneratorKind.INTEGER_TYPE

    def visit(self) -> str:
        sign = "" if coin_flip(self.rand) else "u"
        width = IntegerWidth(pick_in_range(MAX_INTEGER_WIDTH // INTEGER_WIDTH_STEP, self.rand))
        return f"{sign}int{width.visit()}"


class BytesTypeGenerator(GeneratorBase):
    kind = GeneratorKind.BYTES_TYPE

    def __init__(self, synthesizer):
        super().__init__(synthesizer)
        # Set when the last visit produced the dynamically sized ``bytes``
        self.dynamic = False

    def visit(self) -> str:
        self.dynamic = coin_flip(self.rand)
        if self.dynamic:
            return "bytes"
        return f"bytes{pick_in_range(MAX_FIXED_BYTES, self.rand)}"


class BoolTypeGenerator(GeneratorBase):
    kind = GeneratorKind.BOOL_TYPE

    def visit(self) -> str:
        return "bool"


class AddressTypeGenerator(GeneratorBase):
    kind = GeneratorKind.ADDRESS_TYPE

    def visit(self) -> str:
        return "address payable" if coin_flip(self.rand) else "address"


class UserDefinedTypeGenerator(GeneratorBase):
    """Names a type exported by the current unit, else falls back to an integer."""

    kind = GeneratorKind.USER_DEFINED_TYPE
    requires = (GeneratorKind.INTEGER_TYPE,)

    def visit(self) -> str:
        unit = self.state.current_unit()
        if unit.has_user_defined_types():
            return unit.exported_symbols.random_user_defined_type(self.rand)
        return self.generator(GeneratorKind.INTEGER_TYPE).visit()


class ArrayTypeGenerator(GeneratorBase):
    kind = GeneratorKind.ARRAY_TYPE
    requires = _NON_ARRAY_KINDS

    def __init__(self, synthesizer):
        super().__init__(synthesizer)
        self.num_dimensions = 0

    def visit(self) -> str:
        base = self.random_generator(_NON_ARRAY_KINDS).visit()
        self.num_dimensions = pick_in_range(MAX_ARRAY_DIMENSIONS, self.rand)
        dimensions = []
        for _ in range(self.num_dimensions):
            if coin_flip(self.rand):
                dimensions.append("[]")
            else:
                dimensions.append(f"[{pick_in_range(MAX_STATIC_ARRAY_SIZE, self.rand)}]")
        return base + "".join(dimensions)


class FunctionTypeGenerator(GeneratorBase):
    kind = GeneratorKind.FUNCTION_TYPE
    requires = _NON_ARRAY_KINDS + (GeneratorKind.ARRAY_TYPE,)

    _visibility = ("internal", "external")
    _mutability = ("pure", "view", "payable", "")
    _template = (
        "function (<paramList>) <visibility><?mutability> <stateMutability></mutability>"
        "<?return> returns (<retParamList>)</return>"
    )

    def _type_list(self, minimum: int) -> str:
        count = pick_in_range(MAX_FUNCTION_TYPE_PARAMS + 1, self.rand) - 1
        types: List[str] = [self.random_generator().visit() for _ in range(max(count, minimum))]
        return ", ".join(types)

    def visit(self) -> str:
        returns = coin_flip(self.rand)
        mutability = pick_one_of(self._mutability, self.rand)
        return render(self._template, {
            "paramList": self._type_list(0),
            "visibility": pick_one_of(self._visibility, self.rand),
            "mutability": bool(mutability),
            "stateMutability": mutability,
            "return": returns,
            "retParamList": self._type_list(1) if returns else "",
        })


class TypeGenerator(GeneratorBase):
    """Any type name. Remembers whether the last one needs a data location."""

    kind = GeneratorKind.TYPE
    requires = _NON_ARRAY_KINDS + (GeneratorKind.FUNCTION_TYPE, GeneratorKind.ARRAY_TYPE)

    def __init__(self, synthesizer):
        super().__init__(synthesizer)
        self.non_value_type = False

    def set_non_value_type(self) -> None:
        self.non_value_type = True

    def reset(self) -> None:
        self.non_value_type = False

    def _visit_kind(self, kind: GeneratorKind) -> str:
        text = self.generator(kind).visit()
        if kind is GeneratorKind.ARRAY_TYPE:
            self.set_non_value_type()
        elif kind is GeneratorKind.BYTES_TYPE and self.generator(kind).dynamic:
            self.set_non_value_type()
        return text

    def visit(self) -> str:
        self.reset()
        return self._visit_kind(pick_one_of(self.dependencies, self.rand))

    def visit_non_array_type(self) -> str:
        self.reset()
        return self._visit_kind(pick_one_of(_NON_ARRAY_KINDS, self.rand))

    def visit_elementary_type(self) -> str:
        self.reset()
        return self._visit_kind(pick_one_of(_ELEMENTARY_KINDS, self.rand))
