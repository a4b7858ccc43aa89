"""
Expression production rules.

Every call to :meth:`ExpressionGenerator.expression` bumps a per-instance
nesting counter. Once it passes ``MAX_NESTED_EXPRESSIONS`` only leaf kinds
(identifiers, literals and type names) remain eligible, which bounds the size
of any expression regardless of what the random stream selects.
"""

from __future__ import annotations

import enum
from typing import Callable, Dict, List, Tuple

from solsynth.constants import (
    ADDRESS_HEX_LENGTH,
    MAX_CALL_ARGUMENTS,
    MAX_CONSTANT_VARIABLES,
    MAX_ELEMENTS_IN_TUPLE,
    MAX_ELEMENTS_INLINE_ARRAY,
    MAX_HEX_LITERAL_LENGTH,
    MAX_LOCAL_VARIABLES,
    MAX_MEMBER_IDENTIFIERS,
    MAX_NESTED_EXPRESSIONS,
    MAX_NUMBER_LITERAL_LENGTH,
    MAX_STATE_VARIABLES,
    MAX_STRING_LENGTH,
)
from solsynth.generator.base import GeneratorBase, GeneratorKind
from solsynth.generator.probability import (
    coin_flip,
    pick_in_range,
    pick_one_of,
    random_ascii_string,
    random_hex_string,
    random_number_literal,
)
from solsynth.utils.whiskers import render


class ExpressionKind(enum.Enum):
    INDEX_ACCESS = "index_access"
    INDEX_RANGE_ACCESS = "index_range_access"
    MEMBER_ACCESS = "member_access"
    FUNCTION_CALL_OPTIONS = "function_call_options"
    FUNCTION_CALL = "function_call"
    PAYABLE_CONVERSION = "payable_conversion"
    META_TYPE = "meta_type"
    UNARY_PREFIX_OP = "unary_prefix_op"
    UNARY_SUFFIX_OP = "unary_suffix_op"
    EXP_OP = "exp_op"
    MUL_DIV_MOD_OP = "mul_div_mod_op"
    ADD_SUB_OP = "add_sub_op"
    SHIFT_OP = "shift_op"
    BIT_AND_OP = "bit_and_op"
    BIT_XOR_OP = "bit_xor_op"
    BIT_OR_OP = "bit_or_op"
    ORDER_COMPARISON = "order_comparison"
    EQUALITY_COMPARISON = "equality_comparison"
    AND_OP = "and_op"
    OR_OP = "or_op"
    CONDITIONAL = "conditional"
    ASSIGNMENT = "assignment"
    NEW_EXPRESSION = "new_expression"
    TUPLE = "tuple"
    INLINE_ARRAY = "inline_array"
    IDENTIFIER = "identifier"
    LITERAL = "literal"
    ELEMENTARY_TYPE_NAME = "elementary_type_name"
    USER_DEFINED_TYPE_NAME = "user_defined_type_name"


ALL_KINDS: Tuple[ExpressionKind, ...] = tuple(ExpressionKind)

LEAF_KINDS: Tuple[ExpressionKind, ...] = (
    ExpressionKind.IDENTIFIER,
    ExpressionKind.LITERAL,
    ExpressionKind.ELEMENTARY_TYPE_NAME,
    ExpressionKind.USER_DEFINED_TYPE_NAME,
)

# Kinds allowed in initializers of constant variables
CONSTANT_KINDS: Tuple[ExpressionKind, ...] = (
    ExpressionKind.UNARY_PREFIX_OP,
    ExpressionKind.EXP_OP,
    ExpressionKind.MUL_DIV_MOD_OP,
    ExpressionKind.ADD_SUB_OP,
    ExpressionKind.SHIFT_OP,
    ExpressionKind.BIT_AND_OP,
    ExpressionKind.BIT_XOR_OP,
    ExpressionKind.BIT_OR_OP,
    ExpressionKind.ORDER_COMPARISON,
    ExpressionKind.EQUALITY_COMPARISON,
    ExpressionKind.AND_OP,
    ExpressionKind.OR_OP,
    ExpressionKind.CONDITIONAL,
    ExpressionKind.IDENTIFIER,
    ExpressionKind.LITERAL,
)

CONSTANT_LEAF_KINDS: Tuple[ExpressionKind, ...] = (
    ExpressionKind.IDENTIFIER,
    ExpressionKind.LITERAL,
)

_BINARY_OPERATORS: Dict[ExpressionKind, Tuple[str, ...]] = {
    ExpressionKind.EXP_OP: ("**",),
    ExpressionKind.MUL_DIV_MOD_OP: ("*", "/", "%"),
    ExpressionKind.ADD_SUB_OP: ("+", "-"),
    ExpressionKind.SHIFT_OP: ("<<", ">>", ">>>"),
    ExpressionKind.BIT_AND_OP: ("&",),
    ExpressionKind.BIT_XOR_OP: ("^",),
    ExpressionKind.BIT_OR_OP: ("|",),
    ExpressionKind.ORDER_COMPARISON: ("<", ">", "<=", ">="),
    ExpressionKind.EQUALITY_COMPARISON: ("==", "!="),
    ExpressionKind.AND_OP: ("&&",),
    ExpressionKind.OR_OP: ("||",),
}

_PREFIX_OPERATORS = ("++", "--", "-", "!", "~", "delete ")
_CONSTANT_PREFIX_OPERATORS = ("-", "!", "~")
_SUFFIX_OPERATORS = ("++", "--")
_ASSIGNMENT_OPERATORS = ("=", "|=", "^=", "&=", "<<=", ">>=", "+=", "-=", "*=", "/=", "%=")
_CALL_OPTIONS = ("value", "gas", "salt")
_BUILTIN_MEMBERS = ("length", "balance", "code", "selector")

_TEMPLATES: Dict[ExpressionKind, str] = {
    ExpressionKind.INDEX_ACCESS: "<base>[<index>]",
    ExpressionKind.INDEX_RANGE_ACCESS: "<base>[<start>:<end>]",
    ExpressionKind.MEMBER_ACCESS: "<base>.<member>",
    ExpressionKind.FUNCTION_CALL_OPTIONS: "<callee>{<options>}",
    ExpressionKind.FUNCTION_CALL: "<callee>(<arguments>)",
    ExpressionKind.PAYABLE_CONVERSION: "payable(<expression>)",
    ExpressionKind.META_TYPE: "type(<type>)",
    ExpressionKind.UNARY_PREFIX_OP: "<operator>(<expression>)",
    ExpressionKind.UNARY_SUFFIX_OP: "(<expression>)<operator>",
    ExpressionKind.CONDITIONAL: "(<condition> ? <trueExpression> : <falseExpression>)",
    ExpressionKind.NEW_EXPRESSION: "new <type>",
    ExpressionKind.TUPLE: "(<components>)",
    ExpressionKind.INLINE_ARRAY: "[<elements>]",
}
# Binary operators and assignments
_BINARY_TEMPLATE = "(<left> <operator> <right>)"
_CALL_OPTION_TEMPLATE = "<option>: <value>"


class ExpressionGenerator(GeneratorBase):
    kind = GeneratorKind.EXPRESSION
    requires = (GeneratorKind.TYPE, GeneratorKind.USER_DEFINED_TYPE)
    compile_time_constant_only = False

    def __init__(self, synthesizer):
        super().__init__(synthesizer)
        self.nesting_depth = 0
        # Deepest recursion reached during the last top-level visit
        self.deepest = 0
        self._depth = 0
        # Kinds produced during the last top-level visit, in production order
        self.productions: List[ExpressionKind] = []

        self._producers: Dict[ExpressionKind, Callable[[], str]] = {
            ExpressionKind.INDEX_ACCESS: self._index_access,
            ExpressionKind.INDEX_RANGE_ACCESS: self._index_range_access,
            ExpressionKind.MEMBER_ACCESS: self._member_access,
            ExpressionKind.FUNCTION_CALL_OPTIONS: self._function_call_options,
            ExpressionKind.FUNCTION_CALL: self._function_call,
            ExpressionKind.PAYABLE_CONVERSION: self._payable_conversion,
            ExpressionKind.META_TYPE: self._meta_type,
            ExpressionKind.UNARY_PREFIX_OP: self._unary_prefix_op,
            ExpressionKind.UNARY_SUFFIX_OP: self._unary_suffix_op,
            ExpressionKind.CONDITIONAL: self._conditional,
            ExpressionKind.ASSIGNMENT: self._assignment,
            ExpressionKind.NEW_EXPRESSION: self._new_expression,
            ExpressionKind.TUPLE: self._tuple,
            ExpressionKind.INLINE_ARRAY: self._inline_array,
            ExpressionKind.IDENTIFIER: self.identifier,
            ExpressionKind.LITERAL: self.literal,
            ExpressionKind.ELEMENTARY_TYPE_NAME: self._elementary_type_name,
            ExpressionKind.USER_DEFINED_TYPE_NAME: self._user_defined_type_name,
        }
        for kind in _BINARY_OPERATORS:
            self._producers[kind] = self._binary_op(kind)

    def reset(self) -> None:
        self.nesting_depth = 0
        self.deepest = 0
        self._depth = 0
        self.productions = []

    def nesting_depth_too_high(self) -> bool:
        return self.nesting_depth > MAX_NESTED_EXPRESSIONS

    def eligible_kinds(self) -> Tuple[ExpressionKind, ...]:
        if self.compile_time_constant_only:
            return CONSTANT_LEAF_KINDS if self.nesting_depth_too_high() else CONSTANT_KINDS
        return LEAF_KINDS if self.nesting_depth_too_high() else ALL_KINDS

    def visit(self) -> str:
        self.reset()
        return self.expression()

    def expression(self) -> str:
        self.nesting_depth += 1
        self._depth += 1
        self.deepest = max(self.deepest, self._depth)
        try:
            kind = pick_one_of(self.eligible_kinds(), self.rand)
            self.productions.append(kind)
            return self._producers[kind]()
        finally:
            self._depth -= 1

    # -- Literals -------------------------------------------------------------

    def bool_literal(self) -> str:
        return "true" if coin_flip(self.rand) else "false"

    def double_quoted_string_literal(self) -> str:
        return render('"<text>"', {"text": random_ascii_string(MAX_STRING_LENGTH, self.rand)})

    def hex_literal(self) -> str:
        num_bytes = pick_in_range(MAX_HEX_LITERAL_LENGTH // 2, self.rand)
        return render('hex"<digits>"', {"digits": random_hex_string(2 * num_bytes, self.rand)})

    def number_literal(self) -> str:
        _, text = random_number_literal(MAX_NUMBER_LITERAL_LENGTH, self.rand)
        return text

    def address_literal(self) -> str:
        return render("0x<digits>", {"digits": random_hex_string(ADDRESS_HEX_LENGTH, self.rand)})

    def literal(self) -> str:
        return pick_one_of((
            self.bool_literal,
            self.double_quoted_string_literal,
            self.hex_literal,
            self.number_literal,
            self.address_literal,
        ), self.rand)()

    # -- Leaves ---------------------------------------------------------------

    def identifier(self) -> str:
        if self.compile_time_constant_only:
            return f"c{pick_in_range(MAX_CONSTANT_VARIABLES, self.rand)}"
        unit = self.state.current_unit()
        if unit.has_symbols() and coin_flip(self.rand):
            return unit.exported_symbols.random_symbol(self.rand)
        if coin_flip(self.rand):
            return f"v{pick_in_range(MAX_LOCAL_VARIABLES, self.rand)}"
        return f"sv{pick_in_range(MAX_STATE_VARIABLES, self.rand)}"

    def _elementary_type_name(self) -> str:
        return self.generator(GeneratorKind.TYPE).visit_elementary_type()

    def _user_defined_type_name(self) -> str:
        return self.generator(GeneratorKind.USER_DEFINED_TYPE).visit()

    # -- Recursive kinds ------------------------------------------------------

    def _expression_list(self, maximum: int) -> List[str]:
        return [self.expression() for _ in range(pick_in_range(maximum, self.rand))]

    def _index_access(self) -> str:
        base = self.expression()
        return render(_TEMPLATES[ExpressionKind.INDEX_ACCESS], {"base": base, "index": self.expression()})

    def _index_range_access(self) -> str:
        base = self.expression()
        start = self.expression() if coin_flip(self.rand) else ""
        end = self.expression() if coin_flip(self.rand) else ""
        return render(_TEMPLATES[ExpressionKind.INDEX_RANGE_ACCESS], {"base": base, "start": start, "end": end})

    def _member_access(self) -> str:
        if coin_flip(self.rand):
            member = pick_one_of(_BUILTIN_MEMBERS, self.rand)
        else:
            member = f"m{pick_in_range(MAX_MEMBER_IDENTIFIERS, self.rand)}"
        return render(_TEMPLATES[ExpressionKind.MEMBER_ACCESS], {"base": self.expression(), "member": member})

    def _function_call_options(self) -> str:
        callee = self.expression()
        options = [o for o in _CALL_OPTIONS if coin_flip(self.rand)]
        if not options:
            options = [pick_one_of(_CALL_OPTIONS, self.rand)]
        entries = [render(_CALL_OPTION_TEMPLATE, {"option": o, "value": self.expression()}) for o in options]
        return render(_TEMPLATES[ExpressionKind.FUNCTION_CALL_OPTIONS], {
            "callee": callee,
            "options": ", ".join(entries),
        })

    def _function_call(self) -> str:
        callee = self.expression()
        count = pick_in_range(MAX_CALL_ARGUMENTS + 1, self.rand) - 1
        arguments = [self.expression() for _ in range(count)]
        return render(_TEMPLATES[ExpressionKind.FUNCTION_CALL], {
            "callee": callee,
            "arguments": ", ".join(arguments),
        })

    def _payable_conversion(self) -> str:
        return render(_TEMPLATES[ExpressionKind.PAYABLE_CONVERSION], {"expression": self.expression()})

    def _meta_type(self) -> str:
        return render(_TEMPLATES[ExpressionKind.META_TYPE], {"type": self._user_defined_type_name()})

    def _unary_prefix_op(self) -> str:
        operators = _CONSTANT_PREFIX_OPERATORS if self.compile_time_constant_only else _PREFIX_OPERATORS
        operator = pick_one_of(operators, self.rand)
        return render(_TEMPLATES[ExpressionKind.UNARY_PREFIX_OP], {
            "operator": operator,
            "expression": self.expression(),
        })

    def _unary_suffix_op(self) -> str:
        expression = self.expression()
        return render(_TEMPLATES[ExpressionKind.UNARY_SUFFIX_OP], {
            "expression": expression,
            "operator": pick_one_of(_SUFFIX_OPERATORS, self.rand),
        })

    def _binary_op(self, kind: ExpressionKind) -> Callable[[], str]:
        operators = _BINARY_OPERATORS[kind]

        def produce() -> str:
            left = self.expression()
            operator = pick_one_of(operators, self.rand)
            return render(_BINARY_TEMPLATE, {"left": left, "operator": operator, "right": self.expression()})

        return produce

    def _conditional(self) -> str:
        condition = self.expression()
        true_expression = self.expression()
        return render(_TEMPLATES[ExpressionKind.CONDITIONAL], {
            "condition": condition,
            "trueExpression": true_expression,
            "falseExpression": self.expression(),
        })

    def _assignment(self) -> str:
        target = self.expression()
        operator = pick_one_of(_ASSIGNMENT_OPERATORS, self.rand)
        return render(_BINARY_TEMPLATE, {"left": target, "operator": operator, "right": self.expression()})

    def _new_expression(self) -> str:
        return render(_TEMPLATES[ExpressionKind.NEW_EXPRESSION], {
            "type": self.generator(GeneratorKind.TYPE).visit(),
        })

    def _tuple(self) -> str:
        count = pick_in_range(MAX_ELEMENTS_IN_TUPLE, self.rand)
        if count == 1:
            components = [self.expression()]
        else:
            components = [self.expression() if coin_flip(self.rand) else "" for _ in range(count)]
        return render(_TEMPLATES[ExpressionKind.TUPLE], {"components": ", ".join(components)})

    def _inline_array(self) -> str:
        elements = self._expression_list(MAX_ELEMENTS_INLINE_ARRAY)
        return render(_TEMPLATES[ExpressionKind.INLINE_ARRAY], {"elements": ", ".join(elements)})


class ConstantExpressionGenerator(ExpressionGenerator):
    """Expressions valid where the compiler needs a compile-time constant."""

    kind = GeneratorKind.CONSTANT_EXPRESSION
    compile_time_constant_only = True
