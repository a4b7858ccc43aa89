"""
Program state shared by all generators of one synthesis pass.

The state records, per generated source unit, the names it exports, the
function signatures declared in it and the imports it performs. Generators
consult it before referencing a name and update it after introducing one.
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from solsynth.generator.probability import pick_in_range, pick_one_of
from solsynth.utils.exceptions import sol_assert

logger = logging.getLogger(__name__)

# (type, name)
ParamType = Tuple[str, str]


@dataclass
class ExportedSymbols:
    """Names visible to other units: plain symbols and user defined types."""

    symbols: Set[str] = field(default_factory=set)
    types: Set[str] = field(default_factory=set)

    def __iadd__(self, other: "ExportedSymbols") -> "ExportedSymbols":
        self.symbols |= other.symbols | other.types
        self.types |= other.types
        return self

    def add_symbol(self, name: str) -> None:
        self.symbols.add(name)

    def add_type(self, name: str) -> None:
        """A type name is also a symbol: it can be imported by name."""
        self.symbols.add(name)
        self.types.add(name)

    def all_names(self) -> Set[str]:
        return self.symbols | self.types

    def random_symbol(self, rand: random.Random) -> str:
        sol_assert(bool(self.symbols), "No exported symbols to choose from")
        return pick_one_of(sorted(self.symbols), rand)

    def random_user_defined_type(self, rand: random.Random) -> str:
        sol_assert(bool(self.types), "No exported user defined types to choose from")
        return pick_one_of(sorted(self.types), rand)


class Mutability(enum.Enum):
    PURE = "pure"
    VIEW = "view"
    PAYABLE = "payable"
    NONPAYABLE = ""


class Visibility(enum.Enum):
    EXTERNAL = "external"
    INTERNAL = "internal"
    PUBLIC = "public"
    PRIVATE = "private"


class Inheritance(enum.Enum):
    VIRTUAL = "virtual"
    OVERRIDE = "override"
    VIRTUAL_OVERRIDE = "virtual override"
    NONE = ""

    @property
    def overrides(self) -> bool:
        return self in (Inheritance.OVERRIDE, Inheritance.VIRTUAL_OVERRIDE)


_CONTRACT_MUTABILITY = (Mutability.PURE, Mutability.VIEW, Mutability.PAYABLE, Mutability.NONPAYABLE)
_FREE_FUNCTION_MUTABILITY = (Mutability.PURE, Mutability.VIEW, Mutability.NONPAYABLE)


@dataclass
class FunctionState:
    """Signature of one generated function. Equality is structural."""

    name: str = ""
    mutability: Mutability = Mutability.NONPAYABLE
    visibility: Visibility = Visibility.INTERNAL
    input_parameters: Tuple[ParamType, ...] = ()
    return_parameters: Tuple[ParamType, ...] = ()
    inheritance: Inheritance = Inheritance.NONE

    @staticmethod
    def random_mutability(rand: random.Random) -> Mutability:
        return pick_one_of(_CONTRACT_MUTABILITY, rand)

    @staticmethod
    def random_free_function_mutability(rand: random.Random) -> Mutability:
        return pick_one_of(_FREE_FUNCTION_MUTABILITY, rand)


@dataclass
class ImportState:
    """One import statement.

    ``symbols`` empty means the whole unit is imported. At most one of
    ``unit_alias`` and ``symbol_aliases`` is set.
    """

    path: str
    symbols: Set[str] = field(default_factory=set)
    unit_alias: Optional[str] = None
    symbol_aliases: Optional[Dict[str, str]] = None

    def __post_init__(self) -> None:
        sol_assert(
            self.unit_alias is None or self.symbol_aliases is None,
            f"Import of {self.path} has both a unit alias and symbol aliases",
        )
        if self.symbol_aliases is not None:
            sol_assert(
                set(self.symbol_aliases) <= self.symbols,
                f"Import of {self.path} aliases symbols it does not import",
            )


@dataclass
class SourceUnitState:
    exported_symbols: ExportedSymbols = field(default_factory=ExportedSymbols)
    functions: List[FunctionState] = field(default_factory=list)
    imports: List[ImportState] = field(default_factory=list)
    contracts: List[str] = field(default_factory=list)

    def export_symbol(self, name: str) -> None:
        self.exported_symbols.add_symbol(name)

    def export_type(self, name: str) -> None:
        self.exported_symbols.add_type(name)

    def export_symbols(self, symbols: ExportedSymbols) -> None:
        self.exported_symbols += symbols

    def function_exists(self, function: FunctionState) -> bool:
        return any(f == function for f in self.functions)

    def add_function(self, function: FunctionState) -> None:
        self.exported_symbols.add_symbol(function.name)
        self.functions.append(function)

    def add_contract(self, name: str) -> None:
        self.exported_symbols.add_type(name)
        self.contracts.append(name)

    def has_symbols(self) -> bool:
        return len(self.exported_symbols.symbols) > 0

    def has_user_defined_types(self) -> bool:
        return len(self.exported_symbols.types) > 0


class ProgramState:
    """Ordered ledger of source units plus the unit currently being generated."""

    def __init__(self, rand: random.Random):
        self.rand = rand
        self.source_unit_states: Dict[str, SourceUnitState] = {}
        self.current_source_name: Optional[str] = None

    def add_source_unit(self, path: str) -> SourceUnitState:
        sol_assert(path not in self.source_unit_states, f"Source unit {path} already exists")
        unit = SourceUnitState()
        self.source_unit_states[path] = unit
        self.current_source_name = path
        logger.debug("Began source unit %s", path)
        return unit

    def clear(self) -> None:
        self.source_unit_states.clear()
        self.current_source_name = None

    def empty(self) -> bool:
        return not self.source_unit_states

    def size(self) -> int:
        return len(self.source_unit_states)

    def paths(self) -> List[str]:
        return list(self.source_unit_states)

    def current_path(self) -> str:
        sol_assert(not self.empty(), "Program state queried before any source unit exists")
        return self.current_source_name

    def current_unit(self) -> SourceUnitState:
        return self.source_unit_states[self.current_path()]

    def unit(self, path: str) -> SourceUnitState:
        sol_assert(path in self.source_unit_states, f"Unknown source unit {path}")
        return self.source_unit_states[path]

    def export_symbol(self, name: str) -> None:
        self.current_unit().export_symbol(name)

    def export_type(self, name: str) -> None:
        self.current_unit().export_type(name)

    def export_symbols(self, symbols: ExportedSymbols) -> None:
        self.current_unit().export_symbols(symbols)

    def signature_exists(self, function: FunctionState) -> bool:
        return self.current_unit().function_exists(function)

    def register_function(self, function: FunctionState) -> bool:
        """Record *function* in the current unit unless an equal one exists."""
        if self.signature_exists(function):
            logger.debug("Signature of %s already declared in %s", function.name, self.current_path())
            return False
        self.current_unit().add_function(function)
        return True

    def contract_count(self) -> int:
        return sum(len(u.contracts) for u in self.source_unit_states.values())

    def random_path(self) -> str:
        sol_assert(not self.empty(), "Program state queried before any source unit exists")
        return pick_one_of(self.paths(), self.rand)

    def random_other_path(self) -> str:
        """Return a path other than the current one; requires two units."""
        current = self.current_path()
        others = [p for p in self.paths() if p != current]
        sol_assert(len(others) > 0, "No source unit other than the current one")
        return others[pick_in_range(len(others), self.rand) - 1]
