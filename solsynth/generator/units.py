"""
Top-level production rules.

A test case is a sequence of source units. Each unit is registered with the
program state before its body is produced, so imports and identifier
references made while generating it resolve against the unit itself and
every unit produced before it.
"""

from __future__ import annotations

import enum
import logging
from typing import Dict, List, Optional

from solsynth.constants import (
    ABSTRACT_CONTRACT_INV_PROB,
    EXPERIMENTAL_PRAGMAS,
    INHERITANCE_INV_PROB,
    NATSPEC_INV_PROB,
    SELF_IMPORT_INV_PROB,
    SOURCE_UNIT_HEADER_TEMPLATE,
    SOURCE_UNIT_PREFIX,
    SOURCE_UNIT_SUFFIX,
    VERSION_PRAGMAS,
)
from solsynth.generator.base import GeneratorBase, GeneratorKind
from solsynth.generator.natspec import TagCategory
from solsynth.generator.probability import coin_flip, one_in, pick_in_range, pick_one_of
from solsynth.generator.state import ExportedSymbols, ImportState
from solsynth.utils.exceptions import sol_assert
from solsynth.utils.whiskers import render

logger = logging.getLogger(__name__)


class PragmaGenerator(GeneratorBase):
    kind = GeneratorKind.PRAGMA

    _template = "pragma <version>;\n<?experimental>pragma <feature>;\n</experimental>"

    def visit(self) -> str:
        version = pick_one_of(VERSION_PRAGMAS, self.rand)
        experimental = coin_flip(self.rand)
        return render(self._template, {
            "version": version,
            "experimental": experimental,
            "feature": pick_one_of(EXPERIMENTAL_PRAGMAS, self.rand) if experimental else "",
        })


class ImportForm(enum.Enum):
    PATH = "path"
    STAR = "star"
    SELECTIVE = "selective"


class ImportGenerator(GeneratorBase):
    """
    Import statements in one of three surface forms:

    * ``import "su0.sol";`` or ``import "su0.sol" as A0;``
    * ``import * as A0 from "su0.sol";``
    * ``import {f1, E2 as A0} from "su0.sol";``

    Alias identifiers are fresh: they never clash with a name exported by the
    importing unit or by the imported one. Whatever the import makes visible
    is exported from the importing unit in turn.
    """

    kind = GeneratorKind.IMPORT

    _path_template = 'import "<path>"<?alias> as <id></alias>;'
    _star_template = 'import * as <id> from "<path>";'
    _selective_template = 'import {<symbols>} from "<path>";'
    _alias_template = "<symbol><?as> as <alias></as>"

    def __init__(self, synthesizer):
        super().__init__(synthesizer)
        # Relation recorded by the last emitted import
        self.last_import: Optional[ImportState] = None

    def _fresh_alias(self, target: ExportedSymbols) -> str:
        taken = target.all_names() | self.state.current_unit().exported_symbols.all_names()
        index = 0
        while f"A{index}" in taken:
            index += 1
        return f"A{index}"

    def _path_import(self, path: str, target: ExportedSymbols) -> ImportState:
        alias = self._fresh_alias(target) if coin_flip(self.rand) else None
        if alias is None:
            self.state.export_symbols(ExportedSymbols(set(target.symbols), set(target.types)))
        else:
            self.state.export_symbol(alias)
        return ImportState(path, unit_alias=alias)

    def _star_import(self, path: str, target: ExportedSymbols) -> ImportState:
        alias = self._fresh_alias(target)
        self.state.export_symbol(alias)
        return ImportState(path, unit_alias=alias)

    def _selective_import(self, path: str, target: ExportedSymbols) -> ImportState:
        candidates = sorted(target.symbols)
        symbols = self.rand.sample(candidates, pick_in_range(len(candidates), self.rand))
        aliases: Dict[str, str] = {}
        for symbol in symbols:
            if coin_flip(self.rand):
                aliases[symbol] = self._fresh_alias(target)
                # Reserve the alias before drawing the next one
                self.state.export_symbol(aliases[symbol])
            visible = aliases.get(symbol, symbol)
            if symbol in target.types:
                self.state.export_type(visible)
            else:
                self.state.export_symbol(visible)
        return ImportState(path, symbols=set(symbols), symbol_aliases=aliases or None)

    def generate_import(self, path: str, form: ImportForm) -> str:
        target = self.state.unit(path).exported_symbols
        if form is ImportForm.SELECTIVE and not target.symbols:
            logger.debug("%s exports nothing, importing it by path", path)
            form = ImportForm.PATH

        if form is ImportForm.PATH:
            relation = self._path_import(path, target)
            text = render(self._path_template, {
                "path": path,
                "alias": relation.unit_alias is not None,
                "id": relation.unit_alias or "",
            })
        elif form is ImportForm.STAR:
            relation = self._star_import(path, target)
            text = render(self._star_template, {"path": path, "id": relation.unit_alias})
        else:
            relation = self._selective_import(path, target)
            aliases = relation.symbol_aliases or {}
            symbols = [
                render(self._alias_template, {"symbol": s, "as": s in aliases, "alias": aliases.get(s, "")})
                for s in sorted(relation.symbols)
            ]
            text = render(self._selective_template, {"path": path, "symbols": ", ".join(symbols)})

        self.state.current_unit().imports.append(relation)
        self.last_import = relation
        logger.debug("%s imports %s (%s)", self.state.current_path(), path, form.value)
        return text

    def visit(self) -> str:
        self.last_import = None
        if self.state.size() == 1:
            if not one_in(SELF_IMPORT_INV_PROB, self.rand):
                return ""
            path = self.state.current_path()
        else:
            path = self.state.random_other_path()
        return self.generate_import(path, pick_one_of(tuple(ImportForm), self.rand))


class ContractDefinitionGenerator(GeneratorBase):
    kind = GeneratorKind.CONTRACT_DEFINITION
    requires = (
        GeneratorKind.STATE_VARIABLE,
        GeneratorKind.EVENT,
        GeneratorKind.FUNCTION_DEFINITION,
        GeneratorKind.NATSPEC,
    )

    _template = (
        "<natSpecString><?abstract>abstract </abstract>contract <id>"
        "<?inheritance> is <inheritanceSpecifierList></inheritance> {\n<body>}"
    )

    def _base_contracts(self) -> List[str]:
        contracts = self.state.current_unit().contracts
        if not contracts or not one_in(INHERITANCE_INV_PROB, self.rand):
            return []
        chosen = set(self.rand.sample(contracts, pick_in_range(len(contracts), self.rand)))
        # Keep declaration order so more basic contracts come first
        return [c for c in contracts if c in chosen]

    def _member_kinds(self):
        kinds = [k for k in self.synthesizer.config.contract_member_kinds if k in self.dependencies]
        sol_assert(len(kinds) > 0, "No contract member kinds configured")
        return kinds

    def visit(self) -> str:
        abstract = one_in(ABSTRACT_CONTRACT_INV_PROB, self.rand)
        bases = self._base_contracts()
        name = f"C{self.state.contract_count()}"

        natspec = ""
        if one_in(NATSPEC_INV_PROB, self.rand):
            generator = self.generator(GeneratorKind.NATSPEC)
            generator.tag_category(TagCategory.CONTRACT)
            natspec = generator.visit()

        functions = self.generator(GeneratorKind.FUNCTION_DEFINITION)
        functions.contract_function_mode(abstract, bool(bases))
        self.generator(GeneratorKind.STATE_VARIABLE).overriding_allowed = bool(bases)

        kinds = self._member_kinds()
        members = []
        for _ in range(pick_in_range(self.synthesizer.config.max_contract_members, self.rand)):
            text = self.generator(pick_one_of(kinds, self.rand)).visit()
            members.append("".join(f"\t{line}\n" for line in text.splitlines()))

        functions.free_function_mode()
        self.generator(GeneratorKind.STATE_VARIABLE).overriding_allowed = False
        self.state.current_unit().add_contract(name)
        logger.debug("Defined contract %s with %d members", name, len(members))

        return render(self._template, {
            "natSpecString": natspec,
            "abstract": abstract,
            "id": name,
            "inheritance": bool(bases),
            "inheritanceSpecifierList": ", ".join(bases),
            "body": "".join(members),
        })


class SourceUnitGenerator(GeneratorBase):
    """Pragmas, then imports, then a bounded run of top-level declarations."""

    kind = GeneratorKind.SOURCE_UNIT
    requires = (
        GeneratorKind.PRAGMA,
        GeneratorKind.IMPORT,
        GeneratorKind.CONTRACT_DEFINITION,
        GeneratorKind.FUNCTION_DEFINITION,
        GeneratorKind.ENUM,
        GeneratorKind.CONSTANT_VARIABLE,
    )

    def _eligible_kinds(self, contracts: int) -> List[GeneratorKind]:
        config = self.synthesizer.config
        return [
            kind for kind in config.top_level_kinds
            if kind in self.dependencies
            and not (kind is GeneratorKind.CONTRACT_DEFINITION and contracts >= config.max_contracts)
        ]

    def visit(self) -> str:
        config = self.synthesizer.config
        parts = [self.generator(GeneratorKind.PRAGMA).visit()]

        imports = self.generator(GeneratorKind.IMPORT)
        for _ in range(pick_in_range(config.max_imports + 1, self.rand) - 1):
            text = imports.visit()
            if text:
                parts.append(text + "\n")

        contracts = 0
        for _ in range(pick_in_range(config.max_unit_elements, self.rand)):
            eligible = self._eligible_kinds(contracts)
            if not eligible:
                break
            kind = pick_one_of(eligible, self.rand)
            if kind is GeneratorKind.FUNCTION_DEFINITION:
                self.generator(kind).free_function_mode()
            elif kind is GeneratorKind.CONTRACT_DEFINITION:
                contracts += 1
            parts.append(self.generator(kind).visit() + "\n")
        return "".join(parts)


class ProgramGenerator(GeneratorBase):
    """Root rule: one or more source units named ``su0.sol``, ``su1.sol``..."""

    kind = GeneratorKind.TEST_CASE
    requires = (GeneratorKind.SOURCE_UNIT,)

    @staticmethod
    def source_unit_path(index: int) -> str:
        return f"{SOURCE_UNIT_PREFIX}{index}{SOURCE_UNIT_SUFFIX}"

    def visit(self) -> str:
        parts = []
        for index in range(pick_in_range(self.synthesizer.config.max_source_units, self.rand)):
            path = self.source_unit_path(index)
            self.state.add_source_unit(path)
            parts.append(render(SOURCE_UNIT_HEADER_TEMPLATE, {"path": path}))
            parts.append(self.visit_children())
        return "".join(parts)
