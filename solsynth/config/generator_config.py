"""
Generator configuration module.

Program-shape knobs for one synthesis pass. Defaults can be overridden from
the environment, e.g. ``SOLSYNTH_MAX_SOURCE_UNITS=1``, so a corpus run can be
reshaped without touching the command line.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Tuple

from solsynth.generator.base import GeneratorKind

DEFAULT_TOP_LEVEL_KINDS: Tuple[GeneratorKind, ...] = (
    GeneratorKind.CONTRACT_DEFINITION,
    GeneratorKind.FUNCTION_DEFINITION,
    GeneratorKind.ENUM,
    GeneratorKind.CONSTANT_VARIABLE,
)

DEFAULT_CONTRACT_MEMBER_KINDS: Tuple[GeneratorKind, ...] = (
    GeneratorKind.STATE_VARIABLE,
    GeneratorKind.EVENT,
    GeneratorKind.FUNCTION_DEFINITION,
)


def _env_int(name: str, default: int) -> int:
    value = int(os.environ.get(name, default))
    if value < 1:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_kinds(name: str, default: Tuple[GeneratorKind, ...]) -> Tuple[GeneratorKind, ...]:
    """Parse a comma separated list of kind values, e.g. ``enum,contract_definition``."""
    raw = os.environ.get(name)
    if not raw:
        return default
    return tuple(GeneratorKind(k.strip()) for k in raw.split(",") if k.strip())


@dataclass(frozen=True)
class GeneratorConfig:
    max_source_units: int = field(default_factory=lambda: _env_int("SOLSYNTH_MAX_SOURCE_UNITS", 3))
    max_unit_elements: int = field(default_factory=lambda: _env_int("SOLSYNTH_MAX_UNIT_ELEMENTS", 4))
    max_contracts: int = field(default_factory=lambda: _env_int("SOLSYNTH_MAX_CONTRACTS", 3))
    # Zero disables imports
    max_imports: int = field(default_factory=lambda: int(os.environ.get("SOLSYNTH_MAX_IMPORTS", 2)))
    max_contract_members: int = field(default_factory=lambda: _env_int("SOLSYNTH_MAX_CONTRACT_MEMBERS", 4))
    top_level_kinds: Tuple[GeneratorKind, ...] = field(
        default_factory=lambda: _env_kinds("SOLSYNTH_TOP_LEVEL_KINDS", DEFAULT_TOP_LEVEL_KINDS)
    )
    contract_member_kinds: Tuple[GeneratorKind, ...] = field(
        default_factory=lambda: _env_kinds("SOLSYNTH_CONTRACT_MEMBER_KINDS", DEFAULT_CONTRACT_MEMBER_KINDS)
    )

    def __post_init__(self) -> None:
        if self.max_imports < 0:
            raise ValueError(f"max_imports must not be negative, got {self.max_imports}")
        for name in ("max_source_units", "max_unit_elements", "max_contracts", "max_contract_members"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
