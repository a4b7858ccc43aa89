"""
Program synthesizer.

Owns the random stream, the program state and one generator per kind. All
three belong to a single synthesis pass; parallel runs build one synthesizer
each.
"""

import logging
import random
from graphlib import CycleError, TopologicalSorter
from typing import Dict, Mapping, Optional, Type

from solsynth.config.generator_config import GeneratorConfig
from solsynth.config.generator_loader import GENERATORS
from solsynth.constants import BANNER_TEMPLATE
from solsynth.generator.base import GeneratorBase, GeneratorKind
from solsynth.generator.probability import pick_one_of
from solsynth.generator.state import ProgramState
from solsynth.utils.exceptions import InvariantViolation, sol_assert
from solsynth.utils.whiskers import render

# ---------------------------------------------------------------------------
# Debug infrastructure, activated by ``--debug`` on the solsynth CLI.
# ---------------------------------------------------------------------------
_logger = logging.getLogger("solsynth")


def enable_debug() -> None:
    """Turn on verbose debug logging for every solsynth module."""
    _logger.setLevel(logging.DEBUG)
    if not _logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(message)s"))
        _logger.addHandler(handler)


logger = logging.getLogger(__name__)


class SolidityGenerator:
    """
    Builds the generator graph for one seed and synthesizes programs from it.

    Every generator's ``setup()`` runs once, dependencies first, before any
    ``visit()``. A dependency on an unregistered kind or a cycle between kinds
    raises InvariantViolation.
    """

    def __init__(
        self,
        seed: int,
        config: Optional[GeneratorConfig] = None,
        generators: Optional[Mapping[GeneratorKind, Type[GeneratorBase]]] = None,
    ):
        sol_assert(seed >= 0, f"Seed must be unsigned, got {seed}")
        self.seed = seed
        self.config = config if config is not None else GeneratorConfig()
        self._rand = random.Random(seed)
        self._state = ProgramState(self._rand)

        table = GENERATORS if generators is None else generators
        self._generators: Dict[GeneratorKind, GeneratorBase] = {}
        for kind, cls in table.items():
            sol_assert(cls.kind is kind, f"{cls.__name__} registered under {kind.name}")
            self._generators[kind] = cls(self)
        self._setup()

    def _setup(self) -> None:
        sorter = TopologicalSorter()
        for kind, generator in self._generators.items():
            for dependency in generator.requires:
                sol_assert(
                    dependency in self._generators,
                    f"{generator.name()} requires {dependency.name}, which is not registered",
                )
            sorter.add(kind, *generator.requires)
        try:
            order = tuple(sorter.static_order())
        except CycleError as e:
            cycle = " -> ".join(k.name for k in e.args[1])
            raise InvariantViolation(f"Generator dependency cycle: {cycle}") from e

        for kind in order:
            self._generators[kind].setup()
        logger.debug("Set up %d generators", len(order))

    def random_engine(self) -> random.Random:
        return self._rand

    def test_state(self) -> ProgramState:
        return self._state

    def generator(self, kind: GeneratorKind) -> GeneratorBase:
        sol_assert(kind in self._generators, f"No generator registered for {kind!r}")
        return self._generators[kind]

    def random_generator(self) -> GeneratorBase:
        return pick_one_of(list(self._generators.values()), self._rand)

    def reset(self) -> None:
        """Clear per-pass counters and the program state; the graph is kept."""
        for generator in self._generators.values():
            generator.reset()
        self._state.clear()

    def generate_test_program(self) -> str:
        """Synthesize the program for ``self.seed``; repeated calls agree."""
        self.reset()
        self._rand.seed(self.seed)
        program = render(BANNER_TEMPLATE, {"seed": str(self.seed)})
        program += "\n" + self.generator(GeneratorKind.TEST_CASE).visit()
        logger.debug("Seed %d produced %d source units", self.seed, self._state.size())
        return program
