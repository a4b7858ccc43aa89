"""
Command-line argument parsing for solsynth.

Parsed values land in a dataclass so the contract between the CLI and the
synthesizer is explicit.
"""

from __future__ import annotations

import argparse
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class SynthesizerArgs:
    """Container for parsed CLI arguments."""

    seed: int = 0
    count: int = 1
    out: Optional[str] = None
    processes: Optional[int] = None
    max_source_units: Optional[int] = None
    max_contracts: Optional[int] = None
    debug: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def corpus_mode(self) -> bool:
        return self.out is not None


def _unsigned(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected an unsigned integer, got {text}")
    return value


def _positive(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    """Construct the ``ArgumentParser`` (no side-effects)."""
    parser = argparse.ArgumentParser(
        description="solsynth - grammar-directed Solidity program synthesizer",
    )
    parser.add_argument(
        "--seed", "-s", type=_unsigned, default=0,
        help="seed of the (first) program (default: %(default)s)",
    )
    parser.add_argument(
        "--count", "-n", type=_positive, default=1,
        help="number of consecutive seeds to synthesize (default: %(default)s)",
    )
    parser.add_argument(
        "--out", "-o", type=str, default=None,
        help="corpus directory; programs are printed to stdout when omitted",
    )
    parser.add_argument(
        "--processes", "-p", type=_positive, default=None,
        help="number of worker processes in corpus mode (default: physical cores)",
    )
    parser.add_argument("--max_source_units", type=_positive, default=None, help="source units per program")
    parser.add_argument("--max_contracts", type=_positive, default=None, help="contracts per source unit")
    parser.add_argument("--debug", action="store_true", help="enable verbose debug logging")
    return parser


def parse_args(argv=None) -> SynthesizerArgs:
    """Parse *argv* (or ``sys.argv``) and return a :class:`SynthesizerArgs`."""
    ns = _build_parser().parse_args(argv)
    return SynthesizerArgs(
        seed=ns.seed,
        count=ns.count,
        out=ns.out,
        processes=ns.processes,
        max_source_units=ns.max_source_units,
        max_contracts=ns.max_contracts,
        debug=ns.debug,
    )
