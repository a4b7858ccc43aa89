"""
Corpus file utilities.

One helper splits the seed range between workers, the others name and write
generated programs.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

CORPUS_SUFFIX = ".sol"


def split_seeds(first_seed: int, count: int, num_chunks: int) -> List[List[int]]:
    """Split ``first_seed .. first_seed + count - 1`` into *num_chunks* runs.

    Always returns exactly *num_chunks* lists (some may be empty); the first
    ``count % num_chunks`` chunks carry one extra seed.
    """
    if num_chunks <= 0:
        raise ValueError("num_chunks must be positive")
    size, remainder = divmod(count, num_chunks)
    chunks: List[List[int]] = []
    start = first_seed
    for i in range(num_chunks):
        end = start + size + (1 if i < remainder else 0)
        chunks.append(list(range(start, end)))
        start = end
    return chunks


def program_path(out_dir: str, seed: int) -> Path:
    return Path(out_dir) / f"seed_{seed}{CORPUS_SUFFIX}"


def write_program(out_dir: str, seed: int, program: str) -> Path:
    """Write *program* to ``<out_dir>/seed_<seed>.sol`` and return the path."""
    path = program_path(out_dir, seed)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(program, encoding="utf-8")
    return path

