"""
Parallel corpus generation.

Each worker process synthesizes its own run of seeds with a private
synthesizer, so no random stream or program state crosses a process boundary.
"""

import logging
import os
from multiprocessing import Pool
from typing import List, Optional, Tuple

import psutil

from solsynth.config.generator_config import GeneratorConfig
from solsynth.core.synthesizer import SolidityGenerator
from solsynth.utils.file_handlers import split_seeds, write_program

logger = logging.getLogger(__name__)

_ChunkTask = Tuple[List[int], str, Optional[GeneratorConfig]]


def default_process_count() -> int:
    """Physical core count, falling back to logical cores."""
    return psutil.cpu_count(logical=False) or os.cpu_count() or 1


def _log_worker_memory(worker: str) -> None:
    rss = psutil.Process(os.getpid()).memory_info().rss
    logger.debug("%s resident memory: %.1f MiB", worker, rss / (1024 ** 2))


def synthesize_seeds(task: _ChunkTask) -> List[str]:
    """Worker entry point: write one program per seed, return the written paths."""
    seeds, out_dir, config = task
    worker = f"worker_{os.getpid()}"
    written = []
    for seed in seeds:
        program = SolidityGenerator(seed, config).generate_test_program()
        written.append(str(write_program(out_dir, seed, program)))
    if seeds:
        logger.debug("%s wrote seeds %d..%d", worker, seeds[0], seeds[-1])
        _log_worker_memory(worker)
    return written


def generate_corpus(
    first_seed: int,
    count: int,
    out_dir: str,
    processes: Optional[int] = None,
    config: Optional[GeneratorConfig] = None,
) -> List[str]:
    """Write programs for ``count`` consecutive seeds into *out_dir*.

    Returns the written paths in seed order.
    """
    if count <= 0:
        raise ValueError("count must be positive")
    if processes is None:
        processes = default_process_count()
    processes = max(1, min(processes, count))

    chunks = split_seeds(first_seed, count, processes)
    logger.debug("Split %d seeds into %d chunks: %s", count, processes, [len(c) for c in chunks])
    tasks = [(chunk, out_dir, config) for chunk in chunks]

    with Pool(processes=processes) as pool:
        results = pool.map(synthesize_seeds, tasks)
    return [path for chunk in results for path in chunk]
