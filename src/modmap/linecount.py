"""Parallel code-line counting per module."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Mapping, Set

from modmap.config import CountConfig
from modmap.errors import DataIntegrityError
from modmap.model import STDLIB_MODULE, ModuleMetrics
from modmap.tools import LineCounter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Batch:
    """A slice of one module's files, counted with a single tool call."""

    module: str
    files: tuple[str, ...]


@dataclass(frozen=True)
class BatchResult:
    module: str
    lines: int


def make_batches(files_by_module: Mapping[str, Set[str]], batch_size: int) -> list[Batch]:
    """Split each module's files into batches of at most *batch_size*."""
    batches: list[Batch] = []
    for module in sorted(files_by_module):
        files = sorted(files_by_module[module])
        for start in range(0, len(files), batch_size):
            batches.append(Batch(module, tuple(files[start : start + batch_size])))
    return batches


def count_batch(counter: LineCounter, batch: Batch, language: str) -> BatchResult:
    """Count one batch, insisting on a positive count for *language*."""
    counts = counter.count(batch.files)
    if language not in counts:
        raise DataIntegrityError(
            f"no {language} lines reported for {len(batch.files)} files of {batch.module}"
        )
    lines = counts[language]
    if lines <= 0:
        raise DataIntegrityError(
            f"{language} line count is {lines} for {len(batch.files)} files of {batch.module}"
        )
    return BatchResult(module=batch.module, lines=lines)


def count_lines(
    files_by_module: Mapping[str, Set[str]],
    counter: LineCounter,
    config: CountConfig | None = None,
) -> ModuleMetrics:
    """Count code lines for every module using a pool of worker threads.

    Workers only call the counter; totals are summed here, on the calling
    thread, as results complete.  The first failing batch cancels the
    batches not yet started and is re-raised.
    """
    config = config or CountConfig()
    batches = make_batches(files_by_module, config.batch_size)
    metrics = ModuleMetrics()
    if not batches:
        return metrics

    workers = min(config.worker_count, len(batches))
    logger.debug("Counting %d batches with %d workers", len(batches), workers)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(count_batch, counter, batch, config.language)
            for batch in batches
        ]
        try:
            for future in as_completed(futures):
                result = future.result()
                metrics.lines[result.module] = (
                    metrics.lines.get(result.module, 0) + result.lines
                )
                metrics.total += result.lines
                if result.module != STDLIB_MODULE:
                    metrics.total_sans_stdlib += result.lines
        except BaseException:
            executor.shutdown(wait=True, cancel_futures=True)
            raise

    logger.debug(
        "Counted %d lines in %d modules (%d outside stdlib)",
        metrics.total,
        len(metrics.lines),
        metrics.total_sans_stdlib,
    )
    return metrics
