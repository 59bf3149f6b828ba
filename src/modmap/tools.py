"""Adapters for the external line counter and graph layout engine."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Protocol, Sequence

from modmap.errors import DataIntegrityError, ToolError

logger = logging.getLogger(__name__)


class LineCounter(Protocol):
    """Counts code lines in a batch of files, per language."""

    def count(self, files: Sequence[str]) -> dict[str, int]:
        ...


class LayoutEngine(Protocol):
    """Lays out and renders graph descriptions."""

    def layout(self, graph_path: Path) -> str:
        """Return the graph description of *graph_path* with geometry added."""
        ...

    def render(self, layouted_path: Path, fmt: str, out_path: Path) -> None:
        """Render *layouted_path* as *fmt* into *out_path*."""
        ...


def run_tool(cmd: list[str], *, merge_stderr: bool = False, cwd: Path | None = None) -> str:
    """Run *cmd* and return its standard output; raise ToolError on failure."""
    logger.debug("Running %s (%d args)", cmd[0], len(cmd) - 1)
    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
            text=True,
            cwd=str(cwd) if cwd is not None else None,
        )
    except OSError as e:
        raise ToolError(cmd, None, str(e)) from e

    if result.returncode != 0:
        output = result.stdout if merge_stderr else result.stderr
        raise ToolError(cmd, result.returncode, output or "")
    return result.stdout


class SccLineCounter:
    """Line counts from ``scc --format json``."""

    def __init__(self, scc: str = "scc"):
        self.scc = scc

    def count(self, files: Sequence[str]) -> dict[str, int]:
        out = run_tool([self.scc, "--format", "json", *files])
        try:
            records = json.loads(out)
        except json.JSONDecodeError as e:
            raise DataIntegrityError(f"scc output is not JSON: {e}") from e
        if not isinstance(records, list):
            raise DataIntegrityError("scc output is not a list of languages")

        counts: dict[str, int] = {}
        for record in records:
            if not isinstance(record, dict):
                raise DataIntegrityError(f"unexpected scc record: {record!r}")
            name = record.get("Name")
            code = record.get("Code")
            if not isinstance(name, str) or not isinstance(code, int):
                raise DataIntegrityError(f"unexpected scc record: {record!r}")
            counts[name] = counts.get(name, 0) + code
        return counts


class GraphvizEngine:
    """Layout and rendering with Graphviz ``dot``."""

    def __init__(self, dot: str = "dot"):
        self.dot = dot

    def layout(self, graph_path: Path) -> str:
        return run_tool([self.dot, str(graph_path)])

    def render(self, layouted_path: Path, fmt: str, out_path: Path) -> None:
        run_tool(
            [self.dot, f"-T{fmt}", f"-o{out_path}", str(layouted_path)],
            merge_stderr=True,
        )
