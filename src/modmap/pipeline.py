"""Orchestrator: load → traverse → count → encode → lay out → render."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from modmap.builder import build_module_graph
from modmap.config import Config
from modmap.encode import encode_all
from modmap.linecount import count_lines
from modmap.model import ModuleGraph, ModuleMetrics, NodeGeometry, VisualAttributes
from modmap.providers import GoListProvider, PackageProvider, is_go_project
from modmap.renderer.dot import parse_layout, write_dot
from modmap.tools import GraphvizEngine, LayoutEngine, LineCounter, SccLineCounter

logger = logging.getLogger(__name__)


@dataclass
class OutputPaths:
    """Where each artifact of a run is written."""

    graph: Path
    layouted: Path
    images: dict[str, Path] = field(default_factory=dict)

    @classmethod
    def for_stem(cls, stem: Path, formats: tuple[str, ...]) -> OutputPaths:
        return cls(
            graph=stem.with_name(stem.name + ".dot"),
            layouted=stem.with_name(stem.name + "_layouted.dot"),
            images={fmt: stem.with_name(f"{stem.name}.{fmt}") for fmt in formats},
        )


@dataclass
class RunResult:
    graph: ModuleGraph
    metrics: ModuleMetrics
    attributes: dict[str, VisualAttributes]
    geometry: dict[str, NodeGeometry]
    paths: OutputPaths


def output_paths(
    project_dir: Path, output: Path | None, formats: tuple[str, ...]
) -> OutputPaths:
    """Name the artifacts after *output* if given, else after *project_dir*.

    An explicit *output* is the vector image itself; the other artifacts
    share its directory and stem.
    """
    if output is None:
        return OutputPaths.for_stem(Path.cwd() / project_dir.name, formats)

    stem = output.with_suffix("") if output.suffix else output
    paths = OutputPaths.for_stem(stem, formats)
    vector = output.suffix.lstrip(".") or "svg"
    paths.images[vector] = output
    return paths


def render_all(engine: LayoutEngine, layouted: Path, images: dict[str, Path]) -> None:
    """Render every requested format concurrently; any failure is raised."""
    if not images:
        return
    with ThreadPoolExecutor(max_workers=len(images)) as executor:
        futures = [
            executor.submit(engine.render, layouted, fmt, out_path)
            for fmt, out_path in sorted(images.items())
        ]
    for future in futures:
        future.result()


def run(
    project_dir: Path,
    *,
    output: Path | None = None,
    config: Config | None = None,
    provider: PackageProvider | None = None,
    counter: LineCounter | None = None,
    engine: LayoutEngine | None = None,
) -> RunResult:
    """Run the full modmap pipeline for the Go package at *project_dir*."""
    config = config or Config()
    project_dir = project_dir.resolve()
    provider = provider or GoListProvider(config.tools.go)
    counter = counter or SccLineCounter(config.tools.scc)
    engine = engine or GraphvizEngine(config.tools.dot)

    if not is_go_project(project_dir):
        logger.warning("No go.mod in %s; relying on GOPATH resolution", project_dir)

    root = provider.load(project_dir)
    root_module = root.module or root.path
    logger.debug("Root package: %s, root module: %s", root.path, root_module)

    graph = build_module_graph(root, root_module)

    metrics = count_lines(graph.files, counter, config.count)
    attributes = encode_all(graph.modules, metrics, config.encoder)

    paths = output_paths(project_dir, output, config.formats)
    write_dot(graph, attributes, paths.graph)

    layouted_text = engine.layout(paths.graph)
    paths.layouted.write_text(layouted_text, encoding="utf-8")
    logger.debug("Wrote %s", paths.layouted)
    geometry = parse_layout(layouted_text)

    render_all(engine, paths.layouted, paths.images)
    for path in sorted(paths.images.values()):
        logger.info("Generated %s", path)

    return RunResult(
        graph=graph,
        metrics=metrics,
        attributes=attributes,
        geometry=geometry,
        paths=paths,
    )
