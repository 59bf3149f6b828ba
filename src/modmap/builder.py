"""Breadth-first traversal of the package graph into a module graph."""

from __future__ import annotations

import logging
from collections import deque

from modmap.classify import classify
from modmap.model import ModuleGraph, Package

logger = logging.getLogger(__name__)


def build_module_graph(root: Package, root_module: str) -> ModuleGraph:
    """Group every package reachable from *root* into modules.

    The root package gets a node of its own, named after its import path,
    so the entry point stands out from the rest of its module.  Edges
    between packages of the same module are dropped.
    """
    graph = ModuleGraph(root_module=root_module)
    queue: deque[Package] = deque([root])
    seen: set[str] = {root.path}

    while queue:
        pkg = queue.popleft()
        module = pkg.path if pkg is root else classify(pkg, root_module)
        graph.package_count += 1

        graph.files.setdefault(module, set()).update(pkg.files)
        deps = graph.edges.setdefault(module, set())

        for imported in pkg.imports:
            imported_module = classify(imported, root_module)
            if imported_module != module:
                deps.add(imported_module)
            if imported.path not in seen:
                seen.add(imported.path)
                queue.append(imported)

    logger.debug(
        "Traversed %d packages into %d modules (%d edges)",
        graph.package_count,
        len(graph.files),
        sum(len(v) for v in graph.edges.values()),
    )
    return graph
