"""Serialize a ModuleGraph to DOT and read geometry back from laid-out DOT."""

from __future__ import annotations

import logging
from pathlib import Path

import pydot

from modmap.errors import DataIntegrityError
from modmap.model import ModuleGraph, NodeGeometry, VisualAttributes

logger = logging.getLogger(__name__)

GRAPH_NAME = "modmap"

# pydot lists attribute defaults as pseudo-nodes under these names
_DEFAULT_NODES = {"node", "edge", "graph"}


def build_dot(graph: ModuleGraph, attributes: dict[str, VisualAttributes]) -> pydot.Dot:
    """Return *graph* as a pydot graph, nodes and edges added in sorted order."""
    dot = pydot.Dot(GRAPH_NAME, graph_type="digraph", rankdir="LR")
    dot.set_node_defaults(shape="box", style="rounded,filled")
    for module in graph.modules:
        attrs = attributes[module]
        dot.add_node(
            pydot.Node(
                module,
                width=f"{attrs.size:f}",
                height=f"{attrs.size:f}",
                fixedsize="true",
                fontsize=f"{attrs.font_size:f}",
                # \n is dot's centered line break
                label=attrs.label.replace("\n", "\\n"),
                fillcolor=attrs.color.fill,
                color=attrs.color.border,
                fontname="Inter",
            )
        )
        for dep in sorted(graph.edges.get(module, ())):
            dot.add_edge(pydot.Edge(module, dep))
    return dot


def graph_to_dot(graph: ModuleGraph, attributes: dict[str, VisualAttributes]) -> str:
    """Return the DOT description of *graph*."""
    return build_dot(graph, attributes).to_string()


def write_dot(
    graph: ModuleGraph, attributes: dict[str, VisualAttributes], path: Path
) -> Path:
    """Write the DOT description of *graph* to *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(graph_to_dot(graph, attributes), encoding="utf-8")
    logger.debug("Wrote %s", path)
    return path


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]
    # dot wraps long attribute values with backslash-newline
    return value.replace("\\\n", "")


def _float_attr(node: pydot.Node, name: str, node_name: str) -> float:
    raw = node.get(name)
    if raw is None:
        raise DataIntegrityError(f"laid-out node {node_name} has no {name}")
    try:
        return float(_unquote(str(raw)))
    except ValueError:
        raise DataIntegrityError(
            f"laid-out node {node_name} has a malformed {name}: {raw!r}"
        ) from None


def parse_layout(text: str) -> dict[str, NodeGeometry]:
    """Return the position and size of every node in laid-out DOT *text*.

    Each node must carry a two-component ``pos``.
    """
    graphs = pydot.graph_from_dot_data(text)
    if not graphs:
        raise DataIntegrityError("layout output is not a DOT graph")

    geometry: dict[str, NodeGeometry] = {}
    for node in graphs[0].get_nodes():
        raw_name = node.get_name()
        # a quoted "node" is a real node, not the defaults statement
        if raw_name in _DEFAULT_NODES:
            continue
        name = _unquote(raw_name)

        pos = node.get("pos")
        if pos is None:
            raise DataIntegrityError(f"laid-out node {name} has no pos")
        parts = _unquote(str(pos)).split(",")
        if len(parts) != 2:
            raise DataIntegrityError(
                f"laid-out node {name} has pos with {len(parts)} components: {pos}"
            )
        try:
            x, y = float(parts[0]), float(parts[1])
        except ValueError:
            raise DataIntegrityError(
                f"laid-out node {name} has a malformed pos: {pos}"
            ) from None

        geometry[name] = NodeGeometry(
            x=x,
            y=y,
            width=_float_attr(node, "width", name),
            height=_float_attr(node, "height", name),
        )

    logger.debug("Parsed geometry for %d nodes", len(geometry))
    return geometry
