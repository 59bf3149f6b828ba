"""Data model shared by the traversal, counting, and rendering stages."""

from __future__ import annotations

from dataclasses import dataclass, field

STDLIB_MODULE = "stdlib"
NO_MODULE_SUFFIX = " (no module)"


@dataclass(eq=False)
class Package:
    """A Go package as reported by the metadata provider."""

    path: str
    module: str | None = None
    files: list[str] = field(default_factory=list)
    imports: list[Package] = field(default_factory=list, repr=False)


@dataclass
class ModuleGraph:
    """Modules reachable from the root package, with their files and edges."""

    root_module: str
    files: dict[str, set[str]] = field(default_factory=dict)
    edges: dict[str, set[str]] = field(default_factory=dict)
    package_count: int = 0

    @property
    def modules(self) -> list[str]:
        return sorted(self.files)


@dataclass
class ModuleMetrics:
    """Code-line totals per module and overall."""

    lines: dict[str, int] = field(default_factory=dict)
    total: int = 0
    total_sans_stdlib: int = 0

    @property
    def min_lines(self) -> int | None:
        """Smallest positive module count, or None when nothing was counted."""
        counted = [n for n in self.lines.values() if n > 0]
        return min(counted) if counted else None


@dataclass(frozen=True)
class NodeColor:
    fill: str
    border: str


@dataclass(frozen=True)
class VisualAttributes:
    """How a single module node is drawn."""

    size: float
    font_size: float
    label: str
    color: NodeColor


@dataclass(frozen=True)
class NodeGeometry:
    """Position and extent of a node after layout (points / inches)."""

    x: float
    y: float
    width: float
    height: float
