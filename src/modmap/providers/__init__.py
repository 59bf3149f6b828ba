"""Package metadata providers — shared helpers."""

from __future__ import annotations

from pathlib import Path

from modmap.providers.base import PackageProvider
from modmap.providers.golist import GoListProvider

__all__ = ["GoListProvider", "PackageProvider", "is_go_project"]


def is_go_project(project_dir: Path) -> bool:
    """Return True if *project_dir* contains a go.mod."""
    return (project_dir / "go.mod").exists()
