"""Provider protocol — all package metadata sources conform to this interface."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from modmap.model import Package


class PackageProvider(Protocol):
    """Protocol for package metadata providers."""

    def load(self, root_dir: Path) -> Package:
        """Return the single package at *root_dir* with its imports resolved."""
        ...
