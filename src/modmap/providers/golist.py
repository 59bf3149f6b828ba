"""Load the package graph of a Go project with ``go list -json -deps``."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterator

from modmap.errors import ConfigError
from modmap.model import Package
from modmap.tools import run_tool

logger = logging.getLogger(__name__)

# cgo's pseudo-package never appears as a listed package
_PSEUDO_IMPORTS = {"C"}


class GoListProvider:
    """Package metadata from the go command."""

    def __init__(self, go: str = "go"):
        self.go = go

    def load(self, root_dir: Path) -> Package:
        out = run_tool([self.go, "list", "-json", "-deps", "."], cwd=root_dir)
        return parse_go_list(out)


def parse_go_list(text: str) -> Package:
    """Build linked Package objects from ``go list -json -deps`` output.

    Returns the single non-dependency package; every package it reaches is
    available through ``imports``.
    """
    records = list(_iter_json_objects(text))
    by_path: dict[str, Package] = {}
    roots: list[Package] = []

    for record in records:
        path = record.get("ImportPath")
        if not isinstance(path, str) or not path:
            raise ConfigError(f"go list record without ImportPath: {record!r}")
        error = record.get("Error")
        if error:
            message = error.get("Err") if isinstance(error, dict) else error
            raise ConfigError(f"could not load package {path}: {message}")

        module = record.get("Module")
        directory = record.get("Dir", "")
        names = list(record.get("GoFiles") or []) + list(record.get("CgoFiles") or [])
        pkg = Package(
            path=path,
            module=module.get("Path") if isinstance(module, dict) else None,
            files=[os.path.join(directory, name) for name in names],
        )
        by_path[path] = pkg
        if not record.get("DepOnly", False):
            roots.append(pkg)

    for record in records:
        pkg = by_path[record["ImportPath"]]
        for imp in record.get("Imports") or []:
            if imp in _PSEUDO_IMPORTS:
                continue
            try:
                pkg.imports.append(by_path[imp])
            except KeyError:
                raise ConfigError(
                    f"package {pkg.path} imports {imp}, which go list did not report"
                ) from None

    if len(roots) != 1:
        raise ConfigError(f"expected exactly one package, found {len(roots)}")

    logger.debug("go list reported %d packages", len(by_path))
    return roots[0]


def _iter_json_objects(text: str) -> Iterator[dict[str, Any]]:
    """Yield each object from a stream of concatenated JSON values."""
    decoder = json.JSONDecoder()
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos >= end:
            return
        try:
            obj, pos = decoder.raw_decode(text, pos)
        except json.JSONDecodeError as e:
            raise ConfigError(f"could not parse go list output: {e}") from e
        if not isinstance(obj, dict):
            raise ConfigError("go list output contains a non-object value")
        yield obj
