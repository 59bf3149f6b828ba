"""Assign packages to module buckets."""

from __future__ import annotations

from modmap.model import NO_MODULE_SUFFIX, STDLIB_MODULE, Package


def is_stdlib_path(pkg_path: str, root_module: str) -> bool:
    """Guess whether *pkg_path* belongs to the Go standard library.

    Third-party import paths start with a domain name, so a first path
    element without a dot is taken to be standard library.  This is an
    approximation: a dotless first element outside the standard library
    (a GOPATH-style or replaced module) is misclassified unless it lies
    under *root_module*.
    """
    first = pkg_path.split("/", 1)[0]
    return not pkg_path.startswith(root_module) and "." not in first


def classify(pkg: Package, root_module: str) -> str:
    """Return the module bucket for *pkg*."""
    if is_stdlib_path(pkg.path, root_module):
        return STDLIB_MODULE
    if pkg.module is not None:
        return pkg.module
    return pkg.path + NO_MODULE_SUFFIX
