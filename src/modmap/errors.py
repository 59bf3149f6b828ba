"""Exceptions raised by the modmap pipeline.

Nothing in the pipeline recovers from these; the CLI reports them and exits.
"""

from __future__ import annotations


class ModmapError(RuntimeError):
    """Base class for all modmap failures."""


class ConfigError(ModmapError):
    """Bad configuration, arguments, or package metadata for the root."""


class DataIntegrityError(ModmapError):
    """An external tool returned data that cannot be trusted."""


class ToolError(ModmapError):
    """An external tool could not be run or exited non-zero."""

    def __init__(self, cmd: list[str], returncode: int | None, output: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.output = output
        detail = f": {output.strip()}" if output and output.strip() else ""
        if returncode is None:
            msg = f"could not run {cmd[0]}{detail}"
        else:
            msg = f"{cmd[0]} exited with status {returncode}{detail}"
        super().__init__(msg)
