"""Tests for the go list package provider."""

from __future__ import annotations

import json
import os
import subprocess
from pathlib import Path

import pytest

from modmap.errors import ConfigError, ToolError
from modmap.providers import GoListProvider, is_go_project
from modmap.providers.golist import parse_go_list


def _stream(*records: dict) -> str:
    # go list prints indented objects back to back
    return "\n".join(json.dumps(r, indent="\t") for r in records) + "\n"


_ERRORS = {
    "ImportPath": "errors",
    "Dir": "/go/src/errors",
    "GoFiles": ["errors.go", "wrap.go"],
    "Standard": True,
    "DepOnly": True,
}
_CLI = {
    "ImportPath": "github.com/spf13/cobra",
    "Dir": "/mod/cobra",
    "GoFiles": ["command.go"],
    "Imports": ["errors"],
    "Module": {"Path": "github.com/spf13/cobra", "Version": "v1.8.0"},
    "DepOnly": True,
}
_ROOT = {
    "ImportPath": "example.com/app",
    "Dir": "/app",
    "GoFiles": ["main.go"],
    "CgoFiles": ["native.go"],
    "Imports": ["C", "errors", "github.com/spf13/cobra"],
    "Module": {"Path": "example.com/app", "Main": True},
}


def test_parse_go_list_links_packages() -> None:
    root = parse_go_list(_stream(_ERRORS, _CLI, _ROOT))

    assert root.path == "example.com/app"
    assert root.module == "example.com/app"
    assert root.files == [os.path.join("/app", "main.go"), os.path.join("/app", "native.go")]
    assert [p.path for p in root.imports] == ["errors", "github.com/spf13/cobra"]

    cobra = root.imports[1]
    assert cobra.module == "github.com/spf13/cobra"
    assert cobra.imports == [root.imports[0]]
    assert root.imports[0].module is None
    assert root.imports[0].files == [
        os.path.join("/go/src/errors", "errors.go"),
        os.path.join("/go/src/errors", "wrap.go"),
    ]


def test_parse_go_list_requires_one_root() -> None:
    second = dict(_ROOT, ImportPath="example.com/app/other", Imports=[])

    with pytest.raises(ConfigError, match="exactly one package, found 2"):
        parse_go_list(_stream(_ERRORS, _CLI, _ROOT, second))


def test_parse_go_list_reports_package_errors() -> None:
    broken = dict(_CLI, Error={"Err": "no Go files in /mod/cobra"})

    with pytest.raises(ConfigError, match="no Go files"):
        parse_go_list(_stream(_ERRORS, broken, _ROOT))


def test_parse_go_list_rejects_unknown_imports() -> None:
    with pytest.raises(ConfigError, match="did not report"):
        parse_go_list(_stream(_ERRORS, _ROOT))


def test_parse_go_list_rejects_garbage() -> None:
    with pytest.raises(ConfigError, match="could not parse"):
        parse_go_list('{"ImportPath": "a"} {not json')


def test_provider_runs_go_list_in_root_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls = []

    def fake_run(cmd, **kwargs):  # type: ignore[no-untyped-def]
        calls.append((cmd, kwargs.get("cwd")))
        return subprocess.CompletedProcess(cmd, 0, stdout=_stream(_ERRORS, _CLI, _ROOT), stderr="")

    monkeypatch.setattr("modmap.tools.subprocess.run", fake_run)

    root = GoListProvider(go="/opt/go/bin/go").load(tmp_path)

    assert root.path == "example.com/app"
    assert calls == [(["/opt/go/bin/go", "list", "-json", "-deps", "."], str(tmp_path))]


def test_provider_failure_is_a_tool_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd, **kwargs):  # type: ignore[no-untyped-def]
        return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="go: cannot find main module")

    monkeypatch.setattr("modmap.tools.subprocess.run", fake_run)

    with pytest.raises(ToolError, match="cannot find main module"):
        GoListProvider().load(tmp_path)


def test_is_go_project(tmp_path: Path) -> None:
    assert not is_go_project(tmp_path)
    (tmp_path / "go.mod").write_text("module example.com/app\n", encoding="utf-8")
    assert is_go_project(tmp_path)
