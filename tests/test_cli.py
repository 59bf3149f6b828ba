"""Tests for the modmap command line."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from modmap import cli
from modmap.errors import ConfigError
from modmap.model import ModuleMetrics


def test_missing_argument_prints_usage(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 2
    assert "usage: modmap" in capsys.readouterr().err


def test_too_many_arguments_prints_usage() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["a", "b.svg", "c"])

    assert excinfo.value.code == 2


def test_prints_totals(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    seen = {}

    def fake_run(project_dir, *, output=None, config=None):  # type: ignore[no-untyped-def]
        seen.update(project_dir=project_dir, output=output, formats=config.formats)
        return SimpleNamespace(metrics=ModuleMetrics(lines={}, total=1500, total_sans_stdlib=300))

    monkeypatch.setattr(cli, "run", fake_run)

    cli.main([str(tmp_path), str(tmp_path / "out.svg"), "-f", "svg", "-f", "pdf"])

    assert seen == {
        "project_dir": tmp_path,
        "output": tmp_path / "out.svg",
        "formats": ("svg", "pdf"),
    }
    assert capsys.readouterr().out == "LOC total: 1500\nLOC not counting stdlib: 300\n"


def test_errors_exit_with_status_one(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(project_dir, *, output=None, config=None):  # type: ignore[no-untyped-def]
        raise ConfigError("expected exactly one package, found 3")

    monkeypatch.setattr(cli, "run", fake_run)

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path)])

    assert excinfo.value.code == 1
