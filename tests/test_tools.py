"""Tests for the scc and Graphviz adapters."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from modmap.errors import DataIntegrityError, ToolError
from modmap.tools import GraphvizEngine, SccLineCounter


class Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[list[str], dict]] = []
        self.stdout = ""
        self.stderr = ""
        self.returncode = 0

    def __call__(self, cmd, **kwargs):  # type: ignore[no-untyped-def]
        self.calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(
            cmd, self.returncode, stdout=self.stdout, stderr=self.stderr
        )


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> Recorder:
    rec = Recorder()
    monkeypatch.setattr("modmap.tools.subprocess.run", rec)
    return rec


def test_scc_counts_by_language(recorder: Recorder) -> None:
    recorder.stdout = json.dumps(
        [
            {"Name": "Go", "Lines": 140, "Code": 120, "Comment": 10, "Blank": 10},
            {"Name": "Assembly", "Lines": 30, "Code": 25, "Comment": 0, "Blank": 5},
        ]
    )

    counts = SccLineCounter("scc").count(["/a/x.go", "/a/y.s"])

    assert counts == {"Go": 120, "Assembly": 25}
    assert recorder.calls[0][0] == ["scc", "--format", "json", "/a/x.go", "/a/y.s"]


def test_scc_output_must_be_json(recorder: Recorder) -> None:
    recorder.stdout = "Language  Files  Lines"

    with pytest.raises(DataIntegrityError, match="not JSON"):
        SccLineCounter().count(["/a/x.go"])


def test_scc_records_must_have_name_and_code(recorder: Recorder) -> None:
    recorder.stdout = json.dumps([{"Name": "Go"}])

    with pytest.raises(DataIntegrityError, match="unexpected scc record"):
        SccLineCounter().count(["/a/x.go"])


def test_scc_failure_is_a_tool_error(recorder: Recorder) -> None:
    recorder.returncode = 2
    recorder.stderr = "unable to read file"

    with pytest.raises(ToolError) as excinfo:
        SccLineCounter().count(["/a/x.go"])

    assert excinfo.value.returncode == 2
    assert "unable to read file" in str(excinfo.value)


def test_missing_executable_is_a_tool_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, **kwargs):  # type: ignore[no-untyped-def]
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr("modmap.tools.subprocess.run", fake_run)

    with pytest.raises(ToolError, match="could not run scc") as excinfo:
        SccLineCounter().count(["/a/x.go"])
    assert excinfo.value.returncode is None


def test_graphviz_layout_returns_stdout(recorder: Recorder, tmp_path: Path) -> None:
    recorder.stdout = "digraph modmap {}\n"
    graph_path = tmp_path / "app.dot"

    text = GraphvizEngine("/usr/bin/dot").layout(graph_path)

    assert text == "digraph modmap {}\n"
    assert recorder.calls[0][0] == ["/usr/bin/dot", str(graph_path)]


def test_graphviz_render_passes_format_and_output(recorder: Recorder, tmp_path: Path) -> None:
    layouted = tmp_path / "app_layouted.dot"
    out = tmp_path / "app.png"

    GraphvizEngine().render(layouted, "png", out)

    cmd, kwargs = recorder.calls[0]
    assert cmd == ["dot", "-Tpng", f"-o{out}", str(layouted)]
    assert kwargs["stderr"] == subprocess.STDOUT


def test_graphviz_render_failure_includes_output(recorder: Recorder, tmp_path: Path) -> None:
    recorder.returncode = 1
    recorder.stdout = "Format: \"bogus\" not recognized."

    with pytest.raises(ToolError, match="not recognized"):
        GraphvizEngine().render(tmp_path / "g.dot", "bogus", tmp_path / "g.bogus")
