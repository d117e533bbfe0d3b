"""Tests for the ``mdextra`` Cyclopts command line.

The commands are invoked in-process through :data:`mdextra.cli.app` with
``result_action="return_value"`` so Cyclopts does not exit the interpreter.
Each test runs inside ``tmp_path`` so a stray ``mdextra.yaml`` in the working
directory cannot leak into the run.

Usage
-----
Run ``pytest tests/test_cli.py -v``.
"""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup

from mdextra.cli import app

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an isolated working directory."""
    monkeypatch.chdir(tmp_path)
    for name in ("MDEXTRA_OUTPUT", "MDEXTRA_CONFIG", "MDEXTRA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def _run(tokens: list[str]) -> None:
    app(tokens, result_action="return_value")


def _source(workdir: Path, text: str) -> Path:
    path = workdir / "doc.md"
    path.write_text(text, encoding="utf-8")
    return path


def test_render_to_stdout(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Without ``--output`` the fragment is printed."""
    source = _source(workdir, "# Hi\n\nText[^n].\n\n[^n]: Note.\n")
    _run(["render", str(source)])
    captured = capsys.readouterr()
    soup = BeautifulSoup(captured.out, "html.parser")
    assert soup.h1 is not None
    assert soup.sup is not None
    assert soup.sup.get_text() == "[1]"
    assert captured.err == ""


def test_render_to_file(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """``--output`` writes the file and reports the relative path."""
    source = _source(workdir, "Plain text.\n")
    _run(["render", str(source), "--output", str(workdir / "out" / "doc.html")])
    written = (workdir / "out" / "doc.html").read_text(encoding="utf-8")
    assert written == "<p>Plain text.</p>\n"
    assert capsys.readouterr().out.strip() == "wrote out/doc.html"


def test_warnings_go_to_stderr(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Render warnings are reported without failing by default."""
    source = _source(workdir, "See [x][missing].\n")
    _run(["render", str(source)])
    assert "warning: link-id not found - missing" in capsys.readouterr().err


def test_fail_on_warning_exits(workdir: Path) -> None:
    """``--fail-on-warning`` turns warnings into exit status 1."""
    source = _source(workdir, "{toc bogus}\n")
    with pytest.raises(SystemExit) as excinfo:
        _run(["render", str(source), "--fail-on-warning"])
    assert excinfo.value.code == 1


def test_config_macros_are_available(
    workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Template macros from the default config file are expanded."""
    (workdir / "mdextra.yaml").write_text(
        'macros:\n  greet: "<em>Hello, {0}!</em>"\n', encoding="utf-8"
    )
    source = _source(workdir, "{{greet(Ada)}} and {{other}}\n")
    _run(["render", str(source)])
    out = capsys.readouterr().out
    assert "<em>Hello, Ada!</em>" in out
    assert "{{other}}" in out, "Unknown macros stay as written"


def test_standalone_page(workdir: Path) -> None:
    """``--standalone`` wraps the body in a full page with the stylesheet."""
    source = _source(workdir, "# My *Title*\n\n```python\nx = 1\n```\n")
    output = workdir / "page.html"
    _run(["render", str(source), "--standalone", "--output", str(output)])
    soup = BeautifulSoup(output.read_text(encoding="utf-8"), "html.parser")
    assert soup.title is not None
    assert soup.title.get_text() == "My Title"
    assert soup.style is not None
    assert ".syntaxhl" in soup.style.get_text()
    assert soup.main is not None
    assert soup.main.find("code", class_="syntaxhl") is not None


def test_styles_command(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """The stylesheet honours the configured marker class."""
    config = workdir / "custom.yaml"
    config.write_text("formatter:\n  highlight_class: code-hl\n", encoding="utf-8")
    _run(["styles", "--config", str(config)])
    assert ".code-hl" in capsys.readouterr().out
