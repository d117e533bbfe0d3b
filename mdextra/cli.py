"""Cyclopts CLI entrypoint for rendering Markdown documents with mdextra.

The ``mdextra`` console script defined here renders a Markdown file through
the full formatting pipeline (anchors, TOC placeholders, macros, and code
highlighting) and writes the resulting HTML, either as a fragment or wrapped
in a standalone page. It can also emit the Pygments stylesheet that matches
the highlighted code blocks.

Examples
--------
Render a document to standard output:

>>> from mdextra.cli import app
>>> app(["render", "README.md"])  # doctest: +SKIP

Write a standalone page and fail the run on any warning:

>>> app(
...     ["render", "notes.md", "--output", "notes.html", "--standalone",
...      "--fail-on-warning"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import FormatterConfig, load_formatter_config
from .document import DocumentBuilder
from .formatter import MacroRegistry, PygmentsHighlighter, WikiFormatter

DEFAULT_CONFIG = Path("mdextra.yaml")

app = App(name="mdextra", config=cyclopts.config.Env("MDEXTRA_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _load_config(path: Path | None) -> FormatterConfig:
    """Load ``path`` when given, else the default file if present."""
    if path is not None:
        return load_formatter_config(path)
    if DEFAULT_CONFIG.exists():
        return load_formatter_config(DEFAULT_CONFIG)
    return FormatterConfig()


def _write(text: str, output: Path | None) -> None:
    if output is None:
        sys.stdout.write(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    print(f"wrote {_format_path(output)}")


@app.command(help="Render a Markdown document to HTML.")
def render(
    source: typ.Annotated[Path, Parameter(help="Markdown file to render")],
    *,
    output: typ.Annotated[
        Path | None,
        Parameter(help="Write HTML to this file", env_var="MDEXTRA_OUTPUT"),
    ] = None,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to formatter config", env_var="MDEXTRA_CONFIG"),
    ] = None,
    standalone: typ.Annotated[
        bool,
        Parameter(help="Wrap the fragment in a full HTML page"),
    ] = False,
    fail_on_warning: typ.Annotated[
        bool,
        Parameter(help="Exit with status 1 when the render produced warnings"),
    ] = False,
    log_level: typ.Annotated[
        str,
        Parameter(help="Logging level for diagnostics", env_var="MDEXTRA_LOG_LEVEL"),
    ] = "WARNING",
) -> None:
    """Render ``source`` through the formatting pipeline.

    Parameters
    ----------
    source : Path
        Markdown file to render (read as UTF-8).
    output : Path or None, optional
        Destination file; the HTML goes to standard output when ``None``.
    config : Path or None, optional
        Formatter configuration; ``mdextra.yaml`` in the working directory is
        used when present and no path is given.
    standalone : bool, optional
        Render a complete HTML page embedding the highlight stylesheet.
    fail_on_warning : bool, optional
        Exit with status 1 after writing output when warnings were recorded or
        the fallback document was produced.
    log_level : str, optional
        Name of the root logging level.

    Raises
    ------
    SystemExit
        When ``fail_on_warning`` is set and the render was not clean.
    """
    logging.basicConfig(level=log_level.upper())
    formatter_config = _load_config(config)
    text = source.read_text(encoding="utf-8")

    registry = MacroRegistry.from_templates(formatter_config.macros)
    result = WikiFormatter(text, config=formatter_config).render(registry)

    if standalone:
        highlighter = PygmentsHighlighter(
            formatter_config.pygments_style, formatter_config.highlight_class
        )
        document = DocumentBuilder().render(result, stylesheet=highlighter.stylesheet)
    else:
        document = result.html if result.html.endswith("\n") else f"{result.html}\n"
    _write(document, output)

    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    if result.failed:
        print(f"error: could not render {_format_path(source)}", file=sys.stderr)
    if fail_on_warning and (result.warnings or result.failed):
        raise SystemExit(1)


@app.command(help="Write the Pygments stylesheet for highlighted code blocks.")
def styles(
    *,
    output: typ.Annotated[
        Path | None,
        Parameter(help="Write CSS to this file", env_var="MDEXTRA_OUTPUT"),
    ] = None,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to formatter config", env_var="MDEXTRA_CONFIG"),
    ] = None,
) -> None:
    """Emit the stylesheet matching the configured Pygments style."""
    formatter_config = _load_config(config)
    highlighter = PygmentsHighlighter(
        formatter_config.pygments_style, formatter_config.highlight_class
    )
    _write(f"{highlighter.stylesheet}\n", output)


def main() -> None:
    """Invoke the Cyclopts application that powers the `mdextra` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
