"""Wrap rendered markup in a standalone HTML page."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

if typ.TYPE_CHECKING:
    from .formatter import RenderResult

DEFAULT_TITLE = "Document"


class DocumentBuilder:
    """Render the ``document.jinja`` page around a formatter result."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the Jinja environment and load the page template.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing ``document.jinja``. Defaults to the packaged
            ``mdextra/templates`` directory when ``None``.
        """
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("document.jinja")

    def render(
        self, result: RenderResult, *, stylesheet: str, title: str | None = None
    ) -> str:
        """Return the full page for ``result``.

        The title defaults to the text of the first collected heading.
        """
        page_title = title or _first_heading_text(result) or DEFAULT_TITLE
        html = self.template.render(
            title=page_title,
            stylesheet=Markup(stylesheet),  # noqa: S704 - generated by Pygments
            body=Markup(result.html),  # noqa: S704 - formatter output is markup
        )
        if not html.endswith("\n"):
            html += "\n"
        return html


def _first_heading_text(result: RenderResult) -> str | None:
    if not result.headings:
        return None
    return Markup(result.headings[0].content).striptags() or None


__all__ = ["DEFAULT_TITLE", "DocumentBuilder"]
