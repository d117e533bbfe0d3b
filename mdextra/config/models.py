"""Typed dataclasses describing mdextra formatter configuration."""

from __future__ import annotations

import dataclasses as dc

from mdextra._constants import HIGHLIGHT_CLASS, TOC_CLASS

DEFAULT_EXTENSIONS = ("tables", "sane_lists")


class FormatterConfigError(ValueError):
    """Raised when the formatter configuration is invalid."""


@dc.dataclass(slots=True)
class FormatterConfig:
    """Settings shared by every render.

    Attributes
    ----------
    pygments_style : str
        Pygments style used for the highlighted-code stylesheet.
    highlight_class : str
        Marker class added to highlighted code blocks.
    toc_class : str
        Class of the generated table-of-contents container.
    slug_separator : str
        Word separator used when heading ids are generated.
    extensions : list[str]
        Additional Python-Markdown extensions loaded by the base renderer.
    macros : dict[str, str]
        Template macros, keyed by lowercase macro name.
    """

    pygments_style: str = "monokai"
    highlight_class: str = HIGHLIGHT_CLASS
    toc_class: str = TOC_CLASS
    slug_separator: str = "-"
    extensions: list[str] = dc.field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    macros: dict[str, str] = dc.field(default_factory=dict)


__all__ = ["DEFAULT_EXTENSIONS", "FormatterConfig", "FormatterConfigError"]
