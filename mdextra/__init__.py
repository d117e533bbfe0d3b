"""Markdown formatting with footnotes, nested links, TOCs, macros, and highlighting.

This package layers a post-processing pipeline over Python-Markdown and
exposes the ``mdextra`` console script.

Exports
-------
- ``WikiFormatter``: renders one document through the full pipeline.
- ``render_document``: convenience wrapper returning a ``RenderResult``.
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from mdextra import render_document
>>> render_document("Hello *world*").html
'<p>Hello <em>world</em></p>'
"""

from __future__ import annotations

from .cli import app, main
from .formatter import RenderResult, WikiFormatter, render_document

__all__ = ["RenderResult", "WikiFormatter", "app", "main", "render_document"]
