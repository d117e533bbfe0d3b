"""Formatting stages layered on top of the Python-Markdown renderer."""

from .anchors import AnchorResolver, BracketScanner
from .extension import WikiExtension
from .highlight import CodeBlockHighlighter, Highlighter, PygmentsHighlighter
from .macros import MacroExpander, MacroRegistry, TemplateMacro
from .models import Heading, RenderResult, RenderState
from .pipeline import WikiFormatter, render_document
from .toc import TocExpander

__all__ = [
    "AnchorResolver",
    "BracketScanner",
    "CodeBlockHighlighter",
    "Heading",
    "Highlighter",
    "MacroExpander",
    "MacroRegistry",
    "PygmentsHighlighter",
    "RenderResult",
    "RenderState",
    "TemplateMacro",
    "TocExpander",
    "WikiExtension",
    "WikiFormatter",
    "render_document",
]
