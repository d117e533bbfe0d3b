"""Syntax highlighting for code blocks that are already rendered as markup."""

from __future__ import annotations

import html
import logging
import re
import typing as typ

from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from mdextra._constants import HIGHLIGHT_CLASS

logger = logging.getLogger(__name__)

PRE_CODE_BLOCK_PATTERN = re.compile(
    r'^<pre><code\s+class="(\w+)">(?:[ \t]*\n)*(.+?)</code></pre>',
    re.MULTILINE | re.DOTALL,
)


class Highlighter(typ.Protocol):
    """Highlighting engine invoked once per matched code block."""

    def highlight(self, code: str, language: str) -> str:
        """Return escaped, highlighted markup for ``code``."""
        ...


class PygmentsHighlighter:
    """Highlight code with Pygments, without wrappers or line numbers."""

    def __init__(
        self, pygments_style: str = "monokai", css_class: str = HIGHLIGHT_CLASS
    ) -> None:
        """Initialize the highlighter with a Pygments style.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used by :attr:`stylesheet`. Defaults to
            ``"monokai"``.
        css_class : str, optional
            Marker class the highlighted blocks carry; scopes the stylesheet.
        """
        self.pygments_style = pygments_style
        self.css_class = css_class
        self._formatter = HtmlFormatter(style=pygments_style, nowrap=True)

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(f".{self.css_class}")

    def highlight(self, code: str, language: str) -> str:
        """Render ``code`` with the lexer registered for ``language``.

        Unknown languages fall back to the plain ``text`` lexer, which only
        escapes the code.
        """
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound:
            logger.debug("No lexer for %r, highlighting as plain text", language)
            lexer = get_lexer_by_name("text")
        return highlight(code, lexer, self._formatter)


class CodeBlockHighlighter:
    """Replace ``<pre><code class="LANG">`` blocks with highlighted markup."""

    def __init__(
        self, highlighter: Highlighter, *, css_class: str = HIGHLIGHT_CLASS
    ) -> None:
        self.highlighter = highlighter
        self.css_class = css_class

    def highlight(self, markup: str) -> str:
        """Return ``markup`` with every language-tagged code block highlighted."""
        return PRE_CODE_BLOCK_PATTERN.sub(self._substitute, markup)

    def _substitute(self, match: re.Match[str]) -> str:
        language = match.group(1).lower()
        code = html.unescape(match.group(2))
        logger.debug("Highlighting a %s code block", language)
        highlighted = self.highlighter.highlight(code, language)
        return f'<pre><code class="{language} {self.css_class}">{highlighted}</code></pre>'


__all__ = [
    "PRE_CODE_BLOCK_PATTERN",
    "CodeBlockHighlighter",
    "Highlighter",
    "PygmentsHighlighter",
]
