"""Top-level orchestration of the formatting pipeline.

The pipeline runs in a fixed order over one document:

1. Python-Markdown renders the text; during rendering the anchor resolver
   turns bracketed spans into links and footnote references and TOC
   placeholders are expanded from the collected headings.
2. Macro tokens are expanded through the caller's resolver.
3. Language-tagged code blocks are highlighted.

Any uncaught error aborts the render and produces a fallback document that
shows the error message followed by the original text.

Example
-------
>>> from mdextra.formatter import WikiFormatter
>>> WikiFormatter("Hello *world*").to_html()
'<p>Hello <em>world</em></p>'
"""

from __future__ import annotations

import html
import logging

from markdown import Markdown

from mdextra._constants import FALLBACK_TEMPLATE
from mdextra.config import FormatterConfig

from .extension import WikiExtension
from .highlight import CodeBlockHighlighter, Highlighter, PygmentsHighlighter
from .macros import MacroExpander, MacroResolver
from .models import RenderResult, RenderState

logger = logging.getLogger(__name__)


def build_markdown(state: RenderState, config: FormatterConfig) -> Markdown:
    """Return a fresh Markdown instance wired to ``state``."""
    return Markdown(
        extensions=[
            "fenced_code",
            "toc",
            *config.extensions,
            WikiExtension(state, toc_class=config.toc_class),
        ],
        extension_configs={
            "fenced_code": {"lang_prefix": ""},
            "toc": {"marker": "", "separator": config.slug_separator},
        },
    )


def fallback_document(text: str, error: BaseException) -> str:
    """Return the markup shown when rendering fails."""
    return FALLBACK_TEMPLATE.format(
        message=html.escape(str(error), quote=False),
        text=html.escape(text, quote=False),
    )


class WikiFormatter:
    """Render one document through the full pipeline."""

    def __init__(
        self,
        text: str,
        *,
        config: FormatterConfig | None = None,
        highlighter: Highlighter | None = None,
    ) -> None:
        """Prepare a formatter for ``text``.

        Parameters
        ----------
        text : str
            Raw Markdown source of the document.
        config : FormatterConfig, optional
            Formatter settings; defaults to :class:`FormatterConfig` defaults.
        highlighter : Highlighter, optional
            Engine used for code blocks; defaults to a
            :class:`PygmentsHighlighter` using the configured style.
        """
        self.text = text
        self.config = config or FormatterConfig()
        self.highlighter = highlighter

    def render(self, macro_resolver: MacroResolver | None = None) -> RenderResult:
        """Run every stage and collect the warnings.

        Parameters
        ----------
        macro_resolver : MacroResolver, optional
            Callable invoked as ``resolver(name, args)`` for each unescaped
            macro token. Without one, macro tokens are left unchanged.

        Returns
        -------
        RenderResult
            Rendered markup and warnings. ``failed`` is set when the fallback
            document was produced.
        """
        state = RenderState()
        try:
            markup = build_markdown(state, self.config).convert(self.text)
            markup = MacroExpander(macro_resolver, state).expand(markup)
            highlighter = self.highlighter or PygmentsHighlighter(
                self.config.pygments_style, self.config.highlight_class
            )
            markup = CodeBlockHighlighter(
                highlighter, css_class=self.config.highlight_class
            ).highlight(markup)
        except Exception as exc:  # noqa: BLE001 - every failure yields the fallback document
            logger.exception("Rendering failed, returning the fallback document")
            return RenderResult(
                html=fallback_document(self.text, exc),
                warnings=list(state.warnings),
                failed=True,
            )

        for warning in state.warnings:
            logger.debug("Render warning: %s", warning)
        return RenderResult(
            html=markup, warnings=list(state.warnings), headings=list(state.headings)
        )

    def to_html(self, macro_resolver: MacroResolver | None = None) -> str:
        """Return only the rendered markup of :meth:`render`."""
        return self.render(macro_resolver).html


def render_document(
    text: str,
    macro_resolver: MacroResolver | None = None,
    *,
    config: FormatterConfig | None = None,
    highlighter: Highlighter | None = None,
) -> RenderResult:
    """Render ``text`` and return the markup with its warnings."""
    formatter = WikiFormatter(text, config=config, highlighter=highlighter)
    return formatter.render(macro_resolver)


__all__ = ["WikiFormatter", "build_markdown", "fallback_document", "render_document"]
