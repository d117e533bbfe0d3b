r"""Expand ``{toc}`` placeholders into navigation lists.

A placeholder occupies a line of its own and may carry an alignment marker and
a heading range::

    {toc}
    {>toc:h2..h4}
    {<TOC h3-}

The expander replaces every placeholder line with a ``<div class="toc">``
container listing the collected headings that fall inside the requested range.
A placeholder may be indented by up to three spaces; deeper indentation makes
the line part of a code block.

Example
-------
>>> from mdextra.formatter.models import Heading, RenderState
>>> from mdextra.formatter.toc import TocExpander
>>> state = RenderState(headings=[Heading(1, "intro", "Intro")])
>>> print(TocExpander(state).expand("{toc}").strip())
<div class="toc"><ul><li class="heading1"><a href="#intro">Intro</a></li>
</ul></div>
"""

from __future__ import annotations

import logging
import re

from mdextra._constants import (
    ILLEGAL_HEADING_STRUCTURE_WARNING,
    ILLEGAL_TOC_PARAMETER_WARNING,
    TOC_CLASS,
)

from .models import Heading, RenderState, TocAlignment, TocRequest

logger = logging.getLogger(__name__)

TOC_PATTERN = re.compile(
    r"""
    ^[ ]{0,3}               # deeper indentation is a code block
    \{[ ]*
    (?P<align>[<>])?
    toc
    (?:
        (?:[:]|[ ]+)        # colon or spaces introduce the parameter
        (?P<param>.+?)
    )?
    [ ]*\}
    [ ]*$
    """,
    re.IGNORECASE | re.MULTILINE | re.VERBOSE,
)
TOC_RANGE_PATTERN = re.compile(
    r"""
    ^
    (?:h(?P<start>[1-6]))?  # optional start level
    (?:[.]{2,}|[-])         # .. or -
    (?:h?(?P<end>[1-6]))?   # optional end level
    $
    """,
    re.IGNORECASE | re.VERBOSE,
)
FOOTNOTE_REF_MARKUP = re.compile(
    r'<sup\b[^>]*>\s*<a\b[^>]*\brel="footnote"[^>]*>.*?</a>\s*</sup>', re.DOTALL
)
ANCHOR_TAG_PATTERN = re.compile(r"</?a\b[^>]*>")
ID_ATTRIBUTE_PATTERN = re.compile(r'\s+id="[^"]*"')


def is_placeholder(line: str) -> bool:
    """Return whether ``line`` consists of a single TOC placeholder."""
    return TOC_PATTERN.fullmatch(line) is not None


class TocExpander:
    """Replace TOC placeholders with lists built from collected headings."""

    def __init__(self, state: RenderState, *, css_class: str = TOC_CLASS) -> None:
        self.state = state
        self.css_class = css_class

    def expand(self, text: str) -> str:
        """Return ``text`` with every placeholder line expanded."""
        return TOC_PATTERN.sub(self._substitute, text)

    def expand_placeholder(self, line: str) -> str:
        """Return the TOC markup for one placeholder line.

        Lines that are not placeholders are returned unchanged.
        """
        match = TOC_PATTERN.fullmatch(line)
        if match is None:
            return line
        return self._substitute(match)

    def parse_request(self, marker: str | None, param: str | None) -> TocRequest:
        """Build a :class:`TocRequest`, warning about malformed ranges.

        Parameters
        ----------
        marker : str or None
            Alignment marker (``<``, ``>``) captured from the placeholder.
        param : str or None
            Raw range parameter such as ``h2..h4``.

        Returns
        -------
        TocRequest
            The requested range; the full ``1..6`` range when ``param`` is
            absent or illegal.
        """
        alignment = TocAlignment.from_marker(marker)
        if param is None:
            return TocRequest(alignment=alignment)

        match = TOC_RANGE_PATTERN.match(param)
        if match is None or not (match.group("start") or match.group("end")):
            self.state.warn(ILLEGAL_TOC_PARAMETER_WARNING.format(param=param))
            logger.debug("Illegal TOC parameter %r, using the full range", param)
            return TocRequest(alignment=alignment)

        start = int(match.group("start") or 1)
        end = int(match.group("end") or 6)
        return TocRequest(alignment=alignment, start_level=start, end_level=end)

    def render(self, request: TocRequest) -> str:
        """Return the TOC container markup for ``request``."""
        headings = self.state.headings
        if headings and headings[0].level >= request.start_level + 1:
            self.state.warn(
                ILLEGAL_HEADING_STRUCTURE_WARNING.format(
                    start=request.start_level, first=headings[0].level
                )
            )

        classes = [self.css_class]
        if request.alignment is TocAlignment.RIGHT:
            classes.append("right")
        elif request.alignment is TocAlignment.LEFT:
            classes.append("left")

        items = "".join(
            _render_item(heading) for heading in headings if request.includes(heading.level)
        )
        return f'\n\n<div class="{" ".join(classes)}"><ul>{items}</ul></div>\n\n'

    def _substitute(self, match: re.Match[str]) -> str:
        request = self.parse_request(match.group("align"), match.group("param"))
        logger.debug(
            "Expanding TOC placeholder for h%d..h%d", request.start_level, request.end_level
        )
        return self.render(request)


def toc_label(content: str) -> str:
    """Return heading markup safe to place inside a TOC link.

    Footnote references are dropped, other anchors are unwrapped and ``id``
    attributes removed, so the TOC neither nests links nor repeats ids.
    """
    label = FOOTNOTE_REF_MARKUP.sub("", content)
    label = ANCHOR_TAG_PATTERN.sub("", label)
    return ID_ATTRIBUTE_PATTERN.sub("", label).strip()


def _render_item(heading: Heading) -> str:
    return (
        f'<li class="heading{heading.level}">'
        f'<a href="#{heading.id}">{toc_label(heading.content)}</a></li>\n'
    )


__all__ = [
    "TOC_PATTERN",
    "TOC_RANGE_PATTERN",
    "TocExpander",
    "is_placeholder",
    "toc_label",
]
