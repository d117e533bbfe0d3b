r"""Resolve bracketed spans into footnote references and links.

The resolver works on the inline text handed to it by the base renderer. For
every opening bracket it captures the balanced span with a nested bracket
counter and classifies the span, in priority order, as:

1. a footnote reference (``[^id]``),
2. a reference-style link (``[text][id]`` or ``[text][]``),
3. an inline link (``[text](url "title")``),
4. plain bracketed text, which is left untouched.

Unknown footnote and link ids are recorded as warnings on the shared
:class:`~mdextra.formatter.models.RenderState`.

Example
-------
>>> from mdextra.formatter.anchors import AnchorResolver, BracketScanner
>>> from mdextra.formatter.models import RenderState
>>> scanner = BracketScanner("[a [b] c](http://example.com)")
>>> anchor = AnchorResolver(RenderState()).resolve(scanner, 0)
>>> anchor.href, anchor.span.link_text
('http://example.com', 'a [b] c')
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import logging
import re

from mdextra._constants import (
    FOOTNOTE_HREF_TEMPLATE,
    FOOTNOTE_REF_ID_TEMPLATE,
    LINK_ID_NOT_FOUND_WARNING,
    MISSING_FOOTNOTE_LABEL,
    UNDEFINED_FOOTNOTE_WARNING,
)

from .models import LinkSpan, RenderState

logger = logging.getLogger(__name__)

BRACKET_PATTERN = re.compile(r"[\[\]]")
FOOTNOTE_PATTERN = re.compile(r"^\^(.+)", re.DOTALL)
REF_LINK_ID_PATTERN = re.compile(
    r"""
    [ ]?            # optional leading space
    (?:\n[ ]*)?     # optional newline and indentation
    \[
        (.*?)       # link id, may be empty
    \]
    """,
    re.VERBOSE,
)
INLINE_LINK_PATTERN = re.compile(
    r"""
    \(
        [ ]*
        <?(.+?)>?           # url
        [ ]*
        (?:
            (["'])          # opening quote
            (.*?)           # title
            \2              # matching quote
            [ ]*
        )?
    \)
    """,
    re.VERBOSE,
)


class BracketScanner:
    """Match nested square brackets in one forward pass over ``text``.

    The scanner keeps a depth counter while walking from an opening bracket to
    the next bracket characters. Closing positions of nested brackets seen on
    the way are remembered, so later lookups for those brackets cost nothing.
    Once a scan runs out of input the scanner halts: no bracket at or after
    that position is matched again.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self._closers: dict[int, int] = {}
        self._halted_at: int | None = None

    @property
    def halted(self) -> bool:
        """Return whether an unterminated bracket stopped the scan."""
        return self._halted_at is not None

    def span_at(self, start: int) -> LinkSpan | None:
        """Return the balanced span opened at ``start``.

        Parameters
        ----------
        start : int
            Index of an opening bracket in :attr:`text`.

        Returns
        -------
        LinkSpan or None
            The span between the bracket and its matching closing bracket, or
            ``None`` when the bracket is never closed or the scanner already
            halted before ``start``.
        """
        if self._halted_at is not None and start >= self._halted_at:
            return None
        end = self._closers.get(start)
        if end is None:
            end = self._scan(start)
        if end is None:
            return None
        return LinkSpan(link_text=self.text[start + 1 : end - 1], start=start, end=end)

    def _scan(self, start: int) -> int | None:
        logger.debug("Found a bracket-open at %d", start)
        opened = [start]
        for match in BRACKET_PATTERN.finditer(self.text, start + 1):
            position = match.start()
            if match.group() == "[":
                opened.append(position)
            else:
                self._closers[opened.pop()] = position + 1
            depth = len(opened)
            logger.debug("  Bracket at %d, depth is now %d", position, depth)
            if depth == 0:
                return position + 1

        logger.debug("  Missing closing bracket, treating the rest as text")
        self._halted_at = start
        return None


class AnchorKind(enum.Enum):
    """Kinds of markup the resolver can produce."""

    FOOTNOTE = "footnote"
    LINK = "link"


@dc.dataclass(slots=True, frozen=True)
class Anchor:
    """A resolved span ready to be emitted as markup.

    Attributes
    ----------
    kind : AnchorKind
        Whether the span is a footnote reference or a link.
    span : LinkSpan
        The bracket span that was classified.
    end : int
        Index just past the consumed source text, second part included.
    href : str or None
        Link target; ``None`` for references to undefined footnotes.
    title : str or None
        Optional ``title`` attribute value.
    label : str or None
        Visible footnote label such as ``[1]`` or ``[?]``.
    ref_id : str or None
        ``id`` attribute for the footnote reference element, set only on the
        first reference to a defined footnote.
    """

    kind: AnchorKind
    span: LinkSpan
    end: int
    href: str | None = None
    title: str | None = None
    label: str | None = None
    ref_id: str | None = None


def _identity(text: str) -> str:
    return text


class AnchorResolver:
    """Classify bracket spans against the render state's link tables."""

    def __init__(
        self,
        state: RenderState,
        *,
        unescape: cabc.Callable[[str], str] = _identity,
    ) -> None:
        """Bind the resolver to ``state``.

        Parameters
        ----------
        state : RenderState
            Render state providing the link, title, and footnote tables and
            collecting warnings and referenced footnote ids.
        unescape : Callable[[str], str], optional
            Function restoring escaped characters in inline URLs and titles;
            the base renderer supplies its own.
        """
        self.state = state
        self.unescape = unescape

    def resolve(self, scanner: BracketScanner, start: int) -> Anchor | None:
        """Resolve the span opened at ``start``.

        Returns
        -------
        Anchor or None
            The anchor to emit, or ``None`` when the source text must be kept
            as it is (unterminated bracket, plain bracketed text, or an
            unknown link id).
        """
        span = scanner.span_at(start)
        if span is None:
            return None
        logger.debug("Found leading link %r", span.link_text)

        footnote = FOOTNOTE_PATTERN.match(span.link_text)
        if footnote:
            return self._footnote(span, footnote.group(1))

        reference = REF_LINK_ID_PATTERN.match(scanner.text, span.end)
        if reference:
            return self._reference(span, reference)

        inline = INLINE_LINK_PATTERN.match(scanner.text, span.end)
        if inline:
            return self._inline(span, inline)

        logger.debug("No link part after %r, keeping literal text", span.link_text)
        return None

    def _footnote(self, span: LinkSpan, footnote_id: str) -> Anchor:
        if footnote_id not in self.state.footnotes:
            self.state.warn(UNDEFINED_FOOTNOTE_WARNING.format(id=footnote_id))
            return Anchor(
                AnchorKind.FOOTNOTE, span, span.end, label=MISSING_FOOTNOTE_LABEL
            )

        first = footnote_id not in self.state.found_footnote_ids
        number = self.state.footnote_label(footnote_id)
        return Anchor(
            AnchorKind.FOOTNOTE,
            span,
            span.end,
            href=FOOTNOTE_HREF_TEMPLATE.format(id=footnote_id),
            label=f"[{number}]",
            ref_id=FOOTNOTE_REF_ID_TEMPLATE.format(id=footnote_id) if first else None,
        )

    def _reference(self, span: LinkSpan, match: re.Match[str]) -> Anchor | None:
        link_id = (match.group(1) or span.link_text).lower()
        logger.debug("  Found a link id: %r", link_id)
        if link_id not in self.state.urls:
            self.state.warn(LINK_ID_NOT_FOUND_WARNING.format(id=link_id))
            return None

        return Anchor(
            AnchorKind.LINK,
            dc.replace(span, link_id=link_id),
            match.end(),
            href=self.state.urls[link_id],
            title=self.state.titles.get(link_id),
        )

    def _inline(self, span: LinkSpan, match: re.Match[str]) -> Anchor:
        url = self.unescape(match.group(1))
        logger.debug("  Found an inline link to %r", url)
        if url == "#":
            url = f"#{self.unescape(span.link_text)}"

        title = match.group(3)
        if title is not None:
            title = self.unescape(title).replace('"', "&quot;")
        return Anchor(AnchorKind.LINK, span, match.end(), href=url, title=title)


__all__ = [
    "BRACKET_PATTERN",
    "FOOTNOTE_PATTERN",
    "INLINE_LINK_PATTERN",
    "REF_LINK_ID_PATTERN",
    "Anchor",
    "AnchorKind",
    "AnchorResolver",
    "BracketScanner",
]
