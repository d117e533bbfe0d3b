"""Python-Markdown extension feeding the render state and hosting the anchor and TOC stages.

Python-Markdown is the base renderer. This module plugs into it so that:

* reference link definitions and footnote definitions collected by the block
  parser land in :class:`~mdextra.formatter.models.RenderState`;
* bracketed spans are resolved by :class:`~mdextra.formatter.anchors.AnchorResolver`
  instead of Python-Markdown's own link, reference, and footnote patterns;
* heading ids assigned by the ``toc`` extension are collected in document order;
* ``{toc}`` placeholder lines are swapped for stash tokens before block parsing
  and only those tokens are expanded by
  :class:`~mdextra.formatter.toc.TocExpander` on the rendered markup.
"""

from __future__ import annotations

import re
import typing as typ
import xml.etree.ElementTree as etree

from markdown.extensions import Extension
from markdown.extensions.footnotes import FootnoteExtension
from markdown.inlinepatterns import InlineProcessor
from markdown.postprocessors import Postprocessor
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import AtomicString

from mdextra._constants import (
    FOOTNOTE_ID_TEMPLATE,
    FOOTNOTE_REF_ID_TEMPLATE,
    TOC_CLASS,
)

from .anchors import Anchor, AnchorKind, AnchorResolver, BracketScanner
from .models import Heading, RenderState
from .toc import TocExpander, is_placeholder

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any

ANCHOR_PATTERN = r"(?<!!)\["
REPLACED_INLINE_PATTERNS = ("footnote", "reference", "link", "short_reference")
TOC_TOKEN = "\x02mdextra-toc:{index}\x03"
TOC_TOKEN_PATTERN = re.compile(r"(?:<p>)?\x02mdextra-toc:(?P<index>\d+)\x03(?:</p>)?")


class WikiFootnoteExtension(FootnoteExtension):
    """Footnote definitions stored in the render state.

    Definition ids follow the ``footnote:<id>`` scheme used by the anchor
    resolver and the footnote list is ordered by first reference, so the
    ``[n]`` labels and the list numbering agree.
    """

    def __init__(self, state: RenderState, **kwargs: typ.Any) -> None:
        self.state = state
        kwargs.setdefault("USE_DEFINITION_ORDER", False)
        super().__init__(**kwargs)

    def reset(self) -> None:
        """Share the definition table and reference order with the render state."""
        super().reset()
        self.state.footnotes.clear()
        self.state.found_footnote_ids.clear()
        self.footnotes = self.state.footnotes  # type: ignore[assignment]
        self.footnote_order = self.state.found_footnote_ids

    def makeFootnoteId(self, id: str) -> str:  # noqa: A002, N802
        """Return the element id of a footnote definition."""
        return FOOTNOTE_ID_TEMPLATE.format(id=id)

    def makeFootnoteRefId(self, id: str, found: bool = False) -> str:  # noqa: A002, FBT001, FBT002, N802
        """Return the element id the definition's back-link points to."""
        return FOOTNOTE_REF_ID_TEMPLATE.format(id=id)


class ReferenceTableTreeprocessor(Treeprocessor):
    """Copy reference link definitions into the render state."""

    def __init__(self, md: Markdown, state: RenderState) -> None:
        super().__init__(md)
        self.state = state

    def run(self, root: etree.Element) -> None:
        """Fill ``urls`` and ``titles`` before inline patterns run."""
        for link_id, (url, title) in self.md.references.items():
            key = link_id.lower()
            self.state.urls[key] = url
            if title:
                self.state.titles[key] = title


class HeadingTreeprocessor(Treeprocessor):
    """Collect headings, with the ids the ``toc`` extension assigned."""

    def __init__(self, md: Markdown, state: RenderState) -> None:
        super().__init__(md)
        self.state = state

    def run(self, root: etree.Element) -> None:
        """Flatten the nested ``toc_tokens`` into document-ordered headings."""
        tokens = getattr(self.md, "toc_tokens", [])
        self.state.headings[:] = list(_flatten_tokens(tokens))


def _flatten_tokens(
    tokens: cabc.Iterable[cabc.Mapping[str, typ.Any]],
) -> cabc.Iterator[Heading]:
    for token in tokens:
        yield Heading(level=token["level"], id=token["id"], content=token["html"])
        yield from _flatten_tokens(token.get("children", []))


class AnchorInlineProcessor(InlineProcessor):
    """Resolve ``[...]`` spans with the nested bracket scanner."""

    ANCESTOR_EXCLUDES = ("a",)

    def __init__(self, pattern: str, md: Markdown, state: RenderState) -> None:
        super().__init__(pattern, md)
        self.resolver = AnchorResolver(state, unescape=self.unescape)
        self._scanner: BracketScanner | None = None

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[etree.Element | None, int | None, int | None]:
        """Return the anchor element for the span at ``m`` or reject the match."""
        if self._scanner is None or self._scanner.text is not data:
            self._scanner = BracketScanner(data)
        anchor = self.resolver.resolve(self._scanner, m.start(0))
        if anchor is None:
            return None, None, None
        return build_element(anchor), anchor.span.start, anchor.end


def build_element(anchor: Anchor) -> etree.Element:
    """Return the ElementTree markup for a resolved anchor.

    Attribute values are escaped by the Markdown serializer when the tree is
    written out.
    """
    if anchor.kind is AnchorKind.FOOTNOTE:
        sup = etree.Element("sup")
        if anchor.ref_id:
            sup.set("id", anchor.ref_id)
        link = etree.SubElement(sup, "a")
        if anchor.href:
            link.set("href", anchor.href)
        link.set("rel", "footnote")
        link.text = AtomicString(anchor.label or "")
        return sup

    link = etree.Element("a")
    link.set("href", anchor.href or "")
    if anchor.title is not None:
        link.set("title", anchor.title)
    link.text = anchor.span.link_text
    return link


class TocPlaceholderPreprocessor(Preprocessor):
    """Swap placeholder lines for stash tokens before block parsing.

    Fenced code has already been stashed by the time this runs and indented
    lines never match, so only real placeholder lines are recorded.
    """

    def __init__(self, md: Markdown, placeholders: list[str]) -> None:
        super().__init__(md)
        self.placeholders = placeholders

    def run(self, lines: list[str]) -> list[str]:
        """Isolate each placeholder's token in its own block."""
        self.placeholders.clear()
        result: list[str] = []
        for line in lines:
            if is_placeholder(line):
                token = TOC_TOKEN.format(index=len(self.placeholders))
                self.placeholders.append(line)
                result.extend(["", self.md.htmlStash.store(token), ""])
            else:
                result.append(line)
        return result


class TocPostprocessor(Postprocessor):
    """Expand the recorded placeholders once raw HTML has been restored."""

    def __init__(
        self, md: Markdown, state: RenderState, placeholders: list[str], css_class: str
    ) -> None:
        super().__init__(md)
        self.expander = TocExpander(state, css_class=css_class)
        self.placeholders = placeholders

    def run(self, text: str) -> str:
        """Return ``text`` with each placeholder token replaced by its TOC."""
        return TOC_TOKEN_PATTERN.sub(self._substitute, text)

    def _substitute(self, match: re.Match[str]) -> str:
        index = int(match.group("index"))
        if index >= len(self.placeholders):
            return match.group(0)
        return self.expander.expand_placeholder(self.placeholders[index])


class WikiExtension(Extension):
    """Register the render-state processors on a ``markdown.Markdown`` instance.

    Build one extension per render: the extension holds the
    :class:`RenderState` the processors write into.
    """

    def __init__(self, state: RenderState, *, toc_class: str = TOC_CLASS) -> None:
        super().__init__()
        self.state = state
        self.toc_class = toc_class
        self.placeholders: list[str] = []

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the processors and replace the stock link patterns."""
        WikiFootnoteExtension(self.state).extendMarkdown(md)
        for name in REPLACED_INLINE_PATTERNS:
            if name in md.inlinePatterns:
                md.inlinePatterns.deregister(name)

        md.preprocessors.register(
            TocPlaceholderPreprocessor(md, self.placeholders), "mdextra_toc_placeholder", 22
        )
        md.treeprocessors.register(
            ReferenceTableTreeprocessor(md, self.state), "mdextra_references", 45
        )
        md.inlinePatterns.register(
            AnchorInlineProcessor(ANCHOR_PATTERN, md, self.state), "mdextra_anchor", 175
        )
        md.treeprocessors.register(
            HeadingTreeprocessor(md, self.state), "mdextra_headings", 4
        )
        md.postprocessors.register(
            TocPostprocessor(md, self.state, self.placeholders, self.toc_class),
            "mdextra_toc",
            15,
        )


__all__ = [
    "ANCHOR_PATTERN",
    "AnchorInlineProcessor",
    "HeadingTreeprocessor",
    "ReferenceTableTreeprocessor",
    "TOC_TOKEN",
    "TOC_TOKEN_PATTERN",
    "TocPlaceholderPreprocessor",
    "TocPostprocessor",
    "WikiExtension",
    "WikiFootnoteExtension",
    "build_element",
]
