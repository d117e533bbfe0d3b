"""Shared dataclasses threaded through the formatting pipeline."""

from __future__ import annotations

import dataclasses as dc
import enum


@dc.dataclass(slots=True, frozen=True)
class Heading:
    """A heading collected by the base renderer.

    Attributes
    ----------
    level : int
        Heading level between 1 and 6.
    id : str
        Anchor identifier assigned to the heading element.
    content : str
        Rendered inner markup of the heading.
    """

    level: int
    id: str
    content: str


@dc.dataclass(slots=True)
class RenderState:
    """Mutable context shared by every stage of one render.

    A fresh instance is created per render call and never shared between
    concurrent renders.

    Attributes
    ----------
    headings : list[Heading]
        Headings in document order; filled by the base renderer.
    urls : dict[str, str]
        Reference link targets keyed by lowercase link id.
    titles : dict[str, str]
        Reference link titles keyed by lowercase link id (subset of ``urls``).
    footnotes : dict[str, str]
        Footnote bodies keyed by footnote id.
    found_footnote_ids : list[str]
        Footnote ids in the order they were first referenced. The label of a
        footnote is its 1-based position in this list.
    warnings : list[str]
        Human-readable diagnostics appended by the pipeline stages.
    """

    headings: list[Heading] = dc.field(default_factory=list)
    urls: dict[str, str] = dc.field(default_factory=dict)
    titles: dict[str, str] = dc.field(default_factory=dict)
    footnotes: dict[str, str] = dc.field(default_factory=dict)
    found_footnote_ids: list[str] = dc.field(default_factory=list)
    warnings: list[str] = dc.field(default_factory=list)

    def warn(self, message: str) -> None:
        """Record a soft diagnostic."""
        self.warnings.append(message)

    def footnote_label(self, footnote_id: str) -> int:
        """Return the 1-based label of ``footnote_id``, registering it if new."""
        if footnote_id not in self.found_footnote_ids:
            self.found_footnote_ids.append(footnote_id)
        return self.found_footnote_ids.index(footnote_id) + 1


class TocAlignment(enum.Enum):
    """Placement requested by a TOC placeholder's alignment marker."""

    NONE = ""
    LEFT = "<"
    RIGHT = ">"

    @classmethod
    def from_marker(cls, marker: str | None) -> TocAlignment:
        """Map ``<``/``>`` (or nothing) to an alignment."""
        return cls(marker or "")


@dc.dataclass(slots=True, frozen=True)
class TocRequest:
    """Parsed TOC placeholder parameters."""

    alignment: TocAlignment = TocAlignment.NONE
    start_level: int = 1
    end_level: int = 6

    def includes(self, level: int) -> bool:
        """Return whether headings of ``level`` belong in the TOC."""
        return self.start_level <= level <= self.end_level


@dc.dataclass(slots=True, frozen=True)
class MacroToken:
    """A ``{{name(args)}}`` occurrence found in the markup.

    Attributes
    ----------
    escaped : bool
        ``True`` when the token was written as ``!{{...}}``.
    name : str
        Lowercased macro name.
    raw_args : str
        Text between the parentheses, or an empty string.
    source : str
        The token as written, without the escape marker.
    """

    escaped: bool
    name: str
    raw_args: str
    source: str

    @property
    def args(self) -> list[str]:
        """Split ``raw_args`` on commas, trimming each argument."""
        if not self.raw_args:
            return []
        return [arg.strip() for arg in self.raw_args.split(",")]


@dc.dataclass(slots=True, frozen=True)
class LinkSpan:
    """A balanced bracket span captured by the bracket scanner.

    Attributes
    ----------
    link_text : str
        Text between the opening bracket and its matching closing bracket.
    start : int
        Index of the opening bracket.
    end : int
        Index just past the matching closing bracket.
    link_id : str or None
        Lowercased reference id once a reference-style second part is found.
    """

    link_text: str
    start: int
    end: int
    link_id: str | None = None


@dc.dataclass(slots=True)
class RenderResult:
    """Outcome of a full render.

    ``headings`` lists the headings collected while rendering; it stays empty
    when the fallback document was produced.
    """

    html: str
    warnings: list[str]
    failed: bool = False
    headings: list[Heading] = dc.field(default_factory=list)


__all__ = [
    "Heading",
    "LinkSpan",
    "MacroToken",
    "RenderResult",
    "RenderState",
    "TocAlignment",
    "TocRequest",
]
