"""Shared fixtures for the mdextra test suite."""

from __future__ import annotations

import pytest

from mdextra.formatter.models import Heading, RenderState


class RecordingHighlighter:
    """Highlighter double that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def highlight(self, code: str, language: str) -> str:
        self.calls.append((code, language))
        return f"HL({language})"


class RecordingResolver:
    """Macro resolver double returning canned results per macro name."""

    def __init__(self, results: dict[str, str | None] | None = None) -> None:
        self.results = results or {}
        self.calls: list[tuple[str, list[str]]] = []

    def __call__(self, name: str, args: list[str]) -> str | None:
        self.calls.append((name, args))
        if name == "broken":
            msg = "boom"
            raise RuntimeError(msg)
        if name in self.results:
            return self.results[name]
        return f"Hi {'+'.join(args)}"


@pytest.fixture
def state() -> RenderState:
    """Return an empty render state."""
    return RenderState()


@pytest.fixture
def heading_state() -> RenderState:
    """Return a render state holding headings h1 through h5."""
    return RenderState(
        headings=[
            Heading(1, "intro", "Intro"),
            Heading(2, "setup", "Setup"),
            Heading(3, "deps", "Deps"),
            Heading(4, "pins", "Pins"),
            Heading(5, "deep", "Deep"),
        ]
    )


@pytest.fixture
def highlighter() -> RecordingHighlighter:
    """Return a highlighter double."""
    return RecordingHighlighter()


@pytest.fixture
def resolver() -> RecordingResolver:
    """Return a macro resolver double."""
    return RecordingResolver()
