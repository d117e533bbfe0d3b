"""Unit tests for macro token expansion and the macro registry.

The expander is exercised on plain strings with a recording resolver double
(see ``conftest.py``) so the resolver's call sequence, escaping, error notices,
and single-pass substitution can be asserted directly.

Usage
-----
Run ``pytest tests/test_macros.py -v``.
"""

from __future__ import annotations

import typing as typ

import pytest

from mdextra._constants import MACRO_ERROR_CLASS
from mdextra.formatter.macros import (
    MACRO_PATTERN,
    MacroExpander,
    MacroRegistry,
    TemplateMacro,
    parse_token,
)
from mdextra.formatter.models import RenderState

if typ.TYPE_CHECKING:
    from conftest import RecordingResolver


def test_resolver_receives_lowercase_name_and_trimmed_args(
    resolver: RecordingResolver, state: RenderState
) -> None:
    """Arguments are split on commas and trimmed."""
    result = MacroExpander(resolver, state).expand("<p>{{HeLLo( a ,b )}}</p>")
    assert resolver.calls == [("hello", ["a", "b"])]
    assert result == "<p>Hi a+b</p>"


def test_token_without_arguments(resolver: RecordingResolver, state: RenderState) -> None:
    """A bare name passes an empty argument list."""
    MacroExpander(resolver, state).expand("{{now}} {{now()}}")
    assert resolver.calls == [("now", []), ("now", [])]


def test_escaped_token_is_emitted_literally(
    resolver: RecordingResolver, state: RenderState
) -> None:
    """``!{{...}}`` drops the marker and skips resolution."""
    result = MacroExpander(resolver, state).expand("!{{hello(a,b)}}")
    assert result == "{{hello(a,b)}}"
    assert resolver.calls == []


@pytest.mark.parametrize("empty", [None, ""])
def test_empty_result_keeps_token(state: RenderState, empty: str | None) -> None:
    """A null or empty result leaves the token unchanged."""
    expander = MacroExpander(lambda name, args: empty, state)
    assert expander.expand("a {{missing(x)}} b") == "a {{missing(x)}} b"


def test_failing_macro_renders_notice_and_continues(
    resolver: RecordingResolver, state: RenderState
) -> None:
    """One failing macro does not stop later tokens from expanding."""
    result = MacroExpander(resolver, state).expand("{{broken}} then {{hello(x)}}")
    assert result == (
        f'<div class="{MACRO_ERROR_CLASS}">Error executing the '
        "<strong>broken</strong> macro (boom)</div> then Hi x"
    )
    assert state.warnings == ["macro failed - broken: boom"]
    assert [name for name, _ in resolver.calls] == ["broken", "hello"]


def test_error_message_is_escaped(state: RenderState) -> None:
    """Error messages are escaped before being embedded."""

    def resolver(name: str, args: list[str]) -> str:
        msg = "<bad>"
        raise ValueError(msg)

    result = MacroExpander(resolver, state).expand("{{x}}")
    assert "(&lt;bad&gt;)" in result


def test_results_are_not_rescanned(state: RenderState) -> None:
    """Substituted markup is never expanded again."""
    calls: list[str] = []

    def resolver(name: str, args: list[str]) -> str:
        calls.append(name)
        return "{{inner}}"

    assert MacroExpander(resolver, state).expand("{{outer}}") == "{{inner}}"
    assert calls == ["outer"]


def test_without_resolver_tokens_stay(state: RenderState) -> None:
    """Markup passes through untouched when no resolver is given."""
    assert MacroExpander(None, state).expand("{{x(1)}}") == "{{x(1)}}"


def test_parse_token() -> None:
    """Tokens expose the escape flag, name, and arguments."""
    match = MACRO_PATTERN.search("!{{Toc(a, b)}}")
    assert match is not None
    token = parse_token(match)
    assert token.escaped
    assert token.name == "toc"
    assert token.args == ["a", "b"]
    assert token.source == "{{Toc(a, b)}}"


def test_registry_dispatches_by_name() -> None:
    """Registered macros are looked up case-insensitively."""
    registry = MacroRegistry()

    @registry.register("Upper")
    def upper(args: list[str]) -> str:
        return " ".join(args).upper()

    registry.register("count", lambda args: str(len(args)))
    assert "upper" in registry
    assert registry("UPPER", ["a", "b"]) == "A B"
    assert registry("count", ["a", "b", "c"]) == "3"
    assert registry("unknown", []) is None


def test_template_macros() -> None:
    """Template macros format positional and joined arguments."""
    registry = MacroRegistry.from_templates(
        {"greet": "Hello, {0}!", "list": "<em>{args}</em>"}
    )
    assert registry("greet", ["Ada"]) == "Hello, Ada!"
    assert registry("list", ["a", "b"]) == "<em>a, b</em>"
    assert repr(TemplateMacro("{0}")) == "TemplateMacro('{0}')"


def test_template_with_missing_argument_fails_inline(state: RenderState) -> None:
    """Formatting errors surface as inline notices."""
    registry = MacroRegistry.from_templates({"pair": "{0} & {1}"})
    result = MacroExpander(registry, state).expand("{{pair(a)}}")
    assert MACRO_ERROR_CLASS in result
    assert "<strong>pair</strong>" in result
    assert state.warnings[0].startswith("macro failed - pair:")
