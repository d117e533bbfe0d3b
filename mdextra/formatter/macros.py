r"""Expand ``{{name(args)}}`` macro tokens through a caller-supplied resolver.

A token is a macro name made of word characters, optionally followed by a
parenthesized, comma-separated argument list. Prefixing a token with ``!``
escapes it: the token is emitted without the ``!`` and the resolver is not
called. Substituted results are never scanned again for further tokens.

Example
-------
>>> from mdextra.formatter.macros import MacroExpander, MacroRegistry
>>> from mdextra.formatter.models import RenderState
>>> registry = MacroRegistry()
>>> @registry.register("shout")
... def shout(args):
...     return " ".join(args).upper()
>>> MacroExpander(registry, RenderState()).expand("{{shout(hi, there)}} !{{shout(x)}}")
'HI THERE {{shout(x)}}'
"""

from __future__ import annotations

import collections.abc as cabc
import html
import logging
import re
import typing as typ

from mdextra._constants import MACRO_ERROR_CLASS, MACRO_FAILED_WARNING

from .models import MacroToken, RenderState

logger = logging.getLogger(__name__)

MACRO_PATTERN = re.compile(
    r"""
    (?P<escape>!)?          # escaping
    (?P<token>
        \{\{                # opening tag
        (?P<name>\w+)       # macro name
        (?:\((?P<args>[^}]*)\))?  # optional arguments
        \}\}                # closing tag
    )
    """,
    re.VERBOSE,
)

MacroResolver = cabc.Callable[[str, list[str]], str | None]
Macro = cabc.Callable[[list[str]], str | None]


def parse_token(match: re.Match[str]) -> MacroToken:
    """Build a :class:`MacroToken` from a :data:`MACRO_PATTERN` match."""
    return MacroToken(
        escaped=match.group("escape") is not None,
        name=match.group("name").lower(),
        raw_args=match.group("args") or "",
        source=match.group("token"),
    )


class MacroExpander:
    """Substitute macro tokens in rendered markup."""

    def __init__(self, resolver: MacroResolver | None, state: RenderState) -> None:
        self.resolver = resolver
        self.state = state

    def expand(self, markup: str) -> str:
        """Return ``markup`` with every macro token resolved in one pass."""
        return MACRO_PATTERN.sub(self._substitute, markup)

    def _substitute(self, match: re.Match[str]) -> str:
        token = parse_token(match)
        if token.escaped or self.resolver is None:
            return token.source

        try:
            result = self.resolver(token.name, token.args)
        except Exception as exc:  # noqa: BLE001 - any macro failure is rendered inline
            logger.debug("Macro %r failed: %s", token.name, exc)
            self.state.warn(MACRO_FAILED_WARNING.format(name=token.name, error=exc))
            return _error_notice(token.name, exc)
        return result or token.source


def _error_notice(name: str, error: Exception) -> str:
    return (
        f'<div class="{MACRO_ERROR_CLASS}">Error executing the '
        f"<strong>{html.escape(name)}</strong> macro "
        f"({html.escape(str(error))})</div>"
    )


class TemplateMacro:
    """Macro rendering a ``str.format`` template with its arguments.

    Positional fields receive the arguments in order; ``{args}`` receives them
    joined with ``", "``.
    """

    def __init__(self, template: str) -> None:
        self.template = template

    def __call__(self, args: list[str]) -> str:
        return self.template.format(*args, args=", ".join(args))

    def __repr__(self) -> str:
        return f"TemplateMacro({self.template!r})"


class MacroRegistry:
    """Resolve macro names to registered callables.

    The registry is itself a macro resolver: calling it with a name and an
    argument list dispatches to the macro registered under that name, and
    returns ``None`` for unknown names so the token is left unchanged.
    """

    def __init__(self, macros: cabc.Mapping[str, Macro] | None = None) -> None:
        self._macros: dict[str, Macro] = {}
        for name, macro in (macros or {}).items():
            self.add(name, macro)

    @classmethod
    def from_templates(cls, templates: cabc.Mapping[str, str]) -> MacroRegistry:
        """Build a registry of :class:`TemplateMacro` entries."""
        return cls({name: TemplateMacro(template) for name, template in templates.items()})

    def add(self, name: str, macro: Macro) -> None:
        """Register ``macro`` under ``name`` (case-insensitive)."""
        self._macros[name.lower()] = macro

    @typ.overload
    def register(self, name: str) -> cabc.Callable[[Macro], Macro]: ...

    @typ.overload
    def register(self, name: str, macro: Macro) -> Macro: ...

    def register(
        self, name: str, macro: Macro | None = None
    ) -> Macro | cabc.Callable[[Macro], Macro]:
        """Register a macro directly or as a decorator."""
        if macro is not None:
            self.add(name, macro)
            return macro

        def _decorator(func: Macro) -> Macro:
            self.add(name, func)
            return func

        return _decorator

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._macros

    def __call__(self, name: str, args: list[str]) -> str | None:
        macro = self._macros.get(name.lower())
        if macro is None:
            return None
        return macro(args)


__all__ = [
    "MACRO_PATTERN",
    "Macro",
    "MacroExpander",
    "MacroRegistry",
    "MacroResolver",
    "TemplateMacro",
    "parse_token",
]
