"""Utility helpers shared by the mdextra configuration loader."""

from __future__ import annotations

import typing as typ

from .models import FormatterConfigError


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_str(payload: typ.Mapping[str, typ.Any], key: str, default: str) -> str:
    """Return ``payload[key]`` as a non-empty string, or ``default`` when absent."""
    if key not in payload or payload[key] is None:
        return default
    value = payload[key]
    if not isinstance(value, str) or not value.strip():
        msg = f"'formatter.{key}' must be a non-empty string."
        raise FormatterConfigError(msg)
    return value.strip()


def _string_list(value: object, key: str) -> list[str]:
    """Normalize a list of names, rejecting anything but a list of strings."""
    match value:
        case None:
            return []
        case str():
            return [segment for segment in value.split() if segment]
        case list():
            names: list[str] = []
            for item in value:
                text = _optional_str(item)
                if text:
                    names.append(text)
            return names
        case _:
            msg = f"'{key}' must be a list of names."
            raise FormatterConfigError(msg)


def _macro_templates(value: object) -> dict[str, str]:
    """Return macro templates keyed by lowercase name."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = "'macros' must map macro names to templates."
        raise FormatterConfigError(msg)
    templates: dict[str, str] = {}
    for name, template in value.items():
        if not isinstance(template, str):
            msg = f"Macro '{name}' must be a template string."
            raise FormatterConfigError(msg)
        templates[str(name).lower()] = template
    return templates


__all__ = ["_macro_templates", "_optional_str", "_require_str", "_string_list"]
