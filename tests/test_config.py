"""Tests for loading ``mdextra.yaml`` formatter configuration.

The loader reads YAML with ruamel.yaml and returns a
:class:`mdextra.config.FormatterConfig`. These tests write small YAML files
into ``tmp_path`` and check defaults, overrides, and the error contract
(``FileNotFoundError``, ``TypeError``, ``FormatterConfigError``).

Usage
-----
Run ``pytest tests/test_config.py -v``.
"""

from __future__ import annotations

import typing as typ

import pytest

from mdextra.config import (
    DEFAULT_EXTENSIONS,
    FormatterConfig,
    FormatterConfigError,
    load_formatter_config,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "mdextra.yaml"
    path.write_text(content, encoding="utf-8")
    return path


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    """An empty file yields the default configuration."""
    config = load_formatter_config(_write(tmp_path, ""))
    assert config == FormatterConfig()
    assert config.extensions == list(DEFAULT_EXTENSIONS)


def test_overrides_are_applied(tmp_path: Path) -> None:
    """Every formatter key can be overridden."""
    path = _write(
        tmp_path,
        """
formatter:
  pygments_style: default
  highlight_class: hl
  toc_class: contents
  slug_separator: _
  extensions: [tables, abbr]
macros:
  Hello: "Hello, {0}!"
""",
    )
    config = load_formatter_config(path)
    assert config.pygments_style == "default"
    assert config.highlight_class == "hl"
    assert config.toc_class == "contents"
    assert config.slug_separator == "_"
    assert config.extensions == ["tables", "abbr"]
    assert config.macros == {"hello": "Hello, {0}!"}, "Macro names are lowercased"


def test_empty_extension_list_disables_defaults(tmp_path: Path) -> None:
    """An explicit empty list loads no extra extensions."""
    config = load_formatter_config(_write(tmp_path, "formatter:\n  extensions: []\n"))
    assert config.extensions == []


def test_missing_file(tmp_path: Path) -> None:
    """A missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError, match="not found"):
        load_formatter_config(tmp_path / "absent.yaml")


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    """A YAML list at the top level is rejected."""
    with pytest.raises(TypeError, match="mapping"):
        load_formatter_config(_write(tmp_path, "- a\n- b\n"))


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("formatter: [1, 2]\n", "'formatter' must be a mapping"),
        ("formatter:\n  toc_class: ''\n", "toc_class"),
        ("formatter:\n  pygments_style: 3\n", "pygments_style"),
        ("formatter:\n  extensions: {a: 1}\n", "extensions"),
        ("macros: [a]\n", "'macros' must map"),
        ("macros:\n  hello: [a]\n", "hello"),
    ],
)
def test_invalid_values(tmp_path: Path, content: str, message: str) -> None:
    """Wrongly typed values raise FormatterConfigError."""
    with pytest.raises(FormatterConfigError, match=message):
        load_formatter_config(_write(tmp_path, content))
