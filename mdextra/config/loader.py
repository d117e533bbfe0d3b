"""Load formatter configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ

from ruamel.yaml import YAML

from .helpers import _macro_templates, _require_str, _string_list
from .models import DEFAULT_EXTENSIONS, FormatterConfig, FormatterConfigError

if typ.TYPE_CHECKING:
    from pathlib import Path


def load_formatter_config(path: Path) -> FormatterConfig:
    """Load the YAML configuration describing formatter settings and macros.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``mdextra.yaml``).

    Returns
    -------
    FormatterConfig
        Parsed configuration; keys missing from the file keep their defaults.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    FormatterConfigError
        If a section or field has the wrong type.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from mdextra.config import load_formatter_config
    >>> config = load_formatter_config(Path("mdextra.yaml"))  # doctest: +SKIP
    >>> config.pygments_style  # doctest: +SKIP
    'monokai'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    return build_formatter_config(raw)


def build_formatter_config(raw: typ.Mapping[str, typ.Any]) -> FormatterConfig:
    """Build a :class:`FormatterConfig` from an already parsed mapping."""
    formatter = raw.get("formatter") or {}
    if not isinstance(formatter, dict):
        msg = "'formatter' must be a mapping."
        raise FormatterConfigError(msg)

    defaults = FormatterConfig()
    if "extensions" in formatter:
        extensions = _string_list(formatter["extensions"], "formatter.extensions")
    else:
        extensions = list(DEFAULT_EXTENSIONS)

    return FormatterConfig(
        pygments_style=_require_str(formatter, "pygments_style", defaults.pygments_style),
        highlight_class=_require_str(
            formatter, "highlight_class", defaults.highlight_class
        ),
        toc_class=_require_str(formatter, "toc_class", defaults.toc_class),
        slug_separator=_require_str(formatter, "slug_separator", defaults.slug_separator),
        extensions=extensions,
        macros=_macro_templates(raw.get("macros")),
    )


__all__ = ["build_formatter_config", "load_formatter_config"]
