"""Load and validate formatter configuration YAML for mdextra.

This subpackage parses an optional ``mdextra.yaml`` file, applies defaults for
missing keys, and produces a :class:`FormatterConfig` that the formatting
pipeline and the CLI consume. The primary entry point is
:func:`load_formatter_config`.

Examples
--------
>>> from pathlib import Path
>>> from mdextra.config import load_formatter_config
>>> config = load_formatter_config(Path("mdextra.yaml"))  # doctest: +SKIP
>>> sorted(config.macros)  # doctest: +SKIP
['hello']
"""

from .loader import build_formatter_config, load_formatter_config
from .models import DEFAULT_EXTENSIONS, FormatterConfig, FormatterConfigError

__all__ = [
    "DEFAULT_EXTENSIONS",
    "FormatterConfig",
    "FormatterConfigError",
    "build_formatter_config",
    "load_formatter_config",
]
