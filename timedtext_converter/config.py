"""Configuration defaults, enum coercion, and .env loading.

WHY: Centralizes every configurable value so it is easy to find, update,
and override. The CLI, HTTP API and library entry points all resolve
granularity, text kind and repair limits through the same functions, so
a value set in .env behaves identically everywhere.

HOW: python-dotenv loads the .env file on import. Defaults are read from
the environment with sensible fallbacks. resolve_normalize_config() copies
a preset from presets.py and layers environment and caller overrides on
top of it.

RULES:
- All defaults can be overridden via TIMEDTEXT_* environment variables
- Presets are never mutated; resolve_normalize_config() returns a deep copy
- Unknown granularity / text-kind names raise ValueError listing the options
"""

from __future__ import annotations

import copy
import os
from typing import Dict, Optional

from dotenv import load_dotenv

from timedtext_converter.core.ir import Granularity, TextKind
from timedtext_converter.presets import NORMALIZE_PRESETS

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_GRANULARITY = os.getenv("TIMEDTEXT_DEFAULT_GRANULARITY", "line")
DEFAULT_TEXT_KIND = os.getenv("TIMEDTEXT_DEFAULT_TEXT_KIND", "original")
TTML_LANGUAGE = os.getenv("TIMEDTEXT_TTML_LANGUAGE", "en")
# Unset means the CLI leaves logging unconfigured unless --verbose is given
LOG_LEVEL = os.getenv("TIMEDTEXT_LOG_LEVEL", "").upper() or None

# Per-granularity environment overrides for the backward-jump tolerance
_TOLERANCE_ENV = {
    "line": "TIMEDTEXT_LINE_TOLERANCE",
    "word": "TIMEDTEXT_WORD_TOLERANCE",
}


def parse_granularity(value: object) -> Granularity:
    """Coerce a name (or Granularity) into a Granularity.

    Raises:
        ValueError: If the name is not a known granularity.
    """
    if isinstance(value, Granularity):
        return value
    try:
        return Granularity(str(value).strip().lower())
    except ValueError:
        raise ValueError(
            "Unknown granularity '{}'. Available: {}".format(
                value, ", ".join(g.value for g in Granularity)
            )
        )


def parse_text_kind(value: object) -> TextKind:
    """Coerce a name (or TextKind) into a TextKind.

    Raises:
        ValueError: If the name is not a known text kind.
    """
    if isinstance(value, TextKind):
        return value
    try:
        return TextKind(str(value).strip().lower())
    except ValueError:
        raise ValueError(
            "Unknown text kind '{}'. Available: {}".format(
                value, ", ".join(k.value for k in TextKind)
            )
        )


def resolve_normalize_config(
    granularity: Granularity,
    overrides: Optional[Dict] = None,
) -> Dict:
    """Return the repair limits for ``granularity``.

    Order of precedence: caller overrides, then environment, then preset.

    Raises:
        ValueError: If a tolerance environment variable is not a number.
    """
    granularity = parse_granularity(granularity)
    cfg = copy.deepcopy(NORMALIZE_PRESETS[granularity.value])

    env_name = _TOLERANCE_ENV[granularity.value]
    env_value = os.getenv(env_name, "").strip()
    if env_value:
        try:
            cfg["tolerance"] = float(env_value)
        except ValueError:
            raise ValueError(
                "{} must be a number of seconds, got '{}'".format(env_name, env_value)
            )

    if overrides:
        cfg.update(overrides)
    return cfg
