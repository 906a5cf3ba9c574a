"""Read-only JSON config helpers.

Supplies theme, syntax style, color and pane-width defaults. Nothing is ever
written back. Malformed or missing config falls back to built-in defaults.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "lazystatus"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _load_str(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def load_theme_name() -> str | None:
    return _load_str("theme")


def load_syntax_style() -> str | None:
    return _load_str("style")


def load_no_color() -> bool:
    """Return whether color is disabled by ``NO_COLOR`` or the ``no_color`` key.

    Only an explicit boolean in the config counts.
    """
    if os.environ.get("NO_COLOR"):
        return True
    value = load_config().get("no_color")
    return value if isinstance(value, bool) else False


def load_left_pane_percent() -> float | None:
    """Read the left pane width percentage constrained to the open interval (0, 100)."""
    value = load_config().get("left_pane_percent")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value <= 0 or value >= 100:
        return None
    return float(value)
