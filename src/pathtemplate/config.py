"""Defaults for storage locations, format versions and permission modes."""

from __future__ import annotations

import os
from pathlib import Path


# ── Format versions ───────────────────────────────────────────────

# Settings written at this version treated "$" and "~" as literal characters.
LEGACY_FORMAT_VERSION = 70
# First version whose paths are templates.
CURRENT_FORMAT_VERSION = 71

# ── Modes ─────────────────────────────────────────────────────────

PUBLIC_DIR_MODE = 0o777
PRIVATE_DIR_MODE = 0o700
PRIVATE_FILE_MODE = 0o600

# ── Locations ─────────────────────────────────────────────────────

DEFAULT_BASE_DIR = Path.home() / ".pathtemplate"

DEFAULT_LOG_LEVEL = "WARNING"


def base_dir() -> Path:
    override = os.getenv("PATHTEMPLATE_HOME")
    return Path(override) if override else DEFAULT_BASE_DIR


def settings_dir() -> Path:
    return base_dir() / "settings"


def log_level() -> str:
    return os.getenv("PATHTEMPLATE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
