"""
Migration of paths saved before template expansion existed.

Older settings stored ``$`` and ``~`` as ordinary path characters. Escaping
them once on load makes :func:`pathtemplate.expand.expand` reproduce the
original literal path. Migrating a value twice double-escapes it, so callers
must only migrate values read from an old format version.
"""

from __future__ import annotations

import logging

from .expand import SPECIAL_CHARS
from .handles import PathHandle


logger = logging.getLogger(__name__)


def escape_template(text: str) -> str:
    """Return ``text`` with a backslash inserted before every ``$`` and ``~``."""
    if not any(c in text for c in SPECIAL_CHARS):
        return text
    return "".join("\\" + c if c in SPECIAL_CHARS else c for c in text)


def migrate(handle: PathHandle) -> PathHandle:
    """Escape a legacy path in place and return the same handle."""
    escaped = escape_template(handle.path)
    if escaped is not handle.path:
        logger.debug("Escaped legacy path %r as %r", handle.path, escaped)
        handle.path = escaped
    return handle
