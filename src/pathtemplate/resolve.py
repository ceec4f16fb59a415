"""
Turning stored path templates into usable paths.

A stored value is migrated if it predates templates, expanded against the
environment, and then has its parent directory provisioned before anything
is written there.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from .config import CURRENT_FORMAT_VERSION
from .expand import expand
from .handles import PathHandle
from .legacy import migrate
from .storage import ensure_parent_exists, verify_exclusive_ownership


logger = logging.getLogger(__name__)


def resolve_template(
    handle: PathHandle,
    *,
    format_version: int = CURRENT_FORMAT_VERSION,
    environ: Optional[Mapping[str, str]] = None,
) -> PathHandle:
    """Return a new handle holding the expanded form of ``handle``.

    The input handle is left untouched, even when it needs migrating.
    """
    template = handle.copy()
    if format_version < CURRENT_FORMAT_VERSION:
        migrate(template)
    return PathHandle(expand(template.path, environ))


def prepare_output_path(
    handle: PathHandle,
    *,
    private: bool = False,
    format_version: int = CURRENT_FORMAT_VERSION,
    environ: Optional[Mapping[str, str]] = None,
) -> PathHandle:
    """Resolve ``handle`` and make sure its directory is ready to be written to.

    With ``private`` the containing directory must also be owned by us and
    closed to group and other; InsecureDirectoryError propagates otherwise.
    A bare file name has the current directory as its container, so the
    current directory itself must then pass that check.
    """
    if handle.is_null():
        return handle

    resolved = resolve_template(handle, format_version=format_version, environ=environ)

    if private:
        # Only the ancestors are created world-traversable; the directory
        # itself is created (or checked) owner-only.
        parent = os.path.dirname(resolved.path) or "."
        ensure_parent_exists(parent)
        verify_exclusive_ownership(parent)
    else:
        status = ensure_parent_exists(resolved)
        logger.debug("Parent of %s: %s", resolved.path, status.value)
    return resolved


def sanitise_char(c: str) -> str:
    """Make one character safe to use inside a single path component."""
    if c == "/":
        return "."
    return c


def sanitise_name(text: str) -> str:
    return "".join(sanitise_char(c) for c in text)
